"""
AI evaluation of a computed schedule.

The schedule is sent as a read-only report to the Anthropic Messages API and
the reply text is handed back to the UI. Nothing here feeds into scheduling.
"""
import logging
from typing import Any, Dict, Optional

import requests

from cpm_trainer.config import Settings, settings as default_settings
from cpm_trainer.cpm.engine import Schedule
from cpm_trainer.cpm.report import critical_sequence
from cpm_trainer.models import Project

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an expert project management analyst specializing in Critical Path "
    "Method (CPM) analysis. Provide detailed, actionable insights with clear "
    "explanations. Format your response using markdown with clear headings and "
    "bullet points."
)


class EvaluationError(RuntimeError):
    """Raised when the evaluation service cannot produce a report."""


def build_evaluation_payload(project: Project, schedule: Schedule) -> Dict[str, Any]:
    return {
        "projectName": project.name,
        "tasks": [
            {
                "id": t.id,
                "name": t.name,
                "duration": t.duration,
                "dependencies": list(t.deps),
                "computedValues": {
                    "ES": schedule.es.get(t.id),
                    "EF": schedule.ef.get(t.id),
                    "LS": schedule.ls.get(t.id),
                    "LF": schedule.lf.get(t.id),
                    "slack": schedule.slack.get(t.id),
                },
            }
            for t in project.tasks
        ],
        "criticalPath": critical_sequence(schedule),
        "projectDuration": schedule.project_duration,
    }


def build_prompt(payload: Dict[str, Any]) -> str:
    task_blocks = []
    for t in payload["tasks"]:
        v = t["computedValues"]
        task_blocks.append(
            f'Task {t["id"]}: "{t["name"]}"\n'
            f'   - Duration: {t["duration"]}\n'
            f'   - Dependencies: [{", ".join(t["dependencies"]) or "None"}]\n'
            f'   - ES: {v["ES"]}\n'
            f'   - EF: {v["EF"]}\n'
            f'   - LS: {v["LS"]}\n'
            f'   - LF: {v["LF"]}\n'
            f'   - Slack: {v["slack"]}'
        )

    return (
        "Please analyze this project's Critical Path Method (CPM) calculations:\n\n"
        f"Project: {payload['projectName']}\n\n"
        "Tasks:\n"
        + "\n\n".join(task_blocks)
        + "\n\n"
        f"Critical Path: {' → '.join(payload['criticalPath'])}\n"
        f"Project Duration: {payload['projectDuration']} units\n\n"
        "Please provide:\n"
        "1. Verification of CPM calculations\n"
        "2. Analysis of slack for each task\n"
        "3. Critical path explanation and validation\n"
        "4. Schedule optimization opportunities\n"
        "5. Resource leveling suggestions based on slack times\n"
        "6. Overall schedule risk assessment\n\n"
        "Format your response with markdown headings and bullet points for clarity."
    )


def request_evaluation(prompt: str, settings: Optional[Settings] = None) -> str:
    """
    Send the prompt to the Messages API and return the reply text.

    Raises:
        EvaluationError: missing API key, transport failure, error status
        or a reply without text content
    """
    settings = settings or default_settings
    if not settings.ANTHROPIC_API_KEY:
        raise EvaluationError("ANTHROPIC_API_KEY is not configured.")

    url = f"{settings.ANTHROPIC_BASE_URL.rstrip('/')}/v1/messages"
    logger.info("Requesting schedule evaluation from %s", url)

    try:
        response = requests.post(
            url,
            headers={
                "Content-Type": "application/json",
                "x-api-key": settings.ANTHROPIC_API_KEY,
                "anthropic-version": settings.ANTHROPIC_VERSION,
            },
            json={
                "model": settings.ANTHROPIC_MODEL,
                "max_tokens": settings.EVALUATION_MAX_TOKENS,
                "system": SYSTEM_PROMPT,
                "messages": [{"role": "user", "content": prompt}],
            },
            timeout=settings.EVALUATION_TIMEOUT,
        )
    except requests.RequestException as e:
        logger.error("Evaluation request failed: %s", e)
        raise EvaluationError(f"Evaluation request failed: {e}") from e

    if not response.ok:
        logger.error(
            "Evaluation API error: status=%s body=%s", response.status_code, response.text
        )
        raise EvaluationError(
            f"API responded with status {response.status_code}: {response.text}"
        )

    try:
        data = response.json()
        text = "".join(
            block.get("text", "") for block in data["content"] if block.get("type") == "text"
        )
    except (ValueError, KeyError, TypeError) as e:
        raise EvaluationError("Unexpected response from the evaluation API.") from e

    if not text:
        raise EvaluationError("The evaluation API returned no text.")

    logger.info("Evaluation received (%d characters)", len(text))
    return text


def evaluate_schedule(project: Project, schedule: Schedule, settings: Optional[Settings] = None) -> str:
    return request_evaluation(build_prompt(build_evaluation_payload(project, schedule)), settings)
