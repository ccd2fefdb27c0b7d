from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Dict, Mapping, Sequence, Tuple

from cpm_trainer.cpm.engine import Schedule, compute_schedule
from cpm_trainer.cpm.grading import (
    ALL_FIELDS,
    BACKWARD_FIELDS,
    FORWARD_FIELDS,
    GradeResult,
    check_entries,
    empty_entries,
    entries_filled,
)
from cpm_trainer.cpm.propagation import drag_task
from cpm_trainer.models import Task

logger = logging.getLogger(__name__)

STAGE_ESEF = "esef"
STAGE_LSLF = "lslf"
STAGE_INTERACTIVE = "interactive"

STAGE_LABELS = {
    STAGE_ESEF: "Enter ES/EF",
    STAGE_LSLF: "Enter LS/LF",
    STAGE_INTERACTIVE: "Interactive dragging",
}

_STAGE_FIELDS = {
    STAGE_ESEF: FORWARD_FIELDS,
    STAGE_LSLF: BACKWARD_FIELDS,
}
_NEXT_STAGE = {
    STAGE_ESEF: STAGE_LSLF,
    STAGE_LSLF: STAGE_INTERACTIVE,
}


@dataclass(frozen=True)
class PracticeState:
    """
    Everything the learner has done on one project: the stage reached,
    the raw values typed per field and the drag overrides.
    """
    project_id: str
    stage: str = STAGE_ESEF
    entries: Dict[str, Dict[str, str]] = field(default_factory=empty_entries)
    min_start: Dict[str, float] = field(default_factory=dict)

    def schedule(self, tasks: Sequence[Task]) -> Schedule:
        return compute_schedule(tasks, self.min_start)


def reset_state(project_id: str) -> PracticeState:
    return PracticeState(project_id=project_id)


def with_entry(state: PracticeState, field_name: str, task_id: str, raw: str) -> PracticeState:
    if field_name not in ALL_FIELDS:
        raise KeyError(f"Unknown field {field_name!r}")
    entries = {f: dict(values) for f, values in state.entries.items()}
    entries.setdefault(field_name, {})[task_id] = raw
    return replace(state, entries=entries)


def with_entries(state: PracticeState, entries: Mapping[str, Mapping[str, str]]) -> PracticeState:
    merged = {f: dict(values) for f, values in state.entries.items()}
    for f, values in entries.items():
        if f not in ALL_FIELDS:
            raise KeyError(f"Unknown field {f!r}")
        merged.setdefault(f, {}).update(values)
    return replace(state, entries=merged)


def check_stage(state: PracticeState, tasks: Sequence[Task]) -> Tuple[PracticeState, GradeResult]:
    """
    Grade the fields of the current stage and move on when they are all right.
    The interactive stage has nothing to grade.
    """
    fields = _STAGE_FIELDS.get(state.stage)
    if fields is None:
        return state, GradeResult(ok=True)

    result = check_entries(tasks, state.schedule(tasks), state.entries, fields)
    if not result.ok:
        logger.info(
            "Project %s: %d task(s) wrong at stage %s",
            state.project_id, len(result.details), state.stage,
        )
        return state, result

    logger.info("Project %s: stage %s passed", state.project_id, state.stage)
    return replace(state, stage=_NEXT_STAGE[state.stage]), result


def apply_drag(
    state: PracticeState,
    tasks: Sequence[Task],
    task_id: str,
    tentative_start: float,
) -> Tuple[PracticeState, Schedule]:
    """Only meaningful in the interactive stage; other stages are returned unchanged."""
    if state.stage != STAGE_INTERACTIVE:
        return state, state.schedule(tasks)
    min_start, schedule = drag_task(tasks, task_id, tentative_start, state.min_start)
    return replace(state, min_start=min_start), schedule


def entries_complete(state: PracticeState, tasks: Sequence[Task]) -> bool:
    return bool(tasks) and entries_filled(tasks, state.entries, ALL_FIELDS)


def clear_overrides(state: PracticeState) -> PracticeState:
    return replace(state, min_start={})
