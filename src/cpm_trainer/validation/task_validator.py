import pandas as pd
from typing import Sequence

from cpm_trainer.cpm.graph_order import order, unordered
from cpm_trainer.models import Task

ISSUE_COLUMNS = ["TaskID", "Name", "Severity", "IssueType", "Description", "SuggestedFix"]


# ------------------------------------------------------------------
# Helper: make a consistent issue dictionary
# ------------------------------------------------------------------
def make_issue(task_id, name, severity, issue_type, description, suggestion):
    return {
        "TaskID": task_id,
        "Name": name,
        "Severity": severity,
        "IssueType": issue_type,
        "Description": description,
        "SuggestedFix": suggestion,
    }


# ------------------------------------------------------------------
# MAIN VALIDATION ENGINE
# ------------------------------------------------------------------
def validate_tasks(tasks: Sequence[Task]) -> pd.DataFrame:
    """
    Structural checks on a task network before it is scheduled.

    Severity "critical" marks problems that change what the engine can
    schedule; "warning" marks data the engine tolerates but a learner
    should fix.
    """
    issues = []

    # ------------------------------------------------------------------
    # 1. Task ids and names
    # ------------------------------------------------------------------
    for t in tasks:
        if not str(t.id).strip():
            issues.append(make_issue(
                t.id, t.name, "critical", "TaskIDBlank",
                "Task has a blank id.",
                "Give every task a short unique id such as A, B, C."
            ))
        if not str(t.name).strip():
            issues.append(make_issue(
                t.id, t.name, "warning", "NameBlank",
                "Task has no name.",
                "Add a descriptive name."
            ))

    ids = pd.Series([t.id for t in tasks], dtype=object)
    dups = sorted(set(ids[ids.duplicated()]))
    if dups:
        issues.append(make_issue(
            ", ".join(dups), "",
            "critical", "DuplicateTaskID",
            f"Duplicate task ids detected: {dups}",
            "Renumber the tasks so every id is unique."
        ))

    # ------------------------------------------------------------------
    # 2. Durations
    # ------------------------------------------------------------------
    for t in tasks:
        if t.duration < 1:
            issues.append(make_issue(
                t.id, t.name,
                "critical" if t.duration < 0 else "warning",
                "NonPositiveDuration",
                f"Duration is {t.duration}.",
                "Duration must be at least 1."
            ))

    # ------------------------------------------------------------------
    # 3. Predecessors
    # ------------------------------------------------------------------
    all_ids = set(ids)
    for t in tasks:
        for d in t.deps:
            if d == t.id:
                issues.append(make_issue(
                    t.id, t.name,
                    "critical", "SelfDependency",
                    "Task depends on itself.",
                    "Remove the task from its own predecessor list."
                ))
            elif d not in all_ids:
                issues.append(make_issue(
                    t.id, t.name,
                    "critical", "MissingPredecessorTask",
                    f"Task depends on missing task {d}.",
                    "Fix dependency: remove or correct the missing id."
                ))

    # ------------------------------------------------------------------
    # 4. Cycles (anything the orderer had to leave out)
    # ------------------------------------------------------------------
    flagged = {i["TaskID"] for i in issues if i["IssueType"] in ("MissingPredecessorTask", "SelfDependency")}
    names = {t.id: t.name for t in tasks}
    for tid in unordered(tasks, order(tasks)):
        if tid in flagged:
            continue
        issues.append(make_issue(
            tid, names.get(tid, ""),
            "critical", "NotSchedulable",
            "Task is part of a dependency loop or waits on a task that can never start.",
            "Break the loop (A -> B -> A) by removing one of its dependencies."
        ))

    return pd.DataFrame(issues, columns=ISSUE_COLUMNS)
