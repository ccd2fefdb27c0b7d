from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Sequence

import pandas as pd

from cpm_trainer.cpm.engine import Schedule
from cpm_trainer.models import Task

FORWARD_FIELDS = ("ES", "EF")
BACKWARD_FIELDS = ("LS", "LF")
ALL_FIELDS = FORWARD_FIELDS + BACKWARD_FIELDS


@dataclass(frozen=True)
class GradeResult:
    ok: bool
    details: List[str] = field(default_factory=list)


def parse_entry(raw):
    """Learner input as a number, or None when blank or not numeric."""
    if raw is None:
        return None
    value = pd.to_numeric(str(raw).strip(), errors="coerce")
    if pd.isna(value):
        return None
    return value


def _format_value(value) -> str:
    if value is None:
        return "?"
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


def check_entries(
    tasks: Sequence[Task],
    schedule: Schedule,
    entries: Mapping[str, Mapping[str, object]],
    fields: Sequence[str],
) -> GradeResult:
    """
    Compare the learner's values against the computed schedule.

    entries maps a field name (ES, EF, LS, LF) to {task id: raw text}.
    Each task with at least one wrong field gets one message listing the
    expected values of all graded fields, e.g.
      "B (Mask & cover): expected ES=4, EF=7"
    """
    details = []

    for t in tasks:
        wrong = []
        for f in fields:
            expected = schedule.values(f).get(t.id)
            given = parse_entry(entries.get(f, {}).get(t.id))
            if given is None or expected is None or abs(given - expected) > 1e-9:
                wrong.append(f)

        if wrong:
            expected_text = ", ".join(
                f"{f}={_format_value(schedule.values(f).get(t.id))}" for f in fields
            )
            details.append(f"{t.id} ({t.name}): expected {expected_text}")

    return GradeResult(ok=not details, details=details)


def entries_filled(
    tasks: Sequence[Task],
    entries: Mapping[str, Mapping[str, object]],
    fields: Sequence[str] = ALL_FIELDS,
) -> bool:
    """True when every task has a non-blank value for every field."""
    for t in tasks:
        for f in fields:
            raw = entries.get(f, {}).get(t.id)
            if raw is None or str(raw).strip() == "":
                return False
    return True


def empty_entries() -> Dict[str, Dict[str, str]]:
    return {f: {} for f in ALL_FIELDS}
