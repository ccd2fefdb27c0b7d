from __future__ import annotations

import logging
from collections import deque
from typing import Dict, Mapping, Optional, Sequence, Tuple

from cpm_trainer.cpm.engine import Schedule, compute_schedule, task_duration
from cpm_trainer.models import Task, successors_map, tasks_by_id

logger = logging.getLogger(__name__)


def precedence_floor(task: Task, schedule: Schedule) -> float:
    """Earliest start allowed by the predecessors' EF in `schedule`."""
    return max([0, *(schedule.ef[p] for p in task.deps if p in schedule.ef)])


def propagate_drag(
    tasks: Sequence[Task],
    task_id: str,
    tentative_start: float,
    schedule: Schedule,
    min_start: Optional[Mapping[str, float]] = None,
) -> Dict[str, float]:
    """
    Pin `task_id` at `tentative_start` and push its successors forward.

    The start is clamped to the predecessors' finish in the pre-drag schedule,
    so a drag never pulls predecessors along. Successors are visited with a
    FIFO worklist; a successor's floor uses, per predecessor, the larger of
    its override and its pre-drag ES plus its duration. A task is re-queued
    only when its override strictly increases.

    Returns:
      A new min_start mapping; the input mapping is left untouched.
    """
    by_id = tasks_by_id(tasks)
    if task_id not in by_id:
        raise KeyError(f"Unknown task id {task_id!r}")

    es = schedule.es
    succs = successors_map(tasks)
    overrides: Dict[str, float] = dict(min_start or {})

    def effective_start(n: str) -> float:
        return max(overrides.get(n, es[n]), es[n])

    overrides[task_id] = max(tentative_start, precedence_floor(by_id[task_id], schedule))

    worklist = deque([task_id])
    visits = 0
    while worklist:
        changed = worklist.popleft()
        for v in succs.get(changed, []):
            if v not in es:
                continue
            preds = [p for p in by_id[v].deps if p in es]
            floor = max(effective_start(p) + task_duration(by_id[p]) for p in preds)
            if floor > effective_start(v):
                overrides[v] = floor
                worklist.append(v)
                visits += 1

    logger.debug(
        "Drag of %s to %s propagated through %d successor update(s)",
        task_id, overrides[task_id], visits,
    )
    return overrides


def drag_task(
    tasks: Sequence[Task],
    task_id: str,
    tentative_start: float,
    min_start: Optional[Mapping[str, float]] = None,
) -> Tuple[Dict[str, float], Schedule]:
    """
    Full drag step: schedule with the current overrides, propagate the drag,
    then recompute the whole schedule over the new overrides.
    """
    current = compute_schedule(tasks, min_start)
    new_min_start = propagate_drag(tasks, task_id, tentative_start, current, min_start)
    return new_min_start, compute_schedule(tasks, new_min_start)
