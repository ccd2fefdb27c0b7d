from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Mapping, Optional, Sequence

from cpm_trainer.cpm.graph_order import order, unordered
from cpm_trainer.models import Task, successors_map, tasks_by_id

CRITICAL_TOLERANCE = 1e-9


@dataclass(frozen=True)
class Schedule:
    """
    Result of one CPM run. Every mapping is keyed by task id and only holds
    the tasks that made it into the topological order.
    """
    es: Dict[str, float] = field(default_factory=dict)
    ef: Dict[str, float] = field(default_factory=dict)
    ls: Dict[str, float] = field(default_factory=dict)
    lf: Dict[str, float] = field(default_factory=dict)
    slack: Dict[str, float] = field(default_factory=dict)
    critical: FrozenSet[str] = frozenset()
    project_duration: float = 0
    order: List[str] = field(default_factory=list)
    unscheduled: List[str] = field(default_factory=list)

    def is_critical(self, task_id: str) -> bool:
        return task_id in self.critical

    def values(self, field_name: str) -> Dict[str, float]:
        """Lookup by the learner-facing field name: ES, EF, LS, LF or SLACK."""
        return getattr(self, field_name.lower())


def task_duration(task: Task) -> float:
    # Negative durations are treated as zero-length milestones
    return max(task.duration, 0)


# ---------------------------------------------------------
# CPM ALGORITHM
# ---------------------------------------------------------

def compute_schedule(
    tasks: Sequence[Task],
    min_start: Optional[Mapping[str, float]] = None,
) -> Schedule:
    """
    Compute ES/EF/LS/LF/slack and the critical set for a finish-to-start network.

    min_start pins tasks no earlier than the given start; it is only read.

    Returns:
      Schedule covering every task that could be ordered. Tasks left out by
      the orderer (cycles, missing predecessors) are listed in `unscheduled`.
    """
    min_start = min_start or {}
    topo = order(tasks)
    by_id = tasks_by_id(tasks)

    # Forward pass
    es: Dict[str, float] = {}
    ef: Dict[str, float] = {}
    for n in topo:
        t = by_id[n]
        pred_ef = [ef[p] for p in t.deps if p in ef]
        start = max([0, *pred_ef, min_start.get(n, 0)])
        es[n] = start
        ef[n] = start + task_duration(t)

    project_duration = max(ef.values(), default=0)

    # Backward pass
    succs = successors_map(by_id[n] for n in topo)
    ls: Dict[str, float] = {}
    lf: Dict[str, float] = {}
    for n in reversed(topo):
        s = succs.get(n, [])
        lf[n] = project_duration if not s else min(ls[v] for v in s)
        ls[n] = lf[n] - task_duration(by_id[n])

    slack = {n: ls[n] - es[n] for n in topo}
    critical = frozenset(n for n in topo if abs(slack[n]) < CRITICAL_TOLERANCE)

    return Schedule(
        es=es,
        ef=ef,
        ls=ls,
        lf=lf,
        slack=slack,
        critical=critical,
        project_duration=project_duration,
        order=list(topo),
        unscheduled=unordered(tasks, topo),
    )
