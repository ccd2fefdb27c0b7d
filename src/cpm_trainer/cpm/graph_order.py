import logging
from collections import deque
from typing import Dict, List, Sequence

from cpm_trainer.models import Task

logger = logging.getLogger(__name__)

# ---------------------------------------------------------
# TOPOLOGICAL ORDER (Kahn)
# ---------------------------------------------------------

def order(tasks: Sequence[Task]) -> List[str]:
    """
    Topological order of the task ids.

    In-degree is the number of declared predecessors, so a task that names a
    missing id never becomes ready. Ready tasks are released FIFO in the order
    they appear in `tasks`.

    A cycle or a dangling predecessor does not raise: a warning is logged and
    the partial order is returned without the tasks that could not be placed.
    """
    indeg: Dict[str, int] = {}
    graph: Dict[str, List[str]] = {}

    for t in tasks:
        indeg[t.id] = len(t.deps)
        for d in t.deps:
            graph.setdefault(d, []).append(t.id)

    q = deque(dict.fromkeys(t.id for t in tasks if indeg[t.id] == 0))
    topo = []
    while q:
        n = q.popleft()
        topo.append(n)
        for succ in graph.get(n, []):
            indeg[succ] -= 1
            if indeg[succ] == 0:
                q.append(succ)

    if len(topo) != len(indeg):
        logger.warning(
            "Cycle detected or missing predecessor tasks; leaving out of the schedule: %s",
            ", ".join(unordered(tasks, topo)),
        )

    return topo


def unordered(tasks: Sequence[Task], topo: Sequence[str]) -> List[str]:
    """Task ids missing from `topo`, in task-list order."""
    placed = set(topo)
    return [t.id for t in tasks if t.id not in placed]
