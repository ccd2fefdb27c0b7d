from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple


@dataclass(frozen=True)
class Task:
    """
    One activity of a task network.

    deps holds the ids of the predecessor tasks (finish-to-start only).
    """
    id: str
    name: str
    duration: int
    deps: Tuple[str, ...] = ()

    def __post_init__(self):
        # Accept one id or any iterable of ids, keep declaration order, drop repeats
        deps = (self.deps,) if isinstance(self.deps, str) else self.deps
        object.__setattr__(self, "deps", tuple(dict.fromkeys(str(d) for d in deps)))


@dataclass
class Project:
    id: str
    name: str
    tasks: List[Task] = field(default_factory=list)

    def task(self, task_id: str) -> Task:
        for t in self.tasks:
            if t.id == task_id:
                return t
        raise KeyError(f"Unknown task id {task_id!r} in project {self.id!r}")

    @property
    def task_ids(self) -> List[str]:
        return [t.id for t in self.tasks]


def tasks_by_id(tasks: Iterable[Task]) -> Dict[str, Task]:
    return {t.id: t for t in tasks}


def successors_map(tasks: Iterable[Task]) -> Dict[str, List[str]]:
    """Inverse of deps: predecessor id -> successor ids, in task-list order."""
    succs: Dict[str, List[str]] = {}
    for t in tasks:
        for d in t.deps:
            succs.setdefault(d, []).append(t.id)
    return succs
