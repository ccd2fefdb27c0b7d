import numpy as np
import pandas as pd
from typing import List, Sequence

from cpm_trainer.cpm.engine import Schedule
from cpm_trainer.models import Task, successors_map, tasks_by_id

# ---------------------------------------------------------
# COMPILE RESULTS
# ---------------------------------------------------------

def schedule_frame(tasks: Sequence[Task], schedule: Schedule) -> pd.DataFrame:
    """
    One row per task, in task-list order:
      TaskID, Name, Duration, Predecessors, ES, EF, LS, LF, Slack, Critical

    Tasks the engine could not order keep NaN timings.
    """
    df = pd.DataFrame(
        {
            "TaskID": [t.id for t in tasks],
            "Name": [t.name for t in tasks],
            "Duration": [t.duration for t in tasks],
            "Predecessors": [", ".join(t.deps) for t in tasks],
        }
    )

    for col, values in [
        ("ES", schedule.es),
        ("EF", schedule.ef),
        ("LS", schedule.ls),
        ("LF", schedule.lf),
        ("Slack", schedule.slack),
    ]:
        df[col] = df["TaskID"].map(values).astype(float)

    df["Critical"] = df["TaskID"].isin(schedule.critical)
    df["Scheduled"] = df["ES"].notna()
    return df


def critical_sequence(schedule: Schedule) -> List[str]:
    """Critical task ids in topological order."""
    return [n for n in schedule.order if n in schedule.critical]


def critical_chains(tasks: Sequence[Task], schedule: Schedule) -> List[List[str]]:
    """
    All source-to-sink paths made only of critical edges.

    An edge p -> t is critical when both ends are critical and t starts
    exactly when p finishes.
    """
    by_id = tasks_by_id(tasks)
    succs = successors_map(by_id[n] for n in schedule.order)

    def critical_edge(p, t):
        return (
            p in schedule.critical
            and t in schedule.critical
            and np.isclose(schedule.ef[p], schedule.es[t])
        )

    sources = [
        n for n in critical_sequence(schedule)
        if not any(critical_edge(p, n) for p in by_id[n].deps if p in schedule.es)
    ]

    chains = []
    stack = [[n] for n in reversed(sources)]
    while stack:
        path = stack.pop()
        nxt = [v for v in succs.get(path[-1], []) if critical_edge(path[-1], v)]
        if not nxt:
            chains.append(path)
            continue
        for v in reversed(nxt):
            stack.append(path + [v])

    return chains
