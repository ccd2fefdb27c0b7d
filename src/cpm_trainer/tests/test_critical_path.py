import logging

import pytest
import pandas as pd
import numpy as np
from cpm_trainer import (
    Task,
    compute_schedule,
    critical_chains,
    critical_sequence,
    drag_task,
    order,
    parse_predecessor_cell,
    precedence_floor,
    propagate_drag,
    schedule_frame,
    tasks_from_frame,
    tasks_to_frame,
)


def house_tasks():
    return [
        Task("A", "Prep walls", 4),
        Task("B", "Mask & cover", 3, ["A"]),
        Task("C", "Buy paint", 3, ["A"]),
        Task("D", "Roll first coat", 5, ["B", "C"]),
        Task("E", "Second coat", 3, ["D"]),
    ]


def diamond_tasks():
    return [
        Task("A", "Start", 1),
        Task("B", "Left", 3, ["A"]),
        Task("C", "Right", 3, ["A"]),
        Task("D", "Join", 1, ["B", "C"]),
    ]


def converging_tasks():
    """A (5) and B (10) both feed C (2); A carries 5 units of slack."""
    return [
        Task("A", "Short", 5),
        Task("B", "Long", 10),
        Task("C", "Merge", 2, ["A", "B"]),
    ]


# ----------------------------------------------------------------
# 1. PARSING TESTS
# ----------------------------------------------------------------
def test_parse_predecessor_cell():
    assert parse_predecessor_cell("A") == ["A"]
    assert parse_predecessor_cell("A, B") == ["A", "B"]
    assert parse_predecessor_cell("A;C") == ["A", "C"]
    assert parse_predecessor_cell(" A , , B ") == ["A", "B"]

    # Blank cells mean no predecessors
    assert parse_predecessor_cell("") == []
    assert parse_predecessor_cell(None) == []
    assert parse_predecessor_cell(np.nan) == []


def test_task_deps_accept_a_single_id():
    assert Task("B", "b", 3, "AC").deps == ("AC",)
    assert Task("B", "b", 3, ["A", "C", "A"]).deps == ("A", "C")


def test_tasks_from_frame():
    df = pd.DataFrame(
        [
            {"TaskID": "A", "Name": " Prep walls ", "Duration": "4", "Predecessors": ""},
            {"TaskID": "B", "Name": "Mask & cover", "Duration": "3", "Predecessors": "A"},
            {"TaskID": "D", "Name": "Roll", "Duration": "5.0", "Predecessors": "A; B"},
        ]
    )
    tasks = tasks_from_frame(df)

    assert [t.id for t in tasks] == ["A", "B", "D"]
    assert tasks[0].name == "Prep walls"
    assert tasks[2].duration == 5
    assert tasks[2].deps == ("A", "B")


def test_tasks_from_frame_without_predecessor_column():
    df = pd.DataFrame({"TaskID": [1, 2], "Name": ["x", "y"], "Duration": [2, 3]})
    tasks = tasks_from_frame(df)

    assert [t.id for t in tasks] == ["1", "2"]
    assert all(t.deps == () for t in tasks)


def test_tasks_from_frame_missing_column():
    df = pd.DataFrame({"TaskID": ["A"], "Name": ["x"]})
    with pytest.raises(ValueError, match="Missing required column: 'Duration'"):
        tasks_from_frame(df)


def test_tasks_from_frame_non_numeric_duration():
    df = pd.DataFrame({"TaskID": ["A", "B"], "Name": ["x", "y"], "Duration": ["3", "soon"]})
    with pytest.raises(ValueError, match="Non-numeric Duration"):
        tasks_from_frame(df)


def test_tasks_to_frame_reads_back():
    tasks = house_tasks()
    df = tasks_to_frame(tasks)

    assert list(df.columns) == ["TaskID", "Name", "Duration", "Predecessors"]
    assert df.loc[3, "Predecessors"] == "B, C"
    assert tasks_from_frame(df) == tasks


# ----------------------------------------------------------------
# 2. ORDERING TESTS
# ----------------------------------------------------------------
def test_order_keeps_input_order_on_ties():
    tasks = [
        Task("X", "x", 1),
        Task("Y", "y", 1),
        Task("Z", "z", 1, ["X"]),
    ]
    assert order(tasks) == ["X", "Y", "Z"]


def test_order_places_predecessors_first():
    tasks = [Task("B", "b", 2, ["A"]), Task("A", "a", 1)]
    assert order(tasks) == ["A", "B"]


def test_order_cycle_is_partial_and_logged(caplog):
    tasks = [Task("A", "a", 2, ["B"]), Task("B", "b", 2, ["A"]), Task("C", "c", 1)]

    with caplog.at_level(logging.WARNING, logger="cpm_trainer"):
        topo = order(tasks)

    assert topo == ["C"]
    assert "A, B" in caplog.text


# ----------------------------------------------------------------
# 3. CORE CPM LOGIC TESTS
# ----------------------------------------------------------------
def test_house_painting_schedule():
    s = compute_schedule(house_tasks())

    assert s.es == {"A": 0, "B": 4, "C": 4, "D": 7, "E": 12}
    assert s.ef == {"A": 4, "B": 7, "C": 7, "D": 12, "E": 15}
    assert s.project_duration == 15
    # B and C are equal-length parallel paths into D, so both are critical
    assert s.critical == {"A", "B", "C", "D", "E"}
    assert critical_sequence(s) == ["A", "B", "C", "D", "E"]


def test_diamond_schedule():
    s = compute_schedule(diamond_tasks())

    assert s.project_duration == 5
    assert s.critical == {"A", "B", "C", "D"}
    assert s.ls["D"] == 4 and s.lf["D"] == 5


def test_single_task():
    s = compute_schedule([Task("A", "Only", 3)])

    assert (s.es["A"], s.ef["A"], s.ls["A"], s.lf["A"]) == (0, 3, 0, 3)
    assert s.slack["A"] == 0
    assert s.critical == {"A"}
    assert s.project_duration == 3


def test_empty_task_list():
    s = compute_schedule([])

    assert s.project_duration == 0
    assert s.es == {} and s.critical == frozenset()


def test_multiple_paths_convergence():
    """
    A (5) -> C (2)
    B (10) -> C (2)
    C should start at max(5, 10) = 10
    """
    s = compute_schedule(converging_tasks())

    assert s.es["C"] == 10
    assert s.slack["A"] == 5   # A can finish as late as 10
    assert s.slack["B"] == 0   # B is critical
    assert s.critical == {"B", "C"}


def test_schedule_invariants_hold_for_samples():
    from cpm_trainer.projects import SAMPLE_PROJECTS

    for project in SAMPLE_PROJECTS:
        tasks = project.tasks
        s = compute_schedule(tasks)
        for t in tasks:
            assert s.ef[t.id] == s.es[t.id] + t.duration
            assert s.lf[t.id] == s.ls[t.id] + t.duration
            assert s.slack[t.id] >= 0
            assert s.ef[t.id] <= s.project_duration
            for p in t.deps:
                assert s.es[t.id] >= s.ef[p]
                assert s.lf[p] <= s.ls[t.id]


def test_min_start_pins_a_task_later():
    s = compute_schedule(house_tasks(), {"C": 6})

    assert s.es["C"] == 6
    assert s.es["D"] == 9
    assert s.project_duration == 17


def test_compute_is_idempotent_and_pure():
    tasks = house_tasks()
    min_start = {"B": 5}

    first = compute_schedule(tasks, min_start)
    second = compute_schedule(tasks, min_start)

    assert first == second
    assert min_start == {"B": 5}
    assert tasks == house_tasks()


def test_circular_dependency_is_left_unscheduled(caplog):
    tasks = [Task("A", "a", 5, ["B"]), Task("B", "b", 5, ["A"])]

    with caplog.at_level(logging.WARNING, logger="cpm_trainer"):
        s = compute_schedule(tasks)

    assert s.es == {}
    assert s.unscheduled == ["A", "B"]
    assert s.project_duration == 0
    assert any(r.levelno == logging.WARNING for r in caplog.records)


def test_missing_predecessor_leaves_task_and_dependents_out():
    tasks = [
        Task("A", "a", 2),
        Task("B", "b", 3, ["Q"]),
        Task("C", "c", 1, ["B"]),
    ]
    s = compute_schedule(tasks)

    assert s.order == ["A"]
    assert s.unscheduled == ["B", "C"]
    assert s.project_duration == 2


def test_negative_duration_is_treated_as_milestone():
    tasks = [Task("A", "a", -2), Task("B", "b", 3, ["A"])]
    s = compute_schedule(tasks)

    assert s.ef["A"] == 0
    assert s.es["B"] == 0
    assert s.project_duration == 3


# ----------------------------------------------------------------
# 4. DRAG PROPAGATION TESTS
# ----------------------------------------------------------------
def test_drag_beyond_slack_pushes_successors():
    tasks = house_tasks()
    s = compute_schedule(tasks)

    overrides = propagate_drag(tasks, "B", 6, s)

    assert overrides == {"B": 6, "D": 9, "E": 14}
    assert compute_schedule(tasks, overrides).project_duration == 17


def test_drag_task_recomputes_schedule():
    min_start, s = drag_task(house_tasks(), "B", 6)

    assert min_start == {"B": 6, "D": 9, "E": 14}
    assert s.project_duration == 17
    assert s.slack["A"] == 2 and s.slack["C"] == 2
    assert s.critical == {"B", "D", "E"}


def test_drag_within_slack_changes_nothing_else():
    tasks = converging_tasks()
    min_start, s = drag_task(tasks, "A", 3)

    assert min_start == {"A": 3}
    assert s.project_duration == 12
    assert s.slack["A"] == 2


def test_drag_past_slack_on_converging_paths():
    tasks = converging_tasks()
    min_start, s = drag_task(tasks, "A", 7)

    assert min_start == {"A": 7, "C": 12}
    assert s.project_duration == 14
    assert s.critical == {"A", "C"}


def test_drag_is_clamped_to_predecessor_finish():
    tasks = house_tasks()
    s = compute_schedule(tasks)

    assert precedence_floor(tasks[3], s) == 7
    assert propagate_drag(tasks, "D", 2, s) == {"D": 7}


def test_negative_tentative_start_is_clamped_to_zero():
    tasks = house_tasks()
    overrides = propagate_drag(tasks, "A", -5, compute_schedule(tasks))

    assert overrides == {"A": 0}


def test_propagate_does_not_mutate_inputs():
    tasks = house_tasks()
    current = {"C": 4}
    s = compute_schedule(tasks, current)

    propagate_drag(tasks, "B", 6, s, current)

    assert current == {"C": 4}
    assert s.es["B"] == 4


def test_overrides_never_decrease():
    tasks = house_tasks()
    first, _ = drag_task(tasks, "B", 6)
    second, _ = drag_task(tasks, "C", 5, first)

    for task_id, value in first.items():
        assert second[task_id] >= value
    assert second["C"] == 5


def test_drag_unknown_task():
    tasks = house_tasks()
    with pytest.raises(KeyError):
        propagate_drag(tasks, "Q", 3, compute_schedule(tasks))


def test_drag_propagates_through_a_deep_chain():
    """T0 -> T1 -> ... -> T19999, every task 1 unit long."""
    n = 20000
    tasks = [Task("T0", "t", 1)] + [
        Task(f"T{i}", "t", 1, [f"T{i - 1}"]) for i in range(1, n)
    ]

    min_start, s = drag_task(tasks, "T0", 5)

    assert s.project_duration == n + 5
    assert min_start[f"T{n - 1}"] == n - 1 + 5
    assert len(min_start) == n


def test_drag_updates_each_fan_successor_once(caplog):
    """H feeds S0..S49, which all join again in J."""
    width = 50
    fan = [f"S{i}" for i in range(width)]
    tasks = (
        [Task("H", "head", 2)]
        + [Task(sid, "branch", 3, ["H"]) for sid in fan]
        + [Task("J", "join", 1, fan)]
    )

    with caplog.at_level(logging.DEBUG, logger="cpm_trainer"):
        min_start = propagate_drag(tasks, "H", 5, compute_schedule(tasks))

    assert min_start == {"H": 5, **{sid: 7 for sid in fan}, "J": 10}
    assert f"through {width + 1} successor update(s)" in caplog.text


def random_network(rng, n):
    tasks = []
    for i in range(n):
        k = int(rng.integers(0, min(i, 3) + 1))
        deps = [f"T{j}" for j in rng.choice(i, size=k, replace=False)] if k else []
        tasks.append(Task(f"T{i}", "t", int(rng.integers(1, 7)), deps))
    return tasks


def test_random_networks_keep_invariants_after_drags():
    rng = np.random.default_rng(7)

    for _ in range(100):
        tasks = random_network(rng, int(rng.integers(2, 25)))
        min_start, s = {}, compute_schedule(tasks)

        for _ in range(5):
            t = tasks[int(rng.integers(len(tasks)))]
            start = s.es[t.id] + int(rng.integers(-3, 8))
            min_start, s = drag_task(tasks, t.id, start, min_start)

            for task in tasks:
                assert s.slack[task.id] >= -1e-9
                for p in task.deps:
                    assert s.es[task.id] >= s.ef[p]

            chains = critical_chains(tasks, s)
            assert chains
            assert all(s.ef[chain[-1]] == s.project_duration for chain in chains)


# ----------------------------------------------------------------
# 5. REPORT TESTS
# ----------------------------------------------------------------
def test_schedule_frame():
    tasks = house_tasks() + [Task("X", "Loop", 2, ["X"])]
    df = schedule_frame(tasks, compute_schedule(tasks))

    assert list(df["TaskID"]) == ["A", "B", "C", "D", "E", "X"]
    assert df.loc[3, "ES"] == 7.0 and df.loc[3, "LF"] == 12.0
    assert df.loc[3, "Predecessors"] == "B, C"
    assert df["Critical"].iloc[:5].all()

    # Unscheduled rows keep NaN timings
    assert np.isnan(df.loc[5, "ES"])
    assert not df.loc[5, "Critical"]
    assert not df.loc[5, "Scheduled"]


def test_critical_chains_after_drag():
    tasks = house_tasks()
    _, s = drag_task(tasks, "B", 6)

    assert critical_chains(tasks, s) == [["B", "D", "E"]]


def test_critical_chains_on_parallel_paths():
    tasks = diamond_tasks()
    chains = critical_chains(tasks, compute_schedule(tasks))

    assert chains == [["A", "B", "D"], ["A", "C", "D"]]
