from cpm_trainer.cpm.engine import CRITICAL_TOLERANCE, Schedule, compute_schedule
from cpm_trainer.cpm.graph_order import order, unordered
from cpm_trainer.cpm.propagation import drag_task, precedence_floor, propagate_drag
from cpm_trainer.cpm.report import critical_chains, critical_sequence, schedule_frame
from cpm_trainer.cpm.task_table import parse_predecessor_cell, tasks_from_frame, tasks_to_frame
from cpm_trainer.models import Project, Task

__all__ = [
    "CRITICAL_TOLERANCE",
    "Project",
    "Schedule",
    "Task",
    "compute_schedule",
    "critical_chains",
    "critical_sequence",
    "drag_task",
    "order",
    "parse_predecessor_cell",
    "precedence_floor",
    "propagate_drag",
    "schedule_frame",
    "tasks_from_frame",
    "tasks_to_frame",
    "unordered",
]
