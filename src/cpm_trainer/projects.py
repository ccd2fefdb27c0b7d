from __future__ import annotations

import string
import time
from dataclasses import replace
from typing import Iterable, List, Optional

from cpm_trainer.models import Project, Task

# ---------------------------------------------------------
# SAMPLE PROJECTS
# ---------------------------------------------------------

SAMPLE_PROJECTS = [
    Project(
        id="p1",
        name="House Painting Mini-Project",
        tasks=[
            Task("A", "Prep walls", 4),
            Task("B", "Mask & cover", 3, ("A",)),
            Task("C", "Buy paint", 3, ("A",)),
            Task("D", "Roll first coat", 5, ("B", "C")),
            Task("E", "Second coat", 3, ("D",)),
        ],
    ),
    Project(
        id="p2",
        name="Website Landing Page",
        tasks=[
            Task("A", "Requirements", 3),
            Task("B", "Wireframes", 3, ("A",)),
            Task("C", "Copywriting", 4, ("A",)),
            Task("D", "Visual Design", 5, ("B",)),
            Task("E", "Frontend Build", 6, ("D", "C")),
            Task("F", "QA & Fixes", 3, ("E",)),
            Task("G", "Launch", 3, ("F",)),
        ],
    ),
    Project(
        id="p3",
        name="Event Planning Weekend",
        tasks=[
            Task("A", "Book venue", 3),
            Task("B", "Catering quotes", 3),
            Task("C", "Speakers", 4, ("A",)),
            Task("D", "Marketing", 5, ("A",)),
            Task("E", "Confirm catering", 3, ("B",)),
            Task("F", "Run of show", 3, ("C", "E")),
            Task("G", "Dry run", 3, ("F", "D")),
        ],
    ),
]

SAMPLE_PROJECT_IDS = frozenset(p.id for p in SAMPLE_PROJECTS)
DEFAULT_DURATION = 3


def initial_projects() -> List[Project]:
    """Fresh copies of the sample projects, safe to edit."""
    return [replace(p, tasks=list(p.tasks)) for p in SAMPLE_PROJECTS]


def is_sample_project(project_id: str) -> bool:
    return project_id in SAMPLE_PROJECT_IDS


def find_project(projects: Iterable[Project], project_id: str) -> Project:
    projects = list(projects)
    for p in projects:
        if p.id == project_id:
            return p
    return projects[0]


# ---------------------------------------------------------
# PROJECT MANAGEMENT
# ---------------------------------------------------------

def add_custom_project(projects: List[Project], name: str = "Custom Project") -> List[Project]:
    if any(not is_sample_project(p.id) for p in projects):
        raise ValueError(
            "You can only create one custom project. Delete the existing custom project first."
        )
    return projects + [Project(id=f"p{int(time.time() * 1000)}", name=name, tasks=[])]


def delete_project(projects: List[Project], project_id: str) -> List[Project]:
    if is_sample_project(project_id):
        raise ValueError("Cannot delete the example projects.")
    return [p for p in projects if p.id != project_id]


def reset_project_tasks(projects: List[Project], project_id: str) -> List[Project]:
    if is_sample_project(project_id):
        raise ValueError("Cannot reset the example projects.")
    return [replace(p, tasks=[]) if p.id == project_id else p for p in projects]


def rename_project(projects: List[Project], project_id: str, name: str) -> List[Project]:
    return [replace(p, name=name) if p.id == project_id else p for p in projects]


def replace_project(projects: List[Project], project: Project) -> List[Project]:
    return [project if p.id == project.id else p for p in projects]


# ---------------------------------------------------------
# TASK MANAGEMENT
# ---------------------------------------------------------

def next_task_id(project: Project) -> str:
    existing = set(project.task_ids)
    for letter in string.ascii_uppercase:
        if letter not in existing:
            return letter
    return "Z"


def make_task(task_id: str, name: str, duration, deps: Optional[Iterable[str]] = None) -> Task:
    """
    Build a task from editor input, rejecting what the engine should never see.
    """
    task_id = (task_id or "").strip()
    name = (name or "").strip()
    try:
        duration = int(duration)
    except (TypeError, ValueError):
        duration = None

    if not task_id or not name or duration is None or duration < 1:
        raise ValueError("Please fill in all fields correctly (duration must be at least 1)")

    deps = [d for d in (deps or []) if d]
    if task_id in deps:
        raise ValueError(f"Task {task_id} cannot depend on itself")

    return Task(id=task_id, name=name, duration=duration, deps=deps)


def upsert_task(project: Project, task: Task) -> Project:
    tasks = list(project.tasks)
    for i, t in enumerate(tasks):
        if t.id == task.id:
            tasks[i] = task
            break
    else:
        tasks.append(task)
    return replace(project, tasks=tasks)


def delete_task(project: Project, task_id: str) -> Project:
    tasks = [
        replace(t, deps=tuple(d for d in t.deps if d != task_id))
        for t in project.tasks
        if t.id != task_id
    ]
    return replace(project, tasks=tasks)
