import os, sys

# Absolute directory containing Menu.py
APP_ROOT = os.path.dirname(os.path.abspath(__file__))

# The project root: Menu.py → cpm_trainer → src
PROJECT_ROOT = os.path.abspath(os.path.join(APP_ROOT, ".."))

if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import streamlit as st

from cpm_trainer.app_state import (
    current_project,
    init_session_state,
    practice_state,
    set_practice_state,
    switch_project,
)
from cpm_trainer.cpm.gantt import build_gantt_figure
from cpm_trainer.cpm.session import STAGE_LABELS, reset_state
from cpm_trainer.logger import configure_logging
from cpm_trainer.projects import is_sample_project

configure_logging()

st.set_page_config(page_title="CPM Trainer", layout="wide")

st.title("🧭 Critical Path Method Trainer")

st.markdown("""
Pick a project, then work through the pages in order:
**Forward Pass** (ES/EF) → **Backward Pass** (LS/LF) → **What-If Dragging**.
""")

init_session_state()

# -----------------------------------------------------------
# Project selector
# -----------------------------------------------------------
projects = st.session_state["projects"]
ids = [p.id for p in projects]
labels = {p.id: f"{p.name} ({len(p.tasks)} tasks)" for p in projects}

selected = st.radio(
    "Project",
    ids,
    index=ids.index(current_project().id),
    format_func=lambda pid: labels[pid],
    horizontal=True,
)
if selected != st.session_state["current_project_id"]:
    switch_project(selected)
    st.rerun()

project = current_project()
state = practice_state()

c1, c2, c3 = st.columns(3)
c1.metric("Tasks", len(project.tasks))
c2.metric("Stage", STAGE_LABELS[state.stage])
c3.metric("Kind", "Example" if is_sample_project(project.id) else "Custom")

if st.button("🔄 Reset project"):
    set_practice_state(reset_state(project.id))
    st.rerun()

st.divider()

# -----------------------------------------------------------
# Network overview
# -----------------------------------------------------------
if not project.tasks:
    st.info('No tasks yet. Add some on the "Project Editor" page.')
    st.stop()

st.subheader("Task network")
st.dataframe(
    [
        {
            "Task": t.id,
            "Name": t.name,
            "Duration": t.duration,
            "Depends on": ", ".join(t.deps) or "—",
        }
        for t in project.tasks
    ],
    hide_index=True,
    use_container_width=True,
)

schedule = state.schedule(project.tasks)
if schedule.unscheduled:
    st.warning(
        "These tasks sit in a dependency loop or wait on a missing task and are left "
        f"out of the schedule: {', '.join(schedule.unscheduled)}"
    )

st.metric("Project duration", f"{schedule.project_duration:g}")
st.plotly_chart(
    build_gantt_figure(project.tasks, schedule, state.min_start),
    use_container_width=True,
)
