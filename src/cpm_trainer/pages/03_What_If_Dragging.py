import os, sys

APP_ROOT = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.abspath(os.path.join(APP_ROOT, "../.."))

if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import streamlit as st
import plotly.graph_objects as go

from cpm_trainer.app_state import current_project, init_session_state, practice_state, set_practice_state
from cpm_trainer.cpm.engine import compute_schedule
from cpm_trainer.cpm.gantt import axis_units, build_gantt_figure
from cpm_trainer.cpm.propagation import precedence_floor
from cpm_trainer.cpm.report import critical_chains, schedule_frame
from cpm_trainer.cpm.session import STAGE_INTERACTIVE, apply_drag, clear_overrides
from cpm_trainer.logger import configure_logging

configure_logging()

# -----------------------------------------------------------
# Page Config
# -----------------------------------------------------------
st.set_page_config(page_title="What-If Dragging", layout="wide")

st.title("🧲 What-If: Move a Task")

st.caption(
    "Move any bar. Inside its slack nothing else changes; beyond it, successors "
    "shift and the critical path may move."
)

init_session_state()
project = current_project()
state = practice_state()

if not project.tasks:
    st.info('No tasks yet. Add some on the "Project Editor" page.')
    st.stop()

if state.stage != STAGE_INTERACTIVE:
    st.warning("Finish the Forward Pass and Backward Pass checks first to unlock dragging.")
    st.stop()

baseline = compute_schedule(project.tasks)
schedule = state.schedule(project.tasks)

# -----------------------------------------------------------
# Summary row
# -----------------------------------------------------------
slip = schedule.project_duration - baseline.project_duration

c1, c2, c3 = st.columns(3)
with c1:
    st.metric("Original duration", f"{baseline.project_duration:g}")
with c2:
    st.metric("Current duration", f"{schedule.project_duration:g}")
with c3:
    st.metric("Slip", f"{slip:+g} units")

st.divider()

# -----------------------------------------------------------
# Drag controls
# -----------------------------------------------------------
movable = [t for t in project.tasks if t.id in schedule.es]
task = st.selectbox(
    "Task to move",
    movable,
    format_func=lambda t: f"{t.id} – {t.name} (ES {schedule.es[t.id]:g}, slack {schedule.slack[t.id]:g})",
)

floor = precedence_floor(task, schedule)
new_start = st.slider(
    f"New start for {task.id}",
    min_value=0,
    max_value=axis_units(schedule),
    value=int(schedule.es[task.id]),
    help=f"Predecessors finish at {floor:g}; anything earlier is clamped.",
)

col_a, col_b = st.columns(2)
with col_a:
    if st.button("Apply move", type="primary"):
        state, schedule = apply_drag(state, project.tasks, task.id, new_start)
        set_practice_state(state)
        st.rerun()
with col_b:
    if st.button("Clear all moves"):
        set_practice_state(clear_overrides(state))
        st.rerun()

st.plotly_chart(
    build_gantt_figure(project.tasks, schedule, state.min_start),
    use_container_width=True,
)

# -----------------------------------------------------------
# Schedule table and critical chains
# -----------------------------------------------------------
st.subheader("Schedule")
df = schedule_frame(project.tasks, schedule)
df["Pinned start"] = df["TaskID"].map(state.min_start)
st.dataframe(df, hide_index=True, use_container_width=True)

chains = critical_chains(project.tasks, schedule)
st.subheader("Critical path")
if chains:
    for chain in chains:
        st.markdown(" → ".join(f"**{n}**" for n in chain))
else:
    st.info("No critical chain found.")

if slip > 0:
    fig = go.Figure(go.Waterfall(
        name="",
        measure=["absolute", "relative", "total"],
        x=["Original", "Slip", "Current"],
        y=[baseline.project_duration, slip, 0],
    ))
    fig.update_layout(title="Project Duration After Moves", margin=dict(l=20, r=20, t=40, b=20))
    st.plotly_chart(fig, use_container_width=True)
