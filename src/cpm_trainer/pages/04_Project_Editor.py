import os, sys

APP_ROOT = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.abspath(os.path.join(APP_ROOT, "../.."))

if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from dataclasses import replace

import streamlit as st
import pandas as pd

from cpm_trainer.app_state import (
    current_project,
    init_session_state,
    set_projects,
    switch_project,
)
from cpm_trainer.cpm.task_table import tasks_from_frame, tasks_to_frame
from cpm_trainer.logger import configure_logging
from cpm_trainer.projects import (
    DEFAULT_DURATION,
    add_custom_project,
    delete_project,
    delete_task,
    is_sample_project,
    make_task,
    next_task_id,
    rename_project,
    replace_project,
    reset_project_tasks,
    upsert_task,
)
from cpm_trainer.validation.task_validator import validate_tasks

configure_logging()

st.set_page_config(page_title="Project Editor", layout="wide")

st.title("🛠️ Project Editor")
st.caption("Build your own network. The example projects are read-only.")

init_session_state()
projects = st.session_state["projects"]
project = current_project()

# -----------------------------------------------------------
# Custom project lifecycle
# -----------------------------------------------------------
if is_sample_project(project.id):
    st.info(f"**{project.name}** is an example project and cannot be edited.")
    if st.button("➕ Create custom project"):
        try:
            projects = add_custom_project(projects)
        except ValueError as e:
            st.error(str(e))
        else:
            set_projects(projects)
            switch_project(projects[-1].id)
            st.rerun()
    st.stop()

name = st.text_input("Project name", value=project.name)
if name != project.name:
    set_projects(rename_project(projects, project.id, name))
    st.rerun()

col1, col2 = st.columns(2)
with col1:
    if st.button("🧹 Reset project (delete all tasks)"):
        set_projects(reset_project_tasks(projects, project.id))
        switch_project(project.id)
        st.rerun()
with col2:
    if st.button("🗑️ Delete project"):
        set_projects(delete_project(projects, project.id))
        switch_project(st.session_state["projects"][0].id)
        st.rerun()

st.divider()

# -----------------------------------------------------------
# Task list
# -----------------------------------------------------------
st.subheader("Tasks")

if not project.tasks:
    st.info('No tasks yet. Use "Add / edit task" below to get started.')
else:
    for t in project.tasks:
        c1, c2 = st.columns([5, 1])
        with c1:
            deps = f"Depends on: {', '.join(t.deps)}" if t.deps else "No dependencies"
            st.markdown(f"**{t.id}** – {t.name} · Duration: {t.duration} · {deps}")
        with c2:
            if st.button("Delete", key=f"del-{t.id}"):
                set_projects(replace_project(projects, delete_task(project, t.id)))
                st.rerun()

# -----------------------------------------------------------
# Add / edit form
# -----------------------------------------------------------
st.subheader("Add / edit task")

existing = {t.id: t for t in project.tasks}
choice = st.selectbox(
    "Task",
    ["(new task)"] + list(existing),
    format_func=lambda k: k if k == "(new task)" else f"{k} – {existing[k].name}",
)
editing = existing.get(choice)

with st.form("task-editor", clear_on_submit=True):
    task_id = st.text_input(
        "Task id",
        value=editing.id if editing else next_task_id(project),
        disabled=editing is not None,
    )
    task_name = st.text_input("Name", value=editing.name if editing else "")
    duration = st.number_input(
        "Duration", min_value=1, step=1,
        value=editing.duration if editing else DEFAULT_DURATION,
    )
    options = [t.id for t in project.tasks if t.id != (editing.id if editing else task_id)]
    deps = st.multiselect(
        "Depends on",
        options,
        default=list(editing.deps) if editing else [],
    )
    submitted = st.form_submit_button("Save task")

if submitted:
    try:
        task = make_task(editing.id if editing else task_id, task_name, duration, deps)
    except ValueError as e:
        st.error(str(e))
    else:
        set_projects(replace_project(projects, upsert_task(project, task)))
        st.rerun()

st.divider()

# -----------------------------------------------------------
# CSV import / export
# -----------------------------------------------------------
st.subheader("Import / export")

uploaded = st.file_uploader("Upload task CSV (TaskID, Name, Duration, Predecessors)", type=["csv"])
if uploaded is not None:
    try:
        df_raw = pd.read_csv(uploaded, dtype=str)
        tasks = tasks_from_frame(df_raw)
    except ValueError as e:
        st.error(f"❌ Error loading tasks: {e}")
    else:
        if st.button(f"Replace tasks with {len(tasks)} uploaded task(s)"):
            set_projects(replace_project(projects, replace(project, tasks=tasks)))
            switch_project(project.id)
            st.rerun()

if project.tasks:
    csv_export = tasks_to_frame(project.tasks).to_csv(index=False).encode("utf-8")
    st.download_button(
        "Download tasks (CSV)",
        data=csv_export,
        file_name=f"{project.name or 'project'}.csv",
        mime="text/csv",
    )

st.divider()

# -----------------------------------------------------------
# Validation
# -----------------------------------------------------------
st.subheader("🔍 Network check")

issues = validate_tasks(project.tasks)
critical = issues[issues["Severity"] == "critical"]
warnings = issues[issues["Severity"] == "warning"]

c1, c2 = st.columns(2)
c1.metric("Critical Issues", len(critical))
c2.metric("Warnings", len(warnings))

if critical.empty:
    st.success("No critical issues found.")
else:
    st.error("These issues leave tasks out of the schedule.")
    st.dataframe(critical, hide_index=True)

if not warnings.empty:
    st.warning("These won't break CPM, but should be cleaned up.")
    st.dataframe(warnings, hide_index=True)
