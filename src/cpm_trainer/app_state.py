"""Streamlit session storage shared by every page."""
import streamlit as st

from cpm_trainer.cpm.session import PracticeState, reset_state
from cpm_trainer.models import Project
from cpm_trainer.projects import find_project, initial_projects


def init_session_state():
    if "projects" not in st.session_state:
        st.session_state["projects"] = initial_projects()
    if "current_project_id" not in st.session_state:
        st.session_state["current_project_id"] = st.session_state["projects"][0].id
    if "practice" not in st.session_state:
        st.session_state["practice"] = reset_state(st.session_state["current_project_id"])


def current_project() -> Project:
    return find_project(st.session_state["projects"], st.session_state["current_project_id"])


def practice_state() -> PracticeState:
    state = st.session_state["practice"]
    project = current_project()
    # Switching project always starts a fresh exercise
    if state.project_id != project.id:
        state = reset_state(project.id)
        st.session_state["practice"] = state
    return state


def set_practice_state(state: PracticeState):
    st.session_state["practice"] = state


def switch_project(project_id: str):
    st.session_state["current_project_id"] = project_id
    st.session_state["practice"] = reset_state(project_id)


def set_projects(projects):
    st.session_state["projects"] = projects
