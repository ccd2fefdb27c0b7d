"""Streamlit widgets shared by the practice pages."""
import pandas as pd
import streamlit as st

from cpm_trainer.app_state import current_project, practice_state, set_practice_state
from cpm_trainer.cpm.session import STAGE_LABELS, check_stage, with_entries
from cpm_trainer.projects import is_sample_project


def entry_table(tasks, state, fields) -> pd.DataFrame:
    df = pd.DataFrame(
        {
            "Task": [t.id for t in tasks],
            "Name": [t.name for t in tasks],
            "Duration": [t.duration for t in tasks],
            "Depends on": [", ".join(t.deps) or "—" for t in tasks],
        }
    )
    for f in fields:
        df[f] = [str(state.entries.get(f, {}).get(t.id, "")) for t in tasks]
    return df


def render_entry_stage(stage: str, fields, success_message: str):
    """
    Editable table for one pair of fields plus the check button.

    Example projects follow the guided order; custom projects may fill any
    field at any time.
    """
    project = current_project()
    state = practice_state()
    guided = is_sample_project(project.id)

    st.caption(f"Current stage: **{STAGE_LABELS[state.stage]}**")

    if not project.tasks:
        st.info('No tasks yet. Add some on the "Project Editor" page.')
        st.stop()

    editable = not guided or state.stage == stage
    if guided and not editable:
        st.info("This step is not active for the current stage of the example project.")

    edited = st.data_editor(
        entry_table(project.tasks, state, fields),
        disabled=["Task", "Name", "Duration", "Depends on"] + ([] if editable else list(fields)),
        hide_index=True,
        use_container_width=True,
        key=f"entries-{project.id}-{stage}",
    )

    new_entries = {
        f: {row["Task"]: str(row[f] or "").strip() for _, row in edited.iterrows()}
        for f in fields
    }
    if editable:
        state = with_entries(state, new_entries)
        set_practice_state(state)

    if guided and state.stage == stage:
        if st.button(f"Check {'/'.join(fields)}", type="primary"):
            new_state, result = check_stage(state, project.tasks)
            set_practice_state(new_state)
            if result.ok:
                st.success(success_message)
                st.balloons()
            else:
                st.error("Some entries don't match the network calculation. Check:")
                st.markdown("\n".join(f"- {d}" for d in result.details))
