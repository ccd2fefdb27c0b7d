import os, sys

APP_ROOT = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.abspath(os.path.join(APP_ROOT, "../.."))

if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import streamlit as st

from cpm_trainer.app_state import current_project, init_session_state
from cpm_trainer.cpm.grading import BACKWARD_FIELDS
from cpm_trainer.cpm.session import STAGE_LSLF
from cpm_trainer.logger import configure_logging
from cpm_trainer.ui import render_entry_stage

configure_logging()

st.set_page_config(page_title="Backward Pass", layout="wide")

st.title("⬅️ Backward Pass: Latest Start / Latest Finish")

init_session_state()

st.caption(f"Project: **{current_project().name}**")

with st.expander("How the backward pass works"):
    st.markdown(
        """
- Walk the tasks in reverse dependency order.
- A task nobody depends on may finish at the project end: **LF = project duration**.
- Otherwise **LF = the smallest LS** among its successors.
- **LS = LF − duration.** Slack is **LS − ES**; zero slack means critical.
        """
    )

render_entry_stage(
    STAGE_LSLF,
    BACKWARD_FIELDS,
    "All correct! You've nailed the full CPM. Explore shifts on the What-If Dragging page.",
)
