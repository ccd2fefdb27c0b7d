import os, sys

APP_ROOT = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.abspath(os.path.join(APP_ROOT, "../.."))

if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import streamlit as st

from cpm_trainer.app_state import current_project, init_session_state
from cpm_trainer.cpm.grading import FORWARD_FIELDS
from cpm_trainer.cpm.session import STAGE_ESEF
from cpm_trainer.logger import configure_logging
from cpm_trainer.ui import render_entry_stage

configure_logging()

# -----------------------------------------------------------
# Page Config
# -----------------------------------------------------------
st.set_page_config(page_title="Forward Pass", layout="wide")

st.title("➡️ Forward Pass: Earliest Start / Earliest Finish")

init_session_state()

st.caption(f"Project: **{current_project().name}**")

with st.expander("How the forward pass works"):
    st.markdown(
        """
- Walk the tasks in dependency order.
- A task with no predecessors starts at **0**.
- Otherwise **ES = the largest EF** among its predecessors.
- **EF = ES + duration.**
        """
    )

render_entry_stage(
    STAGE_ESEF,
    FORWARD_FIELDS,
    "Nice! ES/EF are correct. Now enter LS/LF on the Backward Pass page.",
)
