import os, sys

APP_ROOT = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.abspath(os.path.join(APP_ROOT, "../.."))

if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import streamlit as st

from cpm_trainer.app_state import current_project, init_session_state, practice_state
from cpm_trainer.config import settings
from cpm_trainer.cpm.report import schedule_frame
from cpm_trainer.cpm.session import entries_complete
from cpm_trainer.evaluation import EvaluationError, build_evaluation_payload, build_prompt, request_evaluation
from cpm_trainer.logger import configure_logging
from cpm_trainer.projects import is_sample_project

configure_logging()

st.set_page_config(page_title="AI Evaluation", layout="wide")

st.title("🤖 AI Schedule Evaluation")
st.caption("Send the computed schedule of your custom project for an expert-style review.")

init_session_state()
project = current_project()
state = practice_state()

if is_sample_project(project.id):
    st.info("AI evaluation is available for custom projects. Create one on the Project Editor page.")
    st.stop()

if not project.tasks:
    st.info("Add tasks to your project first.")
    st.stop()

if not entries_complete(state, project.tasks):
    st.warning(
        "Fill in all ES, EF, LS, and LF values (Forward Pass and Backward Pass pages) "
        "to submit for AI evaluation."
    )
    st.stop()

missing = settings.validate_required_settings()
if missing:
    st.error(f"Missing configuration: {', '.join(missing)}. Add it to your environment or .env file.")
    st.stop()

schedule = state.schedule(project.tasks)
st.dataframe(schedule_frame(project.tasks, schedule), hide_index=True, use_container_width=True)

prompt = build_prompt(build_evaluation_payload(project, schedule))
with st.expander("Request sent to the model"):
    st.code(prompt, language="markdown")

if st.button("Submit for AI Evaluation", type="primary"):
    try:
        with st.spinner("Evaluating..."):
            report = request_evaluation(prompt)
    except EvaluationError as e:
        st.error(f"❌ Failed to get AI evaluation: {e}")
    else:
        st.session_state["evaluation_report"] = (project.id, report)

saved = st.session_state.get("evaluation_report")
if saved and saved[0] == project.id:
    st.subheader("Project Schedule Analysis")
    st.markdown(saved[1])
