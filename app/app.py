"""
UI layer
Purpose: Streamlit-only glue. Collects the job/candidate context, shows one
question at a time, and delegates every decision to the controller.

The page is the *client*: it keeps its own copy of the interview session in
st.session_state, records answers into it, sends it with each request, and
merges the returned session with sync_from_server.
"""

import streamlit as st
from datetime import datetime
from typing import Optional

from interviewer.config import get_settings
from interviewer.controller import InterviewSessionController
from interviewer.errors import ValidationError
from interviewer.logging import setup_logging
from interviewer.models import (
    EvaluationResult,
    InterviewBlueprint,
    NextQuestionResponse,
    QuestionType,
)
from interviewer.persistence.session_store import (
    InMemorySessionStore,
    JSONFileSessionStore,
)
from interviewer.services.llm_openai import OpenAILLMClient
from interviewer.services.profile_analyzer import extract_pdf_text
from interviewer.session_state import (
    can_continue,
    progress_percent,
    question_context,
    record_answer,
    sync_from_server,
)

settings = get_settings()
setup_logging(settings)

# ---------------------------
# Page config
# ---------------------------
st.set_page_config(
    page_title=settings.APP_NAME,
    page_icon="🎯",
    layout="wide",
    initial_sidebar_state="expanded",
)

# ---------------------------
# Session state init
# ---------------------------
st_session = st.session_state
st_session.setdefault("controller", None)
st_session.setdefault("api_key_set", False)
st_session.setdefault("role_title", "")
st_session.setdefault("job_description", "")
st_session.setdefault("resume_text", "")
st_session.setdefault("use_profile_analysis", True)
st_session.setdefault("blueprint", None)
st_session.setdefault("session_id", None)
st_session.setdefault("interview", None)
st_session.setdefault("current_question", None)
st_session.setdefault("final_question_pending", False)
st_session.setdefault("evaluation", None)
st_session.setdefault("session_start_ts", datetime.now().timestamp())


# ---------------------------
# Helpers
# ---------------------------
def get_ready_controller() -> Optional[InterviewSessionController]:
    """Return controller only if it's initialized and ready."""
    controller = st_session.get("controller")
    if controller and controller.is_ready():
        return controller
    return None


def make_store():
    if settings.SESSION_STORE_DIR:
        return JSONFileSessionStore(settings.SESSION_STORE_DIR)
    return InMemorySessionStore()


def context_kwargs() -> dict:
    return {
        "job_description": st_session.job_description,
        "resume": st_session.resume_text,
        "role_title": st_session.role_title,
    }


def reset_interview():
    """Wipe the interview, keep the API key and the entered context."""
    st_session.blueprint = None
    st_session.session_id = None
    st_session.interview = None
    st_session.current_question = None
    st_session.final_question_pending = False
    st_session.evaluation = None
    st_session.session_start_ts = datetime.now().timestamp()
    controller = get_ready_controller()
    if controller:
        controller.reset()


def apply_response(controller, response: NextQuestionResponse) -> None:
    """Merge the returned session into the local copy and persist it."""
    st_session.interview = sync_from_server(
        st_session.interview, response.updated_session
    )
    controller.store.put(st_session.session_id, st_session.interview)
    st_session.current_question = response.question
    # the last main question arrives together with interview_complete
    st_session.final_question_pending = bool(
        response.interview_complete and response.question
    )


def start_interview(controller: InterviewSessionController) -> None:
    if st_session.use_profile_analysis:
        with st.spinner("Analyzing profile…"):
            analysis = controller.analyze_profile(**context_kwargs())
        st_session.blueprint = analysis.blueprint
        if not analysis.success:
            st.toast("Profile analysis unavailable, using a generic plan.", icon="⚠️")

    session_id, session = controller.start_session()
    st_session.session_id = session_id
    st_session.interview = session
    with st.spinner("Preparing the first question…"):
        response = controller.advance_question(
            **context_kwargs(),
            session=session,
            blueprint=st_session.blueprint,
        )
    apply_response(controller, response)


def submit_answer(controller: InterviewSessionController, answer: str) -> None:
    question = st_session.current_question
    answer = controller.security.validate_answer(answer)
    st_session.interview = record_answer(st_session.interview, question, answer)

    if st_session.final_question_pending:
        controller.store.put(st_session.session_id, st_session.interview)
        st_session.final_question_pending = False
        st_session.current_question = None
        return

    with st.spinner("Thinking about the next question…"):
        response = controller.advance_question(
            **context_kwargs(),
            session=st_session.interview,
            last_answer=answer,
            blueprint=st_session.blueprint,
        )
    apply_response(controller, response)


def render_blueprint(blueprint: InterviewBlueprint) -> None:
    cols = st.columns(3)
    sections = [
        ("**Key skills**", blueprint.key_skills),
        ("**Skill gaps**", blueprint.skill_gaps),
        ("**Focus areas**", blueprint.focus_areas),
    ]
    for (title, items), col in zip(sections, cols):
        with col:
            st.markdown(title)
            st.markdown("\n".join(f"- {it}" for it in items) if items else "_none_")


def render_evaluation(result: EvaluationResult) -> None:
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Alignment", f"{result.alignment_percentage:.0f}%")
    c2.metric("Technical", f"{result.technical_score:.1f}/10")
    c3.metric("Problem solving", f"{result.problem_solving_score:.1f}/10")
    c4.metric("Communication", f"{result.communication_score:.1f}/10")
    st.markdown(f"### Verdict: {result.final_verdict.value}")
    st.write(result.summary)

    scol, wcol = st.columns(2)
    with scol:
        st.markdown("**Strengths**")
        st.markdown("\n".join(f"- {s}" for s in result.strengths) or "_none_")
    with wcol:
        st.markdown("**Weaknesses**")
        st.markdown("\n".join(f"- {w}" for w in result.weaknesses) or "_none_")


def format_duration(seconds: float) -> str:
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes}m {secs:02d}s"


# ---------------------------
# SIDEBAR: settings & context
# ---------------------------
with st.sidebar:
    st.markdown("# Settings")

    st.markdown("## OPEN AI API Key Required")
    user_api_key = st.text_input(
        "Enter your API key",
        type="password",
        value=settings.OPENAI_API_KEY or "",
        help="We do not store your key. It stays in your session only.",
    )
    if not user_api_key:
        st.warning("Please enter your API key in the sidebar to continue.")
        st.stop()
    elif not st_session.api_key_set:
        try:
            llm = OpenAILLMClient(api_key=user_api_key, settings=settings)
        except RuntimeError as e:
            st.error(f"OpenAI client init failed: {e}")
            st.stop()
        st_session.controller = InterviewSessionController(
            llm, store=make_store(), settings=settings
        )
        st_session.api_key_set = True

    st.divider()
    locked = st_session.interview is not None

    st.markdown("## Interview context")
    st_session.role_title = st.text_input(
        "Role title", value=st_session.role_title, disabled=locked
    )
    st_session.job_description = st.text_area(
        "Job description",
        value=st_session.job_description,
        height=200,
        disabled=locked,
    )
    resume_pdf = st.file_uploader("Resume (PDF)", type=["pdf"], disabled=locked)
    if resume_pdf is not None and not locked:
        text = extract_pdf_text(resume_pdf)
        if text:
            st_session.resume_text = text
        else:
            st.toast("No selectable text found in the PDF.")
    st_session.resume_text = st.text_area(
        "Resume text",
        value=st_session.resume_text,
        height=200,
        disabled=locked,
    )
    st_session.use_profile_analysis = st.toggle(
        "Analyze profile first",
        value=st_session.use_profile_analysis,
        disabled=locked,
    )

    controller = get_ready_controller()
    if not locked and st.button("Start interview", type="primary"):
        try:
            start_interview(controller)
            st.rerun()
        except ValidationError as e:
            reset_interview()
            st.error(str(e))

    if locked and st.button("Reset interview"):
        reset_interview()
        st.rerun()


(interview_tab, result_tab, usage_tab) = st.tabs(["Interview", "Result", "Usage"])

with interview_tab:
    session = st_session.interview
    controller = get_ready_controller()
    if session is None:
        st.info("Fill in the role, job description and resume, then press Start.")
    else:
        qctx = question_context(session)
        st.progress(
            progress_percent(session) / 100,
            text=f"Question {min(qctx['question_number'] - 1, qctx['total_questions'])}"
            f" of {qctx['total_questions']}",
        )
        if st_session.blueprint is not None:
            with st.expander("Interview plan"):
                render_blueprint(st_session.blueprint)

        transcript = st.container(height=400, border=True)
        with transcript:
            for qa in session.conversation_history:
                label = (
                    "Follow-up" if qa.question_type == QuestionType.FOLLOWUP else "Question"
                )
                with st.chat_message("assistant"):
                    st.markdown(f"**{label}:** {qa.question}")
                with st.chat_message("user"):
                    st.markdown(qa.answer)

        if st_session.current_question:
            if qctx["is_followup"]:
                st.caption(
                    f"Follow-up {qctx['followup_count']} of {qctx['max_followups']}"
                )
            st.markdown(f"### {st_session.current_question}")
            raw = st.chat_input("Type your answer…")
            if raw is not None and raw.strip():
                try:
                    submit_answer(controller, raw)
                except ValidationError as e:
                    st.toast(str(e), icon="⚠️")
                st.rerun()
        elif not can_continue(session):
            st.success("Interview complete. Open the Result tab for the evaluation.")

with result_tab:
    session = st_session.interview
    controller = get_ready_controller()
    ready = bool(
        session is not None
        and session.is_complete
        and not st_session.current_question
        and session.conversation_history
    )
    if st_session.evaluation is None and ready and controller:
        with st.spinner("Evaluating interview…"):
            try:
                st_session.evaluation = controller.evaluate(
                    session.conversation_history,
                    **context_kwargs(),
                    blueprint=st_session.blueprint,
                )
            except ValidationError as e:
                st.error(str(e))
    if st_session.evaluation is not None:
        render_evaluation(st_session.evaluation)
    else:
        st.info("The evaluation appears here once the interview is complete.")

with usage_tab:
    st.subheader("Usage")
    controller = get_ready_controller()
    now_ts = datetime.now().timestamp()
    session_secs = now_ts - float(st_session.get("session_start_ts", now_ts))

    c1, c2, c3 = st.columns(3)
    c1.metric("Tokens (in)", f"{getattr(controller, 'tokens_in', 0):,}")
    c2.metric("Tokens (out)", f"{getattr(controller, 'tokens_out', 0):,}")
    c3.metric("Session time", format_duration(session_secs))
    st.metric(
        "Last used model",
        getattr(controller, "model_used", None) or settings.AI_MODEL,
    )

st.divider()
st.caption(
    "Privacy tip: contact details in resumes are redacted before they reach the model."
)
