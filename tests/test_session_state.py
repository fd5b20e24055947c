# tests/test_session_state.py
import json
from types import MappingProxyType

import pytest

from interviewer.errors import SessionPayloadError, ValidationError
from interviewer.models import InterviewPhase, OracleDecision, QuestionType
from interviewer.session_state import (
    can_continue,
    create_initial_session,
    dump_session,
    load_session,
    progress_percent,
    question_context,
    record_answer,
    sync_from_server,
)
from interviewer.state_machine import advance


def test_initial_session_defaults():
    session = create_initial_session()
    assert session.max_questions == 7
    assert session.max_followups == 2
    assert session.interview_phase == InterviewPhase.INITIALIZING
    assert session.conversation_history == ()
    assert can_continue(session)


def test_record_answer_appends_in_order():
    session = create_initial_session()
    session, _ = advance(session, None, OracleDecision(question="Q1"))
    session = record_answer(session, "Q1", "A1")
    session, _ = advance(session, "A1", OracleDecision(question="F1", wants_followup=True))
    session = record_answer(session, "F1", "A2")

    first, second = session.conversation_history
    assert (first.question, first.answer) == ("Q1", "A1")
    assert first.question_type == QuestionType.MAIN
    assert first.main_question_index is None
    assert first.question_id == "main-1-1"
    assert second.question_type == QuestionType.FOLLOWUP
    assert second.main_question_index == 1
    assert second.question_id == "followup-1-2"


def test_sync_keeps_local_transcript_and_server_counters():
    local = create_initial_session()
    local, _ = advance(local, None, OracleDecision(question="Q1"))
    server, _ = advance(local, None, OracleDecision(question="Q2"))
    local = record_answer(local, "Q1", "answered while the request was in flight")

    merged = sync_from_server(local, server)

    assert merged.conversation_history == local.conversation_history
    assert merged.current_question_index == server.current_question_index == 2
    assert merged.question_sequence == server.question_sequence
    assert merged.current_question_id == server.current_question_id


def test_progress_and_question_context():
    session = create_initial_session(max_questions=4)
    assert progress_percent(session) == 25
    session, _ = advance(session, None, OracleDecision(question="Q1"))
    ctx = question_context(session)
    assert ctx["question_number"] == 2
    assert ctx["total_questions"] == 4
    assert ctx["is_followup"] is False

    done = session.model_copy(update={"current_question_index": 4})
    assert progress_percent(done) == 100


def test_completed_session_cannot_continue():
    session = create_initial_session().model_copy(
        update={"interview_phase": InterviewPhase.COMPLETED}
    )
    assert not can_continue(session)


def test_dump_and_load_preserve_transcript():
    session = create_initial_session(max_questions=3, max_followups=1)
    session, _ = advance(session, None, OracleDecision(question="Q1"))
    session = record_answer(session, "Q1", "A1 with \"quotes\" and ünïcode")

    restored = load_session(dump_session(session))

    assert restored == session
    assert restored.conversation_history[0].answer == session.conversation_history[0].answer


@pytest.mark.parametrize(
    "payload",
    [
        "not json",
        json.dumps({"followup_count": 3, "max_followups": 2}),
        json.dumps({"question_type": "followup", "followup_count": 0}),
        json.dumps({"current_question_index": -1}),
        json.dumps({"interview_phase": "paused"}),
        json.dumps({"unexpected": True}),
        {"max_questions": 0},
    ],
)
def test_load_session_rejects_invalid_payloads(payload):
    with pytest.raises(SessionPayloadError):
        load_session(payload)


def test_load_session_rejects_unsupported_type():
    with pytest.raises(ValidationError):
        load_session(42)


def test_load_session_accepts_any_mapping():
    payload = MappingProxyType({"max_questions": 4, "max_followups": 1})
    session = load_session(payload)
    assert session.max_questions == 4


def test_record_answer_needs_an_open_question():
    fresh = create_initial_session()
    with pytest.raises(ValidationError):
        record_answer(fresh, "Q1", "too early")

    session, _ = advance(fresh, None, OracleDecision(question="Q1"))
    session = record_answer(session, "Q1", "A1")
    with pytest.raises(ValidationError):
        record_answer(session, "Q1", "A1 again")

    ended, _ = advance(session, "A1", OracleDecision(question=None))
    with pytest.raises(ValidationError):
        record_answer(ended, "Q?", "after the end")
