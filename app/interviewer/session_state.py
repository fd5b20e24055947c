"""
Purpose: Session record helpers shared by the controller and the client.

- create_initial_session / record_answer: the only ways a transcript grows.
- sync_from_server: the client-side merge rule.
- dump_session / load_session: lossless JSON text round trip; a payload that
  does not validate is rejected, never repaired.
"""

from __future__ import annotations
from collections.abc import Mapping
from typing import Any, Optional, Union

import pydantic

from .errors import SessionPayloadError, ValidationError
from .models import (
    InterviewAnswer,
    InterviewPhase,
    InterviewSession,
    QuestionType,
)


def create_initial_session(
    max_questions: int = 7, max_followups: int = 2
) -> InterviewSession:
    return InterviewSession(
        current_question_index=0,
        question_type=QuestionType.MAIN,
        followup_count=0,
        max_questions=max_questions,
        max_followups=max_followups,
        interview_phase=InterviewPhase.INITIALIZING,
    )


def record_answer(
    session: InterviewSession,
    question: str,
    answer: str,
    question_id: Optional[str] = None,
) -> InterviewSession:
    """
    Append one answered turn for the question currently on screen.
    Each issued question takes exactly one answer: raises ValidationError
    before the first question and when the question was already answered
    (which also covers a session ended without a new question).
    """
    qid = question_id or session.current_question_id
    if not qid:
        raise ValidationError("No question has been asked yet.")
    if any(qa.question_id == qid for qa in session.conversation_history):
        raise ValidationError(f"Question {qid} has already been answered.")
    entry = InterviewAnswer(
        question=question,
        answer=answer,
        question_id=qid,
        question_type=session.question_type,
        main_question_index=(
            session.current_question_index
            if session.question_type == QuestionType.FOLLOWUP
            else None
        ),
    )
    return session.model_copy(
        update={"conversation_history": (*session.conversation_history, entry)}
    )


def sync_from_server(
    local: InterviewSession, server: InterviewSession
) -> InterviewSession:
    """
    Take every field from the server copy except the transcript, which comes
    from the local copy: the client may have appended an answer while the
    request was in flight, while counters and phase stay authoritative.
    """
    return server.model_copy(
        update={"conversation_history": local.conversation_history}
    )


def can_continue(session: InterviewSession) -> bool:
    if session.is_complete:
        return False
    return session.current_question_index < session.max_questions


def progress_percent(session: InterviewSession) -> int:
    if not session.max_questions:
        return 0
    progress = (session.current_question_index + 1) / session.max_questions * 100
    return min(100, round(progress))


def question_context(session: InterviewSession) -> dict[str, Any]:
    return {
        "question_number": session.current_question_index + 1,
        "total_questions": session.max_questions,
        "followup_count": session.followup_count,
        "max_followups": session.max_followups,
        "is_followup": session.question_type == QuestionType.FOLLOWUP,
    }


def dump_session(session: InterviewSession) -> str:
    return session.model_dump_json()


def load_session(
    payload: Union[str, bytes, Mapping[str, Any], InterviewSession],
) -> InterviewSession:
    if isinstance(payload, InterviewSession):
        return payload
    try:
        if isinstance(payload, (str, bytes)):
            return InterviewSession.model_validate_json(payload)
        if isinstance(payload, Mapping):
            return InterviewSession.model_validate(dict(payload))
    except pydantic.ValidationError as e:
        raise SessionPayloadError(f"Invalid interview session: {e}") from e
    raise SessionPayloadError(
        f"Unsupported session payload type: {type(payload).__name__}"
    )
