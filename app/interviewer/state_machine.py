"""
Purpose: Interview progression state machine.

`advance` is a total, pure function: it takes an immutable InterviewSession,
the last answer (if any) and an already-validated OracleDecision, and returns
the next session value plus the response to send back. It never sees raw
oracle output or oracle failures; the adapter resolves those to a decision
first. There is no I/O and no locking here; callers serialize per session.

Transition rules, evaluated in order:
1. no question in the decision          -> interview completed
2. follow-up wanted and still eligible  -> follow-up on the current main question
3. otherwise                            -> next main question (may complete)
"""

from __future__ import annotations
from typing import Optional

from .models import (
    InterviewPhase,
    InterviewSession,
    NextQuestionResponse,
    OracleDecision,
    QuestionType,
)


def followup_eligible(session: InterviewSession, last_answer: Optional[str]) -> bool:
    """A follow-up may be asked only after an answered main question, within budget."""
    return (
        bool((last_answer or "").strip())
        and session.question_type == QuestionType.MAIN
        and session.followup_count < session.max_followups
    )


def mint_question_id(question_type: QuestionType, index: int, sequence: int) -> str:
    return f"{question_type.value}-{index}-{sequence}"


def terminal_response(session: InterviewSession) -> NextQuestionResponse:
    """Echo for a session that is already completed."""
    return NextQuestionResponse(
        question=None,
        question_id="",
        question_type=QuestionType.MAIN,
        updated_session=session,
        interview_complete=True,
    )


def advance(
    session: InterviewSession,
    last_answer: Optional[str],
    decision: OracleDecision,
) -> tuple[InterviewSession, NextQuestionResponse]:
    if session.is_complete:
        return session, terminal_response(session)

    if not decision.has_question:
        updated = session.model_copy(
            update={"interview_phase": InterviewPhase.COMPLETED}
        )
        return updated, NextQuestionResponse(
            question=None,
            question_id="",
            question_type=QuestionType.MAIN,
            updated_session=updated,
            interview_complete=True,
            reasoning=decision.reasoning,
        )

    sequence = session.question_sequence + 1

    if decision.wants_followup and followup_eligible(session, last_answer):
        index = session.current_question_index
        update = {
            "followup_count": session.followup_count + 1,
            "question_type": QuestionType.FOLLOWUP,
            "current_question_id": mint_question_id(
                QuestionType.FOLLOWUP, index, sequence
            ),
            "interview_phase": InterviewPhase.IN_PROGRESS,
        }
    else:
        index = session.current_question_index + 1
        completed = index >= session.max_questions
        update = {
            "current_question_index": index,
            "followup_count": 0,
            "question_type": QuestionType.MAIN,
            "current_question_id": mint_question_id(
                QuestionType.MAIN, index, sequence
            ),
            "interview_phase": (
                InterviewPhase.COMPLETED if completed else InterviewPhase.IN_PROGRESS
            ),
        }
    update["question_sequence"] = sequence

    updated = session.model_copy(update=update)
    return updated, NextQuestionResponse(
        question=decision.question.strip(),
        question_id=updated.current_question_id,
        question_type=updated.question_type,
        updated_session=updated,
        interview_complete=updated.is_complete,
        reasoning=decision.reasoning,
    )
