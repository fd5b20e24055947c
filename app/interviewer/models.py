"""
Canonical data shapes, shared truth for typing/validation between layers.

Typical contents:
- LLMSettings (model, temperature, top_p, max_tokens).
- InterviewSession / InterviewAnswer: the persisted progression record.
- InterviewBlueprint, OracleDecision, EvaluationResult: oracle artifacts.

Session records are frozen pydantic models: the state machine returns new
values instead of mutating, and a payload that fails validation is rejected.

Testing: Mostly types. Validators are covered by test_session_state.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class QuestionType(str, Enum):
    MAIN = "main"
    FOLLOWUP = "followup"


class InterviewPhase(str, Enum):
    INITIALIZING = "initializing"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"

    @property
    def rank(self) -> int:
        return _PHASE_ORDER.index(self)


_PHASE_ORDER = [
    InterviewPhase.INITIALIZING,
    InterviewPhase.IN_PROGRESS,
    InterviewPhase.COMPLETED,
]


class Verdict(str, Enum):
    FIT = "Fit"
    MAYBE = "Maybe"
    REJECT = "Reject"


class ReplyStatus(str, Enum):
    OK = "ok"
    MALFORMED = "malformed"
    UNAVAILABLE = "unavailable"


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class InterviewAnswer(_Record):
    question: str
    answer: str
    timestamp: str = Field(default_factory=utc_timestamp)
    question_id: Optional[str] = None
    question_type: QuestionType = QuestionType.MAIN
    # set only for follow-ups: the index of the main question they hang off
    main_question_index: Optional[int] = Field(default=None, ge=0)


class InterviewSession(_Record):
    current_question_index: int = Field(default=0, ge=0)
    question_type: QuestionType = QuestionType.MAIN
    followup_count: int = Field(default=0, ge=0)
    max_questions: int = Field(default=7, ge=1)
    max_followups: int = Field(default=2, ge=0)
    interview_phase: InterviewPhase = InterviewPhase.INITIALIZING
    current_question_id: Optional[str] = None
    question_sequence: int = Field(default=0, ge=0)
    conversation_history: tuple[InterviewAnswer, ...] = ()

    @model_validator(mode="after")
    def _check_budgets(self) -> "InterviewSession":
        if self.followup_count > self.max_followups:
            raise ValueError(
                f"followup_count {self.followup_count} exceeds "
                f"max_followups {self.max_followups}"
            )
        if self.question_type == QuestionType.FOLLOWUP and self.followup_count == 0:
            raise ValueError("a follow-up question requires followup_count >= 1")
        return self

    @property
    def is_complete(self) -> bool:
        return self.interview_phase == InterviewPhase.COMPLETED


class InterviewBlueprint(_Record):
    key_skills: list[str]
    skill_gaps: list[str]
    notable_projects: list[str]
    focus_areas: list[str]
    suggested_question_themes: list[str]


class OracleDecision(_Record):
    question: Optional[str] = None
    wants_followup: bool = False
    reasoning: Optional[str] = None

    @property
    def has_question(self) -> bool:
        return bool((self.question or "").strip())


class OracleReply(_Record):
    status: ReplyStatus
    decision: OracleDecision
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.status == ReplyStatus.OK


class NextQuestionResponse(_Record):
    question: Optional[str]
    question_id: str
    question_type: QuestionType
    updated_session: InterviewSession
    interview_complete: bool
    reasoning: Optional[str] = None


class EvaluationResult(_Record):
    alignment_percentage: float = Field(ge=0, le=100)
    technical_score: float = Field(ge=0, le=10)
    problem_solving_score: float = Field(ge=0, le=10)
    communication_score: float = Field(ge=0, le=10)
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    final_verdict: Verdict = Verdict.MAYBE
    summary: str = ""


class ProfileAnalysis(_Record):
    success: bool
    blueprint: InterviewBlueprint


class InterviewContext(_Record):
    job_description: str
    resume: str
    role_title: str


@dataclass
class LLMSettings:
    model: str
    temperature: float = 0.7
    top_p: float = 1.0
    max_tokens: int = 512
    frequency_penalty: float = 0.0
    presence_penalty: float = 0.0
    response_format: Optional[dict] = None
