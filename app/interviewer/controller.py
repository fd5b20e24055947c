"""
Purpose: The single orchestration point for interview sessions.
It centralizes "one-turn" logic and the session lifecycle (start, advance,
record answer, evaluate) so the UI never needs to know how prompts, the LLM,
or the state machine work.

Key responsibilities:
- Validate client input (context fields, session payload) before any oracle call.
- Decide follow-up eligibility, ask the question oracle, feed the decision
  to the state machine.
- Echo completed sessions without calling the oracle.
- Serialize work per stored session and write back whole records.
- Run profile analysis and the final evaluation.
- Track token usage across calls.

Testing: Pure unit tests with a fake LLMClient; no network calls.
"""

from __future__ import annotations

import threading
import uuid
from contextlib import contextmanager
from typing import Any, Iterable, Iterator, Mapping, Optional, Union

import pydantic
import structlog

from .config import Settings, get_settings
from .errors import ValidationError
from .interfaces import LLMClient, PromptFactory, SecurityGuard, SessionRepository
from .models import (
    EvaluationResult,
    InterviewAnswer,
    InterviewBlueprint,
    InterviewSession,
    LLMSettings,
    NextQuestionResponse,
    ProfileAnalysis,
)
from .persistence.session_store import InMemorySessionStore
from .prompts import DefaultPromptFactory
from .services.evaluation import evaluate_transcript_llm
from .services.oracle import DecisionContext, QuestionOracle
from .services.profile_analyzer import analyze_profile_llm, fallback_blueprint
from .services.question_bank import generate_question_bank_llm
from .services.security import DefaultSecurity
from .session_state import create_initial_session, load_session, record_answer
from .state_machine import advance, followup_eligible, terminal_response

logger = structlog.get_logger(__name__)

SessionPayload = Union[InterviewSession, Mapping[str, Any], str, bytes]
BlueprintPayload = Union[InterviewBlueprint, Mapping[str, Any], None]


class InterviewSessionController:
    def __init__(
        self,
        llm: LLMClient,
        *,
        store: Optional[SessionRepository] = None,
        settings: Optional[Settings] = None,
    ):
        self.llm: LLMClient = llm
        self.settings: Settings = settings or get_settings()
        self.prompts: PromptFactory = DefaultPromptFactory()
        self.security: SecurityGuard = DefaultSecurity()
        self.store: SessionRepository = store or InMemorySessionStore()
        self.llm_settings = LLMSettings(
            model=self.settings.AI_MODEL,
            temperature=self.settings.AI_TEMPERATURE,
            top_p=1.0,
            max_tokens=300,
        )
        self.oracle = QuestionOracle(
            llm, prompts=self.prompts, settings=self.llm_settings
        )

        # session id -> [lock, holders]; dropped when the last holder leaves
        self._locks: dict[str, list] = {}
        self._locks_guard = threading.Lock()

        self.tokens_in: int = 0
        self.tokens_out: int = 0
        self.model_used: Optional[str] = None

    def is_ready(self) -> bool:
        """True if the controller is ready to run interviews (has an LLM)."""
        return self.llm is not None

    def reset(self) -> None:
        """Clear token counters."""
        self.tokens_in = self.tokens_out = 0
        self.model_used = None

    def _track(self, meta: Optional[dict]) -> None:
        meta = meta or {}
        self.tokens_in += int(meta.get("tokens_in", 0) or 0)
        self.tokens_out += int(meta.get("tokens_out", 0) or 0)
        if meta.get("model"):
            self.model_used = meta["model"]

    @contextmanager
    def _session_lock(self, session_id: str) -> Iterator[None]:
        with self._locks_guard:
            entry = self._locks.setdefault(session_id, [threading.Lock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._locks_guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[session_id]

    # ---------------------------
    # Input coercion
    # ---------------------------
    def _coerce_blueprint(self, blueprint: BlueprintPayload) -> Optional[InterviewBlueprint]:
        if blueprint is None or isinstance(blueprint, InterviewBlueprint):
            return blueprint
        try:
            return InterviewBlueprint.model_validate(blueprint)
        except pydantic.ValidationError as e:
            raise ValidationError(f"Invalid blueprint: {e}") from e

    def _coerce_last_answer(self, last_answer: Optional[str]) -> Optional[str]:
        if last_answer is None:
            return None
        if not isinstance(last_answer, str):
            raise ValidationError("last_answer must be text.")
        return self.security.sanitize_for_prompt(last_answer) or None

    def _coerce_transcript(
        self, transcript: Iterable[Union[InterviewAnswer, Mapping[str, Any]]]
    ) -> tuple[InterviewAnswer, ...]:
        try:
            return tuple(
                qa if isinstance(qa, InterviewAnswer) else InterviewAnswer.model_validate(qa)
                for qa in (transcript or ())
            )
        except (pydantic.ValidationError, TypeError) as e:
            raise ValidationError(f"Invalid transcript entry: {e}") from e

    # ---------------------------
    # Session lifecycle
    # ---------------------------
    def start_session(
        self,
        session_id: Optional[str] = None,
        *,
        max_questions: Optional[int] = None,
        max_followups: Optional[int] = None,
    ) -> tuple[str, InterviewSession]:
        """Create an initial session, store it, and return (session_id, session)."""
        session_id = session_id or uuid.uuid4().hex
        try:
            session = create_initial_session(
                max_questions=(
                    self.settings.MAX_QUESTIONS if max_questions is None else max_questions
                ),
                max_followups=(
                    self.settings.MAX_FOLLOWUPS if max_followups is None else max_followups
                ),
            )
        except pydantic.ValidationError as e:
            raise ValidationError(f"Invalid interview budgets: {e}") from e
        self.store.put(session_id, session)
        logger.info(
            "session_started",
            session_id=session_id,
            max_questions=session.max_questions,
            max_followups=session.max_followups,
        )
        return session_id, session

    def get_session(self, session_id: str) -> InterviewSession:
        session = self.store.get(session_id)
        if session is None:
            raise ValidationError(f"Unknown session: {session_id}")
        return session

    def advance_question(
        self,
        *,
        job_description: str,
        resume: str,
        role_title: str,
        session: SessionPayload,
        last_answer: Optional[str] = None,
        blueprint: BlueprintPayload = None,
    ) -> NextQuestionResponse:
        """
        Compute the next question for `session`.
        Pattern:
        Validates the context fields and the session payload (nothing is
        called or changed when they are invalid).
        A completed session is echoed back as is.
        Otherwise asks for a follow-up when eligible, falls back to a main
        question when the follow-up is declined, and applies the decision.
        """
        if session is None:
            raise ValidationError("Missing required field: interview_state")
        context = self.security.require_context(job_description, resume, role_title)
        current = load_session(session)
        answer = self._coerce_last_answer(last_answer)
        plan = self._coerce_blueprint(blueprint)

        if current.is_complete:
            logger.info("session_already_complete")
            return terminal_response(current)

        solicit = followup_eligible(current, answer)
        ctx = DecisionContext(
            context=context,
            session=current,
            solicit_followup=solicit,
            last_answer=answer,
            blueprint=plan,
        )
        reply = self.oracle.request(ctx)
        self._track(self.oracle.last_meta)
        decision = reply.decision

        if solicit and not (decision.wants_followup and decision.has_question):
            logger.info("followup_skipped", status=reply.status.value)
            main_ctx = DecisionContext(
                context=context,
                session=current,
                solicit_followup=False,
                last_answer=answer,
                blueprint=plan,
            )
            reply = self.oracle.request(main_ctx)
            self._track(self.oracle.last_meta)
            decision = reply.decision

        updated, response = advance(current, answer, decision)
        logger.info(
            "session_advanced",
            oracle_status=reply.status.value,
            question_type=updated.question_type.value,
            question_index=updated.current_question_index,
            followup_count=updated.followup_count,
            phase=updated.interview_phase.value,
        )
        return response

    def advance_stored(
        self,
        session_id: str,
        *,
        job_description: str,
        resume: str,
        role_title: str,
        last_answer: Optional[str] = None,
        blueprint: BlueprintPayload = None,
    ) -> NextQuestionResponse:
        """advance_question against the repository, one request per session at a time."""
        with self._session_lock(session_id), structlog.contextvars.bound_contextvars(
            session_id=session_id
        ):
            session = self.get_session(session_id)
            response = self.advance_question(
                job_description=job_description,
                resume=resume,
                role_title=role_title,
                session=session,
                last_answer=last_answer,
                blueprint=blueprint,
            )
            if response.updated_session != session:
                self.store.put(session_id, response.updated_session)
            return response

    def record_answer(
        self, session_id: str, question: str, answer: str
    ) -> InterviewSession:
        """Append the candidate's answer to the stored session's transcript."""
        text = self.security.validate_answer(answer)
        if not isinstance(question, str) or not question.strip():
            raise ValidationError("Missing the question being answered.")
        with self._session_lock(session_id):
            session = self.get_session(session_id)
            try:
                updated = record_answer(session, question.strip(), text)
            except ValidationError as e:
                logger.info("answer_rejected", session_id=session_id, error=str(e))
                raise
            self.store.put(session_id, updated)
        logger.info(
            "answer_recorded",
            session_id=session_id,
            turns=len(updated.conversation_history),
        )
        return updated

    # ---------------------------
    # Oracle-backed one-shot operations
    # ---------------------------
    def evaluate(
        self,
        transcript: Iterable[Union[InterviewAnswer, Mapping[str, Any]]],
        *,
        job_description: str,
        resume: str,
        role_title: str,
        blueprint: BlueprintPayload = None,
    ) -> EvaluationResult:
        """
        Score the whole transcript. Raises ValidationError for missing context
        or an empty transcript; oracle problems give the fallback report.
        """
        context = self.security.require_context(job_description, resume, role_title)
        history = self._coerce_transcript(transcript)
        if not history:
            raise ValidationError("Cannot evaluate an empty transcript.")
        result, meta = evaluate_transcript_llm(
            llm=self.llm,
            prompts=self.prompts,
            settings=self.llm_settings,
            history=history,
            context=context,
            blueprint=self._coerce_blueprint(blueprint),
        )
        self._track(meta)
        return result

    def analyze_profile(
        self, job_description: str, resume: str, role_title: str
    ) -> ProfileAnalysis:
        """Always returns a usable blueprint; success=False means it is the fallback."""
        try:
            context = self.security.require_context(job_description, resume, role_title)
        except ValidationError as e:
            logger.info("profile_analysis_rejected", error=str(e))
            return ProfileAnalysis(success=False, blueprint=fallback_blueprint())

        blueprint, success, meta = analyze_profile_llm(
            llm=self.llm,
            prompts=self.prompts,
            settings=self.llm_settings,
            context=context,
        )
        self._track(meta)
        return ProfileAnalysis(success=success, blueprint=blueprint)

    def generate_question_bank(
        self,
        job_description: str,
        resume: str,
        role_title: str,
        *,
        count: Optional[int] = None,
    ) -> list[str]:
        """Static-mode question list; falls back to generic questions."""
        context = self.security.require_context(job_description, resume, role_title)
        questions, meta = generate_question_bank_llm(
            llm=self.llm,
            prompts=self.prompts,
            settings=self.llm_settings,
            context=context,
            count=count or self.settings.MAX_QUESTIONS,
        )
        self._track(meta)
        return questions
