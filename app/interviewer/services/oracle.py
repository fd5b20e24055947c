"""
Purpose: Question oracle adapter. Turns interview context into one LLM call
and the reply text into a typed OracleDecision.

Every round trip resolves to an OracleReply tagged ok / malformed /
unavailable. The decision inside is always usable: on any failure it is the
deterministic fallback for the context that was asked, so the state machine
never sees an error.

Fallbacks:
- follow-up context -> no question, no follow-up (skip the follow-up)
- main context      -> templated role question, or no question once the
                       main-question budget is already used up

Testing: FakeLLM replies (prose, fences, wrong types) and raised errors.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Optional, Sequence

import structlog

from ..errors import OracleMalformedOutput, OracleUnavailable
from ..interfaces import LLMClient, PromptFactory
from ..models import (
    InterviewAnswer,
    InterviewBlueprint,
    InterviewContext,
    InterviewSession,
    LLMSettings,
    OracleDecision,
    OracleReply,
    ReplyStatus,
)
from ..prompts import DefaultPromptFactory
from ..utils.llm_json import find_object

logger = structlog.get_logger(__name__)

FALLBACK_REASONING = "Fallback due to AI error"


@dataclass(frozen=True)
class DecisionContext:
    context: InterviewContext
    session: InterviewSession
    solicit_followup: bool
    last_answer: Optional[str] = None
    blueprint: Optional[InterviewBlueprint] = None

    @property
    def history(self) -> Sequence[InterviewAnswer]:
        return self.session.conversation_history


def fallback_decision(ctx: DecisionContext) -> OracleDecision:
    if ctx.solicit_followup:
        return OracleDecision(
            question=None, wants_followup=False, reasoning=FALLBACK_REASONING
        )
    session = ctx.session
    if session.current_question_index >= session.max_questions:
        return OracleDecision(question=None, reasoning=FALLBACK_REASONING)
    return OracleDecision(
        question=(
            "Tell me about your experience relevant to this "
            f"{ctx.context.role_title} role."
        ),
        wants_followup=False,
        reasoning=FALLBACK_REASONING,
    )


def parse_decision(obj: Any, *, solicit_followup: bool) -> OracleDecision:
    """Validate field types of a decoded reply object."""
    if not isinstance(obj, dict):
        raise OracleMalformedOutput("reply is not a JSON object")

    raw_q = obj.get("question")
    question = raw_q.strip() if isinstance(raw_q, str) and raw_q.strip() else None

    raw_wants = obj.get("wantsFollowUp", obj.get("wants_followup"))
    if isinstance(raw_wants, bool):
        wants = raw_wants
    elif raw_wants is None:
        wants = solicit_followup and question is not None
    else:
        raise OracleMalformedOutput(
            f"wantsFollowUp must be a boolean, got {type(raw_wants).__name__}"
        )

    raw_reason = obj.get("reasoning")
    reasoning = raw_reason if isinstance(raw_reason, str) else None

    return OracleDecision(question=question, wants_followup=wants, reasoning=reasoning)


class QuestionOracle:
    def __init__(
        self,
        llm: LLMClient,
        *,
        prompts: Optional[PromptFactory] = None,
        settings: Optional[LLMSettings] = None,
    ):
        self.llm = llm
        self.prompts: PromptFactory = prompts or DefaultPromptFactory()
        self.settings = settings or LLMSettings(
            model="gpt-4o-mini", temperature=0.4, top_p=1.0, max_tokens=300
        )
        self.last_meta: dict = {}

    def _build_messages(self, ctx: DecisionContext) -> list:
        system = self.prompts.build_interviewer_system(role=ctx.context.role_title)
        if ctx.solicit_followup:
            user = self.prompts.followup_instruction(
                context=ctx.context,
                history=ctx.history,
                last_answer=ctx.last_answer or "",
                blueprint=ctx.blueprint,
            )
        else:
            user = self.prompts.main_question_instruction(
                context=ctx.context,
                history=ctx.history,
                question_number=ctx.session.current_question_index + 1,
                total_questions=ctx.session.max_questions,
                blueprint=ctx.blueprint,
            )
        return self.prompts.assemble(system=system, user_text=user)

    def request(self, ctx: DecisionContext) -> OracleReply:
        """One round trip, tagged with how it went."""
        self.last_meta = {}
        kind = "followup" if ctx.solicit_followup else "main"
        try:
            text, meta = self.llm.chat(self._build_messages(ctx), self.settings)
            self.last_meta = meta or {}
            obj = find_object(text)
            if obj is None:
                raise OracleMalformedOutput("no JSON object in reply")
            decision = parse_decision(obj, solicit_followup=ctx.solicit_followup)
        except OracleMalformedOutput as e:
            logger.warning("oracle_malformed_output", context=kind, error=str(e))
            return OracleReply(
                status=ReplyStatus.MALFORMED,
                decision=fallback_decision(ctx),
                error=str(e),
            )
        except OracleUnavailable as e:
            logger.warning("oracle_unavailable", context=kind, error=str(e))
            return OracleReply(
                status=ReplyStatus.UNAVAILABLE,
                decision=fallback_decision(ctx),
                error=str(e),
            )
        except Exception as e:
            # any other client failure counts as the service being unavailable
            logger.warning(
                "oracle_unavailable", context=kind, error=repr(e), exc_info=True
            )
            return OracleReply(
                status=ReplyStatus.UNAVAILABLE,
                decision=fallback_decision(ctx),
                error=repr(e),
            )

        logger.debug(
            "oracle_decision",
            context=kind,
            has_question=decision.has_question,
            wants_followup=decision.wants_followup,
        )
        return OracleReply(status=ReplyStatus.OK, decision=decision)

    def request_decision(self, ctx: DecisionContext) -> OracleDecision:
        return self.request(ctx).decision
