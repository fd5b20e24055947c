"""
Purpose: Generate a fixed list of interview questions up front (static mode),
for sessions that run without per-turn oracle decisions.

Same extract/validate/fallback pattern as the other oracles: a reply without
a usable JSON array of strings yields the default question list.

Testing: FakeLLM replies; fallback list references the role title.
"""

from __future__ import annotations

import structlog

from ..errors import OracleUnavailable
from ..interfaces import LLMClient, PromptFactory
from ..models import InterviewContext, LLMSettings
from ..utils.llm_json import require_array

logger = structlog.get_logger(__name__)


def default_questions(role_title: str) -> list[str]:
    return [
        f"Tell me about your experience relevant to this {role_title} position.",
        "What technical challenges have you faced in your previous projects?",
        "How do you approach problem-solving in complex technical scenarios?",
        "Describe a project where you demonstrated strong technical skills.",
        "What interests you most about this role?",
    ]


def generate_question_bank_llm(
    *,
    llm: LLMClient,
    prompts: PromptFactory,
    settings: LLMSettings,
    context: InterviewContext,
    count: int = 5,
) -> tuple[list[str], dict]:
    """Return (questions, meta); questions is never empty."""
    system = prompts.build_interviewer_system(role=context.role_title)
    user = prompts.question_bank_instruction(context=context, count=count)
    bank_settings = LLMSettings(
        model=settings.model, temperature=0.6, top_p=1.0, max_tokens=800
    )

    meta: dict = {"tokens_in": 0, "tokens_out": 0}
    try:
        text, meta = llm.chat(
            prompts.assemble(system=system, user_text=user), bank_settings
        )
        items = require_array(text, err="Question bank reply is not a JSON array.")
    except (OracleUnavailable, ValueError) as e:
        logger.warning("question_bank_fallback", error=str(e))
        return default_questions(context.role_title), meta or {}
    except Exception as e:
        logger.warning("question_bank_fallback", error=repr(e), exc_info=True)
        return default_questions(context.role_title), meta or {}

    questions = [q.strip() for q in items if isinstance(q, str) and q.strip()]
    if not questions:
        logger.warning("question_bank_fallback", error="no usable questions")
        return default_questions(context.role_title), meta or {}
    return questions[:count], meta or {}
