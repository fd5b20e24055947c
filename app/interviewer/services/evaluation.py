"""
Purpose: Score a finished interview. One holistic request over the whole
transcript, then a sanitizing pass so the report is always renderable.

Sanitizing rules:
- numbers are clamped to their range; non-numeric values become the lower bound
- strengths/weaknesses: a list of non-blank strings, anything else dropped
- verdict outside Fit/Maybe/Reject becomes Maybe
- summary that is not a string becomes a fixed placeholder

Testing: Malformed replies of every shape; the report must still validate.
"""

from __future__ import annotations

import math
from typing import Any, Optional, Sequence

import structlog

from ..errors import OracleMalformedOutput, OracleUnavailable, ValidationError
from ..interfaces import LLMClient, PromptFactory
from ..models import (
    EvaluationResult,
    InterviewAnswer,
    InterviewBlueprint,
    InterviewContext,
    LLMSettings,
    Verdict,
)
from ..utils.llm_json import find_object

logger = structlog.get_logger(__name__)

SUMMARY_PLACEHOLDER = "Evaluation completed."

_RANGES = {
    "alignment_percentage": (0.0, 100.0),
    "technical_score": (0.0, 10.0),
    "problem_solving_score": (0.0, 10.0),
    "communication_score": (0.0, 10.0),
}


def _clamp(value: Any, lo: float, hi: float) -> float:
    if isinstance(value, bool):
        return lo
    try:
        num = float(value)
    except (TypeError, ValueError):
        return lo
    if math.isnan(num):
        return lo
    return max(lo, min(hi, num))


def _to_str_list(x: Any) -> list[str]:
    """Keep the non-blank string items of a list; anything else gives []."""
    if not isinstance(x, list):
        return []
    out = []
    for item in x:
        if isinstance(item, str):
            item = item.strip()
            if item:
                out.append(item)
    return out


def sanitize_evaluation(obj: Any) -> EvaluationResult:
    data = obj if isinstance(obj, dict) else {}
    scores = {name: _clamp(data.get(name), lo, hi) for name, (lo, hi) in _RANGES.items()}

    verdict_raw = data.get("final_verdict")
    try:
        verdict = Verdict(verdict_raw) if isinstance(verdict_raw, str) else Verdict.MAYBE
    except ValueError:
        verdict = Verdict.MAYBE

    summary = data.get("summary")
    return EvaluationResult(
        **scores,
        strengths=_to_str_list(data.get("strengths")),
        weaknesses=_to_str_list(data.get("weaknesses")),
        final_verdict=verdict,
        summary=summary if isinstance(summary, str) else SUMMARY_PLACEHOLDER,
    )


def fallback_evaluation(answer_count: int) -> EvaluationResult:
    return EvaluationResult(
        alignment_percentage=65,
        technical_score=7,
        problem_solving_score=6,
        communication_score=7,
        strengths=["Completed interview", "Engaged in discussion"],
        weaknesses=["Automated evaluation incomplete"],
        final_verdict=Verdict.MAYBE,
        summary=(
            f"The candidate answered {answer_count} questions. "
            "Manual review is recommended."
        ),
    )


def evaluate_transcript_llm(
    *,
    llm: LLMClient,
    prompts: PromptFactory,
    settings: LLMSettings,
    history: Sequence[InterviewAnswer],
    context: InterviewContext,
    blueprint: Optional[InterviewBlueprint] = None,
) -> tuple[EvaluationResult, dict]:
    """Return (EvaluationResult, meta) for the full transcript."""
    if not history:
        raise ValidationError("Cannot evaluate an empty transcript.")

    system = prompts.build_evaluation_system(role=context.role_title)
    user_msg = prompts.evaluation_instruction(
        context=context, history=history, blueprint=blueprint
    )
    messages = prompts.assemble(system=system, user_text=user_msg)

    eval_settings = LLMSettings(
        model=settings.model,
        temperature=min(settings.temperature, 0.3),
        top_p=settings.top_p,
        max_tokens=max(700, settings.max_tokens or 700),
    )

    meta: dict = {"tokens_in": 0, "tokens_out": 0}
    try:
        text, meta = llm.chat(messages, eval_settings)
        obj = find_object(text)
        if obj is None:
            raise OracleMalformedOutput("no JSON object in evaluation reply")
    except (OracleUnavailable, OracleMalformedOutput) as e:
        logger.warning("evaluation_fallback", error=str(e), answers=len(history))
        return fallback_evaluation(len(history)), meta or {}
    except Exception as e:
        logger.warning(
            "evaluation_fallback", error=repr(e), answers=len(history), exc_info=True
        )
        return fallback_evaluation(len(history)), meta or {}

    result = sanitize_evaluation(obj)
    logger.info(
        "evaluation_ready",
        verdict=result.final_verdict.value,
        alignment=result.alignment_percentage,
        answers=len(history),
    )
    return result, meta or {}
