"""Shared prompt helpers used across prompt modules."""

from __future__ import annotations
from typing import Optional, Sequence

from ..models import (
    InterviewAnswer,
    InterviewBlueprint,
    InterviewContext,
    QuestionType,
)

JD_MAX_CHARS = 6000
RESUME_MAX_CHARS = 6000


def _clip_text(s: str, max_chars: int) -> str:
    """Clip text to max_chars, adding ellipsis if clipped."""
    if len(s) <= max_chars:
        return s
    return s[: max_chars - 1].rstrip() + "…"


def render_transcript(
    history: Sequence[InterviewAnswer], *, empty: str = "No questions yet."
) -> str:
    """
    Render answered turns as numbered Q/A pairs. Follow-ups are labelled so
    the model can tell a clarification from a new topic.
    """
    lines: list[str] = []
    for i, qa in enumerate(history, start=1):
        label = " (Follow-up)" if qa.question_type == QuestionType.FOLLOWUP else ""
        lines.append(f"Q{i}{label}: {qa.question}\nA{i}: {qa.answer}")
    return "\n\n".join(lines) if lines else empty


def blueprint_hint_block(blueprint: Optional[InterviewBlueprint]) -> str:
    if blueprint is None:
        return ""
    parts = []
    if blueprint.focus_areas:
        parts.append(f"Focus Areas: {', '.join(blueprint.focus_areas)}")
    if blueprint.skill_gaps:
        parts.append(f"Possible Gaps: {', '.join(blueprint.skill_gaps)}")
    if blueprint.suggested_question_themes:
        parts.append(
            f"Suggested Themes: {', '.join(blueprint.suggested_question_themes)}"
        )
    return "\n".join(parts)


def context_block(context: InterviewContext) -> str:
    return (
        f"Job Description:\n{_clip_text(context.job_description, JD_MAX_CHARS)}\n\n"
        f"Candidate Resume:\n{_clip_text(context.resume, RESUME_MAX_CHARS)}"
    )


def assemble(*, system: str, user_text: str) -> list[dict[str, str]]:
    return [
        {"role": "system", "content": system},
        {"role": "user", "content": user_text},
    ]
