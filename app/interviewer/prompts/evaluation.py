"""Evaluation prompts: one holistic scoring request over the full transcript."""

from __future__ import annotations
from textwrap import dedent
from typing import Optional, Sequence

from ..models import InterviewAnswer, InterviewBlueprint, InterviewContext
from .common import blueprint_hint_block, context_block, render_transcript


def build_evaluation_system(*, role: str) -> str:
    return (
        f"You are a senior interviewer evaluating a candidate for a {role} role.\n"
        "Use the interview transcript as the primary evidence.\n\n"
        "Rules:\n"
        "- Be objective and concise.\n"
        "- Never invent facts absent from the candidate's answers.\n"
        "- Follow-up answers refine the main answer they belong to.\n"
        "- When asked to return JSON, return EXACTLY one JSON object and nothing else."
    )


def evaluation_instruction(
    *,
    context: InterviewContext,
    history: Sequence[InterviewAnswer],
    blueprint: Optional[InterviewBlueprint] = None,
) -> str:
    return dedent(
        f"""\
{context_block(context)}

{blueprint_hint_block(blueprint)}

Interview Transcript:
{render_transcript(history)}

Score the candidate against the job description.
- alignment_percentage: 0 to 100
- technical_score, problem_solving_score, communication_score: 0 to 10
- final_verdict: one of "Fit", "Maybe", "Reject"

Return STRICT JSON only:
{{
  "alignment_percentage": 0,
  "technical_score": 0,
  "problem_solving_score": 0,
  "communication_score": 0,
  "strengths": ["<short strings>"],
  "weaknesses": ["<short strings>"],
  "final_verdict": "Fit" | "Maybe" | "Reject",
  "summary": "<3 to 5 sentences>"
}}"""
    )
