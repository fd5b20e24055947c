"""Interview prompts: next main question and follow-up decision."""

from __future__ import annotations
from textwrap import dedent
from typing import Optional, Sequence

from ..models import InterviewAnswer, InterviewBlueprint, InterviewContext
from .common import blueprint_hint_block, context_block, render_transcript


def build_interviewer_system(*, role: str) -> str:
    return (
        f"You are a senior {role} interviewer running a structured interview.\n"
        "Rules:\n"
        "- Ask exactly ONE specific question at a time.\n"
        "- No preamble, no explanations, no bullet lists.\n"
        "- Keep each question under 40 words.\n"
        "- Anchor questions in the job description, the resume and prior answers.\n"
        "- When asked to return JSON, return EXACTLY one JSON object and nothing else."
    )


def main_question_instruction(
    *,
    context: InterviewContext,
    history: Sequence[InterviewAnswer],
    question_number: int,
    total_questions: int,
    blueprint: Optional[InterviewBlueprint] = None,
) -> str:
    hints = blueprint_hint_block(blueprint)
    return dedent(
        f"""\
{context_block(context)}

{hints}

Interview so far:
{render_transcript(history)}

Generate question {question_number} of {total_questions}.
Do not repeat a topic already covered above.
If the interview has covered enough ground, set "question" to null to end it.

Return STRICT JSON:
{{
  "question": "<string or null>",
  "reasoning": "<one short sentence>"
}}"""
    )


def followup_instruction(
    *,
    context: InterviewContext,
    history: Sequence[InterviewAnswer],
    last_answer: str,
    blueprint: Optional[InterviewBlueprint] = None,
) -> str:
    hints = blueprint_hint_block(blueprint)
    return dedent(
        f"""\
{context_block(context)}

{hints}

Interview so far:
{render_transcript(history)}

Last answer:
\"\"\"{last_answer.strip()}\"\"\"

Decide if a follow-up question is needed.
- Follow up if the answer was vague, incomplete, or mentioned something worth probing.
- Skip the follow-up if the answer was comprehensive and clear.

Return STRICT JSON:
{{
  "wantsFollowUp": <true|false>,
  "question": "<follow-up question, or null when wantsFollowUp is false>",
  "reasoning": "<one short sentence>"
}}"""
    )
