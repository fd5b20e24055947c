"""Profile analysis and question bank prompts."""

from __future__ import annotations
from textwrap import dedent

from ..models import InterviewContext
from .common import context_block


def build_profile_system() -> str:
    return (
        "You are an expert technical recruiter. Your task is to compare a "
        "candidate resume against a job description and plan the interview.\n"
        "Be conservative and return only the JSON object requested."
    )


def profile_instruction(*, context: InterviewContext) -> str:
    return dedent(
        f"""\
Analyze the candidate for a {context.role_title} role.

{context_block(context)}

- key_skills: skills the resume demonstrates that the role needs
- skill_gaps: requirements the resume does not clearly cover
- notable_projects: resume projects worth probing
- focus_areas: what the interview should concentrate on
- suggested_question_themes: short topic labels for questions

Return STRICT JSON only:
{{
  "key_skills": ["<strings>"],
  "skill_gaps": ["<strings>"],
  "notable_projects": ["<strings>"],
  "focus_areas": ["<strings>"],
  "suggested_question_themes": ["<strings>"]
}}"""
    )


def question_bank_instruction(*, context: InterviewContext, count: int) -> str:
    return dedent(
        f"""\
Generate {count} interview questions for a {context.role_title} position.

{context_block(context)}

The questions should:
1. Assess technical skills relevant to the role
2. Evaluate problem-solving abilities
3. Test domain knowledge based on the candidate's experience
4. Be specific to the resume and the job requirements

Return ONLY a JSON array of question strings:
["Question 1", "Question 2", "..."]"""
    )
