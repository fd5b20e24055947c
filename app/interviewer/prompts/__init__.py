"""Facade over the prompt modules, matching the PromptFactory protocol."""

from __future__ import annotations
from typing import Optional, Sequence

from ..models import InterviewAnswer, InterviewBlueprint, InterviewContext
from . import evaluation as _evaluation
from . import interview as _interview
from . import profile as _profile
from .common import assemble as _assemble


class DefaultPromptFactory:
    # INTERVIEW
    def build_interviewer_system(self, *, role: str) -> str:
        return _interview.build_interviewer_system(role=role)

    def main_question_instruction(
        self,
        *,
        context: InterviewContext,
        history: Sequence[InterviewAnswer],
        question_number: int,
        total_questions: int,
        blueprint: Optional[InterviewBlueprint] = None,
    ) -> str:
        return _interview.main_question_instruction(
            context=context,
            history=history,
            question_number=question_number,
            total_questions=total_questions,
            blueprint=blueprint,
        )

    def followup_instruction(
        self,
        *,
        context: InterviewContext,
        history: Sequence[InterviewAnswer],
        last_answer: str,
        blueprint: Optional[InterviewBlueprint] = None,
    ) -> str:
        return _interview.followup_instruction(
            context=context,
            history=history,
            last_answer=last_answer,
            blueprint=blueprint,
        )

    # EVALUATION
    def build_evaluation_system(self, *, role: str) -> str:
        return _evaluation.build_evaluation_system(role=role)

    def evaluation_instruction(
        self,
        *,
        context: InterviewContext,
        history: Sequence[InterviewAnswer],
        blueprint: Optional[InterviewBlueprint] = None,
    ) -> str:
        return _evaluation.evaluation_instruction(
            context=context, history=history, blueprint=blueprint
        )

    # PROFILE ANALYSIS
    def build_profile_system(self) -> str:
        return _profile.build_profile_system()

    def profile_instruction(self, *, context: InterviewContext) -> str:
        return _profile.profile_instruction(context=context)

    def question_bank_instruction(
        self, *, context: InterviewContext, count: int
    ) -> str:
        return _profile.question_bank_instruction(context=context, count=count)

    def assemble(self, *, system: str, user_text: str) -> list[dict[str, str]]:
        return _assemble(system=system, user_text=user_text)
