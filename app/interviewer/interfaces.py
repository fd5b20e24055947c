"""
Abstractions for pluggable services. Inversion of control: the controller
depends on these protocols, not on concrete services. Enables fakes in tests
and future swaps (another LLM provider, a database-backed session store).

Common protocols:
- LLMClient.chat(messages, settings) -> (reply, meta)
- PromptFactory: builds system/user prompts per oracle call
- SessionRepository.get(id) / put(id, session), whole-record replace
- SecurityGuard: input validation and prompt sanitizing

Testing: Use simple fake implementations to test the controller without network calls.
"""

from __future__ import annotations
from typing import Optional, Protocol, Sequence

from .models import (
    InterviewAnswer,
    InterviewBlueprint,
    InterviewContext,
    InterviewSession,
    LLMSettings,
)


class LLMClient(Protocol):
    def chat(
        self,
        messages: list[dict[str, str]],
        settings: LLMSettings,
        system: Optional[str] = None,
    ) -> tuple[str, dict]: ...


class PromptFactory(Protocol):
    def build_interviewer_system(self, *, role: str) -> str: ...

    def main_question_instruction(
        self,
        *,
        context: InterviewContext,
        history: Sequence[InterviewAnswer],
        question_number: int,
        total_questions: int,
        blueprint: Optional[InterviewBlueprint] = None,
    ) -> str: ...

    def followup_instruction(
        self,
        *,
        context: InterviewContext,
        history: Sequence[InterviewAnswer],
        last_answer: str,
        blueprint: Optional[InterviewBlueprint] = None,
    ) -> str: ...

    def build_evaluation_system(self, *, role: str) -> str: ...

    def evaluation_instruction(
        self,
        *,
        context: InterviewContext,
        history: Sequence[InterviewAnswer],
        blueprint: Optional[InterviewBlueprint] = None,
    ) -> str: ...

    def build_profile_system(self) -> str: ...

    def profile_instruction(self, *, context: InterviewContext) -> str: ...

    def question_bank_instruction(
        self, *, context: InterviewContext, count: int
    ) -> str: ...

    def assemble(self, *, system: str, user_text: str) -> list[dict[str, str]]: ...


class SessionRepository(Protocol):
    def get(self, session_id: str) -> Optional[InterviewSession]: ...

    def put(self, session_id: str, session: InterviewSession) -> None: ...


class SecurityGuard(Protocol):
    def require_context(
        self, job_description: object, resume: object, role_title: object
    ) -> InterviewContext: ...

    def validate_answer(self, text: object) -> str: ...

    def sanitize_for_prompt(self, text: str) -> str: ...

    def redact_pii(self, text: str) -> tuple[str, list[str]]: ...
