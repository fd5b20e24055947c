"""
Purpose: Guardrails for inputs and content.
Content: early, predictable failures before any oracle call; prevent
oversized requests and keep contact details out of prompts.
"""

import re

import structlog

from ..errors import ValidationError
from ..models import InterviewContext

logger = structlog.get_logger(__name__)

EMAIL = re.compile(r"[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}", re.I)
PHONE = re.compile(r"\+?\d[\d\s().-]{7,}\d")
SSN = re.compile(r"\b\d{3}-\d{2}-\d{4}\b")

MAX_ANSWER_CHARS = 8000
MAX_JD_CHARS = 15000
MAX_RESUME_CHARS = 15000
MAX_ROLE_CHARS = 200


class DefaultSecurity:
    def require_context(
        self, job_description: object, resume: object, role_title: object
    ) -> InterviewContext:
        """
        Validate the three required context fields and return them cleaned.
        Raises ValidationError naming every missing field.
        """
        fields = {
            "jobDescription": job_description,
            "resume": resume,
            "roleTitle": role_title,
        }
        missing = [
            name
            for name, value in fields.items()
            if not isinstance(value, str) or not value.strip()
        ]
        if missing:
            logger.info("context_rejected", missing=missing)
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        role = self.sanitize_for_prompt(role_title)
        if len(role) > MAX_ROLE_CHARS:
            raise ValidationError("Role title is too long.")

        resume_text, found = self.redact_pii(self.sanitize_for_prompt(resume))
        if found:
            logger.debug("resume_redacted", kinds=found)

        return InterviewContext(
            job_description=self.sanitize_for_prompt(job_description)[:MAX_JD_CHARS],
            resume=resume_text[:MAX_RESUME_CHARS],
            role_title=role,
        )

    def validate_answer(self, text: object) -> str:
        if not isinstance(text, str) or not text.strip():
            raise ValidationError("Please provide an answer before proceeding.")
        if len(text) > MAX_ANSWER_CHARS:
            raise ValidationError("Re-type your answer.\nYour answer is too long.")
        return self.sanitize_for_prompt(text)

    def sanitize_for_prompt(self, text: str) -> str:
        return (text or "").replace("\x00", "").strip()

    def redact_pii(self, text: str):
        found = []

        def _redact(rx, label):
            nonlocal text, found
            if rx.search(text):
                found.append(label)
                text = rx.sub(f"[{label}]", text)

        _redact(EMAIL, "EMAIL")
        _redact(SSN, "SSN")
        _redact(PHONE, "PHONE")
        return text, found
