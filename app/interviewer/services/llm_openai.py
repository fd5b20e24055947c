"""
Purpose: Thin client wrapper around OpenAI (or other LLMs later).
One place for auth, transport options, response/usage normalization.

Retries are left to the SDK (`max_retries`, default 0 from settings): every
oracle decision is a single round trip and failures go to the fallback path.

Testing: Mock SDK calls; assert it maps usage and errors correctly.
"""

from __future__ import annotations
from typing import Optional

import structlog
from openai import OpenAI, OpenAIError

from ..config import Settings, get_settings
from ..errors import OracleUnavailable
from ..models import LLMSettings

logger = structlog.get_logger(__name__)


class OpenAILLMClient:
    def __init__(
        self, api_key: Optional[str] = None, *, settings: Optional[Settings] = None
    ):
        settings = settings or get_settings()
        self.api_key = api_key or settings.OPENAI_API_KEY
        if not self.api_key:
            raise RuntimeError("Missing OPENAI_API_KEY")
        try:
            self.client = OpenAI(
                api_key=self.api_key,
                max_retries=settings.AI_MAX_RETRIES,
                timeout=settings.AI_TIMEOUT_SECONDS,
            )
        except OpenAIError as e:
            raise RuntimeError(f"Failed to initialize OpenAI client: {e}") from e

    def chat(
        self,
        messages: list[dict[str, str]],
        settings: LLMSettings,
        system: Optional[str] = None,
    ) -> tuple[str, dict]:
        payload = []
        if system:
            payload.append({"role": "system", "content": system})
        payload.extend(messages)

        kwargs = {}
        if settings.response_format:
            kwargs["response_format"] = settings.response_format

        try:
            cc = self.client.chat.completions.create(
                model=settings.model,
                messages=payload,
                temperature=settings.temperature,
                top_p=settings.top_p,
                max_tokens=settings.max_tokens,
                frequency_penalty=settings.frequency_penalty,
                presence_penalty=settings.presence_penalty,
                **kwargs,
            )
        except OpenAIError as e:
            logger.warning("openai_call_failed", model=settings.model, error=str(e))
            raise OracleUnavailable(str(e)) from e

        text = cc.choices[0].message.content or ""
        usage = getattr(cc, "usage", None)
        tokens_in = getattr(usage, "prompt_tokens", 0) if usage else 0
        tokens_out = getattr(usage, "completion_tokens", 0) if usage else 0
        return text, {
            "model": cc.model,
            "tokens_in": tokens_in,
            "tokens_out": tokens_out,
        }
