# tests/test_llm_openai.py
from types import SimpleNamespace

import pytest
from openai import OpenAIError

from interviewer.config import Settings
from interviewer.errors import OracleUnavailable
from interviewer.models import LLMSettings
from interviewer.services.llm_openai import OpenAILLMClient


class FakeCompletions:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.kwargs = None

    def create(self, **kwargs):
        self.kwargs = kwargs
        if self.error:
            raise self.error
        return self.result


def make_client(settings, completions):
    client = OpenAILLMClient(api_key="sk-test", settings=settings)
    client.client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return client


def test_chat_maps_text_and_usage(settings):
    completions = FakeCompletions(
        result=SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content='{"question": "Q1"}'))],
            usage=SimpleNamespace(prompt_tokens=120, completion_tokens=15),
            model="gpt-4o-mini-2024-07-18",
        )
    )
    client = make_client(settings, completions)

    text, meta = client.chat(
        [{"role": "user", "content": "hi"}],
        LLMSettings(model="gpt-4o-mini", max_tokens=300),
        system="You are an interviewer.",
    )

    assert text == '{"question": "Q1"}'
    assert meta == {"model": "gpt-4o-mini-2024-07-18", "tokens_in": 120, "tokens_out": 15}
    assert completions.kwargs["messages"][0] == {
        "role": "system",
        "content": "You are an interviewer.",
    }
    assert completions.kwargs["max_tokens"] == 300
    assert "response_format" not in completions.kwargs


def test_chat_without_usage(settings):
    completions = FakeCompletions(
        result=SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=None))],
            usage=None,
            model="m",
        )
    )
    text, meta = make_client(settings, completions).chat([], LLMSettings(model="m"))
    assert text == ""
    assert meta["tokens_in"] == 0


def test_sdk_errors_become_oracle_unavailable(settings):
    client = make_client(settings, FakeCompletions(error=OpenAIError("rate limited")))
    with pytest.raises(OracleUnavailable):
        client.chat([{"role": "user", "content": "hi"}], LLMSettings(model="m"))


def test_missing_api_key(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    with pytest.raises(RuntimeError):
        OpenAILLMClient(settings=Settings(_env_file=None))
