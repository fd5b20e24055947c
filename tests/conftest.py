# tests/conftest.py
import json
import os

import pytest
import structlog

from interviewer.config import Settings
from interviewer.controller import InterviewSessionController
from interviewer.models import (
    InterviewAnswer,
    InterviewContext,
    InterviewPhase,
    InterviewSession,
    QuestionType,
)

JOB_DESCRIPTION = "We need a backend engineer who knows Python, PostgreSQL and AWS."
RESUME = "Five years of Python. Built payment APIs on AWS. Contact: jane@example.com"
ROLE = "Backend Engineer"


class FakeLLM:
    """
    Scripted LLMClient. Each reply is either text (returned as is), a dict/list
    (returned as JSON text) or an exception instance (raised).
    """

    def __init__(self, *replies, model="fake-model", tokens=(10, 5)):
        self.replies = list(replies)
        self.calls = []
        self.model = model
        self.tokens = tokens

    def chat(self, messages, settings, system=None):
        self.calls.append({"messages": messages, "settings": settings})
        if not self.replies:
            raise AssertionError("FakeLLM ran out of scripted replies")
        reply = self.replies.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        if not isinstance(reply, str):
            reply = json.dumps(reply)
        return reply, {
            "model": self.model,
            "tokens_in": self.tokens[0],
            "tokens_out": self.tokens[1],
        }

    def user_prompt(self, i=-1):
        return self.calls[i]["messages"][-1]["content"]


@pytest.fixture
def test_env_vars():
    """Set up test environment variables."""
    os.environ["ENVIRONMENT"] = "testing"
    os.environ["APP_NAME"] = "Interviewer Test"
    os.environ["MAX_QUESTIONS"] = "3"
    yield
    # Clean up
    os.environ.pop("ENVIRONMENT", None)
    os.environ.pop("APP_NAME", None)
    os.environ.pop("MAX_QUESTIONS", None)


@pytest.fixture
def settings(test_env_vars):
    """Test settings, without reading a local .env file."""
    return Settings(_env_file=None)


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()


@pytest.fixture
def context():
    return InterviewContext(job_description=JOB_DESCRIPTION, resume=RESUME, role_title=ROLE)


@pytest.fixture
def make_session():
    def _make(**overrides):
        fields = {
            "current_question_index": 0,
            "question_type": QuestionType.MAIN,
            "followup_count": 0,
            "max_questions": 3,
            "max_followups": 1,
            "interview_phase": InterviewPhase.IN_PROGRESS,
        }
        fields.update(overrides)
        return InterviewSession(**fields)

    return _make


@pytest.fixture
def make_answer():
    def _make(question="What did you build?", answer="A payments API.", **overrides):
        return InterviewAnswer(question=question, answer=answer, **overrides)

    return _make


@pytest.fixture
def fake_llm():
    return FakeLLM


@pytest.fixture
def controller_factory(settings):
    def _make(*replies, store=None):
        llm = FakeLLM(*replies)
        return InterviewSessionController(llm, store=store, settings=settings), llm

    return _make


@pytest.fixture
def job_context():
    return {"job_description": JOB_DESCRIPTION, "resume": RESUME, "role_title": ROLE}
