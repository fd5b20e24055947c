# tests/test_config.py
from pathlib import Path

from interviewer.config import EnvironmentType, Settings

_KEYS = (
    "APP_NAME",
    "ENVIRONMENT",
    "LOG_LEVEL",
    "OPENAI_API_KEY",
    "AI_MODEL",
    "MAX_QUESTIONS",
    "MAX_FOLLOWUPS",
    "SESSION_STORE_DIR",
)


def test_settings_defaults(monkeypatch):
    """Test default settings values."""
    for key in _KEYS:
        monkeypatch.delenv(key, raising=False)
    settings = Settings(_env_file=None)
    assert settings.APP_NAME == "Adaptive Interviewer"
    assert settings.ENVIRONMENT == EnvironmentType.DEVELOPMENT
    assert settings.AI_MODEL == "gpt-4o-mini"
    assert settings.AI_MAX_RETRIES == 0
    assert settings.MAX_QUESTIONS == 7
    assert settings.MAX_FOLLOWUPS == 2
    assert settings.OPENAI_API_KEY is None
    assert settings.SESSION_STORE_DIR is None


def test_settings_environment_override(settings):
    """Test environment variable overrides."""
    assert settings.APP_NAME == "Interviewer Test"
    assert settings.ENVIRONMENT == EnvironmentType.TESTING
    assert settings.MAX_QUESTIONS == 3


def test_settings_read_dotenv_file(tmp_path, monkeypatch):
    for key in _KEYS:
        monkeypatch.delenv(key, raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text(
        "MAX_FOLLOWUPS=0\nSESSION_STORE_DIR=/tmp/sessions\nmax_questions=99\n",
        encoding="utf-8",
    )
    settings = Settings(_env_file=env_file)
    assert settings.MAX_FOLLOWUPS == 0
    assert settings.SESSION_STORE_DIR == Path("/tmp/sessions")
    # names are case-sensitive
    assert settings.MAX_QUESTIONS == 7
