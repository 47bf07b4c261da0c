from __future__ import annotations

import logging

import pytest

_ENV_VARS = (
    "GITBRAG_PROVIDER",
    "GITBRAG_MODEL",
    "GITBRAG_EMAIL",
    "GITBRAG_EMAILS",
    "GITBRAG_SINCE",
    "GITBRAG_UNTIL",
    "GITBRAG_INCLUDE",
    "GITBRAG_EXCLUDE",
    "GITBRAG_OUTPUT_DIR",
    "GITBRAG_MAX_DIFF_BYTES",
    "GITBRAG_MAX_COMMITS",
    "GITBRAG_NO_LLM",
    "GITBRAG_INCLUDE_MERGES",
    "GITBRAG_FULL_DIFF",
    "GITBRAG_MODE",
    "GITBRAG_ONLY",
    "GITBRAG_API_KEY",
    "GITBRAG_API_KEYS",
    "GEMINI_API_KEY",
    "GEMINI_API_KEYS",
    "OPENAI_API_KEY",
    "OPENAI_API_KEYS",
    "ANTHROPIC_API_KEY",
    "ANTHROPIC_API_KEYS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Isolate tests from the developer's shell and any .env file."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("git_brag.settings.load_dotenv", lambda *args, **kwargs: False)


@pytest.fixture(autouse=True)
def reset_logging():  # type: ignore[no-untyped-def]
    """Drop handlers a CLI run attached to captured streams."""
    yield
    logger = logging.getLogger("git_brag")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
