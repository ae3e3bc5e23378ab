"""
Shared test fixtures and configuration.
"""

import pytest
import os

# Set test environment variables before importing app modules
os.environ.setdefault("STORAGE_BACKEND", "local")
os.environ.setdefault("LOCAL_DB_PATH", "/tmp/studybot_test_database.json")
os.environ.setdefault("LOG_FILE_ENABLED", "false")
os.environ.setdefault("GEMINI_API_KEY", "")

from fastapi.testclient import TestClient

from studybot.config import Settings
from studybot.llm.base import LLMProvider, LLMResponse
from studybot.main import create_app
from studybot.storage import LocalSessionStore


class FakeLLMProvider(LLMProvider):
    """Provider that answers without network access and records each call."""

    def __init__(self, reply_prefix: str = "Reply to: ", error: Exception = None):
        super().__init__(api_key="test-key", model="fake-model")
        self.reply_prefix = reply_prefix
        self.error = error
        self.calls = []

    async def chat_completion(self, messages, system_instruction=None,
                              temperature=None, max_tokens=None, **kwargs):
        self.calls.append({"messages": list(messages), "system_instruction": system_instruction})
        if self.error is not None:
            raise self.error
        return LLMResponse(content=f"{self.reply_prefix}{messages[-1].content}", model=self.model)


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "database.json")


@pytest.fixture
def local_store(db_path):
    return LocalSessionStore(db_path)


@pytest.fixture
def fake_provider():
    return FakeLLMProvider()


@pytest.fixture
def test_settings(db_path):
    return Settings(
        storage_backend="local",
        local_db_path=db_path,
        log_file_enabled=False,
        log_console_enabled=False,
        gemini_api_key=None,
    )


@pytest.fixture
def app(test_settings, local_store, fake_provider):
    return create_app(
        config=test_settings,
        session_store=local_store,
        llm_provider=fake_provider,
        configure_logging=False,
    )


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client
