"""
Unit tests for the chat orchestrator.
"""

import pytest
from unittest.mock import AsyncMock

from studybot.core import ChatService, to_llm_history
from studybot.llm import LLMNotConfiguredError
from studybot.models import Message, Session
from studybot.storage import StorageError
from conftest import FakeLLMProvider


class TestToLLMHistory:

    def test_none_session(self):
        assert to_llm_history(None) == []

    def test_roles_and_order_preserved(self):
        session = Session(session_id="1", messages=[
            Message(role="user", text="q"),
            Message(role="model", text="a"),
        ])
        history = to_llm_history(session)
        assert [(m.role, m.content) for m in history] == [("user", "q"), ("model", "a")]


class TestChatService:

    @pytest.mark.asyncio
    async def test_new_session_gets_both_messages(self, local_store, fake_provider):
        service = ChatService(local_store, fake_provider, system_instruction="Be helpful")

        reply = await service.send_message("s1", "What is DNA?")

        assert reply.response == "Reply to: What is DNA?"
        session = await local_store.get_session("s1")
        assert [(m.role, m.text) for m in session.messages] == [
            ("user", "What is DNA?"),
            ("model", "Reply to: What is DNA?"),
        ]
        assert all(m.timestamp.tzinfo is not None for m in session.messages)
        assert fake_provider.calls[0]["system_instruction"] == "Be helpful"

    @pytest.mark.asyncio
    async def test_prior_turns_are_replayed(self, local_store, fake_provider):
        service = ChatService(local_store, fake_provider)
        await service.send_message("s1", "first")
        await service.send_message("s1", "second")

        replayed = fake_provider.calls[1]["messages"]
        assert [m.content for m in replayed] == ["first", "Reply to: first", "second"]
        assert len((await local_store.get_session("s1")).messages) == 4

    @pytest.mark.asyncio
    async def test_llm_failure_appends_nothing(self, local_store):
        provider = FakeLLMProvider(error=RuntimeError("quota exceeded"))
        service = ChatService(local_store, provider)

        with pytest.raises(RuntimeError, match="quota exceeded"):
            await service.send_message("s1", "hello")
        assert await local_store.get_session("s1") is None

    @pytest.mark.asyncio
    async def test_storage_failure_propagates(self, fake_provider):
        store = AsyncMock()
        store.get_session.return_value = None
        store.upsert_session.side_effect = StorageError("disk full")
        service = ChatService(store, fake_provider)

        with pytest.raises(StorageError):
            await service.send_message("s1", "hello")

    @pytest.mark.asyncio
    async def test_unconfigured_provider(self, local_store):
        service = ChatService(local_store, None)
        with pytest.raises(LLMNotConfiguredError):
            await service.send_message("s1", "hello")
        assert await local_store.get_session("s1") is None
