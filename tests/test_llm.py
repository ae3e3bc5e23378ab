"""
Unit tests for the LLM module.
Tests LLMMessage, LLMResponse, LLMChat, the Gemini provider, and the factory.
"""

import logging
import pytest
from unittest.mock import AsyncMock, patch, MagicMock

from studybot.llm.base import LLMMessage, LLMResponse, LLMResponseError
from studybot.llm.gemini_provider import GeminiProvider
from studybot.llm.factory import create_llm_provider
from conftest import FakeLLMProvider


def _mock_httpx_client(mock_client, payload):
    """Wire a patched httpx.AsyncClient to return payload from post()."""
    mock_response = MagicMock()
    mock_response.status_code = 200
    mock_response.json.return_value = payload
    mock_response.raise_for_status = MagicMock()

    mock_instance = AsyncMock()
    mock_instance.post.return_value = mock_response
    mock_instance.__aenter__ = AsyncMock(return_value=mock_instance)
    mock_instance.__aexit__ = AsyncMock(return_value=False)
    mock_client.return_value = mock_instance
    return mock_instance


GEMINI_REPLY = {
    "candidates": [
        {
            "content": {"role": "model", "parts": [{"text": "Photosynthesis "}, {"text": "turns light into sugar."}]},
            "finishReason": "STOP",
        }
    ],
    "usageMetadata": {"promptTokenCount": 12, "candidatesTokenCount": 6, "totalTokenCount": 18},
    "modelVersion": "gemini-2.5-flash",
}


class TestLLMMessage:
    """Tests for LLMMessage dataclass."""

    def test_text_message(self):
        msg = LLMMessage.text("user", "Hello")
        assert msg.role == "user"
        assert msg.content == "Hello"


class TestLLMResponse:
    """Tests for LLMResponse dataclass."""

    def test_basic_response(self):
        resp = LLMResponse(content="Hello!", model="gemini-2.5-flash")
        assert resp.content == "Hello!"
        assert resp.usage == {}
        assert resp.raw is None


class TestLLMChat:
    """Tests for the stateful chat wrapper."""

    @pytest.mark.asyncio
    async def test_send_message_includes_history_and_instruction(self):
        provider = FakeLLMProvider()
        history = [LLMMessage.text("user", "hi"), LLMMessage.text("model", "hello")]
        chat = provider.start_chat(history, system_instruction="Be a tutor")

        result = await chat.send_message("what is a cell?")

        assert result.content == "Reply to: what is a cell?"
        call = provider.calls[0]
        assert [m.content for m in call["messages"]] == ["hi", "hello", "what is a cell?"]
        assert call["system_instruction"] == "Be a tutor"

    @pytest.mark.asyncio
    async def test_history_grows_with_each_exchange(self):
        provider = FakeLLMProvider()
        chat = provider.start_chat()

        await chat.send_message("one")
        await chat.send_message("two")

        assert [(m.role, m.content) for m in chat.history] == [
            ("user", "one"), ("model", "Reply to: one"),
            ("user", "two"), ("model", "Reply to: two"),
        ]
        assert len(provider.calls[1]["messages"]) == 3

    @pytest.mark.asyncio
    async def test_failed_send_leaves_history_unchanged(self):
        provider = FakeLLMProvider(error=RuntimeError("boom"))
        chat = provider.start_chat([LLMMessage.text("user", "earlier")])

        with pytest.raises(RuntimeError):
            await chat.send_message("now")
        assert len(chat.history) == 1

    def test_start_chat_copies_history(self):
        provider = FakeLLMProvider()
        history = [LLMMessage.text("user", "hi")]
        chat = provider.start_chat(history)
        chat.history.append(LLMMessage.text("model", "x"))
        assert len(history) == 1


class TestGeminiProvider:
    """Tests for the Gemini provider."""

    def test_init_defaults(self):
        provider = GeminiProvider(api_key="test-key")
        assert provider.api_key == "test-key"
        assert provider.model == "gemini-2.5-flash"
        assert provider.base_url == "https://generativelanguage.googleapis.com/v1beta"

    def test_headers(self):
        provider = GeminiProvider(api_key="goog-123")
        headers = provider._get_headers()
        assert headers["x-goog-api-key"] == "goog-123"
        assert headers["Content-Type"] == "application/json"

    def test_format_contents_maps_roles(self):
        provider = GeminiProvider(api_key="test")
        contents = provider._format_contents([
            LLMMessage.text("user", "question"),
            LLMMessage.text("model", "answer"),
            LLMMessage.text("ai", "legacy answer"),
        ])
        assert contents[0] == {"role": "user", "parts": [{"text": "question"}]}
        assert contents[1]["role"] == "model"
        assert contents[2]["role"] == "model"

    @pytest.mark.asyncio
    async def test_chat_completion_success(self):
        provider = GeminiProvider(api_key="test-key")

        with patch("httpx.AsyncClient") as mock_client:
            mock_instance = _mock_httpx_client(mock_client, GEMINI_REPLY)

            result = await provider.chat_completion(
                [LLMMessage.text("user", "Explain photosynthesis")],
                system_instruction="You are Study Bot",
            )

        assert result.content == "Photosynthesis turns light into sugar."
        assert result.usage == {"prompt_tokens": 12, "completion_tokens": 6, "total_tokens": 18}

        url = mock_instance.post.call_args.args[0]
        payload = mock_instance.post.call_args.kwargs["json"]
        assert url.endswith("/models/gemini-2.5-flash:generateContent")
        assert payload["systemInstruction"] == {"parts": [{"text": "You are Study Bot"}]}
        assert payload["contents"][-1]["parts"][0]["text"] == "Explain photosynthesis"
        assert "maxOutputTokens" not in payload["generationConfig"]

    @pytest.mark.asyncio
    async def test_chat_completion_without_system_instruction(self):
        provider = GeminiProvider(api_key="test-key")

        with patch("httpx.AsyncClient") as mock_client:
            mock_instance = _mock_httpx_client(mock_client, GEMINI_REPLY)
            await provider.chat_completion([LLMMessage.text("user", "hi")])

        assert "systemInstruction" not in mock_instance.post.call_args.kwargs["json"]

    @pytest.mark.asyncio
    async def test_blocked_prompt_raises(self):
        provider = GeminiProvider(api_key="test-key")

        with patch("httpx.AsyncClient") as mock_client:
            _mock_httpx_client(mock_client, {"promptFeedback": {"blockReason": "SAFETY"}})
            with pytest.raises(LLMResponseError, match="SAFETY"):
                await provider.chat_completion([LLMMessage.text("user", "hi")])

    @pytest.mark.asyncio
    async def test_output_limit_sent_only_when_configured(self):
        provider = GeminiProvider(api_key="test-key", default_max_tokens=8192)

        with patch("httpx.AsyncClient") as mock_client:
            mock_instance = _mock_httpx_client(mock_client, GEMINI_REPLY)
            await provider.chat_completion([LLMMessage.text("user", "hi")])
            assert mock_instance.post.call_args.kwargs["json"]["generationConfig"]["maxOutputTokens"] == 8192

            await provider.chat_completion([LLMMessage.text("user", "hi")], max_tokens=100)
            assert mock_instance.post.call_args.kwargs["json"]["generationConfig"]["maxOutputTokens"] == 100

    @pytest.mark.asyncio
    async def test_truncated_reply_logs_warning(self, caplog):
        provider = GeminiProvider(api_key="test-key")
        truncated = {
            "candidates": [{"content": {"parts": [{"text": "partial ans"}]}, "finishReason": "MAX_TOKENS"}],
        }

        with patch("httpx.AsyncClient") as mock_client:
            _mock_httpx_client(mock_client, truncated)
            with caplog.at_level(logging.WARNING, logger="studybot.llm.gemini_provider"):
                result = await provider.chat_completion([LLMMessage.text("user", "hi")])

        assert result.content == "partial ans"
        assert any("truncated" in r.getMessage() for r in caplog.records)

    @pytest.mark.asyncio
    async def test_empty_candidate_raises(self):
        provider = GeminiProvider(api_key="test-key")

        with patch("httpx.AsyncClient") as mock_client:
            _mock_httpx_client(mock_client, {"candidates": [{"finishReason": "MAX_TOKENS"}]})
            with pytest.raises(LLMResponseError, match="MAX_TOKENS"):
                await provider.chat_completion([LLMMessage.text("user", "hi")])


class TestLLMFactory:
    """Tests for LLM provider factory."""

    def test_create_gemini_provider(self):
        provider = create_llm_provider(
            provider="gemini",
            api_key="test-key",
            model="gemini-2.5-pro"
        )
        assert isinstance(provider, GeminiProvider)
        assert provider.model == "gemini-2.5-pro"

    def test_no_api_key_returns_none(self):
        assert create_llm_provider(provider="gemini", api_key="") is None
        assert create_llm_provider(provider="gemini", api_key=None) is None

    def test_unsupported_provider_raises(self):
        with pytest.raises(ValueError, match="Unsupported"):
            create_llm_provider(provider="unsupported", api_key="key")

    def test_extra_params_passed_through(self):
        provider = create_llm_provider(
            provider="gemini",
            api_key="key",
            base_url="https://proxy.example.com/v1beta",
            timeout=5.0,
        )
        assert provider.base_url == "https://proxy.example.com/v1beta"
        assert provider.timeout == 5.0
