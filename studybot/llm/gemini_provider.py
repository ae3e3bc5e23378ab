"""
Google Gemini LLM Provider.
Calls the Generative Language REST API (generateContent) directly over httpx.
"""

import httpx
import logging
import time
from typing import Optional, List, Dict, Any

from .base import LLMProvider, LLMMessage, LLMResponse, LLMResponseError

logger = logging.getLogger(__name__)


class GeminiProvider(LLMProvider):
    """
    Provider for Google Gemini models.
    Conversation turns map to ``contents`` with roles "user" and "model";
    the system prompt goes in ``systemInstruction``.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        default_temperature: float = 0.7,
        default_max_tokens: Optional[int] = None,
        timeout: float = 120.0,
        log_calls: bool = True,
    ):
        super().__init__(api_key, model, base_url, default_temperature, default_max_tokens)
        self.timeout = timeout
        self.log_calls = log_calls

    def _get_headers(self) -> Dict[str, str]:
        return {
            "x-goog-api-key": self.api_key,
            "Content-Type": "application/json",
        }

    def _format_contents(self, messages: List[LLMMessage]) -> List[Dict[str, Any]]:
        """Convert LLMMessage list to Gemini ``contents``."""
        return [
            {
                "role": "model" if m.role in ("model", "assistant", "ai") else "user",
                "parts": [{"text": m.content}],
            }
            for m in messages
        ]

    @staticmethod
    def _extract_text(data: Dict[str, Any]) -> str:
        """Join the text parts of the first candidate."""
        candidates = data.get("candidates") or []
        if not candidates:
            reason = (data.get("promptFeedback") or {}).get("blockReason", "no candidates")
            raise LLMResponseError(f"Gemini returned no reply ({reason})")

        parts = (candidates[0].get("content") or {}).get("parts") or []
        text = "".join(part.get("text", "") for part in parts)
        if not text:
            reason = candidates[0].get("finishReason", "empty content")
            raise LLMResponseError(f"Gemini returned no text ({reason})")
        if candidates[0].get("finishReason") == "MAX_TOKENS":
            logger.warning(f"Gemini reply truncated at the output token limit ({len(text)} chars)")
        return text

    async def chat_completion(
        self,
        messages: List[LLMMessage],
        system_instruction: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> LLMResponse:
        """Send request to the generateContent endpoint."""
        start_time = time.time()
        model = kwargs.get("model", self.model)
        url = f"{self.base_url}/models/{model}:generateContent"
        payload: Dict[str, Any] = {
            "contents": self._format_contents(messages),
            "generationConfig": {
                "temperature": temperature if temperature is not None else self.default_temperature,
            },
        }
        output_limit = max_tokens or self.default_max_tokens
        if output_limit:
            payload["generationConfig"]["maxOutputTokens"] = output_limit
        if system_instruction:
            payload["systemInstruction"] = {"parts": [{"text": system_instruction}]}

        # Log request (DEBUG level)
        if logger.isEnabledFor(logging.DEBUG):
            message_summary = f"{len(messages)} messages"
            if messages:
                last_msg = str(messages[-1].content)[:200]
                message_summary += f", last: {last_msg}"
            logger.debug(
                f"LLM API call starting: provider=gemini, model={model}, "
                f"temperature={payload['generationConfig']['temperature']}, {message_summary}"
            )

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(url, json=payload, headers=self._get_headers())
                logger.debug(f"LLM API response status: {resp.status_code}")
                resp.raise_for_status()
                data = resp.json()

            content = self._extract_text(data)
            usage_meta = data.get("usageMetadata", {})
            usage = {
                "prompt_tokens": usage_meta.get("promptTokenCount", 0),
                "completion_tokens": usage_meta.get("candidatesTokenCount", 0),
                "total_tokens": usage_meta.get("totalTokenCount", 0),
            }
            duration_ms = (time.time() - start_time) * 1000

            if self.log_calls:
                logger.info(
                    "LLM API call completed",
                    extra={"extra_fields": {
                        "provider": "gemini",
                        "model": data.get("modelVersion", model),
                        **usage,
                        "duration_ms": round(duration_ms, 2),
                    }}
                )

            return LLMResponse(
                content=content,
                model=data.get("modelVersion", model),
                usage=usage,
                raw=data,
            )
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                f"LLM API call failed: {str(e)}",
                exc_info=True,
                extra={"extra_fields": {
                    "provider": "gemini",
                    "model": model,
                    "duration_ms": round(duration_ms, 2),
                    "error": str(e),
                }}
            )
            raise
