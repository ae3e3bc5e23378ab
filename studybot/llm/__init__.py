"""LLM module - provides unified interface for LLM API providers."""

from .base import (
    LLMProvider, LLMChat, LLMMessage, LLMResponse,
    LLMNotConfiguredError, LLMResponseError,
)
from .gemini_provider import GeminiProvider
from .factory import create_llm_provider

__all__ = [
    'LLMProvider',
    'LLMChat',
    'LLMMessage',
    'LLMResponse',
    'LLMNotConfiguredError',
    'LLMResponseError',
    'GeminiProvider',
    'create_llm_provider',
]
