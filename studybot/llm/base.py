"""
LLM Provider Base - Abstract base for all LLM API providers.
Providers expose a one-shot completion call and a stateful chat built on it.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, Optional, List
from dataclasses import dataclass, field


class LLMNotConfiguredError(RuntimeError):
    """Raised when a reply is requested but no provider is configured."""


class LLMResponseError(RuntimeError):
    """Raised when the provider answers without usable text."""


@dataclass
class LLMMessage:
    """
    Represents a message in a conversation.
    Roles are "user" and "model"; the system instruction is passed separately.
    """
    role: str
    content: str

    @staticmethod
    def text(role: str, text: str) -> "LLMMessage":
        """Create a text message."""
        return LLMMessage(role=role, content=text)


@dataclass
class LLMResponse:
    """Response from an LLM API call."""
    content: str
    model: str = ""
    usage: Dict[str, int] = field(default_factory=dict)
    raw: Optional[Dict[str, Any]] = None


class LLMChat:
    """
    A conversation in progress.

    Holds the history replayed from storage and grows it with each exchange,
    so consecutive send_message() calls keep their context.
    """

    def __init__(self, provider: "LLMProvider", history: Optional[List[LLMMessage]] = None,
                 system_instruction: Optional[str] = None):
        self.provider = provider
        self.history: List[LLMMessage] = list(history or [])
        self.system_instruction = system_instruction

    async def send_message(self, text: str, **kwargs) -> LLMResponse:
        """Send a user turn and return the model's reply."""
        user_message = LLMMessage.text("user", text)
        response = await self.provider.chat_completion(
            self.history + [user_message],
            system_instruction=self.system_instruction,
            **kwargs
        )
        self.history.append(user_message)
        self.history.append(LLMMessage.text("model", response.content))
        return response


class LLMProvider(ABC):
    """
    Abstract base class for LLM API providers.
    All providers must implement chat_completion.
    """

    def __init__(self, api_key: str, model: str, base_url: Optional[str] = None,
                 default_temperature: float = 0.7, default_max_tokens: Optional[int] = None):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url
        self.default_temperature = default_temperature
        self.default_max_tokens = default_max_tokens

    @abstractmethod
    async def chat_completion(
        self,
        messages: List[LLMMessage],
        system_instruction: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> LLMResponse:
        """
        Send a chat completion request.

        Args:
            messages: Conversation so far, ending with the new user turn
            system_instruction: Optional system prompt
            temperature: Sampling temperature override
            max_tokens: Max tokens override
            **kwargs: Additional provider-specific parameters

        Returns:
            LLMResponse with the generated content
        """
        pass

    def start_chat(self, history: Optional[List[LLMMessage]] = None,
                   system_instruction: Optional[str] = None) -> LLMChat:
        """Start a stateful chat seeded with prior turns."""
        return LLMChat(self, history=history, system_instruction=system_instruction)
