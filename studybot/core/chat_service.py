"""
Chat Service - Replays a session's history into the LLM and records the exchange.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from ..llm import LLMProvider, LLMMessage, LLMNotConfiguredError
from ..models import Message, Session
from ..storage import SessionStore

logger = logging.getLogger(__name__)


@dataclass
class ChatReply:
    """Reply text and the time it was produced."""
    response: str
    timestamp: datetime


def to_llm_history(session: Optional[Session]) -> List[LLMMessage]:
    """Translate stored messages into the provider's history shape."""
    if session is None:
        return []
    return [LLMMessage.text(m.role, m.text) for m in session.messages]


class ChatService:
    """
    Orchestrates one chat turn: load, replay, generate, append, persist.

    The user message and the reply are appended together in a single store
    update, and only once the provider has answered.
    """

    def __init__(self, store: SessionStore, llm_provider: Optional[LLMProvider],
                 system_instruction: Optional[str] = None):
        self.store = store
        self.llm_provider = llm_provider
        self.system_instruction = system_instruction

    async def send_message(self, session_id: str, text: str) -> ChatReply:
        """
        Send a user message in a session and return the model's reply.

        Args:
            session_id: Session to continue (created if new)
            text: User message

        Returns:
            ChatReply with the generated text

        Raises:
            LLMNotConfiguredError: If no LLM provider is configured
        """
        if self.llm_provider is None:
            raise LLMNotConfiguredError("LLM API key is not configured")

        session = await self.store.get_session(session_id)
        history = to_llm_history(session)
        logger.debug(f"Replaying {len(history)} messages for session {session_id}")

        chat = self.llm_provider.start_chat(history, system_instruction=self.system_instruction)
        result = await chat.send_message(text)

        user_message = Message.now("user", text)
        model_message = Message.now("model", result.content)
        await self.store.upsert_session(
            session_id, lambda s: s.append(user_message, model_message)
        )

        logger.info(
            f"Chat turn stored for session {session_id}",
            extra={"extra_fields": {
                "session_id": session_id,
                "history_length": len(history),
                "response_length": len(result.content),
            }}
        )
        return ChatReply(response=result.content, timestamp=model_message.timestamp)
