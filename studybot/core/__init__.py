"""Core module - chat orchestration and logging setup."""

from .chat_service import ChatService, ChatReply, to_llm_history

__all__ = ['ChatService', 'ChatReply', 'to_llm_history']
