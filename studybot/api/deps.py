"""
Request dependencies - hand the app-owned session store and chat service to routes.
"""

from fastapi import Request

from ..core import ChatService
from ..storage import SessionStore


def get_session_store(request: Request) -> SessionStore:
    """Session store selected at startup."""
    return request.app.state.session_store


def get_chat_service(request: Request) -> ChatService:
    """Chat service bound to the session store and LLM provider."""
    return request.app.state.chat_service
