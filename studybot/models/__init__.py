"""Models module."""

from .session import Message, Session, default_session_name
from .chat import (
    DEFAULT_SESSION_ID, ChatRequest, ChatResponse, HistoryResponse,
    SessionSummary, SessionListResponse, RenameRequest, SuccessResponse,
)

__all__ = [
    'Message', 'Session', 'default_session_name',
    'DEFAULT_SESSION_ID', 'ChatRequest', 'ChatResponse', 'HistoryResponse',
    'SessionSummary', 'SessionListResponse', 'RenameRequest', 'SuccessResponse',
]
