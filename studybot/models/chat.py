"""
Chat API Models - Request and response bodies for the HTTP API.
"""

from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field

from .session import Message

DEFAULT_SESSION_ID = "default-session"


class ChatRequest(BaseModel):
    """Incoming chat message."""
    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(default=DEFAULT_SESSION_ID, alias="sessionId")
    message: Optional[str] = None  # presence is checked by the route


class ChatResponse(BaseModel):
    """Generated reply."""
    response: str
    timestamp: datetime


class HistoryResponse(BaseModel):
    """Messages of one session, oldest first."""
    messages: List[Message] = Field(default_factory=list)


class SessionSummary(BaseModel):
    """Session entry in the sidebar list."""
    id: str
    name: str


class SessionListResponse(BaseModel):
    """All sessions, most recent first."""
    sessions: List[SessionSummary] = Field(default_factory=list)


class RenameRequest(BaseModel):
    name: Optional[str] = None


class SuccessResponse(BaseModel):
    success: bool = True
