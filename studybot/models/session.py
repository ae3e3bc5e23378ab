"""
Session Models - Defines structures for chat sessions and their messages.

Field aliases follow the persisted document schema (``sessionId``,
``sessionName``) so existing collections and ``database.json`` files load as-is.
"""

from datetime import datetime, timezone
from typing import Literal, Optional, List
from pydantic import BaseModel, ConfigDict, Field, field_validator


class Message(BaseModel):
    """One turn in a session."""
    model_config = ConfigDict(frozen=True)

    role: Literal["user", "model"]
    text: str
    timestamp: Optional[datetime] = None  # absent on older records

    @field_validator("role", mode="before")
    @classmethod
    def _normalize_role(cls, value):
        # Older records stored the model's turns as "ai"
        if value == "ai":
            return "model"
        return value

    @field_validator("timestamp")
    @classmethod
    def _assume_utc(cls, value):
        # Stored times are UTC; MongoDB drivers hand them back naive
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @classmethod
    def now(cls, role: str, text: str) -> "Message":
        """Create a message stamped with the current time."""
        return cls(role=role, text=text, timestamp=datetime.now(timezone.utc))


class Session(BaseModel):
    """A conversation thread with its ordered messages."""
    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(alias="sessionId")
    session_name: Optional[str] = Field(default=None, alias="sessionName")
    messages: List[Message] = Field(default_factory=list)

    def append(self, *messages: Message) -> None:
        """Append messages in order."""
        self.messages.extend(messages)


def default_session_name(session_id: str) -> str:
    """
    Build the display name for a session that has not been renamed.

    Session ids are normally millisecond epoch timestamps, which render as
    e.g. ``Session Oct 19``. Other ids are shown verbatim.
    """
    try:
        created = datetime.fromtimestamp(int(session_id) / 1000, tz=timezone.utc)
    except (ValueError, OverflowError, OSError):
        return f"Session {session_id}"
    return f"Session {created:%b} {created.day}"
