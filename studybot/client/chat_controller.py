"""
Chat Controller - Client-side state for a Study Bot chat window.

Mirrors the current session's messages and the session list. Every user
action issues at most one API call and updates local state right away;
failures surface as an error entry or ``last_error`` and are never retried.
"""

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

from ..models import SessionSummary, default_session_name
from .api_client import StudyBotAPIClient, StudyBotAPIError

logger = logging.getLogger(__name__)

GREETING = (
    "Hello! I am Study Bot, your AI academic assistant. "
    "What topic should we dive into today?"
)


@dataclass
class ChatEntry:
    """A message as shown in the chat window."""
    role: str  # "user" or "model"
    text: str
    timestamp: Optional[datetime] = field(default_factory=lambda: datetime.now(timezone.utc))
    is_error: bool = False


def _greeting() -> List[ChatEntry]:
    return [ChatEntry(role="model", text=GREETING)]


def _new_session_id() -> str:
    return str(int(time.time() * 1000))


class ChatController:
    """Local state of one chat window, kept in step with the API."""

    def __init__(self, api: StudyBotAPIClient):
        self.api = api
        self.current_session_id: str = _new_session_id()
        self.messages: List[ChatEntry] = _greeting()
        self.sessions: List[SessionSummary] = []
        self.is_typing: bool = False
        self.last_error: Optional[str] = None

    async def load_sessions(self) -> None:
        """Fetch the session list and open the most recent session."""
        try:
            sessions = await self.api.list_sessions()
        except StudyBotAPIError as e:
            logger.error(f"Failed to fetch sessions: {e}")
            self.last_error = str(e)
            return

        if sessions:
            self.sessions = sessions
            await self.select_session(sessions[0].id)

    def new_session(self) -> str:
        """Start a fresh session locally; the server sees it on the first message."""
        session_id = _new_session_id()
        self.current_session_id = session_id
        self.messages = _greeting()
        self.sessions.insert(0, SessionSummary(id=session_id, name=default_session_name(session_id)))
        return session_id

    async def select_session(self, session_id: str) -> None:
        """Switch to a session and load its history."""
        self.current_session_id = session_id
        try:
            history = await self.api.get_history(session_id)
        except StudyBotAPIError as e:
            logger.error(f"Failed to fetch session history: {e}")
            self.last_error = str(e)
            return

        if history:
            self.messages = [ChatEntry(role=m.role, text=m.text, timestamp=m.timestamp) for m in history]
        else:
            self.messages = _greeting()

    async def send(self, text: str) -> Optional[ChatEntry]:
        """
        Send a message in the current session.

        Returns:
            The reply entry (an error entry if the call failed), or None for blank input
        """
        if not text.strip():
            return None

        self.messages.append(ChatEntry(role="user", text=text))
        self.is_typing = True
        try:
            reply = await self.api.send_chat(self.current_session_id, text)
            entry = ChatEntry(
                role="model",
                text=reply.response or "No response received",
                timestamp=reply.timestamp,
            )
        except StudyBotAPIError as e:
            logger.error(f"Backend API error: {e}")
            entry = ChatEntry(
                role="model",
                text=f"Error connecting to Study Bot Backend: {e}",
                is_error=True,
            )
        finally:
            self.is_typing = False

        self.messages.append(entry)
        return entry

    async def rename(self, session_id: str, name: str) -> bool:
        """Rename a session; blank names are ignored."""
        if not name or not name.strip():
            return False
        try:
            await self.api.rename_session(session_id, name)
        except StudyBotAPIError as e:
            logger.error(f"Failed to rename session: {e}")
            self.last_error = "Failed to rename session"
            return False

        self.sessions = [
            SessionSummary(id=s.id, name=name) if s.id == session_id else s
            for s in self.sessions
        ]
        return True

    async def delete(self, session_id: str) -> bool:
        """Delete a session, moving to another one if it was open."""
        try:
            await self.api.delete_session(session_id)
        except StudyBotAPIError as e:
            logger.error(f"Failed to delete session: {e}")
            self.last_error = "Failed to delete session"
            return False

        self.sessions = [s for s in self.sessions if s.id != session_id]
        if not self.sessions:
            self.new_session()
        elif self.current_session_id == session_id:
            await self.select_session(self.sessions[0].id)
        return True
