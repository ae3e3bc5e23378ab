"""
Session Store Interface - Abstract base class for all session storage backends.
This interface lets call sites stay unaware of whether MongoDB or the local
JSON file is backing them.
"""

from abc import ABC, abstractmethod
from typing import Callable, List, Optional

from ..models import Session

SessionMutator = Callable[[Session], None]


class StorageError(Exception):
    """Raised when a backend fails to read or persist sessions."""


class SessionStore(ABC):
    """
    Abstract session store that defines the contract for all backends.
    """

    #: Short backend name reported by the health endpoint
    name: str = "abstract"

    @abstractmethod
    async def get_session(self, session_id: str) -> Optional[Session]:
        """
        Load a session.

        Args:
            session_id: Session identifier

        Returns:
            Optional[Session]: The session, or None if it does not exist
        """
        pass

    @abstractmethod
    async def upsert_session(self, session_id: str, mutator: SessionMutator) -> Session:
        """
        Apply a change to a session, creating it if needed, and persist it.

        Args:
            session_id: Session identifier
            mutator: Callable that modifies the session in place

        Returns:
            Session: The session as persisted
        """
        pass

    @abstractmethod
    async def list_sessions(self) -> List[Session]:
        """
        List all sessions.

        Returns:
            List[Session]: Sessions ordered most recently created first
        """
        pass

    @abstractmethod
    async def rename_session(self, session_id: str, name: str) -> bool:
        """
        Set the display name of a session. Does not change its position
        in the session list.

        Returns:
            bool: True if the session exists and was renamed
        """
        pass

    @abstractmethod
    async def delete_session(self, session_id: str) -> bool:
        """
        Delete a session with all its messages.

        Returns:
            bool: True if a session was removed
        """
        pass

    async def close(self) -> None:
        """Release backend resources."""
        return None
