"""
Local File Session Store.
Keeps every session in memory and mirrors the whole map to a JSON file after
each change. Used when MongoDB is not reachable.
"""

import asyncio
import json
import logging
import os
import aiofiles
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..models import Session
from .interface import SessionStore, SessionMutator, StorageError

logger = logging.getLogger(__name__)


class LocalSessionStore(SessionStore):
    """
    JSON file session store.

    The file maps session ids to ``{"sessionName": ..., "messages": [...]}``
    in creation order. Every mutating call rewrites the full file.
    """

    name = "local"

    def __init__(self, path: str = "./database.json"):
        """
        Initialize the store and load any existing file.

        Args:
            path: Location of the JSON file
        """
        self.path = Path(path).resolve()
        self._sessions: Dict[str, Session] = self._load()
        self._lock = asyncio.Lock()

    def _load(self) -> Dict[str, Session]:
        """Read the file at startup, starting fresh if it is missing or unreadable."""
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            sessions = {
                session_id: Session.model_validate({**record, "sessionId": session_id})
                for session_id, record in raw.items()
            }
        except Exception as e:
            logger.warning(f"Failed to read local database {self.path}, starting fresh: {e}")
            return {}
        logger.info(f"Loaded {len(sessions)} sessions from {self.path}")
        return sessions

    @staticmethod
    def _serialize(sessions: Dict[str, Session]) -> str:
        payload: Dict[str, Any] = {
            session_id: session.model_dump(
                mode="json", by_alias=True, exclude={"session_id"}, exclude_none=True
            )
            for session_id, session in sessions.items()
        }
        return json.dumps(payload, indent=2, ensure_ascii=False)

    async def _commit(self, sessions: Dict[str, Session]) -> None:
        """Write the full state to disk, then make it the in-memory state."""
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
                await f.write(self._serialize(sessions))
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error(f"Failed to save local database {self.path}: {e}")
            raise StorageError(f"Failed to save local database: {e}") from e
        self._sessions = sessions

    async def get_session(self, session_id: str) -> Optional[Session]:
        session = self._sessions.get(session_id)
        return session.model_copy(deep=True) if session else None

    async def upsert_session(self, session_id: str, mutator: SessionMutator) -> Session:
        async with self._lock:
            current = self._sessions.get(session_id)
            session = current.model_copy(deep=True) if current else Session(session_id=session_id)
            mutator(session)

            updated = dict(self._sessions)
            updated[session_id] = session
            await self._commit(updated)
        return session.model_copy(deep=True)

    async def list_sessions(self) -> List[Session]:
        # dicts keep insertion order, which is creation order
        return [s.model_copy(deep=True) for s in reversed(self._sessions.values())]

    async def rename_session(self, session_id: str, name: str) -> bool:
        async with self._lock:
            current = self._sessions.get(session_id)
            if current is None:
                return False
            updated = dict(self._sessions)
            updated[session_id] = current.model_copy(update={"session_name": name})
            await self._commit(updated)
        return True

    async def delete_session(self, session_id: str) -> bool:
        async with self._lock:
            if session_id not in self._sessions:
                return False
            updated = {k: v for k, v in self._sessions.items() if k != session_id}
            await self._commit(updated)
        return True
