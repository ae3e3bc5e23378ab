"""
MongoDB Session Store.
One document per session in the ``chathistories`` collection:
``{sessionId, sessionName, messages: [{role, text, timestamp}]}``.
"""

import logging
from typing import Any, Dict, List, Optional
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pymongo import DESCENDING
from pymongo.errors import PyMongoError

from ..models import Session
from .interface import SessionStore, SessionMutator, StorageError

logger = logging.getLogger(__name__)

_PROJECTION = {"_id": 0, "sessionId": 1, "sessionName": 1, "messages": 1}
_LIST_PROJECTION = {"_id": 0, "sessionId": 1, "sessionName": 1}


class MongoSessionStore(SessionStore):
    """Session store backed by a MongoDB collection."""

    name = "mongo"

    def __init__(
        self,
        collection: AsyncIOMotorCollection,
        client: Optional[AsyncIOMotorClient] = None,
    ):
        """
        Args:
            collection: Collection holding one document per session
            client: Owning client, closed by close() when given
        """
        self.collection = collection
        self.client = client

    @staticmethod
    def _to_session(doc: Dict[str, Any]) -> Session:
        return Session.model_validate(doc)

    @staticmethod
    def _to_document(session: Session) -> Dict[str, Any]:
        return session.model_dump(by_alias=True, exclude_none=True)

    async def get_session(self, session_id: str) -> Optional[Session]:
        try:
            doc = await self.collection.find_one({"sessionId": session_id}, _PROJECTION)
        except PyMongoError as e:
            raise StorageError(f"Failed to load session {session_id}: {e}") from e
        return self._to_session(doc) if doc else None

    async def upsert_session(self, session_id: str, mutator: SessionMutator) -> Session:
        session = await self.get_session(session_id) or Session(session_id=session_id)
        mutator(session)
        try:
            await self.collection.replace_one(
                {"sessionId": session_id}, self._to_document(session), upsert=True
            )
        except PyMongoError as e:
            raise StorageError(f"Failed to save session {session_id}: {e}") from e
        return session

    async def list_sessions(self) -> List[Session]:
        try:
            # ObjectIds grow with insertion time, so _id order is creation order
            cursor = self.collection.find({}, _LIST_PROJECTION).sort("_id", DESCENDING)
            docs = await cursor.to_list(length=None)
        except PyMongoError as e:
            raise StorageError(f"Failed to list sessions: {e}") from e
        return [self._to_session(doc) for doc in docs]

    async def rename_session(self, session_id: str, name: str) -> bool:
        try:
            result = await self.collection.update_one(
                {"sessionId": session_id}, {"$set": {"sessionName": name}}
            )
        except PyMongoError as e:
            raise StorageError(f"Failed to rename session {session_id}: {e}") from e
        return result.matched_count > 0

    async def delete_session(self, session_id: str) -> bool:
        try:
            result = await self.collection.delete_one({"sessionId": session_id})
        except PyMongoError as e:
            raise StorageError(f"Failed to delete session {session_id}: {e}") from e
        return result.deleted_count > 0

    async def close(self) -> None:
        if self.client is not None:
            self.client.close()
