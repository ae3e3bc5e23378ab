"""
Session Store Factory - Picks the storage backend once at startup.
"""

import logging
from typing import Any, Optional
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import PyMongoError

from .interface import SessionStore
from .local_storage import LocalSessionStore
from .mongo_storage import MongoSessionStore

logger = logging.getLogger(__name__)


async def connect_mongo_store(
    uri: str,
    database: Optional[str] = None,
    collection: str = "chathistories",
    timeout_ms: int = 3000,
) -> MongoSessionStore:
    """
    Connect to MongoDB and verify the server answers a ping.

    Raises:
        PyMongoError: If the server cannot be reached within timeout_ms
    """
    client = None
    try:
        client = AsyncIOMotorClient(uri, serverSelectionTimeoutMS=timeout_ms, tz_aware=True)
        await client.admin.command("ping")
    except PyMongoError:
        if client is not None:
            client.close()
        raise
    db = client[database] if database else client.get_default_database("studybot")
    return MongoSessionStore(db[collection], client=client)


async def create_session_store(config: Any) -> SessionStore:
    """
    Create the session store selected by configuration.

    Args:
        config: Settings object with storage configuration

    Returns:
        SessionStore: MongoDB store when reachable (or required), else the local file store
    """
    backend = config.storage_backend.lower()

    if backend == "local":
        logger.info(f"Using local session store at {config.local_db_path}")
        return LocalSessionStore(config.local_db_path)

    if backend not in ("auto", "mongo"):
        raise ValueError(f"Unsupported storage backend: {config.storage_backend}")

    try:
        store = await connect_mongo_store(
            config.mongodb_uri,
            database=config.mongodb_database,
            collection=config.mongodb_collection,
            timeout_ms=config.mongodb_timeout_ms,
        )
    except PyMongoError as e:
        if backend == "mongo":
            logger.error(f"MongoDB connection failed: {e}")
            raise
        logger.warning(
            f"MongoDB connection failed, falling back to local session store "
            f"at {config.local_db_path}: {e}"
        )
        return LocalSessionStore(config.local_db_path)

    logger.info("Connected to MongoDB successfully")
    return store
