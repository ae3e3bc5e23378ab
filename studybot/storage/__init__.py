"""Storage module - provides the session store interface and its backends."""

from .interface import SessionStore, SessionMutator, StorageError
from .local_storage import LocalSessionStore
from .mongo_storage import MongoSessionStore
from .factory import connect_mongo_store, create_session_store

__all__ = [
    'SessionStore', 'SessionMutator', 'StorageError',
    'LocalSessionStore', 'MongoSessionStore',
    'connect_mongo_store', 'create_session_store',
]
