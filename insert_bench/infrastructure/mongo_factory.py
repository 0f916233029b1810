"""
MongoDB client factory for the Mongo insert benchmark.

`MongoClient` is thread-safe and keeps its own connection pool, so a single
client is shared by every insertion worker. The ClientManager singleton owns
that client and closes it on interpreter exit.
"""

from __future__ import annotations

import atexit
import threading
from typing import Any, Dict, Optional, Union

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.write_concern import WriteConcern

from insert_bench.config import Settings, get_settings
from insert_bench.utils.logging import get_logger

log = get_logger(__name__)

# pymongo's own default; raised when the benchmark runs more worker threads.
DEFAULT_MAX_POOL_SIZE = 100


def build_write_concern(w: Union[int, str]) -> WriteConcern:
    """
    Build the write concern applied to the benchmark collection.

    `w` is a member count (0 disables acknowledgement) or a tag such as
    "majority".
    """
    return WriteConcern(w=w)


class ClientManager:
    """
    Thread-safe singleton for the shared MongoClient.

    Handles lifecycle management with automatic cleanup via atexit hook.
    """

    _instance: Optional["ClientManager"] = None
    _lock = threading.Lock()

    def __new__(cls) -> "ClientManager":
        """Create or return the singleton instance."""
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
                cls._instance._client = None
                atexit.register(cls._instance.close_all)
            return cls._instance

    def get_client(
        self,
        settings: Optional[Settings] = None,
        max_pool_size: int = DEFAULT_MAX_POOL_SIZE,
    ) -> MongoClient:
        """
        Get or create the shared client.

        Parameters
        ----------
        settings : Settings, optional
            Source of the connection string and timeouts. Defaults to `get_settings()`.
        max_pool_size : int
            Upper bound on pooled sockets. Only used when the client is first created.

        Returns
        -------
        MongoClient
            The managed client instance.
        """
        with self._lock:
            if self._client is None:
                settings = settings or get_settings()
                options: Dict[str, Any] = {
                    "maxPoolSize": max(max_pool_size, DEFAULT_MAX_POOL_SIZE),
                    "serverSelectionTimeoutMS": settings.mongo_server_selection_timeout_ms,
                }
                log.info("Connecting to DB", extra={"db": settings.mongo_db})
                self._client = MongoClient(settings.mongo_url, **options)
            return self._client

    def close_all(self) -> None:
        """
        Close the managed client and release its sockets.

        This is called automatically on exit via atexit hook.
        """
        with self._lock:
            if self._client is not None:
                try:
                    self._client.close()
                finally:
                    self._client = None


def get_client(settings: Optional[Settings] = None, max_pool_size: int = DEFAULT_MAX_POOL_SIZE) -> MongoClient:
    """Get or create the shared MongoClient via ClientManager."""
    return ClientManager().get_client(settings=settings, max_pool_size=max_pool_size)


def get_collection(
    settings: Optional[Settings] = None,
    max_pool_size: int = DEFAULT_MAX_POOL_SIZE,
) -> Collection:
    """
    Return the benchmark collection with the configured write concern applied.

    Parameters
    ----------
    settings : Settings, optional
        Database, collection and write concern source. Defaults to `get_settings()`.
    max_pool_size : int
        Forwarded to the client on first creation; pass the worker thread count.

    Returns
    -------
    Collection
        A pymongo collection handle bound to the shared client.
    """
    settings = settings or get_settings()
    client = get_client(settings=settings, max_pool_size=max_pool_size)
    database = client.get_database(settings.mongo_db)
    collection = database.get_collection(
        settings.mongo_collection,
        write_concern=build_write_concern(settings.mongo_write_concern),
    )
    log.info(
        f"Using {settings.mongo_db}.{settings.mongo_collection}",
        extra={"write_concern": collection.write_concern.document},
    )
    return collection


def close_client() -> None:
    """Close the shared client if one was created."""
    ClientManager().close_all()


__all__ = [
    "ClientManager",
    "build_write_concern",
    "close_client",
    "get_client",
    "get_collection",
]
