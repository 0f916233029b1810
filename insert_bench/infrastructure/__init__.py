"""
Infrastructure package for the Mongo insert benchmark.

Centralizes MongoDB connectivity (shared client, collection handles, write
concern). Keep this layer focused on I/O and resource management, decoupled
from runner/orchestrator logic.
"""

from insert_bench.infrastructure.mongo_factory import (
    ClientManager,
    close_client,
    get_client,
    get_collection,
)

__all__ = [
    "ClientManager",
    "close_client",
    "get_client",
    "get_collection",
]
