"""
Utilities package for the Mongo insert benchmark.

Exports shared helpers for logging, profiling, and thread-safe counting.
Keep this package free of MongoDB-specific logic.
"""

from insert_bench.utils.counter import AtomicCounter
from insert_bench.utils.logging import configure_logging, get_logger
from insert_bench.utils.profiler import ProfileStats, profile_block

__all__ = [
    "AtomicCounter",
    "configure_logging",
    "get_logger",
    "ProfileStats",
    "profile_block",
]
