"""
Runner package for the Mongo insert benchmark.

Re-exports the runner interfaces and the thread-pool implementation so callers
can import from `insert_bench.runner` directly.
"""

from insert_bench.runner.abstract import (
    BenchmarkConfig,
    DocumentCollection,
    InsertRunner,
    TrialResult,
    compute_speed,
)
from insert_bench.runner.thread_pool import ProgressTicker, ThreadPoolInsertRunner

__all__ = [
    "BenchmarkConfig",
    "DocumentCollection",
    "InsertRunner",
    "TrialResult",
    "compute_speed",
    "ProgressTicker",
    "ThreadPoolInsertRunner",
]
