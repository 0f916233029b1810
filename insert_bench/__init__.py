"""
Mongo Insert Benchmark - measures MongoDB single-document insert throughput.

Each trial clears the target collection, inserts a configurable number of
synthetic documents through a fixed-size thread pool, and reports the elapsed
time as milliseconds per a fixed batch of inserts. Results from several trials
are averaged, logged, persisted as JSON and rendered as a table.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from insert_bench.config import Settings, get_settings
from insert_bench.domain.models import SyntheticRecord
from insert_bench.orchestrator import run_benchmark
from insert_bench.runner.abstract import (
    BenchmarkConfig,
    DocumentCollection,
    InsertRunner,
    TrialResult,
    compute_speed,
)
from insert_bench.runner.thread_pool import ThreadPoolInsertRunner
from insert_bench.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    "BenchmarkConfig",
    # Domain
    "SyntheticRecord",
    # Running
    "DocumentCollection",
    "InsertRunner",
    "ThreadPoolInsertRunner",
    "TrialResult",
    "compute_speed",
    "run_benchmark",
    # Logging
    "configure_logging",
    "get_logger",
]
