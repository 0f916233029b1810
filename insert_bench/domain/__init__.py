"""
Domain package for the Mongo insert benchmark.

Exports the document model inserted by the runner.
"""

from insert_bench.domain.models import LOREM_IPSUM, SyntheticRecord

__all__ = [
    "LOREM_IPSUM",
    "SyntheticRecord",
]
