"""
Resource profiling for benchmark trials.

Wraps a trial in a context manager that records wall-clock time, peak RSS
(sampled on a background thread through psutil) and process CPU usage.

Usage:
    from insert_bench.utils.profiler import profile_block

    with profile_block("trial-1") as stats:
        runner.run_trial(collection)

    print(stats.duration_seconds, stats.peak_rss_bytes, stats.cpu_percent)
"""

from __future__ import annotations

import contextlib
import threading
import time
from dataclasses import dataclass, field
from typing import Generator, Optional

import psutil


@dataclass
class ProfileStats:
    """
    Container for profiling measurements.
    """

    label: str
    start_ts: float = field(default=0.0)
    end_ts: float = field(default=0.0)
    duration_seconds: float = field(default=0.0)
    peak_rss_bytes: Optional[int] = field(default=None)
    cpu_percent: Optional[float] = field(default=None)


@contextlib.contextmanager
def profile_block(label: str, sample_interval_ms: int = 100) -> Generator[ProfileStats, None, None]:
    """
    Profile a block of code.

    Parameters
    ----------
    label : str
        Human-friendly label for the profiled block.
    sample_interval_ms : int
        Interval in milliseconds between RSS samples.

    Notes
    -----
    RSS is sampled for the whole block rather than read at start and end, so a
    spike while the insertion queue is full is still captured. CPU percent is
    relative to one core and can exceed 100 with several worker threads.
    """
    stats = ProfileStats(label=label)
    process = psutil.Process()
    peak_rss = process.memory_info().rss
    stop_sampling = threading.Event()

    def _sample_memory() -> None:
        nonlocal peak_rss
        while not stop_sampling.is_set():
            try:
                peak_rss = max(peak_rss, process.memory_info().rss)
            except psutil.Error:
                break
            stop_sampling.wait(timeout=sample_interval_ms / 1000.0)

    # cpu_percent(None) measures since the previous call; prime it here.
    process.cpu_percent(interval=None)

    sampler = threading.Thread(target=_sample_memory, name=f"rss-sampler-{label}", daemon=True)
    sampler.start()

    stats.start_ts = time.perf_counter()
    try:
        yield stats
    finally:
        stats.end_ts = time.perf_counter()
        stats.duration_seconds = stats.end_ts - stats.start_ts

        stop_sampling.set()
        sampler.join(timeout=1.0)

        stats.peak_rss_bytes = peak_rss if peak_rss > 0 else None
        stats.cpu_percent = process.cpu_percent(interval=None)


__all__ = ["ProfileStats", "profile_block"]
