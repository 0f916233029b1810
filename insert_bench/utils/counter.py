"""
Thread-safe completion counter shared by insertion workers.
"""

from __future__ import annotations

import threading


class AtomicCounter:
    """
    Integer guarded by a lock so increment-and-read happens as one step.

    Workers call `increment()` once per finished insertion; the returned value
    tells exactly one of them that it was the last.
    """

    def __init__(self, initial: int = 0) -> None:
        self._value = initial
        self._lock = threading.Lock()

    def increment(self, delta: int = 1) -> int:
        """Add `delta` and return the new value."""
        with self._lock:
            self._value += delta
            return self._value

    @property
    def value(self) -> int:
        with self._lock:
            return self._value

    def __repr__(self) -> str:
        return f"AtomicCounter(value={self.value})"


__all__ = ["AtomicCounter"]
