"""
Runner interfaces and result contracts for the Mongo insert benchmark.

The external store is described structurally by DocumentCollection so a pymongo
Collection and the in-memory fakes used in tests are interchangeable. Runners
return a TrialResult TypedDict so orchestration and reporting share one shape.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Mapping, Optional, Protocol, TypedDict, runtime_checkable

from insert_bench.config import Settings


@runtime_checkable
class DocumentCollection(Protocol):
    """
    The subset of `pymongo.collection.Collection` the benchmark depends on.
    """

    def delete_many(self, filter: Mapping[str, Any]) -> Any:
        ...

    def insert_one(self, document: Dict[str, Any]) -> Any:
        ...

    def count_documents(self, filter: Mapping[str, Any]) -> int:
        ...


class TrialResult(TypedDict, total=False):
    """
    Metrics for one trial.

    The runner fills the timing and count fields; the orchestrator adds the
    profiler fields (`peak_rss_bytes`, `cpu_percent`).
    """

    trial: int
    inserts: int
    threads: int
    completed: int
    elapsed_ms: float
    speed_ms_per_unit: float
    speed_unit: int
    count_before: int
    count_after: int
    interrupted: bool
    peak_rss_bytes: Optional[int]
    cpu_percent: Optional[float]


@dataclass(frozen=True)
class BenchmarkConfig:
    """
    Explicit benchmark parameters handed to the runner and orchestrator.

    Attributes
    ----------
    inserts : int
        Documents inserted per trial (N).
    trials : int
        Independent trials to run; the reported speed is their average (T).
    threads : int
        Worker pool size (P). 1 means sequential inserts.
    speed_unit : int
        Speed is reported as milliseconds per `speed_unit` inserts.
    poll_interval_seconds : float
        Cadence of the "completed N tasks" progress log while a trial runs.
    results_dir : str
        Directory for persisted JSON results.
    persist : bool
        Whether the orchestrator writes results to `results_dir`.
    """

    inserts: int = 1_000_000
    trials: int = 1
    threads: int = 1
    speed_unit: int = 1_000
    poll_interval_seconds: float = 1.0
    results_dir: str = "results"
    persist: bool = True

    def __post_init__(self) -> None:
        if self.inserts < 0:
            raise ValueError(f"inserts must be >= 0, got {self.inserts}")
        if self.trials < 1:
            raise ValueError(f"trials must be >= 1, got {self.trials}")
        if self.threads < 1:
            raise ValueError(f"threads must be >= 1, got {self.threads}")
        if self.speed_unit <= 0:
            raise ValueError(f"speed_unit must be > 0, got {self.speed_unit}")
        if self.poll_interval_seconds <= 0:
            raise ValueError(
                f"poll_interval_seconds must be > 0, got {self.poll_interval_seconds}"
            )

    @classmethod
    def from_settings(cls, settings: Settings, **overrides: Any) -> "BenchmarkConfig":
        """
        Build a config from Settings, applying any non-None overrides.
        """
        config = cls(
            inserts=settings.benchmark_inserts,
            trials=settings.benchmark_trials,
            threads=settings.benchmark_threads,
            speed_unit=settings.benchmark_speed_unit,
            poll_interval_seconds=settings.benchmark_poll_interval_seconds,
            results_dir=settings.results_dir,
        )
        known = {f.name for f in fields(cls)}
        unknown = set(overrides) - known
        if unknown:
            raise TypeError(f"Unknown BenchmarkConfig fields: {', '.join(sorted(unknown))}")
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(config, **changes) if changes else config

    def as_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def compute_speed(elapsed_ms: float, inserts: int, speed_unit: int) -> float:
    """
    Milliseconds spent per `speed_unit` inserts.

    Returns 0.0 when nothing was inserted.
    """
    if inserts <= 0:
        return 0.0
    return elapsed_ms / (inserts / speed_unit)


class InsertRunner(abc.ABC):
    """
    Base class for runners that execute one timed trial against a collection.
    """

    def __init__(self, config: BenchmarkConfig) -> None:
        self.config = config

    @abc.abstractmethod
    def run_trial(self, collection: DocumentCollection, trial: int = 1) -> TrialResult:  # pragma: no cover - interface only
        """Clear `collection`, insert `config.inserts` documents, and return metrics."""
        raise NotImplementedError


__all__ = [
    "BenchmarkConfig",
    "DocumentCollection",
    "InsertRunner",
    "TrialResult",
    "compute_speed",
]
