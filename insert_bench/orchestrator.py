"""
Orchestrator for running insert trials, profiling them, and persisting results.

Usage (example from CLI):
    from insert_bench.orchestrator import run_benchmark
    from insert_bench.runner import BenchmarkConfig

    summary = run_benchmark(BenchmarkConfig(inserts=10_000, threads=4, trials=3))
    print(summary["average_speed_ms_per_unit"])

Outputs are saved to `results/` by default:
- `results/latest.json` (last run)
- `results/run-<timestamp>.json` (timestamped archive)
"""

from __future__ import annotations

import json
import statistics
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from insert_bench.config import get_settings
from insert_bench.infrastructure.mongo_factory import get_collection
from insert_bench.runner.abstract import BenchmarkConfig, DocumentCollection, InsertRunner, TrialResult
from insert_bench.runner.thread_pool import ThreadPoolInsertRunner
from insert_bench.utils.logging import get_logger
from insert_bench.utils.profiler import ProfileStats, profile_block

log = get_logger(__name__)


def _round_float(value: float, decimals: int = 2) -> float:
    """Round a float to specified decimal places for human-readable output."""
    return round(value, decimals)


def _summarize(values: List[float]) -> Dict[str, float]:
    return {
        "median": _round_float(statistics.median(values)),
        "mean": _round_float(statistics.mean(values)),
        "stddev": _round_float(statistics.stdev(values)) if len(values) > 1 else 0.0,
        "min": _round_float(min(values)),
        "max": _round_float(max(values)),
    }


def _aggregate_trials(trials: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Aggregate trial results into a statistical summary.

    Returns median, mean, stddev, min and max for elapsed time and speed, plus
    peak RSS when the profiler captured it.
    """
    aggregated: Dict[str, Any] = {
        "elapsed_ms": _summarize([t["elapsed_ms"] for t in trials]),
        "speed_ms_per_unit": _summarize([t["speed_ms_per_unit"] for t in trials]),
        "inserts": trials[0]["inserts"],
        "trials": len(trials),
        "interrupted_trials": sum(1 for t in trials if t.get("interrupted")),
    }

    peak_rss_values = [t["peak_rss_bytes"] for t in trials if t.get("peak_rss_bytes")]
    if peak_rss_values:
        aggregated["peak_rss_bytes"] = {
            "median": int(statistics.median(peak_rss_values)),
            "max": max(peak_rss_values),
        }
    return aggregated


def _merge_result(result: TrialResult, stats: ProfileStats) -> Dict[str, Any]:
    """Attach profiler measurements to a trial result, rounding floats for output."""
    merged: Dict[str, Any] = dict(result)
    merged["elapsed_ms"] = _round_float(merged.get("elapsed_ms", stats.duration_seconds * 1000.0))
    merged["speed_ms_per_unit"] = _round_float(merged.get("speed_ms_per_unit", 0.0))
    if merged.get("peak_rss_bytes") is None:
        merged["peak_rss_bytes"] = stats.peak_rss_bytes
    if merged.get("cpu_percent") is None:
        merged["cpu_percent"] = _round_float(stats.cpu_percent, 1) if stats.cpu_percent else None
    merged["profile"] = {
        "label": stats.label,
        "duration_seconds": _round_float(stats.duration_seconds, 3),
        "peak_rss_bytes": stats.peak_rss_bytes,
        "cpu_percent": _round_float(stats.cpu_percent, 1) if stats.cpu_percent else None,
    }
    return merged


def _persist_results(payload: dict, results_dir: Path) -> None:
    results_dir.mkdir(parents=True, exist_ok=True)
    latest_path = results_dir / "latest.json"
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    archive_path = results_dir / f"run-{timestamp}.json"

    for path in (latest_path, archive_path):
        with path.open("w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, sort_keys=True)

    log.info("Results persisted", extra={"latest": str(latest_path), "archive": str(archive_path)})


def run_benchmark(
    config: Optional[BenchmarkConfig] = None,
    collection: Optional[DocumentCollection] = None,
    runner: Optional[InsertRunner] = None,
) -> Dict[str, Any]:
    """
    Run `config.trials` insert trials and return the summary payload.

    Parameters
    ----------
    config : BenchmarkConfig | None
        Benchmark parameters. Defaults to values from `get_settings()`.
    collection : DocumentCollection | None
        Target collection. When omitted the configured MongoDB collection is
        opened with its write concern applied.
    runner : InsertRunner | None
        Runner used for each trial. Defaults to ThreadPoolInsertRunner.

    Returns
    -------
    dict
        `timestamp`, `config`, per-trial results under `trials`, the
        `aggregate` statistics, `average_speed_ms_per_unit` and `interrupted`.
        Trials after an interrupted one are not run.
    """
    settings = get_settings()
    config = config or BenchmarkConfig.from_settings(settings)
    if collection is None:
        collection = get_collection(settings, max_pool_size=config.threads)
    runner = runner or ThreadPoolInsertRunner(config)

    trials: List[Dict[str, Any]] = []
    speeds: List[float] = []
    interrupted = False
    for trial in range(1, config.trials + 1):
        log.info(f"{'=' * 60}")
        log.info(
            f"[TRIAL {trial}/{config.trials}] {config.inserts} inserts, {config.threads} threads",
            extra={"trial": trial, "total_trials": config.trials},
        )
        log.info(f"{'=' * 60}")

        with profile_block(f"trial-{trial}") as stats:
            result = runner.run_trial(collection, trial=trial)
        merged = _merge_result(result, stats)
        trials.append(merged)
        speeds.append(result["speed_ms_per_unit"])

        if result.get("interrupted"):
            # Inserts that were already running may still be writing to the collection.
            log.warning(
                f"Trial {trial} was interrupted; skipping the remaining trials",
                extra={"trial": trial, "total_trials": config.trials},
            )
            interrupted = True
            break

    average_speed = sum(speeds) / len(speeds) if speeds else 0.0
    log.info(
        f"All tests finished for {config.threads} threads, {len(trials)} attempts, "
        f"everyone inserted {config.inserts} documents",
        extra={"threads": config.threads, "trials": len(trials), "inserts": config.inserts},
    )
    log.info(
        f"Average speed: {average_speed:.2f} millis / {config.speed_unit} inserts",
        extra={"average_speed_ms_per_unit": average_speed, "speed_unit": config.speed_unit},
    )

    payload: Dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "config": config.as_dict(),
        "trials": trials,
        "aggregate": _aggregate_trials(trials),
        "average_speed_ms_per_unit": _round_float(average_speed),
        "interrupted": interrupted,
    }

    if config.persist:
        _persist_results(payload, Path(config.results_dir))

    return payload


__all__ = ["run_benchmark"]
