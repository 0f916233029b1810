"""
Integration tests for the Mongo insert benchmark.

These tests run against a real MongoDB instance and verify that:
1. A trial leaves exactly N documents in an emptied collection
2. Concurrent workers neither lose nor duplicate inserts
3. Back-to-back trials are independent of each other

Run with: RUN_INTEGRATION_TESTS=1 pytest tests/integration/
"""

from __future__ import annotations

import os

import pytest

from insert_bench.domain.models import LOREM_IPSUM
from insert_bench.orchestrator import run_benchmark
from insert_bench.runner.abstract import BenchmarkConfig
from insert_bench.runner.thread_pool import ThreadPoolInsertRunner

SEQUENTIAL_INSERTS = 10
POOLED_INSERTS = 1000
POOL_THREADS = 4
REPEATED_TRIALS = 2
POLL_INTERVAL = 0.2

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(
        os.getenv("RUN_INTEGRATION_TESTS", "0") != "1",
        reason="Integration tests require RUN_INTEGRATION_TESTS=1 and reachable MongoDB",
    ),
]


def _config(**overrides) -> BenchmarkConfig:
    params = {"poll_interval_seconds": POLL_INTERVAL, "persist": False}
    params.update(overrides)
    return BenchmarkConfig(**params)


class TestThreadPoolRunner:
    def test_sequential_trial_stores_every_document(self, mongo_collection):
        mongo_collection.insert_one({"UID": "left-over", "description": "x"})
        runner = ThreadPoolInsertRunner(_config(inserts=SEQUENTIAL_INSERTS, threads=1))

        result = runner.run_trial(mongo_collection)

        assert result["count_before"] == 0
        assert result["count_after"] == SEQUENTIAL_INSERTS
        assert mongo_collection.count_documents({}) == SEQUENTIAL_INSERTS
        stored = mongo_collection.find_one({}, {"_id": 0})
        assert set(stored) == {"UID", "description"}
        assert stored["description"] == LOREM_IPSUM

    def test_pooled_trial_has_no_lost_or_duplicate_records(self, mongo_collection):
        runner = ThreadPoolInsertRunner(_config(inserts=POOLED_INSERTS, threads=POOL_THREADS))

        result = runner.run_trial(mongo_collection)

        assert result["completed"] == POOLED_INSERTS
        assert mongo_collection.count_documents({}) == POOLED_INSERTS
        assert len(mongo_collection.distinct("UID")) == POOLED_INSERTS
        assert result["elapsed_ms"] > 0
        assert result["speed_ms_per_unit"] > 0

    def test_zero_inserts_leaves_collection_empty(self, mongo_collection):
        runner = ThreadPoolInsertRunner(_config(inserts=0, threads=POOL_THREADS))

        result = runner.run_trial(mongo_collection)

        assert result["completed"] == 0
        assert mongo_collection.count_documents({}) == 0


class TestOrchestrator:
    def test_repeated_trials_each_end_with_n_documents(self, mongo_collection):
        config = _config(inserts=SEQUENTIAL_INSERTS, threads=2, trials=REPEATED_TRIALS)

        summary = run_benchmark(config, collection=mongo_collection)

        assert len(summary["trials"]) == REPEATED_TRIALS
        assert all(t["count_after"] == SEQUENTIAL_INSERTS for t in summary["trials"])
        assert mongo_collection.count_documents({}) == SEQUENTIAL_INSERTS
        assert summary["average_speed_ms_per_unit"] > 0

    def test_write_concern_is_applied(self, mongo_collection, test_settings):
        assert mongo_collection.write_concern.document == {"w": test_settings.mongo_write_concern}
