"""
Pytest configuration for the Mongo insert benchmark.

Provides fixtures for:
- An in-memory, thread-safe stand-in for a pymongo collection
- Fast benchmark configs for unit tests
- MongoDB connection management for integration tests
"""

from __future__ import annotations

import os
from typing import Any, Callable, Dict, Generator

import pytest

from insert_bench.config import Settings, get_settings
from insert_bench.runner.abstract import BenchmarkConfig
from tests.fakes import FakeCollection

# Short enough that progress ticks show up in tests that take ~100ms.
FAST_POLL_INTERVAL = 0.01


@pytest.fixture(autouse=True)
def _reset_settings_cache() -> Generator[None, None, None]:
    """Settings are cached per process; tests that touch env vars need a fresh read."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def fake_collection() -> FakeCollection:
    return FakeCollection()


@pytest.fixture
def make_config() -> Callable[..., BenchmarkConfig]:
    """
    Factory for configs that never persist and poll quickly.
    """

    def _make(**overrides: Any) -> BenchmarkConfig:
        params: Dict[str, Any] = {
            "inserts": 10,
            "trials": 1,
            "threads": 1,
            "speed_unit": 1000,
            "poll_interval_seconds": FAST_POLL_INTERVAL,
            "persist": False,
        }
        params.update(overrides)
        return BenchmarkConfig(**params)

    return _make


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.

    Can be overridden via environment variables in CI or local testing.
    """
    return Settings(
        mongo_url=os.getenv("MONGO_URL", "mongodb://localhost:27017"),
        mongo_db=os.getenv("MONGO_DB", "test"),
        mongo_collection=os.getenv("MONGO_TEST_COLLECTION", "insert_bench_it"),
        mongo_server_selection_timeout_ms=2_000,
        log_level="DEBUG",
    )


@pytest.fixture(scope="session")
def mongo_available(test_settings: Settings) -> bool:
    """
    Check if MongoDB is reachable.

    Used to conditionally skip integration tests when no server is running.
    """
    from pymongo import MongoClient
    from pymongo.errors import PyMongoError

    client = MongoClient(
        test_settings.mongo_url,
        serverSelectionTimeoutMS=test_settings.mongo_server_selection_timeout_ms,
    )
    try:
        client.admin.command("ping")
        return True
    except PyMongoError:
        return False
    finally:
        client.close()


@pytest.fixture
def mongo_collection(test_settings: Settings, mongo_available: bool):
    """
    Provide the integration collection with the configured write concern.

    Skips tests if MongoDB is not available; drops the collection afterwards.
    """
    if not mongo_available:
        pytest.skip("MongoDB not available for integration tests")

    from insert_bench.infrastructure.mongo_factory import close_client, get_collection

    collection = get_collection(test_settings, max_pool_size=8)
    try:
        yield collection
    finally:
        collection.drop()
        close_client()
