from __future__ import annotations

import json
from typing import Any

import pytest
from typer.testing import CliRunner

from insert_bench import main as cli
from tests.fakes import FakeCollection

INSERTS = 5
TRIALS = 2
THREADS = 2

runner = CliRunner()


@pytest.fixture
def cli_env(monkeypatch, tmp_path):
    """Route the CLI at an in-memory collection and keep logging untouched."""
    opened: list[dict[str, Any]] = []
    collection = FakeCollection()

    def fake_get_collection(settings, max_pool_size):
        opened.append({"settings": settings, "max_pool_size": max_pool_size})
        return collection

    monkeypatch.setattr(cli, "get_collection", fake_get_collection)
    monkeypatch.setattr(cli, "configure_logging", lambda **kwargs: None)
    monkeypatch.setenv("BENCHMARK_POLL_INTERVAL", "0.05")
    monkeypatch.setenv("RESULTS_DIR", str(tmp_path / "results"))
    monkeypatch.chdir(tmp_path)
    return {"opened": opened, "collection": collection, "tmp_path": tmp_path}


def _json_tail(output: str) -> dict:
    return json.loads(output[output.index("{") :])


def test_info_shows_effective_settings(monkeypatch) -> None:
    monkeypatch.setenv("MONGO_COLLECTION", "bench_docs")
    monkeypatch.setenv("BENCHMARK_THREADS", "6")

    result = runner.invoke(cli.app, ["info"])

    assert result.exit_code == 0
    assert "bench_docs" in result.output
    assert "threads=6" in result.output


def test_run_json_honours_overrides(cli_env) -> None:
    result = runner.invoke(
        cli.app,
        ["run", "-n", str(INSERTS), "-t", str(TRIALS), "-p", str(THREADS), "--no-persist", "--json"],
    )

    assert result.exit_code == 0, result.output
    summary = _json_tail(result.output)
    assert summary["config"]["inserts"] == INSERTS
    assert summary["config"]["threads"] == THREADS
    assert len(summary["trials"]) == TRIALS
    assert all(t["count_after"] == INSERTS for t in summary["trials"])
    assert cli_env["opened"][0]["max_pool_size"] == THREADS
    assert not (cli_env["tmp_path"] / "results").exists()


def test_run_persists_and_prints_table(cli_env) -> None:
    result = runner.invoke(cli.app, ["run", "-n", str(INSERTS)])

    assert result.exit_code == 0, result.output
    assert "Mongo Insert Benchmark Results" in result.output
    assert (cli_env["tmp_path"] / "results" / "latest.json").exists()


@pytest.mark.parametrize(("flag", "expected"), [("majority", "majority"), ("2", 2), (" 2", 2)])
def test_run_write_concern_override(cli_env, flag, expected) -> None:
    result = runner.invoke(cli.app, ["run", "-n", "1", "-w", flag, "--no-persist", "--json"])

    assert result.exit_code == 0, result.output
    assert cli_env["opened"][0]["settings"].mongo_write_concern == expected


def test_run_rejects_invalid_thread_count(cli_env) -> None:
    result = runner.invoke(cli.app, ["run", "-p", "0", "--no-persist"])

    assert result.exit_code == 2
    assert "Invalid configuration" in result.output
    assert cli_env["opened"] == []


def test_run_exits_130_after_interrupted_trial(cli_env, monkeypatch) -> None:
    def interrupted_benchmark(config, collection):
        return {"trials": [], "interrupted": True}

    monkeypatch.setattr(cli, "run_benchmark", interrupted_benchmark)

    result = runner.invoke(cli.app, ["run", "-n", str(INSERTS), "--no-persist"])

    assert result.exit_code == 130
    assert "Cancelled by user." in result.output
