from __future__ import annotations

import json
import sys
from typing import Optional

import typer

from insert_bench.config import Settings, get_settings
from insert_bench.infrastructure.mongo_factory import get_collection
from insert_bench.orchestrator import run_benchmark
from insert_bench.reporter import print_results
from insert_bench.runner.abstract import BenchmarkConfig
from insert_bench.utils.logging import configure_logging

app = typer.Typer(help="MongoDB insert throughput benchmark.")


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"DB={settings.mongo_url}/{settings.mongo_db}.{settings.mongo_collection} "
        f"w={settings.mongo_write_concern} | "
        f"inserts={settings.benchmark_inserts} trials={settings.benchmark_trials} "
        f"threads={settings.benchmark_threads} speed_unit={settings.benchmark_speed_unit}"
    )


@app.command()
def run(
    inserts: Optional[int] = typer.Option(
        None,
        "--inserts",
        "-n",
        help="Documents inserted per trial (default from settings).",
    ),
    trials: Optional[int] = typer.Option(
        None,
        "--trials",
        "-t",
        help="Number of independent trials; the reported speed is their average.",
    ),
    threads: Optional[int] = typer.Option(
        None,
        "--threads",
        "-p",
        help="Worker thread pool size.",
    ),
    speed_unit: Optional[int] = typer.Option(
        None,
        "--speed-unit",
        help="Report speed as milliseconds per this many inserts.",
    ),
    write_concern: Optional[str] = typer.Option(
        None,
        "--write-concern",
        "-w",
        help="Write concern 'w' value (member count or tag such as 'majority').",
    ),
    no_persist: bool = typer.Option(
        False,
        "--no-persist",
        help="Do not write results JSON to the results directory.",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the summary as JSON instead of a table.",
    ),
) -> None:
    """
    Clear the collection, run the insert trials and report the average speed.
    """
    settings = get_settings()
    if write_concern is not None:
        settings = Settings.model_validate(
            {**settings.model_dump(by_alias=True), "MONGO_WRITE_CONCERN": write_concern}
        )
    configure_logging(level=settings.log_level, json_logs=settings.log_json)

    try:
        config = BenchmarkConfig.from_settings(
            settings,
            inserts=inserts,
            trials=trials,
            threads=threads,
            speed_unit=speed_unit,
            persist=False if no_persist else None,
        )
    except ValueError as exc:
        typer.echo(f"Invalid configuration: {exc}", err=True)
        raise typer.Exit(code=2)

    typer.echo(
        f"Running {config.trials} trial(s) of {config.inserts} inserts "
        f"(threads={config.threads}, w={settings.mongo_write_concern})."
    )

    collection = get_collection(settings, max_pool_size=config.threads)
    summary = run_benchmark(config, collection=collection)
    if as_json:
        typer.echo(json.dumps(summary, indent=2))
    else:
        print_results(summary)
    if summary["interrupted"]:
        typer.echo("Cancelled by user.", err=True)
        raise typer.Exit(code=130)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
