from __future__ import annotations

from typing import Any, Dict, Optional

from rich import box
from rich.console import Console
from rich.table import Table


def _format_mb(value: Optional[int]) -> str:
    if not value:
        return "N/A"
    return f"{value / (1024 * 1024):.2f}"


def print_results(summary: Dict[str, Any], console: Optional[Console] = None) -> None:
    """
    Render a benchmark summary as a rich table, one row per trial.

    The caption carries the average speed across trials.
    """
    console = console or Console()
    trials = summary.get("trials") or []

    if not trials:
        console.print("[yellow]No results to display.[/yellow]")
        return

    config = summary.get("config", {})
    speed_unit = config.get("speed_unit", trials[0].get("speed_unit", 1000))
    average = summary.get("average_speed_ms_per_unit", 0.0)

    table = Table(
        title="Mongo Insert Benchmark Results",
        box=box.ROUNDED,
        caption=f"Average speed: {average:,.2f} ms / {speed_unit:,} inserts",
    )

    table.add_column("Trial", style="cyan", no_wrap=True)
    table.add_column("Inserts", justify="right", style="magenta")
    table.add_column("Threads", justify="right", style="blue")
    table.add_column("Elapsed (ms)", justify="right", style="green")
    table.add_column(f"Speed (ms/{speed_unit:,})", justify="right", style="bold green")
    table.add_column("Peak Memory (MB)", justify="right", style="yellow")
    table.add_column("CPU %", justify="right", style="red")
    table.add_column("Status", style="dim")

    for res in trials:
        cpu = res.get("cpu_percent")
        status = "interrupted" if res.get("interrupted") else "ok"
        table.add_row(
            str(res.get("trial", "?")),
            f"{res.get('inserts', 0):,}",
            str(res.get("threads", "?")),
            f"{res.get('elapsed_ms', 0.0):,.0f}",
            f"{res.get('speed_ms_per_unit', 0.0):,.2f}",
            _format_mb(res.get("peak_rss_bytes")),
            f"{cpu:.1f}" if cpu is not None else "N/A",
            status,
        )

    console.print(table)


__all__ = ["print_results"]
