"""CLI command for taking part in a distribution round.

Usage:
    taskshare run
    taskshare run --tasks 100 --workdir /mnt/shared
    taskshare run --threads 4 --debug --metrics-file taskshare.prom
"""

from __future__ import annotations

import dataclasses
from pathlib import Path

import typer

app = typer.Typer(help="Join a distribution round and process the claimed tasks")


@app.callback(invoke_without_command=True)
def run(
    tasks: int = typer.Option(
        10,
        "--tasks",
        "-n",
        help="Number of synthetic tasks the leader publishes",
    ),
    workdir: Path | None = typer.Option(
        None,
        "--workdir",
        "-d",
        help="Shared directory holding the round files",
    ),
    threads: int = typer.Option(
        1,
        "--threads",
        "-t",
        help="Worker threads for processing claimed tasks",
    ),
    barrier1_wait: float | None = typer.Option(
        None,
        "--barrier1-wait",
        help="Width of the setup barrier window in seconds",
    ),
    barrier2_wait: float | None = typer.Option(
        None,
        "--barrier2-wait",
        help="Width of the remainder barrier window in seconds",
    ),
    seed: int | None = typer.Option(
        None,
        "--seed",
        help="Shuffle seed for the synthetic task list",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Relax the freshness guard and log round diagnostics",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Emit logs as JSON lines on stderr",
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Log level: debug, info, warning, error",
    ),
    metrics_file: Path | None = typer.Option(
        None,
        "--metrics-file",
        help="Write Prometheus metrics to this textfile on exit",
    ),
) -> None:
    """Take part in one round and print the tasks claimed by this process.

    Claimed tasks go to stdout followed by ``done`` and a runtime line;
    logs go to stderr.
    """
    from rich.console import Console

    from taskshare.config import settings
    from taskshare.jobs import DistributorConfig, TaskDistributor, consume_tasks, generate_tasks
    from taskshare.observability import RuntimeReport, configure_logging, get_metrics

    if tasks < 0:
        typer.echo("Error: --tasks must not be negative", err=True)
        raise typer.Exit(code=2)
    if threads < 1:
        typer.echo("Error: --threads must be at least 1", err=True)
        raise typer.Exit(code=2)

    console = Console(highlight=False)

    configure_logging(
        json_format=json_logs or settings.log_json,
        level=log_level or settings.log_level,
    )

    config = DistributorConfig.from_settings(settings)
    overrides: dict[str, object] = {}
    if workdir is not None:
        overrides["workdir"] = workdir
    if barrier1_wait is not None:
        overrides["barrier1_wait"] = barrier1_wait
    if barrier2_wait is not None:
        overrides["barrier2_wait"] = barrier2_wait
    if debug:
        overrides["debug"] = True
    config = dataclasses.replace(config, **overrides)

    with RuntimeReport(emit=console.print):
        distributor = TaskDistributor(config)
        shared = distributor.distribute(generate_tasks(tasks, seed=seed))
        consume_tasks(shared, console.print, num_threads=threads)
        console.print("done")

    target = metrics_file or settings.metrics_file
    if target is not None:
        get_metrics().write_textfile(target)
