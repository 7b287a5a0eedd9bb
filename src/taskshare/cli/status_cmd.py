"""CLI command for inspecting the shared round files.

Usage:
    taskshare status
    taskshare status --workdir /mnt/shared --format json
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import TypedDict

import typer

app = typer.Typer(help="Show the state of the shared round files")


class FileStatus(TypedDict):
    role: str
    path: str
    exists: bool
    locked: bool
    age: float | None
    lines: int | None


def _inspect(path: Path, count_lines: bool) -> tuple[float, int | None] | None:
    """Age and non-blank line count of ``path``, or None once it is gone."""
    # A running round may remove or replace any round file at any moment
    try:
        age = round(max(0.0, time.time() - path.stat().st_mtime), 3)
        if not count_lines:
            return age, None
        with open(path, encoding="utf-8") as f:
            return age, sum(1 for line in f if line.strip())
    except FileNotFoundError:
        return None


def collect_status(workdir: Path | None = None) -> list[FileStatus]:
    """Inspect every round file under ``workdir``."""
    from taskshare.jobs import DistributorConfig
    from taskshare.sync import is_locked

    config = DistributorConfig.from_settings()
    if workdir is not None:
        config.workdir = workdir

    files = {
        "tasks": config.task_file,
        "registry": config.process_file,
        "barrier1": config.barrier1_file,
        "barrier2": config.barrier2_file,
        "drain lock": config.share_lock_file,
        "scratch": f"{config.task_file}.tmp",
    }

    results: list[FileStatus] = []
    for role, name in files.items():
        path = config.path(name)
        entry: FileStatus = {
            "role": role,
            "path": str(path),
            "exists": False,
            "locked": is_locked(path),
            "age": None,
            "lines": None,
        }
        inspected = _inspect(path, count_lines=not name.endswith(".lock"))
        if inspected is not None:
            entry["exists"] = True
            entry["age"], entry["lines"] = inspected
        results.append(entry)
    return results


@app.callback(invoke_without_command=True)
def status(
    workdir: Path | None = typer.Option(
        None,
        "--workdir",
        "-d",
        help="Shared directory holding the round files",
    ),
    output_format: str = typer.Option(
        "text",
        "--format",
        "-f",
        help="Output format: text, json",
    ),
) -> None:
    """Show which round files exist, which are locked and how old they are."""
    import json

    from rich.console import Console
    from rich.table import Table

    results = collect_status(workdir)

    if output_format == "json":
        typer.echo(json.dumps(results, indent=2))
        return

    console = Console()

    table = Table(title="Round files")
    table.add_column("Role")
    table.add_column("Path")
    table.add_column("Exists")
    table.add_column("Locked")
    table.add_column("Age (s)", justify="right")
    table.add_column("Lines", justify="right")

    for entry in results:
        table.add_row(
            entry["role"],
            entry["path"],
            "[green]yes[/green]" if entry["exists"] else "no",
            "[red]yes[/red]" if entry["locked"] else "no",
            "" if entry["age"] is None else f"{entry['age']:.1f}",
            "" if entry["lines"] is None else str(entry["lines"]),
        )

    console.print(table)
