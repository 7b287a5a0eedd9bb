"""CLI command for removing leftovers of an unfinished round.

Usage:
    taskshare clean
    taskshare clean --workdir /mnt/shared --force
"""

from __future__ import annotations

from pathlib import Path

import typer

app = typer.Typer(help="Remove leftover round files")


@app.callback(invoke_without_command=True)
def clean(
    workdir: Path | None = typer.Option(
        None,
        "--workdir",
        "-d",
        help="Shared directory holding the round files",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        help="Remove files even while some round file is locked",
    ),
) -> None:
    """Delete the task list, registry and scratch file.

    Lock files are left in place; only their lock state matters and a
    crashed holder has already released them.
    """
    from rich.console import Console

    from taskshare.jobs import DistributorConfig
    from taskshare.sync import is_locked

    console = Console()
    config = DistributorConfig.from_settings()
    if workdir is not None:
        config.workdir = workdir

    lock_files = [
        config.path(config.process_file),
        config.path(config.barrier1_file),
        config.path(config.barrier2_file),
        config.path(config.share_lock_file),
    ]
    busy = [path for path in lock_files if is_locked(path)]
    if busy and not force:
        for path in busy:
            console.print(f"[red]Locked:[/red] {path}")
        console.print("[yellow]A round may be in progress; use --force to clean anyway[/yellow]")
        raise typer.Exit(code=1)

    removed = 0
    for name in (config.task_file, f"{config.task_file}.tmp", config.process_file):
        path = config.path(name)
        try:
            path.unlink()
        except FileNotFoundError:
            continue
        console.print(f"[green]Removed[/green] {path}")
        removed += 1

    console.print(f"[bold]{removed}[/bold] file(s) removed")
