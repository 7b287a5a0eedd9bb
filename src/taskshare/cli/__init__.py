"""CLI commands for taskshare.

Provides command-line interface using Typer:
- taskshare run: Join a distribution round and process claimed tasks
- taskshare status: Inspect the shared round files
- taskshare clean: Remove leftovers of an unfinished round

Usage:
    taskshare --help
    taskshare run --tasks 10 --workdir /mnt/shared
    taskshare status --format json
    taskshare clean --force
"""

import typer

from taskshare.cli.clean_cmd import app as clean_app
from taskshare.cli.run_cmd import app as run_app
from taskshare.cli.status_cmd import app as status_app

# Main CLI application
app = typer.Typer(
    name="taskshare",
    help="taskshare: split tasks across processes sharing a filesystem",
    no_args_is_help=True,
)

# Add subcommands
app.add_typer(run_app, name="run")
app.add_typer(status_app, name="status")
app.add_typer(clean_app, name="clean")


@app.callback()
def callback() -> None:
    """taskshare: split tasks across processes sharing a filesystem."""
    pass


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
