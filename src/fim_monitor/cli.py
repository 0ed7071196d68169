"""CLI for fim-monitor."""

import logging
import os
from typing import List, NoReturn, Optional, Union

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from . import detector, tracker
from .config import FimConfig, save_config
from .constants import FIM_DIR, ExitCode
from .context import RepoContext
from .display import display_add, display_status
from .errors import RepositoryExistsError, RepositoryStateError, UsageError


app = typer.Typer(
    help="""\
Minimal file-integrity monitor. Record a baseline fingerprint of every file
under the working tree, then report which files were modified and which are
new.""",
    add_completion=False,
)

console = Console()

USAGE = f"""\
[bold]Usage:[/bold]
  fim init            Create an empty repository ({FIM_DIR}) in the current directory
  fim add <path>      Add the path to the list of files tracked
  fim status          Show modified and untracked files under the current directory
"""


def _configure_logging(verbose: bool) -> None:
    """Route library logging through rich.

    Per-file warnings are rendered by the commands themselves, so the
    handler stays quiet unless --verbose or DEBUG is set.
    """
    level = logging.DEBUG if verbose or os.environ.get("DEBUG") else logging.ERROR
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_time=False, show_path=False)],
        force=True,
    )


def _print_usage() -> None:
    console.print()
    console.print(USAGE)


def fail(error: Union[UsageError, RepositoryStateError]) -> NoReturn:
    """Report an error that ends the command and exit with its code.

    Raises:
        typer.Exit: Always
    """
    console.print(f"[red]error:[/red] {escape(str(error))}")
    if isinstance(error, UsageError):
        _print_usage()
    raise typer.Exit(int(error.exit_code))


def require_repo_context() -> RepoContext:
    """Ensure the current directory holds a repository and return its context.

    Raises:
        typer.Exit: If no store exists
    """
    ctx = RepoContext()
    try:
        ctx.require_initialized()
    except RepositoryStateError as e:
        fail(e)
    return ctx


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every file visited"),
):
    """Minimal file-integrity monitor."""
    _configure_logging(verbose)
    if ctx.invoked_subcommand is None:
        fail(UsageError("Invalid command", ExitCode.USAGE))


@app.command()
def init(
    args: Optional[List[str]] = typer.Argument(None, hidden=True),
):
    """Create an empty repository in the current directory.

    Fails if the current directory already holds one.

    Examples:
        fim init
    """
    repo = RepoContext()
    if repo.is_initialized():
        fail(RepositoryExistsError(repo.storage_dir))
    if args:
        fail(UsageError("fim init does not take any arguments", ExitCode.INIT_ARGS))

    try:
        repo.store.initialize()
    except RepositoryStateError as e:
        fail(e)
    save_config(FimConfig(), repo.storage_dir)

    console.print(f"[green]✓[/green] Initialized empty fim repository in {escape(str(repo.storage_dir))}")


@app.command()
def add(
    paths: Optional[List[str]] = typer.Argument(None, help="File or directory to track", metavar="PATH"),
):
    """Record the fingerprint of every file under PATH.

    Re-adding a path overwrites its previous fingerprints.

    Examples:
        fim add src/model.py    # Track a single file
        fim add .               # Track the whole working tree
    """
    repo = require_repo_context()
    if not paths:
        fail(UsageError("Expected path as argument", ExitCode.ADD_ARGS))
    if len(paths) > 1:
        fail(UsageError("fim add takes exactly one path", ExitCode.ADD_ARGS))

    try:
        result = tracker.add(paths[0], repo.store, ignore=repo.get_ignore_spec())
    except RepositoryStateError as e:
        fail(e)
    display_add(result, console, repo.root)


@app.command()
def status(
    args: Optional[List[str]] = typer.Argument(None, hidden=True),
):
    """Show modified and untracked files under the current directory.

    Tracked files that were deleted are not reported.

    Examples:
        fim status
    """
    repo = require_repo_context()
    if args:
        fail(UsageError("fim status does not take any arguments", ExitCode.STATUS_ARGS))

    try:
        result = detector.status(repo.root, repo.store, ignore=repo.get_ignore_spec())
    except RepositoryStateError as e:
        fail(e)
    display_status(result, console, repo.root)


def main():
    """Entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
