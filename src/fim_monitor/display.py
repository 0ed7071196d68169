"""Display logic for add and status commands."""

from pathlib import Path
from typing import Iterable, List

from rich.console import Console
from rich.markup import escape

from .core import AddResult, StatusResult
from .errors import FimError
from .utils import display_path

# Files listed individually before collapsing into a count
MAX_LISTED = 10


def display_errors(errors: List[FimError], console: Console) -> None:
    """Show per-entry problems as warnings."""
    if not errors:
        return
    console.print()
    for error in errors:
        console.print(f"[yellow]⚠[/yellow] {escape(str(error))}")


def _sorted_display(paths: Iterable[Path], base: Path) -> List[str]:
    return sorted(display_path(p, base) for p in paths)


def display_add(result: AddResult, console: Console, base: Path) -> None:
    """Display the outcome of `fim add`.

    Args:
        result: Outcome of the add run
        console: Rich console for output
        base: Directory that paths are shown relative to
    """
    if result.tracked:
        console.print(f"[green]✓[/green] {result.summary()}")
        shown = _sorted_display(result.tracked, base)
        for path in shown[:MAX_LISTED]:
            console.print(f"  [green]+[/green] {escape(path)}")
        if len(shown) > MAX_LISTED:
            console.print(f"  [dim]... and {len(shown) - MAX_LISTED} more[/dim]")
    else:
        console.print("[yellow]No files added[/yellow]")
    display_errors(result.errors, console)


def display_status(result: StatusResult, console: Console, base: Path) -> None:
    """Display the outcome of `fim status`.

    Modified files first, then untracked files, each sorted by path.
    """
    if not result.has_changes:
        console.print("\nNo changes found!")
    else:
        if result.modified:
            console.print("\n[bold]Modified files:[/bold]")
            for path in _sorted_display(result.modified, base):
                console.print(f"  [yellow]M[/yellow] {escape(path)}")

        if result.untracked:
            console.print("\n[bold]Untracked files:[/bold]")
            for path in _sorted_display(result.untracked, base):
                console.print(f"  [red]?[/red] {escape(path)}")
            console.print("\n[dim]Track files with: fim add <path>[/dim]")

    console.print(
        f"\n[dim]{len(result.modified)} modified, {len(result.untracked)} untracked, "
        f"{result.unchanged} unchanged[/dim]"
    )
    display_errors(result.errors, console)
