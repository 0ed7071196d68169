"""Utility functions for fim-monitor."""

from pathlib import Path


def humanize_size(size: float) -> str:
    """Convert bytes to human-readable format."""
    for unit in ["B", "KB", "MB", "GB"]:
        if size < 1024.:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} TB"


def display_path(path: Path, base: Path) -> str:
    """Render a path relative to base when it lies inside it.

    Examples:
        /work/src/a.py, base /work -> "src/a.py"
        /elsewhere/b.txt, base /work -> "/elsewhere/b.txt"
    """
    try:
        return path.relative_to(base).as_posix()
    except ValueError:
        return str(path)
