"""Working tree traversal.

The walk is a depth-first, pre-order generator driven by an explicit stack.
Only regular files and directories are produced; symlinks are never followed
and other entry types are skipped. Results come out in filesystem
enumeration order, which differs between platforms.
"""

import logging
import os
import stat
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Union

from .constants import FIM_DIR
from .core import EntryKind, WalkEntry
from .errors import FileSystemAccessError
from .ignore import IgnoreSpec

logger = logging.getLogger(__name__)

ErrorHandler = Callable[[FileSystemAccessError], None]


def _log_error(error: FileSystemAccessError) -> None:
    logger.warning("%s", error)


def _entry_kind(entry: os.DirEntry) -> Optional[EntryKind]:
    """Classify a directory entry without following symlinks."""
    if entry.is_dir(follow_symlinks=False):
        return EntryKind.DIRECTORY
    if entry.is_file(follow_symlinks=False):
        return EntryKind.FILE
    return None


def walk(
    root: Union[str, Path],
    store_name: str = FIM_DIR,
    ignore: Optional[IgnoreSpec] = None,
    on_error: Optional[ErrorHandler] = None,
) -> Iterator[WalkEntry]:
    """Walk a file or directory tree.

    Every call performs a fresh traversal. A root that is a regular file
    yields just that file. Directories named ``store_name`` are never
    entered, not even as the root, and neither are directories excluded by
    ``ignore``.

    Args:
        root: File or directory to walk
        store_name: Directory name to skip at any depth
        ignore: Optional ignore patterns applied to every entry
        on_error: Called with a FileSystemAccessError for every entry that
            cannot be accessed; defaults to logging a warning. Traversal
            continues with the next sibling either way.

    Yields:
        WalkEntry for every subdirectory and regular file, parents first
    """
    report = on_error or _log_error
    root = Path(root)

    if root.name == store_name:
        report(FileSystemAccessError(root, "walk", reason="path is the manifest store"))
        return

    try:
        root_stat = root.stat()
    except OSError as e:
        report(FileSystemAccessError(root, "access", e))
        return

    if stat.S_ISREG(root_stat.st_mode):
        yield WalkEntry(root, EntryKind.FILE)
        return
    if not stat.S_ISDIR(root_stat.st_mode):
        logger.debug("Skipping %s: not a regular file or directory", root)
        return

    # Children are pushed in reverse so they pop in enumeration order
    stack: List[WalkEntry] = [WalkEntry(root, EntryKind.DIRECTORY)]
    while stack:
        current = stack.pop()
        if current.is_file:
            yield current
            continue
        if current.path != root:
            yield current

        try:
            with os.scandir(current.path) as it:
                entries = list(it)
        except OSError as e:
            report(FileSystemAccessError(current.path, "open directory", e))
            continue

        children: List[WalkEntry] = []
        for entry in entries:
            if entry.name in (".", ".."):
                continue
            path = current.path / entry.name
            try:
                kind = _entry_kind(entry)
            except OSError as e:
                report(FileSystemAccessError(path, "stat", e))
                continue
            if kind is None:
                logger.debug("Skipping %s: not a regular file or directory", path)
                continue
            if kind == EntryKind.DIRECTORY and entry.name == store_name:
                continue
            if ignore is not None and ignore.excludes(path, is_dir=kind == EntryKind.DIRECTORY):
                logger.debug("Ignoring %s", path)
                continue
            children.append(WalkEntry(path, kind))

        stack.extend(reversed(children))


def iter_files(
    root: Union[str, Path],
    store_name: str = FIM_DIR,
    ignore: Optional[IgnoreSpec] = None,
    on_error: Optional[ErrorHandler] = None,
) -> Iterator[Path]:
    """Walk a tree and yield only regular file paths."""
    for entry in walk(root, store_name=store_name, ignore=ignore, on_error=on_error):
        if entry.is_file:
            yield entry.path
