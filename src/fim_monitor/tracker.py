"""Record baseline fingerprints (`fim add`)."""

import logging
from pathlib import Path
from typing import Optional, Tuple, Union

from .core import AddResult, TrackedFile
from .errors import FileSystemAccessError, RepositoryNotFoundError
from .hashing import compute_file_digest
from .ignore import IgnoreSpec
from .manifest import ManifestStore
from .walker import iter_files

logger = logging.getLogger(__name__)


def stat_fingerprint(path: Path) -> Tuple[int, int]:
    """Read (mtime, size) from filesystem metadata.

    mtime is truncated to whole seconds, the precision records keep.

    Raises:
        FileSystemAccessError: If the file cannot be stat'ed
    """
    try:
        st = path.stat()
    except OSError as e:
        raise FileSystemAccessError(path, "stat", e) from e
    return int(st.st_mtime), st.st_size


def track_file(path: Path, store: ManifestStore) -> TrackedFile:
    """Fingerprint one file and overwrite its manifest record."""
    mtime, size = stat_fingerprint(path)
    digest = compute_file_digest(path)
    return store.write(path, mtime, size, digest)


def add(
    path: Union[str, Path],
    store: ManifestStore,
    ignore: Optional[IgnoreSpec] = None,
) -> AddResult:
    """Track every regular file under a path.

    Failures on individual entries are collected in the result and logged;
    they never stop the walk. Records written before a failure stay written.
    A path inside the store itself is refused and reported the same way.

    Args:
        path: File or directory, relative to the current directory or absolute
        store: Manifest store to write to
        ignore: Optional patterns excluding files from the walk

    Returns:
        AddResult with tracked paths, their total size and per-entry errors

    Raises:
        RepositoryNotFoundError: If the store does not exist
    """
    if not store.exists():
        raise RepositoryNotFoundError(store.root)

    root = Path(path).resolve()
    result = AddResult()

    def on_error(error: FileSystemAccessError) -> None:
        logger.warning("%s", error)
        result.errors.append(error)

    if root == store.root or store.root in root.parents:
        on_error(FileSystemAccessError(root, "track", reason="path is inside the manifest store"))
        return result

    with store.lock():
        for file_path in iter_files(root, store_name=store.root.name, ignore=ignore, on_error=on_error):
            try:
                record = track_file(file_path, store)
            except FileSystemAccessError as e:
                on_error(e)
                continue
            result.tracked.append(file_path)
            result.total_size += record.size

    logger.debug("Tracked %d files under %s", len(result.tracked), root)
    return result
