"""Compare the live tree against the manifest (`fim status`).

Classification is ordered to avoid hashing where possible:

1. no record                      -> UNTRACKED
2. mtime and size both unchanged  -> UNCHANGED (no hash)
3. size changed                   -> MODIFIED (no hash)
4. only mtime changed             -> hash; same digest is UNCHANGED

A file rewritten in place with the same size and the same (or restored)
mtime is therefore reported as UNCHANGED. That is an accepted trade-off of
the metadata shortcut, not an oversight.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from .core import FileState, StatusResult
from .errors import CorruptRecordError, FileSystemAccessError, RepositoryNotFoundError
from .hashing import compute_file_digest
from .ignore import IgnoreSpec
from .manifest import ManifestStore
from .tracker import stat_fingerprint
from .walker import iter_files

logger = logging.getLogger(__name__)


def classify(path: Path, store: ManifestStore) -> FileState:
    """Classify one live file against its manifest record.

    Raises:
        CorruptRecordError: If the record exists but does not parse
        FileSystemAccessError: If the file cannot be stat'ed or read
    """
    record = store.read(path)
    if record is None:
        return FileState.UNTRACKED

    mtime, size = stat_fingerprint(path)
    if record.matches_stat(mtime, size):
        return FileState.UNCHANGED
    if record.size != size:
        return FileState.MODIFIED

    if compute_file_digest(path) == record.content_digest:
        return FileState.UNCHANGED
    return FileState.MODIFIED


def status(
    path: Union[str, Path],
    store: ManifestStore,
    ignore: Optional[IgnoreSpec] = None,
) -> StatusResult:
    """Classify every regular file under a path.

    Files whose record is corrupt are reported and counted as untracked.
    Files that cannot be read are reported and left out of both sets.
    Tracked files that no longer exist are not detected.

    Raises:
        RepositoryNotFoundError: If the store does not exist
    """
    if not store.exists():
        raise RepositoryNotFoundError(store.root)

    root = Path(path).resolve()
    result = StatusResult()

    def on_error(error) -> None:
        logger.warning("%s", error)
        result.errors.append(error)

    for file_path in iter_files(root, store_name=store.root.name, ignore=ignore, on_error=on_error):
        try:
            state = classify(file_path, store)
        except CorruptRecordError as e:
            on_error(e)
            state = FileState.UNTRACKED
        except FileSystemAccessError as e:
            on_error(e)
            continue
        logger.debug("%s: %s", file_path, state.value)
        result.record(file_path, state)

    return result
