"""Manifest store: one record file per tracked path.

Records live directly in the store directory and are named by the digest of
the tracked file's absolute path. Because the key is a one-way digest, the
store cannot list which paths it tracks; every operation starts from a walk
of the live tree and looks records up one by one.

Writes are atomic (temp file + rename), so a concurrent reader sees either
the old record or the new one, never a partial line.
"""

import contextlib
import logging
import os
import tempfile
from pathlib import Path
from typing import Iterator, Optional, Union

import portalocker

from .constants import LOCK_FILE, LOCK_TIMEOUT
from .core import TrackedFile
from .errors import (
    CorruptRecordError,
    FileSystemAccessError,
    RepositoryExistsError,
    StoreLockedError,
)
from .hashing import compute_path_key

logger = logging.getLogger(__name__)


def _fsync_dir(path: Path) -> None:
    """Fsync a directory so a rename inside it is durable.

    Best-effort: Windows and some filesystems don't support directory fsync.
    """
    try:
        flags = os.O_RDONLY
        if hasattr(os, "O_DIRECTORY"):
            flags |= os.O_DIRECTORY

        fd = os.open(str(path), flags)
        try:
            os.fsync(fd)
        finally:
            os.close(fd)
    except OSError:
        logger.debug("Directory fsync not supported for %s", path)


def _atomic_write_text(path: Path, text: str) -> None:
    """Atomically write text to an existing directory.

    1. Writes to a temp file in the same directory and fsyncs it
    2. Renames it over the target (appears all-at-once)
    3. Fsyncs the directory so the rename survives a crash
    """
    with tempfile.NamedTemporaryFile(
        mode="w",
        delete=False,
        dir=path.parent,
        prefix=f".{path.name}.tmp-",
        suffix="",
    ) as f:
        f.write(text)
        f.flush()
        os.fsync(f.fileno())
        tmp = Path(f.name)

    try:
        os.replace(tmp, path)
    except Exception:
        tmp.unlink(missing_ok=True)
        raise
    _fsync_dir(path.parent)


class ManifestStore:
    """Flat key-value store of baseline fingerprints."""

    def __init__(self, root: Path):
        """Initialize the store.

        Args:
            root: Absolute path of the store directory
        """
        self.root = root

    def __repr__(self) -> str:
        return f"ManifestStore({str(self.root)!r})"

    def exists(self) -> bool:
        """Check whether the store directory exists."""
        return self.root.is_dir()

    def initialize(self) -> None:
        """Create the store directory.

        Raises:
            RepositoryExistsError: If the store already exists
        """
        try:
            self.root.mkdir()
        except FileExistsError:
            raise RepositoryExistsError(self.root)
        logger.debug("Created manifest store at %s", self.root)

    def key_for(self, path: Union[str, Path]) -> str:
        """Get the record key for a path."""
        return compute_path_key(path)

    def record_path(self, path: Union[str, Path]) -> Path:
        """Get the record file location for a path."""
        return self.root / self.key_for(path)

    def write(self, path: Path, mtime: int, size: int, content_digest: str) -> TrackedFile:
        """Write (or overwrite) the record for a path.

        Returns:
            The record that was written

        Raises:
            FileSystemAccessError: If the record cannot be written
        """
        record = TrackedFile(mtime=mtime, size=size, content_digest=content_digest)
        record_path = self.record_path(path)
        try:
            _atomic_write_text(record_path, record.to_record())
        except OSError as e:
            raise FileSystemAccessError(record_path, f"write manifest record for {path} to", e) from e
        logger.debug("Recorded %s -> %s", path, record_path.name)
        return record

    def read(self, path: Path) -> Optional[TrackedFile]:
        """Read the record for a path.

        Returns:
            The record, or None if the path was never tracked

        Raises:
            CorruptRecordError: If the record does not parse
            FileSystemAccessError: If the record exists but cannot be read
        """
        record_path = self.record_path(path)
        try:
            text = record_path.read_text(errors="replace")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise FileSystemAccessError(record_path, f"read manifest record for {path} from", e) from e

        try:
            return TrackedFile.from_record(text)
        except ValueError:
            raise CorruptRecordError(path, record_path, text)

    @contextlib.contextmanager
    def lock(self, timeout: float = LOCK_TIMEOUT) -> Iterator[None]:
        """Hold the store's exclusive writer lock.

        Raises:
            StoreLockedError: If the lock is not acquired within timeout
        """
        lock_path = self.root / LOCK_FILE
        try:
            with portalocker.Lock(str(lock_path), "w", timeout=timeout):
                yield
        except portalocker.LockException:
            raise StoreLockedError(self.root, timeout)
