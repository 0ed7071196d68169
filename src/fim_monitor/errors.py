"""Custom exceptions for fim-monitor.

This module defines typed exceptions for better error handling and clearer
error messages throughout the application. Errors that end a command carry
the exit code the CLI should use.
"""

from pathlib import Path
from typing import Optional

from .constants import ExitCode


class FimError(RuntimeError):
    """Base class for all fim-related errors."""
    pass


# Usage Errors
class UsageError(FimError):
    """Wrong command or wrong number of arguments."""

    def __init__(self, message: str, exit_code: ExitCode = ExitCode.USAGE):
        self.exit_code = exit_code
        super().__init__(message)


# Repository State Errors
class RepositoryStateError(FimError):
    """Base class for errors about the presence of the manifest store."""

    exit_code: ExitCode = ExitCode.NO_REPOSITORY


class RepositoryExistsError(RepositoryStateError):
    """`init` run where a store already exists."""

    exit_code = ExitCode.REPOSITORY_EXISTS

    def __init__(self, store_dir: Path):
        self.store_dir = store_dir
        super().__init__(
            f"fim repository already exists at {store_dir}. "
            f"Failed to create a new one."
        )


class RepositoryNotFoundError(RepositoryStateError):
    """Tracking command run without a store."""

    exit_code = ExitCode.NO_REPOSITORY

    def __init__(self, store_dir: Path):
        self.store_dir = store_dir
        super().__init__(
            f"No fim repository found at {store_dir}. "
            f"Use 'fim init' to create an empty repository."
        )


class StoreLockedError(RepositoryStateError):
    """Another process held the store lock for too long."""

    exit_code = ExitCode.STORE_LOCKED

    def __init__(self, store_dir: Path, timeout: float):
        self.store_dir = store_dir
        self.timeout = timeout
        super().__init__(
            f"fim repository at {store_dir} is locked by another process "
            f"(waited {timeout:g}s)"
        )


# Filesystem Errors
class FileSystemAccessError(FimError):
    """A single entry could not be listed, read or written.

    These are reported per entry and never abort a walk.
    """

    def __init__(
        self,
        path: Path,
        action: str,
        cause: Optional[OSError] = None,
        reason: Optional[str] = None,
    ):
        self.path = path
        self.action = action
        self.cause = cause
        if reason is None and cause is not None:
            reason = cause.strerror or str(cause)
        self.reason = reason
        message = f"Cannot {action} {path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


# Integrity Errors
class IntegrityError(FimError):
    """Base class for manifest integrity errors."""
    pass


class CorruptRecordError(IntegrityError):
    """Manifest record exists but does not parse as (mtime, size, digest)."""

    def __init__(self, path: Path, record_path: Path, content: str):
        self.path = path
        self.record_path = record_path
        self.content = content
        super().__init__(
            f"Corrupt manifest record for {path} ({record_path.name}): "
            f"{content[:80]!r}. Run 'fim add' on it again to repair."
        )
