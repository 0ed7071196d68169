"""Core data models for fim-monitor.

Fingerprint records, walk entries and the results of `add` and `status`.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Set

from pydantic import BaseModel, Field

from .errors import FimError
from .utils import humanize_size

RECORD_PATTERN = re.compile(r"(-?[0-9]+)\s+([0-9]+)\s+([0-9a-f]{32})", re.ASCII)


# ============= Manifest Records =============

class TrackedFile(BaseModel):
    """Baseline fingerprint of one file (one manifest record).

    Stored on disk as a single line: ``<mtime> <size> <content_digest>``.
    """

    mtime: int  # whole seconds since epoch
    size: int = Field(ge=0)
    content_digest: str = Field(pattern=r"^[0-9a-f]{32}$")

    def to_record(self) -> str:
        """Serialize to the on-disk record format."""
        return f"{self.mtime} {self.size} {self.content_digest}"

    @classmethod
    def from_record(cls, text: str) -> "TrackedFile":
        """Parse the on-disk record format.

        Raises:
            ValueError: If the text is not exactly three valid tokens
        """
        match = RECORD_PATTERN.fullmatch(text.strip())
        if match is None:
            raise ValueError(f"malformed record: {text[:80]!r}")
        mtime, size, digest = match.groups()
        return cls(mtime=int(mtime), size=int(size), content_digest=digest)

    def matches_stat(self, mtime: int, size: int) -> bool:
        """Check whether live metadata equals the recorded metadata."""
        return self.mtime == mtime and self.size == size


# ============= Tree Walking =============

class EntryKind(str, Enum):
    """Kind of entry produced by the tree walker."""

    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True)
class WalkEntry:
    """One entry of a working tree walk."""
    path: Path
    kind: EntryKind

    @property
    def is_file(self) -> bool:
        return self.kind == EntryKind.FILE


# ============= Change Detection =============

class FileState(str, Enum):
    """Classification of a live file against its manifest record."""

    UNCHANGED = "unchanged"
    UNTRACKED = "untracked"
    MODIFIED = "modified"


@dataclass
class AddResult:
    """Outcome of an `add` run."""

    tracked: List[Path] = field(default_factory=list)
    total_size: int = 0
    errors: List[FimError] = field(default_factory=list)

    def summary(self) -> str:
        """Get human-readable summary."""
        parts = [f"Tracked {len(self.tracked)} files ({humanize_size(self.total_size)})"]
        if self.errors:
            parts.append(f"{len(self.errors)} skipped")
        return ", ".join(parts)


@dataclass
class StatusResult:
    """Outcome of a `status` run.

    `modified` and `untracked` are disjoint; tracked files that did not
    change are only counted.
    """

    modified: Set[Path] = field(default_factory=set)
    untracked: Set[Path] = field(default_factory=set)
    unchanged: int = 0
    errors: List[FimError] = field(default_factory=list)

    def record(self, path: Path, state: FileState) -> None:
        """Add one classified file to the result."""
        if state == FileState.MODIFIED:
            self.modified.add(path)
        elif state == FileState.UNTRACKED:
            self.untracked.add(path)
        else:
            self.unchanged += 1

    @property
    def has_changes(self) -> bool:
        """Check if any file is modified or untracked."""
        return bool(self.modified or self.untracked)
