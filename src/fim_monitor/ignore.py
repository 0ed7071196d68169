"""Gitignore-style pattern matching for fim-monitor."""

import logging
from pathlib import Path
from typing import Iterable, List

from pathspec import GitIgnoreSpec

from .constants import FIM_DIR, IGNORE_FILE

logger = logging.getLogger(__name__)


# Default patterns to always ignore
DEFAULTS = [
    # Manifest store
    f"{FIM_DIR}/",
]


def _valid_patterns(patterns: Iterable[str], source: str) -> List[str]:
    """Drop patterns that do not compile, warning about each one."""
    valid = []
    for pattern in patterns:
        try:
            GitIgnoreSpec.from_lines([pattern])
        except ValueError as e:
            logger.warning("Ignoring invalid pattern %r in %s: %s", pattern, source, e)
            continue
        valid.append(pattern)
    return valid


class IgnoreSpec:
    """Manages gitignore-style patterns for file exclusion."""

    def __init__(self, root: Path, extra: Iterable[str] = ()):
        """Initialize ignore spec with default and custom patterns.

        Unreadable ignore files and invalid patterns are logged and skipped.

        Args:
            root: Working tree root (the directory holding the store)
            extra: Additional patterns to include
        """
        self.root = root
        patterns = list(DEFAULTS)

        # Load project-specific .fimignore if it exists
        ignore_file = root / IGNORE_FILE
        if ignore_file.exists():
            try:
                content = ignore_file.read_text()
            except (OSError, UnicodeDecodeError) as e:
                logger.warning("Could not read %s: %s", ignore_file, e)
                content = ""
            # Split by lines, filter out empty lines and comments
            lines = []
            for line in content.splitlines():
                line = line.strip()
                if line and not line.startswith("#"):
                    lines.append(line)
            patterns.extend(_valid_patterns(lines, IGNORE_FILE))

        patterns.extend(_valid_patterns(extra, "config"))
        self.patterns = patterns

        # Compile patterns once for efficiency
        self.spec = GitIgnoreSpec.from_lines(patterns)

    def is_ignored(self, relpath: str) -> bool:
        """Check if a root-relative POSIX path should be ignored."""
        return self.spec.match_file(relpath)

    def should_traverse(self, dirpath: str) -> bool:
        """Check if a root-relative directory should be descended into."""
        if dirpath == FIM_DIR or dirpath.startswith(f"{FIM_DIR}/"):
            return False

        # Add trailing slash to match directory patterns
        if not dirpath.endswith("/"):
            dirpath = dirpath + "/"

        return not self.spec.match_file(dirpath)

    def excludes(self, path: Path, is_dir: bool = False) -> bool:
        """Check an absolute path; paths outside the root are never excluded."""
        try:
            relpath = path.relative_to(self.root).as_posix()
        except ValueError:
            return False
        if relpath == ".":
            return False
        if is_dir:
            return not self.should_traverse(relpath)
        return self.is_ignored(relpath)
