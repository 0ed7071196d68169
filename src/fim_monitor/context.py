"""Repository context for locating the manifest store."""

from pathlib import Path
from typing import Optional

from .config import FimConfig, load_config
from .constants import FIM_DIR
from .errors import RepositoryNotFoundError
from .ignore import IgnoreSpec
from .manifest import ManifestStore


class RepoContext:
    """Manages the working tree root and its manifest store.

    The store sits at a fixed hidden path under the invocation directory.
    Unlike git there is no upward search: running from a subdirectory
    means a different (usually missing) repository.
    """

    def __init__(self, root: Optional[Path] = None):
        """Initialize context for a working tree.

        Args:
            root: Working tree root (default: current directory)
        """
        self.root = (root or Path.cwd()).resolve()
        self.store = ManifestStore(self.storage_dir)
        self._config: Optional[FimConfig] = None
        self._ignore_spec: Optional[IgnoreSpec] = None

    @property
    def storage_dir(self) -> Path:
        """Get the manifest store directory."""
        return self.root / FIM_DIR

    def is_initialized(self) -> bool:
        """Check whether the store exists."""
        return self.store.exists()

    def require_initialized(self) -> None:
        """Raise unless the store exists.

        Raises:
            RepositoryNotFoundError: If the store is missing
        """
        if not self.store.exists():
            raise RepositoryNotFoundError(self.storage_dir)

    @classmethod
    def init(cls, root: Optional[Path] = None) -> "RepoContext":
        """Create the manifest store for a working tree.

        Raises:
            RepositoryExistsError: If the store already exists
        """
        ctx = cls(root)
        ctx.store.initialize()
        return ctx

    @property
    def config(self) -> FimConfig:
        """Get repository configuration (memoized)."""
        if self._config is None:
            self._config = load_config(self.storage_dir)
        return self._config

    def get_ignore_spec(self) -> IgnoreSpec:
        """Get the ignore specification (memoized)."""
        if self._ignore_spec is None:
            self._ignore_spec = IgnoreSpec(self.root, extra=self.config.ignore)
        return self._ignore_spec
