"""Minimal file-integrity monitor: baseline fingerprints and change status."""

from .constants import FIM_VERSION as __version__

__all__ = ["__version__"]
