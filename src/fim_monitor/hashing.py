"""Hashing utilities for manifest keys and content fingerprints.

Both uses share one digest: MD5 rendered as 32 lowercase hex characters.
Collision resistance is not part of the threat model here; what matters is
that the output is deterministic across runs and platforms, because it is
persisted as record file names and record content.
"""

import hashlib
import os
from pathlib import Path
from typing import Union

from .errors import FileSystemAccessError


def compute_digest(data: Union[bytes, str]) -> str:
    """Compute the digest of a byte sequence or string.

    Strings are encoded with ``os.fsencode`` so that paths with undecodable
    bytes (surrogate escapes) still hash to the same value every time.

    Args:
        data: Bytes to hash, or a string to encode first

    Returns:
        32-character lowercase hex digest
    """
    if isinstance(data, str):
        data = os.fsencode(data)
    return hashlib.md5(data).hexdigest()


def compute_path_key(path: Union[str, Path]) -> str:
    """Compute the manifest key for a path.

    The path is made absolute first; it is not resolved, so callers that
    want symlink-free keys must resolve before calling.
    """
    return compute_digest(os.path.abspath(os.fspath(path)))


def compute_file_digest(path: Path) -> str:
    """Compute the content digest of a file.

    The whole file is read into memory before hashing. An empty file hashes
    zero bytes.

    Args:
        path: Path to file to hash

    Returns:
        32-character lowercase hex digest

    Raises:
        FileSystemAccessError: If the file cannot be read
    """
    try:
        content = path.read_bytes()
    except OSError as e:
        raise FileSystemAccessError(path, "read", e) from e
    return compute_digest(content)


__all__ = [
    "compute_digest",
    "compute_path_key",
    "compute_file_digest",
]
