"""Placement of managed files in a hash-derived directory tree."""

from __future__ import annotations

import hashlib
import os
from pathlib import Path


def subdir_path(orig_path: str | os.PathLike[str]) -> tuple[Path, str]:
    """Return a collision-resistant subdirectory for ``orig_path`` and its hash.

    Each byte of the MD5 digest of the path becomes one directory level.
    MD5 serves only as a content hash here, not for security.
    """
    digest = hashlib.md5(os.fsencode(orig_path)).digest()
    return Path(*(f"{byte:02x}" for byte in digest)), digest.hex()