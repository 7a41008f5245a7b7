"""File operations that keep extended attributes."""

from __future__ import annotations

import errno
import logging
import os

_log = logging.getLogger(__name__)

_UNSUPPORTED = {errno.ENOTSUP, errno.EOPNOTSUPP}


def _read_xattrs(path: str | os.PathLike[str]) -> dict[str, bytes]:
    if not hasattr(os, "listxattr"):
        return {}
    try:
        names = os.listxattr(path)
    except OSError as exc:
        if exc.errno in _UNSUPPORTED:
            return {}
        raise
    attrs: dict[str, bytes] = {}
    for name in names:
        try:
            value = os.getxattr(path, name)
        except OSError as exc:
            if exc.errno == getattr(errno, "ENODATA", None):
                continue
            raise
        _log.debug("got xattr %r with values %r", name, value)
        attrs[name] = value
    return attrs


def rename(src: str | os.PathLike[str], dst: str | os.PathLike[str]) -> None:
    """Rename ``src`` to ``dst``, keeping its extended attributes."""
    _log.info("Renaming %s to %s while preserving xattrs", src, dst)
    attrs = _read_xattrs(src)

    os.rename(src, dst)

    for name, value in attrs.items():
        try:
            current = os.getxattr(dst, name)
        except OSError:
            current = None
        if current == value:
            continue
        _log.debug("setting xattr %r with values %r", name, value)
        os.setxattr(dst, name, value)