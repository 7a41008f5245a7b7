"""Exceptions raised by the package and their mapping onto errno values."""

from __future__ import annotations

import errno as _errno
import os
import sqlite3
from pathlib import Path

# errno values that carry their own error category; anything else is
# treated as an uncategorised I/O failure.
_CATEGORISED_ERRNOS = frozenset(
    {
        _errno.EPERM,
        _errno.EACCES,
        _errno.ECONNREFUSED,
        _errno.ECONNRESET,
        _errno.ECONNABORTED,
        _errno.ENOTCONN,
        _errno.EADDRINUSE,
        _errno.EADDRNOTAVAIL,
        _errno.EPIPE,
        _errno.EEXIST,
        _errno.EAGAIN,
        _errno.EWOULDBLOCK,
        _errno.EINVAL,
        _errno.ETIMEDOUT,
        _errno.EINTR,
    }
)


def _quoted(path: str | os.PathLike[str]) -> str:
    return '"' + str(path) + '"'


class STagError(Exception):
    """Base class for every tagging error."""


class BadTagError(STagError):
    def __init__(self, tag: str) -> None:
        super().__init__(f"Invalid tag: {tag}")
        self.tag = tag


class BadTagGroupError(STagError):
    def __init__(self, group: str) -> None:
        super().__init__(f"Invalid tag group: {group}")
        self.group = group


class DatabaseError(STagError):
    def __init__(self, original: BaseException) -> None:
        super().__init__(f"Database error: {original!r}")
        self.original = original
        self.__cause__ = original


class NotEnoughTagsError(STagError):
    def __init__(self) -> None:
        super().__init__("Not enough tags")


class InvalidPathError(STagError):
    def __init__(self, path: str | os.PathLike[str]) -> None:
        super().__init__(f"Invalid path {path}")
        self.path = Path(path)


class NonCollectionPathError(STagError):
    def __init__(self, path: str | os.PathLike[str]) -> None:
        super().__init__(
            f"Path {_quoted(path)} not found in collection. Try using an absolute path."
        )
        self.path = Path(path)


class BadDeviceFileError(STagError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Invalid device file: {name}")
        self.name = name


class PathExistsError(STagError):
    def __init__(self, path: str | os.PathLike[str]) -> None:
        super().__init__(f"Path {_quoted(path)} already exists")
        self.path = Path(path)


class RecursiveLinkError(STagError):
    def __init__(self, path: str | os.PathLike[str]) -> None:
        super().__init__(f"Recursive symlink {_quoted(path)}")
        self.path = Path(path)


class STagIOError(STagError):
    def __init__(self, original: BaseException) -> None:
        super().__init__(f"IO error: {original!r}")
        self.original = original
        self.__cause__ = original


class OtherError(STagError):
    def __init__(self, original: BaseException) -> None:
        super().__init__(f"Other unknown error: {original!r}")
        self.original = original
        self.__cause__ = original


class ParseOctalError(ValueError):
    """Raised when a permission string is not a valid octal number."""

    def __init__(self) -> None:
        super().__init__("Bad octal value")


class InvalidMountDirError(Exception):
    """The directory to mount on does not exist."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        super().__init__(
            f"Mount directory {_quoted(path)} missing. "
            "Please create it first before mounting."
        )
        self.path = Path(path)


class ShimError(Exception):
    """An error reduced to the errno a filesystem call should report."""

    def __init__(self, errno: int, original: BaseException | None = None) -> None:
        name = _errno.errorcode.get(errno, str(errno))
        super().__init__(f"{name}: {os.strerror(errno)} ({original!r})")
        self.errno = errno
        self.original = original
        if original is not None:
            self.__cause__ = original


def from_os_error(exc: BaseException) -> STagError:
    """Wrap an OS-level exception in the matching tagging error."""
    if not isinstance(exc, OSError):
        return OtherError(exc)
    if isinstance(exc, FileNotFoundError) or exc.errno is None:
        return STagIOError(exc)
    if exc.errno == _errno.ENOENT or exc.errno not in _CATEGORISED_ERRNOS:
        return STagIOError(exc)
    return OtherError(exc)


def errno_for(exc: BaseException) -> int:
    """Return the errno that a filesystem operation failing with ``exc`` reports."""
    if isinstance(exc, ShimError):
        return exc.errno
    if isinstance(exc, PathExistsError):
        return _errno.EEXIST
    if isinstance(exc, STagError):
        return _errno.EIO
    if isinstance(exc, sqlite3.Error):
        return _errno.EIO
    if isinstance(exc, OSError):
        if exc.errno in (_errno.EACCES, _errno.EPERM):
            return _errno.EPERM
        return exc.errno if exc.errno is not None else _errno.EIO
    return _errno.EIO


def to_shim_error(exc: BaseException) -> ShimError:
    """Convert any exception into a :class:`ShimError` carrying its errno."""
    if isinstance(exc, ShimError):
        return exc
    return ShimError(errno_for(exc), exc)