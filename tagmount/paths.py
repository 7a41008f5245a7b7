"""Helpers for tag-path names, file identity and small utilities."""

from __future__ import annotations

import os
import sys
from pathlib import Path, PurePath
from typing import Any, TypeVar

from .constants import NEGATIVE_TAG_PREFIX, UNLINK_NAME, VERSION
from .errors import InvalidPathError, OtherError

_Seq = TypeVar("_Seq", bytes, bytearray, str, list, tuple)


def get_device_inode(path: str | os.PathLike[str]) -> tuple[int, int]:
    """Return the ``(device, inode)`` pair of a file on a real filesystem."""
    try:
        st = os.stat(path)
    except OSError as exc:
        raise OtherError(exc) from exc
    return st.st_dev, st.st_ino


def _as_text(path: Any) -> str:
    text = os.fspath(path)
    if isinstance(text, bytes):
        try:
            return text.decode("utf-8")
        except UnicodeDecodeError:
            raise InvalidPathError(os.fsdecode(text)) from None
    return text


def get_filename(path: str | os.PathLike[str]) -> str:
    """Return the last component of ``path``."""
    text = _as_text(path)
    if not text:
        raise InvalidPathError(text)
    parts = PurePath(text).parts
    if not parts:
        return "."
    return parts[-1]


def primary_tag(path: str | os.PathLike[str], device_char: str) -> str | None:
    """Return the filename up to the device marker, or None if it is too short."""
    filename = get_filename(path)
    head = filename.split(device_char, 1)[0]
    return head if len(head) > 1 else None


def strip_negative_tag(tag: str) -> str | None:
    """Return ``tag`` without its negation prefix, or None if it has none."""
    if tag.startswith(NEGATIVE_TAG_PREFIX):
        return tag[len(NEGATIVE_TAG_PREFIX):]
    return None


def _split_ext(name: str) -> tuple[str, str | None]:
    base, sep, ext = name.rpartition(".")
    if not sep:
        return name, None
    return base, ext


def strip_ext_prefix(name: str, prefix: str) -> str | None:
    """Remove ``prefix`` sitting just before the extension, if it is there."""
    base, ext = _split_ext(name)
    if not base.endswith(prefix):
        return None
    trimmed = base[: len(base) - len(prefix)]
    return trimmed if ext is None else f"{trimmed}.{ext}"


def has_ext_prefix(name: str, to_check: str) -> bool:
    """Check whether ``to_check`` sits right before a (possibly absent) extension."""
    return _split_ext(name)[0].endswith(to_check)


def set_ext_prefix(name: str, to_prefix: str) -> str:
    """Insert ``to_prefix`` right before the extension of ``name``."""
    base, ext = _split_ext(name)
    if ext is None:
        return f"{name}{to_prefix}"
    return f"{base}{to_prefix}.{ext}"


def creatable_tag_group(settings: Any, name: str) -> bool:
    """Whether ``name`` may be used as the name of a new tag group."""
    symbols = settings.config.symbols
    return (
        not has_ext_prefix(name, symbols.tag_group_str)
        and os.sep not in name
        and name != symbols.filedir_str
    )


def name_to_tag_group(settings: Any, name: str) -> str:
    """Turn a plain name into its tag-group directory name."""
    return set_ext_prefix(name, settings.config.symbols.tag_group_str)


def should_unlink(name: str) -> bool:
    """Whether renaming to ``name`` requests a delete."""
    # Finder cannot drop the extension on rename, so macOS also accepts "delete.<ext>".
    if sys.platform == "darwin":
        return name == UNLINK_NAME or name.startswith(f"{UNLINK_NAME}.")
    return name == UNLINK_NAME


def read_from_slice(src: _Seq, offset: int, size: int) -> _Seq:
    """Read up to ``size`` items of ``src`` starting at ``offset``."""
    if offset < 0 or size < 0:
        raise ValueError("offset and size must not be negative")
    return src[offset: offset + size]


def version_str() -> str:
    """The package version as ``major.minor.patch``."""
    return ".".join(VERSION)


def appdir() -> Path | None:
    """The AppImage directory, when running inside one."""
    value = os.environ.get("APPDIR")
    return Path(value) if value is not None else None