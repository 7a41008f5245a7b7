"""Tag types parsed from paths and collections of them."""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum
from itertools import pairwise
from pathlib import Path
from typing import Any

from .constants import NEGATIVE_TAG_PREFIX
from .errors import InvalidPathError, NotEnoughTagsError
from .paths import get_device_inode, set_ext_prefix


@dataclass(frozen=True)
class DeviceFile:
    """A file identified by its name, device and inode numbers."""

    filename: str
    device: int
    inode: int

    @classmethod
    def from_path(cls, path: str | os.PathLike[str]) -> DeviceFile:
        device, inode = get_device_inode(path)
        filename = Path(path).name
        if filename in ("", ".."):
            raise InvalidPathError(path)
        return cls(filename, device, inode)

    @classmethod
    def from_tagged_file(cls, tagged_file: Any) -> DeviceFile:
        return cls(tagged_file.primary_tag, tagged_file.device, tagged_file.inode)

    def inodify(self, settings: Any) -> str:
        return settings.inodify_filename(self.filename, self.device, self.inode)

    def matches(self, tagged_file: Any) -> bool:
        return (
            tagged_file.primary_tag == self.filename
            and tagged_file.device == self.device
            and tagged_file.inode == self.inode
        )

    def __str__(self) -> str:
        return f"<DeviceFile filename={self.filename} device={self.device} inode={self.inode}>"


class TagKind(Enum):
    REGULAR = "Regular"
    NEGATION = "Negation"
    GROUP = "Group"
    FILE_DIR = "FileDir"
    DEVICE_FILE_SYMLINK = "DeviceFileSymlink"
    SYMLINK = "Symlink"


@dataclass(frozen=True)
class TagType:
    """One component of a tag path."""

    kind: TagKind
    value: str | DeviceFile | None = None

    def __post_init__(self) -> None:
        if self.kind is TagKind.FILE_DIR:
            if self.value is not None:
                raise TypeError("FileDir carries no value")
        elif self.kind is TagKind.DEVICE_FILE_SYMLINK:
            if not isinstance(self.value, DeviceFile):
                raise TypeError("DeviceFileSymlink needs a DeviceFile")
        elif not isinstance(self.value, str):
            raise TypeError(f"{self.kind.value} needs a name")

    @classmethod
    def regular(cls, name: str) -> TagType:
        return cls(TagKind.REGULAR, name)

    @classmethod
    def negation(cls, name: str) -> TagType:
        return cls(TagKind.NEGATION, name)

    @classmethod
    def group(cls, name: str) -> TagType:
        return cls(TagKind.GROUP, name)

    @classmethod
    def file_dir(cls) -> TagType:
        return cls(TagKind.FILE_DIR)

    @classmethod
    def device_file_symlink(cls, device_file: DeviceFile) -> TagType:
        return cls(TagKind.DEVICE_FILE_SYMLINK, device_file)

    @classmethod
    def symlink(cls, name: str) -> TagType:
        return cls(TagKind.SYMLINK, name)

    def to_path_part(self, settings: Any) -> str:
        """Render this tag back into a path component."""
        symbols = settings.config.symbols
        match self.kind:
            case TagKind.NEGATION:
                return f"{NEGATIVE_TAG_PREFIX}{self.value}"
            case TagKind.GROUP:
                return set_ext_prefix(self.value, symbols.tag_group_str)
            case TagKind.FILE_DIR:
                return symbols.filedir_str
            case TagKind.DEVICE_FILE_SYMLINK:
                return self.value.inodify(settings)
            case _:
                return self.value

    def __str__(self) -> str:
        if self.kind is TagKind.FILE_DIR:
            return "FileDir"
        if self.kind is TagKind.DEVICE_FILE_SYMLINK:
            return str(self.value)
        return f"{self.kind.value}({self.value})"


def collect_regular_names(tags: Iterable[TagType]) -> list[str]:
    return [tt.value for tt in tags if tt.kind is TagKind.REGULAR]


def collect_regular(tags: Iterable[TagType]) -> list[TagType]:
    return [tt for tt in tags if tt.kind is TagKind.REGULAR]


def collect_pinnable(tags: Iterable[TagType]) -> list[TagType]:
    """Regular tags and groups that can be pinned, skipping consecutive groups."""
    pinnable: list[TagType] = []
    last_was_group = False
    for tt in tags:
        if tt.kind is TagKind.REGULAR:
            pinnable.append(tt)
            last_was_group = False
        elif tt.kind is TagKind.GROUP:
            if not last_was_group:
                pinnable.append(tt)
            last_was_group = True
        else:
            last_was_group = False
    return pinnable


def collect_tags_and_groups(tags: Iterable[TagType]) -> list[TagType]:
    return [tt for tt in tags if tt.kind in (TagKind.REGULAR, TagKind.GROUP)]


def taggroup_pairs(tags: Iterable[TagType]) -> list[tuple[str, str]]:
    """``(group, tag)`` names for each group directly followed by a regular tag."""
    return [
        (first.value, second.value)
        for first, second in pairwise(tags)
        if first.kind is TagKind.GROUP and second.kind is TagKind.REGULAR
    ]


class TagCollection:
    """The tags parsed from one path."""

    def __init__(self, settings: Any, path: str | os.PathLike[str]) -> None:
        text = os.fspath(path)
        if isinstance(text, bytes):
            text = os.fsdecode(text)
        self.path = Path(text)
        self.unlinking = text.endswith(settings.config.symbols.sync_char)
        self._tags: list[TagType] = list(settings.path_to_tags(path))

    @property
    def tags(self) -> tuple[TagType, ...]:
        return tuple(self._tags)

    def pop(self) -> TagType | None:
        return self._tags.pop() if self._tags else None

    def push(self, value: TagType) -> None:
        self._tags.append(value)

    def __len__(self) -> int:
        return len(self._tags)

    def __iter__(self) -> Iterator[TagType]:
        return iter(self._tags)

    def __getitem__(self, index: int) -> TagType:
        return self._tags[index]

    def first(self) -> TagType | None:
        return self._tags[0] if self._tags else None

    def last(self) -> TagType | None:
        return self._tags[-1] if self._tags else None

    def join_path(self, settings: Any) -> Path:
        return Path(os.sep.join(tt.to_path_part(settings) for tt in self._tags))

    def all_but_last(self) -> Iterator[TagType]:
        if not self._tags:
            raise NotEnoughTagsError()
        return iter(self._tags[:-1])

    def primary_parent(self) -> TagType | None:
        return self._tags[-2] if len(self._tags) >= 2 else None

    def primary_type(self) -> TagType:
        if not self._tags:
            raise NotEnoughTagsError()
        return self._tags[-1]

    def __str__(self) -> str:
        return "[" + ", ".join(str(tt) for tt in self._tags) + "]"

    def __repr__(self) -> str:
        return f"TagCollection(path={str(self.path)!r}, tags={self._tags!r})"