"""Notifications sent from the filesystem to listening clients."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class NoteKind(Enum):
    BAD_COPY = "BadCopy"
    DRAGGED_TO_ROOT = "DraggedToRoot"
    UNLINK = "Unlink"
    TAG_TO_TAG_GROUP = "TagToTagGroup"


_UNIT_KINDS = frozenset({NoteKind.BAD_COPY, NoteKind.DRAGGED_TO_ROOT})


@dataclass(frozen=True)
class Note:
    """A user-facing notification; ``content`` depends on ``kind``."""

    kind: NoteKind
    content: Path | str | None = None

    def __post_init__(self) -> None:
        kind = NoteKind(self.kind)
        object.__setattr__(self, "kind", kind)
        if kind is NoteKind.UNLINK:
            if not isinstance(self.content, (str, os.PathLike)):
                raise TypeError("an Unlink note needs a path")
            object.__setattr__(self, "content", Path(self.content))
        elif kind is NoteKind.TAG_TO_TAG_GROUP:
            if not isinstance(self.content, str):
                raise TypeError("a TagToTagGroup note needs a tag name")
        elif self.content is not None:
            raise TypeError(f"a {kind.value} note carries no content")

    @classmethod
    def bad_copy(cls) -> Note:
        return cls(NoteKind.BAD_COPY)

    @classmethod
    def dragged_to_root(cls) -> Note:
        return cls(NoteKind.DRAGGED_TO_ROOT)

    @classmethod
    def unlink(cls, path: str | os.PathLike[str]) -> Note:
        return cls(NoteKind.UNLINK, Path(path))

    @classmethod
    def tag_to_tag_group(cls, tag: str) -> Note:
        return cls(NoteKind.TAG_TO_TAG_GROUP, tag)

    def to_json(self) -> str:
        """Encode as ``{"t": kind, "c": content}``; ``c`` is left out when empty."""
        data: dict[str, str] = {"t": self.kind.value}
        if self.content is not None:
            data["c"] = os.fspath(self.content)
        return json.dumps(data, separators=(",", ":"), ensure_ascii=False)

    @classmethod
    def from_json(cls, text: str | bytes) -> Note:
        """Decode a note; raises ValueError on malformed input."""
        data = json.loads(text)
        if not isinstance(data, dict) or "t" not in data:
            raise ValueError("note must be an object with a 't' field")
        kind = NoteKind(data["t"])
        content = data.get("c")
        if kind in _UNIT_KINDS:
            if content is not None:
                raise ValueError(f"{kind.value} note carries no content")
            return cls(kind)
        if not isinstance(content, str):
            raise ValueError(f"{kind.value} note needs string content")
        return cls(kind, content)