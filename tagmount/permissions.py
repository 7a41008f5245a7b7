"""Unix permission bits and umask handling."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass

from .errors import ParseOctalError

_OCTAL = re.compile(r"\+?[0-7]+")
_MODE_MAX = 0xFFFFFFFF


@dataclass(unsafe_hash=True)
class ClassPerms:
    """Read, write and execute bits of one class: owner, group or others."""

    read: bool = False
    write: bool = False
    execute: bool = False

    @classmethod
    def from_mode(cls, val: int) -> ClassPerms:
        return cls(read=bool(val & 0b100), write=bool(val & 0b010), execute=bool(val & 0b001))

    def mode(self) -> int:
        return (4 if self.read else 0) | (2 if self.write else 0) | (1 if self.execute else 0)

    def all_perms(self) -> None:
        self.read = self.write = self.execute = True

    def all_but_write(self) -> None:
        self.all_perms()
        self.write = False


@dataclass(frozen=True)
class Permissions:
    """Full permission set for owner, group and others."""

    owner: ClassPerms
    group: ClassPerms
    others: ClassPerms

    @classmethod
    def from_mode(cls, val: int) -> Permissions:
        return cls(
            owner=ClassPerms.from_mode((val & 0o700) >> 6),
            group=ClassPerms.from_mode((val & 0o070) >> 3),
            others=ClassPerms.from_mode(val & 0o007),
        )

    @classmethod
    def parse(cls, text: str) -> Permissions:
        """Parse an octal string such as ``"755"``."""
        if not _OCTAL.fullmatch(text):
            raise ParseOctalError()
        value = int(text, 8)
        if value > _MODE_MAX:
            raise ParseOctalError()
        return cls.from_mode(value)

    @classmethod
    def default(cls) -> Permissions:
        """File permissions implied by the process umask."""
        return UMask.current().file_perms()

    def mode(self) -> int:
        return (self.owner.mode() << 6) | (self.group.mode() << 3) | self.others.mode()

    def octal_string(self) -> str:
        return f"{self.mode():03o}"

    def __int__(self) -> int:
        return self.mode()

    def __str__(self) -> str:
        return self.octal_string()

    def __repr__(self) -> str:
        return self.octal_string()


@dataclass(frozen=True)
class UMask:
    """A process umask value."""

    value: int

    @classmethod
    def current(cls) -> UMask:
        """Read the process umask (it must be set briefly to read it)."""
        cur = os.umask(0)
        os.umask(cur)
        return cls(cur)

    def file_perms(self) -> Permissions:
        return Permissions.from_mode(0o666 & ~self.value)

    def dir_perms(self) -> Permissions:
        return Permissions.from_mode(0o777 & ~self.value)

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return f"UMask({self.value:03o})"

    def __repr__(self) -> str:
        return str(self)