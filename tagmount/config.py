"""Configuration model and the layered merge that builds it."""

from __future__ import annotations

import copy
import os
import tomllib
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .constants import DEFAULT_CONFIG_TOML, ENV_PREFIX
from .errors import ParseOctalError
from .permissions import Permissions


class ConfigError(ValueError):
    """A configuration value is missing or malformed."""


def _section(data: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    section = data.get(name)
    if not isinstance(section, Mapping):
        raise ConfigError(f"missing configuration section {name}")
    return section


def _require(section: Mapping[str, Any], prefix: str, key: str) -> Any:
    if key not in section:
        raise ConfigError(f"missing configuration value {prefix}.{key}")
    return section[key]


def _string(value: Any, key: str) -> str:
    if isinstance(value, (str, int, float)) and not isinstance(value, bool):
        return str(value)
    raise ConfigError(f"{key} must be a string")


def _char(value: Any, key: str) -> str:
    text = _string(value, key)
    if len(text) != 1:
        raise ConfigError(f"{key} must be a single character, got {text!r}")
    return text


def _int(value: Any, key: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{key} must be an integer, got {value!r}") from None


def _permissions(value: Any, key: str) -> Permissions:
    if isinstance(value, Permissions):
        return value
    try:
        return Permissions.parse(_string(value, key))
    except ParseOctalError:
        raise ConfigError(f"Invalid octal: {value}") from None


@dataclass(frozen=True)
class Symbols:
    """Characters and strings that give path components their meaning."""

    device_char: str
    inode_char: str
    sync_char: str
    filedir_str: str
    filedir_cli_str: str
    tag_group_str: str

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Symbols:
        def get(key: str) -> Any:
            return _require(data, "symbols", key)

        return cls(
            device_char=_char(get("device_char"), "symbols.device_char"),
            inode_char=_char(get("inode_char"), "symbols.inode_char"),
            sync_char=_char(get("sync_char"), "symbols.sync_char"),
            filedir_str=_string(get("filedir_str"), "symbols.filedir_str"),
            filedir_cli_str=_string(get("filedir_cli_str"), "symbols.filedir_cli_str"),
            tag_group_str=_string(get("tag_group_str"), "symbols.tag_group_str"),
        )


@dataclass(frozen=True)
class MountConfig:
    """Settings for the mounted root directory only."""

    base_dir: Path
    uid: int
    gid: int
    permissions: Permissions

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> MountConfig:
        def get(key: str) -> Any:
            return _require(data, "mount", key)

        return cls(
            base_dir=Path(_string(get("base_dir"), "mount.base_dir")),
            uid=_int(get("uid"), "mount.uid"),
            gid=_int(get("gid"), "mount.gid"),
            permissions=_permissions(get("permissions"), "mount.permissions"),
        )


@dataclass(frozen=True)
class Config:
    symbols: Symbols
    mount: MountConfig

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Config:
        """Freeze a merged configuration mapping into a :class:`Config`."""
        return cls(
            symbols=Symbols.from_mapping(_section(data, "symbols")),
            mount=MountConfig.from_mapping(_section(data, "mount")),
        )

    def to_mapping(self) -> dict[str, Any]:
        s, m = self.symbols, self.mount
        return {
            "symbols": {
                "device_char": s.device_char,
                "inode_char": s.inode_char,
                "sync_char": s.sync_char,
                "filedir_str": s.filedir_str,
                "filedir_cli_str": s.filedir_cli_str,
                "tag_group_str": s.tag_group_str,
            },
            "mount": {
                "base_dir": str(m.base_dir),
                "uid": m.uid,
                "gid": m.gid,
                "permissions": f"{m.permissions.mode():o}",
            },
        }


def _set(target: dict[str, Any], key_path: list[str], value: Any) -> None:
    *parents, last = key_path
    node = target
    for part in parents:
        child = node.get(part)
        if not isinstance(child, dict):
            child = {}
            node[part] = child
        node = child
    if isinstance(value, Mapping):
        existing = node.get(last)
        if not isinstance(existing, dict):
            existing = {}
            node[last] = existing
        for key, sub in value.items():
            _set(existing, str(key).split("."), sub)
    else:
        node[last] = value


def merge(base: Mapping[str, Any], source: Mapping[str, Any]) -> dict[str, Any]:
    """Deep-merge ``source`` over ``base``; dotted keys address nested tables."""
    result = copy.deepcopy(dict(base))
    for key, value in source.items():
        _set(result, str(key).split("."), value)
    return result


def _environment(environ: Mapping[str, str]) -> dict[str, str]:
    prefix = f"{ENV_PREFIX}_".lower()
    return {
        key[len(prefix):].lower(): value
        for key, value in environ.items()
        if key.lower().startswith(prefix)
    }


def build(
    source: Mapping[str, Any] | Iterable[Mapping[str, Any]],
    dirs: Any,
    environ: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """Merge the default config, ``source`` and prefixed environment variables.

    ``mount.base_dir`` falls back to ``dirs.mount_dir()`` when nothing sets it.
    """
    merged: dict[str, Any] = tomllib.loads(DEFAULT_CONFIG_TOML)
    sources = [source] if isinstance(source, Mapping) else list(source)
    for layer in sources:
        merged = merge(merged, layer)
    merged = merge(merged, _environment(os.environ if environ is None else environ))

    mount = merged.get("mount")
    if not isinstance(mount, dict):
        mount = {}
        merged["mount"] = mount
    mount.setdefault("base_dir", os.fspath(dirs.mount_dir()))
    return merged