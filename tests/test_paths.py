import os
import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

from tagmount.config import Config, build
from tagmount.constants import VERSION
from tagmount.errors import InvalidPathError, OtherError
from tagmount.paths import (
    appdir,
    creatable_tag_group,
    get_device_inode,
    get_filename,
    has_ext_prefix,
    name_to_tag_group,
    primary_tag,
    read_from_slice,
    set_ext_prefix,
    should_unlink,
    strip_ext_prefix,
    strip_negative_tag,
    version_str,
)


class _Dirs:
    def mount_dir(self):
        return Path("/mnt/tags")


def _settings():
    source = {"mount.uid": 1000, "mount.gid": 1000, "mount.permissions": "755"}
    return SimpleNamespace(config=Config.from_mapping(build(source, _Dirs(), environ={})))


def test_get_device_inode_matches_stat(tmp_path):
    target = tmp_path / "file.txt"
    target.write_text("data")
    st = os.stat(target)
    assert get_device_inode(target) == (st.st_dev, st.st_ino)


def test_get_device_inode_missing_file(tmp_path):
    with pytest.raises(OtherError):
        get_device_inode(tmp_path / "missing")


def test_get_filename_last_component():
    assert get_filename("/test/some_file") == "some_file"


def test_get_filename_root():
    assert get_filename("/") == "/"


def test_get_filename_empty_raises():
    with pytest.raises(InvalidPathError):
        get_filename("")


def test_primary_tag_stops_at_device_char():
    assert primary_tag("/test/some_file\ufe6b987-12345", "\ufe6b") == "some_file"


def test_primary_tag_single_char_is_none():
    assert primary_tag("/test/a\ufe6b1-2", "\ufe6b") is None


def test_strip_negative_tag():
    assert strip_negative_tag("-t2") == "t2"
    assert strip_negative_tag("t2") is None


def test_set_ext_prefix_before_extension():
    assert set_ext_prefix("photo.jpg", "+") == "photo+.jpg"


def test_set_ext_prefix_without_extension():
    assert set_ext_prefix("a_tags", "+") == "a_tags+"


@pytest.mark.parametrize("name", ["music", "photo.jpg", "archive.tar.gz", ".bashrc", "a."])
def test_ext_prefix_round_trip(name):
    prefixed = set_ext_prefix(name, "+")
    assert has_ext_prefix(prefixed, "+")
    assert strip_ext_prefix(prefixed, "+") == name


def test_strip_ext_prefix_absent():
    assert strip_ext_prefix("photo.jpg", "+") is None
    assert not has_ext_prefix("photo.jpg", "+")


def test_strip_ext_prefix_plain_name():
    assert strip_ext_prefix("a_tags+", "+") == "a_tags"


def test_creatable_tag_group():
    settings = _settings()
    assert creatable_tag_group(settings, "music")
    assert not creatable_tag_group(settings, "music+")
    assert not creatable_tag_group(settings, f"a{os.sep}b")
    assert not creatable_tag_group(settings, settings.config.symbols.filedir_str)


def test_name_to_tag_group():
    settings = _settings()
    group = name_to_tag_group(settings, "music")
    assert has_ext_prefix(group, "+")
    assert strip_ext_prefix(group, "+") == "music"


def test_should_unlink():
    assert should_unlink("delete")
    assert not should_unlink("deleted")
    assert should_unlink("delete.txt") == (sys.platform == "darwin")


def test_read_from_slice_middle():
    assert read_from_slice(b"hello", 1, 3) == b"ell"


def test_read_from_slice_past_end():
    assert read_from_slice(b"hello", 10, 3) == b""
    assert read_from_slice(b"hello", 3, 10) == b"lo"


def test_read_from_slice_negative():
    with pytest.raises(ValueError):
        read_from_slice(b"hello", -1, 2)


def test_version_str():
    assert version_str().split(".") == list(VERSION)


def test_appdir(monkeypatch, tmp_path):
    monkeypatch.setenv("APPDIR", str(tmp_path))
    assert appdir() == tmp_path
    monkeypatch.delenv("APPDIR")
    assert appdir() is None