import os
from pathlib import Path
from types import SimpleNamespace

import pytest

from tagmount.config import Config, build
from tagmount.errors import InvalidPathError, NotEnoughTagsError
from tagmount.tags import (
    DeviceFile,
    TagCollection,
    TagKind,
    TagType,
    collect_pinnable,
    collect_regular,
    collect_regular_names,
    collect_tags_and_groups,
    taggroup_pairs,
)


class _Dirs:
    def mount_dir(self):
        return Path("/mnt/tags")


class FakeSettings:
    def __init__(self, tags=()):
        source = {"mount.uid": 1000, "mount.gid": 1000, "mount.permissions": "755"}
        self.config = Config.from_mapping(build(source, _Dirs(), environ={}))
        self._tags = list(tags)
        self.inodify_calls = []

    def path_to_tags(self, path):
        return list(self._tags)

    def inodify_filename(self, filename, device, inode):
        self.inodify_calls.append((filename, device, inode))
        return "inodified"


T1 = TagType.regular("t1")
T2 = TagType.regular("t2")
NOT_T2 = TagType.negation("t2")
GROUP_A = TagType.group("a_tags")
GROUP_B = TagType.group("b_tags")


def test_device_file_from_path(tmp_path):
    target = tmp_path / "some_file"
    target.write_text("x")
    st = os.stat(target)
    df = DeviceFile.from_path(target)
    assert df == DeviceFile("some_file", st.st_dev, st.st_ino)


def test_device_file_from_root_path():
    with pytest.raises(InvalidPathError):
        DeviceFile.from_path("/")


def test_device_file_inodify_delegates():
    settings = FakeSettings()
    assert DeviceFile("some_file", 987, 12345).inodify(settings) == "inodified"
    assert settings.inodify_calls == [("some_file", 987, 12345)]


def test_device_file_matches():
    df = DeviceFile("some_file", 987, 12345)
    assert df.matches(SimpleNamespace(primary_tag="some_file", device=987, inode=12345))
    assert not df.matches(SimpleNamespace(primary_tag="some_file", device=987, inode=1))


def test_device_file_from_tagged_file():
    tf = SimpleNamespace(primary_tag="some_file", device=987, inode=12345)
    assert DeviceFile.from_tagged_file(tf) == DeviceFile("some_file", 987, 12345)


def test_device_file_str():
    text = str(DeviceFile("some_file", 987, 12345))
    assert text == "<DeviceFile filename=some_file device=987 inode=12345>"


def test_to_path_part():
    settings = FakeSettings()
    assert T1.to_path_part(settings) == "t1"
    assert NOT_T2.to_path_part(settings) == "-t2"
    assert GROUP_A.to_path_part(settings) == "a_tags+"
    assert TagType.file_dir().to_path_part(settings) == settings.config.symbols.filedir_str
    assert TagType.symlink("file.txt").to_path_part(settings) == "file.txt"


def test_to_path_part_device_file():
    settings = FakeSettings()
    tt = TagType.device_file_symlink(DeviceFile("f", 1, 2))
    assert tt.to_path_part(settings) == "inodified"
    assert settings.inodify_calls == [("f", 1, 2)]


def test_tag_type_str():
    assert str(T1) == "Regular(t1)"
    assert str(TagType.file_dir()) == "FileDir"


def test_tag_type_validation():
    with pytest.raises(TypeError):
        TagType(TagKind.REGULAR)
    with pytest.raises(TypeError):
        TagType(TagKind.DEVICE_FILE_SYMLINK, "x")


def test_collect_regular():
    tags = [T1, NOT_T2, GROUP_A, T2, TagType.file_dir()]
    assert collect_regular_names(tags) == ["t1", "t2"]
    assert collect_regular(tags) == [T1, T2]
    assert collect_tags_and_groups(tags) == [T1, GROUP_A, T2]


def test_collect_pinnable_skips_consecutive_groups():
    tags = [GROUP_A, GROUP_B, T1, TagType.file_dir(), GROUP_B]
    assert collect_pinnable(tags) == [GROUP_A, T1, GROUP_B]


def test_taggroup_pairs():
    tags = [GROUP_A, T1, T2, GROUP_B, T2]
    assert taggroup_pairs(tags) == [("a_tags", "t1"), ("b_tags", "t2")]


def test_tag_collection_basics():
    settings = FakeSettings([T1, NOT_T2, GROUP_A])
    col = TagCollection(settings, "/t1/-t2/a_tags+")
    assert len(col) == 3
    assert list(col) == [T1, NOT_T2, GROUP_A]
    assert col.first() == T1
    assert col.last() == GROUP_A
    assert col.primary_type() == GROUP_A
    assert col.primary_parent() == NOT_T2
    assert list(col.all_but_last()) == [T1, NOT_T2]
    assert not col.unlinking


def test_tag_collection_pop_push():
    col = TagCollection(FakeSettings([T1, T2]), "/t1/t2")
    assert col.pop() == T2
    col.push(GROUP_A)
    assert col.tags == (T1, GROUP_A)


def test_tag_collection_join_path():
    settings = FakeSettings([T1, NOT_T2, GROUP_A])
    col = TagCollection(settings, "/t1/-t2/a_tags+")
    assert col.join_path(settings) == Path("t1", "-t2", "a_tags+")


def test_tag_collection_unlinking():
    settings = FakeSettings([T1])
    col = TagCollection(settings, "/t1" + settings.config.symbols.sync_char)
    assert col.unlinking


def test_tag_collection_empty():
    col = TagCollection(FakeSettings(), "/")
    assert col.pop() is None
    assert col.first() is None
    assert col.primary_parent() is None
    with pytest.raises(NotEnoughTagsError):
        col.primary_type()
    with pytest.raises(NotEnoughTagsError):
        col.all_but_last()