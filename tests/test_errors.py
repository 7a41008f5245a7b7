import errno
import sqlite3

import pytest

from tagmount.errors import (
    BadDeviceFileError,
    BadTagError,
    BadTagGroupError,
    DatabaseError,
    InvalidMountDirError,
    InvalidPathError,
    NonCollectionPathError,
    NotEnoughTagsError,
    OtherError,
    ParseOctalError,
    PathExistsError,
    RecursiveLinkError,
    ShimError,
    STagError,
    STagIOError,
    errno_for,
    from_os_error,
    to_shim_error,
)


def test_bad_tag_message_and_attribute():
    err = BadTagError("foo")
    assert str(err) == "Invalid tag: foo"
    assert err.tag == "foo"


def test_not_enough_tags_message():
    assert str(NotEnoughTagsError()) == "Not enough tags"


@pytest.mark.parametrize(
    "err, fragment",
    [
        (BadTagGroupError("grp"), "grp"),
        (BadDeviceFileError("dev"), "dev"),
        (InvalidPathError("/a/b"), "/a/b"),
        (NonCollectionPathError("/x/y"), "/x/y"),
        (PathExistsError("/p/q"), "/p/q"),
        (RecursiveLinkError("/r/s"), "/r/s"),
    ],
)
def test_errors_are_stag_errors_mentioning_argument(err, fragment):
    assert isinstance(err, STagError)
    assert fragment in str(err)


def test_non_collection_path_hint():
    err = NonCollectionPathError("rel")
    assert str(err).endswith("not found in collection. Try using an absolute path.")


def test_invalid_mount_dir_message():
    err = InvalidMountDirError("/mnt/none")
    assert "/mnt/none" in str(err)
    assert str(err).endswith("Please create it first before mounting.")


def test_parse_octal_error_is_value_error():
    err = ParseOctalError()
    assert isinstance(err, ValueError)
    assert str(err) == "Bad octal value"


def test_wrapping_errors_keep_original():
    inner = sqlite3.OperationalError("boom")
    err = DatabaseError(inner)
    assert err.original is inner
    assert err.__cause__ is inner
    assert str(err).startswith("Database error: ")


def test_from_os_error_not_found_is_io():
    exc = FileNotFoundError(errno.ENOENT, "missing")
    wrapped = from_os_error(exc)
    assert isinstance(wrapped, STagIOError)
    assert wrapped.original is exc


def test_from_os_error_uncategorised_is_io():
    exc = OSError(errno.ENOSPC, "full")
    wrapped = from_os_error(exc)
    assert isinstance(wrapped, STagIOError)
    assert wrapped.original is exc
    assert str(wrapped).startswith("IO error: ")


def test_from_os_error_categorised_is_other():
    exc = FileExistsError(errno.EEXIST, "exists")
    wrapped = from_os_error(exc)
    assert isinstance(wrapped, OtherError)
    assert wrapped.original is exc


def test_errno_for_path_exists():
    assert errno_for(PathExistsError("/a")) == errno.EEXIST


def test_errno_for_other_stag_error_is_eio():
    assert errno_for(BadTagError("t")) == errno.EIO


def test_errno_for_database_error_is_eio():
    assert errno_for(sqlite3.OperationalError("x")) == errno.EIO


def test_errno_for_permission_is_eperm():
    assert errno_for(PermissionError(errno.EACCES, "denied")) == errno.EPERM


def test_errno_for_os_error_keeps_errno():
    assert errno_for(OSError(errno.ENOSPC, "full")) == errno.ENOSPC


def test_errno_for_os_error_without_errno():
    assert errno_for(OSError("no errno")) == errno.EIO


def test_to_shim_error_carries_errno_and_original():
    exc = PathExistsError("/dst")
    shim = to_shim_error(exc)
    assert shim.errno == errno.EEXIST
    assert shim.original is exc
    assert shim.__cause__ is exc


def test_to_shim_error_is_idempotent():
    shim = ShimError(errno.ENOENT, None)
    assert to_shim_error(shim) is shim
    assert errno_for(shim) == errno.ENOENT