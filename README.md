# tagmount

`tagmount` holds the building blocks of a tag-based file system. In such a
file system files are not kept in folders; they carry tags, and every path
through the mount is a query over those tags. `/t1/t2/⋂` stands for the
files tagged with both `t1` and `t2`, `/t1/-t2` leaves out files tagged
`t2`, and a name ending in `+` (before any extension) is a tag group.

Install with `pip install .`, or `pip install .[test]` to run the tests
with `pytest`.

## Modules

| Module | What it holds |
| --- | --- |
| `tagmount.constants` | Fixed names and defaults: `DEFAULT_CONFIG_TOML`, `NEGATIVE_TAG_PREFIX`, `UNLINK_NAME`, `ENV_PREFIX`, `VERSION`, … |
| `tagmount.errors` | `STagError` and its subclasses, `ParseOctalError`, `InvalidMountDirError`, `ShimError`, and the errno mapping |
| `tagmount.paths` | Name helpers for tag paths and small utilities |
| `tagmount.tags` | `DeviceFile`, `TagKind`, `TagType`, `TagCollection` and the `collect_*` filters |
| `tagmount.permissions` | `ClassPerms`, `Permissions`, `UMask` |
| `tagmount.config` | `Symbols`, `MountConfig`, `Config`, `merge` and `build` |
| `tagmount.dirs` | `Dirs` and `ProjectDirs`, the per-user directories |
| `tagmount.managed_file` | `subdir_path`, a hash-derived storage path |
| `tagmount.note` | `Note` and `NoteKind`, notification messages as JSON |
| `tagmount.notify` | `Notifier`, `Listener`, `UDSNotifier`, `UDSListener` |
| `tagmount.logs` | `RotatingLogger`, `setup_logger` and per-thread request ids |
| `tagmount.fileattrs` | `rename`, which keeps extended attributes |

## Tag types

A path component is one `TagType`: a regular tag, a negation, a tag group,
the file directory, a symlink, or a device-file symlink.

```python
from tagmount.tags import (
    TagType, collect_pinnable, collect_regular_names, taggroup_pairs,
)

tags = [
    TagType.regular("work"),
    TagType.group("year"),
    TagType.regular("2024"),
    TagType.file_dir(),
    TagType.symlink("report.pdf"),
]
collect_regular_names(tags)   # ["work", "2024"]
taggroup_pairs(tags)          # [("year", "2024")]
collect_pinnable(tags)        # work, year group, 2024
str(tags[1])                  # "Group(year)"
```

`collect_pinnable` keeps regular tags and groups but drops a group that
directly follows another group. `collect_tags_and_groups` keeps regular
tags and groups, and `collect_regular` keeps the regular `TagType` values.

`TagCollection(settings, path)` wraps the tags of one path and offers
`first`, `last`, `pop`, `push`, `primary_type` (raises
`NotEnoughTagsError` when empty), `primary_parent`, `all_but_last` and
`join_path`. Its `unlinking` flag is true when the path ends with the sync
character.

## Name helpers

```python
from tagmount.paths import (
    has_ext_prefix, set_ext_prefix, strip_ext_prefix, strip_negative_tag,
)

set_ext_prefix("photos.jpg", "+")      # "photos+.jpg"
strip_ext_prefix("photos+.jpg", "+")   # "photos.jpg"
has_ext_prefix("photos+", "+")         # True
strip_negative_tag("-draft")           # "draft"
```

`tagmount.paths` also has `get_filename`, `primary_tag`,
`get_device_inode`, `should_unlink` (true for `delete`, and on macOS also
for `delete.<ext>`), `read_from_slice`, `version_str` and `appdir` (the
`APPDIR` environment variable as a path, if set).

## Permissions

```python
from tagmount.permissions import Permissions, UMask

perms = Permissions.parse("755")
assert perms.mode() == 0o755
assert perms.octal_string() == "755"

umask = UMask(0o022)
str(umask.file_perms())   # "644"
str(umask.dir_perms())    # "755"
UMask.current()           # the process umask
```

`Permissions.parse` raises `ParseOctalError` for anything that is not an
octal number.

## Configuration

The built-in defaults are:

```toml
[symbols]
inode_char = "-"
device_char = "﹫"
sync_char = "\u007F"
filedir_str = "⋂"
filedir_cli_str = "_"
tag_group_str = "+"

[mount]
```

`build(source, dirs, environ)` merges, in order, these defaults, one or
more source mappings (dotted keys such as `"mount.uid"` address nested
tables), and environment variables whose names start with `STAG_` (the
prefix is removed and the rest lower-cased). `mount.base_dir` falls back
to `dirs.mount_dir()`. `Config.from_mapping` turns the result into frozen
`Config`, `Symbols` and `MountConfig` objects and raises `ConfigError`
when a value is missing or malformed.

```python
from tagmount.config import Config, build
from tagmount.dirs import ProjectDirs

merged = build(
    {"mount.uid": 1000, "mount.gid": 1000, "mount.permissions": "755"},
    ProjectDirs(),
    {},
)
config = Config.from_mapping(merged)
config.symbols.tag_group_str   # "+"
```

`ProjectDirs(organization, application, mount_dir)` gives per-user cache,
config and data directories; its mount directory defaults to `/Volumes` on
macOS and `/mnt` elsewhere.

## Storage paths

```python
from tagmount.managed_file import subdir_path

path, digest = subdir_path("/tmp/abc.txt")
# path:   88/2a/46/06/3f/a0/7f/5a/06/2c/e0/75/57/40/8b/7b
# digest: 882a46063fa07f5a062ce07557408b7b
```

## Notifications

`Note` values (`bad_copy`, `dragged_to_root`, `unlink(path)`,
`tag_to_tag_group(tag)`) encode as `{"t": kind, "c": content}`:

```python
from tagmount.note import Note

Note.unlink("/mnt/col/t1").to_json()   # '{"t":"Unlink","c":"/mnt/col/t1"}'
```

A bound `UDSNotifier` serves a Unix domain socket and sends every note to
each connected client as one JSON line. A `UDSListener` buffers what it
receives; `wait_for` and `wait_for_pred` look only at notes after the given
marker and give up after `timeout` seconds.

```python
from tagmount.note import Note
from tagmount.notify import UDSNotifier

with UDSNotifier("/tmp/notify.sock", True) as notifier:
    with notifier.listener() as listener:
        start = listener.marker()
        notifier.bad_copy()
        assert listener.wait_for(Note.bad_copy(), 3.0, start)
```

With `bind` false the notifier opens no socket and drops its notes; it is
then only useful for `listener()`.

## Logging

`setup_logger(level, handlers)` attaches the handlers to the root logger
with a format that shows the time, thread, request id (`next_request_id`,
`set_request_id`, `get_request_id`), logger name and level.
`RotatingLogger(log_dir, fmt, num_backups, rotate_check)` is a
`logging.Handler` that writes to a file named by the current UTC time
formatted with `fmt`, checks every `rotate_check` records whether that
name has changed, and deletes old files it created itself beyond
`num_backups`. On start-up it removes the oldest `.log` files in `log_dir`
beyond `num_backups`.

## Errors

Every tagging failure is a subclass of `STagError` (`BadTagError`,
`InvalidPathError`, `PathExistsError`, `RecursiveLinkError`, …).
`from_os_error` wraps an `OSError`, `errno_for` gives the errno a file
system call should report (`EEXIST` for `PathExistsError`, `EIO` for other
tagging and database errors), and `to_shim_error` wraps any exception in a
`ShimError` carrying that errno.

`tagmount.fileattrs.rename(src, dst)` renames a file and sets its extended
attributes again on the destination.

## What the package does not do

- It mounts nothing and has no file-system driver, tag database or
  command-line program.
- It has no object that loads configuration per collection or turns a path
  into tags. `TagCollection`, `DeviceFile.inodify`, `TagType.to_path_part`,
  `creatable_tag_group` and `name_to_tag_group` take a `settings` argument
  that the caller supplies: an object with a `config` attribute holding a
  `Config`, and, where used, `path_to_tags(path)` and
  `inodify_filename(filename, device, inode)` methods.
- Notifications go only over the Unix socket; there are no desktop pop-ups.