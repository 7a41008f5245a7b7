"""Fixed names, paths and defaults shared across the package."""

VERSION: tuple[str, str, str] = ("0", "1", "0")
ENV_PREFIX = "STAG"
APP_NAME = "supertag"
ORG = "ai.supertag"

# macOS metadata locations
FSEVENTS_PATH = "/.fseventsd"
FSEVENTS_NO_LOG_PATH = "/.fseventsd/no_log"
NO_INDEX_PATH = "/.metadata_never_index"

# GNOME tracker/indexer
TRACKER_IGNORE = ".trackerignore"

NEGATIVE_TAG_PREFIX = "-"

DB_FILE_NAME = "db.sqlite3"
DB_FILE_PATH = "/.supertag/db.sqlite3"

STAG_ROOT_CONF_PATH = "/.supertag"
STAG_ROOT_CONF_NAME = ".supertag"

# File the face detector places at the top level.
FACE_NAME = "face|.png"

MANAGED_FILES_DIR_NAME = "managed_files"

# Unlinking this file tells a recursive tree delete apart from a single delete.
UNLINK_CANARY = ".unlink_canary"

FOLDER_ICON = "Icon\r"
XATTR_FINDER_INFO = "com.apple.FinderInfo"
XATTR_RESOURCE_FORK = "com.apple.ResourceFork"

ALIAS_HEADER = b"book\0\0\0\0mark"

UNLINK_NAME = "delete"

DEFAULT_CONFIG_TOML = """
[symbols]
inode_char = "-"
device_char = "\ufe6b"
sync_char = "\\u007F"
filedir_str = "\u22c2"
filedir_cli_str = "_"
tag_group_str = "+"

[mount]
"""

# Device numbers 60-63 are reserved for local/experimental use.
DEVICE_ID = 63