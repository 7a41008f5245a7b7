"""Tag types, device-file names, permissions, configuration, notifications and logging for a tag-based file system."""

__version__ = "0.1.0"