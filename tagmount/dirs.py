"""Platform-specific locations for configuration, data and mounts."""

from __future__ import annotations

import os
import sys
from abc import ABC, abstractmethod
from pathlib import Path

from platformdirs import PlatformDirs

from .constants import APP_NAME, ORG


class Dirs(ABC):
    """Where the application keeps its files."""

    @abstractmethod
    def project_path(self) -> Path:
        """The project-specific path fragment."""

    @abstractmethod
    def cache_dir(self) -> Path:
        """Directory for cached data."""

    @abstractmethod
    def config_dir(self) -> Path:
        """Directory for configuration files."""

    @abstractmethod
    def data_dir(self) -> Path:
        """Directory for (possibly roaming) data."""

    @abstractmethod
    def data_local_dir(self) -> Path:
        """Directory for machine-local data."""

    def mount_dir(self) -> Path:
        """Directory under which collections are mounted."""
        return Path("/Volumes") if sys.platform == "darwin" else Path("/mnt")


class ProjectDirs(Dirs):
    """Standard per-user directories for an organization's application."""

    def __init__(
        self,
        organization: str = ORG,
        application: str = APP_NAME,
        mount_dir: str | os.PathLike[str] | None = None,
    ) -> None:
        author: str | bool
        if sys.platform == "darwin":
            name = ".".join(p for p in (organization, application) if p).replace(" ", "-")
            project = Path(name)
            author = False
        elif sys.platform == "win32":
            name = application
            project = Path(organization, application)
            author = organization
        else:
            name = application.lower().replace(" ", "")
            project = Path(name)
            author = False

        roaming = PlatformDirs(name, author, roaming=True)
        local = PlatformDirs(name, author, roaming=False)
        self._project = project
        self._cache = local.user_cache_path
        self._config = roaming.user_config_path
        self._data = roaming.user_data_path
        self._data_local = local.user_data_path
        self._mount = Path(mount_dir) if mount_dir is not None else None

    def project_path(self) -> Path:
        return self._project

    def cache_dir(self) -> Path:
        return self._cache

    def config_dir(self) -> Path:
        return self._config

    def data_dir(self) -> Path:
        return self._data

    def data_local_dir(self) -> Path:
        return self._data_local

    def mount_dir(self) -> Path:
        return self._mount if self._mount is not None else super().mount_dir()