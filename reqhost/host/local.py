"""
Local host implementations.

- LocalFileSystem: ``file`` locators on disk. Blocking calls run in a
  worker thread so the event loop is never blocked.
- FileConfigurationSource: settings read from a YAML or JSON file.

Usage:
    fs = LocalFileSystem()
    stat = await fs.stat(ResourceLocator.file("/etc/hosts"))

    config = FileConfigurationSource("settings.yaml", section="reqhost")
    await config.reload()  # notifies listeners when the settings changed
"""

from __future__ import annotations

import asyncio
import logging
import os
import stat as stat_module
from pathlib import Path
from typing import Any

import yaml

from reqhost.config.schemas import AppConfig
from reqhost.errors import ResourceNotFound, UnsupportedOperation
from reqhost.io.locator import FILE_SCHEME, ResourceLocator

from .events import Disposable, EventEmitter, Listener
from .protocol import FileStat, FileType

logger = logging.getLogger(__name__)


def _file_type(mode: int) -> FileType:
    if stat_module.S_ISDIR(mode):
        return FileType.DIRECTORY
    if stat_module.S_ISREG(mode):
        return FileType.FILE
    return FileType.UNKNOWN


class LocalFileSystem:
    """File system for ``file`` locators backed by the local disk."""

    def _path(self, locator: ResourceLocator) -> Path:
        if locator.scheme != FILE_SCHEME:
            raise UnsupportedOperation(f"LocalFileSystem cannot handle scheme '{locator.scheme}'")
        return Path(locator.fs_path)

    async def stat(self, locator: ResourceLocator) -> FileStat:
        path = self._path(locator)
        return await asyncio.to_thread(self._stat_sync, path, locator)

    def _stat_sync(self, path: Path, locator: ResourceLocator) -> FileStat:
        try:
            link = path.lstat()
            result = path.stat()
        except FileNotFoundError:
            raise ResourceNotFound(locator) from None
        file_type = _file_type(result.st_mode)
        if stat_module.S_ISLNK(link.st_mode):
            file_type |= FileType.SYMBOLIC_LINK
        return FileStat(
            type=file_type,
            size=result.st_size,
            ctime=result.st_ctime * 1000,
            mtime=result.st_mtime * 1000,
        )

    async def read_file(self, locator: ResourceLocator) -> bytes:
        path = self._path(locator)
        try:
            return await asyncio.to_thread(path.read_bytes)
        except FileNotFoundError:
            raise ResourceNotFound(locator) from None

    async def write_file(self, locator: ResourceLocator, content: bytes) -> None:
        path = self._path(locator)
        await asyncio.to_thread(self._write_sync, path, content)
        logger.debug(f"Wrote {len(content)} bytes to {path}")

    @staticmethod
    def _write_sync(path: Path, content: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)

    async def read_directory(self, locator: ResourceLocator) -> list[tuple[str, FileType]]:
        path = self._path(locator)
        try:
            return await asyncio.to_thread(self._scan_sync, path)
        except FileNotFoundError:
            raise ResourceNotFound(locator) from None

    @staticmethod
    def _scan_sync(path: Path) -> list[tuple[str, FileType]]:
        entries: list[tuple[str, FileType]] = []
        with os.scandir(path) as it:
            for entry in sorted(it, key=lambda e: e.name):
                if entry.is_dir():
                    file_type = FileType.DIRECTORY
                elif entry.is_file():
                    file_type = FileType.FILE
                else:
                    file_type = FileType.UNKNOWN
                if entry.is_symlink():
                    file_type |= FileType.SYMBOLIC_LINK
                entries.append((entry.name, file_type))
        return entries


class FileConfigurationSource:
    """
    Settings loaded from a YAML or JSON file.

    The file holds either the settings mapping itself or, when ``section``
    is given, a mapping with the settings under that key:

        reqhost:
          httpRegionScript: scripts/region.js
          extensionScript: /home/me/init.js
          logLevel: debug

    A missing file yields default settings. reload() re-reads the file and
    notifies listeners only when the snapshot changed.
    """

    def __init__(self, path: str | Path, *, section: str | None = None):
        self._path = Path(path)
        self._section = section
        self._config = self._load()
        self._changed: EventEmitter[AppConfig] = EventEmitter()

    @property
    def path(self) -> Path:
        return self._path

    def get(self) -> AppConfig:
        return self._config

    def on_did_change(self, listener: Listener[AppConfig]) -> Disposable:
        return self._changed.subscribe(listener)

    async def reload(self) -> bool:
        """
        Re-read the settings file.

        Returns:
            True if the settings changed and listeners were notified
        """
        config = await asyncio.to_thread(self._load)
        if config == self._config:
            logger.debug(f"Settings unchanged: {self._path}")
            return False
        self._config = config
        logger.info(f"Settings reloaded: {self._path}")
        await self._changed.fire(config)
        return True

    def _load(self) -> AppConfig:
        if not self._path.exists():
            logger.warning(f"Settings file not found: {self._path}")
            return AppConfig()
        with self._path.open(encoding="utf-8") as f:
            data: Any = yaml.safe_load(f) or {}
        if self._section is not None:
            data = (data.get(self._section) or {}) if isinstance(data, dict) else {}
        if not isinstance(data, dict):
            raise ValueError(f"Settings file must contain a mapping: {self._path}")
        return AppConfig.model_validate(data)
