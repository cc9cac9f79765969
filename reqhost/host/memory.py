"""
In-memory host implementations.

Stores everything in memory. Useful for unit tests and for running the
adaptation layer without an editor.

Usage:
    fs = InMemoryFileSystem()
    fs.add_file("/ws/scripts/setup.js", "exports.x = 1;")

    config = InMemoryConfigurationSource(httpRegionScript="scripts/setup.js")
    await config.update(httpRegionScript=None)
"""

from __future__ import annotations

import time
from collections.abc import Sequence
from typing import Any

from reqhost.config.schemas import AppConfig
from reqhost.config.service import merge_config
from reqhost.errors import ResourceNotFound
from reqhost.io.locator import ResourceLocator, resolve

from .events import Disposable, EventEmitter, Listener
from .protocol import FileStat, FileType, TextDocument, TextEditor


class InMemoryFileSystem:
    """
    File system backed by a dict.

    Directories exist implicitly for every parent of a stored file and can
    also be created explicitly with add_directory().
    """

    def __init__(self) -> None:
        self._files: dict[ResourceLocator, bytes] = {}
        self._mtimes: dict[ResourceLocator, float] = {}
        self._directories: set[ResourceLocator] = set()

    @staticmethod
    def _key(locator: ResourceLocator) -> ResourceLocator:
        return locator.join_path()

    def add_file(self, path: Any, content: str | bytes) -> ResourceLocator:
        """Store a file (str content is UTF-8 encoded). Returns its locator."""
        locator = self._key(resolve(path))
        data = content.encode("utf-8") if isinstance(content, str) else bytes(content)
        self._files[locator] = data
        self._mtimes[locator] = time.time() * 1000
        self._add_parents(locator)
        return locator

    def add_directory(self, path: Any) -> ResourceLocator:
        locator = self._key(resolve(path))
        self._directories.add(locator)
        self._add_parents(locator)
        return locator

    def _add_parents(self, locator: ResourceLocator) -> None:
        parent = locator.parent
        while parent != locator:
            self._directories.add(parent)
            locator, parent = parent, parent.parent

    def get_text(self, path: Any) -> str | None:
        data = self._files.get(self._key(resolve(path)))
        return None if data is None else data.decode("utf-8")

    async def stat(self, locator: ResourceLocator) -> FileStat:
        key = self._key(locator)
        if key in self._files:
            mtime = self._mtimes[key]
            return FileStat(type=FileType.FILE, size=len(self._files[key]), ctime=mtime, mtime=mtime)
        if key in self._directories:
            return FileStat(type=FileType.DIRECTORY)
        raise ResourceNotFound(locator)

    async def read_file(self, locator: ResourceLocator) -> bytes:
        key = self._key(locator)
        if key in self._files:
            return self._files[key]
        if key in self._directories:
            raise IsADirectoryError(str(locator))
        raise ResourceNotFound(locator)

    async def write_file(self, locator: ResourceLocator, content: bytes) -> None:
        key = self._key(locator)
        if key in self._directories:
            raise IsADirectoryError(str(locator))
        self.add_file(key, content)

    async def read_directory(self, locator: ResourceLocator) -> list[tuple[str, FileType]]:
        key = self._key(locator)
        if key not in self._directories:
            if key in self._files:
                raise NotADirectoryError(str(locator))
            raise ResourceNotFound(locator)
        entries: list[tuple[str, FileType]] = []
        for directory in sorted(self._directories, key=str):
            if directory != key and directory.parent == key:
                entries.append((directory.name, FileType.DIRECTORY))
        for file in sorted(self._files, key=str):
            if file.parent == key:
                entries.append((file.name, FileType.FILE))
        return entries


class InMemoryEditorWindow:
    """Editor window with a settable list of visible editors."""

    def __init__(self, documents: Sequence[TextDocument] = ()):
        self._editors = [TextEditor(document=d) for d in documents]

    @property
    def visible_text_editors(self) -> Sequence[TextEditor]:
        return tuple(self._editors)

    def show(self, document: TextDocument) -> TextEditor:
        editor = TextEditor(document=document)
        self._editors.append(editor)
        return editor

    def close_all(self) -> None:
        self._editors.clear()


class InMemoryWorkspace:
    """Workspace with a fixed, ordered folder list."""

    def __init__(self, folders: Sequence[Any] = ()):
        self._folders = [resolve(f) for f in folders]

    @property
    def workspace_folders(self) -> Sequence[ResourceLocator]:
        return tuple(self._folders)

    def add_folder(self, folder: Any) -> None:
        self._folders.append(resolve(folder))


class ScriptedPopupService:
    """
    Popup service answering from queues.

    Each prompt pops the next queued answer; an empty queue behaves like a
    dismissed prompt and returns None. Every prompt is recorded in
    ``calls`` as ``(kind, message)``.
    """

    def __init__(
        self,
        *,
        inputs: Sequence[str | None] = (),
        picks: Sequence[str | None] = (),
        warnings: Sequence[str | None] = (),
    ):
        self._inputs = list(inputs)
        self._picks = list(picks)
        self._warnings = list(warnings)
        self.calls: list[tuple[str, str]] = []

    @property
    def errors(self) -> list[str]:
        return [message for kind, message in self.calls if kind == "error"]

    async def show_input_box(
        self,
        prompt: str,
        *,
        placeholder: str | None = None,
        value: str | None = None,
    ) -> str | None:
        self.calls.append(("input", prompt))
        return self._inputs.pop(0) if self._inputs else None

    async def show_quick_pick(
        self,
        items: Sequence[str],
        *,
        placeholder: str | None = None,
    ) -> str | None:
        self.calls.append(("pick", placeholder or ""))
        return self._picks.pop(0) if self._picks else None

    async def show_warning_message(
        self,
        message: str,
        *buttons: str,
        modal: bool = False,
    ) -> str | None:
        self.calls.append(("warning", message))
        return self._warnings.pop(0) if self._warnings else None

    async def show_error_message(self, message: str) -> None:
        self.calls.append(("error", message))


class InMemoryConfigurationSource:
    """
    Configuration held in memory.

    Usage:
        config = InMemoryConfigurationSource(extensionScript="/abs/init.js")
        handle = config.on_did_change(listener)
        await config.update(logLevel="debug")
    """

    def __init__(self, config: AppConfig | None = None, **settings: Any):
        base = config or AppConfig()
        self._config = merge_config(base, settings) if settings else base
        self._changed: EventEmitter[AppConfig] = EventEmitter()

    def get(self) -> AppConfig:
        return self._config

    def on_did_change(self, listener: Listener[AppConfig]) -> Disposable:
        return self._changed.subscribe(listener)

    @property
    def listener_count(self) -> int:
        return self._changed.listener_count

    async def update(self, **changes: Any) -> AppConfig:
        """Apply changes and notify listeners. Returns the new snapshot."""
        return await self.replace(merge_config(self._config, changes))

    async def replace(self, config: AppConfig) -> AppConfig:
        self._config = config
        await self._changed.fire(config)
        return config
