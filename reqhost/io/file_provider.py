"""
File access facade.

The engine performs all file operations through a FileProvider. This module
defines that contract and HostFileProvider, which implements it on top of
the injected host capabilities (file system, visible editors, workspace
folders).

Every operation first resolves its path-like argument to a
ResourceLocator. Resolution failures raise NoValidLocator, except in
is_absolute(), exists(), has_extension() and fs_path(), which degrade to
False/None.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from reqhost.errors import NoValidLocator
from reqhost.host.protocol import DocumentSelector
from reqhost.log import TRACE

from .locator import FILE_SCHEME, UNTITLED_SCHEME, ResourceLocator, to_locator

if TYPE_CHECKING:
    from reqhost.host.protocol import EditorWindow, FileSystem, Workspace

    from .locator import PathLike

logger = logging.getLogger(__name__)

FileEncoding = str

# Documents whose folder stands in for an unsaved buffer's directory
HTTP_DOCUMENT_SELECTOR = DocumentSelector(language="http", scheme=FILE_SCHEME)

MARKDOWN_LANGUAGE = "markdown"


@runtime_checkable
class FileProvider(Protocol):
    """File operations required by the request engine."""

    async def is_absolute(self, path_like: PathLike) -> bool: ...

    def dirname(self, path_like: PathLike) -> ResourceLocator | None: ...

    def has_extension(self, path_like: PathLike, *extensions: str) -> bool: ...

    def join_path(self, path_like: PathLike, path: str) -> ResourceLocator: ...

    async def exists(self, path_like: PathLike) -> bool: ...

    async def read_file(self, path_like: PathLike, encoding: FileEncoding) -> str: ...

    async def read_buffer(self, path_like: PathLike) -> bytes: ...

    async def write_buffer(self, path_like: PathLike, buffer: bytes) -> None: ...

    async def readdir(self, path_like: PathLike) -> list[str]: ...

    def fs_path(self, path_like: PathLike) -> str | None: ...


class HostFileProvider:
    """
    FileProvider backed by host capabilities.

    Constructed once at activation and bound to the engine. Holds no cache:
    locators are resolved per call and dropped afterwards.

    Example:
        provider = HostFileProvider(
            file_system=LocalFileSystem(),
            window=editor_window,
            workspace=workspace,
        )
        text = await provider.read_file("/ws/api.http", "utf-8")
    """

    def __init__(
        self,
        file_system: FileSystem,
        window: EditorWindow,
        workspace: Workspace,
    ):
        """
        Initialize the facade.

        Args:
            file_system: Host storage
            window: Source of currently visible editors
            workspace: Source of workspace folders
        """
        self._file_system = file_system
        self._window = window
        self._workspace = workspace

    @staticmethod
    def _resolve(path_like: Any) -> ResourceLocator:
        locator = to_locator(path_like)
        if locator is None:
            raise NoValidLocator(path_like)
        return locator

    async def is_absolute(self, path_like: PathLike) -> bool:
        """
        True if the path resolves and the resource exists.

        Existence, not path shape, decides the answer; callers rely on it.
        """
        locator = to_locator(path_like)
        if locator is None:
            return False
        return await self.exists(locator)

    def dirname(self, path_like: PathLike) -> ResourceLocator | None:
        """
        Directory of a resource.

        Unsaved buffers have no directory of their own: the folder of the
        first visible http file is used, then the first workspace folder.

        Returns:
            Parent locator, or None for an unsaved buffer with no fallback

        Raises:
            NoValidLocator: If the path cannot be resolved
        """
        locator = self._resolve(path_like)
        if locator.scheme != UNTITLED_SCHEME:
            return locator.parent

        for editor in self._window.visible_text_editors:
            if HTTP_DOCUMENT_SELECTOR.matches(editor.document):
                return editor.document.uri.parent
        folders = self._workspace.workspace_folders
        if folders:
            return folders[0]
        return None

    def has_extension(self, path_like: PathLike, *extensions: str) -> bool:
        """
        True if the locator text ends with one of the extensions.

        The comparison is case-sensitive. When "markdown" is requested, a
        visible editor on this locator tagged as markdown also matches.
        """
        locator = to_locator(path_like)
        if locator is None:
            return False
        text = str(locator)
        if any(text.endswith(ext) for ext in extensions):
            return True
        if MARKDOWN_LANGUAGE in extensions:
            for editor in self._window.visible_text_editors:
                if editor.document.uri == locator:
                    return editor.document.language_id == MARKDOWN_LANGUAGE
        return False

    def join_path(self, path_like: PathLike, path: str) -> ResourceLocator:
        """
        Append a relative path.

        Raises:
            NoValidLocator: If the path cannot be resolved
        """
        return self._resolve(path_like).join_path(path)

    async def exists(self, path_like: PathLike) -> bool:
        """True if the resource can be stat'ed. Never raises."""
        locator = to_locator(path_like)
        if locator is None:
            return False
        try:
            await self._file_system.stat(locator)
            return True
        except Exception as e:
            logger.log(TRACE, f"stat failed for {locator}: {e}")
            return False

    async def read_file(self, path_like: PathLike, encoding: FileEncoding) -> str:
        """
        Read and decode a resource.

        Raises:
            NoValidLocator: If the path cannot be resolved
            ResourceNotFound: If the resource does not exist
        """
        data = await self.read_buffer(path_like)
        return data.decode(encoding)

    async def read_buffer(self, path_like: PathLike) -> bytes:
        """
        Read a resource as bytes.

        Raises:
            NoValidLocator: If the path cannot be resolved
            ResourceNotFound: If the resource does not exist
        """
        locator = self._resolve(path_like)
        return bytes(await self._file_system.read_file(locator))

    async def write_buffer(self, path_like: PathLike, buffer: bytes) -> None:
        """
        Create or overwrite a resource.

        Raises:
            NoValidLocator: If the path cannot be resolved
        """
        locator = self._resolve(path_like)
        await self._file_system.write_file(locator, bytes(buffer))

    async def readdir(self, path_like: PathLike) -> list[str]:
        """
        Names of the entries of a directory.

        A resource that is not a directory yields an empty list.

        Raises:
            NoValidLocator: If the path cannot be resolved
            ResourceNotFound: If the resource does not exist
        """
        locator = self._resolve(path_like)
        stat = await self._file_system.stat(locator)
        if stat.is_directory:
            entries = await self._file_system.read_directory(locator)
            return [name for name, _ in entries]
        logger.log(TRACE, f"{locator} is no directory")
        return []

    def fs_path(self, path_like: PathLike) -> str | None:
        """Local path of a ``file`` locator, else None. Never raises."""
        locator = to_locator(path_like)
        if locator is None or locator.scheme != FILE_SCHEME:
            return None
        try:
            return locator.fs_path
        except Exception as e:
            logger.debug(f"Cannot project {locator} to a local path: {e}")
            return None

    @property
    def workspace_folders(self) -> Sequence[ResourceLocator]:
        return self._workspace.workspace_folders
