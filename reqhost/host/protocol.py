"""
Host capability protocols.

The adaptation layer never talks to an editor directly. Everything it needs
from the host environment is injected through the protocols below:

- FileSystem: stat/read/write/list over locators
- EditorWindow: currently visible editors and their documents
- Workspace: ordered workspace folders
- PopupService: input box, quick pick and message prompts
- ConfigurationSource: current settings plus change notification

Implementations live in reqhost.host.memory (tests, examples),
reqhost.host.local (disk, settings files) and reqhost.host.remote (HTTP).
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import IntFlag
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from reqhost.config.schemas import AppConfig
    from reqhost.io.locator import ResourceLocator

    from .events import Disposable, Listener


class FileType(IntFlag):
    """Kind of a stored resource. Symbolic links combine with FILE or DIRECTORY."""

    UNKNOWN = 0
    FILE = 1
    DIRECTORY = 2
    SYMBOLIC_LINK = 64


@dataclass(frozen=True, slots=True)
class FileStat:
    """
    Metadata returned by FileSystem.stat().

    Attributes:
        type: Resource kind
        size: Size in bytes
        ctime: Creation time (ms since epoch)
        mtime: Modification time (ms since epoch)
    """

    type: FileType
    size: int = 0
    ctime: float = 0.0
    mtime: float = 0.0

    @property
    def is_directory(self) -> bool:
        return bool(self.type & FileType.DIRECTORY)


@dataclass(frozen=True)
class TextDocument:
    """
    An open editor buffer.

    Attributes:
        uri: Buffer identity (``untitled:`` for unsaved buffers)
        language_id: Content type tag, e.g. "http" or "markdown"
        text: Current buffer content
    """

    uri: ResourceLocator
    language_id: str = "plaintext"
    text: str = ""


@dataclass(frozen=True)
class TextEditor:
    """A visible editor showing a document."""

    document: TextDocument


@dataclass(frozen=True)
class DocumentSelector:
    """Matches documents by content type and storage scheme."""

    language: str | None = None
    scheme: str | None = None

    def matches(self, document: TextDocument) -> bool:
        if self.language is not None and document.language_id != self.language:
            return False
        if self.scheme is not None and document.uri.scheme != self.scheme:
            return False
        return True


@runtime_checkable
class FileSystem(Protocol):
    """
    Host storage.

    Missing resources raise reqhost.errors.ResourceNotFound. Other failures
    propagate as raised by the implementation.
    """

    async def stat(self, locator: ResourceLocator) -> FileStat: ...

    async def read_file(self, locator: ResourceLocator) -> bytes: ...

    async def write_file(self, locator: ResourceLocator, content: bytes) -> None: ...

    async def read_directory(self, locator: ResourceLocator) -> list[tuple[str, FileType]]: ...


@runtime_checkable
class EditorWindow(Protocol):
    """Editor window state."""

    @property
    def visible_text_editors(self) -> Sequence[TextEditor]: ...


@runtime_checkable
class Workspace(Protocol):
    """Workspace folders in declaration order."""

    @property
    def workspace_folders(self) -> Sequence[ResourceLocator]: ...


@runtime_checkable
class PopupService(Protocol):
    """
    User prompts.

    Prompts suspend until the user answers. A dismissed prompt returns None.
    """

    async def show_input_box(
        self,
        prompt: str,
        *,
        placeholder: str | None = None,
        value: str | None = None,
    ) -> str | None: ...

    async def show_quick_pick(
        self,
        items: Sequence[str],
        *,
        placeholder: str | None = None,
    ) -> str | None: ...

    async def show_warning_message(
        self,
        message: str,
        *buttons: str,
        modal: bool = False,
    ) -> str | None: ...

    async def show_error_message(self, message: str) -> None: ...


@runtime_checkable
class ConfigurationSource(Protocol):
    """
    Live settings.

    get() returns the current snapshot. Listeners registered with
    on_did_change() receive each new snapshot.
    """

    def get(self) -> AppConfig: ...

    def on_did_change(self, listener: Listener[AppConfig]) -> Disposable: ...
