"""
reqhost Host Layer.

Capability protocols the adaptation layer depends on, subscription
primitives, and host implementations.

Core Components:
- FileSystem, EditorWindow, Workspace, PopupService, ConfigurationSource:
  protocols injected into the facade and controllers
- Disposable / EventEmitter: subscriptions and change delivery

Implementations:
- memory: in-memory fakes for tests and embedding
- local: disk file system and settings-file configuration
- remote: read-only HTTP file system and scheme routing

Adding a New Host:
    Implement the protocols and pass them to reqhost.extension.activate():

    class MyEditorWindow:
        @property
        def visible_text_editors(self):
            return [TextEditor(document=d) for d in my_editor.open_docs()]
"""

from .events import Disposable, EventEmitter
from .local import FileConfigurationSource, LocalFileSystem
from .memory import (
    InMemoryConfigurationSource,
    InMemoryEditorWindow,
    InMemoryFileSystem,
    InMemoryWorkspace,
    ScriptedPopupService,
)
from .protocol import (
    ConfigurationSource,
    DocumentSelector,
    EditorWindow,
    FileStat,
    FileSystem,
    FileType,
    PopupService,
    TextDocument,
    TextEditor,
    Workspace,
)
from .remote import HttpFileSystem, SchemeFileSystem

__all__ = [
    # Protocols
    "ConfigurationSource",
    "EditorWindow",
    "FileSystem",
    "PopupService",
    "Workspace",
    # Data
    "DocumentSelector",
    "FileStat",
    "FileType",
    "TextDocument",
    "TextEditor",
    # Events
    "Disposable",
    "EventEmitter",
    # Implementations
    "FileConfigurationSource",
    "HttpFileSystem",
    "InMemoryConfigurationSource",
    "InMemoryEditorWindow",
    "InMemoryFileSystem",
    "InMemoryWorkspace",
    "LocalFileSystem",
    "SchemeFileSystem",
    "ScriptedPopupService",
]
