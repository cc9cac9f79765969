"""
reqhost I/O

Resource locators and the file access facade handed to the engine.
"""

from .file_provider import FileProvider, HostFileProvider
from .locator import (
    FILE_SCHEME,
    UNTITLED_SCHEME,
    PathLike,
    ResourceLocator,
    VirtualDocument,
    is_virtual_document,
    resolve,
    to_locator,
)

__all__ = [
    "FILE_SCHEME",
    "UNTITLED_SCHEME",
    "FileProvider",
    "HostFileProvider",
    "PathLike",
    "ResourceLocator",
    "VirtualDocument",
    "is_virtual_document",
    "resolve",
    "to_locator",
]
