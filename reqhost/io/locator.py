"""
Resource locators.

A ResourceLocator is the canonical identity of a storage location, modelled
on editor URIs: a scheme (``file``, ``untitled``, ``https`` ...), an optional
authority, a path and optional query/fragment. Every facade operation works
on locators so the engine never depends on how a path was written.

Resolution rules (to_locator / resolve):
- str or os.PathLike -> file locator
- ResourceLocator    -> returned unchanged
- virtual document   -> its backing file locator, else its own locator
- anything else      -> no locator
"""

from __future__ import annotations

import os
import posixpath
from dataclasses import dataclass, replace
from typing import Any, Protocol, Union, runtime_checkable
from urllib.parse import urlsplit

from reqhost.errors import NoValidLocator

FILE_SCHEME = "file"
UNTITLED_SCHEME = "untitled"


@dataclass(frozen=True, slots=True)
class ResourceLocator:
    """
    Immutable storage identity.

    Attributes:
        scheme: Storage scheme, e.g. "file" or "untitled"
        path: Slash separated path
        authority: Host part for remote or UNC locations
        query: Query string without the leading "?"
        fragment: Fragment without the leading "#"
    """

    scheme: str
    path: str = "/"
    authority: str = ""
    query: str = ""
    fragment: str = ""

    @classmethod
    def file(cls, path: str | os.PathLike[str]) -> ResourceLocator:
        """Create a locator for a local file system path."""
        text = os.fspath(path).replace("\\", "/")
        authority = ""
        if text.startswith("//"):
            # UNC path: //server/share/...
            authority, _, rest = text[2:].partition("/")
            text = "/" + rest
        elif not text.startswith("/"):
            text = "/" + text
        return cls(scheme=FILE_SCHEME, path=text, authority=authority)

    @classmethod
    def parse(cls, value: str) -> ResourceLocator:
        """
        Parse the text form of a locator.

        Raises:
            ValueError: If the value carries no scheme
        """
        parts = urlsplit(value)
        if not parts.scheme:
            raise ValueError(f"Locator has no scheme: {value!r}")
        return cls(
            scheme=parts.scheme,
            path=parts.path or ("/" if parts.netloc else ""),
            authority=parts.netloc,
            query=parts.query,
            fragment=parts.fragment,
        )

    @property
    def name(self) -> str:
        """Last path segment."""
        return posixpath.basename(self.path.rstrip("/"))

    @property
    def parent(self) -> ResourceLocator:
        """Locator of the containing directory. The root is its own parent."""
        return self.join_path("..")

    def join_path(self, *segments: str) -> ResourceLocator:
        """Return a new locator with the segments appended and '.'/'..' resolved."""
        base = self.path if self.path.startswith("/") else "/" + self.path
        parts = [s.replace("\\", "/").lstrip("/") for s in segments]
        normalized = posixpath.normpath(posixpath.join(base, *parts))
        # normpath keeps a leading '//'; the authority already holds any host
        if normalized.startswith("//"):
            normalized = "/" + normalized.lstrip("/")
        return replace(self, path=normalized, query="", fragment="")

    @property
    def fs_path(self) -> str:
        """
        Local file system path.

        Raises:
            ValueError: If the locator is not a file locator
        """
        if self.scheme != FILE_SCHEME:
            raise ValueError(f"Not a file locator: {self}")
        if self.authority:
            path = f"//{self.authority}{self.path}"
        else:
            path = self.path
        if os.name == "nt":
            # /c:/dir -> c:\dir
            if len(path) >= 3 and path[0] == "/" and path[2] == ":":
                path = path[1:]
            path = path.replace("/", "\\")
        return path

    def to_string(self) -> str:
        text = f"{self.scheme}:"
        if self.authority or self.scheme == FILE_SCHEME:
            text += f"//{self.authority}"
        text += self.path
        if self.query:
            text += f"?{self.query}"
        if self.fragment:
            text += f"#{self.fragment}"
        return text

    def __str__(self) -> str:
        return self.to_string()


@runtime_checkable
class VirtualDocumentLike(Protocol):
    """Handle to an editor buffer that may not be saved to disk."""

    @property
    def uri(self) -> ResourceLocator: ...


@dataclass(frozen=True)
class VirtualDocument:
    """
    Editor buffer handle.

    Attributes:
        uri: Identity of the buffer
        file_uri: Backing file, if the buffer corresponds to one
    """

    uri: ResourceLocator
    file_uri: ResourceLocator | None = None

    def __str__(self) -> str:
        return str(self.file_uri or self.uri)


PathLike = Union[str, os.PathLike, ResourceLocator, VirtualDocumentLike]


def is_virtual_document(value: Any) -> bool:
    """True for objects carrying a ResourceLocator in ``uri``."""
    return isinstance(getattr(value, "uri", None), ResourceLocator)


def to_locator(path_like: Any) -> ResourceLocator | None:
    """Resolve a path-like value, returning None when it has no locator."""
    if isinstance(path_like, ResourceLocator):
        return path_like
    if isinstance(path_like, str | os.PathLike):
        text = os.fspath(path_like)
        # bytes paths and the empty string have no locator
        if not isinstance(text, str) or not text:
            return None
        return ResourceLocator.file(text)
    if is_virtual_document(path_like):
        file_uri = getattr(path_like, "file_uri", None)
        if isinstance(file_uri, ResourceLocator):
            return file_uri
        return path_like.uri
    return None


def resolve(path_like: Any) -> ResourceLocator:
    """
    Resolve a path-like value.

    Raises:
        NoValidLocator: If the value cannot be resolved
    """
    locator = to_locator(path_like)
    if locator is None:
        raise NoValidLocator(path_like)
    return locator
