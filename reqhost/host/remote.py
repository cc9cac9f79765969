"""
Remote and routed file systems.

HttpFileSystem serves ``http``/``https`` locators read-only, so scripts and
request files can be referenced by URL. SchemeFileSystem routes each call
to the file system registered for the locator's scheme.

Usage:
    fs = SchemeFileSystem({"file": LocalFileSystem()})
    fs.register(HttpFileSystem(), "http", "https")
    data = await fs.read_file(ResourceLocator.parse("https://example.com/init.js"))
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

import httpx

from reqhost.errors import ResourceNotFound, UnsupportedOperation
from reqhost.io.locator import ResourceLocator

from .protocol import FileStat, FileSystem, FileType

logger = logging.getLogger(__name__)


class HttpFileSystem:
    """
    Read-only file system over HTTP.

    stat() issues a HEAD request, read_file() a GET. A 404 raises
    ResourceNotFound; other error statuses raise httpx.HTTPStatusError.
    Writes and directory listings are not supported.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        timeout: float = 30.0,
        headers: Mapping[str, str] | None = None,
    ):
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout
        self._headers = dict(headers or {})

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                headers=self._headers,
                follow_redirects=True,
            )
            self._owns_client = True
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if this file system created it."""
        if self._owns_client and self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _request(self, method: str, locator: ResourceLocator) -> httpx.Response:
        if locator.scheme not in ("http", "https"):
            raise UnsupportedOperation(f"HttpFileSystem cannot handle scheme '{locator.scheme}'")
        client = await self._get_client()
        response = await client.request(method, str(locator))
        if response.status_code == 404:
            raise ResourceNotFound(locator)
        response.raise_for_status()
        return response

    async def stat(self, locator: ResourceLocator) -> FileStat:
        response = await self._request("HEAD", locator)
        size = int(response.headers.get("content-length", 0) or 0)
        return FileStat(type=FileType.FILE, size=size)

    async def read_file(self, locator: ResourceLocator) -> bytes:
        response = await self._request("GET", locator)
        logger.debug(f"Fetched {len(response.content)} bytes from {locator}")
        return response.content

    async def write_file(self, locator: ResourceLocator, content: bytes) -> None:
        raise UnsupportedOperation(f"Cannot write to {locator}: HTTP locators are read-only")

    async def read_directory(self, locator: ResourceLocator) -> list[tuple[str, FileType]]:
        raise UnsupportedOperation(f"Cannot list {locator}: HTTP locators have no directories")


class SchemeFileSystem:
    """
    Routes file operations by locator scheme.

    Raises UnsupportedOperation for schemes without a registered file system.
    """

    def __init__(self, file_systems: Mapping[str, FileSystem] | None = None):
        self._file_systems: dict[str, FileSystem] = dict(file_systems or {})

    def register(self, file_system: FileSystem, *schemes: str) -> None:
        for scheme in schemes:
            if scheme in self._file_systems:
                logger.warning(f"Replacing file system for scheme: {scheme}")
            self._file_systems[scheme] = file_system
            logger.debug(f"Registered file system for scheme: {scheme}")

    @property
    def schemes(self) -> list[str]:
        return list(self._file_systems.keys())

    def _route(self, locator: ResourceLocator) -> FileSystem:
        file_system = self._file_systems.get(locator.scheme)
        if file_system is None:
            available = ", ".join(self._file_systems.keys()) or "(none)"
            raise UnsupportedOperation(
                f"No file system registered for scheme: {locator.scheme}. Available: {available}"
            )
        return file_system

    async def stat(self, locator: ResourceLocator) -> FileStat:
        return await self._route(locator).stat(locator)

    async def read_file(self, locator: ResourceLocator) -> bytes:
        return await self._route(locator).read_file(locator)

    async def write_file(self, locator: ResourceLocator, content: bytes) -> None:
        await self._route(locator).write_file(locator, content)

    async def read_directory(self, locator: ResourceLocator) -> list[tuple[str, FileType]]:
        return await self._route(locator).read_directory(locator)
