"""
Engine surface.

EngineApi groups the parts of the request engine that the adaptation layer
works with: the ordered region-parser and variable-replacer registries, the
parsed-document store, the script executor and the file provider slot.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from reqhost.errors import FileProviderAlreadyBound

from .parsers import HttpRegionParser
from .registry import OrderedRegistry
from .replacers import VariableReplacer

if TYPE_CHECKING:
    from reqhost.io.file_provider import FileProvider
    from reqhost.io.locator import ResourceLocator

    from .scripts import ScriptExecutor

logger = logging.getLogger(__name__)


class HttpFileStore:
    """
    Cache of parsed http files keyed by locator.

    Cleared on every configuration change so files are parsed again with
    the current parser pipeline.
    """

    def __init__(self) -> None:
        self._files: dict[ResourceLocator, Any] = {}

    def get(self, locator: ResourceLocator) -> Any | None:
        return self._files.get(locator)

    def set(self, locator: ResourceLocator, http_file: Any) -> None:
        self._files[locator] = http_file

    def remove(self, locator: ResourceLocator) -> None:
        self._files.pop(locator, None)

    def clear(self) -> None:
        if self._files:
            logger.debug(f"Clearing {len(self._files)} parsed file(s)")
        self._files.clear()

    def __len__(self) -> int:
        return len(self._files)

    def __contains__(self, locator: object) -> bool:
        return locator in self._files


class EngineApi:
    """
    Handle to the request engine.

    Example:
        engine = EngineApi(script_executor=executor)
        engine.bind_file_provider(HostFileProvider(fs, window, workspace))
        engine.http_region_parsers.append_last(parser)
    """

    def __init__(
        self,
        script_executor: ScriptExecutor,
        *,
        http_region_parsers: list[HttpRegionParser] | None = None,
        variable_replacers: list[VariableReplacer] | None = None,
        http_file_store: HttpFileStore | None = None,
    ):
        """
        Initialize the engine handle.

        Args:
            script_executor: Engine entry point for running scripts
            http_region_parsers: Built-in region parsers, in try-order
            variable_replacers: Built-in variable replacers, in try-order
            http_file_store: Parsed-document cache
        """
        self.script_executor = script_executor
        self.http_region_parsers: OrderedRegistry[HttpRegionParser] = OrderedRegistry(
            "http_region_parsers", http_region_parsers
        )
        self.variable_replacers: OrderedRegistry[VariableReplacer] = OrderedRegistry(
            "variable_replacers", variable_replacers
        )
        self.http_file_store = http_file_store or HttpFileStore()
        self._file_provider: FileProvider | None = None

    @property
    def file_provider(self) -> FileProvider | None:
        return self._file_provider

    def bind_file_provider(self, file_provider: FileProvider) -> None:
        """
        Hand the engine its file provider.

        Raises:
            FileProviderAlreadyBound: If a different provider is already bound
        """
        if self._file_provider is not None and self._file_provider is not file_provider:
            raise FileProviderAlreadyBound(
                f"Engine already uses {self._file_provider!r}; a file provider is bound once"
            )
        self._file_provider = file_provider
        logger.debug(f"File provider bound: {file_provider!r}")
