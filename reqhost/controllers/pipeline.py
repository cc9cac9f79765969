"""
Pipeline reconfiguration.

Keeps the engine's region-parser pipeline in line with the
``httpRegionScript`` setting. On every configuration change:

1. the parsed-document store is cleared so files are parsed again
2. the script-driven parser, if any, is removed
3. a new script-driven parser is appended last when a script is configured

Steps 1-3 run under a lock so overlapping changes never interleave. The
script itself is loaded lazily by the parser, from the setting current at
load time:
- absolute path: read directly
- relative path: tried against each workspace folder in order
Misses are logged at TRACE and result in no script.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import PurePosixPath, PureWindowsPath
from typing import TYPE_CHECKING

from reqhost.config.service import watch_config_settings
from reqhost.engine.parsers import SettingsScriptHttpRegionParser
from reqhost.engine.scripts import ScriptData
from reqhost.errors import ResourceNotFound
from reqhost.log import TRACE

if TYPE_CHECKING:
    from reqhost.config.schemas import AppConfig
    from reqhost.engine.api import EngineApi
    from reqhost.host.events import Disposable
    from reqhost.host.protocol import ConfigurationSource, Workspace
    from reqhost.io.file_provider import FileProvider
    from reqhost.io.locator import PathLike

logger = logging.getLogger(__name__)

SCRIPT_ENCODING = "utf-8"


def is_absolute_path(path: str) -> bool:
    """True for POSIX or Windows absolute paths."""
    return PurePosixPath(path).is_absolute() or PureWindowsPath(path).is_absolute()


class PipelineReconfigurationController:
    """
    Adds and removes the script-driven region parser on configuration change.

    The controller holds no state besides its lock; the parser registry it
    edits belongs to the engine.

    Example:
        controller = PipelineReconfigurationController(engine, provider, workspace, config)
        subscription = await controller.start()
        ...
        subscription.dispose()
    """

    def __init__(
        self,
        engine: EngineApi,
        file_provider: FileProvider,
        workspace: Workspace,
        config: ConfigurationSource,
    ):
        """
        Initialize the controller.

        Args:
            engine: Engine whose region parsers are reconfigured
            file_provider: Facade used to read the script
            workspace: Workspace folders for relative script paths
            config: Configuration source
        """
        self._engine = engine
        self._file_provider = file_provider
        self._workspace = workspace
        self._config = config
        self._lock = asyncio.Lock()

    async def start(self) -> Disposable:
        """Apply the current configuration and follow changes."""
        return await watch_config_settings(self._config, self.reconfigure)

    @property
    def region_script_parser(self) -> SettingsScriptHttpRegionParser | None:
        """The registered script-driven parser, if any."""
        return self._engine.http_region_parsers.find_kind(SettingsScriptHttpRegionParser)

    async def reconfigure(self, config: AppConfig) -> None:
        async with self._lock:
            self._engine.http_file_store.clear()

            if self.region_script_parser is not None:
                self._engine.http_region_parsers.remove_kind(SettingsScriptHttpRegionParser)
                logger.debug("Removed region script parser")

            if config.http_region_script:
                self._engine.http_region_parsers.append_last(
                    SettingsScriptHttpRegionParser(self.load_region_script)
                )
                logger.info(f"Region script parser registered: {config.http_region_script}")

    async def load_region_script(self) -> ScriptData | None:
        """
        Load the configured region script.

        Returns:
            Script data, or None if no script is configured or found
        """
        file_name = self._config.get().http_region_script
        if not file_name:
            return None

        if is_absolute_path(file_name):
            return await self._read_script(file_name)

        for folder in self._workspace.workspace_folders:
            data = await self._read_script(self._file_provider.join_path(folder, file_name))
            if data is not None:
                return data
        return None

    async def _read_script(self, path_like: PathLike) -> ScriptData | None:
        try:
            script = await self._file_provider.read_file(path_like, SCRIPT_ENCODING)
        except ResourceNotFound:
            logger.log(TRACE, f"file not found: {path_like}")
            return None
        except Exception as e:
            logger.debug(f"Cannot read region script {path_like}: {e}")
            return None
        return ScriptData(script=script, line_offset=0)
