"""
One-shot bootstrap script.

Runs the ``extensionScript`` setting through the engine once. After a
successful run the runner disposes its own subscription and never runs
again. A missing script is reported to the user and a failing script is
logged; in both cases the subscription stays, so the next configuration
change retries.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from reqhost.config.service import watch_config_settings
from reqhost.engine.scripts import ScriptRequest
from reqhost.errors import ConfigurationScriptMissing, ExecutionFailure

from .pipeline import SCRIPT_ENCODING, is_absolute_path

if TYPE_CHECKING:
    from reqhost.config.schemas import AppConfig
    from reqhost.engine.api import EngineApi
    from reqhost.host.events import Disposable
    from reqhost.host.protocol import ConfigurationSource, PopupService
    from reqhost.io.file_provider import FileProvider

logger = logging.getLogger(__name__)


class OneShotScriptRunner:
    """
    Executes the bootstrap script at most once.

    Example:
        runner = OneShotScriptRunner(engine, provider, popups, config)
        subscription = await runner.start()
        runner.executed  # True once the script ran
    """

    def __init__(
        self,
        engine: EngineApi,
        file_provider: FileProvider,
        popups: PopupService,
        config: ConfigurationSource,
    ):
        self._engine = engine
        self._file_provider = file_provider
        self._popups = popups
        self._config = config
        self._subscription: Disposable | None = None
        self._running = False
        self._pending: AppConfig | None = None
        self.executed = False

    async def start(self) -> Disposable:
        """Run against the current configuration and follow changes."""
        self._subscription = await watch_config_settings(self._config, self.on_configuration_changed)
        if self.executed:
            # succeeded during the initial delivery
            self._subscription.dispose()
        return self._subscription

    async def on_configuration_changed(self, config: AppConfig) -> None:
        if self.executed:
            return
        if self._running:
            # retried after the attempt in flight, unless that one succeeds
            self._pending = config
            return
        self._running = True
        try:
            next_config: AppConfig | None = config
            while next_config is not None and not self.executed:
                await self._attempt(next_config)
                next_config, self._pending = self._pending, None
        finally:
            self._running = False

    async def _attempt(self, config: AppConfig) -> None:
        extension_script = config.extension_script
        if not extension_script:
            return
        try:
            if is_absolute_path(extension_script) and await self._file_provider.exists(extension_script):
                await self._execute(extension_script)
                self.executed = True
                logger.info("extension script executed. dispose config watcher")
                if self._subscription is not None:
                    self._subscription.dispose()
            else:
                error = ConfigurationScriptMissing(extension_script)
                logger.error(str(error))
                await self._popups.show_error_message(str(error))
        except ExecutionFailure as e:
            logger.error(str(e), exc_info=e.cause)
        except Exception as e:
            logger.error(f"extension script error: {e}", exc_info=True)

    async def _execute(self, path: str) -> None:
        try:
            script = await self._file_provider.read_file(path, SCRIPT_ENCODING)
            await self._engine.script_executor.execute_script(
                ScriptRequest(script=script, file_name=path, variables={}, line_offset=0)
            )
        except Exception as e:
            raise ExecutionFailure(path, e) from e
