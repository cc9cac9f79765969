"""
Activation.

activate() wires the adaptation layer into an engine for one host:

- binds a HostFileProvider as the engine's file provider
- registers the note parser and the interactive replacers (front of the
  replacer registry, tried before built-ins)
- starts the log-level watcher, the pipeline reconfiguration controller and
  the one-shot bootstrap runner

The returned ExtensionApi owns every subscription; dispose() releases them.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from reqhost.controllers import OneShotScriptRunner, PipelineReconfigurationController
from reqhost.engine import (
    EngineApi,
    NoteMetaHttpRegionParser,
    ShowInputBoxVariableReplacer,
    ShowQuickpickVariableReplacer,
)
from reqhost.host.events import Disposable
from reqhost.host.protocol import (
    ConfigurationSource,
    EditorWindow,
    FileSystem,
    PopupService,
    Workspace,
)
from reqhost.io.file_provider import HostFileProvider
from reqhost.log import watch_log_level

logger = logging.getLogger(__name__)

EXECUTE_BUTTON = "Execute"


@dataclass
class HostEnvironment:
    """Capabilities supplied by the host."""

    file_system: FileSystem
    window: EditorWindow
    workspace: Workspace
    popups: PopupService
    config: ConfigurationSource


@dataclass
class ExtensionApi:
    """Result of activation."""

    engine: EngineApi
    host: HostEnvironment
    file_provider: HostFileProvider
    pipeline_controller: PipelineReconfigurationController
    script_runner: OneShotScriptRunner
    subscriptions: list[Disposable] = field(default_factory=list)

    def dispose(self) -> None:
        """Release every subscription, newest first."""
        for subscription in reversed(self.subscriptions):
            subscription.dispose()
        self.subscriptions.clear()
        logger.info("reqhost deactivated")


def _register_interactive_components(engine: EngineApi, popups: PopupService) -> None:
    async def confirm(note: str) -> bool:
        answer = await popups.show_warning_message(note, EXECUTE_BUTTON, modal=True)
        return answer == EXECUTE_BUTTON

    async def prompt(message: str, default_value: str | None) -> str | None:
        return await popups.show_input_box(message, placeholder=message, value=default_value)

    async def pick(message: str, values: Sequence[str]) -> str | None:
        return await popups.show_quick_pick(values, placeholder=message)

    engine.http_region_parsers.append_last(NoteMetaHttpRegionParser(confirm))
    engine.variable_replacers.insert_at(0, ShowInputBoxVariableReplacer(prompt))
    engine.variable_replacers.insert_at(0, ShowQuickpickVariableReplacer(pick))


async def activate(engine: EngineApi, host: HostEnvironment) -> ExtensionApi:
    """
    Connect the engine to the host.

    Args:
        engine: Engine to adapt
        host: Host capabilities

    Returns:
        ExtensionApi holding the wiring and its subscriptions
    """
    file_provider = HostFileProvider(
        file_system=host.file_system,
        window=host.window,
        workspace=host.workspace,
    )
    engine.bind_file_provider(file_provider)
    _register_interactive_components(engine, host.popups)

    pipeline_controller = PipelineReconfigurationController(
        engine, file_provider, host.workspace, host.config
    )
    script_runner = OneShotScriptRunner(engine, file_provider, host.popups, host.config)

    api = ExtensionApi(
        engine=engine,
        host=host,
        file_provider=file_provider,
        pipeline_controller=pipeline_controller,
        script_runner=script_runner,
    )
    try:
        api.subscriptions.append(await watch_log_level(host.config))
        api.subscriptions.append(await pipeline_controller.start())
        api.subscriptions.append(await script_runner.start())
    except Exception as e:
        logger.error(f"Activation failed: {e}", exc_info=True)
        api.dispose()
        raise

    logger.info("reqhost activated")
    return api
