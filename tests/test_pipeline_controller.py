"""
Tests for PipelineReconfigurationController.
"""

import asyncio
import logging
from unittest.mock import AsyncMock

import pytest

from reqhost.controllers import PipelineReconfigurationController
from reqhost.controllers.pipeline import is_absolute_path
from reqhost.engine import (
    HttpRegion,
    NoteMetaHttpRegionParser,
    ParserContext,
    ScriptData,
    SettingsScriptHttpRegionParser,
)
from reqhost.host import InMemoryConfigurationSource, InMemoryWorkspace
from reqhost.io import HostFileProvider, ResourceLocator
from reqhost.log import TRACE


@pytest.fixture
def builtin_parsers():
    return [NoteMetaHttpRegionParser(AsyncMock()), NoteMetaHttpRegionParser(AsyncMock())]


@pytest.fixture
def controller(engine, file_provider, workspace, config, builtin_parsers):
    for parser in builtin_parsers:
        engine.http_region_parsers.append_last(parser)
    return PipelineReconfigurationController(engine, file_provider, workspace, config)


def script_parsers(engine):
    return [p for p in engine.http_region_parsers if isinstance(p, SettingsScriptHttpRegionParser)]


# =============================================================================
# Reconfiguration
# =============================================================================


class TestReconfigure:
    """Tests for pipeline mutation on configuration change."""

    @pytest.mark.asyncio
    async def test_start_without_script_leaves_pipeline(self, controller, engine, builtin_parsers):
        await controller.start()

        assert engine.http_region_parsers.snapshot() == tuple(builtin_parsers)

    @pytest.mark.asyncio
    async def test_enabling_script_appends_one_parser_last(self, controller, engine, config, builtin_parsers):
        await controller.start()

        await config.update(httpRegionScript="scripts/setup.js")

        parsers = engine.http_region_parsers.snapshot()
        assert len(script_parsers(engine)) == 1
        assert parsers[: len(builtin_parsers)] == tuple(builtin_parsers)
        assert isinstance(parsers[-1], SettingsScriptHttpRegionParser)

    @pytest.mark.asyncio
    async def test_repeated_changes_keep_a_single_script_parser(self, controller, engine, config):
        await controller.start()

        await config.update(httpRegionScript="scripts/setup.js")
        await config.update(httpRegionScript="scripts/other.js")
        await config.update(logLevel="debug")

        assert len(script_parsers(engine)) == 1
        assert isinstance(engine.http_region_parsers.snapshot()[-1], SettingsScriptHttpRegionParser)

    @pytest.mark.asyncio
    async def test_disabling_script_restores_pipeline(self, controller, engine, config, builtin_parsers):
        await controller.start()
        before = engine.http_region_parsers.snapshot()

        await config.update(httpRegionScript="scripts/setup.js")
        await config.update(httpRegionScript=None)

        assert engine.http_region_parsers.snapshot() == before
        assert script_parsers(engine) == []

    @pytest.mark.asyncio
    async def test_script_configured_at_start(self, engine, file_provider, workspace):
        config = InMemoryConfigurationSource(httpRegionScript="/abs/region.js")
        controller = PipelineReconfigurationController(engine, file_provider, workspace, config)

        await controller.start()

        assert len(script_parsers(engine)) == 1

    @pytest.mark.asyncio
    async def test_every_change_clears_parsed_documents(self, controller, engine, config):
        await controller.start()
        engine.http_file_store.set(ResourceLocator.file("/ws/a/api.http"), object())

        await config.update(logLevel="warn")

        assert len(engine.http_file_store) == 0

    @pytest.mark.asyncio
    async def test_disposed_subscription_stops_reconfiguration(self, controller, engine, config):
        subscription = await controller.start()
        subscription.dispose()

        await config.update(httpRegionScript="scripts/setup.js")

        assert script_parsers(engine) == []

    @pytest.mark.asyncio
    async def test_region_script_parser_property(self, controller, config):
        await controller.start()
        assert controller.region_script_parser is None

        await config.update(httpRegionScript="scripts/setup.js")

        assert isinstance(controller.region_script_parser, SettingsScriptHttpRegionParser)

    @pytest.mark.asyncio
    async def test_concurrent_changes_end_consistent(self, controller, engine, config):
        await controller.start()

        await asyncio.gather(
            controller.reconfigure(config.get().model_copy(update={"http_region_script": "a.js"})),
            controller.reconfigure(config.get().model_copy(update={"http_region_script": "b.js"})),
            controller.reconfigure(config.get()),
        )

        assert len(script_parsers(engine)) <= 1


# =============================================================================
# Script loading
# =============================================================================


class TestLoadRegionScript:
    """Tests for lazy region script loading."""

    @pytest.mark.asyncio
    async def test_nothing_configured(self, controller):
        assert await controller.load_region_script() is None

    @pytest.mark.asyncio
    async def test_absolute_path(self, controller, config, file_system):
        file_system.add_file("/abs/region.js", "exports.region = true;")
        await config.update(httpRegionScript="/abs/region.js")

        data = await controller.load_region_script()

        assert data == ScriptData(script="exports.region = true;", line_offset=0)

    @pytest.mark.asyncio
    async def test_absolute_path_missing(self, controller, config, caplog):
        await config.update(httpRegionScript="/abs/missing.js")

        with caplog.at_level(TRACE, logger="reqhost"):
            data = await controller.load_region_script()

        assert data is None
        assert any(r.levelno == TRACE and "file not found" in r.message for r in caplog.records)

    @pytest.mark.asyncio
    async def test_relative_path_falls_back_across_folders(self, controller, config, file_system, caplog):
        file_system.add_file("/ws/b/scripts/setup.js", "// from B")
        await config.update(httpRegionScript="scripts/setup.js")

        with caplog.at_level(TRACE, logger="reqhost"):
            data = await controller.load_region_script()

        assert data.script == "// from B"
        misses = [r for r in caplog.records if "file not found" in r.message]
        assert len(misses) == 1
        assert "/ws/a/scripts/setup.js" in misses[0].message
        assert not any(r.levelno >= logging.WARNING for r in caplog.records)

    @pytest.mark.asyncio
    async def test_relative_path_first_folder_wins(self, controller, config, file_system):
        file_system.add_file("/ws/a/scripts/setup.js", "// from A")
        file_system.add_file("/ws/b/scripts/setup.js", "// from B")
        await config.update(httpRegionScript="scripts/setup.js")

        data = await controller.load_region_script()

        assert data.script == "// from A"

    @pytest.mark.asyncio
    async def test_relative_path_not_found_anywhere(self, controller, config):
        await config.update(httpRegionScript="scripts/setup.js")

        assert await controller.load_region_script() is None

    @pytest.mark.asyncio
    async def test_relative_path_without_workspace(self, engine, file_system, window):
        config = InMemoryConfigurationSource(httpRegionScript="scripts/setup.js")
        workspace = InMemoryWorkspace()
        provider = HostFileProvider(file_system, window, workspace)
        controller = PipelineReconfigurationController(engine, provider, workspace, config)

        assert await controller.load_region_script() is None

    @pytest.mark.asyncio
    async def test_read_errors_are_swallowed(self, controller, config, file_system):
        file_system.add_directory("/abs/dir.js")  # reading a directory fails
        await config.update(httpRegionScript="/abs/dir.js")

        assert await controller.load_region_script() is None

    @pytest.mark.asyncio
    async def test_loader_uses_current_setting(self, controller, engine, config, file_system):
        file_system.add_file("/abs/one.js", "one")
        file_system.add_file("/abs/two.js", "two")
        await controller.start()
        await config.update(httpRegionScript="/abs/one.js")
        parser = controller.region_script_parser

        await config.update(httpRegionScript="/abs/two.js")
        context = ParserContext(file=None, region=HttpRegion(), is_file_start=True)
        await parser.parse(["GET /"], 0, context)

        assert context.region.actions[0].data.script == "two"

    @pytest.mark.asyncio
    async def test_parser_reads_script_through_controller(self, controller, engine, config, file_system):
        file_system.add_file("/ws/b/scripts/setup.js", "// B")
        await controller.start()
        await config.update(httpRegionScript="scripts/setup.js")

        context = ParserContext(
            file=ResourceLocator.file("/ws/b/api.http"),
            region=HttpRegion(),
            is_file_start=True,
        )
        await script_parsers(engine)[0].parse(["GET /"], 0, context)

        assert context.region.actions[0].data.script == "// B"


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("/abs/init.js", True),
        ("C:\\scripts\\init.js", True),
        ("scripts/init.js", False),
        ("./init.js", False),
    ],
)
def test_is_absolute_path(path, expected):
    assert is_absolute_path(path) is expected
