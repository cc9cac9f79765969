"""
Tests for the file access facade.
"""

import logging
from unittest.mock import AsyncMock, MagicMock

import pytest

from reqhost.errors import NoValidLocator, ResourceNotFound
from reqhost.host import FileStat, FileType, InMemoryWorkspace, TextDocument
from reqhost.io import FileProvider, HostFileProvider, ResourceLocator, VirtualDocument
from reqhost.log import TRACE

UNTITLED = ResourceLocator.parse("untitled:Untitled-1")


class TestHostFileProvider:
    """General contract tests."""

    def test_implements_protocol(self, file_provider):
        assert isinstance(file_provider, FileProvider)


# =============================================================================
# Existence
# =============================================================================


class TestExistence:
    """Tests for exists() and is_absolute()."""

    @pytest.mark.asyncio
    async def test_exists_true_for_file(self, file_system, file_provider):
        file_system.add_file("/ws/api.http", "GET https://example.com")

        assert await file_provider.exists("/ws/api.http") is True

    @pytest.mark.asyncio
    async def test_exists_true_for_directory(self, file_system, file_provider):
        file_system.add_directory("/ws/scripts")

        assert await file_provider.exists(ResourceLocator.file("/ws/scripts")) is True

    @pytest.mark.asyncio
    async def test_exists_false_when_missing(self, file_provider):
        assert await file_provider.exists("/ws/missing.http") is False

    @pytest.mark.asyncio
    async def test_exists_swallows_any_stat_error(self, window, workspace):
        file_system = MagicMock()
        file_system.stat = AsyncMock(side_effect=PermissionError("denied"))
        provider = HostFileProvider(file_system, window, workspace)

        assert await provider.exists("/ws/api.http") is False

    @pytest.mark.asyncio
    async def test_exists_false_for_unresolvable(self, file_provider):
        assert await file_provider.exists(42) is False

    @pytest.mark.asyncio
    async def test_is_absolute_means_exists(self, file_system, file_provider):
        file_system.add_file("/ws/api.http", "")

        assert await file_provider.is_absolute("/ws/api.http") is True
        # an absolute-looking path that does not exist is not "absolute"
        assert await file_provider.is_absolute("/ws/other.http") is False

    @pytest.mark.asyncio
    async def test_is_absolute_false_for_unresolvable(self, file_provider):
        assert await file_provider.is_absolute(None) is False


# =============================================================================
# dirname
# =============================================================================


class TestDirname:
    """Tests for dirname()."""

    def test_persisted_resource(self, file_provider):
        assert file_provider.dirname("/ws/a/api.http") == ResourceLocator.file("/ws/a")

    def test_virtual_document_with_backing_file(self, file_provider):
        document = VirtualDocument(uri=UNTITLED, file_uri=ResourceLocator.file("/ws/a/api.http"))

        assert file_provider.dirname(document) == ResourceLocator.file("/ws/a")

    def test_untitled_uses_visible_http_editor(self, window, file_provider):
        window.show(TextDocument(uri=ResourceLocator.file("/notes/readme.md"), language_id="markdown"))
        window.show(TextDocument(uri=ResourceLocator.file("/proj/api/users.http"), language_id="http"))

        assert file_provider.dirname(UNTITLED) == ResourceLocator.file("/proj/api")

    def test_untitled_ignores_unsaved_http_editor(self, window, file_provider):
        window.show(TextDocument(uri=ResourceLocator.parse("untitled:Untitled-2"), language_id="http"))

        assert file_provider.dirname(UNTITLED) == ResourceLocator.file("/ws/a")

    def test_untitled_falls_back_to_first_workspace_folder(self, file_provider):
        assert file_provider.dirname(VirtualDocument(uri=UNTITLED)) == ResourceLocator.file("/ws/a")

    def test_untitled_without_fallback_returns_none(self, file_system, window):
        provider = HostFileProvider(file_system, window, InMemoryWorkspace())

        assert provider.dirname(VirtualDocument(uri=UNTITLED)) is None

    def test_unresolvable_raises(self, file_provider):
        with pytest.raises(NoValidLocator):
            file_provider.dirname(42)


# =============================================================================
# has_extension
# =============================================================================


class TestHasExtension:
    """Tests for has_extension()."""

    def test_matches_suffix(self, file_provider):
        assert file_provider.has_extension("/ws/api.http", "http") is True

    def test_any_of_several(self, file_provider):
        assert file_provider.has_extension("/ws/api.rest", "http", "rest") is True

    def test_no_match(self, file_provider):
        assert file_provider.has_extension("/ws/api.json", "http") is False

    def test_is_case_sensitive(self, file_provider):
        assert file_provider.has_extension("/ws/API.HTTP", "http") is False

    def test_markdown_editor(self, window, file_provider):
        locator = ResourceLocator.parse("untitled:Untitled-3")
        window.show(TextDocument(uri=locator, language_id="markdown"))

        assert file_provider.has_extension(locator, "markdown") is True
        assert file_provider.has_extension(locator, "http") is False

    def test_markdown_requires_editor_language(self, window, file_provider):
        locator = ResourceLocator.parse("untitled:Untitled-3")
        window.show(TextDocument(uri=locator, language_id="http"))

        assert file_provider.has_extension(locator, "markdown") is False

    def test_unresolvable_returns_false(self, file_provider):
        assert file_provider.has_extension(None, "http") is False


# =============================================================================
# join_path / fs_path
# =============================================================================


class TestPaths:
    """Tests for join_path() and fs_path()."""

    def test_join_path(self, file_provider):
        joined = file_provider.join_path("/ws/a", "scripts/setup.js")

        assert joined == ResourceLocator.file("/ws/a/scripts/setup.js")

    def test_join_path_unresolvable_raises(self, file_provider):
        with pytest.raises(NoValidLocator):
            file_provider.join_path(42, "x")

    def test_fs_path_for_file(self, file_provider):
        assert file_provider.fs_path(ResourceLocator.file("/ws/api.http")).endswith("api.http")

    def test_fs_path_none_for_other_schemes(self, file_provider):
        assert file_provider.fs_path(UNTITLED) is None

    def test_fs_path_none_for_unresolvable(self, file_provider):
        assert file_provider.fs_path(object()) is None


# =============================================================================
# Reading and writing
# =============================================================================


class TestReadWrite:
    """Tests for read_file(), read_buffer() and write_buffer()."""

    @pytest.mark.asyncio
    async def test_read_file_decodes(self, file_system, file_provider):
        file_system.add_file("/ws/api.http", "GET https://example.com/ä")

        assert await file_provider.read_file("/ws/api.http", "utf-8") == "GET https://example.com/ä"

    @pytest.mark.asyncio
    async def test_read_file_other_encoding(self, file_system, file_provider):
        file_system.add_file("/ws/latin.txt", "café".encode("latin-1"))

        assert await file_provider.read_file("/ws/latin.txt", "latin-1") == "café"

    @pytest.mark.asyncio
    async def test_read_buffer(self, file_system, file_provider):
        file_system.add_file("/ws/data.bin", b"\x00\x01\x02")

        assert await file_provider.read_buffer("/ws/data.bin") == b"\x00\x01\x02"

    @pytest.mark.asyncio
    async def test_read_missing_propagates(self, file_provider):
        with pytest.raises(ResourceNotFound):
            await file_provider.read_buffer("/ws/missing.bin")

    @pytest.mark.asyncio
    async def test_write_then_read(self, file_provider):
        await file_provider.write_buffer("/ws/out/response.json", b'{"ok": true}')

        assert await file_provider.read_file("/ws/out/response.json", "utf-8") == '{"ok": true}'

    @pytest.mark.asyncio
    async def test_write_overwrites(self, file_system, file_provider):
        file_system.add_file("/ws/out.txt", "old")

        await file_provider.write_buffer("/ws/out.txt", b"new")

        assert file_system.get_text("/ws/out.txt") == "new"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["read_buffer", "readdir"])
    async def test_unresolvable_raises(self, file_provider, method):
        with pytest.raises(NoValidLocator):
            await getattr(file_provider, method)(42)

    @pytest.mark.asyncio
    async def test_read_file_unresolvable_raises(self, file_provider):
        with pytest.raises(NoValidLocator):
            await file_provider.read_file(42, "utf-8")

    @pytest.mark.asyncio
    async def test_write_unresolvable_raises(self, file_provider):
        with pytest.raises(NoValidLocator):
            await file_provider.write_buffer(42, b"")


# =============================================================================
# readdir
# =============================================================================


class TestReaddir:
    """Tests for readdir()."""

    @pytest.mark.asyncio
    async def test_lists_entry_names(self, file_system, file_provider):
        file_system.add_file("/ws/a/one.http", "")
        file_system.add_file("/ws/a/two.http", "")
        file_system.add_directory("/ws/a/scripts")

        names = await file_provider.readdir("/ws/a")

        assert sorted(names) == ["one.http", "scripts", "two.http"]

    @pytest.mark.asyncio
    async def test_plain_file_yields_empty_list(self, file_system, file_provider, caplog):
        file_system.add_file("/ws/api.http", "")

        with caplog.at_level(TRACE, logger="reqhost"):
            names = await file_provider.readdir("/ws/api.http")

        assert names == []
        assert any("is no directory" in r.message and r.levelno == TRACE for r in caplog.records)

    @pytest.mark.asyncio
    async def test_does_not_list_non_directories(self, window, workspace):
        file_system = MagicMock()
        file_system.stat = AsyncMock(return_value=FileStat(type=FileType.FILE))
        file_system.read_directory = AsyncMock()
        provider = HostFileProvider(file_system, window, workspace)

        assert await provider.readdir("/ws/api.http") == []
        file_system.read_directory.assert_not_called()

    @pytest.mark.asyncio
    async def test_symlinked_directory_is_listed(self, window, workspace):
        file_system = MagicMock()
        file_system.stat = AsyncMock(
            return_value=FileStat(type=FileType.DIRECTORY | FileType.SYMBOLIC_LINK)
        )
        file_system.read_directory = AsyncMock(return_value=[("x.http", FileType.FILE)])
        provider = HostFileProvider(file_system, window, workspace)

        assert await provider.readdir("/ws/link") == ["x.http"]

    @pytest.mark.asyncio
    async def test_missing_directory_raises(self, file_provider):
        with pytest.raises(ResourceNotFound):
            await file_provider.readdir("/nowhere")


def test_trace_level_is_registered():
    assert logging.getLevelName(TRACE) == "TRACE"
