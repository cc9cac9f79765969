"""
Region parsers.

The engine splits an http file into regions and offers each line to its
region parsers in registry order. A parser either consumes lines (returns a
ParseResult) or passes (returns None). Parsers may also attach actions to
the region, which the engine runs before sending its request.

Two parsers are owned by this package:
- NoteMetaHttpRegionParser: ``# @note`` asks for confirmation before sending
- SettingsScriptHttpRegionParser: attaches the configured region script at
  the start of every file; added and removed on configuration change
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .scripts import ScriptData, ScriptRequest

if TYPE_CHECKING:
    from reqhost.io.locator import ResourceLocator

    from .scripts import ScriptExecutor

logger = logging.getLogger(__name__)

ScriptLoader = Callable[[], Awaitable[ScriptData | None]]
Confirm = Callable[[str], Awaitable[bool]]


@dataclass
class ActionContext:
    """State available to region actions while a request is prepared."""

    script_executor: ScriptExecutor
    file: ResourceLocator | None = None
    variables: dict[str, Any] = field(default_factory=dict)


class RegionAction(ABC):
    """Step the engine runs before sending a region's request."""

    @property
    @abstractmethod
    def name(self) -> str: ...

    @abstractmethod
    async def run(self, context: ActionContext) -> bool:
        """Run the action. False cancels the request."""
        ...


class ScriptAction(RegionAction):
    """Runs a script through the engine's executor."""

    def __init__(self, data: ScriptData, source: str = "script"):
        self.data = data
        self._source = source

    @property
    def name(self) -> str:
        return self._source

    async def run(self, context: ActionContext) -> bool:
        await context.script_executor.execute_script(
            ScriptRequest(
                script=self.data.script,
                file_name=context.file,
                variables=context.variables,
                line_offset=self.data.line_offset,
            )
        )
        return True


class NoteConfirmAction(RegionAction):
    """Asks the user to confirm a note before the request is sent."""

    def __init__(self, note: str, confirm: Confirm):
        self.note = note
        self._confirm = confirm

    @property
    def name(self) -> str:
        return "note"

    async def run(self, context: ActionContext) -> bool:
        confirmed = await self._confirm(self.note)
        if not confirmed:
            logger.info(f"Request cancelled at note: {self.note}")
        return confirmed


@dataclass
class HttpRegion:
    """A parsed region of an http file."""

    metadata: dict[str, str] = field(default_factory=dict)
    actions: list[RegionAction] = field(default_factory=list)


@dataclass
class ParserContext:
    """
    Parse state handed to region parsers.

    Attributes:
        file: Locator of the file being parsed
        region: Region currently being built
        is_file_start: True while offering the first line of the file
    """

    file: ResourceLocator | None
    region: HttpRegion
    is_file_start: bool = False


@dataclass(frozen=True)
class ParseResult:
    """Lines consumed by a parser: ``next_index`` is the first unconsumed line."""

    next_index: int


class HttpRegionParser(ABC):
    """Base class for region parsers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique name for this parser, used in logging."""
        ...

    @abstractmethod
    async def parse(
        self,
        lines: Sequence[str],
        line_index: int,
        context: ParserContext,
    ) -> ParseResult | None:
        """
        Offer a line to the parser.

        Returns:
            ParseResult if lines were consumed, None to pass
        """
        ...

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}')"


NOTE_PATTERN = re.compile(r"^\s*(?:#+|/{2,})\s*@note\s*(?P<note>.*)$")


class NoteMetaHttpRegionParser(HttpRegionParser):
    """
    Handles ``# @note <text>`` meta lines.

    The note is stored in the region metadata and a confirmation action is
    attached. Without text the note defaults to "Are you sure you want to
    send the request?".
    """

    DEFAULT_NOTE = "Are you sure you want to send the request?"

    def __init__(self, confirm: Confirm):
        self._confirm = confirm

    @property
    def name(self) -> str:
        return "note"

    async def parse(
        self,
        lines: Sequence[str],
        line_index: int,
        context: ParserContext,
    ) -> ParseResult | None:
        match = NOTE_PATTERN.match(lines[line_index])
        if match is None:
            return None
        note = match.group("note").strip() or self.DEFAULT_NOTE
        context.region.metadata["note"] = note
        context.region.actions.append(NoteConfirmAction(note, self._confirm))
        return ParseResult(next_index=line_index + 1)


class SettingsScriptHttpRegionParser(HttpRegionParser):
    """
    Attaches the configured region script to a file's first region.

    The script is loaded lazily, once per parsed file, through the loader
    given at construction. When the loader returns None the file is parsed
    without it. The parser never consumes lines.
    """

    def __init__(self, load_script: ScriptLoader):
        self._load_script = load_script

    @property
    def name(self) -> str:
        return "settings_script"

    async def parse(
        self,
        lines: Sequence[str],
        line_index: int,
        context: ParserContext,
    ) -> ParseResult | None:
        if not context.is_file_start:
            return None
        data = await self._load_script()
        if data is not None:
            context.region.actions.append(ScriptAction(data, source=self.name))
            logger.debug(f"Region script attached to {context.file}")
        return None
