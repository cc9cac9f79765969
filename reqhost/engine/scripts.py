"""
Script execution contract.

The engine runs scripts (region scripts, the bootstrap script) through a
ScriptExecutor. reqhost never interprets script text itself.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from reqhost.io.locator import PathLike


@dataclass(frozen=True)
class ScriptData:
    """Script text plus the line it starts at in its source."""

    script: str
    line_offset: int = 0


@dataclass(frozen=True)
class ScriptRequest:
    """
    Everything the engine needs to run a script.

    Attributes:
        script: Script text
        file_name: Originating file identity, used for relative requires
        variables: Initial variable context
        line_offset: Line of the script within its file, for error positions
    """

    script: str
    file_name: PathLike | None = None
    variables: dict[str, Any] = field(default_factory=dict)
    line_offset: int = 0


@runtime_checkable
class ScriptExecutor(Protocol):
    """Engine entry point for running scripts."""

    async def execute_script(self, request: ScriptRequest) -> Any: ...
