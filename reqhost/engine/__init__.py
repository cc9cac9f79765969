"""
reqhost Engine Surface.

The parts of the request engine the adaptation layer mutates or calls:
ordered parser/replacer registries, the parsed-document store and the
script executor contract.
"""

from .api import EngineApi, HttpFileStore
from .parsers import (
    ActionContext,
    HttpRegion,
    HttpRegionParser,
    NoteConfirmAction,
    NoteMetaHttpRegionParser,
    ParseResult,
    ParserContext,
    RegionAction,
    ScriptAction,
    SettingsScriptHttpRegionParser,
)
from .registry import OrderedRegistry
from .replacers import (
    ShowInputBoxVariableReplacer,
    ShowQuickpickVariableReplacer,
    VariableReplacer,
)
from .scripts import ScriptData, ScriptExecutor, ScriptRequest

__all__ = [
    "ActionContext",
    "EngineApi",
    "HttpFileStore",
    "HttpRegion",
    "HttpRegionParser",
    "NoteConfirmAction",
    "NoteMetaHttpRegionParser",
    "OrderedRegistry",
    "ParseResult",
    "ParserContext",
    "RegionAction",
    "ScriptAction",
    "ScriptData",
    "ScriptExecutor",
    "ScriptRequest",
    "SettingsScriptHttpRegionParser",
    "ShowInputBoxVariableReplacer",
    "ShowQuickpickVariableReplacer",
    "VariableReplacer",
]
