"""
Configuration Schemas for reqhost.

Pydantic models for the settings the adaptation layer reacts to. Keys use
the editor's camelCase names (``httpRegionScript``); the Python attribute
names are accepted as well.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class LogLevel(str, Enum):
    """Log levels exposed in settings."""

    TRACE = "trace"
    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    NONE = "none"


class AppConfig(BaseModel):
    """
    Settings snapshot.

    A new instance is produced for every configuration change; instances are
    never mutated.
    """

    http_region_script: str | None = Field(
        None,
        alias="httpRegionScript",
        description="Script loaded as an additional region parser for every http file",
    )
    extension_script: str | None = Field(
        None,
        alias="extensionScript",
        description="Absolute path of a script executed once after activation",
    )
    log_level: LogLevel = Field(LogLevel.INFO, alias="logLevel")

    class Config:
        frozen = True
        populate_by_name = True
        extra = "allow"
