"""
Logging for reqhost.

Adds a TRACE level below DEBUG for expected misses (script lookups,
non-directory listings) and keeps the ``reqhost`` logger level in sync
with the ``logLevel`` setting.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from reqhost.config.schemas import AppConfig, LogLevel
from reqhost.config.service import watch_config_settings

if TYPE_CHECKING:
    from reqhost.host.events import Disposable
    from reqhost.host.protocol import ConfigurationSource

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

ROOT_LOGGER = "reqhost"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_LEVELS = {
    LogLevel.TRACE: TRACE,
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARN: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
    LogLevel.NONE: logging.CRITICAL + 10,
}


def to_logging_level(level: LogLevel | str) -> int:
    """Map a settings log level to a logging module level."""
    return _LEVELS[LogLevel(level)]


def configure_logging(level: LogLevel | str = LogLevel.INFO) -> logging.Logger:
    """
    Attach a stream handler to the reqhost logger and set its level.

    Calling it again only changes the level.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    if not any(getattr(h, "_reqhost_handler", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._reqhost_handler = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    logger.setLevel(to_logging_level(level))
    return logger


async def watch_log_level(config: ConfigurationSource) -> Disposable:
    """Follow the logLevel setting. Returns the subscription."""

    def apply(settings: AppConfig) -> None:
        logger = configure_logging(settings.log_level)
        logger.debug(f"Log level set to {settings.log_level.value}")

    return await watch_config_settings(config, apply)
