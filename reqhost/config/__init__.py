"""
reqhost Configuration

Settings snapshots and change watching.
"""

from .schemas import AppConfig, LogLevel
from .service import merge_config, watch_config_settings

__all__ = [
    "AppConfig",
    "LogLevel",
    "merge_config",
    "watch_config_settings",
]
