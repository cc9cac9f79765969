"""
reqhost Controllers

Configuration-driven controllers started at activation.
"""

from .bootstrap import OneShotScriptRunner
from .pipeline import PipelineReconfigurationController

__all__ = [
    "OneShotScriptRunner",
    "PipelineReconfigurationController",
]
