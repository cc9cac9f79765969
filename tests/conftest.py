"""
Pytest configuration and fixtures for reqhost tests.
"""

import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add the repository root to path for imports
# This allows `from reqhost.io import ...` to work
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from reqhost.engine import EngineApi  # noqa: E402
from reqhost.extension import HostEnvironment  # noqa: E402
from reqhost.host import (  # noqa: E402
    InMemoryConfigurationSource,
    InMemoryEditorWindow,
    InMemoryFileSystem,
    InMemoryWorkspace,
    ScriptedPopupService,
)
from reqhost.io import HostFileProvider  # noqa: E402


@pytest.fixture
def file_system():
    """Empty in-memory file system."""
    return InMemoryFileSystem()


@pytest.fixture
def window():
    """Editor window without visible editors."""
    return InMemoryEditorWindow()


@pytest.fixture
def workspace():
    """Workspace with two folders, in declaration order."""
    return InMemoryWorkspace(["/ws/a", "/ws/b"])


@pytest.fixture
def popups():
    """Popup service that dismisses every prompt."""
    return ScriptedPopupService()


@pytest.fixture
def config():
    """Configuration with defaults."""
    return InMemoryConfigurationSource()


@pytest.fixture
def file_provider(file_system, window, workspace):
    return HostFileProvider(file_system=file_system, window=window, workspace=workspace)


@pytest.fixture
def script_executor():
    """Engine script executor recording calls."""
    executor = MagicMock()
    executor.execute_script = AsyncMock(return_value=None)
    return executor


@pytest.fixture
def engine(script_executor):
    return EngineApi(script_executor=script_executor)


@pytest.fixture
def host(file_system, window, workspace, popups, config):
    return HostEnvironment(
        file_system=file_system,
        window=window,
        workspace=workspace,
        popups=popups,
        config=config,
    )
