"""
reqhost - host adaptation layer for an HTTP request definition engine.

reqhost lets a storage-agnostic request engine run inside an editing
environment:

- **Resource Locators**: strings, paths, locators and unsaved buffers
  normalised to one canonical form
- **File Access Facade**: the engine's file operations over host storage
- **Pipeline Reconfiguration**: the configured region script follows live
  settings changes
- **Bootstrap Script**: a user script executed once after activation

Quick Start:
    >>> from reqhost import EngineApi, HostEnvironment, activate
    >>> from reqhost.host import (
    ...     InMemoryConfigurationSource, InMemoryEditorWindow,
    ...     InMemoryWorkspace, LocalFileSystem, ScriptedPopupService,
    ... )
    >>>
    >>> engine = EngineApi(script_executor=my_executor)
    >>> api = await activate(engine, HostEnvironment(
    ...     file_system=LocalFileSystem(),
    ...     window=InMemoryEditorWindow(),
    ...     workspace=InMemoryWorkspace(["/work/project"]),
    ...     popups=ScriptedPopupService(),
    ...     config=InMemoryConfigurationSource(httpRegionScript="scripts/region.js"),
    ... ))
"""

__version__ = "0.1.0"
__license__ = "MIT"

from reqhost.config import AppConfig
from reqhost.engine import EngineApi
from reqhost.extension import ExtensionApi, HostEnvironment, activate
from reqhost.io import HostFileProvider, ResourceLocator, VirtualDocument, resolve

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Activation
    "activate",
    "ExtensionApi",
    "HostEnvironment",
    # Core
    "AppConfig",
    "EngineApi",
    "HostFileProvider",
    "ResourceLocator",
    "VirtualDocument",
    "resolve",
]
