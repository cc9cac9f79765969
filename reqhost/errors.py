"""
Error taxonomy for reqhost.

Resolution and storage errors raised by the file access facade, plus the
two bootstrap-script failures reported by the one-shot runner.

Propagation:
- NoValidLocator: raised to callers, except by is_absolute(), exists()
  and fs_path() which degrade to False/None.
- ResourceNotFound: raised by host file systems. Optional lookups (the
  region script search) catch it and log at TRACE.
- ConfigurationScriptMissing: shown to the user and logged.
- ExecutionFailure: logged only.
"""

from __future__ import annotations

from typing import Any


class ReqhostError(Exception):
    """Base class for reqhost errors."""

    pass


class NoValidLocator(ReqhostError, ValueError):
    """
    Raised when a path-like value cannot be resolved to a ResourceLocator.

    Attributes:
        path_like: The value that failed to resolve
    """

    def __init__(self, path_like: Any):
        self.path_like = path_like
        super().__init__(f"No valid locator: {path_like!r}")


class ResourceNotFound(ReqhostError):
    """
    Raised by a host file system when the addressed resource does not exist.

    Attributes:
        locator: Text form of the missing resource
    """

    def __init__(self, locator: Any):
        self.locator = str(locator)
        super().__init__(f"Resource not found: {self.locator}")


class UnsupportedOperation(ReqhostError):
    """Raised when a file system cannot perform an operation (e.g. writes over HTTP)."""

    pass


class ConfigurationScriptMissing(ReqhostError):
    """The configured bootstrap script is not an absolute path to an existing file."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"extension script not found: {path}")


class ExecutionFailure(ReqhostError):
    """The bootstrap script could not be read or raised while executing."""

    def __init__(self, path: str, cause: BaseException | None = None):
        self.path = path
        self.cause = cause
        message = f"extension script failed: {path}"
        if cause is not None:
            message = f"{message} ({type(cause).__name__}: {cause})"
        super().__init__(message)


class FileProviderAlreadyBound(ReqhostError):
    """Raised when a second file provider is bound to an engine."""

    pass
