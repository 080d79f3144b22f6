"""Exceptions raised by plugin-serve."""

from typing import Optional


class PluginServeError(Exception):
    """Base class for plugin-serve errors."""


class MissingToolError(PluginServeError):
    """A required executable is not on PATH."""

    def __init__(self, tool: str, hint: Optional[str] = None):
        self.tool = tool
        self.hint = hint
        message = f"{tool} missing"
        if hint:
            message += f" ({hint})"
        super().__init__(message)


class ArtifactNotFoundError(PluginServeError):
    """No build artifact matched the discovery rules."""


class ServeError(PluginServeError):
    """The local HTTP server could not be started or did not come up."""


class TunnelError(PluginServeError):
    """The tunnel client could not be started."""
