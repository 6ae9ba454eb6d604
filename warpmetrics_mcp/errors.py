"""Exception types raised by the Warpmetrics MCP server."""

from __future__ import annotations


class WarpmetricsError(Exception):
    """Base class for all errors raised by this package."""


class ConfigError(WarpmetricsError):
    """Required configuration is missing or invalid."""


class CatalogError(WarpmetricsError):
    """The OpenAPI spec could not be fetched or turned into a tool catalog."""


class ExecutionError(WarpmetricsError):
    """A tool call failed in transport or was rejected by the API.

    ``status`` is the HTTP status code when a response was received.
    """

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
