"""MCP server exposing the Warpmetrics API as read-only tools."""

__version__ = "0.3.0"
