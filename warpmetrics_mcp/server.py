"""MCP server wiring: tool listing and call dispatch over stdio."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping, NamedTuple

import httpx
import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from . import __version__
from .catalog import Catalog, build_catalog
from .config import Settings
from .errors import ExecutionError
from .executor import create_client, execute
from .loader import fetch_spec, load_spec
from .renderer import render

logger = logging.getLogger(__name__)

SERVER_NAME = "warpmetrics-mcp"


class ToolResult(NamedTuple):
    text: str
    is_error: bool = False


class ToolCallError(Exception):
    """Raised inside the MCP handler so the SDK reports ``isError``."""


async def dispatch(
    catalog: Catalog,
    client: httpx.AsyncClient,
    name: str,
    arguments: Mapping[str, Any] | None,
) -> ToolResult:
    """Run one tool call and render its result.

    Tool-level failures come back as error results; they never raise.
    """
    call = catalog.calls.get(name)
    if call is None:
        logger.warning("Unknown tool %r", name)
        return ToolResult(f'Error: Unknown tool "{name}"', is_error=True)

    try:
        envelope = await execute(client, call, arguments or {})
    except ExecutionError as exc:
        logger.info("Tool %s failed: %s", name, exc.message)
        return ToolResult(f"Error: {exc.message}", is_error=True)

    return ToolResult(render(envelope))


def to_mcp_tool(tool: dict[str, Any]) -> types.Tool:
    return types.Tool(
        name=tool["name"],
        description=tool["description"],
        inputSchema=tool["inputSchema"],
    )


def create_server(catalog: Catalog, client: httpx.AsyncClient) -> Server:
    """Create an MCP server exposing the catalog's tools."""
    server: Server = Server(SERVER_NAME, version=__version__)
    tools = [to_mcp_tool(t) for t in catalog.tools]

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return tools

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[types.TextContent]:
        result = await dispatch(catalog, client, name, arguments)
        if result.is_error:
            raise ToolCallError(result.text)
        return [types.TextContent(type="text", text=result.text)]

    return server


async def load_catalog(
    client: httpx.AsyncClient, spec_path: Path | str | None = None,
) -> Catalog:
    """Fetch (or read) the OpenAPI spec and build the catalog.

    Raises CatalogError; callers treat it as fatal.
    """
    spec = load_spec(spec_path) if spec_path else await fetch_spec(client)
    return build_catalog(spec)


async def serve(settings: Settings, spec_path: Path | str | None = None) -> None:
    """Build the catalog and serve it over stdio until the client disconnects."""
    settings.require_api_key()
    async with create_client(settings) as client:
        logger.info("Fetching API schema...")
        catalog = await load_catalog(client, spec_path)
        logger.info("Loaded %d tools from API", len(catalog.tools))

        server = create_server(catalog, client)
        async with stdio_server() as (read_stream, write_stream):
            logger.info("Warpmetrics MCP server running")
            await server.run(
                read_stream,
                write_stream,
                server.create_initialization_options(),
            )
