"""Entry point: warpmetrics-mcp / python -m warpmetrics_mcp

Fetches the Warpmetrics OpenAPI spec and serves its read-only
endpoints as MCP tools over stdio.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from . import __version__
from .config import Settings, load_settings
from .errors import WarpmetricsError
from .executor import create_client
from .listing import DOCS_URL, render_tool_list
from .server import load_catalog, serve

EPILOG = f"""\
Environment:
  WARPMETRICS_API_KEY  (required) Your Warpmetrics API key
  WARPMETRICS_API_URL  API URL (default: https://api.warpmetrics.com)

For more info: {DOCS_URL}
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="warpmetrics-mcp",
        description="Warpmetrics MCP Server",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-l", "--list-tools", action="store_true",
        help="List all available tools",
    )
    parser.add_argument(
        "--spec", metavar="FILE",
        help="Read the OpenAPI spec from FILE instead of the API",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Log debug output to stderr",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def configure_logging(verbose: bool = False) -> None:
    """Send log records to stderr; stdout carries the MCP protocol."""
    logging.basicConfig(
        stream=sys.stderr,
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s" if not verbose else "%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


async def list_tools(settings: Settings, spec_path: str | None = None) -> None:
    async with create_client(settings) as client:
        catalog = await load_catalog(client, spec_path)
    print(render_tool_list(catalog), end="")


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    settings = load_settings()

    if args.list_tools:
        try:
            asyncio.run(list_tools(settings, args.spec))
        except WarpmetricsError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1
        return 0

    try:
        asyncio.run(serve(settings, args.spec))
    except WarpmetricsError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 0
    return 0


if __name__ == "__main__":
    sys.exit(main())
