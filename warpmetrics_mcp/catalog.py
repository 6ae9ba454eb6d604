"""Build the MCP tool catalog from the OpenAPI spec.

Walks every operation, keeps the read-only ones, and produces the tool
descriptors handed to MCP clients together with the call metadata the
executor needs to reach each endpoint.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping

from .errors import CatalogError
from .loader import get_paths
from .schema_parser import Parameter, build_input_schema, parse_parameters

logger = logging.getLogger(__name__)

# Only GET operations are exposed; nothing that can change remote state.
READ_METHOD = "get"

DEFAULT_TAG = "Other"


@dataclass(frozen=True)
class CallInfo:
    path: str
    parameters: tuple[Parameter, ...]
    tag: str = DEFAULT_TAG
    summary: str = ""


@dataclass(frozen=True)
class Catalog:
    """Tool descriptors plus a read-only name -> CallInfo table."""

    tools: tuple[dict[str, Any], ...]
    calls: Mapping[str, CallInfo]


def make_description(operation: dict[str, Any]) -> str:
    """Build a tool description as "<summary>. <description>"."""
    summary = str(operation.get("summary") or "")
    description = str(operation.get("description") or "")
    if not summary:
        return description.strip() or operation["operationId"]
    return f"{summary}. {description}".strip()


def iter_operations(spec: dict[str, Any]):
    """Yield (path, path_item, method, operation) in document order."""
    for path, path_item in get_paths(spec).items():
        if not isinstance(path_item, dict):
            continue
        for method, operation in path_item.items():
            if isinstance(operation, dict):
                yield path, path_item, method.lower(), operation


def build_catalog(spec: dict[str, Any]) -> Catalog:
    """Build the immutable tool catalog from the OpenAPI spec."""
    tools: list[dict[str, Any]] = []
    calls: dict[str, CallInfo] = {}

    for path, path_item, method, operation in iter_operations(spec):
        name = operation.get("operationId")
        if not name:
            continue
        if method != READ_METHOD:
            continue
        if not isinstance(name, str):
            raise CatalogError(f"operationId at GET {path} is not a string: {name!r}")
        if name in calls:
            logger.warning(
                "Duplicate operationId %r at %s %s; keeping %s",
                name, method.upper(), path, calls[name].path,
            )
            continue

        params = parse_parameters(spec, operation, path_item)
        tools.append({
            "name": name,
            "description": make_description(operation),
            "inputSchema": build_input_schema(params),
        })
        tags = operation.get("tags") or []
        calls[name] = CallInfo(
            path=path,
            parameters=params,
            tag=str(tags[0]) if isinstance(tags, list) and tags else DEFAULT_TAG,
            summary=str(operation.get("summary") or ""),
        )

    logger.debug("Built catalog with %d tools", len(tools))
    return Catalog(tools=tuple(tools), calls=MappingProxyType(calls))


def group_by_tag(catalog: Catalog) -> dict[str, list[dict[str, str]]]:
    """Group tool names and summaries by their first tag, in catalog order."""
    groups: dict[str, list[dict[str, str]]] = {}
    for tool in catalog.tools:
        info = catalog.calls[tool["name"]]
        groups.setdefault(info.tag, []).append({
            "name": tool["name"],
            "summary": info.summary,
        })
    return groups
