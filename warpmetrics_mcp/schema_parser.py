"""Extract tool parameters from OpenAPI operations.

Handles:
- Path parameters ({id}, {runId})
- Query parameters
- Path-item level parameters shared by every operation on a path
- $ref resolution for parameters and their schemas
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from .errors import CatalogError
from .loader import resolve_ref

logger = logging.getLogger(__name__)

# Locations the executor knows how to place into a request URL
LOCATIONS = ("path", "query")


@dataclass(frozen=True)
class Parameter:
    name: str
    location: str
    required: bool = False
    type: Any = "string"
    description: str | None = None
    enum: tuple[Any, ...] | None = None
    default: Any = None


def _resolve(spec: dict[str, Any], node: dict[str, Any]) -> dict[str, Any]:
    """Follow $ref pointers until a concrete node is reached."""
    seen: set[str] = set()
    while isinstance(node, dict) and "$ref" in node:
        ref = node["$ref"]
        if not isinstance(ref, str):
            raise CatalogError(f"Invalid $ref: {ref!r}")
        if ref in seen:
            break
        seen.add(ref)
        node = resolve_ref(spec, ref)
    if not isinstance(node, dict):
        raise CatalogError(f"Expected an object, got {type(node).__name__}: {node!r}")
    return node


def parse_parameter(spec: dict[str, Any], raw: dict[str, Any]) -> Parameter | None:
    """Turn one OpenAPI parameter object into a Parameter.

    Returns None for header/cookie parameters and nameless entries.
    Raises CatalogError when the entry is not an object.
    """
    raw = _resolve(spec, raw)
    name = raw.get("name")
    location = raw.get("in")
    if not isinstance(name, str) or not name or location not in LOCATIONS:
        logger.debug("Skipping parameter %r in %r", name, location)
        return None

    schema = _resolve(spec, raw.get("schema") or {})
    enum = schema.get("enum")
    if enum is not None and not isinstance(enum, list):
        raise CatalogError(f"Parameter {name!r} has a non-list enum")
    return Parameter(
        name=name,
        location=location,
        required=bool(raw.get("required", False)),
        type=schema.get("type") or "string",
        description=raw.get("description"),
        enum=tuple(enum) if enum is not None else None,
        default=schema.get("default"),
    )


def parse_parameters(
    spec: dict[str, Any],
    operation: dict[str, Any],
    path_item: dict[str, Any] | None = None,
) -> tuple[Parameter, ...]:
    """Parse the path and query parameters for an operation.

    Path-item parameters come first; an operation parameter with the same
    name and location replaces the shared one in place.
    """
    params: dict[tuple[str, str], Parameter] = {}
    shared = (path_item or {}).get("parameters") or []
    own = operation.get("parameters") or []
    if not isinstance(shared, list) or not isinstance(own, list):
        raise CatalogError("parameters must be a list")
    for raw in [*shared, *own]:
        param = parse_parameter(spec, raw)
        if param is not None:
            params[(param.name, param.location)] = param
    return tuple(params.values())


def build_property(param: Parameter) -> dict[str, Any]:
    """Build the input-schema property for one parameter."""
    prop: dict[str, Any] = {"type": param.type}
    if param.description is not None:
        prop["description"] = param.description
    if param.enum is not None:
        prop["enum"] = list(param.enum)
    if param.default is not None:
        prop["default"] = param.default
    return prop


def build_input_schema(params: tuple[Parameter, ...]) -> dict[str, Any]:
    """Build a tool's JSON Schema input from its parameters.

    ``required`` is left out entirely when nothing is required.
    """
    schema: dict[str, Any] = {
        "type": "object",
        "properties": {p.name: build_property(p) for p in params},
    }
    required = [p.name for p in params if p.required]
    if required:
        schema["required"] = required
    return schema
