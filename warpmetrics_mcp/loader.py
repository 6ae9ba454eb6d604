"""Load the Warpmetrics OpenAPI spec.

Fetches /v1/docs/openapi.json from the API (or reads a copy from disk)
and extracts paths and $ref targets.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import httpx

from .config import SPEC_PATH
from .errors import CatalogError

logger = logging.getLogger(__name__)


def _check_spec(spec: Any, failure: str) -> dict[str, Any]:
    if not isinstance(spec, dict) or not isinstance(spec.get("paths"), dict):
        raise CatalogError(f"{failure}: document has no paths")
    return spec


def load_spec(path: Path | str) -> dict[str, Any]:
    """Load an OpenAPI spec from disk."""
    try:
        with open(path) as f:
            spec = json.load(f)
    except (OSError, ValueError) as exc:
        raise CatalogError(f"Failed to load spec from {path}: {exc}") from exc
    return _check_spec(spec, f"Failed to load spec from {path}")


async def fetch_spec(client: httpx.AsyncClient) -> dict[str, Any]:
    """Fetch the OpenAPI spec from the API the client points at."""
    logger.debug("GET %s", SPEC_PATH)
    try:
        response = await client.get(SPEC_PATH)
    except httpx.HTTPError as exc:
        raise CatalogError(f"Failed to fetch spec: {exc}") from exc

    if not response.is_success:
        raise CatalogError(f"Failed to fetch spec: {response.status_code}")

    try:
        spec = response.json()
    except ValueError as exc:
        raise CatalogError(f"Failed to fetch spec: invalid JSON ({exc})") from exc
    return _check_spec(spec, "Failed to fetch spec")


def get_paths(spec: dict[str, Any]) -> dict[str, Any]:
    """Extract paths from the spec."""
    return spec.get("paths", {})


def resolve_ref(spec: dict[str, Any], ref: str) -> dict[str, Any]:
    """Resolve a local $ref pointer in the spec."""
    if not ref.startswith("#/"):
        raise CatalogError(f"Unsupported $ref: {ref}")
    node: Any = spec
    for part in ref[2:].split("/"):
        part = part.replace("~1", "/").replace("~0", "~")
        try:
            node = node[part]
        except (KeyError, TypeError) as exc:
            raise CatalogError(f"Unresolvable $ref: {ref}") from exc
    return node
