"""Turn a tool call into a GET request against the Warpmetrics API."""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping
from urllib.parse import quote, urlencode

import httpx

from . import __version__
from .catalog import CallInfo
from .config import Settings
from .errors import ExecutionError

logger = logging.getLogger(__name__)

# Characters encodeURIComponent leaves alone
_PATH_SAFE = "-_.!~*'()"


def create_client(settings: Settings) -> httpx.AsyncClient:
    """Create the HTTP client shared by the spec fetch and every tool call.

    No timeout is set; a request that never completes stalls its call.
    """
    headers = {"User-Agent": f"warpmetrics-mcp/{__version__}"}
    if settings.api_key:
        headers["Authorization"] = f"Bearer {settings.api_key}"
    return httpx.AsyncClient(
        base_url=settings.api_url,
        headers=headers,
        timeout=None,
    )


def _to_text(value: Any) -> str:
    """Stringify an argument the way a JSON client would.

    Lists are comma-joined; objects are sent as compact JSON.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join("" if v is None else _to_text(v) for v in value)
    if isinstance(value, dict):
        return json.dumps(value, separators=(",", ":"))
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def build_url(call: CallInfo, arguments: Mapping[str, Any]) -> str:
    """Build the request path and query string for a call.

    Parameters missing from ``arguments`` (or passed as null) are left out.
    Query entries follow parameter declaration order.
    """
    url = call.path
    query: dict[str, str] = {}

    for param in call.parameters:
        value = arguments.get(param.name)
        if value is None:
            continue
        if param.location == "path":
            url = url.replace(f"{{{param.name}}}", quote(_to_text(value), safe=_PATH_SAFE))
        elif param.location == "query":
            query[param.name] = _to_text(value)

    if query:
        url += f"?{urlencode(query)}"
    return url


async def execute(
    client: httpx.AsyncClient,
    call: CallInfo,
    arguments: Mapping[str, Any],
) -> dict[str, Any]:
    """Call the API and return its envelope.

    Raises ExecutionError when the request fails, the body is not JSON,
    or the envelope reports failure.
    """
    url = build_url(call, arguments)
    logger.debug("GET %s", url)

    try:
        response = await client.get(url)
    except httpx.HTTPError as exc:
        raise ExecutionError(f"Request failed: {exc}") from exc

    try:
        envelope = response.json()
    except ValueError as exc:
        raise ExecutionError(
            f"HTTP {response.status_code}: {response.reason_phrase}",
            status=response.status_code,
        ) from exc

    if not isinstance(envelope, dict) or not envelope.get("success"):
        error = envelope.get("error") if isinstance(envelope, dict) else None
        message = error.get("message") if isinstance(error, dict) else None
        raise ExecutionError(
            message or f"Request failed ({response.status_code})",
            status=response.status_code,
        )

    return envelope
