"""Render API envelopes as human-readable text.

The renderer knows nothing about individual endpoints. Lists become
bullet lines, objects become indented ``key: value`` blocks, and numbers
are formatted by looking at the name of the field they belong to.
"""

from __future__ import annotations

import json
import math
import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Callable

NO_DATA = "No data."
NO_RESULTS = "No results."

BULLET = "•"
DASH = "—"
INDENT = "  "

# Field used as the headline of a list row
ID_KEY = "id"

# Fields never shown, at any depth
SKIP_RE = re.compile(r"^(projectId)$")


def _fixed(value: float, places: int) -> str:
    """Round half away from zero to a fixed number of decimals."""
    exp = Decimal(1).scaleb(-places)
    return str(Decimal(repr(value)).quantize(exp, rounding=ROUND_HALF_UP))


def _number(value: int | float) -> str:
    if isinstance(value, float) and not math.isfinite(value):
        if math.isnan(value):
            return "NaN"
        return "Infinity" if value > 0 else "-Infinity"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _grouped(value: int | float) -> str:
    if isinstance(value, float) and not value.is_integer():
        return f"{value:,.3f}".rstrip("0").rstrip(".")
    return f"{int(value):,}"


# Ordered (field-name pattern, number formatter) pairs; first match wins.
FORMATTERS: tuple[tuple[re.Pattern[str], Callable[[Any], str]], ...] = (
    (re.compile(r"cost|price|amount", re.IGNORECASE), lambda n: f"${_fixed(n, 4)}"),
    (re.compile(r"latency|duration", re.IGNORECASE), lambda n: f"{_fixed(n, 0)}ms"),
    (re.compile(r"rate", re.IGNORECASE), lambda n: f"{_number(n)}%"),
)

GROUPING_THRESHOLD = 9999

# Value kinds
NULL = "null"
SCALAR = "scalar"
SEQUENCE = "sequence"
MAPPING = "mapping"


def _kind(value: Any) -> str:
    if value is None:
        return NULL
    if isinstance(value, dict):
        return MAPPING
    if isinstance(value, (list, tuple)):
        return SEQUENCE
    return SCALAR


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _literal(value: Any) -> str:
    """Render a value as-is, using JSON spelling for null and booleans."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if _is_number(value):
        return _number(value)
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False, default=str)


def format_value(key: str, value: Any) -> str | None:
    """Format a scalar according to the name of its field.

    Returns None for null values.
    """
    if value is None:
        return None
    if not _is_number(value):
        return _literal(value)
    # NaN and Infinity get through Python's JSON parser; print them as-is
    if isinstance(value, float) and not math.isfinite(value):
        return _number(value)
    for pattern, formatter in FORMATTERS:
        if pattern.search(key):
            return formatter(value)
    if value > GROUPING_THRESHOLD:
        return _grouped(value)
    return _number(value)


def _skipped(key: Any) -> bool:
    return SKIP_RE.search(str(key)) is not None


def format_row(item: dict[str, Any]) -> str:
    """Render one list item as a single bullet line.

    Nested lists and objects are left out of the row.
    """
    parts = []
    for key, value in item.items():
        if key == ID_KEY or _skipped(key):
            continue
        if value is None or value == "" or _kind(value) != SCALAR:
            continue
        parts.append(f"{key}: {format_value(key, value)}")
    detail = " | ".join(parts)

    ident = item.get(ID_KEY)
    if ident is not None and ident != "":
        return f"{BULLET} {_literal(ident)} {DASH} {detail}"
    return f"{BULLET} {detail}"


def format_array(items: list[Any], depth: int = 0) -> str:
    """Render a list as bullet lines indented by ``depth`` levels."""
    prefix = INDENT * depth
    if not items:
        return f"{prefix}{NO_RESULTS}"
    lines = []
    for item in items:
        if _kind(item) == MAPPING:
            lines.append(prefix + format_row(item))
        else:
            lines.append(f"{prefix}{BULLET} {_literal(item)}")
    return "\n".join(lines)


def format_object(obj: dict[str, Any], depth: int = 0) -> str:
    """Render an object as ``key: value`` lines, recursing into children."""
    prefix = INDENT * depth
    lines = []
    for key, value in obj.items():
        if _skipped(key):
            continue
        kind = _kind(value)
        if kind == NULL:
            continue
        if kind == SEQUENCE:
            if not value:
                continue
            lines.append(f"{prefix}{key}:")
            lines.append(format_array(list(value), depth + 1))
        elif kind == MAPPING:
            lines.append(f"{prefix}{key}:")
            nested = format_object(value, depth + 1)
            if nested:
                lines.append(nested)
        else:
            lines.append(f"{prefix}{key}: {format_value(key, value)}")
    return "\n".join(lines)


def render(envelope: Any) -> str:
    """Render the ``data`` member of an API envelope as text."""
    data = envelope.get("data") if isinstance(envelope, dict) else None
    kind = _kind(data)
    if kind == NULL:
        return NO_DATA
    if kind == SEQUENCE:
        return format_array(list(data))
    if kind == MAPPING:
        return format_object(data) or NO_DATA
    return _literal(data)
