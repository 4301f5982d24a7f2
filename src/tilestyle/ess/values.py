"""Extract constant values from ESS paint and layout properties.

Zoom functions and expressions are collapsed to a single representative
value so that most real stylesheets still produce a visible preview:

- ``{"stops": [[z0, v0], [z1, v1], ...]}``  -> ``v0`` (lowest zoom entry)
- ``["interpolate", kind, input, z0, v0, ...]`` -> ``v0`` (index 4)
- any other expression                       -> no value
"""

from __future__ import annotations

import math
from typing import Any

from tilestyle.model.color import Color
from tilestyle.parser.colors import parse_color

__all__ = ["constant_value", "extract_color", "extract_number", "extract_string"]


def constant_value(value: Any) -> Any:
    """Reduce a property value to a constant, or None if it cannot be reduced."""
    if isinstance(value, (str, int, float)) and not isinstance(value, bool):
        return value

    if isinstance(value, dict):
        stops = value.get("stops")
        if not isinstance(stops, list) or not stops:
            return None
        first = stops[0]
        if not isinstance(first, list) or len(first) < 2:
            return None
        return constant_value(first[1])

    if isinstance(value, list):
        if len(value) >= 5 and value[0] == "interpolate":
            return constant_value(value[4])
        return None

    return None


def _lookup(props: Any, name: str) -> Any:
    if not isinstance(props, dict):
        return None
    return constant_value(props.get(name))


def extract_color(props: Any, name: str) -> Color | None:
    """Color of property *name* in a paint or layout object."""
    value = _lookup(props, name)
    if isinstance(value, str):
        return parse_color(value)
    return None


def extract_number(props: Any, name: str) -> float | None:
    """Numeric value of property *name* in a paint or layout object.

    Non-finite numbers (JSON ``NaN``, ``Infinity``) count as absent.
    """
    value = _lookup(props, name)
    if isinstance(value, (int, float)) and math.isfinite(value):
        return float(value)
    return None


def extract_string(props: Any, name: str) -> str | None:
    value = _lookup(props, name)
    if isinstance(value, str):
        return value
    return None
