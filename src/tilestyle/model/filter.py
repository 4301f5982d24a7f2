"""Property filter model: operators and the (property, operator) predicates of a rule."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

__all__ = [
    "Operator",
    "FilterOperator",
    "PropertyFilter",
    "format_number",
    "stringify_value",
]


class Operator(StrEnum):
    EQ = "=="
    NE = "!="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="
    IN = "in"
    NOT_IN = "not in"
    EXIST = "exist"
    NOT_EXIST = "not exist"


_COMPARISONS = frozenset({Operator.LT, Operator.LE, Operator.GT, Operator.GE})
_MEMBERSHIP = frozenset({Operator.IN, Operator.NOT_IN})
_PRESENCE = frozenset({Operator.EXIST, Operator.NOT_EXIST})


def format_number(value: float | int) -> str:
    """Shortest decimal text for a number; integral floats drop the fraction."""
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    if isinstance(value, float):
        return repr(value)
    return str(value)


def stringify_value(value: Any) -> str:
    """String form of a JSON or feature property value used for matching."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return format_number(value)
    if isinstance(value, (list, tuple)):
        return ",".join(stringify_value(v) for v in value)
    return ""


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def _split_values(value: str) -> tuple[str, ...]:
    if not value.strip():
        return ()
    return tuple(dict.fromkeys(part.strip() for part in value.split(",")))


@dataclass(frozen=True)
class FilterOperator:
    """A comparison applied to one feature property.

    ``value`` is a string for ``==``/``!=``, a float for ordered
    comparisons, a tuple of strings for ``in``/``not in`` and None for the
    existence checks.
    """

    op: Operator
    value: str | float | tuple[str, ...] | None = None

    @classmethod
    def from_text(cls, op: str, value: str) -> FilterOperator | None:
        """Build an operator from its textual token and raw value.

        Returns None for unknown operators and for ordered comparisons whose
        value is not a number.
        """
        try:
            operator = Operator(op)
        except ValueError:
            return None

        if operator in _COMPARISONS:
            number = _as_number(value)
            if number is None or math.isnan(number):
                return None
            return cls(operator, number)
        if operator in _MEMBERSHIP:
            return cls(operator, _split_values(value))
        if operator in _PRESENCE:
            return cls(operator, None)
        return cls(operator, value)

    def to_text(self) -> str:
        if self.op in _PRESENCE:
            return self.op.value
        if self.op in _MEMBERSHIP:
            return f"{self.op.value} [{','.join(self.value)}]"  # type: ignore[arg-type]
        if self.op in _COMPARISONS:
            return f"{self.op.value} {format_number(self.value)}"  # type: ignore[arg-type]
        return f"{self.op.value} {self.value}"

    def test(self, present: bool, value: Any = None) -> bool:
        """Evaluate against a property value; *present* says whether the key exists."""
        op = self.op
        if op is Operator.EXIST:
            return present
        if op is Operator.NOT_EXIST:
            return not present
        if op is Operator.EQ:
            return present and stringify_value(value) == self.value
        if op is Operator.NE:
            return not present or stringify_value(value) != self.value
        if op is Operator.IN:
            return present and stringify_value(value) in self.value  # type: ignore[operator]
        if op is Operator.NOT_IN:
            return not present or stringify_value(value) not in self.value  # type: ignore[operator]

        number = _as_number(value) if present else None
        if number is None:
            return False
        limit = float(self.value)  # type: ignore[arg-type]
        if op is Operator.LT:
            return number < limit
        if op is Operator.LE:
            return number <= limit
        if op is Operator.GT:
            return number > limit
        return number >= limit

    def to_dict(self) -> dict[str, Any]:
        value: Any = list(self.value) if isinstance(self.value, tuple) else self.value
        return {"op": self.op.value, "value": value}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FilterOperator:
        operator = Operator(data["op"])
        value = data.get("value")
        if operator in _MEMBERSHIP:
            return cls(operator, tuple(str(v) for v in value or ()))
        if operator in _COMPARISONS:
            return cls(operator, float(value))
        if operator in _PRESENCE:
            return cls(operator, None)
        return cls(operator, str(value))

    def __str__(self) -> str:
        return self.to_text()


@dataclass(frozen=True)
class PropertyFilter:
    """A single predicate of a style rule: ``property_name`` tested by ``operator``."""

    property_name: str
    operator: FilterOperator

    def __post_init__(self) -> None:
        if not self.property_name:
            raise ValueError("PropertyFilter property_name must be a non-empty string")

    def matches(self, properties: Mapping[str, Any]) -> bool:
        present = self.property_name in properties
        return self.operator.test(present, properties.get(self.property_name))

    def to_text(self) -> str:
        return f"{self.property_name} {self.operator.to_text()}"

    def to_dict(self) -> dict[str, Any]:
        return {"property_name": self.property_name, **self.operator.to_dict()}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PropertyFilter:
        return cls(data["property_name"], FilterOperator.from_dict(data))

    def __str__(self) -> str:
        return self.to_text()
