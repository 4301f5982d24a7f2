"""Convert ESS filter expressions into flat lists of property predicates.

Supported heads: ``all``, ``in``, ``not in``/``!in``, ``exist``/``has``,
``not exist``/``!has``, ``==``, ``!=``, ``<``, ``<=``, ``>``, ``>=``.
``all`` is flattened: nested ``all`` operands merge transparently, and an
operand that cannot be converted is reported and dropped while the rest
is kept. Any other head (``any``, ``none``, expression forms) fails the
whole expression.

Properties whose names start with ``$`` (``$type``, ``$id``) have no
counterpart in the rule model and are dropped without a diagnostic.
"""

from __future__ import annotations

import json
from typing import Any

from tilestyle.diagnostics import DiagnosticSink
from tilestyle.model.diagnostic import Diagnostic, DiagnosticCode, Severity
from tilestyle.model.filter import FilterOperator, Operator, PropertyFilter, stringify_value
from tilestyle.parser.errors import FilterParseError

__all__ = ["parse_filter", "OPERATOR_ALIASES"]

OPERATOR_ALIASES: dict[str, str] = {
    "!in": "not in",
    "has": "exist",
    "!has": "not exist",
}

_OPERATORS = frozenset(op.value for op in Operator)


def _describe(expr: Any) -> str:
    try:
        return json.dumps(expr)
    except (TypeError, ValueError):
        return repr(expr)


def parse_filter(
    expr: Any,
    sink: DiagnosticSink | None = None,
    layer_id: str | None = None,
) -> list[PropertyFilter]:
    """Convert a filter expression to predicates.

    Raises :class:`FilterParseError` if the expression (or, for ``all``,
    every part of it that matters) cannot be represented.
    """
    if not isinstance(expr, list) or not expr:
        raise FilterParseError(f"Filter must be a non-empty array: {_describe(expr)}")

    head = expr[0]
    if not isinstance(head, str):
        raise FilterParseError(f"Filter operator must be a string: {_describe(expr)}")
    operator = OPERATOR_ALIASES.get(head, head)

    if operator == "all":
        filters: list[PropertyFilter] = []
        for part in expr[1:]:
            try:
                filters.extend(parse_filter(part, sink, layer_id))
            except FilterParseError as exc:
                if sink is not None:
                    sink(
                        Diagnostic(
                            code=DiagnosticCode.FILTER_PART_SKIPPED,
                            severity=Severity.WARNING,
                            message=f"Skipped part of the filter {_describe(part)}: {exc}",
                            layer_id=layer_id,
                        )
                    )
        return filters

    if operator not in _OPERATORS:
        raise FilterParseError(f"Unsupported filter operator {operator!r}", text=_describe(expr))

    if len(expr) < 2:
        raise FilterParseError(f"Filter has no property operand: {_describe(expr)}")
    prop = expr[1]
    if not isinstance(prop, str) or not prop:
        raise FilterParseError(f"Unsupported property operand: {_describe(expr)}")

    if operator in ("in", "not in"):
        value = ",".join(stringify_value(v) for v in expr[2:])
    elif operator in ("exist", "not exist"):
        value = ""
    else:
        if len(expr) < 3:
            raise FilterParseError(f"Filter has no value operand: {_describe(expr)}")
        value = stringify_value(expr[2])

    filter_operator = FilterOperator.from_text(operator, value)
    if filter_operator is None:
        raise FilterParseError(
            f"Unsupported filter operator {operator!r} with value {value!r}",
            text=_describe(expr),
        )

    if prop.startswith("$"):
        return []

    return [PropertyFilter(property_name=prop, operator=filter_operator)]
