"""Infix filter text used by the rule editor.

Grammar:
    FilterText = Predicate ( '&&' Predicate )*
    Predicate  = Name '==' Value | Name '!=' Value
               | Name ('<' | '<=' | '>' | '>=') Number
               | Name 'in' '[' Value (',' Value)* ']'
               | Name 'not in' '[' Value (',' Value)* ']'
               | Name 'exist' | Name 'not exist'

Operator tokens are tried in the fixed order of ``OPERATOR_TOKENS``; the
first token that yields a valid predicate wins. ``a == b > c`` is therefore
``a`` equal to ``"b > c"``, and ``z >= 5`` only becomes ``>=`` because the
earlier ``>`` candidate leaves ``= 5``, which is not a number.

Within one token every occurrence is tried from the left, and ``exist`` /
``not exist`` only match as the last word of a block, so a property named
``existing`` still reads back from ``existing exist``.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from tilestyle.model.filter import FilterOperator, Operator, PropertyFilter
from tilestyle.parser.errors import FilterParseError

__all__ = ["OPERATOR_TOKENS", "format_filters", "parse_filter_text", "parse_block"]

# (token as written in the text, operator it constructs)
OPERATOR_TOKENS: tuple[tuple[str, Operator], ...] = (
    ("==", Operator.EQ),
    ("!=", Operator.NE),
    (">", Operator.GT),
    ("<", Operator.LT),
    (">=", Operator.GE),
    ("<=", Operator.LE),
    (" not in ", Operator.NOT_IN),
    (" in ", Operator.IN),
    ("exist", Operator.EXIST),
    ("not exist", Operator.NOT_EXIST),
)

_PRESENCE = (Operator.EXIST, Operator.NOT_EXIST)
_MEMBERSHIP = (Operator.IN, Operator.NOT_IN)


def _strip_brackets(value: str) -> str:
    if value.startswith("[") and value.endswith("]"):
        return value[1:-1].strip()
    return value


def _token_positions(block: str, token: str, operator: Operator) -> Iterator[int]:
    if operator in _PRESENCE:
        if block.endswith(" " + token):
            yield len(block) - len(token)
        return
    idx = block.find(token)
    while idx >= 0:
        yield idx
        idx = block.find(token, idx + 1)


def _try_token(block: str, token: str, operator: Operator) -> PropertyFilter | None:
    for idx in _token_positions(block, token, operator):
        predicate = _split_at(block, idx, token, operator)
        if predicate is not None:
            return predicate
    return None


def _split_at(block: str, idx: int, token: str, operator: Operator) -> PropertyFilter | None:
    name = block[:idx].strip()
    value = block[idx + len(token):].strip()
    if not name or any(ch.isspace() for ch in name):
        return None

    if operator in _PRESENCE:
        if value:
            return None
    elif operator in _MEMBERSHIP:
        value = _strip_brackets(value)

    filter_operator = FilterOperator.from_text(operator.value, value)
    if filter_operator is None:
        return None
    return PropertyFilter(property_name=name, operator=filter_operator)


def parse_block(block: str) -> PropertyFilter:
    """Parse one predicate such as ``class == street``."""
    text = block.strip()
    for token, operator in OPERATOR_TOKENS:
        predicate = _try_token(text, token, operator)
        if predicate is not None:
            return predicate
    raise FilterParseError(f"Invalid filter block: {block!r}", text=block)


def parse_filter_text(text: str) -> list[PropertyFilter]:
    """Parse ``&&``-joined predicates; blank text is the empty filter.

    Raises :class:`FilterParseError` if any block is malformed.
    """
    if not text or not text.strip():
        return []
    return [parse_block(block) for block in text.split("&&")]


def format_filters(filters: Iterable[PropertyFilter]) -> str:
    """Render predicates in the form accepted by :func:`parse_filter_text`."""
    return " && ".join(f.to_text() for f in filters)
