"""Lark-based parser for CSS color literals.

Accepted forms::

    #f80   #ff8800
    rgb(255, 136, 0)      rgba(255, 136, 0, 0.5)
    hsl(32, 100%, 50%)    hsla(32, 100%, 50%, 0.5)
"""

from __future__ import annotations

from pathlib import Path

from lark import Lark, Token, Transformer
from lark.exceptions import LarkError, VisitError

from tilestyle.model.color import Color, round_channel
from tilestyle.parser.errors import ColorParseError

__all__ = ["parse_css_color", "parse_color", "hsl_to_rgb"]

GRAMMAR_PATH = Path(__file__).parent / "color.lark"

_PARSER = Lark(GRAMMAR_PATH.read_text(), parser="lalr", start="start")


def _hue_to_rgb(p: float, q: float, t: float) -> float:
    if t < 0.0:
        t += 1.0
    if t > 1.0:
        t -= 1.0
    if t < 1.0 / 6.0:
        return p + (q - p) * 6.0 * t
    if t < 1.0 / 2.0:
        return q
    if t < 2.0 / 3.0:
        return p + (q - p) * (2.0 / 3.0 - t) * 6.0
    return p


def hsl_to_rgb(h: float, s: float, l: float) -> Color:
    """Convert hue in degrees, saturation and lightness in 0..1 to an opaque Color."""
    h = (h / 360.0) % 1.0

    if s == 0.0:
        r = g = b = l
    else:
        q = l * (1.0 + s) if l < 0.5 else l + s - l * s
        p = 2.0 * l - q
        r = _hue_to_rgb(p, q, h + 1.0 / 3.0)
        g = _hue_to_rgb(p, q, h)
        b = _hue_to_rgb(p, q, h - 1.0 / 3.0)

    return Color(round_channel(r), round_channel(g), round_channel(b), 255)


class ColorTransformer(Transformer):  # type: ignore[type-arg]
    """Turn a color parse tree into a :class:`Color`."""

    def channel(self, items: list[Token]) -> int:
        value = int(items[0])
        if value > 255:
            raise ValueError(f"channel out of range: {value}")
        return value

    def alpha(self, items: list[Token]) -> int:
        return round_channel(float(items[0]))

    def hue(self, items: list[Token]) -> float:
        return float(items[0])

    def percent(self, items: list[Token]) -> float:
        return float(items[0]) / 100.0

    def hex_color(self, items: list[Token]) -> Color:
        digits = str(items[0])[1:]
        if len(digits) == 3:
            digits = "".join(ch * 2 for ch in digits)
        return Color(int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16), 255)

    def rgb_color(self, items: list[int]) -> Color:
        r, g, b = items
        return Color(r, g, b, 255)

    def rgba_color(self, items: list[int]) -> Color:
        r, g, b, a = items
        return Color(r, g, b, a)

    def hsl_color(self, items: list[float]) -> Color:
        h, s, l = items
        return hsl_to_rgb(h, s, l)

    def hsla_color(self, items: list[float]) -> Color:
        h, s, l, a = items
        return hsl_to_rgb(h, s, l).with_alpha(int(a))


def parse_css_color(text: str) -> Color:
    """Parse a CSS color literal, raising :class:`ColorParseError` on failure."""
    try:
        tree = _PARSER.parse(text.strip())
        return ColorTransformer().transform(tree)
    except (LarkError, VisitError, ValueError) as exc:
        raise ColorParseError(f"Unrecognized color: {text!r}", text=text) from exc


def parse_color(text: str) -> Color | None:
    """Parse a CSS color literal, returning None when it is not recognized."""
    if not isinstance(text, str):
        return None
    try:
        return parse_css_color(text)
    except ColorParseError:
        return None
