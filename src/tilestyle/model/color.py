"""Color model: 8-bit RGBA values with CSS formatting and linear conversions."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import ClassVar

__all__ = ["Color", "apply_opacity", "round_channel"]


def round_channel(value: float) -> int:
    """Scale a unit float to a channel byte, rounding half up and clamping.

    NaN maps to 0; infinities saturate.
    """
    if math.isnan(value):
        return 0
    value = max(0.0, min(1.0, value))
    return min(255, math.floor(value * 255.0 + 0.5))


def _srgb_to_linear(channel: float) -> float:
    if channel <= 0.04045:
        return channel / 12.92
    return ((channel + 0.055) / 1.055) ** 2.4


def _linear_to_srgb(channel: float) -> float:
    if channel <= 0.0031308:
        return channel * 12.92
    return 1.055 * channel ** (1.0 / 2.4) - 0.055


@dataclass(frozen=True)
class Color:
    """An sRGB color with 8-bit channels.

    Values coming out of the CSS parser carry straight alpha; the renderer
    treats stored colors as premultiplied. ``premultiplied`` and
    ``unpremultiplied`` convert between the two when a caller needs to.
    """

    r: int
    g: int
    b: int
    a: int = 255

    BLACK: ClassVar[Color]
    WHITE: ClassVar[Color]
    TRANSPARENT: ClassVar[Color]

    def __post_init__(self) -> None:
        for name in ("r", "g", "b", "a"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 255:
                raise ValueError(f"Color channel {name} must be an int in 0..255, got {value!r}")

    # --- conversions ----------------------------------------------------------

    def to_tuple(self) -> tuple[int, int, int, int]:
        return (self.r, self.g, self.b, self.a)

    @classmethod
    def from_tuple(cls, values: list[int] | tuple[int, ...]) -> Color:
        if len(values) != 4:
            raise ValueError(f"Expected 4 channel values, got {len(values)}")
        return cls(*(int(v) for v in values))

    def with_alpha(self, alpha: int) -> Color:
        return Color(self.r, self.g, self.b, alpha)

    def premultiplied(self) -> Color:
        """Return this straight-alpha color with rgb scaled by alpha."""
        factor = self.a / 255.0
        return Color(
            round_channel(self.r / 255.0 * factor),
            round_channel(self.g / 255.0 * factor),
            round_channel(self.b / 255.0 * factor),
            self.a,
        )

    def unpremultiplied(self) -> Color:
        """Inverse of :meth:`premultiplied`; fully transparent stays black."""
        if self.a == 0:
            return Color(0, 0, 0, 0)
        factor = 255.0 / self.a
        return Color(
            round_channel(self.r / 255.0 * factor),
            round_channel(self.g / 255.0 * factor),
            round_channel(self.b / 255.0 * factor),
            self.a,
        )

    def to_linear(self) -> tuple[float, float, float, float]:
        """Linear-light rgb floats plus alpha, all in 0.0..1.0."""
        return (
            _srgb_to_linear(self.r / 255.0),
            _srgb_to_linear(self.g / 255.0),
            _srgb_to_linear(self.b / 255.0),
            self.a / 255.0,
        )

    @classmethod
    def from_linear(cls, r: float, g: float, b: float, a: float = 1.0) -> Color:
        return cls(
            round_channel(_linear_to_srgb(max(0.0, r))),
            round_channel(_linear_to_srgb(max(0.0, g))),
            round_channel(_linear_to_srgb(max(0.0, b))),
            round_channel(a),
        )

    # --- formatting -----------------------------------------------------------

    def to_hex(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"

    def to_css(self) -> str:
        """Canonical CSS form: ``#rrggbb`` when opaque, ``rgba(...)`` otherwise."""
        if self.a == 255:
            return self.to_hex()
        return f"rgba({self.r},{self.g},{self.b},{_format_alpha(self.a)})"

    def __str__(self) -> str:
        return self.to_css()


def _format_alpha(alpha: int) -> str:
    # Shortest decimal that encodes back to the same byte.
    for places in range(1, 5):
        text = f"{alpha / 255.0:.{places}f}".rstrip("0").rstrip(".")
        if not text:
            text = "0"
        if round_channel(float(text)) == alpha:
            return text
    return f"{alpha / 255.0:.4f}"


def apply_opacity(color: Color, opacity: float) -> Color:
    """Replace the alpha channel with ``opacity``; existing alpha is discarded."""
    return color.with_alpha(round_channel(opacity))


Color.BLACK = Color(0, 0, 0, 255)
Color.WHITE = Color(255, 255, 255, 255)
Color.TRANSPARENT = Color(0, 0, 0, 0)
