"""Symbol model: the visual form a matched feature takes."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Union

from tilestyle.model.color import Color

__all__ = [
    "FontWeight",
    "FontStyle",
    "HorizontalAlignment",
    "VerticalAlignment",
    "TextStyle",
    "NoSymbol",
    "PointSymbol",
    "LineSymbol",
    "PolygonSymbol",
    "LabelSymbol",
    "Symbol",
    "symbol_from_dict",
]


class FontWeight(IntEnum):
    THIN = 100
    LIGHT = 300
    NORMAL = 400
    MEDIUM = 500
    BOLD = 700
    BLACK = 900


class FontStyle(Enum):
    NORMAL = "normal"
    ITALIC = "italic"
    OBLIQUE = "oblique"


class HorizontalAlignment(Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class VerticalAlignment(Enum):
    TOP = "top"
    MIDDLE = "middle"
    BOTTOM = "bottom"


def _check_non_negative(name: str, value: float) -> None:
    if value < 0:
        raise ValueError(f"{name} must be >= 0, got {value}")


@dataclass(frozen=True)
class TextStyle:
    """Font and outline settings of a label."""

    font_family: tuple[str, ...]
    font_size: float
    font_color: Color
    outline_width: float = 0.0
    outline_color: Color = Color.TRANSPARENT
    weight: FontWeight = FontWeight.NORMAL
    horizontal_alignment: HorizontalAlignment = HorizontalAlignment.CENTER
    vertical_alignment: VerticalAlignment = VerticalAlignment.MIDDLE
    style: FontStyle = FontStyle.NORMAL

    def __post_init__(self) -> None:
        if self.font_size <= 0:
            raise ValueError(f"font_size must be > 0, got {self.font_size}")
        _check_non_negative("outline_width", self.outline_width)

    def to_dict(self) -> dict[str, Any]:
        return {
            "font_family": list(self.font_family),
            "font_size": self.font_size,
            "font_color": self.font_color.to_css(),
            "outline_width": self.outline_width,
            "outline_color": self.outline_color.to_css(),
            "weight": int(self.weight),
            "horizontal_alignment": self.horizontal_alignment.value,
            "vertical_alignment": self.vertical_alignment.value,
            "style": self.style.value,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TextStyle:
        return cls(
            font_family=tuple(data.get("font_family", ())),
            font_size=float(data["font_size"]),
            font_color=_color(data["font_color"]),
            outline_width=float(data.get("outline_width", 0.0)),
            outline_color=_color(data.get("outline_color", "rgba(0,0,0,0)")),
            weight=FontWeight(int(data.get("weight", FontWeight.NORMAL))),
            horizontal_alignment=HorizontalAlignment(data.get("horizontal_alignment", "center")),
            vertical_alignment=VerticalAlignment(data.get("vertical_alignment", "middle")),
            style=FontStyle(data.get("style", "normal")),
        )


@dataclass(frozen=True)
class NoSymbol:
    """Emit nothing for matched features."""

    kind = "none"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind}


@dataclass(frozen=True)
class PointSymbol:
    size: float
    color: Color

    kind = "point"

    def __post_init__(self) -> None:
        _check_non_negative("size", self.size)

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind, "size": self.size, "color": self.color.to_css()}


@dataclass(frozen=True)
class LineSymbol:
    width: float
    stroke_color: Color

    kind = "line"

    def __post_init__(self) -> None:
        _check_non_negative("width", self.width)

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind, "width": self.width, "stroke_color": self.stroke_color.to_css()}


@dataclass(frozen=True)
class PolygonSymbol:
    fill_color: Color

    kind = "polygon"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind, "fill_color": self.fill_color.to_css()}


@dataclass(frozen=True)
class LabelSymbol:
    """Text drawn from ``pattern`` (``{name}`` placeholders are filled by the renderer)."""

    pattern: str
    text_style: TextStyle

    kind = "label"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind, "pattern": self.pattern, "text_style": self.text_style.to_dict()}


Symbol = Union[NoSymbol, PointSymbol, LineSymbol, PolygonSymbol, LabelSymbol]


def _color(text: str) -> Color:
    from tilestyle.parser.colors import parse_css_color

    return parse_css_color(text)


def symbol_from_dict(data: Mapping[str, Any]) -> Symbol:
    """Rebuild a symbol from the dict produced by its ``to_dict``."""
    kind = data.get("type", "none")
    if kind == "none":
        return NoSymbol()
    if kind == "point":
        return PointSymbol(size=float(data["size"]), color=_color(data["color"]))
    if kind == "line":
        return LineSymbol(width=float(data["width"]), stroke_color=_color(data["stroke_color"]))
    if kind == "polygon":
        return PolygonSymbol(fill_color=_color(data["fill_color"]))
    if kind == "label":
        return LabelSymbol(pattern=str(data["pattern"]), text_style=TextStyle.from_dict(data["text_style"]))
    raise ValueError(f"Unknown symbol type: {kind!r}")
