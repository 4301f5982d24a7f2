"""Editable rule rows of the style editor."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum, StrEnum
from typing import Any

from tilestyle.config import DEFAULT_CONFIG, StyleConfig
from tilestyle.diagnostics import DiagnosticSink
from tilestyle.model.color import Color
from tilestyle.model.diagnostic import Diagnostic, DiagnosticCode, Severity
from tilestyle.model.style import StyleRule
from tilestyle.model.symbol import (
    FontWeight,
    LabelSymbol,
    LineSymbol,
    NoSymbol,
    PointSymbol,
    PolygonSymbol,
    Symbol,
    TextStyle,
)
from tilestyle.parser.errors import FilterParseError
from tilestyle.parser.filter_text import format_filters, parse_filter_text

__all__ = ["EditAction", "SymbolType", "EditRule"]


class EditAction(Enum):
    """Request raised by an editor row during a frame; consumed by the document."""

    NONE = "none"
    MODIFIED = "modified"
    MOVE_UP = "move_up"
    MOVE_DOWN = "move_down"
    REMOVE = "remove"


class SymbolType(StrEnum):
    NONE = "none"
    POINT = "point"
    LINE = "line"
    POLYGON = "polygon"
    LABEL = "label"


DEFAULT_HALO_COLOR = Color.WHITE
DEFAULT_HALO_WIDTH = 2.0


@dataclass
class EditRule:
    """One row of the editor.

    ``id`` never changes and is never reused; it tells rows apart when their
    headers (layer name plus filter text) are identical.
    """

    id: int
    layer_name: str = ""
    filter_text: str = ""
    color: Color = Color.TRANSPARENT
    size: float = 1.0
    halo_color: Color = DEFAULT_HALO_COLOR
    halo_width: float = DEFAULT_HALO_WIDTH
    pattern: str = ""
    symbol_type: SymbolType = SymbolType.NONE
    action: EditAction = field(default=EditAction.NONE, compare=False)

    @classmethod
    def empty(cls, rule_id: int) -> EditRule:
        return cls(id=rule_id)

    @classmethod
    def from_style_rule(cls, rule: StyleRule, rule_id: int) -> EditRule:
        """Build an editor row showing *rule*."""
        row = cls(
            id=rule_id,
            layer_name=rule.layer_name or "",
            filter_text=format_filters(rule.properties),
        )
        symbol = rule.symbol
        if isinstance(symbol, PointSymbol):
            row.symbol_type, row.color, row.size = SymbolType.POINT, symbol.color, symbol.size
        elif isinstance(symbol, LineSymbol):
            row.symbol_type, row.color, row.size = SymbolType.LINE, symbol.stroke_color, symbol.width
        elif isinstance(symbol, PolygonSymbol):
            row.symbol_type, row.color, row.size = SymbolType.POLYGON, symbol.fill_color, 0.0
        elif isinstance(symbol, LabelSymbol):
            style = symbol.text_style
            row.symbol_type = SymbolType.LABEL
            row.pattern = symbol.pattern
            row.color = style.font_color
            row.size = style.font_size
            row.halo_color = style.outline_color
            row.halo_width = style.outline_width
        else:
            row.size = 0.0
        return row

    # --- conversion -----------------------------------------------------------

    def header(self) -> str:
        return f"{self.layer_name} ({self.filter_text})"

    def _report(self, sink: DiagnosticSink | None, code: DiagnosticCode, message: str) -> None:
        if sink is not None:
            sink(Diagnostic(code=code, severity=Severity.WARNING, message=message, rule_id=self.id))

    def symbol(self, config: StyleConfig = DEFAULT_CONFIG, sink: DiagnosticSink | None = None) -> Symbol:
        size = max(0.0, self.size)
        if self.symbol_type is SymbolType.POINT:
            return PointSymbol(size=size, color=self.color)
        if self.symbol_type is SymbolType.LINE:
            return LineSymbol(width=size, stroke_color=self.color)
        if self.symbol_type is SymbolType.POLYGON:
            return PolygonSymbol(fill_color=self.color)
        if self.symbol_type is SymbolType.LABEL:
            if size <= 0:
                self._report(
                    sink, DiagnosticCode.INVALID_SIZE, "label font size must be positive; label hidden"
                )
                return NoSymbol()
            return LabelSymbol(
                pattern=self.pattern,
                text_style=TextStyle(
                    font_family=config.font_family,
                    font_size=size,
                    font_color=self.color,
                    outline_width=max(0.0, self.halo_width),
                    outline_color=self.halo_color,
                    weight=FontWeight.BOLD,
                ),
            )
        return NoSymbol()

    def to_style_rule(
        self,
        config: StyleConfig = DEFAULT_CONFIG,
        sink: DiagnosticSink | None = None,
    ) -> StyleRule:
        """Compile the row; unparseable filter text degrades to no predicates."""
        try:
            properties = parse_filter_text(self.filter_text)
        except FilterParseError as exc:
            self._report(sink, DiagnosticCode.INVALID_FILTER_TEXT, f"{exc}; rule applies without a filter")
            properties = []

        return StyleRule(
            layer_name=self.layer_name or None,
            properties=tuple(properties),
            symbol=self.symbol(config, sink),
        )

    # --- persistence ----------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "layer_name": self.layer_name,
            "filter": self.filter_text,
            "color": list(self.color.to_tuple()),
            "size": self.size,
            "symbol_type": self.symbol_type.value,
            "halo_color": list(self.halo_color.to_tuple()),
            "halo_width": self.halo_width,
            "pattern": self.pattern,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> EditRule:
        return cls(
            id=int(data["id"]),
            layer_name=str(data.get("layer_name", "")),
            filter_text=str(data.get("filter", "")),
            color=Color.from_tuple(data.get("color", Color.TRANSPARENT.to_tuple())),
            size=float(data.get("size", 1.0)),
            halo_color=Color.from_tuple(data.get("halo_color", DEFAULT_HALO_COLOR.to_tuple())),
            halo_width=float(data.get("halo_width", DEFAULT_HALO_WIDTH)),
            pattern=str(data.get("pattern", "")),
            symbol_type=SymbolType(data.get("symbol_type", SymbolType.NONE.value)),
        )
