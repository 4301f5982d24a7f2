"""Style model layer -- public type re-exports."""

from tilestyle.model.color import Color, apply_opacity
from tilestyle.model.diagnostic import Diagnostic, DiagnosticCode, Severity
from tilestyle.model.filter import FilterOperator, Operator, PropertyFilter
from tilestyle.model.style import DEFAULT_BACKGROUND, StyleRule, VectorTileStyle
from tilestyle.model.symbol import (
    FontStyle,
    FontWeight,
    HorizontalAlignment,
    LabelSymbol,
    LineSymbol,
    NoSymbol,
    PointSymbol,
    PolygonSymbol,
    Symbol,
    TextStyle,
    VerticalAlignment,
)

__all__ = [
    # color
    "Color",
    "apply_opacity",
    # filter
    "Operator",
    "FilterOperator",
    "PropertyFilter",
    # symbol
    "Symbol",
    "NoSymbol",
    "PointSymbol",
    "LineSymbol",
    "PolygonSymbol",
    "LabelSymbol",
    "TextStyle",
    "FontWeight",
    "FontStyle",
    "HorizontalAlignment",
    "VerticalAlignment",
    # style
    "StyleRule",
    "VectorTileStyle",
    "DEFAULT_BACKGROUND",
    # diagnostic
    "Severity",
    "Diagnostic",
    "DiagnosticCode",
]
