"""ESS to internal style translation.

Each ESS layer becomes at most one :class:`StyleRule`, in layer order:

- ``fill`` / ``fill-extrusion`` -> polygon from ``fill-color`` and ``fill-opacity``
- ``line``                      -> line from ``line-color``, ``line-width``, ``line-opacity``
- ``circle`` / ``symbol``       -> label from ``text-field``, ``text-size``,
                                   ``text-color``, ``text-halo-width``, ``text-halo-color``
- ``raster``, ``heatmap``, ``hillshade`` are not translated
- ``background`` only provides the style background color

Problems never abort the translation. A layer missing what its symbol needs
is skipped; a filter that cannot be represented is dropped, leaving a rule
that matches every feature of its source layer. Every such decision is
reported to the diagnostic sink.
"""

from __future__ import annotations

import logging
from typing import Any

from tilestyle.config import DEFAULT_CONFIG, StyleConfig
from tilestyle.diagnostics import DiagnosticSink, logging_sink
from tilestyle.ess.filters import parse_filter
from tilestyle.ess.model import SUPPORTED_VERSION, EssLayer, EssStyle, LayerType
from tilestyle.ess.values import extract_color, extract_number, extract_string
from tilestyle.model.color import Color, apply_opacity
from tilestyle.model.diagnostic import Diagnostic, DiagnosticCode, Severity
from tilestyle.model.filter import PropertyFilter
from tilestyle.model.style import StyleRule, VectorTileStyle
from tilestyle.model.symbol import (
    FontWeight,
    LabelSymbol,
    LineSymbol,
    PolygonSymbol,
    Symbol,
    TextStyle,
)
from tilestyle.parser.errors import FilterParseError

__all__ = ["StyleTranslator", "convert_ess_style", "extract_background_color"]

logger = logging.getLogger("tilestyle.ess")

_POLYGON_TYPES = frozenset({LayerType.FILL, LayerType.FILL_EXTRUSION})
_LABEL_TYPES = frozenset({LayerType.CIRCLE, LayerType.SYMBOL})
_IGNORED_TYPES = frozenset({LayerType.RASTER, LayerType.HEATMAP, LayerType.HILLSHADE})


def extract_background_color(ess: EssStyle, default: Color = DEFAULT_CONFIG.default_background) -> Color:
    """Color of the first background layer that has a usable ``background-color``."""
    for layer in ess.layers:
        if layer.layer_type is LayerType.BACKGROUND:
            color = extract_color(layer.paint, "background-color")
            if color is not None:
                return color
    return default


class StyleTranslator:
    """Translate :class:`EssStyle` documents into :class:`VectorTileStyle`.

    Diagnostics from the most recent :meth:`translate` call are kept in
    ``diagnostics`` and also forwarded to *sink* (logging by default).
    """

    def __init__(
        self,
        config: StyleConfig | None = None,
        sink: DiagnosticSink | None = None,
    ) -> None:
        self.config = config or DEFAULT_CONFIG
        self._sink = sink or logging_sink(logger)
        self.diagnostics: list[Diagnostic] = []

    # --- reporting ------------------------------------------------------------

    def _report(
        self,
        code: DiagnosticCode,
        severity: Severity,
        message: str,
        layer_id: str | None = None,
    ) -> None:
        self._emit(Diagnostic(code=code, severity=severity, message=message, layer_id=layer_id))

    def _emit(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)
        self._sink(diagnostic)

    # --- public API -----------------------------------------------------------

    def translate(self, ess: EssStyle) -> VectorTileStyle:
        """Translate a whole document; never raises for content problems."""
        self.diagnostics = []

        if ess.version != SUPPORTED_VERSION:
            self._report(
                DiagnosticCode.UNSUPPORTED_VERSION,
                Severity.ERROR,
                f"Style version {ess.version} is not supported (expected {SUPPORTED_VERSION})",
            )
            return VectorTileStyle(background=self.config.default_background)

        rules: list[StyleRule] = []
        for layer in ess.layers:
            rule = self.translate_layer(layer)
            if rule is not None:
                rules.append(rule)

        background = extract_background_color(ess, self.config.default_background)
        logger.debug(
            "Translated %d of %d layers from style %r", len(rules), len(ess.layers), ess.name
        )
        return VectorTileStyle(background=background, rules=tuple(rules))

    def translate_layer(self, layer: EssLayer) -> StyleRule | None:
        """Translate one layer, returning None when it produces no rule."""
        if layer.source_layer is None:
            return None

        symbol = self._symbol_for(layer)
        if symbol is None:
            return None

        return StyleRule(
            layer_name=layer.source_layer,
            properties=tuple(self._filters_for(layer)),
            symbol=symbol,
        )

    # --- symbols --------------------------------------------------------------

    def _symbol_for(self, layer: EssLayer) -> Symbol | None:
        kind = layer.layer_type
        if kind in _POLYGON_TYPES:
            return self._polygon_symbol(layer)
        if kind is LayerType.LINE:
            return self._line_symbol(layer)
        if kind in _LABEL_TYPES:
            return self._label_symbol(layer)
        if kind is LayerType.BACKGROUND:
            return None

        reason = "layer type is not translated" if kind in _IGNORED_TYPES else "unknown layer type"
        self._report(
            DiagnosticCode.UNSUPPORTED_LAYER,
            Severity.INFO,
            f"Skipped layer of type {layer.type!r}: {reason}",
            layer.id,
        )
        return None

    def _apply_opacity(self, layer: EssLayer, color: Color, opacity_property: str) -> Color:
        opacity = extract_number(layer.paint, opacity_property)
        if opacity is None:
            opacity = 1.0
        if color.a != 255:
            self._report(
                DiagnosticCode.OPACITY_OVERWRITE,
                Severity.INFO,
                f"{opacity_property} {opacity} replaces alpha {color.a} of a translucent color",
                layer.id,
            )
        return apply_opacity(color, opacity)

    def _polygon_symbol(self, layer: EssLayer) -> PolygonSymbol | None:
        color = extract_color(layer.paint, "fill-color")
        if color is None:
            self._missing(layer, "paint", "fill-color")
            return None
        return PolygonSymbol(fill_color=self._apply_opacity(layer, color, "fill-opacity"))

    def _line_symbol(self, layer: EssLayer) -> LineSymbol:
        color = extract_color(layer.paint, "line-color") or Color.BLACK
        width = extract_number(layer.paint, "line-width")
        return LineSymbol(
            width=max(0.0, width if width is not None else 1.0),
            stroke_color=self._apply_opacity(layer, color, "line-opacity"),
        )

    def _label_symbol(self, layer: EssLayer) -> LabelSymbol | None:
        pattern = extract_string(layer.layout, "text-field")
        if pattern is None:
            self._missing(layer, "layout", "text-field")
            return None

        font_size = extract_number(layer.layout, "text-size")
        if font_size is None or font_size <= 0:
            self._missing(layer, "layout", "text-size")
            return None

        font_color = extract_color(layer.paint, "text-color")
        if font_color is None:
            self._missing(layer, "paint", "text-color")
            return None

        halo_width = extract_number(layer.paint, "text-halo-width")
        if halo_width is None:
            self._missing(layer, "paint", "text-halo-width")
            return None

        halo_color = extract_color(layer.paint, "text-halo-color")
        if halo_color is None:
            self._missing(layer, "paint", "text-halo-color")
            return None

        return LabelSymbol(
            pattern=pattern,
            text_style=TextStyle(
                font_family=self.config.font_family,
                font_size=font_size,
                font_color=font_color,
                outline_width=max(0.0, halo_width * self.config.halo_width_scale),
                outline_color=halo_color,
                weight=FontWeight.BOLD,
            ),
        )

    def _missing(self, layer: EssLayer, section: str, name: str) -> None:
        section_value: Any = layer.paint if section == "paint" else layer.layout
        found = section_value.get(name) if isinstance(section_value, dict) else None
        detail = "is missing" if found is None else f"has no constant value: {found!r:.60}"
        self._report(
            DiagnosticCode.MISSING_PROPERTY,
            Severity.WARNING,
            f"Skipped {layer.type} layer: {section} property {name!r} {detail}",
            layer.id,
        )

    # --- filters --------------------------------------------------------------

    def _filters_for(self, layer: EssLayer) -> list[PropertyFilter]:
        if layer.filter is None:
            return []
        try:
            return parse_filter(layer.filter, self._emit, layer.id)
        except FilterParseError as exc:
            self._report(
                DiagnosticCode.UNSUPPORTED_FILTER,
                Severity.WARNING,
                f"Filter dropped, rule matches every feature of {layer.source_layer!r}: {exc}",
                layer.id,
            )
            return []


def convert_ess_style(
    ess: EssStyle,
    config: StyleConfig | None = None,
    sink: DiagnosticSink | None = None,
) -> VectorTileStyle:
    """Translate *ess* with a one-off :class:`StyleTranslator`."""
    return StyleTranslator(config=config, sink=sink).translate(ess)
