"""Import of version 8 JSON map styles (ESS) into the internal style representation."""

from tilestyle.ess.filters import parse_filter
from tilestyle.ess.model import EssLayer, EssStyle, LayerType, StyleFormatError, load_ess
from tilestyle.ess.translator import StyleTranslator, convert_ess_style, extract_background_color
from tilestyle.ess.values import extract_color, extract_number

__all__ = [
    "EssStyle",
    "EssLayer",
    "LayerType",
    "StyleFormatError",
    "load_ess",
    "parse_filter",
    "extract_color",
    "extract_number",
    "StyleTranslator",
    "convert_ess_style",
    "extract_background_color",
]
