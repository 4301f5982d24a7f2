from tilestyle.parser.colors import hsl_to_rgb, parse_color, parse_css_color
from tilestyle.parser.errors import ColorParseError, FilterParseError, ParseError
from tilestyle.parser.filter_text import format_filters, parse_filter_text

__all__ = [
    "ParseError",
    "ColorParseError",
    "FilterParseError",
    "parse_color",
    "parse_css_color",
    "hsl_to_rgb",
    "parse_filter_text",
    "format_filters",
]
