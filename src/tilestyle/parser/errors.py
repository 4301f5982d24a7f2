"""Parser error types."""


class ParseError(Exception):
    """Raised when style text (a color or a filter) cannot be parsed."""

    def __init__(self, message: str, text: str | None = None):
        self.text = text
        super().__init__(message)


class ColorParseError(ParseError):
    """Raised for an unrecognized CSS color literal."""


class FilterParseError(ParseError):
    """Raised for a malformed filter expression or filter text block."""
