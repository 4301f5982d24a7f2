"""tilestyle - import and edit vector tile map styles."""

__version__ = "0.1.0"
