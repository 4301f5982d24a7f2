"""Event types emitted by the style document."""

from dataclasses import dataclass

from tilestyle.model.style import VectorTileStyle


@dataclass(frozen=True)
class StyleLoaded:
    source: str
    rule_count: int


@dataclass(frozen=True)
class StyleLoadFailed:
    path: str
    error: str


@dataclass(frozen=True)
class StyleCommitted:
    """Debounced edits were committed; ``style`` is the published snapshot."""

    style: VectorTileStyle
    version: int


StyleEvent = StyleLoaded | StyleLoadFailed | StyleCommitted
