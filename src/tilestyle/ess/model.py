"""ESS document model: the version 8 JSON map style consumed by the importer.

Paint, layout and filter bodies stay opaque JSON values; only the fields the
translator dispatches on are typed.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Any

__all__ = ["LayerType", "EssLayer", "EssStyle", "StyleFormatError", "load_ess"]

SUPPORTED_VERSION = 8


class StyleFormatError(Exception):
    """Raised when a document does not have the shape of an ESS style."""


class LayerType(StrEnum):
    FILL = "fill"
    LINE = "line"
    SYMBOL = "symbol"
    CIRCLE = "circle"
    HEATMAP = "heatmap"
    FILL_EXTRUSION = "fill-extrusion"
    RASTER = "raster"
    HILLSHADE = "hillshade"
    BACKGROUND = "background"


_KNOWN_KEYS = frozenset({
    "version", "id", "name", "sources", "layers", "metadata",
    "glyphs", "sprite", "bearing", "pitch", "center", "zoom",
})


@dataclass
class EssLayer:
    """One entry of the ``layers`` array."""

    id: str
    type: str
    source: str | None = None
    source_layer: str | None = None
    minzoom: float | None = None
    maxzoom: float | None = None
    layout: Any = None
    paint: Any = None
    filter: Any = None
    metadata: Any = None

    @property
    def layer_type(self) -> LayerType | None:
        """The typed layer kind, or None for a kind this model does not know."""
        try:
            return LayerType(self.type)
        except ValueError:
            return None

    @classmethod
    def from_dict(cls, data: Any) -> EssLayer:
        if not isinstance(data, dict):
            raise StyleFormatError(f"Layer must be an object, got {type(data).__name__}")
        if "id" not in data or "type" not in data:
            raise StyleFormatError(f"Layer is missing 'id' or 'type': {data!r:.80}")
        return cls(
            id=str(data["id"]),
            type=str(data["type"]),
            source=data.get("source"),
            source_layer=data.get("source-layer"),
            minzoom=data.get("minzoom"),
            maxzoom=data.get("maxzoom"),
            layout=data.get("layout"),
            paint=data.get("paint"),
            filter=data.get("filter"),
            metadata=data.get("metadata"),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"id": self.id, "type": self.type}
        optional = {
            "source": self.source,
            "source-layer": self.source_layer,
            "minzoom": self.minzoom,
            "maxzoom": self.maxzoom,
            "layout": self.layout,
            "paint": self.paint,
            "filter": self.filter,
            "metadata": self.metadata,
        }
        out.update({k: v for k, v in optional.items() if v is not None})
        return out


@dataclass
class EssStyle:
    """Top-level ESS document. Unknown top-level keys are kept in ``extra``."""

    version: int
    id: str = ""
    name: str = ""
    sources: dict[str, Any] = field(default_factory=dict)
    layers: list[EssLayer] = field(default_factory=list)
    metadata: Any = None
    glyphs: str | None = None
    sprite: Any = None
    bearing: float | None = None
    pitch: float | None = None
    center: list[float] | None = None
    zoom: float | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def is_supported_version(self) -> bool:
        return self.version == SUPPORTED_VERSION

    @classmethod
    def from_dict(cls, data: Any) -> EssStyle:
        """Build a style from decoded JSON, raising :class:`StyleFormatError` on bad shape."""
        if not isinstance(data, dict):
            raise StyleFormatError(f"Style must be a JSON object, got {type(data).__name__}")
        layers = data.get("layers", [])
        if not isinstance(layers, list):
            raise StyleFormatError("'layers' must be an array")
        sources = data.get("sources", {})
        if not isinstance(sources, dict):
            raise StyleFormatError("'sources' must be an object")
        try:
            version = int(data.get("version", 0))
        except (TypeError, ValueError) as exc:
            raise StyleFormatError(f"Invalid style version: {data.get('version')!r}") from exc

        return cls(
            version=version,
            id=str(data.get("id", "")),
            name=str(data.get("name", "")),
            sources=sources,
            layers=[EssLayer.from_dict(layer) for layer in layers],
            metadata=data.get("metadata"),
            glyphs=data.get("glyphs"),
            sprite=data.get("sprite"),
            bearing=data.get("bearing"),
            pitch=data.get("pitch"),
            center=data.get("center"),
            zoom=data.get("zoom"),
            extra={k: v for k, v in data.items() if k not in _KNOWN_KEYS},
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "version": self.version,
            "id": self.id,
            "name": self.name,
            "sources": self.sources,
            "layers": [layer.to_dict() for layer in self.layers],
        }
        optional = {
            "metadata": self.metadata,
            "glyphs": self.glyphs,
            "sprite": self.sprite,
            "bearing": self.bearing,
            "pitch": self.pitch,
            "center": self.center,
            "zoom": self.zoom,
        }
        out.update({k: v for k, v in optional.items() if v is not None})
        out.update(self.extra)
        return out

    def layer(self, layer_id: str) -> EssLayer | None:
        for layer in self.layers:
            if layer.id == layer_id:
                return layer
        return None


def load_ess(path: Path) -> EssStyle:
    """Read and decode an ESS JSON file.

    Raises OSError if the file cannot be read, UnicodeDecodeError if it is
    not UTF-8, :class:`json.JSONDecodeError` for invalid JSON and
    :class:`StyleFormatError` for a malformed document.
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return EssStyle.from_dict(data)
