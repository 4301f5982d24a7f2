"""Internal style representation: ordered style rules plus a background color."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from tilestyle.model.color import Color
from tilestyle.model.filter import PropertyFilter
from tilestyle.model.symbol import NoSymbol, Symbol, symbol_from_dict

__all__ = ["StyleRule", "VectorTileStyle", "DEFAULT_BACKGROUND"]

DEFAULT_BACKGROUND = Color(240, 240, 240, 255)


@dataclass(frozen=True)
class StyleRule:
    """Features of ``layer_name`` (any layer when None) matching every predicate get ``symbol``."""

    layer_name: str | None = None
    properties: tuple[PropertyFilter, ...] = ()
    symbol: Symbol = field(default_factory=NoSymbol)

    def __post_init__(self) -> None:
        # Accept any iterable of filters but always store a tuple.
        if not isinstance(self.properties, tuple):
            object.__setattr__(self, "properties", tuple(self.properties))

    def matches(self, layer_name: str, properties: Mapping[str, Any]) -> bool:
        if self.layer_name is not None and self.layer_name != layer_name:
            return False
        return all(f.matches(properties) for f in self.properties)

    def to_dict(self) -> dict[str, Any]:
        return {
            "layer_name": self.layer_name,
            "properties": [f.to_dict() for f in self.properties],
            "symbol": self.symbol.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> StyleRule:
        return cls(
            layer_name=data.get("layer_name"),
            properties=tuple(PropertyFilter.from_dict(p) for p in data.get("properties", [])),
            symbol=symbol_from_dict(data.get("symbol", {"type": "none"})),
        )


@dataclass(frozen=True)
class VectorTileStyle:
    """An immutable style: rule order is draw order and must be preserved."""

    background: Color = DEFAULT_BACKGROUND
    rules: tuple[StyleRule, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.rules, tuple):
            object.__setattr__(self, "rules", tuple(self.rules))

    @classmethod
    def of(cls, rules: Iterable[StyleRule], background: Color = DEFAULT_BACKGROUND) -> VectorTileStyle:
        return cls(background=background, rules=tuple(rules))

    def rules_for(self, layer_name: str, properties: Mapping[str, Any]) -> list[StyleRule]:
        """All rules matching a feature, in style order."""
        return [r for r in self.rules if r.matches(layer_name, properties)]

    # --- persistence ----------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return {
            "background": self.background.to_css(),
            "rules": [r.to_dict() for r in self.rules],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> VectorTileStyle:
        from tilestyle.parser.colors import parse_css_color

        background = data.get("background")
        return cls(
            background=parse_css_color(background) if background else DEFAULT_BACKGROUND,
            rules=tuple(StyleRule.from_dict(r) for r in data.get("rules", [])),
        )

    def save(self, path: Path) -> None:
        """Serialise to JSON and write to *path*."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.to_dict(), indent=2), encoding="utf-8")

    @classmethod
    def load(cls, path: Path) -> VectorTileStyle:
        return cls.from_dict(json.loads(path.read_text(encoding="utf-8")))
