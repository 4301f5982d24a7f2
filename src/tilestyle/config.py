from __future__ import annotations

from dataclasses import dataclass

from tilestyle.model.color import Color
from tilestyle.model.style import DEFAULT_BACKGROUND

# Latin first, then Arabic, Hebrew and CJK fallbacks.
DEFAULT_FONT_FAMILY: tuple[str, ...] = (
    "Noto Sans",
    "Noto Sans Arabic",
    "Noto Sans Hebrew",
    "Noto Sans SC",
    "Noto Sans KR",
    "Noto Sans JP",
)


@dataclass(frozen=True)
class StyleConfig:
    font_family: tuple[str, ...] = DEFAULT_FONT_FAMILY
    default_background: Color = DEFAULT_BACKGROUND
    debounce_interval: float = 0.1  # seconds
    halo_width_scale: float = 2.0  # ESS halo width -> label outline width


DEFAULT_CONFIG = StyleConfig()
