"""
Region palette - Border/font/accent colours per region.

Colours come from an injected append-only cache keyed by normalised region
name. Regions with no cached entry get a default palette entry, cycled in
the order regions are first seen, and that choice is written back so the
region keeps its colour on later layouts.
"""

import re
import logging
from typing import Optional, Protocol
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegionColors:
    """Colour scheme for a region."""
    border_color: str
    font_color: str
    accent_color: str

    def to_dict(self) -> dict:
        return {
            "border_color": self.border_color,
            "font_color": self.font_color,
            "accent_color": self.accent_color,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "RegionColors":
        """Accepts snake_case or the stored color_scheme shape (borderColor, fontColor, accent)."""
        return cls(
            border_color=data.get("border_color") or data["borderColor"],
            font_color=data.get("font_color") or data["fontColor"],
            accent_color=data.get("accent_color") or data.get("accentColor") or data["accent"],
        )


def hex_to_rgb(color: str) -> Optional[tuple[int, int, int]]:
    match = re.fullmatch(r"#?([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})", color.strip())
    if not match:
        return None
    return tuple(int(part, 16) for part in match.groups())


def lighten_color(color: str, percent: float = 40) -> str:
    """Blend a hex colour towards white by `percent`."""
    rgb = hex_to_rgb(color)
    if rgb is None:
        return "#e0f2fe"
    r, g, b = (min(255, int(c + (255 - c) * (percent / 100))) for c in rgb)
    return f"#{r:02x}{g:02x}{b:02x}"


def colors_from_border(border_color: str) -> RegionColors:
    """Derive a full scheme from a border colour."""
    rgb = hex_to_rgb(border_color)
    accent = f"rgba({rgb[0]}, {rgb[1]}, {rgb[2]}, 0.14)" if rgb else "rgba(56, 189, 248, 0.14)"
    return RegionColors(
        border_color=border_color,
        font_color=lighten_color(border_color, 85),
        accent_color=accent,
    )


DEFAULT_PALETTE: tuple[RegionColors, ...] = tuple(
    colors_from_border(c) for c in (
        "#38bdf8",  # cyan
        "#ec4899",  # pink
        "#a855f7",  # purple
        "#f472b6",  # hot pink
        "#10b981",  # green
        "#6366f1",  # indigo
        "#fbbf24",  # amber
        "#fb923c",  # orange
    )
)


def normalize_region_name(name: Optional[str]) -> str:
    """Cache key for a region name."""
    key = " ".join((name or "").lower().split())
    return key or "unknown"


class PaletteCache(Protocol):
    """Append-only region colour store. Entries never change once set."""

    def get(self, key: str) -> Optional[RegionColors]: ...

    def set_if_absent(self, key: str, colors: RegionColors) -> RegionColors: ...


class InMemoryPaletteCache:
    """Process-local PaletteCache."""

    def __init__(self, initial: Optional[dict[str, RegionColors]] = None):
        self._entries: dict[str, RegionColors] = {}
        for key, colors in (initial or {}).items():
            self._entries[normalize_region_name(key)] = colors

    def get(self, key: str) -> Optional[RegionColors]:
        return self._entries.get(key)

    def set_if_absent(self, key: str, colors: RegionColors) -> RegionColors:
        # dict.setdefault is atomic, so concurrent writers agree on one value
        return self._entries.setdefault(key, colors)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries


class RegionPalette:
    """Resolves colours for the regions of a single layout run."""

    def __init__(self, cache: Optional[PaletteCache] = None):
        self.cache = cache if cache is not None else InMemoryPaletteCache()
        self._first_seen: dict[str, int] = {}

    def colors_for(self, region: Optional[str]) -> RegionColors:
        key = normalize_region_name(region)
        if key not in self._first_seen:
            self._first_seen[key] = len(self._first_seen)

        cached = self.cache.get(key)
        if cached is not None:
            return cached

        fallback = DEFAULT_PALETTE[self._first_seen[key] % len(DEFAULT_PALETTE)]
        logger.debug(f"No colours cached for region {key!r}, using default #{self._first_seen[key]}")
        return self.cache.set_if_absent(key, fallback)
