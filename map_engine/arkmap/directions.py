"""
Directions - Canonical exit direction vocabulary for world map layout.

This module provides:
- The 10 canonical directions (8 compass points plus up/down)
- Alias resolution for free-form exit verbs ("n", "go north", "enter", ...)
- Unit displacement vectors on the (x, y, z) grid
- The reverse-direction table

Grid convention: north decreases y, east increases x, up increases z.
"""

import re
import logging
from typing import Optional, Union
from enum import Enum

logger = logging.getLogger(__name__)


class Direction(Enum):
    """Canonical exit directions."""
    NORTH = "north"
    SOUTH = "south"
    EAST = "east"
    WEST = "west"
    NORTHEAST = "northeast"
    NORTHWEST = "northwest"
    SOUTHEAST = "southeast"
    SOUTHWEST = "southwest"
    UP = "up"
    DOWN = "down"

    @classmethod
    def from_string(cls, direction: Union[str, "Direction", None]) -> Optional["Direction"]:
        """Convert a raw exit verb to a Direction, or None if unrecognised."""
        return normalize_direction(direction)

    @property
    def vector(self) -> tuple[int, int, int]:
        return VECTORS[self]

    @property
    def opposite(self) -> "Direction":
        return REVERSE[self]

    @property
    def is_vertical(self) -> bool:
        return self in (Direction.UP, Direction.DOWN)


VECTORS: dict[Direction, tuple[int, int, int]] = {
    Direction.NORTH: (0, -1, 0),
    Direction.SOUTH: (0, 1, 0),
    Direction.EAST: (1, 0, 0),
    Direction.WEST: (-1, 0, 0),
    Direction.NORTHEAST: (1, -1, 0),
    Direction.NORTHWEST: (-1, -1, 0),
    Direction.SOUTHEAST: (1, 1, 0),
    Direction.SOUTHWEST: (-1, 1, 0),
    Direction.UP: (0, 0, 1),
    Direction.DOWN: (0, 0, -1),
}

REVERSE: dict[Direction, Direction] = {
    Direction.NORTH: Direction.SOUTH,
    Direction.SOUTH: Direction.NORTH,
    Direction.EAST: Direction.WEST,
    Direction.WEST: Direction.EAST,
    Direction.NORTHEAST: Direction.SOUTHWEST,
    Direction.SOUTHWEST: Direction.NORTHEAST,
    Direction.NORTHWEST: Direction.SOUTHEAST,
    Direction.SOUTHEAST: Direction.NORTHWEST,
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
}

# Keys are already stripped of non-letters, so "north_east" and "north-east"
# both arrive here as "northeast".
ALIASES: dict[str, Direction] = {
    "n": Direction.NORTH,
    "s": Direction.SOUTH,
    "e": Direction.EAST,
    "w": Direction.WEST,
    "ne": Direction.NORTHEAST,
    "nw": Direction.NORTHWEST,
    "se": Direction.SOUTHEAST,
    "sw": Direction.SOUTHWEST,
    "u": Direction.UP,
    "d": Direction.DOWN,
    "in": Direction.UP,
    "enter": Direction.UP,
    "out": Direction.DOWN,
    "exit": Direction.DOWN,
    **{d.value: d for d in Direction},
}

_NON_LETTERS = re.compile(r"[^a-z]")


def normalize_direction(raw: Union[str, Direction, None]) -> Optional[Direction]:
    """
    Resolve a raw exit verb to its canonical Direction.

    Lowercases, trims and collapses whitespace, keeps the last token
    ("go north" -> "north"), strips non-letters, then consults ALIASES.
    Returns None for anything unrecognised; callers pick the fallback.
    """
    if raw is None:
        return None
    if isinstance(raw, Direction):
        return raw

    tokens = str(raw).lower().split()
    if not tokens:
        return None

    key = _NON_LETTERS.sub("", tokens[-1])
    return ALIASES.get(key)


def vector_of(direction: Direction) -> tuple[int, int, int]:
    """Unit displacement for a direction."""
    return VECTORS[direction]


def reverse_of(direction: Direction) -> Direction:
    """Opposite direction (north <-> south, up <-> down, ...)."""
    return REVERSE[direction]
