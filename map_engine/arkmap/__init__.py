"""
Arkmap - World map layout engine

Turns a world's rooms and compass exits into grid coordinates, packed
pixel positions and per-floor render slices for the world editor.
"""

__version__ = "0.3.0"

from .directions import Direction, normalize_direction, vector_of, reverse_of
from .world import (
    Room,
    Exit,
    GridPosition,
    PixelPosition,
    RoomConnections,
    VisualEdge,
    PositionedRoom,
    WorldSnapshot,
    WorldDataError,
)
from .edges import ConsolidatedEdges, consolidate_edges
from .embedding import Component, Embedding, embed_rooms
from .packing import Spacing, ComponentPlacement, pack_components
from .layers import available_floors, slice_floor, split_manual
from .palette import (
    RegionColors,
    PaletteCache,
    InMemoryPaletteCache,
    RegionPalette,
    DEFAULT_PALETTE,
    normalize_region_name,
)
from .layout import LayoutConfig, LayoutResult, MapLayout, compute_layout

__all__ = [
    # Directions
    "Direction",
    "normalize_direction",
    "vector_of",
    "reverse_of",
    # Data model
    "Room",
    "Exit",
    "GridPosition",
    "PixelPosition",
    "RoomConnections",
    "VisualEdge",
    "PositionedRoom",
    "WorldSnapshot",
    "WorldDataError",
    # Pipeline stages
    "ConsolidatedEdges",
    "consolidate_edges",
    "Component",
    "Embedding",
    "embed_rooms",
    "Spacing",
    "ComponentPlacement",
    "pack_components",
    "available_floors",
    "slice_floor",
    "split_manual",
    # Region colours
    "RegionColors",
    "PaletteCache",
    "InMemoryPaletteCache",
    "RegionPalette",
    "DEFAULT_PALETTE",
    "normalize_region_name",
    # Orchestration
    "LayoutConfig",
    "LayoutResult",
    "MapLayout",
    "compute_layout",
]
