"""
Layers - Floor slicing and manual position overrides.
"""

import logging
from typing import Iterable

from .world import GridPosition, PositionedRoom, Room, VisualEdge

logger = logging.getLogger(__name__)

MANUAL_FLOOR = 0


def split_manual(rooms: Iterable[Room]) -> tuple[list[Room], list[Room]]:
    """Partition rooms into (auto-laid-out, manually placed), keeping order."""
    auto, manual = [], []
    for room in rooms:
        (manual if room.has_manual_position else auto).append(room)
    return auto, manual


def manual_grid_position() -> GridPosition:
    """Grid coordinates reported for a manually placed room: no x/y, floor 0."""
    return GridPosition(None, None, MANUAL_FLOOR)


def available_floors(rooms: Iterable[PositionedRoom]) -> list[int]:
    """Distinct floors present, highest first."""
    return sorted({int(room.floor or 0) for room in rooms}, reverse=True)


def slice_floor(
    rooms: Iterable[PositionedRoom],
    edges: Iterable[VisualEdge],
    floor: int,
) -> tuple[list[PositionedRoom], list[VisualEdge]]:
    """
    Keep only rooms on `floor` and edges with both endpoints on it.

    Vertical exits always join two different floors, so they never survive.
    """
    visible = [room for room in rooms if (room.floor or 0) == floor]
    visible_ids = {room.room_id for room in visible}
    visible_edges = [
        edge for edge in edges
        if edge.source in visible_ids and edge.target in visible_ids
    ]
    logger.debug(f"Floor {floor}: {len(visible)} rooms, {len(visible_edges)} edges")
    return visible, visible_edges
