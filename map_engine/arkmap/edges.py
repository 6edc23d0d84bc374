"""
Edge consolidation - Turn raw directed exits into one visual edge per room pair.
"""

import logging
from typing import Iterable, Optional
from dataclasses import dataclass, field

from .directions import Direction, normalize_direction, reverse_of
from .world import Exit, Room, RoomConnections, VisualEdge

logger = logging.getLogger(__name__)


@dataclass
class ConsolidatedEdges:
    """Result of consolidating a world's exits."""
    edges: list[VisualEdge] = field(default_factory=list)
    connections: dict[str, RoomConnections] = field(default_factory=dict)
    dropped_exits: int = 0
    defaulted_edges: int = 0

    def incident(self) -> dict[str, list[VisualEdge]]:
        """Index edges by room id (both endpoints), preserving edge order."""
        index: dict[str, list[VisualEdge]] = {}
        for edge in self.edges:
            index.setdefault(edge.source, []).append(edge)
            if edge.target != edge.source:
                index.setdefault(edge.target, []).append(edge)
        return index


def pair_key(a: str, b: str) -> tuple[str, str]:
    """Order-independent key for a room pair."""
    return (a, b) if a <= b else (b, a)


def _first_direction(exits: list[Exit], from_room: str) -> Optional[Direction]:
    for ex in exits:
        if ex.from_room == from_room:
            direction = normalize_direction(ex.verb)
            if direction is not None:
                return direction
    return None


def choose_direction(
    first: str,
    second: str,
    exits: list[Exit],
    default: Direction = Direction.EAST,
) -> tuple[Direction, str, str, bool]:
    """
    Pick the canonical direction for a room pair.

    Priority:
      1. the direction recorded leaving `first`
      2. the reverse of the direction recorded leaving `second`
      3. `default`

    Every exit in a pair group leaves one of the two endpoints, so once
    steps 1 and 2 fail no raw verb in the group normalizes either.

    Returns (direction, source, target, defaulted).
    """
    direction = _first_direction(exits, first)
    if direction is not None:
        return direction, first, second, False

    direction = _first_direction(exits, second)
    if direction is not None:
        return reverse_of(direction), first, second, False

    return default, first, second, True


def consolidate_edges(
    rooms: Iterable[Room],
    exits: Iterable[Exit],
    default_direction: Direction = Direction.EAST,
) -> ConsolidatedEdges:
    """
    Group exits by unordered room pair and emit one VisualEdge per pair.

    Exits whose endpoints are not in `rooms` are dropped. Also fills the
    per-room outgoing/incoming connection maps.
    """
    known = {room.room_id for room in rooms}
    result = ConsolidatedEdges(connections={rid: RoomConnections() for rid in known})

    groups: dict[tuple[str, str], list[Exit]] = {}
    for ex in exits:
        if ex.from_room not in known or ex.to_room not in known:
            logger.debug(f"Dropping exit {ex.from_room} -> {ex.to_room} ({ex.verb!r}): unknown room")
            result.dropped_exits += 1
            continue
        groups.setdefault(pair_key(ex.from_room, ex.to_room), []).append(ex)

    for (first, second), group in groups.items():
        direction, source, target, defaulted = choose_direction(
            first, second, group, default=default_direction
        )
        if defaulted:
            result.defaulted_edges += 1
            logger.debug(
                f"No recognisable direction between {first} and {second} "
                f"(verbs: {[ex.verb for ex in group]}), using {direction.value}"
            )

        labels = []
        for ex in group:
            verb = (ex.verb or "").strip()
            if verb and verb not in labels:
                labels.append(verb)

        result.edges.append(VisualEdge(
            edge_id=f"edge-{first}-{second}",
            source=source,
            target=target,
            direction=direction,
            labels=labels,
        ))

        result.connections[source].outgoing[direction.value] = target
        result.connections[target].incoming[reverse_of(direction).value] = source

    return result
