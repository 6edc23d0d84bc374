"""
Spatial embedding - Assign grid coordinates to rooms by walking exits.

Each connected component is walked depth-first from its first room in input
order, accumulating direction vectors. A worklist of (room_id, position)
pairs stands in for recursion so large worlds cannot hit the stack limit.

Topologies that do not embed in a grid (a loop that doesn't close under
vector addition, two rooms both "east" of a third) are not rejected: the
later room is nudged off-grid by a fixed offset and the walk continues.
The nudged spot is not checked again.
"""

import logging
from typing import Iterable, Optional
from dataclasses import dataclass, field

from .world import GridPosition, ORIGIN, VisualEdge

logger = logging.getLogger(__name__)

DEFAULT_NUDGE = (0.5, 0.5, 0)


@dataclass
class Bounds:
    """Axis-aligned bounding box of a component on the grid."""
    min_x: float
    max_x: float
    min_y: float
    max_y: float
    min_z: int
    max_z: int

    @property
    def columns(self) -> float:
        return self.max_x - self.min_x + 1


@dataclass
class Component:
    """A connected group of rooms with its own grid origin."""
    index: int
    root: str
    room_ids: list[str] = field(default_factory=list)
    positions: dict[str, GridPosition] = field(default_factory=dict)
    collisions: int = 0

    def bounds(self) -> Bounds:
        xs = [p.x for p in self.positions.values()]
        ys = [p.y for p in self.positions.values()]
        zs = [p.z for p in self.positions.values()]
        return Bounds(min(xs), max(xs), min(ys), max(ys), min(zs), max(zs))

    def __len__(self) -> int:
        return len(self.room_ids)


@dataclass
class Embedding:
    """Grid positions for every embedded room, grouped by component."""
    components: list[Component] = field(default_factory=list)
    positions: dict[str, GridPosition] = field(default_factory=dict)

    @property
    def collisions(self) -> int:
        return sum(c.collisions for c in self.components)

    def component_of(self, room_id: str) -> Optional[int]:
        for component in self.components:
            if room_id in component.positions:
                return component.index
        return None


def _walk_component(
    component: Component,
    population: set[str],
    incident: dict[str, list[VisualEdge]],
    placed: dict[str, GridPosition],
    nudge: tuple[float, float, int],
) -> None:
    occupied: dict[tuple, str] = {}

    def place(room_id: str, position: GridPosition) -> None:
        placed[room_id] = position
        component.positions[room_id] = position
        component.room_ids.append(room_id)
        occupied.setdefault(position.as_tuple(), room_id)

    place(component.root, ORIGIN)
    stack: list[tuple[str, GridPosition]] = [(component.root, ORIGIN)]

    while stack:
        current_id, current_pos = stack.pop()

        for edge in incident.get(current_id, []):
            neighbor = edge.other_end(current_id)
            if neighbor not in population or neighbor in placed:
                continue

            dx, dy, dz = edge.direction.vector
            if current_id != edge.source:
                dx, dy, dz = -dx, -dy, -dz
            candidate = current_pos.offset(dx, dy, dz)

            occupant = occupied.get(candidate.as_tuple())
            if occupant is not None and occupant != neighbor:
                nudged = candidate.offset(*nudge)
                logger.debug(
                    f"Collision: {neighbor} wants {candidate.as_tuple()} held by {occupant}, "
                    f"nudged to {nudged.as_tuple()}"
                )
                candidate = nudged
                component.collisions += 1

            place(neighbor, candidate)
            stack.append((neighbor, candidate))


def embed_rooms(
    room_ids: Iterable[str],
    incident: dict[str, list[VisualEdge]],
    nudge: tuple[float, float, int] = DEFAULT_NUDGE,
) -> Embedding:
    """
    Embed every room in `room_ids` on the integer grid.

    Components are discovered in the order of `room_ids`; the first unplaced
    room of each becomes its root at (0, 0, 0). Edges leading to rooms
    outside `room_ids` are ignored.
    """
    order = list(room_ids)
    population = set(order)
    embedding = Embedding()

    for room_id in order:
        if room_id in embedding.positions:
            continue

        component = Component(index=len(embedding.components), root=room_id)
        _walk_component(component, population, incident, embedding.positions, nudge)
        embedding.components.append(component)

        logger.debug(
            f"Component {component.index}: root={room_id}, "
            f"{len(component)} rooms, {component.collisions} collisions"
        )

    return embedding
