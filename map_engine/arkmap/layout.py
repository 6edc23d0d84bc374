"""
Map Layout - Rooms and exits in, positioned rooms and edges out.

Pipeline:
- Consolidate exits into one visual edge per room pair
- Embed non-manual rooms on the grid, one component at a time
- Pack components side by side and project to pixels
- Reinsert manually placed rooms at their stored pixel position
- Slice to the selected floor

Every call recomputes from scratch; the only state that outlives a call is
the injected region palette cache.
"""

import os
import math
import logging
from typing import Optional, Any, Iterable, Union
from dataclasses import dataclass, field

from .directions import Direction, normalize_direction
from .edges import ConsolidatedEdges, consolidate_edges
from .embedding import DEFAULT_NUDGE, Embedding, embed_rooms
from .layers import available_floors, manual_grid_position, slice_floor, split_manual
from .packing import Projection, Spacing, pack_components
from .palette import PaletteCache, RegionPalette
from .world import Exit, PositionedRoom, Room, RoomConnections, VisualEdge

logger = logging.getLogger(__name__)

ENV_PREFIX = "ARKMAP_"


@dataclass
class LayoutConfig:
    """Layout tuning knobs."""
    column_spacing: float = 240
    row_spacing: float = 160
    layer_spacing: float = 480
    component_gap: float = 200
    default_direction: Direction = Direction.EAST
    collision_nudge: tuple[float, float, int] = DEFAULT_NUDGE

    @property
    def spacing(self) -> Spacing:
        return Spacing(
            column=self.column_spacing,
            row=self.row_spacing,
            layer=self.layer_spacing,
            component_gap=self.component_gap,
        )

    @classmethod
    def from_env(cls) -> "LayoutConfig":
        """
        Build a config from ARKMAP_* environment variables.

        Entry points call load_dotenv() first so a .env file can supply them.
        Unparseable values fall back to the default with a warning, as do
        spacings that are not finite and positive (the gap may be 0).
        """
        config = cls()
        for name in ("column_spacing", "row_spacing", "layer_spacing", "component_gap"):
            key = f"{ENV_PREFIX}{name.upper()}"
            raw = os.getenv(key)
            if raw is None or raw == "":
                continue
            try:
                value = float(raw)
            except ValueError:
                logger.warning(f"Ignoring {key}={raw!r}: not a number")
                continue

            minimum_ok = value >= 0 if name == "component_gap" else value > 0
            if not math.isfinite(value) or not minimum_ok:
                logger.warning(f"Ignoring {key}={raw!r}: out of range")
                continue
            setattr(config, name, value)

        raw_direction = os.getenv(f"{ENV_PREFIX}DEFAULT_DIRECTION")
        if raw_direction:
            direction = normalize_direction(raw_direction)
            if direction is None:
                logger.warning(f"Ignoring {ENV_PREFIX}DEFAULT_DIRECTION={raw_direction!r}: unknown direction")
            else:
                config.default_direction = direction

        return config

    def to_dict(self) -> dict:
        return {
            "column_spacing": self.column_spacing,
            "row_spacing": self.row_spacing,
            "layer_spacing": self.layer_spacing,
            "component_gap": self.component_gap,
            "default_direction": self.default_direction.value,
            "collision_nudge": list(self.collision_nudge),
        }


@dataclass
class LayoutResult:
    """Renderable slice of a layout."""
    rooms: list[PositionedRoom] = field(default_factory=list)
    edges: list[VisualEdge] = field(default_factory=list)
    floors: list[int] = field(default_factory=list)
    selected_floor: int = 0
    collisions: int = 0
    component_count: int = 0

    def room(self, room_id: str) -> Optional[PositionedRoom]:
        for positioned in self.rooms:
            if positioned.room_id == room_id:
                return positioned
        return None

    def to_dict(self) -> dict:
        return {
            "rooms": [r.to_dict() for r in self.rooms],
            "edges": [e.to_dict() for e in self.edges],
            "floors": list(self.floors),
            "selected_floor": self.selected_floor,
            "collisions": self.collisions,
            "component_count": self.component_count,
        }


RoomLike = Union[Room, dict]
ExitLike = Union[Exit, dict]


def _coerce_rooms(rooms: Iterable[RoomLike]) -> list[Room]:
    result: list[Room] = []
    seen: set[str] = set()
    for raw in rooms:
        room = raw if isinstance(raw, Room) else Room.from_dict(raw)
        if room.room_id in seen:
            logger.warning(f"Duplicate room id {room.room_id}, keeping the first")
            continue
        seen.add(room.room_id)
        result.append(room)
    return result


class MapLayout:
    """
    Full (unsliced) layout of a world.

    Holds every positioned room so callers can switch floors without
    recomputing.
    """

    def __init__(
        self,
        rooms: Iterable[RoomLike],
        exits: Iterable[ExitLike],
        palette: Optional[PaletteCache] = None,
        config: Optional[LayoutConfig] = None,
    ):
        self.config = config or LayoutConfig()
        self.rooms: list[Room] = _coerce_rooms(rooms)
        self.exits: list[Exit] = [e if isinstance(e, Exit) else Exit.from_dict(e) for e in exits]
        self.palette = RegionPalette(palette)

        self.consolidated: ConsolidatedEdges = ConsolidatedEdges()
        self.embedding: Embedding = Embedding()
        self.projection: Projection = Projection()
        self.positioned: list[PositionedRoom] = []
        self.floors: list[int] = []

        self._compute()

    @property
    def edges(self) -> list[VisualEdge]:
        return self.consolidated.edges

    @property
    def collisions(self) -> int:
        return self.embedding.collisions

    def _compute(self) -> None:
        self.consolidated = consolidate_edges(
            self.rooms, self.exits, default_direction=self.config.default_direction
        )

        auto, manual = split_manual(self.rooms)
        self.embedding = embed_rooms(
            (room.room_id for room in auto),
            self.consolidated.incident(),
            nudge=self.config.collision_nudge,
        )
        self.projection = pack_components(self.embedding.components, self.config.spacing)

        self.positioned = []
        for room in self.rooms:
            if room.has_manual_position:
                grid, pixel = manual_grid_position(), room.manual_position
            else:
                grid = self.embedding.positions[room.room_id]
                pixel = self.projection.pixels[room.room_id]

            self.positioned.append(PositionedRoom(
                room=room,
                grid=grid,
                pixel=pixel,
                connections=self.consolidated.connections.get(room.room_id, RoomConnections()),
                colors=self.palette.colors_for(room.region),
            ))

        self.floors = available_floors(self.positioned)

        logger.info(
            f"Layout: {len(self.rooms)} rooms ({len(manual)} manual), "
            f"{len(self.edges)} edges, {len(self.embedding.components)} components, "
            f"{self.collisions} collisions, floors {self.floors}"
        )
        if self.consolidated.dropped_exits:
            logger.info(f"Dropped {self.consolidated.dropped_exits} exits referencing unknown rooms")

    def floor(self, z: int = 0) -> LayoutResult:
        """Slice the layout down to one floor."""
        rooms, edges = slice_floor(self.positioned, self.edges, z)
        return LayoutResult(
            rooms=rooms,
            edges=edges,
            floors=list(self.floors),
            selected_floor=z,
            collisions=self.collisions,
            component_count=len(self.embedding.components),
        )

    def get_stats(self) -> dict[str, Any]:
        return {
            "total_rooms": len(self.rooms),
            "manual_rooms": sum(1 for r in self.rooms if r.has_manual_position),
            "total_exits": len(self.exits),
            "visual_edges": len(self.edges),
            "dropped_exits": self.consolidated.dropped_exits,
            "defaulted_edges": self.consolidated.defaulted_edges,
            "components": len(self.embedding.components),
            "collisions": self.collisions,
            "floors": list(self.floors),
        }


def compute_layout(
    rooms: Iterable[RoomLike],
    exits: Iterable[ExitLike],
    floor: int = 0,
    palette: Optional[PaletteCache] = None,
    config: Optional[LayoutConfig] = None,
) -> LayoutResult:
    """Lay out a world and return the slice for `floor`."""
    return MapLayout(rooms, exits, palette=palette, config=config).floor(floor)
