"""
World - Data model consumed and produced by the layout engine.

This module provides:
- Room and Exit records as handed over by the world editor's CRUD layer
- Grid and pixel position value types
- Visual (consolidated) edges and per-room connection maps
- WorldSnapshot for loading/saving a rooms+exits snapshot as JSON

Records accept both the snake_case field names used here and the camelCase
names the web editor sends.
"""

import json
import logging
from typing import Optional, Any
from dataclasses import dataclass, field
from pathlib import Path

from .directions import Direction
from .palette import RegionColors

logger = logging.getLogger(__name__)


class WorldDataError(ValueError):
    """A room or exit record is missing a required field."""


def _first_present(data: dict, *keys: str) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


@dataclass(frozen=True)
class PixelPosition:
    """Final render coordinate."""
    x: float
    y: float

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict) -> "PixelPosition":
        try:
            return cls(x=float(data["x"]), y=float(data["y"]))
        except (KeyError, TypeError, ValueError) as e:
            raise WorldDataError(f"Invalid pixel position {data!r}") from e


@dataclass(frozen=True)
class GridPosition:
    """
    Grid coordinate assigned during embedding.

    x/y are None for manually placed rooms, which never enter the grid.
    x/y may be fractional after a collision nudge; z is always integral.
    """
    x: Optional[float]
    y: Optional[float]
    z: int = 0

    def offset(self, dx: float, dy: float, dz: int) -> "GridPosition":
        return GridPosition(self.x + dx, self.y + dy, self.z + dz)

    def as_tuple(self) -> tuple:
        return (self.x, self.y, self.z)

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y, "z": self.z}


ORIGIN = GridPosition(0, 0, 0)

_ROOM_FIELDS = {
    "room_id", "id", "name", "region", "region_name", "regionName",
    "manual_position", "manualPosition",
}


@dataclass
class Room:
    """A location in the world, as stored by the editor."""
    room_id: str
    name: str = ""
    region: Optional[str] = None

    # Presence of a manual position opts the room out of automatic layout
    manual_position: Optional[PixelPosition] = None

    # Anything else the editor sent along (description, image_url, ...)
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def has_manual_position(self) -> bool:
        return self.manual_position is not None

    def to_dict(self) -> dict:
        return {
            **self.data,
            "id": self.room_id,
            "name": self.name,
            "region": self.region,
            "manual_position": self.manual_position.to_dict() if self.manual_position else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Room":
        room_id = _first_present(data, "room_id", "id")
        if room_id is None:
            raise WorldDataError(f"Room record has no id: {data!r}")

        manual = _first_present(data, "manual_position", "manualPosition")
        extra = {k: v for k, v in data.items() if k not in _ROOM_FIELDS}

        return cls(
            room_id=str(room_id),
            name=data.get("name") or "",
            region=_first_present(data, "region_name", "regionName", "region"),
            manual_position=PixelPosition.from_dict(manual) if manual else None,
            data=extra,
        )


@dataclass
class Exit:
    """A directed exit from one room to another. Not necessarily paired."""
    from_room: str
    to_room: str
    verb: str = ""

    def __post_init__(self):
        if self.verb is None:
            self.verb = ""

    def to_dict(self) -> dict:
        return {"from_room": self.from_room, "to_room": self.to_room, "verb": self.verb}

    @classmethod
    def from_dict(cls, data: dict) -> "Exit":
        from_room = _first_present(data, "from_room", "from_room_id", "fromRoomId")
        to_room = _first_present(data, "to_room", "to_room_id", "toRoomId")
        if from_room is None or to_room is None:
            raise WorldDataError(f"Exit record is missing an endpoint: {data!r}")

        verb = _first_present(data, "verb", "verbString", "direction") or ""
        return cls(from_room=str(from_room), to_room=str(to_room), verb=str(verb))


@dataclass
class RoomConnections:
    """
    Which compass handles of a room are occupied.

    outgoing maps direction -> target room id (this room is the edge source);
    incoming maps direction -> source room id, keyed by the reverse of the
    edge direction so it names the side of this room the edge attaches to.
    """
    outgoing: dict[str, str] = field(default_factory=dict)
    incoming: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "outgoing": {d: {"target_id": rid} for d, rid in self.outgoing.items()},
            "incoming": {d: {"source_id": rid} for d, rid in self.incoming.items()},
        }


@dataclass
class VisualEdge:
    """One display edge per unordered room pair."""
    edge_id: str
    source: str
    target: str
    direction: Direction
    labels: list[str] = field(default_factory=list)

    @property
    def display_label(self) -> str:
        return " / ".join(self.labels)

    def other_end(self, room_id: str) -> str:
        return self.target if room_id == self.source else self.source

    def to_dict(self) -> dict:
        return {
            "id": self.edge_id,
            "source_room_id": self.source,
            "target_room_id": self.target,
            "direction": self.direction.value,
            "label": self.display_label,
        }


@dataclass
class WorldSnapshot:
    """Rooms and exits as fetched together from the editor's store."""
    rooms: list[Room] = field(default_factory=list)
    exits: list[Exit] = field(default_factory=list)
    selected_floor: int = 0

    def to_dict(self) -> dict:
        return {
            "rooms": [r.to_dict() for r in self.rooms],
            "exits": [e.to_dict() for e in self.exits],
            "selected_floor": self.selected_floor,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "WorldSnapshot":
        return cls(
            rooms=[Room.from_dict(r) for r in data.get("rooms", [])],
            exits=[Exit.from_dict(e) for e in data.get("exits", [])],
            selected_floor=int(_first_present(data, "selected_floor", "selectedFloor", "floor") or 0),
        )

    def save_json(self, path: str | Path) -> None:
        """Save snapshot to JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

        logger.info(f"Saved snapshot to {path} ({len(self.rooms)} rooms, {len(self.exits)} exits)")

    @classmethod
    def load_json(cls, path: str | Path) -> "WorldSnapshot":
        """Load snapshot from JSON file."""
        path = Path(path)

        with open(path) as f:
            data = json.load(f)

        snapshot = cls.from_dict(data)
        logger.info(f"Loaded snapshot from {path} ({len(snapshot.rooms)} rooms)")
        return snapshot


@dataclass
class PositionedRoom:
    """A room annotated with its computed layout, ready to render."""
    room: Room
    grid: GridPosition
    pixel: PixelPosition
    connections: RoomConnections = field(default_factory=RoomConnections)
    colors: Optional[RegionColors] = None

    @property
    def room_id(self) -> str:
        return self.room.room_id

    @property
    def floor(self) -> int:
        return self.grid.z

    @property
    def is_manual(self) -> bool:
        return self.room.has_manual_position

    def to_dict(self) -> dict:
        return {
            **self.room.to_dict(),
            "pixel_position": self.pixel.to_dict(),
            "grid_coordinates": self.grid.to_dict(),
            "connections": self.connections.to_dict(),
            "colors": self.colors.to_dict() if self.colors else None,
        }
