"""
Map View - Terminal preview of a world layout.

Loads a rooms+exits snapshot (JSON), runs the layout and prints the floor
list, a grid sketch of the selected floor and a rooms table.
"""

import sys
import logging
from typing import Optional
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from rich.console import Console
from rich.panel import Panel
from rich.text import Text
from rich.table import Table
from rich.markup import escape
from rich import box

from .layout import LayoutConfig, LayoutResult, MapLayout
from .palette import InMemoryPaletteCache
from .world import PositionedRoom, WorldDataError, WorldSnapshot

logger = logging.getLogger(__name__)


@dataclass
class ViewConfig:
    """Map view options."""
    snapshot_path: str = ""
    floor: Optional[int] = None
    all_floors: bool = False
    cell_width: int = 6
    show_table: bool = True


class MapViewer:
    """Renders MapLayout floors to a rich console."""

    COLORS = {
        "primary": "#38bdf8",
        "secondary": "#6366f1",
        "accent": "#a855f7",
        "muted": "#696969",
        "warning": "#fbbf24",
        "error": "#f87171",
        "success": "#10b981",
    }

    def __init__(self, layout: MapLayout, console: Optional[Console] = None, config: Optional[ViewConfig] = None):
        self.layout = layout
        self.console = console or Console(highlight=False)
        self.config = config or ViewConfig()

    def _label(self, room: PositionedRoom) -> str:
        name = room.room.name or room.room_id
        return name[: self.config.cell_width - 1]

    def _print_floors(self, selected: int) -> None:
        parts = []
        for z in self.layout.floors:
            if z == selected:
                parts.append(f"[bold {self.COLORS['primary']}]{escape(f'[{z}]')}[/]")
            else:
                parts.append(f"[{self.COLORS['muted']}]{z}[/]")
        self.console.print(f"Floors: {' '.join(parts) or '[dim]none[/]'}")

    def render_grid(self, result: LayoutResult) -> Text:
        """Sketch the floor as a character grid, one cell per spacing step."""
        config = self.layout.config
        cells: dict[tuple[int, int], list[PositionedRoom]] = {}
        for room in result.rooms:
            col = round(room.pixel.x / config.column_spacing)
            row = round(room.pixel.y / config.row_spacing)
            cells.setdefault((col, row), []).append(room)

        text = Text()
        if not cells:
            return text

        cols = [c for c, _ in cells]
        rows = [r for _, r in cells]
        width = self.config.cell_width
        for row in range(min(rows), max(rows) + 1):
            for col in range(min(cols), max(cols) + 1):
                occupants = cells.get((col, row))
                if not occupants:
                    text.append("·".ljust(width), style=self.COLORS["muted"])
                    continue
                room = occupants[0]
                label = self._label(room) if len(occupants) == 1 else f"{len(occupants)}x"
                style = room.colors.border_color if room.colors else "white"
                if room.is_manual:
                    style += " italic"
                text.append(label.ljust(width), style=style)
            text.append("\n")
        return text

    def _rooms_table(self, result: LayoutResult) -> Table:
        table = Table(
            title=f"[bold]Rooms on floor {result.selected_floor}[/bold]",
            box=box.ROUNDED,
            border_style=self.COLORS["secondary"],
        )

        table.add_column("Room", style=self.COLORS["primary"])
        table.add_column("Region", style=self.COLORS["accent"])
        table.add_column("Grid", style="white")
        table.add_column("Pixel", style="white")
        table.add_column("Exits", style=self.COLORS["muted"])

        for room in result.rooms:
            grid = room.grid
            grid_str = "manual" if room.is_manual else f"{grid.x:g},{grid.y:g},{grid.z}"
            exits = sorted(set(room.connections.outgoing) | set(room.connections.incoming))
            region_style = room.colors.border_color if room.colors else "white"
            table.add_row(
                escape((room.room.name or room.room_id)[:30]),
                f"[{region_style}]{escape(room.room.region or 'Unknown')}[/]",
                grid_str,
                f"{room.pixel.x:g},{room.pixel.y:g}",
                ", ".join(exits),
            )
        return table

    def show_floor(self, z: int) -> LayoutResult:
        result = self.layout.floor(z)

        self._print_floors(z)
        self.console.print(Panel(
            self.render_grid(result),
            title=f"Floor {z}",
            border_style=self.COLORS["secondary"],
            box=box.ROUNDED,
        ))
        if self.config.show_table and result.rooms:
            self.console.print(self._rooms_table(result))
        self.console.print(
            f"[{self.COLORS['muted']}]{len(result.rooms)} rooms, {len(result.edges)} edges on this floor[/]"
        )
        return result

    def show_stats(self) -> None:
        table = Table(
            title="[bold]Layout[/bold]",
            box=box.ROUNDED,
            border_style=self.COLORS["secondary"],
        )
        table.add_column("Property", style=self.COLORS["accent"])
        table.add_column("Value", style="white")

        stats = self.layout.get_stats()
        for key, value in stats.items():
            if key == "collisions" and value:
                value = f"[{self.COLORS['warning']}]{value}[/]"
            table.add_row(key, str(value))

        self.console.print(table)

    def run(self) -> None:
        self.show_stats()
        if self.config.all_floors:
            for z in self.layout.floors:
                self.show_floor(z)
            return

        floor = self.config.floor
        if floor is None:
            floor = 0 if 0 in self.layout.floors or not self.layout.floors else self.layout.floors[0]
        self.show_floor(floor)


def main(argv: Optional[list[str]] = None) -> int:
    """Entry point for the map viewer."""
    import argparse

    load_dotenv()

    parser = argparse.ArgumentParser(description="Preview a world map layout in the terminal")
    parser.add_argument("snapshot", help="JSON file with rooms and exits")
    parser.add_argument("--floor", "-f", type=int, help="Floor to show (default: 0)")
    parser.add_argument("--all-floors", "-a", action="store_true", help="Show every floor")
    parser.add_argument("--no-table", action="store_true", help="Skip the rooms table")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log layout details")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    console = Console(highlight=False)
    try:
        snapshot = WorldSnapshot.load_json(Path(args.snapshot))
    except FileNotFoundError:
        console.print(f"[#f87171]Snapshot not found: {escape(args.snapshot)}[/]")
        return 1
    except (WorldDataError, ValueError) as e:
        console.print(f"[#f87171]Invalid snapshot: {escape(str(e))}[/]")
        return 1

    layout = MapLayout(
        snapshot.rooms,
        snapshot.exits,
        palette=InMemoryPaletteCache(),
        config=LayoutConfig.from_env(),
    )
    config = ViewConfig(
        snapshot_path=args.snapshot,
        floor=args.floor if args.floor is not None else snapshot.selected_floor,
        all_floors=args.all_floors,
        show_table=not args.no_table,
    )
    MapViewer(layout, console=console, config=config).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
