"""Tests for component packing and pixel projection."""

# Add the parent directory to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from arkmap.edges import consolidate_edges
from arkmap.embedding import Bounds, embed_rooms
from arkmap.packing import Spacing, pack_components, project_position
from arkmap.world import Exit, GridPosition, Room


SPACING = Spacing(column=240, row=160, layer=480, component_gap=200)


def project(room_ids, exits, spacing=SPACING):
    consolidated = consolidate_edges([Room(room_id=r) for r in room_ids], exits)
    embedding = embed_rooms(room_ids, consolidated.incident())
    return pack_components(embedding.components, spacing)


def pixels(projection):
    return {rid: (p.x, p.y) for rid, p in projection.pixels.items()}


class TestProjectPosition:
    """Tests for project_position."""

    def test_shifts_by_bounds_minimum(self):
        """Test the bounding-box minimum maps to the component offset."""
        bounds = Bounds(min_x=-2, max_x=0, min_y=-1, max_y=1, min_z=0, max_z=0)
        pixel = project_position(GridPosition(-2, -1, 0), bounds, 1000, SPACING)
        assert (pixel.x, pixel.y) == (1000, 0)

    def test_layer_adds_to_vertical_axis(self):
        """Test z shifts the room down by the layer spacing."""
        bounds = Bounds(min_x=0, max_x=0, min_y=0, max_y=0, min_z=-1, max_z=1)
        pixel = project_position(GridPosition(0, 0, 1), bounds, 0, SPACING)
        assert (pixel.x, pixel.y) == (0, 2 * 480)


class TestPackComponents:
    """Tests for pack_components."""

    def test_chain_normalised_to_origin(self):
        """Test a northward chain is shifted so its top row is y = 0."""
        projection = project(["A", "B"], [Exit("A", "B", "north")])

        assert pixels(projection) == {"A": (0, 160), "B": (0, 0)}

    def test_vertical_neighbour_separated(self):
        """Test a room upstairs projects a full layer below on screen."""
        projection = project(["A", "B"], [Exit("A", "B", "up")])

        assert pixels(projection) == {"A": (0, 0), "B": (0, 480)}

    def test_single_rooms_side_by_side(self):
        """Test isolated rooms are spaced by column width plus gap."""
        projection = project(["A", "B", "C"], [])

        assert pixels(projection) == {
            "A": (0, 0),
            "B": (240 + 200, 0),
            "C": (2 * (240 + 200), 0),
        }

    def test_components_do_not_overlap(self):
        """Test each component starts a full gap past the previous one."""
        projection = project(["A", "B", "C", "X", "Y"], [
            Exit("A", "B", "east"),
            Exit("B", "C", "east"),
            Exit("X", "Y", "west"),
        ])
        first, second = projection.placements

        assert first.offset_x == 0
        assert first.width == 3 * 240
        assert first.max_pixel_x == 2 * 240
        assert second.offset_x == first.width + 200

        p_max = max(projection.pixels[r].x for r in ("A", "B", "C"))
        q_min = min(projection.pixels[r].x for r in ("X", "Y"))
        assert p_max == first.max_pixel_x
        assert q_min >= p_max + SPACING.component_gap

    def test_discovery_order_drives_packing(self):
        """Test the component seen first in input order is packed first."""
        projection = project(["X", "A", "Y", "B"], [
            Exit("A", "B", "east"),
            Exit("X", "Y", "east"),
        ])

        assert projection.pixels["X"].x == 0
        assert projection.pixels["A"].x == 2 * 240 + 200

    def test_nudged_room_widens_component(self):
        """Test a fractional x still counts towards the component width."""
        projection = project(["A", "B", "C", "Z"], [
            Exit("A", "B", "east"),
            Exit("A", "C", "east"),
        ])
        placement = projection.placements[0]

        assert placement.bounds.max_x == 1.5
        assert placement.width == 2.5 * 240
        assert projection.pixels["C"].x == 1.5 * 240
        assert projection.pixels["C"].y == 0.5 * 160
        assert projection.pixels["Z"].x == 2.5 * 240 + 200

    def test_custom_spacing(self):
        """Test spacing constants flow into pixel positions."""
        spacing = Spacing(column=100, row=50, layer=10, component_gap=7)
        projection = project(["A", "B", "C"], [Exit("A", "B", "southeast")], spacing=spacing)

        assert pixels(projection) == {
            "A": (0, 0),
            "B": (100, 50),
            "C": (2 * 100 + 7, 0),
        }
