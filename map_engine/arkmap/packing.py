"""
Component packing and projection - Grid coordinates to pixel coordinates.

Components are laid out left to right in discovery order. Within a
component the bounding-box minimum maps to the component's own offset;
z contributes to the vertical pixel axis so floors separate visually even
before slicing.
"""

import logging
from dataclasses import dataclass, field

from .embedding import Bounds, Component
from .world import GridPosition, PixelPosition

logger = logging.getLogger(__name__)


@dataclass
class Spacing:
    """Pixel spacing constants."""
    column: float = 240
    row: float = 160
    layer: float = 480
    component_gap: float = 200


@dataclass
class ComponentPlacement:
    """Where a component ended up in pixel space."""
    index: int
    offset_x: float
    width: float
    bounds: Bounds
    column_spacing: float

    @property
    def max_pixel_x(self) -> float:
        """Pixel x of the right-most room column in this component."""
        return self.offset_x + (self.bounds.max_x - self.bounds.min_x) * self.column_spacing


@dataclass
class Projection:
    pixels: dict[str, PixelPosition] = field(default_factory=dict)
    placements: list[ComponentPlacement] = field(default_factory=list)


def project_position(
    position: GridPosition,
    bounds: Bounds,
    offset_x: float,
    spacing: Spacing,
) -> PixelPosition:
    """Convert a grid position to pixels for a component at `offset_x`."""
    x = offset_x + (position.x - bounds.min_x) * spacing.column
    y = (position.y - bounds.min_y) * spacing.row + (position.z - bounds.min_z) * spacing.layer
    return PixelPosition(x, y)


def pack_components(components: list[Component], spacing: Spacing) -> Projection:
    """Place components side by side and project every room to pixels."""
    projection = Projection()
    cursor = 0.0

    for component in components:
        bounds = component.bounds()
        width = bounds.columns * spacing.column

        projection.placements.append(ComponentPlacement(
            index=component.index,
            offset_x=cursor,
            width=width,
            bounds=bounds,
            column_spacing=spacing.column,
        ))
        for room_id, position in component.positions.items():
            projection.pixels[room_id] = project_position(position, bounds, cursor, spacing)

        logger.debug(f"Packed component {component.index} at x={cursor} (width {width})")
        cursor += width + spacing.component_gap

    return projection
