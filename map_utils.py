"""
Utility classes for hex map rendering.

This module provides the rectangle and region value types shared by the
geometry, traversal and drawing code, plus SVG layer management.
"""

import math
from dataclasses import dataclass
from typing import Tuple, List, Dict, Optional, Any, Iterable, Iterator


@dataclass(frozen=True)
class Rect:
    """An integer rectangle in pixel or tile coordinates.

    right and bottom are inclusive, so a 1x1 rectangle has
    right == x and bottom == y.

    Attributes:
        x: Left edge
        y: Top edge
        width: Horizontal extent
        height: Vertical extent
    """
    x: int
    y: int
    width: int
    height: int

    @classmethod
    def aligned(cls, x: float, y: float, width: float, height: float) -> 'Rect':
        """Smallest integer rectangle covering a floating-point rectangle."""
        left = math.floor(x)
        top = math.floor(y)
        right = math.ceil(x + width)
        bottom = math.ceil(y + height)
        return cls(left, top, right - left, bottom - top)

    @property
    def right(self) -> int:
        return self.x + self.width - 1

    @property
    def bottom(self) -> int:
        return self.y + self.height - 1

    @property
    def top_left(self) -> Tuple[int, int]:
        return (self.x, self.y)

    @property
    def is_null(self) -> bool:
        """True for the zero-sized rectangle."""
        return self.width == 0 and self.height == 0

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def contains_point(self, x: float, y: float) -> bool:
        """Check if a point is within the rectangle."""
        return (self.x <= x < self.x + self.width and
                self.y <= y < self.y + self.height)

    def intersects(self, other: 'Rect') -> bool:
        """Check whether two rectangles overlap by a positive area."""
        if self.is_empty or other.is_empty:
            return False
        return (max(self.x, other.x) < min(self.x + self.width, other.x + other.width) and
                max(self.y, other.y) < min(self.y + self.height, other.y + other.height))

    def adjusted(self, dx1: int, dy1: int, dx2: int, dy2: int) -> 'Rect':
        """Return a new Rect with each edge moved by the given amount."""
        return Rect(
            self.x + dx1,
            self.y + dy1,
            self.width - dx1 + dx2,
            self.height - dy1 + dy2,
        )

    def united(self, other: 'Rect') -> 'Rect':
        """Bounding rectangle of both rectangles, ignoring empty ones."""
        if self.is_empty:
            return other
        if other.is_empty:
            return self
        left = min(self.x, other.x)
        top = min(self.y, other.y)
        right = max(self.x + self.width, other.x + other.width)
        bottom = max(self.y + self.height, other.y + other.height)
        return Rect(left, top, right - left, bottom - top)

    def as_tuple(self) -> Tuple[int, int, int, int]:
        """Return the rectangle as (x, y, width, height)."""
        return (self.x, self.y, self.width, self.height)


@dataclass(frozen=True)
class Margins:
    """Extra space needed around a layer's tiles when drawing."""
    left: int = 0
    top: int = 0
    right: int = 0
    bottom: int = 0


class TileRegion:
    """An ordered collection of tile rectangles, such as a selection."""

    def __init__(self, rects: Iterable[Rect] = ()):
        self._rects: List[Rect] = [r for r in rects if not r.is_empty]

    def __iter__(self) -> Iterator[Rect]:
        return iter(self._rects)

    def __len__(self) -> int:
        return len(self._rects)

    def add(self, rect: Rect) -> None:
        if not rect.is_empty:
            self._rects.append(rect)

    def rects(self) -> List[Rect]:
        return list(self._rects)

    def tiles(self) -> Iterator[Tuple[int, int]]:
        """Yield each covered tile once, in rectangle then row order."""
        seen = set()
        for rect in self._rects:
            for y in range(rect.y, rect.y + rect.height):
                for x in range(rect.x, rect.x + rect.width):
                    if (x, y) not in seen:
                        seen.add((x, y))
                        yield (x, y)

    def bounding_rect(self) -> Rect:
        result = Rect(0, 0, 0, 0)
        for rect in self._rects:
            result = result.united(rect)
        return result


class LayerManager:
    """Manages SVG layer groups and their z-ordering.

    Layers are registered with a z-order value (higher = on top).

    Attributes:
        layers: Dictionary mapping layer ID to layer info
    """

    def __init__(self, dwg):
        """Initialize the layer manager.

        Args:
            dwg: svgwrite Drawing object
        """
        self.dwg = dwg
        self.layers: Dict[str, Dict[str, Any]] = {}
        self._groups: Dict[str, Any] = {}

    def register_layer(
        self,
        layer_id: str,
        z_order: int,
        visible: bool = True,
        opacity: Optional[float] = None
    ) -> Any:
        """Register and create a new layer group.

        Args:
            layer_id: Unique identifier for the layer
            z_order: Stacking order (higher values render on top)
            visible: Whether the layer is visible by default
            opacity: Optional group opacity between 0 and 1

        Returns:
            The created SVG group element
        """
        group = self.dwg.g(id=layer_id)

        if not visible:
            group['visibility'] = 'hidden'

        if opacity is not None:
            group['opacity'] = opacity

        self.layers[layer_id] = {
            'group': group,
            'z_order': z_order,
            'visible': visible
        }

        self._groups[layer_id] = group
        return group

    def get_layer(self, layer_id: str) -> Any:
        """Get a layer group by ID."""
        return self._groups.get(layer_id)

    def get_or_register(self, layer_id: str, z_order: int) -> Any:
        """Get a layer group, registering it on first use."""
        group = self.get_layer(layer_id)
        if group is None:
            group = self.register_layer(layer_id, z_order)
        return group

    def get_layers_by_z_order(self) -> List[Any]:
        """Get layer groups sorted by z-order (lowest first)."""
        sorted_layers = sorted(self.layers.items(), key=lambda x: x[1]['z_order'])
        return [info['group'] for _, info in sorted_layers]

    def assemble(self, parent: Any = None):
        """Add every layer group to parent (the drawing by default), bottom first."""
        if parent is None:
            parent = self.dwg
        for layer in self.get_layers_by_z_order():
            parent.add(layer)


# Z-order constants for standard layers
class LayerZOrder:
    """Standard z-order values for map layers.

    Lower values render first (underneath).
    """
    BACKGROUND = 0
    TILES = 100
    SELECTION = 200
    HEX_GRID = 300
