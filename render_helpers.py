"""
Drawing surfaces for the hex renderer.

The renderer never touches pixels. It emits three kinds of primitive
calls against a surface: line segments, filled polygons and cell blits.
RecordingSurface keeps them as an ordered list; SvgSurface writes them
into an svgwrite drawing.
"""

import colorsys
from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple, Optional, Any, Protocol, Sequence

import svgwrite

from map_utils import LayerManager, LayerZOrder
from tile_layer import Cell

Point = Tuple[float, float]
Segment = Tuple[Point, Point]

# === SVG Style Constants ===
GRID_STROKE_WIDTH = 1
GRID_DASH_PATTERN = "2,2"
CELL_STROKE_COLOR = "#333333"
CELL_STROKE_WIDTH = 0.5
CELL_LABEL_COLOR = "#ffffff"
CELL_LABEL_SIZE = 8
SELECTION_OPACITY = 0.5


class CellOrigin(Enum):
    """Which corner of a cell blit the position refers to."""
    BOTTOM_LEFT = "bottom_left"
    TOP_LEFT = "top_left"


class DrawingSurface(Protocol):
    """Primitive drawing operations used by hex_renderer."""

    def draw_lines(self, lines: Sequence[Segment], color: str) -> None:
        ...

    def draw_polygon(self, points: Sequence[Point], color: str) -> None:
        ...

    def draw_cell(self, cell: Cell, pos: Point, size: Tuple[int, int], origin: CellOrigin) -> None:
        ...


@dataclass(frozen=True)
class DrawCall:
    """A single recorded primitive.

    Attributes:
        kind: "lines", "polygon" or "cell"
        points: Line endpoints (flattened pairs), polygon vertices or the
            single anchor position of a cell
        color: Stroke/fill color, None for cells
        cell: Blitted cell, None for lines and polygons
        size: Blit size, None for lines and polygons
        origin: Blit anchor corner, None for lines and polygons
    """
    kind: str
    points: Tuple[Point, ...]
    color: Optional[str] = None
    cell: Optional[Cell] = None
    size: Optional[Tuple[int, int]] = None
    origin: Optional[CellOrigin] = None

    def segments(self) -> List[Segment]:
        """Line segments of a "lines" call."""
        return [(self.points[i], self.points[i + 1]) for i in range(0, len(self.points), 2)]


class RecordingSurface:
    """Surface that records draw calls in the order they are made."""

    def __init__(self):
        self.calls: List[DrawCall] = []

    def draw_lines(self, lines: Sequence[Segment], color: str) -> None:
        points = tuple(p for segment in lines for p in segment)
        self.calls.append(DrawCall("lines", points, color=color))

    def draw_polygon(self, points: Sequence[Point], color: str) -> None:
        self.calls.append(DrawCall("polygon", tuple(points), color=color))

    def draw_cell(self, cell: Cell, pos: Point, size: Tuple[int, int], origin: CellOrigin) -> None:
        self.calls.append(DrawCall("cell", (pos,), cell=cell, size=size, origin=origin))

    def of_kind(self, kind: str) -> List[DrawCall]:
        return [c for c in self.calls if c.kind == kind]

    def segments(self) -> List[Segment]:
        """All line segments drawn so far."""
        result = []
        for call in self.of_kind("lines"):
            result.extend(call.segments())
        return result

    def clear(self):
        self.calls = []


def tile_fill_color(cell: Cell) -> str:
    """Deterministic fill color for a cell, derived from its tile id.

    Args:
        cell: Non-empty cell

    Returns:
        Hex color string such as "#4a90d9"
    """
    hue = (cell.tile_id * 0.618033988749895) % 1.0
    r, g, b = colorsys.hsv_to_rgb(hue, 0.45, 0.85)
    return f"#{int(r * 255):02x}{int(g * 255):02x}{int(b * 255):02x}"


def cell_rect(pos: Point, size: Tuple[int, int], origin: CellOrigin) -> Tuple[float, float, int, int]:
    """Top-left corner and size of a cell blit as (x, y, width, height)."""
    x, y = pos
    width, height = size
    if origin == CellOrigin.BOTTOM_LEFT:
        y -= height
    return (x, y, width, height)


class SvgSurface:
    """
    Surface that renders draw calls into an SVG document.

    Grid lines, selection polygons and cells go into separate groups so
    that tiles stay below the selection and the grid stays on top,
    regardless of the order the draw functions are called in.

    Args:
        width: Document width in pixels
        height: Document height in pixels
        margin: Blank border around the map in pixels
        background: Background fill, None for transparent
        show_tile_ids: Whether to label cells with their tile id
    """

    def __init__(
        self,
        width: int,
        height: int,
        margin: int = 0,
        background: Optional[str] = "white",
        show_tile_ids: bool = False,
    ):
        total_width = width + 2 * margin
        total_height = height + 2 * margin
        self.dwg = svgwrite.Drawing(
            size=(f"{total_width}px", f"{total_height}px"),
            viewBox=f"{-margin} {-margin} {total_width} {total_height}",
        )
        self.layers = LayerManager(self.dwg)
        self.show_tile_ids = show_tile_ids

        if background:
            bg = self.layers.register_layer("Background", LayerZOrder.BACKGROUND)
            bg.add(self.dwg.rect(
                insert=(-margin, -margin),
                size=(total_width, total_height),
                fill=background,
            ))

    def _group(self, layer_id: str, z_order: int) -> Any:
        return self.layers.get_or_register(layer_id, z_order)

    def draw_lines(self, lines: Sequence[Segment], color: str) -> None:
        group = self._group("Hex_Grid", LayerZOrder.HEX_GRID)
        for start, end in lines:
            group.add(self.dwg.line(
                start=start,
                end=end,
                stroke=color,
                stroke_width=GRID_STROKE_WIDTH,
                stroke_dasharray=GRID_DASH_PATTERN,
                stroke_linecap="butt",
            ))

    def draw_polygon(self, points: Sequence[Point], color: str) -> None:
        group = self._group("Selection", LayerZOrder.SELECTION)
        group.add(self.dwg.polygon(
            points=list(points),
            fill=color,
            fill_opacity=SELECTION_OPACITY,
            stroke="none",
        ))

    def draw_cell(self, cell: Cell, pos: Point, size: Tuple[int, int], origin: CellOrigin) -> None:
        group = self._group("Tiles", LayerZOrder.TILES)
        x, y, width, height = cell_rect(pos, size, origin)

        group.add(self.dwg.rect(
            insert=(x, y),
            size=(width, height),
            fill=tile_fill_color(cell),
            stroke=CELL_STROKE_COLOR,
            stroke_width=CELL_STROKE_WIDTH,
        ))

        if self.show_tile_ids:
            group.add(self.dwg.text(
                str(cell.tile_id),
                insert=(x + width / 2, y + height / 2),
                text_anchor="middle",
                dominant_baseline="middle",
                font_size=CELL_LABEL_SIZE,
                fill=CELL_LABEL_COLOR,
                font_family="monospace",
            ))

    def tostring(self) -> str:
        """Serialize the document with layers in z-order."""
        self._assemble()
        return self.dwg.tostring()

    def save(self, output_path: str) -> None:
        self._assemble()
        self.dwg.saveas(output_path)

    def _assemble(self):
        # Rebuild the element list so repeated saves do not duplicate groups
        self.dwg.elements = [e for e in self.dwg.elements if not _is_layer_group(e, self.layers)]
        self.layers.assemble()


def _is_layer_group(element: Any, layers: LayerManager) -> bool:
    return any(element is group for group in layers.get_layers_by_z_order())
