"""
hexgrid.py - Core staggered hex grid geometry

Tile <-> screen conversion, extent queries and neighbor lookups for
hexagonal maps whose rows or columns are staggered by half a tile.
All pixel arithmetic is integral; the screen origin is the top-left
corner of tile (0, 0)'s bounding box.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple

from shapely.geometry import Polygon

from map_utils import Rect


class Orientation(Enum):
    ORTHOGONAL = "orthogonal"
    ISOMETRIC = "isometric"
    STAGGERED = "staggered"
    HEXAGONAL = "hexagonal"


class StaggerAxis(Enum):
    X = "x"
    Y = "y"


class StaggerIndex(Enum):
    ODD = "odd"
    EVEN = "even"


class Direction(Enum):
    TOP_LEFT = "top_left"
    TOP_RIGHT = "top_right"
    BOTTOM_LEFT = "bottom_left"
    BOTTOM_RIGHT = "bottom_right"


@dataclass(frozen=True)
class Workspace:
    """
    Tile grid extent used for a single query.

    Attributes:
        width: Number of tiles along x
        height: Number of tiles along y
        tile_width: Base tile cell width in pixels
        tile_height: Base tile cell height in pixels
    """
    width: int = 0
    height: int = 0
    tile_width: int = 0
    tile_height: int = 0

    @property
    def tile_size(self) -> tuple[int, int]:
        return (self.tile_width, self.tile_height)


# Candidate hexagon centers are checked in this order; offsets are applied
# to the reference tile of the double-pitch cell.
_OFFSETS_STAGGER_X = ((0, 0), (1, -1), (1, 0), (2, 0))
_OFFSETS_STAGGER_Y = ((0, 0), (-1, 1), (0, 1), (0, 2))


@dataclass(frozen=True)
class RenderParams:
    """Geometry derived from a HexGrid and a Workspace."""
    tile_width: int
    tile_height: int
    side_length_x: int
    side_length_y: int
    side_offset_x: int
    side_offset_y: int
    column_width: int
    row_height: int
    stagger_x: bool
    stagger_even: bool

    @classmethod
    def derive(cls, grid: "HexGrid", workspace: Workspace) -> "RenderParams":
        # Even tile sizes keep the tile midpoints on whole pixels
        tile_width = workspace.tile_width & ~1
        tile_height = workspace.tile_height & ~1
        stagger_x = grid.stagger_axis == StaggerAxis.X

        side_length_x = 0
        side_length_y = 0
        if grid.orientation == Orientation.HEXAGONAL:
            if stagger_x:
                side_length_x = grid.hex_side_length
            else:
                side_length_y = grid.hex_side_length

        side_offset_x = (tile_width - side_length_x) // 2
        side_offset_y = (tile_height - side_length_y) // 2

        return cls(
            tile_width=tile_width,
            tile_height=tile_height,
            side_length_x=side_length_x,
            side_length_y=side_length_y,
            side_offset_x=side_offset_x,
            side_offset_y=side_offset_y,
            column_width=side_offset_x + side_length_x,
            row_height=side_offset_y + side_length_y,
            stagger_x=stagger_x,
            stagger_even=grid.stagger_index == StaggerIndex.EVEN,
        )

    def do_stagger_x(self, x: int) -> bool:
        """Whether column x is pushed down by half a row."""
        return self.stagger_x and bool((x & 1) ^ self.stagger_even)

    def do_stagger_y(self, y: int) -> bool:
        """Whether row y is pushed right by half a column."""
        return not self.stagger_x and bool((y & 1) ^ self.stagger_even)

    def is_staggered(self, x: int, y: int) -> bool:
        return self.do_stagger_x(x) if self.stagger_x else self.do_stagger_y(y)

    def outline_template(self) -> tuple[tuple[int, int], ...]:
        """
        The eight outline vertices of a tile relative to its screen origin.

        Starts at the lower end of the left side and runs clockwise. Two of
        the vertices coincide along the non-staggered axis, and all pairs
        coincide when the hex side length is zero.
        """
        tw, th = self.tile_width, self.tile_height
        sox, soy = self.side_offset_x, self.side_offset_y
        return (
            (0, th - soy),
            (0, soy),
            (sox, 0),
            (tw - sox, 0),
            (tw, soy),
            (tw, th - soy),
            (tw - sox, th),
            (sox, th),
        )

    def candidate_centers(self) -> tuple[tuple[int, int], ...]:
        """Hexagon centers inside one double-pitch reference cell."""
        if self.stagger_x:
            left = self.side_length_x // 2
            center_x = left + self.column_width
            center_y = self.tile_height // 2
            return (
                (left, center_y),
                (center_x, center_y - self.row_height),
                (center_x, center_y + self.row_height),
                (center_x + self.column_width, center_y),
            )

        top = self.side_length_y // 2
        center_x = self.tile_width // 2
        center_y = top + self.row_height
        return (
            (center_x, top),
            (center_x - self.column_width, center_y),
            (center_x + self.column_width, center_y),
            (center_x, center_y + self.row_height),
        )

    def candidate_offsets(self) -> tuple[tuple[int, int], ...]:
        return _OFFSETS_STAGGER_X if self.stagger_x else _OFFSETS_STAGGER_Y


class TilePoint(NamedTuple):
    x: int
    y: int


@dataclass(frozen=True)
class HexGrid:
    """
    Map-level stagger configuration and the queries that depend on it.

    Attributes:
        stagger_axis: Axis along which alternate rows/columns are shifted
        stagger_index: Whether even or odd rows/columns are shifted
        hex_side_length: Length of the flat hexagon sides (0 = diamond)
        orientation: Map orientation; the side length only applies to
            hexagonal maps, staggered isometric maps render as diamonds
    """
    stagger_axis: StaggerAxis = StaggerAxis.Y
    stagger_index: StaggerIndex = StaggerIndex.ODD
    hex_side_length: int = 0
    orientation: Orientation = Orientation.HEXAGONAL

    def params(self, workspace: Workspace) -> RenderParams:
        return RenderParams.derive(self, workspace)

    # === Coordinate transform ===

    def tile_to_screen(self, x: float, y: float, workspace: Workspace) -> TilePoint:
        """
        Convert tile coordinates to the screen origin of that tile.

        Fractional tile coordinates are floored; sub-tile positions are not
        supported.

        Returns:
            (x, y) of the top-left corner of the tile's bounding box
        """
        p = self.params(workspace)
        tile_x = math.floor(x)
        tile_y = math.floor(y)

        if p.stagger_x:
            pixel_y = tile_y * (p.tile_height + p.side_length_y)
            if p.do_stagger_x(tile_x):
                pixel_y += p.row_height
            pixel_x = tile_x * p.column_width
        else:
            pixel_x = tile_x * (p.tile_width + p.side_length_x)
            if p.do_stagger_y(tile_y):
                pixel_x += p.column_width
            pixel_y = tile_y * p.row_height

        return TilePoint(pixel_x, pixel_y)

    def screen_to_tile(self, x: float, y: float, workspace: Workspace) -> TilePoint:
        """
        Convert a screen position to the tile whose hexagon contains it.

        The screen is divided into cells of two columns by two rows. Within
        a cell the nearest of four candidate hexagon centers wins; on equal
        distance the earlier candidate is kept.

        Returns:
            (x, y) tile coordinates
        """
        p = self.params(workspace)

        if p.stagger_x:
            x -= p.tile_width if p.stagger_even else p.side_offset_x
        else:
            y -= p.tile_height if p.stagger_even else p.side_offset_y

        cell_width = p.column_width * 2
        cell_height = p.row_height * 2
        ref_x = math.floor(x / cell_width)
        ref_y = math.floor(y / cell_height)

        rel_x = x - ref_x * cell_width
        rel_y = y - ref_y * cell_height

        if p.stagger_x:
            ref_x *= 2
            if p.stagger_even:
                ref_x += 1
        else:
            ref_y *= 2
            if p.stagger_even:
                ref_y += 1

        nearest = 0
        min_dist = math.inf
        for i, (cx, cy) in enumerate(p.candidate_centers()):
            dist = (cx - rel_x) ** 2 + (cy - rel_y) ** 2
            if dist < min_dist:
                min_dist = dist
                nearest = i

        dx, dy = p.candidate_offsets()[nearest]
        return TilePoint(ref_x + dx, ref_y + dy)

    # Pixel and screen space coincide for this renderer
    tile_to_pixel = tile_to_screen
    pixel_to_tile = screen_to_tile

    def tile_center(self, x: int, y: int, workspace: Workspace) -> tuple[int, int]:
        """Screen position of the center of tile (x, y)."""
        p = self.params(workspace)
        px, py = self.tile_to_screen(x, y, workspace)
        return (px + p.tile_width // 2, py + p.tile_height // 2)

    # === Extent queries ===

    def grid_pixel_size(self, workspace: Workspace) -> tuple[int, int]:
        """
        Pixel size of a full workspace.width x workspace.height grid.

        The size is the same regardless of which indexes are shifted.
        """
        p = self.params(workspace)

        if p.stagger_x:
            width = workspace.width * p.column_width + p.side_offset_x
            height = workspace.height * (p.tile_height + p.side_length_y)
            if workspace.width > 1:
                height += p.row_height
        else:
            width = workspace.width * (p.tile_width + p.side_length_x)
            height = workspace.height * p.row_height + p.side_offset_y
            if workspace.height > 1:
                width += p.column_width

        return (width, height)

    def bounding_rect(self, rect: Rect, workspace: Workspace) -> Rect:
        """
        Pixel bounding box of a rectangle of tiles.

        Args:
            rect: Tile rectangle (x, y, width, height in tiles)
            workspace: Grid extent and tile size

        Returns:
            Rect covering every tile outline in the rectangle
        """
        p = self.params(workspace)
        left, top = self.tile_to_screen(rect.x, rect.y, workspace)

        if p.stagger_x:
            width = rect.width * p.column_width + p.side_offset_x
            height = rect.height * (p.tile_height + p.side_length_y)
            if rect.width > 1:
                height += p.row_height
                if p.do_stagger_x(rect.x):
                    top -= p.row_height
        else:
            width = rect.width * (p.tile_width + p.side_length_x)
            height = rect.height * p.row_height + p.side_offset_y
            if rect.height > 1:
                width += p.column_width
                if p.do_stagger_y(rect.y):
                    left -= p.column_width

        return Rect(left, top, width, height)

    # === Neighbors ===

    def _stagger_row(self, x: int, y: int) -> bool:
        index = x if self.stagger_axis == StaggerAxis.X else y
        return bool((index & 1) ^ (self.stagger_index == StaggerIndex.EVEN))

    def top_left(self, x: int, y: int) -> TilePoint:
        if self.stagger_axis == StaggerAxis.Y:
            if self._stagger_row(x, y):
                return TilePoint(x, y - 1)
            return TilePoint(x - 1, y - 1)
        if self._stagger_row(x, y):
            return TilePoint(x - 1, y)
        return TilePoint(x - 1, y - 1)

    def top_right(self, x: int, y: int) -> TilePoint:
        if self.stagger_axis == StaggerAxis.Y:
            if self._stagger_row(x, y):
                return TilePoint(x + 1, y - 1)
            return TilePoint(x, y - 1)
        if self._stagger_row(x, y):
            return TilePoint(x + 1, y)
        return TilePoint(x + 1, y - 1)

    def bottom_left(self, x: int, y: int) -> TilePoint:
        if self.stagger_axis == StaggerAxis.Y:
            if self._stagger_row(x, y):
                return TilePoint(x, y + 1)
            return TilePoint(x - 1, y + 1)
        if self._stagger_row(x, y):
            return TilePoint(x - 1, y + 1)
        return TilePoint(x - 1, y)

    def bottom_right(self, x: int, y: int) -> TilePoint:
        if self.stagger_axis == StaggerAxis.Y:
            if self._stagger_row(x, y):
                return TilePoint(x + 1, y + 1)
            return TilePoint(x, y + 1)
        if self._stagger_row(x, y):
            return TilePoint(x + 1, y + 1)
        return TilePoint(x + 1, y)

    def neighbor(self, x: int, y: int, direction: Direction) -> TilePoint:
        """Diagonal neighbor of tile (x, y) in the given direction."""
        lookup = {
            Direction.TOP_LEFT: self.top_left,
            Direction.TOP_RIGHT: self.top_right,
            Direction.BOTTOM_LEFT: self.bottom_left,
            Direction.BOTTOM_RIGHT: self.bottom_right,
        }
        return lookup[direction](x, y)

    def neighbors(self, x: int, y: int) -> list[TilePoint]:
        """All four diagonal neighbors, in Direction order."""
        return [self.neighbor(x, y, d) for d in Direction]

    # === Polygons ===

    def tile_outline(self, x: int, y: int, workspace: Workspace) -> list[tuple[int, int]]:
        """Eight outline vertices of tile (x, y) in screen coordinates."""
        p = self.params(workspace)
        ox, oy = self.tile_to_screen(x, y, workspace)
        return [(ox + vx, oy + vy) for vx, vy in p.outline_template()]

    def tile_to_polygon(self, x: int, y: int, workspace: Workspace) -> Polygon:
        """
        Hexagon outline of tile (x, y) as a Shapely Polygon.

        The workspace must be the one the tile is drawn with; a default
        Workspace() has zero tile size and yields a zero-area polygon.
        """
        return Polygon(self.tile_outline(x, y, workspace))
