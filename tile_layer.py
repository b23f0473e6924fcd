"""
tile_layer.py - Tile layer data consumed by the hex renderer

A TileLayer is a rectangular grid of cells, each referencing a tile in a
tileset. Cells are stored as two numpy arrays (tileset index and tile id)
so lookups stay cheap while the renderer walks the grid.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from map_utils import Margins, Rect

EMPTY = -1


@dataclass(frozen=True)
class Tileset:
    """
    A set of equally sized tiles.

    Attributes:
        name: Tileset name
        tile_width: Width of each tile image in pixels
        tile_height: Height of each tile image in pixels
        tile_count: Number of tiles; ids run from 0 to tile_count - 1
        offset_x: Horizontal drawing offset applied to every tile
        offset_y: Vertical drawing offset applied to every tile
    """
    name: str
    tile_width: int
    tile_height: int
    tile_count: int = 1
    offset_x: int = 0
    offset_y: int = 0

    def tile_size(self, tile_id: int) -> Optional[tuple[int, int]]:
        """Size of the given tile, or None if the tileset has no such tile."""
        if 0 <= tile_id < self.tile_count:
            return (self.tile_width, self.tile_height)
        return None


@dataclass(frozen=True)
class Cell:
    """A reference to one tile of a tileset, or an empty cell."""
    tileset: Optional[Tileset] = None
    tile_id: int = EMPTY

    @property
    def is_empty(self) -> bool:
        return self.tileset is None

    @property
    def size(self) -> Optional[tuple[int, int]]:
        """Intrinsic size of the referenced tile, if it has one."""
        if self.tileset is None:
            return None
        return self.tileset.tile_size(self.tile_id)


class TileLayer:
    """
    A grid of cells positioned on the map.

    Args:
        name: Layer name
        width: Width in tiles
        height: Height in tiles
        tile_width: Map tile width in pixels
        tile_height: Map tile height in pixels
        x: Layer position along x, in tiles
        y: Layer position along y, in tiles
    """

    def __init__(
        self,
        name: str,
        width: int,
        height: int,
        tile_width: int,
        tile_height: int,
        x: int = 0,
        y: int = 0,
    ):
        self.name = name
        self.width = width
        self.height = height
        self.tile_width = tile_width
        self.tile_height = tile_height
        self.x = x
        self.y = y
        self._tilesets: list[Tileset] = []
        self._tileset_index = np.full((height, width), EMPTY, dtype=np.int32)
        self._tile_ids = np.full((height, width), EMPTY, dtype=np.int32)

    def bounds(self) -> Rect:
        """Layer extent in map tile coordinates."""
        return Rect(self.x, self.y, self.width, self.height)

    def position(self) -> tuple[int, int]:
        return (self.x, self.y)

    def contains(self, x: int, y: int) -> bool:
        """Whether the layer-local tile (x, y) lies inside the layer."""
        return 0 <= x < self.width and 0 <= y < self.height

    def cell_at(self, x: int, y: int) -> Cell:
        """Cell at layer-local coordinates; empty outside the layer."""
        if not self.contains(x, y):
            return Cell()
        index = int(self._tileset_index[y, x])
        if index == EMPTY:
            return Cell()
        return Cell(self._tilesets[index], int(self._tile_ids[y, x]))

    def set_cell(self, x: int, y: int, cell: Cell) -> None:
        if not self.contains(x, y):
            raise IndexError(f"Cell ({x}, {y}) outside layer {self.name!r}")
        if cell.is_empty:
            self._tileset_index[y, x] = EMPTY
            self._tile_ids[y, x] = EMPTY
            return
        if cell.tileset not in self._tilesets:
            self._tilesets.append(cell.tileset)
        self._tileset_index[y, x] = self._tilesets.index(cell.tileset)
        self._tile_ids[y, x] = cell.tile_id

    def fill(self, cell: Cell) -> None:
        """Set every cell of the layer to the given cell."""
        for y in range(self.height):
            for x in range(self.width):
                self.set_cell(x, y, cell)

    def is_empty(self) -> bool:
        return bool(np.all(self._tileset_index == EMPTY))

    def used_tilesets(self) -> set[Tileset]:
        """Tilesets referenced by at least one cell."""
        used = np.unique(self._tileset_index)
        return {self._tilesets[int(i)] for i in used if i != EMPTY}

    def draw_margins(self) -> Margins:
        """
        Space tiles may occupy beyond their grid cell.

        Tiles are anchored at their bottom-left corner, so tall tiles reach
        upwards and wide tiles reach to the right. Tile offsets shift the
        image and widen the margins on the opposite side.
        """
        max_width = 0
        max_height = 0
        left = top = right = bottom = 0

        for tileset in self.used_tilesets():
            max_width = max(max_width, tileset.tile_width)
            max_height = max(max_height, tileset.tile_height)
            left = max(left, -tileset.offset_x)
            top = max(top, -tileset.offset_y)
            right = max(right, tileset.offset_x)
            bottom = max(bottom, tileset.offset_y)

        return Margins(
            left=left,
            top=top + max_height,
            right=right + max_width,
            bottom=bottom,
        )
