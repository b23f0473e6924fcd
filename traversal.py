"""
traversal.py - Enumerate the tiles visible in an exposed screen area

Both generators start from the tile under the top-left corner of the
exposed rectangle and walk the grid by adding the column/row pitch to the
screen position, instead of converting every tile. Each call returns a
fresh generator, so a traversal can be restarted by calling again.
"""

from typing import Iterator, NamedTuple

from hexgrid import HexGrid, RenderParams, Workspace
from map_utils import Rect
from tile_layer import TileLayer


class TraversalStep(NamedTuple):
    """One visited tile and its screen position."""
    tile_x: int
    tile_y: int
    x: int
    y: int
    staggered: bool


def _start_tile(
    grid: HexGrid,
    p: RenderParams,
    rect: Rect,
    workspace: Workspace,
    offset_x: int = 0,
    offset_y: int = 0,
) -> tuple[int, int]:
    """
    Tile to start drawing from for the given area.

    If the top-left corner of the area lies in the upper or left part of a
    tile, the tiles above or left of it reach into the area as well, so we
    start one row or column earlier. offset_x/offset_y convert between map
    and layer-local tile coordinates.
    """
    tile_x, tile_y = grid.screen_to_tile(rect.x, rect.y, workspace)
    tile_x -= offset_x
    tile_y -= offset_y
    pos_x, pos_y = grid.tile_to_screen(tile_x + offset_x, tile_y + offset_y, workspace)

    if rect.y - pos_y < p.side_offset_y:
        tile_y -= 1
    if rect.x - pos_x < p.side_offset_x:
        tile_x -= 1

    return tile_x, tile_y


def grid_steps(grid: HexGrid, workspace: Workspace, exposed: Rect) -> Iterator[TraversalStep]:
    """
    Yield every workspace tile whose outline may intersect exposed.

    Tiles are visited column by column for stagger X grids and row by row
    for stagger Y grids. Positions are the top-left corner of each tile's
    bounding box.
    """
    if exposed.is_null:
        return

    p = grid.params(workspace)
    tile_x, tile_y = _start_tile(grid, p, exposed, workspace)
    tile_x = max(0, tile_x)
    tile_y = max(0, tile_y)
    start_x, start_y = grid.tile_to_screen(tile_x, tile_y, workspace)

    if p.stagger_x:
        # Column shifting is applied per column below, so un-apply it here
        if p.do_stagger_x(tile_x):
            start_y -= p.row_height

        while start_x <= exposed.right and tile_x < workspace.width:
            staggered = p.do_stagger_x(tile_x)
            row_y = start_y + (p.row_height if staggered else 0)
            row_tile = tile_y

            while row_y <= exposed.bottom and row_tile < workspace.height:
                yield TraversalStep(tile_x, row_tile, start_x, row_y, staggered)
                row_y += p.tile_height + p.side_length_y
                row_tile += 1

            start_x += p.column_width
            tile_x += 1
    else:
        # Row shifting is applied per row below, so un-apply it here
        if p.do_stagger_y(tile_y):
            start_x -= p.column_width

        while start_y <= exposed.bottom and tile_y < workspace.height:
            staggered = p.do_stagger_y(tile_y)
            row_x = start_x + (p.column_width if staggered else 0)
            row_tile = tile_x

            while row_x <= exposed.right and row_tile < workspace.width:
                yield TraversalStep(row_tile, tile_y, row_x, start_y, staggered)
                row_x += p.tile_width + p.side_length_x
                row_tile += 1

            start_y += p.row_height
            tile_y += 1


def layer_steps(grid: HexGrid, layer: TileLayer, exposed: Rect) -> Iterator[TraversalStep]:
    """
    Yield the layer tiles to draw for the exposed area.

    Tile coordinates are layer-local and positions are the bottom-left
    corner of each tile, where tile images are anchored. A null exposed
    rectangle means the whole layer.
    """
    workspace = Workspace(layer.width, layer.height, layer.tile_width, layer.tile_height)
    p = grid.params(workspace)

    rect = exposed
    if rect.is_null:
        rect = grid.bounding_rect(layer.bounds(), workspace)

    margins = layer.draw_margins()
    margin_bottom = margins.bottom + p.tile_height
    margin_right = margins.right - p.tile_width
    rect = rect.adjusted(-margin_right, -margin_bottom, margins.left, margins.top)

    tile_x, tile_y = _start_tile(grid, p, rect, workspace, layer.x, layer.y)

    if p.stagger_x:
        yield from _layer_steps_stagger_x(grid, p, layer, workspace, rect, tile_x, tile_y)
    else:
        yield from _layer_steps_stagger_y(grid, p, layer, workspace, rect, tile_x, tile_y)


def _layer_steps_stagger_x(grid, p, layer, workspace, rect, tile_x, tile_y):
    # One column of partially visible tiles may hang in from the left/top
    tile_x = max(-1, tile_x)
    tile_y = max(-1, tile_y)

    start_x, start_y = grid.tile_to_screen(tile_x + layer.x, tile_y + layer.y, workspace)
    start_y += p.tile_height

    # Adjacent columns interleave on screen, so walk half-rows that alternate
    # between the pushed and unpushed columns.
    staggered_row = p.do_stagger_x(tile_x + layer.x)

    # Strict bounds: a tile reaching only the last exposed pixel row or
    # column is not drawn. The grid walk uses inclusive bounds instead.
    while start_y < rect.bottom and tile_y < layer.height:
        row_tile = tile_x
        row_x = start_x

        while row_x < rect.right and row_tile < layer.width:
            if layer.contains(row_tile, tile_y):
                yield TraversalStep(row_tile, tile_y, row_x, start_y, staggered_row)
            row_x += p.tile_width + p.side_length_x
            row_tile += 2

        if staggered_row:
            tile_x -= 1
            tile_y += 1
            start_x -= p.column_width
            staggered_row = False
        else:
            tile_x += 1
            start_x += p.column_width
            staggered_row = True

        start_y += p.row_height


def _layer_steps_stagger_y(grid, p, layer, workspace, rect, tile_x, tile_y):
    tile_x = max(0, tile_x)
    tile_y = max(0, tile_y)

    start_x, start_y = grid.tile_to_screen(tile_x + layer.x, tile_y + layer.y, workspace)
    start_y += p.tile_height

    # Row shifting is applied per row below, so un-apply it here
    if p.do_stagger_y(tile_y + layer.y):
        start_x -= p.column_width

    # Strict bounds, as in the stagger X walk
    while start_y < rect.bottom and tile_y < layer.height:
        staggered = p.do_stagger_y(tile_y + layer.y)
        row_x = start_x + (p.column_width if staggered else 0)
        row_tile = tile_x

        while row_x < rect.right and row_tile < layer.width:
            yield TraversalStep(row_tile, tile_y, row_x, start_y, staggered)
            row_x += p.tile_width + p.side_length_x
            row_tile += 1

        start_y += p.row_height
        tile_y += 1
