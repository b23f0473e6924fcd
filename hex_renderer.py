"""
hex_renderer.py - Draw grid lines, tile layers and selections

Each function walks only the tiles visible in the exposed area and emits
primitive draw calls against a DrawingSurface.
"""

import logging

from hexgrid import HexGrid, Workspace
from map_utils import Rect, TileRegion
from render_helpers import CellOrigin, DrawingSurface
from tile_layer import TileLayer
from traversal import grid_steps, layer_steps

logger = logging.getLogger(__name__)


def draw_grid(
    surface: DrawingSurface,
    grid: HexGrid,
    exposed: Rect,
    workspace: Workspace,
    color: str,
) -> int:
    """
    Draw hexagon outlines for the part of the grid inside exposed.

    Every tile draws its upper edges; tiles on the last row/column and on
    the first column also draw the outer edges, so the grid is closed.

    Args:
        surface: Target surface
        grid: Stagger configuration
        exposed: Area to draw, in screen coordinates; fractional edges are
            widened to whole pixels
        workspace: Grid extent and tile size
        color: Line color

    Returns:
        Number of line segments emitted
    """
    exposed = Rect.aligned(*exposed.as_tuple())
    p = grid.params(workspace)
    oct_ = p.outline_template()
    last_row = workspace.height - 1
    last_column = workspace.width - 1
    count = 0

    for step in grid_steps(grid, workspace, exposed):
        pts = [(step.x + vx, step.y + vy) for vx, vy in oct_]
        is_last_row = step.tile_y == last_row
        is_last_column = step.tile_x == last_column

        if p.stagger_x:
            lines = [(pts[1], pts[2]), (pts[2], pts[3]), (pts[3], pts[4])]
            bottom_left = step.tile_x == 0 or (is_last_row and step.staggered)
            bottom_right = is_last_column or (is_last_row and step.staggered)

            if bottom_right:
                lines.append((pts[5], pts[6]))
            if is_last_row:
                lines.append((pts[6], pts[7]))
            if bottom_left:
                lines.append((pts[7], pts[0]))
        else:
            lines = [(pts[0], pts[1]), (pts[1], pts[2]), (pts[3], pts[4])]
            bottom_left = is_last_row or (step.tile_x == 0 and not step.staggered)
            bottom_right = is_last_row or (is_last_column and step.staggered)

            if is_last_column:
                lines.append((pts[4], pts[5]))
            if bottom_right:
                lines.append((pts[5], pts[6]))
            if bottom_left:
                lines.append((pts[7], pts[0]))

        surface.draw_lines(lines, color)
        count += len(lines)

    logger.debug("draw_grid: %d segments for exposed %s", count, exposed.as_tuple())
    return count


def draw_tile_layer(
    surface: DrawingSurface,
    grid: HexGrid,
    layer: TileLayer,
    exposed: Rect,
) -> int:
    """
    Draw the non-empty cells of a tile layer.

    Cells are anchored at the bottom-left corner of their tile and drawn
    at the tile's own size, or at the layer's tile size when the cell has
    none. A null exposed rectangle draws the whole layer.

    Returns:
        Number of cells drawn
    """
    exposed = Rect.aligned(*exposed.as_tuple())
    fallback_size = (layer.tile_width, layer.tile_height)
    count = 0

    for step in layer_steps(grid, layer, exposed):
        cell = layer.cell_at(step.tile_x, step.tile_y)
        if cell.is_empty:
            continue
        size = cell.size or fallback_size
        surface.draw_cell(cell, (step.x, step.y), size, CellOrigin.BOTTOM_LEFT)
        count += 1

    logger.debug("draw_tile_layer: %d cells from layer %r", count, layer.name)
    return count


def draw_tile_selection(
    surface: DrawingSurface,
    grid: HexGrid,
    region: TileRegion,
    workspace: Workspace,
    color: str,
    exposed: Rect,
) -> int:
    """
    Fill the hexagon of every selected tile that overlaps exposed.

    Selections are usually small, so every tile of the region is checked
    instead of walking the exposed area.

    Returns:
        Number of polygons drawn
    """
    count = 0

    if not region_overlaps(grid, region, workspace, exposed):
        logger.debug("draw_tile_selection: selection outside exposed area")
        return count

    for x, y in region.tiles():
        outline = grid.tile_outline(x, y, workspace)
        xs = [px for px, _ in outline]
        ys = [py for _, py in outline]
        bounds = Rect(min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))

        if bounds.intersects(exposed):
            surface.draw_polygon(outline, color)
            count += 1

    logger.debug("draw_tile_selection: %d polygons from %d rects", count, len(region))
    return count


def region_overlaps(grid: HexGrid, region: TileRegion, workspace: Workspace, exposed: Rect) -> bool:
    """Whether any tile of region can reach into exposed."""
    if not len(region):
        return False
    return grid.bounding_rect(region.bounding_rect(), workspace).intersects(exposed)
