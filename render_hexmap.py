"""
render_hexmap.py - Render a staggered hex map to SVG

Draws the grid, an optional filled tile layer and optional selections.

Usage:
    python render_hexmap.py output/map.svg --stagger-axis x --side-length 16
    python render_hexmap.py output/map.svg --config maps/demo.json --fill --select 2,2,3,2
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from hex_renderer import draw_grid, draw_tile_layer, draw_tile_selection
from map_config import (
    BACKGROUND_COLOR,
    GRID_COLOR,
    SELECTION_COLOR,
    SVG_MARGIN_PX,
    MapConfig,
    load_map_config,
)
from map_utils import Rect, TileRegion
from render_helpers import SvgSurface
from tile_layer import Cell, Tileset, TileLayer

DEMO_TILE_COUNT = 8


def parse_rect(text: str) -> Rect:
    """Parse "x,y,width,height" into a tile Rect."""
    parts = text.split(",")
    if len(parts) != 4:
        raise argparse.ArgumentTypeError(f"Expected x,y,width,height, got {text!r}")
    try:
        return Rect(*(int(p) for p in parts))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Non-integer value in rectangle {text!r}")


def build_demo_layer(config: MapConfig) -> TileLayer:
    """A layer filled with a repeating pattern of demo tiles."""
    tileset = Tileset(
        name="demo",
        tile_width=config.tile_width,
        tile_height=config.tile_height,
        tile_count=DEMO_TILE_COUNT,
    )
    layer = TileLayer("Tiles", config.width, config.height, config.tile_width, config.tile_height)
    for y in range(config.height):
        for x in range(config.width):
            layer.set_cell(x, y, Cell(tileset, (x + 2 * y) % DEMO_TILE_COUNT))
    return layer


def build_config(args) -> MapConfig:
    if args.config:
        config = load_map_config(args.config)
    else:
        config = MapConfig()

    overrides = {
        "orientation": args.orientation,
        "stagger_axis": args.stagger_axis,
        "stagger_index": args.stagger_index,
        "hex_side_length": args.side_length,
        "width": args.width,
        "height": args.height,
        "tile_width": args.tile_width,
        "tile_height": args.tile_height,
    }
    data = config.to_dict()
    data.update({k: v for k, v in overrides.items() if v is not None})
    return MapConfig.from_dict(data)


def render_map(config: MapConfig, output_path: Path, fill: bool = False,
               selections=(), grid_color: str = GRID_COLOR,
               selection_color: str = SELECTION_COLOR, show_tile_ids: bool = False) -> SvgSurface:
    """
    Render a map to an SVG file.

    Args:
        config: Map configuration
        output_path: Path to output SVG file
        fill: Whether to draw a demo tile layer
        selections: Tile rectangles to highlight
        grid_color: Grid line color
        selection_color: Selection fill color
        show_tile_ids: Whether to label tiles with their id

    Returns:
        The surface that was written
    """
    grid = config.grid()
    workspace = config.workspace()
    width, height = grid.grid_pixel_size(workspace)
    exposed = Rect(0, 0, width, height)

    surface = SvgSurface(width, height, margin=SVG_MARGIN_PX,
                         background=BACKGROUND_COLOR, show_tile_ids=show_tile_ids)

    if fill:
        draw_tile_layer(surface, grid, build_demo_layer(config), exposed)
    if selections:
        draw_tile_selection(surface, grid, TileRegion(selections), workspace,
                            selection_color, exposed)
    draw_grid(surface, grid, exposed, workspace, grid_color)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    surface.save(str(output_path))
    return surface


def main(argv=None):
    parser = argparse.ArgumentParser(description="Render a staggered hex map to SVG")
    parser.add_argument("output", type=Path, nargs="?", help="Output SVG path (default: output/<name>.svg)")
    parser.add_argument("--config", type=Path, help="JSON map configuration")
    parser.add_argument("--orientation", choices=["hexagonal", "staggered"])
    parser.add_argument("--stagger-axis", choices=["x", "y"])
    parser.add_argument("--stagger-index", choices=["odd", "even"])
    parser.add_argument("--side-length", type=int, help="Hex side length in pixels")
    parser.add_argument("--width", type=int, help="Map width in tiles")
    parser.add_argument("--height", type=int, help="Map height in tiles")
    parser.add_argument("--tile-width", type=int, help="Tile width in pixels")
    parser.add_argument("--tile-height", type=int, help="Tile height in pixels")
    parser.add_argument("--fill", action="store_true", help="Fill the map with demo tiles")
    parser.add_argument("--show-ids", action="store_true", help="Label demo tiles with their id")
    parser.add_argument("--select", type=parse_rect, action="append", default=[],
                        metavar="X,Y,W,H", help="Highlight a rectangle of tiles (repeatable)")
    parser.add_argument("--grid-color", default=GRID_COLOR)
    parser.add_argument("--selection-color", default=SELECTION_COLOR)
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = build_config(args)
    except (ValueError, FileNotFoundError, json.JSONDecodeError) as e:
        print(f"Error: {e}")
        return 1

    output_path = args.output or config.output_path
    render_map(
        config,
        output_path,
        fill=args.fill,
        selections=args.select,
        grid_color=args.grid_color,
        selection_color=args.selection_color,
        show_tile_ids=args.show_ids,
    )

    width, height = config.grid().grid_pixel_size(config.workspace())
    print(f"Saved SVG to {output_path} ({width}x{height}px, "
          f"{config.width}x{config.height} tiles, stagger {config.stagger_axis.value}/"
          f"{config.stagger_index.value}, side {config.hex_side_length})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
