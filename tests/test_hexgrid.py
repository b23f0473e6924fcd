"""
Tests for hexgrid module.

Run with: pytest tests/test_hexgrid.py -v
"""

import pytest
from shapely.geometry import box

from hexgrid import (
    Direction,
    HexGrid,
    Orientation,
    RenderParams,
    StaggerAxis,
    StaggerIndex,
    Workspace,
)
from map_utils import Rect


STAGGER_CONFIGS = [
    (StaggerAxis.X, StaggerIndex.ODD),
    (StaggerAxis.X, StaggerIndex.EVEN),
    (StaggerAxis.Y, StaggerIndex.ODD),
    (StaggerAxis.Y, StaggerIndex.EVEN),
]

CONFIG_IDS = ["x-odd", "x-even", "y-odd", "y-even"]


def make_grid(axis, index, side_length=0):
    return HexGrid(stagger_axis=axis, stagger_index=index, hex_side_length=side_length)


class TestRenderParams:
    """Tests for RenderParams derivation."""

    def test_diamond_stagger_x(self):
        """Test a zero side length on a 32x32 tile."""
        grid = make_grid(StaggerAxis.X, StaggerIndex.EVEN)
        p = grid.params(Workspace(3, 3, 32, 32))
        assert p.side_length_x == 0
        assert p.side_length_y == 0
        assert p.side_offset_x == 16
        assert p.side_offset_y == 16
        assert p.column_width == 16
        assert p.row_height == 16

    def test_side_length_follows_stagger_axis(self):
        """Test that only the stagger axis gets the side length."""
        p = make_grid(StaggerAxis.Y, StaggerIndex.ODD, 16).params(Workspace(3, 3, 32, 32))
        assert p.side_length_x == 0
        assert p.side_length_y == 16
        assert p.side_offset_x == 16
        assert p.side_offset_y == 8
        assert p.column_width == 16
        assert p.row_height == 24

        p = make_grid(StaggerAxis.X, StaggerIndex.ODD, 16).params(Workspace(3, 3, 32, 32))
        assert p.side_length_x == 16
        assert p.side_length_y == 0
        assert p.side_offset_x == 8
        assert p.column_width == 24
        assert p.row_height == 16

    def test_odd_tile_size_rounded_down(self):
        """Test that tile sizes are forced even."""
        p = make_grid(StaggerAxis.Y, StaggerIndex.ODD).params(Workspace(1, 1, 33, 17))
        assert p.tile_width == 32
        assert p.tile_height == 16

    def test_staggered_orientation_ignores_side_length(self):
        """Test that staggered isometric maps render as diamonds."""
        grid = HexGrid(
            stagger_axis=StaggerAxis.Y,
            stagger_index=StaggerIndex.ODD,
            hex_side_length=16,
            orientation=Orientation.STAGGERED,
        )
        p = grid.params(Workspace(1, 1, 32, 32))
        assert p.side_length_x == 0
        assert p.side_length_y == 0

    @pytest.mark.parametrize("axis,index", STAGGER_CONFIGS, ids=CONFIG_IDS)
    @pytest.mark.parametrize("side_length", [0, 8, 16])
    def test_pitch_within_tile(self, axis, index, side_length):
        """Test column width and row height stay within the tile."""
        p = make_grid(axis, index, side_length).params(Workspace(1, 1, 32, 32))
        assert 0 < p.column_width <= p.tile_width
        assert 0 < p.row_height <= p.tile_height

    def test_stagger_predicate_parity(self):
        """Test which indexes are shifted for each parity."""
        odd = RenderParams.derive(make_grid(StaggerAxis.X, StaggerIndex.ODD), Workspace(1, 1, 32, 32))
        even = RenderParams.derive(make_grid(StaggerAxis.X, StaggerIndex.EVEN), Workspace(1, 1, 32, 32))

        assert [odd.do_stagger_x(i) for i in range(4)] == [False, True, False, True]
        assert [even.do_stagger_x(i) for i in range(4)] == [True, False, True, False]
        # Negative indexes follow the same alternation
        assert odd.do_stagger_x(-1) is True
        assert even.do_stagger_x(-2) is True
        # The other axis is never staggered
        assert odd.do_stagger_y(1) is False


class TestTileToScreen:
    """Tests for tile to screen conversion."""

    def test_origin(self):
        """Test that tile (0, 0) sits at the origin for an elongated stagger Y grid."""
        grid = make_grid(StaggerAxis.Y, StaggerIndex.ODD, 16)
        assert grid.tile_to_screen(0, 0, Workspace(3, 3, 32, 32)) == (0, 0)

    def test_odd_row_pushed_by_column_width(self):
        """Test that an odd row is shifted right by the column width."""
        grid = make_grid(StaggerAxis.Y, StaggerIndex.ODD, 16)
        workspace = Workspace(3, 3, 32, 32)
        column_width = grid.params(workspace).column_width

        x, y = grid.tile_to_screen(0, 1, workspace)
        assert x == column_width
        assert x == 16
        assert y == 24

    def test_stagger_x_columns(self):
        """Test pitch along a stagger X grid."""
        grid = make_grid(StaggerAxis.X, StaggerIndex.ODD)
        workspace = Workspace(3, 3, 32, 32)
        assert grid.tile_to_screen(1, 0, workspace) == (16, 16)
        assert grid.tile_to_screen(2, 0, workspace) == (32, 0)
        assert grid.tile_to_screen(2, 1, workspace) == (32, 32)

    def test_fractional_coordinates_floored(self):
        """Test that sub-tile coordinates are truncated."""
        grid = make_grid(StaggerAxis.Y, StaggerIndex.ODD, 16)
        workspace = Workspace(3, 3, 32, 32)
        assert grid.tile_to_screen(1.7, 2.9, workspace) == grid.tile_to_screen(1, 2, workspace)
        assert grid.tile_to_screen(-0.5, 0, workspace) == grid.tile_to_screen(-1, 0, workspace)

    @pytest.mark.parametrize("axis,index", STAGGER_CONFIGS, ids=CONFIG_IDS)
    def test_monotonic_within_fixed_cross_index(self, axis, index):
        """Test that positions grow with each tile index."""
        grid = make_grid(axis, index, 8)
        workspace = Workspace(10, 10, 32, 32)
        xs = [grid.tile_to_screen(x, 3, workspace)[0] for x in range(10)]
        ys = [grid.tile_to_screen(3, y, workspace)[1] for y in range(10)]
        assert xs == sorted(xs)
        assert ys == sorted(ys)

    def test_pixel_aliases(self):
        """Test that pixel and screen conversions agree."""
        grid = make_grid(StaggerAxis.X, StaggerIndex.EVEN, 8)
        workspace = Workspace(5, 5, 32, 32)
        assert grid.tile_to_pixel(3, 2, workspace) == grid.tile_to_screen(3, 2, workspace)
        assert grid.pixel_to_tile(40, 50, workspace) == grid.screen_to_tile(40, 50, workspace)


class TestScreenToTile:
    """Tests for the nearest-center inverse transform."""

    @pytest.mark.parametrize("axis,index", STAGGER_CONFIGS, ids=CONFIG_IDS)
    @pytest.mark.parametrize("side_length", [0, 8, 16])
    @pytest.mark.parametrize("tile_size", [(32, 32), (64, 32), (32, 48)])
    def test_center_round_trip(self, axis, index, side_length, tile_size):
        """Test that every tile center maps back to its tile."""
        grid = make_grid(axis, index, side_length)
        workspace = Workspace(8, 8, *tile_size)

        for y in range(-2, 8):
            for x in range(-2, 8):
                cx, cy = grid.tile_center(x, y, workspace)
                assert grid.screen_to_tile(cx, cy, workspace) == (x, y)

    @pytest.mark.parametrize("axis,index", STAGGER_CONFIGS, ids=CONFIG_IDS)
    @pytest.mark.parametrize("side_length", [0, 16])
    def test_points_near_center(self, axis, index, side_length):
        """Test points half a side offset away from the center."""
        grid = make_grid(axis, index, side_length)
        workspace = Workspace(6, 6, 32, 32)
        p = grid.params(workspace)
        dx = p.side_offset_x // 2
        dy = p.side_offset_y // 2

        for y in range(6):
            for x in range(6):
                cx, cy = grid.tile_center(x, y, workspace)
                for ox, oy in [(dx, 0), (-dx, 0), (0, dy), (0, -dy)]:
                    assert grid.screen_to_tile(cx + ox, cy + oy, workspace) == (x, y)

    def test_equidistant_centers_pick_first_candidate(self):
        """Test the tie-break between two equally near centers."""
        grid = make_grid(StaggerAxis.X, StaggerIndex.EVEN)
        workspace = Workspace(3, 3, 32, 32)
        # (0, -32) lies exactly between candidates 0 and 1; candidate 0 wins
        assert grid.screen_to_tile(0, -32, workspace) == (-1, -1)

    def test_corner_belongs_to_neighbor(self):
        """Test that a bounding box corner outside the hexagon maps elsewhere."""
        grid = make_grid(StaggerAxis.X, StaggerIndex.ODD)
        workspace = Workspace(3, 3, 32, 32)
        assert grid.screen_to_tile(0, 0, workspace) == (-1, -1)

    def test_returns_integers(self):
        """Test that results are whole tiles for fractional input."""
        grid = make_grid(StaggerAxis.Y, StaggerIndex.ODD, 16)
        x, y = grid.screen_to_tile(17.25, 30.5, Workspace(3, 3, 32, 32))
        assert isinstance(x, int)
        assert isinstance(y, int)


class TestGridPixelSize:
    """Tests for the full grid extent."""

    def test_stagger_x_diamond(self):
        """Test a 3x3 stagger X grid of 32x32 diamonds."""
        grid = make_grid(StaggerAxis.X, StaggerIndex.EVEN)
        # width: 3 * 16 + 16, height: 3 * 32 + 16
        assert grid.grid_pixel_size(Workspace(3, 3, 32, 32)) == (64, 112)

    def test_stagger_y_elongated(self):
        """Test a 3x3 stagger Y grid with side length 16."""
        grid = make_grid(StaggerAxis.Y, StaggerIndex.ODD, 16)
        # width: 3 * 32 + 16, height: 3 * 24 + 8
        assert grid.grid_pixel_size(Workspace(3, 3, 32, 32)) == (112, 80)

    def test_single_column_has_no_protrusion(self):
        """Test that a single column adds no half row."""
        grid = make_grid(StaggerAxis.X, StaggerIndex.ODD)
        assert grid.grid_pixel_size(Workspace(1, 3, 32, 32)) == (32, 96)

    def test_same_size_for_both_parities(self):
        """Test that parity does not change the extent."""
        odd = make_grid(StaggerAxis.Y, StaggerIndex.ODD, 8)
        even = make_grid(StaggerAxis.Y, StaggerIndex.EVEN, 8)
        workspace = Workspace(7, 5, 32, 32)
        assert odd.grid_pixel_size(workspace) == even.grid_pixel_size(workspace)

    @pytest.mark.parametrize("axis,index", STAGGER_CONFIGS, ids=CONFIG_IDS)
    @pytest.mark.parametrize("side_length", [0, 16])
    def test_monotonic(self, axis, index, side_length):
        """Test that the size never shrinks as the grid grows."""
        grid = make_grid(axis, index, side_length)
        for fixed in range(1, 5):
            widths = [grid.grid_pixel_size(Workspace(n, fixed, 32, 32)) for n in range(0, 8)]
            heights = [grid.grid_pixel_size(Workspace(fixed, n, 32, 32)) for n in range(0, 8)]
            assert all(a[0] <= b[0] and a[1] <= b[1] for a, b in zip(widths, widths[1:]))
            assert all(a[0] <= b[0] and a[1] <= b[1] for a, b in zip(heights, heights[1:]))


class TestBoundingRect:
    """Tests for the pixel bounding box of tile rectangles."""

    def test_single_tile(self):
        """Test that one tile's box is its tile size."""
        grid = make_grid(StaggerAxis.X, StaggerIndex.ODD)
        workspace = Workspace(3, 3, 32, 32)
        assert grid.bounding_rect(Rect(1, 1, 1, 1), workspace) == Rect(16, 48, 32, 32)

    def test_staggered_first_column_moves_top_up(self):
        """Test that a pushed first column shifts the box up half a row."""
        grid = make_grid(StaggerAxis.X, StaggerIndex.ODD)
        workspace = Workspace(3, 3, 32, 32)
        assert grid.bounding_rect(Rect(1, 0, 2, 1), workspace) == Rect(16, 0, 48, 48)

    def test_full_grid_matches_pixel_size(self):
        """Test the full grid rectangle for a grid starting unpushed."""
        grid = make_grid(StaggerAxis.Y, StaggerIndex.ODD, 16)
        workspace = Workspace(4, 5, 32, 32)
        rect = grid.bounding_rect(Rect(0, 0, 4, 5), workspace)
        assert rect.top_left == (0, 0)
        assert (rect.width, rect.height) == grid.grid_pixel_size(workspace)

    @pytest.mark.parametrize("axis,index", STAGGER_CONFIGS, ids=CONFIG_IDS)
    @pytest.mark.parametrize("side_length", [0, 16])
    @pytest.mark.parametrize("tile_rect", [
        Rect(0, 0, 3, 3),
        Rect(1, 1, 3, 2),
        Rect(2, 1, 1, 4),
        Rect(1, 2, 4, 1),
        Rect(3, 3, 1, 1),
    ])
    def test_contains_every_tile(self, axis, index, side_length, tile_rect):
        """Test that the box covers every tile outline in the rectangle."""
        grid = make_grid(axis, index, side_length)
        workspace = Workspace(8, 8, 32, 32)
        rect = grid.bounding_rect(tile_rect, workspace)
        bbox = box(rect.x, rect.y, rect.x + rect.width, rect.y + rect.height)

        sx, sy = grid.tile_to_screen(tile_rect.x, tile_rect.y, workspace)
        assert rect.x <= sx <= rect.x + rect.width
        assert rect.y <= sy <= rect.y + rect.height

        for y in range(tile_rect.y, tile_rect.y + tile_rect.height):
            for x in range(tile_rect.x, tile_rect.x + tile_rect.width):
                assert bbox.covers(grid.tile_to_polygon(x, y, workspace))


class TestNeighbors:
    """Tests for diagonal neighbor lookups."""

    def test_stagger_y_odd(self):
        """Test neighbors of a pushed and an unpushed row."""
        grid = make_grid(StaggerAxis.Y, StaggerIndex.ODD)
        assert grid.top_left(2, 1) == (2, 0)
        assert grid.top_right(2, 1) == (3, 0)
        assert grid.bottom_left(2, 1) == (2, 2)
        assert grid.bottom_right(2, 1) == (3, 2)

        assert grid.top_left(2, 2) == (1, 1)
        assert grid.top_right(2, 2) == (2, 1)
        assert grid.bottom_left(2, 2) == (1, 3)
        assert grid.bottom_right(2, 2) == (2, 3)

    def test_stagger_x_even(self):
        """Test neighbors of a pushed and an unpushed column."""
        grid = make_grid(StaggerAxis.X, StaggerIndex.EVEN)
        assert grid.top_left(2, 1) == (1, 1)
        assert grid.top_right(2, 1) == (3, 1)
        assert grid.bottom_left(2, 1) == (1, 2)
        assert grid.bottom_right(2, 1) == (3, 2)

        assert grid.top_left(3, 1) == (2, 0)
        assert grid.top_right(3, 1) == (4, 0)
        assert grid.bottom_left(3, 1) == (2, 1)
        assert grid.bottom_right(3, 1) == (4, 1)

    def test_neighbor_dispatch(self):
        """Test the direction-keyed lookup."""
        grid = make_grid(StaggerAxis.Y, StaggerIndex.EVEN)
        assert grid.neighbor(4, 4, Direction.TOP_LEFT) == grid.top_left(4, 4)
        assert grid.neighbor(4, 4, Direction.BOTTOM_RIGHT) == grid.bottom_right(4, 4)
        assert grid.neighbors(4, 4) == [
            grid.top_left(4, 4),
            grid.top_right(4, 4),
            grid.bottom_left(4, 4),
            grid.bottom_right(4, 4),
        ]

    @pytest.mark.parametrize("axis,index", STAGGER_CONFIGS, ids=CONFIG_IDS)
    @pytest.mark.parametrize("side_length", [0, 16])
    @pytest.mark.parametrize("tile", [(3, 4), (4, 3)])
    def test_neighbors_share_edges(self, axis, index, side_length, tile):
        """Test that each diagonal neighbor shares the matching hexagon edge."""
        grid = make_grid(axis, index, side_length)
        workspace = Workspace(10, 10, 32, 32)
        x, y = tile
        own = grid.tile_outline(x, y, workspace)

        top_left = grid.tile_outline(*grid.top_left(x, y), workspace)
        top_right = grid.tile_outline(*grid.top_right(x, y), workspace)
        bottom_left = grid.tile_outline(*grid.bottom_left(x, y), workspace)
        bottom_right = grid.tile_outline(*grid.bottom_right(x, y), workspace)

        assert (own[1], own[2]) == (top_left[6], top_left[5])
        assert (own[3], own[4]) == (top_right[0], top_right[7])
        assert (own[0], own[7]) == (bottom_left[3], bottom_left[4])
        assert (own[5], own[6]) == (bottom_right[2], bottom_right[1])


class TestTilePolygon:
    """Tests for tile outlines and polygons."""

    def test_outline_has_eight_points(self):
        """Test the vertex template size."""
        grid = make_grid(StaggerAxis.Y, StaggerIndex.ODD, 16)
        assert len(grid.tile_outline(0, 0, Workspace(3, 3, 32, 32))) == 8

    def test_elongated_hexagon_area(self):
        """Test the area of a 32x32 hexagon with side length 16."""
        grid = make_grid(StaggerAxis.Y, StaggerIndex.ODD, 16)
        polygon = grid.tile_to_polygon(1, 1, Workspace(3, 3, 32, 32))
        # 32x16 middle band plus two 32-wide, 8-high triangles
        assert polygon.area == pytest.approx(768)

    def test_diamond_area(self):
        """Test the area of a 32x32 diamond."""
        grid = make_grid(StaggerAxis.X, StaggerIndex.ODD)
        polygon = grid.tile_to_polygon(2, 2, Workspace(3, 3, 32, 32))
        assert polygon.area == pytest.approx(512)

    @pytest.mark.parametrize("axis,index", STAGGER_CONFIGS, ids=CONFIG_IDS)
    def test_polygon_bounds_match_single_tile_rect(self, axis, index):
        """Test that the polygon fills the tile's bounding box."""
        grid = make_grid(axis, index, 8)
        workspace = Workspace(6, 6, 32, 32)
        polygon = grid.tile_to_polygon(3, 2, workspace)
        rect = grid.bounding_rect(Rect(3, 2, 1, 1), workspace)
        assert polygon.bounds == (rect.x, rect.y, rect.x + rect.width, rect.y + rect.height)

    def test_workspace_is_threaded_through(self):
        """Test that the caller's workspace decides the polygon.

        A default Workspace() has zero tile size, so the outline has no
        area. With a side length the vertices still spread along the
        stagger axis. Callers must pass the workspace the tile is drawn with.
        """
        grid = make_grid(StaggerAxis.Y, StaggerIndex.ODD, 16)
        default_outline = grid.tile_outline(3, 2, Workspace())
        assert default_outline == [
            (0, 24), (0, 8), (0, 16), (0, 16), (0, 8), (0, 24), (0, 16), (0, 16),
        ]
        assert grid.tile_to_polygon(3, 2, Workspace()).area == 0

        diamond = make_grid(StaggerAxis.Y, StaggerIndex.ODD)
        assert set(diamond.tile_outline(3, 2, Workspace())) == {(0, 0)}

        polygon = grid.tile_to_polygon(3, 2, Workspace(12, 9, 32, 32))
        assert polygon.area > 0
        assert polygon.bounds[:2] == tuple(grid.tile_to_screen(3, 2, Workspace(12, 9, 32, 32)))
