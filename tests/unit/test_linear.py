"""Tests for the scan-line based fill patterns."""

import pytest

from infiller.config import FillPattern, InfillParameters
from infiller.core.connector import CrossingTable
from infiller.core.context import PatternContext
from infiller.core.geometry import PointMatrix
from infiller.core.linear import (
    generate_cubic,
    generate_grid,
    generate_linear_based_infill,
    generate_lines,
    generate_quarter_cubic,
    generate_tetrahedral,
    generate_triangles,
    generate_trihexagon,
    get_shift_offset_from_infill_origin_and_rotation,
)
from infiller.core.zigzag import NoZigzagConnectorProcessor
from infiller.domain import Point, Polygon, Polyline
from infiller.exceptions import ParameterError


@pytest.fixture
def square() -> Polygon:
    """A 100 x 100 counter-clockwise square."""
    return Polygon([Point(0, 0), Point(100, 0), Point(100, 100), Point(0, 100)])


def make_context(square: Polygon, **overrides) -> PatternContext:
    params = InfillParameters(line_width=4, line_distance=20, **overrides)
    return PatternContext(params=params, inner=[square])


def is_horizontal(line: Polyline) -> bool:
    return line.start.y == line.end.y


def is_vertical(line: Polyline) -> bool:
    return line.start.x == line.end.x


class TestShiftOffset:
    """Tests for get_shift_offset_from_infill_origin_and_rotation function."""

    def test_zero_origin(self) -> None:
        """Test that the default origin gives no shift."""
        assert get_shift_offset_from_infill_origin_and_rotation((0, 0), 37.0) == 0

    def test_rotated_origin(self) -> None:
        """Test the origin's X in the rotated frame."""
        assert get_shift_offset_from_infill_origin_and_rotation((0, 5), 90.0) == -5
        assert get_shift_offset_from_infill_origin_and_rotation((7, 0), 0.0) == 7


class TestLines:
    """Tests for generate_lines function."""

    def test_square_gives_five_centred_lines(self, square: Polygon) -> None:
        """Test scan-lines sitting in the middle of their cells."""
        polygons, lines = generate_lines(make_context(square))

        assert polygons == []
        assert len(lines) == 5
        assert sorted(line.start.y for line in lines) == [10, 30, 50, 70, 90]
        for line in lines:
            assert is_horizontal(line)
            assert sorted((line.start.x, line.end.x)) == [0, 100]

    def test_lines_never_touch_top_or_bottom(self, square: Polygon) -> None:
        """Test that no line lies on the boundary edges y = 0 and y = 100."""
        _, lines = generate_lines(make_context(square))
        assert all(0 < line.start.y < 100 for line in lines)

    def test_vertical_fill_angle(self, square: Polygon) -> None:
        """Test that a 90 degree angle gives vertical lines."""
        _, lines = generate_lines(make_context(square, fill_angle=90.0))
        assert len(lines) == 5
        assert all(is_vertical(line) for line in lines)
        assert sorted(line.start.x for line in lines) == [10, 30, 50, 70, 90]

    def test_origin_moves_lines(self, square: Polygon) -> None:
        """Test that the pattern follows the infill origin."""
        _, lines = generate_lines(make_context(square, origin=(0, 5)))
        assert sorted(line.start.y for line in lines) == [15, 35, 55, 75, 95]

    def test_shift_moves_lines(self, square: Polygon) -> None:
        """Test the extra scan-line shift."""
        _, lines = generate_lines(make_context(square, shift=5))
        assert sorted(line.start.y for line in lines) == [5, 25, 45, 65, 85]

    def test_short_segments_dropped(self) -> None:
        """Test that segments under a fifth of the line width are dropped."""
        sliver = Polygon([Point(0, 0), Point(100, 0), Point(100, 3), Point(0, 3)])
        params = InfillParameters(line_width=20, line_distance=20, fill_angle=90.0)
        _, lines = generate_lines(PatternContext(params=params, inner=[sliver]))
        assert lines == []

    def test_hole_splits_lines(self, square: Polygon) -> None:
        """Test the even-odd pairing around a clockwise hole."""
        hole = Polygon([Point(40, 40), Point(40, 60), Point(60, 60), Point(60, 40)])
        params = InfillParameters(line_width=4, line_distance=20)
        _, lines = generate_lines(PatternContext(params=params, inner=[square, hole]))

        at_fifty = sorted(
            (min(line.start.x, line.end.x), max(line.start.x, line.end.x))
            for line in lines
            if line.start.y == 50
        )
        assert at_fifty == [(0, 40), (60, 100)]
        assert len(lines) == 6

    def test_empty_region(self) -> None:
        """Test that nothing comes out of nothing."""
        params = InfillParameters(line_width=4, line_distance=20)
        assert generate_lines(PatternContext(params=params, inner=[])) == ([], [])

    def test_rejects_non_positive_spacing(self, square: Polygon) -> None:
        """Test the spacing precondition."""
        ctx = make_context(square)
        with pytest.raises(ParameterError):
            generate_linear_based_infill(
                ctx, [], 0, PointMatrix(90), NoZigzagConnectorProcessor(), False, 0
            )

    def test_connected_lines_go_to_crossing_table(self, square: Polygon) -> None:
        """Test that connect mode records segments instead of emitting them."""
        table = CrossingTable([square])
        params = InfillParameters(line_width=4, line_distance=20, zig_zaggify=True)
        _, lines = generate_lines(PatternContext(params=params, inner=[square], crossings=table))

        assert lines == []
        assert table.segment_count == 5
        for segment in table.arena:
            assert {segment.start_segment, segment.end_segment} == {0, 2}
            assert segment.start.y == segment.end.y


class TestMultiSweepPatterns:
    """Tests for the patterns built from several sweeps."""

    def test_grid(self, square: Polygon) -> None:
        """Test two perpendicular sweeps."""
        _, lines = generate_grid(make_context(square))
        assert len(lines) == 10
        assert sum(is_horizontal(line) for line in lines) == 5
        assert sum(is_vertical(line) for line in lines) == 5

    def test_triangles(self, square: Polygon) -> None:
        """Test three sweeps 60 degrees apart stay inside the region."""
        _, lines = generate_triangles(make_context(square))
        assert sum(is_horizontal(line) for line in lines) >= 5
        assert len(lines) > 10
        for line in lines:
            for p in line:
                assert -3 <= p.x <= 103
                assert -3 <= p.y <= 103

    def test_trihexagon(self, square: Polygon) -> None:
        """Test that the third sweep is offset from the triangles one."""
        _, triangles = generate_triangles(make_context(square))
        _, trihexagon = generate_trihexagon(make_context(square))
        assert trihexagon[:5] == triangles[:5]
        assert trihexagon != triangles

    def test_cubic_moves_with_height(self, square: Polygon) -> None:
        """Test that the cubic lattice shifts between layers."""
        _, low = generate_cubic(make_context(square, z=0))
        _, high = generate_cubic(make_context(square, z=10))
        assert low
        assert low != high

    def test_tetrahedral_uses_double_spacing(self, square: Polygon) -> None:
        """Test the two line pairs of a tetrahedral layer."""
        _, lines = generate_tetrahedral(make_context(square))
        horizontal = [line for line in lines if is_horizontal(line)]
        vertical = [line for line in lines if is_vertical(line)]
        assert len(horizontal) + len(vertical) == len(lines)
        assert horizontal
        assert vertical

    def test_quarter_cubic_differs_from_tetrahedral(self, square: Polygon) -> None:
        """Test the shifted second pair of the quarter cubic pattern."""
        ctx = make_context(square, z=5)
        _, tetrahedral = generate_tetrahedral(ctx)
        _, quarter_cubic = generate_quarter_cubic(ctx)
        assert tetrahedral != quarter_cubic

    def test_pattern_enum_matches(self) -> None:
        """Test the pattern names of the linear family."""
        assert FillPattern("quarter_cubic") == FillPattern.QUARTER_CUBIC
