"""Tests for domain models to verify they work correctly."""

import pytest

from infiller.domain import (
    AABB,
    ExtrusionLine,
    InfillResult,
    Layer,
    Point,
    Polygon,
    Polyline,
    SegmentArena,
    normal,
    round_div,
    trunc_div,
    vsize,
)
from infiller.exceptions import DuplicateLinkError


def square(size: int, x: int = 0, y: int = 0) -> Polygon:
    return Polygon([Point(x, y), Point(x + size, y), Point(x + size, y + size), Point(x, y + size)])


class TestIntegerDivision:
    """Tests for the truncating and rounding divisions."""

    def test_trunc_div_rounds_toward_zero(self) -> None:
        """Test that truncation is symmetric around zero."""
        assert trunc_div(7, 2) == 3
        assert trunc_div(-7, 2) == -3
        assert trunc_div(7, -2) == -3
        assert trunc_div(-7, -2) == 3

    def test_round_div_rounds_half_away_from_zero(self) -> None:
        """Test rounding of exact halves."""
        assert round_div(5, 2) == 3
        assert round_div(-5, 2) == -3
        assert round_div(4, 3) == 1
        assert round_div(-4, 3) == -1


class TestPoint:
    """Tests for Point class."""

    def test_point_creation(self) -> None:
        """Test basic point creation."""
        p = Point(100, 200)
        assert p.x == 100
        assert p.y == 200

    def test_point_arithmetic(self) -> None:
        """Test vector arithmetic stays in integers."""
        a = Point(10, 20)
        b = Point(3, -4)
        assert a + b == Point(13, 16)
        assert a - b == Point(7, 24)
        assert -a == Point(-10, -20)
        assert a * 3 == Point(30, 60)
        assert 3 * a == Point(30, 60)

    def test_scaled_truncates(self) -> None:
        """Test scaling truncates toward zero."""
        assert Point(-7, 7).scaled(1, 2) == Point(-3, 3)

    def test_point_serialization(self) -> None:
        """Test point serialization and deserialization."""
        p1 = Point(100, -200)
        p2 = Point.from_dict(p1.to_dict())
        assert p2 == p1

    def test_point_immutable(self) -> None:
        """Test that point is immutable."""
        p = Point(100, 200)
        with pytest.raises(AttributeError):
            p.x = 300  # type: ignore

    def test_vector_size(self) -> None:
        """Test integer vector length."""
        assert vsize(Point(3, 4)) == 5
        assert vsize(Point(1, 1)) == 1

    def test_normal_of_zero_vector(self) -> None:
        """Test that a zero vector normalizes to the X axis."""
        assert normal(Point(0, 0), 10) == Point(10, 0)
        assert normal(Point(0, 50), 10) == Point(0, 10)


class TestAABB:
    """Tests for the bounding box."""

    def test_from_polygons(self) -> None:
        """Test bounding box over several polygons."""
        box = AABB.from_polygons([square(10), square(10, 50, -20)])
        assert box == AABB(0, -20, 60, 10)
        assert box.width == 60
        assert box.height == 30

    def test_contains_is_inclusive(self) -> None:
        """Test that the bounds themselves are inside."""
        box = AABB(0, 0, 10, 10)
        assert box.contains(Point(10, 0))
        assert not box.contains(Point(11, 0))

    def test_empty_point_set(self) -> None:
        """Test that an empty point set is rejected."""
        with pytest.raises(ValueError):
            AABB.from_points([])


class TestPolygon:
    """Tests for Polygon class."""

    def test_signed_area_counterclockwise(self) -> None:
        """Test signed area for counter-clockwise square."""
        polygon = square(100)
        assert polygon.signed_area() == 10000.0
        assert polygon.is_counter_clockwise()

    def test_signed_area_clockwise(self) -> None:
        """Test signed area for clockwise square."""
        polygon = square(100).reversed()
        assert polygon.signed_area() == -10000.0
        assert polygon.area() == 10000.0

    def test_edges_start_with_closing_edge(self) -> None:
        """Test that edge 0 runs from the last point to the first."""
        polygon = square(10)
        edges = list(polygon.edges())
        assert edges[0] == (Point(0, 10), Point(0, 0))
        assert len(edges) == 4

    def test_contains_point(self) -> None:
        """Test ray casting inside and outside."""
        polygon = square(100)
        assert polygon.contains_point(Point(50, 50))
        assert not polygon.contains_point(Point(150, 50))

    def test_serialization(self) -> None:
        """Test list serialization."""
        polygon = square(5)
        assert Polygon.from_list(polygon.to_list()) == polygon


class TestPolyline:
    """Tests for Polyline class."""

    def test_length_and_ends(self) -> None:
        """Test length and end points."""
        line = Polyline([Point(0, 0), Point(3, 4), Point(3, 10)])
        assert line.start == Point(0, 0)
        assert line.end == Point(3, 10)
        assert line.length() == pytest.approx(11.0)
        assert not line.is_closed

    def test_is_closed(self) -> None:
        """Test that a repeated first point closes the polyline."""
        line = Polyline([Point(0, 0), Point(10, 0), Point(10, 10), Point(0, 0)])
        assert line.is_closed


class TestSegmentArena:
    """Tests for boundary-bound segments."""

    def test_ids_are_indices(self) -> None:
        """Test that arena ids follow insertion order."""
        arena = SegmentArena()
        a = arena.add(Point(0, 0), 0, 0, Point(10, 0), 2, 0)
        b = arena.add(Point(0, 5), 0, 0, Point(10, 5), 2, 0)
        assert (a.id, b.id) == (0, 1)
        assert arena[1] is b
        assert len(arena) == 2

    def test_altered_points_start_as_originals(self) -> None:
        """Test that altered points mirror the originals until altered."""
        segment = SegmentArena().add(Point(0, 0), 0, 0, Point(10, 0), 2, 0)
        assert segment.altered_start == Point(0, 0)
        assert segment.altered_end == Point(10, 0)

    def test_endpoint_on_edge(self) -> None:
        """Test lookup of the end lying on an edge."""
        segment = SegmentArena().add(Point(0, 0), 3, 0, Point(10, 0), 1, 0)
        assert segment.starts_on(3, 0)
        assert segment.endpoint_on(3, 0) == Point(0, 0)
        assert segment.endpoint_on(1, 0) == Point(10, 0)

    def test_link_twice_raises(self) -> None:
        """Test that each end can only be linked once."""
        segment = SegmentArena().add(Point(0, 0), 0, 0, Point(10, 0), 2, 0)
        segment.link(True, 5)
        with pytest.raises(DuplicateLinkError):
            segment.link(True, 6)
        segment.link(False, 6)
        assert segment.neighbour(True) == 5
        assert segment.neighbour(False) == 6

    def test_emitted_points_include_bends(self) -> None:
        """Test that bends are emitted next to their altered end."""
        segment = SegmentArena().add(Point(0, 0), 0, 0, Point(100, 0), 2, 0)
        segment.alter(False, Point(100, 8), Point(90, 8))
        assert segment.emitted_points() == [Point(0, 0), Point(90, 8), Point(100, 8)]
        assert segment.emitted_points(forward=False) == [Point(100, 8), Point(90, 8), Point(0, 0)]
        # originals are kept as the ordering key
        assert segment.end == Point(100, 0)


class TestLayer:
    """Tests for Layer class."""

    def test_empty_layer(self) -> None:
        """Test layers without a usable polygon."""
        assert Layer(index=0, z=200).is_empty()
        assert Layer(index=0, z=200, outline=[Polygon([Point(0, 0), Point(1, 1)])]).is_empty()

    def test_area_subtracts_holes(self) -> None:
        """Test that clockwise holes reduce the area."""
        layer = Layer(index=0, z=0, outline=[square(100), square(20, 40, 40).reversed()])
        assert layer.area() == 10000 - 400

    def test_serialization(self) -> None:
        """Test layer serialization round trip."""
        layer = Layer(index=3, z=600, outline=[square(10)])
        restored = Layer.from_dict(layer.to_dict())
        assert restored.index == 3
        assert restored.z == 600
        assert restored.outline == layer.outline


class TestInfillResult:
    """Tests for InfillResult class."""

    def test_new_result_is_empty(self) -> None:
        """Test that a fresh result holds nothing."""
        assert InfillResult().is_empty()

    def test_add_toolpaths_bins_by_inset(self) -> None:
        """Test that wall lines are binned by their inset index."""
        result = InfillResult()
        result.add_toolpaths([[ExtrusionLine.from_polygon(square(10), 1, 4)]])
        assert len(result.toolpaths) == 2
        assert result.toolpaths[0] == []
        assert result.toolpaths[1][0].inset_idx == 1

    def test_serialization(self) -> None:
        """Test result serialization round trip."""
        result = InfillResult(
            toolpaths=[[ExtrusionLine.from_polygon(square(10), 0, 4)]],
            polygons=[square(5)],
            lines=[Polyline([Point(0, 0), Point(5, 5)])],
        )
        data = result.to_dict()
        assert data["toolpaths"][0][0]["junctions"][1] == [10, 0, 4]

        restored = InfillResult.from_dict(data)
        assert restored.polygons == result.polygons
        assert restored.lines == result.lines
        assert restored.toolpaths[0][0].to_polygon() == square(10)
