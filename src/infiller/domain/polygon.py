"""Core geometric types for fill regions.

This module defines the integer geometry used throughout infiller:
- Point: A 2D integer point with exact vector arithmetic
- Polygon: A closed boundary loop (region outline, inset ring, fill polygon)
- Polyline: An open toolpath
- AABB: Axis-aligned bounding box

Coordinates are fixed-point integers (micrometres). Arithmetic on points
never leaves the integer domain; every division truncates toward zero.
"""

import math
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any


def trunc_div(numerator: int, denominator: int) -> int:
    """Integer division rounding toward zero.

    Python's ``//`` floors, which differs from truncation for negative
    quotients. Fill geometry relies on truncation being symmetric around 0.
    """
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator >= 0) == (denominator > 0) else -quotient


def round_div(numerator: int, denominator: int) -> int:
    """Integer division rounding half away from zero."""
    quotient = (2 * abs(numerator) + abs(denominator)) // (2 * abs(denominator))
    return quotient if (numerator >= 0) == (denominator > 0) else -quotient


@dataclass(frozen=True, slots=True)
class Point:
    """A point (or vector) in the integer plane.

    Immutable and hashable for use in sets/dicts.

    Attributes:
        x: X coordinate in micrometres
        y: Y coordinate in micrometres
    """

    x: int
    y: int

    def __add__(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Point") -> "Point":
        return Point(self.x - other.x, self.y - other.y)

    def __neg__(self) -> "Point":
        return Point(-self.x, -self.y)

    def __mul__(self, factor: int) -> "Point":
        return Point(self.x * factor, self.y * factor)

    __rmul__ = __mul__

    def scaled(self, numerator: int, denominator: int) -> "Point":
        """Multiply by ``numerator`` then divide by ``denominator``, truncating."""
        return Point(
            trunc_div(self.x * numerator, denominator),
            trunc_div(self.y * numerator, denominator),
        )

    def to_tuple(self) -> tuple[int, int]:
        """Convert to simple (x, y) tuple.

        Returns:
            Tuple of (x, y) coordinates
        """
        return (self.x, self.y)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC.

        Returns:
            Dictionary with x and y fields
        """
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Point":
        """Deserialize from dictionary.

        Args:
            data: Dictionary with x and y fields

        Returns:
            Point instance
        """
        return cls(x=int(data["x"]), y=int(data["y"]))


ORIGIN = Point(0, 0)


def dot(a: Point, b: Point) -> int:
    return a.x * b.x + a.y * b.y


def cross(a: Point, b: Point) -> int:
    """Z component of the 3D cross product; positive when b is left of a."""
    return a.x * b.y - a.y * b.x


def vsize2(p: Point) -> int:
    return p.x * p.x + p.y * p.y


def vsize(p: Point) -> int:
    """Length of a vector, floored to an integer."""
    return math.isqrt(vsize2(p))


def normal(p: Point, length: int) -> Point:
    """Scale a vector to the given length.

    A zero vector has no direction; it maps to ``(length, 0)``.
    """
    size = vsize(p)
    if size < 1:
        return Point(length, 0)
    return p.scaled(length, size)


def turn90_ccw(p: Point) -> Point:
    return Point(-p.y, p.x)


@dataclass(frozen=True, slots=True)
class AABB:
    """Axis-aligned bounding box with inclusive integer bounds."""

    min_x: int
    min_y: int
    max_x: int
    max_y: int

    @classmethod
    def from_points(cls, points: Iterable[Point]) -> "AABB":
        """Build the bounding box of a non-empty point set.

        Raises:
            ValueError: If no points are given
        """
        xs: list[int] = []
        ys: list[int] = []
        for p in points:
            xs.append(p.x)
            ys.append(p.y)
        if not xs:
            raise ValueError("Cannot bound an empty point set")
        return cls(min(xs), min(ys), max(xs), max(ys))

    @classmethod
    def from_polygons(cls, polygons: Iterable["Polygon"]) -> "AABB":
        return cls.from_points(p for polygon in polygons for p in polygon.points)

    @property
    def width(self) -> int:
        return self.max_x - self.min_x

    @property
    def height(self) -> int:
        return self.max_y - self.min_y

    def contains(self, p: Point) -> bool:
        return self.min_x <= p.x <= self.max_x and self.min_y <= p.y <= self.max_y


@dataclass
class Polygon:
    """A closed polygon.

    The closing edge from the last point back to the first is implicit.
    Edge ``i`` runs from ``points[i - 1]`` to ``points[i]``, so edge 0 is
    the closing edge; crossing tables index edges this way.

    Attributes:
        points: Vertices in order (counter-clockwise for outlines,
            clockwise for holes)
    """

    points: list[Point]
    _cached_area: float | None = field(default=None, repr=False, init=False, compare=False)

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[Point]:
        return iter(self.points)

    def __getitem__(self, index: int) -> Point:
        return self.points[index]

    def signed_area(self) -> float:
        """Calculate signed area using the shoelace formula.

        Positive for counter-clockwise winding, negative for clockwise.
        Result is cached.

        Returns:
            Signed area of the polygon
        """
        if self._cached_area is not None:
            return self._cached_area

        n = len(self.points)
        if n < 3:
            self._cached_area = 0.0
            return 0.0

        twice_area = 0
        for i in range(n):
            a = self.points[i - 1]
            b = self.points[i]
            twice_area += a.x * b.y - b.x * a.y

        self._cached_area = twice_area / 2
        return self._cached_area

    def area(self) -> float:
        return abs(self.signed_area())

    def is_counter_clockwise(self) -> bool:
        return self.signed_area() > 0

    def bounding_box(self) -> AABB:
        return AABB.from_points(self.points)

    def edges(self) -> Iterator[tuple[Point, Point]]:
        """Iterate edges as (from, to) pairs, starting with the closing edge."""
        for i, p in enumerate(self.points):
            yield self.points[i - 1], p

    def contains_point(self, point: Point) -> bool:
        """Test whether a point lies strictly inside using ray casting.

        Args:
            point: Point to test

        Returns:
            True if inside, False if outside (boundary points are unspecified)
        """
        inside = False
        n = len(self.points)
        if n < 3:
            return False
        for i in range(n):
            a = self.points[i - 1]
            b = self.points[i]
            if (a.y > point.y) != (b.y > point.y):
                # x of the edge at the ray's height, compared exactly
                lhs = (point.x - a.x) * (b.y - a.y)
                rhs = (b.x - a.x) * (point.y - a.y)
                if (lhs < rhs) == (b.y > a.y):
                    inside = not inside
        return inside

    def transformed(self, transform: Callable[[Point], Point]) -> "Polygon":
        return Polygon([transform(p) for p in self.points])

    def reversed(self) -> "Polygon":
        return Polygon(list(reversed(self.points)))

    def to_list(self) -> list[list[int]]:
        """Serialize as a list of ``[x, y]`` pairs."""
        return [[p.x, p.y] for p in self.points]

    @classmethod
    def from_list(cls, data: Iterable[Iterable[int]]) -> "Polygon":
        return cls([Point(int(x), int(y)) for x, y in data])


@dataclass
class Polyline:
    """An open polyline (a toolpath with two distinct ends).

    Attributes:
        points: Vertices from start to end
    """

    points: list[Point]

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[Point]:
        return iter(self.points)

    def __getitem__(self, index: int) -> Point:
        return self.points[index]

    @property
    def start(self) -> Point:
        return self.points[0]

    @property
    def end(self) -> Point:
        return self.points[-1]

    @property
    def is_closed(self) -> bool:
        """True when the polyline returns to its starting point."""
        return len(self.points) > 2 and self.points[0] == self.points[-1]

    def length(self) -> float:
        return sum(
            math.dist(a.to_tuple(), b.to_tuple())
            for a, b in zip(self.points, self.points[1:])
        )

    def segments(self) -> Iterator[tuple[Point, Point]]:
        return zip(self.points, self.points[1:])

    def transformed(self, transform: Callable[[Point], Point]) -> "Polyline":
        return Polyline([transform(p) for p in self.points])

    def reversed(self) -> "Polyline":
        return Polyline(list(reversed(self.points)))

    def to_list(self) -> list[list[int]]:
        return [[p.x, p.y] for p in self.points]

    @classmethod
    def from_list(cls, data: Iterable[Iterable[int]]) -> "Polyline":
        return cls([Point(int(x), int(y)) for x, y in data])
