"""Boundary-bound infill line segments.

An InfillLineSegment is one scan-line segment (or one boundary-following
connection) whose two ends lie on edges of the inner contour. Segments live
in a SegmentArena for the duration of one generation call and refer to each
other by arena id rather than by reference.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field

from infiller.domain.polygon import Point
from infiller.exceptions import DuplicateLinkError


@dataclass(slots=True, eq=False)
class InfillLineSegment:
    """A segment whose ends touch the region boundary.

    ``start``/``end`` are the original crossing points. They are never
    mutated and act as the ordering key along boundary edges. The
    ``altered_*`` points and the optional bends are what gets emitted.

    Links are per end: ``previous`` is the segment joined at ``start``,
    ``next`` the one joined at ``end``. Each is assigned at most once.

    Attributes:
        id: Stable index in the owning arena
        start: Original start point
        start_segment: Index of the boundary edge the start lies on
        start_polygon: Index of the polygon the start lies on
        end: Original end point
        end_segment: Index of the boundary edge the end lies on
        end_polygon: Index of the polygon the end lies on
        is_connector: True for boundary-following connections
        start_bend: Elbow point inserted after ``altered_start``
        end_bend: Elbow point inserted before ``altered_end``
        previous: Arena id of the segment linked at the start
        next: Arena id of the segment linked at the end
    """

    id: int
    start: Point
    start_segment: int
    start_polygon: int
    end: Point
    end_segment: int
    end_polygon: int
    is_connector: bool = False
    altered_start: Point = field(init=False)
    altered_end: Point = field(init=False)
    start_bend: Point | None = None
    end_bend: Point | None = None
    previous: int | None = None
    next: int | None = None

    def __post_init__(self) -> None:
        self.altered_start = self.start
        self.altered_end = self.end

    def starts_on(self, edge_index: int, polygon_index: int) -> bool:
        """Whether the start (rather than the end) lies on the given edge."""
        return self.start_segment == edge_index and self.start_polygon == polygon_index

    def endpoint_on(self, edge_index: int, polygon_index: int) -> Point:
        """Original end point lying on the given edge."""
        return self.start if self.starts_on(edge_index, polygon_index) else self.end

    def link(self, at_start: bool, other: int) -> None:
        """Attach another segment at one end.

        Raises:
            DuplicateLinkError: If that end is already linked
        """
        existing = self.previous if at_start else self.next
        if existing is not None:
            raise DuplicateLinkError(self.id, at_start, existing, other)
        if at_start:
            self.previous = other
        else:
            self.next = other

    def neighbour(self, at_start: bool) -> int | None:
        return self.previous if at_start else self.next

    def bend(self, at_start: bool) -> Point | None:
        return self.start_bend if at_start else self.end_bend

    def altered(self, at_start: bool) -> Point:
        return self.altered_start if at_start else self.altered_end

    def alter(self, at_start: bool, point: Point, bend: Point) -> None:
        """Replace the emitted end point and insert an elbow before it."""
        if at_start:
            self.altered_start = point
            self.start_bend = bend
        else:
            self.altered_end = point
            self.end_bend = bend

    def emitted_points(self, forward: bool = True) -> list[Point]:
        """Points to emit for this segment, optionally walked end to start."""
        points = [self.altered_start]
        if self.start_bend is not None:
            points.append(self.start_bend)
        if self.end_bend is not None:
            points.append(self.end_bend)
        points.append(self.altered_end)
        if not forward:
            points.reverse()
        return points

    def append_to(self, polyline: list[Point], forward: bool = True, include_start: bool = True) -> None:
        """Append the emitted points to a polyline under construction.

        Args:
            polyline: Points of the polyline being built
            forward: Walk from start to end (False walks end to start)
            include_start: Also append the first point; False when it
                coincides with the previous segment's last point
        """
        points = self.emitted_points(forward)
        polyline.extend(points if include_start else points[1:])


class SegmentArena:
    """Owns every segment of one generation call.

    Ids are list indices, so they stay valid until the arena is dropped.
    """

    def __init__(self) -> None:
        self._segments: list[InfillLineSegment] = []

    def add(
        self,
        start: Point,
        start_segment: int,
        start_polygon: int,
        end: Point,
        end_segment: int,
        end_polygon: int,
        is_connector: bool = False,
    ) -> InfillLineSegment:
        segment = InfillLineSegment(
            id=len(self._segments),
            start=start,
            start_segment=start_segment,
            start_polygon=start_polygon,
            end=end,
            end_segment=end_segment,
            end_polygon=end_polygon,
            is_connector=is_connector,
        )
        self._segments.append(segment)
        return segment

    def __getitem__(self, segment_id: int) -> InfillLineSegment:
        return self._segments[segment_id]

    def __len__(self) -> int:
        return len(self._segments)

    def __iter__(self) -> Iterator[InfillLineSegment]:
        return iter(self._segments)
