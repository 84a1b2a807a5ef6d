"""Joining scan-line segments into long polylines.

A connected-lines sweep records every scan-line segment in a CrossingTable,
keyed by the boundary edge each end lies on. The LineConnector then walks
the boundary of every polygon, joining each segment end to the next one
along the boundary with a short connector that follows the edge:

1. Crossings on each edge are ordered by distance from the edge's start.
2. Consecutive crossings from different chains are linked; a union-find
   keeps chains from closing onto themselves prematurely.
3. When two lines that are about to be joined cross each other close to
   the boundary, both ends are bent back (resolve_intersection) so the
   join becomes two elbows instead of a small loop.
4. Linked chains are emitted as open polylines, leftover cycles as closed
   ones.
"""

import logging
from collections.abc import Sequence

from infiller.core.geometry import (
    bisector_vector,
    line_line_intersection,
    point_is_projected_beyond_line,
)
from infiller.domain import (
    InfillLineSegment,
    Point,
    Polygon,
    Polyline,
    SegmentArena,
    normal,
    vsize,
    vsize2,
)
from infiller.exceptions import BrokenChainError

logger = logging.getLogger(__name__)


class UnionFind:
    """Disjoint sets over arena ids with path halving."""

    def __init__(self) -> None:
        self._parent: dict[int, int] = {}

    def add(self, item: int) -> None:
        self._parent.setdefault(item, item)

    def find(self, item: int) -> int:
        parent = self._parent
        while parent[item] != item:
            parent[item] = parent[parent[item]]
            item = parent[item]
        return item

    def unite(self, a: int, b: int) -> None:
        root_a = self.find(a)
        root_b = self.find(b)
        if root_a != root_b:
            self._parent[root_b] = root_a

    def __contains__(self, item: int) -> bool:
        return item in self._parent


class CrossingTable:
    """Scan-line segments indexed by the boundary edges they end on.

    ``on_edge(polygon, edge)`` lists the segments with an end on that
    edge. Edge ``i`` of a polygon runs from ``points[i - 1]`` to
    ``points[i]``. The table owns the segment arena of one generation
    call.

    Attributes:
        polygons: The inner contour the segments were cut from
        arena: Every segment, including connectors added later
    """

    def __init__(self, polygons: Sequence[Polygon]) -> None:
        self.polygons = list(polygons)
        self.arena = SegmentArena()
        self._edges: list[list[list[int]]] = [[[] for _ in polygon.points] for polygon in self.polygons]

    def add_segment(
        self,
        start: Point,
        start_edge: int,
        start_polygon: int,
        end: Point,
        end_edge: int,
        end_polygon: int,
    ) -> InfillLineSegment:
        """Record a scan-line segment under both of its boundary edges."""
        segment = self.arena.add(start, start_edge, start_polygon, end, end_edge, end_polygon)
        self._edges[start_polygon][start_edge].append(segment.id)
        if (end_polygon, end_edge) != (start_polygon, start_edge):
            self._edges[end_polygon][end_edge].append(segment.id)
        return segment

    def on_edge(self, polygon_index: int, edge_index: int) -> list[InfillLineSegment]:
        return [self.arena[segment_id] for segment_id in self._edges[polygon_index][edge_index]]

    @property
    def segment_count(self) -> int:
        return len(self.arena)

    def is_empty(self) -> bool:
        return len(self.arena) == 0


def resolve_intersection(
    at_distance: int,
    intersect: Point,
    connect_start: Point,
    connect_end: Point,
    a: InfillLineSegment,
    b: InfillLineSegment,
    a_at_start: bool,
    b_at_start: bool,
) -> tuple[Point, Point]:
    """Turn two lines crossing near the boundary into two elbows.

    Line ``a`` arrives at the boundary at ``connect_start``, line ``b``
    leaves from ``connect_end``, and the two cross at ``intersect``. Each
    line gets a bend ``at_distance`` from the intersection on its interior
    side. From the bend a leg parallel to the bisector of the two
    connection rays runs to the boundary, where the new connect point is.

    Only the altered points and bends change; the original end points stay
    as they are. A segment end that is already bent is left alone, so
    resolving twice changes nothing.

    Args:
        at_distance: Distance of each bend from the intersection
        intersect: Crossing point of lines a and b
        connect_start: End of a on the boundary
        connect_end: End of b on the boundary
        a: Line arriving at the boundary
        b: Line leaving the boundary
        a_at_start: Whether a touches the boundary with its start
        b_at_start: Whether b touches the boundary with its start

    Returns:
        The new (connect_start, connect_end); the input points when the
        geometry does not allow a bend
    """
    if a.bend(a_at_start) is not None or b.bend(b_at_start) is not None:
        return a.altered(a_at_start), b.altered(b_at_start)

    interior_a = a.end if a_at_start else a.start
    interior_b = b.end if b_at_start else b.start
    if interior_a == intersect or interior_b == intersect:
        return connect_start, connect_end

    bisect = bisector_vector(intersect, connect_start, connect_end, at_distance)
    if bisect.x == 0 and bisect.y == 0:
        return connect_start, connect_end

    bend_a = intersect + normal(interior_a - intersect, at_distance)
    bend_b = intersect + normal(interior_b - intersect, at_distance)
    new_start = line_line_intersection(bend_a, bend_a + bisect, connect_start, connect_end)
    new_end = line_line_intersection(bend_b, bend_b + bisect, connect_start, connect_end)
    if new_start is None or new_end is None:
        return connect_start, connect_end

    a.alter(a_at_start, new_start, bend_a)
    b.alter(b_at_start, new_end, bend_b)
    return new_start, new_end


class LineConnector:
    """Links the segments of a CrossingTable along the boundary.

    Example:
        >>> connector = LineConnector(table, line_width=400, line_distance=4000)
        >>> polylines = connector.connect()
    """

    def __init__(self, table: CrossingTable, line_width: int, line_distance: int) -> None:
        self.table = table
        self.line_width = line_width
        self.line_distance = line_distance
        self._groups = UnionFind()
        self.resolved_count = 0

    def connect(self) -> list[Polyline]:
        """Link all segments and emit the resulting polylines.

        Returns:
            Open chains, then closed cycles (first point repeated at the end),
            in arena order of their first segment

        Raises:
            DuplicateLinkError: If a segment end would be linked twice
            BrokenChainError: If a link is not mirrored by its neighbour
        """
        if self.table.is_empty():
            return []

        for segment in self.table.arena:
            self._groups.add(segment.id)

        for polygon_index, polygon in enumerate(self.table.polygons):
            if len(polygon) > 0:
                self._connect_polygon(polygon_index, polygon)

        polylines = self._emit()
        logger.debug(
            "Connected %d segments into %d polylines (%d crossings resolved)",
            len(self.table.arena), len(polylines), self.resolved_count
        )
        return polylines

    def _connect_polygon(self, polygon_index: int, polygon: Polygon) -> None:
        arena = self.table.arena
        half_line_distance2 = self.line_distance * self.line_distance // 4
        vertex_count = len(polygon)

        previous_crossing: InfillLineSegment | None = None
        previous_segment: InfillLineSegment | None = None
        vertex_before = polygon[-1]

        for edge_index in range(vertex_count):
            vertex_after = polygon[edge_index]
            crossings = sorted(
                self.table.on_edge(polygon_index, edge_index),
                key=lambda s: vsize(s.endpoint_on(edge_index, polygon_index) - vertex_before),
            )

            for crossing in crossings:
                if previous_crossing is None or previous_segment is None:
                    # not drawing yet: this crossing starts a connection
                    previous_crossing = crossing
                    previous_segment = crossing
                    continue

                crossing_group = self._groups.find(crossing.id)
                previous_group = self._groups.find(previous_crossing.id)
                if crossing_group == previous_group:
                    continue

                previous_at_start = previous_segment.starts_on(edge_index, polygon_index)
                crossing_at_start = crossing.starts_on(edge_index, polygon_index)
                previous_point = previous_segment.endpoint_on(edge_index, polygon_index)
                next_point = crossing.endpoint_on(edge_index, polygon_index)

                if previous_point == next_point:
                    previous_segment.link(previous_at_start, crossing.id)
                    crossing.link(crossing_at_start, previous_segment.id)
                else:
                    if not previous_segment.is_connector and vsize2(previous_point - next_point) < half_line_distance2:
                        previous_point, next_point = self._resolve(
                            previous_segment, previous_at_start, crossing, crossing_at_start,
                            previous_point, next_point,
                        )
                    connector = arena.add(
                        previous_point, edge_index, polygon_index,
                        next_point, edge_index, polygon_index,
                        is_connector=True,
                    )
                    previous_segment.link(previous_at_start, connector.id)
                    connector.link(True, previous_segment.id)
                    connector.link(False, crossing.id)
                    crossing.link(crossing_at_start, connector.id)

                self._groups.unite(crossing_group, previous_group)
                previous_crossing = None
                previous_segment = None

            if previous_crossing is not None and previous_segment is not None:
                # still drawing: follow the boundary round the corner
                at_start = previous_segment.starts_on(edge_index, polygon_index)
                corner_from = previous_segment.endpoint_on(edge_index, polygon_index)
                if corner_from == vertex_after:
                    previous_crossing = None
                    previous_segment = None
                else:
                    connector = arena.add(
                        corner_from, edge_index, polygon_index,
                        vertex_after, (edge_index + 1) % vertex_count, polygon_index,
                        is_connector=True,
                    )
                    previous_segment.link(at_start, connector.id)
                    connector.link(True, previous_segment.id)
                    previous_segment = connector

            vertex_before = vertex_after

    def _resolve(
        self,
        previous_segment: InfillLineSegment,
        previous_at_start: bool,
        crossing: InfillLineSegment,
        crossing_at_start: bool,
        previous_point: Point,
        next_point: Point,
    ) -> tuple[Point, Point]:
        """Bend two lines apart if they cross before reaching the boundary."""
        intersect = line_line_intersection(
            previous_segment.start, previous_segment.end, crossing.start, crossing.end
        )
        if intersect is None or intersect in (previous_point, next_point):
            return previous_point, next_point
        if point_is_projected_beyond_line(intersect, previous_segment.start, previous_segment.end) != 0:
            return previous_point, next_point
        if point_is_projected_beyond_line(intersect, crossing.start, crossing.end) != 0:
            return previous_point, next_point

        self.resolved_count += 1
        return resolve_intersection(
            self.line_width, intersect, previous_point, next_point,
            previous_segment, crossing, previous_at_start, crossing_at_start,
        )

    def _step(self, segment_id: int, forward: bool) -> tuple[int, bool] | None:
        """Move to the segment linked at the exit end.

        Returns:
            (neighbour id, whether it is walked start to end), or None at a
            chain end
        """
        segment = self.table.arena[segment_id]
        neighbour_id = segment.neighbour(at_start=not forward)
        if neighbour_id is None:
            return None
        neighbour = self.table.arena[neighbour_id]
        if neighbour.previous == segment_id:
            return neighbour_id, True
        if neighbour.next == segment_id:
            return neighbour_id, False
        raise BrokenChainError(segment_id, neighbour_id)

    def _emit(self) -> list[Polyline]:
        arena = self.table.arena
        completed: set[int] = set()
        chains: list[Polyline] = []
        cycles: list[Polyline] = []

        for segment in arena:
            if segment.is_connector:
                continue
            group = self._groups.find(segment.id)
            if group in completed:
                continue
            completed.add(group)

            # walk backwards to the start of the chain
            start = (segment.id, True)
            is_cycle = False
            for _ in range(len(arena)):
                back = self._step(start[0], not start[1])
                if back is None:
                    break
                start = (back[0], not back[1])
                if start[0] == segment.id:
                    is_cycle = True
                    break

            points: list[Point] = []
            current: tuple[int, bool] | None = start
            for _ in range(len(arena)):
                if current is None:
                    break
                walked = arena[current[0]]
                first = walked.altered(at_start=current[1])
                walked.append_to(points, forward=current[1], include_start=not points or points[-1] != first)
                current = self._step(*current)
                if current is not None and current[0] == start[0]:
                    break

            if is_cycle:
                if points[-1] != points[0]:
                    points.append(points[0])
                cycles.append(Polyline(points))
            else:
                chains.append(Polyline(points))

        return chains + cycles
