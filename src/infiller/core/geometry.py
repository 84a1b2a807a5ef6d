"""Exact integer geometry kernel.

This module provides the primitive operations the fill generators and the
line connector are built on:
- Corner angles and inside-corner classification
- Point-on-segment searches and closest connections
- Line/segment intersection and collision tests
- Distance from a point to a line
- Bisector vectors
- Rotation matrices for scan-line sweeps

All functions are pure, stateless, and work on integer Points. Divisions
truncate toward zero unless stated otherwise.
"""

import math

from infiller.domain import Point, cross, dot, normal, round_div, trunc_div, turn90_ccw, vsize, vsize2
from infiller.exceptions import GeometryError

# Below this length a segment direction is too coarse to divide by directly
SHORT_SEGMENT_LENGTH = 50

# Length used for normalized vectors in corner tests
CORNER_NORMAL_LENGTH = 10000

# Lines intersecting further out than this are treated as parallel
MAX_INTERSECTION_COORD = 2**31 - 1


def angle_left(a: Point, b: Point, c: Point) -> float:
    """Angle at corner b on the left-hand side when walking a -> b -> c.

    Args:
        a: Point before the corner
        b: Corner vertex
        c: Point after the corner

    Returns:
        Angle in radians in [0, 2*pi). Collinear input gives exactly 0 when
        a and c lie on the same side of b, and exactly pi otherwise.

    Examples:
        >>> angle_left(Point(-10, 0), Point(0, 0), Point(10, 0))
        3.141592653589793
        >>> angle_left(Point(10, 0), Point(0, 0), Point(20, 0))
        0.0
    """
    ba = a - b
    bc = c - b
    dott = dot(ba, bc)
    det = ba.x * bc.y - ba.y * bc.x
    if det == 0:
        if (ba.x != 0 and (ba.x > 0) == (bc.x > 0)) or (ba.x == 0 and (ba.y > 0) == (bc.y > 0)):
            return 0.0  # pointy
        return math.pi  # straight
    angle = -math.atan2(det, dott)
    if angle >= 0:
        return angle
    return 2 * math.pi + angle


def closest_on_line_segment(p: Point, a: Point, b: Point) -> Point:
    """Find the point on segment ab closest to p.

    Args:
        p: Query point
        a: Segment start
        b: Segment end

    Returns:
        Closest point; ``a`` for a zero-length segment
    """
    direction = b - a
    projected = dot(p - a, direction)
    length2 = vsize2(direction)
    if length2 == 0 or projected <= 0:
        return a
    if projected >= length2:
        return b
    return a + direction.scaled(projected, length2)


def point_at_distance_on_segment(p: Point, a: Point, b: Point, dist: int) -> Point | None:
    """Find a point r on segment ab with |p - r| == dist.

    When two such points lie on the segment, the one closer to ``a`` (seen
    from the perpendicular foot of p) is returned.

    Args:
        p: Centre of the search circle
        a: Segment start
        b: Segment end
        dist: Required distance from p

    Returns:
        The point on the segment, or None if the circle misses the segment
    """
    ab = b - a
    ab_size = vsize(ab)
    ap = p - a
    if ab_size < SHORT_SEGMENT_LENGTH:
        # project on a unit normal scaled up, dividing by a tiny length loses too much
        direction = normal(ab, 1000)
        ax_size = trunc_div(dot(direction, ap), 1000)
        ab_len = trunc_div(dot(direction, ab), 1000)
    else:
        ax_size = trunc_div(dot(ab, ap), ab_size)
        ab_len = trunc_div(dot(ab, ab), ab_size)
    # ab_len is the projection of b itself, so positions along the segment
    # compare with the same rounding as ax_size

    # perpendicular distance of p from the line, from the cross product
    px_size = vsize(ap) if ab_size == 0 else abs(cross(ab, ap)) // ab_size
    if px_size > dist:
        return None

    xr_size = math.isqrt(dist * dist - px_size * px_size)
    if ax_size <= 0:
        # foot of p lies before a
        ar_size = xr_size + ax_size
        if ar_size < 0 or ar_size > ab_len:
            return None
        return _along(a, b, ab_len, ar_size)
    if ax_size >= ab_len:
        # foot of p lies after b
        ar_size = ax_size - xr_size
        if ar_size < 0 or ar_size > ab_len:
            return None
        return _along(a, b, ab_len, ar_size)

    ar1_size = ax_size - xr_size
    if ar1_size >= 0:
        return _along(a, b, ab_len, ar1_size)
    ar2_size = ax_size + xr_size
    if ar2_size <= ab_len:
        return _along(a, b, ab_len, ar2_size)
    return None


def _along(a: Point, b: Point, ab_len: int, ar_size: int) -> Point:
    """Point ``ar_size`` along ab, measured in the units of ``ab_len``."""
    if ar_size >= ab_len:
        return b
    ab = b - a
    return a + Point(round_div(ab.x * ar_size, ab_len), round_div(ab.y * ar_size, ab_len))


def closest_connection(a1: Point, a2: Point, b1: Point, b2: Point) -> tuple[Point, Point]:
    """Find a short connection between segments a1a2 and b1b2.

    Only the four end-point-to-opposite-segment projections are considered,
    which is exact unless the segments cross.

    Args:
        a1: Start of segment a
        a2: End of segment a
        b1: Start of segment b
        b2: End of segment b

    Returns:
        (point on a, point on b) with the smallest squared distance; on a
        tie the earliest candidate in the order b1, b2, a1, a2 wins
    """
    candidates = [
        (closest_on_line_segment(b1, a1, a2), b1),
        (closest_on_line_segment(b2, a1, a2), b2),
        (a1, closest_on_line_segment(a1, b1, b2)),
        (a2, closest_on_line_segment(a2, b1, b2)),
    ]
    return min(candidates, key=lambda pair: vsize2(pair[0] - pair[1]))


def segments_collide(
    a_from_transformed: Point,
    a_to_transformed: Point,
    b_from_transformed: Point,
    b_to_transformed: Point,
) -> bool:
    """Test whether segment b touches segment a.

    Segment a must already be rotated onto the X axis, running in the
    positive direction.

    Args:
        a_from_transformed: Start of a
        a_to_transformed: End of a (same Y, larger X)
        b_from_transformed: Start of b in the same frame
        b_to_transformed: End of b in the same frame

    Returns:
        True if b crosses or touches a

    Raises:
        GeometryError: If a is not aligned with the positive X axis
    """
    if abs(a_from_transformed.y - a_to_transformed.y) >= 2:
        raise GeometryError("Segment a must be aligned with the X axis")
    if a_from_transformed.x - 2 > a_to_transformed.x:
        raise GeometryError("Segment a must run in the positive X direction")

    y = a_from_transformed.y
    b_from = b_from_transformed
    b_to = b_to_transformed
    if not ((b_from.y >= y >= b_to.y) or (b_to.y >= y >= b_from.y)):
        return False

    if b_to.y == b_from.y:
        # b lies on a's line: compare the X intervals
        low, high = sorted((b_from.x, b_to.x))
        return not (low > a_to_transformed.x or high < a_from_transformed.x)

    x = b_from.x + trunc_div((b_to.x - b_from.x) * (y - b_from.y), b_to.y - b_from.y)
    return a_from_transformed.x <= x <= a_to_transformed.x


def dist_from_line(p: Point, a: Point, b: Point) -> int:
    """Distance from p to the infinite line through a and b.

    Args:
        p: Query point
        a: First point on the line
        b: Second point on the line

    Returns:
        Truncated distance; |p - a| when a == b
    """
    ab_size = vsize(b - a)
    if ab_size == 0:
        return vsize(p - a)
    # shoelace formula, factored
    area_times_two = abs((p.x - b.x) * (p.y - a.y) + (a.x - p.x) * (p.y - b.y))
    return area_times_two // ab_size


def dist2_from_line(p: Point, a: Point, b: Point) -> int:
    """Squared form of :func:`dist_from_line`."""
    dist = dist_from_line(p, a, b)
    return dist * dist


def is_inside_corner(a: Point, b: Point, c: Point, query_point: Point) -> bool:
    """Test whether a query point lies inside the corner a-b-c.

    The inside is the polygon-interior side for a polygon wound so that
    a -> b -> c is part of its boundary.

    Args:
        a: Vertex before the corner
        b: Corner vertex
        c: Vertex after the corner
        query_point: Point to classify

    Returns:
        True if the query lies on the inside of the corner
    """
    ba = normal(a - b, CORNER_NORMAL_LENGTH)
    bc = normal(c - b, CORNER_NORMAL_LENGTH)
    bq = query_point - b
    perpendicular = turn90_ccw(bq)
    project_a_perpendicular = dot(ba, perpendicular)
    project_c_perpendicular = dot(bc, perpendicular)
    if (project_a_perpendicular > 0) != (project_c_perpendicular > 0):
        # query projects between a and c
        return project_a_perpendicular > 0

    project_a_parallel = dot(ba, bq)
    project_c_parallel = dot(bc, bq)
    return (project_c_parallel < project_a_parallel) == (project_a_perpendicular > 0)


def bisector_vector(intersect: Point, a: Point, b: Point, vec_len: int) -> Point:
    """Vector bisecting the rays from ``intersect`` towards a and b.

    Each ray is scaled to ``vec_len`` before averaging, so the result is
    shorter than ``vec_len`` unless the rays coincide.

    Args:
        intersect: Common origin of both rays
        a: Point on the first ray
        b: Point on the second ray
        vec_len: Length each ray is normalized to

    Returns:
        The bisector vector (not a point)
    """
    a0 = a - intersect
    b0 = b - intersect
    a_part = (a0 * vec_len).scaled(1, max(1, vsize(a0)))
    b_part = (b0 * vec_len).scaled(1, max(1, vsize(b0)))
    return (a_part + b_part).scaled(1, 2)


def line_line_intersection(a: Point, b: Point, c: Point, d: Point) -> Point | None:
    """Intersect the infinite lines ab and cd.

    Args:
        a: First point on line one
        b: Second point on line one
        c: First point on line two
        d: Second point on line two

    Returns:
        Intersection rounded to the nearest integer point, or None for
        (practically) parallel lines
    """
    l1_delta = b - a
    l2_delta = d - c
    divisor = cross(l1_delta, l2_delta)
    if divisor == 0:
        return None

    l1_parametric = cross(l2_delta, a - c)
    result = a + Point(
        round_div(l1_parametric * l1_delta.x, divisor),
        round_div(l1_parametric * l1_delta.y, divisor),
    )
    if abs(result.x) > MAX_INTERSECTION_COORD or abs(result.y) > MAX_INTERSECTION_COORD:
        return None
    return result


def point_is_projected_beyond_line(p: Point, a: Point, b: Point) -> int:
    """Classify where p projects onto segment ab.

    Returns:
        -1 before a, 1 beyond b, 0 on the segment
    """
    vec = b - a
    projected = dot(p - a, vec)
    if projected < 0:
        return -1
    if projected > vsize2(vec):
        return 1
    return 0


def compute_scan_segment_idx(x: int, line_distance: int) -> int:
    """Index of the scan-line cell containing x (floor division)."""
    return x // line_distance


class PointMatrix:
    """2D rotation by a fixed angle.

    ``apply`` rotates counter-clockwise by the angle, ``unapply`` rotates
    back. Results are rounded to the nearest integer, ties to even.
    """

    def __init__(self, rotation: float = 0.0) -> None:
        radians = math.radians(rotation)
        self.rotation = rotation
        self._cos = math.cos(radians)
        self._sin = math.sin(radians)

    def apply(self, p: Point) -> Point:
        return Point(
            round(p.x * self._cos - p.y * self._sin),
            round(p.x * self._sin + p.y * self._cos),
        )

    def unapply(self, p: Point) -> Point:
        return Point(
            round(p.x * self._cos + p.y * self._sin),
            round(-p.x * self._sin + p.y * self._cos),
        )
