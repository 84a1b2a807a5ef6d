"""Density multiplier.

Replaces every fill line and polygon with N parallel copies one line width
apart, centred on the original. For odd N the middle copy is the original;
for even N the original itself is not printed.
"""

import math
from collections.abc import Sequence

from infiller.core.clipping import offset
from infiller.domain import Point, Polygon, Polyline

# Miter vectors at turns sharper than this (1 + cos of the turn) are not extended
MIN_MITER_DENOMINATOR = 0.1


def copy_offsets(multiplier: int, line_width: int) -> list[int]:
    """Sideways offsets of the copies, from left to right.

    Example:
        >>> copy_offsets(3, 400)
        [-400, 0, 400]
        >>> copy_offsets(2, 400)
        [-200, 200]
    """
    return [(2 * k - (multiplier - 1)) * line_width // 2 for k in range(multiplier)]


def offset_polyline(line: Polyline, distance: int) -> Polyline:
    """Shift a polyline sideways, positive to the left of its direction.

    Interior vertices move along the miter of the two adjacent segment
    normals, so straight runs stay exactly ``distance`` away.
    """
    points = line.points
    if len(points) < 2 or distance == 0:
        return Polyline(list(points))

    normals: list[tuple[float, float]] = []
    for a, b in zip(points, points[1:]):
        dx = b.x - a.x
        dy = b.y - a.y
        length = math.hypot(dx, dy)
        if length == 0:
            normals.append(normals[-1] if normals else (0.0, 0.0))
        else:
            normals.append((-dy / length, dx / length))

    shifted: list[Point] = []
    for i, p in enumerate(points):
        n_before = normals[i - 1] if i > 0 else normals[0]
        n_after = normals[i] if i < len(normals) else normals[-1]
        denominator = 1 + n_before[0] * n_after[0] + n_before[1] * n_after[1]
        if denominator < MIN_MITER_DENOMINATOR:
            mx, my = n_after
        else:
            mx = (n_before[0] + n_after[0]) / denominator
            my = (n_before[1] + n_after[1]) / denominator
        shifted.append(Point(p.x + round(mx * distance), p.y + round(my * distance)))
    return Polyline(shifted)


def multiply_infill(
    polygons: Sequence[Polygon],
    lines: Sequence[Polyline],
    multiplier: int,
    line_width: int,
) -> tuple[list[Polygon], list[Polyline]]:
    """Replicate fill output into parallel copies.

    Args:
        polygons: Closed fill polygons
        lines: Open fill polylines
        multiplier: Number of copies per original (1 returns the input)
        line_width: Distance between neighbouring copies

    Returns:
        (polygons, lines) with every original replaced by its copies
    """
    if multiplier <= 1:
        return list(polygons), list(lines)

    offsets = copy_offsets(multiplier, line_width)
    result_lines = [offset_polyline(line, distance) for line in lines for distance in offsets]
    result_polygons: list[Polygon] = []
    for polygon in polygons:
        for distance in offsets:
            result_polygons.extend(offset([polygon], distance))
    return result_polygons, result_lines
