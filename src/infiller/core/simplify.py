"""Toolpath simplification.

Removes vertices that add resolution the printer cannot reproduce: a vertex
goes when one of its adjacent segments is shorter than ``max_resolution``
and dropping it moves the path by at most ``max_deviation``.
"""

from collections.abc import Sequence

from infiller.core.geometry import dist_from_line
from infiller.domain import Point, Polygon, Polyline, vsize2


class Simplifier:
    """Simplifies polygons and polylines with fixed tolerances.

    A tolerance of 0 in either parameter disables simplification; only
    repeated vertices are removed then.
    """

    def __init__(self, max_resolution: int, max_deviation: int) -> None:
        self.max_resolution = max_resolution
        self.max_deviation = max_deviation

    @property
    def enabled(self) -> bool:
        return self.max_resolution > 0 and self.max_deviation > 0

    def polygon(self, polygons: Sequence[Polygon]) -> list[Polygon]:
        result: list[Polygon] = []
        for polygon in polygons:
            if len(polygon) < 3:
                continue
            points = self._simplify(polygon.points + [polygon.points[0]])[:-1]
            if len(points) >= 3:
                result.append(Polygon(points))
        return result

    def polyline(self, polylines: Sequence[Polyline]) -> list[Polyline]:
        result: list[Polyline] = []
        for line in polylines:
            if len(line) < 2:
                continue
            points = self._simplify(list(line.points))
            if len(points) >= 2:
                result.append(Polyline(points))
        return result

    def _simplify(self, points: list[Point]) -> list[Point]:
        """Simplify an open point sequence, always keeping both ends."""
        resolution2 = self.max_resolution * self.max_resolution
        kept = [points[0]]
        for i in range(1, len(points) - 1):
            candidate = points[i]
            if candidate == kept[-1]:
                continue
            if self.enabled:
                following = points[i + 1]
                is_short = (
                    vsize2(candidate - kept[-1]) < resolution2
                    or vsize2(following - candidate) < resolution2
                )
                if is_short and dist_from_line(candidate, kept[-1], following) <= self.max_deviation:
                    continue
            kept.append(candidate)
        if len(points) > 1 and (points[-1] != kept[-1] or len(kept) == 1):
            kept.append(points[-1])
        return kept
