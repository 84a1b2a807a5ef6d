"""Polyline stitching.

Joins open polylines whose end points lie close together into longer
chains, so the print head travels less between fill lines. A chain whose
two ends meet becomes a closed polygon.
"""

from collections import defaultdict
from collections.abc import Sequence

from infiller.domain import Point, Polygon, Polyline, vsize2

Cell = tuple[int, int]


class PolylineStitcher:
    """Greedy nearest-endpoint stitcher backed by a spatial hash.

    Example:
        >>> stitcher = PolylineStitcher(max_stitch_distance=400)
        >>> lines, polygons = stitcher.stitch(polylines)
    """

    def __init__(self, max_stitch_distance: int) -> None:
        self.max_stitch_distance = max_stitch_distance
        self._cell_size = max(1, max_stitch_distance)
        self._lines: list[Polyline] = []
        self._grid: dict[Cell, list[tuple[int, bool]]] = {}
        self._used: list[bool] = []

    def stitch(self, polylines: Sequence[Polyline]) -> tuple[list[Polyline], list[Polygon]]:
        """Stitch polylines into longer polylines and closed polygons.

        Args:
            polylines: Open polylines in any order and direction

        Returns:
            (open polylines, closed polygons)
        """
        self._lines = [line for line in polylines if len(line) >= 2]
        self._grid = defaultdict(list)
        for index, line in enumerate(self._lines):
            self._grid[self._cell(line.start)].append((index, True))
            self._grid[self._cell(line.end)].append((index, False))
        self._used = [False] * len(self._lines)

        result_lines: list[Polyline] = []
        result_polygons: list[Polygon] = []
        for index, line in enumerate(self._lines):
            if self._used[index]:
                continue
            self._used[index] = True
            chain = list(line.points)

            closed = self._extend(chain)
            if not closed:
                chain.reverse()
                closed = self._extend(chain)
                chain.reverse()

            if closed:
                if chain[0] == chain[-1]:
                    chain.pop()
                if len(chain) >= 3:
                    result_polygons.append(Polygon(chain))
            else:
                result_lines.append(Polyline(chain))

        return result_lines, result_polygons

    def _cell(self, p: Point) -> Cell:
        return (p.x // self._cell_size, p.y // self._cell_size)

    def _is_closing(self, chain: list[Point]) -> bool:
        # closes only on an exact return to the start
        return len(chain) >= 3 and chain[-1] == chain[0]

    def _extend(self, chain: list[Point]) -> bool:
        """Grow a chain at its end. Returns True once the chain closes."""
        while True:
            if self._is_closing(chain):
                return True
            found = self._nearest(chain[-1])
            if found is None:
                return False
            index, at_start = found
            self._used[index] = True
            points = self._lines[index].points
            if not at_start:
                points = list(reversed(points))
            if points[0] == chain[-1]:
                chain.extend(points[1:])
            else:
                chain.extend(points)

    def _nearest(self, p: Point) -> tuple[int, bool] | None:
        """Closest unused end point within stitch distance, as (line, is_start)."""
        max2 = self.max_stitch_distance * self.max_stitch_distance
        cx, cy = self._cell(p)
        best: tuple[int, int, int] | None = None
        for dx in (-1, 0, 1):
            for dy in (-1, 0, 1):
                for index, at_start in self._grid.get((cx + dx, cy + dy), ()):
                    if self._used[index]:
                        continue
                    line = self._lines[index]
                    endpoint = line.start if at_start else line.end
                    dist2 = vsize2(endpoint - p)
                    if dist2 > max2:
                        continue
                    # ties: lowest line index, then start before end
                    candidate = (dist2, index, 0 if at_start else 1)
                    if best is None or candidate < best:
                        best = candidate
        if best is None:
            return None
        return best[1], best[2] == 0
