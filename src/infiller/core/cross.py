"""Cross and cross-3D fill.

A density-adaptive space-filling curve. An external provider decides which
cells of a quadtree are subdivided; the generator threads one closed Moore
curve through the centres of all leaf cells. Denser subdivision gives a
denser curve. Cross queries the provider at z = 0 so every layer repeats;
cross-3D queries at the layer height.
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Protocol

from infiller.config import FillPattern
from infiller.core.clipping import clip_polylines, intersection
from infiller.core.context import PatternContext, PatternOutput
from infiller.domain import AABB, Point, Polygon, Polyline
from infiller.exceptions import ProviderError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CrossCell:
    """An axis-aligned square cell of the subdivision quadtree.

    Attributes:
        min_x: Left edge
        min_y: Bottom edge
        size: Edge length
        depth: Subdivision depth, 0 for the root
    """

    min_x: int
    min_y: int
    size: int
    depth: int = 0

    @property
    def center(self) -> Point:
        half = self.size // 2
        return Point(self.min_x + half, self.min_y + half)


class CrossFillProvider(Protocol):
    """Read-only subdivision oracle, shared between layers."""

    @property
    def root(self) -> CrossCell: ...

    def is_subdivided(self, cell: CrossCell, z: int) -> bool: ...


class UniformCrossFillProvider:
    """Subdivides every cell down to a minimum size.

    Example:
        >>> provider = UniformCrossFillProvider.for_region(polygons, line_distance=4000)
    """

    def __init__(self, root: CrossCell, min_cell_size: int) -> None:
        self._root = root
        self.min_cell_size = min_cell_size

    @classmethod
    def for_region(cls, polygons: list[Polygon], line_distance: int) -> "UniformCrossFillProvider":
        """Cover a region's bounding box with leaves one spacing wide."""
        aabb = AABB.from_polygons(polygons)
        size = max(line_distance, 1)
        while size < max(aabb.width, aabb.height):
            size *= 2
        return cls(CrossCell(aabb.min_x, aabb.min_y, size), max(line_distance, 1))

    @property
    def root(self) -> CrossCell:
        return self._root

    def is_subdivided(self, cell: CrossCell, z: int) -> bool:
        return cell.size > self.min_cell_size


@dataclass(frozen=True, slots=True)
class _Frame:
    """A cell traversed from ``origin`` towards ``origin + a``; ``b`` points inwards."""

    origin: Point
    a: Point
    b: Point
    depth: int

    def cell(self) -> CrossCell:
        corners = (self.origin, self.origin + self.a, self.origin + self.b)
        return CrossCell(
            min(p.x for p in corners),
            min(p.y for p in corners),
            max(abs(self.a.x), abs(self.a.y)),
            self.depth,
        )

    def children(self) -> list["_Frame"]:
        a2 = self.a.scaled(1, 2)
        b2 = self.b.scaled(1, 2)
        o = self.origin
        d = self.depth + 1
        return [
            _Frame(o, b2, a2, d),
            _Frame(o + b2, a2, b2, d),
            _Frame(o + a2 + b2, a2, b2, d),
            _Frame(o + self.a + b2, -b2, -a2, d),
        ]


def _hilbert_points(frame: _Frame, provider: CrossFillProvider, z: int) -> Iterator[Point]:
    cell = frame.cell()
    if cell.size < 2 or not provider.is_subdivided(cell, z):
        yield cell.center
        return
    for child in frame.children():
        yield from _hilbert_points(child, provider, z)


def moore_curve(provider: CrossFillProvider, z: int) -> list[Point]:
    """Closed curve through the centres of all leaf cells.

    The root is always split into quadrants. The left quadrants are walked
    upwards and the right ones downwards, so the curve ends next to where
    it started.
    """
    root = provider.root
    half = root.size // 2
    bottom_mid = Point(root.min_x + half, root.min_y)
    center = Point(root.min_x + half, root.min_y + half)
    top_mid = Point(root.min_x + half, root.min_y + root.size)
    up = Point(0, half)
    down = Point(0, -half)
    left = Point(-half, 0)
    right = Point(half, 0)
    frames = [
        _Frame(bottom_mid, up, left, 1),
        _Frame(center, up, left, 1),
        _Frame(top_mid, down, right, 1),
        _Frame(center, down, right, 1),
    ]
    points: list[Point] = []
    for frame in frames:
        for p in _hilbert_points(frame, provider, z):
            if not points or points[-1] != p:
                points.append(p)
    return points


def generate_cross(ctx: PatternContext) -> PatternOutput:
    """Clip the provider's Moore curve to the region.

    With zig_zaggify the closed curve is intersected with the region as an
    area and comes out as polygons; otherwise it is clipped as a line and
    left for stitching.

    Raises:
        ProviderError: If no provider was supplied
    """
    params = ctx.params
    provider = ctx.cross_fill_provider
    if provider is None:
        raise ProviderError(params.pattern.value, "cross fill provider")
    if not ctx.inner:
        return [], []

    z = params.z if params.pattern == FillPattern.CROSS_3D else 0
    curve = moore_curve(provider, z)
    logger.debug("Moore curve through %d cells at z=%d", len(curve), z)
    if len(curve) < 3:
        return [], []

    if params.zig_zaggify:
        return intersection(ctx.inner, [Polygon(curve)]), []
    return [], clip_polylines([Polyline(curve + [curve[0]])], ctx.inner)
