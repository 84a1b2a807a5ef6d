"""Polygon clipping and offsetting on integer coordinates.

Thin wrappers around pyclipper (Clipper's integer polygon engine) that take
and return domain Polygons and Polylines:
- offset: grow or shrink closed polygons with mitred corners
- intersection / difference: boolean operations (even-odd fill)
- clip_polylines: keep the parts of open polylines inside a region
- total_area: signed area of a polygon set

Degenerate input (empty sets, collinear or zero-area paths) is not an
error here; it produces an empty result.
"""

from collections.abc import Iterable, Sequence

import pyclipper

from infiller.domain import Point, Polygon, Polyline

# Clipper's default miter limit is 2.0; 1.2 keeps offset corners tighter
MITER_LIMIT = 1.2

Path = list[tuple[int, int]]


def _closed_paths(polygons: Iterable[Polygon]) -> list[Path]:
    return [[p.to_tuple() for p in polygon.points] for polygon in polygons if len(polygon) >= 3]


def _open_paths(polylines: Iterable[Polyline]) -> list[Path]:
    return [[p.to_tuple() for p in line.points] for line in polylines if len(line) >= 2]


def _to_polygons(paths: Iterable[Sequence[Sequence[int]]]) -> list[Polygon]:
    return [Polygon([Point(int(x), int(y)) for x, y in path]) for path in paths if len(path) >= 3]


def offset(polygons: Sequence[Polygon], distance: int, miter_limit: float = MITER_LIMIT) -> list[Polygon]:
    """Offset closed polygons outward (positive) or inward (negative).

    Args:
        polygons: Polygons to offset; holes must wind clockwise
        distance: Offset distance in micrometres
        miter_limit: Corner miter limit as a multiple of the distance

    Returns:
        Offset polygons; may be empty when the region vanishes
    """
    paths = _closed_paths(polygons)
    if not paths:
        return []
    if distance == 0:
        return [Polygon(list(polygon.points)) for polygon in polygons if len(polygon) >= 3]

    pco = pyclipper.PyclipperOffset(miter_limit=miter_limit)
    try:
        pco.AddPaths(paths, pyclipper.JT_MITER, pyclipper.ET_CLOSEDPOLYGON)
    except pyclipper.ClipperException:
        return []
    return _to_polygons(pco.Execute(distance))


def _boolean(
    clip_type: int,
    subject: Sequence[Polygon],
    clip: Sequence[Polygon],
    fill_type: int = pyclipper.PFT_EVENODD,
) -> list[Polygon]:
    subject_paths = _closed_paths(subject)
    if not subject_paths:
        return []
    clip_paths = _closed_paths(clip)

    pc = pyclipper.Pyclipper()
    try:
        pc.AddPaths(subject_paths, pyclipper.PT_SUBJECT, True)
        if clip_paths:
            pc.AddPaths(clip_paths, pyclipper.PT_CLIP, True)
        paths = pc.Execute(clip_type, fill_type, fill_type)
    except pyclipper.ClipperException:
        return []
    return _to_polygons(paths)


def intersection(subject: Sequence[Polygon], clip: Sequence[Polygon]) -> list[Polygon]:
    """Area covered by both polygon sets."""
    if not _closed_paths(clip):
        return []
    return _boolean(pyclipper.CT_INTERSECTION, subject, clip)


def difference(subject: Sequence[Polygon], clip: Sequence[Polygon]) -> list[Polygon]:
    """Area of ``subject`` not covered by ``clip``."""
    return _boolean(pyclipper.CT_DIFFERENCE, subject, clip)


def clip_polylines(polylines: Sequence[Polyline], region: Sequence[Polygon]) -> list[Polyline]:
    """Keep the parts of open polylines that lie inside a region.

    Args:
        polylines: Open polylines to clip
        region: Closed polygons (even-odd fill)

    Returns:
        Clipped open polylines, each with at least two points
    """
    subject_paths = _open_paths(polylines)
    clip_paths = _closed_paths(region)
    if not subject_paths or not clip_paths:
        return []

    pc = pyclipper.Pyclipper()
    try:
        pc.AddPaths(subject_paths, pyclipper.PT_SUBJECT, False)
        pc.AddPaths(clip_paths, pyclipper.PT_CLIP, True)
        polytree = pc.Execute2(pyclipper.CT_INTERSECTION, pyclipper.PFT_EVENODD, pyclipper.PFT_EVENODD)
    except pyclipper.ClipperException:
        return []
    return [
        Polyline([Point(int(x), int(y)) for x, y in path])
        for path in pyclipper.OpenPathsFromPolyTree(polytree)
        if len(path) >= 2
    ]


def total_area(polygons: Iterable[Polygon]) -> float:
    """Sum of signed areas; holes (clockwise) subtract."""
    return sum(polygon.signed_area() for polygon in polygons)
