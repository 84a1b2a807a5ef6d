"""Scan-line based fill patterns.

Every pattern in the linear family is one or more sweeps of parallel
scan-lines over the inner contour. A sweep rotates the contour so the
scan-lines are vertical, collects the y value of every crossing of a
scan-line with the boundary, and pairs the sorted crossings (even-odd rule)
into fill segments. The patterns differ only in the angles and phase
shifts of their sweeps:

- lines: one sweep
- grid: two sweeps, 90 degrees apart
- triangles: three sweeps, 60 degrees apart
- trihexagon: like triangles, the third sweep shifted half a spacing
- cubic: three sweeps 120 degrees apart, shifted with the layer height
- tetrahedral / quarter cubic: two pairs of sweeps whose phase follows
  the layer height
- zigzag: one sweep that also keeps boundary pieces as connectors
"""

import math

from infiller.core.connector import CrossingTable
from infiller.core.context import PatternContext, PatternOutput
from infiller.core.geometry import PointMatrix, compute_scan_segment_idx
from infiller.core.zigzag import (
    NoZigzagConnectorProcessor,
    ZigzagConnectorProcessor,
    create_zigzag_processor,
)
from infiller.domain import AABB, Point, Polyline, trunc_div
from infiller.exceptions import ParameterError

ONE_OVER_SQRT_2 = 1 / math.sqrt(2)

# Fill angle 0 gives lines along X; the sweep frame has vertical scan-lines
SWEEP_ROTATION_OFFSET = 90.0


def get_shift_offset_from_infill_origin_and_rotation(origin: tuple[int, int], rotation: float) -> int:
    """Scan-line shift that makes the pattern follow the infill origin.

    Args:
        origin: Point the pattern is anchored to
        rotation: Sweep rotation in degrees

    Returns:
        The origin's X coordinate in the rotated frame, 0 at the origin
    """
    x, y = origin
    if x == 0 and y == 0:
        return 0
    radians = math.radians(rotation)
    return int(x * math.cos(radians) - y * math.sin(radians))


def add_line_infill(
    result: list[Polyline],
    matrix: PointMatrix,
    scanline_min_idx: int,
    line_distance: int,
    boundary: AABB,
    cut_list: list[list[int]],
    shift: int,
    line_width: int,
) -> None:
    """Pair the crossings of every scan-line into fill segments.

    Segments shorter than a fifth of the line width are dropped. The
    segments are rotated back out of the sweep frame.
    """
    min_length = line_width // 5
    x = scanline_min_idx * line_distance + shift
    for crossings in cut_list:
        if x >= boundary.max_x:
            break
        crossings.sort()
        for low, high in zip(crossings[0::2], crossings[1::2]):
            if high - low < min_length:
                continue
            start = matrix.unapply(Point(x, low))
            end = matrix.unapply(Point(x, high))
            if start != end:
                result.append(Polyline([start, end]))
        x += line_distance


def generate_linear_based_infill(
    ctx: PatternContext,
    result: list[Polyline],
    line_distance: int,
    matrix: PointMatrix,
    processor: ZigzagConnectorProcessor,
    connected_zigzags: bool,
    extra_shift: int,
) -> None:
    """Sweep scan-lines over the inner contour.

    The processor is told about every vertex and crossing in boundary
    order. When the context carries a crossing table, every segment is
    recorded there for the line connector and nothing is appended to
    ``result``.

    Args:
        ctx: Generation inputs
        result: Output list for the fill segments
        line_distance: Scan-line spacing
        matrix: Rotation into the sweep frame
        processor: Zigzag processor receiving the sweep events
        connected_zigzags: Whether zigzag connectors join the segments
        extra_shift: Scan-line shift on top of the parameter shift

    Raises:
        ParameterError: If line_distance is not positive
    """
    if line_distance <= 0:
        raise ParameterError("line_distance", line_distance, "scan-line spacing must be positive")
    if not ctx.inner:
        return

    outline = [polygon.transformed(matrix.apply) for polygon in ctx.inner]
    if not any(len(polygon) > 0 for polygon in outline):
        return

    # scan-lines sit in the middle of their cell
    shift = (extra_shift + ctx.params.shift + line_distance // 2) % line_distance
    boundary = AABB.from_polygons(outline)
    scanline_min_idx = compute_scan_segment_idx(boundary.min_x - shift, line_distance)
    line_count = compute_scan_segment_idx(boundary.max_x - shift, line_distance) + 1 - scanline_min_idx

    cut_list: list[list[int]] = [[] for _ in range(line_count)]
    # crossing y, polygon index, edge index; for the crossing table
    crossings_per_scanline: list[list[tuple[int, int, int]]] = [[] for _ in range(line_count)]

    for polygon_index, polygon in enumerate(outline):
        if len(polygon) == 0:
            continue
        p0 = polygon[-1]
        processor.register_vertex(p0)
        for point_index, p1 in enumerate(polygon.points):
            if p1.x == p0.x:
                # parallel to the scan-lines
                processor.register_vertex(p1)
                p0 = p1
                continue

            if p0.x < p1.x:
                first_idx = compute_scan_segment_idx(p0.x - shift, line_distance) + 1
                last_idx = compute_scan_segment_idx(p1.x - shift, line_distance)
                direction = 1
            else:
                first_idx = compute_scan_segment_idx(p0.x - shift, line_distance)
                last_idx = compute_scan_segment_idx(p1.x - shift, line_distance) + 1
                direction = -1

            for scanline_idx in range(first_idx, last_idx + direction, direction):
                x = scanline_idx * line_distance + shift
                y = p1.y + trunc_div((p0.y - p1.y) * (x - p1.x), p0.x - p1.x)
                cut_list[scanline_idx - scanline_min_idx].append(y)
                processor.register_scanline_segment_intersection(Point(x, y), scanline_idx)
                crossings_per_scanline[scanline_idx - scanline_min_idx].append((y, polygon_index, point_index))

            processor.register_vertex(p1)
            p0 = p1
        processor.register_poly_finished()

    if ctx.crossings is not None:
        _record_crossings(
            ctx.crossings,
            ctx.params.line_width,
            matrix,
            scanline_min_idx,
            line_distance,
            shift,
            crossings_per_scanline,
        )
        return

    if not cut_list:
        return
    if connected_zigzags and len(cut_list) == 1 and len(cut_list[0]) <= 2:
        # the boundary already covers the whole outline
        return
    add_line_infill(
        result, matrix, scanline_min_idx, line_distance, boundary, cut_list, shift, ctx.params.line_width
    )


def _record_crossings(
    table: CrossingTable,
    line_width: int,
    matrix: PointMatrix,
    scanline_min_idx: int,
    line_distance: int,
    shift: int,
    crossings_per_scanline: list[list[tuple[int, int, int]]],
) -> None:
    """Store every scan-line segment in the crossing table."""
    min_length = line_width // 5
    for offset, crossings in enumerate(crossings_per_scanline):
        x = (scanline_min_idx + offset) * line_distance + shift
        crossings.sort(key=lambda crossing: crossing[0])
        for low, high in zip(crossings[0::2], crossings[1::2]):
            if high[0] - low[0] < min_length:
                continue
            start = matrix.unapply(Point(x, low[0]))
            end = matrix.unapply(Point(x, high[0]))
            if start == end:
                continue
            table.add_segment(start, low[2], low[1], end, high[2], high[1])


def generate_line_infill(
    ctx: PatternContext,
    result: list[Polyline],
    line_distance: int,
    fill_angle: float,
    extra_shift: int,
) -> None:
    """One plain sweep at the given angle."""
    rotation = fill_angle + SWEEP_ROTATION_OFFSET
    shift = get_shift_offset_from_infill_origin_and_rotation(ctx.params.origin, rotation)
    generate_linear_based_infill(
        ctx,
        result,
        line_distance,
        PointMatrix(rotation),
        NoZigzagConnectorProcessor(),
        connected_zigzags=False,
        extra_shift=shift + extra_shift,
    )


def generate_zigzag_infill(
    ctx: PatternContext,
    result: list[Polyline],
    line_distance: int,
    fill_angle: float,
) -> None:
    """One sweep that also emits the zag connectors along the boundary."""
    rotation = fill_angle + SWEEP_ROTATION_OFFSET
    shift = get_shift_offset_from_infill_origin_and_rotation(ctx.params.origin, rotation)
    matrix = PointMatrix(rotation)
    processor = create_zigzag_processor(ctx.params, matrix, result)
    generate_linear_based_infill(
        ctx,
        result,
        line_distance,
        matrix,
        processor,
        connected_zigzags=ctx.params.zig_zaggify,
        extra_shift=shift,
    )


def generate_half_tetrahedral_infill(
    ctx: PatternContext,
    result: list[Polyline],
    pattern_z_shift: float,
    angle_shift: float,
) -> None:
    """Two sweeps at the same angle whose phase moves with the layer height.

    Stacked layers form the sloped faces of a tetrahedral lattice.
    """
    params = ctx.params
    period = params.line_distance * 2
    shift = int(ONE_OVER_SQRT_2 * (params.z + pattern_z_shift * period * 2)) % period
    # symmetric because the shift is applied in both directions
    shift = min(shift, period - shift)
    # keep the two sweeps at least a line width apart
    shift = min(shift, period // 2 - params.line_width // 2)
    shift = max(shift, params.line_width // 2)
    generate_line_infill(ctx, result, period, params.fill_angle + angle_shift, shift)
    generate_line_infill(ctx, result, period, params.fill_angle + angle_shift, -shift)


def generate_lines(ctx: PatternContext) -> PatternOutput:
    lines: list[Polyline] = []
    generate_line_infill(ctx, lines, ctx.params.line_distance, ctx.params.fill_angle, 0)
    return [], lines


def generate_grid(ctx: PatternContext) -> PatternOutput:
    lines: list[Polyline] = []
    params = ctx.params
    generate_line_infill(ctx, lines, params.line_distance, params.fill_angle, 0)
    generate_line_infill(ctx, lines, params.line_distance, params.fill_angle + 90, 0)
    return [], lines


def generate_cubic(ctx: PatternContext) -> PatternOutput:
    lines: list[Polyline] = []
    params = ctx.params
    shift = int(ONE_OVER_SQRT_2 * params.z)
    for angle_shift in (0, 120, 240):
        generate_line_infill(ctx, lines, params.line_distance, params.fill_angle + angle_shift, shift)
    return [], lines


def generate_tetrahedral(ctx: PatternContext) -> PatternOutput:
    lines: list[Polyline] = []
    generate_half_tetrahedral_infill(ctx, lines, 0.0, 0)
    generate_half_tetrahedral_infill(ctx, lines, 0.0, 90)
    return [], lines


def generate_quarter_cubic(ctx: PatternContext) -> PatternOutput:
    lines: list[Polyline] = []
    generate_half_tetrahedral_infill(ctx, lines, 0.0, 0)
    generate_half_tetrahedral_infill(ctx, lines, 0.5, 90)
    return [], lines


def generate_triangles(ctx: PatternContext) -> PatternOutput:
    lines: list[Polyline] = []
    params = ctx.params
    for angle_shift in (0, 60, 120):
        generate_line_infill(ctx, lines, params.line_distance, params.fill_angle + angle_shift, 0)
    return [], lines


def generate_trihexagon(ctx: PatternContext) -> PatternOutput:
    lines: list[Polyline] = []
    params = ctx.params
    generate_line_infill(ctx, lines, params.line_distance, params.fill_angle, 0)
    generate_line_infill(ctx, lines, params.line_distance, params.fill_angle + 60, 0)
    generate_line_infill(ctx, lines, params.line_distance, params.fill_angle + 120, params.line_distance // 2)
    return [], lines


def generate_zigzag(ctx: PatternContext) -> PatternOutput:
    lines: list[Polyline] = []
    generate_zigzag_infill(ctx, lines, ctx.params.line_distance, ctx.params.fill_angle)
    return [], lines
