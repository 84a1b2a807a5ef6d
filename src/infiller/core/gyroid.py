"""Gyroid fill.

Approximates the cut of the gyroid surface

    sin(x) cos(y) + sin(y) cos(z) + sin(z) cos(x) = 0

with the plane at the layer height. Depending on the phase of z the curves
are traced column by column ("vertical") or row by row ("horizontal"); the
traced polylines are clipped to the fill region afterwards.
"""

import math

from infiller.core.clipping import clip_polylines
from infiller.core.context import PatternContext, PatternOutput
from infiller.domain import AABB, Point, Polyline
from infiller.exceptions import ParameterError

# Spacing factor giving roughly the density of the lines pattern
PITCH_FACTOR = 2.41
MIN_STEPS = 4
MAX_STEPS = 16
MAX_STEP_LENGTH = 500


def gyroid_pitch(line_distance: int) -> tuple[int, int]:
    """Pitch of one gyroid period and the sampling step along a curve.

    Returns:
        (pitch, step), with pitch an exact multiple of step
    """
    pitch = int(line_distance * PITCH_FACTOR)
    num_steps = MIN_STEPS
    step = pitch // num_steps
    while step > MAX_STEP_LENGTH and num_steps < MAX_STEPS:
        num_steps *= 2
        step = pitch // num_steps
    step = max(step, 1)
    return step * num_steps, step


def _asin(value: float) -> float:
    return math.asin(max(-1.0, min(1.0, value)))


def generate_gyroid(ctx: PatternContext) -> PatternOutput:
    """Trace the gyroid curves over the region's bounding box and clip them.

    Raises:
        ParameterError: If the spacing is not positive
    """
    params = ctx.params
    if params.line_distance <= 0:
        raise ParameterError("line_distance", params.line_distance, "gyroid spacing must be positive")
    if not ctx.inner:
        return [], []

    aabb = AABB.from_polygons(ctx.inner)
    pitch, step = gyroid_pitch(params.line_distance)
    z_rads = 2 * math.pi * params.z / pitch
    cos_z = math.cos(z_rads)
    sin_z = math.sin(z_rads)

    odd_coords: list[int] = []
    even_coords: list[int] = []
    curves: list[Polyline] = []

    if abs(sin_z) <= abs(cos_z):
        # vertical lines
        phase_offset = (math.pi if cos_z < 0 else 0.0) + math.pi
        for y in range(0, pitch, step):
            y_rads = 2 * math.pi * y / pitch
            b = math.sin(y_rads + phase_offset)
            h = math.hypot(cos_z, b)
            odd_c = sin_z * math.cos(y_rads + phase_offset)
            even_c = sin_z * math.cos(y_rads + phase_offset + math.pi)
            odd_rads = (_asin(odd_c / h) + _asin(b / h) if h != 0 else 0.0) - math.pi / 2
            even_rads = (_asin(even_c / h) + _asin(b / h) if h != 0 else 0.0) - math.pi / 2
            odd_coords.append(int(odd_rads / math.pi * pitch))
            even_coords.append(int(even_rads / math.pi * pitch))

        x = int((math.floor(aabb.min_x / pitch) - 2.25) * pitch)
        column = 0
        while x <= aabb.max_x + pitch // 2:
            coords = odd_coords if column % 2 else even_coords
            points = [
                Point(x + coords[(y // step) % len(coords)], y)
                for y in range((aabb.min_y // pitch - 1) * pitch, aabb.max_y + pitch + 1, step)
            ]
            curves.append(Polyline(points))
            x += pitch // 2
            column += 1
    else:
        # horizontal lines
        phase_offset = math.pi if sin_z < 0 else 0.0
        for x in range(0, pitch, step):
            x_rads = 2 * math.pi * x / pitch
            b = math.cos(x_rads + phase_offset)
            h = math.hypot(sin_z, b)
            odd_c = cos_z * math.sin(x_rads + phase_offset + math.pi)
            even_c = cos_z * math.sin(x_rads + phase_offset)
            odd_rads = (_asin(odd_c / h) + _asin(b / h) if h != 0 else 0.0) + math.pi / 2
            even_rads = (_asin(even_c / h) + _asin(b / h) if h != 0 else 0.0) + math.pi / 2
            odd_coords.append(int(odd_rads / math.pi * pitch))
            even_coords.append(int(even_rads / math.pi * pitch))

        y = (aabb.min_y // pitch - 1) * pitch
        row = 0
        while y <= aabb.max_y + pitch // 2:
            coords = odd_coords if row % 2 else even_coords
            points = [
                Point(x, y + coords[(x // step) % len(coords)])
                for x in range((aabb.min_x // pitch - 1) * pitch, aabb.max_x + pitch + 1, step)
            ]
            curves.append(Polyline(points))
            y += pitch // 2
            row += 1

    return [], clip_polylines(curves, ctx.inner)
