"""Concentric fill: nested insets of the fill region."""

from infiller.core.clipping import offset, total_area
from infiller.core.context import PatternContext, PatternOutput
from infiller.core.simplify import Simplifier
from infiller.domain import Polygon
from infiller.exceptions import ParameterError

# Safety stop for pathological offsets that never shrink
MAX_RINGS = 10000


def generate_concentric(ctx: PatternContext) -> PatternOutput:
    """Fill the region with rings, each one spacing inside the previous.

    The first ring sits half a line width inside the region. Generation
    stops once a ring encloses less than one line width squared.

    Raises:
        ParameterError: If the spacing is not positive
    """
    params = ctx.params
    if params.line_distance <= 0:
        raise ParameterError("line_distance", params.line_distance, "ring spacing must be positive")

    simplifier = Simplifier(params.max_resolution, params.max_deviation)
    min_area = params.line_width * params.line_width

    polygons: list[Polygon] = []
    ring = simplifier.polygon(offset(ctx.inner, -(params.line_width // 2)))
    for _ in range(MAX_RINGS):
        if not ring or abs(total_area(ring)) < min_area:
            break
        polygons.extend(ring)
        ring = simplifier.polygon(offset(ring, -params.line_distance))
    return polygons, []
