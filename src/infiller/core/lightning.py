"""Lightning fill.

Lightning trees are grown per layer by a separate precomputation; this
generator only turns the parent-child connections of one layer into fill
lines inside the region.
"""

from collections.abc import Iterable
from typing import Protocol

from infiller.core.clipping import clip_polylines, total_area
from infiller.core.context import PatternContext, PatternOutput
from infiller.domain import Point, Polyline


class LightningLayer(Protocol):
    """Read-only tree layer for one print layer."""

    def tree_connections(self) -> Iterable[tuple[Point, Point]]: ...


def generate_lightning(ctx: PatternContext) -> PatternOutput:
    """Clip the layer's tree connections to the region.

    Returns nothing when no layer is supplied or the region is smaller
    than a line width.
    """
    layer = ctx.lightning_layer
    if layer is None or not ctx.inner:
        return [], []
    if abs(total_area(ctx.inner)) < ctx.params.line_width:
        return [], []

    connections = [Polyline([a, b]) for a, b in layer.tree_connections() if a != b]
    return [], clip_polylines(connections, ctx.inner)
