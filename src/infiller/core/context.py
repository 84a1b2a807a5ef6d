"""Inputs shared by every pattern generator."""

from dataclasses import dataclass
from typing import TYPE_CHECKING

from infiller.config import InfillParameters
from infiller.core.connector import CrossingTable
from infiller.domain import Polygon, Polyline

if TYPE_CHECKING:
    from infiller.core.cross import CrossFillProvider
    from infiller.core.lightning import LightningLayer

# What a generator returns: (closed polygons, open polylines)
PatternOutput = tuple[list[Polygon], list[Polyline]]


@dataclass
class PatternContext:
    """Everything a generator may read during one generation call.

    Attributes:
        params: Fill parameters
        inner: Region the pattern fills (after walls and small areas)
        crossings: Crossing table for connected-lines runs, else None
        cross_fill_provider: Subdivision oracle for the cross patterns
        lightning_layer: Tree layer for the lightning pattern
    """

    params: InfillParameters
    inner: list[Polygon]
    crossings: CrossingTable | None = None
    cross_fill_provider: "CrossFillProvider | None" = None
    lightning_layer: "LightningLayer | None" = None
