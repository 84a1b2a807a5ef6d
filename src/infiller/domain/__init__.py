"""Domain models for infiller.

This module contains the core domain models representing layers, regions,
fill segments and toolpaths. All models are designed to be:

- Integer-exact (fixed-point micrometre coordinates)
- Serializable for inter-process communication (parallel processing)
- Independent of the clipping library's path representation

Key classes:
- Point: A 2D integer point
- Polygon / Polyline: Closed and open point sequences
- InfillLineSegment: A boundary-bound fill segment with link slots
- ExtrusionLine: A variable-width wall toolpath
- InfillResult: Output of one generation call
- Layer: One slice to be filled
"""

from infiller.domain.layer import Layer
from infiller.domain.polygon import (
    AABB,
    Point,
    Polygon,
    Polyline,
    cross,
    dot,
    normal,
    round_div,
    trunc_div,
    turn90_ccw,
    vsize,
    vsize2,
)
from infiller.domain.segment import InfillLineSegment, SegmentArena
from infiller.domain.toolpath import (
    ExtrusionJunction,
    ExtrusionLine,
    InfillResult,
    VariableWidthLines,
)

__all__: list[str] = [
    # Core types
    "AABB",
    "Point",
    "Polygon",
    "Polyline",
    "InfillLineSegment",
    "SegmentArena",
    "ExtrusionJunction",
    "ExtrusionLine",
    "VariableWidthLines",
    "InfillResult",
    "Layer",
    # Vector arithmetic
    "cross",
    "dot",
    "normal",
    "round_div",
    "trunc_div",
    "turn90_ccw",
    "vsize",
    "vsize2",
]
