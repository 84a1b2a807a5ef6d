"""Core fill algorithms for infiller.

This module contains the core algorithms for:

- Exact integer geometry (corner angles, projections, intersections)
- Polygon offsetting and clipping
- Fill pattern generation (linear family, zigzag, concentric, gyroid,
  cross, lightning)
- Joining scan-line segments into long polylines
- Density multiplication, stitching and simplification
- Per-layer orchestration and parallel processing of layer files

All generators are designed to be:
- Stateless (safe for use in worker processes)
- Deterministic (same input, same toolpaths)

Key functions:
- angle_left: Corner angle with exact collinear handling
- point_at_distance_on_segment: Point on a segment at a given distance
- closest_connection: Shortest endpoint connection between two segments
- line_line_intersection: Intersection of two infinite lines
- resolve_intersection: Turn a crossing near the boundary into two elbows
- process_layer: Picklable per-layer worker

Key classes:
- InfillGenerator: Runs the fill pipeline for one region
- CrossingTable / LineConnector: Segment graph and its connector
- PolylineStitcher: Joins polylines by nearby end points
- LayerProcessor: Processes region files with a process pool
"""

from infiller.core.connector import CrossingTable, LineConnector, resolve_intersection
from infiller.core.cross import CrossFillProvider, UniformCrossFillProvider
from infiller.core.geometry import (
    PointMatrix,
    angle_left,
    bisector_vector,
    closest_connection,
    dist2_from_line,
    dist_from_line,
    is_inside_corner,
    line_line_intersection,
    point_at_distance_on_segment,
    segments_collide,
)
from infiller.core.infill import PATTERN_GENERATORS, InfillGenerator
from infiller.core.lightning import LightningLayer
from infiller.core.processor import LayerProcessor, process_layer
from infiller.core.stitcher import PolylineStitcher
from infiller.core.walls import WallGenerator, generate_offset_walls

__all__ = [
    "PATTERN_GENERATORS",
    # Connector
    "CrossingTable",
    "LineConnector",
    "resolve_intersection",
    # Providers
    "CrossFillProvider",
    "LightningLayer",
    "UniformCrossFillProvider",
    # Orchestration
    "InfillGenerator",
    "LayerProcessor",
    "PolylineStitcher",
    "WallGenerator",
    "generate_offset_walls",
    "process_layer",
    # Geometry functions
    "PointMatrix",
    "angle_left",
    "bisector_vector",
    "closest_connection",
    "dist2_from_line",
    "dist_from_line",
    "is_inside_corner",
    "line_line_intersection",
    "point_at_distance_on_segment",
    "segments_collide",
]
