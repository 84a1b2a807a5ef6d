"""Fill generation for one layer.

InfillGenerator runs the whole pipeline for a region:

1. Walls around the region (the wall generator also yields the inner contour)
2. Narrow parts of the inner contour are filled with walls instead
3. The pattern generator for the configured pattern
4. The line connector, for connected-lines runs
5. The density multiplier
6. Stitching of open polylines
7. Simplification

Pattern generators are plain functions looked up in PATTERN_GENERATORS.
"""

import logging
from collections.abc import Callable
from dataclasses import replace

from infiller.config import FillPattern, InfillParameters
from infiller.core.concentric import generate_concentric
from infiller.core.connector import CrossingTable, LineConnector
from infiller.core.context import PatternContext, PatternOutput
from infiller.core.cross import CrossFillProvider, generate_cross
from infiller.core.gyroid import generate_gyroid
from infiller.core.lightning import LightningLayer, generate_lightning
from infiller.core.linear import (
    generate_cubic,
    generate_grid,
    generate_lines,
    generate_quarter_cubic,
    generate_tetrahedral,
    generate_triangles,
    generate_trihexagon,
    generate_zigzag,
)
from infiller.core.multiplier import multiply_infill
from infiller.core.simplify import Simplifier
from infiller.core.stitcher import PolylineStitcher
from infiller.core.walls import (
    WallGenerator,
    generate_offset_walls,
    small_area_wall_count,
    split_small_areas,
)
from infiller.domain import ExtrusionLine, InfillResult, Polygon, VariableWidthLines
from infiller.exceptions import ProviderError

logger = logging.getLogger(__name__)

PatternGenerator = Callable[[PatternContext], PatternOutput]

PATTERN_GENERATORS: dict[FillPattern, PatternGenerator] = {
    FillPattern.LINES: generate_lines,
    FillPattern.GRID: generate_grid,
    FillPattern.CUBIC: generate_cubic,
    FillPattern.TETRAHEDRAL: generate_tetrahedral,
    FillPattern.QUARTER_CUBIC: generate_quarter_cubic,
    FillPattern.TRIANGLES: generate_triangles,
    FillPattern.TRIHEXAGON: generate_trihexagon,
    FillPattern.ZIG_ZAG: generate_zigzag,
    FillPattern.CONCENTRIC: generate_concentric,
    FillPattern.GYROID: generate_gyroid,
    FillPattern.CROSS: generate_cross,
    FillPattern.CROSS_3D: generate_cross,
    FillPattern.LIGHTNING: generate_lightning,
}


class InfillGenerator:
    """Generates walls and fill for one region.

    The generator keeps no per-call state: the inner contour is returned
    in the result, so one instance can be called repeatedly.

    Example:
        >>> generator = InfillGenerator(params, outline)
        >>> result = generator.generate()
        >>> print(len(result.lines))
    """

    def __init__(
        self,
        params: InfillParameters,
        outer_contour: list[Polygon],
        wall_generator: WallGenerator = generate_offset_walls,
    ) -> None:
        self.params = params
        self.outer_contour = outer_contour
        self.wall_generator = wall_generator

    def generate(
        self,
        cross_fill_provider: CrossFillProvider | None = None,
        lightning_layer: LightningLayer | None = None,
    ) -> InfillResult:
        """Run the pipeline.

        Args:
            cross_fill_provider: Subdivision oracle, required for the cross patterns
            lightning_layer: Tree layer, required for the lightning pattern

        Returns:
            Walls, fill polygons, fill lines and the inner contour

        Raises:
            ProviderError: If the pattern needs a provider that is missing
            TopologyError: If the line connector finds an inconsistent graph
        """
        params = self.params
        self._check_providers(cross_fill_provider, lightning_layer)

        result = InfillResult()
        if not self.outer_contour:
            return result

        toolpaths, inner = self.wall_generator(
            self.outer_contour, params.wall_line_count, params.line_width, params.overlap
        )
        result.add_toolpaths(toolpaths)
        result.inner_contour = inner

        fill_area = inner
        if params.small_area_width > 0:
            fill_area, small = split_small_areas(inner, params.small_area_width)
            if small:
                result.add_toolpaths(self._small_area_walls(small))

        if not fill_area:
            return result

        crossings = CrossingTable(fill_area) if params.connect_lines else None
        ctx = PatternContext(
            params=params,
            inner=fill_area,
            crossings=crossings,
            cross_fill_provider=cross_fill_provider,
            lightning_layer=lightning_layer,
        )
        logger.debug(
            "Generating %s fill over %d polygons (connect_lines=%s)",
            params.pattern.value, len(fill_area), params.connect_lines
        )
        polygons, lines = PATTERN_GENERATORS[params.pattern](ctx)

        if crossings is not None:
            connector = LineConnector(crossings, params.line_width, params.line_distance)
            lines = lines + connector.connect()

        polygons, lines = multiply_infill(polygons, lines, params.multiplier, params.line_width)

        if params.use_stitching and lines:
            stitched_lines, stitched_polygons = PolylineStitcher(params.line_width).stitch(lines)
            logger.debug(
                "Stitched %d lines into %d lines and %d polygons",
                len(lines), len(stitched_lines), len(stitched_polygons)
            )
            lines = stitched_lines
            polygons = polygons + stitched_polygons

        simplifier = Simplifier(params.max_resolution, params.max_deviation)
        result.polygons = simplifier.polygon(polygons)
        result.lines = simplifier.polyline(lines)
        return result

    def _check_providers(
        self,
        cross_fill_provider: CrossFillProvider | None,
        lightning_layer: LightningLayer | None,
    ) -> None:
        pattern = self.params.pattern
        if pattern in (FillPattern.CROSS, FillPattern.CROSS_3D) and cross_fill_provider is None:
            raise ProviderError(pattern.value, "cross fill provider")
        if pattern == FillPattern.LIGHTNING and lightning_layer is None:
            raise ProviderError(pattern.value, "lightning layer")

    def _small_area_walls(self, small: list[Polygon]) -> list[VariableWidthLines]:
        """Walls filling the narrow parts, numbered after the regular walls."""
        params = self.params
        wall_count = small_area_wall_count(params.small_area_width, params.line_width)
        toolpaths, _ = self.wall_generator(small, wall_count, params.line_width, 0)
        return [[_renumber(line, params.wall_line_count) for line in inset] for inset in toolpaths]


def _renumber(line: ExtrusionLine, first_inset: int) -> ExtrusionLine:
    inset_idx = line.inset_idx + first_inset
    return ExtrusionLine(
        inset_idx=inset_idx,
        junctions=[replace(j, perimeter_index=inset_idx) for j in line.junctions],
        is_odd=line.is_odd,
        is_closed=line.is_closed,
    )
