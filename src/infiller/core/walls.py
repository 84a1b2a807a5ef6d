"""Wall generation around the fill region.

Walls are produced by an exchangeable generator with the contract

    wall_generator(outer_contour, wall_count, line_width, overlap)
        -> (wall toolpaths binned by inset, inner contour)

The default generator makes constant-width loops by polygon offsetting.
Variable-width generators plug in through the same signature.
"""

from typing import Protocol

from infiller.core.clipping import difference, offset
from infiller.domain import ExtrusionLine, Polygon, VariableWidthLines


class WallGenerator(Protocol):
    def __call__(
        self,
        outer_contour: list[Polygon],
        wall_count: int,
        line_width: int,
        overlap: int,
    ) -> tuple[list[VariableWidthLines], list[Polygon]]: ...


def generate_offset_walls(
    outer_contour: list[Polygon],
    wall_count: int,
    line_width: int,
    overlap: int,
) -> tuple[list[VariableWidthLines], list[Polygon]]:
    """Constant-width walls as successive insets of the outer contour.

    Wall ``i`` runs along the inset at ``(i + 0.5) * line_width``. The inner
    contour is the inset behind the last wall, grown back by ``overlap`` so
    the fill reaches into the walls.

    Args:
        outer_contour: Region to put walls around
        wall_count: Number of wall loops
        line_width: Width of every wall
        overlap: Distance the fill region extends into the walls

    Returns:
        (toolpaths per inset index, inner contour)
    """
    toolpaths: list[VariableWidthLines] = []
    for inset_idx in range(wall_count):
        rings = offset(outer_contour, -((2 * inset_idx + 1) * line_width) // 2)
        if not rings:
            break
        toolpaths.append([ExtrusionLine.from_polygon(ring, inset_idx, line_width) for ring in rings])

    inner = offset(outer_contour, overlap - wall_count * line_width)
    return toolpaths, inner


def split_small_areas(
    inner_contour: list[Polygon],
    small_area_width: int,
) -> tuple[list[Polygon], list[Polygon]]:
    """Separate parts of the region too narrow for the fill pattern.

    The wide part is the region opened morphologically: shrunk by half the
    width, then grown back. What the opening removes is the small part.

    Returns:
        (wide part, small part)
    """
    if small_area_width <= 0 or not inner_contour:
        return inner_contour, []
    half = small_area_width // 2
    wide = offset(offset(inner_contour, -half), half)
    small = difference(inner_contour, wide)
    return wide, small


def small_area_wall_count(small_area_width: int, line_width: int) -> int:
    """Wall loops that fit side by side into a strip of the given width."""
    return max(1, small_area_width // (2 * line_width))
