"""Toolpath types produced by a generation call.

This module defines the output side of the domain:
- ExtrusionJunction / ExtrusionLine: variable-width wall loops
- InfillResult: walls, fill polygons, fill polylines and the inner contour
"""

from dataclasses import dataclass, field
from typing import Any

from infiller.domain.polygon import Point, Polygon, Polyline


@dataclass(frozen=True, slots=True)
class ExtrusionJunction:
    """A vertex of a wall toolpath with the line width at that vertex.

    Attributes:
        point: Location of the junction
        width: Extrusion width at this junction
        perimeter_index: Inset index of the owning wall
    """

    point: Point
    width: int
    perimeter_index: int

    def to_list(self) -> list[int]:
        return [self.point.x, self.point.y, self.width]


@dataclass
class ExtrusionLine:
    """One wall toolpath, closed or open, of possibly varying width.

    Attributes:
        inset_idx: 0 for the outermost wall, increasing inwards
        junctions: Vertices with their widths
        is_odd: True for single gap-filling lines between walls
        is_closed: True for loops
    """

    inset_idx: int
    junctions: list[ExtrusionJunction] = field(default_factory=list)
    is_odd: bool = False
    is_closed: bool = True

    def __len__(self) -> int:
        return len(self.junctions)

    @classmethod
    def from_polygon(cls, polygon: Polygon, inset_idx: int, width: int) -> "ExtrusionLine":
        """Build a constant-width closed wall following a polygon."""
        return cls(
            inset_idx=inset_idx,
            junctions=[ExtrusionJunction(p, width, inset_idx) for p in polygon.points],
        )

    def to_polygon(self) -> Polygon:
        return Polygon([j.point for j in self.junctions])

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC.

        Returns:
            Dictionary representation of the wall line
        """
        return {
            "inset_idx": self.inset_idx,
            "is_odd": self.is_odd,
            "is_closed": self.is_closed,
            "junctions": [j.to_list() for j in self.junctions],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ExtrusionLine":
        """Deserialize from dictionary.

        Args:
            data: Dictionary representation of a wall line

        Returns:
            ExtrusionLine instance
        """
        inset_idx = data["inset_idx"]
        return cls(
            inset_idx=inset_idx,
            junctions=[
                ExtrusionJunction(Point(x, y), width, inset_idx)
                for x, y, width in data["junctions"]
            ],
            is_odd=data.get("is_odd", False),
            is_closed=data.get("is_closed", True),
        )


# Wall lines of a single inset index
VariableWidthLines = list[ExtrusionLine]


@dataclass
class InfillResult:
    """Everything one generation call produces for a layer.

    Attributes:
        toolpaths: Wall toolpaths binned by inset index
        polygons: Closed fill polygons
        lines: Open fill polylines
        inner_contour: Region left for the pattern after the walls
    """

    toolpaths: list[VariableWidthLines] = field(default_factory=list)
    polygons: list[Polygon] = field(default_factory=list)
    lines: list[Polyline] = field(default_factory=list)
    inner_contour: list[Polygon] = field(default_factory=list)

    def is_empty(self) -> bool:
        """Check whether nothing at all was generated.

        Returns:
            True if there are no walls, polygons or lines
        """
        return not (any(self.toolpaths) or self.polygons or self.lines)

    def add_toolpaths(self, toolpaths: list[VariableWidthLines]) -> None:
        """Merge wall toolpaths in, keeping them binned by inset index."""
        for inset in toolpaths:
            for line in inset:
                while len(self.toolpaths) <= line.inset_idx:
                    self.toolpaths.append([])
                self.toolpaths[line.inset_idx].append(line)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC and result files.

        Returns:
            Dictionary representation of the result
        """
        return {
            "toolpaths": [[line.to_dict() for line in inset] for inset in self.toolpaths],
            "polygons": [polygon.to_list() for polygon in self.polygons],
            "lines": [line.to_list() for line in self.lines],
            "inner_contour": [polygon.to_list() for polygon in self.inner_contour],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "InfillResult":
        """Deserialize from dictionary.

        Args:
            data: Dictionary representation of a result

        Returns:
            InfillResult instance
        """
        return cls(
            toolpaths=[
                [ExtrusionLine.from_dict(line) for line in inset]
                for inset in data.get("toolpaths", [])
            ],
            polygons=[Polygon.from_list(p) for p in data.get("polygons", [])],
            lines=[Polyline.from_list(p) for p in data.get("lines", [])],
            inner_contour=[Polygon.from_list(p) for p in data.get("inner_contour", [])],
        )
