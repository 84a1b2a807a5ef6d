"""Layer representation.

This module defines the layer domain model: one horizontal slice of a part,
given as the outline of the area to fill at a height.
"""

from dataclasses import dataclass, field
from typing import Any

from infiller.domain.polygon import Polygon


@dataclass
class Layer:
    """A single layer with its fill outline.

    Designed for efficient serialization for parallel processing.

    Attributes:
        index: Layer number, counted from the build plate
        z: Height of the layer in micrometres
        outline: Closed polygons bounding the area to fill (holes clockwise)
    """

    index: int
    z: int
    outline: list[Polygon] = field(default_factory=list)

    def is_empty(self) -> bool:
        """Check if layer has nothing to fill.

        Returns:
            True if there is no polygon with at least three points
        """
        return not any(len(polygon) >= 3 for polygon in self.outline)

    def area(self) -> float:
        """Net fill area (holes subtract).

        Returns:
            Sum of signed polygon areas, made positive
        """
        return abs(sum(polygon.signed_area() for polygon in self.outline))

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC.

        Returns:
            Dictionary representation of the layer
        """
        return {
            "index": self.index,
            "z": self.z,
            "outline": [polygon.to_list() for polygon in self.outline],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Layer":
        """Deserialize from dictionary.

        Args:
            data: Dictionary representation of a layer

        Returns:
            Layer instance
        """
        return cls(
            index=data["index"],
            z=data["z"],
            outline=[Polygon.from_list(p) for p in data["outline"]],
        )
