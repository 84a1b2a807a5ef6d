"""Region reader for loading layer outlines.

This module provides the RegionReader class for loading region files
and converting them into Layer domain models.

Region file format (JSON):

    {"layers": [{"index": 0, "z": 200, "outline": [[[x, y], ...], ...]}]}
"""

import json
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from infiller.domain import Layer, Point, Polygon
from infiller.exceptions import GeometryError, RegionLoadError


def _parse_polygon(data: Any, layer_index: int, polygon_index: int) -> Polygon:
    if not isinstance(data, list):
        raise GeometryError(f"Layer {layer_index}, polygon {polygon_index}: expected a list of points")
    points: list[Point] = []
    for point in data:
        if (
            not isinstance(point, list)
            or len(point) != 2
            or not all(isinstance(c, int) and not isinstance(c, bool) for c in point)
        ):
            raise GeometryError(
                f"Layer {layer_index}, polygon {polygon_index}: "
                f"points must be [x, y] integer pairs, got {point!r}"
            )
        points.append(Point(point[0], point[1]))
    if len(points) < 3:
        raise GeometryError(
            f"Layer {layer_index}, polygon {polygon_index}: "
            f"a closed polygon needs at least 3 points, got {len(points)}"
        )
    return Polygon(points)


class RegionReader:
    """Loads region files and yields their layers.

    Example:
        reader = RegionReader(Path("part.json"))
        reader.load()
        for layer in reader.iter_layers():
            print(layer.index, layer.z)
    """

    def __init__(self, region_path: Path) -> None:
        """Initialize the region reader.

        Args:
            region_path: Path to the JSON region file
        """
        self._region_path = region_path
        self._layers: list[Layer] | None = None

    def load(self) -> None:
        """Load and validate the region file.

        Raises:
            FileNotFoundError: If the file does not exist
            RegionLoadError: If the file is not a valid region file
            GeometryError: If a polygon is malformed
        """
        if not self._region_path.exists():
            raise FileNotFoundError(f"Region file not found: {self._region_path}")

        try:
            data = json.loads(self._region_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise RegionLoadError(str(self._region_path), str(e)) from e

        if not isinstance(data, dict) or not isinstance(data.get("layers"), list):
            raise RegionLoadError(str(self._region_path), "expected an object with a 'layers' list")

        layers: list[Layer] = []
        for position, entry in enumerate(data["layers"]):
            if not isinstance(entry, dict):
                raise RegionLoadError(str(self._region_path), f"layer #{position} is not an object")
            index = entry.get("index", position)
            z = entry.get("z", 0)
            outline = entry.get("outline", [])
            if not isinstance(index, int) or not isinstance(z, int) or not isinstance(outline, list):
                raise RegionLoadError(
                    str(self._region_path),
                    f"layer #{position} needs integer 'index' and 'z' and an 'outline' list",
                )
            polygons = [_parse_polygon(p, index, i) for i, p in enumerate(outline)]
            layers.append(Layer(index=index, z=z, outline=polygons))

        self._layers = layers

    @property
    def layer_count(self) -> int:
        """Return the number of layers in the file.

        Raises:
            RuntimeError: If the file has not been loaded yet
        """
        if self._layers is None:
            raise RuntimeError("Region not loaded. Call load() first.")
        return len(self._layers)

    def iter_layers(self) -> Iterator[Layer]:
        """Iterate over layers in file order.

        Raises:
            RuntimeError: If the file has not been loaded yet
        """
        if self._layers is None:
            raise RuntimeError("Region not loaded. Call load() first.")
        yield from self._layers

    def __enter__(self) -> "RegionReader":
        """Context manager entry."""
        self.load()
        return self

    def __exit__(self, _exc_type: object, _exc_val: object, _exc_tb: object) -> None:
        """Context manager exit."""
        self._layers = None
