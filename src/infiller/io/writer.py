"""Result writer for saving generated fill.

This module provides the ResultWriter class for writing per-layer fill
results as one JSON document.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from infiller.domain import InfillResult
from infiller.exceptions import RegionWriteError


class ResultWriter:
    """Collects layer results and writes them atomically.

    The document is written to a temporary file in the target directory
    first and then moved over the target, so readers never see a partial
    file.

    Example:
        writer = ResultWriter(Path("part-infill.json"))
        writer.add_layer(0, 200, result)
        writer.save()
    """

    def __init__(self, output_path: Path) -> None:
        """Initialize the result writer.

        Args:
            output_path: Path where the result file will be saved
        """
        self._output_path = output_path
        self._layers: dict[int, dict[str, Any]] = {}

    def add_layer(self, index: int, z: int, result: InfillResult | dict[str, Any]) -> None:
        """Add or replace the result of one layer.

        Args:
            index: Layer index
            z: Layer height
            result: Generation result, or its serialized form
        """
        data = result.to_dict() if isinstance(result, InfillResult) else dict(result)
        self._layers[index] = {"index": index, "z": z, **data}

    @property
    def layer_count(self) -> int:
        return len(self._layers)

    def to_dict(self) -> dict[str, Any]:
        return {"layers": [self._layers[index] for index in sorted(self._layers)]}

    def save(self) -> None:
        """Write the result file.

        Raises:
            RegionWriteError: If the file cannot be written
        """
        directory = self._output_path.parent
        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._output_path.name}.", suffix=".tmp", dir=directory
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(self.to_dict(), f)
                os.replace(tmp_name, self._output_path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise RegionWriteError(str(self._output_path), str(e)) from e

    @staticmethod
    def get_output_path(input_path: Path) -> Path:
        """Generate output path with the infill naming convention.

        Converts: part.json -> part-infill.json
                  layers/bracket.json -> layers/bracket-infill.json

        Args:
            input_path: Region file path

        Returns:
            Path with -infill suffix before the extension
        """
        return input_path.parent / f"{input_path.stem}-infill{input_path.suffix or '.json'}"
