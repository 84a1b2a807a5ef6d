"""Unit tests for the region I/O layer.

Tests for RegionReader and ResultWriter.
"""

import json
from pathlib import Path

import pytest

from infiller.domain import InfillResult, Point, Polygon, Polyline
from infiller.exceptions import GeometryError, RegionLoadError, RegionWriteError
from infiller.io import RegionReader, ResultWriter

SQUARE = [[0, 0], [1000, 0], [1000, 1000], [0, 1000]]


def write_json(path: Path, data: object) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestRegionReader:
    """Tests for RegionReader class."""

    def test_load_nonexistent_file(self, tmp_path: Path):
        """Test loading a nonexistent file raises FileNotFoundError."""
        reader = RegionReader(tmp_path / "missing.json")
        with pytest.raises(FileNotFoundError):
            reader.load()

    def test_access_before_load(self, tmp_path: Path):
        """Test accessing layers before loading raises RuntimeError."""
        reader = RegionReader(tmp_path / "part.json")
        with pytest.raises(RuntimeError, match="Region not loaded"):
            _ = reader.layer_count
        with pytest.raises(RuntimeError, match="Region not loaded"):
            list(reader.iter_layers())

    def test_load_layers(self, tmp_path: Path):
        """Test loading layers with outlines."""
        path = write_json(tmp_path / "part.json", {
            "layers": [
                {"index": 0, "z": 200, "outline": [SQUARE]},
                {"index": 1, "z": 400, "outline": []},
            ]
        })
        reader = RegionReader(path)
        reader.load()

        assert reader.layer_count == 2
        layers = list(reader.iter_layers())
        assert layers[0].z == 200
        assert layers[0].outline[0][2] == Point(1000, 1000)
        assert layers[1].is_empty()

    def test_index_and_z_defaults(self, tmp_path: Path):
        """Test that index defaults to the file position and z to 0."""
        path = write_json(tmp_path / "part.json", {"layers": [{"outline": [SQUARE]}, {"outline": []}]})
        with RegionReader(path) as reader:
            layers = list(reader.iter_layers())
        assert [(layer.index, layer.z) for layer in layers] == [(0, 0), (1, 0)]

    def test_context_manager_releases_layers(self, tmp_path: Path):
        """Test that leaving the context forgets the loaded layers."""
        path = write_json(tmp_path / "part.json", {"layers": []})
        with RegionReader(path) as reader:
            assert reader.layer_count == 0
        with pytest.raises(RuntimeError):
            _ = reader.layer_count

    def test_invalid_json(self, tmp_path: Path):
        """Test that malformed JSON is a load error."""
        path = tmp_path / "part.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(RegionLoadError) as exc_info:
            RegionReader(path).load()
        assert exc_info.value.path == str(path)

    def test_missing_layers_list(self, tmp_path: Path):
        """Test that the top level must hold a layers list."""
        path = write_json(tmp_path / "part.json", {"slices": []})
        with pytest.raises(RegionLoadError, match="'layers' list"):
            RegionReader(path).load()

    def test_bad_layer_fields(self, tmp_path: Path):
        """Test that non-integer heights are rejected."""
        path = write_json(tmp_path / "part.json", {"layers": [{"z": "high", "outline": []}]})
        with pytest.raises(RegionLoadError, match="layer #0"):
            RegionReader(path).load()

    def test_non_integer_points(self, tmp_path: Path):
        """Test that coordinates must be integers."""
        path = write_json(tmp_path / "part.json", {"layers": [{"outline": [[[0, 0], [1.5, 0], [1, 1]]]}]})
        with pytest.raises(GeometryError, match="integer pairs"):
            RegionReader(path).load()

    def test_too_few_points(self, tmp_path: Path):
        """Test that polygons need three points."""
        path = write_json(tmp_path / "part.json", {"layers": [{"outline": [[[0, 0], [10, 0]]]}]})
        with pytest.raises(GeometryError, match="at least 3 points"):
            RegionReader(path).load()


class TestResultWriter:
    """Tests for ResultWriter class."""

    def test_get_output_path(self):
        """Test the infill naming convention."""
        assert ResultWriter.get_output_path(Path("part.json")) == Path("part-infill.json")
        assert ResultWriter.get_output_path(Path("layers/bracket.json")) == Path("layers/bracket-infill.json")
        assert ResultWriter.get_output_path(Path("region")) == Path("region-infill.json")

    def test_layers_sorted_by_index(self):
        """Test that layers come out in index order whatever the add order."""
        writer = ResultWriter(Path("out.json"))
        writer.add_layer(2, 600, InfillResult())
        writer.add_layer(0, 200, InfillResult())
        writer.add_layer(1, 400, InfillResult().to_dict())

        assert writer.layer_count == 3
        assert [layer["index"] for layer in writer.to_dict()["layers"]] == [0, 1, 2]

    def test_add_layer_replaces(self):
        """Test that re-adding a layer overwrites it."""
        writer = ResultWriter(Path("out.json"))
        writer.add_layer(0, 200, InfillResult())
        writer.add_layer(0, 200, InfillResult(lines=[Polyline([Point(0, 0), Point(5, 0)])]))
        assert writer.layer_count == 1
        assert writer.to_dict()["layers"][0]["lines"] == [[[0, 0], [5, 0]]]

    def test_save(self, tmp_path: Path):
        """Test that saving writes the document and no temporary file."""
        output = tmp_path / "part-infill.json"
        writer = ResultWriter(output)
        writer.add_layer(0, 200, InfillResult(polygons=[Polygon([Point(0, 0), Point(5, 0), Point(5, 5)])]))
        writer.save()

        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["layers"][0]["z"] == 200
        assert data["layers"][0]["polygons"] == [[[0, 0], [5, 0], [5, 5]]]
        assert [p.name for p in tmp_path.iterdir()] == ["part-infill.json"]

    def test_save_to_missing_directory(self, tmp_path: Path):
        """Test that an unwritable location is a write error."""
        writer = ResultWriter(tmp_path / "missing" / "out.json")
        with pytest.raises(RegionWriteError):
            writer.save()
