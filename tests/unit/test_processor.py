"""Unit tests for the parallel processing orchestration."""

import json
from concurrent.futures import Future
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from infiller.config import FillPattern, InfillerSettings, InfillParameters
from infiller.core.processor import LayerProcessor, process_layer
from infiller.domain import Layer, Point, Polygon
from infiller.exceptions import ProcessingCancelledError


class InlineExecutor:
    """Stand-in for ProcessPoolExecutor that runs submissions immediately."""

    def __init__(self, max_workers: int | None = None) -> None:
        self.max_workers = max_workers
        self.shutdown_called = False

    def __enter__(self) -> "InlineExecutor":
        return self

    def __exit__(self, *_exc: object) -> None:
        return None

    def submit(self, fn, *args) -> Future:
        future: Future = Future()
        future.set_result(fn(*args))
        return future

    def shutdown(self, wait: bool = True, cancel_futures: bool = False) -> None:
        self.shutdown_called = True


def square(size: int) -> Polygon:
    return Polygon([Point(0, 0), Point(size, 0), Point(size, size), Point(0, size)])


@pytest.fixture
def region_file(tmp_path: Path) -> Path:
    """A region with one filled and one empty layer."""
    path = tmp_path / "part.json"
    path.write_text(json.dumps({
        "layers": [
            Layer(index=0, z=200, outline=[square(10000)]).to_dict(),
            {"index": 1, "z": 400, "outline": []},
        ]
    }), encoding="utf-8")
    return path


@pytest.fixture
def settings() -> InfillerSettings:
    """Default settings."""
    return InfillerSettings()


class TestProcessLayer:
    """Tests for process_layer function."""

    def test_fills_layer(self):
        """Test a successful fill with default lines."""
        layer = Layer(index=3, z=600, outline=[square(10000)])
        result = process_layer(layer.to_dict(), InfillParameters().model_dump())

        assert "error" not in result
        assert result["index"] == 3
        assert result["z"] == 600
        assert result["line_count"] == 2
        assert len(result["result"]["lines"]) == 2
        assert result["polygon_count"] == 0
        assert result["duration_ms"] >= 0

    def test_layer_height_reaches_parameters(self):
        """Test that height-dependent patterns use the layer's z."""
        params = InfillParameters(pattern=FillPattern.CUBIC, line_distance=2000).model_dump()
        low = process_layer(Layer(index=0, z=0, outline=[square(10000)]).to_dict(), params)
        high = process_layer(Layer(index=1, z=1000, outline=[square(10000)]).to_dict(), params)
        assert low["result"]["lines"] != high["result"]["lines"]

    def test_cross_gets_uniform_provider(self):
        """Test that the cross pattern works without an external provider."""
        params = InfillParameters(pattern=FillPattern.CROSS, line_distance=2000).model_dump()
        result = process_layer(Layer(index=0, z=0, outline=[square(10000)]).to_dict(), params)
        assert "error" not in result
        assert result["line_count"] > 0

    def test_missing_provider_reported(self):
        """Test that generation errors come back as data."""
        params = InfillParameters(pattern=FillPattern.LIGHTNING).model_dump()
        result = process_layer(Layer(index=5, z=0, outline=[square(10000)]).to_dict(), params)

        assert result["layer_index"] == 5
        assert "lightning layer" in result["error"]
        assert "ProviderError" in result["traceback"]

    def test_malformed_layer(self):
        """Test a layer dictionary that cannot be deserialized."""
        result = process_layer({"index": 2}, InfillParameters().model_dump())
        assert result["layer_index"] == 2
        assert "error" in result


@patch("infiller.core.processor.ProcessPoolExecutor", InlineExecutor)
@patch("infiller.core.processor.configure_logging")
class TestLayerProcessor:
    """Tests for LayerProcessor class."""

    def test_init(self, mock_logging, settings: InfillerSettings):
        """Test LayerProcessor initialization."""
        mock_logging.return_value = Mock()
        processor = LayerProcessor(settings)

        assert processor.config == settings
        mock_logging.assert_called_once()
        assert mock_logging.call_args.kwargs["quiet"] is False

    def test_quiet_reaches_logging(self, mock_logging):
        """Test that quiet settings silence console logging."""
        mock_logging.return_value = Mock()
        LayerProcessor(InfillerSettings(logging={"quiet": True}))
        assert mock_logging.call_args.kwargs["quiet"] is True

    def test_process_region(self, mock_logging, settings: InfillerSettings, region_file: Path):
        """Test a full run writing every layer."""
        mock_logging.return_value = Mock()
        stats = LayerProcessor(settings).process(region_file)

        assert stats.processed_count == 1
        assert stats.skipped_count == 1
        assert stats.error_count == 0
        assert stats.line_count == 2
        assert stats.duration_seconds >= 0

        output = region_file.parent / "part-infill.json"
        data = json.loads(output.read_text(encoding="utf-8"))
        assert [layer["index"] for layer in data["layers"]] == [0, 1]
        assert len(data["layers"][0]["lines"]) == 2
        assert data["layers"][1]["lines"] == []

    def test_custom_output_path(self, mock_logging, settings: InfillerSettings, region_file: Path):
        """Test writing to an explicit output path."""
        mock_logging.return_value = Mock()
        output = region_file.parent / "custom.json"
        LayerProcessor(settings).process(region_file, output_path=output)
        assert output.exists()

    def test_empty_layers_kept_when_not_skipping(self, mock_logging, region_file: Path):
        """Test that disabling the skip sends empty layers to the workers."""
        mock_logging.return_value = Mock()
        settings = InfillerSettings(processing={"skip_empty_layers": False})
        stats = LayerProcessor(settings).process(region_file)

        assert stats.skipped_count == 0
        assert stats.processed_count == 2

    def test_progress_callback(self, mock_logging, settings: InfillerSettings, region_file: Path):
        """Test that progress is reported for every worker result."""
        mock_logging.return_value = Mock()
        callback = Mock()
        LayerProcessor(settings).process(region_file, progress_callback=callback)
        callback.assert_called_once_with(1, 1, 0, True)

    def test_process_handles_errors(self, mock_logging, region_file: Path):
        """Test that failed layers are counted and left out of the result."""
        mock_logging.return_value = Mock()
        settings = InfillerSettings(infill=InfillParameters(pattern=FillPattern.LIGHTNING))
        callback = Mock()
        stats = LayerProcessor(settings).process(region_file, progress_callback=callback)

        assert stats.processed_count == 0
        assert stats.error_count == 1
        assert stats.errors[0][0] == 0
        callback.assert_called_once_with(1, 1, 0, False)

        data = json.loads((region_file.parent / "part-infill.json").read_text(encoding="utf-8"))
        assert [layer["index"] for layer in data["layers"]] == [1]

    def test_cancellation(self, mock_logging, settings: InfillerSettings, region_file: Path):
        """Test that Ctrl+C while waiting reports the pending layers."""
        mock_logging.return_value = Mock()
        with patch("infiller.core.processor.as_completed", side_effect=KeyboardInterrupt):
            with pytest.raises(ProcessingCancelledError) as exc_info:
                LayerProcessor(settings).process(region_file)

        assert exc_info.value.processed_count == 0
        assert exc_info.value.pending_count == 1
