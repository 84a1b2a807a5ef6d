"""Parallel processing orchestration for the fill pipeline.

This module coordinates the full region-file workflow with parallel
processing of individual layers using ProcessPoolExecutor.

Key components:
- process_layer: Top-level picklable function for parallel execution
- LayerProcessor: Main orchestrator class for region files
"""

import time
import traceback
from collections.abc import Callable
from concurrent.futures import ProcessPoolExecutor, as_completed
from pathlib import Path
from typing import Any

from infiller.config import FillPattern, InfillerSettings, InfillParameters
from infiller.core.cross import UniformCrossFillProvider
from infiller.core.infill import InfillGenerator
from infiller.domain import InfillResult, Layer
from infiller.exceptions import ProcessingCancelledError
from infiller.io import RegionReader, ResultWriter
from infiller.utils import ProcessingLogger, ProcessingStats, configure_logging


def process_layer(layer_dict: dict[str, Any], params_dict: dict[str, Any]) -> dict[str, Any]:
    """Fill a single layer.

    Top-level function designed to be picklable for use with ProcessPoolExecutor.
    Deserializes the layer, runs the generator with the layer height, and
    returns the serialized result.

    The cross patterns get a uniform subdivision covering the layer; the
    lightning pattern has no tree layer here and reports a provider error.

    Args:
        layer_dict: Serialized layer (from Layer.to_dict())
        params_dict: Serialized fill parameters

    Returns:
        Dictionary containing either:
        - Success: {"index", "z", "result", "line_count", "polygon_count", "duration_ms"}
        - Error: {"error": str, "layer_index": int, "traceback": str, "duration_ms": float}
    """
    start_time = time.time()

    try:
        layer = Layer.from_dict(layer_dict)
        params = InfillParameters(**{**params_dict, "z": layer.z})

        cross_fill_provider = None
        if params.pattern in (FillPattern.CROSS, FillPattern.CROSS_3D):
            cross_fill_provider = UniformCrossFillProvider.for_region(
                layer.outline, params.line_distance
            )

        generator = InfillGenerator(params, layer.outline)
        result = generator.generate(cross_fill_provider=cross_fill_provider)

        duration_ms = (time.time() - start_time) * 1000
        return {
            "index": layer.index,
            "z": layer.z,
            "result": result.to_dict(),
            "line_count": len(result.lines),
            "polygon_count": len(result.polygons),
            "duration_ms": duration_ms,
        }

    except Exception as e:
        duration_ms = (time.time() - start_time) * 1000
        tb = traceback.format_exc()
        return {
            "error": str(e),
            "layer_index": layer_dict.get("index", -1),
            "traceback": tb,
            "duration_ms": duration_ms,
        }


class LayerProcessor:
    """Orchestrates parallel fill generation for a region file.

    Manages the complete workflow:
    1. Load region file
    2. Skip layers without a fillable outline
    3. Fill layers in parallel using worker processes
    4. Collect results and update statistics
    5. Save the result file

    Example:
        settings = InfillerSettings()
        processor = LayerProcessor(settings)
        stats = processor.process(
            input_path=Path("part.json"),
            output_path=Path("part-infill.json"),
            max_workers=4
        )
    """

    def __init__(self, config: InfillerSettings) -> None:
        """Initialize layer processor with configuration.

        Args:
            config: Settings containing fill, processing and logging config
        """
        self.config = config
        self.logger = configure_logging(
            log_file=config.logging.log_file,
            console_level=config.logging.log_level,
            file_level=config.logging.file_log_level,
            quiet=config.logging.quiet,
        )
        self.processing_logger = ProcessingLogger(self.logger)

    def process(
        self,
        input_path: Path,
        output_path: Path | None = None,
        max_workers: int | None = None,
        progress_callback: Callable[[int, int, int, bool], None] | None = None,
    ) -> ProcessingStats:
        """Process a region file with parallel layer processing.

        Args:
            input_path: Path to the region file
            output_path: Path for the result file (auto-generated if None)
            max_workers: Maximum worker processes (None = config default)
            progress_callback: Optional callback(completed, total, layer_index, success)
                for progress updates

        Returns:
            ProcessingStats with counts, timing, and error details

        Raises:
            FileNotFoundError: If the region file does not exist
            RegionLoadError: If the region file is malformed
            RegionWriteError: If the result file cannot be written
            ProcessingCancelledError: If processing is cancelled by user
        """
        # Fresh statistics for every run
        self.processing_logger = ProcessingLogger(self.logger)
        stats = self.processing_logger.stats
        stats.start_time = time.time()

        if max_workers is None:
            max_workers = self.config.processing.max_workers

        if output_path is None:
            output_path = ResultWriter.get_output_path(input_path)

        self.logger.info(
            "Starting region processing",
            input=str(input_path),
            output=str(output_path),
            pattern=self.config.infill.pattern.value,
            max_workers=max_workers,
        )

        with RegionReader(input_path) as reader:
            layers = list(reader.iter_layers())

        self.logger.info("Region loaded", layer_count=len(layers))

        writer = ResultWriter(output_path)
        layers_to_process: list[Layer] = []
        for layer in layers:
            if self.config.processing.skip_empty_layers and layer.is_empty():
                self.processing_logger.log_layer_skipped(layer.index, "empty outline")
                writer.add_layer(layer.index, layer.z, InfillResult())
                continue
            layers_to_process.append(layer)

        if layers_to_process:
            self._process_layers_parallel(
                layers=layers_to_process,
                writer=writer,
                max_workers=max_workers,
                stats=stats,
                progress_callback=progress_callback,
            )
        else:
            self.logger.info("No layers to process")

        writer.save()
        self.logger.info("Result saved", output=str(output_path), layers=writer.layer_count)

        stats.end_time = time.time()
        self.processing_logger.log_summary()

        return stats

    def _process_layers_parallel(
        self,
        layers: list[Layer],
        writer: ResultWriter,
        max_workers: int | None,
        stats: ProcessingStats,
        progress_callback: Callable[[int, int, int, bool], None] | None = None,
    ) -> None:
        """Fill layers in parallel using ProcessPoolExecutor.

        Successful results go straight into the writer; failed layers are
        recorded in the statistics and left out of the result file.

        Args:
            layers: Layers to fill
            writer: Result writer collecting the layers
            max_workers: Maximum worker processes
            stats: Statistics object to update
            progress_callback: Optional callback(completed, total, layer_index, success)
        """
        # Serialize configuration for workers
        params_dict = self.config.infill.model_dump()

        self.logger.info(
            "Starting parallel processing",
            layer_count=len(layers),
            max_workers=max_workers,
        )

        total = len(layers)
        completed = 0
        pending_futures: dict = {}

        with ProcessPoolExecutor(max_workers=max_workers) as executor:
            for layer in layers:
                self.processing_logger.log_layer_start(layer.index, layer.z)
                future = executor.submit(process_layer, layer.to_dict(), params_dict)
                pending_futures[future] = layer

            try:
                for future in as_completed(pending_futures):
                    layer = pending_futures.pop(future)
                    success = False

                    try:
                        result = future.result()

                        if "error" in result:
                            self.processing_logger.log_layer_error(
                                layer_index=result["layer_index"],
                                error=result["error"],
                                traceback=result.get("traceback"),
                            )
                        else:
                            success = True
                            writer.add_layer(result["index"], result["z"], result["result"])
                            self.processing_logger.log_layer_complete(
                                layer_index=result["index"],
                                line_count=result["line_count"],
                                polygon_count=result["polygon_count"],
                                duration_ms=result.get("duration_ms", 0.0),
                            )

                    except Exception as e:
                        # Executor-level error
                        self.processing_logger.log_layer_error(
                            layer_index=layer.index,
                            error=e,
                            traceback=traceback.format_exc(),
                        )

                    completed += 1
                    if progress_callback is not None:
                        progress_callback(completed, total, layer.index, success)

            except KeyboardInterrupt:
                self.logger.info("Cancellation requested by user")
                for f in pending_futures:
                    f.cancel()

                stats.was_cancelled = True
                stats.pending_count = len(pending_futures)

                executor.shutdown(wait=True, cancel_futures=True)
                raise ProcessingCancelledError(stats.processed_count, stats.pending_count) from None
