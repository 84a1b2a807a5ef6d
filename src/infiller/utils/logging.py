"""Logging utilities for infiller."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import structlog


@dataclass
class ProcessingStats:
    """Statistics from processing run."""

    processed_count: int = 0
    skipped_count: int = 0
    error_count: int = 0
    line_count: int = 0
    polygon_count: int = 0
    errors: list[tuple[int, str]] = field(default_factory=list)
    start_time: float | None = None
    end_time: float | None = None
    was_cancelled: bool = False
    pending_count: int = 0

    @property
    def duration_seconds(self) -> float:
        """Calculate processing duration."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "WARNING",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure dual-output structured logging.

    Args:
        log_file: Path to log file (no file output if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output except errors

    Returns:
        Configured structlog logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(getattr(logging, file_level.upper()))
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
        )
        root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.ERROR if quiet else getattr(logging, console_level.upper()))
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("infiller")
    logger.info(
        "Logging initialized",
        log_file=str(log_file) if log_file else None,
        level=file_level,
    )

    return logger


class ProcessingLogger:
    """Logger for tracking processing progress and statistics."""

    def __init__(self, logger: structlog.stdlib.BoundLogger) -> None:
        self._logger = logger
        self._stats = ProcessingStats()

    def log_layer_start(self, layer_index: int, z: int) -> None:
        """Log start of layer processing."""
        self._logger.debug("Processing layer", layer=layer_index, z=z)

    def log_layer_complete(
        self,
        layer_index: int,
        line_count: int,
        polygon_count: int,
        duration_ms: float,
    ) -> None:
        """Log successful layer processing."""
        self._logger.info(
            "Layer filled",
            layer=layer_index,
            lines=line_count,
            polygons=polygon_count,
            duration_ms=round(duration_ms, 2),
        )
        self._stats.processed_count += 1
        self._stats.line_count += line_count
        self._stats.polygon_count += polygon_count

    def log_layer_skipped(self, layer_index: int, reason: str) -> None:
        """Log skipped layer."""
        self._logger.debug("Layer skipped", layer=layer_index, reason=reason)
        self._stats.skipped_count += 1

    def log_layer_error(
        self,
        layer_index: int,
        error: Exception | str,
        traceback: str | None = None,
    ) -> None:
        """Log layer processing error."""
        self._logger.error(
            "Layer processing failed",
            layer=layer_index,
            error=str(error),
            error_type=type(error).__name__ if isinstance(error, Exception) else "WorkerError",
            traceback=traceback,
        )
        self._stats.error_count += 1
        self._stats.errors.append((layer_index, str(error)))

    def log_summary(self) -> None:
        """Log the totals of the run."""
        stats = self._stats
        self._logger.info(
            "Processing summary",
            processed=stats.processed_count,
            skipped=stats.skipped_count,
            errors=stats.error_count,
            lines=stats.line_count,
            polygons=stats.polygon_count,
            duration_s=round(stats.duration_seconds, 3),
            cancelled=stats.was_cancelled,
        )

    @property
    def stats(self) -> ProcessingStats:
        """Get current processing statistics."""
        return self._stats
