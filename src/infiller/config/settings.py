"""Configuration settings for infiller."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, model_validator


class FillPattern(str, Enum):
    """Infill pattern kind."""

    LINES = "lines"
    GRID = "grid"
    CUBIC = "cubic"
    TETRAHEDRAL = "tetrahedral"
    QUARTER_CUBIC = "quarter_cubic"
    TRIANGLES = "triangles"
    TRIHEXAGON = "trihexagon"
    ZIG_ZAG = "zigzag"
    CONCENTRIC = "concentric"
    GYROID = "gyroid"
    CROSS = "cross"
    CROSS_3D = "cross_3d"
    LIGHTNING = "lightning"


# Patterns whose scan-line segments can be joined along the boundary
CONNECTABLE_PATTERNS = frozenset(
    {
        FillPattern.LINES,
        FillPattern.TRIANGLES,
        FillPattern.GRID,
        FillPattern.CUBIC,
        FillPattern.TETRAHEDRAL,
        FillPattern.QUARTER_CUBIC,
        FillPattern.TRIHEXAGON,
    }
)

# Patterns whose output is stitched into longer polylines
STITCHED_PATTERNS = frozenset(
    {
        FillPattern.ZIG_ZAG,
        FillPattern.GYROID,
        FillPattern.CROSS,
        FillPattern.CROSS_3D,
        FillPattern.LIGHTNING,
    }
)


class ZigzagEndPieces(str, Enum):
    """How zigzag handles boundary pieces leading from a line back to itself."""

    NONE = "none"
    DISCONNECTED = "disconnected"
    CONNECTED = "connected"


class ZigzagConfig(BaseModel):
    """Zigzag sub-options."""

    model_config = ConfigDict(frozen=True)

    end_pieces: ZigzagEndPieces = Field(
        default=ZigzagEndPieces.NONE,
        description="End-piece mode for boundary pieces that return to the same scan-line",
    )
    skip_some_zags: bool = Field(
        default=False,
        description="Leave out every n-th zag connector",
    )
    zag_skip_count: int = Field(
        default=0,
        ge=0,
        description="Keep one zag out of this many when skipping",
    )

    @model_validator(mode="after")
    def _check_skip_count(self) -> "ZigzagConfig":
        if self.skip_some_zags and self.zag_skip_count < 1:
            raise ValueError("zag_skip_count must be at least 1 when skip_some_zags is set")
        return self

    @property
    def use_endpieces(self) -> bool:
        return self.end_pieces != ZigzagEndPieces.NONE

    @property
    def connected_endpieces(self) -> bool:
        return self.end_pieces == ZigzagEndPieces.CONNECTED


class InfillParameters(BaseModel):
    """Per-generation fill parameters.

    Frozen: set once, then shared by value between generation calls.
    Lengths are integer micrometres, angles degrees.
    """

    model_config = ConfigDict(frozen=True)

    pattern: FillPattern = Field(
        default=FillPattern.LINES,
        description="Fill geometry",
    )
    zig_zaggify: bool = Field(
        default=False,
        description="Connect line ends along the boundary into long polylines",
    )
    line_width: int = Field(
        default=400,
        gt=0,
        description="Width of a single fill line",
    )
    line_distance: int = Field(
        default=4000,
        gt=0,
        description="Distance between two parallel fill lines",
    )
    overlap: int = Field(
        default=0,
        description="Distance the fill area is grown into the walls",
    )
    multiplier: int = Field(
        default=1,
        ge=1,
        le=16,
        description="Number of parallel copies of every fill line",
    )
    fill_angle: float = Field(
        default=0.0,
        description="Direction of the first line family, counter-clockwise from X",
    )
    origin: tuple[int, int] = Field(
        default=(0, 0),
        description="Point the pattern is anchored to",
    )
    z: int = Field(
        default=0,
        description="Height of the layer",
    )
    shift: int = Field(
        default=0,
        description="Extra shift of scan-lines perpendicular to the fill angle",
    )
    max_resolution: int = Field(
        default=0,
        ge=0,
        description="Minimum segment length kept by simplification (0 = off)",
    )
    max_deviation: int = Field(
        default=0,
        ge=0,
        description="Maximum deviation allowed by simplification (0 = off)",
    )
    wall_line_count: int = Field(
        default=0,
        ge=0,
        description="Walls generated around the fill area before the pattern",
    )
    small_area_width: int = Field(
        default=0,
        ge=0,
        description="Regions narrower than this are filled with walls instead",
    )
    skip_line_stitching: bool = Field(
        default=False,
        description="Leave polyline patterns unstitched",
    )
    zigzag: ZigzagConfig = Field(
        default_factory=ZigzagConfig,
        description="Zigzag sub-options",
    )

    @model_validator(mode="after")
    def _check_zigzag_options(self) -> "InfillParameters":
        if self.pattern != FillPattern.ZIG_ZAG and self.zigzag != ZigzagConfig():
            raise ValueError(
                f"zigzag options only apply to the zigzag pattern, not '{self.pattern.value}'"
            )
        return self

    @property
    def connect_lines(self) -> bool:
        """Whether scan-line segments are joined by the line connector."""
        return self.zig_zaggify and self.pattern in CONNECTABLE_PATTERNS

    @property
    def use_stitching(self) -> bool:
        """Whether open output is stitched into longer polylines."""
        if self.skip_line_stitching:
            return False
        return self.zig_zaggify or self.pattern in STITCHED_PATTERNS


class ProcessingConfig(BaseModel):
    """Configuration for layer processing."""

    max_workers: int | None = Field(
        default=None,
        description="Max worker processes (None = auto)",
    )
    skip_empty_layers: bool = Field(
        default=True,
        description="Skip layers without a fillable outline",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )
    quiet: bool = Field(
        default=False,
        description="Suppress console log output except errors",
    )


class InfillerSettings(BaseModel):
    """Main application settings."""

    infill: InfillParameters = Field(default_factory=InfillParameters)
    processing: ProcessingConfig = Field(default_factory=ProcessingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> InfillerSettings:
    """Get default application settings."""
    return InfillerSettings()
