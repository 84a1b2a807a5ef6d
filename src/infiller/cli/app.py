"""CLI application entry point for infiller.

This module provides the main CLI interface using Typer.
"""

import os
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError

from infiller import __version__
from infiller.cli.output import (
    console,
    create_progress,
    print_cancellation_notice,
    print_cancellation_summary,
    print_error,
    print_fill_info,
    print_header,
    print_layer_errors,
    print_processing_info,
    print_region_info,
    print_step,
    print_success,
)
from infiller.config import (
    FillPattern,
    InfillerSettings,
    InfillParameters,
    LoggingConfig,
    ProcessingConfig,
    ZigzagConfig,
    ZigzagEndPieces,
)
from infiller.core import LayerProcessor
from infiller.exceptions import (
    InfillerError,
    ProcessingCancelledError,
    RegionLoadError,
    RegionWriteError,
)
from infiller.io import RegionReader, ResultWriter

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

# Create the Typer app
app = typer.Typer(
    name="infiller",
    help="Generate infill toolpaths for the layers of a region file.",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]Infiller[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Generate infill toolpaths for the layers of a region file."""


@app.command()
def fill(
    input_path: Annotated[
        Path,
        typer.Argument(
            help="Path to input region file (JSON)",
            show_default=False,
        ),
    ],
    pattern: Annotated[
        str,
        typer.Option(
            "--pattern",
            "-p",
            help="Fill pattern (lines|grid|cubic|tetrahedral|quarter_cubic|triangles|"
            "trihexagon|zigzag|concentric|gyroid|cross|cross_3d)",
        ),
    ] = "lines",
    line_width: Annotated[
        int,
        typer.Option(
            "--line-width",
            "-w",
            help="Fill line width in micrometres",
        ),
    ] = 400,
    spacing: Annotated[
        int,
        typer.Option(
            "--spacing",
            "-s",
            help="Distance between parallel fill lines in micrometres",
        ),
    ] = 4000,
    angle: Annotated[
        float,
        typer.Option(
            "--angle",
            "-a",
            help="Fill angle in degrees, counter-clockwise from X",
        ),
    ] = 0.0,
    zigzag_ends: Annotated[
        str,
        typer.Option(
            "--zigzag-ends",
            help="Zigzag end pieces (none|disconnected|connected)",
        ),
    ] = "none",
    connect: Annotated[
        bool,
        typer.Option(
            "--connect",
            help="Connect line ends along the boundary",
        ),
    ] = False,
    walls: Annotated[
        int,
        typer.Option(
            "--walls",
            help="Number of walls around the fill area",
        ),
    ] = 0,
    overlap: Annotated[
        int,
        typer.Option(
            "--overlap",
            help="Distance the fill is grown into the walls",
        ),
    ] = 0,
    multiplier: Annotated[
        int,
        typer.Option(
            "--multiplier",
            "-m",
            help="Parallel copies of every fill line (1-16)",
        ),
    ] = 1,
    small_area_width: Annotated[
        int,
        typer.Option(
            "--small-area-width",
            help="Fill regions narrower than this with walls (0 = off)",
        ),
    ] = 0,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output path (default: {name}-infill.json)",
        ),
    ] = None,
    workers: Annotated[
        int | None,
        typer.Option(
            "--workers",
            "-j",
            help="Number of parallel workers (default: auto)",
            min=1,
        ),
    ] = None,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Write detailed logs to file",
        ),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option(
            "--log-level",
            help="Logging level (DEBUG|INFO|WARNING|ERROR)",
        ),
    ] = "WARNING",
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbose console output",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Minimal console output",
        ),
    ] = False,
) -> None:
    """Fill every layer of a region file with the selected pattern.

    Example:
        infiller fill part.json --pattern grid --spacing 2000

    This will create part-infill.json with walls, fill polygons and fill
    lines for every layer.
    """
    # Validate mutually exclusive options
    if verbose and quiet:
        print_error("Cannot use --verbose and --quiet together")
        raise typer.Exit(code=1)

    if not input_path.exists():
        print_error(
            f"Input file not found: {input_path}",
            details=f"The file '{input_path}' does not exist or is not accessible.",
        )
        raise typer.Exit(code=1)

    if not input_path.is_file():
        print_error(
            f"Input path is not a file: {input_path}",
            details="Please provide a path to a JSON region file.",
        )
        raise typer.Exit(code=1)

    try:
        fill_pattern = FillPattern(pattern.lower())
    except ValueError:
        print_error(
            f"Invalid pattern: {pattern}",
            details="Valid values: " + ", ".join(p.value for p in FillPattern),
        )
        raise typer.Exit(code=1)

    if fill_pattern == FillPattern.LIGHTNING:
        print_error(
            "The lightning pattern is not available from the command line",
            details="It needs a precomputed lightning tree layer.",
        )
        raise typer.Exit(code=1)

    try:
        end_pieces = ZigzagEndPieces(zigzag_ends.lower())
    except ValueError:
        print_error(
            f"Invalid zigzag end pieces: {zigzag_ends}",
            details="Valid values: none, disconnected, connected",
        )
        raise typer.Exit(code=1)

    if log_level.upper() not in LOG_LEVELS:
        print_error(
            f"Invalid log level: {log_level}",
            details="Valid values: " + ", ".join(LOG_LEVELS),
        )
        raise typer.Exit(code=1)

    try:
        settings = InfillerSettings(
            infill=InfillParameters(
                pattern=fill_pattern,
                zig_zaggify=connect,
                line_width=line_width,
                line_distance=spacing,
                fill_angle=angle,
                overlap=overlap,
                multiplier=multiplier,
                wall_line_count=walls,
                small_area_width=small_area_width,
                zigzag=ZigzagConfig(end_pieces=end_pieces),
            ),
            processing=ProcessingConfig(
                max_workers=workers,
            ),
            logging=LoggingConfig(
                log_file=log_file,
                log_level=log_level.upper() if not quiet else "WARNING",
                quiet=quiet,
            ),
        )
    except ValidationError as e:
        print_error("Invalid fill parameters", details=_format_validation_error(e))
        raise typer.Exit(code=1)

    if not quiet:
        print_header(__version__)

    try:
        if not quiet:
            print_step("Loading region")

        reader = RegionReader(input_path)
        reader.load()
        layers = list(reader.iter_layers())
        empty_count = sum(1 for layer in layers if layer.is_empty())

        if not quiet:
            print_region_info(str(input_path), len(layers), empty_count)

        if not layers:
            if not quiet:
                console.print("\nNo layers found. Nothing to fill.")
            raise typer.Exit(code=0)

        if not quiet:
            actual_workers = workers if workers else os.cpu_count() or 1
            print_step("Filling")
            print_fill_info(fill_pattern.value, line_width, spacing, angle)
            print_processing_info(actual_workers, is_auto=(workers is None))

        actual_output_path = output if output is not None else ResultWriter.get_output_path(input_path)

        processor = LayerProcessor(settings)
        to_fill = len(layers) - empty_count

        try:
            if not quiet:
                with create_progress() as progress:
                    task_id = progress.add_task(f"Filling {to_fill} layers", total=to_fill)

                    def update_progress(completed: int, *_: object) -> None:
                        progress.update(task_id, completed=completed)

                    stats = processor.process(
                        input_path=input_path,
                        output_path=actual_output_path,
                        max_workers=workers,
                        progress_callback=update_progress,
                    )
            else:
                stats = processor.process(
                    input_path=input_path,
                    output_path=actual_output_path,
                    max_workers=workers,
                )
        except ProcessingCancelledError as e:
            if not quiet:
                print_cancellation_notice()
                print_cancellation_summary(processed=e.processed_count, cancelled=e.pending_count)
            raise typer.Exit(code=130) from None  # Standard Unix SIGINT exit code
        except KeyboardInterrupt:
            if not quiet:
                print_cancellation_notice()
                print_cancellation_summary(processed=0, cancelled=to_fill)
            raise typer.Exit(code=130) from None

        if not quiet:
            print_success(
                output_path=str(actual_output_path),
                file_size=_format_file_size(actual_output_path),
                total_time_s=stats.duration_seconds,
                processed=stats.processed_count,
                lines=stats.line_count,
                polygons=stats.polygon_count,
                errors=stats.error_count,
            )
            if verbose and stats.errors:
                print_layer_errors(stats.errors)

    except RegionLoadError as e:
        print_error(f"Could not load region: {e.reason}")
        raise typer.Exit(code=1)
    except RegionWriteError as e:
        print_error(f"Could not save result: {e.reason}")
        raise typer.Exit(code=1)
    except InfillerError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    except typer.Exit:
        # Re-raise typer.Exit to allow clean exits
        raise
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        raise typer.Exit(code=1)


def _format_validation_error(error: ValidationError) -> str:
    """Render pydantic errors as ``field: message`` pairs."""
    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "parameters"
        parts.append(f"{location}: {item['msg']}")
    return "; ".join(parts)


def _format_file_size(path: Path) -> str:
    """Format file size in human-readable form.

    Args:
        path: Path to file

    Returns:
        Human-readable file size (e.g., "428 KB")
    """
    try:
        size_bytes = path.stat().st_size
    except OSError:
        return "unknown"
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.0f} KB"
    else:
        return f"{size_bytes / (1024 * 1024):.1f} MB"


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
