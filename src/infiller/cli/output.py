"""Rich console output helpers for the CLI.

This module provides user-friendly console output using Rich library
with progress bars and formatted messages.
"""


from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.text import Text

console = Console()

# Unicode symbols for consistent visual language
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_ERR = "✗"  # Error
SYM_DOT = "·"  # Separator/secondary info


def create_progress() -> Progress:
    """Create a rich progress bar for layer processing.

    Returns:
        Configured Progress instance with bar and time elapsed.
    """
    return Progress(
        TextColumn("  "),
        BarColumn(bar_width=40, complete_style="green", finished_style="green"),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=False,
    )


def print_header(version: str) -> None:
    """Print application header.

    Args:
        version: Application version string
    """
    console.print(f"\n[bold]Infiller[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    """Print a processing step indicator.

    Args:
        message: Step description message
    """
    console.print(f"\n{SYM_STEP} {message}")


def print_region_info(region_path: str, layer_count: int, empty_count: int) -> None:
    """Print region file information.

    Args:
        region_path: Path to the region file
        layer_count: Total number of layers in the file
        empty_count: Layers without a fillable outline
    """
    # Use Text to safely handle paths with special characters
    line = Text("  ")
    line.append(region_path)
    console.print(line)
    console.print(f"  {layer_count:,} layers {SYM_DOT} {empty_count:,} empty")


def print_fill_info(pattern: str, line_width: int, spacing: int, angle: float) -> None:
    """Print the fill parameters in use."""
    console.print(
        f"  {pattern} {SYM_DOT} width {line_width} {SYM_DOT} spacing {spacing} "
        f"{SYM_DOT} {angle:g}°"
    )


def _format_time(seconds: float) -> str:
    """Format seconds into human-readable time string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    else:
        mins = int(seconds // 60)
        secs = seconds % 60
        return f"{mins}m {secs:.1f}s"


def print_processing_info(workers: int, is_auto: bool = False) -> None:
    """Print processing configuration.

    Args:
        workers: Number of parallel workers
        is_auto: Whether the count was auto-detected
    """
    auto_suffix = " (auto)" if is_auto else ""
    console.print(f"  {workers} workers{auto_suffix} {SYM_DOT} Ctrl+C to cancel")


def print_success(
    output_path: str,
    file_size: str,
    total_time_s: float,
    processed: int,
    lines: int,
    polygons: int,
    errors: int,
) -> None:
    """Print success message with summary.

    Args:
        output_path: Path to output file
        file_size: Human-readable file size string
        total_time_s: Total processing time in seconds
        processed: Number of layers filled
        lines: Total number of fill polylines
        polygons: Total number of fill polygons
        errors: Number of layers that failed
    """
    time_str = _format_time(total_time_s)

    console.print(f"\n[bold green]{SYM_OK} Complete[/bold green] in {time_str}")

    line = Text("  ")
    line.append(output_path, style="bold")
    line.append(f" ({file_size})")
    console.print(line)

    error_style = "red" if errors > 0 else "green"
    console.print(
        f"  {processed} layers {SYM_DOT} {lines} lines {SYM_DOT} {polygons} polygons {SYM_DOT} "
        f"[{error_style}]{errors} errors[/{error_style}]"
    )


def print_layer_errors(errors: list[tuple[int, str]], limit: int = 10) -> None:
    """Print the first few per-layer errors.

    Args:
        errors: (layer index, message) pairs
        limit: Maximum number of errors listed
    """
    for layer_index, message in errors[:limit]:
        console.print(f"  [red]{SYM_ERR}[/red] layer {layer_index}: {message}")
    if len(errors) > limit:
        console.print(f"  {SYM_DOT}{SYM_DOT}{SYM_DOT} (+{len(errors) - limit} more)")


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        console.print(f"  {details}")


def print_cancellation_notice() -> None:
    """Print cancellation acknowledgment."""
    console.print(f"\n{SYM_DOT} Cancelling... waiting for in-progress layers")


def print_cancellation_summary(processed: int, cancelled: int) -> None:
    """Print cancellation summary.

    Args:
        processed: Number of layers filled before cancellation
        cancelled: Number of pending tasks that were cancelled
    """
    console.print(f"\n{SYM_DOT} [bold]Cancelled[/bold]")
    console.print(f"  {processed} layers completed {SYM_DOT} {cancelled} tasks cancelled")
    console.print("  No output file created")
