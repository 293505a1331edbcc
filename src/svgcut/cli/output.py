"""Rich console output helpers for the CLI.

This module provides user-friendly console output using the Rich library.
"""


from rich.console import Console
from rich.text import Text

from svgcut.utils import ConversionStats

console = Console()

# Unicode symbols for consistent visual language
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_ERR = "✗"  # Error
SYM_DOT = "·"  # Separator/secondary info


def print_header(version: str) -> None:
    """Print application header.

    Args:
        version: Application version string
    """
    console.print(f"\n[bold]svgcut[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    """Print a processing step indicator."""
    console.print(f"\n{SYM_STEP} {message}")


def print_document_info(document_path: str, width: float, height: float) -> None:
    """Print document information.

    Args:
        document_path: Path to the SVG file
        width: Root viewport width in user units
        height: Root viewport height in user units
    """
    # Use Text to safely handle paths with special characters
    line = Text("  ")
    line.append(document_path)
    console.print(line)
    console.print(f"  {width:g} {SYM_DOT} {height:g} user units")


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


def print_stats(stats: ConversionStats) -> None:
    """Print element and path counts of a conversion."""
    error_style = "red" if stats.reference_errors > 0 else "green"
    console.print(
        f"  {stats.shapes_processed} shapes {SYM_DOT} {stats.pattern_fills} pattern fills {SYM_DOT} "
        f"{stats.paths_plotted} paths {SYM_DOT} "
        f"[{error_style}]{stats.reference_errors} reference errors[/{error_style}]"
    )


def print_success(output_path: str, file_size: str, stats: ConversionStats) -> None:
    """Print success message with summary.

    Args:
        output_path: Path to output file
        file_size: Human-readable file size string
        stats: Statistics of the conversion
    """
    time_str = _format_time(stats.duration_seconds)

    console.print(f"\n[bold green]{SYM_OK} Complete[/bold green] in {time_str}")

    line = Text("  ")
    line.append(output_path, style="bold")
    line.append(f" ({file_size})")
    console.print(line)

    print_stats(stats)


def print_reference_errors(errors: list[tuple[str, str]]) -> None:
    """List failed reference loads.

    Args:
        errors: (fragment id, message) pairs
    """
    for fragment_id, message in errors[:20]:
        line = Text(f"  #{fragment_id}: ")
        line.append(message)
        console.print(line)
    if len(errors) > 20:
        console.print(f"  ... +{len(errors) - 20} more")


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        console.print(f"  {details}")
