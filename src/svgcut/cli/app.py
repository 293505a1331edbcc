"""CLI application entry point for svgcut.

This module provides the main CLI interface using Typer.
"""

from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError

from svgcut import __version__
from svgcut.cli.output import (
    SYM_OK,
    console,
    print_document_info,
    print_error,
    print_header,
    print_reference_errors,
    print_stats,
    print_step,
    print_success,
)
from svgcut.config import GeometryConfig, LoggingConfig, OutputConfig, SvgCutSettings
from svgcut.converter import SvgConverter
from svgcut.core import RecordingExporter
from svgcut.exceptions import DocumentError, ExportWriteError, SvgCutError
from svgcut.io import DocumentTraversal, SvgDocument, get_output_path
from svgcut.utils import configure_logging

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

# Create the Typer app
app = typer.Typer(
    name="svgcut",
    help="Convert SVG drawings to cut paths for plotters and laser cutters.",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]svgcut[/bold blue] v{__version__}")
        raise typer.Exit()


@app.command()
def convert(
    input_file: Annotated[
        Path,
        typer.Argument(
            help="Path to input SVG file",
            show_default=False,
        ),
    ],
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output path (default: {name}-cut.svg)",
        ),
    ] = None,
    tolerance: Annotated[
        float,
        typer.Option(
            "--tolerance",
            "-t",
            help="Curve flattening tolerance for pattern fills, in user units",
            min=0.001,
            max=10.0,
        ),
    ] = 0.05,
    stroke_width: Annotated[
        float,
        typer.Option(
            "--stroke-width",
            "-w",
            help="Stroke width of the written cut paths",
            min=0.001,
        ),
    ] = 0.5,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            help="Convert and report what would be plotted without writing a file",
        ),
    ] = False,
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
    """Convert an SVG drawing to cut paths.

    Every shape becomes an unfilled stroke in document coordinates. Shapes
    filled with a pattern also get the pattern's strokes, tiled and clipped
    to the shape.

    Example:
        svgcut drawing.svg

    This will create drawing-cut.svg next to the input.
    """
    # Validate mutually exclusive options
    if verbose and quiet:
        print_error("Cannot use --verbose and --quiet together")
        raise typer.Exit(code=1)

    if log_level.upper() not in LOG_LEVELS:
        print_error(
            f"Invalid log level: {log_level}",
            details=f"Valid values: {', '.join(LOG_LEVELS)}",
        )
        raise typer.Exit(code=1)

    # Validate input file exists
    if not input_file.exists():
        print_error(
            f"Input file not found: {input_file}",
            details=f"The file '{input_file}' does not exist or is not accessible.",
        )
        raise typer.Exit(code=1)

    if not input_file.is_file():
        print_error(
            f"Input path is not a file: {input_file}",
            details="Please provide a path to an SVG file.",
        )
        raise typer.Exit(code=1)

    try:
        settings = SvgCutSettings(
            geometry=GeometryConfig(flatten_tolerance=tolerance),
            output=OutputConfig(stroke_width=stroke_width),
            logging=LoggingConfig(
                log_file=log_file,
                log_level="INFO" if verbose else log_level.upper(),
            ),
        )
    except ValidationError as e:
        print_error("Invalid settings", details=str(e))
        raise typer.Exit(code=1)

    configure_logging(
        log_file=settings.logging.log_file,
        console_level=settings.logging.log_level,
        file_level=settings.logging.file_log_level,
        quiet=quiet,
    )

    if not quiet:
        print_header(__version__)

    try:
        if not quiet:
            print_step("Loading document")
        document = SvgDocument.from_file(input_file)
        converter = SvgConverter(settings)

        if not quiet:
            viewport = DocumentTraversal(document, settings).root_viewport()
            print_document_info(str(input_file), viewport.width, viewport.height)

        if dry_run:
            _handle_dry_run(converter, document, quiet, verbose)
            raise typer.Exit(code=0)

        output_path = output if output is not None else get_output_path(input_file)

        if not quiet:
            print_step("Converting")
        stats = converter.convert_document(document, output_path)

        if not quiet:
            print_success(str(output_path), _format_file_size(output_path), stats)
            if verbose and stats.errors:
                print_reference_errors(stats.errors)

    except DocumentError as e:
        print_error(f"Could not load document: {e}")
        raise typer.Exit(code=1)
    except ExportWriteError as e:
        print_error(f"Could not write output: {e.reason}")
        raise typer.Exit(code=1)
    except SvgCutError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    except typer.Exit:
        # Re-raise typer.Exit to allow clean exits
        raise
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        raise typer.Exit(code=1)


def _handle_dry_run(
    converter: SvgConverter, document: SvgDocument, quiet: bool, verbose: bool
) -> None:
    """Handle --dry-run mode.

    Args:
        converter: Configured converter
        document: The loaded document
        quiet: Suppress output
        verbose: Show verbose output
    """
    if not quiet:
        print_step("Converting (dry run)")

    exporter = RecordingExporter()
    stats = converter.convert(document, exporter)

    if not quiet:
        console.print("\n[bold]Analysis[/bold]\n")
        print_stats(stats)
        dashed = sum(1 for record in exporter if record.dasharray)
        console.print(f"  Dashed paths          {dashed}")

        if verbose and stats.errors:
            console.print("\n[bold]Reference errors[/bold]")
            print_reference_errors(stats.errors)

        console.print(f"\n[bold green]{SYM_OK} Dry run complete[/bold green] - no file written")


def _format_file_size(path: Path) -> str:
    """Format file size in human-readable form.

    Args:
        path: Path to file

    Returns:
        Human-readable file size (e.g., "12 KB")
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
