"""Command Line Interface for the Dialysis Log Converter.

This module provides a CLI using Typer for decoding dialysis machine logs,
previewing them as a table and writing them out as CSV.
"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from dialysis_log import __version__
from dialysis_log.adapters.presenters import TablePresenter
from dialysis_log.adapters.sources import get_source
from dialysis_log.domain.enums import CSVQuoting
from dialysis_log.domain.ports import ConversionError, Result
from dialysis_log.domain.session_record import ConversionSession
from dialysis_log.infrastructure.logging_config import setup_logging
from dialysis_log.infrastructure.settings import settings
from dialysis_log.main import create_decoder, export_session, failure_message, load_session

# Initialize Typer app and Rich console
app = typer.Typer(
    name="dialysis-log",
    help="Convert dialysis machine session logs to CSV",
    add_completion=False
)
console = Console()
err_console = Console(stderr=True)


def _load(input_file: Path, workers: Optional[int] = None) -> ConversionSession:
    """Decode a log file or exit with a single error message."""
    config = settings.converter
    if workers is not None:
        config = config.model_copy(update={"decode_workers": workers})

    try:
        source = get_source(input_file, max_file_size=config.max_file_size)
    except ConversionError as e:
        result = Result.failure_result(e)
    else:
        result = load_session(source, create_decoder(config))

    if result.is_failure():
        err_console.print(f"[red]✗[/red] {failure_message(result)}")
        raise typer.Exit(code=1)
    return result.value


@app.command()
def convert(
    input_file: Path = typer.Argument(..., help="Session log file", exists=True, dir_okay=False),
    output_dir: Optional[Path] = typer.Option(None, "--output-dir", "-o", help="Directory for the CSV file", file_okay=False),
    quoting: Optional[CSVQuoting] = typer.Option(None, "--quoting", "-q", help="CSV field quoting mode"),
    show: bool = typer.Option(False, "--show/--no-show", help="Print the decoded table"),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", help="Rows to print with --show"),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", min=1, help="Decoder threads"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Decode a session log and write it as <name>_converted.csv.

    Examples:
        dialysis-log convert logs/DIAL0001.BIN
        dialysis-log convert logs/DIAL0001.BIN -o exports/ --show
        dialysis-log convert logs/DIAL0001.BIN --quoting minimal
    """
    if verbose:
        setup_logging(use_json=settings.json_logs, log_level="DEBUG")
        err_console.print("[dim]Verbose logging enabled[/dim]")

    session = _load(input_file, workers)

    if show:
        TablePresenter(console).show(session, limit=limit)

    destination = output_dir or settings.converter.output_dir or input_file.parent
    if output_dir is not None:
        output_dir.mkdir(parents=True, exist_ok=True)

    export_result = export_session(session, destination, quoting=quoting)
    if export_result.is_failure():
        err_console.print(f"[red]✗[/red] Failed to write CSV: {export_result.error}")
        raise typer.Exit(code=1)

    console.print(
        f"[green]✓[/green] {session.record_count:,} records written to {export_result.value}"
    )
    if session.trailing_bytes:
        console.print(f"[yellow]⚠[/yellow] Ignored {session.trailing_bytes} trailing bytes")


@app.command()
def show(
    input_file: Path = typer.Argument(..., help="Session log file", exists=True, dir_okay=False),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", help="Maximum rows to print"),
) -> None:
    """Print a session log as a table without writing anything."""
    session = _load(input_file)
    TablePresenter(console).show(session, limit=limit)


@app.command()
def info() -> None:
    """Display configuration."""
    console.print("[bold blue]Configuration[/bold blue]\n")

    config = settings.converter
    info_table = Table(show_header=False, box=None, padding=(0, 2))
    info_table.add_row("Application:", settings.app_name)
    info_table.add_row("Version:", settings.app_version)
    info_table.add_row("Max File Size:", f"{config.max_file_size / (1024 * 1024):.0f} MB")
    info_table.add_row("Decoder Workers:", str(config.decode_workers))
    info_table.add_row("Parallel Threshold:", f"{config.parallel_threshold:,} records")
    info_table.add_row("CSV Quoting:", config.csv_quoting.value)
    info_table.add_row("Output Directory:", config.output_dir or "(beside input)")
    info_table.add_row("Log Level:", settings.log_level)

    console.print(info_table)


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Bind port"),
) -> None:
    """Run the web converter."""
    import uvicorn

    uvicorn.run(
        "dialysis_log.web.api.main:app",
        host=host or settings.host,
        port=port or settings.port,
        log_level=settings.log_level.lower(),
    )


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version information"),
) -> None:
    """Dialysis Log Converter."""
    if version:
        console.print(f"Dialysis Log Converter v{__version__}")
        raise typer.Exit()
    setup_logging(use_json=settings.json_logs, log_level=settings.log_level)
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


if __name__ == "__main__":
    app()
