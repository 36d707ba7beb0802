"""
otlpview CLI - browse OTLP log exports in the terminal.

Fetches an OTLP logs payload, flattens it and renders a histogram plus a
log table. Every invocation re-runs the whole pipeline.
"""

from datetime import tzinfo
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from otlpview.client import (
    LogsClient,
    LogView,
    build_log_view,
    load_log_view,
    read_export_file,
)
from otlpview.config import settings
from otlpview.exceptions import LogFetchError
from otlpview.logging_config import setup_logging
from otlpview.render import entry_details, histogram_renderable, log_table

app = typer.Typer(
    name="otlpview",
    help="otlpview - OTLP log viewer",
    no_args_is_help=True,
)

console = Console()


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Log level (defaults to LOG_LEVEL or WARNING)"
    ),
) -> None:
    """Inspect OTLP log exports."""
    try:
        setup_logging(level=log_level)
    except ValueError as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(1)


def _timezone() -> Optional[tzinfo]:
    try:
        return settings.timezone
    except ValueError as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        console.print("[yellow]Set DISPLAY_TIMEZONE to an IANA name such as Europe/Berlin.[/yellow]")
        raise typer.Exit(1)


def _load(url: Optional[str], file: Optional[Path], timeout: Optional[float]) -> LogView:
    tz = _timezone()
    try:
        if file is not None:
            return build_log_view(read_export_file(file), tz=tz)
        with console.status("Loading logs..."):
            with LogsClient(url=url, timeout=timeout) as client:
                return load_log_view(client, tz=tz)
    except LogFetchError as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        console.print("[yellow]Failed to load logs. Run the command again to retry.[/yellow]")
        raise typer.Exit(1)


@app.command()
def show(
    url: Optional[str] = typer.Option(None, help="Logs endpoint (defaults to LOGS_API_URL)"),
    file: Optional[Path] = typer.Option(
        None, "--file", "-f", help="Read the OTLP payload from a local file instead"
    ),
    limit: Optional[int] = typer.Option(None, min=1, help="Show at most N records"),
    details: bool = typer.Option(
        False, "--details", help="Print attributes and trace context for each record"
    ),
    timeout: Optional[float] = typer.Option(None, help="Request timeout in seconds"),
) -> None:
    """
    Show the log histogram and the log records table.

    Records are listed newest first.
    """
    view = _load(url, file, timeout)
    tz = _timezone()

    console.print(histogram_renderable(view.buckets))
    console.print()

    if details and view.entries:
        shown = view.entries[:limit] if limit else view.entries
        for entry in shown:
            console.print(entry_details(entry, tz))
            console.print()
    else:
        console.print(log_table(view.entries, tz=tz, limit=limit))


@app.command()
def histogram(
    url: Optional[str] = typer.Option(None, help="Logs endpoint (defaults to LOGS_API_URL)"),
    file: Optional[Path] = typer.Option(
        None, "--file", "-f", help="Read the OTLP payload from a local file instead"
    ),
    timeout: Optional[float] = typer.Option(None, help="Request timeout in seconds"),
) -> None:
    """Show only the log distribution over time."""
    view = _load(url, file, timeout)
    console.print(histogram_renderable(view.buckets))
    console.print(f"Total records: {len(view.entries)}")


if __name__ == "__main__":
    app()
