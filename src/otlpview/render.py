"""
Rich renderables for log entries and histograms.

Pure functions: they build renderables and never print, so the CLI decides
where output goes.
"""

from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Mapping, Sequence

from rich.console import Group, RenderableType
from rich.table import Table
from rich.text import Text

from otlpview.histogram import HistogramBucket
from otlpview.otel import AttributeValue, LogEntry
from otlpview.otel.decoder import parse_time_unix_nano
from otlpview.severity import SeverityBand, severity_band, severity_text

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
BAR_CHAR = "█"

SEVERITY_STYLES: dict[SeverityBand, str] = {
    SeverityBand.DEBUG: "blue",
    SeverityBand.INFO: "green",
    SeverityBand.WARN: "yellow",
    SeverityBand.ERROR: "red",
    SeverityBand.FATAL: "magenta",
    SeverityBand.UNSPECIFIED: "dim",
}


def format_timestamp(time_unix_nano: str | None, tz: tzinfo | None = None) -> str:
    """Render a nanosecond timestamp with millisecond precision, or ``N/A``."""
    time_ns = parse_time_unix_nano(time_unix_nano)
    if not time_ns:
        return "N/A"
    seconds, nanos = divmod(time_ns, 1_000_000_000)
    try:
        stamp = datetime.fromtimestamp(seconds, tz=tz).strftime(TIMESTAMP_FORMAT)
    except (OverflowError, OSError, ValueError):
        return "N/A"
    return f"{stamp}.{nanos // 1_000_000:03d}"


def format_body(body: str | None) -> str:
    return body or "No message"


def format_attribute_value(value: AttributeValue) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def severity_label(entry: LogEntry) -> Text:
    band = severity_band(entry.severity_number)
    return Text(severity_text(entry.severity_number), style=SEVERITY_STYLES[band])


def histogram_renderable(
    buckets: Sequence[HistogramBucket], width: int = 40
) -> RenderableType:
    """Horizontal bar chart, one row per bucket."""
    if not buckets:
        return Text("No data available for histogram", style="dim")

    peak = max(bucket.count for bucket in buckets)
    table = Table(title="Log Distribution Over Time", show_edge=False, box=None)
    table.add_column("Time", style="cyan", no_wrap=True)
    table.add_column("Logs", no_wrap=True)
    table.add_column("Count", justify="right")

    for bucket in buckets:
        length = round(bucket.count / peak * width) if peak else 0
        if bucket.count and not length:
            length = 1
        table.add_row(bucket.label, Text(BAR_CHAR * length, style="blue"), str(bucket.count))
    return table


def log_table(
    entries: Sequence[LogEntry],
    tz: tzinfo | None = None,
    limit: int | None = None,
) -> RenderableType:
    """Severity / Time / Body table, newest first as given."""
    if not entries:
        return Text("No logs found", style="dim")

    shown = entries[:limit] if limit else entries
    title = "Log Records"
    if len(shown) < len(entries):
        title += f" (showing {len(shown)} of {len(entries)})"

    table = Table(title=title)
    table.add_column("Severity", no_wrap=True)
    table.add_column("Time", no_wrap=True)
    table.add_column("Body", overflow="ellipsis")

    for entry in shown:
        table.add_row(
            severity_label(entry),
            format_timestamp(entry.time_unix_nano, tz),
            Text(format_body(entry.body)),
        )
    return table


def _attribute_table(title: str, attributes: Mapping[str, AttributeValue]) -> Table:
    table = Table(title=title, show_header=False, box=None, title_justify="left")
    table.add_column("Key", style="bold")
    table.add_column("Value")
    for key, value in attributes.items():
        table.add_row(Text(key), Text(format_attribute_value(value)))
    return table


def entry_details(entry: LogEntry, tz: tzinfo | None = None) -> RenderableType:
    """Expanded view of a single entry: attribute sections and trace context."""
    parts: list[RenderableType] = [
        Text.assemble(
            severity_label(entry),
            "  ",
            format_timestamp(entry.time_unix_nano, tz),
            "  ",
            format_body(entry.body),
        )
    ]
    sections = (
        ("Log Attributes", entry.attributes),
        ("Resource Attributes", entry.resource_attributes),
        ("Scope Attributes", entry.scope_attributes),
    )
    for title, attributes in sections:
        if attributes:
            parts.append(_attribute_table(title, attributes))

    trace_context = {}
    if entry.trace_id:
        trace_context["Trace ID"] = entry.trace_id
    if entry.span_id:
        trace_context["Span ID"] = entry.span_id
    if trace_context:
        parts.append(_attribute_table("Trace Context", trace_context))

    return Group(*parts)
