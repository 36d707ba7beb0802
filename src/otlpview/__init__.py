"""
otlpview - flatten OTLP log exports and bucket them over time.

Usage:
    from otlpview import normalize_logs, build_histogram

    entries = normalize_logs(raw_export_request)
    buckets = build_histogram(entries)
"""

from otlpview.client import LogsClient, LogView, load_log_view
from otlpview.exceptions import LogFetchError
from otlpview.histogram import HistogramBucket, build_histogram
from otlpview.otel import LogEntry, decode_otlp_request, normalize_logs

__version__ = "0.1.0"

__all__ = [
    "HistogramBucket",
    "LogEntry",
    "LogFetchError",
    "LogView",
    "LogsClient",
    "build_histogram",
    "decode_otlp_request",
    "load_log_view",
    "normalize_logs",
]
