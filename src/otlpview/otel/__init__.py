"""OTLP decoding and normalization helpers."""

from otlpview.otel.decoder import (
    LogEntry,
    decode_otlp_request,
    normalize_logs,
)
from otlpview.otel.values import (
    AttributeValue,
    extract_any_value,
    extract_string_value,
)

__all__ = [
    "AttributeValue",
    "LogEntry",
    "decode_otlp_request",
    "extract_any_value",
    "extract_string_value",
    "normalize_logs",
]
