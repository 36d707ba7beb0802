"""
OTLP log decoding and normalization helpers.

Transforms OTLP ExportLogsServiceRequest payloads into a flat list of
log entries, each carrying the attributes of its resource and
instrumentation scope.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from google.protobuf.message import DecodeError
from opentelemetry.proto.collector.logs.v1.logs_service_pb2 import (
    ExportLogsServiceRequest,
)
from opentelemetry.proto.common.v1.common_pb2 import AnyValue, KeyValue

from otlpview.otel.values import (
    AttributeValue,
    attributes_to_map,
    extract_string_value,
    freeze,
)

logger = logging.getLogger(__name__)

_JSON_CONTENT_TYPES: tuple[str, ...] = ("", "application/json")
_PROTOBUF_CONTENT_TYPES: tuple[str, ...] = (
    "application/x-protobuf",
    "application/protobuf",
)


@dataclass(frozen=True)
class LogEntry:
    """One OTLP log record flattened together with its inherited context.

    ``resource_attributes`` and ``scope_attributes`` are read-only maps
    shared by every entry from the same resource / scope.
    """

    time_unix_nano: str
    severity_number: int | None
    severity_text: str | None
    body: str
    attributes: Mapping[str, AttributeValue]
    resource_attributes: Mapping[str, AttributeValue]
    scope_attributes: Mapping[str, AttributeValue]
    dropped_attributes_count: int | None
    trace_id: str | None
    span_id: str | None
    flags: int | None

    @property
    def time_ns(self) -> int:
        """Timestamp as an integer; 0 when absent or unparseable."""
        return parse_time_unix_nano(self.time_unix_nano)


def parse_time_unix_nano(value: str | None) -> int:
    if not value:
        return 0
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return int(float(value))
    except (ValueError, OverflowError):
        return 0


def decode_otlp_request(
    payload: bytes,
    *,
    content_type: str | None,
) -> dict[str, Any]:
    """Decode an OTLP HTTP payload into the raw ExportLogsServiceRequest shape.

    JSON bodies are returned as deserialized. Protobuf bodies are converted
    to the same camelCase mapping, with trace and span ids left as bytes.

    Args:
        payload: Raw response or request body bytes.
        content_type: HTTP content-type header (may include charset).

    Returns:
        Raw ExportLogsServiceRequest mapping.

    Raises:
        ValueError: If payload cannot be parsed.
    """
    if not payload:
        raise ValueError("Empty OTLP payload")

    normalized = (content_type or "").split(";")[0].strip().lower()

    if normalized in _PROTOBUF_CONTENT_TYPES:
        request = ExportLogsServiceRequest()
        try:
            request.ParseFromString(payload)
        except DecodeError as exc:
            logger.warning("Failed to parse OTLP protobuf payload: %s", exc)
            raise ValueError("Invalid OTLP payload") from exc
        return request_to_raw(request)

    if normalized not in _JSON_CONTENT_TYPES and not normalized.endswith("+json"):
        logger.warning("Unexpected OTLP content type %r, trying JSON", normalized)

    try:
        raw = json.loads(payload)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        logger.warning("Failed to parse OTLP JSON payload: %s", exc)
        raise ValueError("Invalid OTLP payload") from exc

    if not isinstance(raw, dict):
        raise ValueError("Invalid OTLP payload: expected a JSON object")
    return raw


def request_to_raw(request: ExportLogsServiceRequest) -> dict[str, Any]:
    """Convert a protobuf ExportLogsServiceRequest to the raw mapping shape."""
    resource_logs_out: list[dict[str, Any]] = []

    for resource_logs in request.resource_logs:
        resource_out: dict[str, Any] = {}
        if resource_logs.HasField("resource"):
            resource_out["resource"] = {
                "attributes": _key_values_to_raw(resource_logs.resource.attributes)
            }

        scope_logs_out: list[dict[str, Any]] = []
        for scope_logs in resource_logs.scope_logs:
            scope_out: dict[str, Any] = {}
            if scope_logs.HasField("scope"):
                scope_out["scope"] = {
                    "name": scope_logs.scope.name,
                    "version": scope_logs.scope.version,
                    "attributes": _key_values_to_raw(scope_logs.scope.attributes),
                }
            scope_out["logRecords"] = [
                _log_record_to_raw(record) for record in scope_logs.log_records
            ]
            scope_logs_out.append(scope_out)

        resource_out["scopeLogs"] = scope_logs_out
        resource_logs_out.append(resource_out)

    return {"resourceLogs": resource_logs_out}


def _log_record_to_raw(record: Any) -> dict[str, Any]:
    raw: dict[str, Any] = {
        "timeUnixNano": str(record.time_unix_nano),
        "severityNumber": int(record.severity_number),
        "severityText": record.severity_text,
        "attributes": _key_values_to_raw(record.attributes),
        "droppedAttributesCount": record.dropped_attributes_count,
        "flags": record.flags,
    }
    if record.HasField("body"):
        raw["body"] = _any_value_to_raw(record.body)
    if record.trace_id:
        raw["traceId"] = bytes(record.trace_id)
    if record.span_id:
        raw["spanId"] = bytes(record.span_id)
    return raw


def _key_values_to_raw(attributes: Sequence[KeyValue]) -> list[dict[str, Any]]:
    return [{"key": kv.key, "value": _any_value_to_raw(kv.value)} for kv in attributes]


def _any_value_to_raw(value: AnyValue) -> dict[str, Any]:
    kind = value.WhichOneof("value")
    if kind == "string_value":
        return {"stringValue": value.string_value}
    if kind == "int_value":
        return {"intValue": str(value.int_value)}
    if kind == "double_value":
        return {"doubleValue": value.double_value}
    if kind == "bool_value":
        return {"boolValue": value.bool_value}
    # Composite values collapse to null in the flattened domain
    return {}


def normalize_logs(raw: Mapping[str, Any] | None) -> list[LogEntry]:
    """Flatten a raw OTLP export request into log entries, newest first.

    Missing or empty containers never raise: they produce empty attribute
    maps or no entries for that branch.

    Args:
        raw: Deserialized ExportLogsServiceRequest.

    Returns:
        List of log entries sorted by timestamp, descending.
    """
    entries: list[LogEntry] = []
    if not isinstance(raw, Mapping):
        return entries

    for resource_logs in _as_list(raw.get("resourceLogs")):
        resource = _as_mapping(resource_logs.get("resource"))
        resource_attrs = freeze(attributes_to_map(resource.get("attributes")))

        for scope_logs in _as_list(resource_logs.get("scopeLogs")):
            scope = _as_mapping(scope_logs.get("scope"))
            scope_attrs = freeze(_scope_attributes(scope))

            for record in _as_list(scope_logs.get("logRecords")):
                entries.append(_to_entry(record, resource_attrs, scope_attrs))

    # list.sort is stable with reverse=True; absent times sort last as 0
    entries.sort(key=lambda entry: entry.time_ns, reverse=True)
    logger.debug("Normalized %d OTLP log records", len(entries))
    return entries


def _to_entry(
    record: Mapping[str, Any],
    resource_attrs: Mapping[str, AttributeValue],
    scope_attrs: Mapping[str, AttributeValue],
) -> LogEntry:
    return LogEntry(
        time_unix_nano=_time_to_string(record.get("timeUnixNano")),
        severity_number=record.get("severityNumber"),
        severity_text=record.get("severityText"),
        body=extract_string_value(record.get("body")),
        attributes=freeze(attributes_to_map(record.get("attributes"))),
        resource_attributes=resource_attrs,
        scope_attributes=scope_attrs,
        dropped_attributes_count=record.get("droppedAttributesCount"),
        trace_id=_id_to_hex(record.get("traceId")),
        span_id=_id_to_hex(record.get("spanId")),
        flags=record.get("flags"),
    )


def _scope_attributes(scope: Mapping[str, Any]) -> dict[str, AttributeValue]:
    scope_attrs = attributes_to_map(scope.get("attributes"))
    # Scope metadata is added last and wins over real attributes
    if scope.get("name"):
        scope_attrs["scope.name"] = scope["name"]
    if scope.get("version"):
        scope_attrs["scope.version"] = scope["version"]
    return scope_attrs


def _time_to_string(value: Any) -> str:
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else str(value)
    return str(value)


def _id_to_hex(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).hex()
    if isinstance(value, (list, tuple)):
        try:
            return bytes(value).hex()
        except (TypeError, ValueError):
            logger.debug("Ignoring malformed id byte sequence %r", value)
            return None
    return None


def _as_list(value: Any) -> list[Mapping[str, Any]]:
    if not isinstance(value, (list, tuple)):
        return []
    # A non-object item still counts as one (empty) element
    return [_as_mapping(item) for item in value]


def _as_mapping(value: Any) -> Mapping[str, Any]:
    if isinstance(value, Mapping):
        return value
    return {}
