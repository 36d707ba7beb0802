"""
Pytest configuration and fixtures for otlpview tests.

Provides raw OTLP payload builders and log entry factories shared by the
decoder, histogram, client and CLI tests.
"""

from types import MappingProxyType
from typing import Any

import pytest

from otlpview.otel.decoder import LogEntry

# 2023-11-14 22:13:20 UTC
BASE_TIME_NS = 1_700_000_000_000_000_000


def string_attr(key: str, value: str) -> dict[str, Any]:
    return {"key": key, "value": {"stringValue": value}}


def log_record(time_unix_nano: Any, body: str | None = None, **extra: Any) -> dict[str, Any]:
    record: dict[str, Any] = {"timeUnixNano": time_unix_nano}
    if body is not None:
        record["body"] = {"stringValue": body}
    record.update(extra)
    return record


def make_entry(time_unix_nano: str = "", **overrides: Any) -> LogEntry:
    """Build a LogEntry directly, bypassing the normalizer."""
    fields: dict[str, Any] = {
        "time_unix_nano": time_unix_nano,
        "severity_number": 9,
        "severity_text": "INFO",
        "body": "",
        "attributes": MappingProxyType({}),
        "resource_attributes": MappingProxyType({}),
        "scope_attributes": MappingProxyType({}),
        "dropped_attributes_count": 0,
        "trace_id": None,
        "span_id": None,
        "flags": 0,
    }
    fields.update(overrides)
    return LogEntry(**fields)


@pytest.fixture
def scenario_payload() -> dict[str, Any]:
    """One resource, one scope (svc 1.0), two string-bodied records."""
    return {
        "resourceLogs": [
            {
                "resource": {"attributes": []},
                "scopeLogs": [
                    {
                        "scope": {"name": "svc", "version": "1.0", "attributes": []},
                        "logRecords": [
                            log_record("1000000000", "hello"),
                            log_record("2000000000", "world"),
                        ],
                    }
                ],
            }
        ]
    }


@pytest.fixture
def service_payload() -> dict[str, Any]:
    """A realistic payload with two resources and several scopes."""
    return {
        "resourceLogs": [
            {
                "resource": {
                    "attributes": [
                        string_attr("service.name", "checkout"),
                        {"key": "host.cpu", "value": {"intValue": "8"}},
                    ]
                },
                "scopeLogs": [
                    {
                        "scope": {
                            "name": "checkout.http",
                            "version": "2.3.1",
                            "attributes": [string_attr("scope.kind", "http")],
                        },
                        "logRecords": [
                            log_record(
                                str(BASE_TIME_NS + 1_000_000_000),
                                "request started",
                                severityNumber=9,
                                severityText="INFO",
                                attributes=[
                                    string_attr("http.method", "GET"),
                                    {"key": "http.status", "value": {"intValue": 200}},
                                ],
                                traceId="5b8efff798038103d269b633813fc60c",
                                spanId="eee19b7ec3c1b174",
                                flags=1,
                                droppedAttributesCount=0,
                            ),
                            log_record(
                                str(BASE_TIME_NS + 3_000_000_000),
                                "request failed",
                                severityNumber=17,
                                severityText="ERROR",
                            ),
                        ],
                    },
                    {
                        "scope": {"name": "checkout.db"},
                        "logRecords": [
                            log_record(
                                str(BASE_TIME_NS + 2_000_000_000),
                                "query ok",
                                severityNumber=5,
                            ),
                        ],
                    },
                ],
            },
            {
                "scopeLogs": [
                    {
                        "logRecords": [
                            {
                                "timeUnixNano": str(BASE_TIME_NS),
                                "body": {"intValue": "42"},
                                "severityNumber": 13,
                            },
                        ]
                    }
                ]
            },
        ]
    }
