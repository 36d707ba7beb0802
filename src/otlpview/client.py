"""
HTTP client for the OTLP logs endpoint.

Fetches a single ExportLogsServiceRequest payload and runs it through the
normalize -> histogram pipeline. Retrying is left to the caller, which
re-runs the whole pipeline.
"""

import logging
from dataclasses import dataclass, field
from datetime import tzinfo
from pathlib import Path
from typing import Any, Optional

import httpx

from otlpview.config import settings
from otlpview.exceptions import LogFetchError
from otlpview.histogram import HistogramBucket, build_histogram
from otlpview.otel import LogEntry, decode_otlp_request, normalize_logs

logger = logging.getLogger(__name__)

_PROTOBUF_SUFFIXES = (".pb", ".bin", ".protobuf")


@dataclass
class ClientConfig:
    """Configuration for the logs client."""

    url: str
    timeout: float = 10.0


@dataclass
class LogView:
    """Everything the presentation layer needs from one load."""

    entries: list[LogEntry] = field(default_factory=list)
    buckets: list[HistogramBucket] = field(default_factory=list)


class LogsClient:
    """
    Synchronous HTTP client for an OTLP logs endpoint.

    Usage:
        with LogsClient() as client:
            raw = client.fetch_export()
    """

    def __init__(
        self,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize the logs client.

        Args:
            url: Logs endpoint, defaults to ``settings.logs_api_url``
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.config = ClientConfig(
            url=url or settings.logs_api_url,
            timeout=timeout if timeout is not None else settings.request_timeout,
        )
        self._client = httpx.Client(
            timeout=self.config.timeout,
            headers={"Accept": "application/json, application/x-protobuf"},
            transport=transport,
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "LogsClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def fetch_export(self) -> dict[str, Any]:
        """
        GET the endpoint and decode the OTLP payload.

        Returns:
            Raw ExportLogsServiceRequest mapping

        Raises:
            LogFetchError: On network errors, non-2xx responses or
                undecodable bodies
        """
        url = self.config.url
        logger.info("Fetching OTLP logs from %s", url)

        try:
            response = self._client.get(url)
        except httpx.HTTPError as exc:
            logger.error("Request to %s failed: %s", url, exc)
            raise LogFetchError(url, str(exc) or type(exc).__name__) from exc

        if not response.is_success:
            logger.error("Logs endpoint returned HTTP %d", response.status_code)
            raise LogFetchError(
                url, "unexpected response status", status_code=response.status_code
            )

        try:
            return decode_otlp_request(
                response.content,
                content_type=response.headers.get("content-type"),
            )
        except ValueError as exc:
            raise LogFetchError(url, str(exc), status_code=response.status_code) from exc


def read_export_file(path: Path) -> dict[str, Any]:
    """
    Read an OTLP payload from disk through the same decode path.

    Files ending in ``.pb``, ``.bin`` or ``.protobuf`` are parsed as
    protobuf, everything else as JSON.

    Raises:
        LogFetchError: If the file cannot be read or decoded
    """
    content_type = (
        "application/x-protobuf"
        if path.suffix.lower() in _PROTOBUF_SUFFIXES
        else "application/json"
    )
    try:
        payload = path.read_bytes()
        return decode_otlp_request(payload, content_type=content_type)
    except (OSError, ValueError) as exc:
        raise LogFetchError(str(path), str(exc)) from exc


def build_log_view(raw: dict[str, Any], tz: Optional[tzinfo] = None) -> LogView:
    """Normalize a raw payload and derive its histogram."""
    entries = normalize_logs(raw)
    buckets = build_histogram(entries, tz=tz)
    logger.info(
        "Loaded %d log records into %d histogram buckets", len(entries), len(buckets)
    )
    return LogView(entries=entries, buckets=buckets)


def load_log_view(client: LogsClient, tz: Optional[tzinfo] = None) -> LogView:
    """
    Run fetch -> normalize -> histogram from scratch.

    Raises:
        LogFetchError: If the payload cannot be fetched
    """
    return build_log_view(client.fetch_export(), tz=tz)
