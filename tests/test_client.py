"""Tests for the logs HTTP client and the load pipeline."""

import json
from datetime import timezone

import httpx
import pytest

from otlpview.client import LogsClient, build_log_view, load_log_view, read_export_file
from otlpview.exceptions import LogFetchError

URL = "https://logs.example.test/api/logs"


def _client(handler) -> LogsClient:
    return LogsClient(url=URL, timeout=1.0, transport=httpx.MockTransport(handler))


class TestLogsClient:
    """Tests for LogsClient.fetch_export."""

    def test_fetch_json(self, scenario_payload):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=scenario_payload)

        with _client(handler) as client:
            raw = client.fetch_export()

        assert raw == scenario_payload
        assert len(seen) == 1
        assert seen[0].method == "GET"
        assert str(seen[0].url) == URL
        assert seen[0].content == b""

    def test_non_2xx_raises(self):
        with _client(lambda request: httpx.Response(503, text="down")) as client:
            with pytest.raises(LogFetchError) as exc_info:
                client.fetch_export()

        assert exc_info.value.status_code == 503
        assert exc_info.value.url == URL

    def test_network_error_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with _client(handler) as client:
            with pytest.raises(LogFetchError, match="connection refused"):
                client.fetch_export()

    def test_malformed_json_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200, content=b"<html>", headers={"content-type": "application/json"}
            )

        with _client(handler) as client:
            with pytest.raises(LogFetchError, match="Invalid OTLP payload"):
                client.fetch_export()

    def test_defaults_from_settings(self, monkeypatch):
        from otlpview import client as client_module

        monkeypatch.setattr(client_module.settings, "logs_api_url", "http://env.test/logs")
        monkeypatch.setattr(client_module.settings, "request_timeout", 3.0)

        with LogsClient() as client:
            assert client.config.url == "http://env.test/logs"
            assert client.config.timeout == 3.0


class TestPipeline:
    """Tests for fetch -> normalize -> histogram."""

    def test_load_log_view(self, service_payload):
        with _client(lambda request: httpx.Response(200, json=service_payload)) as client:
            view = load_log_view(client, tz=timezone.utc)

        assert len(view.entries) == 4
        assert [e.body for e in view.entries][:2] == ["request failed", "query ok"]
        assert sum(b.count for b in view.buckets) == 4

    def test_zero_records_is_data_not_error(self):
        view = build_log_view({"resourceLogs": []})

        assert view.entries == []
        assert view.buckets == []

    def test_fetch_error_propagates(self):
        with _client(lambda request: httpx.Response(500)) as client:
            with pytest.raises(LogFetchError):
                load_log_view(client)


class TestReadExportFile:
    """Tests for reading payloads from disk."""

    def test_reads_json_file(self, tmp_path, scenario_payload):
        path = tmp_path / "logs.json"
        path.write_text(json.dumps(scenario_payload))

        assert read_export_file(path) == scenario_payload

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(LogFetchError):
            read_export_file(tmp_path / "missing.json")

    def test_bad_protobuf_file_raises(self, tmp_path):
        path = tmp_path / "logs.pb"
        path.write_bytes(b"\xff\xff\xff")

        with pytest.raises(LogFetchError, match="Invalid OTLP payload"):
            read_export_file(path)
