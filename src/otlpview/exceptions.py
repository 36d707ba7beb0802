"""Custom exceptions for otlpview."""


class LogFetchError(Exception):
    """Raised when the OTLP logs payload cannot be fetched or decoded."""

    def __init__(self, url: str, reason: str, status_code: int | None = None):
        self.url = url
        self.reason = reason
        self.status_code = status_code
        message = f"Failed to load logs from {url}: {reason}"
        if status_code is not None:
            message += f" (HTTP {status_code})"
        super().__init__(message)
