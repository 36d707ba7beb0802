"""OTLP severity number helpers."""

from enum import Enum

_SEVERITY_NAMES: tuple[str, ...] = ("TRACE", "DEBUG", "INFO", "WARN", "ERROR", "FATAL")


class SeverityBand(str, Enum):
    """Coarse severity grouping used for display styling."""

    DEBUG = "debug"  # TRACE and DEBUG ranges, 1-8
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    FATAL = "fatal"
    UNSPECIFIED = "unspecified"


def severity_text(severity_number: int | None) -> str:
    """Map a severity number to its short name, e.g. 9 -> INFO, 14 -> WARN2."""
    if not isinstance(severity_number, int) or not 1 <= severity_number <= 24:
        return "UNSPECIFIED"
    name = _SEVERITY_NAMES[(severity_number - 1) // 4]
    step = (severity_number - 1) % 4 + 1
    return name if step == 1 else f"{name}{step}"


def severity_band(severity_number: int | None) -> SeverityBand:
    if not isinstance(severity_number, int) or severity_number < 1:
        return SeverityBand.UNSPECIFIED
    if severity_number <= 8:
        return SeverityBand.DEBUG
    if severity_number <= 12:
        return SeverityBand.INFO
    if severity_number <= 16:
        return SeverityBand.WARN
    if severity_number <= 20:
        return SeverityBand.ERROR
    return SeverityBand.FATAL
