"""
OTLP AnyValue handling.

Wire values keep the OTLP/JSON oneof-as-optional-fields shape
(``{"stringValue": "..."}``). They are decoded into a small tagged variant
first and projected onto the flattened attribute domain in a second step.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Final, Iterable, Mapping, Union

logger = logging.getLogger(__name__)

AttributeValue = Union[str, int, float, bool, None]


@dataclass(frozen=True)
class StringValue:
    value: str


@dataclass(frozen=True)
class IntValue:
    value: int


@dataclass(frozen=True)
class DoubleValue:
    value: float


@dataclass(frozen=True)
class BoolValue:
    value: bool


class _Unset:
    """No populated variant (or a variant the flattened domain cannot hold)."""

    _instance: "_Unset | None" = None

    def __new__(cls) -> "_Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Final = _Unset()

TypedValue = Union[StringValue, IntValue, DoubleValue, BoolValue, _Unset]


def _parse_int(raw: Any) -> int | None:
    # OTLP/JSON encodes int64 as a decimal string
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str):
        try:
            return int(raw)
        except ValueError:
            return None
    if isinstance(raw, float) and raw.is_integer():
        return int(raw)
    return None


def decode_any_value(wire: Mapping[str, Any] | None) -> TypedValue:
    """Decode a wire AnyValue into a tagged variant.

    The first populated field wins, in the order string, int, double, bool.
    Anything else (empty object, arrays, kvlists, bytes) decodes to UNSET.
    """
    if not isinstance(wire, Mapping):
        return UNSET

    string_value = wire.get("stringValue")
    if string_value is not None:
        return StringValue(str(string_value))

    int_value = wire.get("intValue")
    if int_value is not None:
        parsed = _parse_int(int_value)
        if parsed is None:
            logger.debug("Ignoring unparseable intValue %r", int_value)
            return UNSET
        return IntValue(parsed)

    double_value = wire.get("doubleValue")
    if double_value is not None:
        try:
            return DoubleValue(float(double_value))
        except (TypeError, ValueError):
            logger.debug("Ignoring unparseable doubleValue %r", double_value)
            return UNSET

    bool_value = wire.get("boolValue")
    if bool_value is not None:
        return BoolValue(bool(bool_value))

    return UNSET


def to_attribute_value(value: TypedValue) -> AttributeValue:
    """Project a tagged variant onto the flattened attribute domain."""
    if isinstance(value, (StringValue, IntValue, DoubleValue, BoolValue)):
        return value.value
    return None


def extract_any_value(wire: Mapping[str, Any] | None) -> AttributeValue:
    return to_attribute_value(decode_any_value(wire))


def extract_string_value(wire: Mapping[str, Any] | None) -> str:
    """Return the string variant of a log body, or ``""`` for anything else."""
    value = decode_any_value(wire)
    if isinstance(value, StringValue):
        return value.value
    return ""


def attributes_to_map(
    attributes: Iterable[Mapping[str, Any]] | None,
) -> dict[str, AttributeValue]:
    """Build an attribute map from a sequence of ``{key, value}`` pairs.

    Pairs without a key are skipped; duplicate keys keep the last value.
    """
    result: dict[str, AttributeValue] = {}
    if not isinstance(attributes, (list, tuple)):
        return result
    for kv in attributes:
        if not isinstance(kv, Mapping):
            continue
        key = kv.get("key")
        if not key:
            continue
        result[str(key)] = extract_any_value(kv.get("value"))
    return result


def freeze(attributes: dict[str, AttributeValue]) -> Mapping[str, AttributeValue]:
    """Wrap a finished attribute map in a read-only view."""
    return MappingProxyType(attributes)
