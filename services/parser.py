"""Parsing and validation of colon-delimited device submissions.

A submission has the wire form::

    <device_id>:<unix_timestamp_millis>:'Temperature':<temperature>

``parse_payload`` either returns a fully populated ``TelemetryRecord`` or
raises ``PayloadParseError`` naming which part of the payload was rejected.
"""

from __future__ import annotations

import math
import re
from enum import Enum

from models.records import TelemetryRecord

SEPARATOR = ":"
TEMPERATURE_KEY = "'Temperature'"

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")
_FLOAT_PATTERN = re.compile(
    r"(?:[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf(?:inity)?)|nan)",
    re.IGNORECASE,
)
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_NANOS_PER_SECOND = 1_000_000_000


class ParseFailure(str, Enum):
    """Reasons a submission can be rejected."""

    malformed_structure = "malformed_structure"
    invalid_device_id = "invalid_device_id"
    invalid_timestamp = "invalid_timestamp"
    temperature_key_missing = "temperature_key_missing"
    invalid_temperature = "invalid_temperature"


class PayloadParseError(ValueError):
    """Raised when a raw submission fails validation."""

    def __init__(self, reason: ParseFailure, raw: str) -> None:
        super().__init__(f"{reason.value}: {raw!r}")
        self.reason = reason
        self.raw = raw


def parse_payload(raw: str) -> TelemetryRecord:
    """Parse ``raw`` into a ``TelemetryRecord`` or raise ``PayloadParseError``."""
    parts = raw.split(SEPARATOR)
    if len(parts) != 4:
        raise PayloadParseError(ParseFailure.malformed_structure, raw)
    device_raw, timestamp_raw, key, temperature_raw = parts

    try:
        device_id = _narrow_to_int32(_parse_int64(device_raw))
    except ValueError as exc:
        raise PayloadParseError(ParseFailure.invalid_device_id, raw) from exc

    try:
        epoch_seconds, nanosecond = _split_millis(_parse_int64(timestamp_raw))
    except ValueError as exc:
        raise PayloadParseError(ParseFailure.invalid_timestamp, raw) from exc

    if key != TEMPERATURE_KEY:
        raise PayloadParseError(ParseFailure.temperature_key_missing, raw)

    try:
        temperature = _parse_float(temperature_raw)
    except ValueError as exc:
        raise PayloadParseError(ParseFailure.invalid_temperature, raw) from exc

    return TelemetryRecord(
        device_id=device_id,
        epoch_seconds=epoch_seconds,
        nanosecond=nanosecond,
        temperature=temperature,
    )


def _parse_int64(value: str) -> int:
    if not _INTEGER_PATTERN.fullmatch(value):
        raise ValueError(f"Not a base-10 integer: {value!r}")
    parsed = int(value)
    if not _INT64_MIN <= parsed <= _INT64_MAX:
        raise ValueError(f"Integer out of 64-bit range: {value!r}")
    return parsed


def _narrow_to_int32(value: int) -> int:
    # Two's-complement wrap, out-of-range ids are not rejected.
    return (value + 2**31) % 2**32 - 2**31


def _split_millis(millis: int) -> tuple[int, int]:
    """Split milliseconds into whole seconds and a remainder applied as nanoseconds.

    Division and remainder truncate toward zero, then a negative remainder
    borrows one second. The remainder is interpreted in nanoseconds rather than
    milliseconds, so the reading time is effectively truncated to the second.
    """
    sign = -1 if millis < 0 else 1
    seconds = sign * (abs(millis) // 1000)
    nanosecond = millis - seconds * 1000
    if nanosecond < 0:
        seconds -= 1
        nanosecond += _NANOS_PER_SECOND
    return seconds, nanosecond


def _parse_float(value: str) -> float:
    if not _FLOAT_PATTERN.fullmatch(value):
        raise ValueError(f"Not a base-10 float: {value!r}")
    parsed = float(value)
    if math.isinf(parsed) and "inf" not in value.lower():
        raise ValueError(f"Float out of range: {value!r}")
    return parsed
