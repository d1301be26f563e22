"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True, slots=True)
class TelemetryRecord:
    """A single temperature reading parsed from a device submission.

    The reading time is kept as whole Unix seconds plus a nanosecond offset in
    ``[0, 1e9)`` so that every 64-bit submission timestamp is representable,
    including ones far outside the ``datetime`` range.
    """

    device_id: int
    epoch_seconds: int
    nanosecond: int
    temperature: float

    @property
    def timestamp(self) -> datetime:
        """UTC ``datetime`` view; raises ``OverflowError`` outside years 1-9999."""
        return _EPOCH + timedelta(seconds=self.epoch_seconds, microseconds=self.nanosecond // 1000)
