"""Overtemperature rule applied to parsed readings."""

from __future__ import annotations

from app.schemas import SubmissionResponse
from models.records import TelemetryRecord

DEFAULT_THRESHOLD = 90.0
_SECONDS_PER_DAY = 86_400
# Days from 0000-03-01 to 1970-01-01 in the proleptic Gregorian calendar.
_EPOCH_SHIFT_DAYS = 719_468
_DAYS_PER_ERA = 146_097


def evaluate(record: TelemetryRecord, threshold: float = DEFAULT_THRESHOLD) -> SubmissionResponse:
    """Flag readings at or above ``threshold``; no unit conversion is applied.

    Zero-valued optional fields are left unset so they are omitted from the
    response, as for readings below the threshold.
    """
    if record.temperature >= threshold:
        return SubmissionResponse(
            overtemp=True,
            device_id=record.device_id or None,
            formatted_time=format_time(record.epoch_seconds),
        )
    return SubmissionResponse(overtemp=False)


def format_time(epoch_seconds: int) -> str:
    """Render Unix seconds as ``YYYY-MM-DD HH:MM:SS`` in UTC.

    Works for any integer, not just the ``datetime`` range; years are padded
    to four digits and negative years carry a leading ``-``.
    """
    days, second_of_day = divmod(epoch_seconds, _SECONDS_PER_DAY)
    year, month, day = _civil_from_days(days)
    hour, remainder = divmod(second_of_day, 3600)
    minute, second = divmod(remainder, 60)
    sign = "-" if year < 0 else ""
    return f"{sign}{abs(year):04d}-{month:02d}-{day:02d} {hour:02d}:{minute:02d}:{second:02d}"


def _civil_from_days(days: int) -> tuple[int, int, int]:
    # Eras are 400-year cycles starting on March 1st, so leap days fall at the end of a year.
    shifted = days + _EPOCH_SHIFT_DAYS
    era, day_of_era = divmod(shifted, _DAYS_PER_ERA)
    year_of_era = (
        day_of_era - day_of_era // 1460 + day_of_era // 36524 - day_of_era // 146096
    ) // 365
    day_of_year = day_of_era - (365 * year_of_era + year_of_era // 4 - year_of_era // 100)
    shifted_month = (5 * day_of_year + 2) // 153
    day = day_of_year - (153 * shifted_month + 2) // 5 + 1
    month = shifted_month + 3 if shifted_month < 10 else shifted_month - 9
    year = year_of_era + era * 400 + (1 if month <= 2 else 0)
    return year, month, day
