"""Submission handling: parse, evaluate, and record failures."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import List

from app.schemas import SubmissionResponse
from datastore.error_log import ErrorLog
from services.parser import PayloadParseError, parse_payload
from services.threshold import DEFAULT_THRESHOLD, evaluate
from settings import get_settings

logger = logging.getLogger(__name__)


class TelemetryService:
    """Coordinates payload parsing, threshold evaluation, and the error log."""

    def __init__(self, error_log: ErrorLog, threshold: float = DEFAULT_THRESHOLD) -> None:
        self.error_log = error_log
        self.threshold = threshold

    def submit(self, raw: str) -> SubmissionResponse:
        """Evaluate a raw submission, recording it in the error log if invalid."""
        try:
            record = parse_payload(raw)
        except PayloadParseError as exc:
            self.error_log.append(raw)
            logger.warning(
                "Rejected telemetry submission",
                extra={"reason": exc.reason.value, "raw_length": len(raw)},
            )
            raise

        response = evaluate(record, threshold=self.threshold)
        if response.overtemp:
            logger.info(
                "Overtemperature reading",
                extra={
                    "device_id": record.device_id,
                    "temperature": record.temperature,
                    "threshold": self.threshold,
                },
            )
        return response

    def list_errors(self) -> List[str]:
        return self.error_log.snapshot()

    def clear_errors(self) -> None:
        cleared = len(self.error_log)
        self.error_log.clear()
        logger.info("Cleared error log", extra={"error_count": cleared})


@lru_cache
def build_default_service() -> TelemetryService:
    """Factory that wires the service from environment settings."""
    settings = get_settings()
    return TelemetryService(
        error_log=ErrorLog(capacity=settings.error_log_capacity),
        threshold=settings.overtemp_threshold,
    )
