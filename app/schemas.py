"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, Field, StrictStr, model_validator


class SubmissionRequest(BaseModel):
    """Envelope for a raw device submission."""

    data: StrictStr = Field(
        default="",
        description="Colon-delimited payload: <device_id>:<unix_millis>:'Temperature':<value>.",
    )

    @model_validator(mode="before")
    @classmethod
    def match_data_key(cls, values: Any) -> Any:
        # Keys match ``data`` case-insensitively; the last matching key wins.
        if not isinstance(values, dict):
            return values
        matches = [key for key in values if isinstance(key, str) and key.casefold() == "data"]
        if not matches:
            return {}
        return {"data": values[matches[-1]]}


class SubmissionResponse(BaseModel):
    """Result of evaluating a parsed reading.

    ``device_id`` and ``formatted_time`` are only set for overtemperature
    readings; routes serialize with ``exclude_none`` so they are absent
    otherwise.
    """

    overtemp: bool
    device_id: Optional[int] = None
    formatted_time: Optional[str] = None


class ErrorListResponse(BaseModel):
    """Raw submissions that failed validation, in the order they arrived."""

    errors: List[str] = Field(default_factory=list)


class MessageResponse(BaseModel):
    message: str


class BadRequestResponse(BaseModel):
    error: str = "bad request"
