"""HTTP route definitions for the service."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.requests import ClientDisconnect

from app.schemas import (
    BadRequestResponse,
    ErrorListResponse,
    MessageResponse,
    SubmissionRequest,
    SubmissionResponse,
)
from services.parser import PayloadParseError
from services.telemetry import TelemetryService, build_default_service

logger = logging.getLogger(__name__)

router = APIRouter()


def get_service() -> TelemetryService:
    return build_default_service()


def _bad_request() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=BadRequestResponse().model_dump(),
    )


@router.post(
    "/temp",
    response_model=SubmissionResponse,
    response_model_exclude_none=True,
    responses={status.HTTP_400_BAD_REQUEST: {"model": BadRequestResponse}},
    summary="Submit a device temperature reading.",
)
async def submit_temperature(
    request: Request,
    service: TelemetryService = Depends(get_service),
) -> SubmissionResponse | JSONResponse:
    # The body is decoded by hand so every envelope failure gets the same 400 body.
    try:
        body = await request.body()
        submission = SubmissionRequest.model_validate_json(body)
    except (ClientDisconnect, ValidationError):
        logger.debug("Unreadable submission envelope")
        return _bad_request()

    try:
        return service.submit(submission.data)
    except PayloadParseError:
        return _bad_request()


@router.get(
    "/errors",
    response_model=ErrorListResponse,
    summary="List raw submissions that failed validation.",
)
async def list_errors(service: TelemetryService = Depends(get_service)) -> ErrorListResponse:
    return ErrorListResponse(errors=service.list_errors())


@router.delete(
    "/errors",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Clear the error log.",
)
async def delete_errors(service: TelemetryService = Depends(get_service)) -> MessageResponse:
    service.clear_errors()
    return MessageResponse(message="success")


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}
