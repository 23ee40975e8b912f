"""FastAPI surface for the video discovery engine."""

from __future__ import annotations

import logging
from typing import Any, AsyncIterator, Dict

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, ValidationError, field_validator

from config import get_webapp_settings
from discovery import ResultAssembler, build_assembler
from utils.exceptions import (
    ConfigurationError,
    DiscoveryError,
    InputError,
    NoPrimaryVideoFound,
    UpstreamPlanningError,
)


logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please try again later."
PAYMENT_REQUIRED_MESSAGE = "Payment required. Please add credits."
MAX_ERROR_MESSAGE_LENGTH = 200


class FindVideoRequest(BaseModel):
    topic: str = Field(..., description="Learning topic")

    @field_validator("topic", mode="before")
    @classmethod
    def _strip_required(cls, value: Any) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Topic is required")
        return value.strip()


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def error_to_response(exc: Exception) -> JSONResponse:
    """Map the discovery error taxonomy onto HTTP status codes."""
    if isinstance(exc, InputError):
        return _error(400, exc.message)
    if isinstance(exc, UpstreamPlanningError):
        if exc.is_rate_limited:
            return _error(429, RATE_LIMIT_MESSAGE)
        if exc.is_quota_exceeded:
            return _error(402, PAYMENT_REQUIRED_MESSAGE)
        return _error(500, "AI gateway error")
    if isinstance(exc, (NoPrimaryVideoFound, DiscoveryError)):
        return _error(500, exc.message)
    message = str(exc).strip() or "Unknown error"
    return _error(500, message[:MAX_ERROR_MESSAGE_LENGTH])


async def get_assembler() -> AsyncIterator[ResultAssembler]:
    try:
        assembler = build_assembler()
    except ValidationError as exc:
        raise ConfigurationError(
            "Invalid discovery configuration", {"errors": exc.error_count()}
        ) from exc
    try:
        yield assembler
    finally:
        await assembler.aclose()


app = FastAPI(title="Video Discovery Engine", version="1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_webapp_settings().cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def _invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _error(400, "Topic is required")


@app.exception_handler(DiscoveryError)
async def _discovery_error(request: Request, exc: DiscoveryError) -> JSONResponse:
    # Raised outside the handler body, e.g. while building the assembler.
    logger.error(f"{request.url.path} failed: {exc}")
    return error_to_response(exc)


@app.get("/health")
async def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.post("/api/find-video")
async def find_video(
    req: FindVideoRequest,
    assembler: ResultAssembler = Depends(get_assembler),
) -> JSONResponse:
    try:
        result = await assembler.assemble(req.topic)
    except DiscoveryError as exc:
        logger.error(f"find-video failed for '{req.topic}': {exc}")
        return error_to_response(exc)
    except Exception as exc:
        logger.exception("Error in find-video")
        return error_to_response(exc)
    return JSONResponse(result.to_response())
