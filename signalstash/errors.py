"""Error messages and the generic internal-error response."""

from __future__ import annotations

import logging
import uuid

from starlette.responses import PlainTextResponse, Response

ERR_DECODE_PROTOBUF = "Failed to decode protobuf in ingest"
ERR_INVALID_CONTENT_TYPE = "Invalid content-type"
ERR_INVALID_UTF8_DEVICE_ID = "Invalid UTF-8 in device_id in ingest"
ERR_REDIS_CONN = "Failed to get Redis connection in ingest"
ERR_REDIS_WRITE = "Failed to write to RedisTimeSeries in ingest"

MSG_REDIS_CONNECTIVITY_ERROR = (
    "could not connect to redis (correlation id: {correlation_id})"
)
MSG_REDIS_CONNECTIVITY_FAIL = "Redis connectivity check failed in readyz"
MSG_READY = "ready"

logger = logging.getLogger(__name__)


def log_and_response(context: str, err: object) -> Response:
    """Log err under a fresh correlation id and return a 500 response naming that id."""
    correlation_id = uuid.uuid4()
    logger.error(
        "%s correlation_id=%s error=%s",
        context,
        correlation_id,
        err,
        extra={"correlation_id": str(correlation_id)},
    )
    return PlainTextResponse(
        f"internal error (correlation id: {correlation_id})", status_code=500
    )