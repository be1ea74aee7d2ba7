"""HTTP endpoints: health probes and sensor data ingestion."""

from __future__ import annotations

import logging
import time

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response
from starlette.routing import Route

from signalstash.errors import (
    ERR_DECODE_PROTOBUF,
    ERR_INVALID_UTF8_DEVICE_ID,
    ERR_REDIS_CONN,
    ERR_REDIS_WRITE,
    MSG_REDIS_CONNECTIVITY_ERROR,
    log_and_response,
)
from signalstash.sensor import DecodeError, Domain, SensorData
from signalstash.store import AppState

HEALTHZ_PATH = "/healthz"
READYZ_PATH = "/readyz"
STARTZ_PATH = "/startz"
INGEST_PATH = "/ingest"

OK = "ok"
READY = "ready"
STARTED = "started"

UNKNOWN_DOMAIN = "UNKNOWN"

logger = logging.getLogger(__name__)


def health_routes(state: AppState) -> Starlette:
    """An application serving the liveness, readiness and startup probes.

    /healthz answers "ok" while the process is alive, /readyz answers "ready"
    once Redis can be reached, and /startz answers "started".
    """

    async def healthz(request: Request) -> Response:
        return PlainTextResponse(OK)

    async def readyz(request: Request) -> Response:
        try:
            await state.redis.check_connectivity()
        except Exception as exc:  # any failure means the service is not ready
            return log_and_response(MSG_REDIS_CONNECTIVITY_ERROR, exc)
        return PlainTextResponse(READY)

    async def startz(request: Request) -> Response:
        return PlainTextResponse(STARTED)

    return Starlette(
        routes=[
            Route(HEALTHZ_PATH, healthz, methods=["GET"]),
            Route(READYZ_PATH, readyz, methods=["GET"]),
            Route(STARTZ_PATH, startz, methods=["GET"]),
        ]
    )


def series_key(prefix: str, device_id: str, domain: str) -> str:
    """The Redis key of the time series for one device and domain."""
    return f"{prefix}:{device_id}:{domain}"


def _domain_name(value: int) -> str:
    try:
        return Domain(value).as_str_name()
    except ValueError:
        return UNKNOWN_DOMAIN


def ingest_routes(state: AppState) -> Starlette:
    """An application accepting encoded sensor readings on POST /ingest."""

    async def ingest(request: Request) -> Response:
        body = await request.body()
        logger.debug("Received %d bytes", len(body))

        try:
            sensor_data = SensorData.decode(body)
        except DecodeError as exc:
            return log_and_response(ERR_DECODE_PROTOBUF, exc)

        try:
            device_id = bytes(sensor_data.device_id).decode("utf-8")
        except UnicodeDecodeError as exc:
            return log_and_response(ERR_INVALID_UTF8_DEVICE_ID, exc)

        domain = _domain_name(sensor_data.domain)
        key = series_key(state.sensor_datum_prefix, device_id, domain)
        # Samples are stamped with the server's clock, not the device's.
        timestamp = int(time.time())

        try:
            await state.redis.connection()
        except Exception as exc:
            return log_and_response(ERR_REDIS_CONN, exc)

        try:
            await state.redis.ts_add(key, timestamp, sensor_data.datum, device_id, domain)
        except Exception as exc:
            return log_and_response(ERR_REDIS_WRITE, exc)

        return Response(status_code=204)

    return Starlette(routes=[Route(INGEST_PATH, ingest, methods=["POST"])])