"""Assembling and serving the HTTP application."""

from __future__ import annotations

import argparse
import asyncio
import ipaddress
import logging
import os
from collections.abc import Mapping, Sequence

import uvicorn
from starlette.applications import Starlette

from signalstash.config import TRACE, Settings
from signalstash.routes import health_routes, ingest_routes
from signalstash.store import AppState, RedisStore

logger = logging.getLogger(__name__)


def _parse_bind_address(address: str) -> tuple[str, int]:
    """Split "ip:port" (IPv6 as "[ip]:port") into host and port; raise ValueError if invalid."""
    host, sep, port_text = address.rpartition(":")
    if not sep:
        raise ValueError(f"invalid socket address: {address!r}")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
        ip = ipaddress.ip_address(host)
        if ip.version != 6:
            raise ValueError(f"invalid socket address: {address!r}")
    else:
        ip = ipaddress.ip_address(host)
        if ip.version != 4:
            raise ValueError(f"invalid socket address: {address!r}")
    if not (port_text.isascii() and port_text.isdigit()):
        raise ValueError(f"invalid socket address: {address!r}")
    port = int(port_text)
    if port > 65535:
        raise ValueError(f"invalid socket address: {address!r}")
    return host, port


class Application:
    """The configured service: settings plus the routes it serves."""

    def __init__(self, settings: Settings, router: Starlette) -> None:
        self.settings = settings
        self.router = router

    @classmethod
    def build(cls, env: Mapping[str, str] | None = None) -> Application:
        """Read settings from env (default: the process environment), set up logging and routes.

        Raises ValueError if the settings are invalid.
        """
        settings = Settings.from_env_vars(os.environ if env is None else env)

        logging.addLevelName(TRACE, "TRACE")
        logging.basicConfig(
            level=settings.log_level,
            format="%(asctime)s %(levelname)s %(message)s",
        )
        logging.getLogger().setLevel(settings.log_level)

        state = AppState(
            redis=RedisStore(settings.redis_url),
            sensor_datum_prefix=settings.sensor_datum_prefix,
        )
        routes = [*health_routes(state).routes, *ingest_routes(state).routes]
        return cls(settings, Starlette(routes=routes))

    async def run(self) -> None:
        """Serve the routes on the configured bind address until stopped."""
        host, port = _parse_bind_address(self.settings.bind_address)
        logger.info("Starting server on http://%s", self.settings.bind_address)
        config = uvicorn.Config(
            self.router, host=host, port=port, log_level=self.settings.log_level
        )
        await uvicorn.Server(config).serve()


def main(argv: Sequence[str] | None = None) -> int:
    """Build the service from the environment and serve it."""
    parser = argparse.ArgumentParser(
        description="Ingest sensor readings into Redis time series. "
        "Configured through BIND_ADDRESS, LOG_LEVEL, REDIS_URL and SENSOR_DATUM_PREFIX."
    )
    parser.parse_args(argv)
    asyncio.run(Application.build().run())
    return 0