"""HTTP endpoint receiving settings from the configuration page."""

import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

import uvicorn
from pydantic import ValidationError
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from nmbs_departures.domain.models.configuration_update import ConfigurationUpdate

if TYPE_CHECKING:
    from nmbs_departures.adapters.config import AppConfig

logger = logging.getLogger(__name__)

ConfigurationHandler = Callable[[ConfigurationUpdate], Awaitable[None]]


def create_app(on_update: ConfigurationHandler) -> Starlette:
    """Build the Starlette app with the /config and /healthz routes."""

    async def receive_config(request: Request) -> Response:
        try:
            body = await request.body()
            update = ConfigurationUpdate.model_validate_json(body)
        except ValidationError as e:
            logger.warning(f"Rejected configuration: {e.error_count()} error(s)")
            return JSONResponse({"status": "error", "detail": str(e)}, status_code=422)

        logger.info(
            "Configuration received: "
            f"{len(update.favorite_stations or [])} favorites, "
            f"{len(update.smart_schedules or [])} schedules, language={update.language}"
        )
        await on_update(update)
        return JSONResponse({"status": "ok"})

    async def healthz(_request: Request) -> Response:
        """Health check endpoint for monitoring."""
        return Response(content="Ok", media_type="text/plain")

    return Starlette(
        routes=[
            Route("/config", receive_config, methods=["POST"]),
            Route("/healthz", healthz, methods=["GET"]),
        ]
    )


class ConfigServer:
    """Serves the configuration endpoint with uvicorn."""

    def __init__(self, config: "AppConfig", on_update: ConfigurationHandler) -> None:
        self.config = config
        self.app = create_app(on_update)
        self._server: uvicorn.Server | None = None

    async def serve(self) -> None:
        """Run until ``stop`` is called."""
        server_config = uvicorn.Config(
            self.app,
            host=self.config.host,
            port=self.config.port,
            log_level=self.config.log_level.lower(),
        )
        self._server = uvicorn.Server(server_config)
        logger.info(
            f"Configuration endpoint on http://{self.config.host}:{self.config.port}/config"
        )
        await self._server.serve()

    def stop(self) -> None:
        if self._server is not None:
            self._server.should_exit = True
