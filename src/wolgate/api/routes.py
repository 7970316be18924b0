"""FastAPI routes for the wake gateway."""

import logging
from typing import Awaitable, Callable

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from wolgate import __version__
from wolgate.auth.token import verify_bearer
from wolgate.config.loader import GatewayConfig
from wolgate.core.wol import wake
from wolgate.errors import NotFoundError, SendError

logger = logging.getLogger(__name__)


_PROTECTED_PREFIX = "/wol/"


class BearerAuthMiddleware(BaseHTTPMiddleware):
    """Reject wake requests without the configured bearer token, when one is set."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        token = request.app.state.config.auth_token
        if not token or not request.url.path.startswith(_PROTECTED_PREFIX):
            return await call_next(request)
        if verify_bearer(request.headers.get("authorization"), token):
            return await call_next(request)
        logger.warning("Rejected unauthenticated request to %s", request.url.path)
        return PlainTextResponse(
            "Unauthorized", status_code=401, headers={"WWW-Authenticate": "Bearer"}
        )


def create_app(config: GatewayConfig) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Validated gateway configuration. It is stored on ``app.state``
            and never modified afterwards.

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="wol-gateway",
        version=__version__,
        description="HTTP-triggered Wake-on-LAN gateway",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.config = config

    if config.auth_token:
        app.add_middleware(BearerAuthMiddleware)
    else:
        logger.warning("No auth_token configured: wake endpoint is open to anyone")

    @app.exception_handler(StarletteHTTPException)
    async def _not_found(request: Request, exc: StarletteHTTPException) -> PlainTextResponse:
        # Unknown paths and wrong methods are both reported as 404.
        if exc.status_code in (404, 405):
            return PlainTextResponse("Not Found", status_code=404)
        return PlainTextResponse(str(exc.detail), status_code=exc.status_code)

    # Sync handler: FastAPI runs it in its threadpool, so sends never block the loop.
    @app.post("/wol/{device_name}", response_class=PlainTextResponse)
    def wake_on_lan(device_name: str) -> PlainTextResponse:
        cfg: GatewayConfig = app.state.config
        try:
            address = cfg.devices.lookup(device_name)
        except NotFoundError as exc:
            logger.info("Wake requested for unknown device %s", device_name)
            return PlainTextResponse(str(exc), status_code=404)

        try:
            wake(
                address,
                ip_address=cfg.broadcast_ip,
                port=cfg.wol_port,
                password=cfg.password,
                interface=cfg.interface,
            )
        except SendError as exc:
            return PlainTextResponse(f"Failed to send WOL packet: {exc}", status_code=500)

        return PlainTextResponse(f"Waking up device: {device_name} (Mac Address: {address})")

    return app
