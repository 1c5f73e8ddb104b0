"""FastAPI application factory."""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..api import ContentGateway, create_gateway
from ..utils import Config, ValidationError
from .routes import router, UpstreamFailure


logger = logging.getLogger(__name__)


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


def create_app(config: Optional[Config] = None, gateway: Optional[ContentGateway] = None) -> FastAPI:
    """Build the HTTP API.

    Args:
        config: Configuration (loaded from the default locations if omitted)
        gateway: Content gateway (built from the ``gateway`` config section if omitted)
    """
    config = config or Config()
    if gateway is None:
        config.validate()
        gateway = create_gateway(config.get_gateway_config())

    app = FastAPI(
        title="git-cms",
        description="Git-backed content management API",
        version=__version__
    )
    app.state.config = config
    app.state.gateway = gateway

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.get('server.cors_origins', ['*']),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        return error_response(400, str(exc))

    @app.exception_handler(RequestValidationError)
    async def handle_malformed_request(request: Request, exc: RequestValidationError):
        return error_response(400, "Malformed request body")

    @app.exception_handler(UpstreamFailure)
    async def handle_upstream_failure(request: Request, exc: UpstreamFailure):
        logger.warning(f"{request.method} {request.url.path} failed: {exc.message}")
        return error_response(exc.status_code, exc.message)

    app.include_router(router)

    return app
