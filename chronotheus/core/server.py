#!/usr/bin/env python3
"""
Chronotheus FastAPI application factory
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .config import ProxyConfig
from .errors import ChronoError
from .request_log import install_request_logging, request_logger
from ..api.schemas import ErrorResponse
from ..api.upstream_client import UpstreamClient
from ..api.routes.query_routes import create_query_routes
from ..api.routes.label_routes import create_label_routes
from ..api.routes.passthrough_routes import create_passthrough_routes

logger = logging.getLogger("chronotheus.server")


def create_app(config: ProxyConfig, transport: Optional[httpx.AsyncBaseTransport] = None) -> FastAPI:
    """
    Build the proxy app.

    Args:
        config: Read-only proxy configuration
        transport: Optional httpx transport for the upstream client (tests)
    """
    upstream = UpstreamClient(config.upstream_url, timeout=config.request_timeout, transport=transport)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        windows = ", ".join(f"{w.timeframe}=+{w.offset}s" for w in config.windows())
        logger.info(f"Proxying {config.upstream_url} across windows: {windows}")
        yield
        await upstream.aclose()

    app = FastAPI(title="Chronotheus", description="Prometheus historical data proxy", lifespan=lifespan)
    app.state.config = config
    app.state.upstream = upstream

    install_request_logging(app)

    @app.exception_handler(ChronoError)
    async def chrono_error_handler(request: Request, exc: ChronoError):
        request_logger.request_failed(request, exc.error_type, exc.message, exc.status_code)
        body = ErrorResponse(errorType=exc.error_type, error=exc.message)
        return JSONResponse(status_code=exc.status_code, content=body.model_dump())

    app.include_router(create_query_routes(config, upstream))
    app.include_router(create_label_routes(config, upstream))
    # Catch-all goes last
    app.include_router(create_passthrough_routes(upstream))

    return app
