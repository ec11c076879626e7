#!/usr/bin/env python3
"""
Query Routes - Instant and Range Queries Across Time Windows
"""

import logging
import traceback
from typing import Dict
from urllib.parse import parse_qsl

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from ...core.config import ProxyConfig
from ...core.errors import BadRequestError, ChronoError, InternalError
from ..series import execute_query
from ..upstream_client import UpstreamClient

logger = logging.getLogger("chronotheus.server")

DEFAULT_STEP = "60"


async def read_client_params(request: Request) -> Dict[str, str]:
    """URL parameters, overlaid with a form-encoded body on POST."""
    params = dict(request.query_params)
    if request.method == "POST":
        body = (await request.body()).decode("utf-8", errors="replace")
        params.update(parse_qsl(body, keep_blank_values=True))
    return params


def create_query_routes(config: ProxyConfig, upstream: UpstreamClient) -> APIRouter:
    """Create query and query_range routes."""
    router = APIRouter()

    async def run(params: Dict[str, str], range_query: bool) -> JSONResponse:
        try:
            envelope = await execute_query(upstream, config, params, range_query)
        except ChronoError:
            raise
        except Exception as e:
            logger.error(f"Error processing {'range ' if range_query else ''}query: {e}")
            logger.error(f"Full traceback:\n{traceback.format_exc()}")
            raise InternalError(str(e)) from e
        return JSONResponse(envelope.to_json())

    @router.api_route("/api/v1/query", methods=["GET", "POST"])
    async def query(request: Request):
        """Instant query evaluated in every window."""
        params = await read_client_params(request)
        if not params.get("query"):
            raise BadRequestError("missing required parameter 'query'")
        return await run(params, range_query=False)

    @router.api_route("/api/v1/query_range", methods=["GET", "POST"])
    async def query_range(request: Request):
        """Range query evaluated in every window."""
        params = await read_client_params(request)
        for name in ("query", "start", "end"):
            if not params.get(name):
                raise BadRequestError(f"missing required parameter '{name}'")
        if not params.get("step"):
            params["step"] = DEFAULT_STEP
        return await run(params, range_query=True)

    return router
