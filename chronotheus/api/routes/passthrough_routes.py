#!/usr/bin/env python3
"""
Pass-through Routes - Everything the Proxy Does Not Rewrite
"""

import logging

from fastapi import APIRouter, Request, Response

from ..upstream_client import UpstreamClient

logger = logging.getLogger("chronotheus.server")

FORWARDED_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def create_passthrough_routes(upstream: UpstreamClient) -> APIRouter:
    """Create the catch-all forwarder. Include it after every other router."""
    router = APIRouter()

    @router.api_route("/{path:path}", methods=FORWARDED_METHODS)
    async def forward(path: str, request: Request):
        """Forward the request upstream unchanged."""
        headers = {}
        if "content-type" in request.headers:
            headers["Content-Type"] = request.headers["content-type"]

        response = await upstream.forward(
            request.method,
            f"/{path}",
            request.url.query,
            await request.body(),
            headers,
        )
        logger.debug(f"Forwarded {request.method} /{path}: HTTP {response.status_code}")
        return Response(
            content=response.content,
            status_code=response.status_code,
            media_type=response.headers.get("content-type"),
        )

    return router
