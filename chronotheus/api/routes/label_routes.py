#!/usr/bin/env python3
"""
Label Routes - Label Listing with the Proxy's Own Labels Spliced In
"""

import logging
import traceback
from typing import List, Tuple

from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse

from ...core.config import ProxyConfig
from ...core.errors import ChronoError, InternalError
from ..series import COMMAND_LABEL, COMMANDS, SYNTHETIC_TIMEFRAMES, TIMEFRAME_LABEL, build_query_string, strip_directives
from ..upstream_client import UpstreamClient

logger = logging.getLogger("chronotheus.server")

LABELS_PATH = "/api/v1/labels"


def upstream_match_params(request: Request) -> List[Tuple[str, str]]:
    """
    Client parameters with proxy directives removed from series selectors.

    ``match`` is renamed to ``match[]``; selectors left empty are dropped.
    """
    pairs = []
    for key, value in request.query_params.multi_items():
        if key in ("match", "match[]"):
            value = strip_directives(value)
            if not value:
                continue
            key = "match[]"
        pairs.append((key, value))
    return pairs


def create_label_routes(config: ProxyConfig, upstream: UpstreamClient) -> APIRouter:
    """Create label listing routes."""
    router = APIRouter()

    async def list_labels(request: Request) -> JSONResponse:
        payload = await upstream.get_json(LABELS_PATH, build_query_string(upstream_match_params(request)))

        names = payload.get("data")
        if not isinstance(names, list):
            names = []
            payload["status"] = "success"
        for extra in (TIMEFRAME_LABEL, COMMAND_LABEL):
            if extra not in names:
                names.append(extra)
        payload["data"] = names
        return JSONResponse(payload)

    async def forward_label_values(label: str, request: Request) -> Response:
        path = f"/api/v1/label/{label}/values"
        response = await upstream.forward("GET", path, build_query_string(upstream_match_params(request)))
        logger.debug(f"Forwarded {path}: HTTP {response.status_code}")
        return Response(
            content=response.content,
            status_code=response.status_code,
            media_type=response.headers.get("content-type", "application/json"),
        )

    @router.get(LABELS_PATH)
    async def labels(request: Request):
        """Upstream label names plus the proxy's directive labels."""
        try:
            return await list_labels(request)
        except ChronoError:
            raise
        except Exception as e:
            logger.error(f"Error listing labels: {e}")
            logger.error(f"Full traceback:\n{traceback.format_exc()}")
            raise InternalError(str(e)) from e

    @router.get("/api/v1/label/{label}/values")
    async def label_values(label: str, request: Request):
        """Values for one label; the proxy answers for its own labels."""
        if label == TIMEFRAME_LABEL:
            return {"status": "success", "data": list(config.timeframes) + SYNTHETIC_TIMEFRAMES}
        if label == COMMAND_LABEL:
            return {"status": "success", "data": [""] + COMMANDS}

        try:
            return await forward_label_values(label, request)
        except ChronoError:
            raise
        except Exception as e:
            logger.error(f"Error fetching values for label {label}: {e}")
            logger.error(f"Full traceback:\n{traceback.format_exc()}")
            raise InternalError(str(e)) from e

    return router
