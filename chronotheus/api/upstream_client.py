"""Upstream Prometheus API client for querying and forwarding."""

import logging
from typing import Dict, List, Optional

import httpx
from pydantic import ValidationError

from ..core.errors import UpstreamError
from .schemas import Series

logger = logging.getLogger("chronotheus.server")

QUERY_PATH = "/api/v1/query"
QUERY_RANGE_PATH = "/api/v1/query_range"


class UpstreamClient:
    """Async client for a Prometheus-compatible query API."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize upstream client.

        Args:
            base_url: Base URL of the upstream (e.g., http://localhost:9090)
            timeout: Per-call timeout in seconds
            transport: Optional httpx transport, used to stub the upstream in tests
        """
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(base_url=self.base_url, timeout=timeout, transport=transport)

    async def aclose(self) -> None:
        await self._client.aclose()

    def _url(self, path: str, query_string: str) -> str:
        return f"{path}?{query_string}" if query_string else path

    async def get_json(self, path: str, query_string: str = "") -> dict:
        """
        GET an upstream endpoint and decode its JSON body.

        Args:
            path: API path (e.g., /api/v1/labels)
            query_string: Already-encoded query string, without '?'

        Returns:
            Parsed JSON object

        Raises:
            UpstreamError: On connection errors, timeouts, or non-JSON bodies
        """
        url = self._url(path, query_string)
        try:
            response = await self._client.get(url)
        except httpx.HTTPError as e:
            raise UpstreamError(f"upstream request to {path} failed: {e}") from e

        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamError(
                f"upstream {path} returned a non-JSON body (HTTP {response.status_code})"
            ) from e

        if not isinstance(payload, dict):
            raise UpstreamError(f"upstream {path} returned an unexpected JSON document")
        return payload

    async def fetch_series(self, path: str, query_string: str) -> List[Series]:
        """
        Run a query (instant or range) and parse ``data.result`` into series.

        A missing ``data.result`` yields no series.
        """
        payload = await self.get_json(path, query_string)
        if payload.get("status") == "error":
            logger.warning(f"Upstream {path} reported error: {payload.get('error')}")

        data = payload.get("data")
        result = data.get("result") if isinstance(data, dict) else None
        if result is None:
            return []

        try:
            return [Series.model_validate(item) for item in result]
        except (ValidationError, TypeError) as e:
            raise UpstreamError(f"upstream {path} returned malformed series: {e}") from e

    async def forward(
        self,
        method: str,
        path: str,
        query_string: str = "",
        body: bytes = b"",
        headers: Optional[Dict[str, str]] = None,
    ) -> httpx.Response:
        """Send a request upstream unchanged and return the raw response."""
        url = self._url(path, query_string)
        try:
            return await self._client.request(method, url, content=body or None, headers=headers)
        except httpx.HTTPError as e:
            raise UpstreamError(f"upstream request to {path} failed: {e}") from e
