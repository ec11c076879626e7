"""Pytest configuration and shared fixtures"""
import re

import httpx
import pytest
from fastapi.testclient import TestClient

from chronotheus.api.upstream_client import UpstreamClient
from chronotheus.core.config import ProxyConfig
from chronotheus.core.server import create_app

UPSTREAM_URL = "http://prometheus:9090"
DEFAULT_TIME = 1700000000
TIMEFRAME_RE = re.compile(r'chrono_timeframe="([^"]+)"')


class FakePrometheus:
    """
    Stub upstream answering like Prometheus with recording rules in place:
    one series per window, pre-labelled with that window's timeframe.
    """

    def __init__(self):
        self.labels = {"job": "a"}
        self.values = {"current": "1", "7days": "2", "14days": "3", "21days": "4", "28days": "5"}
        self.fail_timeframes = set()
        self.down = False
        self.requests = []

    def queries(self):
        """Query texts received by the query endpoints, in arrival order."""
        return [r.url.params["query"] for r in self.requests if "query" in r.url.params]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.down:
            raise httpx.ConnectError("connection refused", request=request)

        path = request.url.path
        if path == "/api/v1/labels":
            return httpx.Response(200, json={"status": "success", "data": ["__name__", "job"]})
        if path.startswith("/api/v1/label/"):
            return httpx.Response(200, json={"status": "success", "data": ["a", "b"]})
        if path not in ("/api/v1/query", "/api/v1/query_range"):
            return httpx.Response(200, json={"status": "success", "data": {"version": "2.45.0"}})

        params = request.url.params
        timeframe = TIMEFRAME_RE.search(params["query"]).group(1)
        if timeframe in self.fail_timeframes:
            raise httpx.ConnectError("connection refused", request=request)

        metric = dict(self.labels, chrono_timeframe=timeframe)
        value = self.values.get(timeframe)

        if path == "/api/v1/query_range":
            result = []
            if value is not None:
                start, step = int(params["start"]), int(params.get("step", "60"))
                result = [{"metric": metric, "values": [[start, value], [start + step, value]]}]
            return httpx.Response(200, json={"status": "success", "data": {"resultType": "matrix", "result": result}})

        result = []
        if value is not None:
            result = [{"metric": metric, "value": [int(params.get("time", DEFAULT_TIME)), value]}]
        return httpx.Response(200, json={"status": "success", "data": {"resultType": "vector", "result": result}})


@pytest.fixture
def proxy_config():
    """Default configuration: five windows, current..28days"""
    return ProxyConfig(upstream_url=UPSTREAM_URL)


@pytest.fixture
def fake_prometheus():
    return FakePrometheus()


@pytest.fixture
def upstream(fake_prometheus):
    """Upstream client wired to the fake Prometheus"""
    return UpstreamClient(UPSTREAM_URL, transport=httpx.MockTransport(fake_prometheus.handler))


@pytest.fixture
def client(proxy_config, fake_prometheus):
    """Test client for the proxy app backed by the fake Prometheus"""
    app = create_app(proxy_config, transport=httpx.MockTransport(fake_prometheus.handler))
    return TestClient(app)
