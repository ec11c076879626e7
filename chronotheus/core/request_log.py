#!/usr/bin/env python3
"""
Chronotheus Request Logger

Structured JSON log line per proxied request, plus one per error envelope.
"""

import json
import logging
import time
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request


class RequestLogger:
    """Centralized request logging for the proxy."""

    def __init__(self):
        self.logger = logging.getLogger("chronotheus.requests")

    def _log_event(self, event_type: str, details: Dict[str, Any], request: Optional[Request] = None,
                   level: int = logging.INFO):
        """Log a structured request event."""
        record = {
            "timestamp": int(time.time()),
            "event_type": event_type,
            "details": details
        }

        # Add request context if available
        if request:
            record.update({
                "client_ip": request.client.host if request.client else "unknown",
                "method": request.method,
                "path": request.url.path
            })

        # Log as JSON for structured parsing
        self.logger.log(level, json.dumps(record))

    def request_completed(self, request: Request, status_code: int, duration_ms: float):
        """Log a finished request."""
        self._log_event(
            event_type="request",
            details={"status": status_code, "duration_ms": round(duration_ms, 2)},
            request=request
        )

    def request_failed(self, request: Request, error_type: str, message: str, status_code: int):
        """Log a request answered with an error envelope."""
        self._log_event(
            event_type="request_error",
            details={"status": status_code, "error_type": error_type, "error": message},
            request=request,
            level=logging.WARNING
        )


# Global request logger instance
request_logger = RequestLogger()


def install_request_logging(app: FastAPI) -> None:
    """Attach the timing middleware to an app."""

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        request_logger.request_completed(request, response.status_code, (time.perf_counter() - start) * 1000)
        return response
