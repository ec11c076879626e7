"""
Proxy error kinds.

Every error maps onto the Prometheus error envelope:
    {"status": "error", "errorType": ..., "error": ...}
"""


class ChronoError(Exception):
    """Base class for errors surfaced to the client as an error envelope."""

    status_code = 500
    error_type = "execution"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UpstreamError(ChronoError):
    """Upstream unreachable, timed out, or answered with a malformed body."""

    status_code = 502


class InternalError(ChronoError):
    """Unexpected local fault while processing a request."""

    status_code = 500


class BadRequestError(ChronoError):
    """Client request is missing required parameters."""

    status_code = 400
    error_type = "bad_data"


class InvalidTimeframeError(BadRequestError):
    """Timeframe selector names no configured or synthetic window."""
