"""Utility modules for the soil sensor dashboard backend."""

import uuid

from flask import g, has_request_context, request

CORRELATION_HEADER = "X-Request-ID"


def get_current_correlation_id() -> str:
    """Get or generate a correlation ID for the current request.

    The ID is taken from the ``X-Request-ID`` header when the caller sends
    one and cached on ``flask.g`` so every log line and error body of the
    same request carries the same value.

    Returns:
        A correlation ID string
    """
    if not has_request_context():
        return str(uuid.uuid4())

    correlation_id = getattr(g, "correlation_id", None)
    if correlation_id is None:
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        g.correlation_id = correlation_id
    return correlation_id
