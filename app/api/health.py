"""Health check endpoint for container probes."""

from typing import Any

from dependency_injector.wiring import Provide, inject
from flask import Blueprint, jsonify

from app.services.backend_client import BackendClient
from app.services.container import ServiceContainer

health_bp = Blueprint("health", __name__, url_prefix="/health")


@health_bp.route("", methods=["GET"])
@inject
def health_check(
    backend_client: BackendClient = Provide[ServiceContainer.backend_client],
) -> Any:
    """Health check endpoint.

    Returns 200 when the data backend answers an authenticated read.
    Returns 503 when it is unreachable, rejects the request or is not configured.
    """
    backend_connected = backend_client.ping()

    response = {
        "status": "healthy" if backend_connected else "unhealthy",
        "backend": "connected" if backend_connected else "disconnected",
    }

    if not backend_connected:
        if backend_client.enabled:
            response["error"] = "data backend not reachable"
        else:
            response["error"] = "data backend not configured"

    return jsonify(response), 200 if backend_connected else 503
