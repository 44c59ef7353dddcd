"""Device configuration API endpoints."""

import time
from typing import Any

from dependency_injector.wiring import Provide, inject
from flask import Blueprint, request
from spectree import Response as SpectreeResponse

from app.schemas.config import (
    ConfigCreateRequestSchema,
    ConfigListResponseSchema,
    ConfigResponseSchema,
    ConfigUpdateRequestSchema,
    ConfigUpdateResponseSchema,
)
from app.schemas.error import ErrorResponseSchema
from app.services.config_service import ConfigService
from app.services.container import ServiceContainer
from app.services.dashboard_service import DashboardService, config_view
from app.services.metrics_service import MetricsService
from app.utils.error_handling import handle_api_errors
from app.utils.spectree_config import api

configs_bp = Blueprint("configs", __name__, url_prefix="/configs")


@configs_bp.route("", methods=["GET"])
@api.validate(resp=SpectreeResponse(HTTP_200=ConfigListResponseSchema))
@handle_api_errors
@inject
def list_configs(
    dashboard_service: DashboardService = Provide[ServiceContainer.dashboard_service],
    metrics_service: MetricsService = Provide[ServiceContainer.metrics_service],
) -> Any:
    """List the global default and the per-device overrides."""
    start_time = time.perf_counter()
    status = "success"

    try:
        return dashboard_service.list_configs().model_dump(mode="json")

    except Exception:
        status = "error"
        raise

    finally:
        duration = time.perf_counter() - start_time
        metrics_service.record_operation("list_configs", status, duration)


@configs_bp.route("", methods=["POST"])
@api.validate(
    json=ConfigCreateRequestSchema,
    resp=SpectreeResponse(
        HTTP_201=ConfigResponseSchema,
        HTTP_400=ErrorResponseSchema,
        HTTP_409=ErrorResponseSchema,
    ),
)
@handle_api_errors
@inject
def create_config(
    config_service: ConfigService = Provide[ServiceContainer.config_service],
    metrics_service: MetricsService = Provide[ServiceContainer.metrics_service],
) -> Any:
    """Create a per-device override populated with default values."""
    start_time = time.perf_counter()
    status = "success"

    try:
        # Spectree validates the request, but we still need to access the data
        data = ConfigCreateRequestSchema.model_validate(request.get_json())

        config = config_service.create_device_config(data.device_id)

        return config_view(config).model_dump(mode="json"), 201

    except Exception:
        status = "error"
        raise

    finally:
        duration = time.perf_counter() - start_time
        metrics_service.record_operation("create_config", status, duration)


@configs_bp.route("/<config_id>", methods=["PUT"])
@api.validate(
    json=ConfigUpdateRequestSchema,
    resp=SpectreeResponse(
        HTTP_200=ConfigUpdateResponseSchema,
        HTTP_400=ErrorResponseSchema,
        HTTP_404=ErrorResponseSchema,
        HTTP_409=ErrorResponseSchema,
        HTTP_502=ErrorResponseSchema,
        HTTP_503=ErrorResponseSchema,
    ),
)
@handle_api_errors
@inject
def update_config(
    config_id: str,
    config_service: ConfigService = Provide[ServiceContainer.config_service],
    metrics_service: MetricsService = Provide[ServiceContainer.metrics_service],
) -> Any:
    """Apply every tunable and advance ``config_version`` by one.

    Answers 409 when another write changed the version first.
    """
    start_time = time.perf_counter()
    status = "success"

    try:
        data = ConfigUpdateRequestSchema.model_validate(request.get_json())

        result = config_service.update_config(config_id, data)

        return ConfigUpdateResponseSchema(
            new_version=result.new_version,
            config=config_view(result.config),
        ).model_dump(mode="json")

    except Exception:
        status = "error"
        raise

    finally:
        duration = time.perf_counter() - start_time
        metrics_service.record_operation("update_config", status, duration)


@configs_bp.route("/<config_id>", methods=["DELETE"])
@api.validate(
    resp=SpectreeResponse(
        HTTP_204=None,
        HTTP_400=ErrorResponseSchema,
        HTTP_404=ErrorResponseSchema,
    )
)
@handle_api_errors
@inject
def delete_config(
    config_id: str,
    config_service: ConfigService = Provide[ServiceContainer.config_service],
    metrics_service: MetricsService = Provide[ServiceContainer.metrics_service],
) -> Any:
    """Delete a per-device override; the global default cannot be deleted."""
    start_time = time.perf_counter()
    status = "success"

    try:
        config_service.delete_config(config_id)
        return "", 204

    except Exception:
        status = "error"
        raise

    finally:
        duration = time.perf_counter() - start_time
        metrics_service.record_operation("delete_config", status, duration)
