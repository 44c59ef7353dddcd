"""Firmware release API endpoints."""

import time
from typing import Any

from dependency_injector.wiring import Provide, inject
from flask import Blueprint
from spectree import Response as SpectreeResponse

from app.schemas.firmware import FirmwareListResponseSchema
from app.services.container import ServiceContainer
from app.services.dashboard_service import DashboardService
from app.services.metrics_service import MetricsService
from app.utils.error_handling import handle_api_errors
from app.utils.spectree_config import api

firmware_bp = Blueprint("firmware", __name__, url_prefix="/firmware")


@firmware_bp.route("", methods=["GET"])
@api.validate(resp=SpectreeResponse(HTTP_200=FirmwareListResponseSchema))
@handle_api_errors
@inject
def list_firmware(
    dashboard_service: DashboardService = Provide[ServiceContainer.dashboard_service],
    metrics_service: MetricsService = Provide[ServiceContainer.metrics_service],
) -> Any:
    """List firmware releases, newest version code first."""
    start_time = time.perf_counter()
    status = "success"

    try:
        return dashboard_service.list_firmware().model_dump(mode="json")

    except Exception:
        status = "error"
        raise

    finally:
        duration = time.perf_counter() - start_time
        metrics_service.record_operation("list_firmware", status, duration)
