"""Fleet overview API endpoint."""

import time
from typing import Any

from dependency_injector.wiring import Provide, inject
from flask import Blueprint
from spectree import Response as SpectreeResponse

from app.schemas.overview import OverviewResponseSchema
from app.services.container import ServiceContainer
from app.services.dashboard_service import DashboardService
from app.services.metrics_service import MetricsService
from app.utils.error_handling import handle_api_errors
from app.utils.spectree_config import api

overview_bp = Blueprint("overview", __name__, url_prefix="/overview")


@overview_bp.route("", methods=["GET"])
@api.validate(resp=SpectreeResponse(HTTP_200=OverviewResponseSchema))
@handle_api_errors
@inject
def get_overview(
    dashboard_service: DashboardService = Provide[ServiceContainer.dashboard_service],
    metrics_service: MetricsService = Provide[ServiceContainer.metrics_service],
) -> Any:
    """Device totals, recent reading count and the device list."""
    start_time = time.perf_counter()
    status = "success"

    try:
        return dashboard_service.get_overview().model_dump(mode="json")

    except Exception:
        status = "error"
        raise

    finally:
        duration = time.perf_counter() - start_time
        metrics_service.record_operation("overview", status, duration)
