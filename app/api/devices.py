"""Device and sensor reading API endpoints."""

import logging
import time
from typing import Any

from dependency_injector.wiring import Provide, inject
from flask import Blueprint, jsonify, request
from spectree import Response as SpectreeResponse

from app.exceptions import ExternalServiceException, ServiceUnavailableException
from app.schemas.device import DeviceDetailResponseSchema, DeviceListResponseSchema
from app.schemas.error import ErrorResponseSchema
from app.schemas.reading import (
    ChartQuerySchema,
    ChartResponseSchema,
    ReadingsQuerySchema,
    ReadingViewSchema,
)
from app.services.container import ServiceContainer
from app.services.dashboard_service import DashboardService
from app.services.metrics_service import MetricsService
from app.services.reading_service import ReadingService, parse_hours
from app.utils.charts import hours_for_range, parse_levels, parse_metric
from app.utils.error_handling import handle_api_errors
from app.utils.spectree_config import api

logger = logging.getLogger(__name__)

devices_bp = Blueprint("devices", __name__, url_prefix="/devices")

READINGS_ERROR = "Failed to fetch readings"


def _requested_hours() -> int:
    """Lookback window from ``hours`` or, failing that, a ``range`` selector."""
    hours = request.args.get("hours")
    time_range = request.args.get("range")
    if hours is None and time_range is not None:
        return parse_hours(str(hours_for_range(time_range)))
    return parse_hours(hours)


@devices_bp.route("", methods=["GET"])
@api.validate(resp=SpectreeResponse(HTTP_200=DeviceListResponseSchema))
@handle_api_errors
@inject
def list_devices(
    dashboard_service: DashboardService = Provide[ServiceContainer.dashboard_service],
    metrics_service: MetricsService = Provide[ServiceContainer.metrics_service],
) -> Any:
    """List all devices, most recently seen first."""
    start_time = time.perf_counter()
    status = "success"

    try:
        return dashboard_service.list_devices().model_dump(mode="json")

    except Exception:
        status = "error"
        raise

    finally:
        duration = time.perf_counter() - start_time
        metrics_service.record_operation("list_devices", status, duration)


@devices_bp.route("/<device_id>", methods=["GET"])
@api.validate(
    resp=SpectreeResponse(
        HTTP_200=DeviceDetailResponseSchema,
        HTTP_404=ErrorResponseSchema,
        HTTP_502=ErrorResponseSchema,
        HTTP_503=ErrorResponseSchema,
    )
)
@handle_api_errors
@inject
def get_device(
    device_id: str,
    dashboard_service: DashboardService = Provide[ServiceContainer.dashboard_service],
    metrics_service: MetricsService = Provide[ServiceContainer.metrics_service],
) -> Any:
    """Get a device with its latest reading, depth profiles and last 24 hours."""
    start_time = time.perf_counter()
    status = "success"

    try:
        return dashboard_service.get_device_detail(device_id).model_dump(mode="json")

    except Exception:
        status = "error"
        raise

    finally:
        duration = time.perf_counter() - start_time
        metrics_service.record_operation("get_device", status, duration)


@devices_bp.route("/<device_id>/readings", methods=["GET"])
@api.validate(query=ReadingsQuerySchema, resp=SpectreeResponse(HTTP_500=ErrorResponseSchema))
@handle_api_errors
@inject
def list_readings(
    device_id: str,
    reading_service: ReadingService = Provide[ServiceContainer.reading_service],
    metrics_service: MetricsService = Provide[ServiceContainer.metrics_service],
) -> Any:
    """Get a device's readings of the last ``hours`` hours, oldest first.

    ``hours`` defaults to 24 and is clamped to 1-720. The response is a
    JSON array of readings.
    """
    start_time = time.perf_counter()
    status = "success"

    try:
        hours = _requested_hours()
        readings = reading_service.list_readings(device_id, hours)

        return jsonify([
            ReadingViewSchema.model_validate(r).model_dump(mode="json") for r in readings
        ])

    except (ExternalServiceException, ServiceUnavailableException) as e:
        status = "error"
        logger.error("Error fetching readings for %s: %s", device_id, e.message)
        return jsonify({"error": READINGS_ERROR}), 500

    except Exception:
        status = "error"
        raise

    finally:
        duration = time.perf_counter() - start_time
        metrics_service.record_operation("list_readings", status, duration)


@devices_bp.route("/<device_id>/chart", methods=["GET"])
@api.validate(
    query=ChartQuerySchema,
    resp=SpectreeResponse(
        HTTP_200=ChartResponseSchema,
        HTTP_400=ErrorResponseSchema,
        HTTP_502=ErrorResponseSchema,
        HTTP_503=ErrorResponseSchema,
    ),
)
@handle_api_errors
@inject
def get_chart(
    device_id: str,
    dashboard_service: DashboardService = Provide[ServiceContainer.dashboard_service],
    metrics_service: MetricsService = Provide[ServiceContainer.metrics_service],
) -> Any:
    """Time-series chart data for one metric, per depth level plus average."""
    start_time = time.perf_counter()
    status = "success"

    try:
        metric = parse_metric(request.args.get("metric"))
        levels = parse_levels(request.args.get("levels"))
        hours = _requested_hours()

        chart = dashboard_service.get_chart(device_id, metric, levels, hours)
        return chart.model_dump(mode="json")

    except Exception:
        status = "error"
        raise

    finally:
        duration = time.perf_counter() - start_time
        metrics_service.record_operation("get_chart", status, duration)
