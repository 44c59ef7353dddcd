"""Pydantic schemas for request/response validation."""

from app.schemas.config import (
    ConfigCreateRequestSchema,
    ConfigListResponseSchema,
    ConfigResponseSchema,
    ConfigUpdateRequestSchema,
    ConfigUpdateResponseSchema,
)
from app.schemas.device import (
    DepthProfilesSchema,
    DeviceDetailResponseSchema,
    DeviceListResponseSchema,
    DeviceViewSchema,
)
from app.schemas.error import ErrorResponseSchema
from app.schemas.firmware import FirmwareListResponseSchema, FirmwareViewSchema
from app.schemas.overview import OverviewResponseSchema, OverviewStatsSchema
from app.schemas.reading import (
    ChartPointSchema,
    ChartQuerySchema,
    ChartResponseSchema,
    ChartSeriesSchema,
    DepthBarSchema,
    ReadingsQuerySchema,
    ReadingViewSchema,
)

__all__ = [
    # Config schemas
    "ConfigCreateRequestSchema",
    "ConfigListResponseSchema",
    "ConfigResponseSchema",
    "ConfigUpdateRequestSchema",
    "ConfigUpdateResponseSchema",
    # Device schemas
    "DepthProfilesSchema",
    "DeviceDetailResponseSchema",
    "DeviceListResponseSchema",
    "DeviceViewSchema",
    # Error schemas
    "ErrorResponseSchema",
    # Firmware schemas
    "FirmwareListResponseSchema",
    "FirmwareViewSchema",
    # Overview schemas
    "OverviewResponseSchema",
    "OverviewStatsSchema",
    # Reading and chart schemas
    "ChartPointSchema",
    "ChartQuerySchema",
    "ChartResponseSchema",
    "ChartSeriesSchema",
    "DepthBarSchema",
    "ReadingsQuerySchema",
    "ReadingViewSchema",
]
