"""Sensor reading and chart schemas for API request/response validation."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ReadingsQuerySchema(BaseModel):
    """Query parameters for the reading history endpoint.

    Values stay as strings; parsing and clamping are lenient so that a bad
    ``hours`` value falls back to the default instead of failing.
    """

    hours: str | None = Field(None, description="Lookback window in hours, clamped to 1-720")
    range: str | None = Field(None, description="Selector value: 1h, 6h, 24h, 7d or 30d")


class ChartQuerySchema(ReadingsQuerySchema):
    """Query parameters for the time-series chart endpoint."""

    metric: str | None = Field(None, description="moisture, temperature or salinity")
    levels: str | None = Field(
        None, description="Comma separated depth indices (0 = 10cm); empty for the average only"
    )


class ReadingViewSchema(BaseModel):
    """One sensor reading as stored, plus display values."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    device_id: str
    timestamp: int = Field(..., description="Unix seconds")
    soil_moisture: float
    soil_temperature: float
    electrical_conductivity: float
    num_levels: int
    moisture_levels: list[float]
    temperature_levels: list[float]
    salinity_levels: list[float]
    firmware_version: str | None = None
    wifi_rssi: int | None = None
    battery_voltage: float | None = None


class DepthBarSchema(BaseModel):
    """One bar of a depth profile chart."""

    level: int
    depth: str = Field(..., description="Depth label, e.g. '10cm'")
    value: float
    color: str = Field(..., description="CSS colour for the bar")
    display: str = Field(..., description="Value with unit")


class ChartPointSchema(BaseModel):
    timestamp: int = Field(..., description="Unix milliseconds")
    value: float


class ChartSeriesSchema(BaseModel):
    key: str = Field(..., description="'value', 'average' or 'level_<n>'")
    label: str
    color: str
    points: list[ChartPointSchema]


class ChartResponseSchema(BaseModel):
    """Response for GET /api/devices/<device_id>/chart."""

    device_id: str
    hours: int
    metric: str
    label: str
    unit: str
    levels: list[int]
    series: list[ChartSeriesSchema]

    @classmethod
    def from_chart(cls, device_id: str, hours: int, chart: dict[str, Any]) -> "ChartResponseSchema":
        return cls(device_id=device_id, hours=hours, **chart)
