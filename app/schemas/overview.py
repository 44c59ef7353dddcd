"""Fleet overview schema for API responses."""

from pydantic import BaseModel, Field

from app.schemas.device import DeviceViewSchema


class OverviewStatsSchema(BaseModel):
    total_devices: int
    online_devices: int
    recent_readings: int = Field(..., description="Number of readings in the recent window")


class OverviewResponseSchema(BaseModel):
    """Response for GET /api/overview."""

    stats: OverviewStatsSchema
    devices: list[DeviceViewSchema]
