"""Firmware view schemas for API responses."""

from datetime import datetime

from pydantic import BaseModel, Field


class FirmwareViewSchema(BaseModel):
    """One firmware release with display values."""

    id: str
    version: str
    version_code: int
    firmware_url: str
    firmware_size: int = Field(..., description="Binary size in bytes")
    size_display: str = Field(..., description="Binary size in KB")
    firmware_checksum: str
    release_notes: str | None = None
    min_battery_voltage: float | None = None
    requires_version: str | None = None
    rollout_percentage: int
    is_stable: bool
    is_mandatory: bool
    released_at: datetime | None = None
    release_display: str = Field(..., description="'Released 3d ago' or 'Not released'")


class FirmwareListResponseSchema(BaseModel):
    """Response for GET /api/firmware."""

    versions: list[FirmwareViewSchema]
    count: int
