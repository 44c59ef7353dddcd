"""Device view schemas for API responses."""

from datetime import datetime

from pydantic import BaseModel, Field

from app.schemas.reading import DepthBarSchema, ReadingViewSchema


class DeviceViewSchema(BaseModel):
    """One device with raw fields and pre-formatted display values."""

    id: str = Field(..., description="Backend record ID")
    device_id: str = Field(..., description="MAC-style hardware ID")
    display_name: str = Field(..., description="Device name, or the hardware ID if unnamed")
    farm_id: str | None = None
    block_id: str | None = None
    sub_block_id: str | None = None
    location: str = Field(..., description="Farm / block path")

    status: str = Field(..., description="Reported status")
    status_color: str = Field(..., description="Badge colour class for the status")

    firmware_version: str | None = None
    firmware_display: str = Field(..., description="Firmware version or 'Unknown'")

    last_seen_at: datetime | None = None
    last_seen: str = Field(..., description="Relative last-seen time, e.g. '5m ago' or 'Never'")

    wifi_rssi: int | None = None
    signal: str = Field(..., description="Signal strength, e.g. '-55 dBm' or 'N/A'")
    signal_quality: str = Field(..., description="Excellent, Good, Fair, Poor or Unknown")
    battery_voltage: float | None = None

    successful_uploads: int
    failed_uploads: int
    total_uploads: int
    success_rate: str = Field(..., description="Upload success percentage or 'N/A'")

    mesh_role: str | None = None
    mesh_role_label: str = Field(..., description="Gateway, Relay, Direct or Unknown")
    mesh_role_color: str = Field(..., description="Badge colour class for the mesh role")
    hop_count: int | None = None
    parent_device_id: str | None = None


class DeviceListResponseSchema(BaseModel):
    """Response for GET /api/devices."""

    devices: list[DeviceViewSchema]
    count: int


class DepthProfilesSchema(BaseModel):
    """Depth bar charts of one reading."""

    moisture: list[DepthBarSchema]
    temperature: list[DepthBarSchema]
    salinity: list[DepthBarSchema]


class DeviceDetailResponseSchema(BaseModel):
    """Response for GET /api/devices/<device_id>."""

    device: DeviceViewSchema
    last_seen_at_display: str = Field(..., description="Absolute last-seen time or 'Never'")
    latest_reading: ReadingViewSchema | None = Field(
        None, description="Most recent reading, if the device has reported one"
    )
    depth_profiles: DepthProfilesSchema | None = None
    history: list[ReadingViewSchema] = Field(
        default_factory=list, description="Readings of the last 24 hours, oldest first"
    )
