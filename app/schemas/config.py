"""Configuration schemas for API request/response validation."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ConfigUpdateRequestSchema(BaseModel):
    """Request for PUT /api/configs/<id>.

    Every tunable must be supplied; ranges are checked before any write.
    """

    model_config = ConfigDict(extra="forbid")

    collection_interval_min: int = Field(
        ..., ge=1, le=1440, description="Minutes between sensor collections"
    )
    deep_sleep_enabled: bool = Field(..., description="Deep sleep between collections")
    ntp_sync_interval_hours: int = Field(
        ..., ge=1, le=168, description="Hours between NTP time syncs"
    )
    max_consecutive_failures: int = Field(
        ..., ge=1, le=100, description="Failed uploads before extended sleep"
    )
    extended_sleep_minutes: int = Field(
        ..., ge=1, le=1440, description="Sleep length after repeated failures"
    )
    sensor_address: str = Field(
        ..., min_length=1, max_length=1, description="Single-character sensor bus address"
    )
    test_mode_enabled: bool = Field(..., description="Test mode flag")
    debug_logging_enabled: bool = Field(..., description="Verbose device logging flag")


class ConfigCreateRequestSchema(BaseModel):
    """Request for POST /api/configs (create a per-device override)."""

    device_id: str = Field(..., description="Device hardware ID (MAC-style)")


class ConfigResponseSchema(BaseModel):
    """One configuration record with display strings."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., description="Config record ID")
    device_id: str | None = Field(None, description="Device hardware ID, null for the global default")
    is_global: bool = Field(..., description="True for the fleet-wide default")
    collection_interval_min: int
    deep_sleep_enabled: bool
    ntp_sync_interval_hours: int
    max_consecutive_failures: int
    extended_sleep_minutes: int
    sensor_address: str
    test_mode_enabled: bool
    debug_logging_enabled: bool
    config_version: int = Field(..., description="Version polled by devices")
    updated_at: datetime | None = None
    summary: str = Field(..., description="One-line summary, e.g. 'Interval: 15 min | Sleep: On | Test Mode: Off'")


class ConfigListResponseSchema(BaseModel):
    """Response for GET /api/configs."""

    global_config: ConfigResponseSchema | None = Field(
        None, description="Fleet-wide default, if one exists"
    )
    device_configs: list[ConfigResponseSchema]
    count: int


class ConfigUpdateResponseSchema(BaseModel):
    """Response for a successful configuration write."""

    success: bool = True
    new_version: int = Field(..., description="Version devices will see on next poll")
    config: ConfigResponseSchema
