"""Device configuration record from the device_configs collection."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator

# Tunables written on every configuration update
CONFIG_FIELDS = (
    "collection_interval_min",
    "deep_sleep_enabled",
    "ntp_sync_interval_hours",
    "max_consecutive_failures",
    "extended_sleep_minutes",
    "sensor_address",
    "test_mode_enabled",
    "debug_logging_enabled",
)

# Values for a freshly created per-device override
DEFAULT_CONFIG_VALUES: dict[str, object] = {
    "collection_interval_min": 15,
    "deep_sleep_enabled": True,
    "ntp_sync_interval_hours": 6,
    "max_consecutive_failures": 10,
    "extended_sleep_minutes": 60,
    "sensor_address": "0",
    "test_mode_enabled": False,
    "debug_logging_enabled": False,
}

INITIAL_CONFIG_VERSION = 1


class DeviceConfig(BaseModel):
    """Global default (``device_id is None``) or per-device override.

    Devices poll ``config_version`` and re-sync when it differs from the
    version they last applied.
    """

    model_config = ConfigDict(extra="ignore")

    id: str
    device_id: str | None = None
    collection_interval_min: int
    deep_sleep_enabled: bool
    ntp_sync_interval_hours: int
    max_consecutive_failures: int
    extended_sleep_minutes: int
    sensor_address: str
    test_mode_enabled: bool
    debug_logging_enabled: bool
    config_version: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("config_version", mode="before")
    @classmethod
    def _null_version_is_zero(cls, value: object) -> object:
        """Records written before versioning carry a null version."""
        return 0 if value is None else value

    @property
    def is_global(self) -> bool:
        """True for the fleet-wide default record."""
        return self.device_id is None
