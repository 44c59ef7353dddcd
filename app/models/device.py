"""Device record from the devices collection."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class DeviceStatus(StrEnum):
    """Health states reported for a device.

    ONLINE: Device uploaded recently
    OFFLINE: Device missed its expected check-ins
    UPDATING: Device is applying a firmware update
    ERROR: Device reported a failure
    UNKNOWN: No status known yet
    """

    ONLINE = "online"
    OFFLINE = "offline"
    UPDATING = "updating"
    ERROR = "error"
    UNKNOWN = "unknown"


class MeshRole(StrEnum):
    """Position of a device in the multi-hop relay topology."""

    GATEWAY = "gateway"
    RELAY = "relay"
    DIRECT = "direct"
    UNKNOWN = "unknown"


class Device(BaseModel):
    """A registered sensor device.

    Devices are identified by their physical MAC-style ``device_id``. Upload
    counters are maintained by the backend and only read here.
    """

    model_config = ConfigDict(extra="ignore")

    id: str
    device_id: str
    device_name: str | None = None

    # Location hierarchy
    farm_id: str | None = None
    block_id: str | None = None
    sub_block_id: str | None = None

    # Firmware
    firmware_version: str | None = None
    target_firmware_version: str | None = None

    # Health; kept as a plain string so unrecognised values survive a read
    status: str = DeviceStatus.UNKNOWN.value
    last_seen_at: datetime | None = None
    last_reading_at: datetime | None = None
    last_config_sync_at: datetime | None = None
    wifi_rssi: int | None = None
    battery_voltage: float | None = None
    boot_count: int = 0

    # Upload counters
    successful_uploads: int = 0
    failed_uploads: int = 0

    # Mesh networking (absent for devices that talk to the backend directly)
    mesh_role: str | None = None
    hop_count: int | None = None
    parent_device_id: str | None = None

    registered_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def display_name(self) -> str:
        """Name shown in lists, falling back to the hardware ID."""
        return self.device_name or self.device_id

    @property
    def total_uploads(self) -> int:
        """Successful plus failed uploads."""
        return self.successful_uploads + self.failed_uploads
