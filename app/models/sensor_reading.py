"""Sensor reading record from the sensor_readings collection."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

# Number of depth bands sampled by the probe
NUM_DEPTH_LEVELS = 12

DEPTH_LABELS = [f"{(index + 1) * 10}cm" for index in range(NUM_DEPTH_LEVELS)]


def depth_label(index: int) -> str:
    """Label for a depth index (0 is the shallowest band)."""
    if 0 <= index < len(DEPTH_LABELS):
        return DEPTH_LABELS[index]
    return f"{(index + 1) * 10}cm"


class SensorReading(BaseModel):
    """Immutable timestamped observation for one device.

    Per-depth arrays are ordered shallowest first and hold ``num_levels``
    values. ``timestamp`` is Unix seconds and is the natural ordering key.
    """

    model_config = ConfigDict(extra="ignore")

    id: str
    device_id: str
    timestamp: int

    farm_id: str | None = None
    block_id: str | None = None
    sub_block_id: str | None = None

    # Probe averages
    soil_moisture: float
    soil_temperature: float
    electrical_conductivity: float

    num_levels: int = NUM_DEPTH_LEVELS
    moisture_levels: list[float] = Field(default_factory=list)
    salinity_levels: list[float] = Field(default_factory=list)
    temperature_levels: list[float] = Field(default_factory=list)

    firmware_version: str | None = None
    wifi_rssi: int | None = None
    battery_voltage: float | None = None
    created_at: datetime | None = None
