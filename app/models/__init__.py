"""Record models for the collections held by the managed backend."""

from app.models.device import Device, DeviceStatus, MeshRole
from app.models.device_config import DeviceConfig
from app.models.firmware_version import FirmwareVersion
from app.models.sensor_reading import SensorReading

__all__ = [
    "Device",
    "DeviceConfig",
    "DeviceStatus",
    "FirmwareVersion",
    "MeshRole",
    "SensorReading",
]
