"""Device service for reading the device fleet."""

import logging
from typing import TYPE_CHECKING

from app.exceptions import RecordNotFoundException
from app.models.device import Device
from app.services.backend_client import eq, order_by

if TYPE_CHECKING:
    from app.services.backend_client import BackendClient

logger = logging.getLogger(__name__)


class DeviceService:
    """Service for reading devices from the managed backend.

    Devices register and update themselves; the dashboard only reads them.
    """

    TABLE = "devices"

    def __init__(self, backend_client: "BackendClient") -> None:
        """Initialize service with the backend client.

        Args:
            backend_client: Client for the managed backend
        """
        self.backend_client = backend_client

    def list_devices(self) -> list[Device]:
        """List all devices, most recently seen first.

        ``device_id`` is a tiebreaker so paging stays stable.

        Returns:
            List of Device instances
        """
        order = ",".join([
            order_by("last_seen_at", descending=True),
            order_by("device_id"),
        ])
        rows = self.backend_client.select_all(self.TABLE, order=order)
        return [Device.model_validate(row) for row in rows]

    def get_device(self, device_id: str) -> Device:
        """Get a device by its hardware ID.

        Args:
            device_id: MAC-style device identifier

        Returns:
            Device instance

        Raises:
            RecordNotFoundException: If device doesn't exist
        """
        rows = self.backend_client.select(
            self.TABLE, filters={"device_id": eq(device_id)}, limit=1
        )
        if not rows:
            raise RecordNotFoundException("Device", device_id)

        return Device.model_validate(rows[0])
