"""Firmware release listing."""

import logging
from typing import TYPE_CHECKING

from app.models.firmware_version import FirmwareVersion
from app.services.backend_client import order_by

if TYPE_CHECKING:
    from app.services.backend_client import BackendClient

logger = logging.getLogger(__name__)


class FirmwareService:
    """Service for reading firmware release descriptors.

    Releases are created by operators directly in the backend (binary URL,
    size, checksum, rollout percentage); the dashboard lists them.
    """

    TABLE = "firmware_versions"

    def __init__(self, backend_client: "BackendClient") -> None:
        """Initialize firmware service.

        Args:
            backend_client: Client for the managed backend
        """
        self.backend_client = backend_client

    def list_firmware_versions(self) -> list[FirmwareVersion]:
        """List firmware versions, newest version code first."""
        rows = self.backend_client.select_all(
            self.TABLE, order=order_by("version_code", descending=True)
        )
        versions = [FirmwareVersion.model_validate(row) for row in rows]

        for version in versions:
            if not version.version_code_matches:
                logger.warning(
                    "Firmware %s has version_code %d which does not encode its version string",
                    version.version,
                    version.version_code,
                )

        return versions
