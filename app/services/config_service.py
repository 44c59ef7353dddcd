"""Configuration service for device configurations held by the managed backend."""

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from app.exceptions import (
    ConcurrentUpdateException,
    ExternalServiceException,
    InvalidOperationException,
    RecordExistsException,
    RecordNotFoundException,
    ServiceUnavailableException,
)
from app.models.device_config import (
    CONFIG_FIELDS,
    DEFAULT_CONFIG_VALUES,
    INITIAL_CONFIG_VERSION,
    DeviceConfig,
)
from app.schemas.config import ConfigUpdateRequestSchema
from app.services.backend_client import eq, order_by
from app.services.render_cache import CONFIG_LIST_KEY

if TYPE_CHECKING:
    from app.services.backend_client import BackendClient
    from app.services.metrics_service import MetricsService
    from app.services.render_cache import RenderCache

logger = logging.getLogger(__name__)

# MAC address pattern: colon or dash separated, either case
MAC_ADDRESS_PATTERN = re.compile(r"^[0-9A-Fa-f]{2}([:-][0-9A-Fa-f]{2}){5}$")


@dataclass
class ConfigUpdateResult:
    """Outcome of a successful configuration write."""

    config: DeviceConfig
    previous_version: int
    new_version: int


def build_update_payload(update: ConfigUpdateRequestSchema, new_version: int) -> dict[str, Any]:
    """Map a validated update to the write request body.

    The body always carries every tunable plus the new version so data
    fields and version are written by one statement.
    """
    values = update.model_dump(include=set(CONFIG_FIELDS))
    values["config_version"] = new_version
    return values


class ConfigService:
    """Service for reading and writing device configurations.

    ``config_version`` is the only signal polling devices use to notice a
    change, so every successful update advances it by exactly one. The
    write is conditional on the version read just before it; a concurrent
    writer that got there first makes this one fail with a conflict
    instead of silently overwriting it.
    """

    TABLE = "device_configs"

    def __init__(
        self,
        backend_client: "BackendClient",
        render_cache: "RenderCache",
        metrics_service: "MetricsService",
    ) -> None:
        """Initialize service with dependencies.

        Args:
            backend_client: Client for the managed backend
            render_cache: Cache holding the rendered configuration list
            metrics_service: Metrics service for recording write outcomes
        """
        self.backend_client = backend_client
        self.render_cache = render_cache
        self.metrics_service = metrics_service

    def list_configs(self) -> list[DeviceConfig]:
        """List all configs, the global default (null device_id) first.

        Returns:
            List of DeviceConfig instances sorted by device ID
        """
        rows = self.backend_client.select_all(
            self.TABLE, order=order_by("device_id", nulls_first=True)
        )
        return [DeviceConfig.model_validate(row) for row in rows]

    def get_config(self, config_id: str) -> DeviceConfig:
        """Get config by record ID.

        Raises:
            RecordNotFoundException: If config with ID does not exist
        """
        rows = self.backend_client.select(
            self.TABLE, filters={"id": eq(config_id)}, limit=1
        )
        if not rows:
            raise RecordNotFoundException("Device config", config_id)

        return DeviceConfig.model_validate(rows[0])

    def _read_stored_version(self, config_id: str) -> int | None:
        """Version column exactly as stored, which may be null."""
        rows = self.backend_client.select(
            self.TABLE, columns="config_version", filters={"id": eq(config_id)}, limit=1
        )
        if not rows:
            raise RecordNotFoundException("Device config", config_id)

        return rows[0].get("config_version")

    def get_current_version(self, config_id: str) -> int:
        """Read only the version column of a config.

        A null version counts as 0.

        Raises:
            RecordNotFoundException: If config with ID does not exist
        """
        return self._read_stored_version(config_id) or 0

    def _exists(self, config_id: str) -> bool:
        rows = self.backend_client.select(
            self.TABLE, columns="id", filters={"id": eq(config_id)}, limit=1
        )
        return bool(rows)

    def update_config(
        self, config_id: str, update: ConfigUpdateRequestSchema
    ) -> ConfigUpdateResult:
        """Apply an operator's configuration and advance the version.

        Args:
            config_id: Config record ID (global default or device override)
            update: Validated values for every tunable

        Returns:
            ConfigUpdateResult with the stored record and the new version

        Raises:
            RecordNotFoundException: If config with ID does not exist
            ConcurrentUpdateException: If the version changed after it was read
            ExternalServiceException: If the backend rejects the read or write
        """
        status = "success"
        try:
            stored_version = self._read_stored_version(config_id)
            current_version = stored_version or 0
            new_version = current_version + 1

            # Match the stored value itself; eq(None) filters on IS NULL
            rows = self.backend_client.update(
                self.TABLE,
                build_update_payload(update, new_version),
                filters={
                    "id": eq(config_id),
                    "config_version": eq(stored_version),
                },
            )

            if not rows:
                if not self._exists(config_id):
                    raise RecordNotFoundException("Device config", config_id)
                status = "conflict"
                raise ConcurrentUpdateException("Device config", config_id, current_version)

        except (RecordNotFoundException, ExternalServiceException, ServiceUnavailableException):
            status = "error"
            raise

        finally:
            self.metrics_service.record_config_update(status)

        self.render_cache.invalidate(CONFIG_LIST_KEY)

        config = DeviceConfig.model_validate(rows[0])
        logger.info(
            "Updated config %s (device=%s) to version %d",
            config_id,
            config.device_id or "global",
            new_version,
        )
        return ConfigUpdateResult(
            config=config, previous_version=current_version, new_version=new_version
        )

    def create_device_config(self, device_id: str) -> DeviceConfig:
        """Create a per-device override populated with default values.

        Args:
            device_id: Device hardware ID

        Returns:
            Created DeviceConfig instance

        Raises:
            InvalidOperationException: If the device ID is not MAC-style
            RecordExistsException: If the device already has an override
        """
        device_id = device_id.strip()
        if not MAC_ADDRESS_PATTERN.match(device_id):
            raise InvalidOperationException(
                "create device config", f"device ID '{device_id}' has invalid format"
            )

        existing = self.backend_client.select(
            self.TABLE, columns="id", filters={"device_id": eq(device_id)}, limit=1
        )
        if existing:
            raise RecordExistsException("Device config", device_id)

        values: dict[str, Any] = dict(DEFAULT_CONFIG_VALUES)
        values["device_id"] = device_id
        values["config_version"] = INITIAL_CONFIG_VERSION

        row = self.backend_client.insert(self.TABLE, values)
        self.render_cache.invalidate(CONFIG_LIST_KEY)

        logger.info("Created config override for device %s", device_id)
        return DeviceConfig.model_validate(row)

    def delete_config(self, config_id: str) -> DeviceConfig:
        """Delete a per-device override.

        Returns:
            The deleted DeviceConfig

        Raises:
            RecordNotFoundException: If config with ID does not exist
            InvalidOperationException: If the config is the global default
        """
        config = self.get_config(config_id)
        if config.is_global:
            raise InvalidOperationException(
                "delete device config", "the global default configuration is required"
            )

        rows = self.backend_client.delete(self.TABLE, filters={"id": eq(config_id)})
        if not rows:
            raise RecordNotFoundException("Device config", config_id)

        self.render_cache.invalidate(CONFIG_LIST_KEY)

        logger.info("Deleted config override %s for device %s", config_id, config.device_id)
        return config
