"""View models for the dashboard pages."""

import logging
import time
from collections.abc import Callable, Sequence
from datetime import datetime
from typing import TYPE_CHECKING, TypeVar

from app.exceptions import ExternalServiceException, ServiceUnavailableException
from app.models.device import Device, DeviceStatus
from app.models.device_config import DeviceConfig
from app.models.firmware_version import FirmwareVersion
from app.models.sensor_reading import SensorReading
from app.schemas.config import ConfigListResponseSchema, ConfigResponseSchema
from app.schemas.device import (
    DepthProfilesSchema,
    DeviceDetailResponseSchema,
    DeviceListResponseSchema,
    DeviceViewSchema,
)
from app.schemas.firmware import FirmwareListResponseSchema, FirmwareViewSchema
from app.schemas.overview import OverviewResponseSchema, OverviewStatsSchema
from app.schemas.reading import ChartResponseSchema, ReadingViewSchema
from app.services.reading_service import DEFAULT_HISTORY_HOURS
from app.services.render_cache import CONFIG_LIST_KEY
from app.utils.charts import MetricType, depth_profile, time_series
from app.utils.formatting import (
    NEVER,
    format_datetime,
    format_enabled,
    format_firmware_size,
    format_relative_time,
    format_release,
    format_signal,
    format_success_rate,
    get_mesh_role_color,
    get_mesh_role_label,
    get_rssi_quality,
    get_status_color,
)

if TYPE_CHECKING:
    from app.config import Settings
    from app.services.config_service import ConfigService
    from app.services.device_service import DeviceService
    from app.services.firmware_service import FirmwareService
    from app.services.metrics_service import MetricsService
    from app.services.reading_service import ReadingService
    from app.services.render_cache import RenderCache

logger = logging.getLogger(__name__)

T = TypeVar("T")

UPSTREAM_ERRORS = (ExternalServiceException, ServiceUnavailableException)


def device_view(device: Device, now: datetime | None = None) -> DeviceViewSchema:
    """Raw device fields plus everything the device list displays."""
    location = " / ".join(part for part in (device.farm_id, device.block_id) if part)
    return DeviceViewSchema(
        id=device.id,
        device_id=device.device_id,
        display_name=device.display_name,
        farm_id=device.farm_id,
        block_id=device.block_id,
        sub_block_id=device.sub_block_id,
        location=location,
        status=device.status,
        status_color=get_status_color(device.status),
        firmware_version=device.firmware_version,
        firmware_display=device.firmware_version or "Unknown",
        last_seen_at=device.last_seen_at,
        last_seen=format_relative_time(device.last_seen_at, now),
        wifi_rssi=device.wifi_rssi,
        signal=format_signal(device.wifi_rssi),
        signal_quality=get_rssi_quality(device.wifi_rssi),
        battery_voltage=device.battery_voltage,
        successful_uploads=device.successful_uploads,
        failed_uploads=device.failed_uploads,
        total_uploads=device.total_uploads,
        success_rate=format_success_rate(device.successful_uploads, device.failed_uploads),
        mesh_role=device.mesh_role,
        mesh_role_label=get_mesh_role_label(device.mesh_role),
        mesh_role_color=get_mesh_role_color(device.mesh_role),
        hop_count=device.hop_count,
        parent_device_id=device.parent_device_id,
    )


def firmware_view(version: FirmwareVersion, now: datetime | None = None) -> FirmwareViewSchema:
    return FirmwareViewSchema(
        id=version.id,
        version=version.version,
        version_code=version.version_code,
        firmware_url=version.firmware_url,
        firmware_size=version.firmware_size,
        size_display=format_firmware_size(version.firmware_size),
        firmware_checksum=version.firmware_checksum,
        release_notes=version.release_notes,
        min_battery_voltage=version.min_battery_voltage,
        requires_version=version.requires_version,
        rollout_percentage=version.rollout_percentage,
        is_stable=version.is_stable,
        is_mandatory=version.is_mandatory,
        released_at=version.released_at,
        release_display=format_release(version.released_at, now),
    )


def config_summary(config: DeviceConfig) -> str:
    """One-line summary, e.g. ``Interval: 15 min | Sleep: On | Test Mode: Off``."""
    return (
        f"Interval: {config.collection_interval_min} min | "
        f"Sleep: {format_enabled(config.deep_sleep_enabled)} | "
        f"Test Mode: {format_enabled(config.test_mode_enabled)}"
    )


def config_view(config: DeviceConfig) -> ConfigResponseSchema:
    return ConfigResponseSchema(
        **config.model_dump(exclude={"created_at"}),
        is_global=config.is_global,
        summary=config_summary(config),
    )


def reading_view(reading: SensorReading) -> ReadingViewSchema:
    return ReadingViewSchema.model_validate(reading)


def config_list_view(configs: Sequence[DeviceConfig]) -> ConfigListResponseSchema:
    """Split configs into the global default and per-device overrides."""
    global_config = next((c for c in configs if c.is_global), None)
    overrides = [config_view(c) for c in configs if not c.is_global]
    return ConfigListResponseSchema(
        global_config=config_view(global_config) if global_config else None,
        device_configs=overrides,
        count=len(configs),
    )


class DashboardService:
    """Builds the JSON view models of the dashboard pages.

    Page-level lists are best effort: an upstream failure is logged and
    the page renders with an empty list. Lookups of a single record and
    chart data propagate failures to the caller.
    """

    def __init__(
        self,
        config: "Settings",
        device_service: "DeviceService",
        reading_service: "ReadingService",
        firmware_service: "FirmwareService",
        config_service: "ConfigService",
        render_cache: "RenderCache",
        metrics_service: "MetricsService",
    ) -> None:
        self.config = config
        self.device_service = device_service
        self.reading_service = reading_service
        self.firmware_service = firmware_service
        self.config_service = config_service
        self.render_cache = render_cache
        self.metrics_service = metrics_service

    def _or_empty(self, what: str, fetch: Callable[[], list[T]]) -> list[T]:
        try:
            return fetch()
        except UPSTREAM_ERRORS as e:
            logger.error("Error fetching %s: %s", what, e.message)
            return []

    def _list_devices(self) -> list[Device]:
        devices = self._or_empty("devices", self.device_service.list_devices)
        online = sum(1 for d in devices if d.status == DeviceStatus.ONLINE)
        self.metrics_service.update_device_counts(len(devices), online)
        return devices

    def get_overview(self, now: datetime | None = None) -> OverviewResponseSchema:
        """Fleet stats and the device list."""
        devices = self._list_devices()
        recent = self._or_empty(
            "recent readings",
            lambda: self.reading_service.list_recent_readings(self.config.recent_readings_limit),
        )

        stats = OverviewStatsSchema(
            total_devices=len(devices),
            online_devices=sum(1 for d in devices if d.status == DeviceStatus.ONLINE),
            recent_readings=len(recent),
        )
        return OverviewResponseSchema(
            stats=stats, devices=[device_view(d, now) for d in devices]
        )

    def list_devices(self, now: datetime | None = None) -> DeviceListResponseSchema:
        devices = self._list_devices()
        return DeviceListResponseSchema(
            devices=[device_view(d, now) for d in devices], count=len(devices)
        )

    def get_device_detail(
        self, device_id: str, now: datetime | None = None
    ) -> DeviceDetailResponseSchema:
        """Device, its latest reading with depth profiles and 24h history.

        Raises:
            RecordNotFoundException: If the device does not exist
        """
        device = self.device_service.get_device(device_id)

        try:
            latest = self.reading_service.get_latest_reading(device_id)
        except UPSTREAM_ERRORS as e:
            logger.error("Error fetching latest reading of %s: %s", device_id, e.message)
            latest = None

        reference = now.timestamp() if now is not None else None
        history = self._or_empty(
            f"history of {device_id}",
            lambda: self.reading_service.list_readings(
                device_id, DEFAULT_HISTORY_HOURS, now=reference
            ),
        )

        profiles = None
        if latest is not None:
            profiles = DepthProfilesSchema(
                moisture=depth_profile(latest.moisture_levels, MetricType.MOISTURE),
                temperature=depth_profile(latest.temperature_levels, MetricType.TEMPERATURE),
                salinity=depth_profile(latest.salinity_levels, MetricType.SALINITY),
            )

        return DeviceDetailResponseSchema(
            device=device_view(device, now),
            last_seen_at_display=(
                format_datetime(device.last_seen_at) if device.last_seen_at else NEVER
            ),
            latest_reading=reading_view(latest) if latest else None,
            depth_profiles=profiles,
            history=[reading_view(r) for r in history],
        )

    def get_chart(
        self,
        device_id: str,
        metric: MetricType,
        levels: Sequence[int],
        hours: int,
        now: float | None = None,
    ) -> ChartResponseSchema:
        """Time-series chart data for one metric of a device."""
        readings = self.reading_service.list_readings(device_id, hours, now=now)
        return ChartResponseSchema.from_chart(
            device_id, hours, time_series(readings, metric, levels)
        )

    def list_firmware(self, now: datetime | None = None) -> FirmwareListResponseSchema:
        versions = self._or_empty("firmware versions", self.firmware_service.list_firmware_versions)
        return FirmwareListResponseSchema(
            versions=[firmware_view(v, now) for v in versions], count=len(versions)
        )

    def list_configs(self) -> ConfigListResponseSchema:
        """Global default and overrides, served from the render cache.

        A failed render is not cached, so the next request retries.
        """
        def render() -> ConfigListResponseSchema:
            start = time.perf_counter()
            view = config_list_view(self.config_service.list_configs())
            logger.debug(
                "Rendered config list (%d configs) in %.3fs",
                view.count,
                time.perf_counter() - start,
            )
            return view

        try:
            return self.render_cache.get_or_render(CONFIG_LIST_KEY, render)
        except UPSTREAM_ERRORS as e:
            logger.error("Error fetching configs: %s", e.message)
            return ConfigListResponseSchema(global_config=None, device_configs=[], count=0)
