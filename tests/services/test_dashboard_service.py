"""Tests for dashboard view model assembly."""

import pytest

from app.exceptions import RecordNotFoundException, ServiceUnavailableException
from app.models.device import Device
from app.models.device_config import DeviceConfig
from app.services.container import ServiceContainer
from app.services.dashboard_service import (
    DashboardService,
    config_list_view,
    config_summary,
    device_view,
)
from app.utils.charts import MetricType
from tests.conftest import NOW, NOW_TS, config_row, device_row, firmware_row, reading_row
from tests.testing_utils import FakeBackend

DEVICE_ID = "AA:BB:CC:DD:EE:01"


@pytest.fixture
def dashboard_service(container: ServiceContainer) -> DashboardService:
    return container.dashboard_service()


class TestViewFunctions:
    """Tests for record to view model mapping."""

    def test_device_view_display_fields(self):
        device = Device.model_validate(device_row(DEVICE_ID, mesh_role="relay", hop_count=2))

        view = device_view(device, NOW)

        assert view.display_name == "North Field Probe"
        assert view.location == "farm-1 / block-a"
        assert view.status_color == "bg-green-500"
        assert view.last_seen == "5m ago"
        assert view.signal == "-55 dBm"
        assert view.signal_quality == "Good"
        assert view.success_rate == "90%"
        assert view.mesh_role_label == "Relay"
        assert view.mesh_role_color == "bg-blue-500"

    def test_device_view_missing_values(self):
        device = Device.model_validate(
            device_row(
                DEVICE_ID,
                device_name=None,
                firmware_version=None,
                last_seen_at=None,
                wifi_rssi=None,
                successful_uploads=0,
                failed_uploads=0,
                status="bogus",
            )
        )

        view = device_view(device, NOW)

        assert view.display_name == DEVICE_ID
        assert view.firmware_display == "Unknown"
        assert view.last_seen == "Never"
        assert view.signal == "N/A"
        assert view.signal_quality == "Unknown"
        assert view.success_rate == "N/A"
        assert view.status_color == "bg-gray-400"
        assert view.mesh_role_label == "Unknown"

    def test_config_summary(self):
        config = DeviceConfig.model_validate(config_row(None))

        assert config_summary(config) == "Interval: 15 min | Sleep: On | Test Mode: Off"

    def test_config_list_view_splits_global(self):
        configs = [
            DeviceConfig.model_validate(config_row(None)),
            DeviceConfig.model_validate(config_row(DEVICE_ID)),
        ]

        view = config_list_view(configs)

        assert view.global_config is not None
        assert view.global_config.is_global
        assert [c.device_id for c in view.device_configs] == [DEVICE_ID]
        assert view.count == 2


class TestDashboardService:
    """Service tests for DashboardService."""

    def test_overview_stats(self, dashboard_service: DashboardService, backend: FakeBackend):
        backend.insert("devices", **device_row("AA:00:00:00:00:01", status="online"))
        backend.insert("devices", **device_row("AA:00:00:00:00:02", status="offline"))
        for i in range(12):
            backend.insert("sensor_readings", **reading_row(DEVICE_ID, NOW_TS - i))

        overview = dashboard_service.get_overview(NOW)

        assert overview.stats.total_devices == 2
        assert overview.stats.online_devices == 1
        assert overview.stats.recent_readings == 10
        assert len(overview.devices) == 2

    def test_overview_degrades_to_empty(
        self, dashboard_service: DashboardService, backend: FakeBackend
    ):
        backend.unreachable = True

        overview = dashboard_service.get_overview(NOW)

        assert overview.stats.total_devices == 0
        assert overview.stats.recent_readings == 0
        assert overview.devices == []

    def test_list_devices_updates_gauges(
        self,
        dashboard_service: DashboardService,
        container: ServiceContainer,
        backend: FakeBackend,
    ):
        backend.insert("devices", **device_row("AA:00:00:00:00:01", status="online"))
        backend.insert("devices", **device_row("AA:00:00:00:00:02", status="error"))

        result = dashboard_service.list_devices(NOW)

        assert result.count == 2
        metrics = container.metrics_service()
        assert metrics.devices_count._value.get() == 2
        assert metrics.devices_online_count._value.get() == 1

    def test_device_detail(self, dashboard_service: DashboardService, backend: FakeBackend):
        backend.insert("devices", **device_row(DEVICE_ID))
        backend.insert("sensor_readings", **reading_row(DEVICE_ID, NOW_TS - 3600))
        backend.insert("sensor_readings", **reading_row(DEVICE_ID, NOW_TS - 60))
        backend.insert("sensor_readings", **reading_row(DEVICE_ID, NOW_TS - 25 * 3600))

        detail = dashboard_service.get_device_detail(DEVICE_ID, NOW)

        assert detail.last_seen_at_display == "Oct 19, 2026, 11:55 AM"
        assert detail.latest_reading is not None
        assert detail.latest_reading.timestamp == NOW_TS - 60
        assert [r.timestamp for r in detail.history] == [NOW_TS - 3600, NOW_TS - 60]
        assert detail.depth_profiles is not None
        assert len(detail.depth_profiles.moisture) == 12
        assert detail.depth_profiles.moisture[0].depth == "10cm"
        assert detail.depth_profiles.moisture[0].display == "20.0%"

    def test_device_detail_not_found(self, dashboard_service: DashboardService):
        with pytest.raises(RecordNotFoundException):
            dashboard_service.get_device_detail("AA:BB:CC:DD:EE:99", NOW)

    def test_device_detail_readings_failure_degrades(
        self, dashboard_service: DashboardService, backend: FakeBackend
    ):
        backend.insert("devices", **device_row(DEVICE_ID))
        backend.fail("sensor_readings", 500, "statement timeout")

        detail = dashboard_service.get_device_detail(DEVICE_ID, NOW)

        assert detail.latest_reading is None
        assert detail.depth_profiles is None
        assert detail.history == []

    def test_get_chart_with_levels(self, dashboard_service: DashboardService, backend: FakeBackend):
        backend.insert("sensor_readings", **reading_row(DEVICE_ID, NOW_TS - 60))

        chart = dashboard_service.get_chart(DEVICE_ID, MetricType.MOISTURE, [0, 2], 6, now=NOW_TS)

        assert chart.hours == 6
        assert [s.key for s in chart.series] == ["level_0", "level_2", "average"]
        assert chart.series[-1].points[0].value == 21.0
        assert chart.series[-1].points[0].timestamp == (NOW_TS - 60) * 1000

    def test_get_chart_propagates_failure(
        self, dashboard_service: DashboardService, backend: FakeBackend
    ):
        backend.unreachable = True

        with pytest.raises(ServiceUnavailableException):
            dashboard_service.get_chart(DEVICE_ID, MetricType.MOISTURE, [], 24, now=NOW_TS)

    def test_list_firmware(self, dashboard_service: DashboardService, backend: FakeBackend):
        backend.insert(
            "firmware_versions",
            **firmware_row("1.2.3", released_at="2026-10-17T12:00:00+00:00"),
        )

        result = dashboard_service.list_firmware(NOW)

        assert result.count == 1
        assert result.versions[0].size_display == "1024 KB"
        assert result.versions[0].release_display == "Released 2d ago"

    def test_list_configs_is_cached(self, dashboard_service: DashboardService, backend: FakeBackend):
        backend.insert("device_configs", **config_row(None))

        first = dashboard_service.list_configs()
        second = dashboard_service.list_configs()

        assert first.count == second.count == 1
        assert len(backend.requests_for("device_configs", "GET")) == 1

    def test_list_configs_failure_not_cached(
        self, dashboard_service: DashboardService, backend: FakeBackend
    ):
        backend.insert("device_configs", **config_row(None))
        backend.unreachable = True

        failed = dashboard_service.list_configs()
        backend.unreachable = False
        recovered = dashboard_service.list_configs()

        assert failed.count == 0
        assert failed.global_config is None
        assert recovered.count == 1
