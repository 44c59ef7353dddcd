"""Tests for device API endpoints."""

import time

from flask.testing import FlaskClient

from tests.conftest import device_row, reading_row
from tests.testing_utils import FakeBackend


class TestListDevices:
    """Tests for GET /api/devices."""

    def test_list_devices_empty(self, client: FlaskClient):
        response = client.get("/api/devices")

        assert response.status_code == 200
        data = response.get_json()
        assert data["devices"] == []
        assert data["count"] == 0

    def test_list_devices_most_recent_first(self, client: FlaskClient, backend: FakeBackend):
        backend.insert("devices", **device_row("AA:BB:CC:DD:EE:01", last_seen_at="2026-10-19T08:00:00+00:00"))
        backend.insert("devices", **device_row("AA:BB:CC:DD:EE:02", last_seen_at="2026-10-19T11:00:00+00:00"))
        backend.insert("devices", **device_row("AA:BB:CC:DD:EE:03", last_seen_at=None))

        data = client.get("/api/devices").get_json()

        assert [d["device_id"] for d in data["devices"]] == [
            "AA:BB:CC:DD:EE:03",
            "AA:BB:CC:DD:EE:02",
            "AA:BB:CC:DD:EE:01",
        ]
        assert data["count"] == 3

    def test_list_devices_display_fields(self, client: FlaskClient, backend: FakeBackend):
        backend.insert(
            "devices",
            **device_row(
                device_name=None,
                status="offline",
                wifi_rssi=-72,
                successful_uploads=3,
                failed_uploads=1,
                mesh_role="relay",
                hop_count=2,
                firmware_version=None,
                last_seen_at=None,
            ),
        )

        device = client.get("/api/devices").get_json()["devices"][0]

        assert device["display_name"] == "AA:BB:CC:DD:EE:01"
        assert device["status_color"] == "bg-gray-400"
        assert device["signal"] == "-72 dBm"
        assert device["signal_quality"] == "Poor"
        assert device["success_rate"] == "75%"
        assert device["mesh_role_label"] == "Relay"
        assert device["hop_count"] == 2
        assert device["firmware_display"] == "Unknown"
        assert device["last_seen"] == "Never"
        assert device["location"] == "farm-1 / block-a"

    def test_list_devices_upstream_failure_degrades_to_empty(
        self, client: FlaskClient, backend: FakeBackend
    ):
        backend.fail("devices", 500, "database offline")

        response = client.get("/api/devices")

        assert response.status_code == 200
        assert response.get_json()["devices"] == []


class TestGetDevice:
    """Tests for GET /api/devices/<device_id>."""

    def test_get_device_with_latest_reading(self, client: FlaskClient, backend: FakeBackend):
        now = int(time.time())
        backend.insert("devices", **device_row())
        backend.insert("sensor_readings", **reading_row(timestamp=now - 7200, soil_moisture=20.0))
        backend.insert("sensor_readings", **reading_row(timestamp=now - 60, soil_moisture=31.0))
        backend.insert("sensor_readings", **reading_row(timestamp=now - 48 * 3600))

        response = client.get("/api/devices/AA:BB:CC:DD:EE:01")

        assert response.status_code == 200
        data = response.get_json()
        assert data["device"]["device_id"] == "AA:BB:CC:DD:EE:01"
        assert data["latest_reading"]["soil_moisture"] == 31.0
        assert len(data["history"]) == 2
        assert [r["timestamp"] for r in data["history"]] == [now - 7200, now - 60]

        moisture = data["depth_profiles"]["moisture"]
        assert len(moisture) == 12
        assert moisture[0]["depth"] == "10cm"
        assert moisture[11]["depth"] == "120cm"
        assert moisture[0]["color"].startswith("hsl(210, 100%,")
        assert data["depth_profiles"]["salinity"][0]["display"] == "1.000 dS/m"

    def test_get_device_without_readings(self, client: FlaskClient, backend: FakeBackend):
        backend.insert("devices", **device_row())

        data = client.get("/api/devices/AA:BB:CC:DD:EE:01").get_json()

        assert data["latest_reading"] is None
        assert data["depth_profiles"] is None
        assert data["history"] == []

    def test_get_device_not_found(self, client: FlaskClient):
        response = client.get("/api/devices/AA:BB:CC:DD:EE:99")

        assert response.status_code == 404
        data = response.get_json()
        assert data["code"] == "RECORD_NOT_FOUND"
        assert "AA:BB:CC:DD:EE:99" in data["error"]

    def test_get_device_backend_unreachable(self, client: FlaskClient, backend: FakeBackend):
        backend.unreachable = True

        response = client.get("/api/devices/AA:BB:CC:DD:EE:01")

        assert response.status_code == 503
        assert response.get_json()["code"] == "SERVICE_UNAVAILABLE"


class TestGetChart:
    """Tests for GET /api/devices/<device_id>/chart."""

    def test_chart_scalar_series_by_default(self, client: FlaskClient, backend: FakeBackend):
        now = int(time.time())
        backend.insert("sensor_readings", **reading_row(timestamp=now - 120, soil_temperature=21.5))

        response = client.get("/api/devices/AA:BB:CC:DD:EE:01/chart?metric=temperature")

        assert response.status_code == 200
        data = response.get_json()
        assert data["metric"] == "temperature"
        assert data["hours"] == 24
        assert len(data["series"]) == 1
        assert data["series"][0]["key"] == "value"
        assert data["series"][0]["points"] == [{"timestamp": (now - 120) * 1000, "value": 21.5}]

    def test_chart_levels_with_average(self, client: FlaskClient, backend: FakeBackend):
        now = int(time.time())
        backend.insert("sensor_readings", **reading_row(timestamp=now - 60))

        data = client.get(
            "/api/devices/AA:BB:CC:DD:EE:01/chart?metric=moisture&levels=0,2&range=7d"
        ).get_json()

        assert data["hours"] == 168
        assert data["levels"] == [0, 2]
        keys = [s["key"] for s in data["series"]]
        assert keys == ["level_0", "level_2", "average"]
        average = data["series"][2]["points"][0]["value"]
        assert average == 21.0

    def test_chart_invalid_metric(self, client: FlaskClient):
        response = client.get("/api/devices/AA:BB:CC:DD:EE:01/chart?metric=humidity")

        assert response.status_code == 400
        assert response.get_json()["code"] == "VALIDATION_FAILED"

    def test_chart_invalid_level(self, client: FlaskClient):
        response = client.get("/api/devices/AA:BB:CC:DD:EE:01/chart?levels=0,12")

        assert response.status_code == 400

    def test_chart_upstream_failure(self, client: FlaskClient, backend: FakeBackend):
        backend.fail("sensor_readings", 500, "boom")

        response = client.get("/api/devices/AA:BB:CC:DD:EE:01/chart")

        assert response.status_code == 502
        assert response.get_json()["code"] == "EXTERNAL_SERVICE_ERROR"
