"""Pytest configuration and fixtures."""

import uuid
from collections.abc import Generator
from datetime import UTC, datetime
from typing import Any

import httpx
import pytest
from flask import Flask
from prometheus_client import REGISTRY

from app import create_app
from app.config import Settings
from app.models.sensor_reading import NUM_DEPTH_LEVELS
from app.services.backend_client import BackendClient
from app.services.container import ServiceContainer
from app.services.metrics_service import MetricsService
from tests.testing_utils import ANON_KEY, FakeBackend

BACKEND_URL = "http://backend.test"

# Fixed "current time" used by time-dependent tests: 2026-10-19 12:00:00 UTC
NOW = datetime(2026, 10, 19, 12, 0, 0, tzinfo=UTC)
NOW_TS = int(NOW.timestamp())


@pytest.fixture(autouse=True)
def clear_prometheus_registry() -> Generator[None, None, None]:
    """Clear Prometheus registry before and after each test to ensure isolation.

    Every MetricsService registers its collectors in the global registry,
    and metrics cannot be registered twice in the same registry.
    """
    collectors = list(REGISTRY._collector_to_names.keys())
    for collector in collectors:
        try:
            REGISTRY.unregister(collector)
        except (KeyError, ValueError):
            pass
    yield
    collectors = list(REGISTRY._collector_to_names.keys())
    for collector in collectors:
        try:
            REGISTRY.unregister(collector)
        except (KeyError, ValueError):
            pass


def _build_test_settings() -> Settings:
    """Construct base Settings object for tests."""
    return Settings(
        secret_key="test-secret-key",
        flask_env="testing",
        debug=True,
        cors_origins=["http://localhost:3000"],
        supabase_url=BACKEND_URL,
        supabase_anon_key=ANON_KEY,
        supabase_service_key=None,
        backend_timeout_seconds=5.0,
        backend_page_size=1000,
        config_cache_ttl_seconds=30,
        recent_readings_limit=10,
    )


def mount_fake_backend(client: BackendClient, backend: FakeBackend) -> None:
    """Route a BackendClient's HTTP traffic to the fake backend."""
    client._http_client = httpx.Client(transport=httpx.MockTransport(backend.handle))


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings pointing at the fake backend."""
    return _build_test_settings()


@pytest.fixture
def backend() -> FakeBackend:
    """Empty in-memory backend."""
    return FakeBackend()


@pytest.fixture
def app(test_settings: Settings, backend: FakeBackend) -> Generator[Flask, None, None]:
    """Create Flask app for testing wired to the fake backend."""
    app = create_app(test_settings)
    mount_fake_backend(app.container.backend_client(), backend)

    try:
        yield app
    finally:
        app.container.backend_client().close()


@pytest.fixture
def client(app: Flask) -> Any:
    """Create test client."""
    return app.test_client()


@pytest.fixture
def container(app: Flask) -> ServiceContainer:
    """Access to the DI container for testing."""
    return app.container


@pytest.fixture
def metrics_service() -> MetricsService:
    return MetricsService()


@pytest.fixture
def backend_client(
    test_settings: Settings, backend: FakeBackend, metrics_service: MetricsService
) -> Generator[BackendClient, None, None]:
    """Standalone BackendClient wired to the fake backend."""
    client = BackendClient(config=test_settings, metrics_service=metrics_service)
    mount_fake_backend(client, backend)
    yield client
    client.close()


# Record factories


def device_row(device_id: str = "AA:BB:CC:DD:EE:01", **overrides: Any) -> dict[str, Any]:
    row: dict[str, Any] = {
        "id": str(uuid.uuid4()),
        "device_id": device_id,
        "device_name": "North Field Probe",
        "farm_id": "farm-1",
        "block_id": "block-a",
        "sub_block_id": None,
        "firmware_version": "1.2.3",
        "status": "online",
        "last_seen_at": "2026-10-19T11:55:00+00:00",
        "wifi_rssi": -55,
        "battery_voltage": 3.9,
        "boot_count": 4,
        "successful_uploads": 90,
        "failed_uploads": 10,
    }
    row.update(overrides)
    return row


def reading_row(
    device_id: str = "AA:BB:CC:DD:EE:01", timestamp: int = NOW_TS, **overrides: Any
) -> dict[str, Any]:
    row: dict[str, Any] = {
        "id": str(uuid.uuid4()),
        "device_id": device_id,
        "timestamp": timestamp,
        "soil_moisture": 25.0,
        "soil_temperature": 18.5,
        "electrical_conductivity": 1.25,
        "num_levels": NUM_DEPTH_LEVELS,
        "moisture_levels": [20.0 + i for i in range(NUM_DEPTH_LEVELS)],
        "temperature_levels": [15.0 + i * 0.5 for i in range(NUM_DEPTH_LEVELS)],
        "salinity_levels": [1.0 + i * 0.1 for i in range(NUM_DEPTH_LEVELS)],
    }
    row.update(overrides)
    return row


def config_row(device_id: str | None = None, config_version: int | None = 1, **overrides: Any) -> dict[str, Any]:
    row: dict[str, Any] = {
        "id": str(uuid.uuid4()),
        "device_id": device_id,
        "collection_interval_min": 15,
        "deep_sleep_enabled": True,
        "ntp_sync_interval_hours": 6,
        "max_consecutive_failures": 10,
        "extended_sleep_minutes": 60,
        "sensor_address": "0",
        "test_mode_enabled": False,
        "debug_logging_enabled": False,
        "config_version": config_version,
        "updated_at": "2026-10-18T08:00:00+00:00",
    }
    row.update(overrides)
    return row


def firmware_row(version: str = "1.2.3", **overrides: Any) -> dict[str, Any]:
    major, minor, patch = (int(p) for p in version.split("."))
    row: dict[str, Any] = {
        "id": str(uuid.uuid4()),
        "version": version,
        "version_code": major * 10000 + minor * 100 + patch,
        "firmware_url": f"https://cdn.example.com/firmware/{version}.bin",
        "firmware_size": 1048576,
        "firmware_checksum": "abc123",
        "release_notes": None,
        "rollout_percentage": 100,
        "is_stable": True,
        "is_mandatory": False,
        "released_at": None,
    }
    row.update(overrides)
    return row


@pytest.fixture
def update_payload() -> dict[str, Any]:
    """A valid full configuration update body."""
    return {
        "collection_interval_min": 30,
        "deep_sleep_enabled": False,
        "ntp_sync_interval_hours": 12,
        "max_consecutive_failures": 5,
        "extended_sleep_minutes": 120,
        "sensor_address": "1",
        "test_mode_enabled": True,
        "debug_logging_enabled": True,
    }
