"""Tests for the backend REST client."""

import httpx
import pytest

from app.config import Settings
from app.exceptions import ExternalServiceException, ServiceUnavailableException
from app.services.backend_client import BackendClient, eq, gte, is_null, order_by
from app.services.metrics_service import MetricsService
from tests.conftest import mount_fake_backend
from tests.testing_utils import ANON_KEY, FakeBackend


class TestFilterHelpers:
    """Tests for PostgREST parameter builders."""

    def test_eq(self):
        assert eq("AA:BB") == "eq.AA:BB"
        assert eq(3) == "eq.3"
        assert eq(True) == "eq.true"

    def test_eq_none_is_null(self):
        assert eq(None) == "is.null"
        assert is_null() == "is.null"

    def test_gte(self):
        assert gte(1700000000) == "gte.1700000000"

    def test_order_by(self):
        assert order_by("timestamp") == "timestamp.asc"
        assert order_by("timestamp", descending=True) == "timestamp.desc"
        assert order_by("device_id", nulls_first=True) == "device_id.asc.nullsfirst"
        assert order_by("device_id", descending=True, nulls_first=False) == "device_id.desc.nullslast"


class TestBackendClient:
    """Tests for BackendClient requests and error mapping."""

    def test_sends_auth_headers(self, backend_client: BackendClient, backend: FakeBackend):
        backend_client.select("devices")

        request = backend.requests[0]
        assert request.url.path == "/rest/v1/devices"
        assert request.headers["apikey"] == ANON_KEY
        assert request.headers["Authorization"] == f"Bearer {ANON_KEY}"

    def test_service_key_used_as_bearer(
        self, test_settings: Settings, backend: FakeBackend, metrics_service: MetricsService
    ):
        settings = test_settings.model_copy(update={"supabase_service_key": "service-key"})
        client = BackendClient(config=settings, metrics_service=metrics_service)
        mount_fake_backend(client, backend)

        client.select("devices")

        request = backend.requests[0]
        assert request.headers["apikey"] == ANON_KEY
        assert request.headers["Authorization"] == "Bearer service-key"

    def test_select_builds_query(self, backend_client: BackendClient, backend: FakeBackend):
        backend_client.select(
            "sensor_readings",
            columns="id,timestamp",
            filters={"device_id": eq("AA"), "timestamp": gte(10)},
            order=order_by("timestamp"),
            limit=5,
            offset=10,
        )

        params = backend.requests[0].url.params
        assert params["select"] == "id,timestamp"
        assert params["device_id"] == "eq.AA"
        assert params["timestamp"] == "gte.10"
        assert params["order"] == "timestamp.asc"
        assert params["limit"] == "5"
        assert params["offset"] == "10"

    def test_select_all_pages_until_short_page(
        self, test_settings: Settings, backend: FakeBackend, metrics_service: MetricsService
    ):
        settings = test_settings.model_copy(update={"backend_page_size": 2})
        client = BackendClient(config=settings, metrics_service=metrics_service)
        mount_fake_backend(client, backend)
        for i in range(5):
            backend.insert("devices", device_id=f"dev-{i}")

        rows = client.select_all("devices", order=order_by("device_id"))

        assert [r["device_id"] for r in rows] == [f"dev-{i}" for i in range(5)]
        offsets = [r.url.params.get("offset") for r in backend.requests]
        assert offsets == [None, "2", "4"]

    def test_http_error_maps_to_external_service_exception(
        self, backend_client: BackendClient, backend: FakeBackend
    ):
        backend.fail("devices", 400, 'column "nope" does not exist')

        with pytest.raises(ExternalServiceException) as exc_info:
            backend_client.select("devices")

        assert 'column "nope" does not exist' in exc_info.value.message
        assert exc_info.value.operation == "read devices"

    def test_connect_error_maps_to_service_unavailable(
        self, backend_client: BackendClient, backend: FakeBackend
    ):
        backend.unreachable = True

        with pytest.raises(ServiceUnavailableException):
            backend_client.select("devices")

    def test_timeout_maps_to_service_unavailable(self, backend_client: BackendClient):
        def timeout(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        backend_client._http_client = httpx.Client(transport=httpx.MockTransport(timeout))

        with pytest.raises(ServiceUnavailableException) as exc_info:
            backend_client.select("devices")

        assert "timed out" in exc_info.value.message

    def test_disabled_without_url(self, test_settings: Settings, metrics_service: MetricsService):
        settings = test_settings.model_copy(update={"supabase_url": None})
        client = BackendClient(config=settings, metrics_service=metrics_service)

        assert client.enabled is False
        with pytest.raises(ServiceUnavailableException):
            client.select("devices")
        assert client.ping() is False

    def test_update_returns_matched_rows(self, backend_client: BackendClient, backend: FakeBackend):
        row = backend.insert("device_configs", config_version=2, sensor_address="0")

        rows = backend_client.update(
            "device_configs",
            {"sensor_address": "5"},
            filters={"id": eq(row["id"]), "config_version": eq(2)},
        )

        assert rows[0]["sensor_address"] == "5"
        assert backend.requests[0].method == "PATCH"

    def test_update_without_match_returns_empty(
        self, backend_client: BackendClient, backend: FakeBackend
    ):
        row = backend.insert("device_configs", config_version=2)

        rows = backend_client.update(
            "device_configs", {"config_version": 3}, filters={"id": eq(row["id"]), "config_version": eq(1)}
        )

        assert rows == []
        assert row["config_version"] == 2

    def test_update_and_delete_require_filters(self, backend_client: BackendClient):
        with pytest.raises(ValueError):
            backend_client.update("device_configs", {"sensor_address": "1"}, filters={})
        with pytest.raises(ValueError):
            backend_client.delete("device_configs", filters={})

    def test_insert_returns_stored_row(self, backend_client: BackendClient, backend: FakeBackend):
        row = backend_client.insert("device_configs", {"device_id": "AA"})

        assert row["device_id"] == "AA"
        assert "id" in row
        assert backend.rows("device_configs") == [row]

    def test_ping(self, backend_client: BackendClient, backend: FakeBackend):
        assert backend_client.ping() is True

        backend.fail("devices", 401, "Invalid API key")
        assert backend_client.ping() is False

    def test_records_request_metrics(
        self, backend_client: BackendClient, metrics_service: MetricsService, backend: FakeBackend
    ):
        backend_client.select("devices")
        backend.fail("devices", 500, "boom")
        with pytest.raises(ExternalServiceException):
            backend_client.select("devices")

        counter = metrics_service.backend_requests_total
        assert counter.labels(table="devices", method="GET", status="success")._value.get() == 1
        assert counter.labels(table="devices", method="GET", status="error")._value.get() == 1
