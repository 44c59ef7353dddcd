"""Client for the managed backend's auto-generated REST interface.

The backend follows PostgREST conventions: one resource per table under
``/rest/v1/<table>``, horizontal filters as ``column=op.value`` query
parameters, and ``select``, ``order``, ``limit`` and ``offset`` for shaping
results. Filtering, ordering and pagination are delegated to the backend;
this client only builds the parameters and maps failures.
"""

import logging
import time
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

import httpx

from app.consts import PROJECT_NAME
from app.exceptions import ExternalServiceException, ServiceUnavailableException

if TYPE_CHECKING:
    from app.config import Settings
    from app.services.metrics_service import MetricsService

logger = logging.getLogger(__name__)


def _format_value(value: Any) -> str:
    """Render a Python value the way PostgREST expects it in a filter."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def eq(value: Any) -> str:
    """Equality filter (``eq.value``); None becomes ``is.null``."""
    if value is None:
        return is_null()
    return f"eq.{_format_value(value)}"


def gte(value: Any) -> str:
    """Greater-than-or-equal filter."""
    return f"gte.{_format_value(value)}"


def is_null() -> str:
    """IS NULL filter."""
    return "is.null"


def order_by(column: str, descending: bool = False, nulls_first: bool | None = None) -> str:
    """Build an ``order`` parameter value."""
    clause = f"{column}.{'desc' if descending else 'asc'}"
    if nulls_first is True:
        clause += ".nullsfirst"
    elif nulls_first is False:
        clause += ".nullslast"
    return clause


class BackendClient:
    """HTTP client for the managed backend.

    This is a singleton service holding one pooled ``httpx.Client``. Every
    call is a single request; there is no retry or backoff beyond what the
    caller decides to do with the raised exception.
    """

    SERVICE_NAME = "Data backend"

    def __init__(
        self,
        config: "Settings",
        metrics_service: "MetricsService",
    ) -> None:
        """Initialize backend client.

        Args:
            config: Application settings containing backend configuration
            metrics_service: Metrics service for recording requests
        """
        self.config = config
        self.metrics_service = metrics_service
        self.page_size = config.backend_page_size

        # HTTP client for API calls with connection pooling
        self._http_client = httpx.Client(timeout=config.backend_timeout_seconds)

        self.base_url = config.backend_rest_url
        self.enabled = bool(self.base_url and config.supabase_anon_key)

        if self.enabled:
            logger.info("BackendClient initialized with URL: %s", self.base_url)
        else:
            logger.warning("BackendClient disabled - SUPABASE_URL or SUPABASE_ANON_KEY not configured")

    def _headers(self, prefer: str | None = None) -> dict[str, str]:
        """Build authentication and content headers."""
        headers = {
            "apikey": self.config.supabase_anon_key or "",
            "Authorization": f"Bearer {self.config.backend_bearer_token or ''}",
            "Accept": "application/json",
            "User-Agent": PROJECT_NAME,
        }
        if prefer:
            headers["Prefer"] = prefer
        return headers

    def _request(
        self,
        method: str,
        table: str,
        operation: str,
        params: list[tuple[str, str]],
        json: Any = None,
        prefer: str | None = None,
    ) -> Any:
        """Send one request and return the decoded JSON body.

        Raises:
            ServiceUnavailableException: If the backend is not configured or unreachable
            ExternalServiceException: If the backend answers with an error status
        """
        if not self.enabled:
            raise ServiceUnavailableException(self.SERVICE_NAME, "SUPABASE_URL not configured")

        url = f"{self.base_url}/{table}"
        start_time = time.perf_counter()
        status = "success"

        try:
            response = self._http_client.request(
                method,
                url,
                params=params,
                json=json,
                headers=self._headers(prefer),
            )
            response.raise_for_status()

        except httpx.ConnectError as e:
            status = "error"
            logger.error("Backend connection failed: %s", str(e))
            raise ServiceUnavailableException(self.SERVICE_NAME, "Connection failed") from e

        except httpx.TimeoutException as e:
            status = "error"
            logger.error("Backend request timed out: %s", str(e))
            raise ServiceUnavailableException(self.SERVICE_NAME, "Request timed out") from e

        except httpx.HTTPStatusError as e:
            status = "error"
            message = self._error_message(e.response)
            logger.error(
                "Backend returned error %d for %s %s: %s",
                e.response.status_code,
                method,
                table,
                message,
            )
            raise ExternalServiceException(operation, message) from e

        except httpx.HTTPError as e:
            status = "error"
            logger.error("Backend HTTP error: %s", str(e))
            raise ExternalServiceException(operation, str(e)) from e

        finally:
            duration = time.perf_counter() - start_time
            self.metrics_service.record_backend_request(table, method, status, duration)

        if response.status_code == 204 or not response.content:
            return []

        data = response.json()
        logger.debug(
            "%s %s returned %s row(s) in %.3fs",
            method,
            table,
            len(data) if isinstance(data, list) else 1,
            time.perf_counter() - start_time,
        )
        return data

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Extract the upstream error message from a PostgREST error body."""
        try:
            body = response.json()
        except ValueError:
            body = None

        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])

        text = response.text[:500] if response.text else "No body"
        return f"HTTP {response.status_code}: {text}"

    @staticmethod
    def _build_params(
        columns: str,
        filters: Mapping[str, str] | None,
        order: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[tuple[str, str]]:
        params: list[tuple[str, str]] = [("select", columns)]
        if filters:
            params.extend(filters.items())
        if order:
            params.append(("order", order))
        if limit is not None:
            params.append(("limit", str(limit)))
        if offset:
            params.append(("offset", str(offset)))
        return params

    def select(
        self,
        table: str,
        columns: str = "*",
        filters: Mapping[str, str] | None = None,
        order: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[dict[str, Any]]:
        """Read rows from a table.

        Args:
            table: Collection name
            columns: ``select`` projection
            filters: Column to filter expression map (see ``eq``, ``gte``)
            order: ``order`` expression (see ``order_by``)
            limit: Maximum number of rows
            offset: Number of rows to skip

        Returns:
            List of row dicts
        """
        params = self._build_params(columns, filters, order, limit, offset)
        return list(self._request("GET", table, f"read {table}", params))

    def select_all(
        self,
        table: str,
        columns: str = "*",
        filters: Mapping[str, str] | None = None,
        order: str | None = None,
    ) -> list[dict[str, Any]]:
        """Read every matching row, paging past the backend's row cap.

        Requires a deterministic ``order`` so pages do not overlap.
        """
        rows: list[dict[str, Any]] = []
        offset = 0
        while True:
            page = self.select(
                table,
                columns=columns,
                filters=filters,
                order=order,
                limit=self.page_size,
                offset=offset,
            )
            rows.extend(page)
            if len(page) < self.page_size:
                return rows
            offset += self.page_size

    def update(
        self,
        table: str,
        values: Mapping[str, Any],
        filters: Mapping[str, str],
    ) -> list[dict[str, Any]]:
        """Update matching rows in one statement and return them.

        An empty result means no row matched the filters.
        """
        if not filters:
            raise ValueError("update requires at least one filter")
        params = list(filters.items())
        return list(
            self._request(
                "PATCH",
                table,
                f"update {table}",
                params,
                json=dict(values),
                prefer="return=representation",
            )
        )

    def insert(self, table: str, values: Mapping[str, Any]) -> dict[str, Any]:
        """Insert one row and return it as stored."""
        rows = self._request(
            "POST",
            table,
            f"insert into {table}",
            [],
            json=dict(values),
            prefer="return=representation",
        )
        if not rows:
            raise ExternalServiceException(f"insert into {table}", "no row returned")
        return dict(rows[0])

    def delete(self, table: str, filters: Mapping[str, str]) -> list[dict[str, Any]]:
        """Delete matching rows and return them."""
        if not filters:
            raise ValueError("delete requires at least one filter")
        return list(
            self._request(
                "DELETE",
                table,
                f"delete from {table}",
                list(filters.items()),
                prefer="return=representation",
            )
        )

    def ping(self, table: str = "devices") -> bool:
        """Check that the backend answers an authenticated read."""
        try:
            self.select(table, columns="id", limit=1)
            return True
        except (ServiceUnavailableException, ExternalServiceException):
            return False

    def close(self) -> None:
        """Release pooled connections."""
        self._http_client.close()
