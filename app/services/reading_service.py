"""Sensor reading queries and history window handling."""

import logging
import math
import re
import time
from typing import TYPE_CHECKING

from app.models.sensor_reading import SensorReading
from app.services.backend_client import eq, gte, order_by

if TYPE_CHECKING:
    from app.services.backend_client import BackendClient

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_HOURS = 24
MIN_HISTORY_HOURS = 1
# 30 days
MAX_HISTORY_HOURS = 720

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def clamp_hours(hours: int) -> int:
    """Clamp a lookback window to [MIN_HISTORY_HOURS, MAX_HISTORY_HOURS]."""
    return min(max(hours, MIN_HISTORY_HOURS), MAX_HISTORY_HOURS)


def parse_hours(raw: str | None, default: int = DEFAULT_HISTORY_HOURS) -> int:
    """Parse an ``hours`` query value and clamp it.

    Leading digits are used ("12h" is 12). Missing or unparseable input
    falls back to ``default``.
    """
    if raw is None:
        return clamp_hours(default)
    match = _LEADING_INT.match(raw)
    if match is None:
        return clamp_hours(default)
    return clamp_hours(int(match.group(1)))


def history_cutoff(hours: int, now: float) -> int:
    """First Unix second inside a window of ``hours`` ending at ``now``.

    Timestamps are whole seconds, so rounding the cutoff up keeps every
    returned reading at or after ``now - hours * 3600``.
    """
    return math.ceil(now - hours * 3600)


class ReadingService:
    """Service for querying sensor readings.

    Readings are immutable and written by devices; this service only reads.
    """

    TABLE = "sensor_readings"

    def __init__(self, backend_client: "BackendClient") -> None:
        """Initialize service with the backend client.

        Args:
            backend_client: Client for the managed backend
        """
        self.backend_client = backend_client

    def list_readings(
        self, device_id: str, hours: int = DEFAULT_HISTORY_HOURS, now: float | None = None
    ) -> list[SensorReading]:
        """List a device's readings inside a lookback window, oldest first.

        Args:
            device_id: Device hardware ID
            hours: Lookback window; clamped to [1, 720]
            now: Reference time in Unix seconds (defaults to the current time)

        Returns:
            Readings with ``timestamp >= now - hours * 3600`` in ascending order
        """
        clamped = clamp_hours(hours)
        reference = time.time() if now is None else now
        cutoff = history_cutoff(clamped, reference)

        rows = self.backend_client.select_all(
            self.TABLE,
            filters={"device_id": eq(device_id), "timestamp": gte(cutoff)},
            order=order_by("timestamp"),
        )

        logger.debug(
            "Fetched %d readings for %s over the last %dh", len(rows), device_id, clamped
        )
        return [SensorReading.model_validate(row) for row in rows]

    def get_latest_reading(self, device_id: str) -> SensorReading | None:
        """Get the most recent reading of a device, or None if it has none."""
        rows = self.backend_client.select(
            self.TABLE,
            filters={"device_id": eq(device_id)},
            order=order_by("timestamp", descending=True),
            limit=1,
        )
        if not rows:
            return None
        return SensorReading.model_validate(rows[0])

    def list_recent_readings(self, limit: int) -> list[SensorReading]:
        """List the newest readings across the whole fleet, newest first."""
        rows = self.backend_client.select(
            self.TABLE,
            order=order_by("timestamp", descending=True),
            limit=limit,
        )
        return [SensorReading.model_validate(row) for row in rows]
