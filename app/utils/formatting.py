"""Display formatting for dashboard view models.

Every function here is total: null and unrecognised inputs map to a
defined display value. Datetimes without tzinfo are treated as UTC.
"""

import math
from datetime import UTC, datetime

from app.models.device import DeviceStatus, MeshRole

NEVER = "Never"
NOT_AVAILABLE = "N/A"

STATUS_COLORS = {
    DeviceStatus.ONLINE: "bg-green-500",
    DeviceStatus.OFFLINE: "bg-gray-400",
    DeviceStatus.UPDATING: "bg-blue-500",
    DeviceStatus.ERROR: "bg-red-500",
}
DEFAULT_STATUS_COLOR = "bg-gray-400"

MESH_ROLE_LABELS = {
    MeshRole.GATEWAY: "Gateway",
    MeshRole.RELAY: "Relay",
    MeshRole.DIRECT: "Direct",
    MeshRole.UNKNOWN: "Unknown",
}
MESH_ROLE_COLORS = {
    MeshRole.GATEWAY: "bg-purple-500",
    MeshRole.RELAY: "bg-blue-500",
    MeshRole.DIRECT: "bg-green-500",
    MeshRole.UNKNOWN: "bg-gray-400",
}

# (lower bound in dBm, quality), best first; bounds are inclusive
RSSI_QUALITY_THRESHOLDS = (
    (-50, "Excellent"),
    (-60, "Good"),
    (-70, "Fair"),
)


def utcnow() -> datetime:
    return datetime.now(UTC)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def format_date(value: datetime) -> str:
    """Format as e.g. ``Oct 19, 2026``."""
    value = _as_utc(value)
    return f"{value:%b} {value.day}, {value.year}"


def format_datetime(value: datetime) -> str:
    """Format as e.g. ``Oct 19, 2026, 3:05 PM``."""
    value = _as_utc(value)
    hour = value.hour % 12 or 12
    return f"{format_date(value)}, {hour}:{value:%M} {value:%p}"


def format_relative_time(value: datetime | None, now: datetime | None = None) -> str:
    """Describe how long ago ``value`` was.

    Buckets: under a minute "just now", then whole minutes, hours and days
    up to a week, then the calendar date. Future times read "just now".
    """
    if value is None:
        return NEVER

    reference = _as_utc(now) if now is not None else utcnow()
    diff_sec = math.floor((reference - _as_utc(value)).total_seconds())
    diff_min = diff_sec // 60
    diff_hour = diff_min // 60
    diff_day = diff_hour // 24

    if diff_sec < 60:
        return "just now"
    if diff_min < 60:
        return f"{diff_min}m ago"
    if diff_hour < 24:
        return f"{diff_hour}h ago"
    if diff_day < 7:
        return f"{diff_day}d ago"
    return format_date(value)


def get_status_color(status: str | None) -> str:
    """Badge colour class for a device status."""
    try:
        return STATUS_COLORS.get(DeviceStatus(status), DEFAULT_STATUS_COLOR)
    except ValueError:
        return DEFAULT_STATUS_COLOR


def get_rssi_quality(rssi: int | None) -> str:
    """Bucket a Wi-Fi RSSI reading into a signal quality label."""
    if rssi is None:
        return "Unknown"
    for lower_bound, quality in RSSI_QUALITY_THRESHOLDS:
        if rssi >= lower_bound:
            return quality
    return "Poor"


def format_signal(rssi: int | None) -> str:
    if rssi is None:
        return NOT_AVAILABLE
    return f"{rssi} dBm"


def _mesh_role(role: str | None) -> MeshRole:
    try:
        return MeshRole(role)
    except ValueError:
        return MeshRole.UNKNOWN


def get_mesh_role_label(role: str | None) -> str:
    return MESH_ROLE_LABELS[_mesh_role(role)]


def get_mesh_role_color(role: str | None) -> str:
    return MESH_ROLE_COLORS[_mesh_role(role)]


def format_success_rate(successful: int, failed: int, decimals: int = 0) -> str:
    """Upload success percentage, or N/A when nothing was uploaded."""
    total = successful + failed
    if total <= 0:
        return NOT_AVAILABLE
    return f"{successful / total * 100:.{decimals}f}%"


def format_firmware_size(size_bytes: int) -> str:
    return f"{size_bytes / 1024:.0f} KB"


def format_release(released_at: datetime | None, now: datetime | None = None) -> str:
    if released_at is None:
        return "Not released"
    return f"Released {format_relative_time(released_at, now)}"


def format_enabled(flag: bool) -> str:
    return "On" if flag else "Off"
