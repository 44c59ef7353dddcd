"""Firmware release descriptor from the firmware_versions collection."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


def encode_version_code(version: str) -> int | None:
    """Encode a ``major.minor.patch`` string as major*10000 + minor*100 + patch.

    Returns None when the string is not a three-part numeric version.
    """
    parts = version.strip().lstrip("v").split(".")
    if len(parts) != 3 or not all(part.isdigit() for part in parts):
        return None
    major, minor, patch = (int(part) for part in parts)
    return major * 10000 + minor * 100 + patch


class FirmwareVersion(BaseModel):
    """A firmware release.

    Records are created by operators uploading firmware and are only read
    by the dashboard. ``rollout_percentage`` is enforced by the backend.
    """

    model_config = ConfigDict(extra="ignore")

    id: str
    version: str
    version_code: int
    firmware_url: str
    firmware_size: int
    firmware_checksum: str
    release_notes: str | None = None
    min_battery_voltage: float | None = None
    requires_version: str | None = None
    rollout_percentage: int = 0
    is_stable: bool = False
    is_mandatory: bool = False
    created_at: datetime | None = None
    released_at: datetime | None = None

    @property
    def version_code_matches(self) -> bool:
        """True when ``version_code`` agrees with the semantic version string."""
        return encode_version_code(self.version) == self.version_code
