"""Chart data builders for depth profiles and reading history."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from app.exceptions import ValidationException
from app.models.sensor_reading import NUM_DEPTH_LEVELS, SensorReading, depth_label


class MetricType(StrEnum):
    MOISTURE = "moisture"
    TEMPERATURE = "temperature"
    SALINITY = "salinity"


@dataclass(frozen=True)
class MetricConfig:
    """How a metric is read from a reading and displayed."""

    key: str
    levels_key: str
    label: str
    unit: str
    decimals: int
    color: str


METRIC_CONFIG = {
    MetricType.MOISTURE: MetricConfig(
        key="soil_moisture",
        levels_key="moisture_levels",
        label="Moisture",
        unit="%",
        decimals=1,
        color="#2563eb",
    ),
    MetricType.TEMPERATURE: MetricConfig(
        key="soil_temperature",
        levels_key="temperature_levels",
        label="Temperature",
        unit="°C",
        decimals=1,
        color="#ea580c",
    ),
    MetricType.SALINITY: MetricConfig(
        key="electrical_conductivity",
        levels_key="salinity_levels",
        label="Salinity",
        unit=" dS/m",
        decimals=3,
        color="#16a34a",
    ),
}

# Line colours for per-level series, shallowest first
LEVEL_SERIES_COLORS = (
    "#0ea5e9",
    "#06b6d4",
    "#14b8a6",
    "#10b981",
    "#22c55e",
    "#84cc16",
    "#eab308",
    "#f59e0b",
    "#f97316",
    "#ef4444",
    "#ec4899",
    "#a855f7",
)

AVERAGE_SERIES_KEY = "average"
SCALAR_SERIES_KEY = "value"

# Selector value -> lookback hours
TIME_RANGES = {
    "1h": 1,
    "6h": 6,
    "24h": 24,
    "7d": 168,
    "30d": 720,
}
DEFAULT_TIME_RANGE = "24h"


def hours_for_range(time_range: str | None) -> int:
    """Lookback hours for a selector value; unknown values mean 24h."""
    return TIME_RANGES.get(time_range or "", TIME_RANGES[DEFAULT_TIME_RANGE])


def parse_metric(raw: str | None) -> MetricType:
    """Parse a metric name from a request, defaulting to moisture."""
    if not raw:
        return MetricType.MOISTURE
    try:
        return MetricType(raw.strip().lower())
    except ValueError as e:
        allowed = ", ".join(m.value for m in MetricType)
        raise ValidationException(f"Unknown metric '{raw}', expected one of: {allowed}") from e


def parse_levels(raw: str | None) -> list[int]:
    """Parse a comma separated list of depth indices ("0,3,11").

    Duplicates are dropped and the result is sorted shallowest first.
    """
    if not raw or not raw.strip():
        return []

    levels: set[int] = set()
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        if not part.isdigit() or int(part) >= NUM_DEPTH_LEVELS:
            raise ValidationException(
                f"Invalid depth level '{part}', expected 0-{NUM_DEPTH_LEVELS - 1}"
            )
        levels.add(int(part))
    return sorted(levels)


def _clamp01(value: float) -> float:
    return min(max(value, 0.0), 1.0)


def _num(value: float) -> str:
    return f"{round(value, 2):g}"


def depth_color(value: float, metric: MetricType) -> str:
    """Colour for one depth value.

    Moisture is a blue lightness ramp over 0-50 %, temperature a blue to red
    hue ramp over 10-40 °C and salinity a green lightness ramp over 0-5 dS/m.
    """
    if metric == MetricType.MOISTURE:
        lightness = 70 - _clamp01(value / 50) * 40
        return f"hsl(210, 100%, {_num(lightness)}%)"
    if metric == MetricType.TEMPERATURE:
        hue = (1 - _clamp01((value - 10) / 30)) * 240
        return f"hsl({_num(hue)}, 70%, 50%)"
    lightness = 70 - _clamp01(value / 5) * 40
    return f"hsl(120, 60%, {_num(lightness)}%)"


def format_metric_value(value: float | None, metric: MetricType) -> str:
    """Value with the metric's precision and unit, e.g. ``23.5%``."""
    if value is None:
        return "N/A"
    config = METRIC_CONFIG[metric]
    return f"{value:.{config.decimals}f}{config.unit}"


def depth_profile(values: Sequence[float], metric: MetricType) -> list[dict[str, Any]]:
    """One bar per depth level, shallowest first."""
    return [
        {
            "level": index,
            "depth": depth_label(index),
            "value": value,
            "color": depth_color(value, metric),
            "display": format_metric_value(value, metric),
        }
        for index, value in enumerate(values)
    ]


def _level_value(reading: SensorReading, levels_key: str, level: int) -> float | None:
    values = getattr(reading, levels_key)
    if level < len(values):
        return values[level]
    return None


def time_series(
    readings: Iterable[SensorReading],
    metric: MetricType,
    levels: Sequence[int] = (),
) -> dict[str, Any]:
    """Build area/line chart data from readings in time order.

    With depth levels selected there is one series per level plus an
    average series across the selected levels at each timestamp. Without
    levels there is a single series of the reading's scalar metric.
    Timestamps are milliseconds.
    """
    config = METRIC_CONFIG[metric]
    readings = list(readings)
    series: list[dict[str, Any]] = []

    if not levels:
        series.append({
            "key": SCALAR_SERIES_KEY,
            "label": config.label,
            "color": config.color,
            "points": [
                {"timestamp": reading.timestamp * 1000, "value": getattr(reading, config.key)}
                for reading in readings
            ],
        })
    else:
        average_points = []
        level_points: dict[int, list[dict[str, Any]]] = {level: [] for level in levels}

        for reading in readings:
            timestamp_ms = reading.timestamp * 1000
            present = []
            for level in levels:
                value = _level_value(reading, config.levels_key, level)
                if value is None:
                    continue
                level_points[level].append({"timestamp": timestamp_ms, "value": value})
                present.append(value)
            if present:
                average_points.append(
                    {"timestamp": timestamp_ms, "value": sum(present) / len(present)}
                )

        for level in levels:
            series.append({
                "key": f"level_{level}",
                "label": depth_label(level),
                "color": LEVEL_SERIES_COLORS[level % len(LEVEL_SERIES_COLORS)],
                "points": level_points[level],
            })
        series.append({
            "key": AVERAGE_SERIES_KEY,
            "label": f"Average {config.label}",
            "color": config.color,
            "points": average_points,
        })

    return {
        "metric": metric.value,
        "label": config.label,
        "unit": config.unit,
        "levels": list(levels),
        "series": series,
    }
