"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, Tuple, Union

Number = Union[int, float]

MEASUREMENT = "weather"
STATION_TAG = "passkey"


class FieldKind(str, Enum):
    """Primitive type a canonical field decodes to."""

    string = "string"
    float = "float"
    int = "int"


@dataclass(frozen=True)
class FieldSpec:
    """A canonical reading field: attribute name, wire name and kind."""

    name: str
    wire_name: str
    kind: FieldKind

    @property
    def is_numeric(self) -> bool:
        return self.kind is not FieldKind.string


STATION_KEY = FieldSpec("station_key", "passkey", FieldKind.string)
OBSERVED_AT_RAW = FieldSpec("observed_at_raw", "dateutc", FieldKind.string)

# Canonical order. Builders iterate this table so decode errors are reproducible.
NUMERIC_FIELDS: Tuple[FieldSpec, ...] = (
    FieldSpec("temp_outdoor_f", "tempf", FieldKind.float),
    FieldSpec("humidity_outdoor", "humidity", FieldKind.int),
    FieldSpec("wind_speed_mph", "windspeedmph", FieldKind.float),
    FieldSpec("wind_gust_mph", "windgustmph", FieldKind.float),
    FieldSpec("max_daily_gust_mph", "maxdailygust", FieldKind.float),
    FieldSpec("wind_dir", "winddir", FieldKind.int),
    FieldSpec("wind_dir_avg_10m", "winddir_avg10m", FieldKind.int),
    FieldSpec("uv_index", "uv", FieldKind.int),
    FieldSpec("solar_radiation", "solarradiation", FieldKind.float),
    FieldSpec("rain_hourly_in", "hourlyrainin", FieldKind.float),
    FieldSpec("rain_event_in", "eventrainin", FieldKind.float),
    FieldSpec("rain_daily_in", "dailyrainin", FieldKind.float),
    FieldSpec("rain_weekly_in", "weeklyrainin", FieldKind.float),
    FieldSpec("rain_monthly_in", "monthlyrainin", FieldKind.float),
    FieldSpec("rain_yearly_in", "yearlyrainin", FieldKind.float),
    FieldSpec("batt_out", "battout", FieldKind.int),
    FieldSpec("batt_rain", "battrain", FieldKind.int),
    FieldSpec("temp_indoor_f", "tempinf", FieldKind.float),
    FieldSpec("humidity_indoor", "humidityin", FieldKind.int),
    FieldSpec("barom_rel_in", "baromrelin", FieldKind.float),
    FieldSpec("barom_abs_in", "baromabsin", FieldKind.float),
    FieldSpec("batt_in", "battin", FieldKind.int),
)

DERIVED_FIELDS: Tuple[FieldSpec, ...] = (
    FieldSpec("dew_point_outdoor", "dewpt", FieldKind.float),
    FieldSpec("dew_point_indoor", "dewptin", FieldKind.float),
)

INPUT_FIELDS: Tuple[FieldSpec, ...] = (STATION_KEY, OBSERVED_AT_RAW) + NUMERIC_FIELDS

FIELDS_BY_NAME: Mapping[str, FieldSpec] = MappingProxyType(
    {spec.name: spec for spec in INPUT_FIELDS + DERIVED_FIELDS}
)


def zero_for(spec: FieldSpec) -> Number:
    return 0 if spec.kind is FieldKind.int else 0.0


@dataclass(frozen=True)
class Reading:
    """Canonical, fully decoded station observation."""

    station_key: str
    observed_at: datetime
    temp_outdoor_f: float = 0.0
    humidity_outdoor: int = 0
    wind_speed_mph: float = 0.0
    wind_gust_mph: float = 0.0
    max_daily_gust_mph: float = 0.0
    wind_dir: int = 0
    wind_dir_avg_10m: int = 0
    uv_index: int = 0
    solar_radiation: float = 0.0
    rain_hourly_in: float = 0.0
    rain_event_in: float = 0.0
    rain_daily_in: float = 0.0
    rain_weekly_in: float = 0.0
    rain_monthly_in: float = 0.0
    rain_yearly_in: float = 0.0
    batt_out: int = 0
    batt_rain: int = 0
    temp_indoor_f: float = 0.0
    humidity_indoor: int = 0
    barom_rel_in: float = 0.0
    barom_abs_in: float = 0.0
    batt_in: int = 0
    dew_point_outdoor: float = 0.0
    dew_point_indoor: float = 0.0

    def numeric_values(self) -> Dict[str, Number]:
        """Numeric and derived values keyed by wire name, in canonical order."""
        return {
            spec.wire_name: getattr(self, spec.name)
            for spec in NUMERIC_FIELDS + DERIVED_FIELDS
        }


@dataclass(frozen=True)
class TimeSeriesPoint:
    """Tagged, timestamped record handed to the time-series store."""

    tags: Mapping[str, str]
    fields: Mapping[str, Number]
    time: datetime
    measurement: str = MEASUREMENT

    def as_dict(self) -> Dict[str, object]:
        return {
            "measurement": self.measurement,
            "tags": dict(self.tags),
            "fields": dict(self.fields),
            "time": self.time.isoformat().replace("+00:00", "Z"),
        }


@dataclass(frozen=True)
class NormalizedReading:
    """Result of a successful pipeline run."""

    reading: Reading
    point: TimeSeriesPoint
    unrecognized: Tuple[str, ...] = ()
