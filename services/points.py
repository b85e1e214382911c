"""Assembly of time-series points from readings."""

from __future__ import annotations

from types import MappingProxyType

from models.records import STATION_TAG, Reading, TimeSeriesPoint


def build_point(reading: Reading) -> TimeSeriesPoint:
    """Tag by station key; one field per numeric and derived attribute.

    The station key is never written as a field. Time is truncated to whole
    seconds to match the store's write precision.
    """
    return TimeSeriesPoint(
        tags=MappingProxyType({STATION_TAG: reading.station_key}),
        fields=MappingProxyType(reading.numeric_values()),
        time=reading.observed_at.replace(microsecond=0),
    )
