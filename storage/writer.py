"""Point writer contract and backend selection."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Protocol

from models.records import TimeSeriesPoint
from settings import get_settings
from storage.influx import InfluxPointWriter
from storage.memory_store import MemoryPointStore


class PointWriter(Protocol):
    """Anything that can persist a single point synchronously."""

    name: str

    def write(self, point: TimeSeriesPoint) -> None:
        ...

    def close(self) -> None:
        ...


@lru_cache
def build_default_writer() -> PointWriter:
    """Influx writer when ``INFLUXDB_URL`` is configured, in-memory store otherwise."""
    settings = get_settings()
    if settings.influx_url:
        return InfluxPointWriter(
            url=settings.influx_url,
            token=settings.influx_token,
            org=settings.influx_org,
            bucket=settings.influx_bucket,
        )

    path = Path(settings.store_persistence_path) if settings.store_persistence_path else None
    return MemoryPointStore(persistence_path=path)
