"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, Union

from pydantic import BaseModel, Field

from models.records import TimeSeriesPoint


class HealthResponse(BaseModel):
    """Liveness payload including the active storage backend."""

    status: str = "ok"
    storage: str = Field(..., description="Name of the configured point writer.")
    dialects: list[str] = Field(default_factory=list)


class PointPayload(BaseModel):
    """JSON rendering of a time-series point."""

    measurement: str
    tags: Dict[str, str]
    fields: Dict[str, Union[int, float]]
    time: datetime

    @classmethod
    def from_point(cls, point: TimeSeriesPoint) -> "PointPayload":
        return cls(
            measurement=point.measurement,
            tags=dict(point.tags),
            fields=dict(point.fields),
            time=point.time,
        )
