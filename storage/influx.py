"""InfluxDB 2.x point writer."""

from __future__ import annotations

from typing import Any, Optional

from influxdb_client import InfluxDBClient, Point, WritePrecision
from influxdb_client.client.write_api import SYNCHRONOUS

from models.records import TimeSeriesPoint


def to_influx_point(point: TimeSeriesPoint) -> Point:
    influx_point = Point(point.measurement)
    for key, value in point.tags.items():
        influx_point = influx_point.tag(key, value)
    for key, value in point.fields.items():
        influx_point = influx_point.field(key, value)
    return influx_point.time(point.time, WritePrecision.S)


class InfluxPointWriter:
    """Writes points one at a time through the blocking write API."""

    name = "influxdb"

    def __init__(
        self,
        url: str,
        token: str,
        org: str,
        bucket: str,
        client: Optional[InfluxDBClient] = None,
    ) -> None:
        self.url = url
        self.org = org
        self.bucket = bucket
        self._client = client or InfluxDBClient(url=url, token=token, org=org)
        self._write_api: Any = self._client.write_api(write_options=SYNCHRONOUS)

    def write(self, point: TimeSeriesPoint) -> None:
        self._write_api.write(
            bucket=self.bucket,
            org=self.org,
            record=to_influx_point(point),
            write_precision=WritePrecision.S,
        )

    def close(self) -> None:
        self._write_api.close()
        self._client.close()
