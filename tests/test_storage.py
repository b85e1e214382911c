from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List

import pytest
from influxdb_client import Point, WritePrecision

from models.records import Reading
from services.points import build_point
from storage.influx import InfluxPointWriter, to_influx_point
from storage.memory_store import MemoryPointStore
from storage.writer import build_default_writer
from settings import get_settings


def _point(station_key: str = "ABC123"):
    reading = Reading(
        station_key=station_key,
        observed_at=datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc),
        temp_outdoor_f=70.5,
        humidity_outdoor=50,
        dew_point_outdoor=52.5,
    )
    return build_point(reading)


class StubWriteApi:
    def __init__(self) -> None:
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    def write(self, **kwargs: Any) -> None:
        self.calls.append(kwargs)

    def close(self) -> None:
        self.closed = True


class StubInfluxClient:
    def __init__(self) -> None:
        self.write_api_instance = StubWriteApi()
        self.write_options: Any = None
        self.closed = False

    def write_api(self, write_options: Any = None) -> StubWriteApi:
        self.write_options = write_options
        return self.write_api_instance

    def close(self) -> None:
        self.closed = True


def test_memory_store_records_and_persists(tmp_path: Path) -> None:
    path = tmp_path / "points" / "points.jsonl"
    store = MemoryPointStore(persistence_path=path)

    store.write(_point("one"))
    store.write(_point("two"))

    assert [point.tags["passkey"] for point in store.points()] == ["one", "two"]
    lines = path.read_text().splitlines()
    assert len(lines) == 2
    payload = json.loads(lines[0])
    assert payload["measurement"] == "weather"
    assert payload["tags"] == {"passkey": "one"}
    assert payload["fields"]["humidity"] == 50
    assert payload["time"] == "2024-03-01T12:00:00Z"


def test_memory_store_rejects_writes_after_close() -> None:
    store = MemoryPointStore()
    store.close()

    assert store.closed is True
    with pytest.raises(RuntimeError):
        store.write(_point())


def test_to_influx_point_line_protocol() -> None:
    influx_point = to_influx_point(_point())

    assert isinstance(influx_point, Point)
    line = influx_point.to_line_protocol()
    assert line.startswith("weather,passkey=ABC123 ")
    assert "humidity=50i" in line
    assert "passkey=" not in line.split(" ")[1]
    assert line.endswith(" 1709294400")


def test_influx_writer_uses_bucket_org_and_second_precision() -> None:
    client = StubInfluxClient()
    writer = InfluxPointWriter(
        url="http://influx:8086",
        token="token",
        org="home",
        bucket="weather",
        client=client,  # type: ignore[arg-type]
    )

    writer.write(_point())

    (call,) = client.write_api_instance.calls
    assert call["bucket"] == "weather"
    assert call["org"] == "home"
    assert call["write_precision"] == WritePrecision.S
    assert isinstance(call["record"], Point)

    writer.close()
    assert client.write_api_instance.closed is True
    assert client.closed is True


def test_default_writer_is_memory_without_influx_url(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.delenv("INFLUXDB_URL", raising=False)
    monkeypatch.setenv("POINT_STORE_PATH", str(tmp_path / "points.jsonl"))
    get_settings.cache_clear()
    build_default_writer.cache_clear()

    try:
        writer = build_default_writer()
        assert isinstance(writer, MemoryPointStore)
        assert writer.persistence_path == tmp_path / "points.jsonl"
    finally:
        build_default_writer.cache_clear()
        get_settings.cache_clear()


def test_default_writer_is_influx_with_url(monkeypatch) -> None:
    monkeypatch.setenv("INFLUXDB_URL", "http://influx:8086")
    monkeypatch.setenv("INFLUXDB_ORG", "home")
    monkeypatch.setenv("INFLUXDB_BUCKET", "pws")
    get_settings.cache_clear()
    build_default_writer.cache_clear()

    try:
        writer = build_default_writer()
        assert isinstance(writer, InfluxPointWriter)
        assert writer.bucket == "pws"
        assert writer.org == "home"
        writer.close()
    finally:
        build_default_writer.cache_clear()
        get_settings.cache_clear()
