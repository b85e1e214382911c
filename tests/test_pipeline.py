from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone

import pytest

from models.errors import DecodeError, StorageWriteError, TimestampError
from models.records import NUMERIC_FIELDS, FieldKind, TimeSeriesPoint
from services.dialects import build_mapper
from services.pipeline import IngestService, normalize
from storage.memory_store import MemoryPointStore

ARRIVAL = datetime(2024, 6, 1, 8, 30, 15, 500000, tzinfo=timezone.utc)

FULL_REQUEST = {
    "PASSKEY": "8A:3B:11:00:AA:01",
    "stationtype": "AMBWeatherV4.3.4",
    "dateutc": "2024-03-01 12:00:00",
    "tempf": "70.0",
    "humidity": "50",
    "windspeedmph": "3.4",
    "windgustmph": "5.8",
    "maxdailygust": "12.3",
    "winddir": "182",
    "winddir_avg10m": "190",
    "uv": "2",
    "solarradiation": "312.45",
    "hourlyrainin": "0.01",
    "eventrainin": "0.12",
    "dailyrainin": "0.2",
    "weeklyrainin": "1.1",
    "monthlyrainin": "2.35",
    "yearlyrainin": "19.7",
    "battout": "1",
    "battrain": "1",
    "tempinf": "68.0",
    "humidityin": "40",
    "baromrelin": "29.92",
    "baromabsin": "29.1",
    "battin": "1",
}


class FailingWriter:
    name = "failing"

    def __init__(self) -> None:
        self.closed = False

    def write(self, point: TimeSeriesPoint) -> None:
        raise ConnectionError("connection refused")

    def close(self) -> None:
        self.closed = True


def test_full_request_normalizes_into_reading_and_point() -> None:
    result = normalize(FULL_REQUEST, ARRIVAL)

    reading = result.reading
    assert reading.station_key == "8A:3B:11:00:AA:01"
    assert reading.observed_at == datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)
    assert reading.dew_point_outdoor == 52.0
    assert reading.dew_point_indoor == pytest.approx(46.4)

    point = result.point
    assert dict(point.tags) == {"passkey": "8A:3B:11:00:AA:01"}
    assert point.time == reading.observed_at
    assert point.fields["dewpt"] == 52.0
    assert result.unrecognized == ("stationtype",)


def test_numeric_values_survive_the_pipeline_unchanged() -> None:
    point = normalize(FULL_REQUEST, ARRIVAL).point

    for spec in NUMERIC_FIELDS:
        raw = FULL_REQUEST[spec.wire_name]
        expected = int(raw) if spec.kind is FieldKind.int else float(raw)
        assert point.fields[spec.wire_name] == expected


def test_field_name_set_is_independent_of_inputs() -> None:
    full = normalize(FULL_REQUEST, ARRIVAL).point
    empty = normalize({}, ARRIVAL).point

    assert list(full.fields) == list(empty.fields)
    assert all(value == 0 for key, value in empty.fields.items() if key not in {"dewpt", "dewptin"})
    assert empty.fields["dewpt"] == -36.0


def test_missing_date_uses_arrival_truncated_to_seconds() -> None:
    result = normalize({"PASSKEY": "k"}, ARRIVAL)

    assert result.reading.observed_at == ARRIVAL
    assert result.point.time == ARRIVAL.replace(microsecond=0)


def test_decode_failure_produces_nothing() -> None:
    store = MemoryPointStore()
    service = IngestService(writer=store)

    with pytest.raises(DecodeError) as excinfo:
        service.ingest({**FULL_REQUEST, "tempf": "abc"}, ARRIVAL)

    assert excinfo.value.field == "tempf"
    assert store.points() == []


def test_now_date_rejected_by_default_dialect() -> None:
    with pytest.raises(TimestampError) as excinfo:
        normalize({"PASSKEY": "k", "dateutc": "now"}, ARRIVAL)

    assert excinfo.value.field == "dateutc"


def test_now_date_uses_arrival_with_wunderground_enabled() -> None:
    mapper = build_mapper(["ambientweather", "wunderground"])

    result = normalize({"ID": "KXX1", "dateutc": "now"}, ARRIVAL, mapper)

    assert result.reading.observed_at == ARRIVAL


def test_timestamp_failure_produces_nothing() -> None:
    store = MemoryPointStore()
    service = IngestService(writer=store)

    with pytest.raises(TimestampError):
        service.ingest({**FULL_REQUEST, "dateutc": "yesterday"}, ARRIVAL)

    assert store.points() == []


def test_ingest_writes_one_point() -> None:
    store = MemoryPointStore()
    service = IngestService(writer=store)

    result = service.ingest(FULL_REQUEST, ARRIVAL)

    assert store.points() == [result.point]


def test_writer_failure_becomes_storage_error() -> None:
    writer = FailingWriter()
    service = IngestService(writer=writer)

    with pytest.raises(StorageWriteError) as excinfo:
        service.ingest(FULL_REQUEST, ARRIVAL)

    assert excinfo.value.storage == "failing"
    assert isinstance(excinfo.value.__cause__, ConnectionError)

    service.shutdown()
    assert writer.closed is True


def test_concurrent_requests_do_not_interfere() -> None:
    store = MemoryPointStore()
    service = IngestService(writer=store)

    def submit(index: int) -> TimeSeriesPoint:
        params = {
            "PASSKEY": f"station-{index}",
            "tempf": str(50 + index),
            "humidity": "100",
        }
        return service.ingest(params, ARRIVAL + timedelta(seconds=index)).point

    with ThreadPoolExecutor(max_workers=8) as executor:
        points = list(executor.map(submit, range(40)))

    for index, point in enumerate(points):
        assert point.tags["passkey"] == f"station-{index}"
        assert point.fields["tempf"] == float(50 + index)
        assert point.fields["dewpt"] == float(50 + index)
        assert point.time == (ARRIVAL + timedelta(seconds=index)).replace(microsecond=0)

    assert len(store.points()) == 40
