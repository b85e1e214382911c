"""Request-scoped normalization pipeline and the ingest service around it."""

from __future__ import annotations

import logging
from datetime import datetime
from functools import lru_cache
from typing import Optional

from models.errors import StorageWriteError
from models.records import NormalizedReading, Reading
from services.dialects import DEFAULT_MAPPER, DialectMapper, build_mapper
from services.metrics import dew_points
from services.points import build_point
from services.reading_builder import RawParams, build_draft
from services.timestamps import resolve_timestamp
from settings import get_settings
from storage.writer import PointWriter, build_default_writer

logger = logging.getLogger(__name__)


def normalize(
    params: RawParams,
    arrival: datetime,
    mapper: DialectMapper = DEFAULT_MAPPER,
) -> NormalizedReading:
    """Run every stage for one request.

    Pure: no I/O and no state kept between calls. Raises a
    :class:`~models.errors.PipelineError` subclass on the first bad input.
    """
    draft = build_draft(params, mapper)
    observed_at = resolve_timestamp(draft.observed_at_raw, arrival, mapper.now_literals)
    dew_point_outdoor, dew_point_indoor = dew_points(draft)
    reading = Reading(
        station_key=draft.station_key,
        observed_at=observed_at,
        dew_point_outdoor=dew_point_outdoor,
        dew_point_indoor=dew_point_indoor,
        **draft.values,
    )
    return NormalizedReading(
        reading=reading,
        point=build_point(reading),
        unrecognized=draft.unrecognized,
    )


class IngestService:
    """Normalizes station requests and hands the resulting point to a writer."""

    def __init__(self, writer: PointWriter, mapper: DialectMapper = DEFAULT_MAPPER) -> None:
        self.writer = writer
        self.mapper = mapper

    def ingest(self, params: RawParams, arrival: datetime) -> NormalizedReading:
        """Normalize and write one reading.

        Client errors propagate unchanged; writer failures are wrapped in
        :class:`~models.errors.StorageWriteError` and never retried here.
        """
        result = normalize(params, arrival, self.mapper)
        point = result.point
        try:
            self.writer.write(point)
        except Exception as exc:
            logger.exception(
                "Failed to write point",
                extra={"passkey": point.tags.get("passkey"), "storage": self.writer.name},
            )
            raise StorageWriteError(
                f"Failed to write point to {self.writer.name}: {exc}",
                storage=self.writer.name,
            ) from exc

        logger.info(
            "Data processed successfully",
            extra={
                "passkey": point.tags.get("passkey"),
                "observed_at": point.time.isoformat(),
                "storage": self.writer.name,
            },
        )
        return result

    def shutdown(self) -> None:
        """Release writer resources during application shutdown."""
        self.writer.close()


@lru_cache
def build_default_service(writer: Optional[PointWriter] = None) -> IngestService:
    """Factory that wires the service from settings."""
    settings = get_settings()
    mapper = build_mapper(settings.dialects)
    return IngestService(writer=writer or build_default_writer(), mapper=mapper)
