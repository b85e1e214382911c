"""Resolution of the station-supplied observation time."""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import AbstractSet, Optional

from models.errors import TimestampError

_ISO_RE = re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z", re.ASCII)
_ISO_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def ensure_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def parse_station_date(raw: str) -> datetime:
    """Parse ``"YYYY-MM-DD HH:MM:SS"`` (always UTC) into an aware datetime."""
    candidate = raw.strip().replace(" ", "T", 1) + "Z"
    if not _ISO_RE.fullmatch(candidate):
        raise TimestampError(raw)
    try:
        parsed = datetime.strptime(candidate, _ISO_FORMAT)
    except ValueError as exc:
        raise TimestampError(raw) from exc
    return parsed.replace(tzinfo=timezone.utc)


def resolve_timestamp(
    raw: Optional[str],
    arrival: datetime,
    now_literals: AbstractSet[str] = frozenset(),
) -> datetime:
    """Return the observation instant, falling back to ``arrival`` only when absent.

    ``now_literals`` are dialect-specific values (Wunderground's ``now``) that
    also mean the receipt time. Any other present but malformed value raises
    :class:`~models.errors.TimestampError`.
    """
    if raw is None or raw == "" or raw in now_literals:
        return ensure_utc(arrival)
    return parse_station_date(raw)
