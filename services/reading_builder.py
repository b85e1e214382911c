"""Turns a raw query-parameter multimap into a decoded reading draft."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Sequence, Tuple, Union

from models.records import NUMERIC_FIELDS, OBSERVED_AT_RAW, STATION_KEY, Number, zero_for
from services.decoder import decode_value
from services.dialects import DEFAULT_MAPPER, DialectMapper

logger = logging.getLogger(__name__)

RawParams = Mapping[str, Union[str, Sequence[str]]]


@dataclass(frozen=True)
class ReadingDraft:
    """Decoded station values before timestamp resolution and derived metrics."""

    station_key: str
    observed_at_raw: Optional[str]
    values: Mapping[str, Number]
    unrecognized: Tuple[str, ...] = ()

    def value(self, name: str) -> Number:
        return self.values[name]


def first_value(value: Union[str, Sequence[str], None]) -> Optional[str]:
    """First value of a multimap entry; repeated parameters beyond it are ignored."""
    if value is None:
        return None
    if isinstance(value, str):
        return value
    for item in value:
        return item
    return None


def _lookup(params: RawParams, aliases: Sequence[str]) -> Tuple[Optional[str], Optional[str]]:
    for alias in aliases:
        raw = first_value(params.get(alias))
        # stations send "tempf=" for disconnected sensors
        if raw is None or raw == "":
            continue
        return alias, raw
    return None, None


def build_draft(params: RawParams, mapper: DialectMapper = DEFAULT_MAPPER) -> ReadingDraft:
    """Decode every canonical field from ``params``.

    Fields are visited in canonical order and the first malformed value raises
    :class:`~models.errors.DecodeError`. Absent numeric fields decode to zero.
    """
    _, station_key = _lookup(params, mapper.aliases_for(STATION_KEY))
    _, observed_at_raw = _lookup(params, mapper.aliases_for(OBSERVED_AT_RAW))

    values = {}
    for spec in NUMERIC_FIELDS:
        alias, raw = _lookup(params, mapper.aliases_for(spec))
        if alias is None or raw is None:
            values[spec.name] = zero_for(spec)
            continue
        values[spec.name] = decode_value(alias, raw, spec.kind)

    unrecognized = tuple(sorted(name for name in params if not mapper.is_known(name)))
    if unrecognized:
        logger.debug(
            "Ignoring unrecognized parameters: %s",
            ", ".join(unrecognized),
            extra={"passkey": station_key},
        )

    return ReadingDraft(
        station_key=station_key or "",
        observed_at_raw=observed_at_raw,
        values=MappingProxyType(values),
        unrecognized=unrecognized,
    )
