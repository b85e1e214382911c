"""Parameter-name dialects spoken by personal weather stations.

A dialect is a static table mapping the query parameter names a class of
stations sends onto canonical reading fields. Supporting another firmware
family means adding a table here; nothing downstream changes.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Tuple

from models.errors import DialectError
from models.records import (
    FIELDS_BY_NAME,
    INPUT_FIELDS,
    NUMERIC_FIELDS,
    OBSERVED_AT_RAW,
    STATION_KEY,
    FieldSpec,
)


@dataclass(frozen=True)
class Dialect:
    """Named alias table: raw parameter name -> canonical attribute name."""

    name: str
    aliases: Mapping[str, str]
    # dateutc values meaning "use the receipt time"
    now_literals: FrozenSet[str] = frozenset()

    def __post_init__(self) -> None:
        unknown = sorted(
            canonical for canonical in self.aliases.values() if canonical not in FIELDS_BY_NAME
        )
        if unknown:
            raise DialectError(
                f"Dialect {self.name!r} maps onto unknown fields: {', '.join(unknown)}"
            )
        derived = sorted(
            alias
            for alias, canonical in self.aliases.items()
            if FIELDS_BY_NAME[canonical] not in INPUT_FIELDS
        )
        if derived:
            raise DialectError(
                f"Dialect {self.name!r} maps derived fields from input: {', '.join(derived)}"
            )


def _wire_aliases() -> Dict[str, str]:
    return {spec.wire_name: spec.name for spec in NUMERIC_FIELDS}


AMBIENT_WEATHER = Dialect(
    name="ambientweather",
    aliases=MappingProxyType(
        {
            "PASSKEY": STATION_KEY.name,
            "passkey": STATION_KEY.name,
            "dateutc": OBSERVED_AT_RAW.name,
            **_wire_aliases(),
        }
    ),
)

WUNDERGROUND = Dialect(
    name="wunderground",
    aliases=MappingProxyType(
        {
            "ID": STATION_KEY.name,
            "dateutc": OBSERVED_AT_RAW.name,
            "tempf": "temp_outdoor_f",
            "humidity": "humidity_outdoor",
            "windspeedmph": "wind_speed_mph",
            "windgustmph": "wind_gust_mph",
            "winddir": "wind_dir",
            "UV": "uv_index",
            "solarradiation": "solar_radiation",
            "rainin": "rain_hourly_in",
            "dailyrainin": "rain_daily_in",
            "weeklyrainin": "rain_weekly_in",
            "monthlyrainin": "rain_monthly_in",
            "yearlyrainin": "rain_yearly_in",
            "baromin": "barom_rel_in",
            "absbaromin": "barom_abs_in",
            "indoortempf": "temp_indoor_f",
            "indoorhumidity": "humidity_indoor",
        }
    ),
    now_literals=frozenset({"now"}),
)

BUILTIN_DIALECTS: Mapping[str, Dialect] = MappingProxyType(
    {dialect.name: dialect for dialect in (AMBIENT_WEATHER, WUNDERGROUND)}
)


class DialectMapper:
    """Resolves raw parameter names against one or more dialects.

    Lookups are case-sensitive. Dialects may share an alias only when they
    agree on the canonical field it names.
    """

    def __init__(self, dialects: Sequence[Dialect]) -> None:
        if not dialects:
            raise DialectError("At least one dialect must be enabled.")
        self.dialects: Tuple[Dialect, ...] = tuple(dialects)

        table: Dict[str, FieldSpec] = {}
        owners: Dict[str, str] = {}
        ordered: Dict[str, List[str]] = {spec.name: [] for spec in INPUT_FIELDS}
        for dialect in self.dialects:
            for alias, canonical in dialect.aliases.items():
                spec = FIELDS_BY_NAME[canonical]
                existing = table.get(alias)
                if existing is not None and existing != spec:
                    raise DialectError(
                        f"Alias {alias!r} maps to {existing.name!r} in dialect "
                        f"{owners[alias]!r} but to {spec.name!r} in {dialect.name!r}."
                    )
                if existing is None:
                    table[alias] = spec
                    owners[alias] = dialect.name
                    ordered[spec.name].append(alias)

        self._table: Mapping[str, FieldSpec] = MappingProxyType(table)
        self._aliases: Mapping[str, Tuple[str, ...]] = MappingProxyType(
            {name: tuple(aliases) for name, aliases in ordered.items()}
        )

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(dialect.name for dialect in self.dialects)

    @property
    def now_literals(self) -> FrozenSet[str]:
        return frozenset().union(*(dialect.now_literals for dialect in self.dialects))

    def resolve(self, parameter: str) -> Optional[FieldSpec]:
        """Return the canonical field for ``parameter`` or ``None`` if unknown."""
        return self._table.get(parameter)

    def aliases_for(self, spec: FieldSpec) -> Tuple[str, ...]:
        """Aliases that reach ``spec``, in dialect then declaration order."""
        return self._aliases.get(spec.name, ())

    def is_known(self, parameter: str) -> bool:
        return parameter in self._table


def build_mapper(names: Iterable[str]) -> DialectMapper:
    """Build a mapper from built-in dialect names."""
    dialects: List[Dialect] = []
    for name in names:
        key = name.strip().lower()
        dialect = BUILTIN_DIALECTS.get(key)
        if dialect is None:
            known = ", ".join(sorted(BUILTIN_DIALECTS))
            raise DialectError(f"Unknown dialect {name!r}; expected one of: {known}")
        if dialect not in dialects:
            dialects.append(dialect)
    return DialectMapper(dialects)


DEFAULT_MAPPER = DialectMapper([AMBIENT_WEATHER])
