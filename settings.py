from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Tuple


_INFLUX_URL_ENV = "INFLUXDB_URL"
_INFLUX_TOKEN_ENV = "INFLUXDB_TOKEN"
_INFLUX_ORG_ENV = "INFLUXDB_ORG"
_INFLUX_BUCKET_ENV = "INFLUXDB_BUCKET"
_DIALECTS_ENV = "PWS_DIALECTS"
_STORE_PATH_ENV = "POINT_STORE_PATH"
_LOG_LEVEL_ENV = "LOG_LEVEL"

DEFAULT_DIALECTS: Tuple[str, ...] = ("ambientweather",)


@dataclass(frozen=True)
class Settings:
    influx_url: Optional[str]
    influx_token: str
    influx_org: str
    influx_bucket: str
    dialects: Tuple[str, ...]
    store_persistence_path: Optional[str]
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_optional_env(name: str, default: Optional[str]) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or None


def _read_dialects(default: Tuple[str, ...]) -> Tuple[str, ...]:
    value = os.getenv(_DIALECTS_ENV)
    if value is None:
        return default
    names = tuple(part.strip().lower() for part in value.split(",") if part.strip())
    return names or default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        influx_url=_read_optional_env(_INFLUX_URL_ENV, None),
        influx_token=_read_str_env(_INFLUX_TOKEN_ENV, ""),
        influx_org=_read_str_env(_INFLUX_ORG_ENV, ""),
        influx_bucket=_read_str_env(_INFLUX_BUCKET_ENV, "weather"),
        dialects=_read_dialects(DEFAULT_DIALECTS),
        store_persistence_path=_read_optional_env(_STORE_PATH_ENV, None),
        log_level=_read_log_level("INFO"),
    )
