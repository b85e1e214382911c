"""Strict, locale-independent decoding of raw parameter values."""

from __future__ import annotations

import math
import re
from typing import Union

from models.errors import DecodeError
from models.records import FieldKind

_FLOAT_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)
_INT_RE = re.compile(r"[+-]?\d+", re.ASCII)

# Store integers are signed 64-bit.
INT_MIN = -(2**63)
INT_MAX = 2**63 - 1


def decode_float(field: str, raw: str) -> float:
    candidate = raw.strip()
    # float() alone would also accept "nan", "inf" and "1_000"
    if not _FLOAT_RE.fullmatch(candidate):
        raise DecodeError(field, raw)
    value = float(candidate)
    if not math.isfinite(value):
        raise DecodeError(field, raw)
    return value


def decode_int(field: str, raw: str) -> int:
    candidate = raw.strip()
    if not _INT_RE.fullmatch(candidate):
        raise DecodeError(field, raw)
    try:
        value = int(candidate)
    except ValueError as exc:
        # digit-count limit for str -> int conversion
        raise DecodeError(field, raw) from exc
    if not INT_MIN <= value <= INT_MAX:
        raise DecodeError(field, raw)
    return value


def decode_value(field: str, raw: str, kind: FieldKind) -> Union[str, int, float]:
    """Decode ``raw`` as ``kind``; ``field`` is the parameter name reported on failure."""
    if kind is FieldKind.float:
        return decode_float(field, raw)
    if kind is FieldKind.int:
        return decode_int(field, raw)
    return raw
