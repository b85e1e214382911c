"""Derived meteorological values."""

from __future__ import annotations

from typing import Tuple, Union

from services.reading_builder import ReadingDraft


def dew_point(temp_f: float, humidity: Union[int, float]) -> float:
    """Linear dew point approximation: ``T - 9/25 * (100 - RH)``.

    Humidity is not bounds checked.
    """
    return temp_f - 9 * (100 - humidity) / 25


def dew_points(draft: ReadingDraft) -> Tuple[float, float]:
    outdoor = dew_point(draft.value("temp_outdoor_f"), draft.value("humidity_outdoor"))
    indoor = dew_point(draft.value("temp_indoor_f"), draft.value("humidity_indoor"))
    return outdoor, indoor
