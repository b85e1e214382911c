from __future__ import annotations

import json
from pathlib import Path
from threading import Lock
from typing import List, Optional

from models.records import TimeSeriesPoint


class MemoryPointStore:
    """Thread-safe point sink used in development and tests.

    With a ``persistence_path`` every point is also appended as one JSON line.
    """

    name = "memory"

    def __init__(self, persistence_path: Optional[Path] = None) -> None:
        self._points: List[TimeSeriesPoint] = []
        self.persistence_path = persistence_path
        self._lock = Lock()
        self._closed = False
        if persistence_path:
            persistence_path.parent.mkdir(parents=True, exist_ok=True)

    def write(self, point: TimeSeriesPoint) -> None:
        with self._lock:
            if self._closed:
                raise RuntimeError("Point store is closed.")
            self._points.append(point)
            self._persist(point)

    def points(self) -> List[TimeSeriesPoint]:
        with self._lock:
            return list(self._points)

    def clear(self) -> None:
        with self._lock:
            self._points.clear()

    def close(self) -> None:
        with self._lock:
            self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed

    def _persist(self, point: TimeSeriesPoint) -> None:
        if not self.persistence_path:
            return
        with self.persistence_path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(point.as_dict(), sort_keys=True))
            handle.write("\n")
