"""Position history buffers: a bounded ring for the track and an unbounded path line."""

from __future__ import annotations

from typing import List, Optional

from common.logger import get_logger
from common.types import Point3

logger = get_logger("track")

DEFAULT_CAPACITY = 1000


class TrackBuffer:
    """
    Fixed-capacity ring of recent positions.

    Appends grow the buffer until it holds ``capacity`` points; after that each
    append overwrites the slot at ``write_index``. The cursor advances modulo
    capacity on every append, so it always points at the oldest slot once full.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0:
            logger.warning(f"Track capacity {capacity!r} is not a positive integer, using {DEFAULT_CAPACITY}")
            capacity = DEFAULT_CAPACITY
        self._capacity = capacity
        self._points: List[Point3] = []
        self._write_index = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def write_index(self) -> int:
        return self._write_index

    def __len__(self) -> int:
        return len(self._points)

    def append(self, point: Point3) -> None:
        if len(self._points) < self._capacity:
            self._points.append(point)
        else:
            self._points[self._write_index] = point
        self._write_index = (self._write_index + 1) % self._capacity

    def storage(self) -> List[Point3]:
        """Points in raw slot order (index 0 first), regardless of wraparound."""
        return list(self._points)

    def points(self) -> List[Point3]:
        """Points oldest first."""
        if len(self._points) < self._capacity:
            return list(self._points)
        return self._points[self._write_index:] + self._points[:self._write_index]

    def last(self) -> Optional[Point3]:
        if not self._points:
            return None
        return self._points[(self._write_index - 1) % self._capacity]


class PathLine:
    """Append-only polyline of every position seen."""

    def __init__(self) -> None:
        self._points: List[Point3] = []

    def __len__(self) -> int:
        return len(self._points)

    def append(self, point: Point3) -> None:
        self._points.append(point)

    def points(self) -> List[Point3]:
        return list(self._points)
