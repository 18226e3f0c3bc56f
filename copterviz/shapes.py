"""Detected-shape lane: a latch between detector events and pose updates, plus per-shape trails."""

from __future__ import annotations

import threading
from collections import deque
from typing import Deque, Dict, FrozenSet, Iterable, Iterator, List

from common.logger import get_logger
from common.types import ColorRGBA, Header, Marker, MarkerType, Point3, ShapeKind

logger = get_logger("shapes")

SHAPE_MARKER_SIZE = 0.5

SHAPE_COLORS: Dict[ShapeKind, ColorRGBA] = {
    ShapeKind.TRIANGLE: ColorRGBA(1.0, 0.5, 0.5, 1.0),
    ShapeKind.SQUARE: ColorRGBA(0.3, 0.2, 0.1, 1.0),
    ShapeKind.CIRCLE: ColorRGBA(0.1, 0.2, 0.3, 1.0),
    ShapeKind.PENTAGON: ColorRGBA(0.6, 0.8, 0.9, 1.0),
    ShapeKind.STAR: ColorRGBA(0.7, 0.6, 0.8, 1.0),
    ShapeKind.HEART: ColorRGBA(0.8, 0.6, 0.8, 1.0),
}


class ShapeEventLatch:
    """
    Remembers which shapes were reported since the last drain.
    Each kind is either idle or pending; ``drain_all`` moves every pending kind back to idle.
    Safe to signal from a producer thread while the pose loop drains.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._pending: Dict[ShapeKind, bool] = {kind: False for kind in ShapeKind}

    def signal(self, kind: ShapeKind) -> None:
        with self._lock:
            self._pending[kind] = True

    def signal_name(self, token: str) -> bool:
        """Latch the shape named by ``token``; unknown names are ignored."""
        kind = ShapeKind.parse(token)
        if kind is None:
            logger.debug(f"Ignoring unknown shape token {token!r}")
            return False
        self.signal(kind)
        return True

    def drain_all(self) -> FrozenSet[ShapeKind]:
        with self._lock:
            drained = frozenset(kind for kind, flag in self._pending.items() if flag)
            for kind in drained:
                self._pending[kind] = False
        return drained

    def pending(self) -> FrozenSet[ShapeKind]:
        with self._lock:
            return frozenset(kind for kind, flag in self._pending.items() if flag)


class ShapeTrails:
    """Per-kind position trails. Trails only grow unless a capacity is set."""

    def __init__(self, capacity: int = 0):
        self.capacity = max(0, int(capacity))
        maxlen = self.capacity or None
        self._trails: Dict[ShapeKind, Deque[Point3]] = {kind: deque(maxlen=maxlen) for kind in ShapeKind}

    def record(self, kinds: Iterable[ShapeKind], point: Point3) -> None:
        for kind in kinds:
            self._trails[kind].append(point)

    def trail(self, kind: ShapeKind) -> List[Point3]:
        return list(self._trails[kind])

    def active(self) -> Iterator[ShapeKind]:
        """Kinds with at least one recorded point, in declaration order."""
        return (kind for kind in ShapeKind if self._trails[kind])

    def markers(self, header: Header) -> List[Marker]:
        return [shape_marker(kind, self._trails[kind], header) for kind in self.active()]


def shape_marker(kind: ShapeKind, points: Iterable[Point3], header: Header) -> Marker:
    return Marker(
        ns=f"shapes/{kind.value}",
        id=list(ShapeKind).index(kind),
        type=MarkerType.CUBE_LIST,
        header=header,
        scale=Point3(SHAPE_MARKER_SIZE, SHAPE_MARKER_SIZE, SHAPE_MARKER_SIZE),
        color=SHAPE_COLORS[kind],
        points=tuple(points),
    )
