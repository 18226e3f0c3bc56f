"""
Pose sources feeding the single consumer loop:
- QueuePoseSource: serializes poses pushed from any thread (HTTP handlers, demo feed)
- OrbitPoseSource: synthetic circular flight for running without an external feed
"""

from __future__ import annotations

import math
import queue
import threading
import time
from typing import Callable, Optional, Sequence

from common.interface import PoseSource
from common.logger import get_logger
from common.math import Quaternion
from common.realtime import RateKeeper
from common.types import Header, Point3, Pose, ShapeKind

logger = get_logger("source")


class QueuePoseSource(PoseSource):
    """Thread-safe FIFO of poses; arrival order is processing order."""

    def __init__(self, maxsize: int = 0):
        self._queue: "queue.Queue[Pose]" = queue.Queue(maxsize=maxsize)

    def push(self, pose: Pose) -> None:
        try:
            self._queue.put_nowait(pose)
        except queue.Full:
            logger.warning("Pose queue full, dropping pose")

    def read(self, timeout: Optional[float] = None) -> Optional[Pose]:
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def pending(self) -> int:
        return self._queue.qsize()


class OrbitPoseSource:
    """
    Produces a vehicle flying a horizontal circle, one pose per tick.
    Optionally reports a shape every ``shape_every`` ticks, cycling through ShapeKind.
    """

    def __init__(
        self,
        radius: float = 5.0,
        altitude: float = 2.0,
        angular_rate: float = 0.5,
        frame_id: str = "map",
        shape_every: int = 0,
    ):
        self.radius = float(radius)
        self.altitude = float(altitude)
        self.angular_rate = float(angular_rate)
        self.frame_id = frame_id
        self.shape_every = int(shape_every)
        self._seq = 0

    def pose_at(self, t: float) -> Pose:
        theta = self.angular_rate * t
        position = Point3(
            self.radius * math.cos(theta),
            self.radius * math.sin(theta),
            self.altitude,
        )
        # nose along the direction of travel
        orientation = Quaternion.from_yaw(theta + math.pi / 2.0)
        header = Header(frame_id=self.frame_id, stamp=t, seq=self._seq)
        self._seq += 1
        return Pose(position=position, orientation=orientation, header=header)

    def shape_for_tick(self, tick: int) -> Optional[ShapeKind]:
        if self.shape_every <= 0 or tick == 0 or tick % self.shape_every:
            return None
        kinds: Sequence[ShapeKind] = list(ShapeKind)
        return kinds[(tick // self.shape_every - 1) % len(kinds)]

    def run(
        self,
        on_pose: Callable[[Pose], None],
        on_shape: Callable[[str], bool],
        stop: threading.Event,
        rate_hz: float = 20.0,
    ) -> None:
        logger.info(f"Demo feed running at {rate_hz:.1f} Hz (radius {self.radius} m)")
        rk = RateKeeper(rate_hz=rate_hz)
        start = time.monotonic()
        tick = 0
        while not stop.is_set():
            kind = self.shape_for_tick(tick)
            if kind is not None:
                on_shape(kind.value)
            on_pose(self.pose_at(time.monotonic() - start))
            tick += 1
            rk.keep_time()
