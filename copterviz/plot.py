"""Matplotlib viewer for render frames (offline inspection and the demo window)."""

from __future__ import annotations

from typing import Iterable, Optional

import matplotlib.pyplot as plt
import numpy as np

from common.types import Marker, MarkerType, Point3, RenderFrame


def _xyz(points: Iterable[Point3]) -> np.ndarray:
    arr = np.array([p.as_tuple() for p in points], dtype=float)
    return arr.reshape(-1, 3)


def _rgba(marker: Marker):
    c = marker.color
    return (c.r, c.g, c.b, c.a)


def vehicle_outline(vehicle: Iterable[Marker], origin: Point3) -> np.ndarray:
    """Rotor hub positions translated to ``origin``, one row per rotor."""
    hubs = [
        (origin.x + m.position.x, origin.y + m.position.y, origin.z + m.position.z)
        for m in vehicle
        if m.type is MarkerType.CYLINDER
    ]
    return np.array(hubs, dtype=float).reshape(-1, 3)


class FramePlot:
    """Draws track, path, shape trails and a vehicle stick model into a 3-D axes."""

    def __init__(self, ax=None, interactive: bool = False):
        if interactive:
            plt.ion()
        if ax is None:
            fig = plt.figure()
            ax = fig.add_subplot(projection="3d")
        self.ax = ax
        self.fig = ax.figure

    def draw(self, frame: RenderFrame, pause: Optional[float] = None) -> None:
        ax = self.ax
        ax.cla()
        ax.set_xlabel("x (m)")
        ax.set_ylabel("y (m)")
        ax.set_zlabel("z (m)")

        path = _xyz(frame.path.points)
        if len(path):
            ax.plot(path[:, 0], path[:, 1], path[:, 2], color=_rgba(frame.path), linewidth=1.0, label="path")

        track = _xyz(frame.track.points)
        if len(track):
            ax.scatter(track[:, 0], track[:, 1], track[:, 2], color=_rgba(frame.track), s=4, label="track")

        for marker in frame.shapes:
            pts = _xyz(marker.points)
            ax.scatter(pts[:, 0], pts[:, 1], pts[:, 2], color=_rgba(marker), s=30, marker="s",
                       label=marker.ns.split("/")[-1])

        if frame.track.points:
            origin = frame.track.points[-1]
            hubs = vehicle_outline(frame.vehicle, origin)
            for hub in hubs:
                ax.plot([origin.x, hub[0]], [origin.y, hub[1]], [origin.z, hub[2]], color="blue", linewidth=2.0)
            if len(hubs):
                ax.scatter(hubs[:, 0], hubs[:, 1], hubs[:, 2], color="gray", s=40)

        ax.legend(loc="upper right")
        if pause is not None:
            plt.pause(pause)

    def save(self, path: str) -> None:
        self.fig.savefig(path)

