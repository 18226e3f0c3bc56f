"""
Quaternion helper for marker and pose orientations, stored as [w, x, y, z].
"""

from __future__ import annotations

import math

import numpy as np


class Quaternion:
    """Unit quaternion in [w, x, y, z] order."""

    def __init__(self, w=1.0, x=0.0, y=0.0, z=0.0):
        self.q = np.array([w, x, y, z], dtype=float)

    @classmethod
    def from_yaw(cls, yaw: float) -> "Quaternion":
        """Rotation of ``yaw`` radians about +z."""
        return cls(math.cos(yaw * 0.5), 0.0, 0.0, math.sin(yaw * 0.5))

    def __repr__(self) -> str:
        w, x, y, z = self.q.tolist()
        return f"Quaternion({w:.4f}, {x:.4f}, {y:.4f}, {z:.4f})"
