"""
Shared data structures for the pose feed ↔ frame assembler ↔ renderer boundaries.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

from common.math import Quaternion


@dataclass(frozen=True)
class Point3:
    """A recorded 3-D position."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)


@dataclass(frozen=True)
class Header:
    """Frame metadata carried from the incoming pose onto emitted markers."""

    frame_id: str = ""
    stamp: float = 0.0
    seq: int = 0


@dataclass(frozen=True)
class Pose:
    """
    Vehicle pose as delivered by the external feed.
    Only ``position`` and ``header`` are consumed; orientation is carried as-is.
    """

    position: Point3
    orientation: Quaternion = field(default_factory=Quaternion, compare=False)
    header: Header = field(default_factory=Header)


@dataclass(frozen=True)
class ColorRGBA:
    r: float = 0.0
    g: float = 0.0
    b: float = 0.0
    a: float = 1.0


class MarkerType(str, Enum):
    CUBE = "cube"
    CYLINDER = "cylinder"
    LINE_STRIP = "line_strip"
    CUBE_LIST = "cube_list"


class ShapeKind(str, Enum):
    """Closed set of shape names reported by the detector."""

    TRIANGLE = "triangle"
    SQUARE = "square"
    CIRCLE = "circle"
    PENTAGON = "pentagon"
    STAR = "star"
    HEART = "heart"

    @classmethod
    def parse(cls, token: str) -> Optional["ShapeKind"]:
        """Exact, case-sensitive lookup; unknown tokens give None."""
        try:
            return cls(token)
        except ValueError:
            return None


IDENTITY_WXYZ = (1.0, 0.0, 0.0, 0.0)


@dataclass(frozen=True)
class Marker:
    """
    One renderable primitive handed to the viewer:
    - CUBE / CYLINDER: a single solid placed at ``position`` with ``orientation``
    - CUBE_LIST / LINE_STRIP: ``points`` drawn with per-point size ``scale``
    """

    ns: str
    id: int
    type: MarkerType
    header: Header = field(default_factory=Header)
    position: Point3 = field(default_factory=Point3)
    orientation: Tuple[float, float, float, float] = IDENTITY_WXYZ  # w, x, y, z
    scale: Point3 = field(default_factory=lambda: Point3(1.0, 1.0, 1.0))
    color: ColorRGBA = field(default_factory=ColorRGBA)
    points: Tuple[Point3, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        w, x, y, z = self.orientation
        return {
            "ns": self.ns,
            "id": self.id,
            "type": self.type.value,
            "header": {
                "frame_id": self.header.frame_id,
                "stamp": self.header.stamp,
                "seq": self.header.seq,
            },
            "position": list(self.position.as_tuple()),
            "orientation": [x, y, z, w],
            "scale": list(self.scale.as_tuple()),
            "color": [self.color.r, self.color.g, self.color.b, self.color.a],
            "points": [list(p.as_tuple()) for p in self.points],
        }


@dataclass(frozen=True)
class RenderFrame:
    """Everything emitted for a single pose update."""

    header: Header
    track: Marker
    path: Marker
    shapes: Tuple[Marker, ...]
    vehicle: Tuple[Marker, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "header": {
                "frame_id": self.header.frame_id,
                "stamp": self.header.stamp,
                "seq": self.header.seq,
            },
            "track": self.track.to_dict(),
            "path": self.path.to_dict(),
            "shapes": [m.to_dict() for m in self.shapes],
            "vehicle": [m.to_dict() for m in self.vehicle],
        }


def pose_from_dict(data: Mapping[str, Any]) -> Pose:
    """
    Parse an inbound pose payload:
    {"position": [x, y, z], "orientation": [w, x, y, z], "frame_id": str, "stamp": float, "seq": int}
    Only ``position`` is required.
    """
    if not isinstance(data, Mapping):
        raise ValueError("pose payload must be an object")
    raw_pos = data.get("position")
    if not isinstance(raw_pos, (list, tuple)) or len(raw_pos) != 3:
        raise ValueError("position must be a list of three numbers")
    try:
        position = Point3(*(float(c) for c in raw_pos))
        raw_quat = data.get("orientation") or IDENTITY_WXYZ
        if len(raw_quat) != 4:
            raise ValueError("orientation must be a list of four numbers")
        orientation = Quaternion(*(float(c) for c in raw_quat))
        header = Header(
            frame_id=str(data.get("frame_id", "")),
            stamp=float(data.get("stamp", 0.0)),
            seq=int(data.get("seq", 0)),
        )
    except (TypeError, ValueError) as exc:
        raise ValueError(f"invalid pose payload: {exc}") from exc
    return Pose(position=position, orientation=orientation, header=header)
