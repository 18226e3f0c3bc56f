"""
Procedural multirotor geometry: N rotor/arm pairs spaced evenly around a box body.

Rotors sit at the midpoint of each of N equal sectors of the full circle, so a
quad gets rotors at 45°, 135°, 225° and 315° (X configuration). Each arm spans
from the origin to its rotor and is yawed to the sector midpoint.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Tuple

from common.logger import get_logger
from common.math import Quaternion
from common.types import ColorRGBA, Header, Marker, MarkerType, Point3

logger = get_logger("geometry")

MIN_ROTORS = 2

ROTOR_NS = "vehicle_rotor"
ARM_NS = "vehicle_arm"
BODY_NS = "vehicle_body"

ROTOR_COLOR = ColorRGBA(0.4, 0.4, 0.4, 0.8)
ARM_COLOR = ColorRGBA(0.0, 0.0, 1.0, 1.0)
BODY_COLOR = ColorRGBA(0.0, 1.0, 0.0, 0.8)

ROTOR_DIAMETER = 0.2
ROTOR_THICKNESS = 0.01
ARM_WIDTH = 0.02
ARM_THICKNESS = 0.01
ARM_DROP = 0.015  # arms sit just below the rotor plane


def rotor_angles(rotor_count: int) -> List[float]:
    """Sector-midpoint angles (rad) for ``rotor_count`` rotors, increasing from 0."""
    increment = 2.0 * math.pi / rotor_count
    return [(i + 0.5) * increment for i in range(rotor_count)]


@dataclass(frozen=True)
class VehicleGeometryBuilder:
    rotor_count: int = 6
    arm_length: float = 0.22
    body_width: float = 0.15
    body_height: float = 0.10
    scale: float = 5.0
    frame_id: str = "copter_frame"

    def build(self) -> Tuple[Marker, ...]:
        """Rotor/arm pairs in increasing angle order, body last."""
        rotor_count = self.rotor_count
        if rotor_count <= 0:
            logger.warning(f"rotor_count={rotor_count} is not positive, using {MIN_ROTORS}")
            rotor_count = MIN_ROTORS

        s = self.scale
        header = Header(frame_id=self.frame_id)
        rotor_scale = Point3(ROTOR_DIAMETER * s, ROTOR_DIAMETER * s, ROTOR_THICKNESS * s)
        arm_scale = Point3(self.arm_length * s, ARM_WIDTH * s, ARM_THICKNESS * s)

        markers: List[Marker] = []
        for idx, angle in enumerate(rotor_angles(rotor_count), start=1):
            rx = self.arm_length * math.cos(angle) * s
            ry = self.arm_length * math.sin(angle) * s
            markers.append(Marker(
                ns=ROTOR_NS,
                id=idx,
                type=MarkerType.CYLINDER,
                header=header,
                position=Point3(rx, ry, 0.0),
                scale=rotor_scale,
                color=ROTOR_COLOR,
            ))
            yaw = Quaternion.from_yaw(angle)
            markers.append(Marker(
                ns=ARM_NS,
                id=idx,
                type=MarkerType.CUBE,
                header=header,
                position=Point3(rx / 2.0, ry / 2.0, -ARM_DROP * s),
                orientation=tuple(float(c) for c in yaw.q),
                scale=arm_scale,
                color=ARM_COLOR,
            ))

        markers.append(Marker(
            ns=BODY_NS,
            id=0,
            type=MarkerType.CUBE,
            header=header,
            scale=Point3(self.body_width * s, self.body_width * s, self.body_height * s),
            color=BODY_COLOR,
        ))
        return tuple(markers)


def build_vehicle_geometry(
    rotor_count: int,
    arm_length: float,
    body_width: float,
    body_height: float,
    scale: float,
    frame_id: str = "copter_frame",
) -> Tuple[Marker, ...]:
    return VehicleGeometryBuilder(rotor_count, arm_length, body_width, body_height, scale, frame_id).build()
