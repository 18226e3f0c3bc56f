"""Per-pose frame assembly: history buffers, shape lane, and the cached vehicle model."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from common.logger import get_logger
from common.types import ColorRGBA, Marker, MarkerType, Point3, Pose, RenderFrame
from copterviz.config import VisualizationConfig
from copterviz.geometry import VehicleGeometryBuilder
from copterviz.shapes import ShapeEventLatch, ShapeTrails
from copterviz.track import PathLine, TrackBuffer

logger = get_logger("assembler")

TRACK_NS = "track"
PATH_NS = "path"
TRACK_POINT_SIZE = 0.015  # multiplied by marker_scale
PATH_WIDTH = 0.4
TRACK_COLOR = ColorRGBA(0.0, 0.0, 0.5, 1.0)
PATH_COLOR = ColorRGBA(1.0, 0.0, 0.0, 1.0)


@dataclass
class VisualizationContext:
    """All mutable state touched while turning poses into frames."""

    track: TrackBuffer
    path: PathLine = field(default_factory=PathLine)
    latch: ShapeEventLatch = field(default_factory=ShapeEventLatch)
    trails: ShapeTrails = field(default_factory=ShapeTrails)
    vehicle: Tuple[Marker, ...] = ()

    @classmethod
    def from_config(cls, config: VisualizationConfig, vehicle: Tuple[Marker, ...]) -> "VisualizationContext":
        return cls(
            track=TrackBuffer(config.max_track_size),
            trails=ShapeTrails(config.shape_trail_size),
            vehicle=vehicle,
        )


def geometry_from_config(config: VisualizationConfig) -> Tuple[Marker, ...]:
    builder = VehicleGeometryBuilder(
        rotor_count=config.num_rotors,
        arm_length=config.arm_len,
        body_width=config.body_width,
        body_height=config.body_height,
        scale=config.marker_scale,
        frame_id=config.child_frame_id,
    )
    return builder.build()


class RenderFrameAssembler:
    """
    Turns each incoming pose into a RenderFrame.
    on_pose() must be called from a single consumer; on_shape() may be called from any thread.
    """

    def __init__(
        self,
        config: Optional[VisualizationConfig] = None,
        geometry: Optional[Tuple[Marker, ...]] = None,
    ):
        self.config = config or VisualizationConfig()
        if geometry is None:
            geometry = geometry_from_config(self.config)
        self.context = VisualizationContext.from_config(self.config, tuple(geometry))
        self.frame_count = 0

        s = self.config.marker_scale
        self._track_scale = Point3(TRACK_POINT_SIZE * s, TRACK_POINT_SIZE * s, TRACK_POINT_SIZE * s)
        self._path_scale = Point3(PATH_WIDTH, PATH_WIDTH, PATH_WIDTH)
        logger.info(
            f"Assembler ready (track={self.context.track.capacity}, "
            f"vehicle primitives={len(self.context.vehicle)})"
        )

    @property
    def vehicle(self) -> Tuple[Marker, ...]:
        return self.context.vehicle

    def on_shape(self, token: str) -> bool:
        return self.context.latch.signal_name(token)

    def on_pose(self, pose: Pose) -> RenderFrame:
        ctx = self.context
        header = pose.header
        position = pose.position

        ctx.track.append(position)
        ctx.path.append(position)
        drained = ctx.latch.drain_all()
        if drained:
            ctx.trails.record(drained, position)
            logger.debug(f"Shapes at {position.as_tuple()}: {sorted(k.value for k in drained)}")

        self.frame_count += 1
        return RenderFrame(
            header=header,
            track=Marker(
                ns=TRACK_NS,
                id=0,
                type=MarkerType.CUBE_LIST,
                header=header,
                scale=self._track_scale,
                color=TRACK_COLOR,
                points=tuple(ctx.track.points()),
            ),
            path=Marker(
                ns=PATH_NS,
                id=0,
                type=MarkerType.LINE_STRIP,
                header=header,
                scale=self._path_scale,
                color=PATH_COLOR,
                points=tuple(ctx.path.points()),
            ),
            shapes=tuple(ctx.trails.markers(header)),
            vehicle=ctx.vehicle,
        )
