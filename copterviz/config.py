"""Startup configuration for the visualization node, read once from the environment."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, replace
from typing import Callable, Mapping, Optional, TypeVar

from common.logger import get_logger

logger = get_logger("config")

ENV_PREFIX = "COPTERVIZ_"

DEFAULT_MARKER_SCALE = 5.0
DEFAULT_NUM_ROTORS = 6
MIN_NUM_ROTORS = 2
DEFAULT_MAX_TRACK_SIZE = 1000

T = TypeVar("T")

_POSITIVE_FLOATS = ("marker_scale", "arm_len", "body_width", "body_height", "demo_rate_hz")


@dataclass(frozen=True)
class VisualizationConfig:
    child_frame_id: str = "copter_frame"
    fixed_frame_id: str = "map"
    marker_scale: float = DEFAULT_MARKER_SCALE
    num_rotors: int = DEFAULT_NUM_ROTORS
    arm_len: float = 0.22
    body_width: float = 0.15
    body_height: float = 0.10
    max_track_size: int = DEFAULT_MAX_TRACK_SIZE
    shape_trail_size: int = 0  # 0 keeps every point
    host: str = "127.0.0.1"
    port: int = 8003
    demo: bool = False
    demo_rate_hz: float = 20.0

    def clamped(self) -> "VisualizationConfig":
        """Return a copy with out-of-range values replaced by safe defaults."""
        defaults = VisualizationConfig()
        changes = {}
        for key in _POSITIVE_FLOATS:
            value = getattr(self, key)
            if not math.isfinite(value) or value <= 0.0:
                changes[key] = getattr(defaults, key)
        if self.num_rotors <= 0:
            changes["num_rotors"] = MIN_NUM_ROTORS
        if self.max_track_size <= 0:
            changes["max_track_size"] = DEFAULT_MAX_TRACK_SIZE
        if self.shape_trail_size < 0:
            changes["shape_trail_size"] = 0
        for key, value in changes.items():
            logger.warning(f"{key}={getattr(self, key)!r} out of range, using {value!r}")
        if not changes:
            return self
        return replace(self, **changes)

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "VisualizationConfig":
        env = os.environ if env is None else env
        d = cls()
        config = cls(
            child_frame_id=_read(env, "CHILD_FRAME_ID", str, d.child_frame_id),
            fixed_frame_id=_read(env, "FIXED_FRAME_ID", str, d.fixed_frame_id),
            marker_scale=_read(env, "MARKER_SCALE", float, d.marker_scale),
            num_rotors=_read(env, "NUM_ROTORS", int, d.num_rotors),
            arm_len=_read(env, "ARM_LEN", float, d.arm_len),
            body_width=_read(env, "BODY_WIDTH", float, d.body_width),
            body_height=_read(env, "BODY_HEIGHT", float, d.body_height),
            max_track_size=_read(env, "MAX_TRACK_SIZE", int, d.max_track_size),
            shape_trail_size=_read(env, "SHAPE_TRAIL_SIZE", int, d.shape_trail_size),
            host=_read(env, "HOST", str, d.host),
            port=_read(env, "PORT", int, d.port),
            demo=_read(env, "DEMO", _parse_bool, d.demo),
            demo_rate_hz=_read(env, "DEMO_RATE_HZ", float, d.demo_rate_hz),
        )
        return config.clamped()


def _parse_bool(text: str) -> bool:
    return text.strip().lower() not in {"", "0", "false", "no", "off"}


def _read(env: Mapping[str, str], key: str, parse: Callable[[str], T], default: T) -> T:
    raw = env.get(ENV_PREFIX + key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return parse(raw.strip())
    except ValueError:
        logger.warning(f"{ENV_PREFIX}{key}={raw!r} is not valid, using default {default!r}")
        return default
