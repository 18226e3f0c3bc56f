#!/usr/bin/env python3
"""
Entry point: load configuration, build the vehicle model once, and run the pose loop.
"""

from __future__ import annotations

import os
import threading
from typing import List, Optional, Sequence

from common.interface import FramePublisher
from common.logger import get_logger
from common.serve import SharedState, VisualizationServer
from common.types import Pose, RenderFrame
from copterviz.assembler import RenderFrameAssembler, geometry_from_config
from copterviz.config import VisualizationConfig
from copterviz.publish import PlotPublisher, SharedStatePublisher
from copterviz.source import OrbitPoseSource, QueuePoseSource

logger = get_logger("node")


class VisualizationNode:
    """Node-style loop: poses are queued by producers, then step() -> publish() on one thread."""

    def __init__(
        self,
        config: VisualizationConfig,
        publishers: Optional[Sequence[FramePublisher]] = None,
    ):
        self.config = config
        geometry = geometry_from_config(self.config)
        self.assembler = RenderFrameAssembler(self.config, geometry=geometry)
        self.poses = QueuePoseSource()
        self.publishers: List[FramePublisher] = list(publishers or [])
        self._stop = threading.Event()
        logger.info(
            f"Vehicle model: {self.config.num_rotors} rotors, arm {self.config.arm_len} m, "
            f"scale {self.config.marker_scale}"
        )

    # -- Producer-facing callbacks (any thread) ------------------------------

    def submit_pose(self, pose: Pose) -> None:
        self.poses.push(pose)

    def submit_shape(self, token: str) -> bool:
        return self.assembler.on_shape(token)

    # -- Consumer loop -------------------------------------------------------

    def step(self, timeout: Optional[float] = 0.1) -> Optional[RenderFrame]:
        pose = self.poses.read(timeout=timeout)
        if pose is None:
            return None
        frame = self.assembler.on_pose(pose)
        self.publish(frame)
        return frame

    def publish(self, frame: RenderFrame) -> None:
        for publisher in self.publishers:
            try:
                publisher.publish(frame)
            except Exception as exc:
                logger.warning(f"{type(publisher).__name__} failed: {exc}")

    def run(self) -> None:
        logger.info("Starting pose loop")
        while not self._stop.is_set():
            self.step()

    def stop(self) -> None:
        self._stop.set()

    @property
    def stopped(self) -> threading.Event:
        return self._stop


def main():
    config = VisualizationConfig.from_env()
    shared_state = SharedState()
    publishers: List[FramePublisher] = [SharedStatePublisher(shared_state)]
    if os.environ.get("COPTERVIZ_PLOT", "0") not in {"", "0"}:
        from copterviz.plot import FramePlot

        publishers.append(PlotPublisher(FramePlot(interactive=True)))

    node = VisualizationNode(config, publishers=publishers)
    server = VisualizationServer(
        shared_state,
        host=config.host,
        port=config.port,
        on_pose=node.submit_pose,
        on_shape=node.submit_shape,
    )
    server.start()
    url = f"http://{config.host}:{config.port}".replace("0.0.0.0", "127.0.0.1")
    logger.info(f"Serving frames at {url}/state")

    if config.demo:
        feed = OrbitPoseSource(frame_id=config.fixed_frame_id, shape_every=40)
        threading.Thread(
            target=feed.run,
            args=(node.submit_pose, node.submit_shape, node.stopped, config.demo_rate_hz),
            daemon=True,
        ).start()

    try:
        node.run()
    except KeyboardInterrupt:
        logger.info("Stopping")
    finally:
        node.stop()
        server.shutdown()


if __name__ == "__main__":
    main()
