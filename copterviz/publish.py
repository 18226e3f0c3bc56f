"""Frame publishers: push finished frames to the HTTP snapshot or a matplotlib window."""

from __future__ import annotations

from common.interface import FramePublisher
from common.logger import get_logger
from common.serve import SharedState
from common.types import RenderFrame

logger = get_logger("publish")


class SharedStatePublisher(FramePublisher):
    """Stores each frame as the JSON snapshot served at /state."""

    def __init__(self, shared_state: SharedState):
        self._shared_state = shared_state
        self.published = 0

    def publish(self, frame: RenderFrame) -> None:
        snapshot = frame.to_dict()
        snapshot["frame"] = self.published
        self._shared_state.set_frame(snapshot)
        if self.published == 0:
            self._shared_state.set_vehicle([m.to_dict() for m in frame.vehicle])
        self.published += 1


class PlotPublisher(FramePublisher):
    """Redraws a FramePlot every ``every`` frames."""

    def __init__(self, plot, every: int = 5, pause: float = 0.001):
        self.plot = plot
        self.every = max(1, int(every))
        self.pause = pause
        self._count = 0

    def publish(self, frame: RenderFrame) -> None:
        self._count += 1
        if self._count % self.every:
            return
        try:
            self.plot.draw(frame, pause=self.pause)
        except Exception as exc:  # pragma: no cover - window closed or backend gone
            logger.warning(f"Plot draw error: {exc}")
