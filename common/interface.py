"""
Interface definitions for pose feeds and frame publishers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from common.types import Pose, RenderFrame


class PoseSource(ABC):
    """Abstract base for anything delivering vehicle poses in arrival order."""

    @abstractmethod
    def read(self, timeout: Optional[float] = None) -> Optional[Pose]:
        """Return the next pose, or None if none arrived within ``timeout``."""

    def close(self) -> None:
        """Optional cleanup hook."""
        return None


class FramePublisher(ABC):
    """Abstract base for the rendering side of the pipeline."""

    @abstractmethod
    def publish(self, frame: RenderFrame) -> None:
        """Hand a finished frame to the viewer."""
