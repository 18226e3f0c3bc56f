"""HTTP boundary for the visualization node: serves frames, accepts poses and shape events."""

from __future__ import annotations

import copy
import json
import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import urlparse

from common.logger import get_logger
from common.types import Pose, pose_from_dict

logger = get_logger("serve")


class SharedState:
    """Thread-safe container for the latest frame and vehicle geometry snapshots."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._frame: Dict[str, Any] = {
            "frame": 0,
            "updated_at": time.time(),
        }
        self._vehicle: List[Dict[str, Any]] = []

    def set_frame(self, frame: Dict[str, Any]) -> None:
        with self._lock:
            frame = dict(frame)
            frame.setdefault("updated_at", time.time())
            self._frame = frame

    def get_frame(self) -> Dict[str, Any]:
        with self._lock:
            return copy.deepcopy(self._frame)

    def set_vehicle(self, vehicle: List[Dict[str, Any]]) -> None:
        with self._lock:
            self._vehicle = copy.deepcopy(vehicle)

    def get_vehicle(self) -> List[Dict[str, Any]]:
        with self._lock:
            return copy.deepcopy(self._vehicle)


def _make_handler(
    shared_state: SharedState,
    on_pose: Callable[[Pose], None],
    on_shape: Callable[[str], bool],
):
    class VisualizationRequestHandler(BaseHTTPRequestHandler):
        server_version = "CopterViz/1.0"

        def do_GET(self) -> None:  # noqa: N802 (method name from BaseHTTPRequestHandler)
            route = urlparse(self.path).path

            if route == "/state":
                self._send_json(200, shared_state.get_frame())
                return

            if route == "/vehicle":
                self._send_json(200, shared_state.get_vehicle())
                return

            self.send_error(404)

        def do_POST(self) -> None:  # noqa: N802
            route = urlparse(self.path).path
            if route not in {"/pose", "/shape"}:
                self.send_error(404)
                return

            data = self._read_object()
            if data is None:
                return

            if route == "/pose":
                try:
                    pose = pose_from_dict(data)
                except ValueError as exc:
                    self.send_error(400, str(exc))
                    return
                on_pose(pose)
                self._send_response(204, "application/json", b"")
                return

            token = data.get("shape")
            if not isinstance(token, str):
                self.send_error(400, "shape must be a string")
                return
            recognized = on_shape(token)
            self._send_json(200, {"shape": token, "recognized": recognized})

        def _read_object(self) -> Optional[Dict[str, Any]]:
            """Decode the body as a JSON object; on failure send 400 and return None."""
            try:
                content_length = int(self.headers.get("Content-Length", "0"))
            except ValueError:
                self.send_error(400, "invalid Content-Length")
                return None
            if content_length < 0:
                self.send_error(400, "invalid Content-Length")
                return None
            raw = self.rfile.read(content_length) if content_length else b"{}"
            try:
                data = json.loads(raw.decode("utf-8"))
            except (json.JSONDecodeError, UnicodeDecodeError):
                self.send_error(400, "invalid json")
                return None
            if not isinstance(data, dict):
                self.send_error(400, "payload must be a JSON object")
                return None
            return data
        def _send_json(self, status: int, payload: Any) -> None:
            self._send_response(status, "application/json", json.dumps(payload).encode("utf-8"))

        def _send_response(self, status: int, content_type: str, payload: bytes) -> None:
            self.send_response(status)
            self.send_header("Content-Type", content_type)
            self.send_header("Content-Length", str(len(payload)))
            self.send_header("Cache-Control", "no-store, no-cache, must-revalidate")
            self.end_headers()
            if payload:
                self.wfile.write(payload)

        def log_message(self, fmt: str, *args: Any) -> None:  # noqa: A003 (fmt name)
            logger.debug(f"{self.address_string()} {fmt % args}")

    return VisualizationRequestHandler


class VisualizationServer:
    """Runs the HTTP boundary in a daemon thread."""

    def __init__(
        self,
        shared_state: SharedState,
        host: str,
        port: int,
        on_pose: Callable[[Pose], None],
        on_shape: Callable[[str], bool],
    ) -> None:
        handler_cls = _make_handler(shared_state, on_pose, on_shape)
        try:
            self._httpd = ThreadingHTTPServer((host, port), handler_cls)
        except OSError as exc:
            raise RuntimeError(f"Failed to start visualization server on {host}:{port}: {exc}") from exc
        self._httpd.daemon_threads = True
        self._thread = threading.Thread(target=self._httpd.serve_forever, daemon=True)

    @property
    def address(self) -> tuple:
        return self._httpd.server_address[:2]

    def start(self) -> None:
        self._thread.start()

    def shutdown(self) -> None:
        if self._thread.is_alive():
            self._httpd.shutdown()
            self._thread.join(timeout=1.0)
        self._httpd.server_close()


__all__ = [
    "SharedState",
    "VisualizationServer",
]
