"""Cameras that supply frames to the vision modules."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, Iterator, Mapping, Sequence

import imageio.v2 as imageio
import numpy as np

log = logging.getLogger(__name__)

DEFAULT_VIDEO_DIR = Path("../resource/video")


def _values(config: Mapping[str, Any], key: str, count: int) -> np.ndarray:
    values = np.asarray(config[key], dtype=np.float64).ravel()
    if values.size < count:
        raise ValueError(f"{key} needs {count} values, got {values.size}")
    return values[:count]


class Camera:
    """A frame source with its intrinsic calibration.

    Frames are held as numpy arrays; ``update_src`` refreshes the current one
    until told to stop or until the source runs dry.
    """

    def __init__(self, config: Mapping[str, Any], camera_id: int) -> None:
        self.id = camera_id
        self.camera_matrix = _values(config, "CameraMatrix", 9).reshape(3, 3)
        self.dist_coeffs = _values(config, "DistCoeffs", 5).reshape(5, 1)
        self.camera_type = config.get("CameraType", 0)
        self.time_off = int(config.get("TimeOff", 0))
        self.frame_count = 0
        self._src: np.ndarray | None = None
        self._lock = threading.Lock()

    def _grab(self) -> np.ndarray | None:
        return None

    def start_camera(self) -> None:
        """Prepare the camera for capture, dropping any previous frame."""
        with self._lock:
            self._src = None
        self.frame_count = 0

    def update_src(self, stop: threading.Event) -> None:
        """Keep the current frame fresh until ``stop`` is set or the source ends.

        Between frames it waits ``TimeOff`` milliseconds. When the source ends
        the current frame becomes empty.
        """
        while not stop.is_set():
            frame = self._grab()
            with self._lock:
                self._src = frame
            if frame is None:
                return
            self.frame_count += 1
            if self.time_off > 0:
                stop.wait(self.time_off / 1000)

    def clone_src(self) -> np.ndarray:
        """A copy of the current frame; raises RuntimeError if there is none."""
        with self._lock:
            if self._src is None or self._src.size == 0:
                raise RuntimeError(f"camera {self.id} has no frame")
            return self._src.copy()

    def project(self, point: Sequence[float]) -> tuple[float, float]:
        """Project a 3-D point in the camera frame onto the image plane."""
        vector = np.asarray(point, dtype=np.float64).reshape(3)
        if vector[2] == 0:
            raise ValueError("point lies in the camera plane (z == 0)")
        pixel = (self.camera_matrix @ vector) / vector[2]
        return float(pixel[0]), float(pixel[1])


class VideoCamera(Camera):
    """A camera that plays a video file from the video directory (RGB frames)."""

    def __init__(
        self,
        config: Mapping[str, Any],
        camera_id: int,
        video_dir: str | Path = DEFAULT_VIDEO_DIR,
    ) -> None:
        super().__init__(config, camera_id)
        self.file_name = str(config["FileName"])
        self.video_dir = Path(video_dir)
        self._reader: Any = None
        self._frames: Iterator[np.ndarray] | None = None

    @property
    def path(self) -> Path:
        return self.video_dir / self.file_name

    def start_camera(self) -> None:
        """Open the video file; raises FileNotFoundError if it is absent."""
        super().start_camera()
        if not self.path.is_file():
            raise FileNotFoundError(f"fail to open file : {self.path}")
        self._close_reader()
        self._reader = imageio.get_reader(self.path)
        self._frames = iter(self._reader)
        log.info("successfully opened the file : %s", self.file_name)

    def update_src(self, stop: threading.Event) -> None:
        """Play the video into the current frame until ``stop`` is set or it ends."""
        if self._frames is None:
            raise RuntimeError("camera has not been started")
        super().update_src(stop)

    def _grab(self) -> np.ndarray | None:
        if self._frames is None:
            return None
        frame = next(self._frames, None)
        if frame is None:
            self._close_reader()
            return None
        return np.asarray(frame)

    def _close_reader(self) -> None:
        if self._reader is not None:
            self._reader.close()
        self._reader = None
        self._frames = None