"""
Video Frames - Sample a still frame from a video file with PyAV.

Only random-access frame grabbing is supported: open, read the duration,
decode the frame at a given time. Decoding is serialized per source so a
superseded seek still running in a worker thread cannot interleave with
the next one.
"""

import threading
from pathlib import Path
from typing import Optional

import av
from PIL import Image

from .errors import ResourceError

FRAME_TIME_EPSILON = 1e-3


class VideoSource:
    """A seekable video file that hands out frames as PIL images."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = threading.Lock()
        try:
            self._container = av.open(str(self.path))
        except (av.error.FFmpegError, OSError) as e:
            raise ResourceError(f"Cannot open video {self.path}: {e}") from e

        if not self._container.streams.video:
            self._container.close()
            raise ResourceError(f"No video stream in {self.path}")
        self._stream = self._container.streams.video[0]

    @property
    def duration(self) -> float:
        """Length in seconds (0.0 when the container does not report one)."""
        if self._container.duration is not None:
            return self._container.duration / av.time_base
        if self._stream.duration is not None and self._stream.time_base is not None:
            return float(self._stream.duration * self._stream.time_base)
        return 0.0

    def frame_at(self, seconds: float) -> Image.Image:
        """Decode the first frame at or after `seconds`."""
        target = max(float(seconds), 0.0)
        if self.duration:
            target = min(target, self.duration)
        with self._lock:
            try:
                return self._decode_at(target)
            except av.error.FFmpegError as e:
                raise ResourceError(f"Cannot decode frame at {target:.2f}s: {e}") from e

    def _decode_at(self, target: float) -> Image.Image:
        stream = self._stream
        if stream.time_base:
            offset = int(target / stream.time_base)
            self._container.seek(offset, stream=stream, backward=True, any_frame=False)
        else:
            self._container.seek(int(target * av.time_base), backward=True, any_frame=False)

        last: Optional[av.VideoFrame] = None
        for frame in self._container.decode(stream):
            if frame.time is None or frame.time >= target - FRAME_TIME_EPSILON:
                return frame.to_image()
            last = frame

        if last is None:
            raise ResourceError(f"No frame decoded at {target:.2f}s in {self.path.name}")
        # Past the last frame: use the final one
        return last.to_image()

    def close(self) -> None:
        with self._lock:
            self._container.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
