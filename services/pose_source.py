import json
from collections import deque
from pathlib import Path
from typing import Iterable, NamedTuple, Optional, Union

from models.landmarks import FrameInput
from utils.logging_utils import logger


class PoseFrame(NamedTuple):
    """One frame pulled from a pose source; landmarks is None when no pose was detected"""
    timestamp: float
    landmarks: Optional[FrameInput]


class PoseSource:
    """
    Upstream collaborator producing zero or one pose per video frame.
    read() returns None when no new frame is available yet; callers skip that tick.
    """

    def read(self) -> Optional[PoseFrame]:
        raise NotImplementedError

    @property
    def exhausted(self) -> bool:
        """True once the source will never produce another frame"""
        return False

    def close(self):
        pass


class ReplayPoseSource(PoseSource):
    """
    Replays a recorded landmark trace in order with synthetic timestamps at a fixed frame rate.
    Each entry is a (33, 4) pose or None for a frame where nobody was detected.
    """

    def __init__(self, poses: Iterable[Optional[FrameInput]], fps: float = 30.0, start_time: float = 0.0):
        self._frames = deque(
            PoseFrame(timestamp=start_time + i / fps, landmarks=pose)
            for i, pose in enumerate(poses)
        )
        self._closed = False

    @classmethod
    def from_json(cls, path: Union[str, Path], fps: float = 30.0) -> "ReplayPoseSource":
        """
        Load a trace file: a JSON list whose items are either a list of 33
        [x, y, z, visibility] rows, null, or an object with a "landmarks" key.
        """
        with open(path, "r", encoding="utf-8") as f:
            records = json.load(f)

        poses = [
            record.get("landmarks") if isinstance(record, dict) else record
            for record in records
        ]
        logger.info(f"Loaded {len(poses)} recorded frames from {path}")
        return cls(poses, fps=fps)

    def read(self) -> Optional[PoseFrame]:
        if self._closed or not self._frames:
            return None
        return self._frames.popleft()

    @property
    def exhausted(self) -> bool:
        return self._closed or not self._frames

    def close(self):
        self._closed = True
        self._frames.clear()


class QueuePoseSource(PoseSource):
    """
    Push-based source fed by the service host, one posted frame at a time.
    """

    def __init__(self):
        self._frames = deque()
        self._closed = False

    def push(self, landmarks: Optional[FrameInput], timestamp: float):
        if self._closed:
            raise RuntimeError("Pose source is closed")
        self._frames.append(PoseFrame(timestamp=timestamp, landmarks=landmarks))

    def read(self) -> Optional[PoseFrame]:
        if not self._frames:
            return None
        return self._frames.popleft()

    @property
    def exhausted(self) -> bool:
        return self._closed and not self._frames

    def close(self):
        self._closed = True
        self._frames.clear()
