import queue
import time
from typing import Callable, List, Optional

from config import config
from models.schemas import FrameOutput, SessionSummary
from models.tracking_session import TrackingSession
from services.debug_service import debug_service
from services.pose_source import PoseSource
from utils.logging_utils import logger


class FrameLoopDriver:
    """
    Pulls frames from a pose source and runs them through a tracking session, one at a time.
    Frames are processed strictly in arrival order; a frame whose timestamp does not move
    forward is dropped so nothing is processed twice or in reverse.
    Each frame's output is returned from tick() and, if given, put on the outputs queue.
    """

    def __init__(
        self,
        session: TrackingSession,
        source: PoseSource,
        fps: float = None,
        outputs: Optional[queue.Queue] = None,
        session_id: str = "default",
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.session = session
        self.source = source
        self.fps = config.target_fps if fps is None else fps
        self.outputs = outputs
        self.session_id = session_id
        self.clock = clock
        self.sleep = sleep

        self.running = False
        self.frames_processed = 0
        self.last_timestamp: Optional[float] = None
        self.summary: Optional[SessionSummary] = None

    def start(self, now: Optional[float] = None):
        """Begin pulling frames and start tracking on the session"""
        if self.summary is not None:
            raise RuntimeError("Driver already stopped")
        self.session.start_tracking(self.clock() if now is None else now)
        self.running = True
        logger.info(f"Frame loop started for session {self.session_id} at {self.fps:.0f} fps")

    def tick(self) -> Optional[FrameOutput]:
        """
        Process at most one frame. Returns None when the source had nothing new this tick.
        """
        if not self.running:
            raise RuntimeError("Frame loop is not running")

        frame = self.source.read()
        if frame is None:
            return None

        if self.last_timestamp is not None and frame.timestamp <= self.last_timestamp:
            logger.warning(
                f"Dropping out-of-order frame at {frame.timestamp} (last processed {self.last_timestamp})"
            )
            return None
        self.last_timestamp = frame.timestamp

        output = self.session.process_frame(frame.landmarks, now=frame.timestamp)
        self.frames_processed += 1

        if config.save_frames:
            debug_service.save_frame_trace(self.session_id, output)
        if self.outputs is not None:
            self.outputs.put(output)
        return output

    def run(self, max_frames: Optional[int] = None, paced: bool = True) -> List[FrameOutput]:
        """
        Drive the loop until the source is exhausted, stop() is called, or max_frames
        frames were processed. Stop requests are honoured only between frames.
        """
        results = []
        interval = 1.0 / self.fps if self.fps > 0 else 0.0

        while self.running and not self.source.exhausted:
            if max_frames is not None and len(results) >= max_frames:
                break

            tick_started = time.monotonic()
            output = self.tick()
            if output is not None:
                results.append(output)

            if paced and interval:
                remaining = interval - (time.monotonic() - tick_started)
                if remaining > 0:
                    self.sleep(remaining)

        return results

    def stop(self, now: Optional[float] = None) -> SessionSummary:
        """
        Halt frame pulls, freeze the rep count and release session state.
        Calling stop() again returns the same summary.
        """
        if self.summary is not None:
            return self.summary

        self.running = False
        self.source.close()
        self.summary = self.session.stop(self.clock() if now is None else now)
        logger.info(
            f"Frame loop stopped for session {self.session_id} after {self.frames_processed} frames"
        )
        return self.summary
