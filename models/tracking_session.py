# tracking_session.py
"""
Per-session angle tracking pipeline.
Threads each frame through landmark smoothing, gated angle computation, angle smoothing,
form validation and rep counting, keeping all session memory in an explicit SessionState.
"""

import math
import time
from typing import Optional

import numpy as np
from pydantic import BaseModel, ConfigDict

from config import config
from models.form_validator import validate_angles
from models.joint_angles import compute_joint_angles
from models.landmarks import FrameInput, to_landmark_array
from models.rep_counter import RepCounter
from models.schemas import (
    ExerciseAngleConfig,
    FrameOutput,
    JointAngleSet,
    RepState,
    SessionSummary,
)
from models.smoothing import count_missed_frame, smooth_angles, smooth_landmarks
from utils.logging_utils import logger
from utils.motivation import (
    NO_POSE_TEXT,
    TRACKING_STARTED_TEXT,
    WAITING_TEXT,
    get_rep_complete_text,
    get_session_complete_text,
)


class SessionState(BaseModel):
    """Everything a session remembers between frames"""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    previous_landmarks: Optional[np.ndarray] = None  # Last smoothed (33, 4) frame
    previous_angles: Optional[JointAngleSet] = None  # Last smoothed angles
    no_detection_count: int = 0
    frame_index: int = 0
    is_tracking: bool = False
    is_stopped: bool = False
    started_at: Optional[float] = None
    feedback: str = WAITING_TEXT


class TrackingSession:
    """
    Angle tracking session for a single exercise.
    Angles are smoothed on every frame; validation and rep counting run only while tracking.
    """

    def __init__(
        self,
        exercise: ExerciseAngleConfig,
        landmark_smoothing: float = None,
        angle_smoothing: float = None,
        visibility_threshold: float = None,
        no_detection_frames: int = None,
    ):
        self.exercise = exercise
        self.landmark_smoothing = config.landmark_smoothing if landmark_smoothing is None else landmark_smoothing
        self.angle_smoothing = config.angle_smoothing if angle_smoothing is None else angle_smoothing
        self.visibility_threshold = (
            config.visibility_threshold if visibility_threshold is None else visibility_threshold
        )
        self.no_detection_frames = (
            config.no_detection_frames if no_detection_frames is None else no_detection_frames
        )

        self.state = SessionState()
        self.rep_counter: Optional[RepCounter] = (
            RepCounter(exercise.rep_counting) if exercise.rep_counting else None
        )
        logger.info(f"TrackingSession initialized for exercise: {exercise.exercise_id}")

    @property
    def rep_count(self) -> int:
        return self.rep_counter.count if self.rep_counter else 0

    @property
    def rep_state(self) -> Optional[RepState]:
        return self.rep_counter.state if self.rep_counter else None

    def start_tracking(self, now: Optional[float] = None):
        """Begin validation and rep counting from a fresh rep state"""
        if self.state.is_stopped:
            raise RuntimeError("Session already stopped")

        self.state.is_tracking = True
        self.state.started_at = time.time() if now is None else now
        self.state.feedback = TRACKING_STARTED_TEXT
        if self.rep_counter:
            self.rep_counter.reset()
        logger.info(f"Tracking started for {self.exercise.exercise_id}")

    def process_frame(self, pose: Optional[FrameInput], now: Optional[float] = None) -> FrameOutput:
        """
        Run one frame through the pipeline. pose is None when the source detected nobody.
        Raises ValueError for a malformed pose and RuntimeError once the session is stopped.
        """
        if self.state.is_stopped:
            raise RuntimeError("Cannot process frames on a stopped session")

        landmarks = None if pose is None else to_landmark_array(pose)
        self.state.frame_index += 1
        if landmarks is None:
            return self._handle_missing_pose()

        self.state.no_detection_count = 0

        smoothed_landmarks = smooth_landmarks(
            landmarks, self.state.previous_landmarks, self.landmark_smoothing
        )
        self.state.previous_landmarks = smoothed_landmarks

        raw_angles = compute_joint_angles(smoothed_landmarks, self.visibility_threshold)
        angles = smooth_angles(raw_angles, self.state.previous_angles, self.angle_smoothing)
        self.state.previous_angles = angles

        if not self.state.is_tracking:
            return self._output(angles, pose_detected=True)

        validation = validate_angles(self.exercise, angles)
        self.state.feedback = validation.feedback

        event = None
        if self.rep_counter:
            event = self.rep_counter.update(angles, now)
            if event is not None:
                self.state.feedback = get_rep_complete_text(event.rep_count)

        return self._output(angles, pose_detected=True, validation=validation, rep_event=event)

    def _handle_missing_pose(self) -> FrameOutput:
        self.state.no_detection_count, expired = count_missed_frame(
            self.state.no_detection_count, self.no_detection_frames
        )
        if expired and (self.state.previous_landmarks is not None or self.state.previous_angles is not None):
            logger.info(
                f"No pose for {self.state.no_detection_count} frames, clearing smoothing history"
            )
            self.state.previous_landmarks = None
            self.state.previous_angles = None

        angles = self.state.previous_angles if self.state.previous_angles is not None else JointAngleSet()
        if self.state.is_tracking:
            self.state.feedback = NO_POSE_TEXT
        return self._output(angles, pose_detected=False)

    def _output(self, angles: JointAngleSet, pose_detected: bool, validation=None, rep_event=None) -> FrameOutput:
        return FrameOutput(
            frame_index=self.state.frame_index,
            pose_detected=pose_detected,
            is_tracking=self.state.is_tracking,
            angles=angles,
            feedback=self.state.feedback,
            rep_count=self.rep_count,
            validation=validation,
            rep_event=rep_event,
        )

    def stop(self, now: Optional[float] = None) -> SessionSummary:
        """
        Freeze the rep count as the final result and release per-session state.
        Stopping twice returns the same summary.
        """
        if self.state.is_stopped:
            return self.summary

        now = time.time() if now is None else now
        started_at = self.state.started_at if self.state.started_at is not None else now
        duration = max(0, math.floor(now - started_at))

        self.summary = SessionSummary(rep_count=self.rep_count, duration_seconds=duration)
        final_feedback = get_session_complete_text(self.summary.rep_count, duration)

        # Only the frozen count survives a stop
        if self.rep_counter:
            self.rep_counter.state = RepState(
                rep_count=self.summary.rep_count,
                last_rep_timestamp=self.rep_counter.state.last_rep_timestamp,
            )
        self.state = SessionState(
            frame_index=self.state.frame_index,
            is_stopped=True,
            feedback=final_feedback,
        )
        logger.info(f"Session stopped: {self.summary.rep_count} reps in {duration}s")
        return self.summary
