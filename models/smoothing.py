# smoothing.py
"""
Two-stage exponential moving average smoothing.
Stage one damps landmark jitter, stage two damps the derived joint angles.
Both recurrences are pure: the caller owns and threads the previous values.
"""

from typing import Optional, Tuple

import numpy as np

from config import config
from models.landmarks import VISIBILITY
from models.schemas import JointAngleSet, SENTINEL_ANGLE


def ema(previous: float, current: float, alpha: float) -> float:
    """new = previous * (1 - alpha) + current * alpha"""
    return previous * (1.0 - alpha) + current * alpha


def smooth_landmarks(
    current: np.ndarray,
    previous: Optional[np.ndarray],
    alpha: float = None,
) -> np.ndarray:
    """
    Blend this frame's raw landmarks with the previous smoothed frame.
    Only x, y, z are averaged; visibility always reflects the current frame.
    Without history the current frame is returned as a copy.
    """
    alpha = config.landmark_smoothing if alpha is None else alpha
    smoothed = np.array(current, dtype=np.float64, copy=True)
    if previous is None:
        return smoothed

    smoothed[:, :VISIBILITY] = previous[:, :VISIBILITY] * (1.0 - alpha) + current[:, :VISIBILITY] * alpha
    return smoothed


def smooth_angles(
    raw: JointAngleSet,
    previous: Optional[JointAngleSet],
    alpha: float = None,
) -> JointAngleSet:
    """
    Per-joint EMA over angle scalars.
    A sentinel raw angle yields a sentinel output immediately (no decay toward zero),
    and a raw angle following a sentinel starts fresh from the raw value.
    """
    alpha = config.angle_smoothing if alpha is None else alpha
    if previous is None:
        return raw.model_copy()

    prev_values = previous.model_dump()
    smoothed = {}
    for name, value in raw.model_dump().items():
        prior = prev_values[name]
        if value <= SENTINEL_ANGLE:
            smoothed[name] = SENTINEL_ANGLE
        elif prior <= SENTINEL_ANGLE:
            smoothed[name] = value
        else:
            smoothed[name] = ema(prior, value, alpha)
    return JointAngleSet(**smoothed)


def count_missed_frame(no_detection_count: int, grace_frames: int = None) -> Tuple[int, bool]:
    """
    Advance the consecutive no-detection counter.
    Returns the new count and whether the grace period has run out, which happens
    on the grace_frames-th consecutive empty frame.
    """
    grace_frames = config.no_detection_frames if grace_frames is None else grace_frames
    no_detection_count += 1
    return no_detection_count, no_detection_count >= grace_frames
