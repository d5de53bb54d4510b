# landmarks.py
"""
Pose landmark layout shared by the pose source and the angle pipeline.
A frame is a (33, 4) float array of x, y, z, visibility rows indexed by PoseLandmark.
"""

from enum import IntEnum
from typing import Dict, Iterable, Tuple, Union

import numpy as np

from models.schemas import Landmark

NUM_LANDMARKS = 33
LANDMARK_COLUMNS = 4  # x, y, z, visibility
VISIBILITY = 3


class PoseLandmark(IntEnum):
    NOSE = 0
    LEFT_EYE_INNER = 1
    LEFT_EYE = 2
    LEFT_EYE_OUTER = 3
    RIGHT_EYE_INNER = 4
    RIGHT_EYE = 5
    RIGHT_EYE_OUTER = 6
    LEFT_EAR = 7
    RIGHT_EAR = 8
    MOUTH_LEFT = 9
    MOUTH_RIGHT = 10
    LEFT_SHOULDER = 11
    RIGHT_SHOULDER = 12
    LEFT_ELBOW = 13
    RIGHT_ELBOW = 14
    LEFT_WRIST = 15
    RIGHT_WRIST = 16
    LEFT_PINKY = 17
    RIGHT_PINKY = 18
    LEFT_INDEX = 19
    RIGHT_INDEX = 20
    LEFT_THUMB = 21
    RIGHT_THUMB = 22
    LEFT_HIP = 23
    RIGHT_HIP = 24
    LEFT_KNEE = 25
    RIGHT_KNEE = 26
    LEFT_ANKLE = 27
    RIGHT_ANKLE = 28
    LEFT_HEEL = 29
    RIGHT_HEEL = 30
    LEFT_FOOT_INDEX = 31
    RIGHT_FOOT_INDEX = 32


# Landmark triples (first, vertex, last) whose angle is tracked per joint and side
JOINT_TRIPLES: Dict[Tuple[str, str], Tuple[PoseLandmark, PoseLandmark, PoseLandmark]] = {
    ("knee", "left"): (PoseLandmark.LEFT_HIP, PoseLandmark.LEFT_KNEE, PoseLandmark.LEFT_ANKLE),
    ("knee", "right"): (PoseLandmark.RIGHT_HIP, PoseLandmark.RIGHT_KNEE, PoseLandmark.RIGHT_ANKLE),
    ("ankle", "left"): (PoseLandmark.LEFT_KNEE, PoseLandmark.LEFT_ANKLE, PoseLandmark.LEFT_FOOT_INDEX),
    ("ankle", "right"): (PoseLandmark.RIGHT_KNEE, PoseLandmark.RIGHT_ANKLE, PoseLandmark.RIGHT_FOOT_INDEX),
    ("hip", "left"): (PoseLandmark.LEFT_SHOULDER, PoseLandmark.LEFT_HIP, PoseLandmark.LEFT_KNEE),
    ("hip", "right"): (PoseLandmark.RIGHT_SHOULDER, PoseLandmark.RIGHT_HIP, PoseLandmark.RIGHT_KNEE),
}

FrameInput = Union[np.ndarray, Iterable[Iterable[float]], Iterable[Landmark]]


def to_landmark_array(frame: FrameInput) -> np.ndarray:
    """Validate and convert one pose to a (33, 4) float64 array.

    Args:
        frame: NumPy array, nested lists of [x, y, z, visibility], or Landmark records.

    Returns:
        A new np.ndarray of shape (33, 4); the input is never modified.

    Raises:
        ValueError: If the shape is invalid.
    """
    if not isinstance(frame, np.ndarray):
        rows = [
            [row.x, row.y, row.z, row.visibility] if isinstance(row, Landmark) else row
            for row in frame
        ]
        frame = rows
    arr = np.array(frame, dtype=np.float64)

    if arr.ndim != 2:
        raise ValueError(
            f"pose must be 2-dimensional (33 × 4), got shape {arr.shape}."
        )
    if arr.shape[0] != NUM_LANDMARKS:
        raise ValueError(
            f"Expected {NUM_LANDMARKS} landmarks per frame, got {arr.shape[0]}."
        )
    if arr.shape[1] != LANDMARK_COLUMNS:
        raise ValueError(
            f"Expected {LANDMARK_COLUMNS} values per landmark (x, y, z, visibility), "
            f"got {arr.shape[1]}."
        )

    return arr
