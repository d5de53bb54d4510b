# joint_angles.py
"""
Visibility-gated joint angle computation.
A limb is trusted only when every landmark it needs exceeds the visibility threshold;
untrusted or degenerate limbs yield the sentinel angle instead of a guess.
"""

from typing import Callable, Dict, Tuple

import numpy as np

from config import config
from models.landmarks import JOINT_TRIPLES, VISIBILITY, PoseLandmark
from models.schemas import JointAngleSet, SENTINEL_ANGLE
from utils.geometry import ankle_angle, hip_angle, is_degenerate, knee_angle

# Landmarks that must all be visible before a joint angle is trusted.
# The ankle depends on the whole lower leg plus the foot index.
LIMB_LANDMARKS: Dict[Tuple[str, str], Tuple[PoseLandmark, ...]] = {
    ("knee", "left"): (PoseLandmark.LEFT_HIP, PoseLandmark.LEFT_KNEE, PoseLandmark.LEFT_ANKLE),
    ("knee", "right"): (PoseLandmark.RIGHT_HIP, PoseLandmark.RIGHT_KNEE, PoseLandmark.RIGHT_ANKLE),
    ("ankle", "left"): (
        PoseLandmark.LEFT_HIP, PoseLandmark.LEFT_KNEE,
        PoseLandmark.LEFT_ANKLE, PoseLandmark.LEFT_FOOT_INDEX,
    ),
    ("ankle", "right"): (
        PoseLandmark.RIGHT_HIP, PoseLandmark.RIGHT_KNEE,
        PoseLandmark.RIGHT_ANKLE, PoseLandmark.RIGHT_FOOT_INDEX,
    ),
    ("hip", "left"): (PoseLandmark.LEFT_SHOULDER, PoseLandmark.LEFT_HIP, PoseLandmark.LEFT_KNEE),
    ("hip", "right"): (PoseLandmark.RIGHT_SHOULDER, PoseLandmark.RIGHT_HIP, PoseLandmark.RIGHT_KNEE),
}


# Angle function per joint, applied to the JOINT_TRIPLES landmarks
JOINT_ANGLE_FUNCTIONS: Dict[str, Callable[..., float]] = {
    "knee": knee_angle,
    "ankle": ankle_angle,
    "hip": hip_angle,
}

# A measured angle is never reported as exactly the sentinel
MIN_MEASURED_ANGLE = 1e-3


def is_limb_visible(landmarks: np.ndarray, joint: str, side: str, threshold: float = None) -> bool:
    """True iff every landmark the joint depends on is strictly above the threshold"""
    threshold = config.visibility_threshold if threshold is None else threshold
    indices = list(LIMB_LANDMARKS[(joint, side)])
    return bool(np.all(landmarks[indices, VISIBILITY] > threshold))


def compute_joint_angle(
    landmarks: np.ndarray,
    joint: str,
    side: str,
    threshold: float = None,
    min_vector_length: float = None,
) -> float:
    """Gated angle for one joint, or the sentinel when it cannot be trusted this frame"""
    min_vector_length = config.min_vector_length if min_vector_length is None else min_vector_length
    if not is_limb_visible(landmarks, joint, side, threshold):
        return SENTINEL_ANGLE

    a, b, c = (landmarks[index, :VISIBILITY] for index in JOINT_TRIPLES[(joint, side)])
    if is_degenerate(a, b, c, min_vector_length):
        return SENTINEL_ANGLE

    return max(JOINT_ANGLE_FUNCTIONS[joint](a, b, c), MIN_MEASURED_ANGLE)


def compute_joint_angles(
    landmarks: np.ndarray,
    threshold: float = None,
    min_vector_length: float = None,
) -> JointAngleSet:
    """Raw (unsmoothed) angle set for knees, ankles and hips on both sides"""
    angles = {
        f"{side}_{joint}": compute_joint_angle(landmarks, joint, side, threshold, min_vector_length)
        for joint, side in LIMB_LANDMARKS
    }
    return JointAngleSet(**angles)
