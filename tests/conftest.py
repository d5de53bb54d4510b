# conftest.py
"""
Shared synthetic pose frames.
Legs are built in the x/y plane so the knee angle is exactly the requested value.
"""

import math

import numpy as np
import pytest

from config import config
from models.landmarks import NUM_LANDMARKS, PoseLandmark


def make_pose(knee_angle: float = 180.0, visibility: float = 0.9) -> np.ndarray:
    """
    (33, 4) frame with both legs bent to knee_angle degrees.
    Thigh points straight down from hip to knee; the shin is rotated by 180 - knee_angle.
    """
    pose = np.zeros((NUM_LANDMARKS, 4))
    pose[:, 0] = 0.5
    pose[:, 1] = 0.5
    pose[:, 3] = visibility

    bend = math.radians(180.0 - knee_angle)
    for side, dx in (("LEFT", -0.05), ("RIGHT", 0.05)):
        shoulder = np.array([0.5 + dx, 0.2, 0.0])
        hip = np.array([0.5 + dx, 0.5, 0.0])
        knee = np.array([0.5 + dx, 0.7, 0.0])
        ankle = knee + 0.2 * np.array([math.sin(bend), math.cos(bend), 0.0])
        foot = ankle + np.array([0.05, 0.0, 0.0])

        for name, point in (("SHOULDER", shoulder), ("HIP", hip), ("KNEE", knee),
                            ("ANKLE", ankle), ("FOOT_INDEX", foot)):
            pose[PoseLandmark[f"{side}_{name}"], :3] = point

    return pose


def make_supine_pose(lift: float = 0.0, visibility: float = 0.9) -> np.ndarray:
    """
    (33, 4) frame lying along x with both straight legs raised lift degrees off the floor.
    The trunk runs from shoulder to hip along -x, so hip elevation equals lift.
    """
    pose = np.zeros((NUM_LANDMARKS, 4))
    pose[:, 0] = 0.5
    pose[:, 1] = 0.6
    pose[:, 3] = visibility

    rad = math.radians(lift)
    leg = np.array([math.cos(rad), -math.sin(rad), 0.0])
    for side, dz in (("LEFT", -0.05), ("RIGHT", 0.05)):
        shoulder = np.array([0.2, 0.6, dz])
        hip = np.array([0.5, 0.6, dz])
        knee = hip + 0.2 * leg
        ankle = hip + 0.4 * leg
        foot = ankle + np.array([0.0, -0.05, 0.0])

        for name, point in (("SHOULDER", shoulder), ("HIP", hip), ("KNEE", knee),
                            ("ANKLE", ankle), ("FOOT_INDEX", foot)):
            pose[PoseLandmark[f"{side}_{name}"], :3] = point

    return pose


@pytest.fixture
def pose_factory():
    return make_pose


@pytest.fixture
def supine_pose_factory():
    return make_supine_pose


@pytest.fixture
def standing_pose():
    return make_pose(180.0)


@pytest.fixture
def trace_dir(tmp_path, monkeypatch):
    """Enable debug trace saving into a temporary directory"""
    monkeypatch.setattr(config, "save_frames", True)
    monkeypatch.setattr(config, "debug_dir", tmp_path)
    return tmp_path
