# geometry.py
"""
Joint angle geometry on normalized landmark coordinates.
All functions are pure; points are any sequence whose first three values are x, y, z.
"""

from typing import Sequence

import numpy as np

Point = Sequence[float]


def _vec(point: Point) -> np.ndarray:
    return np.asarray(point, dtype=np.float64)[:3]


def angle_at_vertex(a: Point, b: Point, c: Point) -> float:
    """
    Angle ABC in degrees, with b as the vertex, from the 3D vectors b->a and b->c.
    Coincident inputs are undefined; callers guard with is_degenerate() first.
    """
    ba = _vec(a) - _vec(b)
    bc = _vec(c) - _vec(b)

    cosine = np.dot(ba, bc) / (np.linalg.norm(ba) * np.linalg.norm(bc))
    # Rounding can push |cosine| slightly past 1 for collinear points
    return float(np.degrees(np.arccos(np.clip(cosine, -1.0, 1.0))))


def is_degenerate(a: Point, b: Point, c: Point, min_length: float = 1e-6) -> bool:
    """True when either arm of the angle is shorter than min_length."""
    ba = _vec(a) - _vec(b)
    bc = _vec(c) - _vec(b)
    return bool(np.linalg.norm(ba) < min_length or np.linalg.norm(bc) < min_length)


def knee_angle(hip: Point, knee: Point, ankle: Point) -> float:
    return angle_at_vertex(hip, knee, ankle)


def ankle_angle(knee: Point, ankle: Point, foot_index: Point) -> float:
    return angle_at_vertex(knee, ankle, foot_index)


def hip_angle(shoulder: Point, hip: Point, knee: Point) -> float:
    """
    Leg elevation at the hip: 180 minus angle shoulder-hip-knee.
    0 with the thigh in line with the trunk, growing as the leg is raised or abducted.
    """
    return 180.0 - angle_at_vertex(shoulder, hip, knee)


def angle_2d(a: Point, b: Point, c: Point) -> float:
    """
    Planar angle ABC ignoring z, folded into [0, 180].
    Useful for strict side-view exercises where depth estimates are noisy.
    """
    radians = np.arctan2(c[1] - b[1], c[0] - b[0]) - np.arctan2(a[1] - b[1], a[0] - b[0])
    angle = abs(float(np.degrees(radians)))
    if angle > 180.0:
        angle = 360.0 - angle
    return angle
