import pytest

from models.joint_angles import compute_joint_angle, compute_joint_angles, is_limb_visible
from models.landmarks import PoseLandmark, to_landmark_array
from models.schemas import Landmark, SENTINEL_ANGLE


@pytest.mark.parametrize("knee", [180.0, 150.0, 120.0, 90.0])
def test_knee_angles_from_synthetic_pose(pose_factory, knee):
    angles = compute_joint_angles(pose_factory(knee), threshold=0.65)
    assert angles.left_knee == pytest.approx(knee, abs=1e-6)
    assert angles.right_knee == pytest.approx(knee, abs=1e-6)


def test_hip_in_line_with_trunk_is_measured_not_sentinel(standing_pose):
    angles = compute_joint_angles(standing_pose, threshold=0.65)
    assert angles.left_hip > SENTINEL_ANGLE
    assert angles.left_hip == pytest.approx(0.0, abs=0.01)


def test_raised_leg_hip_elevation(supine_pose_factory):
    angles = compute_joint_angles(supine_pose_factory(45.0), threshold=0.65)
    assert angles.left_hip == pytest.approx(45.0)
    assert angles.left_knee == pytest.approx(180.0)


def test_ankle_angle(pose_factory):
    # Straight shin pointing down, foot pointing forward
    angles = compute_joint_angles(pose_factory(180.0), threshold=0.65)
    assert angles.left_ankle == pytest.approx(90.0)


def test_low_visibility_on_one_landmark_gates_only_that_limb(standing_pose):
    standing_pose[PoseLandmark.LEFT_ANKLE, 3] = 0.5

    angles = compute_joint_angles(standing_pose, threshold=0.65)

    assert angles.left_knee == SENTINEL_ANGLE
    assert angles.left_ankle == SENTINEL_ANGLE
    assert angles.left_hip == pytest.approx(0.0, abs=0.01)
    assert angles.right_knee == pytest.approx(180.0)


def test_visibility_threshold_is_strict(standing_pose):
    standing_pose[:, 3] = 0.65
    assert not is_limb_visible(standing_pose, "knee", "left", 0.65)
    assert not compute_joint_angles(standing_pose, threshold=0.65).any_measured


def test_foot_index_gates_ankle_only(standing_pose):
    standing_pose[PoseLandmark.RIGHT_FOOT_INDEX, 3] = 0.1
    angles = compute_joint_angles(standing_pose, threshold=0.65)
    assert angles.right_ankle == SENTINEL_ANGLE
    assert angles.right_knee == pytest.approx(180.0)


def test_coincident_landmarks_yield_sentinel(standing_pose):
    standing_pose[PoseLandmark.LEFT_HIP, :3] = standing_pose[PoseLandmark.LEFT_KNEE, :3]
    assert compute_joint_angle(standing_pose, "knee", "left", 0.65) == SENTINEL_ANGLE


def test_to_landmark_array_accepts_records_and_lists(standing_pose):
    records = [Landmark(x=row[0], y=row[1], z=row[2], visibility=row[3]) for row in standing_pose]
    assert to_landmark_array(records).shape == (33, 4)
    assert to_landmark_array(standing_pose.tolist()).shape == (33, 4)


@pytest.mark.parametrize("bad, message", [
    ([0.1, 0.2, 0.3, 0.4], "2-dimensional"),
    ([[0.0, 0.0, 0.0, 1.0]] * 17, "Expected 33 landmarks"),
    ([[0.0, 0.0, 1.0]] * 33, "Expected 4 values"),
])
def test_to_landmark_array_rejects_malformed_frames(bad, message):
    with pytest.raises(ValueError, match=message):
        to_landmark_array(bad)


def test_ankle_gate_covers_whole_leg(standing_pose):
    standing_pose[PoseLandmark.LEFT_HIP, 3] = 0.2
    angles = compute_joint_angles(standing_pose, threshold=0.65)
    assert angles.left_ankle == SENTINEL_ANGLE
    assert angles.right_ankle == pytest.approx(90.0)
