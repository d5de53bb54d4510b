import json

from config import config
from models.exercise_config import EXERCISE_ANGLE_CONFIGS
from models.tracking_session import TrackingSession
from services.debug_service import debug_service
from services.frame_loop import FrameLoopDriver
from services.pose_source import ReplayPoseSource


def test_no_trace_written_when_saving_disabled(tmp_path, monkeypatch, standing_pose):
    monkeypatch.setattr(config, "save_frames", False)
    monkeypatch.setattr(config, "debug_dir", tmp_path)

    session = TrackingSession(EXERCISE_ANGLE_CONFIGS["heel-slide"])
    debug_service.save_frame_trace("s1", session.process_frame(standing_pose))

    assert list(tmp_path.iterdir()) == []


def test_frame_loop_writes_one_trace_line_per_frame(trace_dir, pose_factory):
    source = ReplayPoseSource([pose_factory(175.0), None, pose_factory(100.0)])
    driver = FrameLoopDriver(
        TrackingSession(EXERCISE_ANGLE_CONFIGS["heel-slide"]), source, session_id="abc"
    )
    driver.start()
    driver.run(paced=False)

    lines = (trace_dir / "trace_abc.jsonl").read_text(encoding="utf-8").splitlines()
    records = [json.loads(line) for line in lines]

    assert [r["frame"] for r in records] == [1, 2, 3]
    assert [r["pose_detected"] for r in records] == [True, False, True]
    assert records[0]["angles"]["left_knee"] > 170
    assert records[0]["tracking"] is True
    assert records[0]["valid"] is False
    assert records[1]["valid"] is None
