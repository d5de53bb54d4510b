from concurrent.futures import ThreadPoolExecutor

import pytest
from fastapi.testclient import TestClient

from main import app, tracking_sessions


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client
    tracking_sessions.clear()


@pytest.fixture
def session_id(client):
    response = client.post("/sessions", json={"exercise": "Heel Slide"})
    assert response.status_code == 201
    return response.json()["sessionId"]


def post_knee(client, session_id, pose_factory, knee):
    return client.post(
        f"/sessions/{session_id}/frames",
        json={"landmarks": pose_factory(knee).tolist()},
    )


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_list_exercises(client):
    exercises = client.get("/exercises").json()
    assert len(exercises) == 15
    assert exercises[0] == {
        "id": "heel-slide",
        "name": "Heel Slide",
        "cameraAngle": "side",
        "requiresAngleDetection": True,
        "countsReps": True,
    }


def test_get_exercise_by_name(client):
    response = client.get("/exercises/HEEL SLIDE")
    assert response.status_code == 200
    assert response.json()["exercise_id"] == "heel-slide"


def test_unknown_exercise_is_404(client):
    assert client.get("/exercises/bench-press").status_code == 404
    assert client.post("/sessions", json={"exercise": "Bench Press"}).status_code == 404


def test_create_session_starts_tracking(client):
    state = client.post("/sessions", json={"exercise": "calf-raise"}).json()
    assert state["exerciseId"] == "calf-raise"
    assert state["isTracking"] is True
    assert state["repCount"] == 0
    assert state["lastRepAt"] is None


def test_frames_return_angles_and_feedback(client, session_id, pose_factory):
    response = post_knee(client, session_id, pose_factory, 120.0)

    assert response.status_code == 200
    state = response.json()
    assert state["poseDetected"] is True
    assert state["angles"]["left_knee"] == pytest.approx(120.0, abs=0.1)
    assert state["formValid"] is True
    assert state["framesProcessed"] == 1


def test_null_landmarks_report_no_pose(client, session_id):
    state = client.post(f"/sessions/{session_id}/frames", json={"landmarks": None}).json()
    assert state["poseDetected"] is False
    assert state["formValid"] is None
    assert "No pose" in state["feedback"]


def test_malformed_frame_is_400(client, session_id):
    response = client.post(
        f"/sessions/{session_id}/frames",
        json={"landmarks": [[0.5, 0.5, 0.0, 0.9]] * 12},
    )
    assert response.status_code == 400
    assert "Expected 33 landmarks" in response.json()["detail"]


def test_unknown_session_is_404(client):
    assert client.post("/sessions/nope/frames", json={"landmarks": None}).status_code == 404
    assert client.post("/sessions/nope/stop").status_code == 404


def test_stop_returns_summary_and_rejects_frames(client, session_id, pose_factory):
    post_knee(client, session_id, pose_factory, 175.0)

    response = client.post(f"/sessions/{session_id}/stop")
    assert response.status_code == 200
    summary = response.json()
    assert summary["rep_count"] == 0
    assert summary["duration_seconds"] >= 0

    assert post_knee(client, session_id, pose_factory, 175.0).status_code == 409
    assert client.post(f"/sessions/{session_id}/stop").json() == summary


def test_concurrent_frames_are_processed_one_at_a_time(client, session_id, pose_factory):
    knees = [175.0, 100.0] * 10

    with ThreadPoolExecutor(max_workers=4) as pool:
        responses = list(pool.map(lambda knee: post_knee(client, session_id, pose_factory, knee), knees))

    assert all(r.status_code == 200 for r in responses)
    states = [r.json() for r in responses]
    # No frame was dropped or processed twice
    assert all(s["poseDetected"] for s in states)
    assert sorted(s["framesProcessed"] for s in states) == list(range(1, len(knees) + 1))
