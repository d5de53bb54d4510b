# main.py
import time
import uuid
from contextlib import asynccontextmanager
from typing import Dict, List

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from config import config
from utils.logging_utils import logger
from utils.motivation import get_unsupported_exercise_text
from models.exercise_config import list_exercises, resolve_exercise_config
from models.landmarks import to_landmark_array
from models.schemas import (
    ExerciseAngleConfig,
    ExerciseSummary,
    FrameOutput,
    FrameRequest,
    SessionCreateRequest,
    SessionSummary,
    TrackingState,
)
from models.tracking_session import TrackingSession
from services.frame_loop import FrameLoopDriver
from services.pose_source import QueuePoseSource


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log the active mode and registry size at startup"""
    logger.info(f"Starting in: {config.mode_description}")
    logger.info(f"Supported exercises: {len(list_exercises())}")
    yield
    logger.info(f"Shutting down with {len(tracking_sessions)} sessions in memory")


# Initialize FastAPI application with dynamic title based on mode
app = FastAPI(title=f"Rehab Angle Tracker - {config.mode_description}", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"]
)

# Session storage: one frame loop (session + push source) per tracking session id.
# Session endpoints are async with no await points, so each frame runs to completion on the event loop.
tracking_sessions: Dict[str, FrameLoopDriver] = {}


def _get_driver(session_id: str) -> FrameLoopDriver:
    driver = tracking_sessions.get(session_id)
    if driver is None:
        raise HTTPException(status_code=404, detail=f"Unknown session '{session_id}'")
    return driver


def _build_state(session_id: str, driver: FrameLoopDriver, output: FrameOutput = None) -> TrackingState:
    """Convert the latest frame output into the client-facing tracking state"""
    session = driver.session
    rep_state = session.rep_state
    last_rep = rep_state.last_rep_timestamp if rep_state else None

    state = TrackingState(
        sessionId=session_id,
        exerciseId=session.exercise.exercise_id,
        repCount=session.rep_count,
        feedback=session.state.feedback,
        isTracking=session.state.is_tracking,
        framesProcessed=driver.frames_processed,
        lastRepAt=int(last_rep * 1000) if last_rep is not None else None,
    )
    if output is not None:
        state.angles = {name: round(value, 1) for name, value in output.angles.model_dump().items()}
        state.formValid = output.validation.valid if output.validation else None
        state.poseDetected = output.pose_detected
    return state


@app.get("/health")
async def health_check():
    """Simple health check endpoint for service monitoring"""
    return {"status": "healthy", "timestamp": time.time()}


@app.get("/exercises", response_model=List[ExerciseSummary])
async def get_exercises():
    """Registry summary of every exercise with angle tracking"""
    return [
        ExerciseSummary(
            id=cfg.exercise_id,
            name=cfg.exercise_name,
            cameraAngle=cfg.camera_angle,
            requiresAngleDetection=cfg.requires_angle_detection,
            countsReps=cfg.rep_counting is not None,
        )
        for cfg in list_exercises()
    ]


@app.get("/exercises/{id_or_name}", response_model=ExerciseAngleConfig)
async def get_exercise(id_or_name: str):
    """Resolve one exercise by id or display name"""
    exercise = resolve_exercise_config(id_or_name)
    if exercise is None:
        raise HTTPException(status_code=404, detail=get_unsupported_exercise_text(id_or_name))
    return exercise


@app.post("/sessions", response_model=TrackingState, status_code=201)
async def create_session(request: SessionCreateRequest):
    """Create a tracking session for the exercise and start tracking immediately"""
    exercise = resolve_exercise_config(request.exercise)
    if exercise is None or not exercise.requires_angle_detection:
        raise HTTPException(status_code=404, detail=get_unsupported_exercise_text(request.exercise))

    session_id = uuid.uuid4().hex
    driver = FrameLoopDriver(TrackingSession(exercise), QueuePoseSource(), session_id=session_id)
    driver.start()
    tracking_sessions[session_id] = driver
    logger.info(f"Session {session_id} created for {exercise.exercise_id}")

    return _build_state(session_id, driver)


@app.post("/sessions/{session_id}/frames", response_model=TrackingState)
async def post_frame(session_id: str, request: FrameRequest):
    """
    Core endpoint: run one frame of landmarks (or null for no pose) through the session.
    Returns smoothed angles, form feedback and the running rep count.
    """
    driver = _get_driver(session_id)
    if not driver.running:
        raise HTTPException(status_code=409, detail=f"Session '{session_id}' is stopped")

    landmarks = None
    if request.landmarks is not None:
        try:
            landmarks = to_landmark_array(request.landmarks)
        except ValueError as e:
            logger.warning(f"Malformed frame for session {session_id}: {e}")
            raise HTTPException(status_code=400, detail=str(e))

    # Posted frames must keep strictly increasing timestamps
    timestamp = time.time()
    if driver.last_timestamp is not None and timestamp <= driver.last_timestamp:
        timestamp = driver.last_timestamp + 1e-6

    driver.source.push(landmarks, timestamp)
    output = driver.tick()
    return _build_state(session_id, driver, output)


@app.post("/sessions/{session_id}/stop", response_model=SessionSummary)
async def stop_session(session_id: str):
    """Stop tracking: freezes the rep count and releases the session's pipeline state"""
    driver = _get_driver(session_id)
    summary = driver.stop()
    logger.info(f"Session {session_id} complete: {summary.rep_count} reps in {summary.duration_seconds}s")
    return summary
