# schemas.py
from typing import Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

Joint = Literal["knee", "ankle", "hip"]
Side = Literal["left", "right", "both"]
Direction = Literal["above", "below"]
CameraAngle = Literal["side", "front", "back"]

# An angle of exactly 0 means "not currently measurable"
SENTINEL_ANGLE = 0.0


class Landmark(BaseModel):
    """Single tracked body point in normalized coordinates with its detection confidence"""
    x: float
    y: float
    z: float = 0.0
    visibility: float = Field(default=0.0, ge=0.0, le=1.0)


class JointAngleSet(BaseModel):
    """
    Per-frame joint angles in degrees. Every value lies in [0, 180];
    0 is the sentinel for an angle that could not be measured this frame.
    Knee and ankle are inner joint angles (180 = straight). Hip is leg elevation
    from the trunk line (0 = thigh in line with the trunk).
    """
    left_knee: float = SENTINEL_ANGLE
    right_knee: float = SENTINEL_ANGLE
    left_ankle: float = SENTINEL_ANGLE
    right_ankle: float = SENTINEL_ANGLE
    left_hip: float = SENTINEL_ANGLE
    right_hip: float = SENTINEL_ANGLE

    def get(self, joint: str, side: str) -> float:
        """Angle for a single side ('left' or 'right') of a joint"""
        return getattr(self, f"{side}_{joint}")

    def resolve(self, joint: str, side: str) -> float:
        """
        Angle for a joint on the requested side. 'both' averages the two sides
        when both are measurable, falls back to whichever side is measurable,
        and is the sentinel when neither is.
        """
        if side != "both":
            return self.get(joint, side)

        left = self.get(joint, "left")
        right = self.get(joint, "right")
        if left > SENTINEL_ANGLE and right > SENTINEL_ANGLE:
            return (left + right) / 2
        if left > SENTINEL_ANGLE:
            return left
        if right > SENTINEL_ANGLE:
            return right
        return SENTINEL_ANGLE

    @property
    def any_measured(self) -> bool:
        return any(value > SENTINEL_ANGLE for value in self.model_dump().values())


class AngleRequirement(BaseModel):
    """Valid angle range for one joint of an exercise"""
    model_config = ConfigDict(frozen=True)

    joint: Joint
    side: Side
    min_angle: Optional[float] = None
    max_angle: Optional[float] = None
    target_angle: Optional[float] = None
    tolerance: Optional[float] = None  # Acceptable deviation from target (±degrees)
    description: str


class RepCondition(BaseModel):
    """Threshold the tracked angle must cross to count as a start or end position"""
    model_config = ConfigDict(frozen=True)

    joint: Joint
    side: Side
    angle_threshold: float
    direction: Direction

    def is_met(self, angle: float) -> bool:
        if self.direction == "above":
            return angle > self.angle_threshold
        return angle < self.angle_threshold


class RepCountingRule(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: RepCondition
    end: RepCondition


class FeedbackMessages(BaseModel):
    model_config = ConfigDict(frozen=True)

    good: str
    too_shallow: str
    too_deep: str


class ExerciseAngleConfig(BaseModel):
    """Declarative angle tracking setup for one supported exercise"""
    model_config = ConfigDict(frozen=True)

    exercise_id: str
    exercise_name: str
    requires_angle_detection: bool = True
    camera_angle: CameraAngle
    angle_requirements: Tuple[AngleRequirement, ...]
    rep_counting: Optional[RepCountingRule] = None
    feedback: Optional[FeedbackMessages] = None


class RepState(BaseModel):
    """Repetition state machine memory for a single tracking session"""
    rep_count: int = Field(default=0, ge=0)
    is_in_start_position: bool = False
    has_reached_end_position: bool = False
    last_rep_timestamp: Optional[float] = None  # Epoch seconds of the last completed rep


class RepEvent(BaseModel):
    """Emitted on the frame a repetition completes"""
    rep_count: int
    timestamp: float


class RequirementCheck(BaseModel):
    requirement: AngleRequirement
    current_angle: float
    valid: bool
    measurable: bool = True


class ValidationResult(BaseModel):
    valid: bool
    feedback: str
    details: List[RequirementCheck] = Field(default_factory=list)


class FrameOutput(BaseModel):
    """Everything one processed frame publishes to the rendering and progress collaborators"""
    frame_index: int
    pose_detected: bool
    is_tracking: bool
    angles: JointAngleSet
    feedback: str
    rep_count: int
    validation: Optional[ValidationResult] = None
    rep_event: Optional[RepEvent] = None


class SessionSummary(BaseModel):
    """Final result handed to the completion callback when a session stops"""
    rep_count: int
    duration_seconds: int


class TrackingState(BaseModel):
    """
    Pydantic model representing the tracking state returned to clients after each frame.
    Contains rep count, smoothed joint angles, form feedback, and session status.
    """
    sessionId: str                              # Tracking session identifier
    exerciseId: str                             # Resolved exercise configuration id
    repCount: int = 0                           # Current repetition count
    angles: Dict[str, float] = Field(default_factory=dict)  # Smoothed joint angles (0 = not measurable)
    feedback: str = ""                          # Form feedback or status message
    formValid: Optional[bool] = None            # Whether every angle requirement passed this frame
    poseDetected: bool = False                  # Whether the pose source produced landmarks
    isTracking: bool = False                    # Whether validation and rep counting are active
    framesProcessed: int = 0                    # Total frames processed in session
    lastRepAt: Optional[int] = None             # Timestamp of last completed repetition (milliseconds)


class SessionCreateRequest(BaseModel):
    """Body of POST /sessions: exercise id or display name"""
    exercise: str


class FrameRequest(BaseModel):
    """Body of POST /sessions/{id}/frames: 33 [x, y, z, visibility] rows, or null for no pose"""
    landmarks: Optional[List[List[float]]] = None


class ExerciseSummary(BaseModel):
    id: str
    name: str
    cameraAngle: CameraAngle
    requiresAngleDetection: bool
    countsReps: bool
