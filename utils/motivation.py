# motivation.py
"""User-facing status and feedback strings shared by the tracking pipeline."""

DEFAULT_GOOD_TEXT = "✓ Good form!"
DEFAULT_TOO_SHALLOW_TEXT = "↓ Increase the angle"
DEFAULT_TOO_DEEP_TEXT = "↑ Decrease the angle"

CHECK_POSITION_TEXT = "⚠ Joint not visible - check your positioning"
NO_POSE_TEXT = "❌ No pose detected - check lighting & distance"
WAITING_TEXT = "Waiting for position..."
TRACKING_STARTED_TEXT = "🚀 Tracking started! Get into position..."

ENCOURAGEMENT = [
    "Nice and controlled!",
    "Keep it steady!",
    "Great work, keep going!",
    "Smooth movement!",
    "You're doing great!",
]


def get_rep_complete_text(rep_count: int) -> str:
    """
    Message shown on the frame a repetition completes.
    Cycles through encouragement so consecutive reps read differently.
    """
    message = ENCOURAGEMENT[(rep_count - 1) % len(ENCOURAGEMENT)]
    return f"🎉 Rep {rep_count} complete! {message}"


def get_session_complete_text(rep_count: int, duration_seconds: int) -> str:
    return f"✅ Session complete! {rep_count} reps in {duration_seconds}s"


def get_unsupported_exercise_text(exercise_name: str) -> str:
    return f"⚠️ No angle tracking available for \"{exercise_name}\""
