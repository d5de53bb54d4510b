# exercise_config.py
"""
Compiled-in registry of exercise angle configurations and the id/name resolver.
The registry is read-only and safe to share between tracking sessions.
"""

import re
from types import MappingProxyType
from typing import List, Mapping, Optional

from models.schemas import (
    AngleRequirement,
    ExerciseAngleConfig,
    FeedbackMessages,
    RepCondition,
    RepCountingRule,
)
from utils.logging_utils import logger


def _rule(joint: str, start: tuple, end: tuple) -> RepCountingRule:
    """Shorthand for a single-joint, two-sided rule: start/end are (threshold, direction)"""
    return RepCountingRule(
        start=RepCondition(joint=joint, side="both", angle_threshold=start[0], direction=start[1]),
        end=RepCondition(joint=joint, side="both", angle_threshold=end[0], direction=end[1]),
    )


_CONFIGS = (
    # ==================== KNEE EXERCISES ====================
    ExerciseAngleConfig(
        exercise_id="heel-slide",
        exercise_name="Heel Slide",
        camera_angle="side",
        angle_requirements=(
            AngleRequirement(joint="knee", side="both", min_angle=90, max_angle=145,
                             target_angle=120, tolerance=15,
                             description="Knee should bend between 90-145°"),
        ),
        rep_counting=_rule("knee", (160, "above"), (120, "below")),
        feedback=FeedbackMessages(
            good="✓ Great knee flexion!",
            too_shallow="↓ Try to bend deeper (aim for 120°)",
            too_deep="↑ Don't bend too far - stop before pain",
        ),
    ),
    ExerciseAngleConfig(
        exercise_id="short-arc-quad",
        exercise_name="Short Arc Quad",
        camera_angle="side",
        angle_requirements=(
            AngleRequirement(joint="knee", side="both", min_angle=150, max_angle=180,
                             target_angle=170, tolerance=10,
                             description="Knee should extend to nearly straight (150-180°)"),
        ),
        rep_counting=_rule("knee", (140, "below"), (160, "above")),
        feedback=FeedbackMessages(
            good="✓ Perfect extension!",
            too_shallow="↑ Extend knee more (straighten leg)",
            too_deep="✓ Good, hold the contraction",
        ),
    ),
    ExerciseAngleConfig(
        exercise_id="straight-leg-raise",
        exercise_name="Straight Leg Raise",
        camera_angle="side",
        angle_requirements=(
            AngleRequirement(joint="knee", side="both", min_angle=165, max_angle=180,
                             description="Keep leg straight throughout (165-180°)"),
            AngleRequirement(joint="hip", side="both", min_angle=30, max_angle=60,
                             target_angle=45, tolerance=10,
                             description="Lift leg 30-60° from ground"),
        ),
        rep_counting=_rule("hip", (20, "below"), (40, "above")),
        feedback=FeedbackMessages(
            good="✓ Perfect form - leg straight!",
            too_shallow="⚠ Keep leg completely straight",
            too_deep="↑ Lift higher (aim for 45°)",
        ),
    ),
    ExerciseAngleConfig(
        exercise_id="bridges",
        exercise_name="Bridges / Glute Bridge",
        camera_angle="side",
        angle_requirements=(
            AngleRequirement(joint="knee", side="both", min_angle=80, max_angle=110,
                             target_angle=90, tolerance=15,
                             description="Knees should stay at ~90° bend"),
            AngleRequirement(joint="hip", side="both", max_angle=20,
                             target_angle=10, tolerance=10,
                             description="Hips should extend to near straight line (within 20°)"),
        ),
        # Hips resting on the floor with knees bent, then lifted into line with the trunk
        rep_counting=_rule("hip", (35, "above"), (20, "below")),
        feedback=FeedbackMessages(
            good="✓ Great bridge position!",
            too_shallow="↔ Keep knees bent at about 90°",
            too_deep="↑ Lift hips higher",
        ),
    ),
    ExerciseAngleConfig(
        exercise_id="mini-squats",
        exercise_name="Mini Squats",
        camera_angle="side",
        angle_requirements=(
            AngleRequirement(joint="knee", side="both", min_angle=120, max_angle=140,
                             target_angle=130, tolerance=10,
                             description="Shallow squat with knee at ~130° (60° bend)"),
        ),
        rep_counting=_rule("knee", (160, "above"), (135, "below")),
        feedback=FeedbackMessages(
            good="✓ Perfect mini squat depth!",
            too_shallow="↓ Squat a bit deeper",
            too_deep="⚠ Too deep - keep it shallow (~60° bend)",
        ),
    ),
    ExerciseAngleConfig(
        exercise_id="single-leg-squat",
        exercise_name="Single-Leg Squat",
        camera_angle="side",
        angle_requirements=(
            AngleRequirement(joint="knee", side="both", min_angle=100, max_angle=130,
                             target_angle=115, tolerance=10,
                             description="Knee should bend to ~115° on standing leg"),
        ),
        rep_counting=_rule("knee", (160, "above"), (120, "below")),
        feedback=FeedbackMessages(
            good="✓ Excellent control!",
            too_shallow="↓ Bend deeper (aim for ~65° bend)",
            too_deep="↑ Not too deep - control the descent",
        ),
    ),
    ExerciseAngleConfig(
        exercise_id="forward-lunge",
        exercise_name="Forward Lunge",
        camera_angle="side",
        angle_requirements=(
            AngleRequirement(joint="knee", side="both", min_angle=80, max_angle=100,
                             target_angle=90, tolerance=10,
                             description="Front knee should bend to ~90°"),
        ),
        rep_counting=_rule("knee", (160, "above"), (95, "below")),
        feedback=FeedbackMessages(
            good="✓ Perfect lunge depth!",
            too_shallow="↓ Drop deeper (aim for 90°)",
            too_deep="↑ Don't go past 90°",
        ),
    ),
    ExerciseAngleConfig(
        exercise_id="lateral-step-up",
        exercise_name="Lateral Step-Up",
        camera_angle="side",
        angle_requirements=(
            AngleRequirement(joint="knee", side="both", min_angle=150, max_angle=180,
                             target_angle=170, tolerance=10,
                             description="Knee should extend fully at top of step"),
        ),
        rep_counting=_rule("knee", (120, "below"), (160, "above")),
        feedback=FeedbackMessages(
            good="✓ Full extension achieved!",
            too_shallow="↑ Extend knee fully at top",
            too_deep="✓ Good",
        ),
    ),
    # ==================== ANKLE EXERCISES ====================
    ExerciseAngleConfig(
        exercise_id="ankle-pumps",
        exercise_name="Ankle Pumps",
        camera_angle="side",
        angle_requirements=(
            AngleRequirement(joint="ankle", side="both", min_angle=70, max_angle=110,
                             description="Ankle should flex and extend through full range"),
        ),
        rep_counting=_rule("ankle", (85, "below"), (105, "above")),
        feedback=FeedbackMessages(
            good="✓ Full range of motion!",
            too_shallow="← → Move through full range",
            too_deep="✓ Good",
        ),
    ),
    ExerciseAngleConfig(
        exercise_id="calf-raise",
        exercise_name="Calf Raise",
        camera_angle="side",
        angle_requirements=(
            AngleRequirement(joint="ankle", side="both", min_angle=110, max_angle=140,
                             target_angle=125, tolerance=10,
                             description="Rise onto toes (ankle plantarflexion)"),
            AngleRequirement(joint="knee", side="both", min_angle=160, max_angle=180,
                             description="Keep legs straight"),
        ),
        rep_counting=_rule("ankle", (95, "below"), (115, "above")),
        feedback=FeedbackMessages(
            good="✓ Perfect calf raise!",
            too_shallow="↑ Rise higher onto toes",
            too_deep="✓ Great height!",
        ),
    ),
    ExerciseAngleConfig(
        exercise_id="heel-raise-off-step",
        exercise_name="Heel Raise - Off Step",
        camera_angle="side",
        angle_requirements=(
            AngleRequirement(joint="ankle", side="both", min_angle=70, max_angle=140,
                             description="Full range: from dorsiflexion to plantarflexion"),
        ),
        rep_counting=_rule("ankle", (85, "below"), (115, "above")),
        feedback=FeedbackMessages(
            good="✓ Excellent range of motion!",
            too_shallow="↕ Move through full range",
            too_deep="✓ Perfect!",
        ),
    ),
    ExerciseAngleConfig(
        exercise_id="ankle-dorsiflexion",
        exercise_name="Ankle Dorsiflexion Mobility",
        camera_angle="side",
        angle_requirements=(
            AngleRequirement(joint="ankle", side="both", min_angle=70, max_angle=85,
                             target_angle=75, tolerance=5,
                             description="Ankle should dorsiflex (toes toward shin)"),
        ),
        feedback=FeedbackMessages(
            good="✓ Good dorsiflexion!",
            too_shallow="← Pull toes toward shin more",
            too_deep="✓ Good stretch",
        ),
    ),
    # ==================== BALANCE EXERCISES ====================
    ExerciseAngleConfig(
        exercise_id="single-leg-balance",
        exercise_name="Single-Leg Balance",
        camera_angle="front",
        angle_requirements=(
            AngleRequirement(joint="knee", side="both", min_angle=165, max_angle=180,
                             description="Standing leg should stay straight"),
        ),
        feedback=FeedbackMessages(
            good="✓ Great balance!",
            too_shallow="⚠ Keep standing leg straight",
            too_deep="✓ Steady!",
        ),
    ),
    # ==================== HIP EXERCISES ====================
    ExerciseAngleConfig(
        exercise_id="hip-abduction",
        exercise_name="Hip Abduction / Banded Hip Abduction",
        camera_angle="front",
        angle_requirements=(
            AngleRequirement(joint="hip", side="both", min_angle=15, max_angle=45,
                             target_angle=30, tolerance=10,
                             description="Lift leg 15-45° from midline"),
        ),
        rep_counting=_rule("hip", (10, "below"), (25, "above")),
        feedback=FeedbackMessages(
            good="✓ Perfect abduction!",
            too_shallow="↗ Lift leg higher",
            too_deep="↙ Don't lift too high",
        ),
    ),
    ExerciseAngleConfig(
        exercise_id="hip-flexion",
        exercise_name="Hip Flexion with Straight Leg Raise",
        camera_angle="side",
        angle_requirements=(
            AngleRequirement(joint="hip", side="both", min_angle=30, max_angle=60,
                             target_angle=45, tolerance=10,
                             description="Lift leg 30-60° forward"),
            AngleRequirement(joint="knee", side="both", min_angle=165, max_angle=180,
                             description="Keep leg straight"),
        ),
        rep_counting=_rule("hip", (20, "below"), (40, "above")),
        feedback=FeedbackMessages(
            good="✓ Excellent hip flexion!",
            too_shallow="↑ Lift higher",
            too_deep="↓ Don't lift too high",
        ),
    ),
)

EXERCISE_ANGLE_CONFIGS: Mapping[str, ExerciseAngleConfig] = MappingProxyType(
    {cfg.exercise_id: cfg for cfg in _CONFIGS}
)

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def normalize_name(name: str) -> str:
    """Lowercase, collapse every run of non-alphanumerics into one hyphen, trim hyphens"""
    return _NON_ALNUM.sub("-", name.lower()).strip("-")


def resolve_exercise_config(id_or_name: str) -> Optional[ExerciseAngleConfig]:
    """
    Look up an exercise by exact registry id, then by fuzzy display-name match.
    A fuzzy match is accepted when either normalized string contains the other.
    Returns None when nothing matches; no default exercise is substituted.
    """
    exact = EXERCISE_ANGLE_CONFIGS.get(id_or_name)
    if exact is not None:
        return exact

    query = normalize_name(id_or_name)
    if not query:
        return None

    for cfg in EXERCISE_ANGLE_CONFIGS.values():
        candidate = normalize_name(cfg.exercise_name)
        if candidate in query or query in candidate:
            return cfg

    logger.info(f"No angle configuration for exercise '{id_or_name}'")
    return None


def requires_angle_detection(id_or_name: str) -> bool:
    cfg = resolve_exercise_config(id_or_name)
    return cfg.requires_angle_detection if cfg else False


def list_exercises() -> List[ExerciseAngleConfig]:
    """All registered configurations in declaration order"""
    return list(EXERCISE_ANGLE_CONFIGS.values())
