# form_validator.py
"""
Form validation: compares smoothed joint angles against an exercise's angle requirements
and picks a single feedback message for the user.
"""

from models.schemas import (
    ExerciseAngleConfig,
    JointAngleSet,
    RequirementCheck,
    SENTINEL_ANGLE,
    ValidationResult,
)
from utils.motivation import (
    DEFAULT_GOOD_TEXT,
    DEFAULT_TOO_DEEP_TEXT,
    DEFAULT_TOO_SHALLOW_TEXT,
    CHECK_POSITION_TEXT,
)


def validate_angles(config: ExerciseAngleConfig, angles: JointAngleSet) -> ValidationResult:
    """
    Check every requirement's [min, max] range (either bound optional).
    Overall validity is the AND of all checks. Feedback comes from the first failing
    requirement in declared order: too_shallow below its minimum, too_deep above its maximum.
    A requirement whose joint is not measurable fails with a positioning hint.
    """
    details = []
    for requirement in config.angle_requirements:
        current = angles.resolve(requirement.joint, requirement.side)
        measurable = current > SENTINEL_ANGLE
        valid = (
            measurable
            and (requirement.min_angle is None or current >= requirement.min_angle)
            and (requirement.max_angle is None or current <= requirement.max_angle)
        )
        details.append(RequirementCheck(
            requirement=requirement,
            current_angle=current,
            valid=valid,
            measurable=measurable,
        ))

    all_valid = all(check.valid for check in details)
    messages = config.feedback

    feedback = messages.good if messages else DEFAULT_GOOD_TEXT
    if not all_valid:
        first_invalid = next(check for check in details if not check.valid)
        requirement = first_invalid.requirement
        if not first_invalid.measurable:
            feedback = CHECK_POSITION_TEXT
        elif requirement.min_angle is not None and first_invalid.current_angle < requirement.min_angle:
            feedback = messages.too_shallow if messages else DEFAULT_TOO_SHALLOW_TEXT
        elif requirement.max_angle is not None and first_invalid.current_angle > requirement.max_angle:
            feedback = messages.too_deep if messages else DEFAULT_TOO_DEEP_TEXT

    return ValidationResult(valid=all_valid, feedback=feedback, details=details)
