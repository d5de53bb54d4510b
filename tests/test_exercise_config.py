import pytest

from models.exercise_config import (
    EXERCISE_ANGLE_CONFIGS,
    list_exercises,
    normalize_name,
    requires_angle_detection,
    resolve_exercise_config,
)


@pytest.mark.parametrize("query", ["Heel Slide", "heel-slide", "HEEL SLIDE", "  heel__slide!"])
def test_heel_slide_spellings_resolve_to_same_entry(query):
    cfg = resolve_exercise_config(query)
    assert cfg is EXERCISE_ANGLE_CONFIGS["heel-slide"]


def test_partial_display_name_matches():
    assert resolve_exercise_config("Glute Bridge").exercise_id == "bridges"
    assert resolve_exercise_config("Banded Hip Abduction").exercise_id == "hip-abduction"


@pytest.mark.parametrize("query", ["Bench Press", "", "---"])
def test_unknown_exercise_is_not_found(query):
    assert resolve_exercise_config(query) is None


def test_normalize_name():
    assert normalize_name("Heel Raise - Off Step") == "heel-raise-off-step"
    assert normalize_name("Bridges / Glute Bridge") == "bridges-glute-bridge"


def test_requires_angle_detection():
    assert requires_angle_detection("Calf Raise")
    assert not requires_angle_detection("Jumping Jacks")


def test_registry_contents():
    exercises = list_exercises()
    assert len(exercises) == 15
    assert exercises[0].exercise_id == "heel-slide"
    assert all(cfg.angle_requirements for cfg in exercises)

    # Static holds have no rep rule
    assert EXERCISE_ANGLE_CONFIGS["single-leg-balance"].rep_counting is None
    assert EXERCISE_ANGLE_CONFIGS["ankle-dorsiflexion"].rep_counting is None


def test_registry_is_read_only():
    with pytest.raises(TypeError):
        EXERCISE_ANGLE_CONFIGS["new"] = None
    with pytest.raises(Exception):
        EXERCISE_ANGLE_CONFIGS["heel-slide"].exercise_name = "Renamed"
