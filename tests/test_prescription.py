"""Tests for sets/reps/rest prescription."""
import pytest

from fitplan.models.enums import (
    ExerciseRole,
    ExperienceLevel,
    FallbackStage,
    Goal,
    MuscleGroup,
    SplitArchetype,
)
from fitplan.services.constraint_extractor import extract_constraints
from fitplan.services.day_composer import SelectedExercise
from fitplan.services.prescription import (
    BEGINNER_COMPOUND_CUE,
    PREGNANCY_CUE,
    PRIORITY_CUE,
    PrescriptionEngine,
)


@pytest.fixture
def pick(catalog):
    def _pick(exercise_id, role=ExerciseRole.MAIN):
        entry = catalog.get(exercise_id)
        return SelectedExercise(entry, role, entry.primary_muscle)

    return _pick


def _engine(profile, archetype=SplitArchetype.FULL_BODY):
    return PrescriptionEngine(profile.goal, profile.experience, extract_constraints(profile), archetype)


class TestMainWork:
    def test_strength_compound(self, make_profile, pick):
        engine = _engine(make_profile(goal=Goal.STRENGTH))
        p = engine.prescribe(pick("barbell_bench_press"))
        assert p.sets == 4
        assert (p.reps_min, p.reps_max) == (4, 8)
        assert p.rest_seconds == 180
        assert p.rpe_cap is None
        assert PRIORITY_CUE in p.notes

    def test_isolation_gets_short_rest(self, make_profile, pick):
        engine = _engine(make_profile(goal=Goal.STRENGTH))
        assert engine.prescribe(pick("dumbbell_curl")).rest_seconds == 120

    @pytest.mark.parametrize(
        "experience, sets",
        [
            (ExperienceLevel.BEGINNER, 3),
            (ExperienceLevel.INTERMEDIATE, 3),
            (ExperienceLevel.ADVANCED, 4),
        ],
    )
    def test_sets_follow_experience(self, make_profile, pick, experience, sets):
        engine = _engine(make_profile(goal=Goal.MUSCLE_GAIN, experience=experience))
        assert engine.prescribe(pick("dumbbell_curl")).sets == sets

    def test_beginner_compound_cue(self, make_profile, pick):
        engine = _engine(make_profile(experience=ExperienceLevel.BEGINNER))
        assert BEGINNER_COMPOUND_CUE in engine.prescribe(pick("barbell_bench_press")).notes

    def test_weight_loss_band(self, make_profile, pick):
        p = _engine(make_profile(goal=Goal.WEIGHT_LOSS)).prescribe(pick("dumbbell_curl"))
        assert (p.reps_min, p.reps_max) == (12, 15)
        assert p.reps_display == "12-15"

    def test_circuit_band_overrides_goal(self, make_profile, pick):
        engine = _engine(make_profile(goal=Goal.STRENGTH), SplitArchetype.CIRCUIT)
        p = engine.prescribe(pick("barbell_bench_press"))
        assert (p.reps_min, p.reps_max) == (12, 15)
        assert p.sets == 3


class TestIntensityCap:
    def test_cap_moves_to_light_end(self, make_profile, pick):
        engine = _engine(make_profile(goal=Goal.MUSCLE_GAIN, medical_conditions=["heart disease"]))
        p = engine.prescribe(pick("dumbbell_curl"))
        assert p.sets == 3
        assert (p.reps_min, p.reps_max) == (10, 12)
        assert p.rest_seconds == 90
        assert p.tempo == "controlled"
        assert p.rpe_cap == 6
        assert "Stay at RPE ≤ 6" in p.notes


class TestGentleMode:
    def test_every_role_uses_gentle_prescription(self, make_profile, pick):
        engine = _engine(make_profile(is_pregnant=True, pregnancy_trimester=3), SplitArchetype.GENTLE)
        for exercise_id, role in (
            ("dumbbell_curl", ExerciseRole.MAIN),
            ("arm_circles", ExerciseRole.WARMUP),
            ("seated_hamstring_stretch", ExerciseRole.COOLDOWN),
        ):
            p = engine.prescribe(pick(exercise_id, role))
            assert p.sets == 2
            assert (p.reps_min, p.reps_max) == (8, 10)
            assert p.rest_seconds == 120
            assert p.tempo == "slow and controlled"
            assert p.rpe_cap == 5
            assert PREGNANCY_CUE in p.notes


class TestBookends:
    def test_warmup(self, make_profile, pick):
        p = _engine(make_profile(experience=ExperienceLevel.BEGINNER)).prescribe(
            pick("arm_circles", ExerciseRole.WARMUP)
        )
        assert p.sets == 1
        assert (p.reps_min, p.reps_max) == (10, 12)
        assert p.rest_seconds == 15

        p = _engine(make_profile(experience=ExperienceLevel.ADVANCED)).prescribe(
            pick("arm_circles", ExerciseRole.WARMUP)
        )
        assert p.sets == 2

    def test_cooldown_is_a_hold(self, make_profile, pick):
        p = _engine(make_profile()).prescribe(pick("seated_hamstring_stretch", ExerciseRole.COOLDOWN))
        assert p.sets == 1
        assert p.hold_seconds == 30
        assert p.reps_display == "30s hold"


class TestNotesAndOutput:
    def test_injury_cue_on_every_main_exercise(self, make_profile, pick):
        engine = _engine(make_profile(injuries=["lower back"]))
        assert "Brace your core and keep a neutral spine" in engine.prescribe(pick("dumbbell_curl")).notes

    def test_no_load_is_prescribed(self, make_profile, pick):
        data = _engine(make_profile()).prescribe(pick("barbell_bench_press")).to_dict()
        assert not {"load", "weight", "weight_kg", "kg", "lb"} & set(data)

    def test_plan_builds_planned_exercise(self, make_profile, catalog):
        engine = _engine(make_profile())
        entry = catalog.get("glute_bridge")
        planned = engine.plan(
            SelectedExercise(entry, ExerciseRole.MAIN, MuscleGroup.HAMSTRINGS, FallbackStage.SYNERGIST)
        )
        assert planned.exercise_id == "glute_bridge"
        assert planned.muscle_group is MuscleGroup.HAMSTRINGS
        assert planned.stage is FallbackStage.SYNERGIST
        assert planned.is_compound is False
