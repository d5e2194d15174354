"""End-to-end tests for weekly plan generation."""
import pytest

from fitplan.core.exceptions import InvalidProfileError
from fitplan.models.enums import (
    Equipment,
    ExerciseRole,
    ExperienceLevel,
    Goal,
    MovementTag,
    SplitArchetype,
)
from fitplan.scoring.variety_kpi import PlanVarietyKPI
from fitplan.services.constraint_extractor import extract_constraints
from fitplan.services.plan_generator import generate

from conftest import FIXED_TIME


def _tags(plan, catalog):
    return [catalog.get(e.exercise_id).tags for e in plan.exercises()]


PROFILE_VARIANTS = [
    dict(),
    dict(equipment=frozenset(), experience=ExperienceLevel.BEGINNER, goal=Goal.WEIGHT_LOSS),
    dict(injuries=["lower back pain", "knee"], goal=Goal.STRENGTH),
    dict(medical_conditions=["hypertension"], medications=["warfarin"], age=68),
    dict(is_pregnant=True, pregnancy_trimester=2, sessions_per_week=4),
    dict(sessions_per_week=6, experience=ExperienceLevel.ADVANCED, session_duration_minutes=75),
    dict(sessions_per_week=2, session_duration_minutes=25, goal=Goal.ENDURANCE),
    dict(equipment=[Equipment.DUMBBELL, Equipment.BENCH], sessions_per_week=5, injuries=["shoulder"]),
]


class TestScenarios:
    """Reference profiles with known expectations."""

    def test_beginner_bodyweight_weight_loss(self, catalog, make_profile):
        profile = make_profile(
            experience=ExperienceLevel.BEGINNER,
            equipment=frozenset(),
            goal=Goal.WEIGHT_LOSS,
            sessions_per_week=3,
            session_duration_minutes=45,
        )
        plan = generate(profile, catalog)

        assert len(plan.days) == 3
        for exercise in plan.exercises():
            assert catalog.get(exercise.exercise_id).equipment == {Equipment.BODYWEIGHT}
        for day in plan.days:
            for exercise in day.main:
                assert (exercise.prescription.reps_min, exercise.prescription.reps_max) == (12, 15)

    def test_lower_back_pain_strength(self, catalog, make_profile):
        profile = make_profile(injuries=["lower back pain"], goal=Goal.STRENGTH, sessions_per_week=4)
        plan = generate(profile, catalog)

        for tags in _tags(plan, catalog):
            assert MovementTag.DEADLIFT not in tags
            assert MovementTag.ROW not in tags
        assert any("back" in warning.lower() for warning in plan.warnings)

    def test_third_trimester(self, catalog, make_profile):
        profile = make_profile(
            is_pregnant=True,
            pregnancy_trimester=3,
            equipment=frozenset(),
            sessions_per_week=3,
            session_duration_minutes=45,
        )
        plan = generate(profile, catalog)

        assert plan.requires_medical_clearance is True
        assert plan.archetype is SplitArchetype.GENTLE
        for exercise in plan.exercises():
            p = exercise.prescription
            assert (p.sets, p.reps_min, p.reps_max, p.rest_seconds) == (2, 8, 10, 120)
        for tags in _tags(plan, catalog):
            assert not tags & {MovementTag.SUPINE, MovementTag.PRONE, MovementTag.JUMPING}

    def test_heart_disease_with_beta_blocker(self, catalog, make_profile):
        profile = make_profile(
            medical_conditions=["heart disease"], medications=["beta blocker"], sessions_per_week=4
        )
        plan = generate(profile, catalog)

        assert plan.intensity_cap_rpe is not None
        assert plan.intensity_cap_rpe <= 6
        assert plan.requires_medical_clearance is True
        for tags in _tags(plan, catalog):
            assert not tags & {MovementTag.MAX_EFFORT, MovementTag.HIIT}
        for exercise in plan.exercises():
            if exercise.role is ExerciseRole.MAIN:
                assert exercise.prescription.rpe_cap == 6

    def test_seven_day_advanced_full_gym(self, catalog, make_profile):
        profile = make_profile(
            sessions_per_week=7,
            experience=ExperienceLevel.ADVANCED,
            goal=Goal.MUSCLE_GAIN,
            session_duration_minutes=60,
        )
        plan = generate(profile, catalog)

        assert plan.archetype is SplitArchetype.PUSH_PULL_LEGS
        assert plan.title == "Push/Pull/Legs 7x/Week - Week 1"
        assert len(plan.days) == 7
        assert plan.rest_days == ()
        result = PlanVarietyKPI().check_emphasis_overlap(plan)
        assert result.passed, result.message
        assert len(result.pairs) == 3


class TestProperties:
    """Invariants checked across a spread of profiles."""

    @pytest.mark.parametrize("overrides", PROFILE_VARIANTS)
    def test_deterministic(self, catalog, make_profile, overrides):
        profile = make_profile(**overrides)
        first = generate(profile, catalog, generated_at=FIXED_TIME)
        second = generate(profile, catalog, generated_at=FIXED_TIME)
        assert first == second

    def test_generated_at_excluded_from_equality(self, catalog, make_profile):
        profile = make_profile()
        assert generate(profile, catalog) == generate(profile, catalog, generated_at=FIXED_TIME)

    @pytest.mark.parametrize("overrides", PROFILE_VARIANTS)
    def test_no_excluded_tag_is_selected(self, catalog, make_profile, overrides):
        profile = make_profile(**overrides)
        constraints = extract_constraints(profile)
        plan = generate(profile, catalog)
        for tags in _tags(plan, catalog):
            assert not tags & constraints.excluded_tags

    @pytest.mark.parametrize("overrides", PROFILE_VARIANTS)
    def test_equipment_subset(self, catalog, make_profile, overrides):
        profile = make_profile(**overrides)
        plan = generate(profile, catalog)
        for exercise in plan.exercises():
            assert catalog.get(exercise.exercise_id).equipment <= profile.equipment

    @pytest.mark.parametrize("sessions", range(1, 8))
    def test_day_count(self, catalog, make_profile, sessions):
        plan = generate(make_profile(sessions_per_week=sessions), catalog)
        assert len(plan.days) == sessions
        assert len(plan.days) + len(plan.rest_days) == 7

    @pytest.mark.parametrize("sessions", [5, 6, 7])
    def test_long_bodyweight_sessions_generate(self, catalog, make_profile, sessions):
        profile = make_profile(equipment=frozenset(), sessions_per_week=sessions, session_duration_minutes=120)
        plan = generate(profile, catalog)
        assert len(plan.days) == sessions
        assert all(len(day.main) == len(plan.days[0].main) for day in plan.days)

    def test_clearance_propagates(self, catalog, make_profile):
        assert generate(make_profile(medical_conditions=["angina"]), catalog).requires_medical_clearance
        assert not generate(make_profile(), catalog).requires_medical_clearance

    def test_clean_profile_has_no_repeats_across_same_emphasis(self, catalog, make_profile):
        plan = generate(make_profile(sessions_per_week=4), catalog)
        result = PlanVarietyKPI().check_emphasis_overlap(plan)
        assert result.max_overlap == 0.0

    def test_calories_and_duration(self, catalog, make_profile):
        plan = generate(make_profile(sessions_per_week=3, session_duration_minutes=60), catalog)
        assert plan.weekly_calories == sum(day.estimated_calories for day in plan.days)
        for day in plan.days:
            assert day.estimated_duration_minutes <= 60 + 5
            assert day.estimated_calories > 0


class TestValidation:
    @pytest.mark.parametrize(
        "overrides, field",
        [
            (dict(sessions_per_week=0), "sessions_per_week"),
            (dict(sessions_per_week=8), "sessions_per_week"),
            (dict(session_duration_minutes=0), "session_duration_minutes"),
            (dict(age=0), "age"),
            (dict(weight_kg=-5), "weight_kg"),
            (dict(is_pregnant=True, pregnancy_trimester=4), "pregnancy_trimester"),
        ],
    )
    def test_invalid_profile(self, catalog, make_profile, overrides, field):
        with pytest.raises(InvalidProfileError) as exc_info:
            generate(make_profile(**overrides), catalog)
        assert exc_info.value.code == "VAL_PROFILE_001"
        assert exc_info.value.details["field"] == field
