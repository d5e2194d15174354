"""Tests for the safety filter and the fallback chain."""
from fitplan.models.enums import (
    Equipment,
    ExerciseRole,
    ExperienceLevel,
    FallbackStage,
    MovementTag,
    MuscleGroup,
)
from fitplan.repositories.catalog_repository import parse_catalog
from fitplan.services.constraint_extractor import extract_constraints
from fitplan.services.exercise_filter import ExerciseFilterEngine


def _entry(id_, muscles, equipment=("bodyweight",), roles=("main",), patterns=("isolation",), **extra):
    return {
        "id": id_,
        "name": id_.replace("_", " ").title(),
        "equipment": list(equipment),
        "patterns": list(patterns),
        "muscles": list(muscles),
        "difficulty": extra.get("difficulty", "beginner"),
        "roles": list(roles),
        "contraindications": list(extra.get("contraindications", [])),
    }


class TestSafetyFilter:
    def test_equipment_must_be_available(self, catalog, make_profile):
        engine = ExerciseFilterEngine(catalog, extract_constraints(make_profile(equipment=frozenset())))
        for entry in engine.eligible(ExerciseRole.MAIN):
            assert entry.equipment == {Equipment.BODYWEIGHT}

    def test_excluded_tags_never_pass(self, catalog, make_profile):
        constraints = extract_constraints(make_profile(injuries=["lower back"], medical_conditions=["heart"]))
        engine = ExerciseFilterEngine(catalog, constraints)
        for role in ExerciseRole:
            for entry in engine.eligible(role):
                assert not entry.tags & constraints.excluded_tags

    def test_difficulty_capped_at_experience(self, catalog, make_profile):
        profile = make_profile(experience=ExperienceLevel.BEGINNER)
        engine = ExerciseFilterEngine(catalog, extract_constraints(profile))
        assert all(e.difficulty is ExperienceLevel.BEGINNER for e in engine.eligible(ExerciseRole.MAIN))

    def test_contraindication_tags_count(self, catalog, make_profile):
        engine = ExerciseFilterEngine(catalog, extract_constraints(make_profile(injuries=["wrist"])))
        assert not engine.is_safe(catalog.get("push_up"))
        assert engine.is_safe(catalog.get("wall_push_up"))


class TestFallbackChain:
    def test_strict_match(self, catalog, make_profile):
        engine = ExerciseFilterEngine(catalog, extract_constraints(make_profile()))
        outcome = engine.candidates_for(ExerciseRole.MAIN, MuscleGroup.CHEST)
        assert outcome.stage is FallbackStage.STRICT
        assert not outcome.is_substitution
        assert all(e.primary_muscle is MuscleGroup.CHEST for e in outcome.candidates)

    def test_synergist_stage_for_bodyweight_hamstrings(self, catalog, make_profile):
        profile = make_profile(equipment=frozenset(), experience=ExperienceLevel.BEGINNER)
        engine = ExerciseFilterEngine(catalog, extract_constraints(profile))
        outcome = engine.candidates_for(ExerciseRole.MAIN, MuscleGroup.HAMSTRINGS)
        assert outcome.stage is FallbackStage.SYNERGIST
        assert outcome.muscle_group is MuscleGroup.HAMSTRINGS
        assert [e.id for e in outcome.candidates] == ["glute_bridge"]

    def test_exclusions_feed_into_next_stage(self, catalog, make_profile):
        profile = make_profile(equipment=frozenset(), experience=ExperienceLevel.BEGINNER)
        engine = ExerciseFilterEngine(catalog, extract_constraints(profile))
        outcome = engine.candidates_for(ExerciseRole.MAIN, MuscleGroup.HAMSTRINGS, {"glute_bridge"})
        ids = [e.id for e in outcome.candidates]
        assert outcome.stage is FallbackStage.BODYWEIGHT
        assert outcome.is_substitution
        assert "hip_hinge_drill" in ids
        assert "glute_bridge" not in ids

    def test_adjacent_group_stage(self, make_profile):
        catalog = parse_catalog(
            {
                "exercises": [
                    _entry("barbell_thing", ["hamstrings"], equipment=["barbell"]),
                    _entry("glute_thing", ["glutes"]),
                ]
            }
        )
        engine = ExerciseFilterEngine(catalog, extract_constraints(make_profile(equipment=frozenset())))
        outcome = engine.candidates_for(ExerciseRole.MAIN, MuscleGroup.HAMSTRINGS)
        assert outcome.stage is FallbackStage.ADJACENT_GROUP
        assert outcome.requested_group is MuscleGroup.HAMSTRINGS
        assert outcome.muscle_group is MuscleGroup.GLUTES
        assert [e.id for e in outcome.candidates] == ["glute_thing"]

    def test_adjacent_stage_accepts_neighbour_synergists(self, make_profile):
        catalog = parse_catalog(
            {
                "exercises": [
                    _entry("barbell_thing", ["triceps"], equipment=["barbell"]),
                    _entry("pike_thing", ["shoulders", "chest"]),
                ]
            }
        )
        engine = ExerciseFilterEngine(catalog, extract_constraints(make_profile(equipment=frozenset())))
        outcome = engine.candidates_for(ExerciseRole.MAIN, MuscleGroup.TRICEPS)
        assert outcome.stage is FallbackStage.ADJACENT_GROUP
        # chest is the first neighbour and pike_thing trains it as a synergist
        assert outcome.muscle_group is MuscleGroup.CHEST
        assert [e.id for e in outcome.candidates] == ["pike_thing"]

    def test_any_group_stage_when_neighbours_run_out(self, make_profile):
        catalog = parse_catalog(
            {
                "exercises": [
                    _entry("plank_thing", ["core"]),
                    _entry("crunch_thing", ["core"]),
                ]
            }
        )
        engine = ExerciseFilterEngine(catalog, extract_constraints(make_profile(equipment=frozenset())))
        outcome = engine.candidates_for(ExerciseRole.MAIN, MuscleGroup.TRICEPS, {"plank_thing"})
        assert outcome.stage is FallbackStage.ANY_GROUP
        assert outcome.is_substitution
        assert [e.id for e in outcome.candidates] == ["crunch_thing"]
        assert outcome.group_for(outcome.candidates[0]) is MuscleGroup.CORE

    def test_any_group_stage_relaxes_role_last(self, make_profile):
        catalog = parse_catalog({"exercises": [_entry("hip_circles", ["glutes"], roles=["warmup"])]})
        engine = ExerciseFilterEngine(catalog, extract_constraints(make_profile(equipment=frozenset())))
        outcome = engine.candidates_for(ExerciseRole.MAIN, MuscleGroup.CHEST)
        assert outcome.stage is FallbackStage.ANY_GROUP
        assert [e.id for e in outcome.candidates] == ["hip_circles"]

    def test_bodyweight_stage_relaxes_role(self, make_profile):
        catalog = parse_catalog(
            {
                "exercises": [
                    _entry("band_thing", ["back"], equipment=["resistance_band"]),
                    _entry("back_warmup_drill", ["back"], roles=["warmup"]),
                ]
            }
        )
        engine = ExerciseFilterEngine(catalog, extract_constraints(make_profile(equipment=frozenset())))
        outcome = engine.candidates_for(ExerciseRole.MAIN, MuscleGroup.BACK)
        assert outcome.stage is FallbackStage.BODYWEIGHT
        assert [e.id for e in outcome.candidates] == ["back_warmup_drill"]

    def test_exhausted_chain_returns_none(self, make_profile):
        catalog = parse_catalog(
            {
                "exercises": [
                    _entry("crunch", ["core"], contraindications=["supine"]),
                    _entry("leg_thing", ["quads"], patterns=["squat"]),
                ]
            }
        )
        constraints = extract_constraints(make_profile(injuries=["knee"], is_pregnant=True, pregnancy_trimester=2))
        assert MovementTag.SQUAT in constraints.excluded_tags
        engine = ExerciseFilterEngine(catalog, constraints)
        assert engine.candidates_for(ExerciseRole.MAIN, MuscleGroup.CHEST) is None
        assert engine.candidates_for(ExerciseRole.MAIN, MuscleGroup.CORE) is None
