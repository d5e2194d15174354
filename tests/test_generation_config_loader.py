"""Tests for the generation rule tables and their loader."""
import pytest
import yaml

from fitplan.config.generation_config_loader import (
    CIRCUIT_BAND,
    GenerationConfigLoadError,
    GenerationConfigValidationError,
    get_generation_config_loader,
    parse_generation_config,
)
from fitplan.core.exceptions import ConfigurationDefect
from fitplan.models.enums import ExperienceLevel, Goal, SplitArchetype, Weekday


class TestBundledConfig:
    """The shipped YAML covers every lookup the generator makes."""

    def test_every_goal_has_a_band(self, generation_config):
        for goal in Goal:
            band = generation_config.band_for(goal.value)
            assert band.sets[0] <= band.sets[1]
        assert generation_config.band_for(CIRCUIT_BAND).reps == (12, 15)

    def test_every_frequency_and_experience_has_a_split(self, generation_config):
        for sessions in range(1, 8):
            bucket = generation_config.frequency_bucket(sessions)
            for level in ExperienceLevel:
                assert isinstance(generation_config.split_for(bucket, level), SplitArchetype)

    def test_frequency_buckets(self, generation_config):
        assert generation_config.frequency_bucket(3) == "low"
        assert generation_config.frequency_bucket(4) == "mid"
        assert generation_config.frequency_bucket(7) == "high"

    def test_unknown_frequency_is_a_defect(self, generation_config):
        with pytest.raises(ConfigurationDefect):
            generation_config.frequency_bucket(9)

    def test_schedules_cover_each_frequency(self, generation_config):
        assert generation_config.weekday_schedules[3] == (Weekday.MONDAY, Weekday.WEDNESDAY, Weekday.FRIDAY)
        for sessions in range(1, 8):
            assert len(generation_config.weekday_schedules[sessions]) == sessions

    def test_strength_band(self, generation_config):
        band = generation_config.band_for(Goal.STRENGTH.value)
        assert band.sets == (4, 5)
        assert band.reps == (4, 8)
        assert band.rest_seconds == (120, 180)


class TestTimeBudget:
    """Main slot budget derived from session duration."""

    @pytest.mark.parametrize(
        "experience, minutes, sessions, expected",
        [
            (ExperienceLevel.BEGINNER, 45, 3, 4),
            (ExperienceLevel.INTERMEDIATE, 60, 3, 7),
            (ExperienceLevel.ADVANCED, 60, 7, 7),
            (ExperienceLevel.INTERMEDIATE, 20, 3, 4),
            (ExperienceLevel.ADVANCED, 200, 3, 12),
            (ExperienceLevel.ADVANCED, 200, 5, 11),
            (ExperienceLevel.BEGINNER, 30, 6, 3),
        ],
    )
    def test_main_slots(self, generation_config, experience, minutes, sessions, expected):
        assert generation_config.time_budget.main_slots(experience, minutes, sessions) == expected

    def test_bookend_count(self, generation_config):
        assert generation_config.time_budget.bookend_count(30) == 2
        assert generation_config.time_budget.bookend_count(45) == 3
        assert generation_config.time_budget.bookend_count(90) == 3


class TestValidation:
    """Incomplete tables are rejected when the config is parsed."""

    def test_bundled_data_parses(self, raw_generation_config):
        config = parse_generation_config(raw_generation_config)
        assert config.version == "1.0"

    def test_missing_goal_band(self, raw_generation_config):
        del raw_generation_config["prescription_bands"]["strength"]
        with pytest.raises(GenerationConfigValidationError, match="strength"):
            parse_generation_config(raw_generation_config)

    def test_missing_split_entry(self, raw_generation_config):
        del raw_generation_config["splits"]["high"]["advanced"]
        with pytest.raises(GenerationConfigValidationError, match="advanced"):
            parse_generation_config(raw_generation_config)

    def test_buckets_must_cover_every_frequency(self, raw_generation_config):
        raw_generation_config["frequency_buckets"]["high"] = [5, 6]
        with pytest.raises(GenerationConfigValidationError):
            parse_generation_config(raw_generation_config)

    def test_schedule_with_repeated_weekday(self, raw_generation_config):
        raw_generation_config["weekday_schedules"][3] = ["monday", "monday", "friday"]
        with pytest.raises(GenerationConfigValidationError):
            parse_generation_config(raw_generation_config)

    def test_unknown_muscle_group(self, raw_generation_config):
        raw_generation_config["day_templates"]["push"]["muscle_groups"].append("forearms")
        with pytest.raises(GenerationConfigValidationError, match="forearms"):
            parse_generation_config(raw_generation_config)

    def test_archetype_referencing_unknown_template(self, raw_generation_config):
        raw_generation_config["archetypes"]["upper_lower"]["rotation"] = ["upper", "legs_day"]
        with pytest.raises(GenerationConfigValidationError, match="legs_day"):
            parse_generation_config(raw_generation_config)

    def test_inverted_band(self, raw_generation_config):
        raw_generation_config["prescription_bands"]["endurance"]["reps"] = [20, 15]
        with pytest.raises(GenerationConfigValidationError):
            parse_generation_config(raw_generation_config)

    def test_validation_errors_are_configuration_defects(self):
        assert issubclass(GenerationConfigValidationError, ConfigurationDefect)


class TestLoader:
    """Singleton loader reading from disk."""

    def test_load_and_reload(self, tmp_path, raw_generation_config, reset_config_loader):
        path = tmp_path / "generation_config.yaml"
        raw_generation_config["version"] = "test-7"
        path.write_text(yaml.safe_dump(raw_generation_config))

        loader = get_generation_config_loader(path)
        assert loader.config.version == "test-7"
        assert loader.reload_count == 1

        loader.reload()
        assert loader.reload_count == 2
        assert get_generation_config_loader() is loader

    def test_missing_file(self, tmp_path, reset_config_loader):
        with pytest.raises(GenerationConfigLoadError, match="not found"):
            get_generation_config_loader(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path, reset_config_loader):
        path = tmp_path / "broken.yaml"
        path.write_text("prescription_bands: [unclosed")
        with pytest.raises(GenerationConfigLoadError):
            get_generation_config_loader(path)
