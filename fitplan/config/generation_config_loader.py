"""
Plan Generation Configuration Loader

Loads the rule tables used by the generator (prescription bands, split lookup,
weekday schedules, day templates, time budget, calorie factors) from
generation_config.yaml into frozen dataclasses.

Every table is validated exhaustively on load: a missing band for a goal or a
missing split for a (frequency bucket, experience) pair is a configuration
defect and fails loudly at startup rather than on the first unlucky request.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from threading import RLock
from typing import Any

import yaml

from fitplan.core.exceptions import ConfigurationDefect
from fitplan.models.enums import (
    ExperienceLevel,
    Goal,
    MuscleGroup,
    SplitArchetype,
    Weekday,
)

logger = logging.getLogger(__name__)

CIRCUIT_BAND = "circuit"


class GenerationConfigLoadError(ConfigurationDefect):
    """Raised when configuration cannot be loaded or is invalid."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.details = details or {}


class GenerationConfigValidationError(GenerationConfigLoadError):
    """Raised when configuration fails validation."""


def _pair(value: Any, name: str) -> tuple[int, int]:
    if isinstance(value, (int, float)):
        value = [value, value]
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise GenerationConfigValidationError(f"{name} must be [min, max], got {value!r}")
    low, high = value
    if low > high:
        raise GenerationConfigValidationError(f"{name} min ({low}) must be <= max ({high})")
    if low < 0:
        raise GenerationConfigValidationError(f"{name} must be non-negative, got {value!r}")
    return low, high


@dataclass(frozen=True)
class PrescriptionBand:
    """Sets, reps and rest ranges for one goal."""

    sets: tuple[int, int]
    reps: tuple[int, int]
    rest_seconds: tuple[int, int]

    def __post_init__(self):
        if self.sets[0] < 1:
            raise GenerationConfigValidationError(f"sets must be >= 1, got {self.sets}")
        if self.reps[0] < 1:
            raise GenerationConfigValidationError(f"reps must be >= 1, got {self.reps}")


@dataclass(frozen=True)
class GentlePrescriptionConfig:
    sets: int = 2
    reps: tuple[int, int] = (8, 10)
    rest_seconds: int = 120
    tempo: str = "slow and controlled"

    def __post_init__(self):
        if self.sets < 1:
            raise GenerationConfigValidationError(f"gentle sets must be >= 1, got {self.sets}")


@dataclass(frozen=True)
class WarmupPrescriptionConfig:
    sets: tuple[int, int] = (1, 2)
    reps: tuple[int, int] = (10, 12)
    rest_seconds: int = 15


@dataclass(frozen=True)
class CooldownPrescriptionConfig:
    sets: int = 1
    hold_seconds: int = 30
    rest_seconds: int = 0

    def __post_init__(self):
        if self.hold_seconds <= 0:
            raise GenerationConfigValidationError(
                f"hold_seconds must be > 0, got {self.hold_seconds}"
            )


@dataclass(frozen=True)
class DayTemplateConfig:
    """Muscle-group emphasis for one kind of training day."""

    key: str
    emphasis: str
    title: str
    muscle_groups: tuple[MuscleGroup, ...]
    compound_focus: bool = True

    def __post_init__(self):
        if not self.muscle_groups:
            raise GenerationConfigValidationError(
                f"Day template '{self.key}' must list at least one muscle group"
            )


@dataclass(frozen=True)
class ArchetypeConfig:
    archetype: SplitArchetype
    name: str
    description: str
    rotation: tuple[str, ...]
    final_day_by_frequency: dict[int, str] = field(default_factory=dict)

    def __post_init__(self):
        if not self.rotation:
            raise GenerationConfigValidationError(
                f"Archetype '{self.archetype.value}' needs a non-empty rotation"
            )


@dataclass(frozen=True)
class TimeBudgetConfig:
    warmup_minutes: int
    cooldown_minutes: int
    minutes_per_slot: dict[ExperienceLevel, int]
    slot_bounds: dict[ExperienceLevel, tuple[int, int]]
    high_frequency_threshold: int = 5
    high_frequency_slot_reduction: int = 1
    bookend_exercises: int = 3
    short_session_bookend_exercises: int = 2
    short_session_minutes: int = 45

    def __post_init__(self):
        for level in ExperienceLevel:
            if level not in self.minutes_per_slot:
                raise GenerationConfigValidationError(
                    f"time_budget.minutes_per_slot missing '{level.value}'"
                )
            if self.minutes_per_slot[level] <= 0:
                raise GenerationConfigValidationError(
                    f"time_budget.minutes_per_slot.{level.value} must be > 0"
                )
            if level not in self.slot_bounds:
                raise GenerationConfigValidationError(
                    f"time_budget.slot_bounds missing '{level.value}'"
                )
            if self.slot_bounds[level][0] < 1:
                raise GenerationConfigValidationError(
                    f"time_budget.slot_bounds.{level.value} lower bound must be >= 1"
                )

    def main_slots(self, experience: ExperienceLevel, duration_minutes: int, sessions_per_week: int) -> int:
        """Main-exercise slot budget for one session."""
        available = duration_minutes - self.warmup_minutes - self.cooldown_minutes
        raw = math.floor(available / self.minutes_per_slot[experience])
        low, high = self.slot_bounds[experience]
        slots = min(max(raw, low), high)
        if sessions_per_week >= self.high_frequency_threshold:
            slots = max(low, slots - self.high_frequency_slot_reduction)
        return slots

    def bookend_count(self, duration_minutes: int) -> int:
        if duration_minutes < self.short_session_minutes:
            return self.short_session_bookend_exercises
        return self.bookend_exercises


@dataclass(frozen=True)
class CaloriesConfig:
    reference_weight_kg: float
    kcal_per_minute: dict[ExperienceLevel, float]
    goal_multipliers: dict[Goal, float]
    gentle_multiplier: float = 0.6

    def __post_init__(self):
        if self.reference_weight_kg <= 0:
            raise GenerationConfigValidationError("calories.reference_weight_kg must be > 0")
        for level in ExperienceLevel:
            if level not in self.kcal_per_minute:
                raise GenerationConfigValidationError(
                    f"calories.kcal_per_minute missing '{level.value}'"
                )

    def multiplier_for(self, goal: Goal) -> float:
        return self.goal_multipliers.get(goal, 1.0)


@dataclass(frozen=True)
class GenerationConfig:
    """Complete, validated rule tables for plan generation."""

    version: str
    prescription_bands: dict[str, PrescriptionBand]
    gentle_prescription: GentlePrescriptionConfig
    warmup_prescription: WarmupPrescriptionConfig
    cooldown_prescription: CooldownPrescriptionConfig
    frequency_buckets: dict[str, tuple[int, int]]
    splits: dict[tuple[str, ExperienceLevel], SplitArchetype]
    circuit_max_minutes: int
    goal_overrides: dict[Goal, SplitArchetype]
    weekday_schedules: dict[int, tuple[Weekday, ...]]
    day_templates: dict[str, DayTemplateConfig]
    archetypes: dict[SplitArchetype, ArchetypeConfig]
    time_budget: TimeBudgetConfig
    compound_ratios: dict[str, float]
    calories: CaloriesConfig

    def __post_init__(self):
        self._validate_bands()
        self._validate_frequency_tables()
        self._validate_templates()
        for key in [level.value for level in ExperienceLevel] + ["accessory_day"]:
            ratio = self.compound_ratios.get(key)
            if ratio is None or not 0 <= ratio <= 1:
                raise GenerationConfigValidationError(
                    f"compound_ratios.{key} must be between 0 and 1, got {ratio!r}"
                )

    def _validate_bands(self) -> None:
        for key in [goal.value for goal in Goal] + [CIRCUIT_BAND]:
            if key not in self.prescription_bands:
                raise GenerationConfigValidationError(
                    f"prescription_bands missing entry for '{key}'"
                )

    def _validate_frequency_tables(self) -> None:
        covered: list[int] = []
        for low, high in self.frequency_buckets.values():
            covered.extend(range(low, high + 1))
        if sorted(covered) != list(range(1, 8)):
            raise GenerationConfigValidationError(
                "frequency_buckets must cover 1..7 sessions exactly once",
                details={"covered": sorted(covered)},
            )
        for bucket in self.frequency_buckets:
            for level in ExperienceLevel:
                if (bucket, level) not in self.splits:
                    raise GenerationConfigValidationError(
                        f"splits missing entry for bucket '{bucket}', experience '{level.value}'"
                    )
        for sessions in range(1, 8):
            days = self.weekday_schedules.get(sessions)
            if days is None:
                raise GenerationConfigValidationError(
                    f"weekday_schedules missing entry for {sessions} sessions"
                )
            if len(days) != sessions or len(set(days)) != sessions:
                raise GenerationConfigValidationError(
                    f"weekday_schedules.{sessions} must list {sessions} distinct weekdays"
                )

    def _validate_templates(self) -> None:
        for archetype in SplitArchetype:
            if archetype not in self.archetypes:
                raise GenerationConfigValidationError(
                    f"archetypes missing entry for '{archetype.value}'"
                )
            config = self.archetypes[archetype]
            for key in list(config.rotation) + list(config.final_day_by_frequency.values()):
                if key not in self.day_templates:
                    raise GenerationConfigValidationError(
                        f"Archetype '{archetype.value}' references unknown day template '{key}'"
                    )

    def frequency_bucket(self, sessions_per_week: int) -> str:
        for bucket, (low, high) in self.frequency_buckets.items():
            if low <= sessions_per_week <= high:
                return bucket
        raise ConfigurationDefect(f"No frequency bucket covers {sessions_per_week} sessions")

    def split_for(self, bucket: str, experience: ExperienceLevel) -> SplitArchetype:
        try:
            return self.splits[(bucket, experience)]
        except KeyError:
            raise ConfigurationDefect(
                f"No split configured for bucket '{bucket}', experience '{experience.value}'"
            ) from None

    def band_for(self, key: str) -> PrescriptionBand:
        try:
            return self.prescription_bands[key]
        except KeyError:
            raise ConfigurationDefect(f"No prescription band configured for '{key}'") from None

    def compound_ratio(self, experience: ExperienceLevel, compound_focus: bool) -> float:
        if not compound_focus:
            return self.compound_ratios["accessory_day"]
        return self.compound_ratios[experience.value]


def _enum(enum_cls, value: Any, where: str):
    try:
        return enum_cls(value)
    except ValueError:
        raise GenerationConfigValidationError(
            f"Unknown {enum_cls.__name__} '{value}' in {where}"
        ) from None


def parse_generation_config(data: dict[str, Any]) -> GenerationConfig:
    """Parse raw YAML data into a validated GenerationConfig.

    Raises:
        GenerationConfigValidationError: If any table is incomplete or inconsistent.
    """
    bands = {
        key: PrescriptionBand(
            sets=_pair(band.get("sets"), f"prescription_bands.{key}.sets"),
            reps=_pair(band.get("reps"), f"prescription_bands.{key}.reps"),
            rest_seconds=_pair(band.get("rest_seconds"), f"prescription_bands.{key}.rest_seconds"),
        )
        for key, band in data.get("prescription_bands", {}).items()
    }

    gentle_data = data.get("gentle_prescription", {})
    gentle = GentlePrescriptionConfig(
        sets=gentle_data.get("sets", 2),
        reps=_pair(gentle_data.get("reps", [8, 10]), "gentle_prescription.reps"),
        rest_seconds=gentle_data.get("rest_seconds", 120),
        tempo=gentle_data.get("tempo", "slow and controlled"),
    )
    warmup_data = data.get("warmup_prescription", {})
    warmup = WarmupPrescriptionConfig(
        sets=_pair(warmup_data.get("sets", [1, 2]), "warmup_prescription.sets"),
        reps=_pair(warmup_data.get("reps", [10, 12]), "warmup_prescription.reps"),
        rest_seconds=warmup_data.get("rest_seconds", 15),
    )
    cooldown = CooldownPrescriptionConfig(**data.get("cooldown_prescription", {}))

    buckets = {
        name: _pair(bounds, f"frequency_buckets.{name}")
        for name, bounds in data.get("frequency_buckets", {}).items()
    }
    splits = {
        (bucket, _enum(ExperienceLevel, level, "splits")): _enum(SplitArchetype, archetype, "splits")
        for bucket, by_level in data.get("splits", {}).items()
        for level, archetype in by_level.items()
    }
    goal_overrides = {
        _enum(Goal, goal, "goal_overrides"): _enum(SplitArchetype, archetype, "goal_overrides")
        for goal, archetype in (data.get("goal_overrides") or {}).items()
    }
    schedules = {
        int(sessions): tuple(_enum(Weekday, day, "weekday_schedules") for day in days)
        for sessions, days in data.get("weekday_schedules", {}).items()
    }
    templates = {
        key: DayTemplateConfig(
            key=key,
            emphasis=template.get("emphasis", key),
            title=template.get("title", key.replace("_", " ").title()),
            muscle_groups=tuple(
                _enum(MuscleGroup, group, f"day_templates.{key}")
                for group in template.get("muscle_groups", [])
            ),
            compound_focus=template.get("compound_focus", True),
        )
        for key, template in data.get("day_templates", {}).items()
    }
    archetypes = {}
    for key, archetype_data in data.get("archetypes", {}).items():
        archetype = _enum(SplitArchetype, key, "archetypes")
        archetypes[archetype] = ArchetypeConfig(
            archetype=archetype,
            name=archetype_data.get("name", key),
            description=archetype_data.get("description", ""),
            rotation=tuple(archetype_data.get("rotation", [])),
            final_day_by_frequency={
                int(k): v for k, v in (archetype_data.get("final_day_by_frequency") or {}).items()
            },
        )

    budget_data = data.get("time_budget", {})
    time_budget = TimeBudgetConfig(
        warmup_minutes=budget_data.get("warmup_minutes", 5),
        cooldown_minutes=budget_data.get("cooldown_minutes", 5),
        minutes_per_slot={
            _enum(ExperienceLevel, k, "time_budget.minutes_per_slot"): v
            for k, v in budget_data.get("minutes_per_slot", {}).items()
        },
        slot_bounds={
            _enum(ExperienceLevel, k, "time_budget.slot_bounds"): _pair(v, f"time_budget.slot_bounds.{k}")
            for k, v in budget_data.get("slot_bounds", {}).items()
        },
        high_frequency_threshold=budget_data.get("high_frequency_threshold", 5),
        high_frequency_slot_reduction=budget_data.get("high_frequency_slot_reduction", 1),
        bookend_exercises=budget_data.get("bookend_exercises", 3),
        short_session_bookend_exercises=budget_data.get("short_session_bookend_exercises", 2),
        short_session_minutes=budget_data.get("short_session_minutes", 45),
    )

    calories_data = data.get("calories", {})
    calories = CaloriesConfig(
        reference_weight_kg=calories_data.get("reference_weight_kg", 70),
        kcal_per_minute={
            _enum(ExperienceLevel, k, "calories.kcal_per_minute"): v
            for k, v in calories_data.get("kcal_per_minute", {}).items()
        },
        goal_multipliers={
            _enum(Goal, k, "calories.goal_multipliers"): v
            for k, v in (calories_data.get("goal_multipliers") or {}).items()
        },
        gentle_multiplier=calories_data.get("gentle_multiplier", 0.6),
    )

    return GenerationConfig(
        version=str(data.get("version", "1.0")),
        prescription_bands=bands,
        gentle_prescription=gentle,
        warmup_prescription=warmup,
        cooldown_prescription=cooldown,
        frequency_buckets=buckets,
        splits=splits,
        circuit_max_minutes=data.get("circuit_max_minutes", 30),
        goal_overrides=goal_overrides,
        weekday_schedules=schedules,
        day_templates=templates,
        archetypes=archetypes,
        time_budget=time_budget,
        compound_ratios=dict(data.get("compound_ratios", {})),
        calories=calories,
    )


class GenerationConfigLoader:
    """Thread-safe singleton loader for the generation rule tables."""

    _instance: GenerationConfigLoader | None = None
    _lock = RLock()

    def __new__(cls, config_path: Path | None = None):
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
            return cls._instance

    def __init__(self, config_path: Path | None = None):
        if hasattr(self, "_initialized"):
            return

        self._lock = RLock()
        self._config: GenerationConfig | None = None
        self._config_path = config_path or self._default_config_path()
        self._reload_count = 0
        self._initialized = True

        self._load_config()

    @staticmethod
    def _default_config_path() -> Path:
        """Get default configuration file path."""
        from fitplan.config.settings import get_settings

        return Path(get_settings().generation_config_path)

    def _load_config(self) -> None:
        """Load configuration from YAML file."""
        try:
            with open(self._config_path, "r") as f:
                data = yaml.safe_load(f)
        except FileNotFoundError:
            raise GenerationConfigLoadError(
                f"Configuration file not found: {self._config_path}"
            )
        except yaml.YAMLError as e:
            raise GenerationConfigLoadError(
                f"Failed to parse YAML configuration: {e}",
                details={"file_path": str(self._config_path)},
            )

        if not isinstance(data, dict):
            raise GenerationConfigLoadError(
                "Configuration root must be a mapping",
                details={"file_path": str(self._config_path)},
            )

        try:
            self._config = parse_generation_config(data)
        except GenerationConfigValidationError:
            raise
        except (TypeError, ValueError, AttributeError) as e:
            raise GenerationConfigLoadError(
                f"Failed to parse configuration: {e}",
                details={"file_path": str(self._config_path)},
            )
        self._reload_count += 1
        logger.info(
            "Loaded generation config version %s from %s", self._config.version, self._config_path
        )

    @property
    def config(self) -> GenerationConfig:
        """Get current configuration (thread-safe)."""
        with self._lock:
            if self._config is None:
                self._load_config()
            return self._config

    def reload(self) -> None:
        """Force reload configuration from file."""
        with self._lock:
            self._load_config()

    @property
    def reload_count(self) -> int:
        return self._reload_count

    @classmethod
    def reset(cls) -> None:
        """Drop the singleton so the next access reloads from disk."""
        with cls._lock:
            cls._instance = None


def get_generation_config_loader(config_path: Path | None = None) -> GenerationConfigLoader:
    """Get the global configuration loader instance."""
    return GenerationConfigLoader(config_path)


def get_generation_config() -> GenerationConfig:
    """Get the current generation configuration."""
    return get_generation_config_loader().config
