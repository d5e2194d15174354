"""Immutable value objects describing a generated weekly plan."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from fitplan.models.enums import (
    ExerciseRole,
    ExperienceLevel,
    FallbackStage,
    MuscleGroup,
    SplitArchetype,
    Weekday,
)


@dataclass(frozen=True)
class Prescription:
    """Sets, reps and rest for one exercise. Never carries an external load."""

    sets: int
    rest_seconds: int
    reps_min: int | None = None
    reps_max: int | None = None
    hold_seconds: int | None = None
    tempo: str | None = None
    rpe_cap: float | None = None
    notes: tuple[str, ...] = ()

    @property
    def reps_display(self) -> str:
        if self.hold_seconds is not None:
            return f"{self.hold_seconds}s hold"
        if self.reps_min == self.reps_max:
            return str(self.reps_min)
        return f"{self.reps_min}-{self.reps_max}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "sets": self.sets,
            "reps": self.reps_display,
            "reps_min": self.reps_min,
            "reps_max": self.reps_max,
            "hold_seconds": self.hold_seconds,
            "rest_seconds": self.rest_seconds,
            "tempo": self.tempo,
            "rpe_cap": self.rpe_cap,
            "notes": list(self.notes),
        }


@dataclass(frozen=True)
class SubstitutionRecord:
    """A slot that could not be filled at the strict filter stage."""

    day_label: str
    slot_index: int
    role: ExerciseRole
    requested_group: MuscleGroup
    used_group: MuscleGroup
    stage: FallbackStage
    exercise_id: str
    exercise_name: str


@dataclass(frozen=True)
class PlannedExercise:
    exercise_id: str
    name: str
    role: ExerciseRole
    muscle_group: MuscleGroup
    prescription: Prescription
    stage: FallbackStage = FallbackStage.STRICT
    is_compound: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "exercise_id": self.exercise_id,
            "name": self.name,
            "role": self.role.value,
            "muscle_group": self.muscle_group.value,
            "is_compound": self.is_compound,
            "stage": self.stage.value,
            **self.prescription.to_dict(),
        }


@dataclass(frozen=True)
class WorkoutDay:
    weekday: Weekday
    label: str
    title: str
    emphasis: str
    warmup: tuple[PlannedExercise, ...]
    main: tuple[PlannedExercise, ...]
    cooldown: tuple[PlannedExercise, ...]
    estimated_duration_minutes: int
    estimated_calories: int
    difficulty: ExperienceLevel

    @property
    def exercises(self) -> tuple[PlannedExercise, ...]:
        return self.warmup + self.main + self.cooldown

    @property
    def main_ids(self) -> frozenset[str]:
        return frozenset(e.exercise_id for e in self.main)


@dataclass(frozen=True)
class WeeklyPlan:
    plan_id: str
    title: str
    description: str
    split_name: str
    archetype: SplitArchetype
    days: tuple[WorkoutDay, ...]
    rest_days: tuple[Weekday, ...]
    warnings: tuple[str, ...]
    substitution_notes: tuple[str, ...]
    coaching_tips: tuple[str, ...]
    progression_note: str
    requires_medical_clearance: bool
    intensity_cap_rpe: float | None
    weekly_calories: int
    profile_fingerprint: str
    generated_at: datetime | None = field(default=None, compare=False)

    def exercises(self):
        for day in self.days:
            yield from day.exercises
