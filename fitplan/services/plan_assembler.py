"""
Plan Assembler

Combines composed, prescribed days into the final WeeklyPlan: rest days,
titles, descriptions and calorie estimates.

Calorie figures are an exercise-count-weighted estimate, not a physiological
measurement: estimated session minutes (fixed warm-up/cool-down time plus the
per-slot minutes for each main exercise) times a kcal/min rate by experience,
scaled by body weight and goal.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Sequence

from fitplan.config.generation_config_loader import GenerationConfig, get_generation_config
from fitplan.core.exceptions import ConfigurationDefect
from fitplan.models.constraints import ConstraintSet
from fitplan.models.plan import PlannedExercise, WeeklyPlan, WorkoutDay
from fitplan.models.profile import UserProfile
from fitplan.services.safety_annotator import SafetyAnnotation
from fitplan.services.split_selector import DayTemplate, SplitSelection


@dataclass(frozen=True)
class PlannedDay:
    template: DayTemplate
    warmup: tuple[PlannedExercise, ...]
    main: tuple[PlannedExercise, ...]
    cooldown: tuple[PlannedExercise, ...]


def profile_fingerprint(profile: UserProfile) -> str:
    """Stable hash of every profile field, independent of list ordering."""
    data = asdict(profile)
    for key in ("equipment", "injuries", "medical_conditions", "medications"):
        data[key] = sorted(str(getattr(v, "value", v)).lower() for v in data[key])
    payload = json.dumps(data, sort_keys=True, default=lambda v: getattr(v, "value", str(v)))
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def estimate_duration_minutes(main_count: int, profile: UserProfile, config: GenerationConfig) -> int:
    budget = config.time_budget
    return (
        budget.warmup_minutes
        + budget.cooldown_minutes
        + main_count * budget.minutes_per_slot[profile.experience]
    )


def estimate_calories(
    duration_minutes: int, profile: UserProfile, constraints: ConstraintSet, config: GenerationConfig
) -> int:
    calories = config.calories
    kcal = (
        calories.kcal_per_minute[profile.experience]
        * (profile.weight_kg / calories.reference_weight_kg)
        * calories.multiplier_for(profile.goal)
        * duration_minutes
    )
    if constraints.gentle_mode:
        kcal *= calories.gentle_multiplier
    return int(round(kcal))


def _safety_posture(constraints: ConstraintSet) -> str:
    parts = []
    if constraints.requires_medical_clearance:
        parts.append("Medical clearance is required before starting.")
    if constraints.gentle_mode:
        parts.append("Gentle mode: every exercise uses a fixed low-intensity prescription.")
    if constraints.intensity_cap_rpe is not None:
        parts.append(f"Intensity is capped at RPE {constraints.intensity_cap_rpe:g}.")
    if constraints.excluded_tags:
        parts.append(f"{len(constraints.excluded_tags)} movement types are excluded for safety.")
    return " ".join(parts) or "No safety restrictions apply."


def assemble(
    profile: UserProfile,
    split: SplitSelection,
    days: Sequence[PlannedDay],
    annotation: SafetyAnnotation,
    constraints: ConstraintSet,
    config: GenerationConfig | None = None,
    generated_at: datetime | None = None,
) -> WeeklyPlan:
    """Build the WeeklyPlan.

    Raises:
        ConfigurationDefect: If no days were composed.
    """
    if not days:
        raise ConfigurationDefect("Plan assembly received zero workout days")
    config = config or get_generation_config()

    workout_days = []
    for day in days:
        duration = estimate_duration_minutes(len(day.main), profile, config)
        workout_days.append(
            WorkoutDay(
                weekday=day.template.weekday,
                label=day.template.label,
                title=f"{day.template.weekday.label}: {day.template.label}",
                emphasis=day.template.emphasis,
                warmup=day.warmup,
                main=day.main,
                cooldown=day.cooldown,
                estimated_duration_minutes=duration,
                estimated_calories=estimate_calories(duration, profile, constraints, config),
                difficulty=constraints.max_difficulty,
            )
        )

    fingerprint = profile_fingerprint(profile)
    goal = profile.goal.value.replace("_", " ")
    description = (
        f"{split.name}: {split.description} "
        f"Built for {goal} at {profile.experience.value} level, "
        f"{split.sessions_per_week} sessions of about {profile.session_duration_minutes} minutes. "
        f"{_safety_posture(constraints)}"
    )

    return WeeklyPlan(
        plan_id=f"plan-{fingerprint[:16]}",
        title=f"{split.name} - Week 1",
        description=description,
        split_name=split.name,
        archetype=split.archetype,
        days=tuple(workout_days),
        rest_days=split.rest_days,
        warnings=annotation.warnings,
        substitution_notes=annotation.substitution_notes,
        coaching_tips=annotation.coaching_tips,
        progression_note=annotation.progression_note,
        requires_medical_clearance=annotation.requires_medical_clearance,
        intensity_cap_rpe=constraints.intensity_cap_rpe,
        weekly_calories=sum(d.estimated_calories for d in workout_days),
        profile_fingerprint=fingerprint,
        generated_at=generated_at,
    )
