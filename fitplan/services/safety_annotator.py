"""Safety Annotator: plan-level warnings, clearance notice, substitution notes and coaching tips."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from fitplan.config.safety_rules import SENIOR_AGE
from fitplan.models.constraints import ConstraintSet
from fitplan.models.enums import (
    ConditionTag,
    ExperienceLevel,
    FallbackStage,
    Goal,
    SplitArchetype,
)
from fitplan.models.plan import SubstitutionRecord
from fitplan.models.profile import UserProfile

CLEARANCE_NOTICE = (
    "Medical clearance required: get sign-off from a doctor before starting this plan."
)

GOAL_INTENSITY_NOTES: dict[Goal, str] = {
    Goal.MUSCLE_GAIN: "Train each set close to failure with clean form; growth comes from consistent hard sets.",
    Goal.WEIGHT_LOSS: "Keep rest short and the pace brisk; consistency matters more than any single session.",
    Goal.STRENGTH: "Rest fully between heavy sets so every rep is crisp.",
    Goal.ENDURANCE: "Keep moving at a steady pace; the goal is sustained effort, not max effort.",
    Goal.MAINTENANCE: "Moderate effort every session keeps your current fitness.",
    Goal.FLEXIBILITY: "Move through your full comfortable range on every rep.",
    Goal.ATHLETIC_PERFORMANCE: "Move explosively on the way up and stay controlled on the way down.",
}

EXPERIENCE_TIPS: dict[ExperienceLevel, tuple[str, ...]] = {
    ExperienceLevel.BEGINNER: (
        "Focus on learning proper form before making exercises harder.",
        "Take your time between sets; recovery is part of training.",
    ),
    ExperienceLevel.INTERMEDIATE: (),
    ExperienceLevel.ADVANCED: (
        "Push intensity on compound lifts.",
        "Track your sets and reps to make sure you keep progressing.",
    ),
}

PROGRESSION_BY_GOAL: dict[Goal, str] = {
    Goal.STRENGTH: "Make a lift harder once you complete every set at the top of the rep range.",
    Goal.MUSCLE_GAIN: "Make an exercise harder once you can do 2 or more reps beyond the target range.",
    Goal.WEIGHT_LOSS: "Trim 5-10 seconds from rest periods each week to raise the metabolic demand.",
}

STAGE_REASONS: dict[FallbackStage, str] = {
    FallbackStage.SYNERGIST: "used an exercise that trains it as a secondary muscle",
    FallbackStage.BODYWEIGHT: "used a bodyweight alternative",
    FallbackStage.ADJACENT_GROUP: "trained a neighbouring muscle group instead",
    FallbackStage.ANY_GROUP: "filled the slot with another safe exercise",
}


@dataclass(frozen=True)
class SafetyAnnotation:
    warnings: tuple[str, ...]
    substitution_notes: tuple[str, ...]
    coaching_tips: tuple[str, ...]
    progression_note: str
    requires_medical_clearance: bool


def substitution_note(record: SubstitutionRecord) -> str:
    note = (
        f"{record.day_label}: no {record.requested_group.value} exercise fit your equipment "
        f"and restrictions, so we {STAGE_REASONS[record.stage]} ({record.exercise_name}"
    )
    if record.used_group is not record.requested_group:
        note += f", {record.used_group.value}"
    return note + ")."


def coaching_tips(
    profile: UserProfile, constraints: ConstraintSet, archetype: SplitArchetype
) -> tuple[str, ...]:
    tips = [GOAL_INTENSITY_NOTES[profile.goal]]
    tips.extend(EXPERIENCE_TIPS[profile.experience])

    conditions = constraints.tagged.conditions
    if ConditionTag.PREGNANCY in conditions:
        tips.append("You should be able to hold a conversation throughout every set.")
        tips.append("Stay well hydrated throughout the workout.")
    if ConditionTag.HEART_DISEASE in conditions:
        tips.append("Stop immediately if you feel chest pain, dizziness or shortness of breath.")
    if profile.age >= SENIOR_AGE:
        tips.append("Take extra warm-up time and keep a sturdy support within reach.")
    if archetype is SplitArchetype.CIRCUIT:
        tips.append("Keep moving between exercises and breathe steadily; never hold your breath.")
    if archetype is SplitArchetype.GENTLE:
        tips.append("Stop immediately if anything causes pain or discomfort.")
    return tuple(tips)


def progression_note(profile: UserProfile, constraints: ConstraintSet) -> str:
    if constraints.gentle_mode or constraints.requires_medical_clearance:
        return (
            "Focus on consistency and comfort. Increase duration gradually as you feel able, "
            "and work with your healthcare provider before increasing intensity."
        )
    note = "Week 1: focus on form and technique while you learn the movements."
    goal_note = PROGRESSION_BY_GOAL.get(profile.goal)
    if goal_note:
        note += " " + goal_note
    return note


def annotate(
    constraints: ConstraintSet,
    substitutions: Iterable[SubstitutionRecord],
    profile: UserProfile,
    archetype: SplitArchetype,
    coverage_warnings: Iterable[str] = (),
) -> SafetyAnnotation:
    """Collect everything the user should read before starting the plan.

    Warnings run from restrictions to weekly muscle coverage, with the clearance
    notice always last.
    """
    warnings = list(constraints.warnings)
    warnings.extend(coverage_warnings)
    if constraints.requires_medical_clearance:
        warnings.append(CLEARANCE_NOTICE)

    notes: list[str] = []
    for record in substitutions:
        note = substitution_note(record)
        if note not in notes:
            notes.append(note)

    return SafetyAnnotation(
        warnings=tuple(warnings),
        substitution_notes=tuple(notes),
        coaching_tips=coaching_tips(profile, constraints, archetype),
        progression_note=progression_note(profile, constraints),
        requires_medical_clearance=constraints.requires_medical_clearance,
    )
