"""
Prescription Engine

Assigns sets, reps and rest to each selected exercise. The main-work table is
keyed by goal (or by the circuit band when the circuit split is in use) and
lives in generation_config.yaml. Within a band:

- sets: band minimum for beginners, midpoint for intermediates, maximum for advanced
- rest: compound work gets the long end of the band, isolation the short end

An RPE cap moves every main exercise to the low-intensity end of its band:
minimum sets, the upper (lighter) half of the rep range and maximum rest.
Gentle mode replaces the table entirely with one fixed prescription.

No prescription ever carries an external load.
"""

from __future__ import annotations

import math

from fitplan.config.generation_config_loader import (
    CIRCUIT_BAND,
    GenerationConfig,
    PrescriptionBand,
    get_generation_config,
)
from fitplan.config.safety_rules import INJURY_CUES
from fitplan.models.constraints import ConstraintSet
from fitplan.models.enums import (
    ConditionTag,
    ExerciseRole,
    ExperienceLevel,
    Goal,
    SplitArchetype,
)
from fitplan.models.plan import PlannedExercise, Prescription
from fitplan.services.day_composer import SelectedExercise

PREGNANCY_CUE = "Breathe continuously; never hold your breath"
BEGINNER_COMPOUND_CUE = "Master the movement pattern before making it harder"
PRIORITY_CUE = "Do this lift first while you are fresh"


def _sets_for(experience: ExperienceLevel, low: int, high: int) -> int:
    if experience is ExperienceLevel.BEGINNER:
        return low
    if experience is ExperienceLevel.ADVANCED:
        return high
    return low + (high - low) // 2


class PrescriptionEngine:
    def __init__(
        self,
        goal: Goal,
        experience: ExperienceLevel,
        constraints: ConstraintSet,
        archetype: SplitArchetype,
        config: GenerationConfig | None = None,
    ):
        self._goal = goal
        self._experience = experience
        self._constraints = constraints
        self._config = config or get_generation_config()
        band_key = CIRCUIT_BAND if archetype is SplitArchetype.CIRCUIT else goal.value
        self._band: PrescriptionBand = self._config.band_for(band_key)
        self._cues = tuple(
            cue for tag, cue in INJURY_CUES.items() if tag in constraints.tagged.injuries
        )
        if ConditionTag.PREGNANCY in constraints.tagged.conditions:
            self._cues += (PREGNANCY_CUE,)

    @property
    def band(self) -> PrescriptionBand:
        return self._band

    def _rpe_note(self) -> tuple[str, ...]:
        cap = self._constraints.intensity_cap_rpe
        if cap is None:
            return ()
        return (f"Stay at RPE ≤ {cap:g}",)

    def _gentle(self) -> Prescription:
        gentle = self._config.gentle_prescription
        return Prescription(
            sets=gentle.sets,
            reps_min=gentle.reps[0],
            reps_max=gentle.reps[1],
            rest_seconds=gentle.rest_seconds,
            tempo=gentle.tempo,
            rpe_cap=self._constraints.intensity_cap_rpe,
            notes=self._rpe_note() + self._cues,
        )

    def _warmup(self) -> Prescription:
        warmup = self._config.warmup_prescription
        sets = warmup.sets[0] if self._experience is ExperienceLevel.BEGINNER else warmup.sets[1]
        return Prescription(
            sets=sets,
            reps_min=warmup.reps[0],
            reps_max=warmup.reps[1],
            rest_seconds=warmup.rest_seconds,
        )

    def _cooldown(self) -> Prescription:
        cooldown = self._config.cooldown_prescription
        return Prescription(
            sets=cooldown.sets,
            hold_seconds=cooldown.hold_seconds,
            rest_seconds=cooldown.rest_seconds,
        )

    def _main(self, selected: SelectedExercise) -> Prescription:
        band = self._band
        entry = selected.entry
        cap = self._constraints.intensity_cap_rpe
        notes: list[str] = []

        if cap is not None:
            sets = band.sets[0]
            reps_min = math.ceil((band.reps[0] + band.reps[1]) / 2)
            reps_max = band.reps[1]
            rest = band.rest_seconds[1]
            tempo = "controlled"
            notes.extend(self._rpe_note())
        else:
            sets = _sets_for(self._experience, *band.sets)
            reps_min, reps_max = band.reps
            rest = band.rest_seconds[1] if entry.is_compound else band.rest_seconds[0]
            tempo = None

        if entry.is_compound:
            if self._experience is ExperienceLevel.BEGINNER:
                notes.append(BEGINNER_COMPOUND_CUE)
            elif self._goal in (Goal.STRENGTH, Goal.ATHLETIC_PERFORMANCE):
                notes.append(PRIORITY_CUE)
        notes.extend(self._cues)

        return Prescription(
            sets=sets,
            reps_min=reps_min,
            reps_max=reps_max,
            rest_seconds=rest,
            tempo=tempo,
            rpe_cap=cap,
            notes=tuple(notes),
        )

    def prescribe(self, selected: SelectedExercise) -> Prescription:
        if self._constraints.gentle_mode:
            return self._gentle()
        if selected.role is ExerciseRole.WARMUP:
            return self._warmup()
        if selected.role is ExerciseRole.COOLDOWN:
            return self._cooldown()
        return self._main(selected)

    def plan(self, selected: SelectedExercise) -> PlannedExercise:
        return PlannedExercise(
            exercise_id=selected.entry.id,
            name=selected.entry.name,
            role=selected.role,
            muscle_group=selected.muscle_group,
            prescription=self.prescribe(selected),
            stage=selected.stage,
            is_compound=selected.entry.is_compound,
        )
