"""
Day Composer

Fills each training day of a split with concrete catalog exercises.

Per day:
- main slot budget from session duration (see TimeBudgetConfig.main_slots)
- slots assigned to the day's muscle groups round-robin
- the first ceil(budget * compound_ratio) slots prefer compound entries, the
  rest prefer isolation/accessory entries
- an exercise id is never repeated within a day; reusing a movement pattern
  within a day is deprioritized

Across the week a usage counter deprioritizes (never excludes) ids already
picked on earlier days, so days sharing an emphasis get different exercises
whenever the pool is deep enough. Ties fall back to catalog order, which keeps
the whole composition deterministic.
"""

from __future__ import annotations

import logging
import math
from collections import Counter
from dataclasses import dataclass

from fitplan.config.generation_config_loader import GenerationConfig, get_generation_config
from fitplan.core.exceptions import InsufficientCatalogCoverageError
from fitplan.models.catalog import ExerciseCatalogEntry
from fitplan.models.enums import ExerciseRole, ExperienceLevel, FallbackStage, MuscleGroup
from fitplan.models.plan import SubstitutionRecord
from fitplan.services.exercise_filter import ExerciseFilterEngine, FilterOutcome
from fitplan.services.split_selector import DayTemplate, SplitSelection

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SelectedExercise:
    entry: ExerciseCatalogEntry
    role: ExerciseRole
    muscle_group: MuscleGroup
    stage: FallbackStage = FallbackStage.STRICT


@dataclass(frozen=True)
class ComposedDay:
    template: DayTemplate
    warmup: tuple[SelectedExercise, ...]
    main: tuple[SelectedExercise, ...]
    cooldown: tuple[SelectedExercise, ...]

    @property
    def selected(self) -> tuple[SelectedExercise, ...]:
        return self.warmup + self.main + self.cooldown


@dataclass(frozen=True)
class ComposedWeek:
    days: tuple[ComposedDay, ...]
    substitutions: tuple[SubstitutionRecord, ...]
    main_slots_per_day: int


class DayComposer:
    def __init__(
        self,
        filter_engine: ExerciseFilterEngine,
        experience: ExperienceLevel,
        config: GenerationConfig | None = None,
    ):
        self._filter = filter_engine
        self._experience = experience
        self._config = config or get_generation_config()

    def slot_budget(self, session_duration_minutes: int, sessions_per_week: int) -> int:
        return self._config.time_budget.main_slots(
            self._experience, session_duration_minutes, sessions_per_week
        )

    def compound_quota(self, slots: int, compound_focus: bool) -> int:
        ratio = self._config.compound_ratio(self._experience, compound_focus)
        return min(slots, math.ceil(slots * ratio))

    def compose_week(self, split: SplitSelection, session_duration_minutes: int) -> ComposedWeek:
        """Compose every day of the split in order, sharing one usage counter."""
        slots = self.slot_budget(session_duration_minutes, split.sessions_per_week)
        bookends = self._config.time_budget.bookend_count(session_duration_minutes)
        usage: Counter[str] = Counter()
        substitutions: list[SubstitutionRecord] = []

        days = tuple(
            self.compose_day(template, slots, bookends, usage, substitutions)
            for template in split.days
        )
        logger.debug(
            "Composed %d days, %d main slots each, %d substitutions",
            len(days), slots, len(substitutions),
        )
        return ComposedWeek(days=days, substitutions=tuple(substitutions), main_slots_per_day=slots)

    def compose_day(
        self,
        template: DayTemplate,
        slots: int,
        bookends: int,
        usage: Counter,
        substitutions: list[SubstitutionRecord],
    ) -> ComposedDay:
        groups = template.muscle_groups
        quota = self.compound_quota(slots, template.compound_focus)
        day_ids: set[str] = set()
        day_patterns: set = set()
        main: list[tuple[int, SelectedExercise]] = []

        for index in range(slots):
            group = groups[index % len(groups)]
            outcome = self._filter.candidates_for(ExerciseRole.MAIN, group, day_ids)
            if outcome is None:
                raise InsufficientCatalogCoverageError(
                    template.label, index, group.value, ExerciseRole.MAIN.value
                )
            entry = self._pick_main(outcome, index < quota, usage, day_patterns, set(groups))
            used_group = outcome.group_for(entry)
            day_ids.add(entry.id)
            if entry.primary_pattern is not None:
                day_patterns.add(entry.primary_pattern)
            main.append(
                (index, SelectedExercise(entry, ExerciseRole.MAIN, used_group, outcome.stage))
            )
            if outcome.is_substitution:
                substitutions.append(
                    SubstitutionRecord(
                        day_label=template.label,
                        slot_index=index,
                        role=ExerciseRole.MAIN,
                        requested_group=group,
                        used_group=used_group,
                        stage=outcome.stage,
                        exercise_id=entry.id,
                        exercise_name=entry.name,
                    )
                )

        # compound work first, otherwise slot order
        main.sort(key=lambda item: (not item[1].entry.is_compound, item[0]))
        main_selected = tuple(selected for _, selected in main)

        warmup = self._pick_bookends(ExerciseRole.WARMUP, template, bookends, usage, day_ids)
        cooldown = self._pick_bookends(ExerciseRole.COOLDOWN, template, bookends, usage, day_ids)

        for selected in warmup + main_selected + cooldown:
            usage[selected.entry.id] += 1

        return ComposedDay(template=template, warmup=warmup, main=main_selected, cooldown=cooldown)

    def _pick_main(
        self,
        outcome: FilterOutcome,
        compound_slot: bool,
        usage: Counter,
        day_patterns: set,
        day_groups: set[MuscleGroup],
    ) -> ExerciseCatalogEntry:
        catalog = self._filter.catalog
        open_slot = outcome.stage is FallbackStage.ANY_GROUP

        def rank(entry: ExerciseCatalogEntry):
            pattern_repeat = entry.primary_pattern is not None and entry.primary_pattern in day_patterns
            return (
                usage[entry.id],
                open_slot and not day_groups & set(entry.muscles),
                pattern_repeat,
                entry.is_compound != compound_slot,
                # closest to the user's tier first
                self._experience.rank - entry.difficulty.rank,
                catalog.position(entry.id),
            )

        return min(outcome.candidates, key=rank)

    def _pick_bookends(
        self,
        role: ExerciseRole,
        template: DayTemplate,
        count: int,
        usage: Counter,
        day_ids: set[str],
    ) -> tuple[SelectedExercise, ...]:
        catalog = self._filter.catalog
        day_groups = set(template.muscle_groups)
        pool = [e for e in self._filter.eligible(role) if e.id not in day_ids]
        if not pool:
            raise InsufficientCatalogCoverageError(template.label, 0, "any", role.value)

        def rank(entry: ExerciseCatalogEntry):
            return (
                not (day_groups & set(entry.muscles)),
                usage[entry.id],
                catalog.position(entry.id),
            )

        picked = sorted(pool, key=rank)[:count]
        for entry in picked:
            day_ids.add(entry.id)
        return tuple(SelectedExercise(entry, role, entry.primary_muscle) for entry in picked)
