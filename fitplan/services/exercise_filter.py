"""
Exercise Filter Engine

Builds ordered candidate pools from the catalog for a (role, muscle group)
slot. Every pool passes the base safety filter first:

1. required equipment is a subset of the user's equipment
2. no pattern or contraindication tag is excluded
3. difficulty does not exceed the allowed tier

Then a slot is matched through an ordered fallback chain. The first stage
that yields a non-empty pool wins, and the returned FilterOutcome names it:

- STRICT:         primary muscle is the target group
- SYNERGIST:      target group appears anywhere in the entry's muscles
- BODYWEIGHT:     bodyweight-only entries for the group, with role relaxed
- ADJACENT_GROUP: strict, then synergist, then bodyweight matching on each
                  group in ADJACENT_GROUPS, in order
- ANY_GROUP:      any safe entry for the role, credited to its own primary muscle

Safety filtering is never relaxed at any stage. The chain is only exhausted
when every safe entry usable in the role is already in the excluded ids.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import AbstractSet, Callable, Iterable

from fitplan.models.catalog import ExerciseCatalogEntry
from fitplan.models.constraints import ConstraintSet
from fitplan.models.enums import ExerciseRole, FallbackStage, MuscleGroup
from fitplan.repositories.catalog_repository import ExerciseCatalog

logger = logging.getLogger(__name__)

# Groups that can stand in for each other when a slot cannot be filled.
ADJACENT_GROUPS: dict[MuscleGroup, tuple[MuscleGroup, ...]] = {
    MuscleGroup.CHEST: (MuscleGroup.TRICEPS, MuscleGroup.SHOULDERS),
    MuscleGroup.BACK: (MuscleGroup.BICEPS, MuscleGroup.SHOULDERS),
    MuscleGroup.SHOULDERS: (MuscleGroup.CHEST, MuscleGroup.TRICEPS, MuscleGroup.BACK),
    MuscleGroup.BICEPS: (MuscleGroup.BACK, MuscleGroup.SHOULDERS),
    MuscleGroup.TRICEPS: (MuscleGroup.CHEST, MuscleGroup.SHOULDERS),
    MuscleGroup.QUADS: (MuscleGroup.GLUTES, MuscleGroup.HAMSTRINGS),
    MuscleGroup.HAMSTRINGS: (MuscleGroup.GLUTES, MuscleGroup.QUADS),
    MuscleGroup.GLUTES: (MuscleGroup.HAMSTRINGS, MuscleGroup.QUADS),
    MuscleGroup.CALVES: (MuscleGroup.QUADS, MuscleGroup.HAMSTRINGS, MuscleGroup.GLUTES),
    MuscleGroup.CORE: (MuscleGroup.GLUTES, MuscleGroup.BACK),
    MuscleGroup.CARDIO: (MuscleGroup.QUADS, MuscleGroup.CORE, MuscleGroup.GLUTES),
}

# Roles accepted at the BODYWEIGHT stage.
RELAXED_ROLES: dict[ExerciseRole, frozenset[ExerciseRole]] = {
    ExerciseRole.MAIN: frozenset({ExerciseRole.MAIN, ExerciseRole.WARMUP}),
    ExerciseRole.WARMUP: frozenset({ExerciseRole.WARMUP, ExerciseRole.MAIN}),
    ExerciseRole.COOLDOWN: frozenset({ExerciseRole.COOLDOWN, ExerciseRole.WARMUP}),
}


def _without(
    pool: Iterable[ExerciseCatalogEntry], exclude_ids: AbstractSet[str]
) -> tuple[ExerciseCatalogEntry, ...]:
    return tuple(e for e in pool if e.id not in exclude_ids)


@dataclass(frozen=True)
class FilterOutcome:
    """Result of running one slot through the fallback chain."""

    stage: FallbackStage
    requested_group: MuscleGroup
    muscle_group: MuscleGroup
    candidates: tuple[ExerciseCatalogEntry, ...]

    @property
    def is_substitution(self) -> bool:
        return self.stage is not FallbackStage.STRICT

    def group_for(self, entry: ExerciseCatalogEntry) -> MuscleGroup:
        """Muscle group a pick from this outcome is credited to."""
        if self.stage is FallbackStage.ANY_GROUP:
            return entry.primary_muscle
        return self.muscle_group


Strategy = Callable[
    [ExerciseRole, MuscleGroup, AbstractSet[str]],
    tuple[MuscleGroup, tuple[ExerciseCatalogEntry, ...]],
]


class ExerciseFilterEngine:
    """Per-request view of the catalog under one ConstraintSet."""

    def __init__(self, catalog: ExerciseCatalog, constraints: ConstraintSet):
        self._catalog = catalog
        self._constraints = constraints
        self._safe: dict[str, bool] = {}
        self._chain: list[tuple[FallbackStage, Strategy]] = [
            (FallbackStage.STRICT, self._strict),
            (FallbackStage.SYNERGIST, self._synergist),
            (FallbackStage.BODYWEIGHT, self._bodyweight),
            (FallbackStage.ADJACENT_GROUP, self._adjacent),
            (FallbackStage.ANY_GROUP, self._any_group),
        ]

    @property
    def catalog(self) -> ExerciseCatalog:
        return self._catalog

    @property
    def constraints(self) -> ConstraintSet:
        return self._constraints

    def is_safe(self, entry: ExerciseCatalogEntry) -> bool:
        """Base filter: equipment, exclusions and difficulty."""
        cached = self._safe.get(entry.id)
        if cached is None:
            c = self._constraints
            cached = (
                entry.equipment <= c.equipment_available
                and c.allows(entry.tags)
                and entry.difficulty.rank <= c.max_difficulty.rank
            )
            self._safe[entry.id] = cached
        return cached

    def eligible(
        self, role: ExerciseRole, muscle_group: MuscleGroup | None = None
    ) -> tuple[ExerciseCatalogEntry, ...]:
        """Safe entries suited to a role, optionally limited to a primary muscle."""
        return tuple(
            entry
            for entry in self._catalog.for_role(role)
            if self.is_safe(entry) and (muscle_group is None or entry.primary_muscle is muscle_group)
        )

    def _strict(self, role, group, exclude_ids):
        return group, _without(self.eligible(role, group), exclude_ids)

    def _synergist(self, role, group, exclude_ids):
        return group, tuple(
            e for e in self.eligible(role) if group in e.muscles and e.id not in exclude_ids
        )

    def _bodyweight(self, role, group, exclude_ids):
        roles = RELAXED_ROLES[role]
        pool = tuple(
            entry
            for entry in self._catalog
            if entry.is_bodyweight_only
            and entry.roles & roles
            and group in entry.muscles
            and entry.id not in exclude_ids
            and self.is_safe(entry)
        )
        return group, pool

    def _adjacent(self, role, group, exclude_ids):
        for neighbour in ADJACENT_GROUPS.get(group, ()):
            for match in (self._strict, self._synergist, self._bodyweight):
                _, pool = match(role, neighbour, exclude_ids)
                if pool:
                    return neighbour, pool
        return group, ()

    def _any_group(self, role, group, exclude_ids):
        pool = _without(self.eligible(role), exclude_ids)
        if not pool:
            roles = RELAXED_ROLES[role]
            pool = tuple(
                entry
                for entry in self._catalog
                if entry.roles & roles and entry.id not in exclude_ids and self.is_safe(entry)
            )
        return group, pool

    def candidates_for(
        self,
        role: ExerciseRole,
        muscle_group: MuscleGroup,
        exclude_ids: AbstractSet[str] = frozenset(),
    ) -> FilterOutcome | None:
        """Run the fallback chain for one slot.

        Returns None when every stage is exhausted; the caller reports that as
        insufficient catalog coverage.
        """
        for stage, strategy in self._chain:
            used_group, pool = strategy(role, muscle_group, exclude_ids)
            if pool:
                if stage is not FallbackStage.STRICT:
                    logger.debug(
                        "Fallback %s for %s/%s -> %s", stage.value, role.value,
                        muscle_group.value, used_group.value,
                    )
                return FilterOutcome(
                    stage=stage,
                    requested_group=muscle_group,
                    muscle_group=used_group,
                    candidates=pool,
                )
        return None
