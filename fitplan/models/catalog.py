"""Exercise catalog entry."""
from __future__ import annotations

from dataclasses import dataclass

from fitplan.models.enums import (
    NON_PATTERN_TAGS,
    Equipment,
    ExerciseRole,
    ExperienceLevel,
    MovementTag,
    MuscleGroup,
)


@dataclass(frozen=True)
class ExerciseCatalogEntry:
    """One exercise in the catalog.

    Attributes:
        id: Stable identifier, unique within the catalog
        name: Display name
        equipment: Every piece of equipment the exercise needs
        patterns: Movement patterns the exercise trains
        contraindications: Extra tags that make the exercise unsafe for some
            users without describing its pattern (e.g. ``wrist_loaded``)
        muscles: Muscle groups worked, primary first
        difficulty: Minimum experience the exercise is suited to
        roles: Slots (warmup, main, cooldown) the exercise can fill
    """

    id: str
    name: str
    equipment: frozenset[Equipment]
    patterns: frozenset[MovementTag]
    muscles: tuple[MuscleGroup, ...]
    difficulty: ExperienceLevel
    roles: frozenset[ExerciseRole]
    contraindications: frozenset[MovementTag] = frozenset()

    @property
    def primary_muscle(self) -> MuscleGroup:
        return self.muscles[0]

    @property
    def tags(self) -> frozenset[MovementTag]:
        return self.patterns | self.contraindications

    @property
    def is_compound(self) -> bool:
        return MovementTag.COMPOUND in self.patterns

    @property
    def is_bodyweight_only(self) -> bool:
        return self.equipment <= {Equipment.BODYWEIGHT}

    @property
    def primary_pattern(self) -> MovementTag | None:
        """First non-classification pattern, used to spread patterns within a day."""
        for tag in sorted(self.patterns - NON_PATTERN_TAGS, key=lambda t: t.value):
            return tag
        return None
