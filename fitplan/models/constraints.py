"""Safety constraints derived from a user profile."""
from __future__ import annotations

from dataclasses import dataclass, field

from fitplan.models.enums import (
    ConditionTag,
    Equipment,
    ExperienceLevel,
    InjuryTag,
    MedicationTag,
    MovementTag,
)


@dataclass(frozen=True)
class TaggedProfile:
    """Closed-tag view of a profile's free-text fields."""

    injuries: frozenset[InjuryTag] = frozenset()
    conditions: frozenset[ConditionTag] = frozenset()
    medications: frozenset[MedicationTag] = frozenset()
    pregnancy_trimester: int | None = None


@dataclass(frozen=True)
class ConstraintSet:
    """Aggregated safety constraints for one request.

    Attributes:
        excluded_tags: Catalog entries carrying any of these tags are never selected
        intensity_cap_rpe: Strictest RPE ceiling across all matching rules
        requires_medical_clearance: True if any rule demands clearance
        warnings: User-facing warnings in canonical rule order, deduplicated
        equipment_available: Equipment the user has, always including bodyweight
        gentle_mode: Use the fixed gentle prescription and split
        max_difficulty: Highest catalog difficulty that may be selected
    """

    excluded_tags: frozenset[MovementTag]
    intensity_cap_rpe: float | None
    requires_medical_clearance: bool
    warnings: tuple[str, ...]
    equipment_available: frozenset[Equipment]
    gentle_mode: bool
    max_difficulty: ExperienceLevel
    tagged: TaggedProfile = field(default_factory=TaggedProfile)

    def allows(self, tags: frozenset[MovementTag]) -> bool:
        return not (tags & self.excluded_tags)
