"""User profile consumed by the plan generator."""
from __future__ import annotations

from dataclasses import dataclass, field

from fitplan.models.enums import Equipment, ExperienceLevel, Gender, Goal


@dataclass(frozen=True)
class UserProfile:
    """Everything the generator needs to know about a user.

    Free-text fields (injuries, medical_conditions, medications) are matched
    against the keyword tables in fitplan.config.safety_rules; unknown text is
    ignored. ``equipment`` always gains bodyweight, so an empty set means
    "no equipment".
    """

    age: int
    gender: Gender
    height_cm: float
    weight_kg: float
    goal: Goal
    experience: ExperienceLevel
    sessions_per_week: int
    session_duration_minutes: int
    equipment: frozenset[Equipment] = field(default_factory=frozenset)
    injuries: tuple[str, ...] = ()
    medical_conditions: tuple[str, ...] = ()
    medications: tuple[str, ...] = ()
    is_pregnant: bool = False
    pregnancy_trimester: int | None = None
    is_breastfeeding: bool = False

    def __post_init__(self):
        object.__setattr__(
            self,
            "equipment",
            frozenset(Equipment.parse(e) for e in self.equipment) | {Equipment.BODYWEIGHT},
        )
        object.__setattr__(self, "injuries", tuple(self.injuries))
        object.__setattr__(self, "medical_conditions", tuple(self.medical_conditions))
        object.__setattr__(self, "medications", tuple(self.medications))
