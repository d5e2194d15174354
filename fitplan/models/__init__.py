"""Domain models package."""
from fitplan.models.catalog import ExerciseCatalogEntry
from fitplan.models.constraints import ConstraintSet, TaggedProfile
from fitplan.models.plan import (
    PlannedExercise,
    Prescription,
    SubstitutionRecord,
    WeeklyPlan,
    WorkoutDay,
)
from fitplan.models.profile import UserProfile

__all__ = [
    "ConstraintSet",
    "ExerciseCatalogEntry",
    "PlannedExercise",
    "Prescription",
    "SubstitutionRecord",
    "TaggedProfile",
    "UserProfile",
    "WeeklyPlan",
    "WorkoutDay",
]
