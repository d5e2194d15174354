"""Weekly muscle coverage KPI for a composed plan.

Counts how often each major muscle group is trained across the week. An
exercise counts once for every group in its muscle list, so a push-up is a hit
for chest, triceps and shoulders alike.

Major Muscle Groups:
- chest, back, shoulders
- quads, hamstrings

A major group with fewer than ``min_weekly_hits`` hits is undertrained and
produces one warning. Weak coverage is reported, never raised: injuries and
equipment limits legitimately starve some groups.
"""
from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Any, Iterable

from fitplan.models.catalog import ExerciseCatalogEntry
from fitplan.models.enums import MuscleGroup

logger = logging.getLogger(__name__)

MAJOR_MUSCLE_GROUPS: tuple[MuscleGroup, ...] = (
    MuscleGroup.CHEST,
    MuscleGroup.BACK,
    MuscleGroup.QUADS,
    MuscleGroup.HAMSTRINGS,
    MuscleGroup.SHOULDERS,
)
DEFAULT_MIN_WEEKLY_HITS = 2


@dataclass(frozen=True)
class DayMuscleData:
    """Muscles trained on one day.

    Attributes:
        label: Day label, e.g. "Upper Body A"
        muscles: Every muscle of every main exercise, repeats included
    """

    label: str
    muscles: tuple[MuscleGroup, ...]

    @classmethod
    def from_exercises(cls, label: str, exercises: Iterable[ExerciseCatalogEntry]) -> DayMuscleData:
        return cls(label=label, muscles=tuple(m for entry in exercises for m in entry.muscles))


@dataclass(frozen=True)
class WeeklyCoverageResult:
    """Result of checking major muscle groups across one week.

    Attributes:
        passed: Whether every major group reached the threshold
        min_weekly_hits: Hits each major group needs
        hits: (group, hits) for every major group, in major-group order
        undertrained: Groups under the threshold
        warnings: One user-facing warning per undertrained group
        message: Summary for logs and tests
    """

    passed: bool
    min_weekly_hits: int
    hits: tuple[tuple[str, int], ...]
    undertrained: tuple[str, ...]
    warnings: tuple[str, ...]
    message: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "passed": self.passed,
            "min_weekly_hits": self.min_weekly_hits,
            "hits": [list(item) for item in self.hits],
            "undertrained": list(self.undertrained),
            "warnings": list(self.warnings),
            "message": self.message,
        }


class MuscleCoverageKPI:
    """Validator for weekly training frequency of major muscle groups.

    Example:
        >>> kpi = MuscleCoverageKPI()
        >>> days = [DayMuscleData("Full Body", (MuscleGroup.CHEST, MuscleGroup.QUADS))]
        >>> kpi.check_week(days).undertrained
        ('chest', 'back', 'quads', 'hamstrings', 'shoulders')
    """

    def __init__(
        self,
        min_weekly_hits: int = DEFAULT_MIN_WEEKLY_HITS,
        major_groups: tuple[MuscleGroup, ...] = MAJOR_MUSCLE_GROUPS,
    ) -> None:
        if min_weekly_hits < 1:
            raise ValueError(f"min_weekly_hits must be at least 1, got {min_weekly_hits}")
        self.min_weekly_hits = min_weekly_hits
        self.major_groups = major_groups

    def check_week(self, days: Iterable[DayMuscleData]) -> WeeklyCoverageResult:
        days = list(days)
        counts: Counter[MuscleGroup] = Counter(m for day in days for m in day.muscles)
        hits = tuple((group.value, counts[group]) for group in self.major_groups)
        undertrained = tuple(name for name, n in hits if n < self.min_weekly_hits)
        warnings = tuple(
            f"{name.capitalize()} trained only {n}x this week "
            f"(aim for at least {self.min_weekly_hits}x)."
            for name, n in hits
            if n < self.min_weekly_hits
        )

        passed = not undertrained
        breakdown = ", ".join(f"{name} ({n}x)" for name, n in hits)
        if passed:
            message = f"Coverage passed over {len(days)} day(s): {breakdown}."
        else:
            message = (
                f"Coverage failed over {len(days)} day(s): {', '.join(undertrained)} under "
                f"{self.min_weekly_hits}x. Hits: {breakdown}."
            )

        logger.debug("Weekly muscle coverage: passed=%s undertrained=%s", passed, undertrained)
        return WeeklyCoverageResult(
            passed=passed,
            min_weekly_hits=self.min_weekly_hits,
            hits=hits,
            undertrained=undertrained,
            warnings=warnings,
            message=message,
        )
