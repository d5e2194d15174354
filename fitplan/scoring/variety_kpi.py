"""Exercise variety KPIs for a generated weekly plan.

Days that share an emphasis (e.g. "Push A" and "Push B") should not repeat the
same main exercises. The check compares the main-exercise ids of every pair of
same-emphasis days:

    overlap = |shared ids| / size of the smaller day

and passes when every pair stays at or under the threshold (20% by default).
Splits with fewer than MIN_DAYS_FOR_CHECK days rarely repeat an emphasis and
are reported as passed without comparison.
"""
from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from itertools import combinations
from typing import Any

from fitplan.models.plan import WeeklyPlan

logger = logging.getLogger(__name__)

DEFAULT_OVERLAP_THRESHOLD = 0.20
MIN_DAYS_FOR_CHECK = 4


@dataclass(frozen=True)
class DayPairOverlap:
    first_label: str
    second_label: str
    emphasis: str
    shared_ids: tuple[str, ...]
    overlap: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "first_label": self.first_label,
            "second_label": self.second_label,
            "emphasis": self.emphasis,
            "shared_ids": list(self.shared_ids),
            "overlap": self.overlap,
        }


@dataclass(frozen=True)
class EmphasisOverlapResult:
    """Result of comparing same-emphasis days.

    Attributes:
        passed: Whether every pair stayed at or under the threshold
        threshold: Maximum allowed overlap fraction
        max_overlap: Highest overlap seen across compared pairs
        pairs: Every compared pair
        message: Human-readable summary
    """

    passed: bool
    threshold: float
    max_overlap: float
    pairs: tuple[DayPairOverlap, ...]
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "passed": self.passed,
            "threshold": self.threshold,
            "max_overlap": self.max_overlap,
            "pairs": [p.to_dict() for p in self.pairs],
            "message": self.message,
        }


@dataclass(frozen=True)
class MovementDiversityResult:
    total_main_slots: int
    unique_exercises: int
    unique_percentage: float
    most_common: tuple[tuple[str, int], ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_main_slots": self.total_main_slots,
            "unique_exercises": self.unique_exercises,
            "unique_percentage": self.unique_percentage,
            "most_common": [list(item) for item in self.most_common],
        }


class PlanVarietyKPI:
    """Validator for exercise variety within one weekly plan.

    Example:
        >>> kpi = PlanVarietyKPI()
        >>> kpi.check_emphasis_overlap(plan).passed
        True
    """

    def __init__(self, threshold: float = DEFAULT_OVERLAP_THRESHOLD) -> None:
        if not 0.0 <= threshold <= 1.0:
            raise ValueError(f"threshold must be between 0 and 1, got {threshold}")
        self.threshold = threshold

    def check_emphasis_overlap(self, plan: WeeklyPlan) -> EmphasisOverlapResult:
        if len(plan.days) < MIN_DAYS_FOR_CHECK:
            return EmphasisOverlapResult(
                passed=True,
                threshold=self.threshold,
                max_overlap=0.0,
                pairs=(),
                message=f"{len(plan.days)}-day split: same-emphasis overlap not checked.",
            )

        pairs = []
        for first, second in combinations(plan.days, 2):
            if first.emphasis != second.emphasis:
                continue
            a, b = first.main_ids, second.main_ids
            smaller = min(len(a), len(b))
            shared = a & b
            pairs.append(
                DayPairOverlap(
                    first_label=first.label,
                    second_label=second.label,
                    emphasis=first.emphasis,
                    shared_ids=tuple(sorted(shared)),
                    overlap=round(len(shared) / smaller, 4) if smaller else 0.0,
                )
            )

        max_overlap = max((p.overlap for p in pairs), default=0.0)
        passed = max_overlap <= self.threshold
        if passed:
            message = (
                f"Variety passed: {len(pairs)} same-emphasis pair(s), "
                f"max overlap {max_overlap:.0%} (limit {self.threshold:.0%})."
            )
        else:
            offenders = [
                f"{p.first_label}/{p.second_label} {p.overlap:.0%}"
                for p in pairs
                if p.overlap > self.threshold
            ]
            message = f"Variety failed: {', '.join(offenders)} over the {self.threshold:.0%} limit."

        logger.debug("Emphasis overlap for %s: passed=%s max=%.2f", plan.plan_id, passed, max_overlap)
        return EmphasisOverlapResult(
            passed=passed,
            threshold=self.threshold,
            max_overlap=max_overlap,
            pairs=tuple(pairs),
            message=message,
        )

    def movement_diversity(self, plan: WeeklyPlan, top_n: int = 5) -> MovementDiversityResult:
        counts = Counter(e.exercise_id for day in plan.days for e in day.main)
        total = sum(counts.values())
        unique = len(counts)
        repeated = tuple((eid, n) for eid, n in counts.most_common(top_n) if n > 1)
        return MovementDiversityResult(
            total_main_slots=total,
            unique_exercises=unique,
            unique_percentage=round(unique / total * 100, 2) if total else 0.0,
            most_common=repeated,
        )
