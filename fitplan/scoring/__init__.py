"""Quality KPIs computed over generated plans."""
from fitplan.scoring.muscle_coverage_kpi import (
    DayMuscleData,
    MuscleCoverageKPI,
    WeeklyCoverageResult,
)
from fitplan.scoring.variety_kpi import (
    EmphasisOverlapResult,
    MovementDiversityResult,
    PlanVarietyKPI,
)

__all__ = [
    "DayMuscleData",
    "EmphasisOverlapResult",
    "MovementDiversityResult",
    "MuscleCoverageKPI",
    "PlanVarietyKPI",
    "WeeklyCoverageResult",
]
