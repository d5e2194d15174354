"""Pydantic schemas for plan generation endpoints."""
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from fitplan.models.enums import (
    Equipment,
    ExperienceLevel,
    FallbackStage,
    Gender,
    Goal,
    SplitArchetype,
    Weekday,
)
from fitplan.models.plan import PlannedExercise, WeeklyPlan, WorkoutDay
from fitplan.models.profile import UserProfile


# ============== Request ==============

class UserProfileRequest(BaseModel):
    """Profile submitted for plan generation.

    Range checks (sessions per week, duration, trimester) are left to the
    generator so that they come back as VAL_PROFILE_001 errors.
    """

    age: int = Field(..., description="Age in years")
    gender: Gender
    height_cm: float = Field(..., description="Height in centimetres")
    weight_kg: float = Field(..., description="Body weight in kilograms")
    goal: Goal
    experience: ExperienceLevel
    sessions_per_week: int = Field(..., description="Training days per week (1-7)")
    session_duration_minutes: int = Field(..., description="Target session length in minutes")
    equipment: list[Equipment] = Field(
        default_factory=list,
        description="Available equipment; bodyweight is always included",
    )
    injuries: list[str] = Field(default_factory=list)
    medical_conditions: list[str] = Field(default_factory=list)
    medications: list[str] = Field(default_factory=list)
    is_pregnant: bool = False
    pregnancy_trimester: int | None = None
    is_breastfeeding: bool = False

    @field_validator("equipment", mode="before")
    @classmethod
    def parse_equipment(cls, v):
        """Accept common equipment aliases ("dumbbells", "bands", ...)."""
        if v is None:
            return []
        return [Equipment.parse(item) for item in v]

    def to_profile(self) -> UserProfile:
        return UserProfile(
            age=self.age,
            gender=self.gender,
            height_cm=self.height_cm,
            weight_kg=self.weight_kg,
            goal=self.goal,
            experience=self.experience,
            sessions_per_week=self.sessions_per_week,
            session_duration_minutes=self.session_duration_minutes,
            equipment=frozenset(self.equipment),
            injuries=tuple(self.injuries),
            medical_conditions=tuple(self.medical_conditions),
            medications=tuple(self.medications),
            is_pregnant=self.is_pregnant,
            pregnancy_trimester=self.pregnancy_trimester,
            is_breastfeeding=self.is_breastfeeding,
        )


# ============== Response ==============

class PrescribedExerciseResponse(BaseModel):
    exercise_id: str
    name: str
    role: str
    muscle_group: str
    is_compound: bool
    stage: FallbackStage
    sets: int
    reps: str
    reps_min: int | None = None
    reps_max: int | None = None
    hold_seconds: int | None = None
    rest_seconds: int
    tempo: str | None = None
    rpe_cap: float | None = None
    notes: list[str] = Field(default_factory=list)

    @classmethod
    def from_exercise(cls, exercise: PlannedExercise) -> "PrescribedExerciseResponse":
        return cls(**exercise.to_dict())


class WorkoutDayResponse(BaseModel):
    weekday: Weekday
    label: str
    title: str
    emphasis: str
    difficulty: ExperienceLevel
    estimated_duration_minutes: int
    estimated_calories: int
    warmup: list[PrescribedExerciseResponse]
    main: list[PrescribedExerciseResponse]
    cooldown: list[PrescribedExerciseResponse]

    @classmethod
    def from_day(cls, day: WorkoutDay) -> "WorkoutDayResponse":
        convert = PrescribedExerciseResponse.from_exercise
        return cls(
            weekday=day.weekday,
            label=day.label,
            title=day.title,
            emphasis=day.emphasis,
            difficulty=day.difficulty,
            estimated_duration_minutes=day.estimated_duration_minutes,
            estimated_calories=day.estimated_calories,
            warmup=[convert(e) for e in day.warmup],
            main=[convert(e) for e in day.main],
            cooldown=[convert(e) for e in day.cooldown],
        )


class WeeklyPlanResponse(BaseModel):
    plan_id: str
    title: str
    description: str
    split_name: str
    archetype: SplitArchetype
    days: list[WorkoutDayResponse]
    rest_days: list[Weekday]
    warnings: list[str]
    substitution_notes: list[str]
    coaching_tips: list[str]
    progression_note: str
    requires_medical_clearance: bool
    intensity_cap_rpe: float | None = None
    weekly_calories: int
    generated_at: datetime | None = None

    @classmethod
    def from_plan(cls, plan: WeeklyPlan) -> "WeeklyPlanResponse":
        return cls(
            plan_id=plan.plan_id,
            title=plan.title,
            description=plan.description,
            split_name=plan.split_name,
            archetype=plan.archetype,
            days=[WorkoutDayResponse.from_day(d) for d in plan.days],
            rest_days=list(plan.rest_days),
            warnings=list(plan.warnings),
            substitution_notes=list(plan.substitution_notes),
            coaching_tips=list(plan.coaching_tips),
            progression_note=plan.progression_note,
            requires_medical_clearance=plan.requires_medical_clearance,
            intensity_cap_rpe=plan.intensity_cap_rpe,
            weekly_calories=plan.weekly_calories,
            generated_at=plan.generated_at,
        )


class CatalogSummaryResponse(BaseModel):
    total: int
    by_role: dict[str, int]
    by_primary_muscle: dict[str, int]
