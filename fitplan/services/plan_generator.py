"""
Plan Generator

Entry point of the pipeline:

    validate -> tag -> extract constraints -> select split -> compose days
    -> prescribe -> check weekly muscle coverage -> annotate -> assemble

Stateless and synchronous. The catalog and generation config are injected
(the config falls back to the process-wide loader), and all per-request state
lives inside one call, so concurrent requests never share mutable data.
"""

from __future__ import annotations

from datetime import datetime

from fitplan.config.generation_config_loader import GenerationConfig, get_generation_config
from fitplan.config.settings import get_settings
from fitplan.core.exceptions import InvalidProfileError
from fitplan.core.logging import get_logger, log_timing
from fitplan.models.plan import WeeklyPlan
from fitplan.models.profile import UserProfile
from fitplan.repositories.catalog_repository import ExerciseCatalog
from fitplan.scoring.muscle_coverage_kpi import DayMuscleData, MuscleCoverageKPI
from fitplan.services.constraint_extractor import extract_constraints, tag_profile
from fitplan.services.day_composer import ComposedWeek, DayComposer
from fitplan.services.exercise_filter import ExerciseFilterEngine
from fitplan.services.plan_assembler import PlannedDay, assemble
from fitplan.services.prescription import PrescriptionEngine
from fitplan.services.safety_annotator import annotate
from fitplan.services.split_selector import select_split

logger = get_logger(__name__)

MAX_SESSIONS_PER_WEEK = 7


def coverage_warnings(week: ComposedWeek, gentle_mode: bool) -> tuple[str, ...]:
    # gentle plans are not held to a weekly frequency
    if gentle_mode:
        return ()
    days = [
        DayMuscleData.from_exercises(day.template.label, (s.entry for s in day.main))
        for day in week.days
    ]
    return MuscleCoverageKPI().check_week(days).warnings


def validate_profile(profile: UserProfile) -> None:
    """Reject profiles the generator cannot plan for.

    Raises:
        InvalidProfileError: On the first invalid field found.
    """
    if not 1 <= profile.sessions_per_week <= MAX_SESSIONS_PER_WEEK:
        raise InvalidProfileError(
            "sessions_per_week",
            f"must be between 1 and {MAX_SESSIONS_PER_WEEK}, got {profile.sessions_per_week}",
        )
    if profile.session_duration_minutes <= 0:
        raise InvalidProfileError(
            "session_duration_minutes",
            f"must be positive, got {profile.session_duration_minutes}",
        )
    for field_name in ("age", "height_cm", "weight_kg"):
        value = getattr(profile, field_name)
        if value <= 0:
            raise InvalidProfileError(field_name, f"must be positive, got {value}")
    if profile.is_pregnant and profile.pregnancy_trimester is not None:
        if profile.pregnancy_trimester not in (1, 2, 3):
            raise InvalidProfileError(
                "pregnancy_trimester",
                f"must be 1, 2 or 3, got {profile.pregnancy_trimester}",
            )


def generate(
    profile: UserProfile,
    catalog: ExerciseCatalog,
    *,
    generated_at: datetime | None = None,
    config: GenerationConfig | None = None,
) -> WeeklyPlan:
    """Generate a one-week plan for ``profile`` from ``catalog``.

    Identical inputs always produce an identical plan (``generated_at`` is
    excluded from plan equality).

    Raises:
        InvalidProfileError: The profile fails validation.
        InsufficientCatalogCoverageError: A slot cannot be filled even after
            every fallback stage.
        ConfigurationDefect: A rule table is missing an entry.
    """
    validate_profile(profile)
    config = config or get_generation_config()

    with log_timing(
        logger,
        "plan_generated",
        slow_ms=get_settings().slow_generation_ms,
        slow_event="plan_generation_slow",
    ) as log_fields:
        tagged = tag_profile(profile)
        constraints = extract_constraints(profile, tagged)

        split = select_split(
            profile.sessions_per_week,
            profile.goal,
            profile.experience,
            session_duration_minutes=profile.session_duration_minutes,
            gentle_mode=constraints.gentle_mode,
            config=config,
        )

        filter_engine = ExerciseFilterEngine(catalog, constraints)
        composer = DayComposer(filter_engine, profile.experience, config=config)
        week = composer.compose_week(split, profile.session_duration_minutes)

        prescriber = PrescriptionEngine(
            profile.goal, profile.experience, constraints, split.archetype, config=config
        )
        days = [
            PlannedDay(
                template=day.template,
                warmup=tuple(prescriber.plan(s) for s in day.warmup),
                main=tuple(prescriber.plan(s) for s in day.main),
                cooldown=tuple(prescriber.plan(s) for s in day.cooldown),
            )
            for day in week.days
        ]

        undertrained = coverage_warnings(week, constraints.gentle_mode)
        annotation = annotate(
            constraints,
            week.substitutions,
            profile,
            split.archetype,
            coverage_warnings=undertrained,
        )
        plan = assemble(
            profile,
            split,
            days,
            annotation,
            constraints,
            config=config,
            generated_at=generated_at,
        )

        log_fields.update(
            plan_id=plan.plan_id,
            split=split.archetype.value,
            split_reason=split.reason,
            days=len(plan.days),
            main_slots_per_day=week.main_slots_per_day,
            substitutions=len(week.substitutions),
            coverage_warnings=len(undertrained),
            excluded_tags=len(constraints.excluded_tags),
            requires_medical_clearance=plan.requires_medical_clearance,
        )
    return plan
