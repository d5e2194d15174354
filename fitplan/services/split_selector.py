"""
Split Selector

Chooses the weekly split archetype and lays out one DayTemplate per training
day. Selection is a table lookup keyed by (frequency bucket, experience) from
generation_config.yaml, followed by overrides in priority order:

1. gentle mode -> gentle full body
2. session shorter than circuit_max_minutes -> circuit full body
3. goal override table (e.g. flexibility -> full body)
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from string import ascii_uppercase

from fitplan.config.generation_config_loader import GenerationConfig, get_generation_config
from fitplan.core.exceptions import ConfigurationDefect
from fitplan.models.enums import (
    WEEK,
    ExperienceLevel,
    Goal,
    MuscleGroup,
    SplitArchetype,
    Weekday,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DayTemplate:
    """Muscle-group targets for one training day of the week."""

    weekday: Weekday
    label: str
    title: str
    emphasis: str
    muscle_groups: tuple[MuscleGroup, ...]
    compound_focus: bool


@dataclass(frozen=True)
class SplitSelection:
    archetype: SplitArchetype
    name: str
    description: str
    bucket: str
    reason: str
    days: tuple[DayTemplate, ...]
    rest_days: tuple[Weekday, ...]

    @property
    def sessions_per_week(self) -> int:
        return len(self.days)


def _choose_archetype(
    config: GenerationConfig,
    bucket: str,
    goal: Goal,
    experience: ExperienceLevel,
    session_duration_minutes: int | None,
    gentle_mode: bool,
) -> tuple[SplitArchetype, str]:
    if gentle_mode:
        return SplitArchetype.GENTLE, "gentle_mode"
    if session_duration_minutes is not None and session_duration_minutes < config.circuit_max_minutes:
        return SplitArchetype.CIRCUIT, "short_session"
    if goal in config.goal_overrides:
        return config.goal_overrides[goal], "goal_override"
    return config.split_for(bucket, experience), "table"


def _template_sequence(config: GenerationConfig, archetype: SplitArchetype, sessions: int) -> list[str]:
    archetype_config = config.archetypes[archetype]
    rotation = archetype_config.rotation
    keys = [rotation[i % len(rotation)] for i in range(sessions)]
    final_day = archetype_config.final_day_by_frequency.get(sessions)
    if final_day is not None:
        keys[-1] = final_day
    return keys


def select_split(
    sessions_per_week: int,
    goal: Goal,
    experience: ExperienceLevel,
    session_duration_minutes: int | None = None,
    gentle_mode: bool = False,
    config: GenerationConfig | None = None,
) -> SplitSelection:
    """Pick the split for a week and lay out its training days.

    Raises:
        ConfigurationDefect: If the rule tables have no entry for a valid input.
    """
    config = config or get_generation_config()
    bucket = config.frequency_bucket(sessions_per_week)
    archetype, reason = _choose_archetype(
        config, bucket, goal, experience, session_duration_minutes, gentle_mode
    )
    if archetype not in config.archetypes:
        raise ConfigurationDefect(f"No archetype configured for '{archetype.value}'")

    weekdays = config.weekday_schedules.get(sessions_per_week)
    if weekdays is None:
        raise ConfigurationDefect(f"No weekday schedule for {sessions_per_week} sessions")

    keys = _template_sequence(config, archetype, sessions_per_week)
    templates = [config.day_templates[key] for key in keys]
    totals = Counter(t.emphasis for t in templates)
    seen: Counter[str] = Counter()
    days = []
    for weekday, template in zip(weekdays, templates):
        label = template.title
        if totals[template.emphasis] > 1:
            label = f"{template.title} {ascii_uppercase[seen[template.emphasis]]}"
        seen[template.emphasis] += 1
        days.append(
            DayTemplate(
                weekday=weekday,
                label=label,
                title=template.title,
                emphasis=template.emphasis,
                muscle_groups=template.muscle_groups,
                compound_focus=template.compound_focus,
            )
        )

    archetype_config = config.archetypes[archetype]
    selection = SplitSelection(
        archetype=archetype,
        name=f"{archetype_config.name} {sessions_per_week}x/Week",
        description=archetype_config.description,
        bucket=bucket,
        reason=reason,
        days=tuple(days),
        rest_days=tuple(day for day in WEEK if day not in weekdays),
    )
    logger.debug("Selected split %s (%s)", selection.name, reason)
    return selection
