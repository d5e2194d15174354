"""
Constraint Extractor

Turns a UserProfile into the ConstraintSet that every later stage obeys.

Free text is inspected exactly once, in tag_profile(), against the keyword
dictionaries in fitplan.config.safety_rules. Everything after that works on
closed tags, so rule lookup is a dictionary access and never a string search.

Accumulation across matched rules:
- excluded tags: union
- RPE cap: minimum
- clearance / gentle mode: logical OR
- max difficulty: lowest tier requested
- warnings: emitted in rule-table order and deduplicated

Each of these is commutative, so the order injuries or conditions were listed
in never changes the result.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Iterable, TypeVar

from fitplan.config.safety_rules import (
    BREASTFEEDING_RULE,
    CONDITION_KEYWORDS,
    CONDITION_RULES,
    INJURY_KEYWORDS,
    INJURY_RULES,
    MEDICATION_KEYWORDS,
    MEDICATION_RULES,
    PREGNANCY_WARNING,
    SENIOR_AGE,
    SENIOR_RULE,
    TRIMESTER_RULES,
    SafetyRule,
)
from fitplan.models.constraints import ConstraintSet, TaggedProfile
from fitplan.models.enums import ConditionTag, ExperienceLevel
from fitplan.models.profile import UserProfile

logger = logging.getLogger(__name__)

TagT = TypeVar("TagT")


def _normalize(text: str) -> str:
    return " ".join(text.lower().replace("-", " ").replace("_", " ").split())


@lru_cache(maxsize=None)
def keyword_pattern(keyword: str) -> re.Pattern[str]:
    """Whole-word pattern for a keyword; a trailing ``*`` matches any word ending."""
    if keyword.endswith("*"):
        return re.compile(rf"\b{re.escape(keyword[:-1])}")
    return re.compile(rf"\b{re.escape(keyword)}(?:s|es)?\b")


def match_tags(texts: Iterable[str], keywords: dict[TagT, tuple[str, ...]]) -> frozenset[TagT]:
    """Return every tag with a keyword found as a whole word in any of the texts."""
    normalized = [_normalize(t) for t in texts if t]
    return frozenset(
        tag
        for tag, words in keywords.items()
        if any(keyword_pattern(word).search(text) for text in normalized for word in words)
    )


def tag_profile(profile: UserProfile) -> TaggedProfile:
    """Map a profile's free-text fields onto closed injury, condition and medication tags."""
    conditions = match_tags(profile.medical_conditions, CONDITION_KEYWORDS)

    trimester = None
    if profile.is_pregnant or ConditionTag.PREGNANCY in conditions:
        conditions = conditions | {ConditionTag.PREGNANCY}
        # "pregnant" without a trimester gets the least restrictive pregnancy rules
        trimester = min(max(profile.pregnancy_trimester or 1, 1), 3)

    return TaggedProfile(
        injuries=match_tags(profile.injuries, INJURY_KEYWORDS),
        conditions=conditions,
        medications=match_tags(profile.medications, MEDICATION_KEYWORDS),
        pregnancy_trimester=trimester,
    )


def _matched_rules(profile: UserProfile, tagged: TaggedProfile) -> list[SafetyRule]:
    """Rules that apply to this profile, in canonical order."""
    rules = [rule for tag, rule in INJURY_RULES.items() if tag in tagged.injuries]
    rules += [rule for tag, rule in CONDITION_RULES.items() if tag in tagged.conditions]
    if tagged.pregnancy_trimester is not None:
        rules.append(TRIMESTER_RULES[tagged.pregnancy_trimester])
        rules.append(SafetyRule(warning=PREGNANCY_WARNING))
    if profile.is_breastfeeding:
        rules.append(BREASTFEEDING_RULE)
    rules += [rule for tag, rule in MEDICATION_RULES.items() if tag in tagged.medications]
    if profile.age >= SENIOR_AGE:
        rules.append(SENIOR_RULE)
    return rules


def extract_constraints(profile: UserProfile, tagged: TaggedProfile | None = None) -> ConstraintSet:
    """Derive the safety constraints for a profile. Never raises for unknown text."""
    tagged = tagged or tag_profile(profile)
    rules = _matched_rules(profile, tagged)

    excluded = frozenset().union(*(rule.excluded_tags for rule in rules))
    caps = [rule.rpe_cap for rule in rules if rule.rpe_cap is not None]
    max_difficulty = profile.experience
    for rule in rules:
        if rule.max_difficulty is not None and rule.max_difficulty.rank < max_difficulty.rank:
            max_difficulty = rule.max_difficulty
    gentle_mode = any(rule.gentle_mode for rule in rules)
    if gentle_mode:
        max_difficulty = ExperienceLevel.BEGINNER

    warnings: list[str] = []
    for rule in rules:
        if rule.warning and rule.warning not in warnings:
            warnings.append(rule.warning)

    constraints = ConstraintSet(
        excluded_tags=excluded,
        intensity_cap_rpe=min(caps) if caps else None,
        requires_medical_clearance=any(rule.requires_clearance for rule in rules),
        warnings=tuple(warnings),
        equipment_available=profile.equipment,
        gentle_mode=gentle_mode,
        max_difficulty=max_difficulty,
        tagged=tagged,
    )
    logger.debug(
        "Extracted constraints: %d excluded tags, rpe_cap=%s, clearance=%s, gentle=%s",
        len(constraints.excluded_tags),
        constraints.intensity_cap_rpe,
        constraints.requires_medical_clearance,
        constraints.gentle_mode,
    )
    return constraints
