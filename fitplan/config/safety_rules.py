"""
Safety rule tables: free-text keywords to closed tags, and closed tags to
constraints.

This module intentionally keeps plain-text rationale next to each rule so the
generator's safety choices are inspectable (e.g., why a knee injury removes
lunges, or why hypertension removes breath-holding lifts).

Free text is only ever inspected through the *_KEYWORDS dictionaries below.
Everything downstream of fitplan.services.constraint_extractor.tag_profile works
on the closed enums in fitplan.models.enums.

Rule order in the *_RULES dictionaries is the canonical warning order; the
extractor emits warnings in that order no matter how the user listed things.
"""

from __future__ import annotations

from dataclasses import dataclass

from fitplan.models.enums import (
    ConditionTag,
    ExperienceLevel,
    InjuryTag,
    MedicationTag,
    MovementTag as T,
)


@dataclass(frozen=True)
class SafetyRule:
    """Constraints contributed by one matched tag."""

    excluded_tags: frozenset[T] = frozenset()
    rpe_cap: float | None = None
    requires_clearance: bool = False
    gentle_mode: bool = False
    max_difficulty: ExperienceLevel | None = None
    warning: str | None = None


# ============================================================================
# Keyword dictionaries
#
# Case-insensitive, whole words only; a plain keyword also matches its plural.
# A trailing "*" marks a stem that matches any word starting with it.
# ============================================================================

INJURY_KEYWORDS: dict[InjuryTag, tuple[str, ...]] = {
    InjuryTag.BACK: ("back", "backache", "spine", "spinal", "lumbar", "disc", "sciatica"),
    InjuryTag.KNEE: ("knee", "patella", "acl", "mcl", "menisc*"),
    InjuryTag.SHOULDER: ("shoulder", "rotator cuff", "impingement"),
    InjuryTag.NECK: ("neck", "cervical", "whiplash"),
    InjuryTag.WRIST: ("wrist", "carpal"),
    InjuryTag.ANKLE: ("ankle", "foot", "feet", "achilles", "plantar"),
    InjuryTag.BALANCE: ("balance", "vertigo", "dizz*"),
    InjuryTag.HIP: ("hip", "groin", "labrum"),
    InjuryTag.ELBOW: ("elbow", "tennis", "golfer"),
}

CONDITION_KEYWORDS: dict[ConditionTag, tuple[str, ...]] = {
    ConditionTag.HEART_DISEASE: ("heart", "cardiac", "coronary", "arrhythmia", "angina"),
    ConditionTag.HYPERTENSION: ("hypertension", "high blood pressure"),
    ConditionTag.DIABETES: ("diabet*", "prediabet*"),
    ConditionTag.ASTHMA: ("asthma*",),
    ConditionTag.ARTHRITIS: ("arthritis", "osteoarthritis", "rheumatoid"),
    ConditionTag.PCOS: ("pcos", "polycystic"),
    ConditionTag.OSTEOPOROSIS: ("osteopor*", "osteopenia"),
    ConditionTag.PREGNANCY: ("pregnan*",),
}

MEDICATION_KEYWORDS: dict[MedicationTag, tuple[str, ...]] = {
    MedicationTag.BETA_BLOCKER: (
        "beta blocker",
        "metoprolol",
        "atenolol",
        "propranolol",
        "bisoprolol",
        "carvedilol",
    ),
    MedicationTag.BLOOD_THINNER: (
        "blood thinner",
        "anticoagulant",
        "warfarin",
        "coumadin",
        "apixaban",
        "eliquis",
        "rivaroxaban",
        "xarelto",
        "clopidogrel",
    ),
}


# ============================================================================
# Injury rules
# ============================================================================

INJURY_RULES: dict[InjuryTag, SafetyRule] = {
    InjuryTag.BACK: SafetyRule(
        excluded_tags=frozenset({T.DEADLIFT, T.ROW, T.GOOD_MORNING, T.HYPEREXTENSION, T.SPINAL_LOADING}),
        warning="Back injury: deadlifts, bent-over rows, good mornings and spinal loading are excluded. Keep a neutral spine.",
    ),
    InjuryTag.KNEE: SafetyRule(
        excluded_tags=frozenset({T.SQUAT, T.LUNGE, T.JUMPING, T.HIGH_IMPACT}),
        warning="Knee injury: squats, lunges and jumping are excluded. Stop any movement that causes knee pain.",
    ),
    InjuryTag.SHOULDER: SafetyRule(
        excluded_tags=frozenset({T.OVERHEAD, T.VERTICAL_PUSH, T.DIP}),
        warning="Shoulder injury: overhead pressing and dips are excluded. Work only in a pain-free range.",
    ),
    InjuryTag.NECK: SafetyRule(
        excluded_tags=frozenset({T.SHRUG, T.OVERHEAD, T.SPINAL_LOADING}),
        warning="Neck injury: shrugs, overhead work and loaded carries on the spine are excluded.",
    ),
    InjuryTag.WRIST: SafetyRule(
        excluded_tags=frozenset({T.WRIST_LOADED}),
        warning="Wrist injury: exercises that load the wrist in extension (push-ups, planks on hands) are excluded.",
    ),
    InjuryTag.ANKLE: SafetyRule(
        excluded_tags=frozenset({T.JUMPING, T.HIGH_IMPACT, T.SPRINT, T.CALF}),
        warning="Ankle or foot injury: jumping, running and calf raises are excluded.",
    ),
    InjuryTag.BALANCE: SafetyRule(
        excluded_tags=frozenset({T.SINGLE_LEG, T.BALANCE}),
        warning="Balance concerns: single-leg and balance-dependent exercises are excluded. Train near a support.",
    ),
    InjuryTag.HIP: SafetyRule(
        excluded_tags=frozenset({T.LUNGE, T.SINGLE_LEG}),
        warning="Hip or groin injury: lunges and single-leg work are excluded.",
    ),
    InjuryTag.ELBOW: SafetyRule(
        excluded_tags=frozenset({T.CURL, T.ELBOW_EXTENSION, T.DIP}),
        warning="Elbow injury: curls, triceps extensions and dips are excluded.",
    ),
}

# Coaching cue attached to every prescription while the injury is present.
INJURY_CUES: dict[InjuryTag, str] = {
    InjuryTag.BACK: "Brace your core and keep a neutral spine",
    InjuryTag.KNEE: "Use a controlled, pain-free range of motion at the knee",
    InjuryTag.SHOULDER: "Keep the movement below shoulder pain",
    InjuryTag.WRIST: "Keep wrists neutral",
}


# ============================================================================
# Medical condition rules
# ============================================================================

CONDITION_RULES: dict[ConditionTag, SafetyRule] = {
    ConditionTag.HEART_DISEASE: SafetyRule(
        excluded_tags=frozenset({T.MAX_EFFORT, T.HIIT, T.SPRINT, T.VALSALVA}),
        rpe_cap=6,
        requires_clearance=True,
        warning="Heart condition: intensity is capped at RPE 6 and high-intensity intervals are excluded. Stop immediately if you feel chest pain or dizziness.",
    ),
    ConditionTag.HYPERTENSION: SafetyRule(
        # Breath-holding under load spikes blood pressure.
        excluded_tags=frozenset({T.MAX_EFFORT, T.VALSALVA, T.INVERTED}),
        rpe_cap=7,
        warning="High blood pressure: avoid holding your breath during lifts. Exhale on effort; max-effort lifts are excluded.",
    ),
    ConditionTag.DIABETES: SafetyRule(
        warning="Diabetes: check blood glucose before and after training and keep fast-acting carbohydrates nearby.",
    ),
    ConditionTag.ASTHMA: SafetyRule(
        warning="Asthma: keep your inhaler nearby and extend the warm-up.",
    ),
    ConditionTag.ARTHRITIS: SafetyRule(
        excluded_tags=frozenset({T.JUMPING, T.HIGH_IMPACT}),
        warning="Arthritis: high-impact and jumping exercises are excluded. Favor smooth, controlled movement.",
    ),
    ConditionTag.PCOS: SafetyRule(
        warning="PCOS: resistance training supports insulin sensitivity. Prioritize consistency over intensity.",
    ),
    ConditionTag.OSTEOPOROSIS: SafetyRule(
        excluded_tags=frozenset({T.JUMPING, T.HIGH_IMPACT, T.TWISTING}),
        warning="Osteoporosis: jumping, high-impact and loaded twisting movements are excluded.",
    ),
}


# ============================================================================
# Pregnancy, breastfeeding, medications, age
# ============================================================================

PREGNANCY_WARNING = (
    "Pregnancy: consult your healthcare provider before starting or continuing "
    "this plan. Stop if you feel pain, bleeding, dizziness or shortness of breath."
)

_T1_EXCLUSIONS = frozenset({T.JUMPING, T.HIGH_IMPACT, T.MAX_EFFORT, T.SUPINE})
_T2_EXCLUSIONS = _T1_EXCLUSIONS | {T.PRONE, T.TWISTING, T.OVERHEAD, T.VALSALVA}
_T3_EXCLUSIONS = _T2_EXCLUSIONS | {
    T.INVERTED,
    T.SINGLE_LEG,
    T.BALANCE,
    T.KNEELING,
    T.HIIT,
    T.SPRINT,
    T.SPINAL_LOADING,
}

TRIMESTER_RULES: dict[int, SafetyRule] = {
    1: SafetyRule(
        excluded_tags=_T1_EXCLUSIONS,
        rpe_cap=7,
        warning="First trimester: moderate intensity only; supine and high-impact work are excluded.",
    ),
    2: SafetyRule(
        excluded_tags=_T2_EXCLUSIONS,
        rpe_cap=6,
        warning="Second trimester: no lying on your back or front, no twisting and no overhead pressing.",
    ),
    3: SafetyRule(
        excluded_tags=_T3_EXCLUSIONS,
        rpe_cap=5,
        requires_clearance=True,
        gentle_mode=True,
        max_difficulty=ExperienceLevel.BEGINNER,
        warning="Third trimester: gentle movement only. Medical clearance is required.",
    ),
}

BREASTFEEDING_RULE = SafetyRule(
    warning="Breastfeeding: drink extra water around sessions and keep training volume conservative.",
)

MEDICATION_RULES: dict[MedicationTag, SafetyRule] = {
    MedicationTag.BETA_BLOCKER: SafetyRule(
        warning="Beta-blockers blunt heart rate response: use RPE, not heart rate, to judge effort.",
    ),
    MedicationTag.BLOOD_THINNER: SafetyRule(
        excluded_tags=frozenset({T.BALANCE, T.HIGH_IMPACT}),
        warning="Blood thinners raise bleeding risk from falls: balance and high-impact work are excluded.",
    ),
}

SENIOR_AGE = 65

SENIOR_RULE = SafetyRule(
    excluded_tags=frozenset({T.SINGLE_LEG, T.BALANCE, T.JUMPING}),
    warning="Age 65+: fall-risk exercises are excluded. Progress gradually and train near a support.",
)
