"""Closed vocabularies shared by every stage of plan generation.

The string values are the wire vocabulary of the HTTP API and the catalog data
file. Renaming a value is a breaking change; bump VOCABULARY_VERSION when that
happens.
"""
from enum import Enum

VOCABULARY_VERSION = "1"


class Goal(str, Enum):
    MUSCLE_GAIN = "muscle_gain"
    WEIGHT_LOSS = "weight_loss"
    STRENGTH = "strength"
    ENDURANCE = "endurance"
    MAINTENANCE = "maintenance"
    FLEXIBILITY = "flexibility"
    ATHLETIC_PERFORMANCE = "athletic_performance"


class ExperienceLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"

    @property
    def rank(self) -> int:
        return _EXPERIENCE_RANK[self]


_EXPERIENCE_RANK = {
    ExperienceLevel.BEGINNER: 0,
    ExperienceLevel.INTERMEDIATE: 1,
    ExperienceLevel.ADVANCED: 2,
}


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class Equipment(str, Enum):
    BODYWEIGHT = "bodyweight"
    DUMBBELL = "dumbbell"
    BARBELL = "barbell"
    KETTLEBELL = "kettlebell"
    RESISTANCE_BAND = "resistance_band"
    CABLE = "cable"
    MACHINE = "machine"
    PULL_UP_BAR = "pull_up_bar"
    BENCH = "bench"
    MEDICINE_BALL = "medicine_ball"
    STABILITY_BALL = "stability_ball"
    FOAM_ROLLER = "foam_roller"
    CARDIO_MACHINE = "cardio_machine"

    @classmethod
    def parse(cls, value: "str | Equipment") -> "Equipment":
        """Resolve a user-supplied equipment name, accepting common aliases."""
        if isinstance(value, Equipment):
            return value
        key = value.strip().lower().replace("-", " ").replace("_", " ")
        key = " ".join(key.split())
        if key in EQUIPMENT_ALIASES:
            return EQUIPMENT_ALIASES[key]
        return cls(key.replace(" ", "_"))


EQUIPMENT_ALIASES: dict[str, Equipment] = {
    "body weight": Equipment.BODYWEIGHT,
    "body only": Equipment.BODYWEIGHT,
    "none": Equipment.BODYWEIGHT,
    "dumbbells": Equipment.DUMBBELL,
    "barbells": Equipment.BARBELL,
    "ez barbell": Equipment.BARBELL,
    "ez bar": Equipment.BARBELL,
    "kettlebells": Equipment.KETTLEBELL,
    "bands": Equipment.RESISTANCE_BAND,
    "band": Equipment.RESISTANCE_BAND,
    "resistance bands": Equipment.RESISTANCE_BAND,
    "cables": Equipment.CABLE,
    "machines": Equipment.MACHINE,
    "pull up bar": Equipment.PULL_UP_BAR,
    "pullup bar": Equipment.PULL_UP_BAR,
    "bench press bench": Equipment.BENCH,
    "exercise ball": Equipment.STABILITY_BALL,
    "swiss ball": Equipment.STABILITY_BALL,
    "foam roll": Equipment.FOAM_ROLLER,
    "treadmill": Equipment.CARDIO_MACHINE,
    "bike": Equipment.CARDIO_MACHINE,
    "rower": Equipment.CARDIO_MACHINE,
}


class MovementTag(str, Enum):
    """Movement patterns and contraindication tags carried by catalog entries."""

    SQUAT = "squat"
    LUNGE = "lunge"
    HINGE = "hinge"
    DEADLIFT = "deadlift"
    ROW = "row"
    GOOD_MORNING = "good_morning"
    HYPEREXTENSION = "hyperextension"
    HORIZONTAL_PUSH = "horizontal_push"
    VERTICAL_PUSH = "vertical_push"
    OVERHEAD = "overhead"
    HORIZONTAL_PULL = "horizontal_pull"
    VERTICAL_PULL = "vertical_pull"
    JUMPING = "jumping"
    HIGH_IMPACT = "high_impact"
    SUPINE = "supine"
    PRONE = "prone"
    TWISTING = "twisting"
    INVERTED = "inverted"
    SINGLE_LEG = "single_leg"
    BALANCE = "balance"
    SPINAL_LOADING = "spinal_loading"
    WRIST_LOADED = "wrist_loaded"
    VALSALVA = "valsalva"
    MAX_EFFORT = "max_effort"
    HIIT = "hiit"
    SPRINT = "sprint"
    COMPOUND = "compound"
    ISOLATION = "isolation"
    CURL = "curl"
    ELBOW_EXTENSION = "elbow_extension"
    KNEE_EXTENSION = "knee_extension"
    SHRUG = "shrug"
    DIP = "dip"
    CARRY = "carry"
    CALF = "calf"
    CORE = "core"
    MOBILITY = "mobility"
    STRETCH = "stretch"
    CARDIO = "cardio"
    KNEELING = "kneeling"


# Tags that describe how an exercise is classified rather than the movement it
# trains. They never count as the "primary pattern" of an exercise.
NON_PATTERN_TAGS = frozenset({
    MovementTag.COMPOUND,
    MovementTag.ISOLATION,
    MovementTag.SUPINE,
    MovementTag.PRONE,
    MovementTag.KNEELING,
    MovementTag.WRIST_LOADED,
    MovementTag.SPINAL_LOADING,
    MovementTag.VALSALVA,
    MovementTag.HIGH_IMPACT,
})


class MuscleGroup(str, Enum):
    CHEST = "chest"
    BACK = "back"
    SHOULDERS = "shoulders"
    BICEPS = "biceps"
    TRICEPS = "triceps"
    QUADS = "quads"
    HAMSTRINGS = "hamstrings"
    GLUTES = "glutes"
    CALVES = "calves"
    CORE = "core"
    CARDIO = "cardio"


class ExerciseRole(str, Enum):
    WARMUP = "warmup"
    MAIN = "main"
    COOLDOWN = "cooldown"


class InjuryTag(str, Enum):
    BACK = "back"
    KNEE = "knee"
    SHOULDER = "shoulder"
    NECK = "neck"
    WRIST = "wrist"
    ANKLE = "ankle"
    BALANCE = "balance"
    HIP = "hip"
    ELBOW = "elbow"


class ConditionTag(str, Enum):
    HEART_DISEASE = "heart_disease"
    HYPERTENSION = "hypertension"
    DIABETES = "diabetes"
    ASTHMA = "asthma"
    ARTHRITIS = "arthritis"
    PCOS = "pcos"
    OSTEOPOROSIS = "osteoporosis"
    PREGNANCY = "pregnancy"


class MedicationTag(str, Enum):
    BETA_BLOCKER = "beta_blocker"
    BLOOD_THINNER = "blood_thinner"


class Weekday(str, Enum):
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @property
    def label(self) -> str:
        return self.value.capitalize()


WEEK = tuple(Weekday)


class SplitArchetype(str, Enum):
    FULL_BODY = "full_body"
    UPPER_LOWER = "upper_lower"
    PUSH_PULL_LEGS = "push_pull_legs"
    CIRCUIT = "circuit"
    GENTLE = "gentle"


class FallbackStage(str, Enum):
    """Filter relaxation stage that produced a pick, in the order they are tried."""

    STRICT = "strict"
    SYNERGIST = "synergist"
    BODYWEIGHT = "bodyweight"
    ADJACENT_GROUP = "adjacent_group"
    ANY_GROUP = "any_group"
