"""
Named thresholds for the categorization engine.

STRICT serves rule similarity and projection scans; LENIENT serves the
merchant suggestion scan. They differ in similarity scores, the similarity
floor and the recurrence bands they recognise.
"""
from dataclasses import dataclass

from budget_categorizer.models import ConfidenceTier, RecurrenceInterval

# Rule matching
EXACT_MATCH_CONFIDENCE = 1.0
FUZZY_MATCH_CONFIDENCE = 0.8
NO_MATCH_CONFIDENCE = 0.0
FUZZY_MIN_NAME_LENGTH = 2
REVERSE_PREFIX_MIN_CLEAN_LENGTH = 3  # cleaned name must be longer than this

# Confidence tiers shown next to a categorization
PERFECT_TIER_CONFIDENCE = 1.0
POSSIBLE_TIER_CONFIDENCE = 0.7

# Recurrence confidence per detected interval
INTERVAL_CONFIDENCE: dict[RecurrenceInterval, float] = {
    RecurrenceInterval.MONTHLY: 0.9,
    RecurrenceInterval.ANNUALLY: 0.9,
    RecurrenceInterval.QUARTERLY: 0.8,
    RecurrenceInterval.BI_ANNUALLY: 0.85,
}

# Suggestion ranking weights
PATTERN_WEIGHT = 0.4
AMOUNT_WEIGHT = 0.3
FREQUENCY_WEIGHT = 0.2
CONSISTENCY_WEIGHT = 0.1

PATTERN_SCORES: dict[RecurrenceInterval, float] = {
    RecurrenceInterval.MONTHLY: 1.0,
    RecurrenceInterval.WEEKLY: 0.8,
    RecurrenceInterval.QUARTERLY: 0.8,
}
IRREGULAR_PATTERN_SCORE = 0.4
IRREGULAR_MIN_COUNT = 2  # occurrences must exceed this

# (exclusive lower bound on |average amount|, score), highest first
AMOUNT_SCORE_TIERS: tuple[tuple[float, float], ...] = (
    (5000.0, 1.0),
    (1000.0, 0.8),
    (100.0, 0.5),
)
AMOUNT_FLOOR_SCORE = 0.2
FREQUENCY_SATURATION_COUNT = 4

RANK_TIE_THRESHOLD = 0.05
DEFAULT_SUGGESTION_LIMIT = 20

# Similarity amount bonuses
AMOUNT_EXACT_TOLERANCE = 0.05
AMOUNT_EXACT_BONUS = 20.0
AMOUNT_RELATIVE_TOLERANCE = 0.1
AMOUNT_RELATIVE_BONUS = 10.0

# Rule health
RULE_BASE_SCORE = 50
RULE_NOT_APPLICABLE_BONUS = 20
RULE_ONE_OFF_PENALTY = 30
RULE_VARIANCE_BONUS_PER_CATEGORY = 5
RULE_FREQUENT_USAGE_COUNT = 5
RULE_FREQUENT_USAGE_BONUS = 10
AMOUNT_DEVIATION_THRESHOLD = 0.05


@dataclass(frozen=True)
class RecurrenceBand:
    interval: RecurrenceInterval
    min_days: float
    max_days: float

    def contains(self, average_gap: float) -> bool:
        return self.min_days <= average_gap <= self.max_days


@dataclass(frozen=True)
class EngineProfile:
    name: str
    recurrence_bands: tuple[RecurrenceBand, ...]
    exact_name_score: float
    contains_name_score: float
    score_floor: float
    amount_bonus_requires_name: bool = False
    same_source_score: float | None = None


MONTHLY_BAND = RecurrenceBand(RecurrenceInterval.MONTHLY, 25, 35)
QUARTERLY_BAND = RecurrenceBand(RecurrenceInterval.QUARTERLY, 80, 100)
BI_ANNUAL_BAND = RecurrenceBand(RecurrenceInterval.BI_ANNUALLY, 170, 195)
ANNUAL_BAND = RecurrenceBand(RecurrenceInterval.ANNUALLY, 350, 380)
WEEKLY_BAND = RecurrenceBand(RecurrenceInterval.WEEKLY, 6, 8)

STRICT = EngineProfile(
    name="strict",
    recurrence_bands=(MONTHLY_BAND, QUARTERLY_BAND, BI_ANNUAL_BAND, ANNUAL_BAND),
    exact_name_score=100.0,
    contains_name_score=50.0,
    score_floor=10.0,
)

LENIENT = EngineProfile(
    name="lenient",
    recurrence_bands=(MONTHLY_BAND, QUARTERLY_BAND, WEEKLY_BAND),
    exact_name_score=100.0,
    contains_name_score=60.0,
    score_floor=0.0,
    amount_bonus_requires_name=True,
    same_source_score=100.0,
)

PROFILES: dict[str, EngineProfile] = {
    STRICT.name: STRICT,
    LENIENT.name: LENIENT,
}


def get_profile(name: str | None, default: EngineProfile = STRICT) -> EngineProfile:
    if not name:
        return default
    return PROFILES.get(name.lower(), default)


def confidence_tier(confidence: float) -> ConfidenceTier:
    if confidence >= PERFECT_TIER_CONFIDENCE:
        return ConfidenceTier.PERFECT
    if confidence >= POSSIBLE_TIER_CONFIDENCE:
        return ConfidenceTier.POSSIBLE
    return ConfidenceTier.NONE
