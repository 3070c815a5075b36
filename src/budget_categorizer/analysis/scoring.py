"""
Ranking score for discovered merchant patterns.

    confidence = 0.4 * pattern + 0.3 * amount + 0.2 * frequency + 0.1 * consistency

Ranking picks, from the suggestions within RANK_TIE_THRESHOLD of the best
remaining confidence, the one with the largest average amount. An item only
ever precedes a clearly more confident one when both sit in that window, so
rent still rises above coffee at similar confidence.
"""
from collections.abc import Iterable

from budget_categorizer.core.profiles import (
    AMOUNT_FLOOR_SCORE,
    AMOUNT_SCORE_TIERS,
    AMOUNT_WEIGHT,
    CONSISTENCY_WEIGHT,
    FREQUENCY_SATURATION_COUNT,
    FREQUENCY_WEIGHT,
    IRREGULAR_MIN_COUNT,
    IRREGULAR_PATTERN_SCORE,
    PATTERN_SCORES,
    PATTERN_WEIGHT,
    RANK_TIE_THRESHOLD,
)
from budget_categorizer.models import MerchantSuggestion, RecurrenceInterval


def pattern_score(occurrence_count: int, interval: RecurrenceInterval) -> float:
    if interval in PATTERN_SCORES:
        return PATTERN_SCORES[interval]
    if occurrence_count > IRREGULAR_MIN_COUNT:
        return IRREGULAR_PATTERN_SCORE
    return 0.0


def amount_score(average_amount: float) -> float:
    magnitude = abs(average_amount)
    for lower_bound, score in AMOUNT_SCORE_TIERS:
        if magnitude > lower_bound:
            return score
    return AMOUNT_FLOOR_SCORE


def frequency_score(occurrence_count: int) -> float:
    if occurrence_count <= 0:
        return 0.0
    return min(occurrence_count / FREQUENCY_SATURATION_COUNT, 1.0)


def score_suggestion(
    occurrence_count: int,
    inferred_interval: RecurrenceInterval,
    average_amount: float,
    category_consistency_ratio: float,
) -> float:
    consistency = min(max(category_consistency_ratio, 0.0), 1.0)
    total = (
        pattern_score(occurrence_count, inferred_interval) * PATTERN_WEIGHT
        + amount_score(average_amount) * AMOUNT_WEIGHT
        + frequency_score(occurrence_count) * FREQUENCY_WEIGHT
        + consistency * CONSISTENCY_WEIGHT
    )
    return min(max(total, 0.0), 1.0)


def rank_suggestions(
    suggestions: Iterable[MerchantSuggestion], limit: int | None = None
) -> list[MerchantSuggestion]:
    remaining = list(suggestions)
    target = len(remaining) if limit is None else max(0, min(limit, len(remaining)))
    ranked: list[MerchantSuggestion] = []

    while len(ranked) < target:
        best_confidence = max(s.confidence_rank for s in remaining)
        window = [
            index for index, s in enumerate(remaining)
            if best_confidence - s.confidence_rank <= RANK_TIE_THRESHOLD
        ]
        pick = max(
            window,
            key=lambda index: (remaining[index].average_amount, remaining[index].confidence_rank),
        )
        ranked.append(remaining.pop(pick))
    return ranked
