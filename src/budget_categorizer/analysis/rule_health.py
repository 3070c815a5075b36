from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any

from budget_categorizer.core.profiles import (
    AMOUNT_DEVIATION_THRESHOLD,
    RULE_BASE_SCORE,
    RULE_FREQUENT_USAGE_BONUS,
    RULE_FREQUENT_USAGE_COUNT,
    RULE_NOT_APPLICABLE_BONUS,
    RULE_ONE_OFF_PENALTY,
    RULE_VARIANCE_BONUS_PER_CATEGORY,
)
from budget_categorizer.domain.names import clean_with_patterns, compile_noise_filters
from budget_categorizer.models import CategorizationRule, RawTransaction, RecurrenceInterval


@dataclass(frozen=True)
class RuleScore:
    name: str
    score: int
    reasons: list[str] = field(default_factory=list)
    variance: int = 0
    usage_count: int = 0


@dataclass(frozen=True)
class AmountDeviation:
    is_significant: bool
    diff_percent: float


@dataclass
class _UsageStats:
    categories: set[str] = field(default_factory=set)
    count: int = 0


def score_rules(
    rules: list[CategorizationRule],
    transactions: list[RawTransaction],
    noise_filters: Any = None,
) -> dict[str, RuleScore]:
    """
    Score rules by how much attention they deserve in the rule manager.

    Rules with no cadence and names used across several categories float
    up; one-off rules sink.
    """
    patterns = compile_noise_filters(noise_filters)
    usage: dict[str, _UsageStats] = defaultdict(_UsageStats)

    for tx in transactions:
        name = tx.clean_name or clean_with_patterns(tx.source_text, patterns)
        if not name:
            continue
        stats = usage[name]
        if tx.category:
            stats.categories.add(tx.category)
        stats.count += 1

    scores: dict[str, RuleScore] = {}
    for rule in rules:
        name = rule.clean_display_name
        if not name:
            continue

        score = RULE_BASE_SCORE
        reasons: list[str] = []
        stats = usage.get(name, _UsageStats())

        if rule.recurrence_interval == RecurrenceInterval.NOT_APPLICABLE:
            score += RULE_NOT_APPLICABLE_BONUS
            reasons.append("Prioritized (N/A Recurring)")
        elif rule.recurrence_interval == RecurrenceInterval.ONE_OFF:
            score -= RULE_ONE_OFF_PENALTY
            reasons.append("Down-ranked (One-off)")

        variance = len(stats.categories)
        if variance > 1:
            score += variance * RULE_VARIANCE_BONUS_PER_CATEGORY
            reasons.append(f"High Variance (+{variance} categories)")

        if stats.count > RULE_FREQUENT_USAGE_COUNT:
            score += RULE_FREQUENT_USAGE_BONUS
            reasons.append("Frequent Source")

        scores[name] = RuleScore(
            name=name,
            score=score,
            reasons=reasons,
            variance=variance,
            usage_count=stats.count,
        )
    return scores


def amount_deviation(amount: float, historical_amounts: list[float]) -> AmountDeviation:
    if not historical_amounts:
        return AmountDeviation(is_significant=False, diff_percent=0.0)

    average = sum(historical_amounts) / len(historical_amounts)
    if average == 0:
        return AmountDeviation(is_significant=False, diff_percent=0.0)

    diff_percent = abs(abs(amount) - average) / average
    return AmountDeviation(
        is_significant=diff_percent >= AMOUNT_DEVIATION_THRESHOLD,
        diff_percent=diff_percent,
    )
