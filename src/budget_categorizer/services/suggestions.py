from collections import Counter
from dataclasses import dataclass, field
from typing import Any

from budget_categorizer.analysis.recurrence import RecurrenceDetector
from budget_categorizer.analysis.scoring import rank_suggestions, score_suggestion
from budget_categorizer.core.profiles import DEFAULT_SUGGESTION_LIMIT, LENIENT, EngineProfile
from budget_categorizer.domain.names import clean_with_patterns, compile_noise_filters
from budget_categorizer.logger import get_logger
from budget_categorizer.models import (
    MerchantSuggestion,
    RawTransaction,
    RecurrenceInterval,
    TransactionStatus,
)

logger = get_logger(__name__)

FALLBACK_CATEGORY = "Other"


@dataclass
class _MerchantGroup:
    count: int = 0
    categories: Counter = field(default_factory=Counter)
    sub_categories: Counter = field(default_factory=Counter)
    dates: list = field(default_factory=list)
    amounts: list[float] = field(default_factory=list)
    planned_count: int = 0
    excluded_count: int = 0

    def add(self, tx: RawTransaction) -> None:
        self.count += 1
        if tx.category:
            self.categories[tx.category] += 1
        if tx.sub_category:
            self.sub_categories[tx.sub_category] += 1
        self.dates.append(tx.date)
        if tx.amount:
            self.amounts.append(abs(tx.amount))
        if tx.planned:
            self.planned_count += 1
        if tx.excluded:
            self.excluded_count += 1


class SuggestionScanner:
    """
    Aggregates unresolved history by cleaned merchant name into ranked
    candidate rules.

    Only transactions without a resolved clean name and not yet Complete
    take part. A merchant whose cadence cannot be established is reported
    as One-off.
    """

    def __init__(
        self,
        profile: EngineProfile = LENIENT,
        noise_filters: Any = None,
        limit: int | None = DEFAULT_SUGGESTION_LIMIT,
    ):
        self.detector = RecurrenceDetector(profile)
        self.patterns = compile_noise_filters(noise_filters)
        self.limit = limit

    def _group(self, transactions: list[RawTransaction]) -> dict[str, _MerchantGroup]:
        groups: dict[str, _MerchantGroup] = {}
        for tx in transactions:
            if tx.clean_name:
                continue
            if tx.status == TransactionStatus.COMPLETE.value:
                continue
            name = clean_with_patterns(tx.source_text, self.patterns)
            if not name:
                continue
            groups.setdefault(name, _MerchantGroup()).add(tx)
        return groups

    def _suggest(self, name: str, group: _MerchantGroup) -> MerchantSuggestion:
        if group.categories:
            category, category_count = group.categories.most_common(1)[0]
        else:
            category, category_count = FALLBACK_CATEGORY, 0
        sub_category = group.sub_categories.most_common(1)[0][0] if group.sub_categories else ""
        average_amount = sum(group.amounts) / len(group.amounts) if group.amounts else 0.0

        interval = self.detector.detect(group.dates).interval
        if interval == RecurrenceInterval.NOT_APPLICABLE:
            interval = RecurrenceInterval.ONE_OFF

        return MerchantSuggestion(
            candidate_name=name,
            occurrence_count=group.count,
            dominant_category=category,
            dominant_sub_category=sub_category,
            inferred_recurrence=interval,
            average_amount=average_amount,
            confidence_rank=score_suggestion(
                group.count,
                interval,
                average_amount,
                category_count / group.count,
            ),
            planned=group.planned_count > group.count / 2,
            excluded=group.excluded_count > group.count / 2,
        )

    def scan(self, transactions: list[RawTransaction]) -> list[MerchantSuggestion]:
        if not transactions:
            logger.warning("[SCAN] No transactions to scan.")
            return []

        logger.info("[SCAN] Scanning %d transactions for merchant patterns.", len(transactions))
        groups = self._group(transactions)
        suggestions = [self._suggest(name, group) for name, group in groups.items()]
        ranked = rank_suggestions(suggestions, self.limit)
        logger.info(
            "[SCAN] Found %d merchants, returning %d suggestions.",
            len(suggestions),
            len(ranked),
        )
        return ranked


def scan_for_suggestions(
    transactions: list[RawTransaction],
    noise_filters: Any = None,
    limit: int | None = DEFAULT_SUGGESTION_LIMIT,
    profile: EngineProfile = LENIENT,
) -> list[MerchantSuggestion]:
    return SuggestionScanner(profile, noise_filters, limit).scan(transactions)
