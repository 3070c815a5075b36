from typing import Any

from budget_categorizer.classifiers.base import NameCandidate, RuleClassifier, RuleMatch
from budget_categorizer.classifiers.exact import ExactRuleClassifier
from budget_categorizer.classifiers.fuzzy import FuzzyRuleClassifier
from budget_categorizer.core.profiles import (
    EXACT_MATCH_CONFIDENCE,
    NO_MATCH_CONFIDENCE,
    confidence_tier,
)
from budget_categorizer.domain.dates import budget_period
from budget_categorizer.domain.names import clean_with_patterns, compile_noise_filters
from budget_categorizer.logger import get_logger
from budget_categorizer.models import (
    CategorizationResult,
    CategorizationRule,
    RawTransaction,
    RecurrenceInterval,
    TransactionStatus,
)

logger = get_logger(__name__)


class CategorizerService:
    """
    Classifies raw transactions against an ordered rule list.

    Rule order belongs to the caller: within each tier the first matching
    rule wins, and the exact tier is always consulted before the fuzzy one.
    """

    def __init__(self, noise_filters: list[str] | None = None):
        self.noise_filters: list[str] = list(noise_filters or [])
        self.exact = ExactRuleClassifier()
        self.fuzzy = FuzzyRuleClassifier()
        self.classifiers: list[RuleClassifier] = [self.exact, self.fuzzy]

    def _resolve_filters(self, noise_filters: Any) -> Any:
        return self.noise_filters if noise_filters is None else noise_filters

    def match(
        self,
        raw_source: str,
        date: Any,
        rules: list[CategorizationRule],
        noise_filters: Any = None,
    ) -> CategorizationResult:
        patterns = compile_noise_filters(self._resolve_filters(noise_filters))
        return self._match(raw_source, date, rules, patterns)

    def classify(
        self,
        transaction: RawTransaction,
        rules: list[CategorizationRule],
        noise_filters: Any = None,
    ) -> CategorizationResult:
        return self.match(transaction.source_text, transaction.date, rules, noise_filters)

    def classify_many(
        self,
        transactions: list[RawTransaction],
        rules: list[CategorizationRule],
        noise_filters: Any = None,
    ) -> list[CategorizationResult]:
        patterns = compile_noise_filters(self._resolve_filters(noise_filters))
        results = [
            self._match(tx.source_text, tx.date, rules, patterns)
            for tx in transactions
        ]
        matched = sum(1 for result in results if result.confidence > NO_MATCH_CONFIDENCE)
        logger.info(
            "[MATCH] Classified %d transactions against %d rules (%d matched).",
            len(results),
            len(rules),
            matched,
        )
        return results

    def _match(
        self,
        raw_source: str,
        date: Any,
        rules: list[CategorizationRule],
        patterns: list,
    ) -> CategorizationResult:
        raw = raw_source or ""
        candidate = NameCandidate(raw=raw, clean=clean_with_patterns(raw, patterns))
        period = budget_period(date)
        if period is None and date is not None:
            logger.debug("[MATCH] Unreadable date %r for '%s'.", date, raw[:50])

        for classifier in self.classifiers:
            match = classifier.classify(candidate, rules)
            if match:
                logger.debug(
                    "[MATCH] %s matched '%s' -> '%s' (confidence: %.2f)",
                    classifier.__class__.__name__,
                    raw[:50],
                    match.rule.target_category,
                    match.confidence,
                )
                return self._from_rule(candidate, match, period)

        logger.debug("[MATCH] No rule matched '%s'.", raw[:50])
        return CategorizationResult(
            clean_name=candidate.clean,
            category="",
            sub_category=None,
            status=TransactionStatus.PENDING_TRIAGE,
            confidence=NO_MATCH_CONFIDENCE,
            confidence_tier=confidence_tier(NO_MATCH_CONFIDENCE),
            planned=True,
            recurrence_interval=RecurrenceInterval.NOT_APPLICABLE,
            excluded=False,
            budget_period=period,
        )

    @staticmethod
    def _from_rule(candidate: NameCandidate, match: RuleMatch, period: Any) -> CategorizationResult:
        rule = match.rule
        category = rule.target_category or ""
        sub_category = rule.target_sub_category or None
        excluded = rule.exclude_from_budget

        complete = rule.auto_complete and (excluded or bool(category and sub_category))

        if rule.recurrence_interval is not None:
            interval = rule.recurrence_interval
        elif match.confidence == EXACT_MATCH_CONFIDENCE:
            interval = RecurrenceInterval.MONTHLY
        else:
            interval = RecurrenceInterval.NOT_APPLICABLE

        planned = True if rule.default_planned_flag is None else rule.default_planned_flag

        return CategorizationResult(
            clean_name=rule.clean_display_name.strip() or candidate.clean,
            category=category,
            sub_category=sub_category,
            status=TransactionStatus.COMPLETE if complete else TransactionStatus.PENDING_TRIAGE,
            confidence=match.confidence,
            confidence_tier=confidence_tier(match.confidence),
            planned=planned,
            recurrence_interval=interval,
            excluded=excluded,
            budget_period=period,
            matched_rule_id=rule.id,
            source=match.source,
        )
