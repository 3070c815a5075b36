from typing import Any

from budget_categorizer.core.profiles import (
    AMOUNT_EXACT_BONUS,
    AMOUNT_EXACT_TOLERANCE,
    AMOUNT_RELATIVE_BONUS,
    AMOUNT_RELATIVE_TOLERANCE,
    STRICT,
    EngineProfile,
)
from budget_categorizer.domain.names import clean_with_patterns, compile_noise_filters
from budget_categorizer.logger import get_logger
from budget_categorizer.models import (
    CategorizationRule,
    MatchKind,
    MatchMode,
    RawTransaction,
    SimilarityMatch,
    SimilarityReference,
)

logger = get_logger(__name__)


class SimilarityMatcher:
    """
    Ranks historical transactions against a name about to become a rule.

    Name evidence dominates: the reference's own raw source (when the
    profile ranks it separately), then exact name, then containment in either
    direction. Amount closeness to the reference adds a bonus; profiles that
    gate the bonus on a name hit never surface a candidate on amount alone.
    Candidates with no name or amount evidence are never returned.
    """

    def __init__(self, profile: EngineProfile = STRICT, noise_filters: Any = None):
        self.profile = profile
        self.patterns = compile_noise_filters(noise_filters)

    def _name_score(
        self, tx: RawTransaction, target: str, reference_source: str
    ) -> tuple[float, MatchKind, bool]:
        raw = tx.source_text.strip().lower()
        same_source_score = self.profile.same_source_score
        if same_source_score is not None and reference_source and raw == reference_source:
            return same_source_score, MatchKind.EXACT_NAME, True

        clean = (tx.clean_name or clean_with_patterns(tx.source_text, self.patterns)).strip().lower()

        if (raw and raw == target) or (clean and clean == target):
            return self.profile.exact_name_score, MatchKind.EXACT_NAME, False
        if raw and (target in raw or raw in target):
            return self.profile.contains_name_score, MatchKind.CONTAINS_NAME, False
        return 0.0, MatchKind.NONE, False

    @staticmethod
    def _amount_bonus(amount: float, reference_amount: float) -> tuple[float, bool]:
        """Return (bonus, is_near_exact)."""
        if reference_amount <= 0:
            return 0.0, False
        diff = abs(abs(amount) - reference_amount)
        if diff < AMOUNT_EXACT_TOLERANCE:
            return AMOUNT_EXACT_BONUS, True
        if diff / reference_amount < AMOUNT_RELATIVE_TOLERANCE:
            return AMOUNT_RELATIVE_BONUS, False
        return 0.0, False

    def find_similar(
        self,
        reference: SimilarityReference,
        pool: list[RawTransaction],
        target_name: str,
        mode: MatchMode = MatchMode.FUZZY,
    ) -> list[SimilarityMatch]:
        target = (target_name or "").strip().lower()
        if not target:
            return []

        reference_amount = abs(reference.amount)
        reference_source = reference.source_text.strip().lower()
        matches: list[SimilarityMatch] = []

        for tx in pool:
            if reference.id is not None and tx.id == reference.id:
                continue

            score, kind, same_source = self._name_score(tx, target, reference_source)
            if kind != MatchKind.NONE or not self.profile.amount_bonus_requires_name:
                bonus, near_exact = self._amount_bonus(tx.amount, reference_amount)
                score += bonus
                if near_exact and kind == MatchKind.NONE:
                    kind = MatchKind.AMOUNT_SIMILARITY

            if kind == MatchKind.NONE:
                continue
            if mode == MatchMode.EXACT and kind != MatchKind.EXACT_NAME:
                continue
            if score <= self.profile.score_floor:
                continue
            matches.append(
                SimilarityMatch(transaction=tx, score=score, match_kind=kind, same_source=same_source)
            )

        matches.sort(key=lambda match: (match.same_source, match.score), reverse=True)
        logger.debug(
            "[SIMILAR] '%s' (%s, %s profile): %d of %d candidates kept.",
            target,
            mode.value,
            self.profile.name,
            len(matches),
            len(pool),
        )
        return matches


def find_similar(
    reference: SimilarityReference,
    pool: list[RawTransaction],
    target_name: str,
    mode: MatchMode = MatchMode.FUZZY,
    profile: EngineProfile = STRICT,
    noise_filters: Any = None,
) -> list[SimilarityMatch]:
    return SimilarityMatcher(profile, noise_filters).find_similar(reference, pool, target_name, mode)


def find_rule_matches(
    rule: CategorizationRule,
    transactions: list[RawTransaction],
    noise_filters: Any = None,
) -> list[RawTransaction]:
    """Transactions a newly saved rule would apply to, in input order."""
    target = rule.identifying_name.lower()
    if not target:
        return []

    patterns = compile_noise_filters(noise_filters)
    matches = []
    for tx in transactions:
        clean = clean_with_patterns(tx.source_text, patterns).lower()
        raw = tx.source_text.lower()
        if clean == target or target in clean or target in raw:
            matches.append(tx)
    return matches
