from budget_categorizer.core.profiles import (
    FUZZY_MATCH_CONFIDENCE,
    FUZZY_MIN_NAME_LENGTH,
    REVERSE_PREFIX_MIN_CLEAN_LENGTH,
)
from budget_categorizer.models import CategorizationRule, MatchMode

from .base import NameCandidate, RuleClassifier, RuleMatch


class FuzzyRuleClassifier(RuleClassifier):
    """
    Prefix/substring fallback for rules that allow it.

    A rule is identified by its raw pattern, or its display name when the
    pattern is empty. The first rule in list order that hits wins.
    """

    def classify(
        self, candidate: NameCandidate, rules: list[CategorizationRule]
    ) -> RuleMatch | None:
        raw_key = candidate.raw_key
        clean_key = candidate.clean_key

        for rule in rules:
            if rule.match_mode == MatchMode.EXACT:
                continue
            name = rule.identifying_name.lower()
            if len(name) < FUZZY_MIN_NAME_LENGTH:
                continue
            if self._hits(name, raw_key, clean_key):
                return RuleMatch(rule=rule, confidence=FUZZY_MATCH_CONFIDENCE, source="rule_fuzzy")
        return None

    @staticmethod
    def _hits(name: str, raw_key: str, clean_key: str) -> bool:
        if raw_key.startswith(name) or (clean_key and clean_key.startswith(name)):
            return True
        if len(clean_key) > REVERSE_PREFIX_MIN_CLEAN_LENGTH and name.startswith(clean_key):
            return True
        return name in raw_key or name in clean_key
