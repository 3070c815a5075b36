from budget_categorizer.core.profiles import EXACT_MATCH_CONFIDENCE
from budget_categorizer.models import CategorizationRule

from .base import NameCandidate, RuleClassifier, RuleMatch


class ExactRuleClassifier(RuleClassifier):
    """
    Case-insensitive equality: the rule's raw pattern against the raw input,
    or its display name against the cleaned input.
    """

    def classify(
        self, candidate: NameCandidate, rules: list[CategorizationRule]
    ) -> RuleMatch | None:
        raw_key = candidate.raw_key
        clean_key = candidate.clean_key

        for rule in rules:
            if not rule.is_matchable:
                continue
            pattern = rule.raw_pattern.strip().lower()
            display = rule.clean_display_name.strip().lower()
            if (pattern and pattern == raw_key) or (display and display == clean_key):
                return RuleMatch(rule=rule, confidence=EXACT_MATCH_CONFIDENCE, source="rule_exact")
        return None
