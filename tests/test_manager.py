import datetime as dt

import pytest

from budget_categorizer.manager import CategorizerService
from budget_categorizer.models import (
    CategorizationRule,
    ConfidenceTier,
    RawTransaction,
    RecurrenceInterval,
    TransactionStatus,
)


@pytest.fixture
def service() -> CategorizerService:
    return CategorizerService()


@pytest.fixture
def netflix_rule() -> CategorizationRule:
    return CategorizationRule(
        id="r-netflix",
        raw_pattern="NETFLIX.COM",
        clean_display_name="Netflix",
        target_category="Entertainment",
        target_sub_category="Streaming",
        auto_complete=True,
    )


def test_netflix_round_trip_with_sub_category(service: CategorizerService, netflix_rule: CategorizationRule) -> None:
    tx = RawTransaction(source_text="NETFLIX.COM 8887050800", amount=-99, date="2024-03-01")
    result = service.classify(tx, [netflix_rule], [])

    assert result.clean_name == "Netflix"
    assert result.category == "Entertainment"
    assert result.status == TransactionStatus.COMPLETE
    assert result.confidence == 1.0
    assert result.confidence_tier == ConfidenceTier.PERFECT
    assert result.matched_rule_id == "r-netflix"
    assert result.source == "rule_exact"
    assert result.budget_period == dt.date(2024, 3, 1)


def test_auto_complete_needs_sub_category(
    service: CategorizerService, netflix_rule: CategorizationRule
) -> None:
    rule = netflix_rule.with_changes(target_sub_category=None)
    result = service.match("NETFLIX.COM 8887050800", "2024-03-01", [rule], [])
    assert result.status == TransactionStatus.PENDING_TRIAGE
    assert result.sub_category is None


def test_excluded_rule_completes_without_category(service: CategorizerService) -> None:
    rule = CategorizationRule(
        raw_pattern="TRANSFER TO SAVINGS",
        exclude_from_budget=True,
        auto_complete=True,
    )
    result = service.match("Transfer to savings", "2024-01-10", [rule], [])
    assert result.status == TransactionStatus.COMPLETE
    assert result.excluded is True
    assert result.category == ""


def test_exact_match_beats_earlier_fuzzy_rule(
    service: CategorizerService, netflix_rule: CategorizationRule
) -> None:
    fuzzy = CategorizationRule(raw_pattern="netflix", target_category="Fuzzy")
    result = service.match("NETFLIX.COM 8887050800", "2024-03-01", [fuzzy, netflix_rule], [])
    assert result.confidence == 1.0
    assert result.category == "Entertainment"


def test_fuzzy_fallback(service: CategorizerService) -> None:
    rule = CategorizationRule(raw_pattern="uber", target_category="Transport", match_mode="fuzzy")
    result = service.match("UBER EATS LONDON", "2024-02-02", [rule], [])

    assert result.confidence == 0.8
    assert result.confidence_tier == ConfidenceTier.POSSIBLE
    assert result.source == "rule_fuzzy"
    assert result.category == "Transport"
    assert result.recurrence_interval == RecurrenceInterval.NOT_APPLICABLE
    assert result.status == TransactionStatus.PENDING_TRIAGE


def test_first_fuzzy_rule_in_list_order_wins(service: CategorizerService) -> None:
    rules = [
        CategorizationRule(raw_pattern="uber", target_category="Transport"),
        CategorizationRule(raw_pattern="uber eats", target_category="Food"),
    ]
    assert service.match("UBER EATS LONDON", None, rules, []).category == "Transport"
    assert service.match("UBER EATS LONDON", None, rules[::-1], []).category == "Food"


def test_fuzzy_tier_skips_exact_only_and_short_rules(service: CategorizerService) -> None:
    rules = [
        CategorizationRule(raw_pattern="uber", target_category="Transport", match_mode="exact"),
        CategorizationRule(raw_pattern="u", target_category="Letters"),
    ]
    result = service.match("UBER EATS LONDON", None, rules, [])
    assert result.confidence == 0.0
    assert result.category == ""


def test_reverse_prefix_requires_long_enough_clean_name(service: CategorizerService) -> None:
    rule = CategorizationRule(raw_pattern="spotify", target_category="Music")
    assert service.match("SPOT", None, [rule], []).category == "Music"
    assert service.match("SPO", None, [rule], []).confidence == 0.0


def test_no_match_defaults(service: CategorizerService) -> None:
    result = service.classify(RawTransaction(source_text="XKQJ9384"), [], [])

    assert result.clean_name == "XKQJ9384"
    assert result.category == ""
    assert result.sub_category is None
    assert result.status == TransactionStatus.PENDING_TRIAGE
    assert result.confidence == 0.0
    assert result.confidence_tier == ConfidenceTier.NONE
    assert result.planned is True
    assert result.recurrence_interval == RecurrenceInterval.NOT_APPLICABLE
    assert result.excluded is False
    assert result.matched_rule_id is None


def test_interval_and_planned_from_rule(service: CategorizerService) -> None:
    unset = CategorizationRule(raw_pattern="GYM", clean_display_name="Gym", target_category="Health")
    result = service.match("GYM", "2024-05-20", [unset], [])
    assert result.recurrence_interval == RecurrenceInterval.MONTHLY
    assert result.planned is True

    configured = unset.with_changes(
        recurrence_interval=RecurrenceInterval.QUARTERLY,
        default_planned_flag=False,
    )
    result = service.match("GYM", "2024-05-20", [configured], [])
    assert result.recurrence_interval == RecurrenceInterval.QUARTERLY
    assert result.planned is False


def test_budget_period_uses_calendar_date_components(service: CategorizerService) -> None:
    result = service.match("XKQJ9384", "2024-03-31T23:30:00-05:00", [], [])
    assert result.budget_period == dt.date(2024, 3, 1)


def test_malformed_date_does_not_raise(service: CategorizerService) -> None:
    result = service.match("XKQJ9384", "not-a-date", [], [])
    assert result.budget_period is None


def test_service_noise_filters_are_the_default() -> None:
    service = CategorizerService(noise_filters=["VISA"])
    rule = CategorizationRule(clean_display_name="Netflix", target_category="Entertainment")

    assert service.match("VISA NETFLIX", None, [rule]).confidence == 1.0
    # An explicit empty list overrides the configured filters
    assert service.match("VISA NETFLIX", None, [rule], []).confidence == 0.8


def test_unmatchable_rules_are_ignored(service: CategorizerService) -> None:
    rule = CategorizationRule(raw_pattern="", clean_display_name="", target_category="Ghost")
    result = service.match("", None, [rule], [])
    assert result.confidence == 0.0
    assert result.clean_name == ""


def test_classify_many_keeps_input_order(service: CategorizerService, netflix_rule: CategorizationRule) -> None:
    txs = [
        RawTransaction(source_text="XKQJ9384"),
        RawTransaction(source_text="NETFLIX.COM 8887050800", date="2024-03-01"),
    ]
    results = service.classify_many(txs, [netflix_rule], [])
    assert [r.confidence for r in results] == [0.0, 1.0]
