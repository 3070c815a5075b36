import pytest

from budget_categorizer.models import MerchantSuggestion, RawTransaction, RecurrenceInterval
from budget_categorizer.services.suggestions import SuggestionScanner, scan_for_suggestions


def _tx(source: str, date: str, amount: float, **kwargs) -> RawTransaction:
    return RawTransaction(source_text=source, date=date, amount=amount, **kwargs)


@pytest.fixture
def history() -> list[RawTransaction]:
    return [
        _tx("RENT PAYMENT 0001", "2024-01-01", -8000, category="Housing", sub_category="Rent", planned=True),
        _tx("RENT PAYMENT 0002", "2024-02-01", -8000, category="Housing", sub_category="Rent", planned=True),
        _tx("RENT PAYMENT 0003", "2024-03-01", -8000, category="Housing", sub_category="Rent", planned=True),
        _tx("COFFEE BAR", "2024-01-03", -4, category="Food"),
        _tx("COFFEE BAR", "2024-01-20", -4, category="Food"),
        _tx("COFFEE BAR", "2024-03-15", -4, category="Drinks"),
        _tx("BOOKSHOP", "2024-02-11", -20),
        _tx("NETFLIX.COM", "2024-01-05", -99, clean_name="Netflix"),
        _tx("GYM", "2024-01-05", -30, status="Complete"),
        _tx("123456", "2024-01-05", -1),
    ]


def _assert_monotonic(suggestions: list[MerchantSuggestion]) -> None:
    for a, b in zip(suggestions, suggestions[1:]):
        assert a.confidence_rank > b.confidence_rank or (
            abs(a.confidence_rank - b.confidence_rank) <= 0.05 and a.average_amount >= b.average_amount
        )


def test_scan_groups_unresolved_merchants(history: list[RawTransaction]) -> None:
    suggestions = scan_for_suggestions(history)

    assert [s.candidate_name for s in suggestions] == ["RENT PAYMENT", "COFFEE BAR", "BOOKSHOP"]
    _assert_monotonic(suggestions)

    rent, coffee, books = suggestions
    assert rent.occurrence_count == 3
    assert rent.dominant_category == "Housing"
    assert rent.dominant_sub_category == "Rent"
    assert rent.inferred_recurrence == RecurrenceInterval.MONTHLY
    assert rent.average_amount == 8000
    assert rent.planned is True
    assert rent.confidence_rank == pytest.approx(0.95)

    assert coffee.dominant_category == "Food"
    assert coffee.inferred_recurrence == RecurrenceInterval.ONE_OFF
    assert coffee.confidence_rank == pytest.approx(0.16 + 0.06 + 0.15 + 0.2 / 3)
    assert coffee.planned is False

    assert books.dominant_category == "Other"
    assert books.dominant_sub_category == ""
    assert books.inferred_recurrence == RecurrenceInterval.ONE_OFF


def test_scan_limit(history: list[RawTransaction]) -> None:
    assert len(SuggestionScanner(limit=2).scan(history)) == 2


def test_scan_recognises_weekly() -> None:
    txs = [_tx("CLEANER", f"2024-01-{day:02d}", -50) for day in (1, 8, 15, 22)]
    (suggestion,) = scan_for_suggestions(txs)
    assert suggestion.inferred_recurrence == RecurrenceInterval.WEEKLY


def test_scan_applies_noise_filters() -> None:
    txs = [_tx("VISA COFFEE BAR", "2024-01-01", -4), _tx("COFFEE BAR", "2024-01-02", -4)]
    (suggestion,) = scan_for_suggestions(txs, ["VISA"])
    assert suggestion.candidate_name == "COFFEE BAR"
    assert suggestion.occurrence_count == 2


def test_scan_empty_history() -> None:
    assert scan_for_suggestions([]) == []


def test_accepted_suggestion_becomes_rule(history: list[RawTransaction]) -> None:
    rent = scan_for_suggestions(history)[0]
    rule = rent.to_rule(auto_complete=True)

    assert rule.raw_pattern == "RENT PAYMENT"
    assert rule.clean_display_name == "RENT PAYMENT"
    assert rule.target_category == "Housing"
    assert rule.target_sub_category == "Rent"
    assert rule.recurrence_interval == RecurrenceInterval.MONTHLY
    assert rule.default_planned_flag is True
    assert rule.auto_complete is True
