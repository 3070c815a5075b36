import logging

import pytest

from budget_categorizer.domain.names import clean_name, is_noise_pattern, suggest_pattern


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("NETFLIX.COM 8887050800", "NETFLIX"),
        ("PAYPAL *SPOTIFY", "SPOTIFY"),
        ("SUMUP * COFFEE SHOP  LONDON", "COFFEE SHOP"),
        ("12345 TESCO STORES 2041", "TESCO STORES"),
        ("AMAZON 123456 MARKETPLACE", "AMAZON MARKETPLACE"),
        ("SHOP*12345 REF", "SHOP"),
        ("example.co.uk", "example"),
        ("7-ELEVEN 1234", "7-ELEVEN"),
        ("  Spotify   ", "Spotify"),
    ],
)
def test_clean_name(raw: str, expected: str) -> None:
    assert clean_name(raw) == expected


def test_clean_name_pure_noise_is_empty() -> None:
    assert clean_name("1234567") == ""
    assert clean_name("") == ""
    assert clean_name(None) == ""


def test_noise_filters_are_literal_and_case_insensitive() -> None:
    assert clean_name("VISA DEBIT TESCO", ["visa debit"]) == "TESCO"
    # Regex metacharacters in a filter are matched literally
    assert clean_name("SHOP (UK) LTD", ["(UK)"]) == "SHOP LTD"
    assert clean_name("SHOPXUKX LTD", [".UK."]) == "SHOPXUKX LTD"


def test_bad_noise_filters_are_skipped(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        result = clean_name("VISA SPOTIFY", [None, "   ", 42, "VISA"])
    assert result == "SPOTIFY"
    assert "Skipping" in caplog.text


@pytest.mark.parametrize(
    "raw",
    [
        "NETFLIX.COM 8887050800",
        "PAYPAL *PAYPAL *SPOTIFY",
        "123 456 SHOP.COM.COM",
        "IZ *CAFE  BAR 99",
        "GOOGLE *YouTube 2024 0001",
        "**",
        "a.b.c.dk 12 34",
        "",
    ],
)
def test_cleaning_is_idempotent(raw: str) -> None:
    once = clean_name(raw, ["MobilePay"])
    assert clean_name(once, ["MobilePay"]) == once


def test_suggest_pattern_skips_noise_words() -> None:
    assert suggest_pattern("MobilePay Joe's Pizza", ["MobilePay"]) == "Joe's"
    assert suggest_pattern("VISA-DK NETTO 1234", ["VISA*"]) == "NETTO"
    assert suggest_pattern("A BCD", []) == "BCD"
    assert suggest_pattern("X", []) == "X"
    assert suggest_pattern("", []) == ""


def test_is_noise_pattern() -> None:
    assert is_noise_pattern("MOBILEPAY", ["MobilePay"])
    assert is_noise_pattern("mobilepay joe", ["MobilePay"])
    assert not is_noise_pattern("MOBILEPAYMENTS", ["MobilePay"])
    assert not is_noise_pattern("NETTO", [])
