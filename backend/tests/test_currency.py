import pytest

from app.data.currency import (
    DISPLAY_CURRENCIES,
    SOURCE_TO_USD,
    convert_to_display,
    format_in_currency,
    localize_price_label,
    parse_price_label,
)


def test_tables_cover_source_and_display_currencies():
    assert len(SOURCE_TO_USD) == 9
    assert {"MXN", "BRL"} <= set(SOURCE_TO_USD)
    assert len(DISPLAY_CURRENCIES) == 7
    assert set(DISPLAY_CURRENCIES) <= set(SOURCE_TO_USD)


def test_convert_pivots_through_usd():
    assert convert_to_display(100, "EUR", "USD") == pytest.approx(108.0)
    assert convert_to_display(100, "USD", "EUR") == pytest.approx(100 / 1.08)
    assert convert_to_display(1000, "MXN", "GBP") == pytest.approx(1000 * 0.058 / 1.27)


def test_convert_same_currency_is_identity():
    assert convert_to_display(250, "GBP", "GBP") == pytest.approx(250)


def test_format_rounds_to_whole_units_with_separators():
    assert format_in_currency(1250.4, "EUR") == "€1,250"
    assert format_in_currency(1250.5, "EUR") == "€1,251"
    assert format_in_currency(150000, "JPY") == "¥150,000"
    assert format_in_currency(99.5, "AUD") == "AUD 100"
    assert format_in_currency(0, "USD") == "$0"


def test_parse_price_label():
    parsed = parse_price_label("From €1,150")
    assert parsed.value == 1150
    assert parsed.currency == "EUR"
    assert parsed.from_prefix is True

    parsed = parse_price_label("A$ 250")
    assert parsed.currency == "AUD"
    assert parsed.from_prefix is False

    assert parse_price_label("£249").currency == "GBP"
    assert parse_price_label("Sold out") is None
    assert parse_price_label("") is None


def test_localize_price_label_keeps_from_prefix():
    assert localize_price_label("From €1,150", "GBP") == "From £978"
    assert localize_price_label("€150", "USD") == "$162"
    assert localize_price_label("TBA", "USD") is None
