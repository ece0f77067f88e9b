from __future__ import annotations

from datetime import date, datetime

import pytest

from logic.number_format import (
    amount_decimal_places,
    format_currency,
    format_date,
    format_percent,
    parse_number,
    percent_decimal_places,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        (1234.5, "$1,234.50"),
        (15000, "$15,000.00"),
        (0, "$0.00"),
        (None, "$0.00"),
        (-12, "-$12.00"),
        (-0.001, "$0.00"),
        ("8,250.5", "$8,250.50"),
        (float("nan"), "$0.00"),
        (float("inf"), "$0.00"),
    ],
)
def test_format_currency(value, expected):
    assert format_currency(value) == expected


def test_format_percent_uses_one_decimal():
    assert format_percent(37.456) == "37.5%"
    assert format_percent(100) == "100.0%"
    assert format_percent(None) == "0.0%"


@pytest.mark.parametrize(
    "value, expected",
    [
        ("$1,234.50", 1234.5),
        ("(10)", -10.0),
        ("12.5%", 12.5),
        (" 7 ", 7.0),
        ("abc", 0.0),
        ("", 0.0),
        (None, 0.0),
        (3, 3.0),
    ],
)
def test_parse_number_is_tolerant(value, expected):
    assert parse_number(value) == pytest.approx(expected)


def test_format_date():
    assert format_date(date(2024, 3, 5)) == "03/05/2024"
    assert format_date(datetime(2024, 12, 31, 15, 0)) == "12/31/2024"
    assert format_date("2024-03-05T10:00:00") == "03/05/2024"
    assert format_date("") == ""
    assert format_date("next week") == "next week"


def test_decimal_places():
    assert amount_decimal_places() == 2
    assert percent_decimal_places() == 1


@pytest.mark.parametrize(
    "value, expected",
    [(0.125, "$0.13"), (-0.125, "-$0.13"), (10.125, "$10.13"), (0.005, "$0.01")],
)
def test_format_currency_rounds_halves_away_from_zero(value, expected):
    assert format_currency(value) == expected


def test_format_percent_rounds_halves_away_from_zero():
    assert format_percent(12.25) == "12.3%"
    assert format_percent(-12.25) == "-12.3%"
    assert format_percent(0.05) == "0.1%"
