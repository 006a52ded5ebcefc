"""Tests for amount, quantity, line and date parsing."""

import pytest
from datetime import date, datetime, timedelta
from decimal import Decimal
from dateutil.relativedelta import relativedelta

from shopledger.utils.amount_parser import parse_amount, parse_quantity
from shopledger.utils.date_parser import parse_date, parse_datetime
from shopledger.utils.line_parser import ParsedLine, parse_line


@pytest.mark.parametrize(
    "text, expected",
    [
        ("123.45", Decimal("123.45")),
        ("₹1,234.50", Decimal("1234.50")),
        ("$20", Decimal("20")),
        ("-15.5", Decimal("-15.5")),
        ("(42.00)", Decimal("-42.00")),
    ],
)
def test_parse_amount(text, expected):
    """Test parsing money strings."""
    assert parse_amount(text) == expected


@pytest.mark.parametrize("text", ["", "   ", "abc", "NaN", "Infinity"])
def test_parse_amount_invalid(text):
    """Test invalid money strings raise ValueError."""
    with pytest.raises(ValueError):
        parse_amount(text)


def test_parse_quantity():
    """Test parsing signed whole numbers."""
    assert parse_quantity("5") == 5
    assert parse_quantity("-3") == -3
    with pytest.raises(ValueError):
        parse_quantity("2.5")


def test_parse_line_minimal():
    """Test a line with product and quantity only."""
    assert parse_line("RICE-5:3") == ParsedLine("RICE-5", 3, 0, None)


def test_parse_line_with_free_units_and_price():
    """Test a line with free units and an explicit price."""
    parsed = parse_line("OIL-1:10+1@135.50")

    assert parsed.product == "OIL-1"
    assert parsed.quantity == 10
    assert parsed.free_quantity == 1
    assert parsed.price == Decimal("135.50")


@pytest.mark.parametrize("text", ["RICE-5", "RICE-5:", ":3", "RICE-5:three", "RICE-5:3@"])
def test_parse_line_invalid(text):
    """Test malformed line items raise ValueError."""
    with pytest.raises(ValueError):
        parse_line(text)


def test_parse_absolute_date():
    """Test parsing absolute dates."""
    assert parse_date("2024-01-15") == date(2024, 1, 15)


def test_parse_today_and_yesterday():
    """Test parsing 'today' and 'yesterday'."""
    assert parse_date("today") == date.today()
    assert parse_date("Yesterday") == date.today() - timedelta(days=1)


def test_parse_last_month():
    """Test 'last month' is the first day of the previous month."""
    assert parse_date("last month") == (date.today() - relativedelta(months=1)).replace(day=1)


def test_parse_invalid_date():
    """Test an unparseable date raises ValueError."""
    with pytest.raises(ValueError):
        parse_date("not a date")


def test_parse_days_ago():
    """Test 'N days ago' counts back from today."""
    assert parse_date("3 days ago") == date.today() - timedelta(days=3)
    assert parse_date("1  day ago") == date.today() - timedelta(days=1)


def test_parse_this_year_and_last_week():
    """Test period shortcuts resolve to the start of the period."""
    today = date.today()
    assert parse_date("this year") == date(today.year, 1, 1)
    last_week = parse_date("last week")
    assert last_week.weekday() == 0
    assert last_week == today - timedelta(days=today.weekday() + 7)


def test_parse_datetime_is_midnight():
    """Test parse_datetime returns the start of the day."""
    assert parse_datetime("2024-03-05") == datetime(2024, 3, 5)
