"""
Unit tests for tirelife.dot_code
"""

# =========================
# Imports
# =========================
from datetime import date, datetime, timedelta, timezone
import pytest
from tirelife.dot_code import parse_dot_code, tire_age_years

TODAY = date(2025, 1, 1)


# -------------------------
# Tests: Parsing
# -------------------------
def test_week_and_year():
    # week 23 of 2019
    assert parse_dot_code("2319", TODAY) == date(2019, 6, 4)


def test_non_digits_are_ignored():
    assert parse_dot_code("DOT XBJ 23/19", TODAY) == date(2019, 6, 4)


def test_nineties_map_to_1900s():
    assert parse_dot_code("0195", TODAY) == date(1995, 1, 1)


@pytest.mark.parametrize("code", [None, "", "123", "12345", "ab12", "0019",
                                  "5420"])
def test_unparseable(code):
    assert parse_dot_code(code, TODAY) is None


def test_future_date_is_rejected():
    assert parse_dot_code("0126", TODAY) is None


def test_all_valid_codes_parse_or_lie_in_future():
    for week in range(1, 54):
        for year in range(100):
            code = f"{week:02d}{year:02d}"
            full_year = 1900 + year if year >= 90 else 2000 + year
            expected = date(full_year, 1, 1) + timedelta(weeks=week - 1)
            parsed = parse_dot_code(code, TODAY)
            if expected > TODAY:
                assert parsed is None, code
            else:
                assert parsed == expected, code


# -------------------------
# Tests: Age
# -------------------------
def test_age_in_fractional_years():
    now = datetime(2025, 1, 1, tzinfo=timezone.utc)
    assert tire_age_years("2319", now) == pytest.approx(5.58, abs=0.01)


def test_age_of_unparseable_code():
    assert tire_age_years("xx", datetime(2025, 1, 1, tzinfo=timezone.utc)) \
        is None
