#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-02-11 09:48:05
# @Author  : Tom Brandherm (https://github.com/tombo92)
# @Link    : https://github.com/tombo92/TireStorageManager
"""
DOT Code Logic

The last four digits of a tire's DOT code are its manufacturing date:
week (2 digits) followed by year (2 digits), "2319" = week 23 of 2019.
"""
# ========================================================
# IMPORTS
# ========================================================
import re
from datetime import date, datetime, timedelta, timezone
from typing import Optional

# ========================================================
# GLOABALS
# ========================================================
RE_NON_DIGIT = re.compile(r"\D")
# two digit years from here on are read as 19xx
CENTURY_PIVOT = 90
DAYS_PER_YEAR = 365.25


# ========================================================
# FUNCTIONS
# ========================================================
def parse_dot_code(code: Optional[str],
                   today: Optional[date] = None) -> Optional[date]:
    """
    Approximate manufacturing date of a DOT date code.

    Parameters
    ----------
    code : str, optional
        Raw code as typed in; anything but digits is ignored.
    today : date, optional
        Reference day for the plausibility check, defaults to today (UTC).

    Returns
    -------
    date or None
        January 1 of the year plus (week - 1) weeks, or None when the code
        is not exactly four digits, the week is outside 1..53, or the date
        lies in the future.
    """
    if not code:
        return None
    digits = RE_NON_DIGIT.sub("", code)
    if len(digits) != 4:
        return None

    week = int(digits[:2])
    yy = int(digits[2:])
    if not 1 <= week <= 53:
        return None

    year = 1900 + yy if yy >= CENTURY_PIVOT else 2000 + yy
    made = date(year, 1, 1) + timedelta(weeks=week - 1)

    today = today or datetime.now(timezone.utc).date()
    if made > today:
        return None
    return made


def tire_age_years(code: Optional[str],
                   now: Optional[datetime] = None) -> Optional[float]:
    """Fractional age in years, or None when the code does not parse."""
    now = now or datetime.now(timezone.utc)
    made = parse_dot_code(code, now.date())
    if made is None:
        return None
    return (now.date() - made).days / DAYS_PER_YEAR
