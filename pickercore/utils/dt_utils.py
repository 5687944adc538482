# File: utils/dt_utils.py
"""Date utilities for the picker core.

Pure Python calendar functions with no dependency on engines or managers.
All functions work on plain ints (year, 0-based month, day) so that every
other module, including models.py, can build on them.

Uses standard library datetime plus dateutil for month arithmetic and
rule-date parsing.

Functions:
    - is_leap_year: Leap year test under a configurable rule
    - days_in_month: Length of a month (0-based month index)
    - is_valid_date: Bounds check for a (year, month, day) triple
    - constrain: Clamp an int into a closed interval
    - month_key: Comparable key for a (year, month) page
    - months_between: Signed month distance between two pages
    - day_of_week: Weekday index (Sun = 0) of a date
    - shift_months: Move a date by months/years, clamping the day
    - format_until: Format a date for the rule UNTIL part
    - parse_until: Parse an UNTIL value down to its date part
    - weekday_code / weekday_index: Convert Sun=0 indices to "SU".."SA"
"""

from __future__ import annotations

from datetime import date
import logging

# Third-party date utilities
from dateutil.parser import isoparser
from dateutil.relativedelta import relativedelta

# Module-level logger
_LOGGER = logging.getLogger(__name__)

# Clock part of UNTIL only. The date part is checked with is_valid_date().
_UNTIL_TIME_PARSER = isoparser(sep="T")

# ==============================================================================
# Constants (local copies to avoid circular imports)
# These mirror const.py values but are defined locally for purity.
# ==============================================================================

LEAP_YEAR_RULE_SIMPLE = "simple"
LEAP_YEAR_RULE_GREGORIAN = "gregorian"
GREGORIAN_CHANGE_YEAR = 1582
# Years datetime can represent
MIN_YEAR = 1
MAX_YEAR = 9999

WEEKDAY_CODES = ("SU", "MO", "TU", "WE", "TH", "FR", "SA")

_THIRTY_ONE_DAY_MONTHS = frozenset({0, 2, 4, 6, 7, 9, 11})
_THIRTY_DAY_MONTHS = frozenset({3, 5, 8, 10})
_FEBRUARY = 1


# ==============================================================================
# Calendar arithmetic
# ==============================================================================


def is_leap_year(year: int, rule: str = LEAP_YEAR_RULE_SIMPLE) -> bool:
    """Return True if `year` is a leap year under `rule`.

    LEAP_YEAR_RULE_SIMPLE treats every year divisible by 4 as leap (so 1900
    and 2100 are leap years). LEAP_YEAR_RULE_GREGORIAN applies the Julian
    rule up to 1582 and the full Gregorian rule after it.
    """
    if rule == LEAP_YEAR_RULE_GREGORIAN and year > GREGORIAN_CHANGE_YEAR:
        return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)
    return year % 4 == 0


def days_in_month(
    month: int, year: int, rule: str = LEAP_YEAR_RULE_SIMPLE
) -> int:
    """Return the number of days in a month.

    Args:
        month: 0-based month index (0 = January)
        year: Calendar year
        rule: Leap year rule constant

    Raises:
        ValueError: If month is outside 0-11
    """
    if month in _THIRTY_ONE_DAY_MONTHS:
        return 31
    if month in _THIRTY_DAY_MONTHS:
        return 30
    if month == _FEBRUARY:
        return 29 if is_leap_year(year, rule) else 28
    raise ValueError(f"Invalid month: {month}")


def is_valid_date(
    year: int, month: int, day: int, rule: str = LEAP_YEAR_RULE_SIMPLE
) -> bool:
    """Check that (year, month, day) names a real calendar day in years 1-9999."""
    if not MIN_YEAR <= year <= MAX_YEAR or not 0 <= month <= 11:
        return False
    return 1 <= day <= days_in_month(month, year, rule)


def constrain(value: int, low: int, high: int) -> int:
    """Clamp value into [low, high]."""
    if value < low:
        return low
    if value > high:
        return high
    return value


def month_key(year: int, month: int) -> int:
    """Comparable key for a month page: Feb 2015 -> 201502."""
    return year * 100 + month + 1


def months_between(
    from_year: int, from_month: int, to_year: int, to_month: int
) -> int:
    """Signed number of month pages from one page to another."""
    return (to_year - from_year) * 12 + (to_month - from_month)


def day_of_week(year: int, month: int, day: int) -> int:
    """Return the weekday index of a date with Sunday = 0.

    Weekdays follow the proleptic Gregorian calendar (datetime.date).
    """
    # Counted from the 1st so Feb 29 resolves under either leap year rule.
    # date.weekday(): Monday = 0 ... Sunday = 6
    first = (date(year, month + 1, 1).weekday() + 1) % 7
    return (first + day - 1) % 7


def shift_months(
    year: int,
    month: int,
    day: int,
    *,
    months: int = 0,
    years: int = 0,
    rule: str = LEAP_YEAR_RULE_SIMPLE,
) -> tuple[int, int, int]:
    """Move a date by whole months/years, clamping the day to month end.

    Month arithmetic goes through relativedelta anchored on the first of
    the month; the day is then clamped with days_in_month() so the result
    honours the configured leap year rule.

    Examples:
        shift_months(2024, 0, 31, months=1) → (2024, 1, 29)
        shift_months(2024, 1, 29, years=1) → (2025, 1, 28)
    """
    anchor = date(year, month + 1, 1) + relativedelta(months=months, years=years)
    new_month = anchor.month - 1
    new_day = min(day, days_in_month(new_month, anchor.year, rule))
    return anchor.year, new_month, new_day


# ==============================================================================
# Rule date formatting
# ==============================================================================


def format_until(year: int, month: int, day: int) -> str:
    """Format a date as an UNTIL value with no time-of-day (YYYYMMDD)."""
    return f"{year:04d}{month + 1:02d}{day:02d}"


def parse_until(
    value: str, rule: str = LEAP_YEAR_RULE_SIMPLE
) -> tuple[int, int, int]:
    """Parse an UNTIL value and keep only its calendar date.

    Accepts "YYYYMMDD", "YYYYMMDDTHHMMSS" and "YYYYMMDDTHHMMSSZ". The date
    is validated under the given leap year rule, so Feb 29 2100 is accepted
    under LEAP_YEAR_RULE_SIMPLE.

    Returns:
        (year, 0-based month, day)

    Raises:
        ValueError: If the value is not a basic-format date or date-time
    """
    text = value.strip()
    digits, sep, clock = text[:8], text[8:9], text[9:]
    if len(digits) != 8 or not digits.isdigit() or sep not in ("", "T"):
        raise ValueError(f"Invalid UNTIL value: {value!r}")
    if sep and not clock:
        raise ValueError(f"Invalid UNTIL value: {value!r}")

    year, month, day = int(digits[:4]), int(digits[4:6]) - 1, int(digits[6:8])
    if not is_valid_date(year, month, day, rule):
        raise ValueError(f"Invalid UNTIL date: {value!r}")
    if clock:
        _UNTIL_TIME_PARSER.parse_isotime(clock)

    _LOGGER.debug("Parsed UNTIL %s as %04d-%02d-%02d", value, year, month + 1, day)
    return year, month, day


def weekday_code(index: int) -> str:
    """Return the rule code ("SU".."SA") for a Sun = 0 weekday index."""
    return WEEKDAY_CODES[index]


def weekday_index(code: str) -> int:
    """Return the Sun = 0 weekday index for a rule code.

    Raises:
        ValueError: If code is not one of SU, MO, TU, WE, TH, FR, SA
    """
    try:
        return WEEKDAY_CODES.index(code.upper())
    except ValueError as err:
        raise ValueError(f"Invalid weekday code: {code!r}") from err
