"""Value types shared by the picker engines and managers.

All types here are immutable dataclasses. A DateRange that crosses a
component boundary is therefore never shared mutable state: "replacing the
second date" always produces a new object.

Types:
    - DateValue: A calendar date (0-based month), ordered lexicographically
    - DateRange: Two dates in user-chosen order with derived start/end/kind
    - MonthDescriptor: Constraints of one month page in the grid
    - ActivatedRange: Projection of the selection onto one page
    - CellState: Render state of one day cell
    - TimeOfDay: Bounded hour/minute pair
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING, Any

from . import const
from .utils.dt_utils import (
    constrain,
    day_of_week,
    days_in_month,
    is_valid_date,
    month_key,
)

if TYPE_CHECKING:
    from .type_defs import DateRangeData, DateValueData


# =============================================================================
# EXCEPTIONS
# =============================================================================


class OutOfRangeDateError(ValueError):
    """Raised when a DateValue would name a day that does not exist.

    Dates are rejected, never clamped: clamping would silently move the
    user's selection.

    Attributes:
        year: Requested year
        month: Requested 0-based month
        day: Requested day of month
    """

    def __init__(self, year: int, month: int, day: int) -> None:
        """Initialize OutOfRangeDateError."""
        self.year = year
        self.month = month
        self.day = day
        super().__init__(f"Invalid date: year={year}, month={month}, day={day}")


# =============================================================================
# DATE VALUE
# =============================================================================


@dataclass(frozen=True, order=True)
class DateValue:
    """A calendar date with no time-of-day and no timezone.

    Field order makes comparison lexicographic on (year, month, day).
    The default constructor validates under the simple (year % 4) leap rule;
    use create() to validate under a stricter rule.
    """

    year: int
    month: int
    day: int

    def __post_init__(self) -> None:
        """Reject days outside the month and years outside 1-9999."""
        if not is_valid_date(self.year, self.month, self.day):
            raise OutOfRangeDateError(self.year, self.month, self.day)

    @classmethod
    def create(
        cls,
        year: int,
        month: int,
        day: int,
        leap_year_rule: str = const.DEFAULT_LEAP_YEAR_RULE,
    ) -> DateValue:
        """Build a DateValue validated under the given leap year rule."""
        if not is_valid_date(year, month, day, leap_year_rule):
            raise OutOfRangeDateError(year, month, day)
        return cls(year, month, day)

    @classmethod
    def from_date(cls, value: date) -> DateValue:
        """Build from a datetime.date (whose month is 1-based)."""
        return cls(value.year, value.month - 1, value.day)

    @classmethod
    def from_dict(cls, data: DateValueData | dict[str, Any]) -> DateValue:
        """Rebuild from flat state."""
        return cls(
            int(data[const.DATA_YEAR]),
            int(data[const.DATA_MONTH]),
            int(data[const.DATA_DAY]),
        )

    def as_dict(self) -> DateValueData:
        """Return flat state."""
        return {
            const.DATA_YEAR: self.year,
            const.DATA_MONTH: self.month,
            const.DATA_DAY: self.day,
        }  # type: ignore[return-value]

    def to_date(self) -> date:
        """Convert to datetime.date.

        Raises:
            ValueError: For Feb 29 of a year that is leap only under the
                simple rule (e.g. 2100)
        """
        return date(self.year, self.month + 1, self.day)

    @property
    def day_of_week(self) -> int:
        """Weekday index, Sunday = 0."""
        return day_of_week(self.year, self.month, self.day)

    @property
    def page_key(self) -> int:
        """Comparable key of the month page holding this date."""
        return month_key(self.year, self.month)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month + 1:02d}-{self.day:02d}"


# =============================================================================
# DATE RANGE
# =============================================================================


@dataclass(frozen=True)
class DateRange:
    """A single date or a date range, kept in the order it was chosen.

    `first` is the date picked first (the drag anchor), `second` the other
    end. start/end are the chronological view of the same two dates.
    """

    first: DateValue
    second: DateValue

    @classmethod
    def single(cls, value: DateValue) -> DateRange:
        """A selection of exactly one day."""
        return cls(value, value)

    @classmethod
    def from_dict(cls, data: DateRangeData | dict[str, Any]) -> DateRange:
        """Rebuild from flat state."""
        return cls(
            DateValue.from_dict(data[const.DATA_RANGE_FIRST]),
            DateValue.from_dict(data[const.DATA_RANGE_SECOND]),
        )

    def as_dict(self) -> DateRangeData:
        """Return flat state."""
        return {
            const.DATA_RANGE_FIRST: self.first.as_dict(),
            const.DATA_RANGE_SECOND: self.second.as_dict(),
        }  # type: ignore[return-value]

    @property
    def start(self) -> DateValue:
        """Chronologically earlier date."""
        return min(self.first, self.second)

    @property
    def end(self) -> DateValue:
        """Chronologically later date."""
        return max(self.first, self.second)

    @property
    def kind(self) -> str:
        """SELECTION_SINGLE if both ends are the same day, else SELECTION_RANGE."""
        if self.first == self.second:
            return const.SELECTION_SINGLE
        return const.SELECTION_RANGE

    @property
    def is_single(self) -> bool:
        """True for a one-day selection."""
        return self.kind == const.SELECTION_SINGLE

    def with_second(self, value: DateValue) -> DateRange:
        """Return a copy whose second date is replaced."""
        return DateRange(self.first, value)

    def copy(self) -> DateRange:
        """Return an independent copy for handing across a boundary."""
        return DateRange(self.first, self.second)

    def __str__(self) -> str:
        if self.is_single:
            return str(self.first)
        return f"{self.start} → {self.end}"


# =============================================================================
# MONTH PAGE
# =============================================================================


@dataclass(frozen=True)
class MonthDescriptor:
    """Constraints of one calendar page.

    enabled_day_start/enabled_day_end bound the selectable days (derived
    from the global min/max date clipped to this page).
    """

    month: int
    year: int
    first_day_of_week: int
    enabled_day_start: int
    enabled_day_end: int
    leap_year_rule: str = const.DEFAULT_LEAP_YEAR_RULE

    @classmethod
    def create(
        cls,
        month: int,
        year: int,
        *,
        first_day_of_week: int = const.DEFAULT_FIRST_DAY_OF_WEEK,
        enabled_day_start: int = 1,
        enabled_day_end: int = 31,
        leap_year_rule: str = const.DEFAULT_LEAP_YEAR_RULE,
    ) -> MonthDescriptor:
        """Build a descriptor with the enabled bounds constrained to the month.

        Raises:
            ValueError: If month is outside 0-11
        """
        length = days_in_month(month, year, leap_year_rule)
        start = constrain(enabled_day_start, 1, length)
        end = constrain(enabled_day_end, start, length)
        if not 0 <= first_day_of_week < const.DAYS_IN_WEEK:
            first_day_of_week = const.DEFAULT_FIRST_DAY_OF_WEEK
        return cls(month, year, first_day_of_week, start, end, leap_year_rule)

    @property
    def days_in_month(self) -> int:
        """Number of days on this page."""
        return days_in_month(self.month, self.year, self.leap_year_rule)

    @property
    def key(self) -> int:
        """Comparable page key (see dt_utils.month_key)."""
        return month_key(self.year, self.month)

    @property
    def day_of_week_start(self) -> int:
        """Weekday index (Sun = 0) of the 1st of the month."""
        return day_of_week(self.year, self.month, 1)

    def day_offset(self) -> int:
        """Blank cells before day 1 in a week row starting on first_day_of_week."""
        return (self.day_of_week_start - self.first_day_of_week) % const.DAYS_IN_WEEK

    def is_valid_day(self, day: int) -> bool:
        """True if day exists in this month."""
        return 1 <= day <= self.days_in_month

    def is_day_enabled(self, day: int) -> bool:
        """True if day lies within the selectable bounds."""
        return self.enabled_day_start <= day <= self.enabled_day_end

    def compose_date(self, day: int) -> DateValue | None:
        """Date for a day cell, or None if the day is invalid or disabled."""
        if not self.is_valid_day(day) or not self.is_day_enabled(day):
            return None
        return DateValue(self.year, self.month, day)


@dataclass(frozen=True)
class ActivatedRange:
    """The global selection projected onto one page's day numbers.

    starting_day/ending_day are NO_DAY (-1) when the page is not activated.
    """

    starting_day: int = const.NO_DAY
    ending_day: int = const.NO_DAY
    kind: str = const.SELECTION_SINGLE

    @classmethod
    def not_activated(cls, kind: str = const.SELECTION_SINGLE) -> ActivatedRange:
        """A projection with nothing highlighted."""
        return cls(const.NO_DAY, const.NO_DAY, kind)

    def is_valid(self) -> bool:
        """True if anything on the page is activated."""
        return self.starting_day != const.NO_DAY and self.ending_day != const.NO_DAY

    def is_activated(self, day: int) -> bool:
        """True if day falls inside the activated span."""
        return self.is_valid() and self.starting_day <= day <= self.ending_day

    def is_starting_day(self, day: int) -> bool:
        return day == self.starting_day

    def is_ending_day(self, day: int) -> bool:
        return day == self.ending_day

    def is_single_day(self) -> bool:
        return self.starting_day == self.ending_day

    def is_selected(self, day: int) -> bool:
        """True for the one selected day of a SINGLE selection."""
        return (
            self.kind == const.SELECTION_SINGLE
            and self.starting_day == day
            and self.ending_day == day
        )

    def is_start_of_month(self) -> bool:
        return self.starting_day == 1


@dataclass(frozen=True)
class CellState:
    """Render state of one day cell, consumed by the drawing layer."""

    day: int
    enabled: bool
    selected: bool
    activated: bool
    shape: str


# =============================================================================
# TIME OF DAY
# =============================================================================


@dataclass(frozen=True)
class TimeOfDay:
    """A bounded hour (0-23) / minute (0-59) pair."""

    hour: int
    minute: int

    def __post_init__(self) -> None:
        """Reject out-of-range fields."""
        if not 0 <= self.hour <= 23:
            raise ValueError(f"Invalid hour: {self.hour}")
        if not 0 <= self.minute <= 59:
            raise ValueError(f"Invalid minute: {self.minute}")
