"""Type definitions for picker core data structures.

TypedDict is used for every structure whose keys are fixed at design time:
flat persisted state (what a host stores across a restart), parsed rule
parts and the picker configuration. Value objects with behaviour live in
models.py as dataclasses.

IMPORTANT: This file must NOT import from engines/ or managers/ to avoid
circular dependencies. Only import from typing.

NOTE: TypedDict is STATIC ANALYSIS ONLY. Runtime validation of restored
state happens in data_builders.py through voluptuous schemas.
"""

from typing import NotRequired, TypedDict

# =============================================================================
# Type Aliases (for readability)
# =============================================================================

WeekdayIndex = int  # 0 = Sunday ... 6 = Saturday
MonthIndex = int  # 0 = January ... 11 = December
WeekdayCode = str  # "SU", "MO", ...


# =============================================================================
# Flat date state
# =============================================================================


class DateValueData(TypedDict):
    """A calendar date as flat ints (month is 0-based)."""

    year: int
    month: MonthIndex
    day: int


class DateRangeData(TypedDict):
    """A date selection in the order the user picked its ends."""

    first: DateValueData
    second: DateValueData


# =============================================================================
# Recurrence
# =============================================================================


class RecurrenceModelData(TypedDict):
    """Flat persisted form of RecurrenceModel.

    Every field is written, including those not relevant to the current
    frequency, so switching frequency after a restore keeps prior input.
    """

    state: str
    freq: str
    interval: int
    interval_entered: bool
    end: str
    end_date: DateValueData | None
    end_count: int
    end_count_entered: bool
    weekly_by_day: list[bool]
    monthly_mode: str
    monthly_by_month_day: int
    monthly_by_weekday: WeekdayIndex
    monthly_by_nth_weekday: int


class ByDayEntry(TypedDict):
    """One BYDAY token: weekday plus optional nth (0 = no nth)."""

    weekday: WeekdayIndex
    nth: int


class RuleParts(TypedDict):
    """Raw fields parsed out of a textual rule, before model mapping."""

    freq: str
    interval: int
    until: str | None
    count: int
    wkst: NotRequired[WeekdayCode | None]
    byday: list[ByDayEntry]
    bymonthday: list[int]
    ignored: list[str]


# =============================================================================
# Manager state
# =============================================================================


class DatePickerState(TypedDict):
    """Flat state owned by DatePickerManager."""

    selected_date: DateRangeData | None
    active_range_item: str
    current_position: int


class RecurrencePickerState(TypedDict):
    """Flat state owned by RecurrenceManager."""

    recurrence_option: str
    recurrence_rule: str | None
    recurrence_view: str
    recurrence_model: RecurrenceModelData


# =============================================================================
# Configuration
# =============================================================================


class PickerOptionsData(TypedDict):
    """Validated picker configuration built by data_builders."""

    display_options: int
    picker_to_show: str
    date: DateValueData
    min_date: DateValueData
    max_date: DateValueData
    hour: int
    minute: int
    is_24_hour_view: bool
    recurrence_rule: str
    can_pick_date_range: bool
    first_day_of_week: WeekdayIndex
    leap_year_rule: str
    week_start: WeekdayCode
