"""Selection Engine - tap and header rules for the date selection.

A tap on a day resolves against the currently activated range header item:
- RANGE_ITEM_NONE: the tap selects a single day
- RANGE_ITEM_START: the tap moves the range start (or restarts if past end)
- RANGE_ITEM_END: the tap moves the range end (or restarts if before start)

ARCHITECTURE: Pure Python, static methods only. State belongs in
DatePickerManager.
"""

from __future__ import annotations

from dataclasses import dataclass

from .. import const
from ..models import DateRange, DateValue
from ..utils.dt_utils import days_in_month


@dataclass(frozen=True)
class TapResult:
    """Outcome of a tap.

    Attributes:
        selection: The new selection
        go_to_position: True if the grid should scroll to the selection
            (a new selection). False when an existing range was edited.
    """

    selection: DateRange
    go_to_position: bool


class SelectionEngine:
    """Stateless selection transitions."""

    @staticmethod
    def resolve_tap(
        current: DateRange | None, tapped: DateValue, active_item: str
    ) -> TapResult:
        """Resolve a day tap against the active range header item.

        Raises:
            ValueError: If active_item is not a RANGE_ITEM_* value
        """
        if active_item not in const.RANGE_ITEMS:
            raise ValueError(f"Unknown range item: {active_item}")

        if current is None or active_item == const.RANGE_ITEM_NONE:
            return TapResult(DateRange.single(tapped), True)

        if active_item == const.RANGE_ITEM_START:
            if tapped > current.end:
                return TapResult(DateRange.single(tapped), True)
            return TapResult(DateRange(tapped, current.end), False)

        if tapped < current.start:
            return TapResult(DateRange.single(tapped), True)
        return TapResult(DateRange(current.start, tapped), False)

    @staticmethod
    def collapse_to_start(current: DateRange) -> DateRange:
        """Header reset: keep only the start date as a single selection."""
        return DateRange.single(current.start)

    @staticmethod
    def change_year(
        current: DateRange,
        year: int,
        leap_year_rule: str = const.DEFAULT_LEAP_YEAR_RULE,
    ) -> DateRange:
        """Year picker: move the start date to another year.

        This is the one place a day is clamped instead of rejected
        (Feb 29 → Feb 28 in a non-leap year). The result is a single day.
        """
        start = current.start
        day = min(start.day, days_in_month(start.month, year, leap_year_rule))
        return DateRange.single(DateValue.create(year, start.month, day, leap_year_rule))
