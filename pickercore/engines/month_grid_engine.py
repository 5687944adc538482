"""Month Grid Engine - project a date selection onto calendar pages.

This engine provides:
- MonthGridEngine.project(): DateRange + MonthDescriptor → ActivatedRange
- MonthGridEngine.cell_state(): per-day render state and highlight shape
- MonthPager: position ↔ (year, month) arithmetic for a min/max window

ARCHITECTURE: Pure Python. project() is stateless and safe to call for
every visible page on each selection change. MonthPager is an immutable
description of the scrollable window.
"""

from __future__ import annotations

from dataclasses import dataclass

from .. import const
from ..models import (
    ActivatedRange,
    CellState,
    DateRange,
    DateValue,
    MonthDescriptor,
)
from ..utils.dt_utils import days_in_month, month_key, months_between


class MonthGridEngine:
    """Stateless projection and cell-shape rules for month pages."""

    @staticmethod
    def project(
        selection: DateRange | None, page: MonthDescriptor
    ) -> ActivatedRange:
        """Project the global selection onto one page's day numbers.

        Examples (range 2024-01-20 → 2024-03-05):
            Jan 2024 → (20, 31, RANGE)
            Feb 2024 → (1, 29, RANGE)
            Mar 2024 → (1, 5, RANGE)
            Apr 2024 → (-1, -1, RANGE)
        """
        if selection is None:
            return ActivatedRange.not_activated()

        if selection.kind == const.SELECTION_SINGLE:
            selected = selection.first
            if selected.month == page.month and selected.year == page.year:
                return ActivatedRange(
                    selected.day, selected.day, const.SELECTION_SINGLE
                )
            return ActivatedRange.not_activated()

        start, end = selection.start, selection.end
        start_key, end_key, page_key = start.page_key, end.page_key, page.key
        if page_key < start_key or page_key > end_key:
            return ActivatedRange.not_activated(const.SELECTION_RANGE)

        starting_day = start.day if page_key == start_key else 1
        ending_day = end.day if page_key == end_key else page.days_in_month
        return ActivatedRange(starting_day, ending_day, const.SELECTION_RANGE)

    @staticmethod
    def project_all(
        selection: DateRange | None, pager: MonthPager
    ) -> list[ActivatedRange]:
        """Project the selection onto every page of the pager, in order."""
        return [
            MonthGridEngine.project(selection, pager.descriptor_for_position(position))
            for position in range(pager.page_count)
        ]

    @staticmethod
    def cell_shape(activated: ActivatedRange, page: MonthDescriptor, day: int) -> str:
        """Highlight shape for one day cell.

        - NONE outside the activated span
        - CIRCLE for a SINGLE selection
        - a one-day slice of a RANGE is RIGHT_ROUNDED on day 1, else LEFT_ROUNDED
        - LEFT_ROUNDED on a starting day that is not the 1st
        - RIGHT_ROUNDED on an ending day that is not the month's last day
        - RECT otherwise
        """
        if not activated.is_activated(day):
            return const.SHAPE_NONE
        if activated.kind == const.SELECTION_SINGLE:
            return const.SHAPE_CIRCLE
        if activated.is_single_day():
            if activated.is_start_of_month():
                return const.SHAPE_RIGHT_ROUNDED
            return const.SHAPE_LEFT_ROUNDED
        if activated.is_starting_day(day) and day != 1:
            return const.SHAPE_LEFT_ROUNDED
        if activated.is_ending_day(day) and day != page.days_in_month:
            return const.SHAPE_RIGHT_ROUNDED
        return const.SHAPE_RECT

    @staticmethod
    def cell_state(
        activated: ActivatedRange, page: MonthDescriptor, day: int
    ) -> CellState:
        """Full render state for one day cell."""
        return CellState(
            day=day,
            enabled=page.is_day_enabled(day),
            selected=activated.is_selected(day),
            activated=activated.is_activated(day),
            shape=MonthGridEngine.cell_shape(activated, page, day),
        )

    @staticmethod
    def cell_states(
        selection: DateRange | None, page: MonthDescriptor
    ) -> list[CellState]:
        """Render state for every day of the page, day 1 first."""
        activated = MonthGridEngine.project(selection, page)
        return [
            MonthGridEngine.cell_state(activated, page, day)
            for day in range(1, page.days_in_month + 1)
        ]


# =============================================================================
# MONTH PAGER
# =============================================================================


@dataclass(frozen=True)
class MonthPager:
    """The scrollable window of month pages between min_date and max_date."""

    min_date: DateValue
    max_date: DateValue
    first_day_of_week: int = const.DEFAULT_FIRST_DAY_OF_WEEK
    leap_year_rule: str = const.DEFAULT_LEAP_YEAR_RULE

    def __post_init__(self) -> None:
        """Reject an empty window."""
        if self.min_date > self.max_date:
            raise ValueError(
                f"min_date {self.min_date} is after max_date {self.max_date}"
            )

    @property
    def page_count(self) -> int:
        """Number of month pages in the window (both ends included)."""
        return (
            months_between(
                self.min_date.year,
                self.min_date.month,
                self.max_date.year,
                self.max_date.month,
            )
            + 1
        )

    def month_for_position(self, position: int) -> int:
        """0-based month shown at a page position."""
        return (self.min_date.month + position) % const.MONTHS_IN_YEAR

    def year_for_position(self, position: int) -> int:
        """Year shown at a page position."""
        return self.min_date.year + (
            (self.min_date.month + position) // const.MONTHS_IN_YEAR
        )

    def position_for_date(self, value: DateValue) -> int:
        """Page position holding value (may be outside [0, page_count))."""
        return months_between(
            self.min_date.year, self.min_date.month, value.year, value.month
        )

    def positions_for_selection(self, selection: DateRange) -> list[int]:
        """[position] for SINGLE, [start position, end position] for RANGE."""
        if selection.is_single:
            return [self.position_for_date(selection.first)]
        return [
            self.position_for_date(selection.start),
            self.position_for_date(selection.end),
        ]

    def descriptor_for_position(self, position: int) -> MonthDescriptor:
        """Build the MonthDescriptor for a page.

        The enabled bounds are the window's min/max day on the first/last
        page and the whole month elsewhere.

        Raises:
            IndexError: If position is outside the window
        """
        if not 0 <= position < self.page_count:
            raise IndexError(f"Page position out of range: {position}")
        month = self.month_for_position(position)
        year = self.year_for_position(position)
        key = month_key(year, month)

        enabled_start = 1
        if key == self.min_date.page_key:
            enabled_start = self.min_date.day
        enabled_end = days_in_month(month, year, self.leap_year_rule)
        if key == self.max_date.page_key:
            enabled_end = self.max_date.day

        return MonthDescriptor.create(
            month,
            year,
            first_day_of_week=self.first_day_of_week,
            enabled_day_start=enabled_start,
            enabled_day_end=enabled_end,
            leap_year_rule=self.leap_year_rule,
        )

    def is_in_window(self, value: DateValue) -> bool:
        """True if value lies between min_date and max_date (inclusive)."""
        return self.min_date <= value <= self.max_date
