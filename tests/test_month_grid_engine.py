"""Tests for MonthGridEngine and MonthPager - projection, shapes, paging."""

from __future__ import annotations

import pytest

from pickercore import const
from pickercore.engines.month_grid_engine import MonthGridEngine, MonthPager
from pickercore.models import ActivatedRange, DateRange, DateValue, MonthDescriptor

RANGE = const.SELECTION_RANGE
SINGLE = const.SELECTION_SINGLE


def _page(month: int, year: int = 2024) -> MonthDescriptor:
    return MonthDescriptor.create(month, year)


# =============================================================================
# TEST: PROJECTION
# =============================================================================


class TestProject:
    """Selection → per-page ActivatedRange."""

    def test_no_selection(self) -> None:
        assert MonthGridEngine.project(None, _page(0)) == ActivatedRange(-1, -1, SINGLE)

    def test_single_on_page(self) -> None:
        selection = DateRange.single(DateValue(2024, 0, 20))
        assert MonthGridEngine.project(selection, _page(0)) == ActivatedRange(
            20, 20, SINGLE
        )

    def test_single_other_page(self) -> None:
        selection = DateRange.single(DateValue(2024, 0, 20))
        assert MonthGridEngine.project(selection, _page(1)) == ActivatedRange(
            -1, -1, SINGLE
        )

    def test_single_same_month_other_year(self) -> None:
        selection = DateRange.single(DateValue(2023, 0, 20))
        assert not MonthGridEngine.project(selection, _page(0)).is_valid()

    @pytest.mark.parametrize(
        ("month", "expected"),
        [
            (11, (-1, -1)),
            (0, (20, 31)),
            (1, (1, 29)),
            (2, (1, 5)),
            (3, (-1, -1)),
        ],
    )
    def test_multi_month_range(self, month: int, expected: tuple[int, int]) -> None:
        """2024-01-20 → 2024-03-05 across Dec 2023 .. Apr 2024."""
        selection = DateRange(DateValue(2024, 0, 20), DateValue(2024, 2, 5))
        year = 2023 if month == 11 else 2024
        assert MonthGridEngine.project(selection, _page(month, year)) == ActivatedRange(
            *expected, RANGE
        )

    def test_range_chosen_backwards(self) -> None:
        selection = DateRange(DateValue(2024, 2, 5), DateValue(2024, 0, 20))
        assert MonthGridEngine.project(selection, _page(0)) == ActivatedRange(
            20, 31, RANGE
        )

    def test_range_within_one_page(self) -> None:
        selection = DateRange(DateValue(2024, 5, 3), DateValue(2024, 5, 9))
        assert MonthGridEngine.project(selection, _page(5)) == ActivatedRange(
            3, 9, RANGE
        )

    def test_range_across_year_boundary(self) -> None:
        selection = DateRange(DateValue(2023, 10, 15), DateValue(2024, 1, 2))
        assert MonthGridEngine.project(selection, _page(11, 2023)) == ActivatedRange(
            1, 31, RANGE
        )
        assert MonthGridEngine.project(selection, _page(0)) == ActivatedRange(
            1, 31, RANGE
        )

    def test_february_1900_under_each_rule(self) -> None:
        selection = DateRange(DateValue(1900, 0, 1), DateValue(1900, 2, 1))
        simple = MonthDescriptor.create(1, 1900)
        gregorian = MonthDescriptor.create(
            1, 1900, leap_year_rule=const.LEAP_YEAR_RULE_GREGORIAN
        )
        assert MonthGridEngine.project(selection, simple).ending_day == 29
        assert MonthGridEngine.project(selection, gregorian).ending_day == 28

    def test_coverage_over_pager(self) -> None:
        """Pages inside [M1, Mk] are activated, every other page is not."""
        pager = MonthPager(DateValue(2023, 6, 1), DateValue(2024, 8, 30))
        selection = DateRange(DateValue(2023, 10, 11), DateValue(2024, 3, 2))
        first = pager.position_for_date(selection.start)
        last = pager.position_for_date(selection.end)
        projections = MonthGridEngine.project_all(selection, pager)
        assert len(projections) == pager.page_count
        for position, activated in enumerate(projections):
            assert activated.is_valid() == (first <= position <= last)


# =============================================================================
# TEST: CELL SHAPES
# =============================================================================


class TestCellShapes:
    """Highlight shape per day cell."""

    def test_single_is_circle(self) -> None:
        page = _page(0)
        activated = ActivatedRange(10, 10, SINGLE)
        state = MonthGridEngine.cell_state(activated, page, 10)
        assert state.shape == const.SHAPE_CIRCLE
        assert state.selected
        assert MonthGridEngine.cell_shape(activated, page, 11) == const.SHAPE_NONE

    def test_range_inside_month(self) -> None:
        page = _page(5)
        activated = ActivatedRange(3, 9, RANGE)
        assert MonthGridEngine.cell_shape(activated, page, 3) == const.SHAPE_LEFT_ROUNDED
        assert MonthGridEngine.cell_shape(activated, page, 5) == const.SHAPE_RECT
        assert MonthGridEngine.cell_shape(activated, page, 9) == const.SHAPE_RIGHT_ROUNDED
        assert MonthGridEngine.cell_shape(activated, page, 10) == const.SHAPE_NONE

    def test_range_continuing_past_month_edges(self) -> None:
        """Day 1 and the last day are not rounded when the range continues."""
        page = _page(1)
        activated = ActivatedRange(1, 29, RANGE)
        assert MonthGridEngine.cell_shape(activated, page, 1) == const.SHAPE_RECT
        assert MonthGridEngine.cell_shape(activated, page, 29) == const.SHAPE_RECT

    def test_one_day_slice_of_range(self) -> None:
        page = _page(0)
        assert (
            MonthGridEngine.cell_shape(ActivatedRange(1, 1, RANGE), page, 1)
            == const.SHAPE_RIGHT_ROUNDED
        )
        assert (
            MonthGridEngine.cell_shape(ActivatedRange(31, 31, RANGE), page, 31)
            == const.SHAPE_LEFT_ROUNDED
        )

    def test_range_cells_are_not_selected(self) -> None:
        state = MonthGridEngine.cell_state(ActivatedRange(3, 9, RANGE), _page(5), 4)
        assert state.activated
        assert not state.selected

    def test_cell_states_cover_month(self) -> None:
        page = MonthDescriptor.create(1, 2023, enabled_day_start=5)
        states = MonthGridEngine.cell_states(None, page)
        assert [state.day for state in states] == list(range(1, 29))
        assert not states[3].enabled
        assert states[4].enabled


# =============================================================================
# TEST: PAGER
# =============================================================================


class TestMonthPager:
    """Position arithmetic for a min/max window."""

    @pytest.fixture
    def pager(self) -> MonthPager:
        return MonthPager(DateValue(2023, 10, 15), DateValue(2024, 2, 10))

    def test_page_count(self, pager: MonthPager) -> None:
        assert pager.page_count == 5

    def test_month_and_year_for_position(self, pager: MonthPager) -> None:
        assert (pager.month_for_position(0), pager.year_for_position(0)) == (10, 2023)
        assert (pager.month_for_position(2), pager.year_for_position(2)) == (0, 2024)
        assert (pager.month_for_position(4), pager.year_for_position(4)) == (2, 2024)

    def test_position_for_date(self, pager: MonthPager) -> None:
        assert pager.position_for_date(DateValue(2024, 1, 1)) == 3

    def test_positions_for_selection(self, pager: MonthPager) -> None:
        assert pager.positions_for_selection(
            DateRange.single(DateValue(2024, 0, 5))
        ) == [2]
        assert pager.positions_for_selection(
            DateRange(DateValue(2024, 2, 1), DateValue(2023, 11, 3))
        ) == [1, 4]

    def test_enabled_bounds(self, pager: MonthPager) -> None:
        first = pager.descriptor_for_position(0)
        middle = pager.descriptor_for_position(1)
        last = pager.descriptor_for_position(4)
        assert (first.enabled_day_start, first.enabled_day_end) == (15, 30)
        assert (middle.enabled_day_start, middle.enabled_day_end) == (1, 31)
        assert (last.enabled_day_start, last.enabled_day_end) == (1, 10)

    def test_position_out_of_window(self, pager: MonthPager) -> None:
        with pytest.raises(IndexError):
            pager.descriptor_for_position(5)

    def test_empty_window_rejected(self) -> None:
        with pytest.raises(ValueError):
            MonthPager(DateValue(2024, 1, 1), DateValue(2024, 0, 1))
