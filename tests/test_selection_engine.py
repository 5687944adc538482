"""Tests for SelectionEngine - taps, header reset, year change."""

from __future__ import annotations

import pytest

from pickercore import const
from pickercore.engines.selection_engine import SelectionEngine
from pickercore.models import DateRange, DateValue

JAN_10 = DateValue(2024, 0, 10)
JAN_20 = DateValue(2024, 0, 20)
CURRENT = DateRange(JAN_10, JAN_20)


class TestResolveTap:
    """Tap against the active range header item."""

    def test_no_item_selects_single_day(self) -> None:
        result = SelectionEngine.resolve_tap(
            CURRENT, DateValue(2024, 0, 15), const.RANGE_ITEM_NONE
        )
        assert result.selection == DateRange.single(DateValue(2024, 0, 15))
        assert result.go_to_position

    def test_no_current_selection(self) -> None:
        result = SelectionEngine.resolve_tap(None, JAN_10, const.RANGE_ITEM_START)
        assert result.selection.is_single

    def test_start_item_moves_start(self) -> None:
        result = SelectionEngine.resolve_tap(
            CURRENT, DateValue(2024, 0, 5), const.RANGE_ITEM_START
        )
        assert result.selection.start == DateValue(2024, 0, 5)
        assert result.selection.end == JAN_20
        assert not result.go_to_position

    def test_start_item_past_end_restarts(self) -> None:
        tapped = DateValue(2024, 0, 25)
        result = SelectionEngine.resolve_tap(CURRENT, tapped, const.RANGE_ITEM_START)
        assert result.selection == DateRange.single(tapped)
        assert result.go_to_position

    def test_end_item_moves_end(self) -> None:
        result = SelectionEngine.resolve_tap(
            CURRENT, DateValue(2024, 1, 2), const.RANGE_ITEM_END
        )
        assert result.selection.start == JAN_10
        assert result.selection.end == DateValue(2024, 1, 2)
        assert not result.go_to_position

    def test_end_item_before_start_restarts(self) -> None:
        tapped = DateValue(2024, 0, 1)
        result = SelectionEngine.resolve_tap(CURRENT, tapped, const.RANGE_ITEM_END)
        assert result.selection == DateRange.single(tapped)

    def test_unknown_item(self) -> None:
        with pytest.raises(ValueError):
            SelectionEngine.resolve_tap(CURRENT, JAN_10, "middle")


class TestHeaderAndYear:
    def test_collapse_to_start(self) -> None:
        assert SelectionEngine.collapse_to_start(DateRange(JAN_20, JAN_10)) == (
            DateRange.single(JAN_10)
        )

    def test_change_year_clamps_feb_29(self) -> None:
        selection = DateRange.single(DateValue(2024, 1, 29))
        assert SelectionEngine.change_year(selection, 2023) == DateRange.single(
            DateValue(2023, 1, 28)
        )

    def test_change_year_gregorian_rule(self) -> None:
        selection = DateRange.single(DateValue(2024, 1, 29))
        moved = SelectionEngine.change_year(
            selection, 1900, const.LEAP_YEAR_RULE_GREGORIAN
        )
        assert moved.first == DateValue(1900, 1, 28)

    def test_change_year_uses_range_start(self) -> None:
        assert SelectionEngine.change_year(CURRENT, 2030) == DateRange.single(
            DateValue(2030, 0, 10)
        )
