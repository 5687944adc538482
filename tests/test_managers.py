"""Tests for the session managers - event flow, validity, flat state."""

from __future__ import annotations

import logging

import pytest

from pickercore import const
from pickercore.data_builders import build_picker_options
from pickercore.managers import (
    DatePickerManager,
    PickerManager,
    RecurrenceManager,
)
from pickercore.models import ActivatedRange, DateRange, DateValue
from pickercore.type_defs import PickerOptionsData

from tests.conftest import EventRecorder

JAN_20 = DateValue(2024, 0, 20)


# =============================================================================
# TEST: DATE PICKER MANAGER
# =============================================================================


class TestDatePickerManager:
    """Taps, drags and header items on the calendar grid."""

    @pytest.fixture
    def manager(
        self, window_2024_options: PickerOptionsData, recorder: EventRecorder
    ) -> DatePickerManager:
        manager = DatePickerManager(window_2024_options)
        manager.listen(recorder)
        return manager

    def test_initial_state(self, manager: DatePickerManager) -> None:
        assert manager.selected_date == DateRange.single(JAN_20)
        assert manager.current_position == 0
        assert manager.pager.page_count == 12
        assert manager.active_range_item == const.RANGE_ITEM_NONE
        assert manager.is_valid

    def test_tap_selects_day(
        self, manager: DatePickerManager, recorder: EventRecorder
    ) -> None:
        assert manager.select_day(1, 5) == DateRange.single(DateValue(2024, 1, 5))
        assert manager.current_position == 1
        payload = recorder.last(const.EVENT_DATE_CHANGED)
        assert payload["selected_date"] == DateRange.single(DateValue(2024, 1, 5))

    def test_tap_on_disabled_day_ignored(
        self, manager: DatePickerManager, recorder: EventRecorder
    ) -> None:
        assert manager.select_day(0, 5) is None
        assert recorder.events == []
        assert manager.selected_date == DateRange.single(JAN_20)

    def test_drag_lifecycle_events(
        self, manager: DatePickerManager, recorder: EventRecorder
    ) -> None:
        manager.begin_range(0, 12)
        assert manager.update_range(0, 15) is not None
        assert manager.update_range(0, 15) is None
        assert manager.activated_range(0) == ActivatedRange(
            12, 15, const.SELECTION_RANGE
        )
        manager.update_range(1, 3)
        final = manager.end_range(1, 3)

        expected = DateRange(DateValue(2024, 0, 12), DateValue(2024, 1, 3))
        assert final == expected
        assert manager.selected_date == expected
        assert manager.active_range_item == const.RANGE_ITEM_END
        assert recorder.names == [
            const.EVENT_RANGE_SELECTION_STARTED,
            const.EVENT_RANGE_SELECTION_UPDATED,
            const.EVENT_RANGE_SELECTION_UPDATED,
            const.EVENT_RANGE_SELECTION_ENDED,
            const.EVENT_DATE_CHANGED,
        ]
        assert recorder.last(const.EVENT_RANGE_SELECTION_ENDED)["selected_date"] == (
            expected
        )
        assert manager.activated_ranges()[1] == ActivatedRange(
            1, 3, const.SELECTION_RANGE
        )

    def test_cancelled_drag_keeps_selection(self, manager: DatePickerManager) -> None:
        manager.begin_range(0, 12)
        manager.update_range(0, 18)
        manager.cancel_range()
        assert manager.selected_date == DateRange.single(JAN_20)
        assert manager.activated_range(0) == ActivatedRange(
            20, 20, const.SELECTION_SINGLE
        )

    def test_drag_disabled_without_range_picking(self) -> None:
        options = build_picker_options(
            {
                const.CONF_DATE: JAN_20,
                const.CONF_MIN_DATE: DateValue(2024, 0, 1),
                const.CONF_MAX_DATE: DateValue(2024, 11, 31),
            }
        )
        manager = DatePickerManager(options)
        assert manager.begin_range(0, 12) is None
        assert not manager.is_dragging

    def test_header_items_edit_range_ends(self, manager: DatePickerManager) -> None:
        manager.begin_range(0, 12)
        manager.end_range(1, 3)
        manager.set_active_range_item(const.RANGE_ITEM_START)
        assert manager.current_position == 0
        manager.select_day(0, 11)
        assert manager.selected_date == DateRange(
            DateValue(2024, 0, 11), DateValue(2024, 1, 3)
        )
        assert manager.active_range_item == const.RANGE_ITEM_START

        assert manager.reset_to_start() == DateRange.single(DateValue(2024, 0, 11))
        assert manager.active_range_item == const.RANGE_ITEM_NONE

    def test_header_item_ignored_for_single(self, manager: DatePickerManager) -> None:
        manager.set_active_range_item(const.RANGE_ITEM_END)
        assert manager.active_range_item == const.RANGE_ITEM_NONE

    def test_change_year_kept_in_window(self, manager: DatePickerManager) -> None:
        assert manager.change_year(2025) == DateRange.single(DateValue(2024, 11, 20))
        assert manager.current_position == 11

    def test_flat_state_round_trip(
        self, manager: DatePickerManager, window_2024_options: PickerOptionsData
    ) -> None:
        manager.begin_range(0, 12)
        manager.end_range(1, 3)
        manager.set_current_position(4)

        restored = DatePickerManager(window_2024_options)
        restored.restore(manager.as_dict())
        assert restored.as_dict() == manager.as_dict()
        assert restored.selected_date == manager.selected_date

    def test_invalid_state_logged_and_ignored(
        self,
        manager: DatePickerManager,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        with caplog.at_level(logging.WARNING):
            manager.restore({const.DATA_SELECTED_DATE: {"first": {}}})
        assert "Discarding invalid date picker state" in caplog.text
        assert manager.selected_date == DateRange.single(JAN_20)


# =============================================================================
# TEST: RECURRENCE MANAGER
# =============================================================================


def _recurrence_manager(rule: str = "") -> RecurrenceManager:
    options = build_picker_options(
        {const.CONF_DATE: JAN_20, const.CONF_RECURRENCE_RULE: rule}
    )
    return RecurrenceManager(options)


class TestRecurrenceManager:
    """Options menu, custom editor and confirmation."""

    def test_no_initial_rule(self) -> None:
        manager = _recurrence_manager()
        assert manager.recurrence_option == const.RECURRENCE_OPTION_DOES_NOT_REPEAT
        assert manager.recurrence_rule is None
        assert manager.view == const.RECURRENCE_VIEW_OPTIONS_MENU

    def test_choose_preset(self, recorder: EventRecorder) -> None:
        manager = _recurrence_manager()
        manager.listen(recorder)
        manager.choose_option(const.RECURRENCE_OPTION_WEEKLY)
        assert recorder.last(const.EVENT_RECURRENCE_SET) == {
            "recurrence_option": const.RECURRENCE_OPTION_WEEKLY,
            "recurrence_rule": None,
        }

    def test_unknown_option(self) -> None:
        with pytest.raises(ValueError):
            _recurrence_manager().choose_option("fortnightly")

    def test_custom_editor_flow(self, recorder: EventRecorder) -> None:
        """2024-01-20 is a Saturday, so Saturday starts checked."""
        manager = _recurrence_manager()
        manager.listen(recorder)
        manager.choose_option(const.RECURRENCE_OPTION_CUSTOM)
        assert manager.view == const.RECURRENCE_VIEW_CREATOR
        assert manager.model.weekly_by_day[const.WEEKDAY_SATURDAY]

        assert not manager.edit(
            lambda model: model.toggle_weekday(const.WEEKDAY_SATURDAY, False)
        )
        assert recorder.last(const.EVENT_VALIDITY_CHANGED) == {"is_valid": False}
        assert manager.confirm_editor() is None

        assert manager.edit(
            lambda model: model.toggle_weekday(const.WEEKDAY_MONDAY, True)
        )
        assert manager.confirm_editor() == (
            const.RECURRENCE_OPTION_CUSTOM,
            "FREQ=WEEKLY;WKST=SU;BYDAY=MO",
        )
        assert manager.view == const.RECURRENCE_VIEW_OPTIONS_MENU
        assert manager.recurrence_rule == "FREQ=WEEKLY;WKST=SU;BYDAY=MO"

    def test_canonical_daily_from_editor(self) -> None:
        manager = _recurrence_manager()
        manager.open_editor()
        manager.edit(lambda model: model.set_frequency(const.FREQUENCY_DAILY))
        assert manager.confirm_editor() == (const.RECURRENCE_OPTION_DAILY, None)

    def test_cleared_model_does_not_repeat(self) -> None:
        manager = _recurrence_manager("FREQ=DAILY;COUNT=3")
        manager.open_editor()
        manager.edit(lambda model: model.clear())
        assert manager.confirm_editor() == (
            const.RECURRENCE_OPTION_DOES_NOT_REPEAT,
            None,
        )

    def test_cancel_discards_edits(self, recorder: EventRecorder) -> None:
        manager = _recurrence_manager()
        manager.listen(recorder)
        manager.open_editor()
        manager.edit(lambda model: model.set_interval(5))
        manager.cancel_editor()
        assert const.EVENT_RECURRENCE_CANCELLED in recorder.names
        assert manager.recurrence_option == const.RECURRENCE_OPTION_DOES_NOT_REPEAT
        manager.open_editor()
        assert manager.model.interval == 1

    def test_representable_initial_rule(self) -> None:
        manager = _recurrence_manager("FREQ=MONTHLY;BYDAY=2TU")
        assert manager.recurrence_option == const.RECURRENCE_OPTION_CUSTOM
        assert manager.is_rule_editable
        assert manager.model.monthly_mode == const.MONTHLY_BY_NTH_WEEKDAY
        assert manager.model.monthly_by_nth_weekday == 2

    def test_opaque_initial_rule(self) -> None:
        manager = _recurrence_manager("FREQ=HOURLY;INTERVAL=2")
        assert manager.recurrence_option == const.RECURRENCE_OPTION_CUSTOM
        assert manager.recurrence_rule == "FREQ=HOURLY;INTERVAL=2"
        assert not manager.is_rule_editable
        assert manager.model.freq == const.FREQUENCY_WEEKLY
        assert manager.model.weekly_by_day[const.WEEKDAY_SATURDAY]

    def test_start_date_change_reseeds_editor(self) -> None:
        """2024-01-24 is a Wednesday, the 4th of its kind that month."""
        manager = _recurrence_manager()
        manager.set_start_date(DateValue(2024, 0, 24))
        manager.open_editor()
        assert manager.model.weekly_by_day[const.WEEKDAY_WEDNESDAY]
        assert not manager.model.weekly_by_day[const.WEEKDAY_SATURDAY]
        assert manager.model.end_date == DateValue(2024, 1, 24)
        assert manager.model.monthly_by_weekday == const.WEEKDAY_WEDNESDAY
        assert manager.model.monthly_by_nth_weekday == 4

    def test_start_date_change_keeps_custom_rule(self) -> None:
        manager = _recurrence_manager("FREQ=WEEKLY;BYDAY=MO")
        manager.set_start_date(DateValue(2024, 0, 24))
        assert manager.start_date == DateValue(2024, 0, 24)
        manager.open_editor()
        assert manager.model.weekly_by_day[const.WEEKDAY_MONDAY]
        assert not manager.model.weekly_by_day[const.WEEKDAY_WEDNESDAY]

    def test_flat_state_round_trip(self) -> None:
        manager = _recurrence_manager()
        manager.open_editor()
        manager.edit(lambda model: model.set_end_by_count(9))

        restored = _recurrence_manager()
        restored.restore(manager.as_dict())
        assert restored.view == const.RECURRENCE_VIEW_CREATOR
        assert restored.model == manager.model

    def test_invalid_state_ignored(self, caplog: pytest.LogCaptureFixture) -> None:
        manager = _recurrence_manager()
        state = manager.as_dict()
        state[const.DATA_RECURRENCE_MODEL][const.DATA_RECURRENCE_INTERVAL] = 0
        with caplog.at_level(logging.WARNING):
            manager.restore(state)
        assert "Discarding invalid recurrence model state" in caplog.text


# =============================================================================
# TEST: PICKER MANAGER
# =============================================================================


class TestPickerManager:
    """Composite session: validity and result."""

    def test_creates_active_sub_managers(self) -> None:
        manager = PickerManager.from_user_input(
            {const.CONF_DISPLAY_OPTIONS: const.ACTIVATE_DATE_PICKER}
        )
        assert manager.date_picker is not None
        assert manager.recurrence_picker is None
        result = manager.confirm()
        assert result is not None
        assert result.recurrence_option == const.RECURRENCE_OPTION_DOES_NOT_REPEAT
        assert result.recurrence_rule is None

    def test_validity_follows_recurrence_editor(self, recorder: EventRecorder) -> None:
        manager = PickerManager.from_user_input({const.CONF_DATE: JAN_20})
        manager.listen(recorder)
        assert manager.is_valid
        recurrence = manager.recurrence_picker
        assert recurrence is not None

        recurrence.open_editor()
        recurrence.edit(
            lambda model: model.toggle_weekday(const.WEEKDAY_SATURDAY, False)
        )
        assert not manager.is_valid
        assert recorder.last(const.EVENT_VALIDITY_CHANGED) == {"is_valid": False}
        assert manager.confirm() is None

        recurrence.cancel_editor()
        assert manager.is_valid
        assert recorder.last(const.EVENT_VALIDITY_CHANGED) == {"is_valid": True}

    def test_recurrence_editor_follows_selected_date(self) -> None:
        """2024-01-01 is a Monday, 2024-01-03 a Wednesday."""
        manager = PickerManager.from_user_input(
            {const.CONF_DATE: DateValue(2024, 0, 1)}
        )
        date_picker = manager.date_picker
        recurrence = manager.recurrence_picker
        assert date_picker is not None and recurrence is not None
        date_picker.select_day(date_picker.current_position, 3)

        manager.show_picker(const.PICKER_RECURRENCE)
        recurrence.choose_option(const.RECURRENCE_OPTION_CUSTOM)
        assert recurrence.model.weekly_by_day[const.WEEKDAY_WEDNESDAY]
        assert not recurrence.model.weekly_by_day[const.WEEKDAY_MONDAY]

    def test_confirm_result(self) -> None:
        manager = PickerManager.from_user_input(
            {const.CONF_DATE: JAN_20, const.CONF_CAN_PICK_DATE_RANGE: True}
        )
        date_picker = manager.date_picker
        recurrence = manager.recurrence_picker
        assert date_picker is not None and recurrence is not None
        position = date_picker.current_position
        date_picker.begin_range(position, 20)
        date_picker.end_range(position, 25)
        manager.set_time(9, 30)
        recurrence.choose_option(const.RECURRENCE_OPTION_MONTHLY)

        result = manager.confirm()
        assert result is not None
        assert result.selected_date == DateRange(JAN_20, DateValue(2024, 0, 25))
        assert (result.hour, result.minute) == (9, 30)
        assert result.recurrence_option == const.RECURRENCE_OPTION_MONTHLY

    def test_events_forwarded(self, recorder: EventRecorder) -> None:
        manager = PickerManager.from_user_input({const.CONF_DATE: JAN_20})
        manager.listen(recorder)
        assert manager.date_picker is not None
        manager.date_picker.select_day(manager.date_picker.current_position, 21)
        manager.set_time(7, 5)
        assert recorder.names == [const.EVENT_DATE_CHANGED, const.EVENT_TIME_CHANGED]

    def test_set_time_out_of_range(self) -> None:
        with pytest.raises(ValueError):
            PickerManager.from_user_input().set_time(24, 0)

    def test_show_inactive_picker(self) -> None:
        manager = PickerManager.from_user_input(
            {const.CONF_DISPLAY_OPTIONS: const.ACTIVATE_DATE_PICKER}
        )
        with pytest.raises(ValueError):
            manager.show_picker(const.PICKER_TIME)

    def test_flat_state_round_trip(self) -> None:
        user_input = {const.CONF_DATE: JAN_20}
        manager = PickerManager.from_user_input(user_input)
        manager.set_time(18, 45)
        manager.show_picker(const.PICKER_RECURRENCE)
        assert manager.recurrence_picker is not None
        manager.recurrence_picker.choose_option(const.RECURRENCE_OPTION_YEARLY)

        restored = PickerManager.from_user_input(user_input)
        restored.restore(manager.as_dict())
        assert restored.as_dict() == manager.as_dict()
        assert restored.confirm() == manager.confirm()
