"""Date Picker Manager - the date / date range selection session.

This manager owns the state of one visible calendar grid:
- The current selection (single day or range)
- Which range header item (start / end) a tap edits
- The page the grid is scrolled to
- The in-progress drag gesture

ARCHITECTURE:
- DatePickerManager = session state + events (STATEFUL)
- SelectionEngine / RangeGestureResolver / MonthGridEngine = rules (PURE)

Every selection handed out in an event payload is a copy.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .. import const, data_builders as db
from ..engines.month_grid_engine import MonthGridEngine, MonthPager
from ..engines.range_gesture_engine import RangeGestureResolver
from ..engines.selection_engine import SelectionEngine
from ..models import DateRange, DateValue
from ..utils.dt_utils import constrain
from .base_manager import BaseManager

if TYPE_CHECKING:
    from ..models import ActivatedRange, CellState, MonthDescriptor
    from ..type_defs import DatePickerState, PickerOptionsData


class DatePickerManager(BaseManager):
    """Manager for the calendar grid selection.

    Responsibilities:
    - Resolve taps and drags into the selection
    - Track the active range header item and the visible page
    - Emit DATE_CHANGED and RANGE_SELECTION_* events

    NOT responsible for:
    - Hit-testing pixels to days (rendering layer)
    - Scrolling during a drag (rendering layer)
    """

    def __init__(self, options: PickerOptionsData) -> None:
        """Initialize from validated options."""
        super().__init__(options)
        self.leap_year_rule = options[const.CONF_LEAP_YEAR_RULE]
        self.can_pick_date_range = options[const.CONF_CAN_PICK_DATE_RANGE]
        self.pager = MonthPager(
            DateValue.from_dict(options[const.CONF_MIN_DATE]),
            DateValue.from_dict(options[const.CONF_MAX_DATE]),
            options[const.CONF_FIRST_DAY_OF_WEEK],
            self.leap_year_rule,
        )
        self._gesture = RangeGestureResolver()
        self._selection: DateRange = DateRange.single(
            DateValue.from_dict(options[const.CONF_DATE])
        )
        self._active_range_item = const.RANGE_ITEM_NONE
        self._current_position = self.pager.position_for_date(self._selection.first)

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def selected_date(self) -> DateRange:
        """Copy of the current selection."""
        return self._selection.copy()

    @property
    def active_range_item(self) -> str:
        return self._active_range_item

    @property
    def current_position(self) -> int:
        """Page position the grid shows."""
        return self._current_position

    @property
    def is_valid(self) -> bool:
        """A date picker always holds a selection once initialized."""
        return self._selection is not None

    @property
    def is_dragging(self) -> bool:
        return self._gesture.is_dragging

    # =========================================================================
    # GRID QUERIES
    # =========================================================================

    def descriptor(self, position: int) -> MonthDescriptor:
        """MonthDescriptor for a page position."""
        return self.pager.descriptor_for_position(position)

    def activated_range(self, position: int) -> ActivatedRange:
        """Projection of the selection (or drag candidate) onto one page."""
        return MonthGridEngine.project(
            self._displayed_selection(), self.descriptor(position)
        )

    def activated_ranges(self) -> list[ActivatedRange]:
        """Projection onto every page of the window."""
        return MonthGridEngine.project_all(self._displayed_selection(), self.pager)

    def cell_states(self, position: int) -> list[CellState]:
        """Render state for every day cell of one page."""
        return MonthGridEngine.cell_states(
            self._displayed_selection(), self.descriptor(position)
        )

    def _displayed_selection(self) -> DateRange:
        if self._gesture.is_dragging:
            candidate = self._gesture.current_range
            if candidate is not None:
                return candidate
        return self._selection

    # =========================================================================
    # TAPS AND HEADER
    # =========================================================================

    def select_day(self, position: int, day: int) -> DateRange | None:
        """Handle a tap on a day cell.

        Returns the new selection, or None if the day is not selectable.
        """
        tapped = self.descriptor(position).compose_date(day)
        if tapped is None:
            const.LOGGER.debug("Tap on unselectable day %s at page %s", day, position)
            return None

        active_item = (
            self._active_range_item
            if self.can_pick_date_range
            else const.RANGE_ITEM_NONE
        )
        result = SelectionEngine.resolve_tap(self._selection, tapped, active_item)
        self._selection = result.selection
        if result.go_to_position:
            self._active_range_item = const.RANGE_ITEM_NONE
            self._current_position = self.pager.position_for_date(tapped)
        self._emit_date_changed()
        return self._selection.copy()

    def set_active_range_item(self, item: str) -> None:
        """Choose which end of a range the next tap edits.

        Raises:
            ValueError: If item is unknown
        """
        if item not in const.RANGE_ITEMS:
            raise ValueError(f"Unknown range item: {item}")
        if item != const.RANGE_ITEM_NONE and self._selection.is_single:
            item = const.RANGE_ITEM_NONE
        self._active_range_item = item
        if item != const.RANGE_ITEM_NONE:
            target = (
                self._selection.start
                if item == const.RANGE_ITEM_START
                else self._selection.end
            )
            self._current_position = self.pager.position_for_date(target)

    def reset_to_start(self) -> DateRange:
        """Collapse a range to its start day."""
        self._selection = SelectionEngine.collapse_to_start(self._selection)
        self._active_range_item = const.RANGE_ITEM_NONE
        self._current_position = self.pager.position_for_date(self._selection.first)
        self._emit_date_changed()
        return self._selection.copy()

    def change_year(self, year: int) -> DateRange:
        """Move the start date to another year, kept inside the window."""
        selection = SelectionEngine.change_year(
            self._selection, year, self.leap_year_rule
        )
        if not self.pager.is_in_window(selection.first):
            selection = DateRange.single(
                min(max(selection.first, self.pager.min_date), self.pager.max_date)
            )
        self._selection = selection
        self._active_range_item = const.RANGE_ITEM_NONE
        self._current_position = self.pager.position_for_date(selection.first)
        self._emit_date_changed()
        return self._selection.copy()

    def set_current_position(self, position: int) -> None:
        """Record the page the user scrolled to (clamped to the window)."""
        self._current_position = constrain(position, 0, self.pager.page_count - 1)

    # =========================================================================
    # DRAG GESTURE
    # =========================================================================

    def begin_range(self, position: int, day: int) -> DateRange | None:
        """Press-and-hold on a day starts a range drag."""
        if not self.can_pick_date_range:
            return None
        candidate = self._gesture.begin(self.descriptor(position), day)
        if candidate is not None:
            self.emit(const.EVENT_RANGE_SELECTION_STARTED, selected_date=candidate)
        return candidate

    def update_range(self, position: int, day: int) -> DateRange | None:
        """Drag moved over a day. Returns the candidate only when it changed."""
        candidate = self._gesture.update(self.descriptor(position), day)
        if candidate is not None:
            self.emit(const.EVENT_RANGE_SELECTION_UPDATED, selected_date=candidate)
        return candidate

    def end_range(self, position: int, day: int) -> DateRange | None:
        """Drag released. The final range becomes the selection."""
        final = self._gesture.end(self.descriptor(position), day)
        if final is None:
            return None
        self._selection = final
        self._active_range_item = (
            const.RANGE_ITEM_NONE if final.is_single else const.RANGE_ITEM_END
        )
        self.emit(const.EVENT_RANGE_SELECTION_ENDED, selected_date=final.copy())
        self._emit_date_changed()
        return final.copy()

    def cancel_range(self) -> None:
        """Abandon a drag; the committed selection is unchanged."""
        self._gesture.cancel()

    def _emit_date_changed(self) -> None:
        self.emit(const.EVENT_DATE_CHANGED, selected_date=self._selection.copy())

    # =========================================================================
    # FLAT STATE
    # =========================================================================

    def as_dict(self) -> DatePickerState:
        """Return flat session state."""
        return {
            const.DATA_SELECTED_DATE: self._selection.as_dict(),
            const.DATA_ACTIVE_RANGE_ITEM: self._active_range_item,
            const.DATA_CURRENT_POSITION: self._current_position,
        }  # type: ignore[return-value]

    def restore(self, data: dict[str, Any]) -> None:
        """Restore session state; invalid state keeps the current values."""
        try:
            selection = db.restore_date_range(
                data[const.DATA_SELECTED_DATE], self.leap_year_rule
            )
        except (KeyError, TypeError, db.PickerValidationError) as err:
            const.LOGGER.warning("Discarding invalid date picker state: %s", err)
            return

        item = data.get(const.DATA_ACTIVE_RANGE_ITEM, const.RANGE_ITEM_NONE)
        if item not in const.RANGE_ITEMS or selection.is_single:
            item = const.RANGE_ITEM_NONE
        position = data.get(const.DATA_CURRENT_POSITION)
        if not isinstance(position, int):
            position = self.pager.position_for_date(selection.start)

        self._gesture.cancel()
        self._selection = selection
        self._active_range_item = item
        self.set_current_position(position)
