"""Picker Manager - one composite date / time / recurrence picking session.

Composes the per-picker managers enabled by the display options, forwards
their events to a single consumer, and produces the PickerResult on
confirm.

Validity (the affirmative action) = date valid AND time valid AND, while
the custom recurrence editor is open, the editor is confirmable.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .. import const, data_builders as db
from ..models import DateRange, TimeOfDay
from .base_manager import BaseManager
from .date_picker_manager import DatePickerManager
from .recurrence_manager import RecurrenceManager

if TYPE_CHECKING:
    from ..type_defs import PickerOptionsData


@dataclass(frozen=True)
class PickerResult:
    """What the host receives on confirmation.

    Attributes:
        selected_date: Single day or range, None if the date picker is off
        hour / minute: Chosen time of day
        recurrence_option: One of const.RECURRENCE_OPTIONS
        recurrence_rule: Rule text for a custom option, otherwise None
    """

    selected_date: DateRange | None
    hour: int
    minute: int
    recurrence_option: str
    recurrence_rule: str | None


class PickerManager(BaseManager):
    """Session owner for the composite picker.

    Responsibilities:
    - Create the sub-managers for the active pickers
    - Track which picker is shown and the chosen time
    - Combine validity and emit VALIDITY_CHANGED when it flips
    - Build the PickerResult
    """

    def __init__(self, options: PickerOptionsData) -> None:
        """Initialize from validated options (see data_builders)."""
        super().__init__(options)
        self.date_picker: DatePickerManager | None = None
        self.recurrence_picker: RecurrenceManager | None = None
        self._time = TimeOfDay(options[const.CONF_HOUR], options[const.CONF_MINUTE])
        self._shown_picker = options[const.CONF_PICKER_TO_SHOW]

        if db.is_picker_active(options, const.PICKER_DATE):
            self.date_picker = DatePickerManager(options)
            self.date_picker.listen(self._forward)
        if db.is_picker_active(options, const.PICKER_RECURRENCE):
            start_date = (
                self.date_picker.selected_date.start if self.date_picker else None
            )
            self.recurrence_picker = RecurrenceManager(options, start_date)
            self.recurrence_picker.listen(self._forward)
        self._last_valid = self.is_valid

    @classmethod
    def from_user_input(cls, user_input: dict[str, Any] | None = None) -> PickerManager:
        """Build options from raw input and create the session.

        Raises:
            PickerValidationError: If the options are invalid
        """
        return cls(db.build_picker_options(user_input))

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def shown_picker(self) -> str:
        return self._shown_picker

    @property
    def time(self) -> TimeOfDay:
        return self._time

    @property
    def is_valid(self) -> bool:
        """Whether the affirmative action is available."""
        date_valid = self.date_picker is None or self.date_picker.is_valid
        recurrence_valid = (
            self.recurrence_picker is None or self.recurrence_picker.is_confirmable
        )
        # TimeOfDay cannot hold an invalid time
        return date_valid and recurrence_valid

    # =========================================================================
    # OPERATIONS
    # =========================================================================

    def show_picker(self, picker: str) -> None:
        """Switch the visible picker.

        Raises:
            ValueError: If picker is unknown or not active
        """
        if picker not in const.PICKER_FLAGS or not db.is_picker_active(
            self.options, picker
        ):
            raise ValueError(f"Picker not active: {picker}")
        if (
            picker == const.PICKER_RECURRENCE
            and self.recurrence_picker is not None
            and self.date_picker is not None
        ):
            self.recurrence_picker.set_start_date(self.date_picker.selected_date.start)
        self._shown_picker = picker

    def set_time(self, hour: int, minute: int) -> None:
        """Record the chosen time.

        Raises:
            ValueError: If hour or minute is out of range
        """
        self._time = TimeOfDay(hour, minute)
        self.emit(const.EVENT_TIME_CHANGED, hour=hour, minute=minute)

    def confirm(self) -> PickerResult | None:
        """Return the chosen values, or None while the session is invalid."""
        if not self.is_valid:
            const.LOGGER.debug("Picker confirm blocked: session invalid")
            return None
        option = const.RECURRENCE_OPTION_DOES_NOT_REPEAT
        rule = None
        if self.recurrence_picker is not None:
            option = self.recurrence_picker.recurrence_option
            rule = self.recurrence_picker.recurrence_rule
        return PickerResult(
            selected_date=(
                self.date_picker.selected_date if self.date_picker else None
            ),
            hour=self._time.hour,
            minute=self._time.minute,
            recurrence_option=option,
            recurrence_rule=rule,
        )

    def _forward(self, event: str, payload: dict[str, Any]) -> None:
        """Relay a sub-manager event and re-check combined validity."""
        if event != const.EVENT_VALIDITY_CHANGED:
            self.emit(event, **payload)
        is_valid = self.is_valid
        if is_valid != self._last_valid:
            self._last_valid = is_valid
            self.emit(const.EVENT_VALIDITY_CHANGED, is_valid=is_valid)

    # =========================================================================
    # FLAT STATE
    # =========================================================================

    def as_dict(self) -> dict[str, Any]:
        """Return flat state of the whole session."""
        data: dict[str, Any] = {
            const.CONF_PICKER_TO_SHOW: self._shown_picker,
            const.DATA_HOUR: self._time.hour,
            const.DATA_MINUTE: self._time.minute,
        }
        if self.date_picker is not None:
            data[const.PICKER_DATE] = self.date_picker.as_dict()
        if self.recurrence_picker is not None:
            data[const.PICKER_RECURRENCE] = self.recurrence_picker.as_dict()
        return data

    def restore(self, data: dict[str, Any]) -> None:
        """Restore session state saved by as_dict()."""
        try:
            self._time = TimeOfDay(
                int(data[const.DATA_HOUR]), int(data[const.DATA_MINUTE])
            )
        except (KeyError, TypeError, ValueError) as err:
            const.LOGGER.warning("Discarding invalid time state: %s", err)

        picker = data.get(const.CONF_PICKER_TO_SHOW)
        if picker in const.PICKER_FLAGS and db.is_picker_active(self.options, picker):
            self._shown_picker = picker
        if self.date_picker is not None and const.PICKER_DATE in data:
            self.date_picker.restore(data[const.PICKER_DATE])
        if self.recurrence_picker is not None and const.PICKER_RECURRENCE in data:
            self.recurrence_picker.restore(data[const.PICKER_RECURRENCE])
        self._last_valid = self.is_valid
