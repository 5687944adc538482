"""Recurrence Manager - the repeat option picker and custom rule editor.

This manager owns one recurrence session:
- The chosen option (does not repeat / daily / weekly / monthly / yearly / custom)
- The custom rule text, when the option is custom
- The editor's RecurrenceModel while the custom editor is open

An externally supplied rule the editor cannot represent is kept as an
opaque custom choice; the editor then starts from defaults.

ARCHITECTURE:
- RecurrenceManager = session state + events (STATEFUL)
- RecurrenceModel / RecurrenceRuleCodec = rules and wire format (PURE)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .. import const, data_builders as db
from ..engines.recurrence_engine import RecurrenceModel
from ..engines.rrule_codec import RecurrenceRuleCodec, UnsupportedRuleShapeError
from ..models import DateValue
from .base_manager import BaseManager

if TYPE_CHECKING:
    from collections.abc import Callable

    from ..type_defs import PickerOptionsData, RecurrencePickerState


class RecurrenceManager(BaseManager):
    """Manager for the repeat option picker.

    Responsibilities:
    - Offer the canonical options and the custom editor
    - Own the editor's RecurrenceModel for one edit session
    - Encode on confirm, discard on cancel
    - Emit RECURRENCE_SET / RECURRENCE_CANCELLED / VALIDITY_CHANGED
    """

    def __init__(
        self, options: PickerOptionsData, start_date: DateValue | None = None
    ) -> None:
        """Initialize from options; the event start date seeds the editor."""
        super().__init__(options)
        self.week_start = options[const.CONF_WEEK_START]
        self.leap_year_rule = options[const.CONF_LEAP_YEAR_RULE]
        self.start_date = start_date or DateValue.from_dict(options[const.CONF_DATE])

        self._view = const.RECURRENCE_VIEW_OPTIONS_MENU
        self._option = const.RECURRENCE_OPTION_DOES_NOT_REPEAT
        self._rule: str | None = None
        self._model = RecurrenceModel.initialize(
            self.start_date, leap_year_rule=self.leap_year_rule
        )
        self._committed_model = self._model.copy()

        rule = options[const.CONF_RECURRENCE_RULE]
        if rule:
            self._apply_initial_rule(rule)

    def _apply_initial_rule(self, rule: str) -> None:
        self._option = const.RECURRENCE_OPTION_CUSTOM
        self._rule = rule
        try:
            self._model = RecurrenceModel.initialize(
                self.start_date, rule, self.leap_year_rule
            )
        except UnsupportedRuleShapeError as err:
            const.LOGGER.debug(
                "Initial rule kept as opaque custom option (%s)", err.reason
            )
        self._committed_model = self._model.copy()

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def view(self) -> str:
        """RECURRENCE_VIEW_OPTIONS_MENU or RECURRENCE_VIEW_CREATOR."""
        return self._view

    @property
    def recurrence_option(self) -> str:
        return self._option

    @property
    def recurrence_rule(self) -> str | None:
        """Rule text for a custom option, None otherwise."""
        return self._rule

    @property
    def model(self) -> RecurrenceModel:
        """The editor's working model (mutate through edit())."""
        return self._model

    @property
    def is_rule_editable(self) -> bool:
        """False when the chosen custom rule is opaque to the editor."""
        return self._rule is None or RecurrenceRuleCodec.is_representable(self._rule)

    @property
    def is_confirmable(self) -> bool:
        """Editor OK availability; the options menu is always confirmable."""
        if self._view != const.RECURRENCE_VIEW_CREATOR:
            return True
        return self._model.is_confirmable()

    # =========================================================================
    # OPTIONS MENU
    # =========================================================================

    def choose_option(self, option: str) -> None:
        """Pick a canonical option, or open the editor for CUSTOM.

        Raises:
            ValueError: If option is unknown
        """
        if option not in const.RECURRENCE_OPTIONS:
            raise ValueError(f"Unknown recurrence option: {option}")
        if option == const.RECURRENCE_OPTION_CUSTOM:
            self.open_editor()
            return
        self._option = option
        self._rule = None
        self.emit(
            const.EVENT_RECURRENCE_SET,
            recurrence_option=self._option,
            recurrence_rule=None,
        )

    def set_start_date(self, start_date: DateValue) -> None:
        """Follow a change of the event start date.

        While no custom rule is committed, the editor defaults (checked
        weekday, end date, nth weekday) are re-seeded from the new date. A
        committed custom rule keeps its model. An open editor is not touched.
        """
        if start_date == self.start_date:
            return
        self.start_date = start_date
        if self._rule is not None:
            return
        self._committed_model = RecurrenceModel.initialize(
            start_date, leap_year_rule=self.leap_year_rule
        )
        if self._view != const.RECURRENCE_VIEW_CREATOR:
            self._model = self._committed_model.copy()
        const.LOGGER.debug("Recurrence editor re-seeded from %s", start_date)

    def open_editor(self, start_date: DateValue | None = None) -> None:
        """Show the custom editor, starting from the last committed model."""
        if start_date is not None:
            self.set_start_date(start_date)
        self._model = self._committed_model.copy()
        self._view = const.RECURRENCE_VIEW_CREATOR
        self.emit(const.EVENT_VALIDITY_CHANGED, is_valid=self.is_confirmable)

    # =========================================================================
    # CUSTOM EDITOR
    # =========================================================================

    def edit(self, change: Callable[[RecurrenceModel], Any]) -> bool:
        """Apply one mutation to the editor model.

        Emits VALIDITY_CHANGED when confirm availability flips.

        Example:
            manager.edit(lambda model: model.set_interval(2))

        Returns:
            Whether the editor can now be confirmed
        """
        was_confirmable = self.is_confirmable
        change(self._model)
        is_confirmable = self.is_confirmable
        if is_confirmable != was_confirmable:
            self.emit(const.EVENT_VALIDITY_CHANGED, is_valid=is_confirmable)
        return is_confirmable

    def confirm_editor(self) -> tuple[str, str | None] | None:
        """Commit the editor model.

        Returns:
            (option, rule): rule is None for canonical options. Returns None
            without committing when the model is not confirmable.
        """
        if not self._model.is_confirmable():
            const.LOGGER.debug("Recurrence editor confirm blocked: model incomplete")
            return None

        if self._model.state == const.RECURRENCE_STATE_NONE:
            option, rule = const.RECURRENCE_OPTION_DOES_NOT_REPEAT, None
        else:
            option = self._model.resolve_repeat_option()
            encoded = RecurrenceRuleCodec.encode(self._model, self.week_start)
            rule = encoded if option == const.RECURRENCE_OPTION_CUSTOM else None

        self._option = option
        self._rule = rule
        self._committed_model = self._model.copy()
        self._view = const.RECURRENCE_VIEW_OPTIONS_MENU
        self.emit(
            const.EVENT_RECURRENCE_SET,
            recurrence_option=option,
            recurrence_rule=rule,
        )
        return option, rule

    def cancel_editor(self) -> None:
        """Discard the edit session and return to the options menu."""
        self._model = self._committed_model.copy()
        self._view = const.RECURRENCE_VIEW_OPTIONS_MENU
        self.emit(const.EVENT_RECURRENCE_CANCELLED)

    # =========================================================================
    # FLAT STATE
    # =========================================================================

    def as_dict(self) -> RecurrencePickerState:
        """Return flat session state, including an open editor's model."""
        return {
            const.DATA_RECURRENCE_OPTION: self._option,
            const.DATA_RECURRENCE_RULE: self._rule,
            const.DATA_RECURRENCE_VIEW: self._view,
            const.DATA_RECURRENCE_MODEL: self._model.as_dict(),
        }  # type: ignore[return-value]

    def restore(self, data: dict[str, Any]) -> None:
        """Restore session state; invalid state keeps the current values."""
        option = data.get(const.DATA_RECURRENCE_OPTION)
        view = data.get(const.DATA_RECURRENCE_VIEW)
        rule = data.get(const.DATA_RECURRENCE_RULE)
        if option not in const.RECURRENCE_OPTIONS or view not in (
            const.RECURRENCE_VIEW_OPTIONS_MENU,
            const.RECURRENCE_VIEW_CREATOR,
        ):
            const.LOGGER.warning(
                "Discarding invalid recurrence state: option=%s view=%s", option, view
            )
            return
        try:
            model = db.restore_recurrence_model(
                data.get(const.DATA_RECURRENCE_MODEL) or {}, self.leap_year_rule
            )
        except db.PickerValidationError as err:
            const.LOGGER.warning("Discarding invalid recurrence model state: %s", err)
            return

        self._option = option
        self._rule = rule if isinstance(rule, str) and rule else None
        self._view = view
        self._model = model
        if view == const.RECURRENCE_VIEW_OPTIONS_MENU:
            self._committed_model = model.copy()
