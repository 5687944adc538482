"""Recurrence Engine - structured recurrence intent and its edit transitions.

This engine provides the in-memory model behind the custom recurrence editor:
- Frequency / interval / end condition / by-day / by-month-day fields
- Mutators that clamp input and move the state from NONE to ACTIVE
- Confirm-validity ("can the user press OK now")
- Editor initialization from an event start date and optional rule
- Flat state for save/restore

ARCHITECTURE: Pure Python, no I/O. The model is owned by one edit session
(RecurrenceManager); translation to and from text belongs in rrule_codec.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from .. import const
from ..models import DateValue
from ..utils.dt_utils import constrain, shift_months

if TYPE_CHECKING:
    from ..type_defs import RecurrenceModelData


def is_supported_nth_weekday(nth: int) -> bool:
    """True for nth values the editor can show: 1st-5th or last (-1)."""
    return nth in const.SUPPORTED_NTH_WEEKDAYS


# =============================================================================
# RECURRENCE MODEL
# =============================================================================


@dataclass
class RecurrenceModel:
    """Structured recurrence intent edited by the custom recurrence editor.

    Fields that do not apply to the current frequency are retained, so a
    user can switch WEEKLY → MONTHLY → WEEKLY without re-entering days.

    Attributes:
        state: RECURRENCE_STATE_NONE until the first mutation, then ACTIVE
        freq: One of FREQUENCY_OPTIONS
        interval: Every n periods, 1-99
        interval_entered: False while the interval input is empty
        end: END_NEVER, END_BY_DATE or END_BY_COUNT
        end_date: Last occurrence date (END_BY_DATE)
        end_count: Number of occurrences, 1-730 (END_BY_COUNT)
        end_count_entered: False while the count input is empty
        weekly_by_day: Checked weekdays, Sun = 0 ... Sat = 6
        monthly_mode: MONTHLY_BY_MONTH_DAY or MONTHLY_BY_NTH_WEEKDAY
        monthly_by_month_day: Day of month, 0 = the event's own day
        monthly_by_weekday: Weekday for the nth-weekday mode
        monthly_by_nth_weekday: 1-5, -1 for last, 0 = not chosen yet
    """

    state: str = const.RECURRENCE_STATE_NONE
    freq: str = const.FREQUENCY_WEEKLY
    interval: int = const.INTERVAL_DEFAULT
    interval_entered: bool = True
    end: str = const.END_NEVER
    end_date: DateValue | None = None
    end_count: int = const.COUNT_DEFAULT
    end_count_entered: bool = True
    weekly_by_day: list[bool] = field(
        default_factory=lambda: [False] * const.DAYS_IN_WEEK
    )
    monthly_mode: str = const.MONTHLY_BY_MONTH_DAY
    monthly_by_month_day: int = 0
    monthly_by_weekday: int = const.WEEKDAY_SUNDAY
    monthly_by_nth_weekday: int = const.NTH_WEEKDAY_UNSET

    # =========================================================================
    # STATE
    # =========================================================================

    @property
    def is_active(self) -> bool:
        """True once any recurrence has been chosen."""
        return self.state == const.RECURRENCE_STATE_ACTIVE

    def _activate(self) -> None:
        self.state = const.RECURRENCE_STATE_ACTIVE

    def clear(self) -> None:
        """Return to 'no recurrence'. Field values are kept for re-activation."""
        self.state = const.RECURRENCE_STATE_NONE

    def copy(self) -> RecurrenceModel:
        """Independent copy (weekly_by_day is not shared)."""
        return replace(self, weekly_by_day=list(self.weekly_by_day))

    # =========================================================================
    # MUTATORS
    # =========================================================================

    def set_frequency(self, freq: str) -> None:
        """Choose DAILY/WEEKLY/MONTHLY/YEARLY.

        Raises:
            ValueError: If freq is not a known frequency
        """
        if freq not in const.FREQUENCY_OPTIONS:
            raise ValueError(f"Unknown frequency: {freq}")
        self.freq = freq
        self._activate()

    def set_interval(self, interval: int) -> None:
        """Set 'every n periods', clamped to [1, 99]."""
        self.interval = constrain(
            int(interval), const.INTERVAL_MIN, const.INTERVAL_MAX
        )
        self.interval_entered = True
        self._activate()

    def clear_interval_input(self) -> None:
        """The interval input was emptied; blocks confirmation until set again."""
        self.interval_entered = False
        self._activate()

    def set_end_never(self) -> None:
        """Repeat forever."""
        self.end = const.END_NEVER
        self._activate()

    def set_end_by_date(self, end_date: DateValue | None = None) -> None:
        """End on a date. Without an argument the current end_date is reused.

        Raises:
            ValueError: If no date is given and none was set before
        """
        if end_date is not None:
            self.end_date = end_date
        if self.end_date is None:
            raise ValueError("END_BY_DATE requires an end date")
        self.end = const.END_BY_DATE
        self._activate()

    def set_end_by_count(self, count: int | None = None) -> None:
        """End after n occurrences, clamped to [1, 730].

        Without an argument the current count is kept (and clamped).
        """
        if count is not None:
            self.end_count = int(count)
            self.end_count_entered = True
        self.end_count = constrain(self.end_count, const.COUNT_MIN, const.COUNT_MAX)
        self.end = const.END_BY_COUNT
        self._activate()

    def clear_end_count_input(self) -> None:
        """The count input was emptied; blocks confirmation while END_BY_COUNT."""
        self.end_count_entered = False
        self._activate()

    def toggle_weekday(self, weekday: int, on: bool) -> None:
        """Check or uncheck a weekday (Sun = 0) for weekly repeats.

        Raises:
            ValueError: If weekday is outside 0-6
        """
        if not 0 <= weekday < const.DAYS_IN_WEEK:
            raise ValueError(f"Invalid weekday: {weekday}")
        self.weekly_by_day[weekday] = bool(on)
        self._activate()

    def set_monthly_mode(self, mode: str) -> None:
        """Repeat monthly by month day or by nth weekday.

        Raises:
            ValueError: If mode is unknown
        """
        if mode not in const.MONTHLY_MODES:
            raise ValueError(f"Unknown monthly mode: {mode}")
        self.monthly_mode = mode
        self._activate()

    def set_monthly_month_day(self, day: int) -> None:
        """Repeat on a fixed day of the month (1-31).

        Raises:
            ValueError: If day is outside 1-31
        """
        if not 1 <= day <= 31:
            raise ValueError(f"Invalid day of month: {day}")
        self.monthly_by_month_day = day
        self.monthly_mode = const.MONTHLY_BY_MONTH_DAY
        self._activate()

    def set_monthly_nth_weekday(self, weekday: int, nth: int) -> None:
        """Repeat on the nth weekday of the month (e.g. 2nd Tuesday).

        An nth above 5 is collapsed to LAST_NTH_WEEKDAY here, at edit time.
        The codec never collapses.

        Raises:
            ValueError: If weekday is outside 0-6 or nth is 0 or below -1
        """
        if not 0 <= weekday < const.DAYS_IN_WEEK:
            raise ValueError(f"Invalid weekday: {weekday}")
        if nth > const.FIFTH_WEEK_IN_A_MONTH:
            nth = const.LAST_NTH_WEEKDAY
        if not is_supported_nth_weekday(nth):
            raise ValueError(f"Invalid nth weekday: {nth}")
        self.monthly_by_weekday = weekday
        self.monthly_by_nth_weekday = nth
        self.monthly_mode = const.MONTHLY_BY_NTH_WEEKDAY
        self._activate()

    # =========================================================================
    # QUERIES
    # =========================================================================

    def is_confirmable(self) -> bool:
        """Whether the editor's OK action is available.

        NONE is always confirmable. ACTIVE requires an entered interval, at
        least one weekday for WEEKLY, an entered count for END_BY_COUNT
        and a supported nth for MONTHLY by nth weekday.
        """
        if self.state == const.RECURRENCE_STATE_NONE:
            return True
        if not self.interval_entered:
            return False
        if self.end == const.END_BY_COUNT and not self.end_count_entered:
            return False
        if self.freq == const.FREQUENCY_WEEKLY:
            return any(self.weekly_by_day)
        if (
            self.freq == const.FREQUENCY_MONTHLY
            and self.monthly_mode == const.MONTHLY_BY_NTH_WEEKDAY
        ):
            return is_supported_nth_weekday(self.monthly_by_nth_weekday)
        return True

    def resolve_repeat_option(self) -> str:
        """Map the model to a canonical option where one is equivalent."""
        if self.state == const.RECURRENCE_STATE_NONE:
            return const.RECURRENCE_OPTION_DOES_NOT_REPEAT
        if (
            self.freq == const.FREQUENCY_DAILY
            and self.interval == const.INTERVAL_DEFAULT
            and self.end == const.END_NEVER
        ):
            return const.RECURRENCE_OPTION_DAILY
        return const.RECURRENCE_OPTION_CUSTOM

    def editable_fields(self) -> dict[str, Any]:
        """Fields that matter for re-editing under the current freq/end."""
        fields: dict[str, Any] = {
            const.DATA_RECURRENCE_FREQ: self.freq,
            const.DATA_RECURRENCE_INTERVAL: self.interval,
            const.DATA_RECURRENCE_END: self.end,
        }
        if self.end == const.END_BY_DATE:
            fields[const.DATA_RECURRENCE_END_DATE] = self.end_date
        elif self.end == const.END_BY_COUNT:
            fields[const.DATA_RECURRENCE_END_COUNT] = self.end_count

        if self.freq == const.FREQUENCY_WEEKLY:
            fields[const.DATA_RECURRENCE_WEEKLY_BY_DAY] = list(self.weekly_by_day)
        elif self.freq == const.FREQUENCY_MONTHLY:
            fields[const.DATA_RECURRENCE_MONTHLY_MODE] = self.monthly_mode
            if self.monthly_mode == const.MONTHLY_BY_MONTH_DAY:
                fields[const.DATA_RECURRENCE_MONTHLY_BY_MONTH_DAY] = (
                    self.monthly_by_month_day
                )
            else:
                fields[const.DATA_RECURRENCE_MONTHLY_BY_WEEKDAY] = (
                    self.monthly_by_weekday
                )
                fields[const.DATA_RECURRENCE_MONTHLY_BY_NTH_WEEKDAY] = (
                    self.monthly_by_nth_weekday
                )
        return fields

    # =========================================================================
    # EDITOR INITIALIZATION
    # =========================================================================

    @classmethod
    def initialize(
        cls,
        start_date: DateValue,
        rule: str | None = None,
        leap_year_rule: str = const.DEFAULT_LEAP_YEAR_RULE,
    ) -> RecurrenceModel:
        """Build the model a fresh editor session starts from.

        The start date's weekday is pre-checked. If a rule is given it is
        decoded on top (a rule without BYDAY keeps the pre-checked day).
        A default end date is derived from the frequency, and the monthly
        nth-weekday fields are seeded from the start date.

        Raises:
            UnsupportedRuleShapeError: If rule cannot be represented
        """
        # Local import: rrule_codec imports this module.
        from .rrule_codec import RecurrenceRuleCodec

        start_weekday = start_date.day_of_week
        if rule:
            model = RecurrenceRuleCodec.decode(rule)
            if not any(model.weekly_by_day):
                model.weekly_by_day[start_weekday] = True
        else:
            model = cls()
            model.weekly_by_day[start_weekday] = True
        model.state = const.RECURRENCE_STATE_ACTIVE

        if model.end_date is None:
            months, years = const.DEFAULT_END_DATE_OFFSETS[model.freq]
            year, month, day = shift_months(
                start_date.year,
                start_date.month,
                start_date.day,
                months=months,
                years=years,
                rule=leap_year_rule,
            )
            model.end_date = DateValue(year, month, day)

        if model.monthly_by_nth_weekday == const.NTH_WEEKDAY_UNSET:
            nth = (start_date.day + 6) // 7
            if nth >= const.FIFTH_WEEK_IN_A_MONTH:
                nth = const.LAST_NTH_WEEKDAY
            model.monthly_by_nth_weekday = nth
            model.monthly_by_weekday = start_weekday

        const.LOGGER.debug(
            "RecurrenceModel initialized for %s (rule=%s): %s",
            start_date,
            rule or "<none>",
            model,
        )
        return model

    # =========================================================================
    # FLAT STATE
    # =========================================================================

    def as_dict(self) -> RecurrenceModelData:
        """Return every field as flat, JSON-safe state."""
        return {
            const.DATA_RECURRENCE_STATE: self.state,
            const.DATA_RECURRENCE_FREQ: self.freq,
            const.DATA_RECURRENCE_INTERVAL: self.interval,
            const.DATA_RECURRENCE_INTERVAL_ENTERED: self.interval_entered,
            const.DATA_RECURRENCE_END: self.end,
            const.DATA_RECURRENCE_END_DATE: (
                self.end_date.as_dict() if self.end_date else None
            ),
            const.DATA_RECURRENCE_END_COUNT: self.end_count,
            const.DATA_RECURRENCE_END_COUNT_ENTERED: self.end_count_entered,
            const.DATA_RECURRENCE_WEEKLY_BY_DAY: list(self.weekly_by_day),
            const.DATA_RECURRENCE_MONTHLY_MODE: self.monthly_mode,
            const.DATA_RECURRENCE_MONTHLY_BY_MONTH_DAY: self.monthly_by_month_day,
            const.DATA_RECURRENCE_MONTHLY_BY_WEEKDAY: self.monthly_by_weekday,
            const.DATA_RECURRENCE_MONTHLY_BY_NTH_WEEKDAY: self.monthly_by_nth_weekday,
        }  # type: ignore[return-value]

    @classmethod
    def from_dict(cls, data: RecurrenceModelData | dict[str, Any]) -> RecurrenceModel:
        """Rebuild verbatim from flat state (validate first via data_builders)."""
        end_date = data.get(const.DATA_RECURRENCE_END_DATE)
        return cls(
            state=data[const.DATA_RECURRENCE_STATE],
            freq=data[const.DATA_RECURRENCE_FREQ],
            interval=int(data[const.DATA_RECURRENCE_INTERVAL]),
            interval_entered=bool(data[const.DATA_RECURRENCE_INTERVAL_ENTERED]),
            end=data[const.DATA_RECURRENCE_END],
            end_date=DateValue.from_dict(end_date) if end_date else None,
            end_count=int(data[const.DATA_RECURRENCE_END_COUNT]),
            end_count_entered=bool(data[const.DATA_RECURRENCE_END_COUNT_ENTERED]),
            weekly_by_day=[bool(v) for v in data[const.DATA_RECURRENCE_WEEKLY_BY_DAY]],
            monthly_mode=data[const.DATA_RECURRENCE_MONTHLY_MODE],
            monthly_by_month_day=int(data[const.DATA_RECURRENCE_MONTHLY_BY_MONTH_DAY]),
            monthly_by_weekday=int(data[const.DATA_RECURRENCE_MONTHLY_BY_WEEKDAY]),
            monthly_by_nth_weekday=int(
                data[const.DATA_RECURRENCE_MONTHLY_BY_NTH_WEEKDAY]
            ),
        )
