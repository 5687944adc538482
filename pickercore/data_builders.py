"""Configuration and flat-state builders.

This module is the SINGLE SOURCE OF TRUTH for:
- Picker option defaults
- Picker option validation (business rules)
- Rebuilding DateRange / RecurrenceModel from restored flat state

### Build Functions
`build_picker_options()` takes user input (CONF_* keys), applies the
const.DEFAULT_* values for missing fields, validates, and returns a complete
PickerOptionsData. It raises PickerValidationError on the first problem.

### Validation Functions
`validate_picker_options()` performs the business rule checks on already
shaped options and returns a dict of errors (empty if valid).

### Restore Functions
`restore_date_range()` / `restore_recurrence_model()` check flat state with
voluptuous schemas before rebuilding objects, so a corrupt or foreign state
blob fails loudly instead of producing an invalid model.

Consumers:
- managers/*.py (session setup and restore)
"""

from __future__ import annotations

from datetime import date
from typing import Any

import voluptuous as vol

from . import const
from .engines.recurrence_engine import RecurrenceModel, is_supported_nth_weekday
from .models import DateRange, DateValue
from .type_defs import DateValueData, PickerOptionsData
from .utils.dt_utils import MAX_YEAR, MIN_YEAR, is_valid_date

# ==============================================================================
# EXCEPTIONS
# ==============================================================================


class PickerValidationError(Exception):
    """Invalid configuration or restored state.

    Attributes:
        field: The CONF_* / DATA_* key that failed validation
        error_key: The ERROR_* constant describing the failure
        placeholders: Optional details for the message

    Example:
        raise PickerValidationError(
            field=const.CONF_MIN_DATE,
            error_key=const.ERROR_MIN_AFTER_MAX,
        )
    """

    def __init__(
        self,
        field: str,
        error_key: str,
        placeholders: dict[str, str] | None = None,
    ) -> None:
        """Initialize PickerValidationError."""
        self.field = field
        self.error_key = error_key
        self.placeholders = placeholders or {}
        super().__init__(f"{field}: {error_key}")


# ==============================================================================
# SCHEMA HELPERS
# ==============================================================================


def coerce_date_value(value: Any) -> DateValueData:
    """Accept a DateValue, datetime.date or flat dict and return flat state.

    Validity of the day is checked later under the configured leap rule.

    Raises:
        vol.Invalid: If the value is not date-shaped
    """
    if isinstance(value, DateValue):
        return value.as_dict()
    if isinstance(value, date):
        return DateValue.from_date(value).as_dict()
    if isinstance(value, dict):
        return DATE_VALUE_SCHEMA(value)
    raise vol.Invalid(f"Expected a date, got {type(value).__name__}")


def _weekday_code(value: Any) -> str:
    code = str(value).upper()
    if code not in const.WEEKDAY_CODES:
        raise vol.Invalid(f"Invalid weekday code: {value}")
    return code


def _nth_weekday(value: Any) -> int:
    nth = int(value)
    if nth != const.NTH_WEEKDAY_UNSET and not is_supported_nth_weekday(nth):
        raise vol.Invalid(f"Invalid nth weekday: {value}")
    return nth


DATE_VALUE_SCHEMA = vol.Schema(
    {
        vol.Required(const.DATA_YEAR): vol.All(
            vol.Coerce(int), vol.Range(min=MIN_YEAR, max=MAX_YEAR)
        ),
        vol.Required(const.DATA_MONTH): vol.All(
            vol.Coerce(int), vol.Range(min=0, max=const.MONTHS_IN_YEAR - 1)
        ),
        vol.Required(const.DATA_DAY): vol.All(
            vol.Coerce(int), vol.Range(min=1, max=31)
        ),
    }
)

DATE_RANGE_SCHEMA = vol.Schema(
    {
        vol.Required(const.DATA_RANGE_FIRST): DATE_VALUE_SCHEMA,
        vol.Required(const.DATA_RANGE_SECOND): DATE_VALUE_SCHEMA,
    }
)

RECURRENCE_MODEL_SCHEMA = vol.Schema(
    {
        vol.Required(const.DATA_RECURRENCE_STATE): vol.In(
            [const.RECURRENCE_STATE_NONE, const.RECURRENCE_STATE_ACTIVE]
        ),
        vol.Required(const.DATA_RECURRENCE_FREQ): vol.In(const.FREQUENCY_OPTIONS),
        vol.Required(const.DATA_RECURRENCE_INTERVAL): vol.All(
            vol.Coerce(int),
            vol.Range(min=const.INTERVAL_MIN, max=const.INTERVAL_MAX),
        ),
        vol.Required(const.DATA_RECURRENCE_INTERVAL_ENTERED): bool,
        vol.Required(const.DATA_RECURRENCE_END): vol.In(const.END_OPTIONS),
        vol.Required(const.DATA_RECURRENCE_END_DATE): vol.Any(None, DATE_VALUE_SCHEMA),
        vol.Required(const.DATA_RECURRENCE_END_COUNT): vol.All(
            vol.Coerce(int), vol.Range(min=const.COUNT_MIN, max=const.COUNT_MAX)
        ),
        vol.Required(const.DATA_RECURRENCE_END_COUNT_ENTERED): bool,
        vol.Required(const.DATA_RECURRENCE_WEEKLY_BY_DAY): vol.All(
            [bool], vol.Length(min=const.DAYS_IN_WEEK, max=const.DAYS_IN_WEEK)
        ),
        vol.Required(const.DATA_RECURRENCE_MONTHLY_MODE): vol.In(const.MONTHLY_MODES),
        vol.Required(const.DATA_RECURRENCE_MONTHLY_BY_MONTH_DAY): vol.All(
            vol.Coerce(int), vol.Range(min=0, max=31)
        ),
        vol.Required(const.DATA_RECURRENCE_MONTHLY_BY_WEEKDAY): vol.All(
            vol.Coerce(int), vol.Range(min=0, max=const.DAYS_IN_WEEK - 1)
        ),
        vol.Required(const.DATA_RECURRENCE_MONTHLY_BY_NTH_WEEKDAY): _nth_weekday,
    }
)

PICKER_OPTIONS_SCHEMA = vol.Schema(
    {
        vol.Optional(
            const.CONF_DISPLAY_OPTIONS, default=const.DEFAULT_DISPLAY_OPTIONS
        ): vol.Coerce(int),
        vol.Optional(
            const.CONF_PICKER_TO_SHOW, default=const.DEFAULT_PICKER_TO_SHOW
        ): vol.In(list(const.PICKER_FLAGS)),
        vol.Optional(const.CONF_DATE): coerce_date_value,
        vol.Optional(const.CONF_MIN_DATE): coerce_date_value,
        vol.Optional(const.CONF_MAX_DATE): coerce_date_value,
        vol.Optional(const.CONF_HOUR, default=const.DEFAULT_HOUR): vol.All(
            vol.Coerce(int), vol.Range(min=0, max=23)
        ),
        vol.Optional(const.CONF_MINUTE, default=const.DEFAULT_MINUTE): vol.All(
            vol.Coerce(int), vol.Range(min=0, max=59)
        ),
        vol.Optional(
            const.CONF_IS_24_HOUR_VIEW, default=const.DEFAULT_IS_24_HOUR_VIEW
        ): bool,
        vol.Optional(
            const.CONF_RECURRENCE_RULE, default=const.DEFAULT_RECURRENCE_RULE
        ): vol.Any(None, str),
        vol.Optional(
            const.CONF_CAN_PICK_DATE_RANGE, default=const.DEFAULT_CAN_PICK_DATE_RANGE
        ): bool,
        vol.Optional(
            const.CONF_FIRST_DAY_OF_WEEK, default=const.DEFAULT_FIRST_DAY_OF_WEEK
        ): vol.All(vol.Coerce(int), vol.Range(min=0, max=const.DAYS_IN_WEEK - 1)),
        vol.Optional(
            const.CONF_LEAP_YEAR_RULE, default=const.DEFAULT_LEAP_YEAR_RULE
        ): vol.In(const.LEAP_YEAR_RULES),
        vol.Optional(
            const.CONF_WEEK_START, default=const.DEFAULT_WEEK_START
        ): _weekday_code,
    }
)


# ==============================================================================
# PICKER OPTIONS
# ==============================================================================


def validate_picker_options(data: dict[str, Any]) -> dict[str, str]:
    """Validate picker option business rules.

    Works on schema-shaped data (CONF_* keys, dates as flat dicts).

    Returns:
        Dict of errors: {field: error_key}
        Empty dict means validation passed.

    Validation Rules:
        1. display_options non-zero with no unknown bits
        2. picker_to_show names an active picker
        3. date, min_date, max_date are real days under the leap year rule
        4. min_date <= max_date
        5. date lies inside [min_date, max_date]
    """
    errors: dict[str, str] = {}

    # === 1. Display flags ===
    flags = int(data.get(const.CONF_DISPLAY_OPTIONS, const.DEFAULT_DISPLAY_OPTIONS))
    if flags <= 0 or flags & ~const.ACTIVATE_ALL_PICKERS:
        errors[const.CONF_DISPLAY_OPTIONS] = const.ERROR_INVALID_DISPLAY_OPTIONS
        return errors

    # === 2. Picker to show must be active ===
    picker = data.get(const.CONF_PICKER_TO_SHOW, const.DEFAULT_PICKER_TO_SHOW)
    if not flags & const.PICKER_FLAGS.get(picker, 0):
        errors[const.CONF_PICKER_TO_SHOW] = const.ERROR_PICKER_NOT_ACTIVE
        return errors

    # === 3. Dates are real days ===
    leap_rule = data.get(const.CONF_LEAP_YEAR_RULE, const.DEFAULT_LEAP_YEAR_RULE)
    dates: dict[str, DateValue] = {}
    for key in (const.CONF_DATE, const.CONF_MIN_DATE, const.CONF_MAX_DATE):
        value = data.get(key)
        if value is None:
            continue
        if not is_valid_date(
            value[const.DATA_YEAR],
            value[const.DATA_MONTH],
            value[const.DATA_DAY],
            leap_rule,
        ):
            errors[key] = const.ERROR_INVALID_DATE
            return errors
        dates[key] = DateValue.from_dict(value)

    # === 4. Window ordering ===
    min_date = dates.get(const.CONF_MIN_DATE)
    max_date = dates.get(const.CONF_MAX_DATE)
    if min_date and max_date and min_date > max_date:
        errors[const.CONF_MIN_DATE] = const.ERROR_MIN_AFTER_MAX
        return errors

    # === 5. Initial date inside the window ===
    selected = dates.get(const.CONF_DATE)
    if selected and (
        (min_date and selected < min_date) or (max_date and selected > max_date)
    ):
        errors[const.CONF_DATE] = const.ERROR_DATE_OUTSIDE_WINDOW

    return errors


def build_picker_options(
    user_input: dict[str, Any] | None = None,
    *,
    today: DateValue | None = None,
) -> PickerOptionsData:
    """Build complete, validated picker options.

    Args:
        user_input: CONF_* keys, any subset. Dates may be DateValue,
            datetime.date or flat dicts.
        today: Default for CONF_DATE (defaults to the current local date)

    Returns:
        Complete PickerOptionsData

    Raises:
        PickerValidationError: On the first schema or business rule failure

    Examples:
        build_picker_options()  # all defaults
        build_picker_options({CONF_DISPLAY_OPTIONS: ACTIVATE_DATE_PICKER})
    """
    try:
        data = PICKER_OPTIONS_SCHEMA(dict(user_input or {}))
    except vol.Invalid as err:
        field = str(err.path[0]) if err.path else const.CONF_DISPLAY_OPTIONS
        const.LOGGER.debug("Picker options rejected by schema: %s", err)
        raise PickerValidationError(
            field, const.ERROR_INVALID_STATE, {"detail": str(err)}
        ) from err

    if data.get(const.CONF_DATE) is None:
        data[const.CONF_DATE] = (today or DateValue.from_date(date.today())).as_dict()
    if data.get(const.CONF_MIN_DATE) is None:
        data[const.CONF_MIN_DATE] = DateValue(const.DEFAULT_MIN_YEAR, 0, 1).as_dict()
    if data.get(const.CONF_MAX_DATE) is None:
        data[const.CONF_MAX_DATE] = DateValue(const.DEFAULT_MAX_YEAR, 11, 31).as_dict()
    if data[const.CONF_RECURRENCE_RULE] is None:
        data[const.CONF_RECURRENCE_RULE] = const.DEFAULT_RECURRENCE_RULE

    errors = validate_picker_options(data)
    if errors:
        field, error_key = next(iter(errors.items()))
        raise PickerValidationError(field, error_key)

    return PickerOptionsData(
        display_options=data[const.CONF_DISPLAY_OPTIONS],
        picker_to_show=data[const.CONF_PICKER_TO_SHOW],
        date=data[const.CONF_DATE],
        min_date=data[const.CONF_MIN_DATE],
        max_date=data[const.CONF_MAX_DATE],
        hour=data[const.CONF_HOUR],
        minute=data[const.CONF_MINUTE],
        is_24_hour_view=data[const.CONF_IS_24_HOUR_VIEW],
        recurrence_rule=data[const.CONF_RECURRENCE_RULE],
        can_pick_date_range=data[const.CONF_CAN_PICK_DATE_RANGE],
        first_day_of_week=data[const.CONF_FIRST_DAY_OF_WEEK],
        leap_year_rule=data[const.CONF_LEAP_YEAR_RULE],
        week_start=data[const.CONF_WEEK_START],
    )


def is_picker_active(options: PickerOptionsData, picker: str) -> bool:
    """True if the display flags enable picker (PICKER_DATE, ...)."""
    return bool(options[const.CONF_DISPLAY_OPTIONS] & const.PICKER_FLAGS[picker])


# ==============================================================================
# FLAT STATE RESTORE
# ==============================================================================


def restore_date_range(
    data: dict[str, Any],
    leap_year_rule: str = const.DEFAULT_LEAP_YEAR_RULE,
) -> DateRange:
    """Rebuild a DateRange from flat state.

    Raises:
        PickerValidationError: If the state is malformed or names a bad day
    """
    try:
        clean = DATE_RANGE_SCHEMA(data)
        return DateRange(
            _restore_date(clean[const.DATA_RANGE_FIRST], leap_year_rule),
            _restore_date(clean[const.DATA_RANGE_SECOND], leap_year_rule),
        )
    except (vol.Invalid, ValueError) as err:
        raise PickerValidationError(
            const.DATA_SELECTED_DATE, const.ERROR_INVALID_STATE, {"detail": str(err)}
        ) from err


def restore_recurrence_model(
    data: dict[str, Any],
    leap_year_rule: str = const.DEFAULT_LEAP_YEAR_RULE,
) -> RecurrenceModel:
    """Rebuild a RecurrenceModel from flat state, every field verbatim.

    Raises:
        PickerValidationError: If the state is malformed
    """
    try:
        clean = RECURRENCE_MODEL_SCHEMA(data)
        end_date = clean[const.DATA_RECURRENCE_END_DATE]
        if end_date is not None:
            _restore_date(end_date, leap_year_rule)
        if (
            clean[const.DATA_RECURRENCE_END] == const.END_BY_DATE
            and end_date is None
        ):
            raise vol.Invalid("END_BY_DATE without an end date")
        return RecurrenceModel.from_dict(clean)
    except (vol.Invalid, ValueError) as err:
        raise PickerValidationError(
            const.DATA_RECURRENCE_MODEL,
            const.ERROR_INVALID_STATE,
            {"detail": str(err)},
        ) from err


def _restore_date(data: DateValueData, leap_year_rule: str) -> DateValue:
    return DateValue.create(
        data[const.DATA_YEAR],
        data[const.DATA_MONTH],
        data[const.DATA_DAY],
        leap_year_rule,
    )
