# File: const.py
"""Constants for the picker core.

This file centralizes recurrence vocabulary, rule-grammar keywords, selection
and rendering identifiers, flat-state keys and configuration defaults for
consistency across engines, managers and builders.
"""

import logging

# ------------------------------------------------------------------------------------------------
# General
# ------------------------------------------------------------------------------------------------
PICKERCORE_TITLE = "Picker Core"

# Logger
LOGGER = logging.getLogger(__package__)

# Sentinel used by ActivatedRange / day lookups for "nothing here"
NO_DAY = -1

DAYS_IN_WEEK = 7
MONTHS_IN_YEAR = 12

# ------------------------------------------------------------------------------------------------
# Calendar
# ------------------------------------------------------------------------------------------------

# Weekday indices (Sun = 0 ... Sat = 6)
WEEKDAY_SUNDAY = 0
WEEKDAY_MONDAY = 1
WEEKDAY_TUESDAY = 2
WEEKDAY_WEDNESDAY = 3
WEEKDAY_THURSDAY = 4
WEEKDAY_FRIDAY = 5
WEEKDAY_SATURDAY = 6

# Leap year rules
LEAP_YEAR_RULE_SIMPLE = "simple"  # year % 4 == 0
LEAP_YEAR_RULE_GREGORIAN = "gregorian"  # Julian up to 1582, Gregorian after
LEAP_YEAR_RULES = [LEAP_YEAR_RULE_SIMPLE, LEAP_YEAR_RULE_GREGORIAN]
GREGORIAN_CHANGE_YEAR = 1582

# ------------------------------------------------------------------------------------------------
# Recurrence Model
# ------------------------------------------------------------------------------------------------

# Recurrence state
RECURRENCE_STATE_NONE = "none"
RECURRENCE_STATE_ACTIVE = "active"

# Frequencies
FREQUENCY_DAILY = "daily"
FREQUENCY_WEEKLY = "weekly"
FREQUENCY_MONTHLY = "monthly"
FREQUENCY_YEARLY = "yearly"
FREQUENCY_OPTIONS = [
    FREQUENCY_DAILY,
    FREQUENCY_WEEKLY,
    FREQUENCY_MONTHLY,
    FREQUENCY_YEARLY,
]

# End conditions
END_NEVER = "never"
END_BY_DATE = "by_date"
END_BY_COUNT = "by_count"
END_OPTIONS = [END_NEVER, END_BY_DATE, END_BY_COUNT]

# Monthly repeat modes
MONTHLY_BY_MONTH_DAY = "by_month_day"
MONTHLY_BY_NTH_WEEKDAY = "by_nth_weekday"
MONTHLY_MODES = [MONTHLY_BY_MONTH_DAY, MONTHLY_BY_NTH_WEEKDAY]

# Limits and defaults
INTERVAL_MIN = 1
INTERVAL_MAX = 99
INTERVAL_DEFAULT = 1
COUNT_MIN = 1
COUNT_MAX = 730
COUNT_DEFAULT = 5

# Special values in monthly_by_nth_weekday
NTH_WEEKDAY_UNSET = 0
FIFTH_WEEK_IN_A_MONTH = 5
LAST_NTH_WEEKDAY = -1
SUPPORTED_NTH_WEEKDAYS = frozenset({1, 2, 3, 4, 5, LAST_NTH_WEEKDAY})

# Default end date offsets per frequency: (months, years)
DEFAULT_END_DATE_OFFSETS: dict[str, tuple[int, int]] = {
    FREQUENCY_DAILY: (1, 0),
    FREQUENCY_WEEKLY: (1, 0),
    FREQUENCY_MONTHLY: (3, 0),
    FREQUENCY_YEARLY: (0, 3),
}

# Canonical recurrence options offered to the host
RECURRENCE_OPTION_DOES_NOT_REPEAT = "does_not_repeat"
RECURRENCE_OPTION_DAILY = "daily"
RECURRENCE_OPTION_WEEKLY = "weekly"
RECURRENCE_OPTION_MONTHLY = "monthly"
RECURRENCE_OPTION_YEARLY = "yearly"
RECURRENCE_OPTION_CUSTOM = "custom"
RECURRENCE_OPTIONS = [
    RECURRENCE_OPTION_DOES_NOT_REPEAT,
    RECURRENCE_OPTION_DAILY,
    RECURRENCE_OPTION_WEEKLY,
    RECURRENCE_OPTION_MONTHLY,
    RECURRENCE_OPTION_YEARLY,
    RECURRENCE_OPTION_CUSTOM,
]

# Recurrence manager views
RECURRENCE_VIEW_OPTIONS_MENU = "options_menu"
RECURRENCE_VIEW_CREATOR = "creator"

# ------------------------------------------------------------------------------------------------
# Rule Grammar (RRULE subset)
# ------------------------------------------------------------------------------------------------
RRULE_PREFIX = "RRULE:"
RRULE_PART_SEPARATOR = ";"
RRULE_VALUE_SEPARATOR = ","

RRULE_FREQ = "FREQ"
RRULE_INTERVAL = "INTERVAL"
RRULE_UNTIL = "UNTIL"
RRULE_COUNT = "COUNT"
RRULE_WKST = "WKST"
RRULE_BYDAY = "BYDAY"
RRULE_BYMONTHDAY = "BYMONTHDAY"

# Parts the grammar accepts but the model cannot carry (parsed, then ignored)
RRULE_IGNORED_PARTS = frozenset(
    {
        "BYSECOND",
        "BYMINUTE",
        "BYHOUR",
        "BYYEARDAY",
        "BYWEEKNO",
        "BYMONTH",
        "BYSETPOS",
    }
)

# Frequencies the grammar knows about
RRULE_FREQ_SECONDLY = "SECONDLY"
RRULE_FREQ_MINUTELY = "MINUTELY"
RRULE_FREQ_HOURLY = "HOURLY"
RRULE_FREQ_DAILY = "DAILY"
RRULE_FREQ_WEEKLY = "WEEKLY"
RRULE_FREQ_MONTHLY = "MONTHLY"
RRULE_FREQ_YEARLY = "YEARLY"
RRULE_KNOWN_FREQUENCIES = frozenset(
    {
        RRULE_FREQ_SECONDLY,
        RRULE_FREQ_MINUTELY,
        RRULE_FREQ_HOURLY,
        RRULE_FREQ_DAILY,
        RRULE_FREQ_WEEKLY,
        RRULE_FREQ_MONTHLY,
        RRULE_FREQ_YEARLY,
    }
)

FREQUENCY_TO_RRULE: dict[str, str] = {
    FREQUENCY_DAILY: RRULE_FREQ_DAILY,
    FREQUENCY_WEEKLY: RRULE_FREQ_WEEKLY,
    FREQUENCY_MONTHLY: RRULE_FREQ_MONTHLY,
    FREQUENCY_YEARLY: RRULE_FREQ_YEARLY,
}
RRULE_TO_FREQUENCY: dict[str, str] = {v: k for k, v in FREQUENCY_TO_RRULE.items()}

# Weekday codes, indexed Sun = 0 ... Sat = 6
WEEKDAY_CODES = ["SU", "MO", "TU", "WE", "TH", "FR", "SA"]
DEFAULT_WEEK_START = "SU"

# Rejection reasons (UnsupportedRuleShapeError.reason)
RULE_REJECT_SYNTAX = "syntax"
RULE_REJECT_FREQUENCY = "unsupported_frequency"
RULE_REJECT_COUNT_AND_UNTIL = "count_and_until"
RULE_REJECT_MULTIPLE_NTH_WEEKDAYS = "multiple_nth_weekdays"
RULE_REJECT_NTH_WEEKDAY_NOT_MONTHLY = "nth_weekday_not_monthly"
RULE_REJECT_UNSUPPORTED_NTH = "unsupported_nth"
RULE_REJECT_MULTIPLE_MONTH_DAYS = "multiple_month_days"
RULE_REJECT_MONTHLY_MULTIPLE_WEEKDAYS = "monthly_multiple_weekdays"
RULE_REJECT_MONTHLY_MIXED = "monthly_mixed_constraints"
RULE_REJECT_MONTHLY_WEEKDAY_WITHOUT_NTH = "monthly_weekday_without_nth"
RULE_REJECT_UNSUPPORTED_MONTH_DAY = "unsupported_month_day"

# Invalid model reasons (InvalidModelStateError.reason)
MODEL_ERROR_NO_RECURRENCE = "no_recurrence"
MODEL_ERROR_END_DATE_MISSING = "end_date_missing"
MODEL_ERROR_COUNT_NOT_POSITIVE = "count_not_positive"
MODEL_ERROR_UNSUPPORTED_NTH = "unsupported_nth"
MODEL_ERROR_UNREPRESENTABLE = "unrepresentable"

# ------------------------------------------------------------------------------------------------
# Date Selection / Month Grid
# ------------------------------------------------------------------------------------------------

# Selection kinds
SELECTION_SINGLE = "single"
SELECTION_RANGE = "range"

# Cell highlight shapes (consumed by the drawing layer)
SHAPE_NONE = "none"
SHAPE_CIRCLE = "circle"
SHAPE_RECT = "rect"
SHAPE_LEFT_ROUNDED = "left_rounded"
SHAPE_RIGHT_ROUNDED = "right_rounded"

# Range header items (which end of the range a tap edits)
RANGE_ITEM_NONE = "none"
RANGE_ITEM_START = "start"
RANGE_ITEM_END = "end"
RANGE_ITEMS = [RANGE_ITEM_NONE, RANGE_ITEM_START, RANGE_ITEM_END]

# Range gesture states
GESTURE_STATE_IDLE = "idle"
GESTURE_STATE_DRAGGING = "dragging"

# Default selectable window when the host gives none
DEFAULT_MIN_YEAR = 1900
DEFAULT_MAX_YEAR = 2100

# ------------------------------------------------------------------------------------------------
# Picker Options (configuration)
# ------------------------------------------------------------------------------------------------

# Display option flags
ACTIVATE_DATE_PICKER = 0x01
ACTIVATE_TIME_PICKER = 0x02
ACTIVATE_RECURRENCE_PICKER = 0x04
ACTIVATE_ALL_PICKERS = (
    ACTIVATE_DATE_PICKER | ACTIVATE_TIME_PICKER | ACTIVATE_RECURRENCE_PICKER
)

# Pickers
PICKER_DATE = "date_picker"
PICKER_TIME = "time_picker"
PICKER_RECURRENCE = "repeat_option_picker"
PICKER_FLAGS: dict[str, int] = {
    PICKER_DATE: ACTIVATE_DATE_PICKER,
    PICKER_TIME: ACTIVATE_TIME_PICKER,
    PICKER_RECURRENCE: ACTIVATE_RECURRENCE_PICKER,
}

# Option keys
CONF_DISPLAY_OPTIONS = "display_options"
CONF_PICKER_TO_SHOW = "picker_to_show"
CONF_DATE = "date"
CONF_MIN_DATE = "min_date"
CONF_MAX_DATE = "max_date"
CONF_HOUR = "hour"
CONF_MINUTE = "minute"
CONF_IS_24_HOUR_VIEW = "is_24_hour_view"
CONF_RECURRENCE_RULE = "recurrence_rule"
CONF_CAN_PICK_DATE_RANGE = "can_pick_date_range"
CONF_FIRST_DAY_OF_WEEK = "first_day_of_week"
CONF_LEAP_YEAR_RULE = "leap_year_rule"
CONF_WEEK_START = "week_start"

# Option defaults
DEFAULT_DISPLAY_OPTIONS = ACTIVATE_ALL_PICKERS
DEFAULT_PICKER_TO_SHOW = PICKER_DATE
DEFAULT_HOUR = 0
DEFAULT_MINUTE = 0
DEFAULT_IS_24_HOUR_VIEW = False
DEFAULT_RECURRENCE_RULE = ""
DEFAULT_CAN_PICK_DATE_RANGE = False
DEFAULT_FIRST_DAY_OF_WEEK = WEEKDAY_SUNDAY
DEFAULT_LEAP_YEAR_RULE = LEAP_YEAR_RULE_SIMPLE

# Option validation error keys
ERROR_INVALID_DISPLAY_OPTIONS = "invalid_display_options"
ERROR_PICKER_NOT_ACTIVE = "picker_not_active"
ERROR_INVALID_DATE = "invalid_date"
ERROR_MIN_AFTER_MAX = "min_date_after_max_date"
ERROR_DATE_OUTSIDE_WINDOW = "date_outside_window"
ERROR_INVALID_STATE = "invalid_state"

# ------------------------------------------------------------------------------------------------
# Flat State Keys
# ------------------------------------------------------------------------------------------------
DATA_YEAR = "year"
DATA_MONTH = "month"
DATA_DAY = "day"

DATA_RANGE_FIRST = "first"
DATA_RANGE_SECOND = "second"

DATA_RECURRENCE_STATE = "state"
DATA_RECURRENCE_FREQ = "freq"
DATA_RECURRENCE_INTERVAL = "interval"
DATA_RECURRENCE_INTERVAL_ENTERED = "interval_entered"
DATA_RECURRENCE_END = "end"
DATA_RECURRENCE_END_DATE = "end_date"
DATA_RECURRENCE_END_COUNT = "end_count"
DATA_RECURRENCE_END_COUNT_ENTERED = "end_count_entered"
DATA_RECURRENCE_WEEKLY_BY_DAY = "weekly_by_day"
DATA_RECURRENCE_MONTHLY_MODE = "monthly_mode"
DATA_RECURRENCE_MONTHLY_BY_MONTH_DAY = "monthly_by_month_day"
DATA_RECURRENCE_MONTHLY_BY_WEEKDAY = "monthly_by_weekday"
DATA_RECURRENCE_MONTHLY_BY_NTH_WEEKDAY = "monthly_by_nth_weekday"

DATA_SELECTED_DATE = "selected_date"
DATA_ACTIVE_RANGE_ITEM = "active_range_item"
DATA_CURRENT_POSITION = "current_position"
DATA_RECURRENCE_OPTION = "recurrence_option"
DATA_RECURRENCE_RULE = "recurrence_rule"
DATA_RECURRENCE_VIEW = "recurrence_view"
DATA_RECURRENCE_MODEL = "recurrence_model"
DATA_HOUR = "hour"
DATA_MINUTE = "minute"

# ------------------------------------------------------------------------------------------------
# Manager Events
# ------------------------------------------------------------------------------------------------
EVENT_DATE_CHANGED = "date_changed"
EVENT_RANGE_SELECTION_STARTED = "range_selection_started"
EVENT_RANGE_SELECTION_UPDATED = "range_selection_updated"
EVENT_RANGE_SELECTION_ENDED = "range_selection_ended"
EVENT_RECURRENCE_SET = "recurrence_set"
EVENT_RECURRENCE_CANCELLED = "recurrence_cancelled"
EVENT_VALIDITY_CHANGED = "validity_changed"
EVENT_TIME_CHANGED = "time_changed"
