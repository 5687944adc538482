"""Engine modules for the picker core.

Contains pure computation engines:
- rrule_codec: RecurrenceModel <-> rule text, expressibility checks
- recurrence_engine: RecurrenceModel and its edit transitions
- month_grid_engine: Selection projection, cell shapes, month pager
- range_gesture_engine: Press-and-drag range resolver
- selection_engine: Tap and header selection rules
"""

# Use relative imports within package to avoid mypy module resolution issues
from .month_grid_engine import MonthGridEngine, MonthPager
from .range_gesture_engine import RangeGestureResolver
from .recurrence_engine import RecurrenceModel, is_supported_nth_weekday
from .rrule_codec import (
    InvalidModelStateError,
    RecurrenceRuleCodec,
    RuleSyntaxError,
    UnsupportedRuleShapeError,
)
from .selection_engine import SelectionEngine, TapResult

__all__ = [
    "InvalidModelStateError",
    "MonthGridEngine",
    "MonthPager",
    "RangeGestureResolver",
    "RecurrenceModel",
    "RecurrenceRuleCodec",
    "RuleSyntaxError",
    "SelectionEngine",
    "TapResult",
    "UnsupportedRuleShapeError",
    "is_supported_nth_weekday",
]
