"""Picker core: date / date-range selection and recurrence rule editing.

The pure logic behind a composite date, time and recurrence picker:
- RRULE-style codec for a structured recurrence model
- Month-grid projection of a date selection and cell highlight shapes
- Tap and press-and-drag range selection
- Session managers with flat, restorable state

Rendering, hit-testing and platform state persistence stay with the host.
"""

from .data_builders import PickerValidationError, build_picker_options
from .engines import (
    InvalidModelStateError,
    MonthGridEngine,
    MonthPager,
    RangeGestureResolver,
    RecurrenceModel,
    RecurrenceRuleCodec,
    RuleSyntaxError,
    SelectionEngine,
    UnsupportedRuleShapeError,
)
from .managers import PickerManager, PickerResult
from .models import (
    ActivatedRange,
    CellState,
    DateRange,
    DateValue,
    MonthDescriptor,
    OutOfRangeDateError,
    TimeOfDay,
)

__all__ = [
    "ActivatedRange",
    "CellState",
    "DateRange",
    "DateValue",
    "InvalidModelStateError",
    "MonthDescriptor",
    "MonthGridEngine",
    "MonthPager",
    "OutOfRangeDateError",
    "PickerManager",
    "PickerResult",
    "PickerValidationError",
    "RangeGestureResolver",
    "RecurrenceModel",
    "RecurrenceRuleCodec",
    "RuleSyntaxError",
    "SelectionEngine",
    "TimeOfDay",
    "UnsupportedRuleShapeError",
    "build_picker_options",
]
