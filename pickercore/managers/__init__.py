"""Manager modules for the picker core.

Managers own one picking session's mutable state and delegate all rules
to the engines. Each notifies at most one consumer.
"""

from .base_manager import BaseManager
from .date_picker_manager import DatePickerManager
from .picker_manager import PickerManager, PickerResult
from .recurrence_manager import RecurrenceManager

__all__ = [
    "BaseManager",
    "DatePickerManager",
    "PickerManager",
    "PickerResult",
    "RecurrenceManager",
]
