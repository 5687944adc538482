"""Shared fixtures for picker core tests."""

from __future__ import annotations

from typing import Any

import pytest

from pickercore import const
from pickercore.data_builders import build_picker_options
from pickercore.models import DateValue, MonthDescriptor
from pickercore.type_defs import PickerOptionsData


class EventRecorder:
    """Single-consumer callback that records (event, payload) pairs."""

    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    def __call__(self, event: str, payload: dict[str, Any]) -> None:
        self.events.append((event, payload))

    @property
    def names(self) -> list[str]:
        return [event for event, _ in self.events]

    def last(self, event: str) -> dict[str, Any]:
        """Payload of the most recent occurrence of event."""
        for name, payload in reversed(self.events):
            if name == event:
                return payload
        raise AssertionError(f"event {event} not emitted; got {self.names}")


@pytest.fixture
def recorder() -> EventRecorder:
    """Fresh event recorder."""
    return EventRecorder()


@pytest.fixture
def jan_2024() -> MonthDescriptor:
    """Unrestricted January 2024 page."""
    return MonthDescriptor.create(0, 2024)


@pytest.fixture
def window_2024_options() -> PickerOptionsData:
    """Options with a one-year window, range picking on, all pickers active."""
    return build_picker_options(
        {
            const.CONF_DATE: DateValue(2024, 0, 20),
            const.CONF_MIN_DATE: DateValue(2024, 0, 10),
            const.CONF_MAX_DATE: DateValue(2024, 11, 20),
            const.CONF_CAN_PICK_DATE_RANGE: True,
        }
    )
