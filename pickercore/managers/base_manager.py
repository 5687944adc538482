"""Base manager class for picker session managers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from .. import const

if TYPE_CHECKING:
    from collections.abc import Callable

    from ..type_defs import PickerOptionsData

    EventCallback = Callable[[str, dict[str, Any]], Any]


class BaseManager(ABC):
    """Base class for picker managers with single-subscriber events.

    Provides:
    - Event emitting (emit) to the one registered consumer
    - Consumer registration (listen), replacing any previous consumer
    - Flat state save/restore contract (as_dict / restore)

    Managers own mutable session state; all computation is delegated to
    the engines.

    Subclasses must implement:
    - as_dict(): Flat, JSON-safe session state
    - restore(): Rebuild session state from as_dict() output
    """

    def __init__(self, options: PickerOptionsData) -> None:
        """Initialize manager.

        Args:
            options: Validated picker options (data_builders.build_picker_options)
        """
        self.options = options
        self._callback: EventCallback | None = None

    def emit(self, event: str, **payload: Any) -> None:
        """Notify the consumer synchronously.

        Args:
            event: Event constant (e.g., const.EVENT_DATE_CHANGED)
            **payload: Event data passed to the consumer as one dict

        Example:
            self.emit(
                const.EVENT_RANGE_SELECTION_UPDATED,
                selected_date=date_range.copy(),
            )
        """
        const.LOGGER.debug(
            "%s emitting '%s' with payload keys: %s",
            self.__class__.__name__,
            event,
            list(payload.keys()),
        )
        if self._callback is not None:
            self._callback(event, payload)

    def listen(self, callback: EventCallback | None) -> None:
        """Register the single event consumer (None unsubscribes).

        Example:
            def _on_event(event: str, payload: dict[str, Any]) -> None:
                if event == const.EVENT_DATE_CHANGED:
                    render(payload["selected_date"])

            manager.listen(_on_event)
        """
        if self._callback is not None and callback is not None:
            const.LOGGER.debug(
                "%s replacing existing event consumer", self.__class__.__name__
            )
        self._callback = callback

    @abstractmethod
    def as_dict(self) -> dict[str, Any]:
        """Return flat session state for host-side persistence."""

    @abstractmethod
    def restore(self, data: dict[str, Any]) -> None:
        """Rebuild session state saved by as_dict().

        Invalid state is logged and replaced by defaults, never raised.
        """
