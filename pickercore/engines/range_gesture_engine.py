"""Range Gesture Engine - press-and-drag range selection.

State machine:
    IDLE --begin--> DRAGGING --update*--> DRAGGING --end/cancel--> IDLE

The anchor (`first`) is fixed by begin() and never moves during one drag.
Each update()/end() replaces only `second`. Day hit-testing happens in the
rendering layer; this resolver receives (page, day) pairs.
"""

from __future__ import annotations

from .. import const
from ..models import DateRange, DateValue, MonthDescriptor


class RangeGestureResolver:
    """Owns the working DateRange of one drag gesture.

    Returned ranges are always copies, so callers never share the working
    object.
    """

    def __init__(self) -> None:
        """Initialize in IDLE state."""
        self._state = const.GESTURE_STATE_IDLE
        self._range: DateRange | None = None

    @property
    def state(self) -> str:
        """GESTURE_STATE_IDLE or GESTURE_STATE_DRAGGING."""
        return self._state

    @property
    def is_dragging(self) -> bool:
        return self._state == const.GESTURE_STATE_DRAGGING

    @property
    def current_range(self) -> DateRange | None:
        """Copy of the working range (None when no drag has started)."""
        return self._range.copy() if self._range else None

    def begin(self, page: MonthDescriptor, day: int) -> DateRange | None:
        """Start a drag anchored at day.

        Returns None and stays IDLE when the day is invalid or disabled on
        the page. A begin() during a drag restarts it at the new anchor.
        """
        anchor = page.compose_date(day)
        if anchor is None:
            const.LOGGER.debug(
                "Range gesture ignored: day %s not selectable on %s/%s",
                day,
                page.month + 1,
                page.year,
            )
            return None
        if self.is_dragging:
            const.LOGGER.debug("Range gesture restarted at %s", anchor)
        self._range = DateRange.single(anchor)
        self._state = const.GESTURE_STATE_DRAGGING
        const.LOGGER.debug("Range gesture started at %s", anchor)
        return self._range.copy()

    def update(self, page: MonthDescriptor, day: int) -> DateRange | None:
        """Move the candidate end of the drag.

        Returns the new range only if the end date changed, otherwise None.
        Also None when not dragging or when day is not selectable.
        """
        if not self.is_dragging or self._range is None:
            return None
        candidate = self._resolve_end_date(page, day)
        if candidate is None:
            return None
        self._range = self._range.with_second(candidate)
        return self._range.copy()

    def end(self, page: MonthDescriptor, day: int) -> DateRange | None:
        """Finish the drag and return the final range.

        An unselectable day keeps the last working end. Returns None when
        no drag was in progress.
        """
        if not self.is_dragging or self._range is None:
            return None
        candidate = self._resolve_end_date(page, day)
        if candidate is not None:
            self._range = self._range.with_second(candidate)
        self._state = const.GESTURE_STATE_IDLE
        const.LOGGER.debug("Range gesture ended: %s", self._range)
        return self._range.copy()

    def cancel(self) -> None:
        """Abandon the drag without a result."""
        if self.is_dragging:
            const.LOGGER.debug("Range gesture cancelled")
        self._state = const.GESTURE_STATE_IDLE
        self._range = None

    def _resolve_end_date(self, page: MonthDescriptor, day: int) -> DateValue | None:
        """Date for day if selectable and different from the current end."""
        candidate = page.compose_date(day)
        if candidate is None or self._range is None:
            return None
        if candidate == self._range.second:
            return None
        return candidate
