"""Availability picker — date range and time-of-day window.

Date range lifecycle (driven by day taps):
    NO_RANGE_SELECTED → START_PICKED → RANGE_COMPLETE
    RANGE_COMPLETE → START_PICKED   (any tap restarts selection)

From START_PICKED a tap on a day before the start date is rejected:
state is left as it was and an error is returned for the user.

Times default to the moment the screen opened. The start time is always
accepted; an end time earlier than the start time is rejected and the
previous end time kept.

Pure computation: alerts and audit events are handled by the service layer.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Optional

from listingflow.models.availability import (
    DateRange,
    RangePhase,
    TimeField,
    TimeRange,
)


INVALID_END_DATE = "End date cannot be before the start date."
INVALID_END_TIME = "End time cannot be before the start time."

# Phase a day tap moves to, from each phase.
_NEXT_PHASE: dict[RangePhase, RangePhase] = {
    RangePhase.NO_RANGE_SELECTED: RangePhase.START_PICKED,
    RangePhase.START_PICKED: RangePhase.RANGE_COMPLETE,
    RangePhase.RANGE_COMPLETE: RangePhase.START_PICKED,
}


def _to_minute(value: time) -> time:
    return value.replace(second=0, microsecond=0, tzinfo=None)


def dates_in_range(date_range: DateRange) -> list[date]:
    """Every day from start to end inclusive, or [] unless the range is complete."""
    if date_range.phase != RangePhase.RANGE_COMPLETE:
        return []
    start, end = date_range.start_date, date_range.end_date
    assert start is not None and end is not None
    return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]


class AvailabilityPicker:
    """Owns the selected date range and the start/end times.

    Usage:
        picker = AvailabilityPicker(opened_at=datetime.now())
        picker.tap_day(date(2025, 1, 10))
        picker.tap_day(date(2025, 1, 15))
        picker.marked_dates()            # Jan 10 .. Jan 15
        picker.set_end_time(time(9, 0))  # [] or [error]
    """

    def __init__(
        self,
        opened_at: Optional[datetime] = None,
        invalid_end_date_message: str = INVALID_END_DATE,
        invalid_end_time_message: str = INVALID_END_TIME,
    ) -> None:
        opened = _to_minute((opened_at or datetime.now()).time())
        self._dates = DateRange()
        self._times = TimeRange(start_time=opened, end_time=opened)
        self._invalid_end_date = invalid_end_date_message
        self._invalid_end_time = invalid_end_time_message

    # ------------------------------------------------------------------
    # Date range
    # ------------------------------------------------------------------

    @property
    def phase(self) -> RangePhase:
        return self._dates.phase

    @property
    def date_range(self) -> DateRange:
        """A copy of the current range; mutate through tap_day() only."""
        return DateRange(self._dates.start_date, self._dates.end_date)

    @property
    def start_date(self) -> Optional[date]:
        return self._dates.start_date

    @property
    def end_date(self) -> Optional[date]:
        return self._dates.end_date

    def tap_day(self, day: date) -> list[str]:
        """Apply a calendar day tap. Returns errors (empty = OK)."""
        target = _NEXT_PHASE[self._dates.phase]

        if target == RangePhase.RANGE_COMPLETE:
            start = self._dates.start_date
            assert start is not None
            if day < start:
                return [self._invalid_end_date]
            self._dates = DateRange(start_date=start, end_date=day)
        else:
            self._dates = DateRange(start_date=day, end_date=None)
        return []

    def marked_dates(self) -> list[date]:
        """Days rendered as "in range". Recomputed on every call."""
        return dates_in_range(self._dates)

    def is_marked(self, day: date) -> bool:
        start, end = self._dates.start_date, self._dates.end_date
        if start is None or end is None:
            return False
        return start <= day <= end

    def restore(
        self,
        date_range: Optional[DateRange] = None,
        time_range: Optional[TimeRange] = None,
    ) -> None:
        """Put back previously captured values (see date_range, time_range)."""
        if date_range is not None:
            self._dates = DateRange(date_range.start_date, date_range.end_date)
        if time_range is not None:
            self._times = TimeRange(time_range.start_time, time_range.end_time)

    # ------------------------------------------------------------------
    # Times
    # ------------------------------------------------------------------

    @property
    def time_range(self) -> TimeRange:
        return TimeRange(self._times.start_time, self._times.end_time)

    @property
    def start_time(self) -> Optional[time]:
        return self._times.start_time

    @property
    def end_time(self) -> Optional[time]:
        return self._times.end_time

    def set_start_time(self, value: time) -> list[str]:
        """Always accepted, even if it moves past the current end time."""
        self._times = TimeRange(_to_minute(value), self._times.end_time)
        return []

    def set_end_time(self, value: time) -> list[str]:
        """Accepted only when not earlier than the start time."""
        value = _to_minute(value)
        start = self._times.start_time
        if start is not None and value < start:
            return [self._invalid_end_time]
        self._times = TimeRange(start, value)
        return []

    def set_time(self, which: TimeField, value: time) -> list[str]:
        if which == TimeField.START:
            return self.set_start_time(value)
        return self.set_end_time(value)


class TimePickerDialog:
    """Modal single-field time picker bound to an AvailabilityPicker.

    Only one dialog is open at a time. Confirming applies the value and
    closes the dialog even when the picker rejects the value; dismissing
    closes it without touching any state.
    """

    def __init__(self, picker: AvailabilityPicker) -> None:
        self._picker = picker
        self._open_field: Optional[TimeField] = None

    @property
    def open_field(self) -> Optional[TimeField]:
        return self._open_field

    @property
    def is_open(self) -> bool:
        return self._open_field is not None

    def open(self, which: TimeField) -> None:
        self._open_field = which

    def initial_value(self) -> Optional[time]:
        """Value the open dialog starts from: the field's current time."""
        if self._open_field == TimeField.START:
            return self._picker.start_time
        if self._open_field == TimeField.END:
            return self._picker.end_time
        return None

    def confirm(self, value: time) -> list[str]:
        """Apply value to the open field and close. Returns errors."""
        which = self._open_field
        if which is None:
            return ["No time picker is open"]
        self._open_field = None
        return self._picker.set_time(which, value)

    def dismiss(self) -> None:
        self._open_field = None
