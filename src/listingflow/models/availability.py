"""Availability models — date range and time-of-day window.

Date range lifecycle: NO_RANGE_SELECTED → START_PICKED → RANGE_COMPLETE
A tap while RANGE_COMPLETE restarts selection at START_PICKED.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import date, time
from typing import Optional


class RangePhase(str, enum.Enum):
    """Progress of the date-range selection."""
    NO_RANGE_SELECTED = "no_range_selected"
    START_PICKED = "start_picked"
    RANGE_COMPLETE = "range_complete"


class TimeField(str, enum.Enum):
    """Which time-of-day picker a dialog edits."""
    START = "start"
    END = "end"


@dataclass
class DateRange:
    """Selected availability dates. end_date >= start_date when both set."""
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @property
    def phase(self) -> RangePhase:
        if self.start_date is None:
            return RangePhase.NO_RANGE_SELECTED
        if self.end_date is None:
            return RangePhase.START_PICKED
        return RangePhase.RANGE_COMPLETE


@dataclass
class TimeRange:
    """Daily availability window, hour:minute precision."""
    start_time: Optional[time] = None
    end_time: Optional[time] = None
