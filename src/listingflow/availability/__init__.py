"""Availability window selection."""

from listingflow.availability.picker import (
    AvailabilityPicker,
    TimePickerDialog,
    dates_in_range,
)

__all__ = ["AvailabilityPicker", "TimePickerDialog", "dates_in_range"]
