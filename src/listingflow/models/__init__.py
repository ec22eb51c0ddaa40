"""Core data models for listingflow."""

from listingflow.models.availability import DateRange, RangePhase, TimeField, TimeRange
from listingflow.models.catalog import Category
from listingflow.models.draft import (
    AddressDraft,
    Coordinates,
    GeocodedAddress,
    ListingDraft,
)
from listingflow.models.selection import SelectionState

__all__ = [
    "AddressDraft",
    "Category",
    "Coordinates",
    "DateRange",
    "GeocodedAddress",
    "ListingDraft",
    "RangePhase",
    "SelectionState",
    "TimeField",
    "TimeRange",
]
