"""Listing draft models — the in-progress listing assembled across both steps."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, time
from typing import Any, Optional


@dataclass
class AddressDraft:
    """Free-text address fields. Only non-emptiness is checked."""
    street: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""

    def is_blank(self) -> bool:
        """True when every field is empty or whitespace."""
        return not any(
            value.strip() for value in (self.street, self.city, self.state, self.zip_code)
        )


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class GeocodedAddress:
    """Reverse-geocoder output. Any field may be absent."""
    street: Optional[str] = None
    city: Optional[str] = None
    region: Optional[str] = None
    postal_code: Optional[str] = None


@dataclass
class ListingDraft:
    """Everything the user has entered so far.

    Category selections are carried forward from the first step and
    included in the submitted payload.
    """
    title: str = ""
    description: str = ""
    address: Optional[AddressDraft] = field(default_factory=AddressDraft)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    category_ids: list[str] = field(default_factory=list)
    subcategory_names: list[str] = field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        """JSON-friendly representation handed to the submission collaborator."""
        address = self.address
        return {
            "title": self.title,
            "description": self.description,
            "address": None if address is None else {
                "street": address.street,
                "city": address.city,
                "state": address.state,
                "zip_code": address.zip_code,
            },
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "start_time": self.start_time.strftime("%H:%M") if self.start_time else None,
            "end_time": self.end_time.strftime("%H:%M") if self.end_time else None,
            "category_ids": list(self.category_ids),
            "subcategory_names": list(self.subcategory_names),
        }
