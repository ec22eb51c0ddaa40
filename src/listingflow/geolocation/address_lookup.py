"""Address lookup — fills the address draft from the device location.

Flow: request permission → current coordinates → reverse geocode →
overwrite the address fields the geocoder returned.

On denied permission or any provider failure the address is left
exactly as it was. A lookup is split into begin() (provider calls)
and complete() (apply to the draft). Lookups are not cancellable; if
two overlap, the one completed last wins.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from listingflow.interfaces import GeolocationError, GeolocationProvider, PermissionStatus
from listingflow.models.draft import AddressDraft, GeocodedAddress


logger = logging.getLogger(__name__)

LOCATION_DENIED = "Permission to access location was denied."
LOCATION_FAILED = "Could not determine your current address."


@dataclass(frozen=True)
class LocatedAddress:
    """Provider answer for one lookup: a geocoded address or an error."""
    geocoded: Optional[GeocodedAddress] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class LookupResult:
    """Outcome of one lookup. updated_fields is empty on failure."""
    success: bool
    error: Optional[str] = None
    updated_fields: list[str] = field(default_factory=list)


def apply_geocoded(address: AddressDraft, geocoded: GeocodedAddress) -> list[str]:
    """Overwrite address fields present in geocoded. Returns changed field names."""
    updated: list[str] = []
    mapping = (
        ("street", geocoded.street),
        ("city", geocoded.city),
        ("state", geocoded.region),
        ("zip_code", geocoded.postal_code),
    )
    for name, value in mapping:
        if value is None:
            continue
        setattr(address, name, value)
        updated.append(name)
    return updated


class AddressLookup:
    """Drives a GeolocationProvider and applies its result to an address."""

    def __init__(
        self,
        provider: GeolocationProvider,
        denied_message: str = LOCATION_DENIED,
        failed_message: str = LOCATION_FAILED,
    ) -> None:
        self._provider = provider
        self._denied_message = denied_message
        self._failed_message = failed_message

    def begin(self) -> LocatedAddress:
        """Ask the provider where the device is. Touches no address.

        The result can be held and applied later with complete(); the
        draft only changes when it is applied.
        """
        try:
            permission = self._provider.request_permission()
        except (GeolocationError, OSError, ValueError) as e:
            logger.warning("Location permission request failed: %s", e)
            return LocatedAddress(error=self._failed_message)

        if permission != PermissionStatus.GRANTED:
            return LocatedAddress(error=self._denied_message)

        try:
            coordinates = self._provider.get_current_coordinates()
            geocoded = self._provider.reverse_geocode(coordinates)
        except (GeolocationError, OSError, ValueError) as e:
            logger.warning("Address lookup failed: %s", e)
            return LocatedAddress(error=self._failed_message)
        return LocatedAddress(geocoded=geocoded)

    @staticmethod
    def complete(address: AddressDraft, located: LocatedAddress) -> LookupResult:
        """Apply a finished lookup to address. Failed lookups change nothing."""
        if located.geocoded is None:
            return LookupResult(success=False, error=located.error)
        updated = apply_geocoded(address, located.geocoded)
        logger.debug("Address lookup updated fields: %s", updated)
        return LookupResult(success=True, updated_fields=updated)

    def fill(self, address: AddressDraft) -> LookupResult:
        """Run one lookup against address. Never raises provider errors."""
        return self.complete(address, self.begin())
