"""Current-location address lookup."""

from listingflow.geolocation.address_lookup import AddressLookup, LocatedAddress, LookupResult

__all__ = ["AddressLookup", "LocatedAddress", "LookupResult"]
