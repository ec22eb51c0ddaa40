"""Collaborator contracts — navigation, alerts, geolocation, submission.

The workflow core never talks to a platform API directly. Screens,
location services and the listing backend are plugged in behind these
Protocols, so the state machines can be driven from tests or the CLI
with simple in-memory implementations.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from listingflow.models.draft import Coordinates, GeocodedAddress, ListingDraft


class PermissionStatus(str, enum.Enum):
    GRANTED = "granted"
    DENIED = "denied"


class GeolocationError(Exception):
    """Location services failed to produce a position or an address."""


class SubmissionError(Exception):
    """The listing backend rejected or failed to accept a draft."""


@runtime_checkable
class Navigator(Protocol):
    def go_back(self) -> None: ...

    def go_to_details_step(self) -> None: ...

    def go_to_home(self) -> None: ...


@runtime_checkable
class AlertSink(Protocol):
    """Shows a user-facing message (modal alert or toast)."""

    def alert(self, title: str, message: str) -> None: ...


@runtime_checkable
class GeolocationProvider(Protocol):
    def request_permission(self) -> PermissionStatus: ...

    def get_current_coordinates(self) -> Coordinates: ...

    def reverse_geocode(self, coordinates: Coordinates) -> GeocodedAddress: ...


@runtime_checkable
class ListingSubmitter(Protocol):
    """Accepts a complete draft. Raises SubmissionError on failure."""

    def submit_listing(self, draft: ListingDraft) -> None: ...


# ----------------------------------------------------------------------
# In-memory implementations (CLI and tests)
# ----------------------------------------------------------------------

@dataclass
class RecordingNavigator:
    """Records navigation calls in order."""
    calls: list[str] = field(default_factory=list)

    def go_back(self) -> None:
        self.calls.append("back")

    def go_to_details_step(self) -> None:
        self.calls.append("details")

    def go_to_home(self) -> None:
        self.calls.append("home")


@dataclass
class CollectingAlertSink:
    """Keeps every alert raised, newest last."""
    alerts: list[tuple[str, str]] = field(default_factory=list)

    def alert(self, title: str, message: str) -> None:
        self.alerts.append((title, message))

    @property
    def last_message(self) -> str | None:
        return self.alerts[-1][1] if self.alerts else None


@dataclass
class InMemorySubmitter:
    """Stores submitted payloads instead of sending them anywhere."""
    submitted: list[dict[str, Any]] = field(default_factory=list)

    def submit_listing(self, draft: ListingDraft) -> None:
        self.submitted.append(draft.to_payload())
