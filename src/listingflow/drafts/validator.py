"""Listing draft validator — completeness check that gates publishing.

Fields are checked in a fixed order and every missing one is reported,
so the user sees all problems in a single message:

    Address, Street Address, City, State, ZIP Code,
    Start Date, End Date, Start Time, End Time

"Address" is reported when there is no address at all or every address
field is blank; its four subfields are still checked individually, so a
fully empty address yields five labels.

Category selection is not checked here. It is enforced before the user
can reach the details step.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional

from listingflow.interfaces import ListingSubmitter
from listingflow.models.draft import AddressDraft, ListingDraft


ADDRESS = "Address"
STREET_ADDRESS = "Street Address"
CITY = "City"
STATE = "State"
ZIP_CODE = "ZIP Code"
START_DATE = "Start Date"
END_DATE = "End Date"
START_TIME = "Start Time"
END_TIME = "End Time"

FIELD_ORDER: tuple[str, ...] = (
    ADDRESS, STREET_ADDRESS, CITY, STATE, ZIP_CODE,
    START_DATE, END_DATE, START_TIME, END_TIME,
)

MISSING_FIELDS_TEMPLATE = "Please fill in the following fields: {fields}"
PUBLISHED_MESSAGE = "Your listing has been published!"


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


@dataclass(frozen=True)
class PublishResult:
    """Outcome of a publish attempt."""
    published: bool
    missing_fields: list[str] = field(default_factory=list)
    message: str = ""


class ListingDraftValidator:
    """Checks a draft for completeness and hands complete drafts on.

    Pure apart from the submitter call: the validator never mutates the
    draft.
    """

    def __init__(
        self,
        missing_fields_template: str = MISSING_FIELDS_TEMPLATE,
        published_message: str = PUBLISHED_MESSAGE,
    ) -> None:
        self._missing_template = missing_fields_template
        self._published_message = published_message

    @staticmethod
    def validate(draft: ListingDraft) -> list[str]:
        """Return labels of missing fields in FIELD_ORDER (empty = valid)."""
        missing: list[str] = []
        address = draft.address or AddressDraft()

        if draft.address is None or address.is_blank():
            missing.append(ADDRESS)
        if _blank(address.street):
            missing.append(STREET_ADDRESS)
        if _blank(address.city):
            missing.append(CITY)
        if _blank(address.state):
            missing.append(STATE)
        if _blank(address.zip_code):
            missing.append(ZIP_CODE)
        if draft.start_date is None:
            missing.append(START_DATE)
        if draft.end_date is None:
            missing.append(END_DATE)
        if draft.start_time is None:
            missing.append(START_TIME)
        if draft.end_time is None:
            missing.append(END_TIME)
        return missing

    def missing_fields_message(self, missing: list[str]) -> str:
        return self._missing_template.format(fields=", ".join(missing))

    def publish(
        self,
        draft: ListingDraft,
        submitter: ListingSubmitter,
        on_alert: Optional[Callable[[str], None]] = None,
    ) -> PublishResult:
        """Validate and, if complete, submit the draft.

        Missing fields are reported together in one message and nothing
        is submitted. SubmissionError from the submitter propagates.
        """
        missing = self.validate(draft)
        if missing:
            message = self.missing_fields_message(missing)
            if on_alert is not None:
                on_alert(message)
            return PublishResult(published=False, missing_fields=missing, message=message)

        submitter.submit_listing(draft)
        if on_alert is not None:
            on_alert(self._published_message)
        return PublishResult(published=True, message=self._published_message)
