"""Tests for the listing draft validator — completeness gate before publish."""

from datetime import date, time

import pytest

from listingflow.drafts.validator import FIELD_ORDER, ListingDraftValidator
from listingflow.interfaces import InMemorySubmitter, SubmissionError
from listingflow.models.draft import AddressDraft, ListingDraft


def _make_complete_draft() -> ListingDraft:
    return ListingDraft(
        title="Oak table",
        description="Seats six",
        address=AddressDraft(
            street="1 Main St", city="Springfield", state="IL", zip_code="62701",
        ),
        start_date=date(2025, 1, 10),
        end_date=date(2025, 1, 15),
        start_time=time(9, 0),
        end_time=time(17, 0),
        category_ids=["3"],
        subcategory_names=["Tables"],
    )


class FailingSubmitter:
    def submit_listing(self, draft: ListingDraft) -> None:
        raise SubmissionError("backend unavailable")


class TestValidate:
    def test_complete_draft_valid(self) -> None:
        assert ListingDraftValidator.validate(_make_complete_draft()) == []

    def test_missing_only_city(self) -> None:
        draft = _make_complete_draft()
        assert draft.address is not None
        draft.address.city = ""
        assert ListingDraftValidator.validate(draft) == ["City"]

    def test_whitespace_counts_as_missing(self) -> None:
        draft = _make_complete_draft()
        assert draft.address is not None
        draft.address.zip_code = "   "
        assert ListingDraftValidator.validate(draft) == ["ZIP Code"]

    def test_fully_empty_draft_lists_all_nine(self) -> None:
        missing = ListingDraftValidator.validate(ListingDraft())
        assert missing == [
            "Address", "Street Address", "City", "State", "ZIP Code",
            "Start Date", "End Date", "Start Time", "End Time",
        ]
        assert tuple(missing) == FIELD_ORDER

    def test_no_address_object(self) -> None:
        draft = _make_complete_draft()
        draft.address = None
        assert ListingDraftValidator.validate(draft) == [
            "Address", "Street Address", "City", "State", "ZIP Code",
        ]

    def test_missing_dates_and_times(self) -> None:
        draft = _make_complete_draft()
        draft.end_date = None
        draft.start_time = None
        assert ListingDraftValidator.validate(draft) == ["End Date", "Start Time"]

    def test_title_not_required(self) -> None:
        draft = _make_complete_draft()
        draft.title = ""
        draft.description = ""
        assert ListingDraftValidator.validate(draft) == []

    def test_validate_does_not_mutate(self) -> None:
        draft = ListingDraft(address=None)
        ListingDraftValidator.validate(draft)
        assert draft.address is None


class TestPublish:
    def test_incomplete_draft_blocked(self) -> None:
        submitter = InMemorySubmitter()
        alerts: list[str] = []
        draft = _make_complete_draft()
        draft.start_date = None
        draft.end_date = None
        result = ListingDraftValidator().publish(draft, submitter, on_alert=alerts.append)
        assert not result.published
        assert result.missing_fields == ["Start Date", "End Date"]
        assert submitter.submitted == []
        assert alerts == ["Please fill in the following fields: Start Date, End Date"]

    def test_complete_draft_submitted(self) -> None:
        submitter = InMemorySubmitter()
        alerts: list[str] = []
        result = ListingDraftValidator().publish(
            _make_complete_draft(), submitter, on_alert=alerts.append,
        )
        assert result.published
        assert result.missing_fields == []
        assert alerts == ["Your listing has been published!"]
        assert len(submitter.submitted) == 1
        payload = submitter.submitted[0]
        assert payload["category_ids"] == ["3"]
        assert payload["start_time"] == "09:00"
        assert payload["end_date"] == "2025-01-15"

    def test_custom_messages(self) -> None:
        validator = ListingDraftValidator(
            missing_fields_template="Missing: {fields}", published_message="Done",
        )
        result = validator.publish(ListingDraft(address=None), InMemorySubmitter())
        assert result.message.startswith("Missing: Address, Street Address")

    def test_submission_error_propagates(self) -> None:
        with pytest.raises(SubmissionError):
            ListingDraftValidator().publish(_make_complete_draft(), FailingSubmitter())
