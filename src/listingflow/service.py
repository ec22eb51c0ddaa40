"""Listing workflow service — unified facade for the create-listing flow.

This is the primary interface for driving the two-step workflow:
- Step 1, categories: accordion multi-select over the category taxonomy.
- Step 2, details: title, description, address (typed or looked up from
  the device location), availability dates and times, then publish.

All operations produce a ServiceResult. Rejected operations raise a
user-facing alert and leave every piece of state exactly as it was.
Accepted operations are appended to the event log; if the audit record
cannot be written the operation is rolled back and reported as failed.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Any, Callable, Optional

from listingflow.audit.event_log import EventLog, EventRecord, WorkflowEventKind
from listingflow.availability.picker import AvailabilityPicker, TimePickerDialog
from listingflow.catalog.taxonomy import CategoryTaxonomy
from listingflow.drafts.validator import ListingDraftValidator
from listingflow.geolocation.address_lookup import AddressLookup, LocatedAddress
from listingflow.interfaces import (
    AlertSink,
    CollectingAlertSink,
    GeolocationProvider,
    ListingSubmitter,
    Navigator,
    SubmissionError,
)
from listingflow.models.availability import TimeField
from listingflow.models.draft import AddressDraft, ListingDraft
from listingflow.policy.resolver import PolicyResolver
from listingflow.selection.category_selector import CategorySelector, ExpandAnimations


logger = logging.getLogger(__name__)

ADDRESS_FIELDS = ("street", "city", "state", "zip_code")


class WorkflowStep(str, enum.Enum):
    """Screen the workflow is currently on."""
    CATEGORIES = "categories"
    DETAILS = "details"
    PUBLISHED = "published"


@dataclass(frozen=True)
class ServiceResult:
    """Result of a service operation."""
    success: bool
    errors: list[str] = field(default_factory=list)
    data: dict[str, Any] = field(default_factory=dict)


class ListingWorkflowService:
    """Create-listing workflow facade.

    Usage:
        service = ListingWorkflowService(taxonomy, resolver, navigator, submitter)
        furniture = taxonomy.by_name("Furniture")
        service.toggle_category(furniture.category_id)
        service.toggle_subcategory("Tables")
        service.continue_to_details()

        service.tap_day(date(2025, 1, 10))
        service.tap_day(date(2025, 1, 15))
        service.update_address(street="1 Main St", city="Springfield",
                               state="IL", zip_code="62701")
        service.publish()
    """

    def __init__(
        self,
        taxonomy: CategoryTaxonomy,
        resolver: PolicyResolver,
        navigator: Navigator,
        submitter: ListingSubmitter,
        geolocation: Optional[GeolocationProvider] = None,
        alerts: Optional[AlertSink] = None,
        event_log: Optional[EventLog] = None,
        actor_id: str = "anonymous",
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._resolver = resolver
        self._navigator = navigator
        self._submitter = submitter
        self._alerts = alerts or CollectingAlertSink()
        self._event_log = event_log or EventLog()
        self._actor_id = actor_id
        self._clock = clock or datetime.now
        # Ids continue from whatever a reloaded log already holds.
        self._event_counter = self._event_log.count

        self._selector = CategorySelector(
            taxonomy,
            ExpandAnimations(
                row_height=resolver.row_height(),
                duration_ms=resolver.animation_duration_ms(),
            ),
        )
        self._validator = ListingDraftValidator(
            missing_fields_template=resolver.message("missing_fields"),
            published_message=resolver.message("published"),
        )
        self._lookup: Optional[AddressLookup] = None
        if geolocation is not None:
            self._lookup = AddressLookup(
                geolocation,
                denied_message=resolver.message("location_denied"),
                failed_message=resolver.message("location_failed"),
            )

        self._step = WorkflowStep.CATEGORIES
        self._picker: Optional[AvailabilityPicker] = None
        self._dialog: Optional[TimePickerDialog] = None
        self._draft: Optional[ListingDraft] = None

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def step(self) -> WorkflowStep:
        return self._step

    @property
    def selector(self) -> CategorySelector:
        return self._selector

    @property
    def picker(self) -> Optional[AvailabilityPicker]:
        return self._picker

    @property
    def time_dialog(self) -> Optional[TimePickerDialog]:
        return self._dialog

    @property
    def event_log(self) -> EventLog:
        return self._event_log

    def current_draft(self) -> Optional[ListingDraft]:
        """The draft as it would be submitted right now."""
        if self._draft is None or self._picker is None:
            return None
        self._sync_availability()
        return self._draft

    # ------------------------------------------------------------------
    # Step 1: categories
    # ------------------------------------------------------------------

    def toggle_category(self, category_id: str) -> ServiceResult:
        """Tap a category header (expand/collapse plus select/deselect)."""
        err = self._require_step(WorkflowStep.CATEGORIES)
        if err:
            return err

        prior = self._selector.state
        errors = self._selector.toggle_category_expansion(category_id)
        if errors:
            return self._reject("Unknown Category", errors)

        state = self._selector.state
        err_str = self._record(
            WorkflowEventKind.CATEGORY_TOGGLED,
            {
                "category_id": category_id,
                "expanded": state.expanded_category_id == category_id,
                "selected": category_id in state.selected_category_ids,
            },
        )
        if err_str:
            self._selector.restore(prior)
            return ServiceResult(success=False, errors=[err_str])
        return ServiceResult(success=True, data=self._selection_data())

    def toggle_subcategory(self, name: str) -> ServiceResult:
        """Tap a subcategory row."""
        err = self._require_step(WorkflowStep.CATEGORIES)
        if err:
            return err

        prior = self._selector.state
        errors = self._selector.toggle_subcategory(name)
        if errors:
            return self._reject("Invalid Subcategory", errors)

        err_str = self._record(
            WorkflowEventKind.SUBCATEGORY_TOGGLED,
            {"name": name, "selected": self._selector.is_subcategory_selected(name)},
        )
        if err_str:
            self._selector.restore(prior)
            return ServiceResult(success=False, errors=[err_str])
        return ServiceResult(success=True, data=self._selection_data())

    def is_category_selected(self, category_id: str) -> bool:
        category = self._selector.taxonomy.get(category_id)
        if category is None:
            return False
        return self._selector.is_category_selected(category)

    def continue_to_details(self) -> ServiceResult:
        """Carry the selection forward and open the details step.

        The details step is mounted fresh: a new draft whose times default
        to now, with the current category selection attached.
        """
        err = self._require_step(WorkflowStep.CATEGORIES)
        if err:
            return err

        highlighted = self._selector.highlighted_categories()
        if self._resolver.require_category_before_details() and not highlighted:
            return self._reject("Select a Category", [self._resolver.message("no_category")])

        category_ids = [c.category_id for c in highlighted]
        subcategory_names = self._selector.selected_subcategory_names()
        err_str = self._record(
            WorkflowEventKind.CATEGORIES_CONFIRMED,
            {"category_ids": category_ids, "subcategory_names": subcategory_names},
        )
        if err_str:
            return ServiceResult(success=False, errors=[err_str])

        self._picker = AvailabilityPicker(
            opened_at=self._clock(),
            invalid_end_date_message=self._resolver.message("invalid_end_date"),
            invalid_end_time_message=self._resolver.message("invalid_end_time"),
        )
        self._dialog = TimePickerDialog(self._picker)
        self._draft = ListingDraft(
            address=AddressDraft(),
            category_ids=category_ids,
            subcategory_names=subcategory_names,
        )
        self._step = WorkflowStep.DETAILS
        self._navigator.go_to_details_step()
        logger.debug("Advanced to details with categories %s", category_ids)
        return ServiceResult(
            success=True,
            data={"category_ids": category_ids, "subcategory_names": subcategory_names},
        )

    def back_to_home(self) -> ServiceResult:
        """Header back arrow on the category step. Leaves the flow.

        The flow is unmounted on the way out, so the next visit starts
        from an empty selection and no draft.
        """
        self._unmount()
        self._step = WorkflowStep.CATEGORIES
        self._navigator.go_to_home()
        return ServiceResult(success=True)

    def start_new_listing(self) -> ServiceResult:
        """Enter the flow again after a publish, on a fresh category step."""
        self._unmount()
        self._step = WorkflowStep.CATEGORIES
        return ServiceResult(success=True, data=self._selection_data())

    # ------------------------------------------------------------------
    # Step 2: details
    # ------------------------------------------------------------------

    def back_to_categories(self) -> ServiceResult:
        """Header back arrow on the details step. Discards the draft."""
        err = self._require_step(WorkflowStep.DETAILS)
        if err:
            return err
        self._step = WorkflowStep.CATEGORIES
        self._clear_details()
        self._navigator.go_back()
        return ServiceResult(success=True)

    def tap_day(self, day: date) -> ServiceResult:
        """Tap a calendar day."""
        err = self._require_step(WorkflowStep.DETAILS)
        if err:
            return err
        assert self._picker is not None

        prior = self._picker.date_range
        errors = self._picker.tap_day(day)
        if errors:
            return self._reject("Invalid Date", errors)

        err_str = self._record(
            WorkflowEventKind.DATE_TAPPED,
            {"day": day.isoformat(), "phase": self._picker.phase.value},
        )
        if err_str:
            self._picker.restore(date_range=prior)
            return ServiceResult(success=False, errors=[err_str])
        return ServiceResult(success=True, data=self._availability_data())

    def set_start_time(self, value: time) -> ServiceResult:
        return self._set_time(TimeField.START, value)

    def set_end_time(self, value: time) -> ServiceResult:
        return self._set_time(TimeField.END, value)

    def open_time_picker(self, which: TimeField) -> ServiceResult:
        err = self._require_step(WorkflowStep.DETAILS)
        if err:
            return err
        assert self._dialog is not None
        self._dialog.open(which)
        initial = self._dialog.initial_value()
        return ServiceResult(
            success=True,
            data={
                "field": which.value,
                "initial": initial.strftime("%H:%M") if initial else None,
            },
        )

    def confirm_time(self, value: time) -> ServiceResult:
        """Confirm the open time dialog. The dialog closes either way."""
        err = self._require_step(WorkflowStep.DETAILS)
        if err:
            return err
        dialog = self._dialog
        assert dialog is not None
        return self._apply_time(
            dialog.open_field, value, lambda: dialog.confirm(value),
        )

    def dismiss_time_picker(self) -> ServiceResult:
        err = self._require_step(WorkflowStep.DETAILS)
        if err:
            return err
        assert self._dialog is not None
        self._dialog.dismiss()
        return ServiceResult(success=True)

    def update_address(self, **fields: str) -> ServiceResult:
        """Set any of street, city, state, zip_code."""
        err = self._require_step(WorkflowStep.DETAILS)
        if err:
            return err
        assert self._draft is not None

        unknown = sorted(set(fields) - set(ADDRESS_FIELDS))
        if unknown:
            return self._reject(
                "Invalid Address", [f"Unknown address field: {name}" for name in unknown],
            )

        address = self._draft.address
        if address is None:
            address = self._draft.address = AddressDraft()
        prior = AddressDraft(address.street, address.city, address.state, address.zip_code)
        for name, value in fields.items():
            setattr(address, name, value)

        err_str = self._record(
            WorkflowEventKind.ADDRESS_UPDATED, {"fields": sorted(fields)},
        )
        if err_str:
            self._draft.address = prior
            return ServiceResult(success=False, errors=[err_str])
        return ServiceResult(success=True, data={"address": self._address_data()})

    def set_title(self, title: str) -> ServiceResult:
        return self._set_detail("title", title)

    def set_description(self, description: str) -> ServiceResult:
        return self._set_detail("description", description)

    def use_current_location(self) -> ServiceResult:
        """Fill the address from the device location."""
        started = self.begin_current_location()
        if not started.success:
            return started
        return self.complete_current_location(started.data["lookup"])

    def begin_current_location(self) -> ServiceResult:
        """Query the device location. data["lookup"] goes to complete_current_location()."""
        err = self._require_step(WorkflowStep.DETAILS)
        if err:
            return err
        if self._lookup is None:
            return self._reject("Location Error", [self._resolver.message("location_failed")])
        return ServiceResult(success=True, data={"lookup": self._lookup.begin()})

    def complete_current_location(self, located: LocatedAddress) -> ServiceResult:
        """Apply a finished lookup to the draft address.

        A lookup that finishes after the details step was left has no
        draft to fill and is dropped.
        """
        err = self._require_step(WorkflowStep.DETAILS)
        if err:
            return err
        assert self._draft is not None

        if self._draft.address is None:
            self._draft.address = AddressDraft()
        address = self._draft.address
        prior = AddressDraft(address.street, address.city, address.state, address.zip_code)

        result = AddressLookup.complete(address, located)
        if not result.success:
            return self._reject("Location Error", [result.error or ""])

        err_str = self._record(
            WorkflowEventKind.ADDRESS_LOOKED_UP, {"fields": result.updated_fields},
        )
        if err_str:
            self._draft.address = prior
            return ServiceResult(success=False, errors=[err_str])
        return ServiceResult(
            success=True,
            data={"address": self._address_data(), "updated_fields": result.updated_fields},
        )

    def validate(self) -> list[str]:
        """Missing-field labels for the current draft (empty = complete)."""
        draft = self.current_draft()
        if draft is None:
            return ListingDraftValidator.validate(ListingDraft(address=None))
        return ListingDraftValidator.validate(draft)

    def publish(self) -> ServiceResult:
        """Validate and submit the draft, then return home."""
        err = self._require_step(WorkflowStep.DETAILS)
        if err:
            return err
        draft = self.current_draft()
        assert draft is not None

        try:
            result = self._validator.publish(draft, self._submitter)
        except SubmissionError as e:
            logger.warning("Listing submission failed: %s", e)
            return self._reject("Publish Failed", [str(e)])

        if not result.published:
            return self._reject(
                "Missing Fields", [result.message],
                data={"missing_fields": result.missing_fields},
            )

        err_str = self._record(WorkflowEventKind.LISTING_PUBLISHED, draft.to_payload())
        warning = None
        if err_str:
            # Already submitted; the listing cannot be taken back.
            warning = err_str
            logger.warning("Published listing without audit record: %s", err_str)

        self._alerts.alert("Success", result.message)
        logger.info("Listing published with categories %s", draft.category_ids)
        self._unmount()
        self._step = WorkflowStep.PUBLISHED
        self._navigator.go_to_home()

        data: dict[str, Any] = {"listing": draft.to_payload()}
        if warning:
            data["warning"] = warning
        return ServiceResult(success=True, data=data)

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def status(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "step": self._step.value,
            "selection": self._selection_data(),
            "events": self._event_log.count,
        }
        if self._picker is not None:
            data["availability"] = self._availability_data()
            data["address"] = self._address_data()
            data["missing_fields"] = self.validate()
        return data

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _set_time(self, which: TimeField, value: time) -> ServiceResult:
        err = self._require_step(WorkflowStep.DETAILS)
        if err:
            return err
        picker = self._picker
        assert picker is not None
        return self._apply_time(which, value, lambda: picker.set_time(which, value))

    def _apply_time(
        self,
        which: Optional[TimeField],
        value: time,
        apply: Callable[[], list[str]],
    ) -> ServiceResult:
        """Run apply() against the picker, then record it or roll it back."""
        assert self._picker is not None
        prior = self._picker.time_range
        errors = apply()
        if errors:
            return self._reject("Invalid Time", errors)
        assert which is not None

        err_str = self._record(
            WorkflowEventKind.TIME_SET,
            {"field": which.value, "value": value.strftime("%H:%M")},
        )
        if err_str:
            self._picker.restore(time_range=prior)
            return ServiceResult(success=False, errors=[err_str])
        return ServiceResult(success=True, data=self._availability_data())

    def _set_detail(self, name: str, value: str) -> ServiceResult:
        err = self._require_step(WorkflowStep.DETAILS)
        if err:
            return err
        assert self._draft is not None

        prior = getattr(self._draft, name)
        setattr(self._draft, name, value)
        err_str = self._record(WorkflowEventKind.DETAILS_UPDATED, {"field": name})
        if err_str:
            setattr(self._draft, name, prior)
            return ServiceResult(success=False, errors=[err_str])
        return ServiceResult(success=True, data={name: value})

    def _clear_details(self) -> None:
        self._picker = None
        self._dialog = None
        self._draft = None

    def _unmount(self) -> None:
        """Drop everything both steps hold, as when the flow is left."""
        self._selector.reset()
        self._clear_details()

    def _sync_availability(self) -> None:
        assert self._draft is not None and self._picker is not None
        self._draft.start_date = self._picker.start_date
        self._draft.end_date = self._picker.end_date
        self._draft.start_time = self._picker.start_time
        self._draft.end_time = self._picker.end_time

    def _require_step(self, step: WorkflowStep) -> Optional[ServiceResult]:
        if self._step != step:
            return ServiceResult(
                success=False,
                errors=[f"Not available on the {self._step.value} step (requires {step.value})"],
            )
        return None

    def _reject(
        self,
        title: str,
        errors: list[str],
        data: Optional[dict[str, Any]] = None,
    ) -> ServiceResult:
        """Surface errors to the user as one alert and fail the operation."""
        self._alerts.alert(title, "\n".join(errors))
        return ServiceResult(success=False, errors=errors, data=data or {})

    def _next_event_id(self) -> str:
        self._event_counter += 1
        return f"evt-{self._event_counter:06d}"

    def _record(self, kind: WorkflowEventKind, payload: dict[str, Any]) -> Optional[str]:
        """Append an audit event. Returns error string or None."""
        try:
            event = EventRecord.create(
                event_id=self._next_event_id(),
                event_kind=kind,
                actor_id=self._actor_id,
                payload=payload,
            )
            self._event_log.append(event)
        except (ValueError, OSError) as e:
            logger.error("Event log failure: %s", e)
            return f"Event log failure: {e}"
        return None

    def _selection_data(self) -> dict[str, Any]:
        state = self._selector.state
        return {
            "expanded_category_id": state.expanded_category_id,
            "selected_category_ids": self._selector.selected_category_ids(),
            "selected_subcategory_names": self._selector.selected_subcategory_names(),
            "highlighted": [c.category_id for c in self._selector.highlighted_categories()],
        }

    def _availability_data(self) -> dict[str, Any]:
        assert self._picker is not None
        start, end = self._picker.start_date, self._picker.end_date
        start_time, end_time = self._picker.start_time, self._picker.end_time
        return {
            "phase": self._picker.phase.value,
            "start_date": start.isoformat() if start else None,
            "end_date": end.isoformat() if end else None,
            "marked_dates": [d.isoformat() for d in self._picker.marked_dates()],
            "start_time": start_time.strftime("%H:%M") if start_time else None,
            "end_time": end_time.strftime("%H:%M") if end_time else None,
        }

    def _address_data(self) -> Optional[dict[str, str]]:
        if self._draft is None or self._draft.address is None:
            return None
        address = self._draft.address
        return {name: getattr(address, name) for name in ADDRESS_FIELDS}
