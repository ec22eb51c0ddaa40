"""Listing draft completeness checks."""

from listingflow.drafts.validator import FIELD_ORDER, ListingDraftValidator, PublishResult

__all__ = ["FIELD_ORDER", "ListingDraftValidator", "PublishResult"]
