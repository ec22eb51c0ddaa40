"""Listing category reference data."""

from listingflow.catalog.taxonomy import CategoryTaxonomy

__all__ = ["CategoryTaxonomy"]
