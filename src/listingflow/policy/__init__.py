"""Workflow configuration."""

from listingflow.policy.resolver import PolicyResolver

__all__ = ["PolicyResolver"]
