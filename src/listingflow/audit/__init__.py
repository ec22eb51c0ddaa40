"""Workflow audit trail."""

from listingflow.audit.event_log import EventLog, EventRecord, WorkflowEventKind

__all__ = ["EventLog", "EventRecord", "WorkflowEventKind"]
