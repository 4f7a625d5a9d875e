"""Pydantic models for dashlink."""

from dashlink.models.calendar import (
    CalendarRegistry,
    CalendarSource,
    CalendarSourceCreate,
)
from dashlink.models.event import CalendarEvent, ParseResult, format_event_date
from dashlink.models.link import (
    CandidateLink,
    LinkedEvent,
    LinkedEventsDocument,
    LinkType,
    ManualLinkRequest,
)
from dashlink.models.report import SourceSyncResult, SyncError, SyncReport
from dashlink.models.snapshot import DashboardItem, DashboardSnapshot

__all__ = [
    "CalendarEvent",
    "CalendarRegistry",
    "CalendarSource",
    "CalendarSourceCreate",
    "CandidateLink",
    "DashboardItem",
    "DashboardSnapshot",
    "LinkType",
    "LinkedEvent",
    "LinkedEventsDocument",
    "ManualLinkRequest",
    "ParseResult",
    "SourceSyncResult",
    "SyncError",
    "SyncReport",
    "format_event_date",
]
