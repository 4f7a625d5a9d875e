"""Link models between calendar events and dashboard items."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from dashlink.utils import coerce_id, generate_id, utc_now


class LinkType(str, Enum):
    """Category of dashboard item an event can be linked to."""

    TRAVEL = "travel"
    LOCAL = "local"
    EXPERIENCE = "experience"


class CandidateLink(BaseModel):
    """A proposed association between one event and one dashboard item."""

    type: LinkType
    item_id: str = Field(alias="id")
    name: str

    class Config:
        """Pydantic config."""

        populate_by_name = True

    @field_validator("item_id", mode="before")
    @classmethod
    def item_id_as_text(cls, v):
        """Dashboard ids may be stored as numbers."""
        return coerce_id(v)

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, v):
        """Accept the plural ``experiences`` spelling used by older clients."""
        if isinstance(v, str) and v.lower() == "experiences":
            return LinkType.EXPERIENCE
        return v


class LinkedEvent(BaseModel):
    """A persisted association between a calendar event and dashboard items."""

    id: str = Field(default_factory=generate_id)
    calendar_uid: str = Field(alias="calendarUid")
    calendar_name: str = Field(alias="calendarName")
    event_summary: str = Field(alias="eventSummary")
    event_date: str = Field(alias="eventDate")
    links: list[CandidateLink] = Field(default_factory=list)
    notes: str | None = None
    created_at: datetime = Field(default_factory=utc_now, alias="createdAt")

    class Config:
        """Pydantic config."""

        populate_by_name = True


class LinkedEventsDocument(BaseModel):
    """Stored linked events."""

    links: list[LinkedEvent] = Field(default_factory=list)


class ManualLinkRequest(BaseModel):
    """Request body for linking an event by hand."""

    calendar_uid: str = Field(alias="calendarUid")
    calendar_name: str = Field(default="Manual", alias="calendarName")
    event_summary: str = Field(alias="eventSummary")
    event_date: str = Field(alias="eventDate")
    links: list[CandidateLink] = Field(min_length=1)
    notes: str | None = None

    class Config:
        """Pydantic config."""

        populate_by_name = True

    def to_linked_event(self) -> LinkedEvent:
        """Build the linked event to store."""
        return LinkedEvent(
            calendar_uid=self.calendar_uid,
            calendar_name=self.calendar_name,
            event_summary=self.event_summary,
            event_date=self.event_date,
            links=self.links,
            notes=self.notes,
        )
