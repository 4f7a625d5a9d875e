"""Calendar event model with Pydantic v2 validation."""

from datetime import date, datetime, timezone

from pydantic import BaseModel, Field


def format_event_date(value: datetime | date) -> str:
    """Format an event start as ISO text.

    Timed values are rendered in UTC with a ``Z`` suffix, all-day values as a
    bare ``YYYY-MM-DD`` date.
    """
    if isinstance(value, datetime):
        return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")
    return value.isoformat()


class CalendarEvent(BaseModel):
    """An event parsed from one calendar feed.

    Transient: produced by the parser for a single sync pass and never stored
    on its own. ``start``/``end`` hold an aware UTC datetime for timed events
    and a plain date for all-day events.
    """

    uid: str | None = None
    summary: str
    description: str | None = None
    location: str | None = None
    start: datetime | date = Field(alias="startDate")
    end: datetime | date | None = Field(default=None, alias="endDate")
    calendar_name: str | None = Field(default=None, alias="calendarName")
    calendar_id: str | None = Field(default=None, alias="calendarId")

    class Config:
        """Pydantic config."""

        populate_by_name = True

    @property
    def is_all_day(self) -> bool:
        """True if the event starts on a date without a time of day."""
        return not isinstance(self.start, datetime)

    @property
    def start_text(self) -> str:
        """Start as ISO text."""
        return format_event_date(self.start)

    @property
    def link_key(self) -> str:
        """Key identifying this event in the linked events document.

        The feed UID when present; otherwise a stable key derived from the
        calendar, summary and start so repeated syncs still dedupe.
        """
        if self.uid:
            return self.uid
        return f"{self.calendar_id or ''}:{self.summary}:{self.start_text}"


class ParseResult(BaseModel):
    """Events emitted by the parser and the count of records it dropped."""

    events: list[CalendarEvent] = Field(default_factory=list)
    skipped: int = 0
