"""Calendar source models with Pydantic v2."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from dashlink.utils import generate_id, utc_now


class CalendarSource(BaseModel):
    """A configured external calendar feed.

    Created by the user and removed by the user; never mutated otherwise.
    """

    id: str = Field(default_factory=generate_id)
    name: str
    url: str
    color: str = "#3b82f6"
    added_at: datetime = Field(default_factory=utc_now, alias="addedAt")

    class Config:
        """Pydantic config."""

        populate_by_name = True


class CalendarSourceCreate(BaseModel):
    """Request body for adding a calendar source."""

    name: str
    url: str
    color: str | None = None

    @field_validator("name", "url")
    @classmethod
    def require_text(cls, v: str) -> str:
        """Reject blank name or url."""
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v


class CalendarRegistry(BaseModel):
    """Connected calendars plus the instant of the last successful sync run.

    Stored as the calendars document.
    """

    connected: list[CalendarSource] = Field(default_factory=list)
    last_sync: datetime | None = Field(default=None, alias="lastSync")

    class Config:
        """Pydantic config."""

        populate_by_name = True

    def find(self, source_id: str) -> CalendarSource | None:
        """Find a source by id."""
        for source in self.connected:
            if source.id == source_id:
                return source
        return None
