"""Sync run result models."""

from datetime import datetime

from pydantic import BaseModel, Field

from dashlink.models.link import LinkedEvent


class SyncError(BaseModel):
    """A calendar source that failed during a sync run."""

    source_name: str = Field(alias="sourceName")
    error_message: str = Field(alias="errorMessage")

    class Config:
        """Pydantic config."""

        populate_by_name = True


class SourceSyncResult(BaseModel):
    """Outcome of fetching, parsing and matching a single source."""

    source_name: str
    events_observed: int = 0
    skipped: int = 0
    staged_links: list[LinkedEvent] = Field(default_factory=list)
    error: SyncError | None = None


class SyncReport(BaseModel):
    """Aggregate result of one sync run."""

    events_synced: int = Field(default=0, alias="eventsSynced")
    new_links: int = Field(default=0, alias="newLinks")
    last_sync: datetime = Field(alias="lastSync")
    errors: list[SyncError] = Field(default_factory=list)

    class Config:
        """Pydantic config."""

        populate_by_name = True
