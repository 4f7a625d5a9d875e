"""Durable store for calendar sources and linked events."""

import logging
from datetime import datetime
from typing import Iterable

from pydantic import ValidationError as PydanticValidationError

from dashlink.config import DashlinkConfig
from dashlink.exceptions import NotFoundError, StorageError
from dashlink.models.calendar import (
    CalendarRegistry,
    CalendarSource,
    CalendarSourceCreate,
)
from dashlink.models.link import LinkedEvent, LinkedEventsDocument, ManualLinkRequest
from dashlink.storage.json_store import JsonDocumentStore
from dashlink.utils import utc_now

logger = logging.getLogger(__name__)


class LinkStore:
    """CRUD over calendar sources and linked events.

    Both collections are stored as whole JSON documents; every operation is a
    read-modify-write under the data directory lock.
    """

    def __init__(
        self,
        documents: JsonDocumentStore,
        calendars_filename: str = "calendars.json",
        linked_events_filename: str = "linked-events.json",
        default_color: str = "#3b82f6",
    ):
        """
        Initialize link store.

        Args:
            documents: JsonDocumentStore for the data directory
            calendars_filename: Document holding calendar sources
            linked_events_filename: Document holding linked events
            default_color: Colour for sources added without one
        """
        self.documents = documents
        self.calendars_filename = calendars_filename
        self.linked_events_filename = linked_events_filename
        self.default_color = default_color

    @classmethod
    def from_config(cls, config: DashlinkConfig) -> "LinkStore":
        """Create store for the configured data directory."""
        return cls(
            JsonDocumentStore(config.data_dir),
            calendars_filename=config.calendars_filename,
            linked_events_filename=config.linked_events_filename,
            default_color=config.default_calendar_color,
        )

    # Calendar sources

    def get_registry(self) -> CalendarRegistry:
        """Load connected calendars and last sync time."""
        data = self.documents.read(self.calendars_filename)
        try:
            return CalendarRegistry.model_validate(data)
        except PydanticValidationError as e:
            raise StorageError(f"Invalid calendars document: {e}") from e

    def _save_registry(self, registry: CalendarRegistry) -> None:
        self.documents.write(
            self.calendars_filename, registry.model_dump(mode="json", by_alias=True)
        )

    def list_sources(self) -> list[CalendarSource]:
        """List configured calendar sources in insertion order."""
        return self.get_registry().connected

    def add_source(self, request: CalendarSourceCreate) -> CalendarSource:
        """Add a calendar source and return it with its generated id."""
        source = CalendarSource(
            name=request.name,
            url=request.url,
            color=request.color or self.default_color,
        )
        with self.documents.transaction():
            registry = self.get_registry()
            registry.connected.append(source)
            self._save_registry(registry)
        logger.info(f"Added calendar '{source.name}' ({source.id})")
        return source

    def remove_source(self, source_id: str) -> CalendarSource:
        """
        Remove a calendar source by id.

        Raises:
            NotFoundError: If no source has this id
        """
        with self.documents.transaction():
            registry = self.get_registry()
            source = registry.find(source_id)
            if source is None:
                raise NotFoundError(f"Calendar '{source_id}' not found")
            registry.connected = [s for s in registry.connected if s.id != source_id]
            self._save_registry(registry)
        logger.info(f"Removed calendar '{source.name}' ({source_id})")
        return source

    def set_last_sync(self, instant: datetime | None = None) -> datetime:
        """Record the instant of the latest sync run."""
        instant = instant or utc_now()
        with self.documents.transaction():
            registry = self.get_registry()
            registry.last_sync = instant
            self._save_registry(registry)
        return instant

    # Linked events

    def _load_links(self) -> LinkedEventsDocument:
        data = self.documents.read(self.linked_events_filename)
        try:
            return LinkedEventsDocument.model_validate(data)
        except PydanticValidationError as e:
            raise StorageError(f"Invalid linked events document: {e}") from e

    def _save_links(self, document: LinkedEventsDocument) -> None:
        self.documents.write(
            self.linked_events_filename,
            document.model_dump(mode="json", by_alias=True),
        )

    def list_links(self) -> list[LinkedEvent]:
        """List linked events in insertion order."""
        return self._load_links().links

    def link_keys(self) -> set[str]:
        """Event keys that already have a linked event."""
        return {link.calendar_uid for link in self.list_links()}

    def append_links(self, links: Iterable[LinkedEvent]) -> list[LinkedEvent]:
        """
        Append linked events in a single write.

        Links whose event key is already stored (or repeated within ``links``)
        are dropped, so concurrent syncs cannot create duplicates.

        Returns:
            The links actually written
        """
        links = list(links)
        if not links:
            return []
        with self.documents.transaction():
            document = self._load_links()
            seen = {link.calendar_uid for link in document.links}
            added = []
            for link in links:
                if link.calendar_uid in seen:
                    continue
                seen.add(link.calendar_uid)
                added.append(link)
            if added:
                document.links.extend(added)
                self._save_links(document)
        return added

    def create_manual_link(self, request: ManualLinkRequest) -> LinkedEvent:
        """Store a link supplied by the user without running the matcher."""
        link = request.to_linked_event()
        with self.documents.transaction():
            document = self._load_links()
            document.links.append(link)
            self._save_links(document)
        logger.info(f"Created manual link {link.id} for '{link.event_summary}'")
        return link

    def remove_link(self, link_id: str) -> LinkedEvent:
        """
        Remove a linked event by id.

        Raises:
            NotFoundError: If no linked event has this id
        """
        with self.documents.transaction():
            document = self._load_links()
            remaining = [link for link in document.links if link.id != link_id]
            if len(remaining) == len(document.links):
                raise NotFoundError(f"Linked event '{link_id}' not found")
            removed = next(link for link in document.links if link.id == link_id)
            document.links = remaining
            self._save_links(document)
        logger.info(f"Removed linked event {link_id}")
        return removed
