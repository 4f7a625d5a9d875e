"""Coordinate fetch, parse and match across configured calendar sources."""

import logging
from typing import Protocol

from dashlink.exceptions import FetchError
from dashlink.ingestion.fetcher import FeedFetcher
from dashlink.ingestion.ics_parser import parse_ics
from dashlink.models.calendar import CalendarSource
from dashlink.models.event import CalendarEvent
from dashlink.models.link import LinkedEvent
from dashlink.models.report import SourceSyncResult, SyncError, SyncReport
from dashlink.models.snapshot import DashboardSnapshot
from dashlink.processing.link_matcher import match_event
from dashlink.storage.link_store import LinkStore

logger = logging.getLogger(__name__)


def _log_source_failure(
    action: str, source: CalendarSource, error: Exception
) -> None:
    """Log a per-source failure; unexpected errors keep their traceback."""
    if isinstance(error, FetchError):
        logger.warning(f"Failed to {action} calendar '{source.name}': {error}")
    else:
        logger.exception(f"Unexpected error for calendar '{source.name}': {error}")


class Fetcher(Protocol):
    """Protocol for feed fetchers."""

    def fetch(self, url: str) -> str:
        """Return the feed body as text or raise FetchError."""
        ...


class SyncOrchestrator:
    """Runs sync passes over all configured sources.

    Sources are processed one at a time in list order. A source that fails to
    fetch or parse, for any reason, is reported and contributes no events; it
    never stops the others.
    """

    def __init__(
        self,
        store: LinkStore,
        fetcher: Fetcher | None = None,
        unfold: bool = False,
    ):
        """
        Initialize orchestrator.

        Args:
            store: LinkStore holding sources and linked events
            fetcher: Feed fetcher (defaults to FeedFetcher with a 30s timeout)
            unfold: Join folded continuation lines when parsing
        """
        self.store = store
        self.fetcher = fetcher or FeedFetcher()
        self.unfold = unfold

    def fetch_source_events(
        self, source: CalendarSource
    ) -> tuple[list[CalendarEvent], int]:
        """
        Fetch and parse one source, tagging events with the source.

        Returns:
            Tuple of (events, skipped record count)

        Raises:
            FetchError: If the feed cannot be retrieved
        """
        text = self.fetcher.fetch(source.url)
        result = parse_ics(text, unfold=self.unfold)
        events = [
            event.model_copy(
                update={"calendar_name": source.name, "calendar_id": source.id}
            )
            for event in result.events
        ]
        return events, result.skipped

    def sync_source(
        self,
        source: CalendarSource,
        snapshot: DashboardSnapshot,
        known_keys: set[str],
    ) -> SourceSyncResult:
        """
        Fetch, parse and match a single source.

        New link keys are added to ``known_keys`` so an event seen twice in one
        run is only staged once.
        """
        try:
            events, skipped = self.fetch_source_events(source)
        except Exception as e:
            _log_source_failure("sync", source, e)
            return SourceSyncResult(
                source_name=source.name,
                error=SyncError(source_name=source.name, error_message=str(e)),
            )

        staged = []
        for event in events:
            candidates = match_event(event, snapshot)
            if not candidates:
                continue
            key = event.link_key
            if key in known_keys:
                continue
            known_keys.add(key)
            staged.append(
                LinkedEvent(
                    calendar_uid=key,
                    calendar_name=source.name,
                    event_summary=event.summary,
                    event_date=event.start_text,
                    links=candidates,
                )
            )

        logger.info(
            f"Calendar '{source.name}': {len(events)} events, "
            f"{len(staged)} new links, {skipped} skipped records"
        )
        return SourceSyncResult(
            source_name=source.name,
            events_observed=len(events),
            skipped=skipped,
            staged_links=staged,
        )

    def sync(self, snapshot: DashboardSnapshot) -> SyncReport:
        """
        Run a full sync pass.

        Staged links from all sources are written in one append, then the last
        sync time is advanced. Storage failures propagate to the caller.

        Args:
            snapshot: Dashboard records to match against

        Returns:
            SyncReport with event count, new link count and per-source errors
        """
        sources = self.store.list_sources()
        known_keys = self.store.link_keys()
        logger.info(f"Syncing {len(sources)} calendars")

        results = [
            self.sync_source(source, snapshot, known_keys) for source in sources
        ]

        events_synced = 0
        staged: list[LinkedEvent] = []
        errors: list[SyncError] = []
        for result in results:
            events_synced += result.events_observed
            staged.extend(result.staged_links)
            if result.error is not None:
                errors.append(result.error)

        written = self.store.append_links(staged)
        last_sync = self.store.set_last_sync()

        report = SyncReport(
            events_synced=events_synced,
            new_links=len(written),
            last_sync=last_sync,
            errors=errors,
        )
        logger.info(
            f"Sync complete: {report.events_synced} events, "
            f"{report.new_links} new links, {len(errors)} errors"
        )
        return report

    def collect_events(self) -> tuple[list[CalendarEvent], list[SyncError]]:
        """
        Fetch and parse every source without storing anything.

        Returns:
            Tuple of (events in source order, per-source errors)
        """
        events: list[CalendarEvent] = []
        errors: list[SyncError] = []
        for source in self.store.list_sources():
            try:
                source_events, _ = self.fetch_source_events(source)
            except Exception as e:
                _log_source_failure("fetch", source, e)
                errors.append(
                    SyncError(source_name=source.name, error_message=str(e))
                )
                continue
            events.extend(source_events)
        return events, errors
