"""Tests for the sync orchestrator."""

import httpx
import pytest

from dashlink.exceptions import FetchError, FetchErrorKind, StorageError
from dashlink.ingestion.fetcher import FeedFetcher
from dashlink.models.calendar import CalendarSourceCreate
from dashlink.models.link import CandidateLink, LinkType, ManualLinkRequest
from dashlink.models.snapshot import DashboardSnapshot
from dashlink.processing.sync_orchestrator import SyncOrchestrator

HOME_URL = "https://cal.example.com/home.ics"
WORK_URL = "https://cal.example.com/work.ics"


@pytest.fixture
def orchestrator(store, fetcher):
    return SyncOrchestrator(store, fetcher)


def _add(store, name, url):
    return store.add_source(CalendarSourceCreate(name=name, url=url))


def test_sync_links_matching_events(store, fetcher, orchestrator, snapshot, sample_ics):
    source = _add(store, "Home", HOME_URL)
    fetcher.feeds[HOME_URL] = sample_ics

    report = orchestrator.sync(snapshot)

    assert report.events_synced == 3
    assert report.new_links == 2
    assert report.errors == []

    links = store.list_links()
    assert [link.calendar_uid for link in links] == [
        "lisbon-1@example.com",
        "volo-1@example.com",
    ]
    lisbon = links[0]
    assert lisbon.calendar_name == source.name
    assert lisbon.event_summary == "Lisbon weekend getaway"
    assert lisbon.event_date == "2024-02-08T12:00:00Z"
    assert [(l.type, l.item_id) for l in lisbon.links] == [(LinkType.TRAVEL, "d1")]
    assert links[1].links[0].type == LinkType.LOCAL


def test_second_sync_creates_no_new_links(store, fetcher, orchestrator, snapshot, sample_ics):
    """Test re-syncing an unchanged feed is idempotent."""
    _add(store, "Home", HOME_URL)
    fetcher.feeds[HOME_URL] = sample_ics

    first = orchestrator.sync(snapshot)
    second = orchestrator.sync(snapshot)

    assert first.new_links == 2
    assert second.new_links == 0
    assert second.events_synced == 3
    assert len(store.list_links()) == 2


def test_failed_source_does_not_block_others(store, fetcher, orchestrator, snapshot, sample_ics):
    _add(store, "Broken", "https://cal.example.com/missing.ics")
    _add(store, "Home", HOME_URL)
    fetcher.feeds[HOME_URL] = sample_ics

    report = orchestrator.sync(snapshot)

    assert report.events_synced == 3
    assert report.new_links == 2
    assert len(report.errors) == 1
    assert report.errors[0].source_name == "Broken"
    assert "404" in report.errors[0].error_message
    assert fetcher.calls == ["https://cal.example.com/missing.ics", HOME_URL]


def test_timeout_recorded_as_error(store, fetcher, orchestrator, snapshot):
    _add(store, "Slow", HOME_URL)
    fetcher.feeds[HOME_URL] = FetchError(
        "Request timed out after 30s", kind=FetchErrorKind.TIMEOUT, url=HOME_URL
    )

    report = orchestrator.sync(snapshot)

    assert report.events_synced == 0
    assert report.errors[0].error_message == "Request timed out after 30s"


def test_sync_advances_last_sync(store, fetcher, orchestrator, snapshot, sample_ics):
    _add(store, "Home", HOME_URL)
    fetcher.feeds[HOME_URL] = sample_ics
    assert store.get_registry().last_sync is None

    report = orchestrator.sync(snapshot)

    assert store.get_registry().last_sync == report.last_sync


def test_sync_with_no_sources(store, orchestrator, snapshot):
    report = orchestrator.sync(snapshot)
    assert report.events_synced == 0
    assert report.new_links == 0
    assert store.get_registry().last_sync is not None


def test_manual_link_prevents_automatic_duplicate(store, fetcher, orchestrator, snapshot, sample_ics):
    _add(store, "Home", HOME_URL)
    fetcher.feeds[HOME_URL] = sample_ics
    store.create_manual_link(
        ManualLinkRequest(
            calendar_uid="lisbon-1@example.com",
            event_summary="Lisbon weekend getaway",
            event_date="2024-02-08T12:00:00Z",
            links=[CandidateLink(type=LinkType.TRAVEL, item_id="d1", name="Lisbon Trip")],
        )
    )

    report = orchestrator.sync(snapshot)

    assert report.new_links == 1
    uids = [link.calendar_uid for link in store.list_links()]
    assert uids.count("lisbon-1@example.com") == 1


def test_same_uid_in_two_feeds_linked_once(store, fetcher, orchestrator, snapshot, sample_ics):
    _add(store, "Home", HOME_URL)
    _add(store, "Work", WORK_URL)
    fetcher.feeds[HOME_URL] = sample_ics
    fetcher.feeds[WORK_URL] = sample_ics

    report = orchestrator.sync(snapshot)

    assert report.events_synced == 6
    assert report.new_links == 2
    assert {link.calendar_name for link in store.list_links()} == {"Home"}


def test_events_without_uid_still_dedupe(store, fetcher, orchestrator, snapshot):
    _add(store, "Home", HOME_URL)
    fetcher.feeds[HOME_URL] = (
        "BEGIN:VEVENT\nSUMMARY:Lisbon flight\nDTSTART:20240208T090000Z\nEND:VEVENT\n"
    )

    assert orchestrator.sync(snapshot).new_links == 1
    assert orchestrator.sync(snapshot).new_links == 0


def test_unmatched_events_create_no_links(store, fetcher, orchestrator):
    _add(store, "Home", HOME_URL)
    fetcher.feeds[HOME_URL] = (
        "BEGIN:VEVENT\nUID:1\nSUMMARY:Dentist\nDTSTART:20240208\nEND:VEVENT\n"
    )

    report = orchestrator.sync(DashboardSnapshot())

    assert report.events_synced == 1
    assert report.new_links == 0
    assert store.list_links() == []


def test_sync_source_is_isolated(store, fetcher, orchestrator, snapshot):
    source = _add(store, "Broken", HOME_URL)

    result = orchestrator.sync_source(source, snapshot, set())

    assert result.events_observed == 0
    assert result.staged_links == []
    assert result.error.source_name == "Broken"


def test_sync_source_tracks_known_keys(store, fetcher, orchestrator, snapshot, sample_ics):
    source = _add(store, "Home", HOME_URL)
    fetcher.feeds[HOME_URL] = sample_ics
    known = {"lisbon-1@example.com"}

    result = orchestrator.sync_source(source, snapshot, known)

    assert [link.calendar_uid for link in result.staged_links] == ["volo-1@example.com"]
    assert "volo-1@example.com" in known
    # Staging only; nothing is written until sync() reduces the results
    assert store.list_links() == []


def test_collect_events_tags_source_and_does_not_persist(store, fetcher, orchestrator, sample_ics):
    source = _add(store, "Home", HOME_URL)
    _add(store, "Broken", WORK_URL)
    fetcher.feeds[HOME_URL] = sample_ics

    events, errors = orchestrator.collect_events()

    assert len(events) == 3
    assert all(e.calendar_name == "Home" for e in events)
    assert all(e.calendar_id == source.id for e in events)
    assert [e.source_name for e in errors] == ["Broken"]
    assert store.list_links() == []
    assert store.get_registry().last_sync is None


def test_storage_failure_propagates(store, fetcher, orchestrator, snapshot, config):
    _add(store, "Home", HOME_URL)
    (config.data_dir / config.linked_events_filename).write_text("{not json")

    with pytest.raises(StorageError):
        orchestrator.sync(snapshot)


def test_unfold_option_is_passed_to_parser(store, fetcher, snapshot):
    _add(store, "Home", HOME_URL)
    fetcher.feeds[HOME_URL] = (
        "BEGIN:VEVENT\nUID:1\nSUMMARY:Weekend in\n  Lisbon\n"
        "DTSTART:20240208\nEND:VEVENT\n"
    )

    folded = SyncOrchestrator(store, fetcher).collect_events()[0]
    unfolded = SyncOrchestrator(store, fetcher, unfold=True).collect_events()[0]

    assert folded[0].summary == "Weekend in"
    assert unfolded[0].summary == "Weekend in Lisbon"


def test_unexpected_source_error_does_not_abort_sync(store, fetcher, orchestrator, snapshot, sample_ics):
    _add(store, "Odd", WORK_URL)
    _add(store, "Home", HOME_URL)
    fetcher.feeds[WORK_URL] = RuntimeError("parser blew up")
    fetcher.feeds[HOME_URL] = sample_ics

    report = orchestrator.sync(snapshot)

    assert report.new_links == 2
    assert [(e.source_name, e.error_message) for e in report.errors] == [
        ("Odd", "parser blew up")
    ]
    assert store.get_registry().last_sync == report.last_sync


def test_undecodable_host_next_to_good_feed(store, snapshot, sample_ics):
    """Test a host that fails IDNA encoding is reported, not raised."""
    bad_url = "http://" + "a" * 64 + ".com/f.ics"

    def handler(request):
        if request.url.host.startswith("aaaa"):
            raise UnicodeError("encoding with 'idna' codec failed (label too long)")
        return httpx.Response(200, text=sample_ics)

    _add(store, "Bad host", bad_url)
    _add(store, "Home", HOME_URL)
    fetcher = FeedFetcher(timeout=2, transport=httpx.MockTransport(handler))

    report = SyncOrchestrator(store, fetcher).sync(snapshot)

    assert report.new_links == 2
    assert report.errors[0].source_name == "Bad host"
    assert "Invalid URL" in report.errors[0].error_message
    assert store.get_registry().last_sync is not None


def test_collect_events_isolates_unexpected_errors(store, fetcher, orchestrator, sample_ics):
    _add(store, "Odd", WORK_URL)
    _add(store, "Home", HOME_URL)
    fetcher.feeds[WORK_URL] = RuntimeError("boom")
    fetcher.feeds[HOME_URL] = sample_ics

    events, errors = orchestrator.collect_events()

    assert len(events) == 3
    assert [e.source_name for e in errors] == ["Odd"]
