"""Tests for display formatting helpers."""

from datetime import date, datetime, timedelta, timezone

from cli.display.formatters import format_event_start, format_relative_time, truncate


def test_format_relative_time():
    now = datetime.now(timezone.utc)
    assert format_relative_time(now) == "just now"
    assert format_relative_time(now - timedelta(minutes=5)) == "5m ago"
    assert format_relative_time(now - timedelta(hours=3)) == "3h ago"
    assert format_relative_time(now - timedelta(days=2)) == "2d ago"
    assert format_relative_time(now - timedelta(days=15)) == "2w ago"
    assert format_relative_time(now - timedelta(days=400)) == "1y ago"


def test_format_relative_time_naive_is_utc():
    naive = datetime.now(timezone.utc).replace(tzinfo=None) - timedelta(hours=1)
    assert format_relative_time(naive) == "1h ago"


def test_format_event_start():
    assert format_event_start(date(2024, 3, 15)) == "2024-03-15"
    assert (
        format_event_start(datetime(2024, 2, 8, 12, 0, tzinfo=timezone.utc))
        == "2024-02-08 12:00 UTC"
    )


def test_truncate():
    assert truncate(None) == ""
    assert truncate("Drinks\nwith   Sam") == "Drinks with Sam"
    assert truncate("abcdefghij", width=5) == "abcd…"
