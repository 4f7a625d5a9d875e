"""Line-oriented parser for iCalendar feed text.

The parser never fails on malformed input. Records that cannot be
interpreted are dropped and counted in ``ParseResult.skipped``; property
lines that cannot be split are ignored.
"""

import logging
import re
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from icalendar.parser import Contentline
from icalendar.prop import vDate, vDatetime, vText

from dashlink.models.event import CalendarEvent, ParseResult

logger = logging.getLogger(__name__)

BEGIN_EVENT = "BEGIN:VEVENT"
END_EVENT = "END:VEVENT"

TEXT_PROPERTIES = {
    "SUMMARY": "summary",
    "DESCRIPTION": "description",
    "LOCATION": "location",
}
DATE_PROPERTIES = {
    "DTSTART": "start",
    "DTEND": "end",
}

# Timed value written without seconds, e.g. 20240208T1200Z
NO_SECONDS = re.compile(r"^\d{8}T\d{4}Z?$")


def unfold_lines(lines: list[str]) -> list[str]:
    """Join continuation lines (leading space or tab) onto the previous line."""
    unfolded: list[str] = []
    for line in lines:
        if line[:1] in (" ", "\t") and unfolded:
            unfolded[-1] += line[1:]
        else:
            unfolded.append(line)
    return unfolded


def _resolve_zone(tzid: str | None):
    """Zone for a floating timestamp; UTC unless a known TZID is given."""
    if tzid:
        try:
            return ZoneInfo(tzid)
        except (ZoneInfoNotFoundError, ValueError):
            logger.debug(f"Unknown TZID {tzid!r}, treating time as UTC")
    return timezone.utc


def decode_ics_date(value: str, tzid: str | None = None) -> datetime | date | None:
    """
    Decode a DTSTART/DTEND value.

    ``YYYYMMDDTHHMM[SS][Z]`` becomes an aware UTC datetime truncated to the
    minute. Times that fall outside the datetime range after conversion
    return None. ``YYYYMMDD`` becomes a date with no timezone conversion.
    Anything else returns None.

    Args:
        value: Raw property value
        tzid: Optional TZID parameter for floating timestamps

    Returns:
        datetime, date or None
    """
    value = value.strip()
    if "T" in value:
        if NO_SECONDS.match(value):
            value = value[:13] + "00" + value[13:]
        try:
            parsed = vDatetime.from_ical(value)
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=_resolve_zone(tzid))
            parsed = parsed.astimezone(timezone.utc)
        except (ValueError, OverflowError):
            return None
        return parsed.replace(second=0, microsecond=0)

    if len(value) != 8 or not value.isdigit():
        return None
    try:
        return vDate.from_ical(value)
    except ValueError:
        return None


def _split_property(line: str):
    """Split a content line into (NAME, params, value), or None if malformed."""
    try:
        name, params, value = Contentline(line).parts()
    except ValueError:
        return None
    return name.upper(), params, value


def _build_event(record: dict) -> CalendarEvent | None:
    """Build an event from a closed record, or None if it is incomplete."""
    if not record.get("summary") or record.get("start") is None:
        return None
    return CalendarEvent(
        uid=record.get("uid") or None,
        summary=record["summary"],
        description=record.get("description"),
        location=record.get("location"),
        start=record["start"],
        end=record.get("end"),
    )


def parse_ics(text: str, *, unfold: bool = False) -> ParseResult:
    """
    Parse calendar text into events in order of appearance.

    Lines are treated as already unfolded unless ``unfold`` is set, in which
    case continuation lines are joined first.

    Args:
        text: Raw calendar text
        unfold: Join folded continuation lines before scanning

    Returns:
        ParseResult with emitted events and the number of dropped records
    """
    lines = text.splitlines()
    if unfold:
        lines = unfold_lines(lines)

    events: list[CalendarEvent] = []
    skipped = 0
    record: dict | None = None
    nested = 0

    for line in lines:
        marker = line.strip().upper()

        if marker == BEGIN_EVENT:
            if record is not None:
                # Previous record was never closed
                skipped += 1
            record = {}
            nested = 0
            continue

        if record is None:
            continue

        if marker == END_EVENT and nested == 0:
            event = _build_event(record)
            if event is None:
                skipped += 1
                logger.debug(f"Dropping incomplete event record: {record}")
            else:
                events.append(event)
            record = None
            continue

        # Sub-components such as VALARM carry their own DESCRIPTION
        if marker.startswith("BEGIN:"):
            nested += 1
            continue
        if marker.startswith("END:"):
            nested = max(nested - 1, 0)
            continue
        if nested or line[:1] in (" ", "\t"):
            continue

        parts = _split_property(line)
        if parts is None:
            continue
        name, params, value = parts

        if name == "UID":
            record["uid"] = value.strip()
        elif name in TEXT_PROPERTIES:
            record[TEXT_PROPERTIES[name]] = str(vText.from_ical(value))
        elif name in DATE_PROPERTIES:
            record[DATE_PROPERTIES[name]] = decode_ics_date(
                value, params.get("TZID")
            )

    if record is not None:
        skipped += 1

    if skipped:
        logger.debug(f"Parsed {len(events)} events, skipped {skipped} records")
    return ParseResult(events=events, skipped=skipped)
