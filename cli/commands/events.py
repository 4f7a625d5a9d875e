"""Preview events from all connected calendars without storing anything."""

import logging
from datetime import datetime

import typer
from rich.markup import escape
from typing_extensions import Annotated

from cli.context import get_context
from cli.display import TableRenderer, console
from dashlink.exceptions import DashlinkError
from dashlink.models.event import CalendarEvent
from dashlink.utils import utc_now

logger = logging.getLogger(__name__)


def is_upcoming(event: CalendarEvent, now: datetime) -> bool:
    """True if the event starts now or later (all-day events: today or later)."""
    if isinstance(event.start, datetime):
        return event.start >= now
    return event.start >= now.date()


def events_command(
    show_all: Annotated[
        bool,
        typer.Option("--all", "-a", help="Include past events"),
    ] = False,
    limit: Annotated[
        int,
        typer.Option("--limit", "-n", min=1, help="Maximum number of events"),
    ] = 20,
) -> None:
    """Fetch and list calendar events live."""
    ctx = get_context()
    try:
        events, errors = ctx.orchestrator.collect_events()
    except DashlinkError as e:
        logger.error(str(e))
        raise typer.Exit(1)

    if not show_all:
        now = utc_now()
        events = [event for event in events if is_upcoming(event, now)]

    TableRenderer().render_event_list(events[:limit])
    for error in errors:
        console.print(
            f"[yellow]⚠ {escape(error.source_name)}: "
            f"{escape(error.error_message)}[/yellow]"
        )
