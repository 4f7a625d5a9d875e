"""Manage connected calendars."""

import logging

import typer
from pydantic import ValidationError as PydanticValidationError
from typing_extensions import Annotated

from cli.context import get_context
from cli.display import SummaryRenderer, TableRenderer
from dashlink.exceptions import DashlinkError
from dashlink.models.calendar import CalendarSourceCreate

logger = logging.getLogger(__name__)


def calendars_ls() -> None:
    """List connected calendars and the last sync time."""
    ctx = get_context()
    try:
        registry = ctx.store.get_registry()
    except DashlinkError as e:
        logger.error(str(e))
        raise typer.Exit(1)
    TableRenderer().render_calendar_list(registry)


def calendars_add(
    name: Annotated[str, typer.Argument(help="Display name for the calendar")],
    url: Annotated[str, typer.Argument(help="ICS feed URL (http or https)")],
    color: Annotated[
        str | None,
        typer.Option("--color", "-c", help="Display colour (default from config)"),
    ] = None,
) -> None:
    """Connect a calendar feed."""
    ctx = get_context()
    try:
        request = CalendarSourceCreate(name=name, url=url, color=color)
        source = ctx.store.add_source(request)
    except PydanticValidationError as e:
        logger.error(f"Invalid calendar: {e.errors()[0]['msg']}")
        raise typer.Exit(1)
    except DashlinkError as e:
        logger.error(str(e))
        raise typer.Exit(1)
    SummaryRenderer().render_success(f"Calendar '{source.name}' added ({source.id})")


def calendars_rm(
    source_id: Annotated[str, typer.Argument(help="Calendar id to remove")],
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Skip confirmation prompt"),
    ] = False,
) -> None:
    """Remove a connected calendar. Existing linked events are kept."""
    ctx = get_context()

    if not force and not typer.confirm(f"Remove calendar '{source_id}'?"):
        typer.echo("Remove cancelled.")
        return

    try:
        source = ctx.store.remove_source(source_id)
    except DashlinkError as e:
        logger.error(str(e))
        raise typer.Exit(1)
    SummaryRenderer().render_success(f"Calendar '{source.name}' removed")
