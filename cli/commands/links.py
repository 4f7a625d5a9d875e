"""Manage linked events."""

import logging

import typer
from typing_extensions import Annotated

from cli.context import get_context
from cli.display import SummaryRenderer, TableRenderer
from dashlink.exceptions import DashlinkError, NotFoundError
from dashlink.models.link import CandidateLink, LinkType, ManualLinkRequest
from dashlink.models.snapshot import DashboardItem, DashboardSnapshot

logger = logging.getLogger(__name__)


def links_ls() -> None:
    """List linked events."""
    ctx = get_context()
    try:
        links = ctx.store.list_links()
    except DashlinkError as e:
        logger.error(str(e))
        raise typer.Exit(1)
    TableRenderer().render_link_list(links)


def resolve_targets(
    snapshot: DashboardSnapshot,
    travel: list[str],
    local: list[str],
    experience: list[str],
) -> list[CandidateLink]:
    """
    Turn item ids into candidate links using the dashboard records' names.

    Raises:
        NotFoundError: If an id is not present in the snapshot
    """
    groups: list[tuple[LinkType, tuple[DashboardItem, ...], list[str]]] = [
        (LinkType.TRAVEL, snapshot.destinations, travel),
        (LinkType.LOCAL, snapshot.places, local),
        (LinkType.EXPERIENCE, snapshot.experiences, experience),
    ]
    targets = []
    for link_type, items, ids in groups:
        by_id = {item.id: item for item in items}
        for item_id in ids:
            item = by_id.get(item_id)
            if item is None:
                raise NotFoundError(f"No {link_type.value} item with id '{item_id}'")
            targets.append(CandidateLink(type=link_type, item_id=item.id, name=item.name))
    return targets


def links_add(
    uid: Annotated[str, typer.Argument(help="Calendar event UID")],
    summary: Annotated[str, typer.Argument(help="Event summary")],
    event_date: Annotated[
        str, typer.Argument(help="Event start, e.g. 2024-02-08 or 2024-02-08T12:00:00Z")
    ],
    travel: Annotated[
        list[str] | None,
        typer.Option("--travel", "-t", help="Travel destination id (repeatable)"),
    ] = None,
    local: Annotated[
        list[str] | None,
        typer.Option("--local", "-l", help="Local place id (repeatable)"),
    ] = None,
    experience: Annotated[
        list[str] | None,
        typer.Option("--experience", "-e", help="Experience id (repeatable)"),
    ] = None,
    calendar_name: Annotated[
        str,
        typer.Option("--calendar", help="Calendar name recorded on the link"),
    ] = "Manual",
    notes: Annotated[
        str | None,
        typer.Option("--notes", help="Free-text note"),
    ] = None,
) -> None:
    """Link an event to dashboard items by hand."""
    ctx = get_context()
    try:
        targets = resolve_targets(
            ctx.load_snapshot(), travel or [], local or [], experience or []
        )
        if not targets:
            logger.error("Give at least one --travel, --local or --experience id")
            raise typer.Exit(1)
        request = ManualLinkRequest(
            calendar_uid=uid,
            calendar_name=calendar_name,
            event_summary=summary,
            event_date=event_date,
            links=targets,
            notes=notes,
        )
        link = ctx.store.create_manual_link(request)
    except DashlinkError as e:
        logger.error(str(e))
        raise typer.Exit(1)
    SummaryRenderer().render_success(f"Linked '{summary}' ({link.id})")


def links_rm(
    link_id: Annotated[str, typer.Argument(help="Linked event id to remove")],
) -> None:
    """Remove a linked event."""
    ctx = get_context()
    try:
        ctx.store.remove_link(link_id)
    except DashlinkError as e:
        logger.error(str(e))
        raise typer.Exit(1)
    SummaryRenderer().render_success(f"Linked event '{link_id}' removed")
