"""Sync all connected calendars and link events to dashboard items.

Equivalent to POST /api/calendars/sync: fetch every feed, parse it, match
events against travel, local and experience records, and store new links.
"""

import logging

import typer

from cli.context import get_context
from cli.display import SummaryRenderer
from dashlink.exceptions import DashlinkError

logger = logging.getLogger(__name__)


def sync_command() -> None:
    """Sync all connected calendars."""
    ctx = get_context()
    renderer = SummaryRenderer()

    try:
        sources = ctx.store.list_sources()
        if not sources:
            logger.warning("No calendars connected. Add one with 'calendars add'.")
        renderer.render_header("Syncing", f"{len(sources)} calendar(s)")
        snapshot = ctx.load_snapshot()
        report = ctx.orchestrator.sync(snapshot)
    except DashlinkError as e:
        logger.error(f"Sync failed: {e}")
        raise typer.Exit(1)

    renderer.render_sync_report(report)
    if sources and len(report.errors) == len(sources):
        # Every calendar failed
        raise typer.Exit(1)
