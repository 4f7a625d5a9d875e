"""CLI commands package."""

from cli.commands.calendars import calendars_add, calendars_ls, calendars_rm
from cli.commands.events import events_command
from cli.commands.links import links_add, links_ls, links_rm
from cli.commands.serve import serve_command
from cli.commands.sync import sync_command

__all__ = [
    "calendars_add",
    "calendars_ls",
    "calendars_rm",
    "events_command",
    "links_add",
    "links_ls",
    "links_rm",
    "serve_command",
    "sync_command",
]
