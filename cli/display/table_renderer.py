"""Table renderer for calendars, events and linked events."""

from rich.markup import escape
from rich.table import Table

from cli.display.console import console
from cli.display.formatters import format_event_start, format_relative_time, truncate
from dashlink.models.calendar import CalendarRegistry
from dashlink.models.event import CalendarEvent
from dashlink.models.link import LinkedEvent, LinkType

LINK_ICONS = {
    LinkType.TRAVEL: "✈",
    LinkType.LOCAL: "📍",
    LinkType.EXPERIENCE: "🗺",
}


class TableRenderer:
    """Render tables with Rich's Table class."""

    def render_empty(self, message: str) -> None:
        """Render a placeholder message for an empty list."""
        console.print(f"[dim]{message}[/dim]")

    def render_calendar_list(self, registry: CalendarRegistry) -> None:
        """Render connected calendars and the last sync time.

        Args:
            registry: Connected calendars document.
        """
        if not registry.connected:
            self.render_empty("No calendars connected yet.")
            return

        table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
        table.add_column("ID", style="dim")
        table.add_column("NAME", style="cyan")
        table.add_column("COLOR", style="dim")
        table.add_column("ADDED", style="dim")
        table.add_column("URL", style="dim", overflow="fold")

        for source in registry.connected:
            table.add_row(
                source.id,
                escape(source.name),
                source.color,
                format_relative_time(source.added_at),
                escape(source.url),
            )

        console.print(table)
        if registry.last_sync:
            console.print(
                f"\n[dim]Last synced: {format_relative_time(registry.last_sync)}[/dim]"
            )

    def render_event_list(self, events: list[CalendarEvent]) -> None:
        """Render parsed calendar events."""
        if not events:
            self.render_empty("No upcoming events found.")
            return

        table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
        table.add_column("START", style="blue")
        table.add_column("CALENDAR", style="dim")
        table.add_column("SUMMARY", style="bold")
        table.add_column("LOCATION", style="dim")
        table.add_column("UID", style="dim", overflow="fold")

        for event in events:
            table.add_row(
                format_event_start(event.start),
                escape(event.calendar_name or "-"),
                escape(truncate(event.summary)),
                escape(truncate(event.location, 40)),
                escape(event.uid or "-"),
            )
        console.print(table)

    def render_link_list(self, links: list[LinkedEvent]) -> None:
        """Render linked events, newest event date first."""
        if not links:
            self.render_empty(
                "No linked events yet. Events will auto-link when they match "
                "your dashboard items."
            )
            return

        table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
        table.add_column("ID", style="dim")
        table.add_column("DATE", style="blue")
        table.add_column("EVENT", style="bold")
        table.add_column("CALENDAR", style="dim")
        table.add_column("LINKED TO")

        for link in sorted(links, key=lambda l: l.event_date, reverse=True):
            targets = ", ".join(
                f"{LINK_ICONS.get(target.type, '🔗')} {escape(target.name)}"
                for target in link.links
            )
            if link.notes:
                targets += f"\n[dim]📝 {escape(truncate(link.notes))}[/dim]"
            table.add_row(
                link.id,
                link.event_date,
                escape(truncate(link.event_summary)),
                escape(link.calendar_name),
                targets,
            )
        console.print(table)
