"""Summary renderer for sync results."""

from rich.markup import escape

from cli.display.console import console
from dashlink.models.report import SyncReport


class SummaryRenderer:
    """Render sync run summaries."""

    def render_header(self, title: str, detail: str) -> None:
        """Render a styled header for a command."""
        console.print()
        console.print("━" * 40)
        console.print(f"[bold]  {title}: {detail}[/bold]")
        console.print("━" * 40)

    def render_sync_report(self, report: SyncReport) -> None:
        """Render counts and per-calendar errors of a sync run.

        Args:
            report: Result of SyncOrchestrator.sync.
        """
        console.print(f"\nSynced {report.events_synced} events")
        console.print(f"  - New links: {report.new_links}")
        console.print(f"  - Last sync: {report.last_sync.isoformat()}")

        if report.errors:
            console.print(f"\n[yellow]{len(report.errors)} calendar(s) failed:[/yellow]")
            for error in report.errors:
                console.print(
                    f"  - {escape(error.source_name)}: {escape(error.error_message)}"
                )

    def render_success(self, message: str) -> None:
        """Render a success line."""
        console.print(f"\n[green]✓[/green] {escape(message)}")
