"""Display module for rendering CLI output.

- TableRenderer: calendar, event and linked event tables
- SummaryRenderer: sync run summaries
- console: shared Rich console instance
"""

from cli.display.console import console
from cli.display.formatters import format_event_start, format_relative_time, truncate
from cli.display.summary_renderer import SummaryRenderer
from cli.display.table_renderer import TableRenderer

__all__ = [
    "console",
    "SummaryRenderer",
    "TableRenderer",
    "format_event_start",
    "format_relative_time",
    "truncate",
]
