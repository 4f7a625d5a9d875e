"""CLI command routing."""

import typer
from typing_extensions import Annotated

from cli import setup_logging
from cli.commands import (
    calendars_add,
    calendars_ls,
    calendars_rm,
    events_command,
    links_add,
    links_ls,
    links_rm,
    serve_command,
    sync_command,
)
from cli.context import CLIContext, set_context

app = typer.Typer(
    help="Sync calendar feeds and link events to dashboard items.",
    no_args_is_help=True,
)

calendars_app = typer.Typer(help="Manage connected calendars.", no_args_is_help=True)
calendars_app.command("ls")(calendars_ls)
calendars_app.command("add")(calendars_add)
calendars_app.command("rm")(calendars_rm)

links_app = typer.Typer(help="Manage linked events.", no_args_is_help=True)
links_app.command("ls")(links_ls)
links_app.command("add")(links_add)
links_app.command("rm")(links_rm)

app.add_typer(calendars_app, name="calendars")
app.add_typer(links_app, name="links")
app.command("sync")(sync_command)
app.command("events")(events_command)
app.command("serve")(serve_command)


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show progress logging"),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Only show errors"),
    ] = False,
) -> None:
    """Set up shared context and logging for every command."""
    ctx = CLIContext(verbose=verbose, quiet=quiet)
    set_context(ctx)
    setup_logging(verbose=verbose, quiet=quiet, config=ctx.config)
