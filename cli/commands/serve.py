"""Run the HTTP API."""

import logging

import typer
from typing_extensions import Annotated

from cli.context import get_context
from dashlink import create_app

logger = logging.getLogger(__name__)


def serve_command(
    host: Annotated[
        str | None,
        typer.Option("--host", help="Bind address (default from config)"),
    ] = None,
    port: Annotated[
        int | None,
        typer.Option("--port", "-p", help="Port (default from config)"),
    ] = None,
    debug: Annotated[
        bool,
        typer.Option("--debug", help="Enable Flask debug mode"),
    ] = False,
) -> None:
    """Serve the calendar API."""
    ctx = get_context()
    config = ctx.config
    app = create_app(config, store=ctx.store, fetcher=ctx.fetcher)
    logger.info(f"Data directory: {config.data_dir.resolve()}")
    app.run(host=host or config.host, port=port or config.port, debug=debug)
