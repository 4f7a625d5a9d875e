"""CLI package for dashlink."""

import logging
import sys

from dashlink.config import DashlinkConfig

# httpx logs every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore")


def _console_level(verbose: bool, quiet: bool) -> int:
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.INFO
    # Per-feed failures are warnings, so they still show by default
    return logging.WARNING


def setup_logging(
    verbose: bool = False, quiet: bool = False, config: DashlinkConfig | None = None
) -> None:
    """Send everything to the log file and warnings (or more) to stderr.

    Args:
        verbose: If True, set console to INFO level
        quiet: If True, set console to ERROR level only
        config: Optional DashlinkConfig for log directory/filename settings
    """
    if config is None:
        config = DashlinkConfig.from_env()

    config.log_dir.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(config.log_dir / config.log_filename)
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )
    file_handler.setLevel(logging.DEBUG)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    console_handler.setLevel(_console_level(verbose, quiet))

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()
    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def main() -> None:
    """Main entry point for the CLI."""
    from cli.parser import app

    app()


__all__ = ["main", "setup_logging"]
