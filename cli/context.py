"""Shared CLI context with lazy-initialized dependencies."""

from dashlink.config import DashlinkConfig
from dashlink.ingestion.fetcher import FeedFetcher
from dashlink.models.snapshot import DashboardSnapshot
from dashlink.processing.sync_orchestrator import SyncOrchestrator
from dashlink.storage.dashboard_reader import load_dashboard_snapshot
from dashlink.storage.link_store import LinkStore


class CLIContext:
    """Shared context with lazy-initialized dependencies for CLI commands.

    Usage:
        ctx = CLIContext()
        sources = ctx.store.list_sources()
    """

    def __init__(self, verbose: bool = False, quiet: bool = False):
        """Initialize CLI context.

        Args:
            verbose: If True, show info logging on the console
            quiet: If True, suppress non-error output
        """
        self.verbose = verbose
        self.quiet = quiet

        # Lazy-loaded dependencies
        self._config: DashlinkConfig | None = None
        self._store: LinkStore | None = None
        self._fetcher: FeedFetcher | None = None
        self._orchestrator: SyncOrchestrator | None = None

    @property
    def config(self) -> DashlinkConfig:
        """Get configuration (lazy-loaded)."""
        if self._config is None:
            self._config = DashlinkConfig.from_env()
        return self._config

    @property
    def store(self) -> LinkStore:
        """Get link store (lazy-loaded)."""
        if self._store is None:
            self._store = LinkStore.from_config(self.config)
        return self._store

    @property
    def fetcher(self) -> FeedFetcher:
        """Get feed fetcher (lazy-loaded)."""
        if self._fetcher is None:
            self._fetcher = FeedFetcher(timeout=self.config.fetch_timeout)
        return self._fetcher

    @property
    def orchestrator(self) -> SyncOrchestrator:
        """Get sync orchestrator (lazy-loaded)."""
        if self._orchestrator is None:
            self._orchestrator = SyncOrchestrator(
                self.store, self.fetcher, unfold=self.config.unfold_lines
            )
        return self._orchestrator

    def load_snapshot(self) -> DashboardSnapshot:
        """Read the current dashboard records."""
        return load_dashboard_snapshot(self.store.documents, self.config)


# Global context instance (set by Typer callback)
_ctx: CLIContext | None = None


def get_context() -> CLIContext:
    """Get the current CLI context.

    Raises:
        RuntimeError: If context not initialized
    """
    if _ctx is None:
        raise RuntimeError("CLI context not initialized. This should not happen.")
    return _ctx


def set_context(ctx: CLIContext) -> None:
    """Set the global CLI context."""
    global _ctx
    _ctx = ctx
