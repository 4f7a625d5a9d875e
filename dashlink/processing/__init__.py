"""Processing layer: link matching and sync orchestration."""

from dashlink.processing.link_matcher import match_event
from dashlink.processing.sync_orchestrator import SyncOrchestrator

__all__ = [
    "SyncOrchestrator",
    "match_event",
]
