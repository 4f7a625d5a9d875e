"""Storage layer for calendar sources, linked events and dashboard data."""

from dashlink.storage.dashboard_reader import load_dashboard_snapshot
from dashlink.storage.json_store import JsonDocumentStore
from dashlink.storage.link_store import LinkStore

__all__ = [
    "JsonDocumentStore",
    "LinkStore",
    "load_dashboard_snapshot",
]
