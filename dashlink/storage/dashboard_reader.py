"""Assemble a dashboard snapshot from the dashboard's JSON documents."""

import logging

from pydantic import ValidationError as PydanticValidationError

from dashlink.config import DashlinkConfig
from dashlink.models.snapshot import DashboardItem, DashboardSnapshot
from dashlink.storage.json_store import JsonDocumentStore

logger = logging.getLogger(__name__)


def _items(data: dict, key: str) -> tuple[DashboardItem, ...]:
    """Convert the records under ``key``, skipping ones without an id."""
    items = []
    for record in data.get(key) or []:
        try:
            items.append(DashboardItem.model_validate(record))
        except PydanticValidationError:
            logger.debug(f"Skipping {key} record without a usable id: {record!r}")
    return tuple(items)


def load_dashboard_snapshot(
    documents: JsonDocumentStore, config: DashlinkConfig | None = None
) -> DashboardSnapshot:
    """
    Read travel destinations, local places and experiences.

    Args:
        documents: JsonDocumentStore for the data directory
        config: Optional config naming the documents

    Returns:
        Read-only DashboardSnapshot
    """
    config = config or DashlinkConfig()
    snapshot = DashboardSnapshot(
        destinations=_items(documents.read(config.travel_filename), "destinations"),
        places=_items(documents.read(config.local_filename), "places"),
        experiences=_items(
            documents.read(config.experiences_filename), "experiences"
        ),
    )
    logger.debug(
        f"Loaded snapshot: {len(snapshot.destinations)} destinations, "
        f"{len(snapshot.places)} places, {len(snapshot.experiences)} experiences"
    )
    return snapshot
