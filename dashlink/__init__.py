import logging

from flask import Flask, jsonify, request
from pydantic import ValidationError as PydanticValidationError

from .config import DashlinkConfig
from .exceptions import NotFoundError, StorageError, ValidationError
from .ingestion.fetcher import FeedFetcher
from .models.calendar import CalendarSourceCreate
from .models.link import ManualLinkRequest
from .processing.sync_orchestrator import Fetcher, SyncOrchestrator
from .storage.dashboard_reader import load_dashboard_snapshot
from .storage.link_store import LinkStore
from .utils import utc_now

logger = logging.getLogger(__name__)


def _json_body() -> dict:
    """Request JSON object, or ValidationError if the body is not one."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def _validation_message(error: PydanticValidationError) -> str:
    first = error.errors()[0]
    field = ".".join(str(part) for part in first["loc"])
    return f"{field}: {first['msg']}" if field else first["msg"]


def create_app(
    config: DashlinkConfig | None = None,
    store: LinkStore | None = None,
    fetcher: Fetcher | None = None,
):
    config = config or DashlinkConfig.from_env()
    store = store or LinkStore.from_config(config)
    fetcher = fetcher or FeedFetcher(timeout=config.fetch_timeout)
    orchestrator = SyncOrchestrator(store, fetcher, unfold=config.unfold_lines)

    app = Flask(__name__)
    app.config["DASHLINK"] = config

    @app.errorhandler(NotFoundError)
    def handle_not_found(error):
        return jsonify({"error": str(error)}), 404

    @app.errorhandler(ValidationError)
    def handle_validation(error):
        return jsonify({"error": str(error)}), 400

    @app.errorhandler(PydanticValidationError)
    def handle_pydantic_validation(error):
        return jsonify({"error": _validation_message(error)}), 400

    @app.errorhandler(StorageError)
    def handle_storage(error):
        logger.error(f"Storage error: {error}")
        return jsonify({"error": str(error)}), 500

    @app.route("/health", methods=["GET"])
    def health():
        return jsonify({"status": "ok", "timestamp": utc_now().isoformat()})

    @app.route("/api/calendars", methods=["GET"])
    def list_calendars():
        registry = store.get_registry()
        return jsonify(registry.model_dump(mode="json", by_alias=True))

    @app.route("/api/calendars", methods=["POST"])
    def add_calendar():
        payload = CalendarSourceCreate.model_validate(_json_body())
        source = store.add_source(payload)
        return jsonify({"success": True, "id": source.id})

    @app.route("/api/calendars/<source_id>", methods=["DELETE"])
    def delete_calendar(source_id):
        store.remove_source(source_id)
        return jsonify({"success": True})

    @app.route("/api/calendar-events", methods=["GET"])
    def calendar_events():
        """Fetch and parse all feeds live; nothing is stored."""
        events, errors = orchestrator.collect_events()
        registry = store.get_registry().model_dump(mode="json", by_alias=True)
        body = {
            "events": [e.model_dump(mode="json", by_alias=True) for e in events],
            "lastSync": registry["lastSync"],
            "count": len(events),
        }
        if errors:
            body["errors"] = [e.model_dump(mode="json", by_alias=True) for e in errors]
        return jsonify(body)

    @app.route("/api/calendars/sync", methods=["POST"])
    def sync_calendars():
        snapshot = load_dashboard_snapshot(store.documents, config)
        report = orchestrator.sync(snapshot)
        body = {"success": True, **report.model_dump(mode="json", by_alias=True)}
        if not report.errors:
            body.pop("errors")
        return jsonify(body)

    @app.route("/api/linked-events", methods=["GET"])
    def list_linked_events():
        links = store.list_links()
        return jsonify(
            {"links": [link.model_dump(mode="json", by_alias=True) for link in links]}
        )

    @app.route("/api/linked-events", methods=["POST"])
    def create_linked_event():
        payload = ManualLinkRequest.model_validate(_json_body())
        link = store.create_manual_link(payload)
        return jsonify({"success": True, "id": link.id})

    @app.route("/api/linked-events/<link_id>", methods=["DELETE"])
    def delete_linked_event(link_id):
        store.remove_link(link_id)
        return jsonify({"success": True})

    return app
