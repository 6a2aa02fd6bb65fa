import logging
from flask import Blueprint, request, jsonify, current_app

from fhirq.metadata import MetadataError
from fhirq.models import Suggestion
from fhirq.query import CursorOutOfRangeError

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__)


def get_assistant():
    """Get the shared QueryAssistant."""
    return current_app.config["FHIRQ_ASSISTANT"]


def parse_int_arg(name: str):
    """Optional integer query argument; raises ValueError when not an integer."""
    value = request.args.get(name)
    if value is None or value == "":
        return None
    return int(value)


# ============ Autocomplete ============

@api_bp.route("/autocomplete", methods=["GET"])
def get_autocomplete():
    """Get autocomplete suggestions for a query."""
    assistant = get_assistant()
    
    query = request.args.get("q", "")
    try:
        cursor_pos = parse_int_arg("cursor")
        limit = parse_int_arg("limit")
    except ValueError:
        return jsonify({"error": "cursor and limit must be integers"}), 400
    
    parsed, suggestions = assistant.complete(query, cursor_pos)
    if limit is None:
        limit = assistant.limit
    
    return jsonify({
        "context": parsed.context.label,
        "parsed": parsed.to_dict(),
        "suggestions": [s.to_dict() for s in suggestions[:max(limit, 0)]]
    })


@api_bp.route("/parse", methods=["GET"])
def get_parse():
    """Classify the query at the cursor without producing suggestions."""
    query = request.args.get("q", "")
    try:
        cursor_pos = parse_int_arg("cursor")
    except ValueError:
        return jsonify({"error": "cursor must be an integer"}), 400
    
    return jsonify(get_assistant().parse(query, cursor_pos).to_dict())


@api_bp.route("/apply", methods=["POST"])
def post_apply():
    """Apply a chosen suggestion to the query text."""
    data = request.get_json(silent=True) or {}
    
    query = data.get("query")
    cursor = data.get("cursor")
    raw_suggestion = data.get("suggestion")
    
    if not isinstance(query, str):
        return jsonify({"error": "query must be a string"}), 400
    if cursor is None:
        cursor = len(query)
    if isinstance(cursor, bool) or not isinstance(cursor, int):
        return jsonify({"error": "cursor must be an integer"}), 400
    if not isinstance(raw_suggestion, dict):
        return jsonify({"error": "suggestion object required"}), 400
    
    try:
        suggestion = Suggestion.from_dict(raw_suggestion)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    
    try:
        result = get_assistant().apply(query, cursor, suggestion)
    except CursorOutOfRangeError as e:
        return jsonify({"error": str(e)}), 400
    
    return jsonify(result.to_dict())


@api_bp.route("/resource-types", methods=["GET"])
def get_resource_types():
    """List registry resource types, optionally filtered by prefix."""
    registry = get_assistant().registry
    prefix = request.args.get("prefix", "")
    return jsonify({
        "fhir_version": registry.version,
        "resource_types": registry.search_resource_types(prefix)
    })


# ============ Metadata ============

@api_bp.route("/metadata", methods=["GET"])
def get_metadata_status():
    """Describe the currently loaded capability metadata."""
    assistant = get_assistant()
    status = assistant.store.summary()
    status["registry_version"] = assistant.registry.version
    return jsonify(status)


@api_bp.route("/metadata/reload", methods=["POST"])
def reload_metadata():
    """Fetch the server's CapabilityStatement and swap it in."""
    loader = current_app.config["FHIRQ_LOADER"]
    data = request.get_json(silent=True) or {}
    
    base_url = str(data.get("base_url") or "").rstrip("/") or loader.base_url
    if not base_url:
        return jsonify({"error": "No FHIR base URL configured"}), 400

    try:
        snapshot = loader.load(prefer_cache=False, base_url=base_url)
    except MetadataError as e:
        logger.warning(f"Metadata reload failed: {e}")
        return jsonify({"error": str(e)}), 502

    # Only a URL that answered becomes the loader's default
    loader.base_url = base_url

    assistant = get_assistant()
    assistant.set_metadata(snapshot)
    
    status = snapshot.summary()
    status["registry_version"] = assistant.registry.version
    return jsonify(status)


@api_bp.route("/metadata", methods=["DELETE"])
def clear_metadata():
    """Drop the loaded metadata; suggestions fall back to registry data only."""
    get_assistant().set_metadata(None)
    return jsonify({"loaded": False})
