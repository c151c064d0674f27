from datetime import datetime, timezone

from flask import Blueprint, request, jsonify, current_app

from ..extensions import shopify_client

bp = Blueprint("extension_data", __name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@bp.get("/extension-data")
def extension_health():
    """Connectivity check used by the admin extension before it enables its action."""
    current_app.logger.info("GET /api/extension-data")
    return jsonify({
        "status": "ok",
        "timestamp": _now(),
        "environment": current_app.config.get("ENVIRONMENT", "development"),
        "shopDomain": shopify_client.domain,
        "imageApiMode": current_app.config.get("IMAGE_API_MODE", "demo"),
        "message": "Extension data API is working correctly",
    })


@bp.post("/extension-data")
def extension_test_data():
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return jsonify({"error": "Request body must be a JSON object"}), 400
    action_type = body.get("actionType")
    if action_type != "testData":
        return jsonify({"error": f"Unknown action type: {action_type}"}), 400

    received = {
        "testField": body.get("testField"),
        "productIds": body.get("productIds"),
        "metadata": body.get("metadata"),
    }
    current_app.logger.info("Test data received: %s", received)
    return jsonify({
        "actionType": "testData",
        "received": received,
        "processedAt": _now(),
        "message": f"Successfully received test data from {shopify_client.domain}",
    })
