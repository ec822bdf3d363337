"""
Health check route.

- GET /health - Ledger store connectivity and dispatch thread status
"""

from flask import Blueprint, current_app

main_bp = Blueprint("main", __name__)


@main_bp.route("/health", methods=["GET"])
def health():
    """Health check endpoint with service status."""
    health_status = {
        "status": "ok",
        "environment": current_app.config.get("ENVIRONMENT", "unknown"),
        "checks": {}
    }

    store = current_app.config.get("LEDGER_STORE")
    if store and store.is_initialized and store.ping():
        health_status["checks"]["database"] = "ok"
    else:
        health_status["checks"]["database"] = "unavailable"
        health_status["status"] = "degraded"

    dispatch_service = current_app.config.get("DISPATCH_SERVICE")
    if dispatch_service:
        health_status["checks"]["dispatch"] = "ok"
    else:
        health_status["checks"]["dispatch"] = "not_available"
        health_status["status"] = "degraded"

    status_code = 200 if health_status["status"] == "ok" else 503
    return health_status, status_code
