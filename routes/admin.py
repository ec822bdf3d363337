"""
Staff routes.

- POST /api/login     - Exchange admin credentials for a capability token
- POST /api/reset-db  - Delete every order (admin, destructive)
"""

from flask import Blueprint, current_app

from logging_config import get_logger
from .helpers import admin_required, current_capability, request_data, service


# Module logger
logger = get_logger(__name__)

admin_bp = Blueprint("admin", __name__)


@admin_bp.route("/api/login", methods=["POST"])
def login():
    """
    Admin login.

    The returned token must be sent back as "Authorization: Bearer <token>"
    on every admin request.
    """
    data = request_data()
    gate = current_app.config["ACCESS_GATE"]
    token = gate.login(data.get("username"), data.get("password"))
    return {"message": "Login successful", "token": token, "expiresIn": gate.max_age_seconds}


@admin_bp.route("/api/reset-db", methods=["POST"])
@admin_required
def reset_db():
    removed = service("ORDER_SERVICE").reset_orders()
    logger.warning(f"Order ledger reset by {current_capability().subject}")
    return {"message": "Database cleared", "removed": removed}
