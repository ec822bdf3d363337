"""
Payment route.

- POST /api/create-payment - Open a gateway payment order for an amount (INR)
"""

from flask import Blueprint

from modules.form_input import parse_int, sanitize_text
from modules.payment_gateway import new_receipt_id
from logging_config import get_logger
from .helpers import request_data, service


# Module logger
logger = get_logger(__name__)

payments_bp = Blueprint("payments", __name__)


@payments_bp.route("/api/create-payment", methods=["POST"])
def create_payment():
    data = request_data()
    amount = parse_int(data.get("amount"))
    receipt_id = new_receipt_id()

    logger.info(
        f"Payment requested: {amount} INR for '{sanitize_text(data.get('studentName'))}' ({receipt_id})"
    )
    return service("PAYMENT_GATEWAY").create_order(amount, receipt_id)
