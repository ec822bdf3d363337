"""
Payment gateway adapters.

The order desk only asks the gateway to open a payment order for an
amount; settlement and verification happen outside the app.

    gateway.create_order(amount_inr=50, receipt_id="rcpt_1700000000000")
    -> {"orderId": "order_Nx...", "amount": 5000}   # amount in paise
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Dict, Any, Optional
from uuid import uuid4

import razorpay

from core.exceptions import PaymentGatewayError, ValidationError

CURRENCY = "INR"
PAISE_PER_RUPEE = 100


def new_receipt_id() -> str:
    """Receipt reference in the form rcpt_<epoch millis>."""
    return f"rcpt_{int(time.time() * 1000)}"


def _validate_amount(amount_inr: int) -> None:
    if not isinstance(amount_inr, int) or amount_inr <= 0:
        raise ValidationError("Amount required", field="amount")


class RazorpayGateway:
    """Creates payment orders through the Razorpay API."""

    def __init__(self, key_id: str, key_secret: str, logger: Optional[logging.Logger] = None):
        self._client = razorpay.Client(auth=(key_id, key_secret))
        self.logger = logger or logging.getLogger(__name__)

    def create_order(self, amount_inr: int, receipt_id: str) -> Dict[str, Any]:
        """
        Open a payment order.

        Args:
            amount_inr: Whole rupees, > 0
            receipt_id: Shop-side reference for the payment

        Returns:
            {"orderId": gateway order id, "amount": amount in paise}

        Raises:
            ValidationError: If amount_inr is not a positive integer
            PaymentGatewayError: If Razorpay rejects or cannot be reached
        """
        _validate_amount(amount_inr)

        data = {
            "amount": amount_inr * PAISE_PER_RUPEE,
            "currency": CURRENCY,
            "receipt": receipt_id,
            "payment_capture": 1,
        }
        try:
            response = self._client.order.create(data=data)
        except Exception as e:
            self.logger.error(f"Razorpay order creation failed for {receipt_id}: {e}")
            raise PaymentGatewayError(str(e)) from e

        self.logger.info(f"Payment order {response.get('id')} created for {receipt_id}")
        return {"orderId": response.get("id"), "amount": response.get("amount")}


class PaymentGatewayStub:
    """
    Stub gateway for development/testing without Razorpay keys.

    Returns made-up order ids; remembers what it was asked for.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self._lock = threading.Lock()
        self.created = []

    def create_order(self, amount_inr: int, receipt_id: str) -> Dict[str, Any]:
        _validate_amount(amount_inr)

        result = {
            "orderId": f"order_STUB{uuid4().hex[:12]}",
            "amount": amount_inr * PAISE_PER_RUPEE,
        }
        with self._lock:
            self.created.append({"receipt": receipt_id, **result})
        self.logger.info(f"Stub: payment order {result['orderId']} for {receipt_id}")
        return result


def create_payment_gateway(key_id: str, key_secret: str):
    """Razorpay when both keys are configured, otherwise the stub."""
    if key_id and key_secret:
        return RazorpayGateway(key_id, key_secret)
    logging.getLogger(__name__).warning("Razorpay keys not configured, using stub gateway")
    return PaymentGatewayStub()
