"""
Order lifecycle service.

Validates new orders and moves existing ones through their lifecycle:

    create_order      -> PENDING
    mark_completed    -> COMPLETED (idempotent)

There is no way back to PENDING, and nothing after creation touches
amount or payment_method. Printing is handled by DispatchService and
never changes status.

The service is stateless; everything lives in the LedgerStore.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable, List, Optional

from core.exceptions import NotFoundError, ValidationError
from core.ledger_store import LedgerStore
from models.base import utc_now
from models.order import Order, OrderInput, OrderStatus
from modules.form_input import sanitize_text
from logging_config import get_logger


logger = get_logger(__name__)

DEFAULT_MAX_FILES = 10


class OrderService:
    """
    Creates, completes and looks up orders.

    Attributes:
        max_files: Most files accepted on a single order
    """

    def __init__(
        self,
        store: LedgerStore,
        max_files: int = DEFAULT_MAX_FILES,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Args:
            store: Initialized LedgerStore
            max_files: Upper bound on files per order
            clock: Source of creation timestamps (naive UTC)
        """
        self._store = store
        self.max_files = max_files
        self._clock = clock

    def create_order(self, order_input: OrderInput) -> Order:
        """
        Validate and persist a new order.

        Args:
            order_input: Coerced submission (see OrderInput.from_dict)

        Returns:
            The stored Order with its id, status PENDING

        Raises:
            ValidationError: Missing student name, no files, or too many files
            StoreError: If the insert fails
        """
        if not order_input.student_name or not order_input.student_name.strip():
            raise ValidationError("Missing studentName or files", field="studentName")
        if not order_input.files:
            raise ValidationError("Missing studentName or files", field="files")
        if len(order_input.files) > self.max_files:
            raise ValidationError(
                f"Too many files: at most {self.max_files} per order", field="files"
            )

        order = Order(
            student_id=order_input.student_id,
            student_name=order_input.student_name.strip(),
            file_paths=list(order_input.files),
            status=OrderStatus.PENDING,
            payment_method=order_input.payment_method,
            amount=max(order_input.amount, 0),
            bin=order_input.bin,
            lunch_time=order_input.lunch_time,
            pages=max(order_input.pages, 0),
            copies=max(order_input.copies, 0),
            print_type=order_input.print_type,
            sides=order_input.sides,
            created_at=self._clock(),
        )
        order = self._store.add_order(order)

        logger.info(
            f"Order {order.id} created for '{order.student_name}': "
            f"{len(order.file_paths)} file(s), {order.payment_method.value} {order.amount}"
        )
        return order

    def mark_completed(self, order_id: int) -> Order:
        """
        Mark an order completed.

        Completing an already completed order succeeds and changes nothing.

        Raises:
            NotFoundError: If the order does not exist
        """
        matched = self._store.set_order_status(order_id, OrderStatus.COMPLETED)
        if not matched:
            raise NotFoundError("Order", order_id)

        logger.info(f"Order {order_id} marked completed")
        return self.get_order(order_id)

    def get_order(self, order_id: int) -> Order:
        """
        Raises:
            NotFoundError: If the order does not exist
        """
        order = self._store.get_order(order_id)
        if order is None:
            raise NotFoundError("Order", order_id)
        return order

    def list_orders_by_student(self, name: Optional[str]) -> List[Order]:
        """
        Orders filed under name, newest first.

        The name is cleaned the same way as on upload, so it matches the
        stored student_name.
        """
        name = sanitize_text(name, max_length=200)
        if not name:
            raise ValidationError(
                "Missing student name (query param ?name=...)", field="name"
            )
        return self._store.list_orders(student_name=name)

    def list_all_orders(self) -> List[Order]:
        """Every order, newest first."""
        return self._store.list_orders()

    def reset_orders(self) -> int:
        """
        Delete every order from the ledger.

        Students are kept. Returns the number of orders removed.
        """
        removed = self._store.delete_all_orders()
        logger.warning(f"Order ledger cleared: {removed} order(s) removed")
        return removed
