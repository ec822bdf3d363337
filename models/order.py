"""
Order data models.

These models represent a student's print order as it flows through the
shop: upload -> pending -> (printed, any number of times) -> completed.

Persistence:
    - Order is the `orders` table row (SQLAlchemy)
    - OrderInput is the coerced, validated-on-create form of a submission

Lifecycle:
    PENDING -> COMPLETED

    Printing is an action, not a state. amount and payment_method are set
    once at creation and never written again.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional

from sqlalchemy import Column, DateTime, Enum, Integer, JSON, String, Text

from modules.form_input import parse_int, parse_optional_int, sanitize_text

from .base import Base, utc_now


class OrderStatus(str, enum.Enum):
    """Persisted status of an order."""

    PENDING = "pending"
    COMPLETED = "completed"


class PaymentMethod(str, enum.Enum):
    """How the student pays for an order."""

    CASH = "cash"
    ONLINE = "online"

    @classmethod
    def parse(cls, value: Any) -> "PaymentMethod":
        """Anything other than 'online' is a cash order."""
        if isinstance(value, str) and value.strip().lower() == cls.ONLINE.value:
            return cls.ONLINE
        return cls.CASH


class Order(Base):
    """A single print job in the ledger."""

    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    student_id = Column(Integer, nullable=True, index=True)
    student_name = Column(String(200), nullable=False, index=True)
    file_paths = Column(JSON, nullable=False, default=list)
    status = Column(
        Enum(OrderStatus, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=OrderStatus.PENDING,
    )
    payment_method = Column(
        Enum(PaymentMethod, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=PaymentMethod.CASH,
    )
    amount = Column(Integer, nullable=False, default=0)
    bin = Column(Text, nullable=True)
    lunch_time = Column(Text, nullable=True)
    pages = Column(Integer, nullable=False, default=0)
    copies = Column(Integer, nullable=False, default=0)
    print_type = Column(Text, nullable=True)
    sides = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utc_now, index=True)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON shape served by the API."""
        return {
            "id": self.id,
            "studentId": self.student_id,
            "studentName": self.student_name,
            "filePaths": list(self.file_paths or []),
            "status": self.status.value,
            "paymentMethod": self.payment_method.value,
            "amount": self.amount,
            "bin": self.bin,
            "lunchTime": self.lunch_time,
            "pages": self.pages,
            "copies": self.copies,
            "printType": self.print_type,
            "sides": self.sides,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self) -> str:
        return f"<Order id={self.id} student={self.student_name!r} status={self.status}>"


@dataclass
class OrderInput:
    """
    A print order submission after permissive coercion.

    Numeric fields that fail to parse are already 0 here; required-field
    validation (student name, files) is the lifecycle manager's job.
    """

    student_name: str
    """Name the order is filed under (sanitised)."""

    files: List[str] = field(default_factory=list)
    """Stored upload references, in submission order."""

    student_id: Optional[int] = None
    payment_method: PaymentMethod = PaymentMethod.CASH
    amount: int = 0
    bin: Optional[str] = None
    lunch_time: Optional[str] = None
    pages: int = 0
    copies: int = 0
    print_type: Optional[str] = None
    sides: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], files: List[str]) -> "OrderInput":
        """
        Build an OrderInput from submitted form fields (camelCase keys).

        Args:
            data: Mapping of form fields, e.g. request.form
            files: Stored file references for this submission

        Returns:
            OrderInput with every field coerced
        """
        return cls(
            student_name=sanitize_text(data.get("studentName"), max_length=200),
            files=list(files),
            student_id=parse_optional_int(data.get("studentId")),
            payment_method=PaymentMethod.parse(data.get("paymentMethod")),
            amount=parse_int(data.get("amount")),
            bin=sanitize_text(data.get("bin")) or None,
            lunch_time=sanitize_text(data.get("lunchTime")) or None,
            pages=parse_int(data.get("pages")),
            copies=parse_int(data.get("copies")),
            print_type=sanitize_text(data.get("printType")) or None,
            sides=sanitize_text(data.get("sides")) or None,
        )
