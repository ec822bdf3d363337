"""
Data models for the print shop order desk.

This module contains:
- Order / Student: ledger tables (SQLAlchemy declarative models)
- OrderInput: coerced order submission
- DispatchResult / FileDispatch: print dispatch outcomes (dataclasses)

Every table registers itself on Base.metadata when this package is imported.
"""

from .base import Base, utc_now
from .order import Order, OrderInput, OrderStatus, PaymentMethod
from .student import Student
from .dispatch_result import DispatchResult, DispatchStatus, FileDispatch

__all__ = [
    "Base",
    "utc_now",
    # Ledger models
    "Order",
    "OrderInput",
    "OrderStatus",
    "PaymentMethod",
    "Student",
    # Dispatch models
    "DispatchResult",
    "DispatchStatus",
    "FileDispatch",
]
