"""
Core module for the print shop order desk.

Contains fundamental infrastructure components:
- exceptions: Custom exception hierarchy
- ledger_store: SQLAlchemy-backed order and student store
- access: Admin capability tokens and checks
"""

from .exceptions import (
    PrintShopError,
    ValidationError,
    NoFilesError,
    NotFoundError,
    MissingFileError,
    ConflictError,
    UnauthorizedError,
    StoreError,
    DispatchError,
    PaymentGatewayError,
)
from .ledger_store import LedgerStore
from .access import AccessGate, Capability

__all__ = [
    "PrintShopError",
    "ValidationError",
    "NoFilesError",
    "NotFoundError",
    "MissingFileError",
    "ConflictError",
    "UnauthorizedError",
    "StoreError",
    "DispatchError",
    "PaymentGatewayError",
    "LedgerStore",
    "AccessGate",
    "Capability",
]
