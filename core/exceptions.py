"""
Custom exceptions for the print shop order desk.

Exception Hierarchy:
    PrintShopError (base)
    ├── ValidationError        - Missing/invalid input (400, nothing mutated)
    │   └── NoFilesError       - Order has no files to print
    ├── NotFoundError          - Order, student or file absent (404)
    │   └── MissingFileError   - Referenced upload missing from storage
    ├── ConflictError          - Duplicate unique field, e.g. email (409)
    ├── UnauthorizedError      - Admin capability check failed (401)
    ├── StoreError             - Persistence failure (500, opaque to caller)
    ├── DispatchError          - Print sink failure (logged only)
    └── PaymentGatewayError    - Payment order creation failed (502)

Usage:
    Services raise these; the app-level error handler renders them as
    {"error": message} with status_code. StoreError and PaymentGatewayError
    carry a public_message so internal detail never reaches the caller.
"""

from typing import Optional, Dict, Any


class PrintShopError(Exception):
    """
    Base exception for all print shop errors.

    All custom exceptions inherit from this class, allowing callers to catch
    all application-specific errors with a single except clause if needed.
    """

    status_code = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional context for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    @property
    def public_message(self) -> str:
        """Message that is safe to show to the caller."""
        return self.message

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# REQUEST ERRORS - detected before any mutation
# =============================================================================

class ValidationError(PrintShopError):
    """Required input is missing or malformed."""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else None
        super().__init__(message, details)
        self.field = field


class NoFilesError(ValidationError):
    """An order was asked to print but references no files."""

    def __init__(self, order_id: int):
        super().__init__("No files to print")
        self.details["order_id"] = order_id
        self.order_id = order_id


class NotFoundError(PrintShopError):
    """A referenced order, student or file does not exist."""

    status_code = 404

    def __init__(self, entity: str, identifier: Any):
        message = f"{entity} not found"
        super().__init__(message, {"entity": entity, "id": identifier})
        self.entity = entity
        self.identifier = identifier


class MissingFileError(NotFoundError):
    """
    A file referenced by an order is no longer in upload storage.

    Raised at dispatch time, before any file of the order is sent.
    """

    def __init__(self, file_ref: str, order_id: Optional[int] = None):
        super().__init__("File", file_ref)
        self.message = f"File not found: {file_ref}"
        if order_id is not None:
            self.details["order_id"] = order_id
        self.file_ref = file_ref


class ConflictError(PrintShopError):
    """A unique field (e.g. student email) is already taken."""

    status_code = 409

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else None
        super().__init__(message, details)
        self.field = field


class UnauthorizedError(PrintShopError):
    """The caller lacks the capability required for this operation."""

    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


# =============================================================================
# INFRASTRUCTURE ERRORS - logged with detail, surfaced opaquely
# =============================================================================

class StoreError(PrintShopError):
    """
    The ledger store failed to execute an operation.

    The underlying database exception is kept in details for logging;
    callers only ever see "Database error".
    """

    status_code = 500

    def __init__(self, operation: str, cause: Optional[BaseException] = None):
        message = f"Store operation '{operation}' failed"
        details = {"operation": operation}
        if cause is not None:
            details["cause"] = repr(cause)
        super().__init__(message, details)
        self.operation = operation

    @property
    def public_message(self) -> str:
        return "Database error"


class DispatchError(PrintShopError):
    """
    The print sink rejected or failed a single file.

    Never propagated to the HTTP caller: recorded in the dispatch result
    and logged.
    """

    def __init__(self, file_ref: str, reason: str):
        super().__init__(f"Print failed for {file_ref}: {reason}", {"file": file_ref})
        self.file_ref = file_ref
        self.reason = reason


class PaymentGatewayError(PrintShopError):
    """The payment gateway could not create an order."""

    status_code = 502

    def __init__(self, reason: str):
        super().__init__(f"Payment gateway error: {reason}")
        self.reason = reason

    @property
    def public_message(self) -> str:
        return "Payment creation failed"
