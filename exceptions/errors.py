"""
Custom exception classes for the application.

Every error carries a stable code, an HTTP status and a details dict,
and serializes to the standard error envelope via to_dict().
"""

from typing import Optional, Any
from datetime import datetime


class AppError(Exception):
    """
    Base exception for all application errors.

    All custom exceptions inherit from this.

    Attributes:
        code: Error code (e.g., "COLOR_NOT_FOUND")
        message: Human-readable message
        status_code: HTTP status code
        details: Additional context
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.utcnow().isoformat()
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to API response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "timestamp": self.timestamp
            }
        }


class NotFoundError(AppError):
    """Resource not found (404)."""

    def __init__(
        self,
        resource: str,
        identifier: Any,
        code: Optional[str] = None
    ):
        super().__init__(
            code=code or f"{resource.upper()}_NOT_FOUND",
            message=f"{resource} not found",
            status_code=404,
            details={"id": identifier}
        )


class ValidationError(AppError):
    """Validation failed (422)."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=422,
            details=details
        )


class ConflictError(AppError):
    """Conflict with existing resource (409)."""

    def __init__(
        self,
        message: str,
        code: str = "CONFLICT",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=409,
            details=details
        )


class InUseError(ConflictError):
    """Resource is still referenced by stock or conversion rows (409)."""

    def __init__(
        self,
        resource: str,
        identifier: Any,
        referenced_by: list[str]
    ):
        super().__init__(
            code=f"{resource.upper()}_IN_USE",
            message=f"{resource} is still used by {', '.join(referenced_by)}",
            details={"id": identifier, "referenced_by": referenced_by}
        )


class DatabaseError(AppError):
    """Database operation failed (500)."""

    def __init__(
        self,
        operation: str,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code="DATABASE_ERROR",
            message=f"Database {operation} failed: {message}",
            status_code=500,
            details={"operation": operation, **(details or {})}
        )


# ===================
# MASTER DATA ERRORS
# ===================

class ColorNotFoundError(NotFoundError):
    """Color not found."""

    def __init__(self, color_id: Any):
        super().__init__(
            resource="Color",
            identifier=color_id,
            code="COLOR_NOT_FOUND"
        )


class LocationNotFoundError(NotFoundError):
    """Location not found."""

    def __init__(self, location_id: Any):
        super().__init__(
            resource="Location",
            identifier=location_id,
            code="LOCATION_NOT_FOUND"
        )


class ProductNotFoundError(NotFoundError):
    """Product not found."""

    def __init__(self, product_id: Any):
        super().__init__(
            resource="Product",
            identifier=product_id,
            code="PRODUCT_NOT_FOUND"
        )


# ===================
# GOODS RECEIPT ERRORS
# ===================

class GoodsReceiptNotFoundError(NotFoundError):
    """Goods receipt not found."""

    def __init__(self, receipt_id: Any):
        super().__init__(
            resource="Goods receipt",
            identifier=receipt_id,
            code="GOODS_RECEIPT_NOT_FOUND"
        )


# ===================
# CONVERSION ERRORS
# ===================

class ConversionRetrievalError(DatabaseError):
    """Listing ready-to-count items failed. No partial list is returned."""

    def __init__(self, location_id: Any, message: str):
        super().__init__(
            operation="select",
            message=message,
            details={"location_id": location_id}
        )
        self.code = "CONVERSION_RETRIEVAL_FAILED"


class ConversionOperationError(AppError):
    """
    Base for every failure of a conversion write.

    Subclasses distinguish not-found, floor-at-zero and lost-race cases
    so callers can react differently; storage faults surface as
    DatabaseError.
    """
    pass


class ConversionItemNotFoundError(ConversionOperationError):
    """Conversion item not found (404)."""

    def __init__(self, item_id: Any):
        super().__init__(
            code="CONVERSION_ITEM_NOT_FOUND",
            message="Conversion item not found",
            status_code=404,
            details={"id": item_id}
        )


class NoBoxesRemainingError(ConversionOperationError):
    """Ready-box count is already at zero (409)."""

    def __init__(self, item_id: Any):
        super().__init__(
            code="NO_BOXES_REMAINING",
            message="No boxes left to process",
            status_code=409,
            details={"id": item_id, "ready_box_count": 0}
        )


class ConcurrentConversionError(ConversionOperationError):
    """Row changed between read and guarded write (409)."""

    def __init__(self, resource: str, identifier: Any, expected_count: int):
        super().__init__(
            code="CONCURRENT_CONVERSION",
            message=f"{resource} was modified by another request, reload and try again",
            status_code=409,
            details={"resource": resource, "id": identifier, "expected_count": expected_count}
        )


class InsufficientBoxStockError(ConversionOperationError):
    """Not enough boxes in stock to open for counting (422)."""

    def __init__(self, requested: int, available: int):
        super().__init__(
            code="INSUFFICIENT_BOX_STOCK",
            message="Insufficient stock for conversion",
            status_code=422,
            details={"requested": requested, "available": available}
        )


# ===================
# USER ERRORS
# ===================

class UserNotFoundError(NotFoundError):
    """User not found."""

    def __init__(self, user_id: Any):
        super().__init__(
            resource="User",
            identifier=user_id,
            code="USER_NOT_FOUND"
        )


class UserEmailExistsError(ConflictError):
    """Email already belongs to another user (409)."""

    def __init__(self, email: str):
        super().__init__(
            code="USER_EMAIL_EXISTS",
            message=f"A user with email '{email}' already exists",
            details={"email": email}
        )
