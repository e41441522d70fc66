"""
Custom exceptions module.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    NotFoundError,
    ValidationError,
    ConflictError,
    InUseError,
    DatabaseError,

    # Master data
    ColorNotFoundError,
    LocationNotFoundError,
    ProductNotFoundError,

    # Goods receipts
    GoodsReceiptNotFoundError,

    # Conversion
    ConversionRetrievalError,
    ConversionOperationError,
    ConversionItemNotFoundError,
    NoBoxesRemainingError,
    ConcurrentConversionError,
    InsufficientBoxStockError,

    # Users
    UserNotFoundError,
    UserEmailExistsError,
)

__all__ = [
    # Base
    "AppError",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "InUseError",
    "DatabaseError",

    # Master data
    "ColorNotFoundError",
    "LocationNotFoundError",
    "ProductNotFoundError",

    # Goods receipts
    "GoodsReceiptNotFoundError",

    # Conversion
    "ConversionRetrievalError",
    "ConversionOperationError",
    "ConversionItemNotFoundError",
    "NoBoxesRemainingError",
    "ConcurrentConversionError",
    "InsufficientBoxStockError",

    # Users
    "UserNotFoundError",
    "UserEmailExistsError",
]
