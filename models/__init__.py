"""
Pydantic models for validation and serialization.
"""

from models.base import BaseSchema, TimestampMixin
from models.color import ColorCreate, ColorUpdate, ColorResponse
from models.location import LocationType, LocationCreate, LocationUpdate, LocationResponse
from models.goods_receipt import (
    GoodsReceiptCreate,
    GoodsReceiptResponse,
    GoodsReceiptHistoryItem,
)
from models.stock import BoxStockItem, BoxStockItemWithLocation, PairStockItem
from models.conversion import (
    TransactionType,
    ConversionItem,
    OpenBoxesRequest,
    PairCountEntry,
    PairCountRequest,
)
from models.report import ConversionHistoryItem, ConversionHistoryResponse
from models.user import UserRole, UserCreate, UserUpdate, UserResponse
from models.sale import SalesHistoryItem

__all__ = [
    # Base
    "BaseSchema",
    "TimestampMixin",

    # Master data
    "ColorCreate",
    "ColorUpdate",
    "ColorResponse",
    "LocationType",
    "LocationCreate",
    "LocationUpdate",
    "LocationResponse",

    # Goods receipts
    "GoodsReceiptCreate",
    "GoodsReceiptResponse",
    "GoodsReceiptHistoryItem",

    # Stock
    "BoxStockItem",
    "BoxStockItemWithLocation",
    "PairStockItem",

    # Conversion
    "TransactionType",
    "ConversionItem",
    "OpenBoxesRequest",
    "PairCountEntry",
    "PairCountRequest",

    # Reports
    "ConversionHistoryItem",
    "ConversionHistoryResponse",

    # Users
    "UserRole",
    "UserCreate",
    "UserUpdate",
    "UserResponse",

    # Sales
    "SalesHistoryItem",
]
