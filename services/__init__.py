"""
Business logic services.

Each service handles one domain area.
"""

from services.color_service import ColorService, get_color_service
from services.location_service import LocationService, get_location_service
from services.stock_service import StockService, get_stock_service
from services.goods_receipt_service import GoodsReceiptService, get_goods_receipt_service
from services.conversion_service import ConversionService, get_conversion_service
from services.report_service import ReportService, get_report_service
from services.export_service import ExportService, get_export_service
from services.user_service import UserService, get_user_service
from services.sales_service import SalesService, get_sales_service

__all__ = [
    "ColorService",
    "get_color_service",
    "LocationService",
    "get_location_service",
    "StockService",
    "get_stock_service",
    "GoodsReceiptService",
    "get_goods_receipt_service",
    "ConversionService",
    "get_conversion_service",
    "ReportService",
    "get_report_service",
    "ExportService",
    "get_export_service",
    "UserService",
    "get_user_service",
    "SalesService",
    "get_sales_service",
]
