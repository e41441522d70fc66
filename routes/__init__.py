"""
API route modules.

Each module defines routes for one domain area.
"""

from routes.conversions import router as conversions_router
from routes.goods_receipts import router as goods_receipts_router
from routes.stock import router as stock_router
from routes.colors import router as colors_router
from routes.locations import router as locations_router
from routes.reports import router as reports_router
from routes.users import router as users_router
from routes.sales import router as sales_router

__all__ = [
    "conversions_router",
    "goods_receipts_router",
    "stock_router",
    "colors_router",
    "locations_router",
    "reports_router",
    "users_router",
    "sales_router",
]
