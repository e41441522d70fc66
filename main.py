"""
Gudang Backend - FastAPI application entry point.

Serves the warehouse console: goods receipts, box-to-pair conversion,
stock views, master data, users, store sales history and conversion
reports.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import settings, check_connection
from routes import (
    conversions_router,
    goods_receipts_router,
    stock_router,
    colors_router,
    locations_router,
    reports_router,
    users_router,
    sales_router,
)

logging.basicConfig(format="%(message)s", level=settings.log_level)

structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.JSONRenderer() if settings.is_production
            else structlog.dev.ConsoleRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger(__name__)

API_VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log configuration and probe the store on startup."""
    logger.info(
        "gudang_backend_starting",
        environment=settings.environment,
        main_warehouse_id=settings.main_warehouse_id
    )

    db_status = check_connection()
    if db_status["status"] == "healthy":
        logger.info(
            "database_connected",
            locations=db_status["locations_count"],
            open_conversions=db_status["open_conversions_count"]
        )
    else:
        # Keep serving; /health reports degraded until the store is back
        logger.error("database_unreachable_at_startup", error=db_status.get("error"))

    yield

    logger.info("gudang_backend_stopped")


app = FastAPI(
    title="Gudang Backend",
    description="Warehouse receiving, box-to-pair conversion and stock views for footwear distribution",
    version=API_VERSION,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

for router in (
    conversions_router,
    goods_receipts_router,
    stock_router,
    colors_router,
    locations_router,
    reports_router,
    users_router,
    sales_router,
):
    app.include_router(router)


@app.get("/health")
async def health_check():
    """Store reachability plus open conversion count."""
    db_status = check_connection()

    return {
        "status": "healthy" if db_status["status"] == "healthy" else "degraded",
        "timestamp": datetime.utcnow().isoformat(),
        "environment": settings.environment,
        "database": db_status
    }


@app.get("/")
async def root():
    return {
        "name": "Gudang Backend API",
        "version": API_VERSION,
        "health": "/health",
        "endpoints": {
            "conversions": "/api/conversions",
            "goods_receipts": "/api/goods-receipts",
            "stock": "/api/stock",
            "colors": "/api/colors",
            "locations": "/api/locations",
            "reports": "/api/reports",
            "users": "/api/users",
            "sales": "/api/sales/history"
        }
    }


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Anything a route did not convert becomes the standard error envelope."""
    logger.error(
        "unhandled_exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        error_type=type(exc).__name__
    )

    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
                "details": str(exc) if settings.debug else None,
                "timestamp": datetime.utcnow().isoformat()
            }
        }
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug
    )
