"""
Dashboard API routes.

Provides the day's KPIs, best sellers, recent invoices and low-stock items.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from datetime import datetime, timezone
import structlog

from config import settings
from models.dashboard import DashboardResponse, DailySummary, TopSellingItem
from services.dashboard_service import get_dashboard_service, start_of_day
from exceptions import AppError

logger = structlog.get_logger(__name__)

router = APIRouter()


# ===================
# EXCEPTION HANDLER
# ===================

def handle_error(e: Exception) -> JSONResponse:
    """Convert exception to JSON response."""
    if isinstance(e, AppError):
        return JSONResponse(
            status_code=e.status_code,
            content=e.to_dict()
        )
    logger.error("unexpected_error", error=str(e), type=type(e).__name__)
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred"
            }
        }
    )


# ===================
# ROUTES
# ===================

@router.get("", response_model=DashboardResponse)
async def get_dashboard():
    """
    Full dashboard payload.

    Summary, low-stock items and today's invoices are fetched concurrently.
    """
    try:
        service = get_dashboard_service()
        return await service.load()

    except Exception as e:
        return handle_error(e)


@router.get("/summary", response_model=DailySummary)
async def get_daily_summary():
    """Today's precomputed sales/cash/profit figures."""
    try:
        service = get_dashboard_service()
        today = start_of_day(datetime.now(timezone.utc), settings.store_timezone)
        return service.get_daily_summary(today.date())

    except Exception as e:
        return handle_error(e)


@router.get("/top-selling", response_model=list[TopSellingItem])
async def get_top_selling():
    """Today's best-selling items by units sold."""
    try:
        service = get_dashboard_service()
        return service.get_top_selling()

    except Exception as e:
        return handle_error(e)
