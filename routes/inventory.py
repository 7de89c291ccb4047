"""
Inventory API routes.

Read access to the catalog that BOM commits write into.
"""

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse
from typing import Optional
from datetime import datetime, timezone
import structlog

from models.inventory import InventoryItemResponse, InventoryListResponse
from services.inventory_service import get_inventory_service
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
    # Unexpected error
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

@router.get("", response_model=InventoryListResponse)
async def list_inventory(
    search: Optional[str] = Query(None, description="Filter by name"),
    low_stock: bool = Query(False, description="Only items at or below threshold")
):
    """List catalog items."""
    try:
        service = get_inventory_service()
        items = service.get_low_stock() if low_stock else service.get_all(search=search)
        if low_stock and search:
            needle = search.lower()
            items = [item for item in items if needle in item.name.lower()]

        return InventoryListResponse(
            data=items,
            total=len(items),
            as_of=datetime.now(timezone.utc)
        )

    except Exception as e:
        return handle_error(e)


@router.get("/low-stock", response_model=list[InventoryItemResponse])
async def get_low_stock_items():
    """Items whose total stock is at or below their threshold."""
    try:
        service = get_inventory_service()
        return service.get_low_stock()

    except Exception as e:
        return handle_error(e)


@router.get("/{item_id}", response_model=InventoryItemResponse)
async def get_inventory_item(item_id: str):
    """
    Get a single item.

    Args:
        item_id: Item UUID
    """
    try:
        service = get_inventory_service()
        return service.get_by_id(item_id)

    except Exception as e:
        return handle_error(e)
