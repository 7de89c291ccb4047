"""
Dashboard service.

Builds the dashboard payload:
    - today's precomputed summary (sales, cash in/out, profit, tax)
    - top-selling items, summed from today's invoice lines
    - the most recent of today's invoices
    - low-stock items
"""

import asyncio
from datetime import date, datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo
import structlog

from config import get_supabase_client, settings
from models.dashboard import DailySummary, DashboardResponse, TopSellingItem
from models.inventory import InventoryItemSummary
from models.invoice import InvoiceResponse
from services.inventory_service import get_inventory_service
from services.invoice_service import get_invoice_service
from exceptions import DatabaseError

logger = structlog.get_logger(__name__)


# ===================
# PURE CALCULATIONS
# ===================

def start_of_day(now: datetime, tz_name: str) -> datetime:
    """
    Local midnight of `now` in the store timezone, as an aware datetime.

    A naive `now` is taken to be UTC.
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    local = now.astimezone(ZoneInfo(tz_name))
    return local.replace(hour=0, minute=0, second=0, microsecond=0)


def _as_aware(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def filter_since(invoices: list[InvoiceResponse], since: datetime) -> list[InvoiceResponse]:
    """Keep invoices created at or after `since`, preserving order."""
    since = _as_aware(since)
    return [inv for inv in invoices if _as_aware(inv.created_at) >= since]


def calculate_top_selling(
    invoices: list[InvoiceResponse],
    limit: int = 5
) -> list[TopSellingItem]:
    """
    Units sold per item name across the given invoices, best first.

    Quantities are summed by item name before ranking. The sort is stable,
    so equal totals keep the order in which the names were first seen.

    Example:
        [("A", 3), ("B", 5)], [("A", 2)] → A:5, B:5
    """
    sold: dict[str, int] = {}
    for invoice in invoices:
        for line in invoice.items:
            sold[line.item_name] = sold.get(line.item_name, 0) + line.quantity

    ranked = sorted(sold.items(), key=lambda pair: pair[1], reverse=True)
    return [TopSellingItem(name=name, sold=count) for name, count in ranked[:limit]]


class DashboardService:
    """
    Dashboard aggregation.

    The three reads are independent and run concurrently.
    """

    def __init__(self):
        self.db = get_supabase_client()
        self.summary_table = "daily_summaries"
        self.inventory = get_inventory_service()
        self.invoices = get_invoice_service()

    def get_daily_summary(self, day: date) -> DailySummary:
        """
        Precomputed summary for `day`; zeros when the day has none yet.
        """
        logger.debug("getting_daily_summary", day=day.isoformat())

        try:
            result = (
                self.db.table(self.summary_table)
                .select("*")
                .eq("summary_date", day.isoformat())
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error("get_daily_summary_failed", day=day.isoformat(), error=str(e))
            raise DatabaseError("select", str(e))

        if not result.data:
            return DailySummary.empty(day)
        return DailySummary(**result.data[0])

    def get_today_invoices(self, now: Optional[datetime] = None) -> list[InvoiceResponse]:
        """Invoices since local midnight, newest first."""
        since = start_of_day(now or datetime.now(timezone.utc), settings.store_timezone)
        return filter_since(self.invoices.get_since(since), since)

    def get_top_selling(self, now: Optional[datetime] = None) -> list[TopSellingItem]:
        """Today's best sellers."""
        return calculate_top_selling(
            self.get_today_invoices(now),
            limit=settings.dashboard_top_items_limit
        )

    async def load(self, now: Optional[datetime] = None) -> DashboardResponse:
        """
        Fetch summary, low-stock items and today's invoices concurrently,
        then derive the rankings.
        """
        now = now or datetime.now(timezone.utc)
        today = start_of_day(now, settings.store_timezone)

        logger.info("loading_dashboard", since=today.isoformat())

        summary, low_stock, invoices = await asyncio.gather(
            asyncio.to_thread(self.get_daily_summary, today.date()),
            asyncio.to_thread(self.inventory.get_low_stock),
            asyncio.to_thread(self.invoices.get_since, today),
        )

        todays = filter_since(invoices, today)
        top_selling = calculate_top_selling(todays, limit=settings.dashboard_top_items_limit)

        logger.info(
            "dashboard_loaded",
            invoices_today=len(todays),
            low_stock=len(low_stock),
            top_items=len(top_selling)
        )

        return DashboardResponse(
            summary=summary,
            top_selling_items=top_selling,
            recent_invoices=todays[:settings.dashboard_recent_invoices_limit],
            low_stock_items=[InventoryItemSummary.from_item(item) for item in low_stock],
        )


# Singleton instance for convenience
_dashboard_service: Optional[DashboardService] = None


def get_dashboard_service() -> DashboardService:
    """Get or create DashboardService instance."""
    global _dashboard_service
    if _dashboard_service is None:
        _dashboard_service = DashboardService()
    return _dashboard_service
