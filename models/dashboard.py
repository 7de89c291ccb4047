"""
Dashboard schemas.

See services/dashboard_service.py for how each part is derived.
"""

from pydantic import Field
from datetime import date

from models.base import BaseSchema
from models.inventory import InventoryItemSummary
from models.invoice import InvoiceResponse


class DailySummary(BaseSchema):
    """Precomputed statistics for one business day."""

    summary_date: date
    total_sales: float = 0
    total_items_sold: int = 0
    invoice_count: int = 0
    total_cash_in: float = 0
    total_cash_out: float = 0
    gross_profit: float = 0
    tax_collected: float = 0

    @classmethod
    def empty(cls, day: date) -> "DailySummary":
        """Summary for a day with no recorded activity."""
        return cls(summary_date=day)


class TopSellingItem(BaseSchema):
    """Units sold today for one item name."""

    name: str
    sold: int = Field(..., ge=0)


class DashboardResponse(BaseSchema):
    """Everything the dashboard screen needs in one payload."""

    summary: DailySummary
    top_selling_items: list[TopSellingItem]
    recent_invoices: list[InvoiceResponse]
    low_stock_items: list[InventoryItemSummary]
