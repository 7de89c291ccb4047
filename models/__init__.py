"""
Pydantic models for validation and serialization.
"""

from models.base import (
    BaseSchema,
    TimestampMixin,
)
from models.inventory import (
    ItemVariant,
    InventoryItemCreate,
    InventoryItemResponse,
    InventoryItemSummary,
    InventoryListResponse,
)
from models.invoice import (
    InvoiceLine,
    InvoiceResponse,
)
from models.dashboard import (
    DailySummary,
    TopSellingItem,
    DashboardResponse,
)
from models.bom import (
    BOMAction,
    BOMSource,
    CreateRow,
    UpdateRow,
    IgnoreRow,
    ParsedRow,
    build_row,
    BOMRowEdit,
    BOMSession,
    BOMSessionResponse,
    BOMCommitResult,
    BOMCommitResponse,
)

__all__ = [
    # Base
    "BaseSchema",
    "TimestampMixin",

    # Inventory
    "ItemVariant",
    "InventoryItemCreate",
    "InventoryItemResponse",
    "InventoryItemSummary",
    "InventoryListResponse",

    # Invoices
    "InvoiceLine",
    "InvoiceResponse",

    # Dashboard
    "DailySummary",
    "TopSellingItem",
    "DashboardResponse",

    # BOM
    "BOMAction",
    "BOMSource",
    "CreateRow",
    "UpdateRow",
    "IgnoreRow",
    "ParsedRow",
    "build_row",
    "BOMRowEdit",
    "BOMSession",
    "BOMSessionResponse",
    "BOMCommitResult",
    "BOMCommitResponse",
]
