"""
Inventory catalog schemas for validation and serialization.

An inventory item owns an ordered list of variants; each variant is one
size/color combination with its own stock count.
"""

from pydantic import Field, field_validator
from typing import Optional
from datetime import datetime
from uuid import uuid4

from models.base import BaseSchema, TimestampMixin


class ItemVariant(BaseSchema):
    """
    One size/color stock-keeping unit inside an inventory item.

    Matched against BOM rows by the exact (size, color) pair.
    """

    id: str = Field(
        default_factory=lambda: str(uuid4()),
        description="Variant UUID"
    )
    size: str = Field(default="", description="Size label, e.g. M or 32")
    color: str = Field(default="", description="Color name")
    stock: int = Field(default=0, ge=0, description="Units on hand")

    @field_validator("size", "color", mode="before")
    @classmethod
    def none_to_empty(cls, v: Optional[str]) -> str:
        """Stored rows may carry null for an unset size or color."""
        return v or ""


class InventoryItemCreate(BaseSchema):
    """
    Create a new inventory item.

    Required: name, sku
    Optional: everything else (defaults match a BOM-created item)
    """

    name: str = Field(
        ...,
        min_length=2,
        description="Item display name",
        examples=["Blue Jeans", "Red Kurti"]
    )
    sku: str = Field(
        ...,
        min_length=1,
        description="Stock keeping unit code"
    )
    category: str = Field(default="General", max_length=100)
    hsn: str = Field(default="", description="HSN tax classification code")
    vendor: str = ""
    purchase_price: float = Field(default=0, ge=0, description="Unit cost from supplier")
    selling_price: float = Field(default=0, ge=0, description="Unit selling price")
    tax_rate: float = Field(default=12, ge=0, le=100, description="Tax rate in percent")
    low_stock_threshold: int = Field(default=5, ge=0)
    variants: list[ItemVariant] = Field(default_factory=list)

    @field_validator("sku")
    @classmethod
    def sku_uppercase(cls, v: str) -> str:
        """SKU must be uppercase and trimmed."""
        return v.upper().strip()


class InventoryItemResponse(BaseSchema, TimestampMixin):
    """
    Inventory item with all fields.

    Used for GET responses and as the in-memory catalog for BOM matching.
    """

    id: str = Field(..., description="Item UUID")
    name: str
    sku: str = ""
    category: str = "General"
    hsn: str = ""
    vendor: str = ""
    purchase_price: float = 0
    selling_price: float = 0
    tax_rate: float = 0
    low_stock_threshold: int = 0
    variants: list[ItemVariant] = Field(default_factory=list)

    @field_validator("sku", "hsn", "vendor", mode="before")
    @classmethod
    def none_to_empty(cls, v: Optional[str]) -> str:
        return v or ""

    @property
    def total_stock(self) -> int:
        """Sum of stock across all variants."""
        return sum(v.stock for v in self.variants)

    @property
    def is_low_stock(self) -> bool:
        """Total stock at or below the item's threshold."""
        return self.total_stock <= self.low_stock_threshold


class InventoryItemSummary(BaseSchema):
    """Compact item view for dashboard tiles and lists."""

    id: str
    name: str
    sku: str
    total_stock: int
    low_stock_threshold: int

    @classmethod
    def from_item(cls, item: InventoryItemResponse) -> "InventoryItemSummary":
        return cls(
            id=item.id,
            name=item.name,
            sku=item.sku,
            total_stock=item.total_stock,
            low_stock_threshold=item.low_stock_threshold,
        )


class InventoryListResponse(BaseSchema):
    """List of inventory items."""

    data: list[InventoryItemResponse]
    total: int
    as_of: datetime = Field(..., description="When the list was read")
