"""
Invoice schemas.

Invoices are written by the billing flow; this service only reads them.
"""

from pydantic import Field, field_validator
from typing import Optional
from datetime import datetime

from models.base import BaseSchema


class InvoiceLine(BaseSchema):
    """One line of an invoice."""

    item_id: Optional[str] = None
    item_name: str
    size: str = ""
    color: str = ""
    quantity: int = Field(..., ge=0)
    unit_price: float = Field(default=0, ge=0)
    total: float = Field(default=0, ge=0)

    @field_validator("size", "color", mode="before")
    @classmethod
    def none_to_empty(cls, v: Optional[str]) -> str:
        return v or ""


class InvoiceResponse(BaseSchema):
    """Invoice as stored."""

    id: str
    invoice_number: Optional[str] = None
    customer_name: Optional[str] = Field(None, description="Empty for walk-in customers")
    items: list[InvoiceLine] = Field(default_factory=list)
    subtotal: float = 0
    tax_amount: float = 0
    grand_total: float = 0
    payment_method: Optional[str] = None
    created_at: datetime
