"""
Test data factories.

Uses factory pattern to generate consistent test data.
Every factory returns a dict shaped like the stored database row.
"""

from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4


def _iso(value: Optional[datetime] = None) -> str:
    return (value or datetime.now(timezone.utc)).isoformat()


class InventoryItemFactory:
    """
    Factory for creating test inventory item rows.

    Usage:
        # Create with defaults
        item = InventoryItemFactory.create()

        # Create with overrides
        item = InventoryItemFactory.create(name="Blue Jeans", variants=[
            InventoryItemFactory.variant(size="32", color="Blue", stock=4)
        ])

        # Create multiple
        items = InventoryItemFactory.create_batch(5)
    """

    _counter = 0

    @classmethod
    def _next_counter(cls) -> int:
        cls._counter += 1
        return cls._counter

    @staticmethod
    def variant(size: str = "", color: str = "", stock: int = 10, id: Optional[str] = None) -> dict:
        """Single variant dict."""
        return {
            "id": id or str(uuid4()),
            "size": size,
            "color": color,
            "stock": stock,
        }

    @classmethod
    def create(
        cls,
        id: Optional[str] = None,
        name: Optional[str] = None,
        sku: Optional[str] = None,
        category: str = "General",
        purchase_price: float = 100,
        selling_price: float = 140,
        tax_rate: float = 12,
        low_stock_threshold: int = 5,
        variants: Optional[list] = None,
        created_at: Optional[datetime] = None,
    ) -> dict:
        """
        Create a single inventory item dict.

        Args:
            id: Item UUID (auto-generated if not provided)
            name: Display name (auto-generated if not provided)
            sku: SKU (auto-generated if not provided)
            variants: Variant dicts (one default variant with 10 units if not provided)

        Returns:
            Item dict matching database schema
        """
        counter = cls._next_counter()
        timestamp = _iso(created_at)

        return {
            "id": id or str(uuid4()),
            "name": name or f"Test Item {counter}",
            "sku": sku if sku is not None else f"TST-{counter:04d}",
            "category": category,
            "hsn": "",
            "vendor": "",
            "purchase_price": purchase_price,
            "selling_price": selling_price,
            "tax_rate": tax_rate,
            "low_stock_threshold": low_stock_threshold,
            "variants": variants if variants is not None else [cls.variant()],
            "created_at": timestamp,
            "updated_at": timestamp,
        }

    @classmethod
    def create_batch(cls, count: int, **overrides) -> list:
        """Create multiple items."""
        return [cls.create(**overrides) for _ in range(count)]


class InvoiceFactory:
    """
    Factory for creating test invoice rows.

    Usage:
        invoice = InvoiceFactory.create(lines=[("Blue Jeans", 3), ("Red Kurti", 1)])
    """

    _counter = 0

    @classmethod
    def _next_counter(cls) -> int:
        cls._counter += 1
        return cls._counter

    @staticmethod
    def line(item_name: str, quantity: int, unit_price: float = 100) -> dict:
        """Single invoice line dict."""
        return {
            "item_id": str(uuid4()),
            "item_name": item_name,
            "size": "",
            "color": "",
            "quantity": quantity,
            "unit_price": unit_price,
            "total": quantity * unit_price,
        }

    @classmethod
    def create(
        cls,
        lines: Optional[list[tuple[str, int]]] = None,
        created_at: Optional[datetime] = None,
        customer_name: Optional[str] = None,
        id: Optional[str] = None,
    ) -> dict:
        """
        Create a single invoice dict.

        Args:
            lines: (item_name, quantity) pairs
            created_at: Creation time (now if not provided)
        """
        counter = cls._next_counter()
        items = [cls.line(name, qty) for name, qty in (lines or [("Test Item", 1)])]
        subtotal = sum(item["total"] for item in items)

        return {
            "id": id or str(uuid4()),
            "invoice_number": f"INV-{counter:05d}",
            "customer_name": customer_name,
            "items": items,
            "subtotal": subtotal,
            "tax_amount": round(subtotal * 0.12, 2),
            "grand_total": round(subtotal * 1.12, 2),
            "payment_method": "cash",
            "created_at": _iso(created_at),
        }
