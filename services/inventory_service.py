"""
Inventory service for catalog operations.

Items live in the `inventory_items` table; each row stores its variants
as a JSON array.
"""

from typing import Optional
from datetime import datetime, timezone
import structlog

from config import get_supabase_client
from models.inventory import (
    InventoryItemCreate,
    InventoryItemResponse,
    ItemVariant,
)
from exceptions import (
    InventoryItemNotFoundError,
    DatabaseError,
)

logger = structlog.get_logger(__name__)


class InventoryService:
    """
    Inventory business logic.

    Handles reads and writes of catalog items.
    """

    def __init__(self):
        self.db = get_supabase_client()
        self.table = "inventory_items"

    # ===================
    # READ OPERATIONS
    # ===================

    def get_all(self, search: Optional[str] = None) -> list[InventoryItemResponse]:
        """
        Get the whole catalog, ordered by name.

        Args:
            search: Case-insensitive name filter

        Returns:
            List of InventoryItemResponse
        """
        logger.info("getting_inventory_items", search=search)

        try:
            query = self.db.table(self.table).select("*")

            if search:
                query = query.ilike("name", f"%{search}%")

            result = query.order("name").execute()

            items = [InventoryItemResponse(**row) for row in result.data]

            logger.info("inventory_items_retrieved", count=len(items))

            return items

        except Exception as e:
            logger.error("get_inventory_items_failed", error=str(e))
            raise DatabaseError("select", str(e))

    def get_by_id(self, item_id: str) -> InventoryItemResponse:
        """
        Get a single item by ID.

        Args:
            item_id: Item UUID

        Returns:
            InventoryItemResponse

        Raises:
            InventoryItemNotFoundError: If item doesn't exist
        """
        logger.debug("getting_inventory_item", item_id=item_id)

        try:
            result = (
                self.db.table(self.table)
                .select("*")
                .eq("id", item_id)
                .execute()
            )

            if not result.data:
                raise InventoryItemNotFoundError(item_id)

            return InventoryItemResponse(**result.data[0])

        except InventoryItemNotFoundError:
            raise
        except Exception as e:
            logger.error(
                "get_inventory_item_failed",
                item_id=item_id,
                error=str(e)
            )
            raise DatabaseError("select", str(e))

    def get_low_stock(self) -> list[InventoryItemResponse]:
        """
        Items whose total variant stock is at or below their threshold.

        The threshold is per item, so the comparison happens here rather
        than in the query.
        """
        items = self.get_all()
        low = [item for item in items if item.is_low_stock]

        logger.info(
            "low_stock_items_found",
            count=len(low),
            catalog_size=len(items)
        )
        return low

    # ===================
    # WRITE OPERATIONS
    # ===================

    def create(self, data: InventoryItemCreate) -> InventoryItemResponse:
        """
        Create a new inventory item.

        Args:
            data: Item creation data

        Returns:
            Created InventoryItemResponse
        """
        logger.info("creating_inventory_item", name=data.name, sku=data.sku)

        try:
            now = datetime.now(timezone.utc).isoformat()
            insert_data = data.model_dump(mode="json")
            insert_data["created_at"] = now
            insert_data["updated_at"] = now

            result = (
                self.db.table(self.table)
                .insert(insert_data)
                .execute()
            )

            item = InventoryItemResponse(**result.data[0])

            logger.info(
                "inventory_item_created",
                item_id=item.id,
                sku=item.sku
            )

            return item

        except Exception as e:
            logger.error(
                "create_inventory_item_failed",
                name=data.name,
                error=str(e)
            )
            raise DatabaseError("insert", str(e))

    def update_variants(
        self,
        item_id: str,
        variants: list[ItemVariant]
    ) -> InventoryItemResponse:
        """
        Replace an item's variant list and bump updated_at.

        Last write wins; there is no version check.

        Raises:
            InventoryItemNotFoundError: If item doesn't exist
        """
        logger.info(
            "updating_inventory_variants",
            item_id=item_id,
            variant_count=len(variants)
        )

        try:
            result = (
                self.db.table(self.table)
                .update({
                    "variants": [v.model_dump(mode="json") for v in variants],
                    "updated_at": datetime.now(timezone.utc).isoformat(),
                })
                .eq("id", item_id)
                .execute()
            )

            if not result.data:
                raise InventoryItemNotFoundError(item_id)

            item = InventoryItemResponse(**result.data[0])

            logger.info(
                "inventory_variants_updated",
                item_id=item_id,
                total_stock=item.total_stock
            )

            return item

        except InventoryItemNotFoundError:
            raise
        except Exception as e:
            logger.error(
                "update_inventory_variants_failed",
                item_id=item_id,
                error=str(e)
            )
            raise DatabaseError("update", str(e))


# Singleton instance for convenience
_inventory_service: Optional[InventoryService] = None


def get_inventory_service() -> InventoryService:
    """Get or create InventoryService instance."""
    global _inventory_service
    if _inventory_service is None:
        _inventory_service = InventoryService()
    return _inventory_service
