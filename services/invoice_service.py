"""
Invoice service.

Read-only access to invoices written by the billing flow.
"""

from typing import Optional
from datetime import datetime
import structlog

from config import get_supabase_client
from models.invoice import InvoiceResponse
from exceptions import DatabaseError

logger = structlog.get_logger(__name__)


class InvoiceService:
    """
    Invoice queries.
    """

    def __init__(self):
        self.db = get_supabase_client()
        self.table = "invoices"

    def get_since(self, since: datetime) -> list[InvoiceResponse]:
        """
        Invoices created at or after `since`, newest first.

        Args:
            since: Timezone-aware lower bound (inclusive)

        Returns:
            List of InvoiceResponse
        """
        logger.info("getting_invoices_since", since=since.isoformat())

        try:
            result = (
                self.db.table(self.table)
                .select("*")
                .gte("created_at", since.isoformat())
                .order("created_at", desc=True)
                .execute()
            )

            invoices = [InvoiceResponse(**row) for row in result.data]

            logger.info("invoices_retrieved", count=len(invoices))

            return invoices

        except Exception as e:
            logger.error("get_invoices_failed", error=str(e))
            raise DatabaseError("select", str(e))


# Singleton instance for convenience
_invoice_service: Optional[InvoiceService] = None


def get_invoice_service() -> InvoiceService:
    """Get or create InvoiceService instance."""
    global _invoice_service
    if _invoice_service is None:
        _invoice_service = InvoiceService()
    return _invoice_service
