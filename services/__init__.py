"""
Business logic services.

Each service handles one domain area.
"""

from services import bom_session_service
from services.inventory_service import InventoryService, get_inventory_service
from services.invoice_service import InvoiceService, get_invoice_service
from services.dashboard_service import DashboardService, get_dashboard_service
from services.text_extraction_service import (
    TextExtractor,
    SimulatedOCRExtractor,
    PdfPlumberExtractor,
    get_text_extractor,
)
from services.bom_service import BOMService, get_bom_service

__all__ = [
    "bom_session_service",
    "InventoryService",
    "get_inventory_service",
    "InvoiceService",
    "get_invoice_service",
    "DashboardService",
    "get_dashboard_service",
    "TextExtractor",
    "SimulatedOCRExtractor",
    "PdfPlumberExtractor",
    "get_text_extractor",
    "BOMService",
    "get_bom_service",
]
