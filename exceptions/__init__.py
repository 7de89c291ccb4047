"""
Custom exceptions module.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    NotFoundError,
    ValidationError,
    DatabaseError,

    # Inventory
    InventoryItemNotFoundError,

    # BOM upload
    UnsupportedFileTypeError,
    BOMFileDecodeError,
    PDFParseError,
    BOMSessionNotFoundError,
    BOMRowNotFoundError,
    BOMCommitError,
)

__all__ = [
    # Base
    "AppError",
    "NotFoundError",
    "ValidationError",
    "DatabaseError",

    # Inventory
    "InventoryItemNotFoundError",

    # BOM upload
    "UnsupportedFileTypeError",
    "BOMFileDecodeError",
    "PDFParseError",
    "BOMSessionNotFoundError",
    "BOMRowNotFoundError",
    "BOMCommitError",
]
