"""
Custom exception classes for the application.

Every error carries a stable code so the front-end can react to it.
"""

from typing import Optional, Any
from datetime import datetime, timezone


class AppError(Exception):
    """
    Base exception for all application errors.

    All custom exceptions inherit from this.

    Attributes:
        code: Error code (e.g., "INVENTORY_ITEM_NOT_FOUND")
        message: Human-readable message
        status_code: HTTP status code
        details: Additional context
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to API response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "timestamp": self.timestamp
            }
        }


class NotFoundError(AppError):
    """Resource not found (404)."""

    def __init__(
        self,
        resource: str,
        identifier: str,
        code: Optional[str] = None
    ):
        super().__init__(
            code=code or f"{resource.upper()}_NOT_FOUND",
            message=f"{resource} not found",
            status_code=404,
            details={"id": identifier}
        )


class ValidationError(AppError):
    """Validation failed (422)."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=422,
            details=details
        )


class DatabaseError(AppError):
    """Database operation failed (500)."""

    def __init__(
        self,
        operation: str,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code="DATABASE_ERROR",
            message=f"Database {operation} failed: {message}",
            status_code=500,
            details={"operation": operation, **(details or {})}
        )


# ===================
# INVENTORY ERRORS
# ===================

class InventoryItemNotFoundError(NotFoundError):
    """Inventory item not found."""

    def __init__(self, item_id: str):
        super().__init__(
            resource="Inventory item",
            identifier=item_id,
            code="INVENTORY_ITEM_NOT_FOUND"
        )


# ===================
# BOM UPLOAD ERRORS
# ===================

class UnsupportedFileTypeError(ValidationError):
    """Uploaded file is neither a spreadsheet, a PDF nor an image."""

    def __init__(self, filename: str, content_type: Optional[str] = None):
        super().__init__(
            code="UNSUPPORTED_FILE_TYPE",
            message="Unsupported file type. Please upload CSV, Excel, PDF, or image files.",
            details={"filename": filename, "content_type": content_type}
        )


class BOMFileDecodeError(ValidationError):
    """Spreadsheet could not be decoded."""

    def __init__(
        self,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code="BOM_FILE_DECODE_ERROR",
            message=message,
            details=details
        )


class PDFParseError(ValidationError):
    """No usable text could be extracted from a PDF or image."""

    def __init__(
        self,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code="PDF_PARSE_ERROR",
            message=message,
            details=details
        )


class BOMSessionNotFoundError(NotFoundError):
    """Upload session missing or expired."""

    def __init__(self, session_id: str):
        super().__init__(
            resource="BOM session",
            identifier=session_id,
            code="BOM_SESSION_NOT_FOUND"
        )


class BOMRowNotFoundError(NotFoundError):
    """Row index outside the session's row list."""

    def __init__(self, session_id: str, index: int):
        super().__init__(
            resource="BOM row",
            identifier=f"{session_id}:{index}",
            code="BOM_ROW_NOT_FOUND"
        )


class BOMCommitError(AppError):
    """Commit stopped part way through. Rows already applied stay applied."""

    def __init__(self, created: int, updated: int, error: str):
        super().__init__(
            code="BOM_COMMIT_FAILED",
            message="Error processing items. Please try again.",
            status_code=500,
            details={"created": created, "updated": updated, "error": error}
        )
