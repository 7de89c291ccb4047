"""
BOM upload API routes.

Three-step flow:
    POST   /upload                     parse + match, opens a session
    GET    /{session_id}               review rows
    PATCH  /{session_id}/rows/{index}  edit one row / its action
    POST   /{session_id}/commit        apply to the catalog
    DELETE /{session_id}               discard
"""

from fastapi import APIRouter, UploadFile, File
from fastapi.responses import JSONResponse
import structlog

from config import settings
from models.bom import (
    BOMCommitResponse,
    BOMRowEdit,
    BOMSessionResponse,
    ParsedRow,
)
from services.bom_service import get_bom_service
from exceptions import AppError, ValidationError

logger = structlog.get_logger(__name__)

router = APIRouter()


# ===================
# EXCEPTION HANDLER
# ===================

def handle_error(e: Exception) -> JSONResponse:
    """Convert exception to JSON response."""
    if isinstance(e, AppError):
        return JSONResponse(
            status_code=e.status_code,
            content=e.to_dict()
        )
    # Unexpected error
    logger.error("unexpected_error", error=str(e), type=type(e).__name__)
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "Error parsing file. Please try again."
            }
        }
    )


# ===================
# ROUTES
# ===================

@router.post("/upload", response_model=BOMSessionResponse)
async def upload_bom(
    file: UploadFile = File(..., description="CSV, Excel, PDF or image file")
):
    """
    Upload a supplier BOM and get parsed rows back for review.

    Spreadsheets are mapped by column names (falling back to line parsing
    when no column is recognised); PDFs and images go through text
    extraction. Rows that match an existing item come back as updates.

    Nothing is written to the catalog until commit.
    """
    try:
        data = await file.read()
        filename = file.filename or ""

        if len(data) == 0:
            raise ValidationError(
                message="Uploaded file is empty",
                code="EMPTY_FILE",
                details={"filename": filename}
            )

        service = get_bom_service()
        session, message = await service.process_upload(
            filename=filename,
            data=data,
            content_type=file.content_type
        )

        return BOMSessionResponse.from_session(
            session,
            message=message,
            expires_in_minutes=settings.bom_session_ttl_minutes
        )

    except Exception as e:
        logger.error("bom_upload_failed", filename=file.filename, error=str(e))
        return handle_error(e)


@router.get("/{session_id}", response_model=BOMSessionResponse)
async def get_bom_session(session_id: str):
    """Rows of an open upload session."""
    try:
        service = get_bom_service()
        session = service.get_session(session_id)
        return BOMSessionResponse.from_session(
            session,
            message=f"{len(session.rows)} items ready for review",
            expires_in_minutes=settings.bom_session_ttl_minutes
        )

    except Exception as e:
        return handle_error(e)


@router.patch("/{session_id}/rows/{index}", response_model=ParsedRow)
async def edit_bom_row(session_id: str, index: int, edit: BOMRowEdit):
    """
    Edit one row's fields and/or action.

    Setting action to "update" requires a matched_item_id (already on the
    row or supplied in the edit).
    """
    try:
        service = get_bom_service()
        return service.edit_row(session_id, index, edit)

    except Exception as e:
        return handle_error(e)


@router.post("/{session_id}/commit", response_model=BOMCommitResponse)
async def commit_bom_session(session_id: str):
    """
    Apply every non-ignored row to the catalog.

    Update rows add stock to the matched item's (size, color) variant;
    create rows become new items. Rows are applied one by one; on failure
    the rows already applied stay applied and the session is kept.
    """
    try:
        service = get_bom_service()
        result = service.commit_session(session_id)
        return BOMCommitResponse(
            success=True,
            created=result.created,
            updated=result.updated,
            skipped=result.skipped,
            message=result.message
        )

    except Exception as e:
        return handle_error(e)


@router.delete("/{session_id}")
async def discard_bom_session(session_id: str):
    """Discard an upload session."""
    try:
        service = get_bom_service()
        service.discard(session_id)
        return {"success": True, "session_id": session_id}

    except Exception as e:
        return handle_error(e)
