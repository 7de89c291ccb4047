"""
Bill of Materials (BOM) upload models.

A parsed row is a tagged variant on `action`:
    create  - becomes a new inventory item on commit
    update  - adds stock to the item referenced by matched_item_id (required)
    ignore  - skipped on commit
"""

from pydantic import Field, TypeAdapter
from typing import Annotated, Literal, Optional, Union
from datetime import datetime
from enum import Enum

from models.base import BaseSchema


class BOMAction(str, Enum):
    """What commit does with a row."""
    CREATE = "create"
    UPDATE = "update"
    IGNORE = "ignore"


class BOMSource(str, Enum):
    """How the rows of a session were obtained."""
    SPREADSHEET = "spreadsheet"
    TEXT_FALLBACK = "text_fallback"
    OCR = "ocr"


class BOMRowBase(BaseSchema):
    """Fields shared by every row variant."""

    name: str = Field(..., min_length=2)
    quantity: int = Field(default=1, ge=1)
    unit_cost: float = Field(default=0, ge=0)
    sku: str = ""
    size: str = ""
    color: str = ""
    vendor: str = ""
    hsn: str = ""
    matched_item_id: Optional[str] = Field(
        None,
        description="Catalog item this row was matched to (suggestion unless action is update)"
    )


class CreateRow(BOMRowBase):
    action: Literal["create"] = "create"


class UpdateRow(BOMRowBase):
    action: Literal["update"] = "update"
    matched_item_id: str = Field(
        ...,
        min_length=1,
        description="Catalog item receiving the stock"
    )


class IgnoreRow(BOMRowBase):
    action: Literal["ignore"] = "ignore"


ParsedRow = Annotated[
    Union[CreateRow, UpdateRow, IgnoreRow],
    Field(discriminator="action")
]

_row_adapter = TypeAdapter(ParsedRow)


def build_row(data: dict) -> Union[CreateRow, UpdateRow, IgnoreRow]:
    """
    Validate a row dict into the variant named by its action.

    Raises:
        pydantic.ValidationError: e.g. action=update without matched_item_id
    """
    return _row_adapter.validate_python(data)


class BOMRowEdit(BaseSchema):
    """
    User edit of one row during review.

    All fields optional - only provided fields are changed.
    """

    name: Optional[str] = Field(None, min_length=2)
    quantity: Optional[int] = Field(None, ge=1)
    unit_cost: Optional[float] = Field(None, ge=0)
    sku: Optional[str] = None
    size: Optional[str] = None
    color: Optional[str] = None
    vendor: Optional[str] = None
    hsn: Optional[str] = None
    action: Optional[BOMAction] = None
    matched_item_id: Optional[str] = None


class BOMSession(BaseSchema):
    """Rows of one upload, held between review and commit."""

    id: str
    filename: str
    source: BOMSource
    rows: list[ParsedRow] = Field(default_factory=list)
    created_at: datetime

    def count(self, action: BOMAction) -> int:
        return sum(1 for row in self.rows if row.action == action.value)


class BOMSessionResponse(BaseSchema):
    """Upload/review response."""

    session_id: str
    filename: str
    source: BOMSource
    rows: list[ParsedRow]
    total_rows: int
    create_count: int
    update_count: int
    ignore_count: int
    message: str
    expires_in_minutes: int

    @classmethod
    def from_session(
        cls,
        session: BOMSession,
        message: str,
        expires_in_minutes: int
    ) -> "BOMSessionResponse":
        return cls(
            session_id=session.id,
            filename=session.filename,
            source=session.source,
            rows=session.rows,
            total_rows=len(session.rows),
            create_count=session.count(BOMAction.CREATE),
            update_count=session.count(BOMAction.UPDATE),
            ignore_count=session.count(BOMAction.IGNORE),
            message=message,
            expires_in_minutes=expires_in_minutes,
        )


class BOMCommitResult(BaseSchema):
    """Outcome of applying a session to the catalog."""

    created: int = 0
    updated: int = 0
    skipped: int = Field(0, description="Update rows whose item no longer exists")

    @property
    def message(self) -> str:
        return f"Done! Created {self.created} new items, updated {self.updated} existing items."


class BOMCommitResponse(BaseSchema):
    """Commit response."""

    success: bool
    created: int
    updated: int
    skipped: int
    message: str
