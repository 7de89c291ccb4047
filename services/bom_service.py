"""
BOM upload service.

Workflow:
    1. Decode   - spreadsheet columns, or text from a PDF/image
    2. Reconcile - match rows against the catalog (create vs update)
    3. Review   - user edits rows and actions in the session
    4. Commit   - apply rows to the catalog one at a time

Commit is additive and not atomic: each row is written before the next is
read, and a failure part way through leaves earlier rows applied.
"""

import asyncio
import math
from typing import Optional
from uuid import uuid4
import structlog
from pydantic import ValidationError as PydanticValidationError

from config import settings
from models.bom import (
    BOMAction,
    BOMCommitResult,
    BOMRowEdit,
    BOMSession,
    BOMSource,
    ParsedRow,
    build_row,
)
from models.inventory import InventoryItemCreate, InventoryItemResponse, ItemVariant
from parsers.bom_line_parser import parse_bom_text
from parsers.bom_table_parser import (
    SPREADSHEET_EXTENSIONS,
    file_extension,
    parse_bom_spreadsheet,
)
from services import bom_session_service
from services.inventory_service import get_inventory_service
from services.text_extraction_service import IMAGE_EXTENSIONS, get_text_extractor
from utils.text_utils import names_equal, word_overlap_similarity
from exceptions import (
    BOMCommitError,
    BOMRowNotFoundError,
    BOMSessionNotFoundError,
    InventoryItemNotFoundError,
    UnsupportedFileTypeError,
    ValidationError,
)

logger = structlog.get_logger(__name__)


# ===================
# MATCHING
# ===================

def find_matching_item(
    row: ParsedRow,
    catalog: list[InventoryItemResponse],
    threshold: float = 0.7
) -> Optional[InventoryItemResponse]:
    """
    First catalog item (in catalog order) that matches the row.

    An item matches on any of:
        a. same name, ignoring case
        b. word-overlap similarity above `threshold`
        c. same SKU, ignoring case (both non-empty)
    """
    name = row.name.lower()
    for item in catalog:
        existing = item.name.lower()
        if name == existing:
            return item
        if word_overlap_similarity(name, existing) > threshold:
            return item
        if names_equal(row.sku, item.sku):
            return item
    return None


def match_rows(
    rows: list[ParsedRow],
    catalog: list[InventoryItemResponse],
    threshold: float = 0.7
) -> list[ParsedRow]:
    """
    Mark rows that match a catalog item as updates of that item.

    Unmatched rows come back unchanged; ignored rows are not matched.
    """
    matched = []
    for row in rows:
        if row.action == BOMAction.IGNORE.value:
            matched.append(row)
            continue
        item = find_matching_item(row, catalog, threshold)
        if item is None:
            matched.append(row)
            continue
        matched.append(build_row({
            **row.model_dump(),
            "action": BOMAction.UPDATE.value,
            "matched_item_id": item.id,
        }))
    return matched


def apply_row_edit(row: ParsedRow, edit: BOMRowEdit) -> ParsedRow:
    """
    Return the row with the edit applied, revalidated as its new variant.

    Raises:
        ValidationError: e.g. switching to update with no matched item
    """
    changes = edit.model_dump(exclude_unset=True, mode="json")
    try:
        return build_row({**row.model_dump(mode="json"), **changes})
    except PydanticValidationError as e:
        raise ValidationError(
            message="Invalid row edit",
            code="BOM_ROW_INVALID",
            details={"errors": e.errors(include_url=False, include_context=False)}
        )


# ===================
# COMMIT HELPERS
# ===================

def merge_variant(
    variants: list[ItemVariant],
    size: str,
    color: str,
    quantity: int
) -> list[ItemVariant]:
    """
    Add `quantity` to the variant with this exact (size, color), or append one.

    Returns a new list; the input is not modified.
    """
    merged = [v.model_copy() for v in variants]
    for variant in merged:
        if variant.size == size and variant.color == color:
            variant.stock += quantity
            return merged
    merged.append(ItemVariant(size=size, color=color, stock=quantity))
    return merged


def selling_price_for(unit_cost: float, markup: float) -> float:
    """unit_cost x markup rounded half up to a whole amount; 0 without a cost."""
    if unit_cost <= 0:
        return 0
    return math.floor(unit_cost * markup + 0.5)


def build_new_item(row: ParsedRow) -> InventoryItemCreate:
    """Catalog item for a create row, with the configured defaults."""
    sku = row.sku or f"{row.name[:3].upper()}-{uuid4().hex[:6]}"
    return InventoryItemCreate(
        name=row.name,
        sku=sku,
        category=settings.bom_default_category,
        hsn=row.hsn,
        vendor=row.vendor,
        purchase_price=row.unit_cost,
        selling_price=selling_price_for(row.unit_cost, settings.bom_selling_markup),
        tax_rate=settings.bom_default_tax_rate,
        low_stock_threshold=settings.bom_low_stock_threshold,
        variants=[ItemVariant(size=row.size, color=row.color, stock=row.quantity)],
    )


def is_image(extension: str, content_type: Optional[str]) -> bool:
    return extension in IMAGE_EXTENSIONS or bool(content_type and content_type.startswith("image/"))


class BOMService:
    """
    BOM upload business logic.
    """

    def __init__(self):
        self.inventory = get_inventory_service()
        self.extractor = get_text_extractor()

    # ===================
    # UPLOAD
    # ===================

    async def process_upload(
        self,
        filename: str,
        data: bytes,
        content_type: Optional[str] = None
    ) -> tuple[BOMSession, str]:
        """
        Decode an uploaded file, match its rows and open a review session.

        Args:
            filename: Original filename (extension selects the decoder)
            data: File contents
            content_type: MIME type reported by the client

        Returns:
            Tuple of (session, user-facing message)

        Raises:
            UnsupportedFileTypeError: Not a spreadsheet, PDF or image
            BOMFileDecodeError: Spreadsheet could not be read
            PDFParseError: No text could be extracted
        """
        extension = file_extension(filename)

        logger.info(
            "bom_upload_started",
            filename=filename,
            extension=extension,
            content_type=content_type,
            size_bytes=len(data)
        )

        if extension in SPREADSHEET_EXTENSIONS:
            parsed = await asyncio.to_thread(parse_bom_spreadsheet, data, filename)
            rows, source = parsed.rows, parsed.source
            message_template = "Found {count} items in your file"
        elif extension == "pdf" or is_image(extension, content_type):
            text = await self.extractor.extract_text_async(data, filename)
            rows, source = parse_bom_text(text), BOMSource.OCR
            message_template = "Extracted {count} items from image"
        else:
            raise UnsupportedFileTypeError(filename, content_type)

        catalog = await asyncio.to_thread(self.inventory.get_all)
        rows = match_rows(rows, catalog, settings.bom_similarity_threshold)

        session = bom_session_service.create_session(
            filename=filename,
            source=source,
            rows=rows,
            ttl_minutes=settings.bom_session_ttl_minutes,
        )

        logger.info(
            "bom_rows_matched",
            session_id=session.id,
            source=source.value,
            rows=len(rows),
            updates=session.count(BOMAction.UPDATE),
            catalog_size=len(catalog)
        )

        return session, message_template.format(count=len(rows))

    # ===================
    # REVIEW
    # ===================

    def get_session(self, session_id: str) -> BOMSession:
        """
        Raises:
            BOMSessionNotFoundError: Unknown or expired session
        """
        session = bom_session_service.retrieve_session(session_id)
        if session is None:
            raise BOMSessionNotFoundError(session_id)
        return session

    def edit_row(self, session_id: str, index: int, edit: BOMRowEdit) -> ParsedRow:
        """
        Apply a user edit to one row of the session in place.

        Raises:
            InventoryItemNotFoundError: Edit points an update row at an unknown item
        """
        session = self.get_session(session_id)
        if index < 0 or index >= len(session.rows):
            raise BOMRowNotFoundError(session_id, index)

        previous = session.rows[index]
        row = apply_row_edit(previous, edit)
        if row.action == BOMAction.UPDATE.value and (
            previous.action != row.action or previous.matched_item_id != row.matched_item_id
        ):
            self.inventory.get_by_id(row.matched_item_id)
        session.rows[index] = row

        logger.info(
            "bom_row_edited",
            session_id=session_id,
            index=index,
            action=row.action,
            fields=sorted(edit.model_dump(exclude_unset=True))
        )
        return row

    def discard(self, session_id: str) -> None:
        """Drop a session without applying it."""
        self.get_session(session_id)
        bom_session_service.delete_session(session_id)
        logger.info("bom_session_discarded", session_id=session_id)

    # ===================
    # COMMIT
    # ===================

    def _apply_update(self, row: ParsedRow) -> bool:
        """Add the row's stock to its matched item. False if the item is gone."""
        try:
            existing = self.inventory.get_by_id(row.matched_item_id)
            variants = merge_variant(existing.variants, row.size, row.color, row.quantity)
            self.inventory.update_variants(existing.id, variants)
        except InventoryItemNotFoundError:
            logger.warning(
                "bom_matched_item_missing",
                item_id=row.matched_item_id,
                name=row.name
            )
            return False
        return True

    def commit_rows(self, rows: list[ParsedRow]) -> BOMCommitResult:
        """
        Apply reviewed rows to the catalog, strictly one after another.

        Not idempotent: committing the same update row twice adds its
        quantity twice.

        Raises:
            BOMCommitError: A write failed; earlier rows remain applied
        """
        result = BOMCommitResult()

        try:
            for row in rows:
                if row.action == BOMAction.IGNORE.value:
                    continue
                if row.action == BOMAction.UPDATE.value:
                    if self._apply_update(row):
                        result.updated += 1
                    else:
                        result.skipped += 1
                    continue
                self.inventory.create(build_new_item(row))
                result.created += 1
        except Exception as e:
            logger.error(
                "bom_commit_failed",
                created=result.created,
                updated=result.updated,
                error=str(e),
                error_type=type(e).__name__
            )
            raise BOMCommitError(result.created, result.updated, str(e)) from e

        logger.info(
            "bom_commit_complete",
            created=result.created,
            updated=result.updated,
            skipped=result.skipped
        )
        return result

    def commit_session(self, session_id: str) -> BOMCommitResult:
        """Commit a session's rows and close it. A failed commit keeps the session."""
        session = self.get_session(session_id)
        result = self.commit_rows(session.rows)
        bom_session_service.delete_session(session_id)
        return result


# Singleton instance
_bom_service: Optional[BOMService] = None


def get_bom_service() -> BOMService:
    """Get or create BOMService instance."""
    global _bom_service
    if _bom_service is None:
        _bom_service = BOMService()
    return _bom_service
