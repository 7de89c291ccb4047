"""
Spreadsheet parser for supplier BOM uploads.

Maps the many column spellings suppliers use onto BOM rows. When no row
can be mapped, the sheet is dumped to plain text and handed to the
heuristic line parser instead, so unknown layouts still yield items.

Supported: .csv, .xlsx (openpyxl), .xls (xlrd). First sheet only.
"""

from dataclasses import dataclass, field
from io import BytesIO, StringIO
from pathlib import Path
from typing import Any, Optional, Union
import math
import structlog

import pandas as pd

from exceptions import BOMFileDecodeError
from models.bom import BOMSource, CreateRow
from parsers.bom_line_parser import parse_bom_text

logger = structlog.get_logger(__name__)

SPREADSHEET_EXTENSIONS = {"csv", "xlsx", "xls"}

# Accepted spellings per field, in priority order
COLUMN_SYNONYMS: dict[str, tuple[str, ...]] = {
    "name": ("Item Name", "Name", "Product", "Description", "Item", "ProductName", "ITEM", "NAME"),
    "quantity": ("Qty", "Quantity", "Units", "QTY", "QUANTITY", "Pcs", "PCS"),
    "cost": ("Cost", "Price", "Unit Price", "Rate", "COST", "PRICE", "MRP", "Amount"),
    "sku": ("SKU", "Item Code", "Code", "SKU Code"),
    "size": ("Size", "SIZE"),
    "color": ("Color", "Colour", "COLOR"),
    "vendor": ("Vendor", "Supplier", "VENDOR"),
    "hsn": ("HSN", "HSN Code", "HSN_CODE"),
}


@dataclass
class SheetData:
    """First sheet of a workbook: header-keyed records plus a text dump."""
    records: list[dict[str, Any]] = field(default_factory=list)
    text: str = ""


@dataclass
class TableParseResult:
    """Rows decoded from a spreadsheet and how they were obtained."""
    rows: list[CreateRow] = field(default_factory=list)
    source: BOMSource = BOMSource.SPREADSHEET


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return str(value).strip() == ""


def pick_column(record: dict[str, Any], field_name: str) -> str:
    """First populated synonym of `field_name` in the record, as text."""
    for column in COLUMN_SYNONYMS[field_name]:
        value = record.get(column)
        if not _is_blank(value):
            return str(value).strip()
    return ""


def parse_quantity(value: Any) -> int:
    """Whole units, 1 when missing, unparseable or not positive."""
    if _is_blank(value):
        return 1
    try:
        quantity = int(float(str(value).replace(",", "").strip()))
    except (TypeError, ValueError, OverflowError):
        return 1
    return quantity if quantity >= 1 else 1


def parse_cost(value: Any) -> float:
    """Unit cost, 0 when missing, unparseable or negative."""
    if _is_blank(value):
        return 0.0
    try:
        cost = float(str(value).replace(",", "").strip())
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(cost) or math.isinf(cost) or cost < 0:
        return 0.0
    return cost


def decode_records(records: list[dict[str, Any]]) -> list[CreateRow]:
    """
    Map spreadsheet records onto BOM rows by column synonyms.

    Records whose name is empty or a single character are dropped.

    Example:
        {"Item Name": "Red Kurti", "QTY": "12", "PRICE": "450"}
        → name="Red Kurti", quantity=12, unit_cost=450
    """
    rows = []
    for record in records:
        name = pick_column(record, "name")
        if len(name) <= 1:
            continue
        rows.append(CreateRow(
            name=name,
            quantity=parse_quantity(pick_column(record, "quantity")),
            unit_cost=parse_cost(pick_column(record, "cost")),
            sku=pick_column(record, "sku"),
            size=pick_column(record, "size"),
            color=pick_column(record, "color"),
            vendor=pick_column(record, "vendor"),
            hsn=pick_column(record, "hsn"),
        ))
    return rows


def decode_sheet(sheet: SheetData) -> TableParseResult:
    """
    Column mapping first, heuristic text parsing when it yields nothing.
    """
    rows = decode_records(sheet.records)
    if rows:
        logger.info("bom_sheet_columns_mapped", rows=len(rows))
        return TableParseResult(rows=rows, source=BOMSource.SPREADSHEET)

    logger.info(
        "bom_sheet_columns_unrecognized",
        records=len(sheet.records),
        falling_back="text_parser"
    )
    return TableParseResult(
        rows=parse_bom_text(sheet.text),
        source=BOMSource.TEXT_FALLBACK
    )


def _sheet_from_grid(grid: pd.DataFrame) -> SheetData:
    """First grid row is the header; every row also goes into the text dump."""
    values = grid.fillna("").astype(str).values.tolist()
    if not values:
        return SheetData()

    headers = [str(cell).strip() for cell in values[0]]
    records = []
    for row in values[1:]:
        record = {
            header: cell
            for header, cell in zip(headers, row)
            if header
        }
        if any(str(cell).strip() for cell in row):
            records.append(record)

    text = "\n".join("\t".join(row).strip() for row in values)
    return SheetData(records=records, text=text)


def _decode_csv_bytes(raw: bytes) -> str:
    """UTF-8 (with or without BOM), else the Windows code page Excel exports in."""
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        return raw.decode("cp1252", errors="replace")


def _read_csv(file: Union[str, Path, BytesIO]) -> pd.DataFrame:
    """
    Read a CSV into a string grid.

    Rows longer than the first row (a trailing note cell) are kept and
    cut to the first row's width.
    """
    raw = file.read() if hasattr(file, "read") else Path(file).read_bytes()
    return pd.read_csv(
        StringIO(_decode_csv_bytes(raw)),
        header=None,
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=True,
        engine="python",
        on_bad_lines=lambda fields: fields,
    )


def read_sheet(
    file: Union[str, Path, BytesIO, bytes],
    filename: str
) -> SheetData:
    """
    Read the first sheet of a CSV/XLSX/XLS file.

    Args:
        file: File path, file-like object or raw bytes
        filename: Original filename (extension selects the reader)

    Raises:
        BOMFileDecodeError: If the file cannot be read
    """
    extension = file_extension(filename)
    if isinstance(file, bytes):
        file = BytesIO(file)

    logger.info("reading_bom_sheet", filename=filename, extension=extension)

    try:
        if extension == "csv":
            grid = _read_csv(file)
        elif extension == "xlsx":
            grid = pd.read_excel(file, sheet_name=0, header=None, dtype=str, engine="openpyxl")
        elif extension == "xls":
            # Legacy .xls format - use xlrd
            grid = pd.read_excel(file, sheet_name=0, header=None, dtype=str, engine="xlrd")
        else:
            raise BOMFileDecodeError(
                message=f"Not a spreadsheet: {filename}",
                details={"extension": extension}
            )
    except BOMFileDecodeError:
        raise
    except pd.errors.EmptyDataError:
        return SheetData()
    except Exception as e:
        logger.error("bom_sheet_read_failed", filename=filename, error=str(e))
        raise BOMFileDecodeError(
            message="Error parsing file. Please try again.",
            details={"filename": filename, "original_error": str(e)}
        )

    return _sheet_from_grid(grid)


def parse_bom_spreadsheet(
    file: Union[str, Path, BytesIO, bytes],
    filename: str
) -> TableParseResult:
    """Read and decode a supplier spreadsheet."""
    return decode_sheet(read_sheet(file, filename))


def file_extension(filename: Optional[str]) -> str:
    """Lower-case extension without the dot ("" if none)."""
    if not filename or "." not in filename:
        return ""
    return filename.rsplit(".", 1)[-1].lower()
