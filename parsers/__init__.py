"""
File and text parsers module.

bom_line_parser: free-form text lines → BOM rows
bom_table_parser: supplier spreadsheets → BOM rows (text fallback)
"""

from parsers.bom_line_parser import parse_bom_text, parse_line, generate_sku
from parsers.bom_table_parser import (
    parse_bom_spreadsheet,
    decode_records,
    decode_sheet,
    read_sheet,
    SheetData,
    TableParseResult,
)

__all__ = [
    "parse_bom_text",
    "parse_line",
    "generate_sku",
    "parse_bom_spreadsheet",
    "decode_records",
    "decode_sheet",
    "read_sheet",
    "SheetData",
    "TableParseResult",
]
