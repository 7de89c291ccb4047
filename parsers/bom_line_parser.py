"""
Heuristic line parser for free-form supplier text.

Turns lines such as

    1. Blue Jeans Size 32 - Qty 10 - Rs.850
    White T-Shirt M - 15 pcs @ 350
    Red Kurti Size S - 12 units - 450 INR

into BOM rows (name, quantity, unit cost, size, color, SKU).

Each field is recovered by an ordered list of patterns; the first pattern
that matches wins. The order is a priority between ambiguous readings
(a labelled "qty 10" beats a stray trailing number) and must not change.
"""

import re
from dataclasses import dataclass
from typing import Optional
from uuid import uuid4
import structlog

from models.bom import CreateRow
from utils.text_utils import clean_item_name, collapse_whitespace, remove_word, title_case

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class FieldPattern:
    """One candidate reading of a field. Group 1 holds the value."""
    label: str
    regex: re.Pattern

    def search(self, text: str) -> Optional[re.Match]:
        return self.regex.search(text)


def _p(label: str, pattern: str) -> FieldPattern:
    return FieldPattern(label, re.compile(pattern, re.IGNORECASE))


# 1,20,000.50 style amounts
_AMOUNT = r"(\d+(?:,\d+)*(?:\.\d+)?)"

HEADER_LINE = re.compile(r"^(item|name|product|description|sr\.?no|s\.?no|#)", re.IGNORECASE)
SUMMARY_LINE = re.compile(r"^(total|subtotal|grand|tax|gst|discount)", re.IGNORECASE)
LIST_ENUMERATOR = re.compile(r"^\d+[.)]\s+")

QUANTITY_PATTERNS = (
    _p("unit_suffix", r"(\d+)\s*(?:pcs?|pieces?|nos?|units?|qty)\b"),
    _p("qty_label", r"\b(?:qty|quantity)[:\s]*(\d+)"),
    _p("leading_number", r"^(\d+)\s+"),
    _p("multiplier", r"\bx\s*(\d+)"),
    # not the tail of an amount such as "Rs.850" or "@ 500"
    _p("trailing_number", r"(?<![\d.,@₹])(?<![.,@₹] )(\d+)\s*$"),
)

PRICE_PATTERNS = (
    _p("currency_prefix", rf"(?:\brs\.?|₹|\binr)\s*{_AMOUNT}"),
    _p("at_sign", rf"@\s*{_AMOUNT}"),
    _p("currency_suffix", rf"{_AMOUNT}\s*(?:rs\b\.?|₹|inr\b|each\b|per\b)"),
    _p("price_label", rf"\bprice[:\s]*{_AMOUNT}"),
    _p("rate_label", rf"\brate[:\s]*{_AMOUNT}"),
    _p("cost_label", rf"\bcost[:\s]*{_AMOUNT}"),
)

SIZE_PATTERNS = (
    _p("apparel", r"(?<!['’])\b(xxs|xs|s|m|l|xl|xxl|xxxl|2xl|3xl|4xl)\b"),
    _p("size_label", r"\bsize[:\s]*(\w+)"),
    _p("two_digit", r"\b(\d{2})\b"),
)

COLOR_PATTERNS = (
    _p(
        "vocabulary",
        r"\b(red|blue|green|yellow|black|white|pink|purple|orange|brown"
        r"|grey|gray|navy|maroon|beige|cream|gold|silver)\b"
    ),
    _p("color_label", r"\bcolor[:\s]*(\w+)"),
    _p("colour_label", r"\bcolour[:\s]*(\w+)"),
)

SIZE_LABEL = r"size[:\s]*"
COLOR_LABEL = r"colou?r[:\s]*"


def first_match(
    patterns: tuple[FieldPattern, ...],
    text: str
) -> Optional[tuple[FieldPattern, re.Match]]:
    """Return the first pattern (in order) that matches, with its match."""
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            return pattern, match
    return None


def is_header_or_summary(line: str) -> bool:
    """True for table headers ("Item Name") and footers ("Total", "GST")."""
    return bool(HEADER_LINE.match(line) or SUMMARY_LINE.match(line))


def _to_int(value: str, default: int) -> int:
    try:
        return int(value)
    except ValueError:
        return default


def _to_amount(value: str) -> float:
    try:
        return float(value.replace(",", ""))
    except ValueError:
        return 0.0


def _overlaps(value: re.Match, amount: re.Match) -> bool:
    return value.start(1) < amount.end() and amount.start() < value.end(1)


def generate_sku(name: str, size: str = "") -> str:
    """
    Fallback SKU: first three name characters, size (or STD), random suffix.

    "Blue Jeans", "32" → "BLU-32-7F3A"
    """
    prefix = re.sub(r"[^A-Za-z0-9]", "", name)[:3].upper()
    return f"{prefix}-{size or 'STD'}-{uuid4().hex[:4].upper()}"


def parse_line(line: str) -> Optional[CreateRow]:
    """
    Parse one line into a row, or None if it holds no usable item.

    Quantity and price are read from the line and cut out of the working
    name. Size and color are read from what is left, so numbers already
    used as quantity or price are not reread as a size.
    """
    text = LIST_ENUMERATOR.sub("", line.strip())
    if not text or is_header_or_summary(text):
        return None

    name = text
    quantity = 1
    unit_cost = 0.0
    size = ""
    color = ""

    price_found = first_match(PRICE_PATTERNS, text)

    found = first_match(QUANTITY_PATTERNS, text)
    if found and found[0].label == "trailing_number" and price_found \
            and _overlaps(found[1], price_found[1]):
        # "Rs 400": the trailing digits are the amount
        found = None
    if found:
        _, match = found
        quantity = _to_int(match.group(1), 1) or 1
        name = name.replace(match.group(0), " ", 1).strip()

    if price_found:
        _, match = price_found
        unit_cost = _to_amount(match.group(1))
        name = name.replace(match.group(0), " ", 1).strip()

    found = first_match(SIZE_PATTERNS, name)
    if found:
        size = found[1].group(1).upper()

    found = first_match(COLOR_PATTERNS, name)
    if found:
        color = title_case(found[1].group(1))

    name = clean_item_name(name)
    if size:
        name = remove_word(name, size, prefix=SIZE_LABEL)
    if color:
        # "Blue Jeans" keeps its color word; only a "colour: teal" label goes
        name = collapse_whitespace(
            re.sub(rf"\b{COLOR_LABEL}{re.escape(color)}\b", " ", name, flags=re.IGNORECASE)
        )

    if len(name) < 2 or name.isdigit():
        return None

    return CreateRow(
        name=name,
        quantity=quantity,
        unit_cost=unit_cost,
        sku=generate_sku(name, size),
        size=size,
        color=color,
    )


def parse_bom_text(text: str) -> list[CreateRow]:
    """
    Parse a block of free-form text into BOM rows.

    Args:
        text: Raw text, one item per line (OCR output, pasted list, sheet dump)

    Returns:
        Rows in line order, all with action=create
    """
    lines = [line for line in re.split(r"[\r\n]+", text or "") if line.strip()]
    rows = []
    skipped = 0

    for line in lines:
        row = parse_line(line)
        if row is None:
            skipped += 1
            continue
        rows.append(row)

    logger.info(
        "bom_text_parsed",
        lines=len(lines),
        rows=len(rows),
        skipped=skipped
    )
    return rows
