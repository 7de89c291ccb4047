"""
Unit tests for the BOM line parser.

Covers field extraction priorities, name cleanup and the lines that
must be skipped.
"""

import re
import pytest

from parsers.bom_line_parser import (
    QUANTITY_PATTERNS,
    PRICE_PATTERNS,
    first_match,
    generate_sku,
    is_header_or_summary,
    parse_bom_text,
    parse_line,
)
from services.text_extraction_service import SAMPLE_OCR_TEXT


# ===================
# SINGLE LINES
# ===================

class TestParseLine:
    """Tests for parse_line."""

    def test_quantity_with_unit_and_at_price(self):
        """Unit-suffixed quantity and @ price are cut out of the name."""
        row = parse_line("10 pcs Blue Jeans @ 500")

        assert row.name == "Blue Jeans"
        assert row.quantity == 10
        assert row.unit_cost == 500
        assert row.size == ""
        assert row.color == "Blue"
        assert row.action == "create"
        assert row.matched_item_id is None

    def test_enumerated_line_with_labels(self):
        """List number, size label, qty label and Rs. price."""
        row = parse_line("1. Blue Jeans Size 32 - Qty 10 - Rs.850")

        assert row.name == "Blue Jeans"
        assert row.quantity == 10
        assert row.unit_cost == 850
        assert row.size == "32"
        assert row.color == "Blue"

    def test_apparel_size_removed_from_name(self):
        row = parse_line("White T-Shirt M - 15 pcs @ 350")

        assert row.name == "White T Shirt"
        assert row.quantity == 15
        assert row.unit_cost == 350
        assert row.size == "M"
        assert row.color == "White"

    def test_multiplier_and_rupee_sign(self):
        row = parse_line("Black Formal Shirt L x 8 - ₹750")

        assert row.name == "Black Formal Shirt"
        assert row.quantity == 8
        assert row.unit_cost == 750
        assert row.size == "L"

    def test_currency_suffix(self):
        row = parse_line("Red Kurti Size S - 12 units - 450 INR")

        assert row.name == "Red Kurti"
        assert row.quantity == 12
        assert row.unit_cost == 450
        assert row.size == "S"
        assert row.color == "Red"

    def test_rate_label_and_first_color_word(self):
        """The first vocabulary color in the name wins."""
        row = parse_line("Navy Blue Polo XL - Quantity 6 - Rate 550")

        assert row.name == "Navy Blue Polo"
        assert row.quantity == 6
        assert row.unit_cost == 550
        assert row.size == "XL"
        assert row.color == "Navy"

    def test_defaults_without_quantity_or_price(self):
        row = parse_line("Cotton Dupatta")

        assert row.name == "Cotton Dupatta"
        assert row.quantity == 1
        assert row.unit_cost == 0
        assert row.size == ""
        assert row.color == ""

    def test_thousands_separator_in_price(self):
        row = parse_line("Silk Saree 2 pcs @ 1,250.50")

        assert row.quantity == 2
        assert row.unit_cost == 1250.50
        assert row.name == "Silk Saree"
        assert row.color == ""

    def test_labelled_color_removed_from_name(self):
        row = parse_line("Linen Shirt colour: maroon 3 pcs")

        assert row.color == "Maroon"
        assert row.name == "Linen Shirt"
        assert row.quantity == 3

    def test_trailing_number_is_quantity(self):
        row = parse_line("Wool Scarf 7")

        assert row.quantity == 7
        assert row.name == "Wool Scarf"

    def test_price_tail_not_read_as_quantity(self):
        """The digits of "Rs. 400" are a price, not a trailing quantity."""
        row = parse_line("Wool Scarf Rs. 400")

        assert row.quantity == 1
        assert row.unit_cost == 400

    @pytest.mark.parametrize("line", ["Wool Scarf Rs 400", "Wool Scarf INR 400", "Wool Scarf ₹400"])
    def test_currency_amount_not_read_as_quantity(self, line):
        row = parse_line(line)

        assert (row.name, row.quantity, row.unit_cost) == ("Wool Scarf", 1, 400)

    def test_possessive_kept_when_size_removed(self):
        row = parse_line("Men's Shirt S x 3 @ 300")

        assert row.name == "Men's Shirt"
        assert (row.size, row.quantity, row.unit_cost) == ("S", 3, 300)

    def test_long_description(self):
        description = "Handwoven Jute Table Runner " * 10

        row = parse_line(f"{description}3 pcs @ 250")

        assert row.name == description.strip()
        assert (row.quantity, row.unit_cost) == (3, 250)

    @pytest.mark.parametrize("line", [
        "Item Name",
        "Total",
        "GST",
        "Subtotal 4500",
        "Sr.No  Description  Qty",
        "Grand Total: 12000",
        "# Product",
    ])
    def test_header_and_summary_lines_skipped(self, line):
        assert parse_line(line) is None

    @pytest.mark.parametrize("line", ["", "   ", "12", "x", "5 pcs @ 100"])
    def test_lines_without_a_name_skipped(self, line):
        assert parse_line(line) is None

    def test_sku_generated_from_name_and_size(self):
        row = parse_line("1. Blue Jeans Size 32 - Qty 10 - Rs.850")

        assert re.fullmatch(r"BLU-32-[0-9A-F]{4}", row.sku)


# ===================
# PATTERN ORDER
# ===================

class TestPatternPriority:
    """The first matching pattern wins."""

    def test_unit_suffix_beats_leading_number(self):
        pattern, match = first_match(QUANTITY_PATTERNS, "3 Jeans 20 pcs")

        assert pattern.label == "unit_suffix"
        assert match.group(1) == "20"

    def test_currency_prefix_beats_at_sign(self):
        pattern, match = first_match(PRICE_PATTERNS, "Jeans @ 500 Rs 450")

        assert pattern.label == "currency_prefix"
        assert match.group(1) == "450"

    def test_no_match_returns_none(self):
        assert first_match(PRICE_PATTERNS, "Plain Jeans") is None


class TestHelpers:
    """Tests for small helpers."""

    def test_header_detection_is_case_insensitive(self):
        assert is_header_or_summary("ITEM DESCRIPTION")
        assert is_header_or_summary("discount 10%")
        assert not is_header_or_summary("Blue Jeans")

    def test_generate_sku_without_size(self):
        sku = generate_sku("a-1 Shirt")

        assert re.fullmatch(r"A1S-STD-[0-9A-F]{4}", sku)


# ===================
# TEXT BLOCKS
# ===================

class TestParseBomText:
    """Tests for parse_bom_text."""

    def test_sample_supplier_text(self):
        rows = parse_bom_text(SAMPLE_OCR_TEXT)

        assert [row.name for row in rows] == [
            "Blue Jeans",
            "White T Shirt",
            "Black Formal Shirt",
            "Red Kurti",
            "Navy Blue Polo",
        ]
        assert [row.quantity for row in rows] == [10, 15, 8, 12, 6]
        assert [row.unit_cost for row in rows] == [850, 350, 750, 450, 550]
        assert [row.size for row in rows] == ["32", "M", "L", "S", "XL"]

    def test_headers_and_totals_dropped_with_crlf(self):
        text = "Item Name\tQty\r\nRed Kurti 4 pcs @ 300\r\n\r\nTotal 1200\r\n"

        rows = parse_bom_text(text)

        assert len(rows) == 1
        assert rows[0].name == "Red Kurti"
        assert rows[0].quantity == 4

    def test_empty_text(self):
        assert parse_bom_text("") == []
        assert parse_bom_text(None) == []
