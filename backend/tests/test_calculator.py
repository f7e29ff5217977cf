"""
Unit tests for the financial calculator.

Pure functions: no database involved.
"""

from decimal import Decimal

import pytest

from crm.schemas.quotation import CalculationRequest, DiscountType, QuotationItemCreate
from crm.services.calculator import (
    calculate,
    calculate_amounts,
    compute_discount,
    compute_subtotal,
)


# ============================================================
# Reference scenario
# ============================================================


class TestReferenceScenario:
    """1000 sqft x 1500, 10% discount, CGST 9 + SGST 9."""

    @pytest.fixture
    def breakdown(self):
        return calculate(
            CalculationRequest(
                total_sqft=Decimal("1000"),
                rate_per_sqft=Decimal("1500"),
                discount_type=DiscountType.PERCENTAGE,
                discount_value=Decimal("10"),
                cgst_percent=Decimal("9"),
                sgst_percent=Decimal("9"),
            )
        )

    def test_subtotal(self, breakdown):
        assert breakdown.subtotal == Decimal("1500000")

    def test_discount_amount(self, breakdown):
        assert breakdown.discount_amount == Decimal("150000")

    def test_taxable_amount(self, breakdown):
        assert breakdown.taxable_amount == Decimal("1350000")

    def test_taxes(self, breakdown):
        assert breakdown.cgst_amount == Decimal("121500")
        assert breakdown.sgst_amount == Decimal("121500")
        assert breakdown.total_tax == Decimal("243000")

    def test_grand_total(self, breakdown):
        assert breakdown.grand_total == Decimal("1593000")


# ============================================================
# Subtotal
# ============================================================


class TestSubtotal:

    def test_items_take_precedence_over_area(self):
        """Rows win over area x rate."""
        subtotal = compute_subtotal(
            [Decimal("72000"), Decimal("114000")],
            Decimal("1000"),
            Decimal("1500"),
        )
        assert subtotal == Decimal("186000")

    def test_area_times_rate_without_items(self):
        assert compute_subtotal([], Decimal("850"), Decimal("1200")) == Decimal("1020000")

    def test_missing_area_gives_zero(self):
        assert compute_subtotal([], None, Decimal("1200")) == Decimal("0")
        assert compute_subtotal([], Decimal("850"), None) == Decimal("0")

    def test_item_amount_defaults_to_quantity_times_rate(self):
        item = QuotationItemCreate(item_name="Wardrobe", quantity=Decimal("40"), rate=Decimal("1800"))
        assert item.amount == Decimal("72000")

    def test_explicit_item_amount_is_kept(self):
        item = QuotationItemCreate(
            item_name="Lump sum",
            quantity=Decimal("1"),
            rate=Decimal("0"),
            amount=Decimal("25000"),
        )
        assert item.amount == Decimal("25000")

    def test_subtotal_from_request_items(self):
        breakdown = calculate(
            CalculationRequest(
                items=[
                    QuotationItemCreate(item_name="A", quantity=Decimal("2"), rate=Decimal("100")),
                    QuotationItemCreate(item_name="B", quantity=Decimal("3"), rate=Decimal("50")),
                ],
                total_sqft=Decimal("1000"),
                rate_per_sqft=Decimal("1500"),
            )
        )
        assert breakdown.subtotal == Decimal("350")


# ============================================================
# Discount
# ============================================================


class TestDiscount:

    def test_percentage(self):
        assert compute_discount(DiscountType.PERCENTAGE, Decimal("12.5"), Decimal("80000")) == Decimal("10000")

    def test_flat(self):
        assert compute_discount(DiscountType.FLAT, Decimal("5000"), Decimal("80000")) == Decimal("5000")

    def test_absent_type(self):
        assert compute_discount(None, Decimal("10"), Decimal("80000")) == Decimal("0")

    def test_zero_or_negative_value(self):
        assert compute_discount(DiscountType.FLAT, Decimal("0"), Decimal("80000")) == Decimal("0")
        assert compute_discount(DiscountType.PERCENTAGE, Decimal("-5"), Decimal("80000")) == Decimal("0")

    def test_stored_string_type_is_accepted(self):
        """Types read back from the database are plain strings."""
        assert compute_discount("percentage", Decimal("10"), Decimal("1000")) == Decimal("100")


# ============================================================
# Taxes and identities
# ============================================================


class TestTaxes:

    def test_default_rates_are_nine_percent(self):
        breakdown = calculate_amounts([Decimal("1000")], None, None, None, None)
        assert breakdown.cgst_percent == Decimal("9")
        assert breakdown.sgst_percent == Decimal("9")
        assert breakdown.grand_total == Decimal("1180")

    def test_explicit_zero_rate_is_honoured(self):
        breakdown = calculate_amounts(
            [Decimal("1000")], None, None, None, None,
            cgst_percent=Decimal("0"),
            sgst_percent=Decimal("0"),
        )
        assert breakdown.total_tax == Decimal("0")
        assert breakdown.grand_total == Decimal("1000")

    def test_no_rounding_is_applied(self):
        breakdown = calculate_amounts([Decimal("333.33")], None, None, None, None)
        assert breakdown.cgst_amount == Decimal("29.9997")

    @pytest.mark.parametrize(
        "amounts, discount_type, discount_value",
        [
            ([Decimal("1000")], None, Decimal("0")),
            ([Decimal("999.99"), Decimal("0.01")], DiscountType.PERCENTAGE, Decimal("30")),
            ([Decimal("45000"), Decimal("12345.67")], DiscountType.FLAT, Decimal("1234.56")),
            ([], None, Decimal("0")),
        ],
    )
    def test_breakdown_identities(self, amounts, discount_type, discount_value):
        b = calculate_amounts(amounts, None, None, discount_type, discount_value)
        assert b.taxable_amount == b.subtotal - b.discount_amount
        assert b.total_tax == b.cgst_amount + b.sgst_amount
        assert b.grand_total == b.taxable_amount + b.cgst_amount + b.sgst_amount
        assert b.grand_total == b.subtotal - b.discount_amount + b.cgst_amount + b.sgst_amount
