"""
Financial calculator for quotations
Project: Interior CRM

Pure functions turning rows, area x rate, discount and tax rates into a
full monetary breakdown. No I/O, no rounding: values keep their full
Decimal precision and display rounding is left to the consumer.
"""

from decimal import Decimal
from typing import Iterable, Optional

from crm.core.config import settings
from crm.schemas.quotation import Breakdown, CalculationRequest, DiscountType

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def compute_subtotal(
    item_amounts: Iterable[Decimal],
    total_sqft: Optional[Decimal],
    rate_per_sqft: Optional[Decimal],
) -> Decimal:
    """
    Sum of the row amounts when there are rows, otherwise area x rate
    (0 when either is missing).
    """
    amounts = list(item_amounts)
    if amounts:
        return sum(amounts, ZERO)
    return (total_sqft or ZERO) * (rate_per_sqft or ZERO)


def compute_discount(
    discount_type: Optional[DiscountType],
    discount_value: Optional[Decimal],
    subtotal: Decimal,
) -> Decimal:
    """
    Discount amount: a percentage of the subtotal or the flat value.
    A missing type or a value <= 0 gives no discount.
    """
    if discount_type is None or discount_value is None or discount_value <= 0:
        return ZERO
    if discount_type == DiscountType.PERCENTAGE:
        return subtotal * discount_value / HUNDRED
    return discount_value


def calculate(request: CalculationRequest) -> Breakdown:
    """
    Computes the breakdown of a quotation.

    Steps:
    1. subtotal from rows or area x rate
    2. discount amount
    3. taxable = subtotal - discount
    4. CGST and SGST on the taxable amount (defaults from settings)
    5. grand_total = taxable + CGST + SGST

    The discount cap is not checked here, see discount_policy.

    Args:
        request: Rows, area, discount and tax rates

    Returns:
        Breakdown: Every derived amount
    """
    return calculate_amounts(
        item_amounts=[item.amount for item in request.items],
        total_sqft=request.total_sqft,
        rate_per_sqft=request.rate_per_sqft,
        discount_type=request.discount_type,
        discount_value=request.discount_value,
        cgst_percent=request.cgst_percent,
        sgst_percent=request.sgst_percent,
    )


def calculate_amounts(
    item_amounts: Iterable[Decimal],
    total_sqft: Optional[Decimal],
    rate_per_sqft: Optional[Decimal],
    discount_type: Optional[DiscountType],
    discount_value: Optional[Decimal],
    cgst_percent: Optional[Decimal] = None,
    sgst_percent: Optional[Decimal] = None,
) -> Breakdown:
    """Same as calculate, from plain values (used for stored quotations)."""
    subtotal = compute_subtotal(item_amounts, total_sqft, rate_per_sqft)
    discount_amount = compute_discount(discount_type, discount_value, subtotal)
    taxable_amount = subtotal - discount_amount

    if cgst_percent is None:
        cgst_percent = settings.default_cgst_percent
    if sgst_percent is None:
        sgst_percent = settings.default_sgst_percent

    cgst_amount = taxable_amount * cgst_percent / HUNDRED
    sgst_amount = taxable_amount * sgst_percent / HUNDRED
    total_tax = cgst_amount + sgst_amount

    return Breakdown(
        subtotal=subtotal,
        discount_amount=discount_amount,
        taxable_amount=taxable_amount,
        cgst_percent=cgst_percent,
        cgst_amount=cgst_amount,
        sgst_percent=sgst_percent,
        sgst_amount=sgst_amount,
        total_tax=total_tax,
        grand_total=taxable_amount + total_tax,
    )
