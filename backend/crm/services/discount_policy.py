"""
Discount policy guard
Project: Interior CRM

Caps the discount of a quotation at a maximum share of the subtotal,
whatever its representation (percentage or flat amount). Always
enforced server side, before any write.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from crm.core.config import settings
from crm.core.exceptions import BusinessValidationError
from crm.schemas.quotation import DiscountType
from crm.services.calculator import HUNDRED, ZERO, compute_discount

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiscountResult:
    """Outcome of the discount check."""

    valid: bool
    discount_amount: Decimal
    effective_percent: Decimal
    error: Optional[str] = None


def _format_percent(value: Decimal) -> str:
    return format(value.normalize(), "f")


def validate_discount(
    discount_type: Optional[DiscountType],
    discount_value: Optional[Decimal],
    subtotal: Decimal,
    max_percent: Optional[Decimal] = None,
) -> DiscountResult:
    """
    Checks a discount against the cap.

    A flat discount is converted to its share of the subtotal
    (value / subtotal * 100). A flat discount against a subtotal <= 0
    counts as 100% and is always rejected. Zero or absent discounts are
    valid with amount 0.

    Args:
        discount_type: percentage / flat / None
        discount_value: Percentage or amount
        subtotal: Subtotal the discount applies to
        max_percent: Cap (default settings.max_discount_percent)

    Returns:
        DiscountResult: valid flag, amount, effective percentage and message
    """
    cap = max_percent if max_percent is not None else settings.max_discount_percent

    if discount_type is None or discount_value is None or discount_value <= 0:
        return DiscountResult(valid=True, discount_amount=ZERO, effective_percent=ZERO)

    if discount_type == DiscountType.PERCENTAGE:
        effective_percent = discount_value
    elif subtotal <= 0:
        effective_percent = HUNDRED
    else:
        effective_percent = discount_value / subtotal * HUNDRED

    if effective_percent > cap:
        return DiscountResult(
            valid=False,
            discount_amount=ZERO,
            effective_percent=effective_percent,
            error=(
                f"Discount cannot exceed {_format_percent(cap)}%. "
                f"Current discount is {effective_percent:.2f}%"
            ),
        )

    return DiscountResult(
        valid=True,
        discount_amount=compute_discount(discount_type, discount_value, subtotal),
        effective_percent=effective_percent,
    )


def enforce_discount(
    discount_type: Optional[DiscountType],
    discount_value: Optional[Decimal],
    subtotal: Decimal,
) -> Decimal:
    """
    Same check as validate_discount, raising on rejection.

    Raises:
        BusinessValidationError: discount above the cap, with the guard message
    """
    result = validate_discount(discount_type, discount_value, subtotal)
    if not result.valid:
        logger.warning("Discount rejected: %s", result.error)
        raise BusinessValidationError(result.error, extra={"effective_percent": str(result.effective_percent)})
    return result.discount_amount
