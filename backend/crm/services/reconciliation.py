"""
Payment reconciliation
Project: Interior CRM

Keeps paid_amount, balance_amount and status of a bill in line with the
receipts of its quotation. Run after every receipt create, update or
delete, and when a bill is generated.
"""

import logging
import uuid
from decimal import Decimal
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from crm.models import Bill, Receipt
from crm.schemas.bill import BillStatus

logger = logging.getLogger(__name__)


def payment_status(grand_total: Decimal, total_received: Decimal) -> tuple[Decimal, BillStatus]:
    """
    Balance and status of a bill for the amount received.

    balance <= 0 means paid (an overpayment leaves a negative balance),
    anything received below the total means partial, nothing means pending.
    """
    balance = grand_total - total_received
    if balance <= 0:
        return balance, BillStatus.PAID
    if total_received > 0:
        return balance, BillStatus.PARTIAL
    return balance, BillStatus.PENDING


async def total_received(db: AsyncSession, quotation_id: uuid.UUID) -> Decimal:
    """Sum of the receipts of a quotation."""
    result = await db.execute(
        select(func.coalesce(func.sum(Receipt.amount), 0)).where(
            Receipt.quotation_id == quotation_id
        )
    )
    return Decimal(str(result.scalar_one()))


async def reconcile(db: AsyncSession, quotation_id: uuid.UUID) -> Optional[Bill]:
    """
    Recomputes the bill of a quotation from its receipts.

    Pending changes are flushed first so that the sum sees them. The
    bill is updated in the caller's transaction; nothing is committed.
    Running it again with the same receipts leaves the bill unchanged.

    Args:
        db: Database session
        quotation_id: Quotation whose receipts changed

    Returns:
        The updated bill, or None when the quotation is not billed yet
    """
    await db.flush()

    result = await db.execute(
        select(Bill).where(Bill.quotation_id == quotation_id).with_for_update()
    )
    bill = result.scalar_one_or_none()
    if bill is None:
        return None

    received = await total_received(db, quotation_id)
    balance, status = payment_status(bill.grand_total, received)

    bill.paid_amount = received
    bill.balance_amount = balance
    bill.status = status.value

    logger.info(
        "Bill %s reconciled: paid=%s balance=%s status=%s",
        bill.bill_number, received, balance, status.value,
    )
    return bill
