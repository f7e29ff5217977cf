"""
Document lifecycle rules
Project: Interior CRM

Quotation states: draft -> confirmed -> billed.

Confirmation is advisory: a draft can be billed directly. Users only set
draft or confirmed; billed is reached by generating a bill and left by
deleting it (always back to confirmed). Deletes are refused while
dependent documents exist.
"""

import uuid
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from crm.core.exceptions import ConflictError
from crm.models import Bill, Quotation, Receipt
from crm.schemas.quotation import QuotationStatus

STATUS_AFTER_BILL_DELETE = QuotationStatus.CONFIRMED


def resolve_status(
    current: str,
    requested: Optional[QuotationStatus],
    billed: bool,
) -> str:
    """
    Status to store after an update.

    A billed quotation stays billed whatever the payload says.
    """
    if billed:
        return QuotationStatus.BILLED.value
    if requested is None:
        return current
    return requested.value


async def has_bill(db: AsyncSession, quotation_id: uuid.UUID) -> bool:
    result = await db.execute(select(Bill.id).where(Bill.quotation_id == quotation_id))
    return result.first() is not None


async def count_receipts(db: AsyncSession, quotation_id: uuid.UUID) -> int:
    result = await db.execute(
        select(func.count()).select_from(Receipt).where(Receipt.quotation_id == quotation_id)
    )
    return result.scalar() or 0


async def count_quotations(db: AsyncSession, client_id: uuid.UUID) -> int:
    result = await db.execute(
        select(func.count()).select_from(Quotation).where(Quotation.client_id == client_id)
    )
    return result.scalar() or 0


async def ensure_billable(db: AsyncSession, quotation: Quotation) -> None:
    """
    Raises:
        ConflictError: a bill already exists for the quotation
    """
    if await has_bill(db, quotation.id):
        raise ConflictError("Bill already exists for this quotation")


async def ensure_quotation_deletable(db: AsyncSession, quotation: Quotation) -> None:
    """
    Raises:
        ConflictError: the quotation has receipts or a bill
    """
    if await count_receipts(db, quotation.id):
        raise ConflictError("Cannot delete quotation with receipts")
    if await has_bill(db, quotation.id):
        raise ConflictError("Cannot delete quotation with bills")


async def ensure_client_deletable(db: AsyncSession, client_id: uuid.UUID) -> None:
    """
    Raises:
        ConflictError: quotations still reference the client
    """
    if await count_quotations(db, client_id):
        raise ConflictError("Cannot delete client with existing quotations")
