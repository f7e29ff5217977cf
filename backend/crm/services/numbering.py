"""
Document numbering
Project: Interior CRM

Sequential numbers per company, document type and month:

    quotation   {CODE}/{YY}{MM}/{SEQ}
    bill        INV/{CODE}/{YY}{MM}/{SEQ}
    receipt     RCP/{CODE}/{YY}{MM}/{SEQ}

SEQ is zero padded to 4 digits and restarts at 1 every month. The last
issued value lives in a DocumentSequence row that is locked and
incremented inside the transaction inserting the document, so two
concurrent requests never obtain the same number.
"""

import datetime
import logging
from enum import Enum
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from crm.core.exceptions import ConflictError
from crm.core.tenant import TenantContext
from crm.models import Bill, DocumentSequence, Quotation, Receipt

logger = logging.getLogger(__name__)

MAX_SEQUENCE = 9999


class DocumentType(str, Enum):
    QUOTATION = "quotation"
    BILL = "bill"
    RECEIPT = "receipt"


_PREFIXES = {
    DocumentType.QUOTATION: None,
    DocumentType.BILL: "INV",
    DocumentType.RECEIPT: "RCP",
}

_NUMBER_COLUMNS = {
    DocumentType.QUOTATION: Quotation.quotation_number,
    DocumentType.BILL: Bill.bill_number,
    DocumentType.RECEIPT: Receipt.receipt_number,
}


def period_of(on: datetime.date) -> str:
    """YYMM period of a date."""
    return on.strftime("%y%m")


def number_prefix(document_type: DocumentType, company_code: str, period: str) -> str:
    """Number without its sequence, trailing slash included."""
    parts = [company_code, period]
    prefix = _PREFIXES[document_type]
    if prefix:
        parts.insert(0, prefix)
    return "/".join(parts) + "/"


def format_number(
    document_type: DocumentType,
    company_code: str,
    period: str,
    sequence: int,
) -> str:
    return f"{number_prefix(document_type, company_code, period)}{sequence:04d}"


def parse_sequence(number: str) -> Optional[int]:
    """Trailing numeric segment of a document number, None if not numeric."""
    tail = number.rsplit("/", 1)[-1]
    return int(tail) if tail.isdigit() else None


async def _highest_existing(
    db: AsyncSession,
    document_type: DocumentType,
    prefix: str,
) -> int:
    """
    Highest sequence already used for the prefix, 0 if none.
    Seeds a new counter so that numbers issued before it existed are
    never reused.
    """
    column = _NUMBER_COLUMNS[document_type]
    result = await db.execute(select(column).where(column.like(f"{prefix}%")))
    sequences = [parse_sequence(n) for n in result.scalars().all()]
    return max((s for s in sequences if s is not None), default=0)


async def next_number(
    db: AsyncSession,
    document_type: DocumentType,
    tenant: TenantContext,
    on: Optional[datetime.date] = None,
) -> str:
    """
    Reserves and returns the next number for the company and month.

    Must run in the transaction that inserts the document: the counter
    row stays locked until that transaction ends, and a rollback gives
    the number back.

    Args:
        db: Database session (transaction of the caller)
        document_type: quotation / bill / receipt
        tenant: Company issuing the document
        on: Reference date of the period (default today)

    Returns:
        str: The formatted document number

    Raises:
        ConflictError: concurrent creation of the same counter, or more
            than 9999 documents in the month
    """
    period = period_of(on or datetime.date.today())
    prefix = number_prefix(document_type, tenant.company_code, period)

    stmt = (
        select(DocumentSequence)
        .where(
            DocumentSequence.company_id == tenant.company_id,
            DocumentSequence.document_type == document_type.value,
            DocumentSequence.period == period,
        )
        .with_for_update()
    )
    result = await db.execute(stmt)
    sequence = result.scalar_one_or_none()

    if sequence is None:
        seed = await _highest_existing(db, document_type, prefix)
        sequence = DocumentSequence(
            company_id=tenant.company_id,
            document_type=document_type.value,
            period=period,
            last_value=seed,
        )
        db.add(sequence)

    value = sequence.last_value + 1
    if value > MAX_SEQUENCE:
        raise ConflictError(
            f"No {document_type.value} numbers left for period {period}"
        )
    sequence.last_value = value

    try:
        await db.flush()
    except IntegrityError as e:
        logger.error("Counter creation race for %s %s: %s", document_type.value, period, e)
        raise ConflictError(
            f"Another {document_type.value} was numbered at the same time, please retry"
        )

    number = format_number(document_type, tenant.company_code, period, value)
    logger.debug("Issued %s number %s", document_type.value, number)
    return number
