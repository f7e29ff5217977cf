"""
Service layer for bills
Project: Interior CRM

A bill is generated once per quotation. It snapshots the quotation
amounts at conversion time and picks up any receipt already recorded.
"""

import datetime
import logging
import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from crm.core.exceptions import ConflictError, NotFoundError
from crm.core.tenant import TenantContext
from crm.models import Bill, Client, Quotation
from crm.schemas.bill import BillCreate, BillDetail, BillItemRead, BillListItem, BillRead, BillUpdate
from crm.schemas.quotation import QuotationStatus
from crm.schemas.receipt import ReceiptRead
from crm.services.lifecycle import STATUS_AFTER_BILL_DELETE, ensure_billable
from crm.services.numbering import DocumentType, next_number
from crm.services.reconciliation import payment_status, total_received

logger = logging.getLogger(__name__)

DEFAULT_RECENT_LIMIT = 5


def to_detail(bill: Bill) -> BillDetail:
    """Detail view; the quotation with client, rows and receipts must be loaded."""
    quotation = bill.quotation
    client = quotation.client if quotation else None
    return BillDetail(
        **BillRead.model_validate(bill).model_dump(),
        quotation_number=quotation.quotation_number if quotation else None,
        total_sqft=quotation.total_sqft if quotation else None,
        rate_per_sqft=quotation.rate_per_sqft if quotation else None,
        bedroom_count=quotation.bedroom_count if quotation else None,
        client_name=client.name if client else None,
        client_address=client.address if client else None,
        client_phone=client.phone if client else None,
        project_location=client.project_location if client else None,
        items=[BillItemRead.model_validate(i) for i in quotation.items] if quotation else [],
        receipts=[ReceiptRead.model_validate(r) for r in quotation.receipts] if quotation else [],
    )


class BillService:
    """
    Operations on the bills of a company.

    Implements:
    - Generation from a quotation (one bill per quotation)
    - Snapshot of the quotation amounts, seeded with existing receipts
    - Quotation status billed on generation, confirmed on delete
    """

    async def get_all(self, db: AsyncSession, tenant: TenantContext) -> list[BillListItem]:
        """Bills with quotation number and client name, newest first."""
        return await self._list(db, tenant, limit=None)

    async def get_recent(
        self,
        db: AsyncSession,
        tenant: TenantContext,
        limit: int = DEFAULT_RECENT_LIMIT,
    ) -> list[BillListItem]:
        return await self._list(db, tenant, limit=limit)

    async def _list(
        self,
        db: AsyncSession,
        tenant: TenantContext,
        limit: Optional[int],
    ) -> list[BillListItem]:
        stmt = (
            select(Bill, Quotation.quotation_number, Client.name)
            .outerjoin(Quotation, Bill.quotation_id == Quotation.id)
            .outerjoin(Client, Quotation.client_id == Client.id)
            .where(Bill.company_id == tenant.company_id)
            .order_by(Bill.created_at.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await db.execute(stmt)
        return [
            BillListItem(
                **BillRead.model_validate(bill).model_dump(),
                quotation_number=number,
                client_name=client_name,
            )
            for bill, number, client_name in result.all()
        ]

    async def get_by_id(
        self,
        db: AsyncSession,
        tenant: TenantContext,
        bill_id: uuid.UUID,
    ) -> Bill:
        """
        Bill with its quotation (client, rows, receipts).

        Raises:
            NotFoundError: bill missing or owned by another company
        """
        stmt = (
            select(Bill)
            .where(Bill.id == bill_id, Bill.company_id == tenant.company_id)
            .options(
                selectinload(Bill.quotation).selectinload(Quotation.client),
                selectinload(Bill.quotation).selectinload(Quotation.items),
                selectinload(Bill.quotation).selectinload(Quotation.receipts),
            )
            .execution_options(populate_existing=True)
        )
        result = await db.execute(stmt)
        bill = result.scalar_one_or_none()
        if not bill:
            raise NotFoundError(f"Bill {bill_id} not found")
        return bill

    async def get_detail(
        self,
        db: AsyncSession,
        tenant: TenantContext,
        bill_id: uuid.UUID,
    ) -> BillDetail:
        return to_detail(await self.get_by_id(db, tenant, bill_id))

    async def create(
        self,
        db: AsyncSession,
        tenant: TenantContext,
        data: BillCreate,
    ) -> Bill:
        """
        Generates the bill of a quotation.

        Steps:
        1. Lock the quotation (must belong to the company)
        2. Refuse when a bill already exists
        3. Reserve the next bill number
        4. Snapshot the amounts; subtotal is the taxable amount
        5. Seed paid/balance/status from the receipts already recorded
        6. Mark the quotation billed; one commit for everything

        Raises:
            NotFoundError: quotation not found
            ConflictError: bill already exists
        """
        result = await db.execute(
            select(Quotation)
            .where(
                Quotation.id == data.quotation_id,
                Quotation.company_id == tenant.company_id,
            )
            .with_for_update()
        )
        quotation = result.scalar_one_or_none()
        if not quotation:
            raise NotFoundError(f"Quotation {data.quotation_id} not found")

        await ensure_billable(db, quotation)

        try:
            bill_number = await next_number(db, DocumentType.BILL, tenant)
            received = await total_received(db, quotation.id)
            balance, status = payment_status(quotation.grand_total, received)

            bill = Bill(
                company_id=tenant.company_id,
                quotation_id=quotation.id,
                bill_number=bill_number,
                date=data.date or datetime.date.today(),
                subtotal=quotation.taxable_amount,
                cgst_percent=quotation.cgst_percent,
                cgst_amount=quotation.cgst_amount,
                sgst_percent=quotation.sgst_percent,
                sgst_amount=quotation.sgst_amount,
                total_tax=quotation.total_tax,
                grand_total=quotation.grand_total,
                paid_amount=received,
                balance_amount=balance,
                status=status.value,
                notes=data.notes,
            )
            db.add(bill)
            quotation.status = QuotationStatus.BILLED.value

            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            logger.error("Integrity error creating bill: %s", e)
            raise ConflictError("Bill already exists for this quotation")
        except ConflictError:
            await db.rollback()
            raise

        logger.info(
            "Created bill %s for quotation %s (status %s)",
            bill.bill_number, quotation.quotation_number, bill.status,
        )
        return await self.get_by_id(db, tenant, bill.id)

    async def update(
        self,
        db: AsyncSession,
        tenant: TenantContext,
        bill_id: uuid.UUID,
        data: BillUpdate,
    ) -> Bill:
        """Only date and notes change; amounts belong to the snapshot."""
        bill = await self.get_by_id(db, tenant, bill_id)

        fields = data.model_dump(exclude_unset=True)
        if fields.get("date") is not None:
            bill.date = fields["date"]
        if "notes" in fields:
            bill.notes = fields["notes"]

        await db.commit()
        logger.info("Updated bill %s", bill.bill_number)
        return await self.get_by_id(db, tenant, bill_id)

    async def delete(
        self,
        db: AsyncSession,
        tenant: TenantContext,
        bill_id: uuid.UUID,
    ) -> None:
        """
        Deletes a bill; the quotation goes back to confirmed, whatever
        status it had before billing. Receipts are kept.
        """
        bill = await self.get_by_id(db, tenant, bill_id)
        quotation = bill.quotation

        await db.delete(bill)
        if quotation is not None:
            quotation.status = STATUS_AFTER_BILL_DELETE.value

        await db.commit()
        logger.info("Deleted bill %s", bill.bill_number)
