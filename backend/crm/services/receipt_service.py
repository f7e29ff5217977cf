"""
Service layer for receipts
Project: Interior CRM

Every receipt mutation reconciles the bill of its quotation in the same
transaction.
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
from crm.models import Client, Quotation, Receipt
from crm.schemas.receipt import (
    QuotationReceipts,
    ReceiptCreate,
    ReceiptDetail,
    ReceiptListItem,
    ReceiptRead,
    ReceiptUpdate,
)
from crm.services.numbering import DocumentType, next_number
from crm.services.reconciliation import reconcile, total_received

logger = logging.getLogger(__name__)

DEFAULT_RECENT_LIMIT = 5


class ReceiptService:
    """
    Operations on the receipts of a company.

    Receipts may be recorded before the quotation is billed; the bill
    takes them into account when it is generated.
    """

    async def get_all(self, db: AsyncSession, tenant: TenantContext) -> list[ReceiptListItem]:
        return await self._list(db, tenant, limit=None)

    async def get_recent(
        self,
        db: AsyncSession,
        tenant: TenantContext,
        limit: int = DEFAULT_RECENT_LIMIT,
    ) -> list[ReceiptListItem]:
        return await self._list(db, tenant, limit=limit)

    async def _list(
        self,
        db: AsyncSession,
        tenant: TenantContext,
        limit: Optional[int],
    ) -> list[ReceiptListItem]:
        stmt = (
            select(Receipt, Quotation.quotation_number, Client.name)
            .outerjoin(Quotation, Receipt.quotation_id == Quotation.id)
            .outerjoin(Client, Quotation.client_id == Client.id)
            .where(Receipt.company_id == tenant.company_id)
            .order_by(Receipt.created_at.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await db.execute(stmt)
        return [
            ReceiptListItem(
                **ReceiptRead.model_validate(receipt).model_dump(),
                quotation_number=number,
                client_name=client_name,
            )
            for receipt, number, client_name in result.all()
        ]

    async def _get_quotation(
        self,
        db: AsyncSession,
        tenant: TenantContext,
        quotation_id: uuid.UUID,
    ) -> Quotation:
        result = await db.execute(
            select(Quotation).where(
                Quotation.id == quotation_id,
                Quotation.company_id == tenant.company_id,
            )
        )
        quotation = result.scalar_one_or_none()
        if not quotation:
            raise NotFoundError(f"Quotation {quotation_id} not found")
        return quotation

    async def get_by_quotation(
        self,
        db: AsyncSession,
        tenant: TenantContext,
        quotation_id: uuid.UUID,
    ) -> QuotationReceipts:
        """
        Receipts of a quotation (latest first), their total and the
        balance left against the quotation grand total.
        """
        quotation = await self._get_quotation(db, tenant, quotation_id)

        result = await db.execute(
            select(Receipt)
            .where(
                Receipt.quotation_id == quotation_id,
                Receipt.company_id == tenant.company_id,
            )
            .order_by(Receipt.date.desc())
        )
        receipts = list(result.scalars().all())
        received = await total_received(db, quotation_id)

        return QuotationReceipts(
            receipts=[ReceiptRead.model_validate(r) for r in receipts],
            total_received=received,
            balance=quotation.grand_total - received,
        )

    async def get_by_id(
        self,
        db: AsyncSession,
        tenant: TenantContext,
        receipt_id: uuid.UUID,
    ) -> Receipt:
        """
        Raises:
            NotFoundError: receipt missing or owned by another company
        """
        result = await db.execute(
            select(Receipt)
            .where(Receipt.id == receipt_id, Receipt.company_id == tenant.company_id)
            .options(selectinload(Receipt.quotation).selectinload(Quotation.client))
            .execution_options(populate_existing=True)
        )
        receipt = result.scalar_one_or_none()
        if not receipt:
            raise NotFoundError(f"Receipt {receipt_id} not found")
        return receipt

    async def get_detail(
        self,
        db: AsyncSession,
        tenant: TenantContext,
        receipt_id: uuid.UUID,
    ) -> ReceiptDetail:
        """Receipt with the running total of its quotation and the balance left."""
        receipt = await self.get_by_id(db, tenant, receipt_id)
        quotation = receipt.quotation
        client = quotation.client if quotation else None
        received = await total_received(db, receipt.quotation_id)

        return ReceiptDetail(
            **ReceiptRead.model_validate(receipt).model_dump(),
            quotation_number=quotation.quotation_number,
            quotation_total=quotation.grand_total,
            client_name=client.name if client else None,
            client_address=client.address if client else None,
            client_phone=client.phone if client else None,
            total_received=received,
            balance=quotation.grand_total - received,
        )

    async def create(
        self,
        db: AsyncSession,
        tenant: TenantContext,
        data: ReceiptCreate,
    ) -> Receipt:
        """
        Records a payment and reconciles the bill, in one transaction.

        Raises:
            NotFoundError: quotation not found
            ConflictError: numbering conflict
        """
        await self._get_quotation(db, tenant, data.quotation_id)

        try:
            receipt_number = await next_number(db, DocumentType.RECEIPT, tenant)
            receipt = Receipt(
                company_id=tenant.company_id,
                quotation_id=data.quotation_id,
                receipt_number=receipt_number,
                date=data.date or datetime.date.today(),
                amount=data.amount,
                payment_mode=data.payment_mode.value,
                transaction_reference=data.transaction_reference,
                notes=data.notes,
            )
            db.add(receipt)
            await reconcile(db, data.quotation_id)

            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            logger.error("Integrity error creating receipt: %s", e)
            raise ConflictError("Error while creating the receipt")
        except ConflictError:
            await db.rollback()
            raise

        logger.info(
            "Created receipt %s of %s for quotation %s",
            receipt.receipt_number, receipt.amount, data.quotation_id,
        )
        return await self.get_by_id(db, tenant, receipt.id)

    async def update(
        self,
        db: AsyncSession,
        tenant: TenantContext,
        receipt_id: uuid.UUID,
        data: ReceiptUpdate,
    ) -> Receipt:
        receipt = await self.get_by_id(db, tenant, receipt_id)

        fields = data.model_dump(exclude_unset=True)
        for name in ("date", "amount"):
            if fields.get(name) is not None:
                setattr(receipt, name, fields[name])
        if fields.get("payment_mode") is not None:
            receipt.payment_mode = data.payment_mode.value
        for name in ("transaction_reference", "notes"):
            if name in fields:
                setattr(receipt, name, fields[name])

        await reconcile(db, receipt.quotation_id)
        await db.commit()

        logger.info("Updated receipt %s", receipt.receipt_number)
        return await self.get_by_id(db, tenant, receipt_id)

    async def delete(
        self,
        db: AsyncSession,
        tenant: TenantContext,
        receipt_id: uuid.UUID,
    ) -> None:
        """Deletes a receipt and reconciles the bill, in one transaction."""
        receipt = await self.get_by_id(db, tenant, receipt_id)
        quotation_id = receipt.quotation_id

        await db.delete(receipt)
        await reconcile(db, quotation_id)
        await db.commit()

        logger.info("Deleted receipt %s", receipt.receipt_number)
