"""
Service layer for quotations
Project: Interior CRM

Creates and updates quotations with server side pricing: amounts are
always recalculated from rows, area and discount, and the discount cap
is enforced before anything is written. Quotation, rows and column
configuration are written in a single transaction.
"""

import datetime
import logging
import uuid
from decimal import Decimal
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from crm.core.config import settings
from crm.core.exceptions import ConflictError, NotFoundError
from crm.core.tenant import TenantContext
from crm.models import (
    Client,
    Package,
    Quotation,
    QuotationColumnConfig,
    QuotationItem,
)
from crm.schemas.bill import BillRead
from crm.schemas.quotation import (
    Breakdown,
    CalculationRequest,
    ColumnDefinition,
    DiscountType,
    QuotationCreate,
    QuotationDetail,
    QuotationItemCreate,
    QuotationItemRead,
    QuotationListItem,
    QuotationRead,
    QuotationUpdate,
)
from crm.schemas.receipt import ReceiptRead
from crm.services.calculator import calculate, calculate_amounts
from crm.services.discount_policy import enforce_discount
from crm.services.lifecycle import ensure_quotation_deletable, has_bill, resolve_status
from crm.services.numbering import DocumentType, next_number

logger = logging.getLogger(__name__)

DEFAULT_RECENT_LIMIT = 5

_BREAKDOWN_FIELDS = tuple(Breakdown.model_fields)


def _build_items(items: list[QuotationItemCreate]) -> list[QuotationItem]:
    built = []
    for index, item in enumerate(items):
        values = item.model_dump(exclude={"custom_columns"})
        built.append(
            QuotationItem(
                **values,
                custom_columns=dict(item.custom_columns),
                sort_order=index,
            )
        )
    return built


def _dump_columns(columns: list[ColumnDefinition]) -> list[dict]:
    return [column.model_dump(mode="json") for column in columns]


def _apply_breakdown(quotation: Quotation, breakdown: Breakdown) -> None:
    for field in _BREAKDOWN_FIELDS:
        setattr(quotation, field, getattr(breakdown, field))


def _priced(
    item_amounts: list[Decimal],
    total_sqft: Optional[Decimal],
    rate_per_sqft: Optional[Decimal],
    discount_type: Optional[DiscountType],
    discount_value: Optional[Decimal],
    cgst_percent: Optional[Decimal],
    sgst_percent: Optional[Decimal],
) -> Breakdown:
    """Breakdown of the quotation, refused when the discount exceeds the cap."""
    breakdown = calculate_amounts(
        item_amounts=item_amounts,
        total_sqft=total_sqft,
        rate_per_sqft=rate_per_sqft,
        discount_type=discount_type,
        discount_value=discount_value,
        cgst_percent=cgst_percent,
        sgst_percent=sgst_percent,
    )
    enforce_discount(discount_type, discount_value, breakdown.subtotal)
    return breakdown


def to_list_item(quotation: Quotation, client_name: Optional[str]) -> QuotationListItem:
    return QuotationListItem(
        **QuotationRead.model_validate(quotation).model_dump(),
        client_name=client_name,
    )


def to_detail(quotation: Quotation) -> QuotationDetail:
    """Detail view; relationships must have been eagerly loaded."""
    client = quotation.client
    column_config = quotation.column_config
    return QuotationDetail(
        **QuotationRead.model_validate(quotation).model_dump(),
        client_name=client.name if client else None,
        client_address=client.address if client else None,
        client_phone=client.phone if client else None,
        project_location=client.project_location if client else None,
        items=[QuotationItemRead.model_validate(item) for item in quotation.items],
        column_config=(
            [ColumnDefinition.model_validate(c) for c in column_config.columns_config]
            if column_config is not None
            else None
        ),
        receipts=[ReceiptRead.model_validate(r) for r in quotation.receipts],
        bill=BillRead.model_validate(quotation.bill) if quotation.bill else None,
    )


class QuotationService:
    """
    Operations on the quotations of a company.

    Implements:
    - Server side recalculation of every amount
    - Discount cap enforcement on create, update and preview
    - Monthly numbering ({CODE}/{YY}{MM}/{SEQ})
    - Status rules (billed is kept while a bill exists)
    - Delete guard (no receipts, no bill)
    """

    # ------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------
    async def get_all(self, db: AsyncSession, tenant: TenantContext) -> list[QuotationListItem]:
        """Quotations with their client name, newest first."""
        return await self._list(db, tenant, limit=None)

    async def get_recent(
        self,
        db: AsyncSession,
        tenant: TenantContext,
        limit: int = DEFAULT_RECENT_LIMIT,
    ) -> list[QuotationListItem]:
        return await self._list(db, tenant, limit=limit)

    async def _list(
        self,
        db: AsyncSession,
        tenant: TenantContext,
        limit: Optional[int],
    ) -> list[QuotationListItem]:
        stmt = (
            select(Quotation, Client.name)
            .outerjoin(Client, Quotation.client_id == Client.id)
            .where(Quotation.company_id == tenant.company_id)
            .order_by(Quotation.created_at.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await db.execute(stmt)
        return [to_list_item(quotation, name) for quotation, name in result.all()]

    async def get_by_id(
        self,
        db: AsyncSession,
        tenant: TenantContext,
        quotation_id: uuid.UUID,
    ) -> Quotation:
        """
        Quotation with client, rows, column configuration, receipts and bill.

        Raises:
            NotFoundError: quotation missing or owned by another company
        """
        stmt = (
            select(Quotation)
            .where(
                Quotation.id == quotation_id,
                Quotation.company_id == tenant.company_id,
            )
            .options(
                selectinload(Quotation.client),
                selectinload(Quotation.items),
                selectinload(Quotation.column_config),
                selectinload(Quotation.receipts),
                selectinload(Quotation.bill),
            )
            .execution_options(populate_existing=True)
        )
        result = await db.execute(stmt)
        quotation = result.scalar_one_or_none()
        if not quotation:
            raise NotFoundError(f"Quotation {quotation_id} not found")
        return quotation

    async def get_detail(
        self,
        db: AsyncSession,
        tenant: TenantContext,
        quotation_id: uuid.UUID,
    ) -> QuotationDetail:
        return to_detail(await self.get_by_id(db, tenant, quotation_id))

    # ------------------------------------------------------------
    # Preview
    # ------------------------------------------------------------
    def calculate_preview(self, request: CalculationRequest) -> Breakdown:
        """
        Totals for the live form, without saving anything.

        Raises:
            BusinessValidationError: discount above the cap
        """
        breakdown = calculate(request)
        enforce_discount(request.discount_type, request.discount_value, breakdown.subtotal)
        return breakdown

    # ------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------
    async def _check_client(
        self,
        db: AsyncSession,
        tenant: TenantContext,
        client_id: uuid.UUID,
    ) -> None:
        result = await db.execute(
            select(Client.id).where(
                Client.id == client_id,
                Client.company_id == tenant.company_id,
            )
        )
        if result.first() is None:
            raise NotFoundError(f"Client {client_id} not found")

    async def _check_package(
        self,
        db: AsyncSession,
        tenant: TenantContext,
        package_id: uuid.UUID,
    ) -> None:
        result = await db.execute(
            select(Package.id).where(
                Package.id == package_id,
                Package.company_id == tenant.company_id,
            )
        )
        if result.first() is None:
            raise NotFoundError(f"Package {package_id} not found")

    async def create(
        self,
        db: AsyncSession,
        tenant: TenantContext,
        data: QuotationCreate,
    ) -> Quotation:
        """
        Creates a quotation with its rows and column configuration.

        Steps:
        1. Check client (and package) belong to the company
        2. Calculate the breakdown and enforce the discount cap
        3. Reserve the next quotation number
        4. Insert quotation, rows and column configuration, one commit

        Raises:
            NotFoundError: client or package not found
            BusinessValidationError: discount above the cap
            ConflictError: numbering conflict or integrity error
        """
        await self._check_client(db, tenant, data.client_id)
        if data.package_id is not None:
            await self._check_package(db, tenant, data.package_id)

        breakdown = _priced(
            item_amounts=[item.amount for item in data.items],
            total_sqft=data.total_sqft,
            rate_per_sqft=data.rate_per_sqft,
            discount_type=data.discount_type,
            discount_value=data.discount_value,
            cgst_percent=data.cgst_percent,
            sgst_percent=data.sgst_percent,
        )

        try:
            quotation_number = await next_number(db, DocumentType.QUOTATION, tenant)

            quotation = Quotation(
                company_id=tenant.company_id,
                client_id=data.client_id,
                quotation_number=quotation_number,
                date=data.date or datetime.date.today(),
                total_sqft=data.total_sqft,
                rate_per_sqft=data.rate_per_sqft,
                package_id=data.package_id,
                bedroom_count=data.bedroom_count,
                bedroom_config=[entry.model_dump() for entry in data.bedroom_config],
                discount_type=data.discount_type.value if data.discount_type else None,
                discount_value=data.discount_value,
                status=data.status.value,
                terms=data.terms if data.terms is not None else settings.default_terms,
                notes=data.notes,
            )
            _apply_breakdown(quotation, breakdown)
            quotation.items = _build_items(data.items)
            if data.column_config is not None:
                quotation.column_config = QuotationColumnConfig(
                    columns_config=_dump_columns(data.column_config)
                )
            db.add(quotation)

            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            logger.error("Integrity error creating quotation: %s", e)
            raise ConflictError("Error while creating the quotation")
        except ConflictError:
            await db.rollback()
            raise

        logger.info(
            "Created quotation %s for client %s, grand total %s",
            quotation.quotation_number, data.client_id, quotation.grand_total,
        )
        return await self.get_by_id(db, tenant, quotation.id)

    async def update(
        self,
        db: AsyncSession,
        tenant: TenantContext,
        quotation_id: uuid.UUID,
        data: QuotationUpdate,
    ) -> Quotation:
        """
        Updates a quotation and recalculates every amount.

        Fields left out of the payload keep their stored value. Rows and
        column configuration are replaced when provided. The bill of a
        billed quotation keeps its own snapshot.

        Raises:
            NotFoundError: quotation, client or package not found
            BusinessValidationError: discount above the cap
        """
        quotation = await self.get_by_id(db, tenant, quotation_id)
        fields = data.model_dump(exclude_unset=True)

        if fields.get("client_id") is not None:
            await self._check_client(db, tenant, data.client_id)
        if fields.get("package_id") is not None:
            await self._check_package(db, tenant, data.package_id)

        def pick(name):
            return fields[name] if name in fields else getattr(quotation, name)

        # An explicit null drops the discount
        if "discount_type" in fields:
            discount_type = data.discount_type
        else:
            discount_type = DiscountType(quotation.discount_type) if quotation.discount_type else None
        discount_value = pick("discount_value")
        if discount_value is None:
            discount_value = Decimal("0")

        if data.items is not None:
            item_amounts = [item.amount for item in data.items]
        else:
            item_amounts = [item.amount for item in quotation.items]

        breakdown = _priced(
            item_amounts=item_amounts,
            total_sqft=pick("total_sqft"),
            rate_per_sqft=pick("rate_per_sqft"),
            discount_type=discount_type,
            discount_value=discount_value,
            cgst_percent=pick("cgst_percent"),
            sgst_percent=pick("sgst_percent"),
        )

        for name in ("client_id", "date", "bedroom_count"):
            if fields.get(name) is not None:
                setattr(quotation, name, fields[name])
        for name in ("total_sqft", "rate_per_sqft", "package_id", "terms", "notes"):
            if name in fields:
                setattr(quotation, name, fields[name])
        if data.bedroom_config is not None:
            quotation.bedroom_config = [entry.model_dump() for entry in data.bedroom_config]

        quotation.discount_type = discount_type.value if discount_type else None
        quotation.discount_value = discount_value
        _apply_breakdown(quotation, breakdown)

        quotation.status = resolve_status(
            quotation.status,
            data.status,
            billed=await has_bill(db, quotation.id),
        )

        if data.items is not None:
            quotation.items = _build_items(data.items)

        if data.column_config is not None:
            columns = _dump_columns(data.column_config)
            if quotation.column_config is not None:
                quotation.column_config.columns_config = columns
            else:
                quotation.column_config = QuotationColumnConfig(columns_config=columns)

        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            logger.error("Integrity error updating quotation %s: %s", quotation_id, e)
            raise ConflictError("Error while updating the quotation")

        logger.info("Updated quotation %s, grand total %s", quotation.quotation_number, quotation.grand_total)
        return await self.get_by_id(db, tenant, quotation_id)

    async def delete(
        self,
        db: AsyncSession,
        tenant: TenantContext,
        quotation_id: uuid.UUID,
    ) -> None:
        """
        Deletes a quotation with its rows and column configuration.

        Raises:
            NotFoundError: quotation not found
            ConflictError: receipts or a bill reference the quotation
        """
        quotation = await self.get_by_id(db, tenant, quotation_id)
        await ensure_quotation_deletable(db, quotation)

        await db.delete(quotation)
        await db.commit()
        logger.info("Deleted quotation %s", quotation.quotation_number)
