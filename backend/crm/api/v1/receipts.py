"""
FastAPI router for receipts
Project: Interior CRM
"""

import logging
import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from crm.core.database import get_db
from crm.core.tenant import TenantContext, get_tenant
from crm.schemas.receipt import (
    QuotationReceipts,
    ReceiptCreate,
    ReceiptDetail,
    ReceiptListItem,
    ReceiptUpdate,
)
from crm.services.receipt_service import ReceiptService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/receipts",
    tags=["Receipts"],
)


def get_receipt_service() -> ReceiptService:
    return ReceiptService()


@router.get(
    "/",
    name="receipts_list",
    summary="List receipts",
    response_model=list[ReceiptListItem],
    status_code=status.HTTP_200_OK,
)
async def get_receipts(
    tenant: TenantContext = Depends(get_tenant),
    db: AsyncSession = Depends(get_db),
    service: ReceiptService = Depends(get_receipt_service),
) -> list[ReceiptListItem]:
    return await service.get_all(db, tenant)


@router.get(
    "/recent",
    name="receipts_recent",
    summary="Recent receipts",
    response_model=list[ReceiptListItem],
    status_code=status.HTTP_200_OK,
)
async def get_recent_receipts(
    limit: int = Query(5, ge=1, le=100, description="Number of receipts"),
    tenant: TenantContext = Depends(get_tenant),
    db: AsyncSession = Depends(get_db),
    service: ReceiptService = Depends(get_receipt_service),
) -> list[ReceiptListItem]:
    return await service.get_recent(db, tenant, limit=limit)


@router.get(
    "/quotation/{quotation_id}",
    name="receipts_by_quotation",
    summary="Receipts of a quotation",
    description="Receipts with the total received and the balance against the quotation total.",
    response_model=QuotationReceipts,
    status_code=status.HTTP_200_OK,
)
async def get_receipts_by_quotation(
    quotation_id: uuid.UUID,
    tenant: TenantContext = Depends(get_tenant),
    db: AsyncSession = Depends(get_db),
    service: ReceiptService = Depends(get_receipt_service),
) -> QuotationReceipts:
    return await service.get_by_quotation(db, tenant, quotation_id)


@router.get(
    "/{receipt_id}",
    name="receipts_detail",
    summary="Receipt detail",
    response_model=ReceiptDetail,
    status_code=status.HTTP_200_OK,
)
async def get_receipt(
    receipt_id: uuid.UUID,
    tenant: TenantContext = Depends(get_tenant),
    db: AsyncSession = Depends(get_db),
    service: ReceiptService = Depends(get_receipt_service),
) -> ReceiptDetail:
    return await service.get_detail(db, tenant, receipt_id)


@router.post(
    "/",
    name="receipts_create",
    summary="Record receipt",
    description="Records a payment and updates the bill of the quotation, if any.",
    response_model=ReceiptDetail,
    status_code=status.HTTP_201_CREATED,
)
async def create_receipt(
    data: ReceiptCreate,
    tenant: TenantContext = Depends(get_tenant),
    db: AsyncSession = Depends(get_db),
    service: ReceiptService = Depends(get_receipt_service),
) -> ReceiptDetail:
    receipt = await service.create(db, tenant, data)
    return await service.get_detail(db, tenant, receipt.id)


@router.put(
    "/{receipt_id}",
    name="receipts_update",
    summary="Update receipt",
    response_model=ReceiptDetail,
    status_code=status.HTTP_200_OK,
)
async def update_receipt(
    receipt_id: uuid.UUID,
    data: ReceiptUpdate,
    tenant: TenantContext = Depends(get_tenant),
    db: AsyncSession = Depends(get_db),
    service: ReceiptService = Depends(get_receipt_service),
) -> ReceiptDetail:
    await service.update(db, tenant, receipt_id, data)
    return await service.get_detail(db, tenant, receipt_id)


@router.delete(
    "/{receipt_id}",
    name="receipts_delete",
    summary="Delete receipt",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_receipt(
    receipt_id: uuid.UUID,
    tenant: TenantContext = Depends(get_tenant),
    db: AsyncSession = Depends(get_db),
    service: ReceiptService = Depends(get_receipt_service),
) -> None:
    await service.delete(db, tenant, receipt_id)
