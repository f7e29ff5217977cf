"""
FastAPI router for bills
Project: Interior CRM
"""

import logging
import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from crm.core.database import get_db
from crm.core.tenant import TenantContext, get_tenant
from crm.schemas.bill import BillCreate, BillDetail, BillListItem, BillUpdate
from crm.services.bill_service import BillService, to_detail

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/bills",
    tags=["Bills"],
)


def get_bill_service() -> BillService:
    return BillService()


@router.get(
    "/",
    name="bills_list",
    summary="List bills",
    response_model=list[BillListItem],
    status_code=status.HTTP_200_OK,
)
async def get_bills(
    tenant: TenantContext = Depends(get_tenant),
    db: AsyncSession = Depends(get_db),
    service: BillService = Depends(get_bill_service),
) -> list[BillListItem]:
    return await service.get_all(db, tenant)


@router.get(
    "/recent",
    name="bills_recent",
    summary="Recent bills",
    response_model=list[BillListItem],
    status_code=status.HTTP_200_OK,
)
async def get_recent_bills(
    limit: int = Query(5, ge=1, le=100, description="Number of bills"),
    tenant: TenantContext = Depends(get_tenant),
    db: AsyncSession = Depends(get_db),
    service: BillService = Depends(get_bill_service),
) -> list[BillListItem]:
    return await service.get_recent(db, tenant, limit=limit)


@router.get(
    "/{bill_id}",
    name="bills_detail",
    summary="Bill detail",
    description="Bill with quotation rows, client and receipts.",
    response_model=BillDetail,
    status_code=status.HTTP_200_OK,
)
async def get_bill(
    bill_id: uuid.UUID,
    tenant: TenantContext = Depends(get_tenant),
    db: AsyncSession = Depends(get_db),
    service: BillService = Depends(get_bill_service),
) -> BillDetail:
    return await service.get_detail(db, tenant, bill_id)


@router.post(
    "/",
    name="bills_create",
    summary="Generate bill",
    description="Generates the bill of a quotation and marks the quotation billed.",
    response_model=BillDetail,
    status_code=status.HTTP_201_CREATED,
)
async def create_bill(
    data: BillCreate,
    tenant: TenantContext = Depends(get_tenant),
    db: AsyncSession = Depends(get_db),
    service: BillService = Depends(get_bill_service),
) -> BillDetail:
    """
    Raises:
        NotFoundError: quotation not found
        ConflictError: a bill already exists for the quotation
    """
    bill = await service.create(db, tenant, data)
    return to_detail(bill)


@router.put(
    "/{bill_id}",
    name="bills_update",
    summary="Update bill",
    description="Only date and notes are editable.",
    response_model=BillDetail,
    status_code=status.HTTP_200_OK,
)
async def update_bill(
    bill_id: uuid.UUID,
    data: BillUpdate,
    tenant: TenantContext = Depends(get_tenant),
    db: AsyncSession = Depends(get_db),
    service: BillService = Depends(get_bill_service),
) -> BillDetail:
    bill = await service.update(db, tenant, bill_id, data)
    return to_detail(bill)


@router.delete(
    "/{bill_id}",
    name="bills_delete",
    summary="Delete bill",
    description="The quotation goes back to confirmed.",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_bill(
    bill_id: uuid.UUID,
    tenant: TenantContext = Depends(get_tenant),
    db: AsyncSession = Depends(get_db),
    service: BillService = Depends(get_bill_service),
) -> None:
    await service.delete(db, tenant, bill_id)
