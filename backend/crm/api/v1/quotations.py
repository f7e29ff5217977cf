"""
FastAPI router for quotations
Project: Interior CRM

Amounts are always computed server side: the payloads carry rows, area
and discount inputs, never totals.
"""

import logging
import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from crm.core.database import get_db
from crm.core.tenant import TenantContext, get_tenant
from crm.schemas.quotation import (
    Breakdown,
    CalculationRequest,
    QuotationCreate,
    QuotationDetail,
    QuotationListItem,
    QuotationUpdate,
)
from crm.services.quotation_service import QuotationService, to_detail

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/quotations",
    tags=["Quotations"],
)


def get_quotation_service() -> QuotationService:
    return QuotationService()


@router.get(
    "/",
    name="quotations_list",
    summary="List quotations",
    description="Quotations of the selected company with client name, newest first.",
    response_model=list[QuotationListItem],
    status_code=status.HTTP_200_OK,
)
async def get_quotations(
    tenant: TenantContext = Depends(get_tenant),
    db: AsyncSession = Depends(get_db),
    service: QuotationService = Depends(get_quotation_service),
) -> list[QuotationListItem]:
    return await service.get_all(db, tenant)


@router.get(
    "/recent",
    name="quotations_recent",
    summary="Recent quotations",
    response_model=list[QuotationListItem],
    status_code=status.HTTP_200_OK,
)
async def get_recent_quotations(
    limit: int = Query(5, ge=1, le=100, description="Number of quotations"),
    tenant: TenantContext = Depends(get_tenant),
    db: AsyncSession = Depends(get_db),
    service: QuotationService = Depends(get_quotation_service),
) -> list[QuotationListItem]:
    return await service.get_recent(db, tenant, limit=limit)


@router.post(
    "/calculate",
    name="quotations_calculate",
    summary="Calculate totals",
    description="Side effect free breakdown for the live form; the discount cap applies.",
    response_model=Breakdown,
    status_code=status.HTTP_200_OK,
)
async def calculate_quotation(
    request: CalculationRequest,
    service: QuotationService = Depends(get_quotation_service),
) -> Breakdown:
    """
    Raises:
        BusinessValidationError: discount above the cap
    """
    return service.calculate_preview(request)


@router.get(
    "/{quotation_id}",
    name="quotations_detail",
    summary="Quotation detail",
    description="Quotation with rows, column configuration, receipts and bill.",
    response_model=QuotationDetail,
    status_code=status.HTTP_200_OK,
)
async def get_quotation(
    quotation_id: uuid.UUID,
    tenant: TenantContext = Depends(get_tenant),
    db: AsyncSession = Depends(get_db),
    service: QuotationService = Depends(get_quotation_service),
) -> QuotationDetail:
    return await service.get_detail(db, tenant, quotation_id)


@router.post(
    "/",
    name="quotations_create",
    summary="Create quotation",
    response_model=QuotationDetail,
    status_code=status.HTTP_201_CREATED,
)
async def create_quotation(
    data: QuotationCreate,
    tenant: TenantContext = Depends(get_tenant),
    db: AsyncSession = Depends(get_db),
    service: QuotationService = Depends(get_quotation_service),
) -> QuotationDetail:
    """
    Raises:
        NotFoundError: client or package not found
        BusinessValidationError: discount above the cap
    """
    quotation = await service.create(db, tenant, data)
    return to_detail(quotation)


@router.put(
    "/{quotation_id}",
    name="quotations_update",
    summary="Update quotation",
    description="Rows and column configuration are replaced when provided.",
    response_model=QuotationDetail,
    status_code=status.HTTP_200_OK,
)
async def update_quotation(
    quotation_id: uuid.UUID,
    data: QuotationUpdate,
    tenant: TenantContext = Depends(get_tenant),
    db: AsyncSession = Depends(get_db),
    service: QuotationService = Depends(get_quotation_service),
) -> QuotationDetail:
    quotation = await service.update(db, tenant, quotation_id, data)
    return to_detail(quotation)


@router.delete(
    "/{quotation_id}",
    name="quotations_delete",
    summary="Delete quotation",
    description="Refused while receipts or a bill reference the quotation.",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_quotation(
    quotation_id: uuid.UUID,
    tenant: TenantContext = Depends(get_tenant),
    db: AsyncSession = Depends(get_db),
    service: QuotationService = Depends(get_quotation_service),
) -> None:
    await service.delete(db, tenant, quotation_id)
