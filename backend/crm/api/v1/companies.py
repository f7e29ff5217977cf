"""
FastAPI router for companies
Project: Interior CRM

Listing and selecting a company do not need a tenant; the selection
returns the id the frontend sends back in the X-Company-Id header.
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from crm.core.database import get_db
from crm.core.tenant import TenantContext, get_tenant
from crm.schemas.company import CompanyRead, CompanySelect, CompanyUpdate, TenantRead
from crm.services.company_service import CompanyService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/companies",
    tags=["Companies"],
)


def get_company_service() -> CompanyService:
    return CompanyService()


@router.get(
    "/",
    name="companies_list",
    summary="List companies",
    response_model=list[CompanyRead],
    status_code=status.HTTP_200_OK,
)
async def get_companies(
    db: AsyncSession = Depends(get_db),
    service: CompanyService = Depends(get_company_service),
) -> list[CompanyRead]:
    companies = await service.get_all(db)
    return [CompanyRead.model_validate(c) for c in companies]


@router.post(
    "/select",
    name="companies_select",
    summary="Select company",
    description="Resolves the company to act for; send its id as X-Company-Id afterwards.",
    response_model=TenantRead,
    status_code=status.HTTP_200_OK,
)
async def select_company(
    data: CompanySelect,
    db: AsyncSession = Depends(get_db),
    service: CompanyService = Depends(get_company_service),
) -> TenantRead:
    tenant = await service.select(db, data.company_id)
    return TenantRead(
        company_id=tenant.company_id,
        company_code=tenant.company_code,
        company_name=tenant.company_name,
    )


@router.get(
    "/current",
    name="companies_current",
    summary="Selected company",
    response_model=CompanyRead,
    status_code=status.HTTP_200_OK,
)
async def get_current_company(
    tenant: TenantContext = Depends(get_tenant),
    db: AsyncSession = Depends(get_db),
    service: CompanyService = Depends(get_company_service),
) -> CompanyRead:
    company = await service.get_by_id(db, tenant.company_id)
    return CompanyRead.model_validate(company)


@router.put(
    "/current",
    name="companies_update",
    summary="Update selected company",
    response_model=CompanyRead,
    status_code=status.HTTP_200_OK,
)
async def update_current_company(
    data: CompanyUpdate,
    tenant: TenantContext = Depends(get_tenant),
    db: AsyncSession = Depends(get_db),
    service: CompanyService = Depends(get_company_service),
) -> CompanyRead:
    company = await service.update(db, tenant, data)
    return CompanyRead.model_validate(company)
