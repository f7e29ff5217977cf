"""
FastAPI router for packages
Project: Interior CRM
"""

import logging
import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from crm.core.database import get_db
from crm.core.tenant import TenantContext, get_tenant
from crm.schemas.package import (
    PackageCreate,
    PackageDetail,
    PackageRead,
    PackageTier,
    PackageUpdate,
)
from crm.services.package_service import PackageService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/packages",
    tags=["Packages"],
)


def get_package_service() -> PackageService:
    return PackageService()


@router.get(
    "/",
    name="packages_list",
    summary="List packages",
    description="Active packages ordered by tier and BHK type.",
    response_model=list[PackageRead],
    status_code=status.HTTP_200_OK,
)
async def get_packages(
    tenant: TenantContext = Depends(get_tenant),
    db: AsyncSession = Depends(get_db),
    service: PackageService = Depends(get_package_service),
) -> list[PackageRead]:
    packages = await service.get_all(db, tenant)
    return [PackageRead.model_validate(p) for p in packages]


@router.get(
    "/tier/{tier}",
    name="packages_by_tier",
    summary="Packages of a tier",
    response_model=list[PackageRead],
    status_code=status.HTTP_200_OK,
)
async def get_packages_by_tier(
    tier: PackageTier,
    tenant: TenantContext = Depends(get_tenant),
    db: AsyncSession = Depends(get_db),
    service: PackageService = Depends(get_package_service),
) -> list[PackageRead]:
    packages = await service.get_by_tier(db, tenant, tier)
    return [PackageRead.model_validate(p) for p in packages]


@router.get(
    "/{package_id}",
    name="packages_detail",
    summary="Package detail",
    response_model=PackageDetail,
    status_code=status.HTTP_200_OK,
)
async def get_package(
    package_id: uuid.UUID,
    tenant: TenantContext = Depends(get_tenant),
    db: AsyncSession = Depends(get_db),
    service: PackageService = Depends(get_package_service),
) -> PackageDetail:
    package = await service.get_by_id(db, tenant, package_id)
    return PackageDetail.model_validate(package)


@router.post(
    "/",
    name="packages_create",
    summary="Create package",
    response_model=PackageDetail,
    status_code=status.HTTP_201_CREATED,
)
async def create_package(
    data: PackageCreate,
    tenant: TenantContext = Depends(get_tenant),
    db: AsyncSession = Depends(get_db),
    service: PackageService = Depends(get_package_service),
) -> PackageDetail:
    package = await service.create(db, tenant, data)
    return PackageDetail.model_validate(package)


@router.put(
    "/{package_id}",
    name="packages_update",
    summary="Update package",
    description="Items are replaced as a whole when provided.",
    response_model=PackageDetail,
    status_code=status.HTTP_200_OK,
)
async def update_package(
    package_id: uuid.UUID,
    data: PackageUpdate,
    tenant: TenantContext = Depends(get_tenant),
    db: AsyncSession = Depends(get_db),
    service: PackageService = Depends(get_package_service),
) -> PackageDetail:
    package = await service.update(db, tenant, package_id, data)
    return PackageDetail.model_validate(package)


@router.delete(
    "/{package_id}",
    name="packages_delete",
    summary="Deactivate package",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_package(
    package_id: uuid.UUID,
    tenant: TenantContext = Depends(get_tenant),
    db: AsyncSession = Depends(get_db),
    service: PackageService = Depends(get_package_service),
) -> None:
    await service.delete(db, tenant, package_id)
