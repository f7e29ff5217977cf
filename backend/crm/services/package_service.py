"""
Service layer for packages
Project: Interior CRM

Packages are priced templates (BHK type x tier). They are only ever
deactivated, since quotations may point at them.
"""

import logging
import uuid

from sqlalchemy import case, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from crm.core.exceptions import ConflictError, NotFoundError
from crm.core.tenant import TenantContext
from crm.models import Package, PackageItem
from crm.schemas.package import (
    TIER_ORDER,
    PackageCreate,
    PackageItemCreate,
    PackageTier,
    PackageUpdate,
)

logger = logging.getLogger(__name__)

# Silver, Gold, Platinum; unknown tiers last
_TIER_RANK = case(TIER_ORDER, value=Package.tier, else_=len(TIER_ORDER) + 1)


def _build_items(items: list[PackageItemCreate]) -> list[PackageItem]:
    return [
        PackageItem(**item.model_dump(), sort_order=index)
        for index, item in enumerate(items)
    ]


class PackageService:
    """CRUD operations on the packages of a company."""

    async def get_all(self, db: AsyncSession, tenant: TenantContext) -> list[Package]:
        """Active packages ordered by tier, then BHK type."""
        result = await db.execute(
            select(Package)
            .where(Package.company_id == tenant.company_id, Package.is_active == True)
            .order_by(_TIER_RANK, Package.bhk_type.asc())
        )
        return list(result.scalars().all())

    async def get_by_tier(
        self,
        db: AsyncSession,
        tenant: TenantContext,
        tier: PackageTier,
    ) -> list[Package]:
        result = await db.execute(
            select(Package)
            .where(
                Package.company_id == tenant.company_id,
                Package.is_active == True,
                Package.tier == tier.value,
            )
            .order_by(Package.bhk_type.asc())
        )
        return list(result.scalars().all())

    async def get_by_id(
        self,
        db: AsyncSession,
        tenant: TenantContext,
        package_id: uuid.UUID,
        include_inactive: bool = False,
    ) -> Package:
        """
        Package with its items.

        Raises:
            NotFoundError: package missing, deactivated or owned by another company
        """
        conditions = [
            Package.id == package_id,
            Package.company_id == tenant.company_id,
        ]
        if not include_inactive:
            conditions.append(Package.is_active == True)

        result = await db.execute(
            select(Package)
            .where(*conditions)
            .options(selectinload(Package.items))
            .execution_options(populate_existing=True)
        )
        package = result.scalar_one_or_none()
        if not package:
            raise NotFoundError(f"Package {package_id} not found")
        return package

    async def create(
        self,
        db: AsyncSession,
        tenant: TenantContext,
        data: PackageCreate,
    ) -> Package:
        package = Package(
            company_id=tenant.company_id,
            name=data.name,
            bhk_type=data.bhk_type,
            tier=data.tier.value,
            base_rate_sqft=data.base_rate_sqft,
            description=data.description,
        )
        package.items = _build_items(data.items)
        db.add(package)

        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            logger.error("Integrity error creating package: %s", e)
            raise ConflictError("Error while creating the package")

        logger.info("Created package %s (%s %s)", package.id, package.bhk_type, package.tier)
        return await self.get_by_id(db, tenant, package.id)

    async def update(
        self,
        db: AsyncSession,
        tenant: TenantContext,
        package_id: uuid.UUID,
        data: PackageUpdate,
    ) -> Package:
        """Updates the package; items are replaced when provided."""
        package = await self.get_by_id(db, tenant, package_id)

        fields = data.model_dump(exclude_unset=True, exclude={"items"})
        for field, value in fields.items():
            if value is None:
                continue
            if field == "tier":
                value = PackageTier(value).value
            setattr(package, field, value)

        if data.items is not None:
            package.items = _build_items(data.items)

        await db.commit()
        logger.info("Updated package %s", package_id)
        return await self.get_by_id(db, tenant, package_id)

    async def delete(
        self,
        db: AsyncSession,
        tenant: TenantContext,
        package_id: uuid.UUID,
    ) -> None:
        """Soft delete: the package stays for the quotations using it."""
        package = await self.get_by_id(db, tenant, package_id)
        package.is_active = False
        await db.commit()
        logger.info("Deactivated package %s", package_id)
