"""
Service layer for companies
Project: Interior CRM
"""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from crm.core.exceptions import NotFoundError
from crm.core.tenant import TenantContext
from crm.models import Company
from crm.schemas.company import CompanyUpdate

logger = logging.getLogger(__name__)


class CompanyService:
    """
    Companies are the tenants: listing them and selecting one is the
    only company-agnostic part of the API.
    """

    async def get_all(self, db: AsyncSession) -> list[Company]:
        result = await db.execute(select(Company).order_by(Company.name.asc()))
        return list(result.scalars().all())

    async def get_by_id(self, db: AsyncSession, company_id: uuid.UUID) -> Company:
        """
        Raises:
            NotFoundError: unknown company
        """
        result = await db.execute(select(Company).where(Company.id == company_id))
        company = result.scalar_one_or_none()
        if not company:
            raise NotFoundError(f"Company {company_id} not found")
        return company

    async def select(self, db: AsyncSession, company_id: uuid.UUID) -> TenantContext:
        """Resolves the tenant context the client will send back on every request."""
        company = await self.get_by_id(db, company_id)
        logger.info("Company selected: %s", company.code)
        return TenantContext.from_company(company)

    async def update(
        self,
        db: AsyncSession,
        tenant: TenantContext,
        data: CompanyUpdate,
    ) -> Company:
        """Updates the details of the selected company."""
        company = await self.get_by_id(db, tenant.company_id)

        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(company, field, value)

        await db.commit()
        await db.refresh(company)
        logger.info("Company %s updated", company.code)
        return company
