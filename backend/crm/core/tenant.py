"""
Tenant context dependency
Project: Interior CRM

Every company-scoped operation receives an explicit TenantContext built
from the X-Company-Id request header, instead of reading ambient
session state.
"""

import uuid
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from crm.core.database import get_db
from crm.core.exceptions import PreconditionError
from crm.models import Company

COMPANY_HEADER = "X-Company-Id"


@dataclass(frozen=True)
class TenantContext:
    """Company the current request acts for."""

    company_id: uuid.UUID
    company_code: str
    company_name: str

    @classmethod
    def from_company(cls, company: Company) -> "TenantContext":
        return cls(
            company_id=company.id,
            company_code=company.code,
            company_name=company.name,
        )


async def get_tenant(
    x_company_id: Optional[str] = Header(None, alias=COMPANY_HEADER),
    db: AsyncSession = Depends(get_db),
) -> TenantContext:
    """
    Dependency resolving the selected company.

    Raises:
        PreconditionError: header missing, malformed or unknown company
    """
    if not x_company_id:
        raise PreconditionError()

    try:
        company_id = uuid.UUID(x_company_id)
    except ValueError:
        raise PreconditionError()

    result = await db.execute(select(Company).where(Company.id == company_id))
    company = result.scalar_one_or_none()
    if company is None:
        raise PreconditionError()

    return TenantContext.from_company(company)
