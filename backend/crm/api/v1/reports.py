"""
FastAPI router for reports
Project: Interior CRM
"""

import datetime
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from crm.core.database import get_db
from crm.core.tenant import TenantContext, get_tenant
from crm.schemas.report import DashboardSummary
from crm.services.report_service import ReportService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/reports",
    tags=["Reports"],
)


def get_report_service() -> ReportService:
    return ReportService()


@router.get(
    "/dashboard",
    name="reports_dashboard",
    summary="Dashboard totals",
    description="Counts and totals of the selected company, optionally in a date range.",
    response_model=DashboardSummary,
    status_code=status.HTTP_200_OK,
)
async def get_dashboard(
    date_from: Optional[datetime.date] = Query(None, description="First document date"),
    date_to: Optional[datetime.date] = Query(None, description="Last document date"),
    tenant: TenantContext = Depends(get_tenant),
    db: AsyncSession = Depends(get_db),
    service: ReportService = Depends(get_report_service),
) -> DashboardSummary:
    return await service.get_dashboard(db, tenant, date_from=date_from, date_to=date_to)
