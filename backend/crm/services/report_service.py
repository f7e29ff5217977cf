"""
Service layer for reports
Project: Interior CRM
"""

import datetime
import logging
from decimal import Decimal
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from crm.core.exceptions import BusinessValidationError
from crm.core.tenant import TenantContext
from crm.models import Bill, Client, Quotation, Receipt
from crm.schemas.report import DashboardSummary

logger = logging.getLogger(__name__)


def _in_range(column, date_from: Optional[datetime.date], date_to: Optional[datetime.date]) -> list:
    conditions = []
    if date_from is not None:
        conditions.append(column >= date_from)
    if date_to is not None:
        conditions.append(column <= date_to)
    return conditions


async def _scalar_decimal(db: AsyncSession, stmt) -> Decimal:
    result = await db.execute(stmt)
    return Decimal(str(result.scalar_one() or 0))


class ReportService:

    async def get_dashboard(
        self,
        db: AsyncSession,
        tenant: TenantContext,
        date_from: Optional[datetime.date] = None,
        date_to: Optional[datetime.date] = None,
    ) -> DashboardSummary:
        """
        Totals of the company.

        Quotations, bills and receipts are filtered on their document
        date; the client count is always the whole company.

        Raises:
            BusinessValidationError: date_from after date_to
        """
        if date_from and date_to and date_from > date_to:
            raise BusinessValidationError("date_from must not be after date_to")

        company_id = tenant.company_id

        client_count = (
            await db.execute(
                select(func.count()).select_from(Client).where(Client.company_id == company_id)
            )
        ).scalar() or 0

        quotation_filter = [Quotation.company_id == company_id, *_in_range(Quotation.date, date_from, date_to)]
        bill_filter = [Bill.company_id == company_id, *_in_range(Bill.date, date_from, date_to)]
        receipt_filter = [Receipt.company_id == company_id, *_in_range(Receipt.date, date_from, date_to)]

        quotation_count = (
            await db.execute(select(func.count()).select_from(Quotation).where(*quotation_filter))
        ).scalar() or 0
        bill_count = (
            await db.execute(select(func.count()).select_from(Bill).where(*bill_filter))
        ).scalar() or 0

        total_quoted = await _scalar_decimal(
            db, select(func.sum(Quotation.grand_total)).where(*quotation_filter)
        )
        total_billed = await _scalar_decimal(
            db, select(func.sum(Bill.grand_total)).where(*bill_filter)
        )
        total_received = await _scalar_decimal(
            db, select(func.sum(Receipt.amount)).where(*receipt_filter)
        )
        total_outstanding = await _scalar_decimal(
            db,
            select(func.sum(Bill.balance_amount)).where(*bill_filter, Bill.balance_amount > 0),
        )

        logger.info(
            "Dashboard for %s: %s quotations, %s bills",
            tenant.company_code, quotation_count, bill_count,
        )

        return DashboardSummary(
            date_from=date_from,
            date_to=date_to,
            client_count=client_count,
            quotation_count=quotation_count,
            bill_count=bill_count,
            total_quoted=total_quoted,
            total_billed=total_billed,
            total_received=total_received,
            total_outstanding=total_outstanding,
        )
