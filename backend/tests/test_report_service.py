"""
Tests for the dashboard report.
"""

import datetime
from decimal import Decimal

import pytest

from crm.core.exceptions import BusinessValidationError
from crm.schemas.bill import BillCreate
from crm.schemas.receipt import ReceiptCreate
from crm.services.bill_service import BillService
from crm.services.quotation_service import QuotationService
from crm.services.receipt_service import ReceiptService
from crm.services.report_service import ReportService

from conftest import scenario_payload


@pytest.fixture
def service():
    return ReportService()


class TestDashboard:

    async def test_empty_company(self, db, tenant, service):
        summary = await service.get_dashboard(db, tenant)

        assert summary.client_count == 0
        assert summary.quotation_count == 0
        assert summary.total_quoted == Decimal("0")
        assert summary.total_outstanding == Decimal("0")

    async def test_totals(self, db, tenant, client, quotation, service):
        await QuotationService().create(
            db, tenant, scenario_payload(client.id, discount_type=None, discount_value=Decimal("0"))
        )
        await BillService().create(db, tenant, BillCreate(quotation_id=quotation.id))
        await ReceiptService().create(
            db, tenant,
            ReceiptCreate(quotation_id=quotation.id, amount=Decimal("500000"), payment_mode="Bank"),
        )

        summary = await service.get_dashboard(db, tenant)

        assert summary.client_count == 1
        assert summary.quotation_count == 2
        assert summary.bill_count == 1
        assert summary.total_quoted == Decimal("3363000")
        assert summary.total_billed == Decimal("1593000")
        assert summary.total_received == Decimal("500000")
        assert summary.total_outstanding == Decimal("1093000")

    async def test_date_range_filters_documents(self, db, tenant, client, service):
        await QuotationService().create(
            db, tenant, scenario_payload(client.id, date=datetime.date(2026, 1, 15))
        )
        await QuotationService().create(
            db, tenant, scenario_payload(client.id, date=datetime.date(2026, 3, 15))
        )

        summary = await service.get_dashboard(
            db, tenant,
            date_from=datetime.date(2026, 3, 1),
            date_to=datetime.date(2026, 3, 31),
        )

        assert summary.quotation_count == 1
        assert summary.total_quoted == Decimal("1593000")
        assert summary.client_count == 1

    async def test_other_company_is_excluded(self, db, other_tenant, quotation, service):
        summary = await service.get_dashboard(db, other_tenant)
        assert summary.quotation_count == 0
        assert summary.client_count == 0

    async def test_inverted_range(self, db, tenant, service):
        with pytest.raises(BusinessValidationError):
            await service.get_dashboard(
                db, tenant,
                date_from=datetime.date(2026, 5, 1),
                date_to=datetime.date(2026, 4, 1),
            )
