"""
Tests for ReceiptService.
"""

import datetime
from decimal import Decimal

import pytest
from pydantic import ValidationError as PydanticValidationError

from crm.core.exceptions import NotFoundError
from crm.schemas.receipt import ReceiptCreate, ReceiptUpdate
from crm.services.receipt_service import ReceiptService


@pytest.fixture
def service():
    return ReceiptService()


def payload(quotation_id, amount, mode="Bank", **extra) -> ReceiptCreate:
    return ReceiptCreate(quotation_id=quotation_id, amount=Decimal(amount), payment_mode=mode, **extra)


class TestCreate:

    async def test_number_and_fields(self, db, tenant, quotation, service, today):
        receipt = await service.create(
            db, tenant,
            payload(quotation.id, "250000", "UPI", transaction_reference="UPI-778812"),
        )

        assert receipt.receipt_number == f"RCP/AARTI/{today:%y%m}/0001"
        assert receipt.amount == Decimal("250000")
        assert receipt.payment_mode == "UPI"
        assert receipt.transaction_reference == "UPI-778812"
        assert receipt.date == today

    async def test_receipt_without_bill_is_accepted(self, db, tenant, quotation, service):
        receipt = await service.create(db, tenant, payload(quotation.id, "1000"))
        assert receipt.quotation_id == quotation.id

    async def test_quotation_of_another_company(self, db, other_tenant, quotation, service):
        with pytest.raises(NotFoundError):
            await service.create(db, other_tenant, payload(quotation.id, "1000"))

    @pytest.mark.parametrize("amount", ["0", "-10"])
    def test_amount_must_be_positive(self, quotation, amount):
        with pytest.raises(PydanticValidationError):
            payload(quotation.id, amount)

    def test_unknown_payment_mode(self, quotation):
        with pytest.raises(PydanticValidationError):
            payload(quotation.id, "1000", "Cheque")


class TestQuotationReceipts:

    async def test_totals_and_balance(self, db, tenant, quotation, service):
        await service.create(db, tenant, payload(quotation.id, "500000", date=datetime.date(2026, 1, 10)))
        await service.create(db, tenant, payload(quotation.id, "300000", date=datetime.date(2026, 2, 10)))

        summary = await service.get_by_quotation(db, tenant, quotation.id)

        assert [r.amount for r in summary.receipts] == [Decimal("300000"), Decimal("500000")]
        assert summary.total_received == Decimal("800000")
        assert summary.balance == Decimal("793000")

    async def test_empty(self, db, tenant, quotation, service):
        summary = await service.get_by_quotation(db, tenant, quotation.id)
        assert summary.receipts == []
        assert summary.total_received == Decimal("0")
        assert summary.balance == Decimal("1593000")

    async def test_quotation_of_another_company(self, db, other_tenant, quotation, service):
        with pytest.raises(NotFoundError):
            await service.get_by_quotation(db, other_tenant, quotation.id)


class TestDetail:

    async def test_running_totals(self, db, tenant, quotation, service):
        first = await service.create(db, tenant, payload(quotation.id, "500000"))
        await service.create(db, tenant, payload(quotation.id, "93000"))

        detail = await service.get_detail(db, tenant, first.id)

        assert detail.quotation_number == quotation.quotation_number
        assert detail.quotation_total == Decimal("1593000")
        assert detail.client_name == "Ravi Kumar"
        assert detail.total_received == Decimal("593000")
        assert detail.balance == Decimal("1000000")

    async def test_list_and_recent(self, db, tenant, other_tenant, quotation, service):
        for amount in ("100", "200", "300"):
            await service.create(db, tenant, payload(quotation.id, amount))

        assert len(await service.get_all(db, tenant)) == 3
        assert len(await service.get_recent(db, tenant, limit=2)) == 2
        assert await service.get_all(db, other_tenant) == []


class TestUpdateDelete:

    async def test_update_fields(self, db, tenant, quotation, service):
        receipt = await service.create(db, tenant, payload(quotation.id, "1000"))

        updated = await service.update(
            db, tenant, receipt.id,
            ReceiptUpdate(amount=Decimal("1500"), payment_mode="Cash", notes="Advance"),
        )

        assert updated.amount == Decimal("1500")
        assert updated.payment_mode == "Cash"
        assert updated.notes == "Advance"
        assert updated.receipt_number == receipt.receipt_number

    async def test_delete(self, db, tenant, quotation, service):
        receipt = await service.create(db, tenant, payload(quotation.id, "1000"))

        await service.delete(db, tenant, receipt.id)

        with pytest.raises(NotFoundError):
            await service.get_by_id(db, tenant, receipt.id)
        summary = await service.get_by_quotation(db, tenant, quotation.id)
        assert summary.total_received == Decimal("0")
