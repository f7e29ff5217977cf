"""
Tests for QuotationService and the quotation lifecycle rules.
"""

import uuid
from decimal import Decimal

import pytest
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import func, select

from crm.core.config import settings
from crm.core.exceptions import BusinessValidationError, ConflictError, NotFoundError
from crm.models import DocumentSequence, Quotation
from crm.schemas.bill import BillCreate
from crm.schemas.quotation import (
    CalculationRequest,
    ColumnDefinition,
    QuotationStatus,
    QuotationUpdate,
)
from crm.schemas.receipt import ReceiptCreate
from crm.services.bill_service import BillService
from crm.services.lifecycle import resolve_status
from crm.services.quotation_service import QuotationService
from crm.services.receipt_service import ReceiptService

from conftest import scenario_payload


@pytest.fixture
def service():
    return QuotationService()


async def count_quotations(db) -> int:
    result = await db.execute(select(func.count()).select_from(Quotation))
    return result.scalar()


# ============================================================
# Create
# ============================================================


class TestCreate:

    async def test_breakdown_is_calculated_server_side(self, quotation):
        assert quotation.subtotal == Decimal("1500000")
        assert quotation.discount_amount == Decimal("150000")
        assert quotation.taxable_amount == Decimal("1350000")
        assert quotation.cgst_amount == Decimal("121500")
        assert quotation.sgst_amount == Decimal("121500")
        assert quotation.total_tax == Decimal("243000")
        assert quotation.grand_total == Decimal("1593000")

    async def test_number_and_defaults(self, quotation, tenant, today):
        assert quotation.quotation_number == f"AARTI/{today:%y%m}/0001"
        assert quotation.company_id == tenant.company_id
        assert quotation.status == QuotationStatus.DRAFT.value
        assert quotation.date == today
        assert quotation.terms == settings.default_terms
        assert quotation.terms.startswith("Work will be completed within the agreed timeline.")

    async def test_explicit_terms_are_kept(self, db, tenant, client, service):
        created = await service.create(
            db, tenant, scenario_payload(client.id, terms="50% advance, balance on handover.")
        )
        assert created.terms == "50% advance, balance on handover."

    async def test_numbers_follow_each_other(self, db, tenant, client, quotation, service, today):
        second = await service.create(db, tenant, scenario_payload(client.id))
        assert second.quotation_number == f"AARTI/{today:%y%m}/0002"

    async def test_items_drive_the_subtotal(self, db, tenant, client, item_payloads, service):
        created = await service.create(
            db, tenant, scenario_payload(client.id, items=item_payloads)
        )

        assert created.subtotal == Decimal("186000")
        assert [item.item_name for item in created.items] == ["Wardrobe", "Modular kitchen"]
        assert [item.sort_order for item in created.items] == [0, 1]
        assert created.items[0].amount == Decimal("72000")
        assert created.items[0].custom_columns == {"finish": "Laminate", "depth_mm": 600}

    async def test_column_config_is_stored(self, db, tenant, client, service):
        columns = [
            ColumnDefinition(key="item_name", label="Item"),
            ColumnDefinition(key="depth_mm", label="Depth (mm)", type="number", visible=False),
        ]
        created = await service.create(
            db, tenant, scenario_payload(client.id, column_config=columns)
        )

        detail = await service.get_detail(db, tenant, created.id)
        assert [c.key for c in detail.column_config] == ["item_name", "depth_mm"]
        assert detail.column_config[1].visible is False

    async def test_discount_above_cap_writes_nothing(self, db, tenant, client, service):
        payload = scenario_payload(client.id, discount_type="flat", discount_value=Decimal("500000"))

        with pytest.raises(BusinessValidationError) as exc_info:
            await service.create(db, tenant, payload)

        assert exc_info.value.detail == "Discount cannot exceed 30%. Current discount is 33.33%"
        assert await count_quotations(db) == 0
        counters = await db.execute(select(func.count()).select_from(DocumentSequence))
        assert counters.scalar() == 0

    async def test_client_of_another_company(self, db, other_tenant, client, service):
        with pytest.raises(NotFoundError):
            await service.create(db, other_tenant, scenario_payload(client.id))

    async def test_unknown_package(self, db, tenant, client, service):
        with pytest.raises(NotFoundError):
            await service.create(db, tenant, scenario_payload(client.id, package_id=uuid.uuid4()))

    def test_billed_status_cannot_be_requested(self, client):
        with pytest.raises(PydanticValidationError):
            scenario_payload(client.id, status="billed")


# ============================================================
# Reads
# ============================================================


class TestReads:

    async def test_list_carries_client_name(self, db, tenant, quotation, service):
        listed = await service.get_all(db, tenant)
        assert [q.quotation_number for q in listed] == [quotation.quotation_number]
        assert listed[0].client_name == "Ravi Kumar"

    async def test_recent_is_limited(self, db, tenant, client, quotation, service):
        await service.create(db, tenant, scenario_payload(client.id))
        await service.create(db, tenant, scenario_payload(client.id))

        assert len(await service.get_recent(db, tenant, limit=2)) == 2

    async def test_other_company_sees_nothing(self, db, other_tenant, quotation, service):
        assert await service.get_all(db, other_tenant) == []
        with pytest.raises(NotFoundError):
            await service.get_by_id(db, other_tenant, quotation.id)

    async def test_detail_has_client_fields(self, db, tenant, quotation, service):
        detail = await service.get_detail(db, tenant, quotation.id)
        assert detail.client_name == "Ravi Kumar"
        assert detail.project_location == "Pune"
        assert detail.receipts == []
        assert detail.bill is None

    def test_preview_rejects_discount_above_cap(self, service):
        request = CalculationRequest(
            total_sqft=Decimal("1000"),
            rate_per_sqft=Decimal("1500"),
            discount_type="percentage",
            discount_value=Decimal("35"),
        )
        with pytest.raises(BusinessValidationError):
            service.calculate_preview(request)


# ============================================================
# Update
# ============================================================


class TestUpdate:

    async def test_items_replace_and_recalculate(self, db, tenant, quotation, item_payloads, service):
        updated = await service.update(
            db, tenant, quotation.id, QuotationUpdate(items=item_payloads)
        )

        assert len(updated.items) == 2
        assert updated.subtotal == Decimal("186000")
        assert updated.discount_amount == Decimal("18600")
        assert updated.grand_total == Decimal("197532")

    async def test_stored_values_are_kept(self, db, tenant, quotation, service):
        updated = await service.update(
            db, tenant, quotation.id, QuotationUpdate(rate_per_sqft=Decimal("2000"))
        )

        assert updated.total_sqft == Decimal("1000")
        assert updated.discount_type == "percentage"
        assert updated.subtotal == Decimal("2000000")
        assert updated.grand_total == Decimal("2124000")

    async def test_explicit_null_drops_the_discount(self, db, tenant, quotation, service):
        updated = await service.update(
            db, tenant, quotation.id, QuotationUpdate(discount_type=None)
        )

        assert updated.discount_type is None
        assert updated.discount_amount == Decimal("0")
        assert updated.grand_total == Decimal("1770000")

    async def test_discount_above_cap_leaves_quotation_unchanged(self, db, tenant, quotation, service):
        with pytest.raises(BusinessValidationError):
            await service.update(
                db, tenant, quotation.id, QuotationUpdate(discount_value=Decimal("31"))
            )

        reloaded = await service.get_by_id(db, tenant, quotation.id)
        assert reloaded.discount_value == Decimal("10")
        assert reloaded.grand_total == Decimal("1593000")

    async def test_status_can_be_confirmed(self, db, tenant, quotation, service):
        updated = await service.update(
            db, tenant, quotation.id, QuotationUpdate(status="confirmed")
        )
        assert updated.status == QuotationStatus.CONFIRMED.value

    async def test_billed_status_is_kept(self, db, tenant, quotation, service):
        bill = await BillService().create(db, tenant, BillCreate(quotation_id=quotation.id))

        updated = await service.update(
            db, tenant, quotation.id,
            QuotationUpdate(status="draft", rate_per_sqft=Decimal("2000")),
        )

        assert updated.status == QuotationStatus.BILLED.value
        snapshot = await BillService().get_by_id(db, tenant, bill.id)
        assert snapshot.grand_total == Decimal("1593000")


class TestResolveStatus:

    @pytest.mark.parametrize(
        "current, requested, billed, expected",
        [
            ("draft", None, False, "draft"),
            ("draft", QuotationStatus.CONFIRMED, False, "confirmed"),
            ("confirmed", QuotationStatus.DRAFT, False, "draft"),
            ("billed", QuotationStatus.DRAFT, True, "billed"),
            ("draft", None, True, "billed"),
        ],
    )
    def test_resolve_status(self, current, requested, billed, expected):
        assert resolve_status(current, requested, billed) == expected


# ============================================================
# Delete
# ============================================================


class TestDelete:

    async def test_delete_removes_quotation(self, db, tenant, client, item_payloads, service):
        created = await service.create(db, tenant, scenario_payload(client.id, items=item_payloads))

        await service.delete(db, tenant, created.id)

        assert await count_quotations(db) == 0

    async def test_blocked_by_receipts(self, db, tenant, quotation, service):
        await ReceiptService().create(
            db, tenant,
            ReceiptCreate(quotation_id=quotation.id, amount=Decimal("1000"), payment_mode="Cash"),
        )

        with pytest.raises(ConflictError) as exc_info:
            await service.delete(db, tenant, quotation.id)
        assert exc_info.value.detail == "Cannot delete quotation with receipts"

    async def test_blocked_by_bill(self, db, tenant, quotation, service):
        await BillService().create(db, tenant, BillCreate(quotation_id=quotation.id))

        with pytest.raises(ConflictError) as exc_info:
            await service.delete(db, tenant, quotation.id)
        assert exc_info.value.detail == "Cannot delete quotation with bills"

    async def test_other_company_cannot_delete(self, db, other_tenant, quotation, service):
        with pytest.raises(NotFoundError):
            await service.delete(db, other_tenant, quotation.id)
