"""
Tests for PackageService.
"""

from decimal import Decimal

import pytest

from crm.core.exceptions import NotFoundError
from crm.schemas.package import PackageCreate, PackageItemCreate, PackageTier, PackageUpdate
from crm.services.package_service import PackageService


@pytest.fixture
def service():
    return PackageService()


def package_payload(bhk: str, tier: str, rate: str, **extra) -> PackageCreate:
    return PackageCreate(
        name=f"{bhk} {tier} Package",
        bhk_type=bhk,
        tier=tier,
        base_rate_sqft=Decimal(rate),
        **extra,
    )


class TestPackages:

    async def test_create_with_items(self, db, tenant, service):
        created = await service.create(
            db, tenant,
            package_payload(
                "2 BHK", "Gold", "1500",
                items=[
                    PackageItemCreate(item_name="False ceiling", sq_foot=Decimal("450"), rate=Decimal("95"), quantity=Decimal("450")),
                    PackageItemCreate(item_name="Wardrobe", room_type="Bedroom", amount=Decimal("60000")),
                ],
            ),
        )

        assert created.tier == "Gold"
        assert [i.item_name for i in created.items] == ["False ceiling", "Wardrobe"]
        assert created.items[0].amount == Decimal("42750")
        assert created.items[1].amount == Decimal("60000")

    async def test_list_is_ordered_by_tier_then_bhk(self, db, tenant, service):
        for bhk, tier, rate in [
            ("2 BHK", "Platinum", "2000"),
            ("1 BHK", "Gold", "1500"),
            ("2 BHK", "Silver", "1200"),
            ("1 BHK", "Silver", "1200"),
        ]:
            await service.create(db, tenant, package_payload(bhk, tier, rate))

        listed = await service.get_all(db, tenant)

        assert [(p.tier, p.bhk_type) for p in listed] == [
            ("Silver", "1 BHK"),
            ("Silver", "2 BHK"),
            ("Gold", "1 BHK"),
            ("Platinum", "2 BHK"),
        ]

    async def test_by_tier(self, db, tenant, service):
        await service.create(db, tenant, package_payload("1 BHK", "Gold", "1500"))
        await service.create(db, tenant, package_payload("1 BHK", "Silver", "1200"))

        gold = await service.get_by_tier(db, tenant, PackageTier.GOLD)

        assert [p.tier for p in gold] == ["Gold"]

    async def test_update_replaces_items(self, db, tenant, service):
        created = await service.create(
            db, tenant,
            package_payload("3 BHK", "Silver", "1200", items=[PackageItemCreate(item_name="Old row")]),
        )

        updated = await service.update(
            db, tenant, created.id,
            PackageUpdate(base_rate_sqft=Decimal("1250"), items=[PackageItemCreate(item_name="New row")]),
        )

        assert updated.base_rate_sqft == Decimal("1250")
        assert [i.item_name for i in updated.items] == ["New row"]

    async def test_delete_deactivates(self, db, tenant, service):
        created = await service.create(db, tenant, package_payload("4 BHK", "Platinum", "2000"))

        await service.delete(db, tenant, created.id)

        assert await service.get_all(db, tenant) == []
        with pytest.raises(NotFoundError):
            await service.get_by_id(db, tenant, created.id)
        kept = await service.get_by_id(db, tenant, created.id, include_inactive=True)
        assert kept.is_active is False

    async def test_other_company_cannot_read(self, db, tenant, other_tenant, service):
        created = await service.create(db, tenant, package_payload("1 BHK", "Gold", "1500"))

        assert await service.get_all(db, other_tenant) == []
        with pytest.raises(NotFoundError):
            await service.get_by_id(db, other_tenant, created.id)
