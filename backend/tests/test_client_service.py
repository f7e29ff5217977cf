"""
Tests for ClientService.
"""

import uuid

import pytest
from pydantic import ValidationError as PydanticValidationError

from crm.core.exceptions import ConflictError, NotFoundError
from crm.schemas.client import ClientCreate, ClientUpdate, normalize_phone
from crm.services.client_service import ClientService

from conftest import scalar_result


@pytest.fixture
def service():
    return ClientService()


# ============================================================
# Schema validation
# ============================================================


class TestClientSchema:

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("98765 43210", "9876543210"),
            ("+91-98765-43210", "+919876543210"),
            ("   ", None),
            (None, None),
        ],
    )
    def test_normalize_phone(self, raw, expected):
        assert normalize_phone(raw) == expected

    def test_invalid_phone(self):
        with pytest.raises(PydanticValidationError):
            ClientCreate(name="Anita", phone="98x76")

    def test_name_is_stripped(self):
        assert ClientCreate(name="  Anita Desai ").name == "Anita Desai"

    def test_blank_name_is_rejected(self):
        with pytest.raises(PydanticValidationError):
            ClientCreate(name="   ")

    def test_invalid_email(self):
        with pytest.raises(PydanticValidationError):
            ClientCreate(name="Anita", email="not-an-email")


# ============================================================
# Service with mocked session
# ============================================================


class TestGetByIdMocked:

    async def test_missing_client_raises(self, mock_db, tenant, service):
        mock_db.execute.return_value = scalar_result(None)

        with pytest.raises(NotFoundError):
            await service.get_by_id(mock_db, tenant, uuid.uuid4())

    async def test_found_client_is_returned(self, mock_db, tenant, service):
        stored = object()
        mock_db.execute.return_value = scalar_result(stored)

        assert await service.get_by_id(mock_db, tenant, uuid.uuid4()) is stored


# ============================================================
# Service on the database
# ============================================================


class TestCrud:

    async def test_create(self, db, tenant, service):
        created = await service.create(
            db, tenant,
            ClientCreate(name="Anita Desai", phone="98200 11111", email="anita@desaihomes.in"),
        )

        assert created.company_id == tenant.company_id
        assert created.phone == "9820011111"
        assert created.email == "anita@desaihomes.in"

    async def test_list_is_scoped_to_company(self, db, tenant, other_tenant, client, service):
        assert [c.id for c in await service.get_all(db, tenant)] == [client.id]
        assert await service.get_all(db, other_tenant) == []

    async def test_other_company_cannot_read(self, db, other_tenant, client, service):
        with pytest.raises(NotFoundError):
            await service.get_by_id(db, other_tenant, client.id)

    async def test_update(self, db, tenant, client, service):
        updated = await service.update(
            db, tenant, client.id,
            ClientUpdate(project_location="Nashik", notes="Prefers calls after 6pm"),
        )

        assert updated.name == "Ravi Kumar"
        assert updated.project_location == "Nashik"
        assert updated.notes == "Prefers calls after 6pm"

    async def test_delete(self, db, tenant, client, service):
        await service.delete(db, tenant, client.id)

        with pytest.raises(NotFoundError):
            await service.get_by_id(db, tenant, client.id)

    async def test_delete_blocked_by_quotations(self, db, tenant, client, quotation, service):
        with pytest.raises(ConflictError) as exc_info:
            await service.delete(db, tenant, client.id)
        assert exc_info.value.detail == "Cannot delete client with existing quotations"


class TestSearch:

    @pytest.fixture
    async def clients(self, db, tenant, client, service):
        await service.create(db, tenant, ClientCreate(name="Anita Desai", phone="9820011111", project_location="Mumbai"))
        await service.create(db, tenant, ClientCreate(name="Suresh Patil", project_location="Pune Camp"))

    @pytest.mark.parametrize(
        "query, expected",
        [
            ("anita", ["Anita Desai"]),
            ("98200", ["Anita Desai"]),
            ("pune", ["Ravi Kumar", "Suresh Patil"]),
            ("nobody", []),
        ],
    )
    async def test_search(self, db, tenant, clients, service, query, expected):
        found = await service.search(db, tenant, query)
        assert [c.name for c in found] == expected

    async def test_search_is_scoped_to_company(self, db, other_tenant, clients, service):
        assert await service.search(db, other_tenant, "Ravi") == []
