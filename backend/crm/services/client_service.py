"""
Service layer for clients
Project: Interior CRM

Every query is scoped to the company of the tenant context: a client of
another company behaves exactly like a missing one.
"""

import logging
import uuid

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from crm.core.exceptions import ConflictError, NotFoundError
from crm.core.tenant import TenantContext
from crm.models import Client
from crm.schemas.client import ClientCreate, ClientUpdate
from crm.services.lifecycle import ensure_client_deletable

logger = logging.getLogger(__name__)

SEARCH_LIMIT = 20


class ClientService:
    """
    CRUD operations on the clients of a company.

    Usage with Dependency Injection:
        from crm.services.client_service import ClientService

        @router.get("/clients")
        async def get_clients(service: ClientService = Depends(get_client_service)):
            return await service.get_all(db, tenant)
    """

    async def get_all(self, db: AsyncSession, tenant: TenantContext) -> list[Client]:
        """Clients of the company, newest first."""
        result = await db.execute(
            select(Client)
            .where(Client.company_id == tenant.company_id)
            .order_by(Client.created_at.desc())
        )
        return list(result.scalars().all())

    async def search(self, db: AsyncSession, tenant: TenantContext, query: str) -> list[Client]:
        """
        Clients whose name, phone or project location contains the term.

        Args:
            db: Database session
            tenant: Selected company
            query: Search term

        Returns:
            At most 20 clients, by name
        """
        term = f"%{query.strip()}%"
        result = await db.execute(
            select(Client)
            .where(
                Client.company_id == tenant.company_id,
                or_(
                    Client.name.ilike(term),
                    Client.phone.ilike(term),
                    Client.project_location.ilike(term),
                ),
            )
            .order_by(Client.name.asc())
            .limit(SEARCH_LIMIT)
        )
        return list(result.scalars().all())

    async def get_by_id(
        self,
        db: AsyncSession,
        tenant: TenantContext,
        client_id: uuid.UUID,
    ) -> Client:
        """
        Raises:
            NotFoundError: client missing or owned by another company
        """
        result = await db.execute(
            select(Client).where(
                Client.id == client_id,
                Client.company_id == tenant.company_id,
            )
        )
        client = result.scalar_one_or_none()
        if not client:
            raise NotFoundError(f"Client {client_id} not found")
        return client

    async def create(
        self,
        db: AsyncSession,
        tenant: TenantContext,
        client_data: ClientCreate,
    ) -> Client:
        client = Client(company_id=tenant.company_id, **client_data.model_dump())
        db.add(client)

        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            logger.error("Integrity error creating client: %s", e)
            raise ConflictError("Error while creating the client")

        await db.refresh(client)
        logger.info("Created client %s (%s)", client.id, client.name)
        return client

    async def update(
        self,
        db: AsyncSession,
        tenant: TenantContext,
        client_id: uuid.UUID,
        client_data: ClientUpdate,
    ) -> Client:
        client = await self.get_by_id(db, tenant, client_id)

        for field, value in client_data.model_dump(exclude_unset=True).items():
            if field == "name" and value is None:
                continue
            setattr(client, field, value)

        await db.commit()
        await db.refresh(client)
        logger.info("Updated client %s", client.id)
        return client

    async def delete(
        self,
        db: AsyncSession,
        tenant: TenantContext,
        client_id: uuid.UUID,
    ) -> None:
        """
        Raises:
            NotFoundError: unknown client
            ConflictError: quotations still reference the client
        """
        client = await self.get_by_id(db, tenant, client_id)
        await ensure_client_deletable(db, client.id)

        await db.delete(client)
        await db.commit()
        logger.info("Deleted client %s", client_id)
