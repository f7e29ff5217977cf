"""
FastAPI router for clients
Project: Interior CRM
"""

import logging
import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from crm.core.database import get_db
from crm.core.tenant import TenantContext, get_tenant
from crm.schemas.client import ClientCreate, ClientRead, ClientUpdate
from crm.services.client_service import ClientService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/clients",
    tags=["Clients"],
)


# -------------------------------------------------------------------
# Dependency Injection
# -------------------------------------------------------------------

def get_client_service() -> ClientService:
    """
    Dependency returning a ClientService instance.

    Lets the routers receive the service without global instances,
    which keeps tests simple.
    """
    return ClientService()


# -------------------------------------------------------------------
# Endpoints
# -------------------------------------------------------------------

@router.get(
    "/",
    name="clients_list",
    summary="List clients",
    description="Clients of the selected company, newest first.",
    response_model=list[ClientRead],
    status_code=status.HTTP_200_OK,
)
async def get_clients(
    tenant: TenantContext = Depends(get_tenant),
    db: AsyncSession = Depends(get_db),
    service: ClientService = Depends(get_client_service),
) -> list[ClientRead]:
    clients = await service.get_all(db, tenant)
    return [ClientRead.model_validate(c) for c in clients]


@router.get(
    "/search",
    name="clients_search",
    summary="Search clients",
    description="Matches name, phone or project location (max 20 results).",
    response_model=list[ClientRead],
    status_code=status.HTTP_200_OK,
)
async def search_clients(
    q: str = Query(..., min_length=1, description="Search term"),
    tenant: TenantContext = Depends(get_tenant),
    db: AsyncSession = Depends(get_db),
    service: ClientService = Depends(get_client_service),
) -> list[ClientRead]:
    clients = await service.search(db, tenant, q)
    return [ClientRead.model_validate(c) for c in clients]


@router.get(
    "/{client_id}",
    name="clients_detail",
    summary="Client detail",
    response_model=ClientRead,
    status_code=status.HTTP_200_OK,
)
async def get_client(
    client_id: uuid.UUID,
    tenant: TenantContext = Depends(get_tenant),
    db: AsyncSession = Depends(get_db),
    service: ClientService = Depends(get_client_service),
) -> ClientRead:
    """
    Raises:
        NotFoundError: client missing or owned by another company
    """
    client = await service.get_by_id(db, tenant, client_id)
    return ClientRead.model_validate(client)


@router.post(
    "/",
    name="clients_create",
    summary="Create client",
    response_model=ClientRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_client(
    client_data: ClientCreate,
    tenant: TenantContext = Depends(get_tenant),
    db: AsyncSession = Depends(get_db),
    service: ClientService = Depends(get_client_service),
) -> ClientRead:
    client = await service.create(db, tenant, client_data)
    return ClientRead.model_validate(client)


@router.put(
    "/{client_id}",
    name="clients_update",
    summary="Update client",
    response_model=ClientRead,
    status_code=status.HTTP_200_OK,
)
async def update_client(
    client_id: uuid.UUID,
    client_data: ClientUpdate,
    tenant: TenantContext = Depends(get_tenant),
    db: AsyncSession = Depends(get_db),
    service: ClientService = Depends(get_client_service),
) -> ClientRead:
    client = await service.update(db, tenant, client_id, client_data)
    return ClientRead.model_validate(client)


@router.delete(
    "/{client_id}",
    name="clients_delete",
    summary="Delete client",
    description="Refused while quotations reference the client.",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_client(
    client_id: uuid.UUID,
    tenant: TenantContext = Depends(get_tenant),
    db: AsyncSession = Depends(get_db),
    service: ClientService = Depends(get_client_service),
) -> None:
    """
    Raises:
        NotFoundError: client not found
        ConflictError: client has quotations
    """
    await service.delete(db, tenant, client_id)
