"""
Client profile endpoints.

    - ``POST   /api/clients/``      create the caller's client profile
    - ``GET    /api/clients/me``    the caller's client profile
    - ``GET    /api/clients/open``  open project requests (for companies)
    - ``GET    /api/clients/{id}``  one client
    - ``PUT    /api/clients/{id}``  partial update (owner only)
    - ``DELETE /api/clients/{id}``  delete (owner only)
"""

from fastapi import APIRouter, Depends

from connectq.api.dependencies import (
    forbidden,
    get_clients,
    get_current_user,
    get_current_user_id,
)
from connectq.api.schemas import (
    ClientCreateRequest,
    ClientSchema,
    ClientUpdateRequest,
    DeleteResponse,
    ErrorResponse,
)
from connectq.core import Client, NotFoundError, User, UserRole
from connectq.database import ClientRepository

router = APIRouter()


def _owned_client(client_id: str, user_id: str, clients: ClientRepository) -> Client:
    client = clients.get(client_id)
    if client is None:
        raise NotFoundError("client", client_id)
    if client.user_id != user_id:
        raise forbidden("You can only modify your own client profile")
    return client


@router.post(
    "/",
    response_model=ClientSchema,
    status_code=201,
    responses={403: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    summary="Create client profile",
)
async def create_client(
    body: ClientCreateRequest,
    user: User = Depends(get_current_user),
    clients: ClientRepository = Depends(get_clients),
) -> ClientSchema:
    """Create the caller's client profile. Only client-role users may."""
    if user.role is not UserRole.CLIENT:
        raise forbidden("Only client accounts can create a client profile")

    client = clients.create(user.id, **body.model_dump(exclude_none=True))
    return ClientSchema.from_client(client)


@router.get(
    "/me",
    response_model=ClientSchema,
    responses={404: {"model": ErrorResponse}},
    summary="Current user's client profile",
)
async def get_my_client(
    user_id: str = Depends(get_current_user_id),
    clients: ClientRepository = Depends(get_clients),
) -> ClientSchema:
    client = clients.get_by_user(user_id)
    if client is None:
        raise NotFoundError("client profile for user", user_id)
    return ClientSchema.from_client(client)


@router.get("/open", response_model=list[ClientSchema], summary="Open project requests")
async def list_open_clients(
    clients: ClientRepository = Depends(get_clients),
) -> list[ClientSchema]:
    """Clients still looking for a company, newest first."""
    return [ClientSchema.from_client(c) for c in clients.list_open()]


@router.get(
    "/{client_id}",
    response_model=ClientSchema,
    responses={404: {"model": ErrorResponse}},
    summary="Get a client",
)
async def get_client(
    client_id: str,
    clients: ClientRepository = Depends(get_clients),
) -> ClientSchema:
    client = clients.get(client_id)
    if client is None:
        raise NotFoundError("client", client_id)
    return ClientSchema.from_client(client)


@router.put(
    "/{client_id}",
    response_model=ClientSchema,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Update a client",
)
async def update_client(
    client_id: str,
    body: ClientUpdateRequest,
    user_id: str = Depends(get_current_user_id),
    clients: ClientRepository = Depends(get_clients),
) -> ClientSchema:
    _owned_client(client_id, user_id, clients)

    updated = clients.update(client_id, **body.changes())
    if updated is None:
        raise NotFoundError("client", client_id)
    return ClientSchema.from_client(updated)


@router.delete(
    "/{client_id}",
    response_model=DeleteResponse,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Delete a client",
)
async def delete_client(
    client_id: str,
    user_id: str = Depends(get_current_user_id),
    clients: ClientRepository = Depends(get_clients),
) -> DeleteResponse:
    client = _owned_client(client_id, user_id, clients)
    if not clients.delete(client_id):
        raise NotFoundError("client", client_id)
    return DeleteResponse(success=True, message=f"Client {client.name} deleted")
