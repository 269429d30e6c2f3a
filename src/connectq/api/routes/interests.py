"""
Interest tracking endpoints.

A company expresses interest in a client's project request; the client
sees it as a notification and may accept or reject it.

    - ``POST  /api/interests/``                    express interest (company side)
    - ``GET   /api/interests/company``             interests sent by my company
    - ``GET   /api/interests/client``              notifications for my client profile
    - ``GET   /api/interests/client/unread-count`` unread notification count
    - ``PATCH /api/interests/{id}/read``           mark a notification read
    - ``PATCH /api/interests/{id}/status``         accept or reject (client owner)
"""

from fastapi import APIRouter, Depends

from connectq.api.dependencies import (
    forbidden,
    get_clients,
    get_companies,
    get_current_user_id,
    get_interests,
)
from connectq.api.schemas import (
    ErrorResponse,
    InterestCreateRequest,
    InterestSchema,
    InterestStatusRequest,
    UnreadCountResponse,
)
from connectq.core import Client, Company, Interest, NotFoundError, get_logger
from connectq.database import ClientRepository, CompanyRepository, InterestRepository

logger = get_logger(__name__)

router = APIRouter()


def _my_company(user_id: str, companies: CompanyRepository) -> Company:
    company = companies.get_by_user(user_id)
    if company is None:
        raise NotFoundError("company profile for user", user_id)
    return company


def _my_client(user_id: str, clients: ClientRepository) -> Client:
    client = clients.get_by_user(user_id)
    if client is None:
        raise NotFoundError("client profile for user", user_id)
    return client


def _interest_for_client_owner(
    interest_id: str,
    user_id: str,
    interests: InterestRepository,
    clients: ClientRepository,
) -> Interest:
    """Return the interest if the caller owns its client; 404 or 403 otherwise."""
    interest = interests.get(interest_id)
    if interest is None:
        raise NotFoundError("interest", interest_id)
    if not clients.is_owner(interest.client_id, user_id):
        raise forbidden("Only the client who received this interest can change it")
    return interest


@router.post(
    "/",
    response_model=InterestSchema,
    status_code=201,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    summary="Express interest in a client",
)
async def express_interest(
    body: InterestCreateRequest,
    user_id: str = Depends(get_current_user_id),
    companies: CompanyRepository = Depends(get_companies),
    clients: ClientRepository = Depends(get_clients),
    interests: InterestRepository = Depends(get_interests),
) -> InterestSchema:
    """
    Record the caller's company interest in a client request.

    Returns 404 if the caller has no company profile or the client does
    not exist, and 409 if interest was already expressed.
    """
    company = _my_company(user_id, companies)
    if clients.get(body.client_id) is None:
        raise NotFoundError("client", body.client_id)

    interest = interests.create(body.client_id, company.id, message=body.message)
    return InterestSchema.from_interest(interest)


@router.get(
    "/company",
    response_model=list[InterestSchema],
    responses={404: {"model": ErrorResponse}},
    summary="Interests sent by my company",
)
async def list_company_interests(
    user_id: str = Depends(get_current_user_id),
    companies: CompanyRepository = Depends(get_companies),
    interests: InterestRepository = Depends(get_interests),
) -> list[InterestSchema]:
    company = _my_company(user_id, companies)
    return [InterestSchema.from_interest(i) for i in interests.list_for_company(company.id)]


@router.get(
    "/client",
    response_model=list[InterestSchema],
    responses={404: {"model": ErrorResponse}},
    summary="Notifications for my client profile",
)
async def list_client_interests(
    user_id: str = Depends(get_current_user_id),
    clients: ClientRepository = Depends(get_clients),
    interests: InterestRepository = Depends(get_interests),
) -> list[InterestSchema]:
    client = _my_client(user_id, clients)
    return [InterestSchema.from_interest(i) for i in interests.list_for_client(client.id)]


@router.get(
    "/client/unread-count",
    response_model=UnreadCountResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Unread notification count",
)
async def unread_count(
    user_id: str = Depends(get_current_user_id),
    clients: ClientRepository = Depends(get_clients),
    interests: InterestRepository = Depends(get_interests),
) -> UnreadCountResponse:
    client = _my_client(user_id, clients)
    return UnreadCountResponse(count=interests.unread_count(client.id))


@router.patch(
    "/{interest_id}/read",
    response_model=InterestSchema,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Mark a notification read",
)
async def mark_read(
    interest_id: str,
    user_id: str = Depends(get_current_user_id),
    clients: ClientRepository = Depends(get_clients),
    interests: InterestRepository = Depends(get_interests),
) -> InterestSchema:
    _interest_for_client_owner(interest_id, user_id, interests, clients)
    updated = interests.mark_read(interest_id)
    if updated is None:
        raise NotFoundError("interest", interest_id)
    return InterestSchema.from_interest(updated)


@router.patch(
    "/{interest_id}/status",
    response_model=InterestSchema,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Accept or reject an interest",
)
async def update_status(
    interest_id: str,
    body: InterestStatusRequest,
    user_id: str = Depends(get_current_user_id),
    clients: ClientRepository = Depends(get_clients),
    interests: InterestRepository = Depends(get_interests),
) -> InterestSchema:
    _interest_for_client_owner(interest_id, user_id, interests, clients)
    updated = interests.update_status(interest_id, body.status)
    if updated is None:
        raise NotFoundError("interest", interest_id)

    logger.info("Interest %s marked %s", interest_id[:8], body.status.value)
    return InterestSchema.from_interest(updated)
