"""
Company profile endpoints.

    - ``POST   /api/companies/``      create the caller's company profile
    - ``GET    /api/companies/``      list all companies
    - ``GET    /api/companies/me``    the caller's company profile
    - ``GET    /api/companies/{id}``  one company
    - ``PUT    /api/companies/{id}``  partial update (owner only)
    - ``DELETE /api/companies/{id}``  delete (owner only)

Every committed write publishes a ``CompanyEvent`` to the background
embedding worker. Responses never wait for the re-embed to finish.
"""

from fastapi import APIRouter, Depends

from connectq.api.dependencies import (
    forbidden,
    get_companies,
    get_current_user,
    get_current_user_id,
    get_worker,
)
from connectq.api.schemas import (
    CompanyCreateRequest,
    CompanySchema,
    CompanyUpdateRequest,
    DeleteResponse,
    ErrorResponse,
)
from connectq.api.tasks import CompanyEvent, CompanyEventType, EmbeddingWorker
from connectq.core import Company, NotFoundError, User, UserRole, get_logger
from connectq.database import CompanyRepository

logger = get_logger(__name__)

router = APIRouter()


def _owned_company(
    company_id: str,
    user_id: str,
    companies: CompanyRepository,
) -> Company:
    """Return the company if the caller owns it; 404 or 403 otherwise."""
    company = companies.get(company_id)
    if company is None:
        raise NotFoundError("company", company_id)
    if company.user_id != user_id:
        raise forbidden("You can only modify your own company profile")
    return company


def _publish(worker: EmbeddingWorker, event_type: CompanyEventType, company_id: str) -> None:
    worker.publish(CompanyEvent(type=event_type, company_id=company_id))
    logger.debug("Published %s for company %s", event_type.value, company_id)


@router.post(
    "/",
    response_model=CompanySchema,
    status_code=201,
    responses={403: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    summary="Create company profile",
)
async def create_company(
    body: CompanyCreateRequest,
    user: User = Depends(get_current_user),
    companies: CompanyRepository = Depends(get_companies),
    worker: EmbeddingWorker = Depends(get_worker),
) -> CompanySchema:
    """
    Create the caller's company profile and queue its embedding.

    Only company-role users may create one, and only once (409 on a
    second attempt).
    """
    if user.role is not UserRole.COMPANY:
        raise forbidden("Only company accounts can create a company profile")

    company = companies.create(user.id, **body.model_dump(exclude_none=True))
    _publish(worker, CompanyEventType.UPSERTED, company.id)
    return CompanySchema.from_company(company)


@router.get("/", response_model=list[CompanySchema], summary="List companies")
async def list_companies(
    companies: CompanyRepository = Depends(get_companies),
) -> list[CompanySchema]:
    return [CompanySchema.from_company(c) for c in companies.list_all()]


@router.get(
    "/me",
    response_model=CompanySchema,
    responses={404: {"model": ErrorResponse}},
    summary="Current user's company",
)
async def get_my_company(
    user_id: str = Depends(get_current_user_id),
    companies: CompanyRepository = Depends(get_companies),
) -> CompanySchema:
    company = companies.get_by_user(user_id)
    if company is None:
        raise NotFoundError("company profile for user", user_id)
    return CompanySchema.from_company(company)


@router.get(
    "/{company_id}",
    response_model=CompanySchema,
    responses={404: {"model": ErrorResponse}},
    summary="Get a company",
)
async def get_company(
    company_id: str,
    companies: CompanyRepository = Depends(get_companies),
) -> CompanySchema:
    company = companies.get(company_id)
    if company is None:
        raise NotFoundError("company", company_id)
    return CompanySchema.from_company(company)


@router.put(
    "/{company_id}",
    response_model=CompanySchema,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Update a company",
)
async def update_company(
    company_id: str,
    body: CompanyUpdateRequest,
    user_id: str = Depends(get_current_user_id),
    companies: CompanyRepository = Depends(get_companies),
    worker: EmbeddingWorker = Depends(get_worker),
) -> CompanySchema:
    """
    Apply a partial update and queue a re-embed.

    Only fields present in the body change; omitted fields keep their
    current values.
    """
    _owned_company(company_id, user_id, companies)

    updated = companies.update(company_id, **body.changes())
    if updated is None:
        raise NotFoundError("company", company_id)

    _publish(worker, CompanyEventType.UPSERTED, company_id)
    return CompanySchema.from_company(updated)


@router.delete(
    "/{company_id}",
    response_model=DeleteResponse,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Delete a company",
)
async def delete_company(
    company_id: str,
    user_id: str = Depends(get_current_user_id),
    companies: CompanyRepository = Depends(get_companies),
    worker: EmbeddingWorker = Depends(get_worker),
) -> DeleteResponse:
    """Delete the company and queue removal of its vector."""
    company = _owned_company(company_id, user_id, companies)

    if not companies.delete(company_id):
        raise NotFoundError("company", company_id)

    _publish(worker, CompanyEventType.DELETED, company_id)
    return DeleteResponse(success=True, message=f"Company {company.name} deleted")
