"""
FastAPI dependency providers for ConnectQ.

All dependencies read pre-initialised singletons from ``request.app.state``
(set during the lifespan startup in ``app.py``), so route handlers share
one set of repositories, one vector index client and one embedding worker
across the process.

The current user is taken from the ``X-User-Id`` header. Session handling
sits in front of this service and is not part of it.

Usage in route modules::

    from fastapi import Depends
    from connectq.api.dependencies import get_companies

    @router.get("/")
    async def list_companies(
        companies: CompanyRepository = Depends(get_companies),
    ):
        return companies.list_all()
"""

from typing import Optional

from fastapi import Depends, Header, HTTPException, Request

from connectq.api.tasks import EmbeddingWorker
from connectq.core import User
from connectq.database import (
    ClientRepository,
    CompanyRepository,
    InterestRepository,
    UserRepository,
)
from connectq.search import SearchOrchestrator


def get_users(request: Request) -> UserRepository:
    """Provide the UserRepository singleton."""
    users: UserRepository = request.app.state.users
    return users


def get_companies(request: Request) -> CompanyRepository:
    """Provide the CompanyRepository singleton."""
    companies: CompanyRepository = request.app.state.companies
    return companies


def get_clients(request: Request) -> ClientRepository:
    """Provide the ClientRepository singleton."""
    clients: ClientRepository = request.app.state.clients
    return clients


def get_interests(request: Request) -> InterestRepository:
    """Provide the InterestRepository singleton."""
    interests: InterestRepository = request.app.state.interests
    return interests


def get_orchestrator(request: Request) -> SearchOrchestrator:
    """Provide the SearchOrchestrator singleton."""
    orchestrator: SearchOrchestrator = request.app.state.orchestrator
    return orchestrator


def get_worker(request: Request) -> EmbeddingWorker:
    """Provide the background EmbeddingWorker singleton."""
    worker: EmbeddingWorker = request.app.state.worker
    return worker


# ---------------------------------------------------------------------------
# Current user
# ---------------------------------------------------------------------------


def get_current_user_id(
    x_user_id: Optional[str] = Header(None, alias="X-User-Id"),
) -> str:
    """Return the caller's user id or reject the request with 401."""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(
            status_code=401,
            detail={
                "error": "unauthorized",
                "message": "Missing X-User-Id header",
                "hint": "Sign in and retry the request.",
            },
        )
    return x_user_id.strip()


def get_current_user(
    user_id: str = Depends(get_current_user_id),
    users: UserRepository = Depends(get_users),
) -> User:
    """Load the caller's account; unknown ids are rejected with 401."""
    user = users.get(user_id)
    if user is None:
        raise HTTPException(
            status_code=401,
            detail={
                "error": "unauthorized",
                "message": f"Unknown user: {user_id}",
                "hint": "Register with POST /api/users/ first.",
            },
        )
    return user


def forbidden(message: str) -> HTTPException:
    """Build the 403 raised when the caller does not own a resource."""
    return HTTPException(
        status_code=403,
        detail={
            "error": "forbidden",
            "message": message,
            "hint": "Only the owner may modify this resource.",
        },
    )
