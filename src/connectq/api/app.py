"""
FastAPI application factory for ConnectQ.

The public symbol is ``app``, the ASGI application used by uvicorn and
by the test client.

Architecture:
    - Singletons (repositories, VectorIndexClient, EmbeddingClient,
      SearchOrchestrator, EmbeddingWorker) are initialised once in the
      lifespan context manager and stored on ``app.state``.
    - Route modules access them through dependency functions in
      ``dependencies.py`` (which read from ``request.app.state``).
    - Domain exceptions are translated to HTTP responses by the handlers
      registered in ``create_app``.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from connectq import __version__
from connectq.config import get_settings
from connectq.core import (
    ConflictError,
    ConnectQError,
    NotFoundError,
    ValidationError,
    configure_logging,
    get_logger,
)

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Lifespan: initialise singletons, store on app.state
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Initialise and clean up application-level singletons.

    Heavy imports happen here (not at module top level) to keep
    ``import connectq.api.app`` lightweight at test collection time.

    Startup order:
        1. Repositories (SQLite, fast)
        2. VectorIndexClient (ChromaDB, fast)
        3. EmbeddingClient (provider client; local models load lazily)
        4. SearchOrchestrator (wiring only)
        5. EmbeddingWorker (starts its daemon thread)
    """
    from connectq.api.tasks import EmbeddingWorker
    from connectq.database import (
        ClientRepository,
        CompanyRepository,
        InterestRepository,
        UserRepository,
        VectorIndexClient,
    )
    from connectq.search import EmbeddingClient, SearchOrchestrator

    configure_logging()
    logger.info("ConnectQ API starting up (v%s)", __version__)

    settings = get_settings()

    users = UserRepository()
    companies = CompanyRepository()
    clients = ClientRepository()
    interests = InterestRepository()
    index = VectorIndexClient()
    embedder = EmbeddingClient.from_settings(settings)
    orchestrator = SearchOrchestrator(companies, embedder, index)
    worker = EmbeddingWorker(orchestrator)
    worker.start()

    app.state.users = users
    app.state.companies = companies
    app.state.clients = clients
    app.state.interests = interests
    app.state.index = index
    app.state.embedder = embedder
    app.state.orchestrator = orchestrator
    app.state.worker = worker
    app.state.settings = settings

    logger.info("All singletons initialised. API ready.")
    yield
    worker.stop()
    logger.info("ConnectQ API shutting down.")


# ---------------------------------------------------------------------------
# Exception handlers
# ---------------------------------------------------------------------------


def _error_response(
    status_code: int,
    error: str,
    message: str,
    details: str | None = None,
    hint: str | None = None,
) -> JSONResponse:
    """Mirror the ``HTTPException(detail={...})`` body used by the routes."""
    return JSONResponse(
        status_code=status_code,
        content={
            "detail": {
                "error": error,
                "message": message,
                "details": details,
                "hint": hint,
            }
        },
    )


async def _not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return _error_response(404, "not_found", exc.message, exc.details)


async def _conflict_handler(request: Request, exc: ConflictError) -> JSONResponse:
    return _error_response(409, "conflict", exc.message, exc.details)


async def _validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return _error_response(400, "validation_error", exc.message, exc.details)


async def _request_validation_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        message = error.get("msg", "invalid")
        problems.append(f"{location}: {message}" if location else message)
    return _error_response(
        400,
        "validation_error",
        "Request validation failed",
        details="; ".join(problems),
        hint="Check the request body against the API schema at /docs.",
    )


async def _internal_handler(request: Request, exc: ConnectQError) -> JSONResponse:
    logger.error("Unhandled %s on %s: %s", type(exc).__name__, request.url.path, exc)
    return _error_response(500, "internal_error", exc.message, exc.details)


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns a fully configured ASGI application with CORS middleware,
    lifespan management, exception handlers, all routers, and a
    health-check endpoint.
    """
    settings = get_settings()

    application = FastAPI(
        title="ConnectQ API",
        description=(
            "Marketplace backend connecting clients with service companies, "
            "with semantic company search over embedded company profiles."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # -- CORS ---------------------------------------------------------------
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -- Exception handlers -------------------------------------------------
    application.add_exception_handler(NotFoundError, _not_found_handler)
    application.add_exception_handler(ConflictError, _conflict_handler)
    application.add_exception_handler(ValidationError, _validation_handler)
    application.add_exception_handler(RequestValidationError, _request_validation_handler)
    application.add_exception_handler(ConnectQError, _internal_handler)

    # -- Routers ------------------------------------------------------------
    from connectq.api.routes.clients import router as clients_router
    from connectq.api.routes.companies import router as companies_router
    from connectq.api.routes.embeddings import router as embeddings_router
    from connectq.api.routes.interests import router as interests_router
    from connectq.api.routes.users import router as users_router

    application.include_router(embeddings_router, prefix="/api/embeddings", tags=["embeddings"])
    application.include_router(users_router, prefix="/api/users", tags=["users"])
    application.include_router(companies_router, prefix="/api/companies", tags=["companies"])
    application.include_router(clients_router, prefix="/api/clients", tags=["clients"])
    application.include_router(interests_router, prefix="/api/interests", tags=["interests"])

    # -- Health check -------------------------------------------------------
    @application.get("/api/health", tags=["meta"], summary="Health check")
    async def health() -> dict[str, str]:
        """Return API liveness status."""
        return {"status": "ok", "version": __version__}

    return application


app = create_app()
