"""
Embedding and company search endpoints.

    - ``POST /api/embeddings/search-companies``        rank companies for a request
    - ``POST /api/embeddings/embed-company/{id}``      re-embed one company
    - ``POST /api/embeddings/embed-all-companies``     full re-sync
    - ``POST /api/embeddings/cleanup-orphans``         drop vectors of deleted companies
    - ``GET  /api/embeddings/status``                  relational and vector counts

Handlers are plain ``def`` so FastAPI runs the blocking provider and
index calls in its thread pool.
"""

import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from connectq.api.dependencies import get_orchestrator
from connectq.api.schemas import (
    CompanyMatchSchema,
    EmbeddingStatusResponse,
    EmbedResponse,
    ErrorResponse,
    SearchCompaniesRequest,
    SearchCompaniesResponse,
)
from connectq.core import EmbedResult, get_logger
from connectq.search import SearchOrchestrator

logger = get_logger(__name__)

router = APIRouter()


def _embed_response(result: EmbedResult) -> EmbedResponse | JSONResponse:
    body = EmbedResponse(success=result.success, message=result.message, count=result.count)
    if not result.success:
        return JSONResponse(status_code=500, content=body.model_dump())
    return body


@router.post(
    "/search-companies",
    response_model=SearchCompaniesResponse,
    responses={
        400: {"model": ErrorResponse},
        500: {"model": SearchCompaniesResponse},
    },
    summary="Semantic company search",
)
def search_companies(
    body: SearchCompaniesRequest,
    orchestrator: SearchOrchestrator = Depends(get_orchestrator),
):
    """
    Rank companies against a free-text project description.

    Matches are returned in similarity order (highest first), each with
    its company fields flattened alongside ``id`` and ``score``.
    """
    start = time.perf_counter()
    outcome = orchestrator.search(body.query, top_k=body.top_k)
    elapsed_ms = (time.perf_counter() - start) * 1000

    response = SearchCompaniesResponse(
        success=outcome.success,
        message=outcome.message,
        matches=[CompanyMatchSchema.from_match(m) for m in outcome.matches],
        count=outcome.count,
    )

    if not outcome.success:
        return JSONResponse(status_code=500, content=response.model_dump(mode="json"))

    logger.info(
        "Search '%s' returned %d match(es) in %.1f ms",
        body.query[:80],
        response.count,
        elapsed_ms,
    )
    return response


@router.post(
    "/embed-company/{company_id}",
    response_model=EmbedResponse,
    responses={404: {"model": ErrorResponse}, 500: {"model": EmbedResponse}},
    summary="Re-embed one company",
)
def embed_company(
    company_id: str,
    orchestrator: SearchOrchestrator = Depends(get_orchestrator),
):
    """Synchronously re-embed a single company. Unknown ids return 404."""
    return _embed_response(orchestrator.embed_single(company_id))


@router.post(
    "/embed-all-companies",
    response_model=EmbedResponse,
    responses={500: {"model": EmbedResponse}},
    summary="Re-embed every company",
)
def embed_all_companies(
    orchestrator: SearchOrchestrator = Depends(get_orchestrator),
):
    """Rebuild every company vector from the relational store."""
    return _embed_response(orchestrator.embed_and_store_all())


@router.post(
    "/cleanup-orphans",
    response_model=EmbedResponse,
    responses={500: {"model": EmbedResponse}},
    summary="Delete vectors of deleted companies",
)
def cleanup_orphans(
    orchestrator: SearchOrchestrator = Depends(get_orchestrator),
):
    return _embed_response(orchestrator.cleanup_orphans())


@router.get(
    "/status",
    response_model=EmbeddingStatusResponse,
    responses={500: {"model": ErrorResponse}},
    summary="Embedding overview",
)
def embedding_status(
    orchestrator: SearchOrchestrator = Depends(get_orchestrator),
) -> EmbeddingStatusResponse:
    """Report company and vector counts and the active embedding provider."""
    info = orchestrator.status()
    in_sync = info["company_count"] == info["vector_count"]
    return EmbeddingStatusResponse(
        success=True,
        message="Index in sync" if in_sync else "Index out of sync; run embed-all-companies",
        company_count=info["company_count"],
        vector_count=info["vector_count"],
        provider=info["provider"],
        model=info["model"],
        timestamp=datetime.now(timezone.utc),
    )
