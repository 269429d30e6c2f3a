"""
Search orchestrator: keeps the vector index in step with the company
table and answers free-text company searches.

The orchestrator owns no state of its own. It coordinates three injected
components:

    CompanyRepository  ->  build_document / build_metadata
                       ->  EmbeddingClient (DOCUMENT mode)
                       ->  VectorIndexClient.upsert

and, for search:

    EmbeddingClient (QUERY mode) -> VectorIndexClient.query
                                 -> CompanyRepository.get_many

Usage:
    from connectq.search import SearchOrchestrator

    orchestrator = SearchOrchestrator(companies, embedder, index)
    orchestrator.embed_and_store_all()
    outcome = orchestrator.search("mobile app agency with healthcare experience")
"""

from datetime import datetime, timezone
from typing import Any, Optional

from connectq.config import MAX_TOP_K, MIN_TOP_K, get_settings
from connectq.core import (
    Company,
    DatabaseError,
    EmbeddingError,
    EmbedResult,
    NotFoundError,
    SearchMatch,
    SearchOutcome,
    ValidationError,
    VectorIndexError,
    VectorRecord,
    get_logger,
)
from connectq.database import CompanyRepository, VectorIndexClient
from connectq.search.document import build_document, build_metadata
from connectq.search.embed import EmbeddingClient, EmbeddingMode

logger = get_logger(__name__)

# Failures of the downstream services are reported as unsuccessful
# results; caller mistakes (bad input, unknown id) are raised.
_SERVICE_ERRORS = (EmbeddingError, VectorIndexError, DatabaseError)


class SearchOrchestrator:
    """
    Coordinates embedding, indexing and search of company profiles.

    Args:
        companies: Relational source of truth.
        embedder: Embedding client for documents and queries.
        index: Vector index holding one record per company.
        drop_orphans: Drop hits whose company row no longer exists.
            Defaults to ``SEARCH_DROP_ORPHANS``.
    """

    def __init__(
        self,
        companies: CompanyRepository,
        embedder: EmbeddingClient,
        index: VectorIndexClient,
        drop_orphans: Optional[bool] = None,
    ) -> None:
        self._companies = companies
        self._embedder = embedder
        self._index = index

        settings = get_settings()
        self._drop_orphans = (
            settings.search.drop_orphans if drop_orphans is None else drop_orphans
        )
        self._default_top_k = settings.search.top_k

    @classmethod
    def from_settings(cls) -> "SearchOrchestrator":
        """
        Build an orchestrator with components configured from settings.

        Raises:
            ConfigurationError: If the embedding provider is misconfigured.
            DatabaseError: If the SQLite store cannot be opened.
            VectorIndexError: If the vector index cannot be opened.
        """
        return cls(
            CompanyRepository(),
            EmbeddingClient.from_settings(),
            VectorIndexClient(),
        )

    # ------------------------------------------------------------------
    # Indexing
    # ------------------------------------------------------------------

    def embed_and_store_all(self) -> EmbedResult:
        """
        Re-embed every company and upsert the vectors.

        All documents go to the embedding provider as one batch, so either
        every company gets a fresh vector or none is written.

        Returns:
            ``EmbedResult`` with the number of companies indexed. An empty
            company table is a success with ``count=0``.
        """
        try:
            companies = self._companies.list_all()
            if not companies:
                logger.info("No companies to embed")
                return EmbedResult(success=True, message="No companies to embed", count=0)

            logger.info("Embedding %d companies", len(companies))
            records = self._build_records(companies)
            self._index.upsert(records)
        except _SERVICE_ERRORS as e:
            logger.error("Full re-embed failed: %s", e)
            return EmbedResult(success=False, message=str(e), count=0)

        message = f"Embedded and stored {len(records)} companies"
        logger.info(message)
        return EmbedResult(success=True, message=message, count=len(records))

    def embed_single(self, company_id: str) -> EmbedResult:
        """
        Re-embed one company after it was created or changed.

        The stale vector is deleted first on a best-effort basis; a failure
        there is logged and the re-embed continues.

        Raises:
            NotFoundError: If the company does not exist.
        """
        try:
            self._index.delete_one(company_id)
        except VectorIndexError as e:
            logger.warning("Could not delete old vector for %s: %s", company_id, e)

        try:
            company = self._companies.get(company_id)
        except DatabaseError as e:
            logger.error("Failed to load company %s: %s", company_id, e)
            return EmbedResult(success=False, message=str(e), count=0)

        if company is None:
            raise NotFoundError("company", company_id)

        try:
            self._index.upsert(self._build_records([company]))
        except _SERVICE_ERRORS as e:
            logger.error("Failed to embed company %s: %s", company_id, e)
            return EmbedResult(success=False, message=str(e), count=0)

        logger.info("Embedded company %s (%s)", company_id[:8], company.name)
        return EmbedResult(
            success=True,
            message=f"Company {company.name} embedded successfully",
            count=1,
        )

    def remove_embedding(self, company_id: str) -> EmbedResult:
        """Delete a company's vector. Removing an absent vector succeeds."""
        try:
            self._index.delete_one(company_id)
        except VectorIndexError as e:
            logger.error("Failed to remove vector for %s: %s", company_id, e)
            return EmbedResult(success=False, message=str(e), count=0)

        logger.info("Removed vector for company %s", company_id[:8])
        return EmbedResult(success=True, message="Embedding removed", count=1)

    def cleanup_orphans(self) -> EmbedResult:
        """Delete vectors whose company no longer exists relationally."""
        try:
            vector_ids = self._index.list_ids()
            existing = {c.id for c in self._companies.get_many(vector_ids)}
            orphans = [vid for vid in vector_ids if vid not in existing]
            self._index.delete_many(orphans)
        except _SERVICE_ERRORS as e:
            logger.error("Orphan cleanup failed: %s", e)
            return EmbedResult(success=False, message=str(e), count=0)

        if orphans:
            logger.info("Removed %d orphaned vector(s)", len(orphans))
            message = f"Removed {len(orphans)} orphaned vector(s)"
        else:
            message = "No orphaned vectors found"
        return EmbedResult(success=True, message=message, count=len(orphans))

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def search(self, query: str, top_k: Optional[int] = None) -> SearchOutcome:
        """
        Rank companies against a free-text project request.

        Matches keep the vector index's order; they are never re-sorted.

        Args:
            query: Natural-language description of the project.
            top_k: Number of matches, between 1 and 100. Defaults to
                ``SEARCH_TOP_K``.

        Returns:
            ``SearchOutcome``. Downstream failures give ``success=False``
            with no matches.

        Raises:
            ValidationError: If the query is blank or ``top_k`` is out of range.
        """
        if not query or not query.strip():
            raise ValidationError(
                "Search query is required",
                details="Cannot search with an empty or whitespace-only query.",
            )
        top_k = self._default_top_k if top_k is None else top_k
        if not MIN_TOP_K <= top_k <= MAX_TOP_K:
            raise ValidationError(
                f"topK must be between {MIN_TOP_K} and {MAX_TOP_K}",
                details=f"got {top_k}",
            )

        logger.info("Searching companies: '%s' (top_k=%d)", query[:80], top_k)

        try:
            vector = self._embedder.embed_query(query)
            hits = self._index.query(vector, top_k)
            if not hits:
                return SearchOutcome(matches=[], message="No matching companies found")
            rows = self._companies.get_many(hit.id for hit in hits)
        except _SERVICE_ERRORS as e:
            logger.error("Search failed: %s", e)
            return SearchOutcome(matches=[], message=str(e), success=False)

        by_id = {company.id: company for company in rows}
        matches = []
        for hit in hits:
            company = by_id.get(hit.id)
            if company is None:
                logger.warning("Vector %s has no company row (orphan)", hit.id)
                if self._drop_orphans:
                    continue
            matches.append(SearchMatch(id=hit.id, score=hit.score, company=company))

        logger.info("Search returned %d match(es)", len(matches))
        return SearchOutcome(
            matches=matches,
            message=f"Found {len(matches)} matching companies",
        )

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def status(self) -> dict[str, Any]:
        """
        Summarise the relational and vector sides.

        Raises:
            DatabaseError: If the company count cannot be read.
            VectorIndexError: If the index cannot be described.
        """
        stats = self._index.describe_stats()
        return {
            "company_count": self._companies.count(),
            "vector_count": stats.count,
            "collection": stats.collection,
            "location": stats.location,
            "provider": self._embedder.provider.name,
            "model": getattr(self._embedder.provider, "model_name", ""),
            "dimension": self._embedder.dimension,
        }

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _build_records(self, companies: list[Company]) -> list[VectorRecord]:
        documents = [build_document(company) for company in companies]
        vectors = self._embedder.embed(documents, EmbeddingMode.DOCUMENT)

        embedded_at = datetime.now(timezone.utc).isoformat()
        records = []
        for company, document, vector in zip(companies, documents, vectors):
            metadata = build_metadata(company)
            metadata["embedded_at"] = embedded_at
            records.append(
                VectorRecord(
                    id=company.id,
                    values=vector,
                    metadata=metadata,
                    document=document,
                )
            )
        return records
