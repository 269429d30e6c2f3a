"""Search module: company documents, embeddings and the search orchestrator.

    - build_document / build_metadata: company -> text and flat metadata
    - EmbeddingClient: validating wrapper over a Gemini or local provider
    - SearchOrchestrator: indexing and free-text company search

Usage:
    from connectq.search import EmbeddingClient, SearchOrchestrator

    orchestrator = SearchOrchestrator(companies, EmbeddingClient.from_settings(), index)
    outcome = orchestrator.search("fintech backend team, Python", top_k=5)
"""

from connectq.search.document import build_document, build_metadata
from connectq.search.embed import (
    EmbeddingClient,
    EmbeddingMode,
    EmbeddingProvider,
    GeminiEmbeddingProvider,
    SentenceTransformerProvider,
    create_embedding_provider,
)
from connectq.search.orchestrator import SearchOrchestrator

__all__ = [
    # Documents
    "build_document",
    "build_metadata",
    # Embeddings
    "EmbeddingClient",
    "EmbeddingMode",
    "EmbeddingProvider",
    "GeminiEmbeddingProvider",
    "SentenceTransformerProvider",
    "create_embedding_provider",
    # Orchestration
    "SearchOrchestrator",
]
