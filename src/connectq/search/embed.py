"""
Embedding generation with pluggable providers.

Supported providers, selected by ``EMBEDDING_PROVIDER``:
    - "gemini": Google Gemini embedding API via ``google-genai``
    - "local":  sentence-transformers model on CPU or GPU

Both providers distinguish document and query embeddings so that the
vector space is biased for asymmetric retrieval.

Usage:
    from connectq.search import EmbeddingClient, EmbeddingMode

    client = EmbeddingClient.from_settings()
    vectors = client.embed(documents, EmbeddingMode.DOCUMENT)
    query_vector = client.embed_query("React agency in Berlin")
"""

import abc
import os
from enum import Enum
from typing import TYPE_CHECKING, Optional

import torch

from connectq.config import (
    LOCAL_EMBEDDING_MODEL_NAME,
    SUPPORTED_EMBEDDING_PROVIDERS,
    Settings,
    get_settings,
)
from connectq.core import ConfigurationError, EmbeddingError, get_logger

if TYPE_CHECKING:
    from google import genai
    from sentence_transformers import SentenceTransformer

logger = get_logger(__name__)


class EmbeddingMode(str, Enum):
    """Retrieval task the embedding is computed for."""

    DOCUMENT = "RETRIEVAL_DOCUMENT"
    QUERY = "RETRIEVAL_QUERY"


# ---------------------------------------------------------------------------
# Providers
# ---------------------------------------------------------------------------


class EmbeddingProvider(abc.ABC):
    """Interface every embedding provider implements."""

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Human-readable name for logging and status output."""

    @abc.abstractmethod
    def embed(self, texts: list[str], mode: EmbeddingMode) -> list[list[float]]:
        """Return one vector per input text, in input order."""


class GeminiEmbeddingProvider(EmbeddingProvider):
    """
    Generate embeddings through the Gemini API.

    Texts are sent in slices of ``batch_size`` (the API's per-request
    limit); results are concatenated in input order.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model_name: Optional[str] = None,
        dimension: Optional[int] = None,
        batch_size: Optional[int] = None,
        client: Optional["genai.Client"] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        settings = settings or get_settings()
        self.model_name = model_name or settings.embedding.model_name
        self.dimension = dimension or settings.embedding.dimension
        self.batch_size = batch_size or settings.embedding.batch_size

        if client is None:
            api_key = api_key or settings.gemini.api_key
            if not api_key:
                raise ConfigurationError(
                    "GEMINI_API_KEY is not configured",
                    details="Set GEMINI_API_KEY or use EMBEDDING_PROVIDER=local.",
                )
            from google import genai

            client = genai.Client(api_key=api_key)
        self._client = client

    @property
    def name(self) -> str:
        return f"gemini ({self.model_name}, dim={self.dimension})"

    def embed(self, texts: list[str], mode: EmbeddingMode) -> list[list[float]]:
        from google.genai import types

        vectors: list[list[float]] = []
        for start in range(0, len(texts), self.batch_size):
            batch = texts[start : start + self.batch_size]
            response = self._client.models.embed_content(
                model=self.model_name,
                contents=batch,
                config=types.EmbedContentConfig(
                    output_dimensionality=self.dimension,
                    task_type=mode.value,
                ),
            )
            embeddings = response.embeddings or []
            if len(embeddings) != len(batch):
                raise EmbeddingError(
                    "Gemini returned an unexpected number of embeddings",
                    details=f"sent {len(batch)}, received {len(embeddings)}",
                )
            vectors.extend(list(embedding.values or []) for embedding in embeddings)
        return vectors


class SentenceTransformerProvider(EmbeddingProvider):
    """
    Generate embeddings locally using sentence-transformers.

    The model is loaded lazily on first use. When the model defines
    retrieval prompts (``"document"`` / ``"query"``) they are applied for
    the matching mode.
    """

    _PROMPT_NAMES = {
        EmbeddingMode.DOCUMENT: "document",
        EmbeddingMode.QUERY: "query",
    }

    def __init__(
        self,
        model_name: Optional[str] = None,
        device: Optional[str] = None,
        batch_size: Optional[int] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        settings = settings or get_settings()
        configured = settings.embedding.model_name
        # The default model name targets Gemini; fall back to a local model.
        if model_name is None and configured.startswith("gemini"):
            configured = LOCAL_EMBEDDING_MODEL_NAME
        self.model_name = model_name or configured
        self._device_setting = device or settings.embedding.device
        self.batch_size = batch_size or settings.embedding.batch_size

        hf_token = settings.hugging_face.token
        if hf_token:
            os.environ["HF_TOKEN"] = hf_token

        self._model: "SentenceTransformer | None" = None

    @property
    def name(self) -> str:
        return f"local ({self.model_name} on {self.device})"

    @property
    def device(self) -> str:
        if self._device_setting == "auto":
            return "cuda" if torch.cuda.is_available() else "cpu"
        return self._device_setting

    @property
    def model(self) -> "SentenceTransformer":
        if self._model is None:
            self._model = self._load_model()
        return self._model

    def _load_model(self) -> "SentenceTransformer":
        try:
            from sentence_transformers import SentenceTransformer

            logger.info(
                "Loading embedding model '%s' on %s",
                self.model_name,
                self.device,
            )
            return SentenceTransformer(self.model_name, device=self.device)
        except Exception as e:
            raise EmbeddingError(
                f"Failed to load model '{self.model_name}'",
                details=str(e),
            ) from e

    def embed(self, texts: list[str], mode: EmbeddingMode) -> list[list[float]]:
        model = self.model
        prompt_name = self._PROMPT_NAMES[mode]
        kwargs = {}
        if prompt_name in (getattr(model, "prompts", None) or {}):
            kwargs["prompt_name"] = prompt_name

        embeddings = model.encode(
            texts,
            batch_size=self.batch_size,
            show_progress_bar=len(texts) > 50,
            convert_to_numpy=True,
            **kwargs,
        )
        return embeddings.tolist()


PROVIDERS: dict[str, type[EmbeddingProvider]] = {
    "gemini": GeminiEmbeddingProvider,
    "local": SentenceTransformerProvider,
}


def create_embedding_provider(settings: Optional[Settings] = None) -> EmbeddingProvider:
    """
    Build the provider named by ``settings.embedding.provider``.

    Raises:
        ConfigurationError: If the provider name is unknown or the
            provider is missing credentials.
    """
    settings = settings or get_settings()
    name = settings.embedding.provider.lower()
    provider_cls = PROVIDERS.get(name)
    if provider_cls is None:
        raise ConfigurationError(
            f"Unknown EMBEDDING_PROVIDER '{name}'",
            details=f"Choose from: {', '.join(SUPPORTED_EMBEDDING_PROVIDERS)}",
        )
    provider = provider_cls(settings=settings)
    logger.info("Initialised embedding provider: %s", provider.name)
    return provider


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class EmbeddingClient:
    """
    Validating front end over an ``EmbeddingProvider``.

    Each call is all-or-nothing: either one vector is returned per input
    text, or ``EmbeddingError`` is raised and nothing should be indexed.

    Example:
        >>> client = EmbeddingClient(provider, dimension=1536)
        >>> vectors = client.embed(["Acme is a technology company"], EmbeddingMode.DOCUMENT)
        >>> len(vectors)
        1
    """

    def __init__(self, provider: EmbeddingProvider, dimension: Optional[int] = None) -> None:
        self.provider = provider
        self.dimension = dimension or get_settings().embedding.dimension

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "EmbeddingClient":
        settings = settings or get_settings()
        return cls(create_embedding_provider(settings), settings.embedding.dimension)

    def embed(self, texts: list[str], mode: EmbeddingMode) -> list[list[float]]:
        """
        Embed a batch of texts.

        Args:
            texts: Texts to embed. Must not be empty.
            mode: ``DOCUMENT`` for indexed profiles, ``QUERY`` for searches.

        Returns:
            One vector per text, in input order.

        Raises:
            EmbeddingError: If the input is empty, the provider fails, or
                the provider returns the wrong number of vectors or an
                empty one.
        """
        if not texts:
            raise EmbeddingError(
                "No texts to embed",
                details="Received empty texts list.",
            )

        logger.debug(
            "Embedding %d text(s) in %s mode with %s",
            len(texts),
            mode.value,
            self.provider.name,
        )

        try:
            vectors = self.provider.embed(list(texts), mode)
        except EmbeddingError:
            raise
        except Exception as e:
            raise EmbeddingError(
                "Failed to generate embeddings",
                details=str(e),
            ) from e

        if not vectors:
            raise EmbeddingError(
                "Failed to generate embeddings",
                details="Provider returned no vectors.",
            )
        if len(vectors) != len(texts):
            raise EmbeddingError(
                "Embedding count mismatch",
                details=f"expected {len(texts)}, got {len(vectors)}",
            )

        empty = [i for i, vector in enumerate(vectors) if not vector]
        if empty:
            raise EmbeddingError(
                "Failed to generate embeddings",
                details=f"Provider returned empty vector(s) at position(s) {empty}.",
            )

        if len(vectors[0]) != self.dimension:
            logger.warning(
                "Unexpected embedding dimension: got %d, expected %d",
                len(vectors[0]),
                self.dimension,
            )

        return vectors

    def embed_query(self, query: str) -> list[float]:
        """
        Embed a single search query in ``QUERY`` mode.

        Raises:
            EmbeddingError: If the query is empty or embedding fails.
        """
        if not query or not query.strip():
            raise EmbeddingError(
                "Empty query",
                details="Cannot embed empty or whitespace-only query.",
            )

        logger.debug("Embedding query: %s...", query[:50])
        return self.embed([query.strip()], EmbeddingMode.QUERY)[0]
