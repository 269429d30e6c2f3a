"""Configuration module: settings and constants."""

from connectq.config.constants import (
    COLLECTION_NAME,
    DEFAULT_CHROMADB_PATH,
    DEFAULT_DB_PATH,
    DEFAULT_INDUSTRY,
    DEFAULT_SEARCH_TOP_K,
    EMBEDDING_BATCH_SIZE,
    EMBEDDING_DIMENSION,
    EMBEDDING_MODEL_NAME,
    LOCAL_EMBEDDING_MODEL_NAME,
    MAX_TOP_K,
    MIN_TOP_K,
    SUPPORTED_EMBEDDING_PROVIDERS,
    UPSERT_BATCH_SIZE,
)
from connectq.config.settings import (
    ApiSettings,
    DatabaseSettings,
    EmbeddingSettings,
    GeminiSettings,
    HuggingFaceSettings,
    SearchSettings,
    Settings,
    VectorSettings,
    get_settings,
    reload_settings,
)

__all__ = [
    # Constants
    "EMBEDDING_DIMENSION",
    "EMBEDDING_MODEL_NAME",
    "LOCAL_EMBEDDING_MODEL_NAME",
    "SUPPORTED_EMBEDDING_PROVIDERS",
    "EMBEDDING_BATCH_SIZE",
    "UPSERT_BATCH_SIZE",
    "DEFAULT_CHROMADB_PATH",
    "COLLECTION_NAME",
    "DEFAULT_DB_PATH",
    "DEFAULT_SEARCH_TOP_K",
    "MIN_TOP_K",
    "MAX_TOP_K",
    "DEFAULT_INDUSTRY",
    # Settings
    "Settings",
    "EmbeddingSettings",
    "GeminiSettings",
    "HuggingFaceSettings",
    "VectorSettings",
    "DatabaseSettings",
    "SearchSettings",
    "ApiSettings",
    "get_settings",
    "reload_settings",
]
