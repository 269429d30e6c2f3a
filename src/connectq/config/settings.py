"""Configuration management using Pydantic Settings v2."""

from typing import Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from connectq.config.constants import (
    COLLECTION_NAME,
    DEFAULT_CHROMADB_PATH,
    DEFAULT_DB_PATH,
    DEFAULT_SEARCH_TOP_K,
    EMBEDDING_BATCH_SIZE,
    EMBEDDING_DIMENSION,
    EMBEDDING_MODEL_NAME,
    UPSERT_BATCH_SIZE,
)

# Nested sections read os.environ only, so .env must be loaded first.
load_dotenv()


class EmbeddingSettings(BaseSettings):
    """Embedding provider configuration."""

    provider: str = "gemini"  # "gemini" or "local"
    model_name: str = EMBEDDING_MODEL_NAME
    dimension: int = EMBEDDING_DIMENSION
    batch_size: int = EMBEDDING_BATCH_SIZE
    device: str = "auto"  # local provider only: "cuda", "cpu", or "auto"

    model_config = SettingsConfigDict(env_prefix="EMBEDDING_")


class GeminiSettings(BaseSettings):
    """Google Gemini API credentials."""

    api_key: Optional[str] = None

    model_config = SettingsConfigDict(env_prefix="GEMINI_")


class HuggingFaceSettings(BaseSettings):
    """Hugging Face configuration (local provider model downloads)."""

    token: Optional[str] = None

    model_config = SettingsConfigDict(env_prefix="HUGGING_FACE_")


class VectorSettings(BaseSettings):
    """Vector index configuration.

    When ``host`` is set the index is reached over HTTP; otherwise a local
    persistent store at ``path`` is used.
    """

    path: str = DEFAULT_CHROMADB_PATH
    host: Optional[str] = None
    port: int = 8000
    collection_name: str = COLLECTION_NAME
    upsert_batch_size: int = UPSERT_BATCH_SIZE

    model_config = SettingsConfigDict(env_prefix="VECTOR_")


class DatabaseSettings(BaseSettings):
    """Relational store configuration."""

    path: str = DEFAULT_DB_PATH

    model_config = SettingsConfigDict(env_prefix="DB_")


class SearchSettings(BaseSettings):
    """Search configuration."""

    top_k: int = DEFAULT_SEARCH_TOP_K
    drop_orphans: bool = False

    model_config = SettingsConfigDict(env_prefix="SEARCH_")


class ApiSettings(BaseSettings):
    """HTTP server configuration."""

    host: str = "0.0.0.0"
    port: int = 5000
    cors_origins: list[str] = ["http://localhost:5173"]

    model_config = SettingsConfigDict(env_prefix="API_")


class Settings(BaseSettings):
    """Root settings class combining all sections."""

    # Factories, so every Settings() re-reads the environment.
    embedding: EmbeddingSettings = Field(default_factory=EmbeddingSettings)
    gemini: GeminiSettings = Field(default_factory=GeminiSettings)
    hugging_face: HuggingFaceSettings = Field(default_factory=HuggingFaceSettings)
    vector: VectorSettings = Field(default_factory=VectorSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    api: ApiSettings = Field(default_factory=ApiSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Prefixed env vars are handled by the nested classes
    )


_settings_instance: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the global Settings instance (singleton pattern)."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance


def reload_settings() -> Settings:
    """Reload settings from environment (mainly for testing)."""
    global _settings_instance
    _settings_instance = Settings()
    return _settings_instance
