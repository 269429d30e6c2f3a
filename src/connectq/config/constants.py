"""Application-wide constants."""

# Embedding model parameters
EMBEDDING_DIMENSION = 1536  # Requested output dimensionality for gemini-embedding-001
EMBEDDING_MODEL_NAME = "gemini-embedding-001"
LOCAL_EMBEDDING_MODEL_NAME = "google/embeddinggemma-300m"
SUPPORTED_EMBEDDING_PROVIDERS = ("gemini", "local")

# Provider request limits
EMBEDDING_BATCH_SIZE = 100
UPSERT_BATCH_SIZE = 100

# Vector index
DEFAULT_CHROMADB_PATH = "./data/chroma_db"
COLLECTION_NAME = "companies"

# Relational store
DEFAULT_DB_PATH = "./data/connectq.sqlite"

# Search defaults
DEFAULT_SEARCH_TOP_K = 10
MIN_TOP_K = 1
MAX_TOP_K = 100

# Document builder
DEFAULT_INDUSTRY = "technology"
