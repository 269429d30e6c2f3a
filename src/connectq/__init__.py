"""ConnectQ: marketplace backend with semantic company search.

This package provides the relational marketplace store (users, companies,
clients, interests) and the company search pipeline that projects company
profiles into an external vector index and ranks them against free-text
project requests.

Usage:
    from connectq import __version__
    from connectq.config import get_settings
    from connectq.search import SearchOrchestrator
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("connectq")
except PackageNotFoundError:
    __version__ = "0.0.0"

# Re-export lightweight core types for convenience.
# Heavy modules (database, search) are NOT imported here to avoid
# pulling in chromadb, google-genai, and torch on every import.
from connectq.core import (
    Client,
    Company,
    ConnectQError,
    EmbedResult,
    Interest,
    SearchMatch,
    SearchOutcome,
    User,
)

__all__ = [
    "__version__",
    # Core types
    "User",
    "Company",
    "Client",
    "Interest",
    "SearchMatch",
    "SearchOutcome",
    "EmbedResult",
    # Base exception
    "ConnectQError",
]
