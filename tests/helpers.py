"""
Shared test helper utilities for ConnectQ tests.

Plain functions and classes (not pytest fixtures) that can be imported
directly by test modules. Kept separate from conftest.py because
conftest.py is for fixtures only.
"""

import hashlib
import re
from typing import Any
from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from connectq.api.app import app
from connectq.api.dependencies import (
    get_clients,
    get_companies,
    get_interests,
    get_users,
    get_worker,
)
from connectq.core.types import Company, SearchMatch
from connectq.database import (
    ClientRepository,
    CompanyRepository,
    InterestRepository,
    UserRepository,
)
from connectq.search.embed import EmbeddingMode, EmbeddingProvider

FAKE_DIMENSION = 64

_TOKEN_RE = re.compile(r"[a-z0-9]+")


class FakeEmbeddingProvider(EmbeddingProvider):
    """
    Deterministic bag-of-words provider.

    Each lowercase token is hashed into one of ``FAKE_DIMENSION`` buckets.
    Vectors are non-negative, so cosine similarity stays in [0, 1], and
    texts sharing words score higher than texts that do not. A small
    constant keeps every vector non-zero.
    """

    def __init__(self, dimension: int = FAKE_DIMENSION) -> None:
        self.dimension = dimension
        self.model_name = "fake-bow"
        self.calls: list[tuple[list[str], EmbeddingMode]] = []

    @property
    def name(self) -> str:
        return f"fake ({self.model_name}, dim={self.dimension})"

    def embed(self, texts: list[str], mode: EmbeddingMode) -> list[list[float]]:
        self.calls.append((list(texts), mode))
        return [self.vector(text) for text in texts]

    def vector(self, text: str) -> list[float]:
        values = [0.01] * self.dimension
        for token in _TOKEN_RE.findall(text.lower()):
            bucket = int(hashlib.md5(token.encode()).hexdigest(), 16) % self.dimension
            values[bucket] += 1.0
        return values


def make_company(
    *,
    id: str = "company-1",
    user_id: str = "user-1",
    name: str = "Acme Apps",
    email: str = "hello@acme.example",
    **fields: Any,
) -> Company:
    """
    Factory for creating Company instances with sensible defaults.

    Not a fixture: accepts parameters so tests can create several
    distinct companies.
    """
    return Company(id=id, user_id=user_id, name=name, email=email, **fields)


def make_match(company_id: str = "company-1", score: float = 0.8, **fields: Any) -> SearchMatch:
    """Build a SearchMatch hydrated with a company (pass ``orphan=True`` for none)."""
    if fields.pop("orphan", False):
        return SearchMatch(id=company_id, score=score, company=None)
    return SearchMatch(id=company_id, score=score, company=make_company(id=company_id, **fields))


def _provide(value: Any):
    return lambda: value


def make_api_client(db_path: str, worker: Any = None):
    """
    Build a TestClient whose repositories use a real SQLite file.

    The embedding worker is a MagicMock so route tests can assert on
    published events without a background thread. Callers clear
    ``app.dependency_overrides`` in teardown.
    """
    worker = worker or MagicMock()
    repositories = {
        get_users: UserRepository(db_path=db_path),
        get_companies: CompanyRepository(db_path=db_path),
        get_clients: ClientRepository(db_path=db_path),
        get_interests: InterestRepository(db_path=db_path),
    }
    for dependency, repository in repositories.items():
        app.dependency_overrides[dependency] = _provide(repository)
    app.dependency_overrides[get_worker] = lambda: worker
    return TestClient(app, raise_server_exceptions=False), worker


def register(client, email: str, role: str, name: str = "Test User") -> dict[str, str]:
    """Register a user through the API and return its ``X-User-Id`` header."""
    resp = client.post("/api/users/", json={"email": email, "name": name, "role": role})
    assert resp.status_code == 201, resp.text
    return {"X-User-Id": resp.json()["id"]}
