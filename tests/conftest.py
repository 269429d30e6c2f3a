"""
Shared pytest fixtures for ConnectQ tests.

This module provides reusable test data and temporary resources used
across both unit and integration tests:

    - sample_company: A fully populated Company
    - minimal_company: A Company with only the required fields
    - tmp_db_path / tmp_chroma_path: Isolated temporary storage paths
    - users / companies / clients / interests: Repositories on tmp_db_path
    - vector_index: A real ChromaDB collection on tmp_chroma_path
    - embedder: EmbeddingClient backed by the deterministic fake provider
"""

from datetime import datetime, timezone

import pytest

from connectq.core.types import Company, UserRole
from connectq.database import (
    ClientRepository,
    CompanyRepository,
    InterestRepository,
    UserRepository,
    VectorIndexClient,
)
from connectq.search import EmbeddingClient
from tests.helpers import FAKE_DIMENSION, FakeEmbeddingProvider


# ---------------------------------------------------------------------------
# Domain objects
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_company() -> Company:
    """A realistic company with every profile field populated."""
    return Company(
        id="c0ffee00000000000000000000000001",
        user_id="u0000000000000000000000000000001",
        name="Acme Apps",
        email="hello@acme.example",
        description="We build mobile products for startups.",
        industry="software",
        location="Berlin, Germany",
        tagline="Ship faster.",
        website="https://acme.example",
        contact_number="+49 30 1234567",
        founded_at=datetime(2015, 3, 1, tzinfo=timezone.utc),
        employee_count=42,
        services=["mobile apps", "web development"],
        technologies_used=["React Native", "Django"],
        specializations=["healthcare"],
        cost_range="$10k-$50k",
        delivery_duration="6-10 weeks",
        linkedin_url="https://linkedin.com/company/acme",
        twitter_url=None,
        logo_url=None,
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


@pytest.fixture
def minimal_company() -> Company:
    """A company carrying only id, owner, name and email."""
    return Company(
        id="c0ffee00000000000000000000000002",
        user_id="u0000000000000000000000000000002",
        name="Solo Dev",
        email="solo@example.com",
    )


# ---------------------------------------------------------------------------
# Temporary storage
# ---------------------------------------------------------------------------


@pytest.fixture
def tmp_db_path(tmp_path) -> str:
    """
    Isolated SQLite database path inside pytest's tmp directory.

    Each test receives a unique temporary directory, so databases never
    collide or persist between runs.
    """
    return str(tmp_path / "test_connectq.sqlite")


@pytest.fixture
def tmp_chroma_path(tmp_path) -> str:
    """Isolated ChromaDB storage directory."""
    return str(tmp_path / "test_chroma_db")


@pytest.fixture
def users(tmp_db_path) -> UserRepository:
    return UserRepository(db_path=tmp_db_path)


@pytest.fixture
def companies(tmp_db_path) -> CompanyRepository:
    return CompanyRepository(db_path=tmp_db_path)


@pytest.fixture
def clients(tmp_db_path) -> ClientRepository:
    return ClientRepository(db_path=tmp_db_path)


@pytest.fixture
def interests(tmp_db_path) -> InterestRepository:
    return InterestRepository(db_path=tmp_db_path)


@pytest.fixture
def company_owner(users):
    """A registered company-role user."""
    return users.create(email="owner@acme.example", name="Ada Owner", role=UserRole.COMPANY)


@pytest.fixture
def client_owner(users):
    """A registered client-role user."""
    return users.create(email="buyer@example.com", name="Bo Buyer", role=UserRole.CLIENT)


@pytest.fixture
def vector_index(tmp_chroma_path) -> VectorIndexClient:
    """A real local ChromaDB collection (no remote host)."""
    return VectorIndexClient(chroma_path=tmp_chroma_path, host="")


@pytest.fixture
def fake_provider() -> FakeEmbeddingProvider:
    return FakeEmbeddingProvider()


@pytest.fixture
def embedder(fake_provider) -> EmbeddingClient:
    return EmbeddingClient(fake_provider, dimension=FAKE_DIMENSION)
