"""End-to-end search flow over real SQLite and ChromaDB.

The only substitute is the embedding provider: the deterministic
bag-of-words fake ranks documents by shared words, which is enough to
check that the orchestrator wires repository, embedder, and index
together correctly.
"""

import pytest

from connectq.core.types import UserRole
from connectq.search import SearchOrchestrator


@pytest.fixture
def orchestrator(companies, embedder, vector_index):
    return SearchOrchestrator(companies, embedder, vector_index, drop_orphans=False)


@pytest.fixture
def seeded(users, companies):
    """Two companies with clearly different profiles."""
    mobile_owner = users.create(email="mobile@x.io", name="M", role=UserRole.COMPANY)
    chain_owner = users.create(email="chain@x.io", name="C", role=UserRole.COMPANY)
    mobile = companies.create(
        mobile_owner.id,
        name="Acme Apps",
        email="mobile@x.io",
        industry="software",
        services=["mobile apps"],
        technologies_used=["React Native"],
        specializations=["healthcare"],
    )
    chain = companies.create(
        chain_owner.id,
        name="Ledger Labs",
        email="chain@x.io",
        industry="fintech",
        location="Zurich",
        services=["blockchain", "smart contracts"],
        technologies_used=["Solidity"],
        specializations=["finance"],
    )
    return mobile, chain


class TestCreateThenSearch:
    def test_best_match_first(self, orchestrator, seeded):
        mobile, chain = seeded
        assert orchestrator.embed_and_store_all().count == 2

        outcome = orchestrator.search("mobile apps for healthcare", top_k=2)

        assert outcome.success is True
        assert [m.id for m in outcome.matches] == [mobile.id, chain.id]
        assert outcome.matches[0].company.name == "Acme Apps"
        assert outcome.matches[0].score > outcome.matches[1].score

    def test_top_k_one(self, orchestrator, seeded):
        orchestrator.embed_and_store_all()
        outcome = orchestrator.search("blockchain smart contracts Solidity", top_k=1)
        assert [m.company.name for m in outcome.matches] == ["Ledger Labs"]

    def test_embed_single_after_update(self, orchestrator, companies, vector_index, seeded):
        mobile, _ = seeded
        orchestrator.embed_and_store_all()

        companies.update(mobile.id, specializations=["gaming"])
        result = orchestrator.embed_single(mobile.id)

        assert result.success is True
        assert vector_index.count() == 2
        [hit] = [h for h in vector_index.query([1.0] * 64, top_k=2) if h.id == mobile.id]
        assert hit.metadata["specializations"] == "gaming"

    def test_empty_index(self, orchestrator, seeded):
        outcome = orchestrator.search("anything")
        assert outcome.success is True
        assert outcome.matches == []


class TestOrphans:
    """A deleted company leaves an orphan vector until cleanup."""

    def test_orphan_surfaces_then_cleanup_removes_it(self, orchestrator, companies, vector_index, seeded):
        mobile, chain = seeded
        orchestrator.embed_and_store_all()
        companies.delete(mobile.id)

        outcome = orchestrator.search("mobile apps for healthcare", top_k=2)
        orphan = next(m for m in outcome.matches if m.id == mobile.id)
        assert orphan.is_orphan is True
        assert orphan.to_dict()["name"] is None

        result = orchestrator.cleanup_orphans()
        assert result.count == 1
        assert vector_index.list_ids() == [chain.id]

        outcome = orchestrator.search("mobile apps for healthcare", top_k=2)
        assert [m.id for m in outcome.matches] == [chain.id]

    def test_orphan_dropped_when_configured(self, companies, embedder, vector_index, seeded):
        mobile, chain = seeded
        orchestrator = SearchOrchestrator(companies, embedder, vector_index, drop_orphans=True)
        orchestrator.embed_and_store_all()
        companies.delete(mobile.id)

        outcome = orchestrator.search("mobile apps for healthcare", top_k=2)
        assert [m.id for m in outcome.matches] == [chain.id]

    def test_status_shows_drift(self, orchestrator, companies, seeded):
        mobile, _ = seeded
        orchestrator.embed_and_store_all()
        companies.delete(mobile.id)
        status = orchestrator.status()
        assert status["company_count"] == 1
        assert status["vector_count"] == 2


class TestSingleCompanyLifecycle:
    """One company goes through create, embed, search, delete, remove."""

    @pytest.fixture
    def robotics(self, users, companies):
        owner = users.create(email="robots@acme.example", name="R", role=UserRole.COMPANY)
        return companies.create(
            owner.id,
            name="Acme Robotics",
            email="robots@acme.example",
            services=["robotics", "automation"],
        )

    def test_create_embed_single_then_search(self, orchestrator, vector_index, robotics):
        assert vector_index.count() == 0

        result = orchestrator.embed_single(robotics.id)
        outcome = orchestrator.search("industrial automation", top_k=5)

        assert result.success is True
        assert outcome.success is True
        [match] = outcome.matches
        assert match.id == robotics.id
        assert match.company.name == "Acme Robotics"
        assert 0.0 <= match.score <= 1.0

    def test_delete_then_remove_embedding_hides_company(
        self, orchestrator, companies, vector_index, robotics
    ):
        orchestrator.embed_single(robotics.id)

        companies.delete(robotics.id)
        result = orchestrator.remove_embedding(robotics.id)
        outcome = orchestrator.search("industrial automation", top_k=5)

        assert result.success is True
        assert vector_index.count() == 0
        assert robotics.id not in [m.id for m in outcome.matches]
        assert outcome.matches == []
