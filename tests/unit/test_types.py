"""Tests for the core dataclasses and enums."""

from datetime import datetime, timezone

from connectq.core.types import (
    COMPANY_FIELDS,
    ClientStatus,
    Company,
    EmbedResult,
    InterestStatus,
    SearchMatch,
    SearchOutcome,
    UserRole,
)
from tests.helpers import make_company, make_match


class TestEnums:
    """Status enums serialise as plain strings."""

    def test_user_role_values(self):
        assert UserRole("client") is UserRole.CLIENT
        assert UserRole.COMPANY.value == "company"

    def test_client_status_default_open(self):
        assert ClientStatus.OPEN == "open"

    def test_interest_status_values(self):
        assert [s.value for s in InterestStatus] == ["pending", "accepted", "rejected"]


class TestCompany:
    def test_list_fields_default_empty(self):
        company = make_company()
        assert company.services == []
        assert company.technologies_used == []
        assert company.specializations == []

    def test_list_defaults_not_shared(self):
        a, b = make_company(id="a"), make_company(id="b")
        a.services.append("x")
        assert b.services == []

    def test_to_dict_isoformats_datetimes(self):
        founded = datetime(2020, 5, 17, tzinfo=timezone.utc)
        data = make_company(founded_at=founded).to_dict()
        assert data["founded_at"] == founded.isoformat()
        assert data["created_at"] is None

    def test_company_fields_order(self):
        assert COMPANY_FIELDS[:4] == ("id", "user_id", "name", "email")
        assert set(COMPANY_FIELDS) == set(Company.__dataclass_fields__)


class TestSearchMatch:
    def test_hydrated_to_dict(self):
        match = make_match("c1", 0.91, name="Acme", services=["apps"])
        data = match.to_dict()
        assert data["id"] == "c1"
        assert data["score"] == 0.91
        assert data["name"] == "Acme"
        assert data["services"] == ["apps"]
        assert match.is_orphan is False

    def test_orphan_has_null_fields(self):
        match = SearchMatch(id="gone", score=0.5)
        data = match.to_dict()
        assert match.is_orphan is True
        assert data["id"] == "gone"
        assert data["score"] == 0.5
        assert all(data[name] is None for name in COMPANY_FIELDS if name != "id")


class TestResults:
    def test_outcome_count(self):
        outcome = SearchOutcome(matches=[make_match("a"), make_match("b")], message="ok")
        assert outcome.count == 2
        assert outcome.success is True

    def test_embed_result_defaults(self):
        result = EmbedResult(success=False, message="failed")
        assert result.count == 0
