"""Tests for the API request/response schemas."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from connectq.api.schemas import (
    ClientUpdateRequest,
    CompanyCreateRequest,
    CompanyMatchSchema,
    CompanySchema,
    CompanyUpdateRequest,
    InterestStatusRequest,
    SearchCompaniesRequest,
    UserCreateRequest,
)
from connectq.core.types import ClientStatus, UserRole
from tests.helpers import make_company, make_match


class TestSearchCompaniesRequest:
    """The search body accepts ``topK`` and rejects blank queries."""

    def test_defaults(self):
        body = SearchCompaniesRequest(query="mobile apps")
        assert body.top_k == 10

    def test_alias_and_field_name(self):
        assert SearchCompaniesRequest.model_validate({"query": "a", "topK": 3}).top_k == 3
        assert SearchCompaniesRequest(query="a", top_k=4).top_k == 4

    def test_query_stripped(self):
        assert SearchCompaniesRequest(query="  apps  ").query == "apps"

    @pytest.mark.parametrize("query", ["", "   "])
    def test_blank_query_rejected(self, query):
        with pytest.raises(ValidationError):
            SearchCompaniesRequest(query=query)

    @pytest.mark.parametrize("top_k", [0, 101])
    def test_top_k_bounds(self, top_k):
        with pytest.raises(ValidationError):
            SearchCompaniesRequest.model_validate({"query": "a", "topK": top_k})


class TestCompanyMatchSchema:
    def test_hydrated_match(self):
        schema = CompanyMatchSchema.from_match(make_match("c1", 0.8, name="Acme", services=["apps"]))
        assert schema.id == "c1"
        assert schema.name == "Acme"
        assert schema.services == ["apps"]

    def test_orphan_match_has_nulls(self):
        schema = CompanyMatchSchema.from_match(make_match("gone", 0.3, orphan=True))
        assert schema.id == "gone"
        assert schema.name is None
        assert schema.services is None

    def test_score_out_of_range_rejected(self):
        with pytest.raises(ValidationError):
            CompanyMatchSchema(id="c1", score=1.5)


class TestUserCreateRequest:
    def test_email_normalised(self):
        body = UserCreateRequest(email=" Ada@Example.com ", name="Ada", role="company")
        assert body.email == "ada@example.com"
        assert body.role is UserRole.COMPANY

    def test_email_requires_at(self):
        with pytest.raises(ValidationError):
            UserCreateRequest(email="not-an-email", name="Ada", role="client")

    def test_unknown_role_rejected(self):
        with pytest.raises(ValidationError):
            UserCreateRequest(email="a@b.io", name="Ada", role="admin")


class TestCompanyRequests:
    def test_create_drops_blank_list_items(self):
        body = CompanyCreateRequest(name="Acme", email="a@b.io", services=["apps", " ", ""])
        assert body.services == ["apps"]

    def test_create_requires_name(self):
        with pytest.raises(ValidationError):
            CompanyCreateRequest(name="  ", email="a@b.io")

    def test_update_changes_only_sent_fields(self):
        body = CompanyUpdateRequest.model_validate({"location": "Oslo", "tagline": None})
        assert body.changes() == {"location": "Oslo", "tagline": None}

    def test_update_ignores_null_required_fields(self):
        body = CompanyUpdateRequest.model_validate({"name": None, "industry": "saas"})
        assert body.changes() == {"industry": "saas"}

    def test_company_schema_from_company(self):
        founded = datetime(2019, 1, 1, tzinfo=timezone.utc)
        schema = CompanySchema.from_company(make_company(id="c1", founded_at=founded))
        assert schema.id == "c1"
        assert schema.founded_at == founded
        assert schema.services == []


class TestClientRequests:
    def test_update_status(self):
        body = ClientUpdateRequest.model_validate({"status": "matched"})
        assert body.changes() == {"status": ClientStatus.MATCHED}

    def test_update_invalid_status(self):
        with pytest.raises(ValidationError):
            ClientUpdateRequest.model_validate({"status": "archived"})

    def test_update_ignores_null_description(self):
        body = ClientUpdateRequest.model_validate({"description": None, "bio": None})
        assert body.changes() == {"bio": None}


class TestInterestStatusRequest:
    def test_accepts_known_status(self):
        assert InterestStatusRequest(status="accepted").status.value == "accepted"

    def test_rejects_pending_typo(self):
        with pytest.raises(ValidationError):
            InterestStatusRequest(status="pendng")
