"""
Pydantic v2 request and response schemas for the ConnectQ API.

Schemas are separate from the core dataclasses in ``connectq.core`` to
provide a stable, explicit API contract.

Naming convention:
    - Request schemas:  ``<Resource>CreateRequest`` / ``<Resource>UpdateRequest``
    - Response schemas: ``<Resource>Schema`` or ``<Resource>Response``

All datetimes are ISO 8601. Similarity scores are floats in [0.0, 1.0].
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from connectq.config import DEFAULT_SEARCH_TOP_K, MAX_TOP_K, MIN_TOP_K
from connectq.core import (
    Client,
    ClientStatus,
    Company,
    Interest,
    InterestStatus,
    SearchMatch,
    User,
    UserRole,
)


def _strip_required(value: str) -> str:
    stripped = value.strip()
    if not stripped:
        msg = "must not be empty or whitespace"
        raise ValueError(msg)
    return stripped


# ---------------------------------------------------------------------------
# Shared / error
# ---------------------------------------------------------------------------


class ErrorResponse(BaseModel):
    """Structured error body (wrapped in ``detail``) for 4xx and 5xx responses."""

    error: str = Field(..., description="Machine-readable error type")
    message: str = Field(..., description="Human-readable error description")
    details: str | None = Field(None, description="Additional technical context")
    hint: str | None = Field(None, description="Suggested remediation action")


class DeleteResponse(BaseModel):
    success: bool
    message: str


# ---------------------------------------------------------------------------
# Embeddings and search
# ---------------------------------------------------------------------------


class SearchCompaniesRequest(BaseModel):
    """Request body for ``POST /api/embeddings/search-companies``."""

    model_config = ConfigDict(populate_by_name=True)

    query: str = Field(..., min_length=1, description="Free-text project description")
    top_k: int = Field(
        DEFAULT_SEARCH_TOP_K,
        ge=MIN_TOP_K,
        le=MAX_TOP_K,
        alias="topK",
        description="Number of companies to return",
    )

    @field_validator("query")
    @classmethod
    def validate_query(cls, v: str) -> str:
        return _strip_required(v)


class CompanyMatchSchema(BaseModel):
    """
    One ranked company.

    Company fields are flattened next to ``id`` and ``score``. A match
    whose company row no longer exists carries every company field as null.
    """

    id: str
    score: float = Field(..., ge=0.0, le=1.0)
    user_id: str | None = None
    name: str | None = None
    email: str | None = None
    description: str | None = None
    industry: str | None = None
    location: str | None = None
    tagline: str | None = None
    website: str | None = None
    contact_number: str | None = None
    founded_at: datetime | None = None
    employee_count: int | None = None
    services: list[str] | None = None
    technologies_used: list[str] | None = None
    specializations: list[str] | None = None
    cost_range: str | None = None
    delivery_duration: str | None = None
    linkedin_url: str | None = None
    twitter_url: str | None = None
    logo_url: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_match(cls, match: SearchMatch) -> CompanyMatchSchema:
        return cls(**match.to_dict())


class SearchCompaniesResponse(BaseModel):
    """Response for ``POST /api/embeddings/search-companies``."""

    success: bool
    message: str
    matches: list[CompanyMatchSchema] = Field(default_factory=list)
    count: int = Field(0, ge=0)


class EmbedResponse(BaseModel):
    """Response for the embed, re-embed, and cleanup endpoints."""

    success: bool
    message: str
    count: int = Field(0, ge=0)


class EmbeddingStatusResponse(BaseModel):
    """Response for ``GET /api/embeddings/status``."""

    success: bool
    message: str
    company_count: int = Field(..., ge=0)
    vector_count: int = Field(..., ge=0)
    provider: str
    model: str
    timestamp: datetime


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class UserCreateRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=320)
    name: str = Field(..., min_length=1, max_length=200)
    role: UserRole

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        v = _strip_required(v).lower()
        if "@" not in v:
            msg = "email must contain '@'"
            raise ValueError(msg)
        return v

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _strip_required(v)


class UserSchema(BaseModel):
    id: str
    email: str
    name: str
    role: UserRole
    created_at: datetime | None = None

    @classmethod
    def from_user(cls, user: User) -> UserSchema:
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            role=user.role,
            created_at=user.created_at,
        )


# ---------------------------------------------------------------------------
# Companies
# ---------------------------------------------------------------------------


class CompanyProfileFields(BaseModel):
    """Optional profile fields shared by company requests."""

    description: str | None = Field(None, max_length=5000)
    industry: str | None = Field(None, max_length=200)
    location: str | None = Field(None, max_length=200)
    tagline: str | None = Field(None, max_length=300)
    website: str | None = None
    contact_number: str | None = None
    founded_at: datetime | None = None
    employee_count: int | None = Field(None, ge=0)
    services: list[str] | None = None
    technologies_used: list[str] | None = None
    specializations: list[str] | None = None
    cost_range: str | None = None
    delivery_duration: str | None = None
    linkedin_url: str | None = None
    twitter_url: str | None = None
    logo_url: str | None = None

    @field_validator("services", "technologies_used", "specializations")
    @classmethod
    def drop_blank_items(cls, v: list[str] | None) -> list[str] | None:
        if v is None:
            return None
        return [item.strip() for item in v if item and item.strip()]


class CompanyCreateRequest(CompanyProfileFields):
    name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., min_length=3, max_length=320)

    @field_validator("name", "email")
    @classmethod
    def validate_required(cls, v: str) -> str:
        return _strip_required(v)


class CompanyUpdateRequest(CompanyProfileFields):
    """Partial update: only fields present in the body are changed."""

    name: str | None = Field(None, min_length=1, max_length=200)
    email: str | None = Field(None, min_length=3, max_length=320)

    def changes(self) -> dict[str, Any]:
        """Fields set in the request; null for a required column means unchanged."""
        data = self.model_dump(exclude_unset=True)
        return {k: v for k, v in data.items() if v is not None or k not in ("name", "email")}


class CompanySchema(BaseModel):
    id: str
    user_id: str
    name: str
    email: str
    description: str | None = None
    industry: str | None = None
    location: str | None = None
    tagline: str | None = None
    website: str | None = None
    contact_number: str | None = None
    founded_at: datetime | None = None
    employee_count: int | None = None
    services: list[str] = Field(default_factory=list)
    technologies_used: list[str] = Field(default_factory=list)
    specializations: list[str] = Field(default_factory=list)
    cost_range: str | None = None
    delivery_duration: str | None = None
    linkedin_url: str | None = None
    twitter_url: str | None = None
    logo_url: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_company(cls, company: Company) -> CompanySchema:
        return cls(**company.to_dict())


# ---------------------------------------------------------------------------
# Clients
# ---------------------------------------------------------------------------


class ClientCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., min_length=3, max_length=320)
    description: str = Field(..., min_length=1, max_length=5000)
    bio: str | None = None
    contact_number: str | None = None
    profile_pic_url: str | None = None

    @field_validator("name", "email", "description")
    @classmethod
    def validate_required(cls, v: str) -> str:
        return _strip_required(v)


class ClientUpdateRequest(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=200)
    email: str | None = Field(None, min_length=3, max_length=320)
    description: str | None = Field(None, min_length=1, max_length=5000)
    bio: str | None = None
    contact_number: str | None = None
    profile_pic_url: str | None = None
    status: ClientStatus | None = None

    def changes(self) -> dict[str, Any]:
        """Fields set in the request; null for a required column means unchanged."""
        data = self.model_dump(exclude_unset=True)
        required = ("name", "email", "description", "status")
        return {k: v for k, v in data.items() if v is not None or k not in required}


class ClientSchema(BaseModel):
    id: str
    user_id: str
    name: str
    email: str
    description: str
    bio: str | None = None
    contact_number: str | None = None
    profile_pic_url: str | None = None
    status: ClientStatus
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_client(cls, client: Client) -> ClientSchema:
        return cls(
            id=client.id,
            user_id=client.user_id,
            name=client.name,
            email=client.email,
            description=client.description,
            bio=client.bio,
            contact_number=client.contact_number,
            profile_pic_url=client.profile_pic_url,
            status=client.status,
            created_at=client.created_at,
            updated_at=client.updated_at,
        )


# ---------------------------------------------------------------------------
# Interests
# ---------------------------------------------------------------------------


class InterestCreateRequest(BaseModel):
    client_id: str = Field(..., min_length=1)
    message: Optional[str] = Field(None, max_length=2000)


class InterestStatusRequest(BaseModel):
    status: InterestStatus


class InterestSchema(BaseModel):
    id: str
    client_id: str
    company_id: str
    message: str | None = None
    status: InterestStatus
    is_read: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None
    company: dict[str, Any] | None = None
    client: dict[str, Any] | None = None

    @classmethod
    def from_interest(cls, interest: Interest) -> InterestSchema:
        return cls(
            id=interest.id,
            client_id=interest.client_id,
            company_id=interest.company_id,
            message=interest.message,
            status=interest.status,
            is_read=interest.is_read,
            created_at=interest.created_at,
            updated_at=interest.updated_at,
            company=interest.company,
            client=interest.client,
        )


class UnreadCountResponse(BaseModel):
    count: int = Field(..., ge=0)
