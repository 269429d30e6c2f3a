"""Core data types for ConnectQ.

This module defines the domain objects used throughout the package:
    - User, Company, Client, Interest: relational marketplace entities
    - VectorRecord, VectorHit, IndexStats: vector index payloads
    - SearchMatch, SearchOutcome, EmbedResult: orchestrator results

Design notes:
    - Dataclasses are used for simplicity (no runtime validation); request
      validation lives in the API schemas
    - Company is the only entity projected into the vector index
    - Status enums subclass str so they serialise as plain strings
"""

from dataclasses import dataclass, field, fields
from datetime import datetime
from enum import Enum
from typing import Any, Optional


class UserRole(str, Enum):
    """Marketplace side a user signed up for."""

    CLIENT = "client"
    COMPANY = "company"


class ClientStatus(str, Enum):
    """Lifecycle of a client's project request."""

    OPEN = "open"
    MATCHED = "matched"
    CLOSED = "closed"


class InterestStatus(str, Enum):
    """Client's response to a company's expression of interest."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


@dataclass
class User:
    """A marketplace account. Credentials are handled outside this package."""

    id: str
    email: str
    name: str
    role: UserRole
    created_at: Optional[datetime] = None


@dataclass
class Company:
    """A service provider profile.

    At most one Company exists per owning user. Array-valued fields are
    stored as JSON text in SQLite and surface here as lists.

    Attributes:
        id: Unique identifier (UUID hex); also the vector record id
        user_id: Owning user
        name: Display name (required)
        email: Contact email (required)
        services: Offered services, e.g. ["web development", "mobile apps"]
        technologies_used: Stack keywords, e.g. ["React", "Django"]
        specializations: Niche focus areas, e.g. ["healthcare"]
        cost_range: Free text, e.g. "$5k-$20k"
        delivery_duration: Free text, e.g. "4-8 weeks"
    """

    id: str
    user_id: str
    name: str
    email: str
    description: Optional[str] = None
    industry: Optional[str] = None
    location: Optional[str] = None
    tagline: Optional[str] = None
    website: Optional[str] = None
    contact_number: Optional[str] = None
    founded_at: Optional[datetime] = None
    employee_count: Optional[int] = None
    services: list[str] = field(default_factory=list)
    technologies_used: list[str] = field(default_factory=list)
    specializations: list[str] = field(default_factory=list)
    cost_range: Optional[str] = None
    delivery_duration: Optional[str] = None
    linkedin_url: Optional[str] = None
    twitter_url: Optional[str] = None
    logo_url: Optional[str] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly dict (datetimes as ISO strings)."""
        data: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, datetime):
                value = value.isoformat()
            elif isinstance(value, list):
                value = list(value)
            data[f.name] = value
        return data


# Field names in declaration order, used to flatten search matches.
COMPANY_FIELDS: tuple[str, ...] = tuple(f.name for f in fields(Company))


@dataclass
class Client:
    """A project owner's profile and free-text project request."""

    id: str
    user_id: str
    name: str
    email: str
    description: str
    bio: Optional[str] = None
    contact_number: Optional[str] = None
    profile_pic_url: Optional[str] = None
    status: ClientStatus = ClientStatus.OPEN
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class Interest:
    """A company's expression of interest in a client's request.

    ``company`` and ``client`` carry joined summaries when the interest is
    loaded for a notification listing; they are None otherwise.
    """

    id: str
    client_id: str
    company_id: str
    message: Optional[str] = None
    status: InterestStatus = InterestStatus.PENDING
    is_read: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    company: Optional[dict[str, Any]] = None
    client: Optional[dict[str, Any]] = None


@dataclass
class VectorRecord:
    """One company's entry in the vector index.

    Attributes:
        id: Company id (the index key; upsert replaces in place)
        values: Embedding vector
        metadata: Flat scalar projection of the company (no None values)
        document: Text the vector was computed from
    """

    id: str
    values: list[float]
    metadata: dict[str, Any]
    document: Optional[str] = None


@dataclass
class VectorHit:
    """A nearest-neighbour hit returned by the vector index.

    ``score`` is cosine similarity normalised to [0.0, 1.0].
    """

    id: str
    score: float
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class IndexStats:
    """Summary of the vector index contents."""

    count: int
    collection: str
    location: str


@dataclass
class SearchMatch:
    """A vector hit joined back to its relational company row.

    ``company`` is None when the hit's id no longer exists relationally
    (an orphaned vector).
    """

    id: str
    score: float
    company: Optional[Company] = None

    @property
    def is_orphan(self) -> bool:
        return self.company is None

    def to_dict(self) -> dict[str, Any]:
        """Flatten to ``{id, score, ...company fields}``.

        Orphans carry every company field as None.
        """
        if self.company is not None:
            data = self.company.to_dict()
        else:
            data = {name: None for name in COMPANY_FIELDS}
        data["id"] = self.id
        data["score"] = self.score
        return data


@dataclass
class SearchOutcome:
    """Result of ``SearchOrchestrator.search``.

    Failures are reported with ``success=False`` and an empty match list.
    """

    matches: list[SearchMatch]
    message: str
    success: bool = True

    @property
    def count(self) -> int:
        return len(self.matches)


@dataclass
class EmbedResult:
    """Result of an embed, re-embed, or removal operation."""

    success: bool
    message: str
    count: int = 0
