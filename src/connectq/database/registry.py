"""
SQLite relational store for the ConnectQ marketplace.

This module is the system of record for users, companies, clients, and
interests. The vector index is a derived projection of the ``companies``
table and never the other way round.

All repositories share one database file. The schema is created with
``CREATE TABLE IF NOT EXISTS`` on construction, so repeated
initialisation is safe.

Usage:
    from connectq.database import CompanyRepository

    companies = CompanyRepository()
    company = companies.create(user_id, name="Acme", email="hi@acme.io")
    rows = companies.get_many([company.id])
"""

import json
import sqlite3
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Optional

from connectq.config import get_settings
from connectq.core import (
    Client,
    ClientStatus,
    Company,
    ConflictError,
    DatabaseError,
    Interest,
    InterestStatus,
    NotFoundError,
    User,
    UserRole,
    get_logger,
)

logger = get_logger(__name__)

_SCHEMA = """
    CREATE TABLE IF NOT EXISTS users (
        id TEXT PRIMARY KEY,
        email TEXT NOT NULL UNIQUE,
        name TEXT NOT NULL,
        role TEXT NOT NULL CHECK (role IN ('client', 'company')),
        created_at TEXT NOT NULL
    );

    CREATE TABLE IF NOT EXISTS companies (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL UNIQUE REFERENCES users(id) ON DELETE CASCADE,
        name TEXT NOT NULL,
        email TEXT NOT NULL,
        description TEXT,
        industry TEXT,
        location TEXT,
        tagline TEXT,
        website TEXT,
        contact_number TEXT,
        founded_at TEXT,
        employee_count INTEGER,
        services TEXT NOT NULL DEFAULT '[]',
        technologies_used TEXT NOT NULL DEFAULT '[]',
        specializations TEXT NOT NULL DEFAULT '[]',
        cost_range TEXT,
        delivery_duration TEXT,
        linkedin_url TEXT,
        twitter_url TEXT,
        logo_url TEXT,
        created_at TEXT NOT NULL
    );

    CREATE TABLE IF NOT EXISTS clients (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL UNIQUE REFERENCES users(id) ON DELETE CASCADE,
        name TEXT NOT NULL,
        email TEXT NOT NULL,
        description TEXT NOT NULL,
        bio TEXT,
        contact_number TEXT,
        profile_pic_url TEXT,
        status TEXT NOT NULL DEFAULT 'open'
            CHECK (status IN ('open', 'matched', 'closed')),
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    );

    CREATE TABLE IF NOT EXISTS interests (
        id TEXT PRIMARY KEY,
        client_id TEXT NOT NULL REFERENCES clients(id) ON DELETE CASCADE,
        company_id TEXT NOT NULL REFERENCES companies(id) ON DELETE CASCADE,
        message TEXT,
        status TEXT NOT NULL DEFAULT 'pending'
            CHECK (status IN ('pending', 'accepted', 'rejected')),
        is_read INTEGER NOT NULL DEFAULT 0,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL,
        UNIQUE (client_id, company_id)
    );
"""

# Columns a caller may set on create/update. id, user_id and timestamps
# are managed by the repositories.
COMPANY_COLUMNS = (
    "name",
    "email",
    "description",
    "industry",
    "location",
    "tagline",
    "website",
    "contact_number",
    "founded_at",
    "employee_count",
    "services",
    "technologies_used",
    "specializations",
    "cost_range",
    "delivery_duration",
    "linkedin_url",
    "twitter_url",
    "logo_url",
)
_COMPANY_ARRAY_COLUMNS = ("services", "technologies_used", "specializations")

CLIENT_COLUMNS = (
    "name",
    "email",
    "description",
    "bio",
    "contact_number",
    "profile_pic_url",
    "status",
)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _new_id() -> str:
    return uuid.uuid4().hex


def _written(entity: str, entity_id: str, row: Any) -> Any:
    """Return a freshly inserted row, or raise if it cannot be read back."""
    if row is None:
        raise DatabaseError(
            f"Failed to read back new {entity}",
            details=f"{entity} {entity_id} missing after insert",
        )
    return row


def _parse_datetime(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    return datetime.fromisoformat(value)


def _parse_array(value: Optional[str]) -> list[str]:
    if not value:
        return []
    try:
        items = json.loads(value)
    except json.JSONDecodeError:
        logger.warning("Unparseable array column value: %r", value[:80])
        return []
    return [str(item) for item in items if item is not None]


class _SQLiteStore:
    """Shared connection handling and schema bootstrap."""

    def __init__(self, db_path: Optional[str] = None) -> None:
        settings = get_settings()
        self._db_path = db_path or settings.database.path

        Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)
        self._create_tables()

        logger.debug("%s initialised: %s", type(self).__name__, self._db_path)

    @property
    def db_path(self) -> str:
        return self._db_path

    def _connect(self) -> sqlite3.Connection:
        """Create a new connection with row factory and FK enforcement."""
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def _create_tables(self) -> None:
        try:
            with self._connect() as conn:
                conn.executescript(_SCHEMA)
        except sqlite3.Error as e:
            raise DatabaseError(
                "Failed to create marketplace tables",
                details=str(e),
            ) from e

    @staticmethod
    def _placeholders(count: int) -> str:
        return ", ".join("?" for _ in range(count))


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class UserRepository(_SQLiteStore):
    """Marketplace accounts (no credentials)."""

    def create(self, email: str, name: str, role: UserRole | str) -> User:
        """
        Register a user.

        Raises:
            ConflictError: If the email is already registered.
            DatabaseError: If the insert fails for another reason.
        """
        user = User(
            id=_new_id(),
            email=email.strip().lower(),
            name=name.strip(),
            role=UserRole(role),
            created_at=datetime.now(timezone.utc),
        )
        sql = "INSERT INTO users (id, email, name, role, created_at) VALUES (?, ?, ?, ?, ?)"
        try:
            with self._connect() as conn:
                conn.execute(
                    sql,
                    (user.id, user.email, user.name, user.role.value, user.created_at.isoformat()),
                )
        except sqlite3.IntegrityError as e:
            raise ConflictError(
                f"Email already registered: {user.email}",
                details=str(e),
            ) from e
        except sqlite3.Error as e:
            raise DatabaseError("Failed to create user", details=str(e)) from e

        logger.info("Registered %s user %s", user.role.value, user.id[:8])
        return user

    def get(self, user_id: str) -> Optional[User]:
        return self._fetch_one("SELECT * FROM users WHERE id = ?", (user_id,))

    def get_by_email(self, email: str) -> Optional[User]:
        return self._fetch_one(
            "SELECT * FROM users WHERE email = ?", (email.strip().lower(),)
        )

    def _fetch_one(self, sql: str, params: tuple) -> Optional[User]:
        try:
            with self._connect() as conn:
                row = conn.execute(sql, params).fetchone()
        except sqlite3.Error as e:
            raise DatabaseError("Failed to retrieve user", details=str(e)) from e
        if row is None:
            return None
        return User(
            id=row["id"],
            email=row["email"],
            name=row["name"],
            role=UserRole(row["role"]),
            created_at=_parse_datetime(row["created_at"]),
        )


# ---------------------------------------------------------------------------
# Companies
# ---------------------------------------------------------------------------


class CompanyRepository(_SQLiteStore):
    """
    Company profiles: the source of truth for the vector index.

    Array-valued columns are stored as JSON text. Every mutating method
    returns the affected row so callers can publish change events.
    """

    def create(self, user_id: str, name: str, email: str, **fields: Any) -> Company:
        """
        Create the company profile for a user.

        Args:
            user_id: Owning user. Each user may own at most one company.
            name: Company name.
            email: Contact email.
            **fields: Any other column from ``COMPANY_COLUMNS``.

        Raises:
            ConflictError: If the user already owns a company.
            NotFoundError: If the user does not exist.
            DatabaseError: If the insert fails for another reason.
        """
        values = self._encode({"name": name, "email": email, **fields})
        values["id"] = _new_id()
        values["user_id"] = user_id
        values["created_at"] = _now()

        columns = list(values)
        sql = (
            f"INSERT INTO companies ({', '.join(columns)}) "
            f"VALUES ({self._placeholders(len(columns))})"
        )
        try:
            with self._connect() as conn:
                conn.execute(sql, [values[c] for c in columns])
        except sqlite3.IntegrityError as e:
            if "FOREIGN KEY" in str(e):
                raise NotFoundError("user", user_id) from e
            raise ConflictError(
                "Company profile already exists for this user",
                details=str(e),
            ) from e
        except sqlite3.Error as e:
            raise DatabaseError("Failed to create company", details=str(e)) from e

        logger.info("Created company %s (%s)", values["id"][:8], name)
        return _written("company", values["id"], self.get(values["id"]))

    def get(self, company_id: str) -> Optional[Company]:
        """Return the company or None if not found."""
        rows = self._fetch("SELECT * FROM companies WHERE id = ?", (company_id,))
        return rows[0] if rows else None

    def get_by_user(self, user_id: str) -> Optional[Company]:
        rows = self._fetch("SELECT * FROM companies WHERE user_id = ?", (user_id,))
        return rows[0] if rows else None

    def list_all(self) -> list[Company]:
        """Return every company, oldest first."""
        return self._fetch("SELECT * FROM companies ORDER BY created_at", ())

    def get_many(self, company_ids: Iterable[str]) -> list[Company]:
        """
        Fetch several companies in one ``WHERE id IN (...)`` query.

        Unknown ids are skipped; result order is unspecified.
        """
        ids = list(dict.fromkeys(company_ids))
        if not ids:
            return []
        sql = f"SELECT * FROM companies WHERE id IN ({self._placeholders(len(ids))})"
        return self._fetch(sql, tuple(ids))

    def update(self, company_id: str, **changes: Any) -> Optional[Company]:
        """
        Apply a partial update.

        Returns:
            The updated company, or None if it does not exist.
        """
        values = self._encode(changes)
        if not values:
            return self.get(company_id)

        assignments = ", ".join(f"{column} = ?" for column in values)
        sql = f"UPDATE companies SET {assignments} WHERE id = ?"
        try:
            with self._connect() as conn:
                cursor = conn.execute(sql, [*values.values(), company_id])
                updated = cursor.rowcount > 0
        except sqlite3.Error as e:
            raise DatabaseError("Failed to update company", details=str(e)) from e

        if not updated:
            return None
        logger.info("Updated company %s (%s)", company_id[:8], ", ".join(values))
        return self.get(company_id)

    def delete(self, company_id: str) -> bool:
        """Delete a company. Returns True if a row was removed."""
        try:
            with self._connect() as conn:
                cursor = conn.execute("DELETE FROM companies WHERE id = ?", (company_id,))
                removed = cursor.rowcount > 0
        except sqlite3.Error as e:
            raise DatabaseError("Failed to delete company", details=str(e)) from e

        if removed:
            logger.info("Deleted company %s", company_id[:8])
        else:
            logger.warning("Company not found for deletion: %s", company_id)
        return removed

    def count(self) -> int:
        try:
            with self._connect() as conn:
                row = conn.execute("SELECT COUNT(*) FROM companies").fetchone()
        except sqlite3.Error as e:
            raise DatabaseError("Failed to count companies", details=str(e)) from e
        return row[0]

    def is_owner(self, company_id: str, user_id: str) -> bool:
        company = self.get(company_id)
        return company is not None and company.user_id == user_id

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _encode(fields: dict[str, Any]) -> dict[str, Any]:
        """Validate column names and convert values to SQLite types."""
        unknown = set(fields) - set(COMPANY_COLUMNS)
        if unknown:
            raise DatabaseError(
                "Unknown company field(s)",
                details=", ".join(sorted(unknown)),
            )

        encoded: dict[str, Any] = {}
        for column, value in fields.items():
            if column in _COMPANY_ARRAY_COLUMNS:
                value = json.dumps([str(v) for v in (value or []) if v is not None])
            elif isinstance(value, datetime):
                value = value.isoformat()
            encoded[column] = value
        return encoded

    def _fetch(self, sql: str, params: tuple) -> list[Company]:
        try:
            with self._connect() as conn:
                rows = conn.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            raise DatabaseError("Failed to retrieve companies", details=str(e)) from e
        return [self._row_to_company(row) for row in rows]

    @staticmethod
    def _row_to_company(row: sqlite3.Row) -> Company:
        return Company(
            id=row["id"],
            user_id=row["user_id"],
            name=row["name"],
            email=row["email"],
            description=row["description"],
            industry=row["industry"],
            location=row["location"],
            tagline=row["tagline"],
            website=row["website"],
            contact_number=row["contact_number"],
            founded_at=_parse_datetime(row["founded_at"]),
            employee_count=row["employee_count"],
            services=_parse_array(row["services"]),
            technologies_used=_parse_array(row["technologies_used"]),
            specializations=_parse_array(row["specializations"]),
            cost_range=row["cost_range"],
            delivery_duration=row["delivery_duration"],
            linkedin_url=row["linkedin_url"],
            twitter_url=row["twitter_url"],
            logo_url=row["logo_url"],
            created_at=_parse_datetime(row["created_at"]),
        )


# ---------------------------------------------------------------------------
# Clients
# ---------------------------------------------------------------------------


class ClientRepository(_SQLiteStore):
    """Client profiles and their open project requests."""

    def create(
        self,
        user_id: str,
        name: str,
        email: str,
        description: str,
        **fields: Any,
    ) -> Client:
        """
        Create the client profile for a user.

        Raises:
            ConflictError: If the user already has a client profile.
            NotFoundError: If the user does not exist.
        """
        values = self._encode(
            {"name": name, "email": email, "description": description, **fields}
        )
        now = _now()
        values.update(id=_new_id(), user_id=user_id, created_at=now, updated_at=now)

        columns = list(values)
        sql = (
            f"INSERT INTO clients ({', '.join(columns)}) "
            f"VALUES ({self._placeholders(len(columns))})"
        )
        try:
            with self._connect() as conn:
                conn.execute(sql, [values[c] for c in columns])
        except sqlite3.IntegrityError as e:
            if "FOREIGN KEY" in str(e):
                raise NotFoundError("user", user_id) from e
            raise ConflictError(
                "Client profile already exists for this user",
                details=str(e),
            ) from e
        except sqlite3.Error as e:
            raise DatabaseError("Failed to create client", details=str(e)) from e

        logger.info("Created client %s", values["id"][:8])
        return _written("client", values["id"], self.get(values["id"]))

    def get(self, client_id: str) -> Optional[Client]:
        rows = self._fetch("SELECT * FROM clients WHERE id = ?", (client_id,))
        return rows[0] if rows else None

    def get_by_user(self, user_id: str) -> Optional[Client]:
        rows = self._fetch("SELECT * FROM clients WHERE user_id = ?", (user_id,))
        return rows[0] if rows else None

    def list_by_status(self, status: ClientStatus | str) -> list[Client]:
        return self._fetch(
            "SELECT * FROM clients WHERE status = ? ORDER BY created_at DESC",
            (ClientStatus(status).value,),
        )

    def list_open(self) -> list[Client]:
        """Open project requests, newest first (for companies to browse)."""
        return self.list_by_status(ClientStatus.OPEN)

    def update(self, client_id: str, **changes: Any) -> Optional[Client]:
        """Apply a partial update; bumps ``updated_at``."""
        values = self._encode(changes)
        values["updated_at"] = _now()

        assignments = ", ".join(f"{column} = ?" for column in values)
        sql = f"UPDATE clients SET {assignments} WHERE id = ?"
        try:
            with self._connect() as conn:
                cursor = conn.execute(sql, [*values.values(), client_id])
                updated = cursor.rowcount > 0
        except sqlite3.Error as e:
            raise DatabaseError("Failed to update client", details=str(e)) from e
        return self.get(client_id) if updated else None

    def delete(self, client_id: str) -> bool:
        try:
            with self._connect() as conn:
                cursor = conn.execute("DELETE FROM clients WHERE id = ?", (client_id,))
                return cursor.rowcount > 0
        except sqlite3.Error as e:
            raise DatabaseError("Failed to delete client", details=str(e)) from e

    def is_owner(self, client_id: str, user_id: str) -> bool:
        client = self.get(client_id)
        return client is not None and client.user_id == user_id

    @staticmethod
    def _encode(fields: dict[str, Any]) -> dict[str, Any]:
        unknown = set(fields) - set(CLIENT_COLUMNS)
        if unknown:
            raise DatabaseError(
                "Unknown client field(s)",
                details=", ".join(sorted(unknown)),
            )
        encoded = dict(fields)
        if "status" in encoded and encoded["status"] is not None:
            encoded["status"] = ClientStatus(encoded["status"]).value
        return encoded

    def _fetch(self, sql: str, params: tuple) -> list[Client]:
        try:
            with self._connect() as conn:
                rows = conn.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            raise DatabaseError("Failed to retrieve clients", details=str(e)) from e
        return [
            Client(
                id=row["id"],
                user_id=row["user_id"],
                name=row["name"],
                email=row["email"],
                description=row["description"],
                bio=row["bio"],
                contact_number=row["contact_number"],
                profile_pic_url=row["profile_pic_url"],
                status=ClientStatus(row["status"]),
                created_at=_parse_datetime(row["created_at"]),
                updated_at=_parse_datetime(row["updated_at"]),
            )
            for row in rows
        ]


# ---------------------------------------------------------------------------
# Interests
# ---------------------------------------------------------------------------


class InterestRepository(_SQLiteStore):
    """
    Interest tracking between companies and clients.

    A company expresses interest in a client's request once; the client
    sees it as an unread notification and may accept or reject it.
    """

    def create(
        self,
        client_id: str,
        company_id: str,
        message: Optional[str] = None,
    ) -> Interest:
        """
        Record a company's interest in a client.

        Raises:
            ConflictError: If this company already expressed interest.
            NotFoundError: If the client or company does not exist.
        """
        now = _now()
        interest_id = _new_id()
        sql = """
            INSERT INTO interests (id, client_id, company_id, message,
                                   status, is_read, created_at, updated_at)
            VALUES (?, ?, ?, ?, 'pending', 0, ?, ?)
        """
        try:
            with self._connect() as conn:
                conn.execute(sql, (interest_id, client_id, company_id, message, now, now))
        except sqlite3.IntegrityError as e:
            if "FOREIGN KEY" in str(e):
                raise NotFoundError("client", client_id, details=str(e)) from e
            raise ConflictError(
                "Interest already expressed in this client",
                details=str(e),
            ) from e
        except sqlite3.Error as e:
            raise DatabaseError("Failed to create interest", details=str(e)) from e

        logger.info(
            "Company %s expressed interest in client %s",
            company_id[:8],
            client_id[:8],
        )
        return _written("interest", interest_id, self.get(interest_id))

    def get(self, interest_id: str) -> Optional[Interest]:
        try:
            with self._connect() as conn:
                row = conn.execute(
                    "SELECT * FROM interests WHERE id = ?", (interest_id,)
                ).fetchone()
        except sqlite3.Error as e:
            raise DatabaseError("Failed to retrieve interest", details=str(e)) from e
        return self._row_to_interest(row) if row is not None else None

    def list_for_client(self, client_id: str) -> list[Interest]:
        """Notifications for a client, newest first, with company summaries."""
        sql = """
            SELECT i.*,
                   c.id AS co_id, c.name AS co_name, c.email AS co_email,
                   c.logo_url AS co_logo_url, c.industry AS co_industry,
                   c.location AS co_location
            FROM interests i
            JOIN companies c ON c.id = i.company_id
            WHERE i.client_id = ?
            ORDER BY i.created_at DESC
        """
        rows = self._fetch_rows(sql, (client_id,))
        interests = []
        for row in rows:
            interest = self._row_to_interest(row)
            interest.company = {
                "id": row["co_id"],
                "name": row["co_name"],
                "email": row["co_email"],
                "logo_url": row["co_logo_url"],
                "industry": row["co_industry"],
                "location": row["co_location"],
            }
            interests.append(interest)
        return interests

    def list_for_company(self, company_id: str) -> list[Interest]:
        """Interests sent by a company, newest first, with client summaries."""
        sql = """
            SELECT i.*,
                   cl.id AS cl_id, cl.name AS cl_name, cl.email AS cl_email,
                   cl.description AS cl_description,
                   cl.profile_pic_url AS cl_profile_pic_url,
                   cl.contact_number AS cl_contact_number, cl.bio AS cl_bio
            FROM interests i
            JOIN clients cl ON cl.id = i.client_id
            WHERE i.company_id = ?
            ORDER BY i.created_at DESC
        """
        rows = self._fetch_rows(sql, (company_id,))
        interests = []
        for row in rows:
            interest = self._row_to_interest(row)
            interest.client = {
                "id": row["cl_id"],
                "name": row["cl_name"],
                "email": row["cl_email"],
                "description": row["cl_description"],
                "profile_pic_url": row["cl_profile_pic_url"],
                "contact_number": row["cl_contact_number"],
                "bio": row["cl_bio"],
            }
            interests.append(interest)
        return interests

    def unread_count(self, client_id: str) -> int:
        sql = "SELECT COUNT(*) FROM interests WHERE client_id = ? AND is_read = 0"
        rows = self._fetch_rows(sql, (client_id,))
        return rows[0][0]

    def mark_read(self, interest_id: str) -> Optional[Interest]:
        return self._set(interest_id, "is_read = 1")

    def update_status(
        self,
        interest_id: str,
        status: InterestStatus | str,
    ) -> Optional[Interest]:
        return self._set(interest_id, "status = ?", InterestStatus(status).value)

    def delete(self, interest_id: str) -> bool:
        try:
            with self._connect() as conn:
                cursor = conn.execute("DELETE FROM interests WHERE id = ?", (interest_id,))
                return cursor.rowcount > 0
        except sqlite3.Error as e:
            raise DatabaseError("Failed to delete interest", details=str(e)) from e

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _set(self, interest_id: str, assignment: str, *params: Any) -> Optional[Interest]:
        sql = f"UPDATE interests SET {assignment}, updated_at = ? WHERE id = ?"
        try:
            with self._connect() as conn:
                cursor = conn.execute(sql, (*params, _now(), interest_id))
                updated = cursor.rowcount > 0
        except sqlite3.Error as e:
            raise DatabaseError("Failed to update interest", details=str(e)) from e
        return self.get(interest_id) if updated else None

    def _fetch_rows(self, sql: str, params: tuple) -> list[sqlite3.Row]:
        try:
            with self._connect() as conn:
                return conn.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            raise DatabaseError("Failed to retrieve interests", details=str(e)) from e

    @staticmethod
    def _row_to_interest(row: sqlite3.Row) -> Interest:
        return Interest(
            id=row["id"],
            client_id=row["client_id"],
            company_id=row["company_id"],
            message=row["message"],
            status=InterestStatus(row["status"]),
            is_read=bool(row["is_read"]),
            created_at=_parse_datetime(row["created_at"]),
            updated_at=_parse_datetime(row["updated_at"]),
        )
