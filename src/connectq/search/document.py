"""
Company document and metadata builders.

A company is embedded as a single short natural-language document rather
than as several chunks: multi-chunk matching inflated scores for
companies with long profiles.

Usage:
    from connectq.search.document import build_document, build_metadata

    text = build_document(company)
    metadata = build_metadata(company)
"""

from datetime import datetime
from typing import Any, Iterable, Optional

from connectq.config import DEFAULT_INDUSTRY
from connectq.core import Company


def _clean(value: Optional[str]) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _join_items(items: Optional[Iterable[Any]]) -> str:
    if not items:
        return ""
    return ", ".join(s for s in (_clean(item) for item in items) if s)


def build_document(company: Company) -> str:
    """
    Render a company as one natural-language document for embedding.

    Clauses appear in a fixed order (identity, location, description,
    services, technologies, specializations, tagline, budget/timeline)
    and are joined with ``". "``. Missing or blank fields are skipped.

    Args:
        company: Company to describe. Only ``name`` is expected to be set.

    Returns:
        Document text. Never raises.

    Example:
        >>> build_document(Company(id="1", user_id="u", name="Acme", email="a@b.c"))
        'Acme is a technology company'
    """
    clauses: list[str] = []

    name = _clean(company.name)
    if name:
        industry = _clean(company.industry) or DEFAULT_INDUSTRY
        clauses.append(f"{name} is a {industry} company")

    location = _clean(company.location)
    if location:
        clauses.append(f"Located in {location}")

    description = _clean(company.description)
    if description:
        clauses.append(description)

    for label, items in (
        ("Services", company.services),
        ("Technologies", company.technologies_used),
        ("Specializations", company.specializations),
    ):
        joined = _join_items(items)
        if joined:
            clauses.append(f"{label}: {joined}")

    tagline = _clean(company.tagline)
    if tagline:
        clauses.append(tagline)

    terms = []
    cost_range = _clean(company.cost_range)
    if cost_range:
        terms.append(f"Budget range: {cost_range}")
    delivery = _clean(company.delivery_duration)
    if delivery:
        terms.append(f"Typical delivery: {delivery}")
    if terms:
        clauses.append(", ".join(terms))

    # Free-text fields may already end with a period.
    normalised = [clause.rstrip(". ") for clause in clauses]
    return ". ".join(clause for clause in normalised if clause)


def build_metadata(company: Company) -> dict[str, str | int]:
    """
    Flatten a company into scalar metadata for the vector index.

    Arrays are joined with ``", "``, missing values become ``""`` and
    ``employee_count`` is always an int. No value is ever None, since
    the index rejects null metadata.
    """
    metadata: dict[str, str | int] = {}
    for key, value in company.to_dict().items():
        if key == "employee_count":
            metadata[key] = _to_int(value)
        elif isinstance(value, list):
            metadata[key] = _join_items(value)
        elif value is None:
            metadata[key] = ""
        elif isinstance(value, datetime):
            metadata[key] = value.isoformat()
        else:
            metadata[key] = str(value)
    return metadata


def _to_int(value: Any) -> int:
    if value is None or isinstance(value, bool):
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0
