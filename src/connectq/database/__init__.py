"""Database module: SQLite marketplace store and ChromaDB vector index.

This module provides the storage layer:
    - UserRepository, CompanyRepository, ClientRepository,
      InterestRepository: SQLite system of record
    - VectorIndexClient: company embeddings and similarity queries

Usage:
    from connectq.database import CompanyRepository, VectorIndexClient

    companies = CompanyRepository()
    index = VectorIndexClient()
    hits = index.query(query_vector, top_k=10)
    rows = companies.get_many(hit.id for hit in hits)
"""

from connectq.database.registry import (
    ClientRepository,
    CompanyRepository,
    InterestRepository,
    UserRepository,
)
from connectq.database.vector import VectorIndexClient

__all__ = [
    # Relational store
    "UserRepository",
    "CompanyRepository",
    "ClientRepository",
    "InterestRepository",
    # Vector index
    "VectorIndexClient",
]
