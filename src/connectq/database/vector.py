"""
ChromaDB client wrapper for the company vector index.

The index holds one record per company, keyed by the company id, with a
flat scalar metadata projection of the profile. It is a derived copy of
the ``companies`` table and can be rebuilt from it at any time.

Usage:
    from connectq.database import VectorIndexClient

    index = VectorIndexClient()
    index.upsert(records)
    hits = index.query(query_vector, top_k=5)
"""

from typing import Any, Iterable, Optional

import chromadb

from connectq.config import get_settings
from connectq.core import IndexStats, VectorHit, VectorIndexError, VectorRecord, get_logger

logger = get_logger(__name__)


class VectorIndexClient:
    """
    Wrapper around a ChromaDB collection of company embeddings.

    A local ``PersistentClient`` is used by default. When ``host`` is
    given (or ``VECTOR_HOST`` is set) the collection is reached through
    an ``HttpClient`` instead. Cosine space is used in both cases.

    Example:
        >>> index = VectorIndexClient(chroma_path="/tmp/chroma")
        >>> index.upsert([VectorRecord(id="c1", values=vec, metadata={"name": "Acme"})])
        >>> index.query(vec, top_k=1)[0].id
        'c1'
    """

    def __init__(
        self,
        chroma_path: Optional[str] = None,
        collection_name: Optional[str] = None,
        host: Optional[str] = None,
        port: Optional[int] = None,
        batch_size: Optional[int] = None,
    ) -> None:
        """
        Initialise the client and get or create the collection.

        Args:
            chroma_path: Local storage directory. Defaults to
                ``settings.vector.path``.
            collection_name: Defaults to ``settings.vector.collection_name``.
            host: Remote ChromaDB host. Defaults to ``settings.vector.host``.
            port: Remote ChromaDB port. Defaults to ``settings.vector.port``.
            batch_size: Records per upsert request. Defaults to
                ``settings.vector.upsert_batch_size``.

        Raises:
            VectorIndexError: If the client or collection cannot be created.
        """
        settings = get_settings().vector
        self._collection_name = collection_name or settings.collection_name
        self._batch_size = batch_size or settings.upsert_batch_size
        host = host if host is not None else settings.host

        try:
            if host:
                port = port or settings.port
                self._client = chromadb.HttpClient(host=host, port=port)
                self._location = f"http://{host}:{port}"
            else:
                self._location = chroma_path or settings.path
                self._client = chromadb.PersistentClient(path=self._location)

            self._collection = self._client.get_or_create_collection(
                name=self._collection_name,
                metadata={"hnsw:space": "cosine"},
            )
            logger.debug(
                "VectorIndexClient initialised: %s (collection: %s, count: %d)",
                self._location,
                self._collection_name,
                self._collection.count(),
            )
        except Exception as e:
            raise VectorIndexError(
                "Failed to initialise vector index",
                details=str(e),
            ) from e

    # ------------------------------------------------------------------
    # Write operations
    # ------------------------------------------------------------------

    def upsert(self, records: list[VectorRecord]) -> int:
        """
        Insert or replace records in sequential chunks.

        Each chunk first deletes its ids and then adds the new records,
        so stale metadata keys from an earlier version of a company do
        not survive.

        Args:
            records: Records to write. An empty list is a no-op.

        Returns:
            Number of records written.

        Raises:
            VectorIndexError: If a chunk fails. Later chunks are not sent;
                earlier chunks stay written.
        """
        if not records:
            return 0

        total_chunks = (len(records) + self._batch_size - 1) // self._batch_size
        for chunk_number, start in enumerate(
            range(0, len(records), self._batch_size), start=1
        ):
            chunk = records[start : start + self._batch_size]
            ids = [record.id for record in chunk]
            kwargs: dict[str, Any] = {
                "ids": ids,
                "embeddings": [list(record.values) for record in chunk],
                "metadatas": [record.metadata for record in chunk],
            }
            if all(record.document is not None for record in chunk):
                kwargs["documents"] = [record.document for record in chunk]

            try:
                self._collection.delete(ids=ids)
                self._collection.add(**kwargs)
            except Exception as e:
                raise VectorIndexError(
                    f"Upsert failed on chunk {chunk_number}/{total_chunks}",
                    details=str(e),
                ) from e

            logger.debug(
                "Upserted chunk %d/%d (%d records)",
                chunk_number,
                total_chunks,
                len(chunk),
            )

        logger.info("Upserted %d vectors in %d chunk(s)", len(records), total_chunks)
        return len(records)

    def delete_one(self, record_id: str) -> None:
        """Delete a single record. Deleting an absent id is not an error."""
        self.delete_many([record_id])

    def delete_many(self, record_ids: Iterable[str]) -> None:
        """
        Delete records by id.

        Raises:
            VectorIndexError: If the delete request fails.
        """
        ids = list(record_ids)
        if not ids:
            return
        try:
            self._collection.delete(ids=ids)
        except Exception as e:
            raise VectorIndexError(
                f"Failed to delete {len(ids)} vector(s)",
                details=str(e),
            ) from e
        logger.debug("Deleted %d vector(s)", len(ids))

    # ------------------------------------------------------------------
    # Read operations
    # ------------------------------------------------------------------

    def query(self, vector: list[float], top_k: int = 10) -> list[VectorHit]:
        """
        Return the ``top_k`` nearest records, most similar first.

        Scores are ``1 - cosine_distance`` clamped to ``[0.0, 1.0]``.

        Raises:
            VectorIndexError: If the query fails.
        """
        try:
            count = self._collection.count()
            if count == 0:
                return []

            results = self._collection.query(
                query_embeddings=[list(vector)],
                n_results=min(top_k, count),
                include=["metadatas", "distances"],
            )
        except Exception as e:
            raise VectorIndexError("Vector query failed", details=str(e)) from e

        hits = []
        if results["ids"] and results["ids"][0]:
            metadatas = results.get("metadatas") or [[]]
            for i, record_id in enumerate(results["ids"][0]):
                distance = results["distances"][0][i]
                metadata = metadatas[0][i] if metadatas[0] else None
                hits.append(
                    VectorHit(
                        id=record_id,
                        score=max(0.0, min(1.0, 1.0 - distance)),
                        metadata=dict(metadata or {}),
                    )
                )

        logger.debug("Query returned %d hits", len(hits))
        return hits

    def list_ids(self) -> list[str]:
        """Return every record id in the collection."""
        try:
            results = self._collection.get(include=[])
        except Exception as e:
            raise VectorIndexError("Failed to list vector ids", details=str(e)) from e
        return list(results["ids"])

    def count(self) -> int:
        try:
            return self._collection.count()
        except Exception as e:
            raise VectorIndexError("Failed to count vectors", details=str(e)) from e

    def describe_stats(self) -> IndexStats:
        return IndexStats(
            count=self.count(),
            collection=self._collection_name,
            location=self._location,
        )
