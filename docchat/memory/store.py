import logging
import uuid
from dataclasses import dataclass
from typing import Dict, List, Optional

from qdrant_client.http.models import PointStruct

from docchat.config import TOP_K
from docchat.errors import EmptyQueryError, StoreError
from docchat.memory.qdrant_client import QdrantVectorDB


logger = logging.getLogger(__name__)

# Fixed namespace so the same chunk id always maps to the same point id
_POINT_NAMESPACE = uuid.UUID("5b0f3f1e-6d57-4a0a-9a53-0c1d0c7e2a41")


def point_id(chunk_id: str) -> str:
    return str(uuid.uuid5(_POINT_NAMESPACE, chunk_id))


@dataclass
class RetrievedChunk:

    text: str
    chunk_id: Optional[str]
    file_name: Optional[str]
    chunk_index: Optional[int]
    total_chunks: Optional[int]
    similarity_score: float


class ChunkStore:
    """
    Handle on one Qdrant collection.

    Embedding happens inside the handle: callers hand over ids, texts
    and metadata and get ranked chunks back for a text query. Writes
    are upserts keyed by chunk id, so re-adding an id replaces it.
    """

    def __init__(self, db: QdrantVectorDB, embedder):

        if embedder.get_dimension() != db.dim:
            raise ValueError(
                f"Embedder dimension {embedder.get_dimension()} does not "
                f"match collection dimension {db.dim}"
            )

        self._db = db
        self._embedder = embedder

    @property
    def collection(self) -> str:
        return self._db.collection

    # ============================================================
    # ADD
    # ============================================================

    def add(self, ids: List[str], texts: List[str], metadatas: List[Dict]):

        if not texts:
            raise StoreError("No documents to add")

        if len(ids) != len(texts) or len(metadatas) != len(texts):
            raise StoreError("IDs and documents length mismatch")

        try:

            embeddings = self._embedder.embed(texts)

            points = [
                PointStruct(
                    id=point_id(chunk_id),
                    vector=vector.tolist(),
                    payload={
                        **metadata,
                        "chunk_id": chunk_id,
                        "text": text,
                    },
                )
                for chunk_id, text, metadata, vector
                in zip(ids, texts, metadatas, embeddings)
            ]

            self._db.client.upsert(
                collection_name=self.collection,
                points=points,
                wait=True,
            )

        except Exception as e:

            logger.error(
                "Adding chunks failed",
                extra={
                    "collection": self.collection,
                    "chunks": len(texts),
                    "error": str(e),
                },
                exc_info=True,
            )

            raise StoreError(
                f"Failed to add documents to collection: {e}"
            ) from e

        logger.info(
            "Chunks added",
            extra={
                "collection": self.collection,
                "chunks": len(texts),
            },
        )

    # ============================================================
    # QUERY
    # ============================================================

    def query(self, query_text: str, k: int = TOP_K) -> List[RetrievedChunk]:

        if not query_text or not query_text.strip():
            raise EmptyQueryError("Query cannot be empty")

        try:

            embedding = self._embedder.embed([query_text])

            response = self._db.client.query_points(
                collection_name=self.collection,
                query=embedding[0].tolist(),
                limit=k,
                with_payload=True,
            )

        except Exception as e:

            logger.error(
                "Collection query failed",
                extra={
                    "collection": self.collection,
                    "error": str(e),
                },
                exc_info=True,
            )

            raise StoreError(
                f"Failed to query collection: {e}"
            ) from e

        results = []

        for hit in response.points:

            payload = hit.payload or {}

            results.append(
                RetrievedChunk(
                    text=payload.get("text", ""),
                    chunk_id=payload.get("chunk_id"),
                    file_name=payload.get("fileName"),
                    chunk_index=payload.get("chunkIndex"),
                    total_chunks=payload.get("totalChunks"),
                    similarity_score=float(hit.score),
                )
            )

        return results

    # ============================================================
    # STATS
    # ============================================================

    def count(self) -> int:

        return self._db.client.count(
            collection_name=self.collection,
            exact=True,
        ).count
