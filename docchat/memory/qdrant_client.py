import logging
from typing import Optional

from qdrant_client import QdrantClient

from qdrant_client.http.models import (
    Distance,
    VectorParams,
)

from docchat.config import (
    QDRANT_URL,
    QDRANT_API_KEY,
    QDRANT_TIMEOUT_SECONDS,
)

logger = logging.getLogger(__name__)


class QdrantVectorDB:
    """
    Qdrant connection bound to one collection.

    Owns collection bootstrap only; reads and writes go through
    ChunkStore. Pass ``client`` to reuse an existing QdrantClient
    (for example ``QdrantClient(":memory:")``).
    """

    def __init__(
        self,
        dim: int,
        collection: str,
        client: Optional[QdrantClient] = None,
    ):

        if dim <= 0:
            raise ValueError("Embedding dimension must be positive")

        self._dim = dim

        self.collection = collection

        self.client = client or QdrantClient(
            location=QDRANT_URL,
            api_key=QDRANT_API_KEY,
            timeout=QDRANT_TIMEOUT_SECONDS,
        )

        self._ensure_collection()

        logger.info(
            "Qdrant client initialized",
            extra={
                "collection": self.collection,
                "dimension": dim,
            },
        )

    @property
    def dim(self) -> int:
        return self._dim

    def _ensure_collection(self):
        """
        Ensures the collection exists with cosine distance.
        """

        if not self.client.collection_exists(self.collection):

            self.client.create_collection(
                collection_name=self.collection,
                vectors_config=VectorParams(
                    size=self._dim,
                    distance=Distance.COSINE,
                ),
            )

            logger.info(
                "Qdrant collection created",
                extra={"collection": self.collection},
            )
