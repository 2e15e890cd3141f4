# docchat/memory/embedder.py

"""
Embedding wrappers used inside the chunk store.

Architecture contract:
identifiers → store (embedder) → qdrant

Guarantees:
• Always returns numpy float32 array of shape (n, dimension)
• Always L2-normalized (cosine-ready)
• Batched requests
"""

import logging
import os
from typing import List, Optional

import numpy as np
from google import genai
from google.genai import types
from openai import OpenAI

from docchat.config import (
    EMBEDDING_PROVIDER,
    OPENAI_EMBEDDING_MODEL,
    GEMINI_EMBEDDING_MODEL,
    EMBEDDING_DIMENSIONS,
    EMBED_BATCH_SIZE,
)

logger = logging.getLogger(__name__)


class Embedder:
    """
    Production-safe embedding generator.

    Responsibilities:
    • Batch processing
    • Normalize embeddings

    Subclasses implement ``_embed_batch`` against one provider.
    """

    provider = ""

    # ============================================================
    # INITIALIZATION
    # ============================================================

    def __init__(self, model: str):

        if model not in EMBEDDING_DIMENSIONS:
            raise ValueError(f"Unsupported embedding model: {model}")

        self._model = model
        self._dimension = EMBEDDING_DIMENSIONS[model]

        logger.info(
            "Embedding model initialized",
            extra={
                "provider": self.provider,
                "model": self._model,
                "dimension": self._dimension,
            }
        )

    # ============================================================
    # PUBLIC API
    # ============================================================

    def embed(
        self,
        texts: List[str],
        batch_size: int = EMBED_BATCH_SIZE
    ) -> np.ndarray:

        if not texts:

            logger.warning("Empty embedding request")

            return np.empty(
                (0, self._dimension),
                dtype="float32"
            )

        total = len(texts)

        all_embeddings = []

        for start in range(0, total, batch_size):

            batch = texts[start:start + batch_size]

            batch_embeddings = np.array(
                self._embed_batch(batch),
                dtype="float32"
            )

            all_embeddings.append(normalize(batch_embeddings))

        embeddings = np.vstack(all_embeddings)

        logger.info(
            "Embedding completed",
            extra={
                "chunks": total,
                "dimension": self._dimension,
            }
        )

        return embeddings

    def get_dimension(self) -> int:
        return self._dimension

    def _embed_batch(self, batch: List[str]) -> List[List[float]]:
        raise NotImplementedError


class OpenAIEmbedder(Embedder):

    provider = "openai"

    def __init__(self, model: str = OPENAI_EMBEDDING_MODEL, client: Optional[OpenAI] = None):

        super().__init__(model)

        self._client = client or OpenAI()

    def _embed_batch(self, batch):

        response = self._client.embeddings.create(
            model=self._model,
            input=batch,
        )

        return [item.embedding for item in response.data]


class GeminiEmbedder(Embedder):
    """
    Gemini embeddings, truncated to the configured dimension.

    Truncated Gemini vectors are not unit length; ``embed`` normalizes them.
    """

    provider = "gemini"

    def __init__(
        self,
        model: str = GEMINI_EMBEDDING_MODEL,
        client: Optional[genai.Client] = None,
        api_key: Optional[str] = None,
    ):

        super().__init__(model)

        if client is None:

            api_key = api_key or os.getenv("GEMINI_API_KEY")
            if not api_key:
                raise ValueError(
                    "GEMINI_API_KEY environment variable not set. "
                    "Please set it before running the application."
                )

            client = genai.Client(api_key=api_key)

        self._client = client

    def _embed_batch(self, batch):

        response = self._client.models.embed_content(
            model=self._model,
            contents=batch,
            config=types.EmbedContentConfig(
                output_dimensionality=self._dimension,
            ),
        )

        return [embedding.values for embedding in response.embeddings]


def build_embedder(provider: str = EMBEDDING_PROVIDER) -> Embedder:

    if provider == "gemini":
        return GeminiEmbedder()

    if provider == "openai":
        return OpenAIEmbedder()

    raise ValueError(f"Unsupported embedding provider: {provider}")


def normalize(vectors: np.ndarray) -> np.ndarray:

    norms = np.linalg.norm(
        vectors,
        axis=1,
        keepdims=True,
    )

    return vectors / np.clip(norms, 1e-10, None)
