# docchat/memory/chunker.py

import logging
from typing import List

from docchat.config import (
    CHUNK_SIZE,
    CHUNK_OVERLAP,
)
from docchat.errors import ChunkingConfigError

logger = logging.getLogger(__name__)


def validate_chunking(size: int, overlap: int) -> None:

    if size <= 0:
        raise ChunkingConfigError(f"Invalid chunk size: {size}")

    if overlap < 0:
        raise ChunkingConfigError(f"Invalid chunk overlap: {overlap}")

    if overlap >= size:
        raise ChunkingConfigError(
            f"Overlap must be smaller than chunk size "
            f"(overlap={overlap}, size={size})"
        )


def chunk_text(
    text: str,
    size: int = CHUNK_SIZE,
    overlap: int = CHUNK_OVERLAP,
) -> List[str]:
    """
    Split text into overlapping character windows.

    Architecture contract:
    loader → chunker → identifiers → store

    Guarantees:
    • deterministic chunk generation
    • window starts advance by exactly size - overlap
    • windows that trim to nothing are dropped
    • at least one chunk: if every window is blank, the untrimmed
      text is returned as the only chunk
    """

    validate_chunking(size, overlap)

    chunks = []

    step = size - overlap

    start = 0

    total_chars = len(text)

    while start < total_chars:

        chunk = text[start:start + size].strip()

        if chunk:
            chunks.append(chunk)

        start += step

    if not chunks:

        logger.warning(
            "Chunking produced no content, keeping raw text",
            extra={"total_chars": total_chars},
        )

        return [text]

    logger.info(
        "Chunking completed",
        extra={
            "total_chars": total_chars,
            "chunk_size": size,
            "overlap": overlap,
            "chunks_created": len(chunks),
        },
    )

    return chunks
