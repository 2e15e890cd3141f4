# docchat/workflow/document_ingest.py
import logging
from typing import Dict

from docchat.config import CHUNK_SIZE, CHUNK_OVERLAP
from docchat.errors import EmptyDocumentError
from docchat.memory.chunker import chunk_text
from docchat.memory.identifiers import build_chunk_records
from docchat.memory.loader import extract_text
from docchat.memory.store import ChunkStore

logger = logging.getLogger(__name__)


def ingest_document(
    file_name: str,
    data: bytes,
    store: ChunkStore,
    chunk_size: int = CHUNK_SIZE,
    overlap: int = CHUNK_OVERLAP,
) -> Dict:
    """
    Extract, chunk and index one uploaded file.

    Chunks are written in a single add call; either all of them are
    stored or the call raises. Chunks left over from an earlier, longer
    upload of the same file name are not removed.
    """
    text = extract_text(data, file_name)

    if not text or not text.strip():
        raise EmptyDocumentError(file_name)

    chunks = chunk_text(text, size=chunk_size, overlap=overlap)

    records = build_chunk_records(file_name, chunks)

    store.add(
        ids=[r.chunk_id for r in records],
        texts=[r.text for r in records],
        metadatas=[r.metadata() for r in records],
    )

    logger.info(
        "Document ingestion complete",
        extra={
            "file_name": file_name,
            "chunks_added": len(records),
            "collection": store.collection,
        },
    )

    return {
        "file_name": file_name,
        "chunks_added": len(records),
        "records": records,
    }
